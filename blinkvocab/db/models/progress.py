"""Learning progress models: per-word records and their event history."""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from blinkvocab.core.srs import LearningStatus, ScheduleResult
from blinkvocab.db.base import Base


class ReviewEventType(str, Enum):
    """Kinds of learner actions recorded in the event log."""

    ANSWER_CORRECT = "answer_correct"
    ANSWER_WRONG = "answer_wrong"
    VIEW = "view"
    ADDED_MANUAL = "added_manual"
    ADDED_BY_DICTIONARY = "added_by_dictionary"
    DICTIONARY_ADDED = "dictionary_added"
    SKIP = "skip"


class LearningRecord(Base):
    """A learner's progress on one word."""

    __tablename__ = "learning_records"
    __table_args__ = (
        UniqueConstraint("user_id", "word_id", name="uq_learning_records_user_word"),
        CheckConstraint("stage >= 0", name="ck_learning_records_stage_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    word_id = Column(
        Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True
    )

    status = Column(String(20), nullable=False, default=LearningStatus.NEW.value, index=True)
    stage = Column(Integer, nullable=False, default=0)
    next_due_at = Column(DateTime(timezone=True), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="learning_records")
    word = relationship("Word")
    events = relationship(
        "ReviewEvent",
        back_populates="learning_record",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ReviewEvent.created_at",
    )

    @classmethod
    def acquire(cls, *, user_id: uuid.UUID, word_id: int, now: datetime) -> "LearningRecord":
        """Return a fresh record for a word the learner just picked up."""

        return cls(
            user_id=user_id,
            word_id=word_id,
            status=LearningStatus.NEW.value,
            stage=0,
            next_due_at=now,
            created_at=now,
            updated_at=now,
        )

    def apply_schedule(self, result: ScheduleResult, *, status: str, now: datetime) -> None:
        """Store the scheduler output after a review."""

        self.stage = result.new_stage
        self.next_due_at = result.next_due_at
        self.status = status
        self.updated_at = now


class ReviewEvent(Base):
    """Append-only log entry describing one learner action."""

    __tablename__ = "review_events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Dictionary-level events are not tied to a single word.
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=True, index=True)
    learning_record_id = Column(
        UUID(as_uuid=True),
        ForeignKey("learning_records.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    type = Column(String(40), nullable=False)
    payload = Column(JSONB().with_variant(JSON(), "sqlite"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    learning_record = relationship("LearningRecord", back_populates="events")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<ReviewEvent type={self.type!r} created_at={self.created_at!r}>"
