"""Business logic for learner review progress."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from blinkvocab.core.srs import INACTIVE_STATUSES, LearningStatus, SRSScheduler, promote_status
from blinkvocab.db.models.progress import LearningRecord, ReviewEvent, ReviewEventType
from blinkvocab.db.session import transaction
from blinkvocab.utils.exceptions import NotFoundError, OwnershipViolationError


@dataclass(slots=True)
class ReviewResult:
    """Outcome of a review submission returned to the API."""

    record: LearningRecord
    event: ReviewEvent
    old_stage: int
    correct: bool


@dataclass(slots=True)
class TodayTasks:
    """Due reviews and new words, each ordered for presentation."""

    due: list[LearningRecord]
    new: list[LearningRecord]


class ProgressService:
    """High level helper for review workflows."""

    def __init__(self, db: Session, *, scheduler: SRSScheduler | None = None) -> None:
        self.db = db
        self.scheduler = scheduler or SRSScheduler()

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def get_owned_record(
        self, *, user_id: uuid.UUID, learning_record_id: uuid.UUID
    ) -> LearningRecord:
        """Return a record, checking that it belongs to ``user_id``."""

        stmt = (
            select(LearningRecord)
            .options(joinedload(LearningRecord.word))
            .where(LearningRecord.id == learning_record_id)
        )
        record = self.db.scalars(stmt).first()
        if record is None:
            raise NotFoundError(
                "Learning record not found",
                details={"learning_record_id": str(learning_record_id)},
            )
        if record.user_id != user_id:
            raise OwnershipViolationError(
                "Learning record does not belong to this user",
                details={"learning_record_id": str(learning_record_id), "user_id": str(user_id)},
            )
        return record

    def get_today_tasks(self, *, user_id: uuid.UUID, now: datetime | None = None) -> TodayTasks:
        """Return the learner's due reviews and new words.

        The two lists are selected independently: a new word whose due time
        has passed shows up in both.
        """

        now = now or datetime.now(timezone.utc)
        due_stmt = (
            select(LearningRecord)
            .options(joinedload(LearningRecord.word))
            .where(LearningRecord.user_id == user_id)
            .where(LearningRecord.next_due_at.isnot(None))
            .where(LearningRecord.next_due_at <= now)
            .where(LearningRecord.status.notin_(INACTIVE_STATUSES))
            .order_by(LearningRecord.next_due_at.asc(), LearningRecord.created_at.asc())
        )
        new_stmt = (
            select(LearningRecord)
            .options(joinedload(LearningRecord.word))
            .where(LearningRecord.user_id == user_id)
            .where(LearningRecord.status == LearningStatus.NEW.value)
            .order_by(LearningRecord.created_at.asc(), LearningRecord.word_id.asc())
        )
        return TodayTasks(
            due=list(self.db.scalars(due_stmt)),
            new=list(self.db.scalars(new_stmt)),
        )

    # ------------------------------------------------------------------
    # Review helpers
    # ------------------------------------------------------------------
    def submit_review(
        self,
        *,
        user_id: uuid.UUID,
        learning_record_id: uuid.UUID,
        correct: bool,
        now: datetime | None = None,
    ) -> ReviewResult:
        """Apply an answer to a record and log it, atomically."""

        now = now or datetime.now(timezone.utc)
        with transaction(self.db, operation="review submission"):
            record = self.get_owned_record(user_id=user_id, learning_record_id=learning_record_id)
            old_stage = record.stage
            outcome = self.scheduler.compute_next(old_stage, correct, now)
            status = promote_status(record.status, new_stage=outcome.new_stage, correct=correct)
            record.apply_schedule(outcome, status=status, now=now)

            event = ReviewEvent(
                user_id=user_id,
                word_id=record.word_id,
                learning_record_id=record.id,
                type=(
                    ReviewEventType.ANSWER_CORRECT.value
                    if correct
                    else ReviewEventType.ANSWER_WRONG.value
                ),
                payload={"old_stage": old_stage, "new_stage": outcome.new_stage, "correct": correct},
                created_at=now,
            )
            self.db.add(event)
            self.db.flush()

        logger.info(
            f"Review recorded user={user_id} record={record.id} correct={correct} "
            f"stage {old_stage}->{record.stage} status={record.status}"
        )
        return ReviewResult(record=record, event=event, old_stage=old_stage, correct=correct)
