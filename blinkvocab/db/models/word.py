"""Word catalog models."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from blinkvocab.db.base import Base
from blinkvocab.db.types import StringList


class Word(Base):
    """A lemma in a given language, shared by every learner."""

    __tablename__ = "words"
    __table_args__ = (UniqueConstraint("lemma", "language", name="uq_words_lemma_language"),)

    id = Column(Integer, primary_key=True)
    lemma = Column(String(64), nullable=False, index=True)
    language = Column(String(10), nullable=False, default="en")
    # "seed", "dictionary" or "custom" (added manually by a learner)
    source = Column(String(20), nullable=False, default="seed")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    senses = relationship(
        "WordSense",
        back_populates="word",
        cascade="all, delete-orphan",
        order_by="WordSense.order",
    )
    tags = relationship("WordTag", back_populates="word", cascade="all, delete-orphan")
    dictionary_links = relationship(
        "DictionaryWord", back_populates="word", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Word lemma={self.lemma!r} language={self.language!r}>"


class WordSense(Base):
    """One meaning of a word."""

    __tablename__ = "word_senses"

    id = Column(Integer, primary_key=True)
    word_id = Column(
        Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pos = Column(String(20))
    definition = Column(Text, nullable=False)
    examples = Column(StringList, nullable=True)
    order = Column(Integer, nullable=False, default=0)

    word = relationship("Word", back_populates="senses")


class Tag(Base):
    """Label attached to words: dictionary membership, topic or level."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    type = Column(String(20), nullable=False, default="topic")

    words = relationship("WordTag", back_populates="tag", cascade="all, delete-orphan")


class WordTag(Base):
    """Association between words and tags."""

    __tablename__ = "word_tags"

    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)

    word = relationship("Word", back_populates="tags")
    tag = relationship("Tag", back_populates="words")
