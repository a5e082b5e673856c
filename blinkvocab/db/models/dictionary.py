"""Dictionary (market) models."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from blinkvocab.db.base import Base


class Dictionary(Base):
    """A curated word list learners can join from the market."""

    __tablename__ = "dictionaries"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text)
    language = Column(String(10), nullable=False, default="en")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    words = relationship(
        "DictionaryWord", back_populates="dictionary", cascade="all, delete-orphan"
    )
    subscribers = relationship(
        "UserDictionary", back_populates="dictionary", cascade="all, delete-orphan"
    )


class DictionaryWord(Base):
    """Membership of a word in a dictionary."""

    __tablename__ = "dictionary_words"

    dictionary_id = Column(
        Integer, ForeignKey("dictionaries.id", ondelete="CASCADE"), primary_key=True
    )
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), primary_key=True)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    dictionary = relationship("Dictionary", back_populates="words")
    word = relationship("Word", back_populates="dictionary_links")


class UserDictionary(Base):
    """A learner's subscription to a dictionary."""

    __tablename__ = "user_dictionaries"

    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    dictionary_id = Column(
        Integer, ForeignKey("dictionaries.id", ondelete="CASCADE"), primary_key=True
    )
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="dictionaries")
    dictionary = relationship("Dictionary", back_populates="subscribers")
