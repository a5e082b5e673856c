"""Pydantic models for review submission."""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from blinkvocab.schemas.common import LearningStatusLiteral


class ReviewSubmitRequest(BaseModel):
    """Payload for answering one learning record."""

    learning_record_id: uuid.UUID
    correct: bool = Field(..., description="Whether the learner recalled the word")


class ReviewSubmitResponse(BaseModel):
    """Record state after the answer was applied."""

    learning_record_id: uuid.UUID
    word_id: int
    lemma: str
    stage: int = Field(ge=0)
    status: LearningStatusLiteral
    next_due_at: datetime
    correct: bool
