"""Pydantic models for today's task lists."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from blinkvocab.schemas.common import LearningStatusLiteral


class TaskItem(BaseModel):
    """A learning record offered as work for today."""

    learning_record_id: uuid.UUID
    word_id: int
    lemma: str
    stage: int = Field(ge=0)
    status: LearningStatusLiteral
    next_due_at: Optional[datetime] = None


class TodayTasksResponse(BaseModel):
    """Due reviews and newly acquired words."""

    due: list[TaskItem] = Field(default_factory=list)
    new: list[TaskItem] = Field(default_factory=list)
