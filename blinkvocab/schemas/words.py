"""Pydantic schemas for word catalog endpoints."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, field_validator

from blinkvocab.core.lemma import normalize_word_text
from blinkvocab.schemas.common import LearningStatusLiteral, TagTypeLiteral
from blinkvocab.utils.exceptions import ValidationError

WordSortLiteral = Literal["next_due", "recent", "added", "wrong_most"]


class AddManualWordRequest(BaseModel):
    """Word typed in by the learner, optionally with where it was found."""

    text: str
    url: Optional[AnyHttpUrl] = None
    context: Optional[str] = Field(default=None, max_length=500)

    @field_validator("text")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        try:
            return normalize_word_text(value)
        except ValidationError as exc:
            raise ValueError(exc.message) from exc


class AddManualWordResponse(BaseModel):
    word_id: int
    lemma: str
    learning_record_id: uuid.UUID
    is_new_word: bool
    is_new_user_word: bool


class TagRead(BaseModel):
    id: int
    name: str
    type: TagTypeLiteral

    model_config = ConfigDict(from_attributes=True)


class DictionaryRef(BaseModel):
    id: int
    name: str


class DictionaryDetailRef(DictionaryRef):
    description: Optional[str] = None


class WordListItem(BaseModel):
    """A learner's word together with its catalog labels."""

    learning_record_id: uuid.UUID
    word_id: int
    lemma: str
    status: LearningStatusLiteral
    stage: int = Field(ge=0)
    next_due_at: Optional[datetime] = None
    last_event_at: Optional[datetime] = None
    dictionaries: List[DictionaryRef] = Field(default_factory=list)
    tags: List[TagRead] = Field(default_factory=list)


class Pagination(BaseModel):
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)


class WordListResponse(BaseModel):
    """Paginated word list payload."""

    items: List[WordListItem]
    pagination: Pagination


class WordSenseRead(BaseModel):
    id: int
    pos: Optional[str] = None
    definition: str
    examples: List[str] = Field(default_factory=list)
    order: int

    model_config = ConfigDict(from_attributes=True)


class WordRead(BaseModel):
    word_id: int
    lemma: str
    language: str
    source: str
    senses: List[WordSenseRead] = Field(default_factory=list)
    tags: List[TagRead] = Field(default_factory=list)
    dictionaries: List[DictionaryDetailRef] = Field(default_factory=list)


class UserWordState(BaseModel):
    """The learner's record for the word, when one exists."""

    learning_record_id: uuid.UUID
    status: LearningStatusLiteral
    stage: int = Field(ge=0)
    next_due_at: Optional[datetime] = None


class WordEventRead(BaseModel):
    id: uuid.UUID
    type: str
    created_at: datetime
    payload: Optional[dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)


class WordDetailResponse(BaseModel):
    word: WordRead
    user: Optional[UserWordState] = None
    events: List[WordEventRead] = Field(default_factory=list)
