"""Pydantic schemas for the dictionary market."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class DictionaryRead(BaseModel):
    """Dictionary listing entry."""

    id: int
    name: str
    description: Optional[str] = None
    language: str
    word_count: int = Field(ge=0)
    joined: bool = False


class MarketJoinRequest(BaseModel):
    """Dictionaries the learner wants to subscribe to."""

    dictionary_ids: List[int] = Field(..., min_length=1, max_length=50)

    @field_validator("dictionary_ids")
    @classmethod
    def deduplicate(cls, value: List[int]) -> List[int]:
        if any(item < 1 for item in value):
            raise ValueError("Dictionary ids must be positive")
        return list(dict.fromkeys(value))


class DictionaryJoinResult(BaseModel):
    dictionary_id: int
    added_count: int = Field(ge=0)
    already_had_count: int = Field(ge=0)


class MarketJoinResponse(BaseModel):
    dictionaries: List[DictionaryJoinResult]
