"""Word catalog endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from blinkvocab.api.deps import get_current_user, get_db
from blinkvocab.config import settings
from blinkvocab.db.models.user import User
from blinkvocab.schemas import (
    AddManualWordRequest,
    AddManualWordResponse,
    WordDetailResponse,
    WordListResponse,
)
from blinkvocab.schemas.words import WordSortLiteral
from blinkvocab.services.words import MAX_EVENT_LIMIT, MAX_PAGE_SIZE, WordService, parse_status_filter
from blinkvocab.utils.exceptions import BlinkVocabError, to_http_exception

router = APIRouter(prefix="/words", tags=["words"])


@router.get("", response_model=WordListResponse)
def list_words(
    *,
    status_filter: Optional[str] = Query(
        None, alias="status", description="Comma separated statuses, e.g. new,learning"
    ),
    dictionary_id: Optional[int] = Query(None, ge=1),
    tag_id: Optional[int] = Query(None, ge=1),
    sort: WordSortLiteral = Query("next_due"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> WordListResponse:
    """Return a page of the learner's words."""

    try:
        result = WordService(db).list_words(
            user_id=current_user.id,
            statuses=parse_status_filter(status_filter),
            dictionary_id=dictionary_id,
            tag_id=tag_id,
            sort=sort,
            page=page,
            page_size=page_size,
        )
    except BlinkVocabError as exc:
        raise to_http_exception(exc) from exc
    return WordListResponse.model_validate(result)


@router.post("/add-manual", response_model=AddManualWordResponse, status_code=status.HTTP_201_CREATED)
def add_manual_word(
    payload: AddManualWordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AddManualWordResponse:
    """Add a word the learner found, creating the word and record only once."""

    try:
        addition = WordService(db).add_manual_word(
            user_id=current_user.id,
            text=payload.text,
            url=str(payload.url) if payload.url is not None else None,
            context=payload.context,
        )
    except BlinkVocabError as exc:
        raise to_http_exception(exc) from exc
    return AddManualWordResponse(
        word_id=addition.word.id,
        lemma=addition.word.lemma,
        learning_record_id=addition.record.id,
        is_new_word=addition.is_new_word,
        is_new_user_word=addition.is_new_user_word,
    )


@router.get("/{word_id}", response_model=WordDetailResponse)
def get_word_detail(
    word_id: int,
    limit: int = Query(settings.WORD_DETAIL_EVENT_LIMIT, ge=1, le=MAX_EVENT_LIMIT),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> WordDetailResponse:
    """Return a word with the learner's record and recent events for it."""

    try:
        detail = WordService(db).get_word_detail(user_id=current_user.id, word_id=word_id, limit=limit)
    except BlinkVocabError as exc:
        raise to_http_exception(exc) from exc
    return WordDetailResponse.model_validate(detail, from_attributes=True)
