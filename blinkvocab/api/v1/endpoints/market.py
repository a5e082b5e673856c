"""Dictionary market endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blinkvocab.api.deps import get_current_user, get_db
from blinkvocab.db.models.user import User
from blinkvocab.schemas import DictionaryRead, MarketJoinRequest, MarketJoinResponse
from blinkvocab.services.market import MarketService
from blinkvocab.utils.exceptions import BlinkVocabError, to_http_exception

router = APIRouter(prefix="/market", tags=["market"])


@router.get("/dictionaries", response_model=list[DictionaryRead])
def list_dictionaries(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[DictionaryRead]:
    """Return every dictionary with its size and whether the learner joined it."""

    entries = MarketService(db).list_dictionaries(user_id=current_user.id)
    return [DictionaryRead.model_validate(entry) for entry in entries]


@router.post("/join", response_model=MarketJoinResponse)
def join_dictionaries(
    payload: MarketJoinRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarketJoinResponse:
    """Join dictionaries and pick up every word the learner does not have yet."""

    try:
        results = MarketService(db).join_dictionaries(
            user_id=current_user.id, dictionary_ids=payload.dictionary_ids
        )
    except BlinkVocabError as exc:
        raise to_http_exception(exc) from exc
    return MarketJoinResponse.model_validate({"dictionaries": results})
