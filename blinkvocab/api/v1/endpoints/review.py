"""Review submission endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from blinkvocab.api.deps import get_current_user, get_progress_service
from blinkvocab.db.models.user import User
from blinkvocab.schemas import ReviewSubmitRequest, ReviewSubmitResponse
from blinkvocab.services.progress import ProgressService
from blinkvocab.utils.exceptions import BlinkVocabError, to_http_exception

router = APIRouter(prefix="/review", tags=["review"])


@router.post("/submit", response_model=ReviewSubmitResponse)
def submit_review(
    payload: ReviewSubmitRequest,
    service: ProgressService = Depends(get_progress_service),
    current_user: User = Depends(get_current_user),
) -> ReviewSubmitResponse:
    """Record an answer for one of the learner's words and reschedule it."""

    try:
        result = service.submit_review(
            user_id=current_user.id,
            learning_record_id=payload.learning_record_id,
            correct=payload.correct,
        )
    except BlinkVocabError as exc:
        raise to_http_exception(exc) from exc

    record = result.record
    return ReviewSubmitResponse(
        learning_record_id=record.id,
        word_id=record.word_id,
        lemma=record.word.lemma,
        stage=record.stage,
        status=record.status,
        next_due_at=record.next_due_at,
        correct=result.correct,
    )
