"""Today's task list."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from blinkvocab.api.deps import get_current_user, get_progress_service
from blinkvocab.db.models.progress import LearningRecord
from blinkvocab.db.models.user import User
from blinkvocab.schemas import TaskItem, TodayTasksResponse
from blinkvocab.services.progress import ProgressService

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _to_item(record: LearningRecord) -> TaskItem:
    return TaskItem(
        learning_record_id=record.id,
        word_id=record.word_id,
        lemma=record.word.lemma,
        stage=record.stage,
        status=record.status,
        next_due_at=record.next_due_at,
    )


@router.get("/today", response_model=TodayTasksResponse)
def get_today_tasks(
    service: ProgressService = Depends(get_progress_service),
    current_user: User = Depends(get_current_user),
) -> TodayTasksResponse:
    """Return due reviews and new words for the learner."""

    tasks = service.get_today_tasks(user_id=current_user.id)
    return TodayTasksResponse(
        due=[_to_item(record) for record in tasks.due],
        new=[_to_item(record) for record in tasks.new],
    )
