"""Dashboard endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blinkvocab.api.deps import get_current_user, get_db
from blinkvocab.db.models.user import User
from blinkvocab.schemas import DashboardOverview
from blinkvocab.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/overview", response_model=DashboardOverview)
def get_overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DashboardOverview:
    """Return status totals, due counts and the last seven days of activity."""

    overview = DashboardService(db).get_overview(user_id=current_user.id)
    return DashboardOverview.model_validate(overview)
