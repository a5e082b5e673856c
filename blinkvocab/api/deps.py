"""Shared API dependencies."""
from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from blinkvocab.config import settings
from blinkvocab.core.security import InvalidTokenError, user_id_from_access_token
from blinkvocab.core.srs import SRSScheduler
from blinkvocab.db.models.user import User
from blinkvocab.db.session import get_db
from blinkvocab.services.progress import ProgressService
from blinkvocab.services.users import UserService
from blinkvocab.utils.exceptions import NotFoundError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

_scheduler_singleton: SRSScheduler | None = None


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        user = UserService(db).get(user_id_from_access_token(token))
    except (InvalidTokenError, NotFoundError) as exc:
        raise credentials_exception from exc
    if not user.is_active:
        raise credentials_exception
    return user


def get_scheduler() -> SRSScheduler:
    """Return the process-wide scheduler built from settings."""

    global _scheduler_singleton
    if _scheduler_singleton is None:
        _scheduler_singleton = SRSScheduler(
            intervals_minutes=settings.SRS_INTERVALS_MINUTES,
            retry_minutes=settings.SRS_RETRY_MINUTES,
        )
    return _scheduler_singleton


def get_progress_service(
    db: Session = Depends(get_db),
    scheduler: SRSScheduler = Depends(get_scheduler),
) -> ProgressService:
    return ProgressService(db, scheduler=scheduler)


__all__ = [
    "get_current_user",
    "get_db",
    "get_progress_service",
    "get_scheduler",
    "oauth2_scheme",
]
