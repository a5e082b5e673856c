"""User profile endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from blinkvocab.api import deps
from blinkvocab.db.models.user import User
from blinkvocab.schemas import UserRead
from blinkvocab.utils.cache import build_cache_key, cache_backend

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(deps.get_current_user)) -> UserRead:
    """Return the authenticated learner's profile."""

    cache_key = build_cache_key(user_id=str(current_user.id))
    cached = cache_backend.get("user:profile", cache_key)
    if cached is not None:
        return cached

    payload = UserRead.model_validate(current_user).model_dump(mode="json")
    cache_backend.set("user:profile", cache_key, payload, ttl_seconds=300)
    return payload
