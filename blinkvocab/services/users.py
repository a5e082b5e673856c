"""Service layer for user lookups."""
from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from blinkvocab.db.models.user import User
from blinkvocab.utils.exceptions import NotFoundError


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: uuid.UUID) -> User:
        """Return a user by identifier or raise ``NotFoundError``."""

        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found", details={"user_id": str(user_id)})
        return user
