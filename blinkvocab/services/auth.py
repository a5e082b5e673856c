"""Authentication service layer."""
from __future__ import annotations

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blinkvocab.core.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    get_password_hash,
    issue_token,
    verify_password,
)
from blinkvocab.db.models.user import User
from blinkvocab.schemas import Token, UserCreate


class EmailAlreadyExistsError(ValueError):
    """Raised when attempting to register with an email that already exists."""


class InvalidCredentialsError(ValueError):
    """Raised when authentication credentials are invalid."""


class AuthService:
    """Registers learners and exchanges credentials for tokens."""

    def __init__(self, db: Session):
        self.db = db

    def register_user(self, payload: UserCreate) -> User:
        email = payload.email.lower()
        if self.db.scalar(select(User).where(User.email == email)):
            raise EmailAlreadyExistsError("A user with this email already exists.")

        user = User(
            email=email,
            hashed_password=get_password_hash(payload.password),
            full_name=payload.full_name,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise EmailAlreadyExistsError("A user with this email already exists.") from exc
        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        """Validate credentials and return the associated user."""

        user = self.db.scalar(select(User).where(User.email == email.lower()))
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError("Incorrect email or password")
        return user

    def create_tokens(self, user: User) -> Token:
        return Token(
            access_token=issue_token(user.id, ACCESS_TOKEN),
            refresh_token=issue_token(user.id, REFRESH_TOKEN),
        )


def handle_email_exists(error: EmailAlreadyExistsError) -> None:
    """Raise an HTTP 400 error for duplicate email attempts."""

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(error),
    ) from error


def handle_invalid_credentials(error: InvalidCredentialsError) -> None:
    """Raise an HTTP 401 error for invalid login attempts."""

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=str(error),
        headers={"WWW-Authenticate": "Bearer"},
    ) from error
