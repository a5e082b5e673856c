"""Password hashing and JWT helpers."""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
from jose import JWTError, jwt

from blinkvocab.config import settings


ALGORITHM = "HS256"
ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class InvalidTokenError(Exception):
    """Raised when a JWT cannot be decoded or is not usable for the request."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Validate a plaintext password against a bcrypt hash."""

    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""

    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _lifetime(token_type: str) -> timedelta:
    if token_type == ACCESS_TOKEN:
        return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    if token_type == REFRESH_TOKEN:
        return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    raise ValueError(f"Unknown token type: {token_type}")


def issue_token(user_id: uuid.UUID, token_type: str = ACCESS_TOKEN) -> str:
    """Return a signed token identifying ``user_id``."""

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "exp": datetime.now(timezone.utc) + _lifetime(token_type),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode a JWT and return its claims."""

    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc


def user_id_from_access_token(token: str) -> uuid.UUID:
    """Return the user id carried by an access token."""

    claims = decode_token(token)
    if claims.get("type") != ACCESS_TOKEN:
        raise InvalidTokenError("Token must be an access token")
    try:
        return uuid.UUID(str(claims["sub"]))
    except (KeyError, ValueError) as exc:
        raise InvalidTokenError("Token subject is not a user id") from exc
