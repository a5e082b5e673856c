"""Authentication related schemas."""
from __future__ import annotations

from pydantic import BaseModel


class Token(BaseModel):
    """Token response returned after successful authentication."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
