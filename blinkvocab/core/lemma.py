"""Normalization rules for learner-submitted word text."""
from __future__ import annotations

import re

from blinkvocab.utils.exceptions import ValidationError

MIN_LENGTH = 2
MAX_LENGTH = 30
WORD_PATTERN = re.compile(r"^[a-z0-9-]+$")


def normalize_word_text(text: str) -> str:
    """Trim and lowercase ``text``, raising ``ValidationError`` when it is not a word.

    Two submissions denote the same word exactly when their normalized forms
    are equal.
    """

    if not isinstance(text, str):
        raise ValidationError("Word must be a string")

    value = text.strip().lower()
    if len(value) < MIN_LENGTH:
        raise ValidationError(
            f"Word must be at least {MIN_LENGTH} characters", details={"text": text}
        )
    if len(value) > MAX_LENGTH:
        raise ValidationError(
            f"Word must be at most {MAX_LENGTH} characters", details={"text": text}
        )
    if not WORD_PATTERN.match(value):
        raise ValidationError(
            "Word must contain only letters, numbers, and hyphens", details={"text": text}
        )
    return value
