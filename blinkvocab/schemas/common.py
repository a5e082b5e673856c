"""Types shared by several schema modules."""
from __future__ import annotations

from typing import Literal

LearningStatusLiteral = Literal["new", "learning", "review", "mastered", "ignored"]
TagTypeLiteral = Literal["dictionary", "topic", "level"]
