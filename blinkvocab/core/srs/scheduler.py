"""Stage-based spaced repetition scheduler.

Every learning record sits on a discrete stage. A correct answer moves the
record one stage up and schedules the next review using the interval of the
stage the learner was on when answering; a wrong answer moves it one stage
down and brings it back after a short retry window. The highest stage is the
last index of the interval table, and stages are clamped into
``[0, max_stage]`` so the scheduler is total for any non-negative input.

The scheduler performs no I/O. Persisting the result together with the
matching review event is the caller's responsibility.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Sequence

from blinkvocab.utils.exceptions import InvalidStageError

DEFAULT_INTERVALS_MINUTES: tuple[int, ...] = (10, 1440, 4320, 10080, 21600, 43200)
DEFAULT_RETRY_MINUTES = 10


class LearningStatus(str, Enum):
    """Lifecycle of a learning record."""

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"
    IGNORED = "ignored"


# Records in these states never show up as due work.
INACTIVE_STATUSES = frozenset({LearningStatus.MASTERED.value, LearningStatus.IGNORED.value})


@dataclass(slots=True, frozen=True)
class ScheduleResult:
    """Outcome of a single answer."""

    new_stage: int
    next_due_at: datetime


class SRSScheduler:
    """Interval-table scheduler used for review submissions."""

    def __init__(
        self,
        *,
        intervals_minutes: Sequence[int] = DEFAULT_INTERVALS_MINUTES,
        retry_minutes: int = DEFAULT_RETRY_MINUTES,
    ) -> None:
        if not intervals_minutes:
            raise ValueError("Interval table must contain at least one stage")
        if any(int(minutes) <= 0 for minutes in intervals_minutes):
            raise ValueError("Interval table entries must be positive minute counts")
        if retry_minutes <= 0:
            raise ValueError("Retry window must be positive")
        self.intervals_minutes: tuple[int, ...] = tuple(int(m) for m in intervals_minutes)
        self.retry_minutes = retry_minutes

    @property
    def max_stage(self) -> int:
        return len(self.intervals_minutes) - 1

    @staticmethod
    def _ensure_timezone(dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt

    def interval_for(self, stage: int) -> timedelta:
        """Return the wait after a correct answer given on ``stage``."""

        self._check_stage(stage)
        return timedelta(minutes=self.intervals_minutes[min(stage, self.max_stage)])

    def compute_next(self, current_stage: int, correct: bool, now: datetime) -> ScheduleResult:
        """Return the stage and due time that follow an answer."""

        self._check_stage(current_stage)
        now = self._ensure_timezone(now)
        stage = min(current_stage, self.max_stage)

        if correct:
            new_stage = min(stage + 1, self.max_stage)
            next_due_at = now + self.interval_for(stage)
        else:
            new_stage = max(stage - 1, 0)
            next_due_at = now + timedelta(minutes=self.retry_minutes)

        return ScheduleResult(new_stage=new_stage, next_due_at=next_due_at)

    @staticmethod
    def _check_stage(stage: int) -> None:
        if isinstance(stage, bool) or not isinstance(stage, int):
            raise InvalidStageError(
                "Stage must be an integer", details={"stage": repr(stage)}
            )
        if stage < 0:
            raise InvalidStageError("Stage must not be negative", details={"stage": stage})


def promote_status(status: str, *, new_stage: int, correct: bool) -> str:
    """Return the record status after an answer.

    Only correct answers move a record forward: ``new`` becomes ``learning``,
    and ``learning`` becomes ``review`` once the record reaches stage 2.
    ``mastered`` is never reached automatically.
    """

    if not correct:
        return status
    if status == LearningStatus.NEW.value:
        return LearningStatus.LEARNING.value
    if status == LearningStatus.LEARNING.value and new_stage >= 2:
        return LearningStatus.REVIEW.value
    return status
