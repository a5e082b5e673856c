"""Spaced repetition scheduling."""

from blinkvocab.core.srs.scheduler import (
    DEFAULT_INTERVALS_MINUTES,
    DEFAULT_RETRY_MINUTES,
    INACTIVE_STATUSES,
    LearningStatus,
    ScheduleResult,
    SRSScheduler,
    promote_status,
)

__all__ = [
    "DEFAULT_INTERVALS_MINUTES",
    "DEFAULT_RETRY_MINUTES",
    "INACTIVE_STATUSES",
    "LearningStatus",
    "ScheduleResult",
    "SRSScheduler",
    "promote_status",
]
