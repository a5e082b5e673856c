"""Dashboard aggregation over learning records and the event log."""

from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blinkvocab.core.srs import INACTIVE_STATUSES, LearningStatus
from blinkvocab.db.models.progress import LearningRecord, ReviewEvent

ACTIVITY_DAYS = 7
REPORTED_STATUSES = (
    LearningStatus.NEW.value,
    LearningStatus.LEARNING.value,
    LearningStatus.REVIEW.value,
    LearningStatus.MASTERED.value,
)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_utc_day(value: datetime) -> datetime:
    value = as_utc(value)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def count_status_totals(status_counts: Iterable[tuple[str, int]]) -> dict[str, int]:
    """Fold ``(status, count)`` rows into the reported buckets.

    ``total`` covers every record, ``ignored`` ones included, so it can exceed
    the sum of the named buckets.
    """

    totals = {"total": 0, **{status: 0 for status in REPORTED_STATUSES}}
    for status, count in status_counts:
        count = int(count or 0)
        totals["total"] += count
        if status in totals:
            totals[status] += count
    return totals


def count_due(rows: Iterable[tuple[datetime | None, str]], now: datetime) -> dict[str, int]:
    """Split reviewable records into overdue and due later today (UTC)."""

    now = as_utc(now)
    end_of_today = start_of_utc_day(now) + timedelta(days=1)
    due_today = 0
    overdue = 0
    for next_due_at, status in rows:
        if next_due_at is None or status in INACTIVE_STATUSES:
            continue
        due_at = as_utc(next_due_at)
        if due_at <= now:
            overdue += 1
        elif due_at <= end_of_today:
            due_today += 1
    return {"due_today": due_today, "overdue": overdue}


def bucket_activity(
    timestamps: Iterable[datetime], now: datetime, *, days: int = ACTIVITY_DAYS
) -> list[dict[str, Any]]:
    """Count events per UTC calendar day for the ``days`` ending today, oldest first."""

    per_day = Counter(as_utc(created_at).date().isoformat() for created_at in timestamps)
    today = start_of_utc_day(now)
    buckets = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets.append({"date": day, "events": per_day.get(day.date().isoformat(), 0)})
    return buckets


class DashboardService:
    """Read-only summaries for the learner dashboard."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def status_totals(self, user_id: uuid.UUID) -> dict[str, int]:
        rows = self.db.execute(
            select(LearningRecord.status, func.count(LearningRecord.id))
            .where(LearningRecord.user_id == user_id)
            .group_by(LearningRecord.status)
        ).all()
        return count_status_totals((status, count) for status, count in rows)

    def due_counts(self, user_id: uuid.UUID, *, now: datetime) -> dict[str, int]:
        end_of_today = start_of_utc_day(now) + timedelta(days=1)
        rows = self.db.execute(
            select(LearningRecord.next_due_at, LearningRecord.status)
            .where(LearningRecord.user_id == user_id)
            .where(LearningRecord.next_due_at.isnot(None))
            .where(LearningRecord.next_due_at <= end_of_today)
            .where(LearningRecord.status.notin_(INACTIVE_STATUSES))
        ).all()
        return count_due(((due_at, status) for due_at, status in rows), now)

    def activity(self, user_id: uuid.UUID, *, now: datetime) -> list[dict[str, Any]]:
        window_start = start_of_utc_day(now) - timedelta(days=ACTIVITY_DAYS - 1)
        window_end = start_of_utc_day(now) + timedelta(days=1)
        timestamps = self.db.scalars(
            select(ReviewEvent.created_at)
            .where(ReviewEvent.user_id == user_id)
            .where(ReviewEvent.created_at >= window_start)
            .where(ReviewEvent.created_at < window_end)
        )
        return bucket_activity(timestamps, now)

    def get_overview(self, *, user_id: uuid.UUID, now: datetime | None = None) -> dict[str, Any]:
        """Return totals, due counts and the trailing week of activity."""

        now = as_utc(now or datetime.now(timezone.utc))
        return {
            "totals": self.status_totals(user_id),
            "due": self.due_counts(user_id, now=now),
            "activity": {"last_7_days": self.activity(user_id, now=now)},
        }
