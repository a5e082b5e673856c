"""Pydantic models for the dashboard overview."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StatusTotals(BaseModel):
    """Learning record counts per status."""

    total: int = Field(ge=0)
    new: int = Field(ge=0)
    learning: int = Field(ge=0)
    review: int = Field(ge=0)
    mastered: int = Field(ge=0)


class DueCounts(BaseModel):
    """Reviews waiting now and later today."""

    due_today: int = Field(ge=0)
    overdue: int = Field(ge=0)


class ActivityDay(BaseModel):
    """Event count for one UTC calendar day."""

    date: datetime
    events: int = Field(ge=0)


class ActivitySummary(BaseModel):
    last_7_days: list[ActivityDay]


class DashboardOverview(BaseModel):
    """Headline numbers for the learner dashboard."""

    totals: StatusTotals
    due: DueCounts
    activity: ActivitySummary
