"""Unit tests for the stage-based scheduler and status promotion."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from blinkvocab.core.srs import DEFAULT_INTERVALS_MINUTES, SRSScheduler, promote_status
from blinkvocab.utils.exceptions import InvalidStageError, ValidationError

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def scheduler() -> SRSScheduler:
    return SRSScheduler()


@pytest.mark.parametrize(
    ("stage", "correct", "expected_stage", "expected_minutes"),
    [
        (0, True, 1, 10),
        (0, False, 0, 10),
        (1, True, 2, 1440),
        (2, False, 1, 10),
        (4, True, 5, 21600),
        (5, True, 5, 43200),
        (5, False, 4, 10),
    ],
)
def test_compute_next_follows_interval_table(
    scheduler: SRSScheduler, stage: int, correct: bool, expected_stage: int, expected_minutes: int
) -> None:
    result = scheduler.compute_next(stage, correct, NOW)

    assert result.new_stage == expected_stage
    assert result.next_due_at == NOW + timedelta(minutes=expected_minutes)


def test_stage_above_max_is_clamped(scheduler: SRSScheduler) -> None:
    correct = scheduler.compute_next(9, True, NOW)
    wrong = scheduler.compute_next(9, False, NOW)

    assert correct.new_stage == scheduler.max_stage
    assert correct.next_due_at == NOW + timedelta(minutes=43200)
    assert wrong.new_stage == scheduler.max_stage - 1


def test_next_due_is_always_in_the_future(scheduler: SRSScheduler) -> None:
    for stage in range(0, scheduler.max_stage + 3):
        for correct in (True, False):
            result = scheduler.compute_next(stage, correct, NOW)
            assert result.next_due_at > NOW
            assert 0 <= result.new_stage <= scheduler.max_stage


@pytest.mark.parametrize("stage", [-1, 1.5, "2", True, None])
def test_invalid_stage_is_rejected(scheduler: SRSScheduler, stage) -> None:
    with pytest.raises(InvalidStageError):
        scheduler.compute_next(stage, True, NOW)


def test_invalid_stage_is_a_validation_error(scheduler: SRSScheduler) -> None:
    with pytest.raises(ValidationError):
        scheduler.interval_for(-3)


def test_naive_now_is_treated_as_utc(scheduler: SRSScheduler) -> None:
    result = scheduler.compute_next(0, True, datetime(2024, 1, 1, 12, 0))

    assert result.next_due_at == NOW + timedelta(minutes=10)
    assert result.next_due_at.tzinfo is not None


def test_custom_table() -> None:
    scheduler = SRSScheduler(intervals_minutes=[5, 60], retry_minutes=2)

    assert scheduler.max_stage == 1
    assert scheduler.compute_next(0, True, NOW).next_due_at == NOW + timedelta(minutes=5)
    assert scheduler.compute_next(1, True, NOW).new_stage == 1
    assert scheduler.compute_next(1, False, NOW).next_due_at == NOW + timedelta(minutes=2)


@pytest.mark.parametrize(
    "kwargs",
    [{"intervals_minutes": []}, {"intervals_minutes": [10, 0]}, {"retry_minutes": 0}],
)
def test_bad_configuration_is_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        SRSScheduler(**kwargs)


@pytest.mark.parametrize(
    ("status", "new_stage", "correct", "expected"),
    [
        ("new", 1, True, "learning"),
        ("new", 0, False, "new"),
        ("learning", 1, True, "learning"),
        ("learning", 2, True, "review"),
        ("learning", 1, False, "learning"),
        ("review", 5, True, "review"),
        ("review", 3, False, "review"),
        ("mastered", 5, True, "mastered"),
        ("ignored", 1, True, "ignored"),
    ],
)
def test_promote_status(status: str, new_stage: int, correct: bool, expected: str) -> None:
    assert promote_status(status, new_stage=new_stage, correct=correct) == expected


@pytest.mark.parametrize("stage", range(0, len(DEFAULT_INTERVALS_MINUTES)))
def test_every_stage_correct_uses_its_interval(scheduler: SRSScheduler, stage: int) -> None:
    result = scheduler.compute_next(stage, True, NOW)

    assert result.new_stage == min(stage + 1, scheduler.max_stage)
    assert result.next_due_at == NOW + timedelta(minutes=DEFAULT_INTERVALS_MINUTES[stage])


@pytest.mark.parametrize("stage", range(0, len(DEFAULT_INTERVALS_MINUTES)))
def test_every_stage_wrong_retries_in_ten_minutes(scheduler: SRSScheduler, stage: int) -> None:
    result = scheduler.compute_next(stage, False, NOW)

    assert result.new_stage == max(stage - 1, 0)
    assert result.next_due_at == NOW + timedelta(minutes=10)
