"""Tests for week partitioning helpers."""

import pytest
from datetime import date, datetime, timedelta, timezone, UTC

from resaletrack.domain.week import (
    in_week,
    local_date,
    shift_week,
    start_of_week,
    week_bounds,
    week_label,
    week_range,
)


def test_start_of_week_midweek():
    """Wednesday maps to the Monday before it."""
    assert start_of_week(date(2025, 10, 15)) == date(2025, 10, 13)


def test_start_of_week_monday_is_itself():
    assert start_of_week(date(2025, 10, 13)) == date(2025, 10, 13)


def test_start_of_week_sunday_rolls_back():
    """Sunday belongs to the preceding Monday, not the following one."""
    assert start_of_week(date(2025, 10, 19)) == date(2025, 10, 13)


def test_start_of_week_across_month_boundary():
    assert start_of_week(date(2025, 11, 1)) == date(2025, 10, 27)


def test_week_label_iso_number():
    assert week_label(date(2025, 10, 15)) == "T42"


def test_week_label_year_boundary():
    """ISO weeks: 2024-12-30 is in week 1 of 2025, 2021-01-03 in week 53 of 2020."""
    assert week_label(date(2024, 12, 30)) == "T1"
    assert week_label(date(2021, 1, 3)) == "T53"


def test_week_range_format():
    assert week_range(date(2025, 10, 15)) == "13. říj 2025 - 19. říj 2025"


def test_week_range_spanning_years():
    assert week_range(date(2025, 1, 1)) == "30. pro 2024 - 5. led 2025"


def test_label_and_range_stable_within_week():
    """Every day Monday..Sunday gives the same label and range."""
    monday = date(2025, 3, 3)
    days = [monday + timedelta(days=i) for i in range(7)]
    assert len({week_label(d) for d in days}) == 1
    assert len({week_range(d) for d in days}) == 1


def test_label_and_range_change_across_boundary():
    sunday = date(2025, 3, 9)
    next_monday = date(2025, 3, 10)
    assert week_label(sunday) != week_label(next_monday)
    assert week_range(sunday) != week_range(next_monday)


@pytest.mark.parametrize("n", [-3, -1, 0, 1, 2, 52])
def test_shift_week(n):
    d = date(2024, 12, 28)
    assert shift_week(d, n) == d + timedelta(days=7 * n)


def test_week_bounds_offsets():
    today = date(2025, 10, 16)
    assert week_bounds(0, today) == (date(2025, 10, 13), date(2025, 10, 20))
    assert week_bounds(-1, today) == (date(2025, 10, 6), date(2025, 10, 13))
    assert week_bounds(2, today) == (date(2025, 10, 27), date(2025, 11, 3))


def test_in_week():
    monday = date(2025, 10, 13)
    assert in_week(date(2025, 10, 13), monday)
    assert in_week(date(2025, 10, 19), monday)
    assert not in_week(date(2025, 10, 20), monday)
    assert not in_week(date(2025, 10, 12), monday)
    assert not in_week(None, monday)


def test_local_date_treats_naive_as_utc():
    late_sunday = datetime(2025, 10, 19, 23, 30)
    assert local_date(late_sunday, UTC) == date(2025, 10, 19)
    assert local_date(late_sunday, timezone(timedelta(hours=1))) == date(2025, 10, 20)
    assert local_date(late_sunday, timezone(timedelta(hours=-5))) == date(2025, 10, 19)


def test_local_date_keeps_aware_offset():
    moment = datetime(2025, 10, 20, 0, 30, tzinfo=timezone(timedelta(hours=2)))
    assert local_date(moment, UTC) == date(2025, 10, 19)
