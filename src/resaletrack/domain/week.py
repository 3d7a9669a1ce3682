"""Week partitioning helpers.

Weeks start on Monday. Labels use the ISO 8601 week number, so the days
around New Year belong to whichever year owns their Thursday.
"""

from datetime import date, datetime, timedelta, tzinfo, UTC
from typing import Optional

CZECH_MONTHS_SHORT = (
    "led",
    "úno",
    "bře",
    "dub",
    "kvě",
    "čvn",
    "čvc",
    "srp",
    "zář",
    "říj",
    "lis",
    "pro",
)


def start_of_week(d: date) -> date:
    """Return the Monday beginning the week that contains ``d``.

    Sunday belongs to the week of the preceding Monday.
    """
    return d - timedelta(days=d.weekday())


def week_label(d: date) -> str:
    """Return the ISO week number of ``d`` formatted as ``T<n>``."""
    return f"T{d.isocalendar()[1]}"


def format_czech_date(d: date) -> str:
    """Format a date the way the cs-CZ locale prints a short month."""
    return f"{d.day}. {CZECH_MONTHS_SHORT[d.month - 1]} {d.year}"


def week_range(d: date) -> str:
    """Return the ``"<monday> - <sunday>"`` range for the week containing ``d``."""
    start = start_of_week(d)
    end = start + timedelta(days=6)
    return f"{format_czech_date(start)} - {format_czech_date(end)}"


def shift_week(d: date, n: int) -> date:
    """Advance ``d`` by ``n`` weeks (negative moves backwards)."""
    return d + timedelta(weeks=n)


def week_bounds(offset: int = 0, today: Optional[date] = None) -> tuple[date, date]:
    """Return ``(start, end)`` of the current week shifted by ``offset`` weeks.

    ``end`` is exclusive: the Monday after the target week.
    """
    if today is None:
        today = date.today()
    start = shift_week(start_of_week(today), offset)
    return start, start + timedelta(days=7)


def in_week(d: Optional[date], week_start: date) -> bool:
    """Check whether ``d`` falls inside the week beginning at ``week_start``.

    Missing dates are never part of any week.
    """
    if d is None:
        return False
    return week_start <= d < week_start + timedelta(days=7)


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Return the calendar date of ``moment`` in ``tz`` (the local zone by default).

    Naive datetimes are taken to be UTC, which is how the store keeps them.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz).date()
