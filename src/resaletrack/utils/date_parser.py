"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser

# Czech-style dates put the day first: 13.10.2025, 5. 10. 2025
_DOTTED_DATE = re.compile(r"^\d{1,2}\.\s*\d{1,2}\.\s*\d{2,4}$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2025-10-13"
    - Day-first dotted dates: "13.10.2025", "5. 10. 2025"
    - Other absolute dates dateutil understands: "October 13, 2025"
    - Relative dates: "today", "yesterday", "tomorrow",
      "this week", "last week", "next week" (the Monday of that week)

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = date.today()

    monday = today - timedelta(days=today.weekday())
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this week": monday,
        "last week": monday - timedelta(days=7),
        "next week": monday + timedelta(days=7),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        if _DOTTED_DATE.match(date_str):
            dt = date_parser.parse(date_str.replace(" ", ""), dayfirst=True)
        else:
            dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
