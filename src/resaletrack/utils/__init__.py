"""Utility functions for resaletrack."""

from resaletrack.utils.date_parser import parse_date
from resaletrack.utils.amount_parser import parse_amount
from resaletrack.utils.phone import format_phone

__all__ = ["parse_date", "parse_amount", "format_phone"]
