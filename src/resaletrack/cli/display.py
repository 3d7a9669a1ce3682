"""Shared output formatting for CLI commands."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import click

from resaletrack.domain.week import week_label, week_range


def format_amount(value: Optional[Decimal], places: int = 0) -> str:
    """Format an amount with spaces between thousands, e.g. ``6 000``."""
    if value is None:
        value = Decimal("0")
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:,.{places}f}".replace(",", " ")


def echo_week_header(week_start) -> None:
    """Print the week label and its date range."""
    click.echo(f"\nWeek {week_label(week_start)} ({week_range(week_start)})")
    click.echo("-" * 60)
