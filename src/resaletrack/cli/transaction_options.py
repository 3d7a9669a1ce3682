"""Click options shared by the add and update commands."""

from datetime import date
from typing import Any, Optional

import click

from resaletrack.utils.date_parser import parse_date

# CLI option name -> TransactionDraft attribute
TEXT_OPTIONS = {
    "brand": "brand",
    "model": "model",
    "supplier": "supplier",
    "note": "note",
    "driver": "driver",
    "destination": "destination",
    "customer_name": "customer_name",
    "customer_address": "customer_address",
    "contact": "customer_contact",
    "phone2": "customer_phone2",
    "city": "delivery_city",
}


def transaction_field_options(func):
    """Attach the optional free-text transaction options to a command."""
    options = [
        click.option("--brand", help="Brand"),
        click.option("--model", help="Model"),
        click.option("--supplier", help="Supplier"),
        click.option("--note", help="Note"),
        click.option("--driver", help="Driver name (must exist)"),
        click.option("--destination", help="Delivery destination"),
        click.option("--customer-name", help="Customer name"),
        click.option("--customer-address", help="Customer address"),
        click.option("--contact", help="Customer phone or e-mail"),
        click.option("--phone2", help="Secondary customer phone"),
        click.option("--city", help="Delivery city"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def collect_text_fields(params: dict[str, Any]) -> dict[str, Optional[str]]:
    """Map provided CLI text options onto draft attribute names."""
    return {
        attr: params[option]
        for option, attr in TEXT_OPTIONS.items()
        if params.get(option) is not None
    }


def parse_date_or_exit(ctx: click.Context, value: str) -> date:
    """Parse a --date value, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)
