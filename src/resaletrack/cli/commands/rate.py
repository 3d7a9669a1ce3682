"""Exchange rate commands."""

import click
from resaletrack.cli.error_handling import handle_domain_error
from resaletrack.domain.errors import DomainError
from resaletrack.domain.ledger import LedgerService


@click.group()
def rate_group():
    """Show or change the PLN to CZK exchange rate."""
    pass


@rate_group.command("show")
@click.pass_context
def show_rate(ctx):
    """Show the exchange rate in effect."""
    click.echo(f"1 PLN = {ctx.obj['sync'].exchange_rate.current()} CZK")


@rate_group.command("set")
@click.argument("value")
@click.pass_context
def set_rate(ctx, value: str):
    """Set the exchange rate used for new and edited transactions.

    Profits already stored on existing transactions are not recalculated.
    """
    ledger = LedgerService(ctx.obj["sync"])
    try:
        rate = ledger.set_exchange_rate(value)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Exchange rate set to 1 PLN = {rate} CZK")


def register_commands(cli):
    """Register rate commands with main CLI."""
    cli.add_command(rate_group, name="rate")
