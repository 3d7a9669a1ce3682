"""Weekly summary command."""

import click
from resaletrack.cli.display import echo_week_header, format_amount
from resaletrack.domain.aggregation import AggregationEngine
from resaletrack.domain.ledger import LedgerService
from resaletrack.domain.personnel import PersonnelService
from resaletrack.domain.week import week_bounds


@click.command("summary")
@click.option("--week-offset", default=0, type=int, help="Weeks relative to the current week (e.g., -1 for last week)")
@click.pass_context
def summary(ctx, week_offset: int):
    """Show weekly totals and stored profit per seller."""
    sync = ctx.obj["sync"]
    ledger = LedgerService(sync)
    personnel = PersonnelService(sync)
    aggregation = AggregationEngine()

    transactions = ledger.week_transactions(offset=week_offset)
    rate = ledger.exchange_rate.current()
    totals = aggregation.weekly_summary(transactions, rate)
    week_start, _ = week_bounds(week_offset)

    echo_week_header(week_start)
    click.echo(f"Transactions: {totals.count}")
    click.echo(f"Purchases:    {format_amount(totals.purchase_total):>12s} CZK (at rate {rate})")
    click.echo(f"Sales:        {format_amount(totals.sale_total):>12s} CZK")
    click.echo(f"Net profit:   {format_amount(totals.profit_total):>12s} CZK")

    sellers = personnel.list_sellers()
    if not sellers:
        return
    click.echo("\nNet profit by seller:")
    for row in aggregation.per_seller_profit(transactions, sellers):
        click.echo(f"  {row.seller_name:30s} {format_amount(row.profit, 2):>12s} CZK")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
