"""Driver delivery schedule command."""

import click
from resaletrack.cli.display import echo_week_header, format_amount
from resaletrack.cli.person_resolution import resolve_person_or_exit
from resaletrack.domain.aggregation import AggregationEngine
from resaletrack.domain.personnel import DRIVER, PersonnelService
from resaletrack.domain.week import week_bounds
from resaletrack.utils.phone import format_phone


@click.command("deliveries")
@click.argument("driver", metavar="DRIVER")
@click.option("--week-offset", default=0, type=int, help="Weeks relative to the current week (e.g., 1 for next week)")
@click.pass_context
def deliveries(ctx, driver: str, week_offset: int):
    """List a driver's deliveries for one week.

    DRIVER can be a name or ID. Deliveries are transactions assigned to
    the driver with a destination, grouped by the week they were entered.
    """
    sync = ctx.obj["sync"]
    personnel = PersonnelService(sync)
    person = resolve_person_or_exit(ctx, personnel, DRIVER, driver)

    week_start, _ = week_bounds(week_offset)
    schedule = AggregationEngine().delivery_schedule(sync.transactions(), person.name, week_start)

    echo_week_header(week_start)
    click.echo(f"Driver: {person.name}")
    if not schedule:
        click.echo("No deliveries found.")
        return

    for number, txn in enumerate(schedule, start=1):
        click.echo(f"\n{number}. {txn.item_name} -> {txn.destination}")
        click.echo(f"   Customer: {txn.customer_name or '-'}")
        click.echo(f"   Address: {txn.customer_address or '-'}")
        if txn.delivery_city:
            click.echo(f"   City: {txn.delivery_city}")
        phones = format_phone(txn.customer_contact)
        if txn.customer_phone2:
            phones = f"{phones}, {format_phone(txn.customer_phone2)}"
        click.echo(f"   Phone: {phones}")
        click.echo(f"   Price: {format_amount(txn.selling_price_czk)} CZK")
        if txn.note:
            click.echo(f"   Note: {txn.note}")


def register_commands(cli):
    """Register deliveries command with main CLI."""
    cli.add_command(deliveries)
