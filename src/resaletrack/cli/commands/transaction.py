"""Transaction management commands."""

import dataclasses

import click
from resaletrack.cli.display import echo_week_header, format_amount
from resaletrack.cli.error_handling import handle_domain_error
from resaletrack.cli.transaction_options import (
    collect_text_fields,
    parse_date_or_exit,
    transaction_field_options,
)
from resaletrack.domain.aggregation import AggregationEngine
from resaletrack.domain.entities import TransactionDraft, TransactionFilter
from resaletrack.domain.errors import DomainError, ValidationError
from resaletrack.domain.ledger import LedgerService
from resaletrack.domain.personnel import DRIVER, SELLER, PersonnelService
from resaletrack.domain.week import week_bounds, week_label


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


def _stale_reference_hint(sync, txn, seller: str | None, driver: str | None) -> str | None:
    """Explain how to edit a record whose stored seller or driver no longer exists."""
    personnel = PersonnelService(sync)
    if seller is None and txn.seller not in personnel.known_names(SELLER):
        return (
            f"This transaction still names seller '{txn.seller}', which was renamed or deleted. "
            "Pass --seller with a current seller name to edit it."
        )
    if driver is None and txn.driver and txn.driver not in personnel.known_names(DRIVER):
        return (
            f"This transaction still names driver '{txn.driver}', which was renamed or deleted. "
            "Pass --driver with a current driver name, or --driver \"\" to clear it."
        )
    return None


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--item", help="Item name")
@click.option("--seller", help="Seller name (must exist)")
@click.option("--purchase", help="Purchase price in PLN")
@click.option("--selling", help="Selling price in CZK")
@click.option("--date", "sale_date", help="Sale date (YYYY-MM-DD, DD.MM.YYYY or relative)")
@transaction_field_options
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    item: str | None,
    seller: str | None,
    purchase: str | None,
    selling: str | None,
    sale_date: str | None,
    **fields,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Net profit is recomputed
    with the current exchange rate. The stored seller and driver must
    still exist; when one was renamed or deleted, pass --seller or
    --driver along with the edit.

    Examples:
        resaletrack transaction update 3f2a... --selling 6500
        resaletrack transaction update 3f2a... --driver "Petr" --destination "Brno"
    """
    ledger = LedgerService(ctx.obj["sync"])

    try:
        txn = ledger.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    changes = collect_text_fields(fields)
    if item is not None:
        changes["item_name"] = item
    if seller is not None:
        changes["seller"] = seller
    if purchase is not None:
        changes["purchase_price_pln"] = purchase
    if selling is not None:
        changes["selling_price_czk"] = selling
    if sale_date is not None:
        changes["sale_date"] = parse_date_or_exit(ctx, sale_date)

    draft = dataclasses.replace(TransactionDraft.from_transaction(txn), **changes)
    try:
        ledger.update_transaction(transaction_id, draft)
    except ValidationError as e:
        hint = _stale_reference_hint(ctx.obj["sync"], txn, seller, fields.get("driver"))
        handle_domain_error(ctx, e, hint=hint)
        return
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    updated = ledger.require_transaction(transaction_id)
    click.echo(f"Updated transaction {transaction_id}")
    click.echo(f"  Net profit: {format_amount(updated.net_profit_czk, 2)} CZK")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction."""
    ledger = LedgerService(ctx.obj["sync"])

    txn = ledger.get_transaction(transaction_id)
    label = f"'{txn.item_name}' ({transaction_id})" if txn is not None else transaction_id
    if not yes and not click.confirm(f"Are you sure you want to delete transaction {label}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {label}")


@transaction_group.command("shift")
@click.argument("transaction_id")
@click.pass_context
def shift_transaction(ctx, transaction_id: str) -> None:
    """Move a transaction's sale date one week forward."""
    ledger = LedgerService(ctx.obj["sync"])
    try:
        new_date = ledger.shift_to_next_week(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Moved transaction {transaction_id} to {new_date} (week {week_label(new_date)})")


@transaction_group.command("show")
@click.argument("transaction_id")
@click.pass_context
def show_transaction(ctx, transaction_id: str) -> None:
    """Show every field of a transaction."""
    ledger = LedgerService(ctx.obj["sync"])
    try:
        txn = ledger.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for field in dataclasses.fields(txn):
        value = getattr(txn, field.name)
        if value is None:
            continue
        click.echo(f"{field.name.replace('_', ' ').capitalize():18s} {value}")


@transaction_group.command("list")
@click.option("--week-offset", default=0, type=int, help="Weeks relative to the current week (e.g., -1 for last week)")
@click.option("--search", default="", help="Case-insensitive text in item, supplier, customer, brand or model")
@click.option("--seller", default="", help="Only this seller")
@click.option("--driver", default="", help="Only this driver")
@click.option("--verbose", "-v", is_flag=True, help="Show customer and delivery columns")
@click.pass_context
def list_transactions(ctx, week_offset: int, search: str, seller: str, driver: str, verbose: bool):
    """View one week of transactions with optional filters.

    The week summary converts purchase prices at the current exchange
    rate, while the profit total adds up stored profits.
    """
    ledger = LedgerService(ctx.obj["sync"])
    aggregation = AggregationEngine()

    filters = TransactionFilter(text=search, seller=seller, driver=driver)
    transactions = ledger.filter_transactions(filters, offset=week_offset)
    week_start, _ = week_bounds(week_offset)

    echo_week_header(week_start)
    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        click.echo(
            f"{txn.sale_date} | {txn.item_name[:24]:24s} | {txn.seller[:12]:12s} | "
            f"{format_amount(txn.purchase_price_pln):>8s} PLN | "
            f"{format_amount(txn.selling_price_czk):>8s} CZK | "
            f"profit {format_amount(txn.net_profit_czk, 2):>10s} | {txn.id}"
        )
        if verbose:
            click.echo(
                f"    driver: {txn.driver or '-'} | destination: {txn.destination or '-'} | "
                f"customer: {txn.customer_name or '-'} | contact: {txn.customer_contact or '-'}"
            )

    summary = aggregation.weekly_summary(transactions, ledger.exchange_rate.current())
    click.echo("-" * 60)
    click.echo(f"Transactions: {summary.count}")
    click.echo(f"Purchases: {format_amount(summary.purchase_total)} CZK")
    click.echo(f"Sales: {format_amount(summary.sale_total)} CZK")
    click.echo(f"Net profit: {format_amount(summary.profit_total)} CZK")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
