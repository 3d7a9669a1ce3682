"""Add transaction command."""

import click
from resaletrack.cli.display import format_amount
from resaletrack.cli.error_handling import handle_domain_error
from resaletrack.cli.transaction_options import (
    collect_text_fields,
    parse_date_or_exit,
    transaction_field_options,
)
from resaletrack.domain.entities import TransactionDraft
from resaletrack.domain.errors import DomainError
from resaletrack.domain.ledger import LedgerService


@click.command("add")
@click.option("--item", required=True, help="Item name")
@click.option("--seller", required=True, help="Seller name (must exist)")
@click.option("--purchase", required=True, help="Purchase price in PLN (e.g., 1000 or '1 000,50')")
@click.option("--selling", required=True, help="Selling price in CZK")
@click.option(
    "--date",
    "sale_date",
    help="Sale date (YYYY-MM-DD, DD.MM.YYYY or relative like 'today'); defaults to today",
)
@transaction_field_options
@click.pass_context
def add_transaction(ctx, item: str, seller: str, purchase: str, selling: str, sale_date: str | None, **fields):
    """Record a sale.

    Net profit is computed in CZK using the current exchange rate and
    stored with the transaction.

    Examples:
        resaletrack add --item "Sofa" --seller "Jana" --purchase 1000 --selling 6000
        resaletrack add --item "Table" --seller "Jana" --purchase 300 --selling 2500 --driver "Petr" --destination "Brno"
    """
    ledger = LedgerService(ctx.obj["sync"])

    txn_date = parse_date_or_exit(ctx, sale_date) if sale_date else None
    draft = TransactionDraft(
        item_name=item,
        seller=seller,
        purchase_price_pln=purchase,
        selling_price_czk=selling,
        sale_date=txn_date,
        **collect_text_fields(fields),
    )

    try:
        transaction_id = ledger.create_transaction(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    txn = ledger.require_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Item: {txn.item_name}")
    click.echo(f"  Seller: {txn.seller}")
    click.echo(f"  Sale date: {txn.sale_date}")
    click.echo(f"  Purchase: {format_amount(txn.purchase_price_pln, 2)} PLN")
    click.echo(f"  Selling: {format_amount(txn.selling_price_czk, 2)} CZK")
    click.echo(f"  Net profit: {format_amount(txn.net_profit_czk, 2)} CZK (rate {ledger.exchange_rate.current()})")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
