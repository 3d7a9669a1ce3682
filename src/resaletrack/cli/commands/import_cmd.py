"""Spreadsheet import command."""

import click
from resaletrack.cli.error_handling import handle_domain_error
from resaletrack.domain.importer import ImportReconciler
from resaletrack.domain.ledger import LedgerService


@click.command("import")
@click.argument("xlsx_file", type=click.Path(exists=True))
@click.pass_context
def import_xlsx(ctx, xlsx_file: str):
    """Import transactions from the first sheet of an XLSX workbook.

    The first row is a header. Rows without item name, seller, purchase
    price or selling price are skipped. Net profit is read from the sheet.
    """
    ledger = LedgerService(ctx.obj["sync"])
    service = ImportReconciler(ledger)

    try:
        result = service.import_workbook(xlsx_file)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Skipped: {result.skipped} incomplete rows")
    if result.skipped_rows:
        click.echo(f"  Skipped rows: {', '.join(str(n) for n in result.skipped_rows)}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_xlsx)
