"""History command."""

import click
from resaletrack.domain.audit import AuditTrail


@click.command("history")
@click.option("--limit", type=int, default=None, help="Show only the newest N entries")
@click.pass_context
def history(ctx, limit: int | None):
    """Show the audit trail, newest first."""
    entries = AuditTrail(ctx.obj["sync"]).list_entries(limit=limit)
    if not entries:
        click.echo("No history entries found.")
        return

    for entry in entries:
        when = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S") if entry.timestamp else "N/A"
        click.echo(f"{when} | {entry.action.value:11s} | {entry.details}")


def register_commands(cli):
    """Register history command with main CLI."""
    cli.add_command(history)
