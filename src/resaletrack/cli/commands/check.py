"""Reference check command."""

import click
from resaletrack.domain.personnel import PersonnelService


@click.command("check")
@click.pass_context
def check(ctx):
    """Report transactions naming sellers or drivers that no longer exist."""
    sync = ctx.obj["sync"]
    problems = PersonnelService(sync).unknown_references(sync.transactions())
    if not problems:
        click.echo("All seller and driver references resolve.")
        return

    click.echo(f"Found {len(problems)} unresolved reference{'s' if len(problems) != 1 else ''}:")
    for txn, kind, name in problems:
        click.echo(f"  {txn.id} | {txn.item_name} | unknown {kind} '{name}'")


def register_commands(cli):
    """Register check command with main CLI."""
    cli.add_command(check)
