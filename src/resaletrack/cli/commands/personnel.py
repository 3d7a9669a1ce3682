"""Seller and driver management commands."""

import click
from resaletrack.cli.error_handling import handle_domain_error
from resaletrack.cli.person_resolution import resolve_person_or_exit
from resaletrack.domain.errors import DomainError
from resaletrack.domain.personnel import DRIVER, SELLER, PersonnelService


def _make_group(kind: str) -> click.Group:
    """Build the add/list/rename/delete group for sellers or drivers."""
    plural = f"{kind}s"

    @click.group(help=f"Manage {plural}.")
    def group():
        pass

    @group.command("add")
    @click.argument("name")
    @click.pass_context
    def add_person(ctx, name: str):
        personnel = PersonnelService(ctx.obj["sync"])
        try:
            person_id = getattr(personnel, f"add_{kind}")(name)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Added {kind} '{name.strip()}' (ID: {person_id})")

    add_person.help = f"Add a {kind}."

    @group.command("list")
    @click.pass_context
    def list_people(ctx):
        personnel = PersonnelService(ctx.obj["sync"])
        people = getattr(personnel, f"list_{plural}")()
        if not people:
            click.echo(f"No {plural} found.")
            return
        click.echo(f"\n{plural.capitalize()}:")
        click.echo("-" * 60)
        for person in people:
            click.echo(f"{person.name:30s} | ID: {person.id}")

    list_people.help = f"List all {plural}."

    @group.command("rename")
    @click.argument("person", metavar=kind.upper())
    @click.argument("new_name", metavar="NEW_NAME")
    @click.pass_context
    def rename_person(ctx, person: str, new_name: str):
        personnel = PersonnelService(ctx.obj["sync"])
        target = resolve_person_or_exit(ctx, personnel, kind, person)
        try:
            getattr(personnel, f"rename_{kind}")(target.id, new_name)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Renamed {kind} '{target.name}' to '{new_name.strip()}'")
        click.echo("Existing transactions keep the old name.")

    rename_person.help = f"Rename a {kind}. {kind.upper()} can be a name or ID."

    @group.command("delete")
    @click.argument("person", metavar=kind.upper())
    @click.option("--yes", is_flag=True, help="Do not ask for confirmation")
    @click.pass_context
    def delete_person(ctx, person: str, yes: bool):
        personnel = PersonnelService(ctx.obj["sync"])
        target = resolve_person_or_exit(ctx, personnel, kind, person)
        if not yes and not click.confirm(f"Are you sure you want to delete {kind} '{target.name}'?"):
            click.echo("Deletion cancelled.")
            return
        try:
            getattr(personnel, f"delete_{kind}")(target.id)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Deleted {kind} '{target.name}'")

    delete_person.help = f"Delete a {kind}. {kind.upper()} can be a name or ID."

    return group


seller_group = _make_group(SELLER)
driver_group = _make_group(DRIVER)


def register_commands(cli):
    """Register seller and driver commands with main CLI."""
    cli.add_command(seller_group, name="seller")
    cli.add_command(driver_group, name="driver")
