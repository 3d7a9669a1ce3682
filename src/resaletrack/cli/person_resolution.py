"""CLI helpers for seller/driver resolution."""

from __future__ import annotations

import click
from resaletrack.domain.entities import Person
from resaletrack.domain.errors import NotFoundError
from resaletrack.domain.personnel import PersonnelService


def resolve_person_or_exit(
    ctx: click.Context, personnel: PersonnelService, kind: str, person: str
) -> Person:
    """Resolve a seller or driver by ID or name, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return personnel.resolve(kind, person)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
