"""CLI error handling helpers."""

from typing import Optional

import click

from resaletrack.domain.errors import DomainError, PartialCommitError


def handle_domain_error(
    ctx: click.Context, error: DomainError | ValueError, hint: Optional[str] = None
) -> None:
    """Render a domain error, plus an optional hint, and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, PartialCommitError) and error.completed:
        click.echo(f"Note: {error.completed} step(s) were already saved and remain in place.", err=True)
    if hint:
        click.echo(f"Hint: {hint}", err=True)
    ctx.exit(1)
