"""Main CLI entry point."""

import logging
import sys

import click
from resaletrack.config import DB_PATH_ENV, LOG_LEVEL_ENV
from resaletrack.domain.sync import SyncEngine
from resaletrack.store.factories import create_sqlite_store

# Import and register all commands at module level
from resaletrack.cli.commands import (
    add,
    transaction,
    personnel,
    import_cmd,
    summary,
    deliveries,
    history,
    rate,
    check,
)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def configure_logging(level: str) -> None:
    """Send package logs to stderr at the given level."""
    logger = logging.getLogger("resaletrack")
    logger.setLevel(level.upper())
    # Rebind on every invocation; sys.stderr may have been swapped since
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar=LOG_LEVEL_ENV,
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Resaletrack - resale ledger.

    Record purchases in PLN and sales in CZK, track profit per week and
    seller, and plan weekly deliveries.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        sync = SyncEngine(store)
        sync.start()
        ctx.obj["store"] = store
        ctx.obj["sync"] = sync

        def close() -> None:
            sync.stop()
            store.close()

        ctx.call_on_close(close)


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
personnel.register_commands(cli)
import_cmd.register_commands(cli)
summary.register_commands(cli)
deliveries.register_commands(cli)
history.register_commands(cli)
rate.register_commands(cli)
check.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
