"""Main CLI entry point."""

import logging

import click
from pennywise.database.factories import create_sqlite_database

# Import and register all commands at module level
from pennywise.cli.commands import (
    account,
    category,
    import_cmd,
    init_categories,
    rule,
    search,
    transaction,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PENNYWISE_DB_PATH environment variable)",
    envvar="PENNYWISE_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="PENNYWISE_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Pennywise - Personal finance tracking.

    Import bank statement CSV files with automatic column detection,
    classify each row as income or expense, and categorize transactions
    with prioritized rules.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
init_categories.register_commands(cli)
rule.register_commands(cli)
transaction.register_commands(cli)
search.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
