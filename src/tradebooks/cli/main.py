"""Main CLI entry point."""

import logging

import click
from tradebooks.database.factories import create_sqlite_database

# Import and register all commands at module level
from tradebooks.cli.commands import (
    account,
    init_accounts,
    party,
    posting,
    report,
    invoice,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TRADEBOOKS_DB_PATH environment variable)",
    envvar="TRADEBOOKS_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="TRADEBOOKS_LOG_LEVEL",
    help="Logging verbosity (overrides TRADEBOOKS_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Tradebooks - Double-entry bookkeeping for a trading business.

    Record purchases, sales, payments, receipts and expenses, and get
    ledgers, trial balance, balance sheet, profit & loss, cash flow and
    aging reports straight from the journal.
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
init_accounts.register_commands(cli)
account.register_commands(cli)
party.register_commands(cli)
posting.register_commands(cli)
report.register_commands(cli)
invoice.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
