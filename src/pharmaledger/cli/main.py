"""Main CLI entry point."""

import logging

import click
from pharmaledger.database.factories import create_sqlite_database
from pharmaledger.domain.ledger import Ledger

# Import and register all commands at module level
from pharmaledger.cli.commands import (
    account,
    init_accounts,
    journal,
    payment,
    report,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PHARMALEDGER_DB_PATH environment variable)",
    envvar="PHARMALEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="PHARMALEDGER_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Pharmaledger - double-entry ledger for pharmaceutical distribution.

    Maintain a chart of accounts, record balanced journal entries, allocate
    customer payments and produce trial balance, profit and loss and balance
    sheet reports.
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
        ctx.obj["ledger"] = Ledger(db)
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
init_accounts.register_commands(cli)
journal.register_commands(cli)
payment.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
