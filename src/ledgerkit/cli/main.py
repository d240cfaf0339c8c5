"""Main CLI entry point."""

import click
from ledgerkit.database.factories import create_sqlite_database

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    fund_summary,
    ledger,
    reconcile,
    subject_balance,
    trial_balance,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to book database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--fiscal-start-month",
    type=click.IntRange(1, 12),
    default=1,
    show_default=True,
    envvar="LEDGERKIT_FISCAL_START_MONTH",
    help="First month of the fiscal year, used for year-to-date totals",
)
@click.pass_context
def cli(ctx, db_path: str | None, fiscal_start_month: int):
    """Ledgerkit - ledger reports for a double-entry book.

    Subject balances, detailed ledgers and trial balance over approved
    vouchers, plus cash-journal summaries and reconciliation against the
    ledger.
    """
    ctx.ensure_object(dict)
    ctx.obj["fiscal_start_month"] = fiscal_start_month

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
subject_balance.register_commands(cli)
ledger.register_commands(cli)
trial_balance.register_commands(cli)
fund_summary.register_commands(cli)
reconcile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
