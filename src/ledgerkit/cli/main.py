"""Main CLI entry point."""

import click

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.accounts import load_chart
from ledgerkit.domain.journal import Journal
from ledgerkit.domain.reporting import ReportingService
from ledgerkit.utils.logging import configure_logging

# Import and register all commands at module level
from ledgerkit.cli.commands import balance, document, report, vat, verification


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--chart",
    type=click.Path(exists=True, dir_okay=False),
    help="Chart of accounts JSON file (overrides LEDGERKIT_CHART_PATH environment variable)",
    envvar="LEDGERKIT_CHART_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for structured logs on stderr",
    envvar="LEDGERKIT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, chart: str | None, log_level: str):
    """Ledgerkit - double-entry ledger with Swedish VAT reporting.

    Book verifications against the BAS chart of accounts, query balances,
    financial ratios and monthly trends, and produce quarterly VAT reports.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            registry = load_chart(chart)
        except (OSError, ValueError) as e:
            click.echo(f"Error: Could not load chart of accounts: {e}", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)

        journal = Journal(db, registry)
        ctx.obj["db"] = db
        ctx.obj["registry"] = registry
        ctx.obj["journal"] = journal
        ctx.obj["reporting"] = ReportingService(journal, registry)


# Register all commands
verification.register_commands(cli)
document.register_commands(cli)
balance.register_commands(cli)
report.register_commands(cli)
vat.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
