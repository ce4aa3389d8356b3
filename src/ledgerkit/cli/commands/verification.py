"""Verification commands."""

import click

from ledgerkit.cli.date_filters import date_range_options, resolve_cli_date_range
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.entities import VerificationRow
from ledgerkit.domain.errors import DomainError
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_date

DEBIT_SIDES = ("d", "debit")
CREDIT_SIDES = ("c", "credit", "k", "kredit")


def parse_row_option(text: str) -> VerificationRow:
    """Parse a row given as CODE:D:AMOUNT or CODE:C:AMOUNT.

    Raises:
        ValueError: If the row text is malformed
    """
    parts = text.split(":", 2)
    if len(parts) != 3:
        raise ValueError(f"Invalid row '{text}': expected CODE:D|C:AMOUNT")
    code, side, amount_str = (part.strip() for part in parts)
    amount = parse_amount(amount_str)

    side = side.lower()
    if side in DEBIT_SIDES:
        return VerificationRow.debit_row(code, amount)
    if side in CREDIT_SIDES:
        return VerificationRow.credit_row(code, amount)
    raise ValueError(f"Invalid row '{text}': side must be D (debit) or C (credit)")


@click.group()
def verification_group():
    """Book and list verifications."""
    pass


@verification_group.command("add")
@click.option("--date", "date_str", required=True, help="Booking date (YYYY-MM-DD or 'today')")
@click.option("--description", default="", help="Verification text")
@click.option(
    "--row",
    "row_options",
    multiple=True,
    required=True,
    help="Row as CODE:D|C:AMOUNT, e.g. 1930:D:1250,00 (repeat for each row)",
)
@click.option("--id", "verification_id", help="Verification id (generated if omitted)")
@click.pass_context
def add_verification(
    ctx,
    date_str: str,
    description: str,
    row_options: tuple[str, ...],
    verification_id: str | None,
) -> None:
    """Book a balanced verification.

    Examples:
        ledgerkit verification add --date 2024-12-05 --description "Hyra dec" \\
            --row 5010:D:8000 --row 1930:C:8000
    """
    journal = ctx.obj["journal"]

    try:
        booking_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        rows = [parse_row_option(option) for option in row_options]
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        verification = journal.post(
            booking_date, description, rows, verification_id=verification_id
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Added verification {verification.id} ({verification.date}, "
        f"{verification.total_debit:,.2f} kr)"
    )


@verification_group.command("list")
@date_range_options
@click.option("--account", help="Only verifications touching this account code")
@click.pass_context
def list_verifications(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    account: str | None,
) -> None:
    """List verifications in journal order with their rows."""
    journal = ctx.obj["journal"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    if account:
        view = journal.entries_for_account(account, date_range)
    else:
        view = journal.entries(date_range)
    verifications = list(view)

    if not verifications:
        click.echo("No verifications found.")
        return

    click.echo(f"\nFound {len(verifications)} verification(s):")
    click.echo("-" * 80)
    for item in verifications:
        click.echo(f"{item.id:<34} {str(item.date):<12} {item.description}")
        for row in item.rows:
            debit = f"{row.debit:,.2f}" if row.debit else ""
            credit = f"{row.credit:,.2f}" if row.credit else ""
            click.echo(f"    {row.account_code:<8} {debit:>14} {credit:>14}")
    click.echo("-" * 80)


@verification_group.command("show")
@click.argument("verification_id")
@click.pass_context
def show_verification(ctx, verification_id: str) -> None:
    """Show a single verification."""
    journal = ctx.obj["journal"]
    registry = ctx.obj["registry"]

    item = journal.get(verification_id)
    if item is None:
        click.echo(f"Error: Verification '{verification_id}' not found", err=True)
        ctx.exit(1)

    click.echo(f"Verification: {item.id}")
    click.echo(f"  Date: {item.date}")
    click.echo(f"  Description: {item.description}")
    click.echo(f"  Source: {item.source_type}")
    for row in item.rows:
        name = registry.get(row.account_code).name
        side = "D" if row.debit else "C"
        click.echo(f"  {row.account_code} {name:<36} {side} {row.debit or row.credit:>14,.2f}")


def register_commands(cli: click.Group) -> None:
    """Register verification commands with main CLI."""
    cli.add_command(verification_group, name="verification")
