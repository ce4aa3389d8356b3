"""Account balance commands."""

import click

from ledgerkit.cli.date_filters import date_range_options, resolve_cli_date_range
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import DomainError


@click.group()
def balance_group():
    """Show account balances."""
    pass


@balance_group.command("show")
@click.argument("code")
@date_range_options
@click.pass_context
def show_balance(
    ctx,
    code: str,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> None:
    """Show the balance and transactions of one account."""
    reporting = ctx.obj["reporting"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        balance = reporting.get_account_balance(code, date_range)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    account = balance.account
    click.echo(f"{account.code} {account.name} ({account.type.value}, {account.group})")
    click.echo(f"Balance: {balance.presented_balance:,.2f} kr")
    click.echo(f"Transactions: {balance.transaction_count}")
    if balance.transactions:
        click.echo("-" * 80)
        for txn in balance.transactions:
            click.echo(
                f"{str(txn.date):<12} {txn.verification_id:<34} {txn.amount:>14,.2f}  "
                f"{txn.description[:30]}"
            )


@balance_group.command("list")
@date_range_options
@click.option("--all", "show_all", is_flag=True, help="Include accounts without activity")
@click.pass_context
def list_balances(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    show_all: bool,
) -> None:
    """List account balances ordered by account code."""
    reporting = ctx.obj["reporting"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    balances = reporting.get_all_balances(date_range)
    shown = [b for b in balances.values() if show_all or b.transaction_count > 0]

    if not shown:
        click.echo("No account activity found.")
        return

    click.echo(f"{'Account':<8} {'Name':<40} {'Type':<10} {'Balance':>16}")
    click.echo("-" * 78)
    for balance in shown:
        click.echo(
            f"{balance.account_code:<8} {balance.account.name[:40]:<40} "
            f"{balance.account.type.value:<10} {balance.presented_balance:>16,.2f}"
        )

    totals = reporting.get_balance_totals(date_range)
    click.echo("-" * 78)
    click.echo(
        f"Assets: {totals.assets:,.2f} | Liabilities: {totals.liabilities:,.2f} | "
        f"Equity: {totals.equity:,.2f} | Result: {totals.net_income:,.2f}"
    )


def register_commands(cli: click.Group) -> None:
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
