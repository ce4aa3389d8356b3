"""Financial report commands."""

import json

import click

from ledgerkit.cli.date_filters import date_range_options, resolve_cli_date_range

RATIO_LABELS = {
    "solidity": ("Soliditet", " %"),
    "liquidity": ("Kassalikviditet", " %"),
    "debt_to_equity": ("Skuldsättningsgrad", ""),
    "profit_margin": ("Vinstmarginal", " %"),
}


@click.group()
def report_group():
    """Financial ratios, monthly trend and expense breakdown."""
    pass


@report_group.command("ratios")
@date_range_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def ratios(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    as_json: bool,
) -> None:
    """Show key ratios. Undefined ratios are shown as n/a."""
    reporting = ctx.obj["reporting"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    result = reporting.get_financial_ratios(date_range)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    for ratio in result:
        label, suffix = RATIO_LABELS[ratio.name]
        places = 2 if ratio.name == "debt_to_equity" else 1
        note = " (no assets)" if ratio.degenerate and ratio.is_defined else ""
        click.echo(f"{label:<20} {ratio.format(suffix, places):>14}{note}")


@report_group.command("trend")
@date_range_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def trend(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    as_json: bool,
) -> None:
    """Show revenue, expenses and result per month."""
    reporting = ctx.obj["reporting"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    buckets = reporting.get_monthly_trend(date_range)
    if as_json:
        click.echo(json.dumps([b.to_dict() for b in buckets], indent=2, ensure_ascii=False))
        return

    if not buckets:
        click.echo("No revenue or expenses found.")
        return

    click.echo(f"{'Månad':<10} {'Intäkter':>16} {'Kostnader':>16} {'Resultat':>16}")
    click.echo("-" * 61)
    for bucket in buckets:
        click.echo(
            f"{bucket.label:<10} {bucket.revenue:>16,.2f} {bucket.expenses:>16,.2f} "
            f"{bucket.result:>16,.2f}"
        )


@report_group.command("expenses")
@date_range_options
@click.pass_context
def expenses(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> None:
    """Show expenses grouped by category, largest first."""
    reporting = ctx.obj["reporting"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    categories = reporting.get_expense_breakdown(date_range)
    if not categories:
        click.echo("No expenses found.")
        return

    for category in categories:
        click.echo(f"{category.group:<30} {category.amount:>16,.2f} {category.percentage:>4} %")


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
