"""CLI helpers for date range resolution."""

import functools

import click

from ledgerkit.domain.entities import DateRange
from ledgerkit.utils.date_parser import NAMED_PERIODS, get_date_range, parse_date


def date_range_options(func):
    """Add --start-date/--end-date and one flag per named period to a command.

    The period flags are collected into a ``period_flags`` keyword argument.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        period_flags = {period: kwargs.pop(period.replace("-", "_")) for period in NAMED_PERIODS}
        return func(*args, period_flags=period_flags, **kwargs)

    for period in reversed(NAMED_PERIODS):
        wrapper = click.option(
            f"--{period}", is_flag=True, help=f"Filter to {period.replace('-', ' ')}"
        )(wrapper)
    wrapper = click.option(
        "--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')"
    )(wrapper)
    wrapper = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')"
    )(wrapper)
    return wrapper


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> DateRange:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)
    flag_names = ", ".join(f"--{period}" for period in NAMED_PERIODS)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({flag_names}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                return DateRange(*get_date_range(period))

    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    return DateRange(start, end)
