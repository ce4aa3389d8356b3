"""Date parsing and calendar period utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

NAMED_PERIODS = (
    "this-month",
    "this-quarter",
    "this-year",
    "last-month",
    "last-quarter",
    "last-year",
)


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return first and last day of a calendar month."""
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def quarter_range(year: int, quarter: int) -> tuple[date, date]:
    """Return first and last day of a calendar quarter (1-4)."""
    if quarter not in (1, 2, 3, 4):
        raise ValueError(f"Quarter must be 1-4, got {quarter}")
    start = date(year, (quarter - 1) * 3 + 1, 1)
    end = start + relativedelta(months=3) - timedelta(days=1)
    return start, end


def quarter_of(day: date) -> int:
    """Return the calendar quarter (1-4) a date falls in."""
    return (day.month - 1) // 3 + 1


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports ISO and other absolute formats understood by dateutil, plus
    the relative words "today", "yesterday", "this month", "last month",
    "this year" and "last year" (the latter four give the first day of the
    period).

    Args:
        date_str: Date string
        today: Reference date for relative values (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "idag": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        return date_parser.isoparse(text).date()
    except ValueError:
        pass

    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Current periods end today; past periods cover the whole calendar period.

    Args:
        period: One of NAMED_PERIODS
        today: Reference date (defaults to date.today())

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today

    if period == "this-quarter":
        start, _ = quarter_range(today.year, quarter_of(today))
        return start, today

    if period == "this-year":
        return today.replace(month=1, day=1), today

    if period == "last-month":
        previous = today - relativedelta(months=1)
        return month_range(previous.year, previous.month)

    if period == "last-quarter":
        previous = today - relativedelta(months=3)
        return quarter_range(previous.year, quarter_of(previous))

    if period == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(NAMED_PERIODS)}"
    )
