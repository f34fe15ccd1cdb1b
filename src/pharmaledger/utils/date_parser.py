"""Date parsing utilities."""

import calendar
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2025-01-15", "January 15, 2025", etc.
    - Relative days: "today", "yesterday", "tomorrow"
    - Period starts: "this month", "last month", "this year", "last year"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_period_bounds(year: int, month: int | None = None) -> tuple[date, date]:
    """Get the first and last day of a calendar year or month.

    Args:
        year: Calendar year
        month: Optional month (1-12). If None, the whole year is returned.

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If month is outside 1-12
    """
    if month is None:
        return (date(year, 1, 1), date(year, 12, 31))

    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}. Month must be between 1 and 12")

    last_day = calendar.monthrange(year, month)[1]
    return (date(year, month, 1), date(year, month, last_day))


def get_quarter_bounds(year: int, quarter: int) -> tuple[date, date]:
    """Get the first and last day of a calendar quarter (1-4)."""
    if not 1 <= quarter <= 4:
        raise ValueError(f"Invalid quarter: {quarter}. Quarter must be between 1 and 4")
    first_month = 3 * (quarter - 1) + 1
    start, _ = get_period_bounds(year, first_month)
    _, end = get_period_bounds(year, first_month + 2)
    return (start, end)


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a named reporting period.

    Current periods end today; past periods cover the whole period.

    Args:
        period: One of this-month, last-month, this-quarter, last-quarter,
            this-year, last-year
        today: Reference date, defaults to date.today()

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    quarter = (today.month - 1) // 3 + 1

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "last-month":
        previous = today.replace(day=1) - timedelta(days=1)
        return get_period_bounds(previous.year, previous.month)

    elif period == "this-quarter":
        start, _ = get_quarter_bounds(today.year, quarter)
        return (start, today)

    elif period == "last-quarter":
        if quarter == 1:
            return get_quarter_bounds(today.year - 1, 4)
        return get_quarter_bounds(today.year, quarter - 1)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "last-year":
        return get_period_bounds(today.year - 1)

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
