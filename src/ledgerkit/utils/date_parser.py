"""Date parsing utilities for report windows."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "Jan 15 2024", ...) and a few
    relative ones: "today", "yesterday", "this month", "last month",
    "this year", "last year" (the latter four give the first day of the
    period).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if date_str == "today":
        return today
    if date_str == "yesterday":
        return today - timedelta(days=1)

    relative_starts = {
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_starts:
        return relative_starts[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def month_end(day: date) -> date:
    """Last day of the month containing ``day``."""
    return day.replace(day=1) + relativedelta(months=1) - timedelta(days=1)


def parse_month(month_str: str) -> date:
    """Parse "YYYY-MM" into the first day of that month.

    Raises:
        ValueError: If the string is not a valid year-month
    """
    match = _MONTH_RE.match(month_str.strip())
    if match is None:
        raise ValueError(f"Could not parse month '{month_str}', expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}': month must be 1-12")
    return date(year, month, 1)


def parse_period(period_str: str) -> tuple[date, date]:
    """Parse an accounting period span into (start_date, end_date).

    Accepts a single month ("2024-03") or a month span ("2024-01..2024-03");
    the end is the last day of the final month.

    Raises:
        ValueError: If either month cannot be parsed
    """
    first, sep, last = period_str.partition("..")
    start = parse_month(first)
    end = month_end(parse_month(last) if sep else start)
    if start > end:
        raise ValueError(f"Period '{period_str}' ends before it starts")
    return start, end


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, this-year, last-month, last-year

    Returns:
        Tuple of (start_date, end_date); "this" periods end today

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)

    if period == "this-month":
        return month_start, today
    if period == "this-year":
        return year_start, today
    if period == "last-month":
        return month_start - relativedelta(months=1), month_start - timedelta(days=1)
    if period == "last-year":
        return year_start - relativedelta(years=1), year_start - timedelta(days=1)
    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year"
    )
