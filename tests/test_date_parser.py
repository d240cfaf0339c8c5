"""Tests for date parser with relative dates and accounting periods."""

import pytest
from datetime import date, timedelta
from ledgerkit.utils.date_parser import get_date_range, month_end, parse_date, parse_period


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today_and_yesterday():
    """Test parsing 'today' and 'yesterday'."""
    assert parse_date("today") == date.today()
    assert parse_date(" Yesterday ") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    result = parse_date("last month")
    # Should be first day of last month
    today = date.today()
    if today.month == 1:
        expected = date(today.year - 1, 12, 1)
    else:
        expected = date(today.year, today.month - 1, 1)
    assert result == expected


def test_parse_this_and_last_year():
    today = date.today()
    assert parse_date("this year") == date(today.year, 1, 1)
    assert parse_date("last year") == date(today.year - 1, 1, 1)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_month_end():
    assert month_end(date(2024, 2, 10)) == date(2024, 2, 29)
    assert month_end(date(2025, 12, 1)) == date(2025, 12, 31)


def test_parse_single_month_period():
    assert parse_period("2025-04") == (date(2025, 4, 1), date(2025, 4, 30))
    assert parse_period("2025-2") == (date(2025, 2, 1), date(2025, 2, 28))


def test_parse_month_span_period():
    assert parse_period("2024-11..2025-02") == (date(2024, 11, 1), date(2025, 2, 28))


@pytest.mark.parametrize("period", ["2025", "2025-13", "April", "2025-04..", "2025-05..2025-04"])
def test_parse_invalid_period(period):
    with pytest.raises(ValueError):
        parse_period(period)


def test_get_date_range_this_month():
    """Test get_date_range for this-month."""
    today = date.today()
    start, end = get_date_range("this-month")
    assert start == date(today.year, today.month, 1)
    assert end == today


def test_get_date_range_this_year():
    """Test get_date_range for this-year."""
    today = date.today()
    start, end = get_date_range("this-year")
    assert start == date(today.year, 1, 1)
    assert end == today


def test_get_date_range_last_month():
    """Test get_date_range for last-month."""
    start, end = get_date_range("last-month")
    assert start.day == 1
    assert end == date.today().replace(day=1) - timedelta(days=1)
    assert (start.year, start.month) == (end.year, end.month)


def test_get_date_range_last_year():
    """Test get_date_range for last-year."""
    today = date.today()
    start, end = get_date_range("last-year")
    assert start == date(today.year - 1, 1, 1)
    assert end == date(today.year - 1, 12, 31)


def test_get_date_range_invalid():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
