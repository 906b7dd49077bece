"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from tradebooks.utils.date_parser import parse_date, get_date_range


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today_and_yesterday():
    """Test parsing 'today' and 'yesterday'."""
    assert parse_date("today") == date.today()
    assert parse_date("  Yesterday ") == date.today() - timedelta(days=1)


def test_parse_period_starts():
    """Test that period words resolve to the first day of the period."""
    today = date.today()
    assert parse_date("this month") == today.replace(day=1)
    assert parse_date("last month") == (today - relativedelta(months=1)).replace(day=1)
    assert parse_date("this year") == date(today.year, 1, 1)
    assert parse_date("last year") == date(today.year - 1, 1, 1)


def test_parse_invalid():
    """Test that unparseable dates raise ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("gibberish")


def test_get_date_range_this_month():
    """Test this-month runs from the first of the month to today."""
    start, end = get_date_range("this-month")
    assert start == date.today().replace(day=1)
    assert end == date.today()


def test_get_date_range_last_month():
    """Test last-month covers the whole previous month."""
    start, end = get_date_range("last-month")
    assert start.day == 1
    assert end == date.today().replace(day=1) - timedelta(days=1)
    assert start.month == end.month


def test_get_date_range_years():
    """Test this-year and last-year."""
    today = date.today()
    assert get_date_range("this-year") == (date(today.year, 1, 1), today)
    assert get_date_range("last-year") == (date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))


def test_get_date_range_invalid_period():
    """Test an unknown period name."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
