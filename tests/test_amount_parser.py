"""Tests for amount parsing and rounding."""

from decimal import Decimal

import pytest

from tradebooks.utils.amount_parser import parse_amount, to_money


def test_parse_plain_amounts():
    """Test common amount formats."""
    assert parse_amount("123.45") == Decimal("123.45")
    assert parse_amount("1,234.56") == Decimal("1234.56")
    assert parse_amount("₹500") == Decimal("500.00")
    assert parse_amount("-12.5") == Decimal("-12.50")


def test_parse_parenthesized_negative():
    """Test accounting-style negatives."""
    assert parse_amount("(45.00)") == Decimal("-45.00")


def test_parse_rounds_to_cents():
    """Test half-up rounding to two places."""
    assert parse_amount("10.005") == Decimal("10.01")
    assert parse_amount("10.004") == Decimal("10.00")


@pytest.mark.parametrize("value", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_invalid(value):
    """Test values that are not amounts."""
    with pytest.raises(ValueError):
        parse_amount(value)


def test_to_money():
    """Test conversion of mixed inputs to cents."""
    assert to_money(None) == Decimal("0.00")
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(7) == Decimal("7.00")
    assert to_money(Decimal("2.345")) == Decimal("2.35")
