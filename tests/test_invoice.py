"""Tests for invoice number generation."""

from datetime import date

import pytest

from tradebooks.domain.errors import ValidationError


def test_sequence_within_a_day(invoice_service):
    """Test that numbers increase within one day."""
    day = date(2024, 1, 15)
    assert invoice_service.next_invoice_number("PUR", day) == "PUR-20240115-0001"
    assert invoice_service.next_invoice_number("PUR", day) == "PUR-20240115-0002"
    assert invoice_service.next_invoice_number("PUR", day) == "PUR-20240115-0003"


def test_sequence_restarts_on_new_day(invoice_service):
    """Test that the first number of a new day is 0001."""
    invoice_service.next_invoice_number("SALE", date(2024, 1, 15))
    invoice_service.next_invoice_number("SALE", date(2024, 1, 15))
    assert invoice_service.next_invoice_number("SALE", date(2024, 1, 16)) == "SALE-20240116-0001"


def test_prefixes_are_independent(invoice_service):
    """Test that each prefix has its own counter."""
    day = date(2024, 1, 15)
    invoice_service.next_invoice_number("PUR", day)
    invoice_service.next_invoice_number("PUR", day)
    assert invoice_service.next_invoice_number("SALE", day) == "SALE-20240115-0001"


def test_prefix_is_normalized(invoice_service):
    """Test that prefixes are trimmed and upper-cased."""
    day = date(2024, 1, 15)
    assert invoice_service.next_invoice_number(" pur ", day) == "PUR-20240115-0001"
    assert invoice_service.next_invoice_number("PUR", day) == "PUR-20240115-0002"


def test_empty_prefix(invoice_service):
    """Test that a prefix is required."""
    with pytest.raises(ValidationError, match="prefix"):
        invoice_service.next_invoice_number("  ")


def test_defaults_to_today(invoice_service):
    """Test the default date."""
    number = invoice_service.next_invoice_number("EXP")
    assert number == f"EXP-{date.today():%Y%m%d}-0001"


def test_invoice_next_command(cli_runner, temp_db):
    """Test the invoice next command."""
    from tradebooks.cli.main import cli

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "invoice", "next", "pur"])
    assert result.exit_code == 0
    assert f"PUR-{date.today():%Y%m%d}-0001" in result.output
