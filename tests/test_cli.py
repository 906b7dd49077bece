"""Tests for the business event and report commands."""

import pytest

from tradebooks.cli.main import cli


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def invoke(*args):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])

    return invoke


@pytest.fixture
def books(run):
    """Seeded chart with one supplier, customer and item (all ID 1)."""
    assert run("init-accounts").exit_code == 0
    assert run("supplier", "add", "Green Farms", "--phone", "555-0101").exit_code == 0
    assert run("customer", "add", "Corner Grocer").exit_code == 0
    assert run("item", "add", "Bananas").exit_code == 0
    return run


def test_party_commands(run):
    """Test adding and listing suppliers, customers and items."""
    result = run("supplier", "add", "Green Farms")
    assert result.exit_code == 0
    assert "Created supplier 'Green Farms' (ID: 1)" in result.output

    result = run("supplier", "add", "green farms")
    assert result.exit_code == 1
    assert "Error:" in result.output

    assert "No customers found." in run("customer", "list").output
    run("customer", "add", "Corner Grocer")
    assert "Corner Grocer" in run("customer", "list").output

    result = run("item", "add", "Bananas", "--unit", "dozen")
    assert "Created item 'Bananas' (ID: 1)" in result.output
    assert "dozen" in run("item", "list").output


def test_trading_day(books):
    """Test a day of purchases, sales, receipts and expenses."""
    result = books("purchase", "add", "--supplier", "1", "--item", "1:120:40:2", "--pay", "CASH:1000")
    assert result.exit_code == 0
    assert "Created purchase PUR-" in result.output
    assert "Balance:     3,720.00" in result.output
    assert "3,720.00" in books("supplier", "list").output

    result = books(
        "sale", "add", "--customer", "1", "--item", "1:20:25", "--received", "200", "--method", "upi"
    )
    assert result.exit_code == 0
    assert "Created sale SALE-" in result.output
    assert "Balance:        300.00" in result.output

    result = books("receipt", "add", "--customer", "1", "--amount", "300", "--method", "CASH", "--sale", "1")
    assert result.exit_code == 0
    assert "Created receipt 1: 300.00 by CASH" in result.output

    result = books("expense", "add", "--category", "Rent", "--amount", "150")
    assert result.exit_code == 0
    assert "Created expense 1: 150.00 (Rent)" in result.output

    result = books("account", "balance", "1111")
    assert result.exit_code == 0
    assert "850.00 Cr" in result.output
    assert "Warning: This account is overdrawn" in result.output

    result = books("account", "ledger", "1111")
    assert result.exit_code == 0
    assert "Closing balance" in result.output

    result = books("report", "trial-balance")
    assert result.exit_code == 0
    assert "Balanced" in result.output
    assert "NOT BALANCED" not in result.output

    result = books("report", "balance-sheet")
    assert result.exit_code == 0
    assert "Current Period Earnings" in result.output
    assert "NOT BALANCED" not in result.output

    result = books("report", "profit-loss", "--period", "this-month")
    assert result.exit_code == 0
    assert "Net profit" in result.output

    result = books("report", "aging", "--type", "payable")
    assert result.exit_code == 0
    assert "Green Farms" in result.output


def test_delete_commands(books):
    """Test reversing events in dependency order."""
    books("purchase", "add", "--supplier", "1", "--item", "1:10:100")
    books("payment", "add", "--supplier", "1", "--amount", "100", "--method", "cheque", "--purchase", "1")

    result = books("purchase", "delete", "1")
    assert result.exit_code == 1
    assert "Deleting purchase failed" in result.output

    assert "Deleted payment 1" in books("payment", "delete", "1").output
    result = books("purchase", "delete", "1")
    assert result.exit_code == 0
    assert "Deleted purchase 1" in result.output

    result = books("report", "trial-balance")
    assert "Balanced" in result.output


def test_invalid_input(books):
    """Test that malformed options exit with an error."""
    result = books("purchase", "add", "--supplier", "1", "--item", "1:abc")
    assert result.exit_code == 1
    assert "expected ITEM_ID:QUANTITY:RATE" in result.output

    result = books("purchase", "add", "--supplier", "1", "--item", "1:10:5", "--pay", "GOLD:5")
    assert result.exit_code == 1
    assert "Invalid payment method" in result.output

    result = books("expense", "add", "--category", "Bribes", "--amount", "10")
    assert result.exit_code == 1
    assert "No active expense account" in result.output

    result = books("payment", "add", "--supplier", "1", "--amount", "10", "--method", "barter")
    assert result.exit_code == 2

    result = books("report", "profit-loss", "--period", "this-month", "--start", "2024-01-01")
    assert result.exit_code == 1
    assert "--period cannot be combined" in result.output


def test_posting_without_chart(run):
    """Test that postings fail cleanly before the chart is seeded."""
    run("supplier", "add", "Green Farms")
    run("item", "add", "Bananas")

    result = run("purchase", "add", "--supplier", "1", "--item", "1:10:5")
    assert result.exit_code == 1
    assert "Creating purchase failed" in result.output
