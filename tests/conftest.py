"""Shared pytest fixtures for tradebooks tests."""

import tempfile
import os
import pytest

from tradebooks.database.factories import create_sqlite_database
from tradebooks.domain.account import AccountService
from tradebooks.domain.balance import BalanceService
from tradebooks.domain.invoice import InvoiceNumberService
from tradebooks.domain.party import PartyService
from tradebooks.domain.posting import PostingService
from tradebooks.domain.reports import ReportService
from tradebooks.domain.seed import seed_default_accounts
from tradebooks.domain.system_accounts import SystemAccountResolver


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def resolver(temp_db):
    """System account cache shared by the services below."""
    return SystemAccountResolver(temp_db)


@pytest.fixture
def account_service(temp_db, resolver):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, resolver=resolver)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def invoice_service(temp_db):
    """Create an InvoiceNumberService with a temporary database."""
    return InvoiceNumberService(temp_db)


@pytest.fixture
def party_service(temp_db):
    """Create a PartyService with a temporary database."""
    return PartyService(temp_db)


@pytest.fixture
def posting_service(temp_db, resolver, invoice_service):
    """Create a PostingService with a temporary database."""
    return PostingService(temp_db, resolver=resolver, invoices=invoice_service)


@pytest.fixture
def report_service(temp_db, balance_service, resolver):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db, balances=balance_service, resolver=resolver)


@pytest.fixture
def seeded_chart(account_service):
    """Seed the default chart and return accounts keyed by code."""
    seed_default_accounts(account_service)
    return {acc.code: acc for acc in account_service.list_accounts()}


@pytest.fixture
def supplier(party_service):
    """Create a sample supplier."""
    supplier_id = party_service.create_supplier("Green Farms", phone="555-0101")
    return party_service.get_supplier(supplier_id)


@pytest.fixture
def customer(party_service):
    """Create a sample customer."""
    customer_id = party_service.create_customer("Corner Grocer", phone="555-0202")
    return party_service.get_customer(customer_id)


@pytest.fixture
def item(party_service):
    """Create a sample stock item."""
    item_id = party_service.create_item("Bananas", unit="kg")
    return party_service.get_item(item_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
