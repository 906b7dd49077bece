"""Tests for Database interface returning domain models."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from tradebooks.domain import entities
from tradebooks.domain.entities import AccountType, EntryDraft, PaymentMethod, TransactionType
from tradebooks.domain.errors import NotFoundError


def _two_accounts(db):
    cash = db.create_account(code="1111", name="Cash", account_type=AccountType.ASSET)
    sales = db.create_account(code="4100", name="Sales", account_type=AccountType.INCOME)
    return cash, sales


def _post(db, debit_id, credit_id, amount, on, description=None):
    return db.create_transaction(
        transaction_type=TransactionType.SALE,
        date=on,
        amount=Decimal(amount),
        entries=[
            EntryDraft(account_id=debit_id, debit_amount=Decimal(amount)),
            EntryDraft(account_id=credit_id, credit_amount=Decimal(amount)),
        ],
        description=description,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        """Test that get_account returns a domain Account entity."""
        account_id = temp_db.create_account(
            code="1000", name="Assets", account_type=AccountType.ASSET, opening_balance=Decimal("12.5")
        )

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.code == "1000"
        assert account.account_type == AccountType.ASSET
        assert account.opening_balance == Decimal("12.50")
        assert account.is_active
        assert not account.is_seeded
        assert isinstance(account.created_at, datetime)
        assert temp_db.get_account_by_code("1000") == account

    def test_list_accounts_ordered_by_code(self, temp_db):
        """Test that accounts are listed by code and can be filtered."""
        temp_db.create_account(code="4100", name="Sales", account_type=AccountType.INCOME)
        temp_db.create_account(code="1111", name="Cash", account_type=AccountType.ASSET)

        assert [a.code for a in temp_db.list_accounts()] == ["1111", "4100"]
        assert [a.code for a in temp_db.list_accounts(account_type=AccountType.INCOME)] == ["4100"]

    def test_transaction_returns_entries(self, temp_db):
        """Test that get_transaction returns the header with its entries."""
        cash, sales = _two_accounts(temp_db)
        txn_id = _post(temp_db, cash, sales, "25.10", date(2024, 1, 5), "Counter sale")

        txn = temp_db.get_transaction(txn_id)
        assert isinstance(txn, entities.Transaction)
        assert txn.transaction_type == TransactionType.SALE
        assert txn.amount == Decimal("25.10")
        assert len(txn.entries) == 2
        assert all(isinstance(e, entities.TransactionEntry) for e in txn.entries)

    def test_delete_transaction_removes_entries(self, temp_db):
        """Test that deleting a transaction takes its entries with it."""
        cash, sales = _two_accounts(temp_db)
        txn_id = _post(temp_db, cash, sales, "10", date(2024, 1, 5))

        temp_db.delete_transaction(txn_id)

        assert temp_db.get_transaction(txn_id) is None
        assert temp_db.get_account_entry_count(cash) == 0
        assert temp_db.get_account_totals(cash) == (Decimal("0.00"), Decimal("0.00"))

    def test_account_totals(self, temp_db):
        """Test per-account debit and credit sums with an as-of cutoff."""
        cash, sales = _two_accounts(temp_db)
        _post(temp_db, cash, sales, "10", date(2024, 1, 5))
        _post(temp_db, cash, sales, "15", date(2024, 2, 5))

        assert temp_db.get_account_totals(cash) == (Decimal("25.00"), Decimal("0.00"))
        assert temp_db.get_account_totals(cash, date(2024, 1, 31)) == (Decimal("10.00"), Decimal("0.00"))
        totals = temp_db.get_all_account_totals()
        assert totals[sales] == (Decimal("0.00"), Decimal("25.00"))

    def test_posted_entries_order(self, temp_db):
        """Test that posted entries come out by date, then transaction."""
        cash, sales = _two_accounts(temp_db)
        late = _post(temp_db, cash, sales, "1", date(2024, 3, 1), "late")
        early = _post(temp_db, cash, sales, "2", date(2024, 1, 1), "early")

        entries = temp_db.list_posted_entries(account_id=cash)
        assert [e.transaction_id for e in entries] == [early, late]
        assert [e.description for e in entries] == ["early", "late"]
        assert isinstance(entries[0], entities.PostedEntry)

    def test_party_name_lookup(self, temp_db):
        """Test resolving the party behind a transaction."""
        cash, sales = _two_accounts(temp_db)
        customer_id = temp_db.create_customer("Corner Grocer")
        txn_id = _post(temp_db, cash, sales, "5", date(2024, 1, 1))
        temp_db.create_receipt(
            customer_id=customer_id,
            payment_method=PaymentMethod.CASH,
            amount=Decimal("5"),
            date=date(2024, 1, 1),
            transaction_id=txn_id,
        )
        other = _post(temp_db, cash, sales, "5", date(2024, 1, 1))

        assert temp_db.get_transaction_party_name(txn_id) == "Corner Grocer"
        assert temp_db.get_transaction_party_name(other) is None

    def test_update_missing_account(self, temp_db):
        """Test updating an account that does not exist."""
        with pytest.raises(NotFoundError):
            temp_db.update_account(404, name="Nothing")


class TestUnitOfWork:
    """Tests for Database.transaction."""

    def test_commit_on_success(self, temp_db):
        """Test that writes inside the block persist."""
        with temp_db.transaction():
            temp_db.create_supplier("Green Farms")
            temp_db.create_customer("Corner Grocer")

        assert [s.name for s in temp_db.list_suppliers()] == ["Green Farms"]
        assert [c.name for c in temp_db.list_customers()] == ["Corner Grocer"]

    def test_rollback_on_error(self, temp_db):
        """Test that an exception discards every write in the block."""
        with pytest.raises(RuntimeError):
            with temp_db.transaction():
                supplier_id = temp_db.create_supplier("Green Farms")
                temp_db.adjust_supplier_balance(supplier_id, Decimal("100"))
                raise RuntimeError("boom")

        assert temp_db.list_suppliers() == []

    def test_nested_blocks_join_outer(self, temp_db):
        """Test that an inner block does not commit on its own."""
        with pytest.raises(RuntimeError):
            with temp_db.transaction():
                with temp_db.transaction():
                    temp_db.create_item("Bananas")
                raise RuntimeError("boom")

        assert temp_db.list_items() == []

    def test_balance_adjustments(self, temp_db):
        """Test relative updates of party balances and stock."""
        supplier_id = temp_db.create_supplier("Green Farms")
        item_id = temp_db.create_item("Bananas")

        temp_db.adjust_supplier_balance(supplier_id, Decimal("100"))
        temp_db.adjust_supplier_balance(supplier_id, Decimal("-40"))
        temp_db.adjust_item_stock(item_id, Decimal("12.5"))

        assert temp_db.get_supplier(supplier_id).balance == Decimal("60.00")
        assert temp_db.get_item(item_id).current_stock == Decimal("12.5")


class TestListings:
    """Tests for business record listings."""

    def test_expenses_listed_newest_first(self, temp_db):
        """Test expense listing order and date filtering."""
        older = temp_db.create_expense(category="Rent", amount=Decimal("10"), date=date(2024, 1, 1))
        newer = temp_db.create_expense(category="Rent", amount=Decimal("20"), date=date(2024, 2, 1))

        assert [e.id for e in temp_db.list_expenses()] == [newer, older]
        assert [e.id for e in temp_db.list_expenses(end_date=date(2024, 1, 31))] == [older]
