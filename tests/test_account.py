"""Tests for the chart of accounts."""

from datetime import date
from decimal import Decimal

import pytest

from tradebooks.cli.main import cli
from tradebooks.domain.entities import AccountType, EntryDraft, SystemAccount, TransactionType
from tradebooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ProtectedResourceError,
    ValidationError,
)
from tradebooks.domain.seed import DEFAULT_ACCOUNTS, seed_default_accounts


def _post(db, debit_account_id, credit_account_id, amount="100.00"):
    """Post a plain two-line transaction directly through the database layer."""
    return db.create_transaction(
        transaction_type=TransactionType.EXPENSE,
        date=date(2024, 1, 10),
        amount=Decimal(amount),
        entries=[
            EntryDraft(account_id=debit_account_id, debit_amount=Decimal(amount)),
            EntryDraft(account_id=credit_account_id, credit_amount=Decimal(amount)),
        ],
    )


class TestCreateAccount:
    """Tests for AccountService.create_account."""

    def test_create_account(self, account_service):
        """Test creating a root account."""
        account_id = account_service.create_account("9000", "Suspense", AccountType.ASSET)
        account = account_service.get_account(account_id)

        assert account.code == "9000"
        assert account.name == "Suspense"
        assert account.account_type == AccountType.ASSET
        assert account.parent_id is None
        assert account.is_active is True
        assert account.is_seeded is False
        assert account.opening_balance == Decimal("0.00")

    def test_type_given_as_enum(self, account_service):
        """Test that enum members are accepted as they are."""
        account_id = account_service.create_account("9000", "Loans", AccountType.LIABILITY)
        assert account_service.get_account(account_id).account_type is AccountType.LIABILITY

    def test_type_given_as_string(self, account_service):
        """Test that account types are accepted case-insensitively."""
        account_id = account_service.create_account("9000", "Suspense", "liability")
        assert account_service.get_account(account_id).account_type == AccountType.LIABILITY

    def test_duplicate_code_rejected(self, account_service):
        """Test that account codes are unique."""
        account_service.create_account("9000", "Suspense", AccountType.ASSET)
        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account("9000", "Other", AccountType.ASSET)

    def test_parent_type_mismatch_rejected(self, account_service):
        """Test that a child must share its parent's type."""
        parent_id = account_service.create_account("9000", "Parent", AccountType.ASSET)
        with pytest.raises(ConflictError, match="same type"):
            account_service.create_account(
                "9100", "Child", AccountType.LIABILITY, parent_id=parent_id
            )

    def test_missing_parent_rejected(self, account_service):
        """Test creating under a parent that does not exist."""
        with pytest.raises(NotFoundError):
            account_service.create_account("9100", "Child", AccountType.ASSET, parent_id=999)

    def test_invalid_type_rejected(self, account_service):
        """Test that unknown account types are a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            account_service.create_account("9000", "Suspense", "REVENUE")
        assert exc_info.value.field == "account_type"

    def test_empty_code_rejected(self, account_service):
        """Test that a blank code is rejected."""
        with pytest.raises(ValidationError):
            account_service.create_account("  ", "Suspense", AccountType.ASSET)


class TestUpdateAccount:
    """Tests for AccountService.update_account."""

    def test_rename(self, account_service):
        """Test renaming an account."""
        account_id = account_service.create_account("9000", "Suspense", AccountType.ASSET)
        updated = account_service.update_account(account_id, name="Clearing")
        assert updated.name == "Clearing"

    def test_seeded_account_cannot_be_updated(self, account_service, seeded_chart):
        """Test that any patch on a seeded account is rejected."""
        cash = seeded_chart["1111"]
        for patch in ({"name": "Till"}, {"description": "x"}, {"is_active": False}):
            with pytest.raises(ProtectedResourceError):
                account_service.update_account(cash.id, **patch)
        assert account_service.get_account(cash.id).name == "Petty Cash"

    def test_duplicate_code_on_update(self, account_service):
        """Test changing a code to one that is taken."""
        account_service.create_account("9000", "First", AccountType.ASSET)
        second_id = account_service.create_account("9001", "Second", AccountType.ASSET)
        with pytest.raises(ConflictError):
            account_service.update_account(second_id, code="9000")

    def test_cycle_rejected(self, account_service):
        """Test that an account cannot move under its own descendant."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        b = account_service.create_account("9100", "B", AccountType.ASSET, parent_id=a)
        c = account_service.create_account("9110", "C", AccountType.ASSET, parent_id=b)

        with pytest.raises(ConflictError, match="cycle"):
            account_service.update_account(a, parent_id=c)
        with pytest.raises(ConflictError, match="cycle"):
            account_service.update_account(a, parent_id=a)

        # Tree is still a forest rooted at A
        chart = account_service.get_chart()
        assert [node.account.id for node in chart] == [a]
        assert account_service.get_account(a).parent_id is None

    def test_reparent(self, account_service):
        """Test moving an account under a sibling."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        b = account_service.create_account("9100", "B", AccountType.ASSET)
        account_service.update_account(b, parent_id=a)
        assert account_service.get_account(b).parent_id == a
        assert account_service.is_descendant(a, b)

    def test_reparent_type_mismatch(self, account_service):
        """Test moving an account under a parent of another type."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        b = account_service.create_account("9100", "B", AccountType.EXPENSE)
        with pytest.raises(ConflictError, match="same type"):
            account_service.update_account(b, parent_id=a)

    def test_type_change_without_entries(self, account_service):
        """Test changing type of an unused account."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        updated = account_service.update_account(a, account_type=AccountType.EXPENSE)
        assert updated.account_type == AccountType.EXPENSE

    def test_type_change_with_entries_rejected(self, temp_db, account_service):
        """Test that an account holding entries keeps its type."""
        a = account_service.create_account("9000", "A", AccountType.EXPENSE)
        b = account_service.create_account("9001", "B", AccountType.ASSET)
        _post(temp_db, a, b)

        with pytest.raises(ConflictError, match="ledger entries"):
            account_service.update_account(a, account_type=AccountType.ASSET)

    def test_type_change_with_mismatched_child_rejected(self, account_service):
        """Test that a type change must keep children consistent."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        account_service.create_account("9100", "B", AccountType.ASSET, parent_id=a)
        with pytest.raises(ConflictError):
            account_service.update_account(a, account_type=AccountType.LIABILITY)

    def test_unknown_field_rejected(self, account_service):
        """Test patching a field that cannot be changed."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        with pytest.raises(ValidationError):
            account_service.update_account(a, is_seeded=True)


class TestDeleteAccount:
    """Tests for AccountService.delete_account."""

    def test_delete_leaf(self, account_service):
        """Test deleting an unused leaf account."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        account_service.delete_account(a)
        assert account_service.get_account(a) is None

    def test_delete_seeded_rejected(self, account_service, seeded_chart):
        """Test that seeded accounts are never deleted, even with force."""
        inventory = seeded_chart["1130"]
        with pytest.raises(ProtectedResourceError):
            account_service.delete_account(inventory.id, force=True)
        assert account_service.get_account(inventory.id) is not None

    def test_delete_with_children_needs_force(self, account_service):
        """Test that children block deletion until force moves them to the root."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        b = account_service.create_account("9100", "B", AccountType.ASSET, parent_id=a)

        with pytest.raises(ProtectedResourceError, match="child account"):
            account_service.delete_account(a)

        account_service.delete_account(a, force=True)
        assert account_service.get_account(a) is None
        assert account_service.get_account(b).parent_id is None

    def test_delete_with_entries_rejected_even_with_force(self, temp_db, account_service):
        """Test that ledger history is never discarded."""
        a = account_service.create_account("9000", "A", AccountType.EXPENSE)
        b = account_service.create_account("9001", "B", AccountType.ASSET)
        _post(temp_db, a, b)

        with pytest.raises(ProtectedResourceError, match="ledger entr"):
            account_service.delete_account(a, force=True)
        assert account_service.get_account(a) is not None

    def test_deactivate_and_activate(self, account_service):
        """Test the soft disable flag."""
        a = account_service.create_account("9000", "A", AccountType.ASSET)
        account_service.deactivate_account(a)
        assert account_service.get_account(a).is_active is False
        assert a not in [acc.id for acc in account_service.list_accounts(active_only=True)]

        account_service.activate_account(a)
        assert account_service.get_account(a).is_active is True


class TestChart:
    """Tests for the chart tree."""

    def test_chart_ordered_by_code(self, account_service):
        """Test that roots and children are ordered by code."""
        expenses = account_service.create_account("5000", "Expenses", AccountType.EXPENSE)
        assets = account_service.create_account("1000", "Assets", AccountType.ASSET)
        account_service.create_account("1200", "Fixed", AccountType.ASSET, parent_id=assets)
        account_service.create_account("1100", "Current", AccountType.ASSET, parent_id=assets)

        chart = account_service.get_chart()
        assert [node.account.id for node in chart] == [assets, expenses]
        assert [child.account.code for child in chart[0].children] == ["1100", "1200"]
        assert chart[1].children == ()

    def test_seeded_chart_structure(self, account_service, seeded_chart):
        """Test the default chart is seeded with its hierarchy."""
        roots = account_service.get_chart()
        assert [node.account.code for node in roots] == ["1000", "2000", "3000", "4000", "5000"]
        assert all(acc.is_seeded for acc in seeded_chart.values())
        assert seeded_chart["1111"].parent_id == seeded_chart["1110"].id
        assert seeded_chart["1111"].can_debit_on_payment
        assert account_service.is_descendant(seeded_chart["1000"].id, seeded_chart["1111"].id)
        assert not account_service.is_descendant(seeded_chart["1111"].id, seeded_chart["1000"].id)

    def test_seeded_types_match_defaults(self, seeded_chart):
        """Test that every default account is created with its enum type."""
        assert len(seeded_chart) == len(DEFAULT_ACCOUNTS)
        for code, _name, account_type, _description, _parent in DEFAULT_ACCOUNTS:
            assert seeded_chart[code].account_type is account_type

    def test_seed_is_idempotent(self, account_service, seeded_chart):
        """Test that seeding twice creates nothing new."""
        assert seed_default_accounts(account_service) == 0
        assert len(account_service.list_accounts()) == len(seeded_chart)

    def test_resolver_sees_new_accounts(self, account_service, resolver):
        """Test that the system account cache refreshes on chart changes."""
        assert resolver.lookup(SystemAccount.CASH) is None
        cash_id = account_service.create_account("1111", "Till", AccountType.ASSET)
        assert resolver.lookup(SystemAccount.CASH) == cash_id


def test_account_create_cli(cli_runner, temp_db):
    """Test creating an account from the command line."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "create", "9000", "Suspense", "--type", "asset"],
    )

    assert result.exit_code == 0
    assert "Created account 9000 'Suspense'" in result.output


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_init_accounts_and_chart(cli_runner, temp_db):
    """Test seeding the chart and showing it as a tree."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "init-accounts"])
    assert result.exit_code == 0
    assert "Created 51 accounts." in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "chart"])
    assert result.exit_code == 0
    assert "1000 Assets [ASSET]" in result.output
    assert "            1111 Petty Cash [ASSET]" in result.output


def test_update_seeded_account_cli(cli_runner, temp_db):
    """Test that the CLI reports protected accounts as errors."""
    cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "init-accounts"])
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "update", "1111", "--name", "Till"]
    )

    assert result.exit_code == 1
    assert "system account" in result.output


def test_delete_account_cli(cli_runner, temp_db):
    """Test deleting an account with --yes."""
    cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "create", "9000", "Suspense", "--type", "ASSET"],
    )
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "9000", "--yes"]
    )

    assert result.exit_code == 0
    assert "Deleted account 9000 'Suspense'" in result.output
