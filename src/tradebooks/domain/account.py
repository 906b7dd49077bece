"""Account domain service."""

import logging
from decimal import Decimal
from typing import Optional, Any

from tradebooks.database.base import Database
from tradebooks.domain.entities import Account as AccountEntity, AccountType, ChartNode
from tradebooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ProtectedResourceError,
    ValidationError,
    account_code_exists,
    account_delete_blocked,
    account_not_found,
    parent_type_mismatch,
    seeded_account,
)
from tradebooks.domain.system_accounts import SystemAccountResolver

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset(
    {
        "code",
        "name",
        "account_type",
        "parent_id",
        "description",
        "is_active",
        "opening_balance",
        "can_debit_on_payment",
        "can_credit_on_receipt",
    }
)


def _coerce_type(account_type) -> AccountType:
    if isinstance(account_type, AccountType):
        return account_type
    try:
        return AccountType(str(account_type).upper())
    except ValueError:
        valid = ", ".join(t.value for t in AccountType)
        raise ValidationError(
            f"Invalid account type '{account_type}'. Must be one of: {valid}",
            field="account_type",
        ) from None


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database, resolver: Optional[SystemAccountResolver] = None):
        """Initialize account service.

        Args:
            db: Database instance
            resolver: System account cache to refresh after chart changes
        """
        self.db = db
        self.resolver = resolver or SystemAccountResolver(db)

    def _require_account(self, account_id: int) -> AccountEntity:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _check_parent(
        self, parent_id: int, account_type: AccountType, account_id: Optional[int] = None
    ) -> None:
        parent = self.db.get_account(parent_id)
        if parent is None:
            raise NotFoundError(f"Parent account {parent_id} not found")
        if parent.account_type != account_type:
            raise ConflictError(parent_type_mismatch(parent.account_type.value, account_type.value))
        if account_id is not None and (
            parent_id == account_id or self.is_descendant(account_id, parent_id)
        ):
            raise ConflictError(
                f"Account {parent_id} cannot be the parent of account {account_id}: "
                "it would create a cycle"
            )

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType | str,
        parent_id: Optional[int] = None,
        description: Optional[str] = None,
        opening_balance: Decimal | int | str = 0,
        is_active: bool = True,
        is_seeded: bool = False,
        can_debit_on_payment: bool = False,
        can_credit_on_receipt: bool = False,
    ) -> int:
        """Create a new account.

        Returns:
            Account ID

        Raises:
            ValidationError: If code, name or type is invalid
            ConflictError: If the code exists or the parent has another type
            NotFoundError: If the parent does not exist
        """
        code = (code or "").strip()
        name = (name or "").strip()
        if not code:
            raise ValidationError("Account code is required", field="code")
        if not name:
            raise ValidationError("Account name is required", field="name")
        account_type = _coerce_type(account_type)

        if self.db.get_account_by_code(code) is not None:
            raise ConflictError(account_code_exists(code))
        if parent_id is not None:
            self._check_parent(parent_id, account_type)

        with self.db.transaction():
            account_id = self.db.create_account(
                code=code,
                name=name,
                account_type=account_type,
                parent_id=parent_id,
                description=description,
                opening_balance=Decimal(str(opening_balance)),
                is_active=is_active,
                is_seeded=is_seeded,
                can_debit_on_payment=can_debit_on_payment,
                can_credit_on_receipt=can_credit_on_receipt,
            )
        self.resolver.refresh()
        logger.info("Created account %s %s (%s)", code, name, account_type.value)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[AccountEntity]:
        """Get account by code."""
        return self.db.get_account_by_code(code)

    def list_accounts(
        self, account_type: Optional[AccountType | str] = None, active_only: bool = False
    ) -> list[AccountEntity]:
        """List accounts ordered by code."""
        if account_type is not None:
            account_type = _coerce_type(account_type)
        return self.db.list_accounts(account_type=account_type, active_only=active_only)

    def update_account(self, account_id: int, **patch: Any) -> AccountEntity:
        """Update an account.

        Args:
            account_id: Account ID
            **patch: Fields to change, any of PATCHABLE_FIELDS

        Returns:
            Updated account

        Raises:
            NotFoundError: If the account does not exist
            ProtectedResourceError: If the account is seeded
            ConflictError: If the change breaks a chart invariant
        """
        account = self._require_account(account_id)
        if account.is_seeded:
            logger.warning("Refused update of seeded account %s", account.code)
            raise ProtectedResourceError(seeded_account(account_id))

        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        fields = dict(patch)
        if "code" in fields:
            code = (fields["code"] or "").strip()
            if not code:
                raise ValidationError("Account code is required", field="code")
            existing = self.db.get_account_by_code(code)
            if existing is not None and existing.id != account_id:
                raise ConflictError(account_code_exists(code))
            fields["code"] = code
        if "name" in fields:
            name = (fields["name"] or "").strip()
            if not name:
                raise ValidationError("Account name is required", field="name")
            fields["name"] = name

        new_type = account.account_type
        if "account_type" in fields:
            new_type = _coerce_type(fields["account_type"])
            fields["account_type"] = new_type
            if new_type != account.account_type:
                if self.db.get_account_entry_count(account_id) > 0:
                    raise ConflictError(
                        f"Cannot change type of account {account_id}: it has ledger entries"
                    )
                for child in self.db.list_accounts():
                    if child.parent_id == account_id and child.account_type != new_type:
                        raise ConflictError(parent_type_mismatch(new_type.value, child.account_type.value))

        parent_id = fields.get("parent_id", account.parent_id)
        if parent_id is not None and ("parent_id" in fields or "account_type" in fields):
            self._check_parent(parent_id, new_type, account_id=account_id)

        if "opening_balance" in fields:
            fields["opening_balance"] = Decimal(str(fields["opening_balance"]))

        with self.db.transaction():
            self.db.update_account(account_id, **fields)
        self.resolver.refresh()
        logger.info("Updated account %s: %s", account.code, ", ".join(sorted(fields)))
        return self._require_account(account_id)

    def delete_account(self, account_id: int, force: bool = False) -> None:
        """Delete an account.

        With force, children are moved to the root of the chart in the same
        unit of work. Accounts with ledger entries are never deleted.

        Raises:
            NotFoundError: If the account does not exist
            ProtectedResourceError: If seeded, in use, or has children without force
        """
        account = self._require_account(account_id)
        if account.is_seeded:
            logger.warning("Refused delete of seeded account %s", account.code)
            raise ProtectedResourceError(seeded_account(account_id))

        child_count = self.db.get_account_child_count(account_id)
        entry_count = self.db.get_account_entry_count(account_id)
        if entry_count > 0 or (child_count > 0 and not force):
            logger.warning("Refused delete of account %s", account.code)
            raise ProtectedResourceError(
                account_delete_blocked(account_id, child_count if not force else 0, entry_count)
            )

        with self.db.transaction():
            if child_count:
                self.db.reparent_children(account_id, None)
            self.db.delete_account(account_id)
        self.resolver.refresh()
        logger.info("Deleted account %s (%d children moved to root)", account.code, child_count)

    def deactivate_account(self, account_id: int) -> None:
        """Mark an account inactive."""
        self._set_active(account_id, False)

    def activate_account(self, account_id: int) -> None:
        """Mark an account active."""
        self._set_active(account_id, True)

    def _set_active(self, account_id: int, is_active: bool) -> None:
        account = self._require_account(account_id)
        if account.is_seeded:
            raise ProtectedResourceError(seeded_account(account_id))
        with self.db.transaction():
            self.db.update_account(account_id, is_active=is_active)
        self.resolver.refresh()

    def is_descendant(self, ancestor_id: int, candidate_id: int) -> bool:
        """Check whether candidate sits below ancestor in the chart.

        Walks parent links upward from the candidate. A walk longer than the
        number of accounts means stored data already holds a cycle.
        """
        parents = {acc.id: acc.parent_id for acc in self.db.list_accounts()}
        current = parents.get(candidate_id)
        steps = 0
        while current is not None:
            if current == ancestor_id:
                return True
            steps += 1
            if steps > len(parents):
                return True
            current = parents.get(current)
        return False

    def get_chart(self) -> list[ChartNode]:
        """Get the chart of accounts as a tree.

        Returns:
            Root nodes ordered by code, each with nested children ordered by code
        """
        accounts = self.db.list_accounts()
        children: dict[Optional[int], list[AccountEntity]] = {}
        known = {acc.id for acc in accounts}
        for acc in accounts:
            parent = acc.parent_id if acc.parent_id in known else None
            children.setdefault(parent, []).append(acc)

        def build(acc: AccountEntity) -> ChartNode:
            return ChartNode(
                account=acc,
                children=tuple(build(child) for child in children.get(acc.id, [])),
            )

        return [build(acc) for acc in children.get(None, [])]
