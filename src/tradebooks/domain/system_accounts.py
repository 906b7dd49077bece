"""Resolution of the accounts that posting rules address by role."""

import logging
from typing import Optional

from tradebooks.database.base import Database
from tradebooks.domain.entities import Account, PaymentMethod, SystemAccount
from tradebooks.domain.errors import ConsistencyError, system_account_missing

logger = logging.getLogger(__name__)


class SystemAccountResolver:
    """Maps SystemAccount roles to account IDs.

    The code -> id map is cached and dropped by refresh() whenever the chart
    changes. Posting calls require(), which always re-reads the account so a
    deactivated or deleted system account is caught inside the unit of work.
    """

    def __init__(self, db: Database):
        self.db = db
        self._ids: Optional[dict[SystemAccount, int]] = None

    def refresh(self) -> None:
        """Drop the cached map; the next lookup reloads it."""
        self._ids = None

    def _load(self) -> dict[SystemAccount, int]:
        if self._ids is None:
            ids = {}
            for role in SystemAccount:
                account = self.db.get_account_by_code(role.value)
                if account is not None:
                    ids[role] = account.id
            self._ids = ids
            logger.debug("Loaded %d system accounts", len(ids))
        return self._ids

    def lookup(self, role: SystemAccount) -> Optional[int]:
        """Cached account ID for a role, or None if the chart lacks it."""
        return self._load().get(role)

    def require(self, role: SystemAccount) -> Account:
        """Return the active account for a role.

        Raises:
            ConsistencyError: If the account is missing or inactive
        """
        account_id = self.lookup(role)
        account = self.db.get_account(account_id) if account_id is not None else None
        if account is None or account.code != role.value:
            # Cache may be stale; retry once by code.
            self.refresh()
            account = self.db.get_account_by_code(role.value)
        if account is None or not account.is_active:
            raise ConsistencyError(system_account_missing(role.value, role.name))
        return account

    def for_payment_method(self, method: PaymentMethod) -> Account:
        """CASH settles through the cash account, every other method the bank."""
        if PaymentMethod(method) == PaymentMethod.CASH:
            return self.require(SystemAccount.CASH)
        return self.require(SystemAccount.BANK)
