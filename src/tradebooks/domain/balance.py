"""Balance calculation and ledger views."""

from datetime import date
from decimal import Decimal
from typing import Optional

from tradebooks.database.base import Database
from tradebooks.domain.entities import (
    Account,
    AccountBalance,
    AccountType,
    BalanceDescription,
    Ledger,
    LedgerLine,
)
from tradebooks.domain.errors import NotFoundError, account_not_found
from tradebooks.utils.amount_parser import to_money


def signed_delta(debit: Decimal, credit: Decimal, account_type: AccountType) -> Decimal:
    """Effect of a debit/credit pair on a type-signed balance."""
    if AccountType(account_type).is_debit_normal:
        return debit - credit
    return credit - debit


def balance_label(amount: Decimal, account_type: AccountType) -> str:
    """Label a type-signed balance as "Dr" or "Cr".

    A non-negative balance sits on the account's normal side.
    """
    normal, other = ("Dr", "Cr") if AccountType(account_type).is_debit_normal else ("Cr", "Dr")
    return normal if amount >= 0 else other


_DESCRIPTIONS = {
    AccountType.ASSET: ("Available balance", "Overdrawn", "Zero balance"),
    AccountType.LIABILITY: ("Amount owed", "Advance/Credit balance", "No outstanding balance"),
    AccountType.EQUITY: ("Equity balance", "Equity deficit", "Equity balance"),
    AccountType.INCOME: ("Total income", "Negative income", "Total income"),
    AccountType.EXPENSE: ("Total expenses", "Expense credit balance", "Total expenses"),
}


class BalanceService:
    """Service computing account balances from the entry log."""

    def __init__(self, db: Database):
        self.db = db

    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_balance(self, account_id: int, as_of: Optional[date] = None) -> AccountBalance:
        """Get the type-signed balance of an account.

        Args:
            account_id: Account ID
            as_of: Only count transactions dated on or before this day

        Returns:
            Debit and credit totals with balance = opening + signed movement

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self._require_account(account_id)
        debit_total, credit_total = self.db.get_account_totals(account_id, as_of)
        balance = account.opening_balance + signed_delta(
            debit_total, credit_total, account.account_type
        )
        return AccountBalance(
            account_id=account_id,
            account_type=account.account_type,
            debit_total=debit_total,
            credit_total=credit_total,
            opening_balance=account.opening_balance,
            balance=to_money(balance),
        )

    def get_ledger(self, account_id: int, as_of: Optional[date] = None) -> Ledger:
        """Get the ledger of an account with running balances.

        Entries are ordered by (date, transaction, entry). The running
        balance is folded from the opening balance on every call.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self._require_account(account_id)
        running = account.opening_balance
        lines = []
        for entry in self.db.list_posted_entries(account_id=account_id, end_date=as_of):
            running = running + signed_delta(
                entry.debit_amount, entry.credit_amount, account.account_type
            )
            lines.append(
                LedgerLine(
                    entry_id=entry.entry_id,
                    date=entry.date,
                    transaction_id=entry.transaction_id,
                    transaction_type=entry.transaction_type,
                    description=entry.description,
                    debit_amount=entry.debit_amount,
                    credit_amount=entry.credit_amount,
                    running_balance=to_money(running),
                    balance_label=balance_label(running, account.account_type),
                )
            )

        return Ledger(
            account_id=account_id,
            account_name=account.name,
            account_type=account.account_type,
            opening_balance=account.opening_balance,
            entries=tuple(lines),
            closing_balance=to_money(running),
        )

    def describe_balance(self, account_id: int, as_of: Optional[date] = None) -> BalanceDescription:
        """Describe a balance in plain words for display."""
        account = self._require_account(account_id)
        balance = self.get_balance(account_id, as_of).balance
        positive, negative, zero = _DESCRIPTIONS[account.account_type]

        warning = None
        if balance > 0:
            description = positive
        elif balance < 0:
            description = negative
            if account.account_type == AccountType.ASSET:
                warning = "This account is overdrawn"
        else:
            description = zero

        return BalanceDescription(
            account_id=account_id,
            balance=balance,
            absolute_balance=abs(balance),
            balance_label=balance_label(balance, account.account_type),
            has_normal_balance=balance >= 0,
            description=description,
            warning=warning,
        )
