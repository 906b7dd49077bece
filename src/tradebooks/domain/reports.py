"""Financial report generation.

All reports are read-only and recomputed from the entry log on every call.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from tradebooks.database.base import Database
from tradebooks.domain.balance import BalanceService, signed_delta
from tradebooks.domain.entities import (
    AccountType,
    AgingItem,
    AgingReport,
    AgingType,
    BalanceSheet,
    BalanceSheetLine,
    CashFlow,
    CashFlowSection,
    PaymentMethod,
    ProfitLoss,
    SystemAccount,
    TransactionType,
    TrialBalance,
    TrialBalanceRow,
)
from tradebooks.domain.errors import ValidationError
from tradebooks.domain.system_accounts import SystemAccountResolver
from tradebooks.utils.amount_parser import ZERO, to_money

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = Decimal("0.01")

CURRENT_EARNINGS_NAME = "Current Period Earnings"
OPENING_BALANCE_EQUITY_NAME = "Opening Balance Equity"

# Investing and financing cash flows are inferred from transaction
# descriptions. Inflows are matched on sale and receipt transactions,
# outflows on expense and payment transactions, case-insensitively.
# A description that happens to contain one of these words is classified
# regardless of what the transaction really was.
CASH_FLOW_KEYWORDS = {
    "investing": {
        "inflow": ("asset sale",),
        "outflow": ("asset purchase",),
    },
    "financing": {
        "inflow": ("loan", "investment", "capital"),
        "outflow": ("loan payment", "dividend", "withdrawal"),
    },
}
INFLOW_TYPES = (TransactionType.SALE, TransactionType.RECEIPT)
OUTFLOW_TYPES = (TransactionType.EXPENSE, TransactionType.PAYMENT)

AGING_BUCKETS = (
    ("current", 30),
    ("days_31_60", 60),
    ("days_61_90", 90),
    ("over_90", None),
)


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return to_money(part / whole * 100)


def _bucket_for(days: int) -> str:
    for name, limit in AGING_BUCKETS:
        if limit is None or days <= limit:
            return name
    raise AssertionError("unreachable")


class ReportService:
    """Service for generating financial reports."""

    def __init__(
        self,
        db: Database,
        balances: Optional[BalanceService] = None,
        resolver: Optional[SystemAccountResolver] = None,
    ):
        """Initialize report service.

        Args:
            db: Database instance
            balances: Balance calculator to reuse
            resolver: System account cache to reuse
        """
        self.db = db
        self.balances = balances or BalanceService(db)
        self.resolver = resolver or SystemAccountResolver(db)

    def trial_balance(self, as_of: Optional[date] = None) -> TrialBalance:
        """Trial balance of every active account.

        Each row carries the raw net of its debits and credits on one side.
        The report balances when both columns agree within BALANCE_TOLERANCE.
        """
        as_of = as_of or date.today()
        totals = self.db.get_all_account_totals(as_of)
        rows = []
        for account in self.db.list_accounts(active_only=True):
            debit, credit = totals.get(account.id, (ZERO, ZERO))
            rows.append(
                TrialBalanceRow(
                    account_id=account.id,
                    code=account.code,
                    name=account.name,
                    account_type=account.account_type,
                    debit_balance=max(ZERO, debit - credit),
                    credit_balance=max(ZERO, credit - debit),
                )
            )

        total_debits = sum((row.debit_balance for row in rows), ZERO)
        total_credits = sum((row.credit_balance for row in rows), ZERO)
        difference = total_debits - total_credits
        if abs(difference) >= BALANCE_TOLERANCE:
            logger.warning("Trial balance as of %s is off by %s", as_of, difference)
        return TrialBalance(
            as_of=as_of,
            rows=tuple(rows),
            total_debits=total_debits,
            total_credits=total_credits,
            difference=difference,
            is_balanced=abs(difference) < BALANCE_TOLERANCE,
        )

    def balance_sheet(self, as_of: Optional[date] = None) -> BalanceSheet:
        """Balance sheet grouped into assets, liabilities and equity.

        Income and expense balances are carried into equity as a single
        current period earnings line. Opening balances have no entries on
        the other side, so their net is shown as opening balance equity.
        Inactive accounts only appear when they still hold a balance.
        """
        as_of = as_of or date.today()
        totals = self.db.get_all_account_totals(as_of)
        groups: dict[AccountType, list[BalanceSheetLine]] = {t: [] for t in AccountType}
        opening_net = ZERO
        for account in self.db.list_accounts():
            if account.account_type.is_debit_normal:
                opening_net += account.opening_balance
            else:
                opening_net -= account.opening_balance
            debit, credit = totals.get(account.id, (ZERO, ZERO))
            balance = account.opening_balance + signed_delta(debit, credit, account.account_type)
            if not account.is_active and balance == 0:
                continue
            groups[account.account_type].append(
                BalanceSheetLine(
                    account_id=account.id,
                    code=account.code,
                    name=account.name,
                    balance=to_money(balance),
                )
            )

        def total(account_type: AccountType) -> Decimal:
            return sum((line.balance for line in groups[account_type]), ZERO)

        earnings = total(AccountType.INCOME) - total(AccountType.EXPENSE)
        equity = list(groups[AccountType.EQUITY])
        if opening_net:
            equity.append(
                BalanceSheetLine(
                    account_id=None,
                    code=None,
                    name=OPENING_BALANCE_EQUITY_NAME,
                    balance=to_money(opening_net),
                )
            )
        if earnings:
            equity.append(
                BalanceSheetLine(account_id=None, code=None, name=CURRENT_EARNINGS_NAME, balance=earnings)
            )

        total_assets = total(AccountType.ASSET)
        total_liabilities = total(AccountType.LIABILITY)
        total_equity = sum((line.balance for line in equity), ZERO)
        return BalanceSheet(
            as_of=as_of,
            assets=tuple(groups[AccountType.ASSET]),
            liabilities=tuple(groups[AccountType.LIABILITY]),
            equity=tuple(equity),
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_equity=total_equity,
            is_balanced=abs(total_assets - (total_liabilities + total_equity)) < BALANCE_TOLERANCE,
        )

    def profit_loss(self, start_date: date, end_date: date) -> ProfitLoss:
        """Profit and loss for a date range, both ends inclusive.

        Revenue is the sum of sale totals and cost of goods sold the sum of
        purchase totals; operating expenses come from expense transactions.
        """
        self._check_range(start_date, end_date)
        revenue = sum(
            (sale.total_amount for sale in self.db.list_sales(start_date, end_date)), ZERO
        )
        cogs = sum(
            (p.total_amount for p in self.db.list_purchases(start_date, end_date)), ZERO
        )
        expenses = sum(
            (
                txn.amount
                for txn in self.db.list_transactions(
                    start_date, end_date, TransactionType.EXPENSE
                )
            ),
            ZERO,
        )
        gross_profit = revenue - cogs
        net_profit = gross_profit - expenses
        return ProfitLoss(
            start_date=start_date,
            end_date=end_date,
            revenue=revenue,
            cost_of_goods_sold=cogs,
            gross_profit=gross_profit,
            operating_expenses=expenses,
            net_profit=net_profit,
            gross_profit_margin=_percent(gross_profit, revenue),
            net_profit_margin=_percent(net_profit, revenue),
        )

    def cash_flow(self, start_date: date, end_date: date) -> CashFlow:
        """Cash flow statement for a date range.

        Operating flow is cash-method receipts minus cash-method payments.
        Investing and financing flows are matched by CASH_FLOW_KEYWORDS.
        Opening and closing cash come from the cash account's balance, so
        the statement only reconciles when all cash movement goes through
        those three sections.
        """
        self._check_range(start_date, end_date)
        receipts = sum(
            (r.amount for r in self.db.list_receipts(start_date, end_date, PaymentMethod.CASH)),
            ZERO,
        )
        payments = sum(
            (p.amount for p in self.db.list_payments(start_date, end_date, PaymentMethod.CASH)),
            ZERO,
        )
        operating = CashFlowSection(inflows=receipts, outflows=payments)

        transactions = self.db.list_transactions(start_date, end_date)

        def matched(activity: str, direction: str) -> Decimal:
            keywords = CASH_FLOW_KEYWORDS[activity][direction]
            types = INFLOW_TYPES if direction == "inflow" else OUTFLOW_TYPES
            return sum(
                (
                    txn.amount
                    for txn in transactions
                    if txn.transaction_type in types
                    and any(k in (txn.description or "").lower() for k in keywords)
                ),
                ZERO,
            )

        investing = CashFlowSection(
            inflows=matched("investing", "inflow"), outflows=matched("investing", "outflow")
        )
        financing = CashFlowSection(
            inflows=matched("financing", "inflow"), outflows=matched("financing", "outflow")
        )
        net_change = operating.net + investing.net + financing.net

        cash = self.resolver.require(SystemAccount.CASH)
        opening_cash = self.balances.get_balance(cash.id, start_date - timedelta(days=1)).balance
        closing_cash = self.balances.get_balance(cash.id, end_date).balance
        return CashFlow(
            start_date=start_date,
            end_date=end_date,
            operating=operating,
            investing=investing,
            financing=financing,
            net_change=net_change,
            opening_cash=opening_cash,
            closing_cash=closing_cash,
            is_reconciled=abs(closing_cash - (opening_cash + net_change)) < BALANCE_TOLERANCE,
        )

    def aging(self, as_of: Optional[date] = None, aging_type: AgingType = AgingType.RECEIVABLE) -> AgingReport:
        """Age receivable debits or payable credits by transaction date.

        Buckets are current (0-30 days), days_31_60, days_61_90 and over_90.
        """
        as_of = as_of or date.today()
        aging_type = AgingType(aging_type)
        if aging_type == AgingType.RECEIVABLE:
            account = self.resolver.require(SystemAccount.ACCOUNTS_RECEIVABLE)
        else:
            account = self.resolver.require(SystemAccount.ACCOUNTS_PAYABLE)

        buckets: dict[str, list[AgingItem]] = {name: [] for name, _ in AGING_BUCKETS}
        for entry in self.db.list_posted_entries(account_id=account.id, end_date=as_of):
            amount = (
                entry.debit_amount if aging_type == AgingType.RECEIVABLE else entry.credit_amount
            )
            if amount <= 0:
                continue
            days = (as_of - entry.date).days
            buckets[_bucket_for(days)].append(
                AgingItem(
                    transaction_id=entry.transaction_id,
                    date=entry.date,
                    party_name=self.db.get_transaction_party_name(entry.transaction_id) or "Unknown",
                    amount=amount,
                    days_outstanding=days,
                )
            )

        totals = {name: sum((i.amount for i in items), ZERO) for name, items in buckets.items()}
        return AgingReport(
            as_of=as_of,
            aging_type=aging_type,
            buckets={name: tuple(items) for name, items in buckets.items()},
            totals=totals,
            grand_total=sum(totals.values(), ZERO),
        )

    @staticmethod
    def _check_range(start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise ValidationError(
                f"Start date {start_date} is after end date {end_date}", field="start_date"
            )
