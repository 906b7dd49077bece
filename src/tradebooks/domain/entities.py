"""Domain model entities for tradebooks.

These are pure data classes representing business concepts, independent of
database schema. Services and reports only ever hand these out, never ORM
objects, so the bookkeeping rules stay testable without a session.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """The five fundamental account types."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @property
    def is_debit_normal(self) -> bool:
        """Asset and expense accounts increase with debits."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)


class TransactionType(str, Enum):
    """Business events that produce a ledger transaction."""

    PURCHASE = "PURCHASE"
    SALE = "SALE"
    PAYMENT = "PAYMENT"
    RECEIPT = "RECEIPT"
    EXPENSE = "EXPENSE"


class PaymentMethod(str, Enum):
    """How money moved. CASH hits the cash account, everything else the bank."""

    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CHEQUE = "CHEQUE"
    UPI = "UPI"
    CARD = "CARD"


class SystemAccount(str, Enum):
    """Accounts the posting rules address directly, valued by chart code."""

    CASH = "1111"
    BANK = "1112"
    ACCOUNTS_RECEIVABLE = "1120"
    INVENTORY = "1130"
    ACCOUNTS_PAYABLE = "2110"
    SALES_REVENUE = "4100"


class AgingType(str, Enum):
    """Which side of the ledger an aging schedule covers."""

    RECEIVABLE = "RECEIVABLE"
    PAYABLE = "PAYABLE"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    code: str
    name: str
    account_type: AccountType
    description: Optional[str]
    parent_id: Optional[int]
    is_active: bool
    is_seeded: bool
    opening_balance: Decimal
    can_debit_on_payment: bool
    can_credit_on_receipt: bool
    created_at: datetime


@dataclass(frozen=True)
class ChartNode:
    """Account with its nested children, as returned by the chart view."""

    account: Account
    children: tuple["ChartNode", ...] = ()


@dataclass(frozen=True)
class TransactionEntry:
    """One debit or credit line of a transaction."""

    id: int
    transaction_id: int
    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    description: Optional[str]


@dataclass(frozen=True)
class EntryDraft:
    """Entry line that has not been persisted yet."""

    account_id: int
    debit_amount: Decimal = Decimal("0")
    credit_amount: Decimal = Decimal("0")
    description: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Balanced accounting event."""

    id: int
    transaction_type: TransactionType
    date: date
    amount: Decimal
    description: Optional[str]
    reference_no: Optional[str]
    entries: tuple[TransactionEntry, ...]
    created_at: datetime


@dataclass(frozen=True)
class PostedEntry:
    """Entry joined with the header fields of its transaction."""

    entry_id: int
    transaction_id: int
    account_id: int
    date: date
    transaction_type: TransactionType
    description: Optional[str]
    debit_amount: Decimal
    credit_amount: Decimal


@dataclass(frozen=True)
class Supplier:
    """Supplier with the amount currently owed to them."""

    id: int
    name: str
    phone: Optional[str]
    balance: Decimal


@dataclass(frozen=True)
class Customer:
    """Customer with the amount they currently owe."""

    id: int
    name: str
    phone: Optional[str]
    balance: Decimal


@dataclass(frozen=True)
class Item:
    """Stock item."""

    id: int
    name: str
    unit: str
    current_stock: Decimal


@dataclass(frozen=True)
class PurchaseLine:
    """Purchased quantity of one item."""

    id: int
    item_id: int
    quantity: Decimal
    weight_deduction: Decimal
    rate: Decimal
    amount: Decimal

    @property
    def effective_quantity(self) -> Decimal:
        return self.quantity - self.weight_deduction


@dataclass(frozen=True)
class Purchase:
    """Purchase invoice from a supplier."""

    id: int
    invoice_no: str
    supplier_id: int
    date: date
    total_amount: Decimal
    paid_amount: Decimal
    balance: Decimal
    notes: Optional[str]
    transaction_id: Optional[int]
    lines: tuple[PurchaseLine, ...]


@dataclass(frozen=True)
class SaleLine:
    """Sold quantity of one item."""

    id: int
    item_id: int
    quantity: Decimal
    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class Sale:
    """Sale invoice to a customer."""

    id: int
    invoice_no: str
    customer_id: int
    date: date
    total_amount: Decimal
    received_amount: Decimal
    balance: Decimal
    payment_method: PaymentMethod
    notes: Optional[str]
    transaction_id: Optional[int]
    lines: tuple[SaleLine, ...]


@dataclass(frozen=True)
class Payment:
    """Money paid to a supplier."""

    id: int
    supplier_id: int
    purchase_id: Optional[int]
    payment_method: PaymentMethod
    amount: Decimal
    date: date
    reference: Optional[str]
    transaction_id: Optional[int]


@dataclass(frozen=True)
class Receipt:
    """Money received from a customer."""

    id: int
    customer_id: int
    sale_id: Optional[int]
    payment_method: PaymentMethod
    amount: Decimal
    date: date
    reference: Optional[str]
    transaction_id: Optional[int]


@dataclass(frozen=True)
class Expense:
    """Operating expense paid in cash."""

    id: int
    category: str
    amount: Decimal
    date: date
    description: Optional[str]
    transaction_id: Optional[int]


# Posting inputs


@dataclass(frozen=True)
class PurchaseLineInput:
    item_id: int
    quantity: Decimal
    rate: Decimal
    weight_deduction: Decimal = Decimal("0")


@dataclass(frozen=True)
class SaleLineInput:
    item_id: int
    quantity: Decimal
    rate: Decimal


@dataclass(frozen=True)
class PaymentInput:
    """Payment made at purchase time."""

    method: PaymentMethod
    amount: Decimal
    reference: Optional[str] = None


# Balance and report results


@dataclass(frozen=True)
class AccountBalance:
    """Type-signed balance of one account."""

    account_id: int
    account_type: AccountType
    debit_total: Decimal
    credit_total: Decimal
    opening_balance: Decimal
    balance: Decimal


@dataclass(frozen=True)
class BalanceDescription:
    """User-facing reading of an account balance."""

    account_id: int
    balance: Decimal
    absolute_balance: Decimal
    balance_label: str
    has_normal_balance: bool
    description: str
    warning: Optional[str] = None


@dataclass(frozen=True)
class LedgerLine:
    """Ledger row annotated with the balance after it."""

    entry_id: int
    date: date
    transaction_id: int
    transaction_type: TransactionType
    description: Optional[str]
    debit_amount: Decimal
    credit_amount: Decimal
    running_balance: Decimal
    balance_label: str


@dataclass(frozen=True)
class Ledger:
    """Account ledger view."""

    account_id: int
    account_name: str
    account_type: AccountType
    opening_balance: Decimal
    entries: tuple[LedgerLine, ...]
    closing_balance: Decimal


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: int
    code: str
    name: str
    account_type: AccountType
    debit_balance: Decimal
    credit_balance: Decimal


@dataclass(frozen=True)
class TrialBalance:
    as_of: date
    rows: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class BalanceSheetLine:
    account_id: Optional[int]
    code: Optional[str]
    name: str
    balance: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    as_of: date
    assets: tuple[BalanceSheetLine, ...]
    liabilities: tuple[BalanceSheetLine, ...]
    equity: tuple[BalanceSheetLine, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class ProfitLoss:
    start_date: date
    end_date: date
    revenue: Decimal
    cost_of_goods_sold: Decimal
    gross_profit: Decimal
    operating_expenses: Decimal
    net_profit: Decimal
    gross_profit_margin: Decimal
    net_profit_margin: Decimal


@dataclass(frozen=True)
class CashFlowSection:
    inflows: Decimal
    outflows: Decimal

    @property
    def net(self) -> Decimal:
        return self.inflows - self.outflows


@dataclass(frozen=True)
class CashFlow:
    start_date: date
    end_date: date
    operating: CashFlowSection
    investing: CashFlowSection
    financing: CashFlowSection
    net_change: Decimal
    opening_cash: Decimal
    closing_cash: Decimal
    is_reconciled: bool


@dataclass(frozen=True)
class AgingItem:
    transaction_id: int
    date: date
    party_name: str
    amount: Decimal
    days_outstanding: int


@dataclass(frozen=True)
class AgingReport:
    as_of: date
    aging_type: AgingType
    buckets: dict[str, tuple[AgingItem, ...]] = field(default_factory=dict)
    totals: dict[str, Decimal] = field(default_factory=dict)
    grand_total: Decimal = Decimal("0")
