"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly; services reach this module through the domain package.
from tradebooks.domain.entities import (
    Account,
    AccountType,
    Customer,
    EntryDraft,
    Expense,
    Item,
    Payment,
    PaymentMethod,
    PostedEntry,
    Purchase,
    Receipt,
    Sale,
    Supplier,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for tradebooks."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Unit of work.

        Every write made inside the block commits together when the
        outermost block exits, or is rolled back if any exception escapes.
        Nested blocks join the outer unit.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        parent_id: Optional[int] = None,
        description: Optional[str] = None,
        opening_balance: Decimal = Decimal("0"),
        is_active: bool = True,
        is_seeded: bool = False,
        can_debit_on_payment: bool = False,
        can_credit_on_receipt: bool = False,
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by its unique code."""
        pass

    @abstractmethod
    def list_accounts(
        self, account_type: Optional[AccountType] = None, active_only: bool = False
    ) -> list[Account]:
        """List accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(self, account_id: int, **fields: Any) -> None:
        """Update account columns given as keyword arguments."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account row."""
        pass

    @abstractmethod
    def reparent_children(self, account_id: int, new_parent_id: Optional[int] = None) -> int:
        """Move all children of an account under a new parent. Returns count moved."""
        pass

    @abstractmethod
    def get_account_child_count(self, account_id: int) -> int:
        """Get count of direct child accounts."""
        pass

    @abstractmethod
    def get_account_entry_count(self, account_id: int) -> int:
        """Get count of ledger entries posted to an account."""
        pass

    # Ledger operations
    @abstractmethod
    def create_transaction(
        self,
        transaction_type: TransactionType,
        date: date,
        amount: Decimal,
        entries: Sequence[EntryDraft],
        description: Optional[str] = None,
        reference_no: Optional[str] = None,
    ) -> int:
        """Create a transaction together with its entries. Returns transaction ID.

        Raises:
            ImbalanceError: If entries are empty or debits and credits differ
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction with its entries."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its entries."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """List transactions ordered by date and ID."""
        pass

    @abstractmethod
    def list_posted_entries(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[PostedEntry]:
        """List entries joined with their transaction, oldest first."""
        pass

    @abstractmethod
    def get_account_totals(
        self, account_id: int, as_of: Optional[date] = None
    ) -> tuple[Decimal, Decimal]:
        """Sum of (debit, credit) posted to an account up to a date."""
        pass

    @abstractmethod
    def get_all_account_totals(
        self, as_of: Optional[date] = None
    ) -> dict[int, tuple[Decimal, Decimal]]:
        """Sum of (debit, credit) per account ID up to a date."""
        pass

    @abstractmethod
    def get_transaction_party_name(self, transaction_id: int) -> Optional[str]:
        """Name of the supplier or customer behind a transaction, if any."""
        pass

    # Invoice counter
    @abstractmethod
    def next_invoice_sequence(self, prefix: str, today: date) -> int:
        """Advance the counter for a prefix and return the new number.

        The counter restarts at 1 when its last date differs from today.
        """
        pass

    # Parties and items
    @abstractmethod
    def create_supplier(self, name: str, phone: Optional[str] = None) -> int:
        pass

    @abstractmethod
    def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        pass

    @abstractmethod
    def list_suppliers(self) -> list[Supplier]:
        pass

    @abstractmethod
    def adjust_supplier_balance(self, supplier_id: int, delta: Decimal) -> None:
        pass

    @abstractmethod
    def create_customer(self, name: str, phone: Optional[str] = None) -> int:
        pass

    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[Customer]:
        pass

    @abstractmethod
    def list_customers(self) -> list[Customer]:
        pass

    @abstractmethod
    def adjust_customer_balance(self, customer_id: int, delta: Decimal) -> None:
        pass

    @abstractmethod
    def create_item(self, name: str, unit: str = "kg") -> int:
        pass

    @abstractmethod
    def get_item(self, item_id: int) -> Optional[Item]:
        pass

    @abstractmethod
    def list_items(self) -> list[Item]:
        pass

    @abstractmethod
    def adjust_item_stock(self, item_id: int, delta: Decimal) -> None:
        pass

    # Business records
    @abstractmethod
    def create_purchase(
        self,
        invoice_no: str,
        supplier_id: int,
        date: date,
        total_amount: Decimal,
        paid_amount: Decimal,
        lines: Sequence[dict[str, Any]],
        transaction_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a purchase with its lines.

        Each line dict carries item_id, quantity, weight_deduction, rate and amount.
        """
        pass

    @abstractmethod
    def get_purchase(self, purchase_id: int, for_update: bool = False) -> Optional[Purchase]:
        """Get purchase by ID, re-reading and locking the row if for_update."""
        pass

    @abstractmethod
    def list_purchases(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        supplier_id: Optional[int] = None,
    ) -> list[Purchase]:
        pass

    @abstractmethod
    def adjust_purchase_paid(self, purchase_id: int, delta: Decimal) -> None:
        """Change paid amount and recompute the outstanding balance."""
        pass

    @abstractmethod
    def count_purchase_payments(self, purchase_id: int) -> int:
        pass

    @abstractmethod
    def delete_purchase(self, purchase_id: int) -> None:
        pass

    @abstractmethod
    def create_sale(
        self,
        invoice_no: str,
        customer_id: int,
        date: date,
        total_amount: Decimal,
        received_amount: Decimal,
        payment_method: PaymentMethod,
        lines: Sequence[dict[str, Any]],
        transaction_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a sale with its lines.

        Each line dict carries item_id, quantity, rate and amount.
        """
        pass

    @abstractmethod
    def get_sale(self, sale_id: int, for_update: bool = False) -> Optional[Sale]:
        pass

    @abstractmethod
    def list_sales(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        customer_id: Optional[int] = None,
    ) -> list[Sale]:
        pass

    @abstractmethod
    def adjust_sale_received(self, sale_id: int, delta: Decimal) -> None:
        """Change received amount and recompute the outstanding balance."""
        pass

    @abstractmethod
    def count_sale_receipts(self, sale_id: int) -> int:
        pass

    @abstractmethod
    def delete_sale(self, sale_id: int) -> None:
        pass

    @abstractmethod
    def create_payment(
        self,
        supplier_id: int,
        payment_method: PaymentMethod,
        amount: Decimal,
        date: date,
        purchase_id: Optional[int] = None,
        reference: Optional[str] = None,
        transaction_id: Optional[int] = None,
    ) -> int:
        pass

    @abstractmethod
    def get_payment(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        pass

    @abstractmethod
    def list_payments(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> list[Payment]:
        pass

    @abstractmethod
    def delete_payment(self, payment_id: int) -> None:
        pass

    @abstractmethod
    def create_receipt(
        self,
        customer_id: int,
        payment_method: PaymentMethod,
        amount: Decimal,
        date: date,
        sale_id: Optional[int] = None,
        reference: Optional[str] = None,
        transaction_id: Optional[int] = None,
    ) -> int:
        pass

    @abstractmethod
    def get_receipt(self, receipt_id: int, for_update: bool = False) -> Optional[Receipt]:
        pass

    @abstractmethod
    def list_receipts(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> list[Receipt]:
        pass

    @abstractmethod
    def delete_receipt(self, receipt_id: int) -> None:
        pass

    @abstractmethod
    def create_expense(
        self,
        category: str,
        amount: Decimal,
        date: date,
        description: Optional[str] = None,
        transaction_id: Optional[int] = None,
    ) -> int:
        pass

    @abstractmethod
    def get_expense(self, expense_id: int, for_update: bool = False) -> Optional[Expense]:
        pass

    @abstractmethod
    def list_expenses(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[Expense]:
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        pass
