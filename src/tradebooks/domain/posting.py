"""Ledger posting engine.

Every business event (purchase, sale, payment, receipt, expense) is turned
into exactly one balanced transaction. The business record, its transaction
and entries, and the stock and party balance side effects are written in a
single unit of work, so a failure at any step leaves nothing behind.

Posting rules:

    Purchase  Dr Inventory            Cr Accounts Payable (unpaid), Cash/Bank (paid)
    Sale      Dr Accounts Receivable (unpaid), Cash/Bank (received)
                                      Cr Sales Revenue
    Payment   Dr Accounts Payable     Cr Cash/Bank
    Receipt   Dr Cash/Bank            Cr Accounts Receivable
    Expense   Dr matching expense     Cr Cash

A side whose amount is zero gets no entry. Sales do not reduce item stock.
"""

import logging
from contextlib import contextmanager
from datetime import date as date_type
from decimal import Decimal
from typing import Iterator, Optional, Sequence

from tradebooks.database.base import Database
from tradebooks.domain.entities import (
    Account,
    AccountType,
    EntryDraft,
    Expense,
    Payment,
    PaymentInput,
    PaymentMethod,
    Purchase,
    PurchaseLineInput,
    Receipt,
    Sale,
    SaleLineInput,
    SystemAccount,
    TransactionType,
)
from tradebooks.domain.errors import (
    ConsistencyError,
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
    operation_failed,
    record_not_found,
)
from tradebooks.domain.invoice import InvoiceNumberService
from tradebooks.domain.system_accounts import SystemAccountResolver
from tradebooks.utils.amount_parser import ZERO, to_money

logger = logging.getLogger(__name__)

PURCHASE_PREFIX = "PUR"
SALE_PREFIX = "SALE"


def _quantity(value, field: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except ArithmeticError:
        raise ValidationError(f"Invalid number '{value}'", field=field) from None
    if not number.is_finite():
        raise ValidationError(f"Invalid number '{value}'", field=field)
    return number


def _positive_money(value, field: str) -> Decimal:
    amount = to_money(_quantity(value, field))
    if amount <= 0:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} must be positive", field=field)
    return amount


def _method(value) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(str(value).upper())
    except ValueError:
        valid = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError(
            f"Invalid payment method '{value}'. Must be one of: {valid}", field="payment_method"
        ) from None


class PostingService:
    """Service that posts business events to the ledger."""

    def __init__(
        self,
        db: Database,
        resolver: Optional[SystemAccountResolver] = None,
        invoices: Optional[InvoiceNumberService] = None,
    ):
        """Initialize posting service.

        Args:
            db: Database instance
            resolver: System account cache, shared with AccountService when given
            invoices: Invoice number generator
        """
        self.db = db
        self.resolver = resolver or SystemAccountResolver(db)
        self.invoices = invoices or InvoiceNumberService(db)

    @contextmanager
    def _unit(self, operation: str) -> Iterator[None]:
        """Run a posting in one unit of work, adding context to domain errors."""
        try:
            with self.db.transaction():
                yield
        except DomainError as e:
            logger.warning("%s failed: %s", operation, e)
            raise operation_failed(operation, e) from e

    def _require_transaction(self, transaction_id: Optional[int], kind: str, record_id: int) -> int:
        if transaction_id is None or self.db.get_transaction(transaction_id) is None:
            raise ConsistencyError(
                f"{kind} {record_id} has no ledger transaction (id {transaction_id})"
            )
        return transaction_id

    # Purchases

    def create_purchase(
        self,
        supplier_id: int,
        items: Sequence[PurchaseLineInput],
        payments: Sequence[PaymentInput] = (),
        date: Optional[date_type] = None,
        notes: Optional[str] = None,
    ) -> Purchase:
        """Post a purchase from a supplier.

        Args:
            supplier_id: Supplier ID
            items: Purchased lines
            payments: Payments made at purchase time, grouped per settlement account
            date: Posting date (defaults to today)
            notes: Free-text notes

        Returns:
            The stored purchase

        Raises:
            DomainError: With "Creating purchase failed: ..." context
        """
        date = date or date_type.today()
        with self._unit("Creating purchase"):
            supplier = self.db.get_supplier(supplier_id)
            if supplier is None:
                raise NotFoundError(record_not_found("Supplier", supplier_id))
            if not items:
                raise ValidationError("A purchase needs at least one item", field="items")

            lines = []
            for line in items:
                if self.db.get_item(line.item_id) is None:
                    raise NotFoundError(record_not_found("Item", line.item_id))
                quantity = _quantity(line.quantity, "quantity")
                deduction = _quantity(line.weight_deduction, "weight_deduction")
                rate = to_money(_quantity(line.rate, "rate"))
                if quantity <= 0:
                    raise ValidationError("Quantity must be positive", field="quantity")
                if deduction < 0 or deduction >= quantity:
                    raise ValidationError(
                        "Weight deduction must be at least 0 and less than the quantity",
                        field="weight_deduction",
                    )
                if rate < 0:
                    raise ValidationError("Rate must not be negative", field="rate")
                lines.append(
                    {
                        "item_id": line.item_id,
                        "quantity": quantity,
                        "weight_deduction": deduction,
                        "rate": rate,
                        "amount": to_money((quantity - deduction) * rate),
                    }
                )

            total = sum((line["amount"] for line in lines), ZERO)
            if total <= 0:
                raise ValidationError("Purchase total must be positive", field="items")

            settlements: dict[int, Decimal] = {}
            settlement_accounts: dict[int, Account] = {}
            for payment in payments:
                amount = to_money(_quantity(payment.amount, "paid_amount"))
                if amount < 0:
                    raise ValidationError("Paid amount must not be negative", field="paid_amount")
                if amount == 0:
                    continue
                account = self.resolver.for_payment_method(_method(payment.method))
                settlement_accounts[account.id] = account
                settlements[account.id] = settlements.get(account.id, ZERO) + amount
            paid = sum(settlements.values(), ZERO)
            if paid > total:
                raise ValidationError(
                    f"Paid amount {paid} exceeds purchase total {total}", field="paid_amount"
                )
            unpaid = total - paid

            invoice_no = self.invoices.next_invoice_number(PURCHASE_PREFIX)
            entries = [
                EntryDraft(
                    account_id=self.resolver.require(SystemAccount.INVENTORY).id,
                    debit_amount=total,
                    description=f"Goods purchased, {invoice_no}",
                )
            ]
            if unpaid > 0:
                entries.append(
                    EntryDraft(
                        account_id=self.resolver.require(SystemAccount.ACCOUNTS_PAYABLE).id,
                        credit_amount=unpaid,
                        description=f"Payable to {supplier.name}",
                    )
                )
            for account_id, amount in settlements.items():
                entries.append(
                    EntryDraft(
                        account_id=account_id,
                        credit_amount=amount,
                        description=f"Paid from {settlement_accounts[account_id].name}",
                    )
                )

            transaction_id = self.db.create_transaction(
                transaction_type=TransactionType.PURCHASE,
                date=date,
                amount=total,
                entries=entries,
                description=f"Purchase {invoice_no} from {supplier.name}",
                reference_no=invoice_no,
            )
            purchase_id = self.db.create_purchase(
                invoice_no=invoice_no,
                supplier_id=supplier_id,
                date=date,
                total_amount=total,
                paid_amount=paid,
                lines=lines,
                transaction_id=transaction_id,
                notes=notes,
            )
            for line in lines:
                self.db.adjust_item_stock(line["item_id"], line["quantity"] - line["weight_deduction"])
            if unpaid > 0:
                self.db.adjust_supplier_balance(supplier_id, unpaid)

        logger.info("Posted purchase %s: total %s, paid %s", invoice_no, total, paid)
        return self.db.get_purchase(purchase_id)

    def delete_purchase(self, purchase_id: int) -> None:
        """Reverse and delete a purchase.

        Raises:
            DomainError: With "Deleting purchase failed: ..." context
        """
        with self._unit("Deleting purchase"):
            purchase = self.db.get_purchase(purchase_id, for_update=True)
            if purchase is None:
                raise NotFoundError(record_not_found("Purchase", purchase_id))
            payment_count = self.db.count_purchase_payments(purchase_id)
            if payment_count:
                raise DependencyError(
                    f"Purchase {purchase.invoice_no} has {payment_count} payment(s); "
                    "delete them first"
                )
            transaction_id = self._require_transaction(
                purchase.transaction_id, "Purchase", purchase_id
            )

            for line in purchase.lines:
                self.db.adjust_item_stock(line.item_id, -line.effective_quantity)
            if purchase.balance:
                self.db.adjust_supplier_balance(purchase.supplier_id, -purchase.balance)
            self.db.delete_purchase(purchase_id)
            self.db.delete_transaction(transaction_id)

        logger.info("Reversed purchase %s", purchase.invoice_no)

    # Sales

    def create_sale(
        self,
        customer_id: int,
        items: Sequence[SaleLineInput],
        received_amount: Decimal | int | str = 0,
        payment_method: PaymentMethod | str = PaymentMethod.CASH,
        date: Optional[date_type] = None,
        notes: Optional[str] = None,
    ) -> Sale:
        """Post a sale to a customer.

        Item stock is left unchanged.

        Raises:
            DomainError: With "Creating sale failed: ..." context
        """
        date = date or date_type.today()
        with self._unit("Creating sale"):
            customer = self.db.get_customer(customer_id)
            if customer is None:
                raise NotFoundError(record_not_found("Customer", customer_id))
            if not items:
                raise ValidationError("A sale needs at least one item", field="items")
            method = _method(payment_method)

            lines = []
            for line in items:
                if self.db.get_item(line.item_id) is None:
                    raise NotFoundError(record_not_found("Item", line.item_id))
                quantity = _quantity(line.quantity, "quantity")
                rate = to_money(_quantity(line.rate, "rate"))
                if quantity <= 0:
                    raise ValidationError("Quantity must be positive", field="quantity")
                if rate < 0:
                    raise ValidationError("Rate must not be negative", field="rate")
                lines.append(
                    {
                        "item_id": line.item_id,
                        "quantity": quantity,
                        "rate": rate,
                        "amount": to_money(quantity * rate),
                    }
                )

            total = sum((line["amount"] for line in lines), ZERO)
            if total <= 0:
                raise ValidationError("Sale total must be positive", field="items")
            received = to_money(_quantity(received_amount, "received_amount"))
            if received < 0:
                raise ValidationError("Received amount must not be negative", field="received_amount")
            if received > total:
                raise ValidationError(
                    f"Received amount {received} exceeds sale total {total}",
                    field="received_amount",
                )
            unpaid = total - received

            invoice_no = self.invoices.next_invoice_number(SALE_PREFIX)
            entries = []
            if unpaid > 0:
                entries.append(
                    EntryDraft(
                        account_id=self.resolver.require(SystemAccount.ACCOUNTS_RECEIVABLE).id,
                        debit_amount=unpaid,
                        description=f"Receivable from {customer.name}",
                    )
                )
            if received > 0:
                entries.append(
                    EntryDraft(
                        account_id=self.resolver.for_payment_method(method).id,
                        debit_amount=received,
                        description=f"Received by {method.value}",
                    )
                )
            entries.append(
                EntryDraft(
                    account_id=self.resolver.require(SystemAccount.SALES_REVENUE).id,
                    credit_amount=total,
                    description=f"Goods sold, {invoice_no}",
                )
            )

            transaction_id = self.db.create_transaction(
                transaction_type=TransactionType.SALE,
                date=date,
                amount=total,
                entries=entries,
                description=f"Sale {invoice_no} to {customer.name}",
                reference_no=invoice_no,
            )
            sale_id = self.db.create_sale(
                invoice_no=invoice_no,
                customer_id=customer_id,
                date=date,
                total_amount=total,
                received_amount=received,
                payment_method=method,
                lines=lines,
                transaction_id=transaction_id,
                notes=notes,
            )
            if unpaid > 0:
                self.db.adjust_customer_balance(customer_id, unpaid)

        logger.info("Posted sale %s: total %s, received %s", invoice_no, total, received)
        return self.db.get_sale(sale_id)

    def delete_sale(self, sale_id: int) -> None:
        """Reverse and delete a sale.

        Raises:
            DomainError: With "Deleting sale failed: ..." context
        """
        with self._unit("Deleting sale"):
            sale = self.db.get_sale(sale_id, for_update=True)
            if sale is None:
                raise NotFoundError(record_not_found("Sale", sale_id))
            receipt_count = self.db.count_sale_receipts(sale_id)
            if receipt_count:
                raise DependencyError(
                    f"Sale {sale.invoice_no} has {receipt_count} receipt(s); delete them first"
                )
            transaction_id = self._require_transaction(sale.transaction_id, "Sale", sale_id)

            if sale.balance:
                self.db.adjust_customer_balance(sale.customer_id, -sale.balance)
            self.db.delete_sale(sale_id)
            self.db.delete_transaction(transaction_id)

        logger.info("Reversed sale %s", sale.invoice_no)

    # Payments and receipts

    def create_payment(
        self,
        supplier_id: int,
        amount: Decimal | int | str,
        payment_method: PaymentMethod | str,
        purchase_id: Optional[int] = None,
        date: Optional[date_type] = None,
        reference: Optional[str] = None,
    ) -> Payment:
        """Post a payment to a supplier, optionally against one purchase.

        Raises:
            DomainError: With "Creating payment failed: ..." context
        """
        date = date or date_type.today()
        with self._unit("Creating payment"):
            supplier = self.db.get_supplier(supplier_id)
            if supplier is None:
                raise NotFoundError(record_not_found("Supplier", supplier_id))
            amount = _positive_money(amount, "amount")
            method = _method(payment_method)

            if purchase_id is not None:
                purchase = self.db.get_purchase(purchase_id, for_update=True)
                if purchase is None:
                    raise NotFoundError(record_not_found("Purchase", purchase_id))
                if purchase.supplier_id != supplier_id:
                    raise ValidationError(
                        f"Purchase {purchase.invoice_no} does not belong to supplier {supplier.name}",
                        field="purchase_id",
                    )
                if amount > purchase.balance:
                    raise ValidationError(
                        f"Payment {amount} exceeds outstanding balance {purchase.balance} "
                        f"of purchase {purchase.invoice_no}",
                        field="amount",
                    )

            settlement = self.resolver.for_payment_method(method)
            entries = [
                EntryDraft(
                    account_id=self.resolver.require(SystemAccount.ACCOUNTS_PAYABLE).id,
                    debit_amount=amount,
                    description=f"Paid to {supplier.name}",
                ),
                EntryDraft(
                    account_id=settlement.id,
                    credit_amount=amount,
                    description=f"Paid by {method.value}",
                ),
            ]
            transaction_id = self.db.create_transaction(
                transaction_type=TransactionType.PAYMENT,
                date=date,
                amount=amount,
                entries=entries,
                description=f"Payment to {supplier.name}",
                reference_no=reference,
            )
            payment_id = self.db.create_payment(
                supplier_id=supplier_id,
                payment_method=method,
                amount=amount,
                date=date,
                purchase_id=purchase_id,
                reference=reference,
                transaction_id=transaction_id,
            )
            if purchase_id is not None:
                self.db.adjust_purchase_paid(purchase_id, amount)
            self.db.adjust_supplier_balance(supplier_id, -amount)

        logger.info("Posted payment %s to supplier %s", amount, supplier.name)
        return self.db.get_payment(payment_id)

    def delete_payment(self, payment_id: int) -> None:
        """Reverse and delete a payment."""
        with self._unit("Deleting payment"):
            payment = self.db.get_payment(payment_id, for_update=True)
            if payment is None:
                raise NotFoundError(record_not_found("Payment", payment_id))
            transaction_id = self._require_transaction(
                payment.transaction_id, "Payment", payment_id
            )

            if payment.purchase_id is not None:
                self.db.adjust_purchase_paid(payment.purchase_id, -payment.amount)
            self.db.adjust_supplier_balance(payment.supplier_id, payment.amount)
            self.db.delete_payment(payment_id)
            self.db.delete_transaction(transaction_id)

        logger.info("Reversed payment %s", payment_id)

    def create_receipt(
        self,
        customer_id: int,
        amount: Decimal | int | str,
        payment_method: PaymentMethod | str,
        sale_id: Optional[int] = None,
        date: Optional[date_type] = None,
        reference: Optional[str] = None,
    ) -> Receipt:
        """Post money received from a customer, optionally against one sale.

        Raises:
            DomainError: With "Creating receipt failed: ..." context
        """
        date = date or date_type.today()
        with self._unit("Creating receipt"):
            customer = self.db.get_customer(customer_id)
            if customer is None:
                raise NotFoundError(record_not_found("Customer", customer_id))
            amount = _positive_money(amount, "amount")
            method = _method(payment_method)

            if sale_id is not None:
                sale = self.db.get_sale(sale_id, for_update=True)
                if sale is None:
                    raise NotFoundError(record_not_found("Sale", sale_id))
                if sale.customer_id != customer_id:
                    raise ValidationError(
                        f"Sale {sale.invoice_no} does not belong to customer {customer.name}",
                        field="sale_id",
                    )
                if amount > sale.balance:
                    raise ValidationError(
                        f"Receipt {amount} exceeds outstanding balance {sale.balance} "
                        f"of sale {sale.invoice_no}",
                        field="amount",
                    )

            entries = [
                EntryDraft(
                    account_id=self.resolver.for_payment_method(method).id,
                    debit_amount=amount,
                    description=f"Received by {method.value}",
                ),
                EntryDraft(
                    account_id=self.resolver.require(SystemAccount.ACCOUNTS_RECEIVABLE).id,
                    credit_amount=amount,
                    description=f"Received from {customer.name}",
                ),
            ]
            transaction_id = self.db.create_transaction(
                transaction_type=TransactionType.RECEIPT,
                date=date,
                amount=amount,
                entries=entries,
                description=f"Receipt from {customer.name}",
                reference_no=reference,
            )
            receipt_id = self.db.create_receipt(
                customer_id=customer_id,
                payment_method=method,
                amount=amount,
                date=date,
                sale_id=sale_id,
                reference=reference,
                transaction_id=transaction_id,
            )
            if sale_id is not None:
                self.db.adjust_sale_received(sale_id, amount)
            self.db.adjust_customer_balance(customer_id, -amount)

        logger.info("Posted receipt %s from customer %s", amount, customer.name)
        return self.db.get_receipt(receipt_id)

    def delete_receipt(self, receipt_id: int) -> None:
        """Reverse and delete a receipt."""
        with self._unit("Deleting receipt"):
            receipt = self.db.get_receipt(receipt_id, for_update=True)
            if receipt is None:
                raise NotFoundError(record_not_found("Receipt", receipt_id))
            transaction_id = self._require_transaction(
                receipt.transaction_id, "Receipt", receipt_id
            )

            if receipt.sale_id is not None:
                self.db.adjust_sale_received(receipt.sale_id, -receipt.amount)
            self.db.adjust_customer_balance(receipt.customer_id, receipt.amount)
            self.db.delete_receipt(receipt_id)
            self.db.delete_transaction(transaction_id)

        logger.info("Reversed receipt %s", receipt_id)

    # Expenses

    def find_expense_account(self, category: str) -> Account:
        """Find the active expense account for a category.

        Matching is case-insensitive: exact code, then exact name, then the
        first account (by code) whose name contains the category.

        Raises:
            ValidationError: If no expense account matches
        """
        wanted = (category or "").strip().casefold()
        if not wanted:
            raise ValidationError("Expense category is required", field="category")
        accounts = self.db.list_accounts(account_type=AccountType.EXPENSE, active_only=True)
        for matches in (
            lambda acc: acc.code.casefold() == wanted,
            lambda acc: acc.name.casefold() == wanted,
            lambda acc: wanted in acc.name.casefold(),
        ):
            for account in accounts:
                if matches(account):
                    return account
        raise ValidationError(
            f"No active expense account matches category '{category}'", field="category"
        )

    def create_expense(
        self,
        category: str,
        amount: Decimal | int | str,
        date: Optional[date_type] = None,
        description: Optional[str] = None,
    ) -> Expense:
        """Post a cash expense.

        Raises:
            DomainError: With "Creating expense failed: ..." context
        """
        date = date or date_type.today()
        with self._unit("Creating expense"):
            amount = _positive_money(amount, "amount")
            expense_account = self.find_expense_account(category)
            cash = self.resolver.require(SystemAccount.CASH)
            text = description or f"{expense_account.name}: {category.strip()}"

            transaction_id = self.db.create_transaction(
                transaction_type=TransactionType.EXPENSE,
                date=date,
                amount=amount,
                entries=[
                    EntryDraft(account_id=expense_account.id, debit_amount=amount, description=text),
                    EntryDraft(account_id=cash.id, credit_amount=amount, description=text),
                ],
                description=text,
            )
            expense_id = self.db.create_expense(
                category=category.strip(),
                amount=amount,
                date=date,
                description=description,
                transaction_id=transaction_id,
            )

        logger.info("Posted expense %s to %s", amount, expense_account.code)
        return self.db.get_expense(expense_id)

    def delete_expense(self, expense_id: int) -> None:
        """Reverse and delete an expense."""
        with self._unit("Deleting expense"):
            expense = self.db.get_expense(expense_id, for_update=True)
            if expense is None:
                raise NotFoundError(record_not_found("Expense", expense_id))
            transaction_id = self._require_transaction(
                expense.transaction_id, "Expense", expense_id
            )
            self.db.delete_expense(expense_id)
            self.db.delete_transaction(transaction_id)

        logger.info("Reversed expense %s", expense_id)
