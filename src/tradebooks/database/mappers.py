"""Mapper functions to convert SQLAlchemy models to domain entities.

This layer isolates the conversion logic so that services never hold on to
session-bound ORM objects.
"""

from decimal import Decimal

from tradebooks.domain import entities as domain
from tradebooks.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    TransactionEntry as ORMTransactionEntry,
    Supplier as ORMSupplier,
    Customer as ORMCustomer,
    Item as ORMItem,
    Purchase as ORMPurchase,
    PurchaseLine as ORMPurchaseLine,
    Sale as ORMSale,
    SaleLine as ORMSaleLine,
    Payment as ORMPayment,
    Receipt as ORMReceipt,
    Expense as ORMExpense,
)


def _dec(value) -> Decimal:
    """Normalize a stored numeric (Decimal, float or None) to Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        description=orm_account.description,
        parent_id=orm_account.parent_id,
        is_active=orm_account.is_active,
        is_seeded=orm_account.is_seeded,
        opening_balance=_dec(orm_account.opening_balance),
        can_debit_on_payment=orm_account.can_debit_on_payment,
        can_credit_on_receipt=orm_account.can_credit_on_receipt,
        created_at=orm_account.created_at,
    )


def entry_to_domain(orm_entry: ORMTransactionEntry) -> domain.TransactionEntry:
    """Convert SQLAlchemy TransactionEntry model to domain entity."""
    return domain.TransactionEntry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        account_id=orm_entry.account_id,
        debit_amount=_dec(orm_entry.debit_amount),
        credit_amount=_dec(orm_entry.credit_amount),
        description=orm_entry.description,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        date=orm_transaction.date,
        amount=_dec(orm_transaction.amount),
        description=orm_transaction.description,
        reference_no=orm_transaction.reference_no,
        entries=tuple(entry_to_domain(e) for e in orm_transaction.entries),
        created_at=orm_transaction.created_at,
    )


def supplier_to_domain(orm_supplier: ORMSupplier) -> domain.Supplier:
    return domain.Supplier(
        id=orm_supplier.id,
        name=orm_supplier.name,
        phone=orm_supplier.phone,
        balance=_dec(orm_supplier.balance),
    )


def customer_to_domain(orm_customer: ORMCustomer) -> domain.Customer:
    return domain.Customer(
        id=orm_customer.id,
        name=orm_customer.name,
        phone=orm_customer.phone,
        balance=_dec(orm_customer.balance),
    )


def item_to_domain(orm_item: ORMItem) -> domain.Item:
    return domain.Item(
        id=orm_item.id,
        name=orm_item.name,
        unit=orm_item.unit,
        current_stock=_dec(orm_item.current_stock),
    )


def purchase_line_to_domain(orm_line: ORMPurchaseLine) -> domain.PurchaseLine:
    return domain.PurchaseLine(
        id=orm_line.id,
        item_id=orm_line.item_id,
        quantity=_dec(orm_line.quantity),
        weight_deduction=_dec(orm_line.weight_deduction),
        rate=_dec(orm_line.rate),
        amount=_dec(orm_line.amount),
    )


def purchase_to_domain(orm_purchase: ORMPurchase) -> domain.Purchase:
    """Convert SQLAlchemy Purchase model to domain Purchase entity."""
    return domain.Purchase(
        id=orm_purchase.id,
        invoice_no=orm_purchase.invoice_no,
        supplier_id=orm_purchase.supplier_id,
        date=orm_purchase.date,
        total_amount=_dec(orm_purchase.total_amount),
        paid_amount=_dec(orm_purchase.paid_amount),
        balance=_dec(orm_purchase.balance),
        notes=orm_purchase.notes,
        transaction_id=orm_purchase.transaction_id,
        lines=tuple(purchase_line_to_domain(line) for line in orm_purchase.lines),
    )


def sale_line_to_domain(orm_line: ORMSaleLine) -> domain.SaleLine:
    return domain.SaleLine(
        id=orm_line.id,
        item_id=orm_line.item_id,
        quantity=_dec(orm_line.quantity),
        rate=_dec(orm_line.rate),
        amount=_dec(orm_line.amount),
    )


def sale_to_domain(orm_sale: ORMSale) -> domain.Sale:
    """Convert SQLAlchemy Sale model to domain Sale entity."""
    return domain.Sale(
        id=orm_sale.id,
        invoice_no=orm_sale.invoice_no,
        customer_id=orm_sale.customer_id,
        date=orm_sale.date,
        total_amount=_dec(orm_sale.total_amount),
        received_amount=_dec(orm_sale.received_amount),
        balance=_dec(orm_sale.balance),
        payment_method=domain.PaymentMethod(orm_sale.payment_method),
        notes=orm_sale.notes,
        transaction_id=orm_sale.transaction_id,
        lines=tuple(sale_line_to_domain(line) for line in orm_sale.lines),
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    return domain.Payment(
        id=orm_payment.id,
        supplier_id=orm_payment.supplier_id,
        purchase_id=orm_payment.purchase_id,
        payment_method=domain.PaymentMethod(orm_payment.payment_method),
        amount=_dec(orm_payment.amount),
        date=orm_payment.date,
        reference=orm_payment.reference,
        transaction_id=orm_payment.transaction_id,
    )


def receipt_to_domain(orm_receipt: ORMReceipt) -> domain.Receipt:
    return domain.Receipt(
        id=orm_receipt.id,
        customer_id=orm_receipt.customer_id,
        sale_id=orm_receipt.sale_id,
        payment_method=domain.PaymentMethod(orm_receipt.payment_method),
        amount=_dec(orm_receipt.amount),
        date=orm_receipt.date,
        reference=orm_receipt.reference,
        transaction_id=orm_receipt.transaction_id,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    return domain.Expense(
        id=orm_expense.id,
        category=orm_expense.category,
        amount=_dec(orm_expense.amount),
        date=orm_expense.date,
        description=orm_expense.description,
        transaction_id=orm_expense.transaction_id,
    )
