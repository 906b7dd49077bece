"""SQLAlchemy models for tradebooks database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2, asdecimal=True)
QUANTITY = Numeric(12, 3, asdecimal=True)


class Account(Base):
    """Chart of accounts model with hierarchical structure."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    description = Column(String, nullable=True)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_seeded = Column(Boolean, default=False, nullable=False)
    opening_balance = Column(MONEY, default=0, nullable=False)
    can_debit_on_payment = Column(Boolean, default=False, nullable=False)
    can_credit_on_receipt = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")
    entries = relationship("TransactionEntry", back_populates="account")


class Transaction(Base):
    """Accounting transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    transaction_type = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=True)
    reference_no = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entries = relationship(
        "TransactionEntry",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionEntry.id",
    )


class TransactionEntry(Base):
    """Debit or credit line of a transaction."""

    __tablename__ = "transaction_entries"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit_amount = Column(MONEY, default=0, nullable=False)
    credit_amount = Column(MONEY, default=0, nullable=False)
    description = Column(String, nullable=True)

    # Relationships
    transaction = relationship("Transaction", back_populates="entries")
    account = relationship("Account", back_populates="entries")


class InvoiceCounter(Base):
    """Per-prefix daily invoice sequence."""

    __tablename__ = "invoice_counters"

    id = Column(Integer, primary_key=True)
    prefix = Column(String, unique=True, nullable=False)
    last_number = Column(Integer, default=0, nullable=False)
    last_date = Column(Date, nullable=True)


class Supplier(Base):
    """Supplier model."""

    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=True)
    balance = Column(MONEY, default=0, nullable=False)


class Customer(Base):
    """Customer model."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=True)
    balance = Column(MONEY, default=0, nullable=False)


class Item(Base):
    """Stock item model."""

    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    unit = Column(String, default="kg", nullable=False)
    current_stock = Column(QUANTITY, default=0, nullable=False)


class Purchase(Base):
    """Purchase invoice model."""

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True)
    invoice_no = Column(String, unique=True, nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    date = Column(Date, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    paid_amount = Column(MONEY, default=0, nullable=False)
    balance = Column(MONEY, default=0, nullable=False)
    notes = Column(String, nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    # Relationships
    supplier = relationship("Supplier")
    transaction = relationship("Transaction")
    lines = relationship(
        "PurchaseLine",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseLine.id",
    )


class PurchaseLine(Base):
    """Purchased item line."""

    __tablename__ = "purchase_lines"

    id = Column(Integer, primary_key=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    weight_deduction = Column(QUANTITY, default=0, nullable=False)
    rate = Column(MONEY, nullable=False)
    amount = Column(MONEY, nullable=False)

    # Relationships
    purchase = relationship("Purchase", back_populates="lines")
    item = relationship("Item")


class Sale(Base):
    """Sale invoice model."""

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    invoice_no = Column(String, unique=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    date = Column(Date, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    received_amount = Column(MONEY, default=0, nullable=False)
    balance = Column(MONEY, default=0, nullable=False)
    payment_method = Column(String, nullable=False, default="CASH")
    notes = Column(String, nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    # Relationships
    customer = relationship("Customer")
    transaction = relationship("Transaction")
    lines = relationship(
        "SaleLine",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleLine.id",
    )


class SaleLine(Base):
    """Sold item line."""

    __tablename__ = "sale_lines"

    id = Column(Integer, primary_key=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    rate = Column(MONEY, nullable=False)
    amount = Column(MONEY, nullable=False)

    # Relationships
    sale = relationship("Sale", back_populates="lines")
    item = relationship("Item")


class Payment(Base):
    """Payment to a supplier."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=True)
    payment_method = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    reference = Column(String, nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    # Relationships
    supplier = relationship("Supplier")
    purchase = relationship("Purchase")
    transaction = relationship("Transaction")


class Receipt(Base):
    """Receipt from a customer."""

    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=True)
    payment_method = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    reference = Column(String, nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    # Relationships
    customer = relationship("Customer")
    sale = relationship("Sale")
    transaction = relationship("Transaction")


class Expense(Base):
    """Expense model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    category = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)

    # Relationships
    transaction = relationship("Transaction")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for SQLite connections."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
