"""Supplier, customer and item service."""

from typing import Optional

from tradebooks.database.base import Database
from tradebooks.domain.entities import Customer, Item, Supplier
from tradebooks.domain.errors import ConflictError, ValidationError


class PartyService:
    """Service for the parties and stock items that postings refer to."""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        return name

    def create_supplier(self, name: str, phone: Optional[str] = None) -> int:
        """Create a supplier with a zero balance.

        Raises:
            ConflictError: If a supplier with the same name exists
        """
        name = self._clean_name(name)
        if any(s.name.lower() == name.lower() for s in self.db.list_suppliers()):
            raise ConflictError(f"Supplier '{name}' already exists")
        with self.db.transaction():
            return self.db.create_supplier(name=name, phone=phone)

    def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        return self.db.get_supplier(supplier_id)

    def list_suppliers(self) -> list[Supplier]:
        return self.db.list_suppliers()

    def create_customer(self, name: str, phone: Optional[str] = None) -> int:
        """Create a customer with a zero balance.

        Raises:
            ConflictError: If a customer with the same name exists
        """
        name = self._clean_name(name)
        if any(c.name.lower() == name.lower() for c in self.db.list_customers()):
            raise ConflictError(f"Customer '{name}' already exists")
        with self.db.transaction():
            return self.db.create_customer(name=name, phone=phone)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self.db.get_customer(customer_id)

    def list_customers(self) -> list[Customer]:
        return self.db.list_customers()

    def create_item(self, name: str, unit: str = "kg") -> int:
        """Create a stock item with zero stock."""
        name = self._clean_name(name)
        if any(i.name.lower() == name.lower() for i in self.db.list_items()):
            raise ConflictError(f"Item '{name}' already exists")
        with self.db.transaction():
            return self.db.create_item(name=name, unit=(unit or "kg").strip())

    def get_item(self, item_id: int) -> Optional[Item]:
        return self.db.get_item(item_id)

    def list_items(self) -> list[Item]:
        return self.db.list_items()
