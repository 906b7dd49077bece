"""Tests for supplier, customer and item management."""

from decimal import Decimal

import pytest

from tradebooks.domain.errors import ConflictError, ValidationError


def test_create_supplier(party_service):
    """Test creating a supplier with a zero balance."""
    supplier_id = party_service.create_supplier("  Green Farms ", phone="555-0101")

    supplier = party_service.get_supplier(supplier_id)
    assert supplier.name == "Green Farms"
    assert supplier.phone == "555-0101"
    assert supplier.balance == Decimal("0")


def test_duplicate_names_rejected(party_service):
    """Test that names are unique regardless of case."""
    party_service.create_supplier("Green Farms")
    party_service.create_customer("Corner Grocer")
    party_service.create_item("Bananas")

    with pytest.raises(ConflictError):
        party_service.create_supplier("GREEN FARMS")
    with pytest.raises(ConflictError):
        party_service.create_customer("corner grocer")
    with pytest.raises(ConflictError):
        party_service.create_item("bananas")


def test_empty_name_rejected(party_service):
    """Test that a name is required."""
    with pytest.raises(ValidationError, match="Name is required"):
        party_service.create_customer("   ")


def test_supplier_and_customer_may_share_a_name(party_service):
    """Test that uniqueness is per kind of party."""
    party_service.create_supplier("Hill Estates")
    party_service.create_customer("Hill Estates")

    assert [s.name for s in party_service.list_suppliers()] == ["Hill Estates"]
    assert [c.name for c in party_service.list_customers()] == ["Hill Estates"]


def test_new_item_has_no_stock(party_service):
    """Test item defaults."""
    item = party_service.get_item(party_service.create_item("Plantains"))
    assert item.unit == "kg"
    assert item.current_stock == Decimal("0")
    assert party_service.get_item(999) is None
