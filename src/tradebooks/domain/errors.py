"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or cycles."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class ProtectedResourceError(DependencyError):
    """Mutation attempted on a protected (seeded or in-use) resource."""


class ConsistencyError(DomainError):
    """Stored ledger data is not in the state an operation requires."""


class ImbalanceError(ConsistencyError):
    """Transaction entries do not satisfy sum(debit) == sum(credit)."""


def operation_failed(operation: str, error: DomainError) -> DomainError:
    """Return a copy of a domain error prefixed with the failing operation."""
    message = f"{operation} failed: {error}"
    if isinstance(error, ValidationError):
        return ValidationError(message, field=error.field)
    return type(error)(message)


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_exists(code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account with code '{code}' already exists"


def parent_type_mismatch(parent_type: str, child_type: str) -> str:
    """Return message when a parent account has a different type."""
    return (
        "Parent and child accounts must have the same type "
        f"(parent: {parent_type}, child: {child_type})"
    )


def seeded_account(account_id: int) -> str:
    """Return message for an attempted change to a system account."""
    return f"Account {account_id} is a system account and cannot be modified or deleted"


def account_delete_blocked(account_id: int, child_count: int, entry_count: int) -> str:
    """Return message when account has children or ledger entries."""
    parts = []
    if child_count > 0:
        parts.append(f"{child_count} child account{'s' if child_count != 1 else ''}")
    if entry_count > 0:
        parts.append(f"{entry_count} ledger entr{'ies' if entry_count != 1 else 'y'}")
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Deactivate it instead."
    )


def system_account_missing(code: str, name: str) -> str:
    """Return message when a required system account is absent."""
    return f"Required system account {name} (code '{code}') not found or inactive"


def record_not_found(kind: str, record_id: int) -> str:
    """Return message for a missing business record."""
    return f"{kind} {record_id} not found"
