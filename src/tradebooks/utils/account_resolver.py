"""Utility for resolving account codes to IDs."""

from tradebooks.domain.account import AccountService
from tradebooks.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve an account code or ID to an account ID.

    Chart codes look numeric too ("1111"), so a string is tried as a code
    first and only then as an ID.

    Raises:
        NotFoundError: If no account matches
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise NotFoundError(f"Account ID {account} not found")
        return account

    by_code = account_service.get_account_by_code(account)
    if by_code is not None:
        return by_code.id

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        raise NotFoundError(f"Account '{account}' not found") from None

    if account_service.get_account(account_id) is None:
        raise NotFoundError(f"Account '{account}' not found")
    return account_id
