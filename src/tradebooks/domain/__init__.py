"""Domain layer for tradebooks application."""

# Services import the database layer, which imports entities from this
# package, so they are exposed lazily.
_SERVICES = {
    "AccountService": "tradebooks.domain.account",
    "BalanceService": "tradebooks.domain.balance",
    "InvoiceNumberService": "tradebooks.domain.invoice",
    "PartyService": "tradebooks.domain.party",
    "PostingService": "tradebooks.domain.posting",
    "ReportService": "tradebooks.domain.reports",
    "SystemAccountResolver": "tradebooks.domain.system_accounts",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
