"""Domain layer for pocketledger application."""

# Services are imported lazily: database.base imports domain.entities, and the
# services import database.base.
_SERVICES = {
    "UserService": "pocketledger.domain.user",
    "WalletService": "pocketledger.domain.wallet",
    "TransactionService": "pocketledger.domain.transaction",
    "CategoryService": "pocketledger.domain.category",
    "BudgetService": "pocketledger.domain.budget",
    "GroupService": "pocketledger.domain.group",
    "OverviewService": "pocketledger.domain.overview",
    "Advisor": "pocketledger.domain.categorization",
    "CategorizationService": "pocketledger.domain.categorization",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
