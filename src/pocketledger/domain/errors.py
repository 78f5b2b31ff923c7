"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class PermissionDeniedError(DomainError):
    """Caller is not allowed to perform an owner-only action."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or referenced rows."""


class UnavailableError(DomainError):
    """External advisor service could not produce an answer."""


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def wallet_not_found(wallet_id: int) -> str:
    """Return message for missing wallet."""
    return f"Wallet {wallet_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def budget_not_found(budget_id: int) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def group_not_found(group_id: int) -> str:
    """Return message for missing group."""
    return f"Group {group_id} not found"


def member_not_found(member_id: int, group_id: int) -> str:
    """Return message for a member that is not part of a group."""
    return f"Member {member_id} not found in group {group_id}"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing group expense."""
    return f"Group expense {expense_id} not found"


def category_delete_blocked(category_id: int, transaction_count: int) -> str:
    """Return message when a category still has transactions."""
    return (
        f"Cannot delete category {category_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )
