"""Utility for resolving user emails to IDs."""

from pocketledger.domain.errors import NotFoundError
from pocketledger.domain.user import UserService


def resolve_user(user_service: UserService, user: str | int) -> int:
    """Resolve user email or ID to user ID.

    Args:
        user_service: UserService instance
        user: User email (str) or ID (int or string representation of int)

    Returns:
        User ID

    Raises:
        NotFoundError: If user is not found
    """
    if isinstance(user, int):
        if user_service.get_user(user) is None:
            raise NotFoundError(f"User ID {user} not found")
        return user

    # Try to parse as integer (handles string IDs like "1")
    try:
        user_id = int(user)
    except (ValueError, TypeError):
        user_id = None
    if user_id is not None:
        if user_service.get_user(user_id) is None:
            raise NotFoundError(f"User ID {user_id} not found")
        return user_id

    found = user_service.get_user_by_email(str(user).strip())
    if found is None:
        raise NotFoundError(f"User '{user}' not found")
    return found.id
