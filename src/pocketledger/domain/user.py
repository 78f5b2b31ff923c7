"""User domain service."""

from typing import Optional

from pocketledger import config
from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import TransactionType, User as UserEntity, WalletKind
from pocketledger.domain.money import Money
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_WALLET_NAME = "Cash"

# (name, type, icon) seeded for every new user
DEFAULT_CATEGORIES = [
    ("Salary", TransactionType.INCOME, "💰"),
    ("Food", TransactionType.EXPENSE, "🍕"),
    ("Transport", TransactionType.EXPENSE, "🚗"),
    ("Utilities", TransactionType.EXPENSE, "⚡"),
    ("Leisure", TransactionType.EXPENSE, "🙂"),
]


class UserService:
    """Service for registering and looking up users."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def register(self, email: str, name: str, currency: Optional[str] = None) -> int:
        """Register a user with a starter wallet and default categories.

        Args:
            email: Unique email address
            name: Display name
            currency: Currency code of the starter wallet (defaults to
                the configured default currency)

        Returns:
            User ID

        Raises:
            ValidationError: If email or name is empty
            ConflictError: If the email is already registered
        """
        email = email.strip()
        name = name.strip()
        if not email or "@" not in email:
            raise errors.ValidationError(f"Invalid email '{email}'")
        if not name:
            raise errors.ValidationError("Name must not be empty")
        if self.db.get_user_by_email(email) is not None:
            raise errors.ConflictError(f"Email '{email}' is already registered")

        currency = (currency or config.DEFAULT_CURRENCY).upper()

        with self.db.transaction():
            user_id = self.db.create_user(email=email, name=name)
            self.db.create_wallet(
                user_id=user_id,
                name=DEFAULT_WALLET_NAME,
                currency=currency,
                balance=Money.zero(),
                kind=WalletKind.CASH,
            )
            for category_name, category_type, icon in DEFAULT_CATEGORIES:
                self.db.create_category(
                    user_id=user_id, name=category_name, icon=icon, category_type=category_type
                )

        logger.info("Registered user %s (%s)", user_id, email)
        return user_id

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Get user by ID."""
        return self.db.get_user(user_id)

    def get_user_by_email(self, email: str) -> Optional[UserEntity]:
        """Get user by email."""
        return self.db.get_user_by_email(email)

    def require_user(self, user_id: int) -> UserEntity:
        """Get user by ID or raise NotFoundError."""
        user = self.db.get_user(user_id)
        if user is None:
            raise errors.NotFoundError(errors.user_not_found(user_id))
        return user

    def list_users(self) -> list[UserEntity]:
        """List all users."""
        return self.db.list_users()
