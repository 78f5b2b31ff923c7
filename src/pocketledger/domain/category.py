"""Category domain service."""

from typing import Optional, Union
from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import Category as CategoryEntity, TransactionType
from pocketledger.domain.transaction import parse_transaction_type
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORY_ICON = "🏷️"


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        user_id: int,
        name: str,
        icon: Optional[str] = None,
        category_type: Union[str, TransactionType] = TransactionType.EXPENSE,
    ) -> int:
        """Create a category.

        Args:
            user_id: Owning user ID
            name: Category name
            icon: Optional icon (emoji)
            category_type: INCOME or EXPENSE

        Returns:
            Category ID

        Raises:
            NotFoundError: If the user doesn't exist
            ValidationError: If the name is empty or the type is invalid
        """
        name = name.strip()
        if not name:
            raise errors.ValidationError("Category name must not be empty")
        if self.db.get_user(user_id) is None:
            raise errors.NotFoundError(errors.user_not_found(user_id))

        return self.db.create_category(
            user_id=user_id,
            name=name,
            icon=icon or DEFAULT_CATEGORY_ICON,
            category_type=parse_transaction_type(category_type),
        )

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def require_category(self, category_id: int) -> CategoryEntity:
        """Get category by ID or raise NotFoundError."""
        category = self.db.get_category(category_id)
        if category is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))
        return category

    def list_categories(
        self,
        user_id: int,
        category_type: Optional[Union[str, TransactionType]] = None,
    ) -> list[CategoryEntity]:
        """List a user's categories, optionally only one type."""
        type_filter = parse_transaction_type(category_type) if category_type is not None else None
        return self.db.list_categories(user_id, category_type=type_filter)

    def delete_category(self, category_id: int) -> None:
        """Delete a category that no transaction references.

        Budgets on the category are removed with it.

        Raises:
            NotFoundError: If the category doesn't exist
            ConflictError: If any transaction references the category
        """
        self.require_category(category_id)

        transaction_count = self.db.get_category_transaction_count(category_id)
        if transaction_count > 0:
            raise errors.ConflictError(
                errors.category_delete_blocked(category_id, transaction_count)
            )

        with self.db.transaction():
            self.db.delete_category_budgets(category_id)
            self.db.delete_category(category_id)
        logger.info("Deleted category %s", category_id)
