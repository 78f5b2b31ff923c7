"""Budget domain service.

Spending is derived on every call from EXPENSE transactions; nothing is
cached.
"""

from datetime import date
from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import Budget as BudgetEntity, BudgetProgress, TransactionType
from pocketledger.domain.money import Money, MoneyLike
from pocketledger.utils.date_parser import current_month_range, resolve_month_range
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)


class BudgetService:
    """Service for managing budgets and computing their progress."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_budget(self, user_id: int, category_id: int, limit: MoneyLike) -> int:
        """Create a monthly budget for a category.

        Raises:
            NotFoundError: If the category doesn't exist
            ValidationError: If the limit is not positive
        """
        budget_limit = self._validate_limit(limit)
        self._require_category(category_id)
        budget_id = self.db.create_budget(user_id=user_id, category_id=category_id, limit=budget_limit)
        logger.info("Created budget %s of %s on category %s", budget_id, budget_limit, category_id)
        return budget_id

    def get_budget(self, budget_id: int) -> Optional[BudgetEntity]:
        """Get budget by ID."""
        return self.db.get_budget(budget_id)

    def require_budget(self, budget_id: int) -> BudgetEntity:
        """Get budget by ID or raise NotFoundError."""
        budget = self.db.get_budget(budget_id)
        if budget is None:
            raise errors.NotFoundError(errors.budget_not_found(budget_id))
        return budget

    def update_budget(
        self,
        budget_id: int,
        limit: Optional[MoneyLike] = None,
        category_id: Optional[int] = None,
    ) -> None:
        """Change a budget's limit and/or category."""
        budget = self.require_budget(budget_id)
        new_limit = self._validate_limit(limit) if limit is not None else budget.limit
        new_category_id = category_id if category_id is not None else budget.category_id
        self._require_category(new_category_id)
        self.db.update_budget(budget_id, category_id=new_category_id, limit=new_limit)

    def delete_budget(self, budget_id: int) -> None:
        """Delete a budget."""
        self.require_budget(budget_id)
        self.db.delete_budget(budget_id)

    def compute_progress(
        self,
        user_id: int,
        category_id: int,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> BudgetProgress:
        """Compare a category's budget limit with its spending in a period.

        ``spent`` is the sum of the user's EXPENSE transactions in the
        category dated within [period_start, period_end]. Without an explicit
        period the current calendar month is used. When the user has no
        budget for the category the limit is zero.

        Raises:
            NotFoundError: If the category doesn't exist
            ValidationError: If only one period bound is given or start > end
        """
        category = self._require_category(category_id)
        start, end = self._resolve_period(period_start, period_end)

        budget = next(
            (b for b in self.db.list_budgets(user_id) if b.category_id == category_id), None
        )
        spent = self.db.sum_transactions(
            user_id=user_id,
            transaction_type=TransactionType.EXPENSE,
            category_id=category_id,
            start_date=start,
            end_date=end,
        )
        return BudgetProgress(
            budget_id=budget.id if budget else None,
            category_id=category_id,
            category_name=category.name,
            limit=budget.limit if budget else Money.zero(),
            spent=spent,
            period_start=start,
            period_end=end,
        )

    def list_budget_progress(
        self, user_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[BudgetProgress]:
        """Progress of every budget of a user for one calendar month."""
        try:
            start, end = resolve_month_range(year, month)
        except ValueError as e:
            raise errors.ValidationError(str(e))

        results = []
        for budget in self.db.list_budgets(user_id):
            category = self.db.get_category(budget.category_id)
            spent = self.db.sum_transactions(
                user_id=user_id,
                transaction_type=TransactionType.EXPENSE,
                category_id=budget.category_id,
                start_date=start,
                end_date=end,
            )
            results.append(
                BudgetProgress(
                    budget_id=budget.id,
                    category_id=budget.category_id,
                    category_name=category.name if category else "Unknown",
                    limit=budget.limit,
                    spent=spent,
                    period_start=start,
                    period_end=end,
                )
            )
        return results

    @staticmethod
    def _resolve_period(
        period_start: Optional[date], period_end: Optional[date]
    ) -> tuple[date, date]:
        if period_start is None and period_end is None:
            return current_month_range()
        if period_start is None or period_end is None:
            raise errors.ValidationError("Both period start and end must be given")
        if period_start > period_end:
            raise errors.ValidationError(
                f"Period start {period_start} is after period end {period_end}"
            )
        return period_start, period_end

    @staticmethod
    def _validate_limit(limit: MoneyLike) -> Money:
        value = Money.of(limit)
        if not value.is_positive():
            raise errors.ValidationError(f"Budget limit must be positive, got {value}")
        return value

    def _require_category(self, category_id: int):
        category = self.db.get_category(category_id)
        if category is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))
        return category
