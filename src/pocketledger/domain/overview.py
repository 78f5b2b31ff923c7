"""Monthly overview (dashboard) service."""

from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import MonthlyOverview, TransactionType
from pocketledger.domain.money import Money
from pocketledger.domain.wallet import WalletService
from pocketledger.utils.date_parser import resolve_month_range

UNCATEGORIZED_LABEL = "Other"


class OverviewService:
    """Service for aggregated monthly figures."""

    def __init__(self, db: Database):
        """Initialize overview service.

        Args:
            db: Database instance
        """
        self.db = db
        self.wallets = WalletService(db)

    def monthly_overview(
        self, user_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> MonthlyOverview:
        """Income, expenses and spending by category for one month.

        The total balance is the current sum over all wallets, not limited
        to the month. Without year/month the current month is used.

        Raises:
            NotFoundError: If the user doesn't exist
            ValidationError: If only one of year/month is given or the month
                is out of range
        """
        if self.db.get_user(user_id) is None:
            raise errors.NotFoundError(errors.user_not_found(user_id))
        try:
            start, end = resolve_month_range(year, month)
        except ValueError as e:
            raise errors.ValidationError(str(e))

        income = Money.zero()
        expense = Money.zero()
        by_category: dict[str, Money] = {}
        for txn in self.db.list_transactions(user_id=user_id, start_date=start, end_date=end):
            if txn.transaction_type is TransactionType.INCOME:
                income += txn.amount
            else:
                expense += txn.amount
                name = txn.category_name or UNCATEGORIZED_LABEL
                by_category[name] = by_category.get(name, Money.zero()) + txn.amount

        return MonthlyOverview(
            period_start=start,
            period_end=end,
            total_balance=self.wallets.total_balance(user_id),
            income=income,
            expense=expense,
            expense_by_category=by_category,
        )
