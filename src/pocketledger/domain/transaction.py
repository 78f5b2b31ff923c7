"""Transaction domain service (the transaction journal).

Every journal mutation is paired with a wallet balance adjustment inside one
unit of work, so a wallet balance always equals its opening balance plus the
signed sum of the transactions currently recorded against it.
"""

import math
from typing import Optional, Union
from datetime import date as date_type
from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import (
    Transaction as TransactionEntity,
    TransactionPage,
    TransactionType,
)
from pocketledger.domain.money import Money, MoneyLike
from pocketledger.domain.wallet import WalletService
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 10


def parse_transaction_type(value: Union[str, TransactionType]) -> TransactionType:
    """Coerce a string such as "income" to a TransactionType.

    Raises:
        ValidationError: If the value is not INCOME or EXPENSE
    """
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().upper())
    except ValueError:
        raise errors.ValidationError(
            f"Invalid transaction type '{value}'. Expected INCOME or EXPENSE"
        )


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.wallets = WalletService(db)

    def create_transaction(
        self,
        user_id: int,
        wallet_id: int,
        category_id: Optional[int],
        transaction_type: Union[str, TransactionType],
        amount: MoneyLike,
        description: Optional[str] = None,
        date: Optional[date_type] = None,
    ) -> int:
        """Record a transaction and adjust its wallet balance.

        Identical repeated entries are allowed; no duplicate detection is done.

        Args:
            user_id: Owning user ID
            wallet_id: Wallet the money moves in or out of
            category_id: Optional category ID (None means uncategorized)
            transaction_type: INCOME or EXPENSE
            amount: Positive magnitude; the sign comes from the type
            description: Optional description
            date: Occurrence date (defaults to today)

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If wallet or category doesn't exist
            ValidationError: If amount is not positive or type is invalid
        """
        txn_type = parse_transaction_type(transaction_type)
        txn_amount = self._validate_amount(amount)
        self.wallets.require_wallet(wallet_id)
        self._verify_category(category_id)

        with self.db.transaction():
            transaction_id = self.db.create_transaction(
                user_id=user_id,
                wallet_id=wallet_id,
                category_id=category_id,
                transaction_type=txn_type,
                amount=txn_amount,
                description=(description or "").strip(),
                date=date or date_type.today(),
            )
            new_balance = self.wallets.apply_delta(wallet_id, txn_type.signed(txn_amount))

        logger.info(
            "Created %s transaction %s of %s on wallet %s (balance %s)",
            txn_type.value,
            transaction_id,
            txn_amount,
            wallet_id,
            new_balance,
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise errors.NotFoundError(errors.transaction_not_found(transaction_id))
        return txn

    def update_transaction(
        self,
        transaction_id: int,
        wallet_id: int,
        category_id: Optional[int],
        transaction_type: Union[str, TransactionType],
        amount: MoneyLike,
        description: Optional[str] = None,
        date: Optional[date_type] = None,
    ) -> None:
        """Replace a transaction's values and move its balance effect.

        The old effect is reversed on the old wallet before the new effect is
        applied to the (possibly different) new wallet, all in one unit of
        work. The date is kept when not given.

        Raises:
            NotFoundError: If transaction, wallet or category doesn't exist
            ValidationError: If amount is not positive or type is invalid
        """
        old = self.require_transaction(transaction_id)
        txn_type = parse_transaction_type(transaction_type)
        txn_amount = self._validate_amount(amount)
        self.wallets.require_wallet(wallet_id)
        self._verify_category(category_id)

        with self.db.transaction():
            self.wallets.apply_delta(old.wallet_id, -old.signed_amount)
            self.db.update_transaction(
                transaction_id=transaction_id,
                wallet_id=wallet_id,
                category_id=category_id,
                transaction_type=txn_type,
                amount=txn_amount,
                description=(description or "").strip(),
                date=date,
            )
            self.wallets.apply_delta(wallet_id, txn_type.signed(txn_amount))

        logger.info(
            "Updated transaction %s: %s %s on wallet %s -> %s %s on wallet %s",
            transaction_id,
            old.transaction_type.value,
            old.amount,
            old.wallet_id,
            txn_type.value,
            txn_amount,
            wallet_id,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and reverse its balance effect.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.require_transaction(transaction_id)

        with self.db.transaction():
            self.wallets.apply_delta(txn.wallet_id, -txn.signed_amount)
            self.db.delete_transaction(transaction_id)

        logger.info("Deleted transaction %s from wallet %s", transaction_id, txn.wallet_id)

    def list_transactions(
        self,
        user_id: int,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        search: str = "",
        transaction_type: Optional[Union[str, TransactionType]] = None,
    ) -> TransactionPage:
        """List a page of a user's transactions, newest first.

        Args:
            user_id: Owning user ID
            page: 1-based page number
            page_size: Items per page
            search: Case-insensitive substring matched against description
                or category name
            transaction_type: INCOME, EXPENSE, or None/"ALL" for both

        Returns:
            TransactionPage with the items plus total and page counts
        """
        if page < 1:
            raise errors.ValidationError(f"Page must be at least 1, got {page}")
        if page_size < 1:
            raise errors.ValidationError(f"Page size must be at least 1, got {page_size}")

        type_filter = None
        if transaction_type is not None and str(transaction_type).upper() != "ALL":
            type_filter = parse_transaction_type(transaction_type)

        items, total = self.db.search_transactions(
            user_id=user_id,
            search=(search or "").strip(),
            transaction_type=type_filter,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return TransactionPage(
            items=tuple(items),
            total=total,
            total_pages=math.ceil(total / page_size),
            page=page,
            page_size=page_size,
        )

    @staticmethod
    def _validate_amount(amount: MoneyLike) -> Money:
        value = Money.of(amount)
        if not value.is_positive():
            raise errors.ValidationError(f"Amount must be positive, got {value}")
        return value

    def _verify_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.db.get_category(category_id) is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))
