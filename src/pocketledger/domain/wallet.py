"""Wallet domain service (the wallet ledger)."""

from typing import Optional

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import Wallet as WalletEntity, WalletKind
from pocketledger.domain.money import Money, MoneyLike
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)


class WalletService:
    """Service for managing wallets and their cached balances."""

    def __init__(self, db: Database):
        """Initialize wallet service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_wallet(
        self,
        user_id: int,
        name: str,
        currency: str,
        balance: MoneyLike = 0,
        kind: WalletKind = WalletKind.DEBIT,
        bank: Optional[str] = None,
        credit_limit: MoneyLike = 0,
    ) -> int:
        """Create a wallet with an opening balance.

        Args:
            user_id: Owning user ID
            name: Display name
            currency: Currency code (e.g. "ARS")
            balance: Opening balance (may be negative for credit wallets)
            kind: Wallet kind
            bank: Optional bank name
            credit_limit: Informational credit limit

        Returns:
            Wallet ID

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If name/currency are empty or amounts are invalid
        """
        if self.db.get_user(user_id) is None:
            raise errors.NotFoundError(errors.user_not_found(user_id))
        name, currency = self._validate_labels(name, currency)
        opening = Money.of(balance)
        limit = self._validate_credit_limit(credit_limit)

        wallet_id = self.db.create_wallet(
            user_id=user_id,
            name=name,
            currency=currency,
            balance=opening,
            kind=WalletKind(kind),
            bank=bank,
            credit_limit=limit,
        )
        logger.info("Created wallet %s for user %s with balance %s", wallet_id, user_id, opening)
        return wallet_id

    def get_wallet(self, wallet_id: int) -> Optional[WalletEntity]:
        """Get wallet by ID."""
        return self.db.get_wallet(wallet_id)

    def require_wallet(self, wallet_id: int) -> WalletEntity:
        """Get wallet by ID or raise NotFoundError."""
        wallet = self.db.get_wallet(wallet_id)
        if wallet is None:
            raise errors.NotFoundError(errors.wallet_not_found(wallet_id))
        return wallet

    def list_wallets(self, user_id: int) -> list[WalletEntity]:
        """List wallets of a user."""
        return self.db.list_wallets(user_id)

    def total_balance(self, user_id: int) -> Money:
        """Sum of all wallet balances of a user, regardless of currency."""
        return Money.total(wallet.balance for wallet in self.db.list_wallets(user_id))

    def update_wallet(
        self,
        wallet_id: int,
        name: Optional[str] = None,
        currency: Optional[str] = None,
        balance: Optional[MoneyLike] = None,
        kind: Optional[WalletKind] = None,
        bank: Optional[str] = None,
        credit_limit: Optional[MoneyLike] = None,
    ) -> None:
        """Edit a wallet.

        A given balance is an authoritative reset of the stored snapshot, not
        a delta. Fields left as None keep their current value.

        Raises:
            NotFoundError: If the wallet does not exist
        """
        wallet = self.require_wallet(wallet_id)
        new_name, new_currency = self._validate_labels(
            name if name is not None else wallet.name,
            currency if currency is not None else wallet.currency,
        )
        new_balance = Money.of(balance) if balance is not None else wallet.balance
        new_limit = (
            self._validate_credit_limit(credit_limit)
            if credit_limit is not None
            else wallet.credit_limit
        )

        self.db.update_wallet(
            wallet_id=wallet_id,
            name=new_name,
            currency=new_currency,
            balance=new_balance,
            kind=WalletKind(kind) if kind is not None else wallet.kind,
            bank=bank if bank is not None else wallet.bank,
            credit_limit=new_limit,
        )
        if new_balance != wallet.balance:
            logger.info(
                "Wallet %s balance reset from %s to %s", wallet_id, wallet.balance, new_balance
            )

    def delete_wallet(self, wallet_id: int) -> int:
        """Delete a wallet together with all of its transactions.

        Returns:
            Number of transactions deleted

        Raises:
            NotFoundError: If the wallet does not exist
        """
        self.require_wallet(wallet_id)
        with self.db.transaction():
            deleted = self.db.delete_wallet_transactions(wallet_id)
            self.db.delete_wallet(wallet_id)
        logger.info("Deleted wallet %s and %s transactions", wallet_id, deleted)
        return deleted

    def apply_delta(self, wallet_id: int, signed_amount: Money) -> Money:
        """Add a signed amount to a wallet balance.

        Only journal operations call this, from inside their unit of work.

        Returns:
            New balance

        Raises:
            NotFoundError: If the wallet does not exist
        """
        return self.db.apply_wallet_delta(wallet_id, signed_amount)

    def verify_balance(self, wallet_id: int, opening_balance: MoneyLike) -> bool:
        """Check the cached balance against opening balance plus history."""
        wallet = self.require_wallet(wallet_id)
        history = Money.total(
            txn.signed_amount for txn in self.db.list_transactions(wallet_id=wallet_id)
        )
        return wallet.balance == Money.of(opening_balance) + history

    @staticmethod
    def _validate_labels(name: str, currency: str) -> tuple[str, str]:
        name = name.strip()
        currency = currency.strip().upper()
        if not name:
            raise errors.ValidationError("Wallet name must not be empty")
        if not currency:
            raise errors.ValidationError("Wallet currency must not be empty")
        return name, currency

    @staticmethod
    def _validate_credit_limit(credit_limit: MoneyLike) -> Money:
        limit = Money.of(credit_limit)
        if limit.is_negative():
            raise errors.ValidationError("Credit limit must not be negative")
        return limit
