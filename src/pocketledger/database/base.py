"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from pocketledger.domain.entities import (
    User,
    Wallet,
    Category,
    Transaction,
    Budget,
    Group,
    GroupMember,
    GroupExpense,
    TransactionType,
    WalletKind,
    SplitMode,
)
from pocketledger.domain.money import Money


class Database(ABC):
    """Abstract database interface for pocketledger (the ledger store)."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Open a unit of work.

        Writes made inside the scope are committed together when the
        outermost scope exits normally and rolled back when it exits with an
        exception. Nested scopes join the enclosing one.
        """
        pass

    # User operations
    @abstractmethod
    def create_user(self, email: str, name: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    # Wallet operations
    @abstractmethod
    def create_wallet(
        self,
        user_id: int,
        name: str,
        currency: str,
        balance: Money,
        kind: WalletKind = WalletKind.DEBIT,
        bank: Optional[str] = None,
        credit_limit: Money = Money(0),
    ) -> int:
        """Create a wallet. Returns wallet ID."""
        pass

    @abstractmethod
    def get_wallet(self, wallet_id: int) -> Optional[Wallet]:
        """Get wallet by ID."""
        pass

    @abstractmethod
    def list_wallets(self, user_id: int) -> list[Wallet]:
        """List wallets of a user."""
        pass

    @abstractmethod
    def update_wallet(
        self,
        wallet_id: int,
        name: str,
        currency: str,
        balance: Money,
        kind: WalletKind,
        bank: Optional[str],
        credit_limit: Money,
    ) -> None:
        """Overwrite all editable wallet fields, including the balance snapshot."""
        pass

    @abstractmethod
    def apply_wallet_delta(self, wallet_id: int, delta: Money) -> Money:
        """Add a signed delta to a wallet balance. Returns the new balance.

        Raises:
            NotFoundError: If the wallet does not exist
        """
        pass

    @abstractmethod
    def delete_wallet(self, wallet_id: int) -> None:
        """Delete a wallet row."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, user_id: int, name: str, icon: str, category_type: TransactionType
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(
        self, user_id: int, category_type: Optional[TransactionType] = None
    ) -> list[Category]:
        """List categories of a user, optionally filtered by type."""
        pass

    @abstractmethod
    def get_category_transaction_count(self, category_id: int) -> int:
        """Get count of transactions referencing a category."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category row."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: int,
        wallet_id: int,
        category_id: Optional[int],
        transaction_type: TransactionType,
        amount: Money,
        description: str,
        date: date,
    ) -> int:
        """Create a transaction row. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        wallet_id: int,
        category_id: Optional[int],
        transaction_type: TransactionType,
        amount: Money,
        description: str,
        date: Optional[date] = None,
    ) -> None:
        """Overwrite transaction fields. The date is kept when None."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction row."""
        pass

    @abstractmethod
    def delete_wallet_transactions(self, wallet_id: int) -> int:
        """Delete all transactions of a wallet. Returns number deleted."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: Optional[int] = None,
        wallet_id: Optional[int] = None,
        category_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first."""
        pass

    @abstractmethod
    def search_transactions(
        self,
        user_id: int,
        search: str = "",
        transaction_type: Optional[TransactionType] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Transaction], int]:
        """Search a user's transactions by description or category name.

        Returns:
            Tuple of (page of transactions newest first, total matching count)
        """
        pass

    @abstractmethod
    def sum_transactions(
        self,
        user_id: int,
        transaction_type: TransactionType,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Money:
        """Sum transaction amounts matching the filters."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(self, user_id: int, category_id: int, limit: Money) -> int:
        """Create a budget. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def list_budgets(self, user_id: int) -> list[Budget]:
        """List budgets of a user."""
        pass

    @abstractmethod
    def update_budget(self, budget_id: int, category_id: int, limit: Money) -> None:
        """Update budget category and limit."""
        pass

    @abstractmethod
    def delete_budget(self, budget_id: int) -> None:
        """Delete a budget."""
        pass

    @abstractmethod
    def delete_category_budgets(self, category_id: int) -> int:
        """Delete all budgets of a category. Returns number deleted."""
        pass

    # Group operations
    @abstractmethod
    def create_group(self, owner_id: int, name: str, icon: str) -> int:
        """Create a group. Returns group ID."""
        pass

    @abstractmethod
    def get_group(self, group_id: int) -> Optional[Group]:
        """Get group by ID."""
        pass

    @abstractmethod
    def list_groups(self, owner_id: int) -> list[Group]:
        """List groups owned by a user, newest first, with counts."""
        pass

    @abstractmethod
    def delete_group(self, group_id: int) -> None:
        """Delete a group row. Members and expenses must be gone already."""
        pass

    @abstractmethod
    def add_group_member(self, group_id: int, name: str, user_id: Optional[int] = None) -> int:
        """Add a member to a group. Returns member ID."""
        pass

    @abstractmethod
    def list_group_members(self, group_id: int) -> list[GroupMember]:
        """List members of a group ordered by ID."""
        pass

    @abstractmethod
    def delete_group_members(self, group_id: int) -> int:
        """Delete all members of a group. Returns number deleted."""
        pass

    # Group expense operations
    @abstractmethod
    def create_group_expense(
        self,
        group_id: int,
        description: str,
        amount: Money,
        payer_id: int,
        date: date,
        split_mode: SplitMode,
        is_settlement: bool,
    ) -> int:
        """Create a group expense row (without splits). Returns expense ID."""
        pass

    @abstractmethod
    def update_group_expense(
        self,
        expense_id: int,
        description: str,
        amount: Money,
        payer_id: int,
        date: date,
        split_mode: SplitMode,
        is_settlement: bool,
    ) -> None:
        """Overwrite group expense fields."""
        pass

    @abstractmethod
    def get_group_expense(self, expense_id: int) -> Optional[GroupExpense]:
        """Get group expense with its splits."""
        pass

    @abstractmethod
    def list_group_expenses(
        self,
        group_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[GroupExpense]:
        """List group expenses (with splits) in a period, newest first."""
        pass

    @abstractmethod
    def list_group_expense_ids(self, group_id: int) -> list[int]:
        """List IDs of all expenses of a group."""
        pass

    @abstractmethod
    def delete_group_expenses(self, group_id: int) -> int:
        """Delete all expenses of a group. Returns number deleted."""
        pass

    @abstractmethod
    def add_expense_splits(self, expense_id: int, splits: list[tuple[int, Money]]) -> None:
        """Insert (member_id, amount) splits for an expense."""
        pass

    @abstractmethod
    def delete_expense_splits(self, expense_ids: list[int]) -> int:
        """Delete all splits of the given expenses. Returns number deleted."""
        pass
