"""Domain model entities for pocketledger.

These are pure data classes representing business concepts, independent of
database schema. Monetary fields use the Money type; the database layer is
responsible for converting to and from its own representation.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Optional

from pocketledger.domain.money import Money


class TransactionType(str, Enum):
    """Direction of a money movement."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    def signed(self, amount: Money) -> Money:
        """Return the wallet delta for an amount of this type."""
        return amount if self is TransactionType.INCOME else -amount


class WalletKind(str, Enum):
    """Kind of wallet. Informational for the ledger."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    CASH = "CASH"
    CRYPTO = "CRYPTO"


class SplitMode(str, Enum):
    """How a group expense is divided among members."""

    EQUAL = "EQUAL"
    MANUAL = "MANUAL"
    FULL_REIMBURSE = "FULL_REIMBURSE"


@dataclass(frozen=True)
class User:
    """Registered account owning wallets, categories and groups."""

    id: int
    email: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Wallet:
    """Named store of money with a running balance."""

    id: int
    user_id: int
    name: str
    currency: str
    balance: Money
    kind: WalletKind
    bank: Optional[str]
    credit_limit: Money
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """User-defined transaction category."""

    id: int
    user_id: int
    name: str
    icon: str
    category_type: TransactionType
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity. Amount is always a non-negative magnitude."""

    id: int
    user_id: int
    wallet_id: int
    category_id: Optional[int]
    transaction_type: TransactionType
    amount: Money
    description: str
    date: date
    created_at: datetime
    category_name: Optional[str] = None

    @property
    def signed_amount(self) -> Money:
        return self.transaction_type.signed(self.amount)


@dataclass(frozen=True)
class TransactionPage:
    """One page of a filtered transaction listing."""

    items: tuple[Transaction, ...]
    total: int
    total_pages: int
    page: int
    page_size: int


@dataclass(frozen=True)
class Budget:
    """Monthly spending limit for one category."""

    id: int
    user_id: int
    category_id: int
    limit: Money
    created_at: datetime


@dataclass(frozen=True)
class BudgetProgress:
    """Budget limit compared with what was spent in a period."""

    budget_id: Optional[int]
    category_id: int
    category_name: str
    limit: Money
    spent: Money
    period_start: date
    period_end: date

    @property
    def remaining(self) -> Money:
        return self.limit - self.spent

    @property
    def is_over_limit(self) -> bool:
        return self.spent > self.limit


@dataclass(frozen=True)
class GroupMember:
    """Participant of a group. ``user_id`` is None for name-only members."""

    id: int
    group_id: int
    name: str
    user_id: Optional[int]


@dataclass(frozen=True)
class ExpenseSplit:
    """Share of a group expense attributed to one member."""

    id: int
    expense_id: int
    member_id: int
    amount: Money


@dataclass(frozen=True)
class GroupExpense:
    """Shared expense paid by one member and split among several."""

    id: int
    group_id: int
    description: str
    amount: Money
    payer_id: int
    date: date
    split_mode: SplitMode
    is_settlement: bool
    created_at: datetime
    splits: tuple[ExpenseSplit, ...] = ()


@dataclass(frozen=True)
class Group:
    """Shared-expense context."""

    id: int
    owner_id: int
    name: str
    icon: str
    created_at: datetime
    member_count: int = 0
    expense_count: int = 0


@dataclass(frozen=True)
class GroupDetail:
    """Group with its members and the expenses of a period."""

    group: Group
    members: tuple[GroupMember, ...]
    expenses: tuple[GroupExpense, ...]


@dataclass(frozen=True)
class MemberPosition:
    """What a member paid versus what their splits charge them."""

    member_id: int
    name: str
    paid: Money
    owed: Money

    @property
    def net(self) -> Money:
        return self.paid - self.owed


@dataclass(frozen=True)
class MonthlyOverview:
    """Dashboard figures for one calendar month."""

    period_start: date
    period_end: date
    total_balance: Money
    income: Money
    expense: Money
    expense_by_category: dict[str, Money] = field(default_factory=dict)

    @property
    def net(self) -> Money:
        return self.income - self.expense
