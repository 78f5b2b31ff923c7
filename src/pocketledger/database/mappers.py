"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including minor-unit integers to
Money and enum strings to enum members.
"""

from pocketledger.domain import entities as domain
from pocketledger.domain.money import Money
from pocketledger.database.models import (
    User as ORMUser,
    Wallet as ORMWallet,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Budget as ORMBudget,
    Group as ORMGroup,
    GroupMember as ORMGroupMember,
    GroupExpense as ORMGroupExpense,
    ExpenseSplit as ORMExpenseSplit,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        email=orm_user.email,
        name=orm_user.name,
        created_at=orm_user.created_at,
    )


def wallet_to_domain(orm_wallet: ORMWallet) -> domain.Wallet:
    """Convert SQLAlchemy Wallet model to domain Wallet entity."""
    return domain.Wallet(
        id=orm_wallet.id,
        user_id=orm_wallet.user_id,
        name=orm_wallet.name,
        currency=orm_wallet.currency,
        balance=Money(orm_wallet.balance_minor),
        kind=domain.WalletKind(orm_wallet.kind),
        bank=orm_wallet.bank,
        credit_limit=Money(orm_wallet.credit_limit_minor),
        created_at=orm_wallet.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        icon=orm_category.icon,
        category_type=domain.TransactionType(orm_category.category_type),
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    category = orm_transaction.category
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        wallet_id=orm_transaction.wallet_id,
        category_id=orm_transaction.category_id,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        amount=Money(orm_transaction.amount_minor),
        description=orm_transaction.description,
        date=orm_transaction.date,
        created_at=orm_transaction.created_at,
        category_name=category.name if category is not None else None,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        user_id=orm_budget.user_id,
        category_id=orm_budget.category_id,
        limit=Money(orm_budget.limit_minor),
        created_at=orm_budget.created_at,
    )


def group_to_domain(
    orm_group: ORMGroup, member_count: int = 0, expense_count: int = 0
) -> domain.Group:
    """Convert SQLAlchemy Group model to domain Group entity."""
    return domain.Group(
        id=orm_group.id,
        owner_id=orm_group.owner_id,
        name=orm_group.name,
        icon=orm_group.icon,
        created_at=orm_group.created_at,
        member_count=member_count,
        expense_count=expense_count,
    )


def member_to_domain(orm_member: ORMGroupMember) -> domain.GroupMember:
    """Convert SQLAlchemy GroupMember model to domain GroupMember entity."""
    return domain.GroupMember(
        id=orm_member.id,
        group_id=orm_member.group_id,
        name=orm_member.name,
        user_id=orm_member.user_id,
    )


def split_to_domain(orm_split: ORMExpenseSplit) -> domain.ExpenseSplit:
    """Convert SQLAlchemy ExpenseSplit model to domain ExpenseSplit entity."""
    return domain.ExpenseSplit(
        id=orm_split.id,
        expense_id=orm_split.expense_id,
        member_id=orm_split.member_id,
        amount=Money(orm_split.amount_minor),
    )


def expense_to_domain(
    orm_expense: ORMGroupExpense, orm_splits: list[ORMExpenseSplit]
) -> domain.GroupExpense:
    """Convert SQLAlchemy GroupExpense model and its splits to domain entity."""
    return domain.GroupExpense(
        id=orm_expense.id,
        group_id=orm_expense.group_id,
        description=orm_expense.description,
        amount=Money(orm_expense.amount_minor),
        payer_id=orm_expense.payer_id,
        date=orm_expense.date,
        split_mode=domain.SplitMode(orm_expense.split_mode),
        is_settlement=orm_expense.is_settlement,
        created_at=orm_expense.created_at,
        splits=tuple(split_to_domain(split) for split in orm_splits),
    )
