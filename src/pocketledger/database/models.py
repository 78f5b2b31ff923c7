"""SQLAlchemy models for pocketledger database.

Monetary columns hold integer minor units (``*_minor``).
"""

from datetime import datetime, UTC
from typing import Optional
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class User(Base):
    """Registered user model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    wallets = relationship("Wallet", back_populates="user")
    categories = relationship("Category", back_populates="user")


class Wallet(Base):
    """Wallet model with cached running balance."""

    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    balance_minor = Column(Integer, default=0, nullable=False)
    kind = Column(String, default="DEBIT", nullable=False)
    bank = Column(String, nullable=True)
    credit_limit_minor = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    user = relationship("User", back_populates="wallets")
    transactions = relationship("Transaction", back_populates="wallet")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    category_type = Column(String, default="EXPENSE", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    user = relationship("User", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model. Amount is a non-negative magnitude."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    transaction_type = Column(String, nullable=False)
    amount_minor = Column(Integer, nullable=False)
    description = Column(String, nullable=False, default="")
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    wallet = relationship("Wallet", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


class Budget(Base):
    """Per-category monthly budget model."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    limit_minor = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    category = relationship("Category")


class Group(Base):
    """Shared-expense group model."""

    __tablename__ = "groups"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships (deletion is orchestrated by the database layer, no ORM cascade)
    members = relationship("GroupMember", back_populates="group")
    expenses = relationship("GroupExpense", back_populates="group")


class GroupMember(Base):
    """Group member model. user_id is NULL for name-only members."""

    __tablename__ = "group_members"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    name = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    group = relationship("Group", back_populates="members")


class GroupExpense(Base):
    """Group expense model."""

    __tablename__ = "group_expenses"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    description = Column(String, nullable=False)
    amount_minor = Column(Integer, nullable=False)
    payer_id = Column(Integer, ForeignKey("group_members.id"), nullable=False)
    date = Column(Date, nullable=False)
    split_mode = Column(String, nullable=False, default="EQUAL")
    is_settlement = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    group = relationship("Group", back_populates="expenses")
    payer = relationship("GroupMember")


class ExpenseSplit(Base):
    """Split of a group expense for one member."""

    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True)
    expense_id = Column(Integer, ForeignKey("group_expenses.id"), nullable=False)
    member_id = Column(Integer, ForeignKey("group_members.id"), nullable=False)
    amount_minor = Column(Integer, nullable=False)

    # A member has at most one split per expense
    __table_args__ = (UniqueConstraint("expense_id", "member_id", name="uq_expense_member"),)


def create_session_factory(
    database_url: str, isolation_level: Optional[str] = None
) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Args:
        database_url: SQLAlchemy database URL
        isolation_level: Optional engine isolation level (e.g. "SERIALIZABLE")
    """
    engine_kwargs = {"echo": False}
    if isolation_level is not None:
        engine_kwargs["isolation_level"] = isolation_level
    engine = create_engine(database_url, **engine_kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
