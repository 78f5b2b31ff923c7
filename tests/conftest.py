"""Shared pytest fixtures for pocketledger tests."""

import tempfile
import os
from datetime import date
import pytest

from pocketledger.database.factories import create_sqlite_database
from pocketledger.domain.entities import TransactionType
from pocketledger.domain.user import UserService
from pocketledger.domain.wallet import WalletService
from pocketledger.domain.category import CategoryService
from pocketledger.domain.transaction import TransactionService
from pocketledger.domain.budget import BudgetService
from pocketledger.domain.group import GroupService
from pocketledger.domain.overview import OverviewService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def wallet_service(temp_db):
    """Create a WalletService with a temporary database."""
    return WalletService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def group_service(temp_db):
    """Create a GroupService with a temporary database."""
    return GroupService(temp_db)


@pytest.fixture
def overview_service(temp_db):
    """Create an OverviewService with a temporary database."""
    return OverviewService(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Register a sample user (comes with a Cash wallet and default categories)."""
    user_id = user_service.register(email="ana@example.com", name="Ana")
    return user_service.get_user(user_id)


@pytest.fixture
def sample_wallet(wallet_service, sample_user):
    """Create a wallet with an opening balance of 1000.00."""
    wallet_id = wallet_service.create_wallet(
        user_id=sample_user.id, name="Galicia", currency="ARS", balance="1000.00"
    )
    return wallet_service.get_wallet(wallet_id)


@pytest.fixture
def sample_categories(category_service, sample_user):
    """Map category name to ID for the sample user's default categories."""
    return {c.name: c.id for c in category_service.list_categories(sample_user.id)}


@pytest.fixture
def sample_group(group_service, user_service, sample_user):
    """Group owned by the sample user with members Ana (owner), Bruno and Carla."""
    group_id = group_service.create_group(sample_user.id, "Trip")
    group_service.add_member(group_id, "Bruno")
    group_service.add_member(group_id, "Carla")
    return group_service.get_group(group_id)


@pytest.fixture
def member_ids(group_service, sample_group):
    """Member IDs of the sample group, ordered (owner first)."""
    return [m.id for m in group_service.list_members(sample_group.id)]


@pytest.fixture
def add_expense(transaction_service, sample_user, sample_wallet, sample_categories):
    """Factory recording an EXPENSE on the sample wallet."""

    def _add(amount, category="Food", description="", on=None):
        return transaction_service.create_transaction(
            user_id=sample_user.id,
            wallet_id=sample_wallet.id,
            category_id=sample_categories[category] if category else None,
            transaction_type=TransactionType.EXPENSE,
            amount=amount,
            description=description,
            date=on or date.today(),
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
