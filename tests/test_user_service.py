"""Tests for UserService."""

import pytest

from pocketledger.domain.entities import WalletKind
from pocketledger.domain.errors import ConflictError, ValidationError
from pocketledger.domain.money import Money


def test_register_creates_cash_wallet(user_service, wallet_service):
    user_id = user_service.register("  carla@example.com ", "Carla", currency="usd")

    wallets = wallet_service.list_wallets(user_id)
    assert len(wallets) == 1
    assert wallets[0].name == "Cash"
    assert wallets[0].kind == WalletKind.CASH
    assert wallets[0].currency == "USD"
    assert wallets[0].balance == Money.zero()
    assert user_service.get_user(user_id).email == "carla@example.com"


def test_register_uses_default_currency(user_service, wallet_service):
    user_id = user_service.register("dan@example.com", "Dan")

    assert wallet_service.list_wallets(user_id)[0].currency == "ARS"


def test_register_duplicate_email_conflicts(user_service, sample_user):
    with pytest.raises(ConflictError):
        user_service.register("ANA@example.com", "Another Ana")


@pytest.mark.parametrize("email,name", [("not-an-email", "X"), ("x@example.com", "  ")])
def test_register_validation(user_service, email, name):
    with pytest.raises(ValidationError):
        user_service.register(email, name)


def test_lookup(user_service, sample_user):
    assert user_service.get_user_by_email("ana@EXAMPLE.com").id == sample_user.id
    assert [u.email for u in user_service.list_users()] == ["ana@example.com"]
    assert user_service.get_user(999) is None
