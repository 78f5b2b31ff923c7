"""Tests for TransactionService listing, search and validation."""

from datetime import date, timedelta

import pytest

from pocketledger.domain.entities import TransactionType
from pocketledger.domain.errors import NotFoundError, ValidationError
from pocketledger.domain.money import Money


@pytest.fixture
def journal(transaction_service, sample_user, sample_wallet, sample_categories):
    """Twelve transactions: 9 expenses (Food/Transport) and 3 salaries."""
    base = date(2024, 3, 1)
    ids = []
    for i in range(9):
        ids.append(
            transaction_service.create_transaction(
                user_id=sample_user.id,
                wallet_id=sample_wallet.id,
                category_id=sample_categories["Food" if i % 2 == 0 else "Transport"],
                transaction_type=TransactionType.EXPENSE,
                amount=Money.of(10 + i),
                description=f"Coto compra {i}" if i % 2 == 0 else f"Uber viaje {i}",
                date=base + timedelta(days=i),
            )
        )
    for i in range(3):
        ids.append(
            transaction_service.create_transaction(
                user_id=sample_user.id,
                wallet_id=sample_wallet.id,
                category_id=sample_categories["Salary"],
                transaction_type=TransactionType.INCOME,
                amount=Money.of(1000),
                description="Sueldo",
                date=base + timedelta(days=20 + i),
            )
        )
    return ids


def test_list_first_page_is_newest(transaction_service, sample_user, journal):
    page = transaction_service.list_transactions(sample_user.id)

    assert page.total == 12
    assert page.total_pages == 2
    assert len(page.items) == 10
    assert page.items[0].date == date(2024, 3, 23)
    dates = [t.date for t in page.items]
    assert dates == sorted(dates, reverse=True)


def test_list_last_page(transaction_service, sample_user, journal):
    page = transaction_service.list_transactions(sample_user.id, page=2)

    assert len(page.items) == 2
    assert page.page == 2


def test_filter_by_type(transaction_service, sample_user, journal):
    incomes = transaction_service.list_transactions(sample_user.id, transaction_type="income")
    everything = transaction_service.list_transactions(sample_user.id, transaction_type="ALL")

    assert incomes.total == 3
    assert all(t.transaction_type is TransactionType.INCOME for t in incomes.items)
    assert everything.total == 12


def test_search_matches_description_case_insensitive(transaction_service, sample_user, journal):
    page = transaction_service.list_transactions(sample_user.id, search="UBER")

    assert page.total == 4
    assert all("Uber" in t.description for t in page.items)


def test_search_matches_category_name(transaction_service, sample_user, journal):
    page = transaction_service.list_transactions(sample_user.id, search="transp")

    assert page.total == 4
    assert {t.category_name for t in page.items} == {"Transport"}


def test_search_treats_wildcards_literally(transaction_service, sample_user, journal):
    assert transaction_service.list_transactions(sample_user.id, search="%").total == 0


def test_empty_result_has_zero_pages(transaction_service, sample_user):
    page = transaction_service.list_transactions(sample_user.id)

    assert page.total == 0
    assert page.total_pages == 0
    assert page.items == ()


def test_invalid_page_arguments(transaction_service, sample_user):
    with pytest.raises(ValidationError):
        transaction_service.list_transactions(sample_user.id, page=0)
    with pytest.raises(ValidationError):
        transaction_service.list_transactions(sample_user.id, page_size=0)
    with pytest.raises(ValidationError):
        transaction_service.list_transactions(sample_user.id, transaction_type="transfer")


def test_duplicates_are_allowed(transaction_service, sample_user, sample_wallet):
    """Identical entries are recorded twice; there is no duplicate detection."""
    for _ in range(2):
        transaction_service.create_transaction(
            sample_user.id, sample_wallet.id, None, "expense", "9.99", "Netflix", date(2024, 1, 5)
        )

    assert transaction_service.list_transactions(sample_user.id, search="netflix").total == 2


def test_uncategorized_transaction(transaction_service, sample_user, sample_wallet):
    txn_id = transaction_service.create_transaction(
        sample_user.id, sample_wallet.id, None, "expense", "5.00"
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.category_id is None
    assert txn.category_name is None
    assert txn.signed_amount == Money.of("-5.00")
    assert txn.date == date.today()


def test_unknown_category_is_not_found(transaction_service, sample_user, sample_wallet):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            sample_user.id, sample_wallet.id, 999, "expense", "5.00"
        )


def test_update_keeps_date_when_not_given(transaction_service, sample_user, sample_wallet):
    txn_id = transaction_service.create_transaction(
        sample_user.id, sample_wallet.id, None, "expense", "5.00", date=date(2024, 2, 2)
    )

    transaction_service.update_transaction(txn_id, sample_wallet.id, None, "expense", "6.00", "edited")

    txn = transaction_service.get_transaction(txn_id)
    assert txn.date == date(2024, 2, 2)
    assert txn.description == "edited"


def test_update_and_delete_missing_transaction(transaction_service, sample_wallet):
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(404, sample_wallet.id, None, "expense", "1.00")
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(404)
