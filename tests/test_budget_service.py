"""Tests for BudgetService."""

from datetime import date

import pytest

from pocketledger.domain.entities import TransactionType
from pocketledger.domain.errors import NotFoundError, ValidationError
from pocketledger.domain.money import Money


def test_progress_sums_expenses_in_period(
    budget_service, transaction_service, add_expense, sample_user, sample_wallet, sample_categories
):
    food = sample_categories["Food"]
    budget_service.create_budget(sample_user.id, food, "100.00")
    add_expense("30.00", on=date(2024, 5, 3))
    add_expense("45.50", on=date(2024, 5, 31))
    add_expense("99.00", on=date(2024, 6, 1))
    add_expense("10.00", category="Transport", on=date(2024, 5, 10))
    # Income in the same category is not spending
    transaction_service.create_transaction(
        sample_user.id, sample_wallet.id, food, TransactionType.INCOME, "500.00", date=date(2024, 5, 4)
    )

    progress = budget_service.compute_progress(
        sample_user.id, food, date(2024, 5, 1), date(2024, 5, 31)
    )

    assert progress.spent == Money.of("75.50")
    assert progress.limit == Money.of(100)
    assert progress.remaining == Money.of("24.50")
    assert not progress.is_over_limit


def test_progress_defaults_to_current_month(budget_service, add_expense, sample_user, sample_categories):
    add_expense("20.00")

    progress = budget_service.compute_progress(sample_user.id, sample_categories["Food"])

    assert progress.spent == Money.of(20)
    assert progress.period_start == date.today().replace(day=1)


def test_progress_without_budget_has_zero_limit(budget_service, add_expense, sample_user, sample_categories):
    add_expense("1.00")

    progress = budget_service.compute_progress(sample_user.id, sample_categories["Food"])

    assert progress.budget_id is None
    assert progress.limit == Money.zero()
    assert progress.is_over_limit


def test_progress_rejects_bad_periods(budget_service, sample_user, sample_categories):
    food = sample_categories["Food"]
    with pytest.raises(ValidationError):
        budget_service.compute_progress(sample_user.id, food, period_start=date(2024, 1, 1))
    with pytest.raises(ValidationError):
        budget_service.compute_progress(sample_user.id, food, date(2024, 2, 1), date(2024, 1, 1))
    with pytest.raises(NotFoundError):
        budget_service.compute_progress(sample_user.id, 999)


def test_list_budget_progress_for_month(budget_service, add_expense, sample_user, sample_categories):
    budget_service.create_budget(sample_user.id, sample_categories["Food"], 50)
    budget_service.create_budget(sample_user.id, sample_categories["Transport"], 20)
    add_expense("60.00", on=date(2024, 7, 15))

    progress = {p.category_name: p for p in budget_service.list_budget_progress(sample_user.id, 2024, 7)}

    assert progress["Food"].is_over_limit
    assert progress["Transport"].spent == Money.zero()
    assert progress["Food"].period_end == date(2024, 7, 31)


def test_create_update_delete_budget(budget_service, sample_user, sample_categories):
    budget_id = budget_service.create_budget(sample_user.id, sample_categories["Food"], 50)

    budget_service.update_budget(budget_id, limit="75.00", category_id=sample_categories["Leisure"])
    budget = budget_service.get_budget(budget_id)
    assert budget.limit == Money.of(75)
    assert budget.category_id == sample_categories["Leisure"]

    budget_service.delete_budget(budget_id)
    assert budget_service.get_budget(budget_id) is None


def test_budget_validation(budget_service, sample_user, sample_categories):
    with pytest.raises(ValidationError):
        budget_service.create_budget(sample_user.id, sample_categories["Food"], 0)
    with pytest.raises(NotFoundError):
        budget_service.create_budget(sample_user.id, 999, 10)
    with pytest.raises(NotFoundError):
        budget_service.delete_budget(999)
