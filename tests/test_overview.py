"""Tests for OverviewService."""

from datetime import date

import pytest

from pocketledger.domain.entities import TransactionType
from pocketledger.domain.errors import NotFoundError, ValidationError
from pocketledger.domain.money import Money


def test_monthly_overview(overview_service, transaction_service, add_expense, sample_user, sample_wallet):
    add_expense("40.00", category="Food", on=date(2024, 9, 2))
    add_expense("15.00", category="Food", on=date(2024, 9, 20))
    add_expense("5.00", category=None, on=date(2024, 9, 21))
    add_expense("999.00", category="Food", on=date(2024, 10, 1))
    transaction_service.create_transaction(
        sample_user.id, sample_wallet.id, None, TransactionType.INCOME, "300.00", date=date(2024, 9, 1)
    )

    summary = overview_service.monthly_overview(sample_user.id, 2024, 9)

    assert summary.income == Money.of(300)
    assert summary.expense == Money.of(60)
    assert summary.net == Money.of(240)
    assert summary.expense_by_category == {"Food": Money.of(55), "Other": Money.of(5)}
    # 1000 - 60 - 999 + 300, across all months
    assert summary.total_balance == Money.of(241)
    assert summary.period_end == date(2024, 9, 30)


def test_overview_validation(overview_service, sample_user):
    with pytest.raises(NotFoundError):
        overview_service.monthly_overview(999)
    with pytest.raises(ValidationError):
        overview_service.monthly_overview(sample_user.id, year=2024)
    with pytest.raises(ValidationError):
        overview_service.monthly_overview(sample_user.id, 2024, 13)
