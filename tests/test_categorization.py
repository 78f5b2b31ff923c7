"""Tests for categorization and advice with and without the advisor oracle."""

from datetime import date

import pytest

from pocketledger.domain.categorization import (
    NO_MOVEMENTS_ADVICE,
    Advisor,
    CategorizationService,
    fallback_categorize,
)
from pocketledger.domain.entities import Category, TransactionType
from pocketledger.domain.errors import UnavailableError, ValidationError


class FakeAdvisor(Advisor):
    """Advisor returning canned answers, or raising UnavailableError."""

    def __init__(self, answer=None, advice="Spend less on food.", fail=False):
        self.answer = answer
        self.advice = advice
        self.fail = fail
        self.calls = []

    def categorize(self, descriptions, categories):
        self.calls.append(list(descriptions))
        if self.fail:
            raise UnavailableError("quota exceeded")
        return self.answer

    def advise(self, overview):
        self.calls.append(overview)
        if self.fail:
            raise UnavailableError("timeout")
        return self.advice


def _category(category_id, name):
    return Category(
        id=category_id,
        user_id=1,
        name=name,
        icon="",
        category_type=TransactionType.EXPENSE,
        created_at=None,
    )


CATEGORIES = [
    _category(1, "Supermercado"),
    _category(2, "Transporte"),
    _category(3, "Salud"),
    _category(4, "Netflix"),
]


@pytest.mark.parametrize(
    "description,expected",
    [
        ("COMPRA NETFLIX.COM", 4),  # category name wins
        ("COTO SUC 123", 1),
        ("Uber *trip", 2),
        ("FARMACITY 44", 3),
        ("Transferencia recibida", None),
        ("Rappi pedido", None),  # rule matched, no fitting category
    ],
)
def test_fallback_categorize(description, expected):
    assert fallback_categorize(description, CATEGORIES) == expected


def test_fallback_matches_english_category_names():
    categories = [_category(7, "Groceries"), _category(8, "Utilities")]

    assert fallback_categorize("CARREFOUR MARKET", categories) == 7
    assert fallback_categorize("Edenor factura", categories) == 8


def test_categorize_uses_advisor_answer(temp_db, sample_user, sample_categories):
    food, transport = sample_categories["Food"], sample_categories["Transport"]
    advisor = FakeAdvisor(answer=[transport, 0, food])
    service = CategorizationService(temp_db, advisor)

    result = service.categorize(sample_user.id, ["a", "b", "c"])

    assert result == [transport, None, food]
    assert advisor.calls == [["a", "b", "c"]]


def test_categorize_falls_back_when_advisor_unavailable(temp_db, sample_user, sample_categories, caplog):
    service = CategorizationService(temp_db, FakeAdvisor(fail=True))

    result = service.categorize(sample_user.id, ["UBER VIAJE", "Pago Edesur", "???"])

    assert result == [sample_categories["Transport"], sample_categories["Utilities"], None]
    assert "using local rules" in caplog.text


@pytest.mark.parametrize(
    "answer",
    [[1], "not a list", [99999, 0, 0], ["x", 0, 0], [True, 0, 0], [0, False, 0]],
)
def test_categorize_falls_back_on_malformed_answer(temp_db, sample_user, sample_categories, answer):
    service = CategorizationService(temp_db, FakeAdvisor(answer=answer))

    result = service.categorize(sample_user.id, ["food court", "nothing", "Uber"])

    assert result == [sample_categories["Food"], None, sample_categories["Transport"]]


def test_categorize_skips_advisor_for_large_batches(temp_db, sample_user, sample_categories):
    advisor = FakeAdvisor(answer=[])
    service = CategorizationService(temp_db, advisor)

    result = service.categorize(sample_user.id, ["uber"] * 51)

    assert advisor.calls == []
    assert result == [sample_categories["Transport"]] * 51


def test_categorize_validation(temp_db, sample_user, user_service):
    service = CategorizationService(temp_db)
    with pytest.raises(ValidationError):
        service.categorize(sample_user.id, [])
    with pytest.raises(ValidationError):
        service.categorize(12345, ["coto"])


def test_advise_without_movements_skips_advisor(temp_db, sample_user):
    advisor = FakeAdvisor()
    service = CategorizationService(temp_db, advisor)

    assert service.advise(sample_user.id, 2024, 1) == NO_MOVEMENTS_ADVICE
    assert advisor.calls == []


def test_advise_uses_advisor(temp_db, sample_user, add_expense):
    add_expense("10.00", on=date(2024, 8, 3))
    advisor = FakeAdvisor(advice="  Cook at home.  ")

    assert CategorizationService(temp_db, advisor).advise(sample_user.id, 2024, 8) == "Cook at home."
    assert advisor.calls[0].expense.minor == 1000


def test_advise_falls_back_to_local_summary(temp_db, sample_user, add_expense):
    add_expense("70.00", category="Food", on=date(2024, 8, 3))
    add_expense("30.00", category="Transport", on=date(2024, 8, 4))
    service = CategorizationService(temp_db, FakeAdvisor(fail=True))

    text = service.advise(sample_user.id, 2024, 8)

    assert "expenses 100.00" in text
    assert text.index("Food") < text.index("Transport")
    assert "spent more than you earned" in text
