"""Transaction categorization and monthly advice.

The advisor oracle (an external generative model) is tried first. When it
is unavailable or answers with something unusable, a local deterministic
keyword classifier takes over; callers always get a result.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import Category, MonthlyOverview
from pocketledger.domain.overview import OverviewService
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)

# Most descriptions sent to the oracle in one request
MAX_ORACLE_DESCRIPTIONS = 50

NO_MOVEMENTS_ADVICE = (
    "You have no movements this month yet. Record your income and expenses "
    "to get personalized advice."
)

# (description keywords, category name keywords)
KEYWORD_RULES: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (
        ("farmacia", "farmacity", "osde", "swiss", "doctor", "pharmacy"),
        ("salud", "farmacia", "health"),
    ),
    (
        ("coto", "carrefour", "jumbo", "dia%", "vea", "vital", "changomas", "super"),
        ("supermercado", "comida", "alimentos", "groceries", "food"),
    ),
    (
        ("uber", "cabify", "didi", "ypf", "shell", "axion", "peaje"),
        ("transporte", "auto", "movilidad", "transport"),
    ),
    (
        ("rappi", "pedidos", "mcdonald", "burger", "starbucks", "cafe", "mostaza", "tostado"),
        ("salidas", "delivery", "comida", "restaurantes", "food", "dining"),
    ),
    (
        ("zara", "nike", "adidas", "shopping", "prune", "sporting", "dexter", "moov"),
        ("ropa", "vestimenta", "compras", "clothing", "shopping"),
    ),
    (
        ("edesur", "edenor", "metrogas", "movistar", "personal", "claro", "fibertel", "telecentro", "flow"),
        ("servicios", "hogar", "luz", "gas", "utilities"),
    ),
    (
        ("netflix", "spotify", "youtube", "prime", "hbo", "steam"),
        ("suscripciones", "ocio", "subscriptions", "leisure"),
    ),
]


def fallback_categorize(description: str, categories: Sequence[Category]) -> Optional[int]:
    """Pick a category for a description without the oracle.

    A category whose name appears in the description wins. Otherwise the
    first matching keyword rule selects the first category whose name
    contains one of the rule's category keywords. Returns None when nothing
    matches (uncategorized).
    """
    text = description.casefold()

    for category in categories:
        if category.name.casefold() in text:
            return category.id

    for description_keywords, category_keywords in KEYWORD_RULES:
        if any(keyword in text for keyword in description_keywords):
            for category in categories:
                name = category.name.casefold()
                if any(keyword in name for keyword in category_keywords):
                    return category.id
            return None

    return None


class Advisor(ABC):
    """Advisor oracle contract.

    Implementations raise UnavailableError when the oracle can't be reached
    or misbehaves.
    """

    @abstractmethod
    def categorize(
        self, descriptions: Sequence[str], categories: Sequence[Category]
    ) -> list[Optional[int]]:
        """Return one category ID (or None) per description, in order."""
        pass

    @abstractmethod
    def advise(self, overview: MonthlyOverview) -> str:
        """Return advice text for a month's figures."""
        pass


class CategorizationService:
    """Categorize descriptions and produce monthly advice."""

    def __init__(self, db: Database, advisor: Optional[Advisor] = None):
        """Initialize categorization service.

        Args:
            db: Database instance
            advisor: Advisor oracle; without one only the local classifier
                is used
        """
        self.db = db
        self.advisor = advisor
        self.overview = OverviewService(db)

    def categorize(self, user_id: int, descriptions: Sequence[str]) -> list[Optional[int]]:
        """Assign a category ID (or None) to every description.

        Args:
            user_id: User whose categories are candidates
            descriptions: Free-text transaction descriptions

        Returns:
            Category IDs aligned with ``descriptions``

        Raises:
            ValidationError: If there are no descriptions or the user has no
                categories
        """
        descriptions = list(descriptions)
        if not descriptions:
            raise errors.ValidationError("No descriptions to categorize")
        categories = self.db.list_categories(user_id)
        if not categories:
            raise errors.ValidationError(f"User {user_id} has no categories")

        if self.advisor is not None and len(descriptions) <= MAX_ORACLE_DESCRIPTIONS:
            try:
                return self._oracle_categorize(descriptions, categories)
            except errors.UnavailableError as e:
                logger.warning("Advisor categorization failed, using local rules: %s", e)

        return [fallback_categorize(text, categories) for text in descriptions]

    def advise(self, user_id: int, year: Optional[int] = None, month: Optional[int] = None) -> str:
        """Advice for one month of a user's movements."""
        summary = self.overview.monthly_overview(user_id, year, month)
        if summary.income.is_zero() and summary.expense.is_zero():
            return NO_MOVEMENTS_ADVICE

        if self.advisor is not None:
            try:
                advice = self.advisor.advise(summary).strip()
                if advice:
                    return advice
                logger.warning("Advisor returned empty advice, using local summary")
            except errors.UnavailableError as e:
                logger.warning("Advisor advice failed, using local summary: %s", e)

        return local_advice(summary)

    def _oracle_categorize(
        self, descriptions: list[str], categories: list[Category]
    ) -> list[Optional[int]]:
        answer = self.advisor.categorize(descriptions, categories)
        if not isinstance(answer, list) or len(answer) != len(descriptions):
            raise errors.UnavailableError(
                f"Expected {len(descriptions)} category IDs, got {answer!r}"
            )

        known = {category.id for category in categories}
        result = []
        for category_id in answer:
            # JSON booleans are not IDs
            if type(category_id) is not int and category_id is not None:
                raise errors.UnavailableError(f"Unknown category ID {category_id!r} in answer")
            # The oracle answers 0 for "no category"
            if category_id in (None, 0):
                result.append(None)
            elif category_id in known:
                result.append(category_id)
            else:
                raise errors.UnavailableError(f"Unknown category ID {category_id!r} in answer")
        return result


def local_advice(summary: MonthlyOverview, top: int = 3) -> str:
    """Plain-text summary used when the oracle gives no advice."""
    lines = [
        f"{summary.period_start:%B %Y}: income {summary.income}, "
        f"expenses {summary.expense}, net {summary.net}.",
    ]
    if summary.net.is_negative():
        lines.append("You spent more than you earned this month.")

    ranked = sorted(summary.expense_by_category.items(), key=lambda item: item[1], reverse=True)
    if ranked:
        lines.append("Top expense categories:")
        for name, amount in ranked[:top]:
            lines.append(f"  - {name}: {amount}")
    return "\n".join(lines)
