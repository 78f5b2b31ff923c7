"""Google Gemini client acting as the advisor oracle.

Every failure is reported as UnavailableError so callers fall back to the
local classifier.
"""

import json
from typing import Optional, Sequence

import google.generativeai as genai

from pocketledger import config
from pocketledger.domain.categorization import Advisor
from pocketledger.domain.entities import Category, MonthlyOverview
from pocketledger.domain.errors import UnavailableError
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)

# Keys shorter than this are treated as missing
_MIN_KEY_LENGTH = 10

_CATEGORIZE_PROMPT = """You are an expert bookkeeping assistant for Argentina.
These are the user's categories (ID:Name): [{categories}]

Classify these bank movements, separated by " | ": "{descriptions}"

Context rules:
- Farmacity, Dr. Ahorro, OSDE -> Health
- Coto, Carrefour, Jumbo, Chino -> Supermarket
- Uber, Cabify, Axion, YPF -> Transport
- Rappi, PedidosYa, McDonald -> Food/Delivery
- Edesur, Metrogas, Personal, Fibertel -> Utilities

IMPORTANT: answer ONLY with a JSON array of category IDs in the same order
as the movements, using 0 when no category fits. Example: [12, 5, 0, 12]
"""

_ADVICE_PROMPT = """Act as an expert, empathetic and direct personal finance advisor.
Analyse the user's figures for {period}:

- Total income: {income}
- Total expenses: {expense}
- Net balance: {net}
- Expenses by category: {by_category}

Answer in Markdown with exactly this structure:
1. A motivating greeting and a two-line analysis of the month.
2. **Traffic light:** Healthy (green), Caution (yellow) or Danger (red).
3. **Your 3 tips:** three practical saving tips based on the top categories.
4. **Saving goal:** an exact amount or percentage to save next month.
"""


def _strip_code_fences(raw: str) -> str:
    """Remove markdown code fences around a model answer."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[1] if "\n" in raw else raw[3:]
    if raw.endswith("```"):
        raw = raw[:-3]
    return raw.strip()


class GeminiAdvisor(Advisor):
    """Advisor oracle backed by a Gemini generative model."""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model_name = model_name or config.GEMINI_MODEL
        self._model = None

    def _get_model(self):
        if not self.api_key or len(self.api_key) < _MIN_KEY_LENGTH:
            raise UnavailableError("Gemini API key is missing or invalid")
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def _generate(self, prompt: str, max_output_tokens: int) -> str:
        model = self._get_model()
        try:
            response = model.generate_content(
                prompt,
                generation_config=genai.GenerationConfig(
                    temperature=0.1,
                    max_output_tokens=max_output_tokens,
                ),
            )
            return response.text
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise UnavailableError(f"Gemini request failed: {e}") from e

    def categorize(
        self, descriptions: Sequence[str], categories: Sequence[Category]
    ) -> list[Optional[int]]:
        """
        Ask Gemini for one category ID per description.

        Returns:
            The parsed JSON list; 0 entries mean "no category".

        Raises:
            UnavailableError: On API failure or a non-list answer.
        """
        prompt = _CATEGORIZE_PROMPT.format(
            categories=", ".join(f"{c.id}:{c.name}" for c in categories),
            descriptions=" | ".join(descriptions),
        )
        raw = self._generate(prompt, max_output_tokens=20 * len(descriptions) + 50)

        try:
            result = json.loads(_strip_code_fences(raw))
        except json.JSONDecodeError as e:
            logger.warning("Gemini returned non-JSON: %r", raw)
            raise UnavailableError("Gemini answer is not JSON") from e
        if not isinstance(result, list):
            raise UnavailableError(f"Gemini answer is not a list: {result!r}")

        logger.info("Gemini categorized %d descriptions", len(result))
        return result

    def advise(self, overview: MonthlyOverview) -> str:
        """Ask Gemini for Markdown advice on a month's figures."""
        prompt = _ADVICE_PROMPT.format(
            period=f"{overview.period_start:%B %Y}",
            income=overview.income,
            expense=overview.expense,
            net=overview.net,
            by_category=json.dumps(
                {name: str(amount) for name, amount in overview.expense_by_category.items()},
                ensure_ascii=False,
            ),
        )
        return self._generate(prompt, max_output_tokens=800)


def create_default_advisor() -> Optional[GeminiAdvisor]:
    """Advisor from configuration, or None when no API key is set."""
    if not config.GEMINI_API_KEY:
        return None
    return GeminiAdvisor()
