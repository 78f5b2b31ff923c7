"""Advisor oracle clients."""

from pocketledger.advisor.gemini import GeminiAdvisor, create_default_advisor

__all__ = ["GeminiAdvisor", "create_default_advisor"]
