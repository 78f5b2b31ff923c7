"""Central configuration.

Loads environment variables (and a local .env file, if present) and exposes
them as typed constants.
"""

import os

from dotenv import load_dotenv

load_dotenv()


# Advisor oracle
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# Ledger defaults
DEFAULT_CURRENCY: str = os.getenv("POCKETLEDGER_DEFAULT_CURRENCY", "ARS")

# Description marker used by older settlement entries
SETTLEMENT_MARKER: str = os.getenv("POCKETLEDGER_SETTLEMENT_MARKER", "liquidación")

# Logging
LOG_LEVEL: str = os.getenv("POCKETLEDGER_LOG_LEVEL", "WARNING")
