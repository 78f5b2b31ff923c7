"""Utility functions for pocketledger."""

from pocketledger.utils.date_parser import parse_date, month_range
from pocketledger.utils.amount_parser import parse_amount
from pocketledger.utils.logger import get_logger

__all__ = ["parse_date", "month_range", "parse_amount", "get_logger"]
