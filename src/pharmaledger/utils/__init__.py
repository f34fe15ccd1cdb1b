"""Utility functions for pharmaledger."""

from pharmaledger.utils.date_parser import parse_date, get_period_bounds
from pharmaledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "get_period_bounds", "parse_amount"]
