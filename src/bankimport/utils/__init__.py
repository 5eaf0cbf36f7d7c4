"""Utility functions for bankimport."""

from bankimport.utils.date_parser import parse_date, parse_transaction_date
from bankimport.utils.amount_parser import parse_amount
from bankimport.utils.description import normalize_description

__all__ = ["parse_date", "parse_transaction_date", "parse_amount", "normalize_description"]
