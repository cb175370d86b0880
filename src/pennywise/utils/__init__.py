"""Utility functions for pennywise."""

from pennywise.utils.date_parser import parse_date
from pennywise.utils.amount_parser import parse_amount, parse_leading_number

__all__ = ["parse_date", "parse_amount", "parse_leading_number"]
