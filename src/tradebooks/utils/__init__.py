"""Utility functions for tradebooks."""

from tradebooks.utils.date_parser import parse_date
from tradebooks.utils.amount_parser import parse_amount, to_money

__all__ = ["parse_date", "parse_amount", "to_money"]
