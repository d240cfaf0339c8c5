"""Utility functions for ledgerkit."""

from ledgerkit.utils.date_parser import parse_date, parse_period
from ledgerkit.utils.amount_parser import parse_money

__all__ = ["parse_date", "parse_period", "parse_money"]
