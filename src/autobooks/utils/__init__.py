"""Utility functions for autobooks."""

from autobooks.utils.date_parser import parse_date
from autobooks.utils.amount_parser import parse_amount
from autobooks.utils.company_resolver import resolve_company

__all__ = ["parse_date", "parse_amount", "resolve_company"]
