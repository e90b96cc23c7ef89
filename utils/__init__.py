"""
utils/ - Shared Utilities Module

Contains:
- phone.py: Sender identifier normalization
- amounts.py: Amount token parsing
- formatters.py: Number and currency formatting
- parsers.py: Command parsing
"""

from .phone import normalize_phone

from .amounts import parse_amount, strip_non_digits

from .formatters import format_number, format_idr

from .parsers import (
    Intent,
    ParsedCommand,
    parse_command,
    parse_transaction,
)
