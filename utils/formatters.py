"""
formatters.py - Value Formatting Utilities

Contains:
- format_number: id-ID thousands separators (1.000.000)
- format_idr: "Rp 1.000.000"
"""

from decimal import Decimal
from typing import Union

from config.constants import CURRENCY_PREFIX

Number = Union[int, float, Decimal]


def format_number(amount: Number) -> str:
    """Format with '.' thousands and ',' decimals, the id-ID way."""
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        return f"{int(value):,}".replace(",", ".")

    # Up to 3 fraction digits, trailing zeros dropped
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_idr(amount: Number) -> str:
    return f"{CURRENCY_PREFIX} {format_number(amount)}"
