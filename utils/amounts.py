"""
amounts.py - Shared helpers for amount parsing.

Amounts arrive as a single token ("50000", "50.000", "Rp50,000") and are
read digits-only, so separators and currency markers are ignored.
"""
from __future__ import annotations

import re
from typing import Optional


NON_DIGIT_RE = re.compile(r"[^\d]")


def strip_non_digits(token: str) -> str:
    return NON_DIGIT_RE.sub("", token or "")


def parse_amount(token: str) -> Optional[int]:
    """Parse an amount token. Returns None unless the result is a positive number."""
    digits = strip_non_digits(token)
    if not digits:
        return None
    amount = int(digits)
    if amount <= 0:
        return None
    return amount
