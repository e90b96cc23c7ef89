"""
categorizer.py - Keyword-based category detection.

Ordered table, first match wins. "makan" is checked before "beli", so
"beli makan" is Makanan, not Belanja.
"""

from typing import List, Tuple

from models import Category

CATEGORY_KEYWORDS: List[Tuple[Category, Tuple[str, ...]]] = [
    (Category.FOOD, ('makan', 'makanan', 'cafe')),
    (Category.TRANSPORT, ('transport', 'bensin', 'grab', 'gojek')),
    (Category.SHOPPING, ('belanja', 'shopping', 'beli')),
    (Category.SAVINGS, ('tabung', 'saving')),
    (Category.ENTERTAINMENT, ('hiburan', 'nonton', 'game')),
    (Category.BILLS, ('tagihan', 'listrik', 'air')),
    (Category.SALARY, ('gaji', 'salary', 'bonus')),
]


def detect_category(description: str) -> Category:
    """Return the first category whose keyword occurs in the description, else OTHER."""
    lower_desc = (description or "").lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(kw in lower_desc for kw in keywords):
            return category

    return Category.OTHER
