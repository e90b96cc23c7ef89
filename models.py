"""
models.py - Domain records shared by the parser, executor and stores.

- TransactionKind: income / expense
- Category: fixed category labels (stored and shown in Bahasa Indonesia)
- UserLink: phone <-> account link with verification state
- TransactionEntry: one ledger row
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionKind(Enum):
    """Transaction direction. Values are what the ledger stores."""
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        return "Pemasukan" if self is TransactionKind.INCOME else "Pengeluaran"


class Category(Enum):
    """Fixed categories, auto-detected from the description."""
    FOOD = "Makanan"
    TRANSPORT = "Transport"
    SHOPPING = "Belanja"
    SAVINGS = "Tabungan"
    ENTERTAINMENT = "Hiburan"
    BILLS = "Tagihan"
    SALARY = "Gaji"
    OTHER = "Lainnya"

    @classmethod
    def from_label(cls, label: str) -> "Category":
        """Map a stored label back to a category, unknown labels become OTHER."""
        for category in cls:
            if category.value.lower() == (label or "").strip().lower():
                return category
        return cls.OTHER


@dataclass
class UserLink:
    """A WhatsApp number linked to an app account."""
    phone_key: str
    account_id: str
    is_verified: bool = False
    verification_code: Optional[str] = None
    verified_at: Optional[datetime] = None
    # Backend handle (row number for Sheets)
    ref: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class TransactionEntry:
    """One immutable ledger row."""
    account_id: str
    occurred_at: datetime
    description: str
    category: Category
    kind: TransactionKind
    amount: Decimal
    last_modified: datetime

    def __post_init__(self):
        if not self.amount.is_finite() or self.amount <= 0:
            raise ValueError(f"amount must be positive, got {self.amount}")
