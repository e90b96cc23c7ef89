"""
services/ - Business Logic Services

Contains:
- categorizer.py: Keyword category detection
- storage.py: UserDirectory / TransactionLedger interfaces and in-memory stores
- state_manager.py: Webhook message deduplication
"""

from .categorizer import detect_category, CATEGORY_KEYWORDS

from .storage import (
    UserDirectory,
    TransactionLedger,
    InMemoryUserDirectory,
    InMemoryTransactionLedger,
)

from .state_manager import (
    is_message_duplicate,
    forget_message,
    clear_processed_messages,
)
