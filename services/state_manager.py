"""
state_manager.py - Webhook Message Deduplication

WhatsApp retries a webhook delivery when it does not get a 200 in time,
so the same message id can arrive twice. This cache drops repeats seen
within the dedup window.

NOTE: In-memory and per-process. State is lost on restart and is not
shared between workers, so this is best effort, not exactly-once.
"""

import threading
from datetime import datetime
from typing import Dict, Optional

from config.constants import Timeouts

DEDUP_TTL_SECONDS = Timeouts.DEDUP_WINDOW
DEDUP_MAX_ENTRIES = Timeouts.DEDUP_MAX_ENTRIES

# Thread lock for dedup operations
_dedup_lock = threading.Lock()

# Format: {message_id: first_seen}
_processed_messages: Dict[str, datetime] = {}


def is_message_duplicate(message_id: Optional[str], now: Optional[datetime] = None) -> bool:
    """Check if message was already processed (dedup). Returns True if duplicate."""
    if not message_id or not isinstance(message_id, str):
        return False

    now = now or datetime.now()
    with _dedup_lock:
        # Cleanup old entries (older than TTL)
        expired_keys = [k for k, v in _processed_messages.items()
                        if (now - v).total_seconds() > DEDUP_TTL_SECONDS]
        for k in expired_keys:
            _processed_messages.pop(k, None)

        if message_id in _processed_messages:
            return True

        # Keep the cache bounded; drop the oldest ids first
        if len(_processed_messages) >= DEDUP_MAX_ENTRIES:
            oldest = sorted(_processed_messages, key=_processed_messages.get)
            for k in oldest[:len(_processed_messages) - DEDUP_MAX_ENTRIES + 1]:
                _processed_messages.pop(k, None)

        # Mark as processed
        _processed_messages[message_id] = now
        return False


def forget_message(message_id: Optional[str]) -> None:
    """Drop an id so a retried delivery of a failed message is processed again."""
    if not message_id:
        return
    with _dedup_lock:
        _processed_messages.pop(message_id, None)


def clear_processed_messages() -> None:
    with _dedup_lock:
        _processed_messages.clear()
