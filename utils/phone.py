"""
phone.py - Sender identifier normalization.

WhatsApp delivers senders as bare digits ("6281234567890"); the user
directory keys phones as "+6281234567890".
"""


def normalize_phone(raw: str) -> str:
    """Return the phone key for a sender id: prefixed with '+', nothing else changed."""
    phone = (raw or "").strip()
    if not phone.startswith("+"):
        phone = "+" + phone
    return phone
