"""
Storage Interfaces

UserDirectory and TransactionLedger are the only ways the command
executor touches persistent data. Implementations:
- InMemoryUserDirectory / InMemoryTransactionLedger (tests, STORAGE_BACKEND=memory)
- SheetsUserDirectory / SheetsTransactionLedger (sheets_helper.py)

Implementations raise StoreUnavailableError when the backend cannot be
reached; "not found" is a None return, never an exception.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from models import TransactionEntry, UserLink


class UserDirectory(ABC):
    """Phone key -> UserLink lookups and the verification update."""

    @abstractmethod
    def find_by_phone(self, phone_key: str) -> Optional[UserLink]:
        """First link registered for the phone, verified or not."""
        pass

    @abstractmethod
    def find_verified_by_phone(self, phone_key: str) -> Optional[UserLink]:
        """First verified link for the phone."""
        pass

    @abstractmethod
    def find_by_phone_and_code(self, phone_key: str, code: str) -> Optional[UserLink]:
        """
        First link matching both phone and pending verification code.

        An empty code never matches.
        """
        pass

    @abstractmethod
    def mark_verified(self, link: UserLink, verified_at: datetime) -> UserLink:
        """
        Set is_verified, stamp verified_at and clear the code.

        Returns:
            The updated link
        """
        pass


class TransactionLedger(ABC):
    """Append-only transaction rows, grouped by account."""

    @abstractmethod
    def append(self, account_id: str, entry: TransactionEntry) -> None:
        pass

    @abstractmethod
    def list_all(self, account_id: str) -> List[TransactionEntry]:
        pass


# ===================== IN-MEMORY =====================

class InMemoryUserDirectory(UserDirectory):
    """Links kept in a list, in registration order."""

    def __init__(self, links: Iterable[UserLink] = ()):
        self._links: List[UserLink] = list(links)
        self._lock = threading.Lock()

    def add(self, link: UserLink) -> UserLink:
        """Stand-in for the app's registration flow."""
        with self._lock:
            self._links.append(link)
        return link

    def find_by_phone(self, phone_key: str) -> Optional[UserLink]:
        with self._lock:
            for link in self._links:
                if link.phone_key == phone_key:
                    return link
        return None

    def find_verified_by_phone(self, phone_key: str) -> Optional[UserLink]:
        with self._lock:
            for link in self._links:
                if link.phone_key == phone_key and link.is_verified:
                    return link
        return None

    def find_by_phone_and_code(self, phone_key: str, code: str) -> Optional[UserLink]:
        if not code:
            return None
        with self._lock:
            for link in self._links:
                if link.phone_key == phone_key and link.verification_code == code:
                    return link
        return None

    def mark_verified(self, link: UserLink, verified_at: datetime) -> UserLink:
        with self._lock:
            link.is_verified = True
            link.verified_at = verified_at
            link.verification_code = None
        return link


class InMemoryTransactionLedger(TransactionLedger):
    """Entries per account, in append order."""

    def __init__(self):
        self._entries: Dict[str, List[TransactionEntry]] = {}
        self._lock = threading.Lock()

    def append(self, account_id: str, entry: TransactionEntry) -> None:
        with self._lock:
            self._entries.setdefault(account_id, []).append(entry)

    def list_all(self, account_id: str) -> List[TransactionEntry]:
        with self._lock:
            return list(self._entries.get(account_id, []))
