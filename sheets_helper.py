import os
import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from functools import wraps
from typing import List, Optional

import gspread
from gspread.utils import rowcol_to_a1
from google.oauth2.service_account import Credentials

from config.constants import (
    CREDENTIALS_FILE,
    SCOPES,
    SPREADSHEET_ID,
    TRANSACTIONS_SHEET_NAME,
    USERS_COL_CODE,
    USERS_COL_VERIFIED,
    USERS_COL_VERIFIED_AT,
    USERS_SHEET_NAME,
)
from config.errors import InternalErrors, StoreUnavailableError
from models import Category, TransactionEntry, TransactionKind, UserLink
from security import secure_log
from services.storage import TransactionLedger, UserDirectory
from utils.phone import normalize_phone

TRUE_VALUES = {'true', '1', 'yes', 'ya'}

# Global instances
_client = None
_spreadsheet = None


def authenticate():
    """
    Authenticate with Google Sheets API using Service Account.

    Supports two methods:
    1. GOOGLE_CREDENTIALS env var (JSON string) - for production
    2. credentials.json file - for local development
    """
    global _client

    if _client is not None:
        return _client

    creds = None

    # Method 1: Try environment variable first (production)
    google_creds_json = os.getenv('GOOGLE_CREDENTIALS')
    if google_creds_json:
        try:
            creds_dict = json.loads(google_creds_json)
            creds = Credentials.from_service_account_info(creds_dict, scopes=SCOPES)
            secure_log("INFO", "Authenticated via GOOGLE_CREDENTIALS env var")
        except Exception as e:
            secure_log("ERROR", f"Failed to parse GOOGLE_CREDENTIALS: {type(e).__name__}")

    # Method 2: Try credentials file (local development)
    if not creds and os.path.exists(CREDENTIALS_FILE):
        try:
            creds = Credentials.from_service_account_file(CREDENTIALS_FILE, scopes=SCOPES)
            secure_log("INFO", f"Authenticated via {CREDENTIALS_FILE} file")
        except Exception as e:
            secure_log("ERROR", f"Failed to load {CREDENTIALS_FILE}: {type(e).__name__}")

    if not creds:
        raise StoreUnavailableError(
            "Google credentials not found! Set GOOGLE_CREDENTIALS env var "
            f"or provide {CREDENTIALS_FILE} file."
        )

    _client = gspread.authorize(creds)
    secure_log("INFO", "Google Sheets authentication successful")
    return _client


def get_spreadsheet():
    """Get the main spreadsheet."""
    global _spreadsheet

    if _spreadsheet is not None:
        return _spreadsheet

    if not SPREADSHEET_ID:
        raise StoreUnavailableError("GOOGLE_SHEETS_ID is not set")

    client = authenticate()
    _spreadsheet = client.open_by_key(SPREADSHEET_ID)
    return _spreadsheet


def get_worksheet(name: str):
    """Get a worksheet by name (NO AUTO-CREATE).

    Raises:
        StoreUnavailableError: If sheet not found - only admin can create sheets
    """
    try:
        return get_spreadsheet().worksheet(name)
    except gspread.WorksheetNotFound:
        raise StoreUnavailableError(f"Sheet '{name}' tidak ditemukan. Hubungi admin untuk membuat sheet.")


def test_connection() -> bool:
    """Test connection to Google Sheets."""
    try:
        spreadsheet = get_spreadsheet()
        sheets = spreadsheet.worksheets()
        secure_log("INFO", f"Connected! Found {len(sheets)} sheets")
        return True
    except Exception as e:
        secure_log("ERROR", f"Connection failed: {type(e).__name__}")
        return False


def sheets_call(func):
    """Decorator: any Sheets/auth/network failure becomes StoreUnavailableError."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StoreUnavailableError:
            raise
        except Exception as e:
            secure_log("ERROR", f"[{InternalErrors.SHEET_CONNECTION}] {func.__name__} failed: {type(e).__name__}")
            raise StoreUnavailableError(f"{func.__name__}: {type(e).__name__}") from e
    return wrapper


# ===================== ROW PARSING =====================

def _cell(row: List[str], idx: int) -> str:
    return str(row[idx]).strip() if len(row) > idx else ''


def _parse_datetime(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _parse_amount(value: str) -> Optional[Decimal]:
    # Comma is thousands separator, period is decimal
    amount_str = str(value).replace(',', '').replace('Rp', '').replace('IDR', '').strip()
    try:
        return Decimal(amount_str) if amount_str else None
    except InvalidOperation:
        return None


def _format_amount(amount: Decimal):
    return int(amount) if amount == amount.to_integral_value() else str(amount)


def row_to_link(row: List[str], row_number: int) -> Optional[UserLink]:
    """Columns: phoneNumber, userId, isVerified, verificationCode, verifiedAt."""
    phone = _cell(row, 0)
    if not phone:
        return None

    code = _cell(row, 3)
    return UserLink(
        # Sheets drops the leading '+' when it reads the number as numeric
        phone_key=normalize_phone(phone),
        account_id=_cell(row, 1),
        is_verified=_cell(row, 2).lower() in TRUE_VALUES,
        verification_code=code or None,
        verified_at=_parse_datetime(_cell(row, 4)),
        ref=row_number,
    )


def row_to_entry(row: List[str]) -> Optional[TransactionEntry]:
    """Columns: userId, Tanggal, Keterangan, Kategori, Tipe, Jumlah, LastModified."""
    occurred_at = _parse_datetime(_cell(row, 1))
    amount = _parse_amount(_cell(row, 5))
    tipe = _cell(row, 4).lower()
    if occurred_at is None or amount is None or not amount.is_finite() or amount <= 0:
        return None
    if tipe not in {k.value for k in TransactionKind}:
        return None

    return TransactionEntry(
        account_id=_cell(row, 0),
        occurred_at=occurred_at,
        description=_cell(row, 2),
        category=Category.from_label(_cell(row, 3)),
        kind=TransactionKind(tipe),
        amount=amount,
        last_modified=_parse_datetime(_cell(row, 6)) or occurred_at,
    )


def entry_to_row(entry: TransactionEntry) -> list:
    return [
        entry.account_id,                  # A: userId
        entry.occurred_at.isoformat(),     # B: Tanggal
        entry.description,                 # C: Keterangan
        entry.category.value,              # D: Kategori
        entry.kind.value,                  # E: Tipe (income/expense)
        _format_amount(entry.amount),      # F: Jumlah
        entry.last_modified.isoformat(),   # G: LastModified
    ]


# ===================== STORES =====================

class SheetsUserDirectory(UserDirectory):
    """WhatsApp_Users sheet. Row 1 is the header."""

    def __init__(self, worksheet=None):
        self._worksheet = worksheet

    @property
    def worksheet(self):
        if self._worksheet is None:
            self._worksheet = get_worksheet(USERS_SHEET_NAME)
        return self._worksheet

    def _links(self) -> List[UserLink]:
        all_values = self.worksheet.get_all_values()
        links = []
        for row_number, row in enumerate(all_values[1:], start=2):
            link = row_to_link(row, row_number)
            if link is not None:
                links.append(link)
        return links

    @sheets_call
    def find_by_phone(self, phone_key: str) -> Optional[UserLink]:
        for link in self._links():
            if link.phone_key == phone_key:
                return link
        return None

    @sheets_call
    def find_verified_by_phone(self, phone_key: str) -> Optional[UserLink]:
        for link in self._links():
            if link.phone_key == phone_key and link.is_verified:
                return link
        return None

    @sheets_call
    def find_by_phone_and_code(self, phone_key: str, code: str) -> Optional[UserLink]:
        if not code:
            return None
        for link in self._links():
            if link.phone_key == phone_key and link.verification_code == code:
                return link
        return None

    @sheets_call
    def mark_verified(self, link: UserLink, verified_at: datetime) -> UserLink:
        if link.ref is None:
            raise StoreUnavailableError("link has no sheet row")

        # isVerified, verificationCode, verifiedAt are adjacent (C:E)
        start = rowcol_to_a1(link.ref, USERS_COL_VERIFIED)
        end = rowcol_to_a1(link.ref, USERS_COL_VERIFIED_AT)
        values = [None] * (USERS_COL_VERIFIED_AT - USERS_COL_VERIFIED + 1)
        values[0] = 'TRUE'
        values[USERS_COL_CODE - USERS_COL_VERIFIED] = ''
        values[USERS_COL_VERIFIED_AT - USERS_COL_VERIFIED] = verified_at.isoformat()

        self.worksheet.batch_update(
            [{'range': f"{start}:{end}", 'values': [values]}],
            value_input_option='RAW',
        )

        link.is_verified = True
        link.verification_code = None
        link.verified_at = verified_at
        return link


class SheetsTransactionLedger(TransactionLedger):
    """Transaksi sheet: every account's rows, keyed by userId in column A."""

    def __init__(self, worksheet=None):
        self._worksheet = worksheet

    @property
    def worksheet(self):
        if self._worksheet is None:
            self._worksheet = get_worksheet(TRANSACTIONS_SHEET_NAME)
        return self._worksheet

    @sheets_call
    def append(self, account_id: str, entry: TransactionEntry) -> None:
        row = entry_to_row(entry)
        row[0] = account_id
        # RAW: descriptions starting with '=' must stay text
        self.worksheet.append_row(row, value_input_option='RAW')

    @sheets_call
    def list_all(self, account_id: str) -> List[TransactionEntry]:
        all_values = self.worksheet.get_all_values()
        entries = []
        skipped = 0
        for row in all_values[1:]:  # Skip header
            if _cell(row, 0) != account_id:
                continue
            entry = row_to_entry(row)
            if entry is None:
                skipped += 1
                continue
            entries.append(entry)

        if skipped:
            secure_log("WARNING", f"Skipped {skipped} unreadable rows in {TRANSACTIONS_SHEET_NAME}")
        return entries
