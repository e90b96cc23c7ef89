"""
constants.py - Bot Constants and Configuration

Contains:
- WhatsApp Cloud API settings
- Storage backend and Google Sheets settings
- Sheet names and headers for the Sheets backend
- Commands: Bot command keywords
- Timeouts: Time-related constants
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ===================== WHATSAPP CONFIG =====================

WHATSAPP_PHONE_NUMBER_ID = (os.getenv('WHATSAPP_PHONE_NUMBER_ID') or '').strip()
WHATSAPP_ACCESS_TOKEN = (os.getenv('WHATSAPP_ACCESS_TOKEN') or '').strip()
WHATSAPP_VERIFY_TOKEN = (os.getenv('WHATSAPP_VERIFY_TOKEN') or '').strip()
WHATSAPP_API_VERSION = os.getenv('WHATSAPP_API_VERSION', 'v18.0')

# Envelope "object" value sent by the Cloud API
WHATSAPP_OBJECT = 'whatsapp_business_account'

# ===================== SERVER CONFIG =====================

PORT = int(os.getenv('PORT', '3000'))
DEBUG = os.getenv('FLASK_DEBUG', '0') == '1'

# ===================== STORAGE CONFIG =====================

# "sheets" (Google Sheets) or "memory" (in-process, lost on restart)
STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'sheets').strip().lower()

# Google Sheets configuration
SPREADSHEET_ID = os.getenv('GOOGLE_SHEETS_ID')
CREDENTIALS_FILE = os.getenv('CREDENTIALS_FILE', 'credentials.json')

# Scopes for Google API
SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets',
    'https://www.googleapis.com/auth/drive'
]

# ===================== SHEET LAYOUT =====================

# Phone <-> account links, filled by the app's registration flow
USERS_SHEET_NAME = "WhatsApp_Users"
USERS_HEADERS = ['phoneNumber', 'userId', 'isVerified', 'verificationCode', 'verifiedAt']

# Column indices (1-based for gspread)
USERS_COL_PHONE = 1
USERS_COL_USER_ID = 2
USERS_COL_VERIFIED = 3
USERS_COL_CODE = 4
USERS_COL_VERIFIED_AT = 5

# Ledger rows, one per transaction, all accounts in one sheet
TRANSACTIONS_SHEET_NAME = "Transaksi"
TRANSACTIONS_HEADERS = ['userId', 'Tanggal', 'Keterangan', 'Kategori', 'Tipe', 'Jumlah', 'LastModified']

# ===================== TRANSACTIONS =====================

DEFAULT_DESCRIPTION = "Transaksi via WhatsApp"
CURRENCY_PREFIX = "Rp"
MAX_DESCRIPTION_LENGTH = 200


# ===================== TIMEOUTS =====================

class Timeouts:
    """Time-related constants in seconds."""
    REQUEST_TIMEOUT = 10           # Outbound API request timeout
    DEDUP_WINDOW = 5 * 60          # 5 minutes - webhook message deduplication
    DEDUP_MAX_ENTRIES = 1000       # Max message ids kept in the dedup cache


# ===================== COMMANDS =====================

class Commands:
    """
    Bot command keywords - all lowercase for matching.
    """

    REGISTER = ['daftar']

    # "verify" is a prefix command: "verify 1234"
    VERIFY = 'verify'

    SALDO = ['saldo']

    HELP = ['help', 'bantuan']

    # Transaction type keywords (substring match on the first token)
    EXPENSE_KEYWORDS = ['keluar', 'expense']
    INCOME_KEYWORDS = ['masuk', 'income']
