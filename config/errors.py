"""
errors.py - Standardized Error Messages and Error Types

User-facing errors in Bahasa Indonesia.
Developer error tags for logging.
Exception classes raised by the parser, the command executor and the stores.
"""

from enum import Enum


class UserErrors:
    """User-facing error messages (friendly, Bahasa Indonesia)."""

    # Parse errors
    BAD_FORMAT = (
        "❌ Format salah!\n\n"
        "Gunakan:\n"
        "keluar 50000 makan siang\n"
        "masuk 1000000 gaji"
    )
    UNKNOWN_TYPE = (
        "❌ Jenis transaksi tidak dikenal!\n\n"
        'Gunakan "keluar" atau "masuk"'
    )
    INVALID_AMOUNT = "❌ Jumlah tidak valid! Masukkan angka yang benar."

    # Registration / verification
    NOT_REGISTERED = (
        "❌ Nomor belum terdaftar/terverifikasi.\n\n"
        "Ketik DAFTAR untuk memulai."
    )
    CODE_MISMATCH = "❌ Kode verifikasi salah atau tidak ditemukan."

    # Store failures, per command
    REGISTER_FAILED = "❌ Gagal mendaftar. Silakan coba lagi."
    VERIFY_FAILED = "❌ Gagal verifikasi. Silakan coba lagi."
    BALANCE_FAILED = "❌ Gagal mengambil saldo."
    SAVE_FAILED = "❌ Gagal menyimpan transaksi. Silakan coba lagi."

    # System errors
    UNKNOWN_ERROR = "❌ Terjadi kesalahan. Silakan coba lagi."


class InternalErrors:
    """Internal error types for logging/tracking."""
    STORE = "STORE_ERROR"
    SHEET_CONNECTION = "SHEETS_ERROR"
    DELIVERY = "DELIVERY_ERROR"
    WEBHOOK = "WEBHOOK_ERROR"
    COMMAND = "COMMAND_ERROR"


# ===================== ERROR TYPES =====================

class ParseFailure(Enum):
    """Why a message could not be read as a command."""
    BAD_FORMAT = "bad_format"
    UNKNOWN_TYPE = "unknown_type"
    INVALID_AMOUNT = "invalid_amount"


class AuthFailure(Enum):
    """Why a phone is not allowed to use ledger commands."""
    NOT_REGISTERED = "not_registered"
    NOT_VERIFIED = "not_verified"


class FinanceBotError(Exception):
    """Base class for all bot errors."""
    pass


class CommandParseError(FinanceBotError):
    """Message text is not a valid command. User-facing."""

    def __init__(self, reason: ParseFailure, text: str = ""):
        self.reason = reason
        self.text = text
        super().__init__(f"{reason.value}: {text!r}")


class AuthorizationError(FinanceBotError):
    """Phone is unknown or not yet verified. User-facing."""

    def __init__(self, reason: AuthFailure, phone_key: str = ""):
        self.reason = reason
        self.phone_key = phone_key
        super().__init__(reason.value)


class VerificationError(FinanceBotError):
    """No link matches the (phone, code) pair. User-facing."""

    reason = "code_mismatch"


class InfrastructureError(FinanceBotError):
    """External system failure. Logged, then turned into an apology."""
    pass


class StoreUnavailableError(InfrastructureError):
    """User directory or ledger could not be read or written."""
    pass


class DeliveryFailedError(InfrastructureError):
    """Outbound message could not be delivered."""
    pass


PARSE_FAILURE_MESSAGES = {
    ParseFailure.BAD_FORMAT: UserErrors.BAD_FORMAT,
    ParseFailure.UNKNOWN_TYPE: UserErrors.UNKNOWN_TYPE,
    ParseFailure.INVALID_AMOUNT: UserErrors.INVALID_AMOUNT,
}
