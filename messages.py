"""
messages.py - Centralized Speech Layer

All bot replies in one place:
- Easy to edit without touching logic
- WhatsApp formatting (*bold*, emoji section markers)

Usage:
    from messages import MSG, fmt

    # Get template
    reply = MSG.HELP

    # Format with data
    reply = fmt.balance(total_income, total_expense, count)
"""

from decimal import Decimal
from typing import Union

from models import TransactionEntry, TransactionKind
from utils.formatters import format_idr


# ===================== RAW TEMPLATES =====================

class MSG:
    """Static message templates (no formatting needed)."""

    # === REGISTRATION ===
    ALREADY_VERIFIED = "✅ Nomor Anda sudah terdaftar dan terverifikasi!"

    REGISTER_VIA_APP = (
        "⚠️ Untuk mendaftar:\n\n"
        "1. Buka aplikasi Finance App\n"
        "2. Pilih menu WhatsApp Integration\n"
        "3. Daftar nomor Anda\n"
        "4. Kirim kode verifikasi ke sini"
    )

    VERIFIED = (
        "✅ Verifikasi berhasil!\n\n"
        "Sekarang Anda bisa catat transaksi:\n\n"
        "📤 keluar 50000 makan siang\n"
        "📥 masuk 1000000 gaji\n\n"
        "Ketik HELP untuk bantuan."
    )

    # === HELP ===
    HELP = (
        "📖 *PANDUAN FINANCE BOT*\n\n"
        "🔹 Catat Pengeluaran:\n"
        "keluar 50000 makan siang\n\n"
        "🔹 Catat Pemasukan:\n"
        "masuk 1000000 gaji\n\n"
        "🔹 Cek Saldo:\n"
        "SALDO\n\n"
        "🔹 Bantuan:\n"
        "HELP\n\n"
        "💡 Kategori otomatis terdeteksi dari keterangan!"
    )

    SEPARATOR = "━━━━━━━━━━━━━━"


# ===================== FORMATTERS =====================

Number = Union[int, Decimal]


class fmt:
    """Replies built from data."""

    @staticmethod
    def balance(total_income: Number, total_expense: Number, count: int) -> str:
        saldo = total_income - total_expense
        return (
            "💰 *SALDO ANDA*\n\n"
            f"📥 Pemasukan: {format_idr(total_income)}\n"
            f"📤 Pengeluaran: {format_idr(total_expense)}\n"
            f"{MSG.SEPARATOR}\n"
            f"💵 Saldo: {format_idr(saldo)}\n\n"
            f"Total Transaksi: {count}"
        )

    @staticmethod
    def transaction_saved(entry: TransactionEntry) -> str:
        icon = "📤" if entry.kind is TransactionKind.EXPENSE else "📥"
        return (
            "✅ *TRANSAKSI TERSIMPAN*\n\n"
            f"{icon} {entry.kind.label}\n"
            f"💵 {format_idr(entry.amount)}\n"
            f"📂 {entry.category.value}\n"
            f"📝 {entry.description}\n\n"
            "Ketik SALDO untuk cek saldo."
        )
