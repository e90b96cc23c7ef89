import os
import sys
import unittest
from decimal import Decimal, InvalidOperation

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from messages import fmt
from security import mask_phone, mask_sensitive_data, sanitize_input
from utils.formatters import format_idr, format_number


class CurrencyFormatTests(unittest.TestCase):
    def test_thousands_separator(self):
        self.assertEqual(format_idr(1000000), "Rp 1.000.000")
        self.assertEqual(format_idr(Decimal("950000")), "Rp 950.000")
        self.assertEqual(format_idr(0), "Rp 0")

    def test_negative_balance(self):
        self.assertEqual(format_idr(Decimal("-50000")), "Rp -50.000")

    def test_unformattable_amount_raises(self):
        with self.assertRaises(InvalidOperation):
            format_idr("bukan angka")

    def test_fraction_uses_comma(self):
        self.assertEqual(format_number(Decimal("1234.5")), "1.234,5")

    def test_balance_layout(self):
        reply = fmt.balance(Decimal(0), Decimal(50000), 1)
        self.assertEqual(reply.splitlines(), [
            "💰 *SALDO ANDA*",
            "",
            "📥 Pemasukan: Rp 0",
            "📤 Pengeluaran: Rp 50.000",
            "━━━━━━━━━━━━━━",
            "💵 Saldo: Rp -50.000",
            "",
            "Total Transaksi: 1",
        ])


class SanitizeAndMaskTests(unittest.TestCase):
    def test_sanitize_collapses_spaces_and_control_chars(self):
        self.assertEqual(sanitize_input("keluar\x00  50000   makan"), "keluar 50000 makan")
        self.assertEqual(sanitize_input(None), "")

    def test_mask_phone(self):
        self.assertEqual(mask_phone("+6281234567890"), "+6281******890")
        self.assertEqual(mask_phone(""), "")

    def test_mask_bearer_token(self):
        self.assertNotIn("EAAGm0PX4ZCps", mask_sensitive_data("Authorization: Bearer EAAGm0PX4ZCpsBAKZC"))


if __name__ == "__main__":
    unittest.main()
