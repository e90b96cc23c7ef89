import os
import sys
import unittest
from datetime import datetime
from decimal import Decimal

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from gspread.utils import a1_to_rowcol

from config.constants import TRANSACTIONS_HEADERS, USERS_HEADERS
from config.errors import StoreUnavailableError
from models import Category, TransactionEntry, TransactionKind
from sheets_helper import SheetsTransactionLedger, SheetsUserDirectory

NOW = datetime(2026, 2, 1, 9, 0)


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the stores."""

    def __init__(self, rows):
        self.rows = [list(r) for r in rows]
        self.batch_calls = []

    def get_all_values(self):
        return [list(r) for r in self.rows]

    def append_row(self, row, value_input_option=None):
        self.rows.append([str(v) for v in row])

    def batch_update(self, data, value_input_option=None):
        self.batch_calls.append((data, value_input_option))
        for item in data:
            start = item['range'].split(':')[0]
            row, col = a1_to_rowcol(start)
            for offset, value in enumerate(item['values'][0]):
                self.rows[row - 1][col - 1 + offset] = value


class BrokenWorksheet:
    def get_all_values(self):
        raise RuntimeError("quota exceeded")

    def append_row(self, row, value_input_option=None):
        raise RuntimeError("quota exceeded")


class SheetsUserDirectoryTests(unittest.TestCase):
    def setUp(self):
        self.sheet = FakeWorksheet([
            USERS_HEADERS,
            ['6281234567890', 'acc-1', 'FALSE', '1234', ''],
            ['+6289999999999', 'acc-2', 'TRUE', '', '2026-01-01T10:00:00'],
        ])
        self.users = SheetsUserDirectory(worksheet=self.sheet)

    def test_phone_without_plus_is_normalized(self):
        link = self.users.find_by_phone('+6281234567890')
        self.assertIsNotNone(link)
        self.assertEqual(link.account_id, 'acc-1')
        self.assertFalse(link.is_verified)
        self.assertEqual(link.ref, 2)

    def test_verified_lookup(self):
        self.assertIsNone(self.users.find_verified_by_phone('+6281234567890'))
        link = self.users.find_verified_by_phone('+6289999999999')
        self.assertEqual(link.verified_at, datetime(2026, 1, 1, 10, 0))

    def test_code_lookup(self):
        self.assertIsNotNone(self.users.find_by_phone_and_code('+6281234567890', '1234'))
        self.assertIsNone(self.users.find_by_phone_and_code('+6281234567890', '9999'))
        self.assertIsNone(self.users.find_by_phone_and_code('+6289999999999', ''))

    def test_mark_verified_writes_row(self):
        link = self.users.find_by_phone_and_code('+6281234567890', '1234')

        self.users.mark_verified(link, NOW)

        data, option = self.sheet.batch_calls[0]
        self.assertEqual(data, [{'range': 'C2:E2', 'values': [['TRUE', '', NOW.isoformat()]]}])
        self.assertEqual(option, 'RAW')

        reread = self.users.find_by_phone('+6281234567890')
        self.assertTrue(reread.is_verified)
        self.assertIsNone(reread.verification_code)
        self.assertEqual(reread.verified_at, NOW)

    def test_backend_failure_is_store_unavailable(self):
        users = SheetsUserDirectory(worksheet=BrokenWorksheet())
        with self.assertRaises(StoreUnavailableError):
            users.find_by_phone('+6281234567890')


class SheetsTransactionLedgerTests(unittest.TestCase):
    def setUp(self):
        self.sheet = FakeWorksheet([TRANSACTIONS_HEADERS])
        self.ledger = SheetsTransactionLedger(worksheet=self.sheet)

    def _entry(self, account_id='acc-1', amount=50000, kind=TransactionKind.EXPENSE):
        return TransactionEntry(
            account_id=account_id, occurred_at=NOW, description='makan siang',
            category=Category.FOOD, kind=kind, amount=Decimal(amount), last_modified=NOW,
        )

    def test_append_row_layout(self):
        self.ledger.append('acc-1', self._entry())
        self.assertEqual(self.sheet.rows[1], [
            'acc-1', NOW.isoformat(), 'makan siang', 'Makanan', 'expense', '50000', NOW.isoformat(),
        ])

    def test_list_all_filters_by_account(self):
        self.ledger.append('acc-1', self._entry())
        self.ledger.append('acc-2', self._entry('acc-2', 10))
        self.ledger.append('acc-1', self._entry(amount=1000000, kind=TransactionKind.INCOME))

        entries = self.ledger.list_all('acc-1')

        self.assertEqual([e.amount for e in entries], [Decimal(50000), Decimal(1000000)])
        self.assertEqual(entries[0], self._entry())

    def test_unreadable_rows_are_skipped(self):
        self.sheet.rows.append(['acc-1', 'kemarin', 'x', 'Makanan', 'expense', '5000', ''])
        self.sheet.rows.append(['acc-1', NOW.isoformat(), 'x', 'Makanan', 'transfer', '5000', ''])
        self.sheet.rows.append(['acc-1', NOW.isoformat(), 'x', 'Makanan', 'income', '1,500', ''])

        entries = self.ledger.list_all('acc-1')

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].amount, Decimal(1500))
        self.assertEqual(entries[0].last_modified, NOW)

    def test_unknown_category_label_reads_as_other(self):
        self.sheet.rows.append(['acc-1', NOW.isoformat(), 'x', 'Investasi', 'income', '5000', ''])
        self.assertEqual(self.ledger.list_all('acc-1')[0].category, Category.OTHER)

    def test_backend_failure_is_store_unavailable(self):
        ledger = SheetsTransactionLedger(worksheet=BrokenWorksheet())
        with self.assertRaises(StoreUnavailableError):
            ledger.append('acc-1', self._entry())
        with self.assertRaises(StoreUnavailableError):
            ledger.list_all('acc-1')


if __name__ == "__main__":
    unittest.main()
