import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from models import Category
from services.categorizer import detect_category
from utils.phone import normalize_phone


class PhoneNormalizerTests(unittest.TestCase):
    def test_adds_plus_prefix(self):
        self.assertEqual(normalize_phone("6281234567890"), "+6281234567890")

    def test_keeps_existing_prefix(self):
        self.assertEqual(normalize_phone("+6281234567890"), "+6281234567890")

    def test_no_country_code_inference(self):
        self.assertEqual(normalize_phone("081234567890"), "+081234567890")

    def test_idempotent(self):
        for raw in ["6281234567890", "+6281234567890", "", "12", " 628111 "]:
            once = normalize_phone(raw)
            self.assertEqual(normalize_phone(once), once)


class CategoryDetectionTests(unittest.TestCase):
    def test_examples(self):
        self.assertEqual(detect_category("makan siang"), Category.FOOD)
        self.assertEqual(detect_category("gaji bulan ini"), Category.SALARY)
        self.assertEqual(detect_category("random stuff"), Category.OTHER)

    def test_each_category(self):
        cases = {
            "kopi di cafe": Category.FOOD,
            "isi bensin": Category.TRANSPORT,
            "naik gojek": Category.TRANSPORT,
            "belanja bulanan": Category.SHOPPING,
            "tabungan": Category.SAVINGS,
            "nonton bioskop": Category.ENTERTAINMENT,
            "bayar listrik": Category.BILLS,
            "bonus akhir tahun": Category.SALARY,
        }
        for description, expected in cases.items():
            with self.subTest(description=description):
                self.assertEqual(detect_category(description), expected)

    def test_first_match_wins(self):
        # "makan" (Food) is checked before "beli" (Shopping)
        self.assertEqual(detect_category("beli makan"), Category.FOOD)

    def test_case_insensitive(self):
        self.assertEqual(detect_category("GRAB ke kantor"), Category.TRANSPORT)

    def test_empty_description(self):
        self.assertEqual(detect_category(""), Category.OTHER)
        self.assertEqual(detect_category(None), Category.OTHER)


if __name__ == "__main__":
    unittest.main()
