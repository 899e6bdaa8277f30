# spendsense/tests/test_text_utils.py
import unittest

from spendsense.utils.text_utils import clean_text, format_peso, is_valid_barcode, parse_amount


class TestTextUtils(unittest.TestCase):
    def test_valid_barcodes(self):
        self.assertTrue(is_valid_barcode("12345678"))
        self.assertTrue(is_valid_barcode("4800016644290"))
        self.assertTrue(is_valid_barcode("12345678901234"))
        self.assertTrue(is_valid_barcode(" 4800016644290 "))

    def test_invalid_barcodes(self):
        self.assertFalse(is_valid_barcode("1234567"))
        self.assertFalse(is_valid_barcode("123456789012345"))
        self.assertFalse(is_valid_barcode("48000-16644"))
        self.assertFalse(is_valid_barcode("abcdefghij"))
        self.assertFalse(is_valid_barcode(""))
        self.assertFalse(is_valid_barcode(None))
        self.assertFalse(is_valid_barcode(4800016644290))

    def test_clean_text(self):
        self.assertEqual(clean_text("  Rice  "), "Rice")
        self.assertEqual(clean_text(None), "")
        self.assertEqual(clean_text(12), "")

    def test_parse_amount(self):
        self.assertEqual(parse_amount("150"), 150.0)
        self.assertEqual(parse_amount("1,250.50"), 1250.5)
        self.assertEqual(parse_amount(25.5), 25.5)

    def test_parse_amount_rejects(self):
        for value in (None, "", "abc", "0", -5, True, "nan", "inf"):
            with self.subTest(value=value):
                self.assertIsNone(parse_amount(value))

    def test_format_peso(self):
        self.assertEqual(format_peso(1234.5), "₱1,234.50")
        self.assertEqual(format_peso(0), "₱0.00")
        self.assertEqual(format_peso(-200), "-₱200.00")


if __name__ == '__main__':
    unittest.main()
