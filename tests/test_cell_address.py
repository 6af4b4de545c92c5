"""Tests for the cell address codec."""

import unittest

from csv_to_workbook.cell_address import (
    column_index,
    column_letters,
    decode_cell_address,
    encode_cell_address,
)
from csv_to_workbook.errors import InvalidCellAddressError


class TestColumnLetters(unittest.TestCase):
    def test_single_letter(self):
        self.assertEqual(column_letters(1), "A")
        self.assertEqual(column_letters(26), "Z")

    def test_double_letter(self):
        self.assertEqual(column_letters(27), "AA")
        self.assertEqual(column_letters(52), "AZ")
        self.assertEqual(column_letters(702), "ZZ")

    def test_triple_letter(self):
        self.assertEqual(column_letters(703), "AAA")
        self.assertEqual(column_letters(16384), "XFD")

    def test_zero_rejected(self):
        with self.assertRaises(InvalidCellAddressError):
            column_letters(0)

    def test_index(self):
        self.assertEqual(column_index("A"), 1)
        self.assertEqual(column_index("aa"), 27)
        self.assertEqual(column_index("XFD"), 16384)

    def test_index_rejects_non_letters(self):
        for bad in ("", "A1", "É"):
            with self.assertRaises(InvalidCellAddressError):
                column_index(bad)


class TestEncodeCellAddress(unittest.TestCase):
    def test_examples(self):
        self.assertEqual(encode_cell_address(1, 1), "A1")
        self.assertEqual(encode_cell_address(3, 4), "C4")
        self.assertEqual(encode_cell_address(27, 5), "AA5")
        self.assertEqual(encode_cell_address(53, 100), "BA100")

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidCellAddressError):
            encode_cell_address(0, 1)
        with self.assertRaises(InvalidCellAddressError):
            encode_cell_address(1, 0)

    def test_invalid_is_value_error(self):
        with self.assertRaises(ValueError):
            encode_cell_address(-1, 1)

    def test_decode_inverts_encode(self):
        for column in (1, 2, 25, 26, 27, 51, 52, 53, 701, 702, 703, 16384):
            for row in (1, 9, 1048576):
                self.assertEqual(decode_cell_address(encode_cell_address(column, row)), (column, row))

    def test_decode_rejects_malformed(self):
        for bad in ("", "1A", "A", "A0", "A-1", "$A$1", "A1:B2"):
            with self.assertRaises(InvalidCellAddressError):
                decode_cell_address(bad)
