"""Tests for sheet name derivation, collision handling and the sheet registry."""

import unittest

from csv_to_workbook.errors import DuplicateSheetNameError, TargetSheetNotFoundError
from csv_to_workbook.sheet_names import (
    SheetRegistry,
    candidate_sheet_name,
    make_safe_sheet_name,
    resolve_sheet_name,
)


class TestCandidateSheetName(unittest.TestCase):
    def test_plain_file(self):
        self.assertEqual(candidate_sheet_name("/scan/ScannerReports/Alerts.csv"), "Alerts")

    def test_prefix_alias_and_suffix(self):
        self.assertEqual(
            candidate_sheet_name("FullTrustSolution_Features-detail.csv"),
            "FTS_Features",
        )

    def test_truncated(self):
        name = candidate_sheet_name("ModernizationListAndLibraryScanResults-detail.csv")
        self.assertEqual(name, "ModernizationListAndLibrarySca")
        self.assertEqual(len(name), 30)

    def test_invalid_characters_replaced(self):
        self.assertEqual(make_safe_sheet_name("a/b:c?d"), "a_b_c_d")
        self.assertEqual(make_safe_sheet_name(""), "Sheet")


class TestSheetRegistry(unittest.TestCase):
    def test_ids_start_at_one(self):
        registry = SheetRegistry()
        self.assertEqual(registry.next_sheet_id(), 1)
        self.assertEqual(registry.register("Summary").sheet_id, 1)
        self.assertEqual(registry.register("Alerts").sheet_id, 2)
        self.assertEqual(registry.names, ["Summary", "Alerts"])

    def test_case_insensitive(self):
        registry = SheetRegistry()
        registry.register("Summary")
        self.assertTrue(registry.exists("SUMMARY"))
        self.assertEqual(registry.get("summary").name, "Summary")
        with self.assertRaises(DuplicateSheetNameError):
            registry.register("summary")

    def test_get_missing(self):
        with self.assertRaises(TargetSheetNotFoundError):
            SheetRegistry().get("Summary")


class TestResolveSheetName(unittest.TestCase):
    def test_free_name_unchanged(self):
        registry = SheetRegistry()
        registry.register("Summary")
        self.assertEqual(resolve_sheet_name("Alerts.csv", registry), "Alerts")

    def test_long_names_collide_after_truncation(self):
        registry = SheetRegistry()
        first = "A" * 30 + "1.csv"
        second = "A" * 30 + "2.csv"
        third = "A" * 30 + "3.csv"

        name1 = resolve_sheet_name(first, registry)
        registry.register(name1)
        name2 = resolve_sheet_name(second, registry)
        registry.register(name2)
        name3 = resolve_sheet_name(third, registry)

        self.assertEqual(name1, "A" * 30)
        self.assertEqual(name2, "A" * 29 + "0")
        self.assertEqual(name3, "A" * 29 + "1")
        self.assertTrue(all(len(n) <= 30 for n in (name1, name2, name3)))

    def test_suffix_overwrites_previous_attempt(self):
        registry = SheetRegistry()
        for name in ("Report", "Repor0", "Repor1"):
            registry.register(name)
        self.assertEqual(resolve_sheet_name("Report.csv", registry), "Repor2")

    def test_thirty_character_candidate_collisions(self):
        registry = SheetRegistry()
        base = "ABCDEFGHIJKLMNOPQRSTUVWXYZABCD"
        names = []
        for path in (base + ".csv", base + "-detail.csv", base + "EF.csv"):
            name = resolve_sheet_name(path, registry)
            registry.register(name)
            names.append(name)

        self.assertEqual(names, [
            "ABCDEFGHIJKLMNOPQRSTUVWXYZABCD",
            "ABCDEFGHIJKLMNOPQRSTUVWXYZABC0",
            "ABCDEFGHIJKLMNOPQRSTUVWXYZABC1",
        ])
        self.assertTrue(all(len(n) == 30 for n in names))
        self.assertEqual(len({n.casefold() for n in names}), 3)

    def test_gives_up_after_max_attempts(self):
        registry = SheetRegistry()
        for name in ("Ab", "A0", "A1", "A2"):
            registry.register(name)
        with self.assertRaises(DuplicateSheetNameError):
            resolve_sheet_name("Ab.csv", registry, max_attempts=3)
