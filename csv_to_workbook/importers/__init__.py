"""Importers that turn one CSV report into one sheet of the target workbook."""

from .base import ImporterBase, ImportResult, ProcessingRecord, RowResult
from .sheet_importer import SheetImporter
from .summary_importer import SummaryImporter

__all__ = [
    "ImporterBase",
    "ImportResult",
    "ProcessingRecord",
    "RowResult",
    "SheetImporter",
    "SummaryImporter",
]
