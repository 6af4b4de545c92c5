"""Imports the summary report into the template's pre-existing Summary sheet."""

import logging
import os

from ..constants import SUMMARY_COLUMN_OFFSET, SUMMARY_WORKSHEET_NAME
from ..sheet_writer import check_cell_text
from .base import ImporterBase, ImportResult, count_lines, read_csv_rows

logger = logging.getLogger(__name__)


class SummaryImporter(ImporterBase):
    """Writes the summary CSV into the ``Summary`` sheet, starting in column B.

    The file has no header. A line with a single field starts a new section
    and is preceded by one blank row. Every value goes through the
    workbook's shared string table.
    """

    def __init__(self, package, summary_file_path, progress_callback=None, encoding=None,
                 sheet_name=SUMMARY_WORKSHEET_NAME):
        super().__init__(package, progress_callback, encoding)
        self.summary_file_path = summary_file_path
        self.sheet_name = sheet_name

    def import_(self) -> ImportResult:
        identity = self.package.get_sheet(self.sheet_name)
        grid = self.package.get_sheet_grid(identity)

        logger.info(f"Importing summary file {self.summary_file_path}.")
        self._require_source(self.summary_file_path)

        filename = os.path.basename(self.summary_file_path)
        total_lines = count_lines(self.summary_file_path, self.encoding)
        self._report(filename, 0, total_lines)

        result = ImportResult(source_path=self.summary_file_path, sheet_name=identity.name)
        target_row = 1

        def skip_unreadable(line_number, err):
            nonlocal target_row
            result.add(self._failed_row(identity.name, target_row, line_number, err))
            target_row += 1

        rows = read_csv_rows(self.summary_file_path, self.encoding, on_error=skip_unreadable)
        for line_number, fields in rows:
            # add some spacing for sections
            if len(fields) == 1:
                target_row += 1
            result.add(self._import_row(identity.name, target_row, line_number,
                                        self._write_fields, grid, target_row, fields))
            target_row += 1
            self._report(filename, line_number, total_lines)

        self._report(filename, total_lines, total_lines)
        logger.info("Completed import of summary file")
        return result

    def _write_fields(self, grid, index, fields):
        for value in fields:
            check_cell_text(value)
        for i, value in enumerate(fields):
            grid.cell(index, i + SUMMARY_COLUMN_OFFSET).set_shared_string(
                self.shared_strings.intern(value)
            )
