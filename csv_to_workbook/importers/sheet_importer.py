"""
Detail Sheet Importer
=====================
Streams one detail CSV report into a new sheet of the target workbook.

Assumptions about the source file:

1. Line 1 is a header; it becomes row 1 with a ``Remediation`` label in
   column B and the header fields from column C on.
2. Line 2 is the first data row and decides the type of every column.
3. All data rows are written as-is, from column C on.
4. The sheet is named after the file, possibly shortened (see
   :mod:`csv_to_workbook.sheet_names`).
"""

import logging

from ..cell_address import encode_cell_address
from ..constants import DETAIL_COLUMN_OFFSET, REMEDIATION_LABEL
from ..errors import TargetSheetExistsError
from ..sheet_names import resolve_sheet_name
from ..sheet_writer import StreamingSheetWriter
from ..type_inference import infer_column_types
from .base import ImporterBase, ImportResult, count_lines, read_csv_rows

logger = logging.getLogger(__name__)


class SheetImporter(ImporterBase):
    """Imports one detail report (a :class:`ProcessingRecord`) as a new sheet."""

    def __init__(self, package, record, progress_callback=None, encoding=None,
                 date_formats=None):
        super().__init__(package, progress_callback, encoding)
        self.record = record
        self.date_formats = date_formats

    def import_(self) -> ImportResult:
        path = self.record.absolute_path
        logger.info(f"Importing file {path}")
        self._require_source(path)

        sheet_name = resolve_sheet_name(path, self.sheets)
        if self.package.sheet_exists(sheet_name):
            raise TargetSheetExistsError(sheet_name)

        total_lines = count_lines(path, self.encoding)
        self._report(self.record.filename, 0, total_lines)

        identity, stream = self.package.add_sheet(sheet_name)
        result = ImportResult(source_path=path, sheet_name=identity.name)
        writer = StreamingSheetWriter(stream, identity.name)

        column_types = []
        target_row = 1
        with writer.worksheet():
            for line_number, fields in read_csv_rows(path, self.encoding, trim=True):
                if target_row == 1:
                    row = self._import_row(identity.name, target_row, line_number,
                                           self._write_header, writer, target_row, fields)
                else:
                    if target_row == 2:
                        column_types = infer_column_types(fields, self.date_formats)
                        logger.debug(
                            f"Column types for {identity.name}: "
                            f"{[t.name for t in column_types]}"
                        )
                    row = self._import_row(identity.name, target_row, line_number,
                                           writer.write_row, target_row, fields,
                                           column_types, DETAIL_COLUMN_OFFSET)
                result.add(row)
                target_row += 1
                self._report(self.record.filename, line_number, total_lines)

        # always end with full progress reported
        self._report(self.record.filename, total_lines, total_lines)

        logger.info(
            f"Imported {result.rows_written} rows into sheet '{identity.name}' "
            f"({result.rows_failed} failed)"
        )
        return result

    def _write_header(self, writer, index, fields):
        with writer.row(index):
            # columns A and B are kept free; B carries the remediation label
            writer.write_cell(encode_cell_address(2, index), REMEDIATION_LABEL)
            for i, value in enumerate(fields):
                writer.write_cell(encode_cell_address(i + DETAIL_COLUMN_OFFSET, index), value)
