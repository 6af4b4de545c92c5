"""
Importer Base
=============
CSV reading and the per-row bookkeeping shared by the importers.

A failure while converting one row never stops an import: it is recorded
as a failed :class:`RowResult` and folded into the file's
:class:`ImportResult`. Only conditions that make the whole file unusable
(missing file, missing or duplicate target sheet) are raised.
"""

import csv
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from ..constants import DEFAULT_ENCODING
from ..errors import SourceFileNotFoundError
from ..progress import ProgressInfo, safe_reporter

logger = logging.getLogger(__name__)


@dataclass
class ProcessingRecord:
    """One input file of a run."""
    absolute_path: str
    filename: str
    processed: bool = False

    @classmethod
    def from_path(cls, path):
        return cls(absolute_path=os.path.abspath(path), filename=os.path.basename(path))


@dataclass
class RowResult:
    """Outcome of converting one source row."""
    row_index: int
    line_number: int
    ok: bool = True
    reason: Optional[str] = None


@dataclass
class ImportResult:
    """Row counts and failures for one imported file."""
    source_path: str
    sheet_name: Optional[str] = None
    rows_written: int = 0
    rows_failed: int = 0
    failures: list = field(default_factory=list)

    def add(self, row: RowResult) -> "ImportResult":
        if row.ok:
            self.rows_written += 1
        else:
            self.rows_failed += 1
            self.failures.append(row)
        return self

    @property
    def ok(self) -> bool:
        return self.rows_failed == 0


def count_lines(path, encoding=DEFAULT_ENCODING) -> int:
    """Number of physical lines in ``path``, read without loading the file."""
    with open(path, "r", encoding=encoding, newline="") as f:
        return sum(1 for _ in f)


def read_csv_rows(path, encoding=DEFAULT_ENCODING, trim=False, on_error=None):
    """Yield ``(line_number, fields)`` for each record of a comma-separated file.

    ``line_number`` is the physical line the record ends on. Blank lines
    are skipped. With ``trim``, whitespace around each field is removed.

    A record the csv module cannot parse raises :class:`csv.Error`, unless
    ``on_error`` is given: it is then called with ``(line_number, error)``
    and reading continues with the next line.
    """
    with open(path, "r", encoding=encoding, newline="") as f:
        reader = csv.reader(f, delimiter=",", quotechar='"')
        while True:
            line_before = reader.line_num
            try:
                fields = next(reader)
            except StopIteration:
                return
            except csv.Error as err:
                # a reader that did not move past the bad line cannot recover
                if on_error is None or reader.line_num == line_before:
                    raise
                on_error(reader.line_num, err)
                continue
            if not fields:
                continue
            if trim:
                fields = [value.strip() for value in fields]
            yield reader.line_num, fields


class ImporterBase:
    """Common state of an importer bound to one target workbook.

    The shared string table and sheet registry are read from the package on
    every access; importers never keep their own copies.
    """

    def __init__(self, package, progress_callback=None, encoding=DEFAULT_ENCODING):
        self.package = package
        self.encoding = encoding or DEFAULT_ENCODING
        self._progress = safe_reporter(progress_callback)

    @property
    def shared_strings(self):
        return self.package.shared_strings

    @property
    def sheets(self):
        return self.package.sheets

    def import_(self) -> ImportResult:
        """Import the source file into the workbook."""
        raise NotImplementedError

    def _require_source(self, path):
        if not os.path.isfile(path):
            logger.warning(f"Source file {path} does not exist")
            raise SourceFileNotFoundError(f"Source file {path} does not exist.")

    def _report(self, filename, position, total):
        self._progress(ProgressInfo(
            current_file_name=filename,
            current_file_position=position,
            current_file_max=total,
            total_files_position=0,
            total_files_max=0,
        ))

    def _import_row(self, sheet_name, row_index, line_number, write, *args) -> RowResult:
        """Run ``write(*args)`` for one row and turn any exception into a failed result."""
        try:
            write(*args)
        except Exception as err:
            return self._failed_row(sheet_name, row_index, line_number, err)
        return RowResult(row_index, line_number)

    def _failed_row(self, sheet_name, row_index, line_number, err) -> RowResult:
        logger.error(
            f"Error writing row {row_index} (csv line number: {line_number}) "
            f"for target sheet {sheet_name}. Error: {err!r}"
        )
        return RowResult(row_index, line_number, ok=False, reason=str(err) or type(err).__name__)
