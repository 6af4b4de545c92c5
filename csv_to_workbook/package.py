"""
Workbook Package
================
The output workbook, built on openpyxl's write-only mode.

Sheets added with :meth:`WorkbookPackage.add_sheet` are streamed: every
finished row goes straight to the worksheet's temporary file and is not
kept in memory. Sheets that come from the template are small and are
edited in place through a :class:`SheetGrid`; they are flushed in row
order when the package is saved.

openpyxl serializes all text as inline strings, so shared-string ids held
by grid cells are resolved through the package's
:class:`~csv_to_workbook.shared_strings.SharedStringTable` on save.
"""

import logging
import os

from openpyxl import Workbook
from openpyxl.cell import WriteOnlyCell
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import IllegalCharacterError

from .cell_address import encode_cell_address
from .errors import TargetSheetNotFoundError
from .shared_strings import SharedStringTable
from .sheet_names import SheetIdentity, SheetRegistry
from .sheet_writer import BOOLEAN, RowSink

logger = logging.getLogger(__name__)

SHARED_STRING = "s"


# ------------------------------------------------------------------
# Random-access storage for pre-existing sheets
# ------------------------------------------------------------------

class GridCell:
    """Mutable cell of a :class:`SheetGrid`."""

    __slots__ = ("value", "data_type")

    def __init__(self, value=None, data_type=None):
        self.value = value
        self.data_type = data_type

    def set_value(self, value):
        self.value = value
        self.data_type = None

    def set_shared_string(self, index: int):
        """Point the cell at entry ``index`` of the shared string table."""
        self.value = index
        self.data_type = SHARED_STRING

    def __repr__(self):
        return f"<GridCell value={self.value!r} data_type={self.data_type!r}>"


class SheetGrid:
    """Sparse row/cell storage of one pre-existing sheet."""

    def __init__(self, identity: SheetIdentity, cells=None):
        self.identity = identity
        self._rows = {}
        for (row, column), value in (cells or {}).items():
            self.cell(row, column).set_value(value)

    def row(self, index: int) -> dict:
        """The cells of row ``index`` keyed by column, created if missing."""
        encode_cell_address(1, index)
        return self._rows.setdefault(index, {})

    def cell(self, row: int, column: int) -> GridCell:
        encode_cell_address(column, row)
        cells = self.row(row)
        if column not in cells:
            cells[column] = GridCell()
        return cells[column]

    def get(self, row: int, column: int):
        return self._rows.get(row, {}).get(column)

    def iter_rows(self):
        """Yield ``(row_index, [(column, GridCell), ...])`` in row and column order."""
        for index in sorted(self._rows):
            yield index, sorted(self._rows[index].items())


# ------------------------------------------------------------------
# Streamed sheets
# ------------------------------------------------------------------

class SheetStream(RowSink):
    """Feeds finished rows into an openpyxl write-only worksheet."""

    def __init__(self, worksheet):
        self._ws = worksheet
        self._next_row = 1
        self.closed = False

    def open(self):
        if self.closed:
            raise ValueError(f"Sheet '{self._ws.title}' has already been closed")

    def write_row(self, index, cells):
        values = []
        for cell in cells:
            values.extend([None] * (cell.column - 1 - len(values)))
            values.append(self._to_cell(cell.value, cell.data_type))
        self.append_values(index, values)

    def append_values(self, index, values):
        """Append plain values (or cells) as row ``index``; skipped rows are left empty."""
        if index < self._next_row:
            raise ValueError(f"Row {index} has already been written to sheet '{self._ws.title}'")
        while self._next_row < index:
            self._ws.append([])
            self._next_row += 1
        self._ws.append(values)
        self._next_row = index + 1

    def _to_cell(self, value, data_type):
        if data_type == BOOLEAN:
            value = value == "1"
        elif value == "":
            return None
        return WriteOnlyCell(self._ws, value=value)

    def close(self):
        if not self.closed:
            self._ws.close()
            self.closed = True


# ------------------------------------------------------------------
# Package
# ------------------------------------------------------------------

class WorkbookPackage:
    """The target workbook for one run.

    Owns the document-wide :class:`SharedStringTable` and
    :class:`SheetRegistry`; importers only hold references to them.
    Use as a context manager so the file is written exactly once.
    """

    def __init__(self, output_path: str):
        self.output_path = output_path
        self.shared_strings = SharedStringTable()
        self.sheets = SheetRegistry()
        self._workbook = Workbook(write_only=True)
        self._worksheets = {}
        self._grids = {}
        self._streams = {}
        self.closed = False

    @classmethod
    def create_from_template(cls, template, output_path: str) -> "WorkbookPackage":
        """Start a workbook holding the template's sheets, in template order."""
        logger.info(f"Creating target workbook from template '{template.name}' at {output_path}")
        package = cls(output_path)
        for sheet in template.sheets:
            identity = package.sheets.register(sheet.title)
            package._worksheets[identity] = package._workbook.create_sheet(title=identity.name)
            package._grids[identity] = SheetGrid(identity, sheet.cells)
        return package

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def sheet_exists(self, name: str) -> bool:
        return self.sheets.exists(name)

    def get_sheet(self, name: str) -> SheetIdentity:
        return self.sheets.get(name)

    def get_sheet_grid(self, identity: SheetIdentity) -> SheetGrid:
        """Random-access storage of a sheet that came from the template."""
        try:
            return self._grids[identity]
        except KeyError:
            raise TargetSheetNotFoundError(identity.name) from None

    def add_sheet(self, name: str):
        """Register a new streamed sheet; returns ``(SheetIdentity, SheetStream)``."""
        identity = self.sheets.register(name)
        worksheet = self._workbook.create_sheet(title=identity.name)
        stream = SheetStream(worksheet)
        self._worksheets[identity] = worksheet
        self._streams[identity] = stream
        logger.debug(f"Added sheet '{identity.name}' with id {identity.sheet_id}")
        return identity, stream

    def _flush_grid(self, grid: SheetGrid):
        worksheet = self._worksheets[grid.identity]
        stream = SheetStream(worksheet)
        for index, cells in grid.iter_rows():
            values = []
            for column, cell in cells:
                values.extend([None] * (column - 1 - len(values)))
                value = cell.value
                if cell.data_type == SHARED_STRING:
                    value = self.shared_strings.lookup(value)
                if value is None or value == "":
                    values.append(None)
                else:
                    values.append(self._grid_cell(worksheet, column, index, value))
            stream.append_values(index, values)
        stream.close()

    @staticmethod
    def _grid_cell(worksheet, column, row, value):
        """Build the output cell; values openpyxl rejects are written as cleaned text."""
        try:
            if isinstance(value, int) and not isinstance(value, bool):
                float(value)
            return WriteOnlyCell(worksheet, value=value)
        except (IllegalCharacterError, OverflowError, ValueError, TypeError) as err:
            text = ILLEGAL_CHARACTERS_RE.sub("", str(value))
            logger.warning(
                f"Cell {encode_cell_address(column, row)} of sheet '{worksheet.title}' "
                f"written as text {text!r}: {err}"
            )
            return WriteOnlyCell(worksheet, value=text)

    def save(self):
        """Write the workbook to ``output_path``. Only the first call writes."""
        if self.closed:
            return
        self.closed = True
        for grid in self._grids.values():
            self._flush_grid(grid)
        for stream in self._streams.values():
            stream.close()
        os.makedirs(os.path.dirname(os.path.abspath(self.output_path)), exist_ok=True)
        self._workbook.save(self.output_path)
        logger.info(
            f"Saved workbook {self.output_path} with {len(self.sheets)} sheets, "
            f"{len(self.shared_strings)} shared strings"
        )

    def close(self):
        self.save()
