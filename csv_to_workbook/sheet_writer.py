"""
Streaming Sheet Writer
======================
Forward-only writer for one worksheet. Calls must follow the structure of
the sheet XML::

    worksheet -> sheetData -> row* -> c*

Rows are written in strictly increasing order and cells within a row in
strictly increasing column order. Only the currently open row is held in
memory; it is handed to a :class:`RowSink` as soon as it is closed and is
never revisited.
"""

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import IllegalCharacterError

from .cell_address import decode_cell_address, encode_cell_address
from .errors import WriterStateError
from .type_inference import ColumnType, parse_boolean, parse_number

logger = logging.getLogger(__name__)

# Cell data types as they appear in the sheet XML
INLINE_STRING = "inlineStr"
NUMBER = "n"
BOOLEAN = "b"
PLAIN_STRING = "str"


class WriterState(Enum):
    START = "start"
    IN_WORKSHEET = "in_worksheet"
    IN_SHEET_DATA = "in_sheet_data"
    IN_ROW = "in_row"
    IN_CELL = "in_cell"
    DONE = "done"


@dataclass(frozen=True)
class EncodedCell:
    """A cell ready to be serialized: column, value and XML data type."""
    column: int
    value: object
    data_type: str


class RowSink:
    """Receiver of finished rows, provided by the document package.

    ``open`` is called once before the first row, ``write_row`` once per
    row in increasing row order, ``close`` once after the last row.
    """

    def open(self):
        raise NotImplementedError

    def write_row(self, index, cells):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError


def to_cell_number(number):
    """Convert a parsed :class:`Decimal` to the int or float stored in the cell.

    Returns None for values a sheet cell cannot hold: magnitudes beyond
    the float range, and non-zero values that would round to zero.
    """
    if number is None:
        return None
    as_float = float(number)
    if not math.isfinite(as_float) or (as_float == 0 and number != 0):
        return None
    if number == number.to_integral_value():
        return int(number)
    return as_float


def check_cell_text(value):
    """Raise IllegalCharacterError if ``value`` holds characters a sheet cannot store."""
    if ILLEGAL_CHARACTERS_RE.search(value):
        raise IllegalCharacterError(f"{value!r} cannot be used in worksheets.")


def encode_cell(column, value, column_type=ColumnType.TEXT):
    """Encode ``value`` for a column of type ``column_type``.

    Values that do not parse under a numeric or boolean column type fall
    back to inline text for this cell only; nothing is raised for them.
    Dates are kept as plain strings.

    Raises:
        IllegalCharacterError: if the text contains characters a sheet cannot hold.
    """
    if value is None:
        value = ""
    check_cell_text(value)

    if column_type is ColumnType.NUMBER:
        number = to_cell_number(parse_number(value))
        if number is not None:
            return EncodedCell(column, number, NUMBER)
    elif column_type is ColumnType.BOOLEAN:
        flag = parse_boolean(value)
        if flag is not None:
            return EncodedCell(column, "1" if flag else "0", BOOLEAN)
    elif column_type is ColumnType.DATE:
        return EncodedCell(column, value, PLAIN_STRING)

    return EncodedCell(column, value, INLINE_STRING)


class StreamingSheetWriter:
    """Drives a :class:`RowSink` through the worksheet structure.

    Out-of-order calls raise :class:`WriterStateError`. Use :meth:`worksheet`
    and :meth:`row` to get scopes that are closed on every exit path.
    """

    def __init__(self, sink: RowSink, sheet_name: str = ""):
        self._sink = sink
        self.sheet_name = sheet_name
        self.state = WriterState.START
        self.rows_written = 0
        self._row_index = None
        self._last_row_index = 0
        self._last_column = 0
        self._cells = []

    def _expect(self, *states):
        if self.state not in states:
            expected = ", ".join(s.value for s in states)
            raise WriterStateError(
                f"Writer for sheet '{self.sheet_name}' is in state '{self.state.value}', "
                f"expected {expected}"
            )

    # ------------------------------------------------------------------
    # Structural events
    # ------------------------------------------------------------------

    def start_worksheet(self):
        self._expect(WriterState.START)
        self._sink.open()
        self.state = WriterState.IN_WORKSHEET

    def start_sheet_data(self):
        self._expect(WriterState.IN_WORKSHEET)
        self.state = WriterState.IN_SHEET_DATA

    def start_row(self, index: int):
        self._expect(WriterState.IN_SHEET_DATA)
        if index <= self._last_row_index:
            raise WriterStateError(
                f"Row {index} of sheet '{self.sheet_name}' comes after row {self._last_row_index}"
            )
        self._row_index = index
        self._last_column = 0
        self._cells = []
        self.state = WriterState.IN_ROW

    def write_cell(self, address: str, value, column_type=ColumnType.TEXT):
        """Write one cell of the open row at ``address`` (e.g. ``"C4"``)."""
        self._expect(WriterState.IN_ROW)
        column, row = decode_cell_address(address)
        if row != self._row_index:
            raise WriterStateError(f"Cell {address} is outside the open row {self._row_index}")
        if column <= self._last_column:
            raise WriterStateError(f"Cell {address} is not to the right of the previous cell")

        self.state = WriterState.IN_CELL
        try:
            cell = encode_cell(column, value, column_type)
        finally:
            self.state = WriterState.IN_ROW
        self._last_column = column
        self._cells.append(cell)

    def end_row(self):
        """Close the open row and hand its cells to the sink."""
        self._expect(WriterState.IN_ROW, WriterState.IN_CELL)
        index, cells = self._row_index, self._cells
        self._last_row_index = index
        self._row_index = None
        self._cells = []
        self.state = WriterState.IN_SHEET_DATA
        self._sink.write_row(index, cells)
        self.rows_written += 1

    def end_sheet_data(self):
        self._expect(WriterState.IN_SHEET_DATA)
        self.state = WriterState.IN_WORKSHEET

    def end_worksheet(self):
        self._expect(WriterState.IN_WORKSHEET)
        self.state = WriterState.DONE
        self._sink.close()

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    @contextmanager
    def worksheet(self):
        """Open the worksheet and its sheet data; both are closed on exit."""
        self.start_worksheet()
        self.start_sheet_data()
        try:
            yield self
        finally:
            if self.state in (WriterState.IN_ROW, WriterState.IN_CELL):
                self.end_row()
            self.end_sheet_data()
            self.end_worksheet()

    @contextmanager
    def row(self, index: int):
        """Open row ``index``; the row is closed even if a cell write fails.

        Cells written before a failure are kept.
        """
        self.start_row(index)
        try:
            yield self
        finally:
            self.end_row()

    def write_row(self, index, values, column_types=None, column_offset=1):
        """Write ``values`` as row ``index``, the first value in column ``column_offset``.

        ``column_types`` gives the type per value; values past its end, or
        all values when it is None, are written as text.
        """
        column_types = column_types or []
        with self.row(index):
            for i, value in enumerate(values):
                column_type = column_types[i] if i < len(column_types) else ColumnType.TEXT
                self.write_cell(encode_cell_address(i + column_offset, index), value, column_type)
