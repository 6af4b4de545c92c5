"""Conversion between 1-based (column, row) pairs and A1-style references."""

import re

from .errors import InvalidCellAddressError

_ADDRESS_RE = re.compile(r"^([A-Za-z]+)([0-9]+)$")


def column_letters(column):
    """Convert 1-based column index to letter(s). 1=A, 2=B, ..., 26=Z, 27=AA."""
    if column < 1:
        raise InvalidCellAddressError("column index is one based and cannot be less than one.")
    result = ""
    while column > 0:
        letter = (column - 1) % 26
        result = chr(65 + letter) + result
        column = (column - letter) // 26
    return result


def column_index(letters):
    """Convert column letter(s) to 1-based index. A=1, B=2, ..., Z=26, AA=27."""
    if not letters or not letters.isalpha() or not letters.isascii():
        raise InvalidCellAddressError(f"'{letters}' is not a column reference.")
    result = 0
    for char in letters.upper():
        result = result * 26 + (ord(char) - ord('A') + 1)
    return result


def encode_cell_address(column: int, row: int) -> str:
    """Build the cell address for a 1-based column and row, e.g. ``(27, 5) -> "AA5"``.

    Raises:
        InvalidCellAddressError: if ``column`` or ``row`` is less than one.
    """
    if row < 1:
        raise InvalidCellAddressError("row index is one based and cannot be less than one.")
    return f"{column_letters(column)}{row}"


def decode_cell_address(address: str) -> tuple:
    """Split a cell address such as ``"AA5"`` back into ``(column, row)``."""
    m = _ADDRESS_RE.match(address or "")
    if not m:
        raise InvalidCellAddressError(f"'{address}' is not a cell address.")
    row = int(m.group(2))
    if row < 1:
        raise InvalidCellAddressError(f"'{address}' has a row index below one.")
    return column_index(m.group(1)), row
