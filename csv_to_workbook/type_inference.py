"""
Column Type Inference
=====================
Guesses how each column of a detail report should be encoded from one
sample value, and validates individual values against that guess at
write time.

The guess is made once per sheet; a value that later fails to parse under
its column's type is written as text for that cell only.
"""

import datetime
import time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

_TRUE_LITERAL = "true"
_FALSE_LITERAL = "false"

# Tried after ISO-8601 and the host locale's own formats
DEFAULT_DATE_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%d-%b-%Y",
    "%d %B %Y",
    "%B %d, %Y",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
]

# Host locale conventions (date, time, date and time)
_LOCALE_FORMATS = ["%x", "%X", "%c"]


class ColumnType(Enum):
    """Encoding chosen for a column of a detail sheet."""
    BOOLEAN = "b"
    NUMBER = "n"
    DATE = "d"
    TEXT = "s"


def parse_boolean(value) -> Optional[bool]:
    """Return the bool for a ``true``/``false`` literal (any case), else None."""
    if value is None:
        return None
    literal = value.strip().lower()
    if literal == _TRUE_LITERAL:
        return True
    if literal == _FALSE_LITERAL:
        return False
    return None


def parse_number(value) -> Optional[Decimal]:
    """Return the value as a finite :class:`Decimal`, or None if it is not a number."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def parse_date(value, date_formats=None) -> Optional[datetime.datetime]:
    """Return the datetime for a date/time literal, or None.

    ISO-8601 is tried first, then the host locale's conventions, then
    ``date_formats`` (``DEFAULT_DATE_FORMATS`` when not given).
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.datetime.fromisoformat(text)
    except ValueError:
        pass

    formats = _LOCALE_FORMATS + list(DEFAULT_DATE_FORMATS if date_formats is None else date_formats)
    for fmt in formats:
        try:
            parsed = time.strptime(text, fmt)
        except ValueError:
            continue
        return datetime.datetime(*parsed[:6])
    return None


def infer_column_type(value, date_formats=None) -> ColumnType:
    """Pick the column type for one sample value; first match wins.

    Order: boolean literal, decimal number, date/time literal, text.
    """
    if parse_boolean(value) is not None:
        return ColumnType.BOOLEAN
    if parse_number(value) is not None:
        return ColumnType.NUMBER
    if parse_date(value, date_formats) is not None:
        return ColumnType.DATE
    return ColumnType.TEXT


def infer_column_types(fields, date_formats=None) -> list:
    """Infer one :class:`ColumnType` per field of a sample row."""
    return [infer_column_type(field, date_formats) for field in fields]
