"""
Sheet Names
===========
Derives a unique, title-safe sheet name from a source file name and keeps
the document's registry of sheet names and numeric sheet ids.

Sheet titles are capped at ``MAX_SHEET_NAME_LENGTH`` characters, so two
long file names often truncate to the same title. Collisions are resolved
by overwriting the tail of the name with an increasing counter, keeping
the length inside the cap. Many collisions therefore eat into the
meaningful part of the name; that is accepted.
"""

import logging
import os
import re
from dataclasses import dataclass

from .constants import (
    MAX_SHEET_NAME_LENGTH,
    SHEET_NAME_PREFIX,
    SHEET_NAME_PREFIX_ALIAS,
    SHEET_NAME_SUFFIX,
)
from .errors import DuplicateSheetNameError, TargetSheetNotFoundError

logger = logging.getLogger(__name__)

# Characters Excel refuses in sheet titles
_INVALID_TITLE_CHARS = re.compile(r"[\\/?*:\[\]]")

DEFAULT_MAX_ATTEMPTS = 1000


@dataclass(frozen=True)
class SheetIdentity:
    """Name and numeric id of one sheet in the target workbook."""
    name: str
    sheet_id: int


class SheetRegistry:
    """Ordered, case-insensitively unique set of sheet identities."""

    def __init__(self):
        self._sheets = []

    def __iter__(self):
        return iter(self._sheets)

    def __len__(self):
        return len(self._sheets)

    @property
    def names(self):
        return [s.name for s in self._sheets]

    def exists(self, name: str) -> bool:
        folded = name.casefold()
        return any(s.name.casefold() == folded for s in self._sheets)

    def get(self, name: str) -> SheetIdentity:
        folded = name.casefold()
        for sheet in self._sheets:
            if sheet.name.casefold() == folded:
                return sheet
        raise TargetSheetNotFoundError(name)

    def next_sheet_id(self) -> int:
        """``max(existing ids) + 1``, or 1 for an empty workbook."""
        return max((s.sheet_id for s in self._sheets), default=0) + 1

    def register(self, name: str) -> SheetIdentity:
        if self.exists(name):
            raise DuplicateSheetNameError(name)
        identity = SheetIdentity(name=name, sheet_id=self.next_sheet_id())
        self._sheets.append(identity)
        return identity


def make_safe_sheet_name(name: str) -> str:
    """Replace characters not allowed in titles and cap the length."""
    name = _INVALID_TITLE_CHARS.sub("_", name).strip()
    if not name:
        name = "Sheet"
    return name[:MAX_SHEET_NAME_LENGTH]


def candidate_sheet_name(path: str) -> str:
    """Derive the preferred sheet name for a source file, before collision checks."""
    stem = os.path.splitext(os.path.basename(path))[0]
    if stem.startswith(SHEET_NAME_PREFIX):
        stem = SHEET_NAME_PREFIX_ALIAS + stem[len(SHEET_NAME_PREFIX):]
    if stem.endswith(SHEET_NAME_SUFFIX):
        stem = stem[: -len(SHEET_NAME_SUFFIX)]
    return make_safe_sheet_name(stem)


def resolve_sheet_name(path: str, registry: SheetRegistry,
                       max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> str:
    """Return a sheet name for ``path`` that is not yet used in ``registry``.

    Each retry overwrites the trailing characters of the previous attempt
    with the counter (0, 1, 2, ...), so ``...ABCD`` becomes ``...ABC0`` and
    then ``...ABC1``.

    Raises:
        DuplicateSheetNameError: if no free name is found in ``max_attempts`` tries.
    """
    sheet_name = candidate_sheet_name(path)
    counter = 0
    while registry.exists(sheet_name):
        if counter >= max_attempts:
            logger.error(f"Gave up resolving a sheet name for {path} after {max_attempts} attempts")
            raise DuplicateSheetNameError(sheet_name)
        suffix = str(counter)
        sheet_name = sheet_name[: max(0, len(sheet_name) - len(suffix))] + suffix
        counter += 1
    return sheet_name
