"""
Workbook Templates
==================
A template lists the sheets a generated workbook starts with, and any
cell values they carry. Templates come either from a YAML file shipped in
``csv_to_workbook/builtin_templates`` (looked up by name) or from an existing
Excel workbook on disk.
"""

import logging
import os
from dataclasses import dataclass, field

import yaml
from openpyxl import load_workbook

from .cell_address import decode_cell_address
from .errors import TemplateNotFoundError

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "builtin_templates")

TEMPLATE_FILE_EXTENSIONS = (".xlsx", ".xlsm", ".xltx", ".xltm")


@dataclass
class TemplateSheet:
    """A sheet present in the template."""
    title: str
    cells: dict = field(default_factory=dict)  # (row, column) -> value


@dataclass
class WorkbookTemplate:
    name: str
    sheets: list = field(default_factory=list)


def builtin_template_names():
    """Names of the templates shipped with the package."""
    if not os.path.isdir(BUILTIN_TEMPLATE_DIR):
        return []
    return sorted(
        os.path.splitext(f)[0]
        for f in os.listdir(BUILTIN_TEMPLATE_DIR)
        if f.lower().endswith((".yaml", ".yml"))
    )


def _parse_template(name, data):
    if not isinstance(data, dict):
        raise TemplateNotFoundError(f"Template '{name}' is not a mapping.")
    sheets = []
    for entry in data.get("sheets") or []:
        cells = {}
        for address, value in (entry.get("cells") or {}).items():
            column, row = decode_cell_address(str(address))
            cells[(row, column)] = value
        sheets.append(TemplateSheet(title=str(entry["title"]), cells=cells))
    return WorkbookTemplate(name=str(data.get("name", name)), sheets=sheets)


def load_builtin_template(name: str) -> WorkbookTemplate:
    """Load a shipped template by name (case-insensitive).

    Raises:
        TemplateNotFoundError: if no template of that name is shipped.
    """
    for candidate in builtin_template_names():
        if candidate.lower() == (name or "").lower():
            path = os.path.join(BUILTIN_TEMPLATE_DIR, f"{candidate}.yaml")
            if not os.path.exists(path):
                path = os.path.join(BUILTIN_TEMPLATE_DIR, f"{candidate}.yml")
            logger.info(f"Loading built-in template '{candidate}' from {path}")
            with open(path, "r", encoding="utf-8") as f:
                return _parse_template(candidate, yaml.safe_load(f))

    message = f"Could not locate built-in template {name}."
    logger.error(message)
    raise TemplateNotFoundError(message)


def load_template_file(path: str) -> WorkbookTemplate:
    """Read sheet titles and cell values from an Excel workbook used as template.

    Raises:
        TemplateNotFoundError: if the file is missing or cannot be read.
    """
    if not os.path.isfile(path):
        raise TemplateNotFoundError(f"Template file {path} does not exist.")
    if not path.lower().endswith(TEMPLATE_FILE_EXTENSIONS):
        raise TemplateNotFoundError(f"Template file {path} is not an Excel workbook.")

    logger.info(f"Loading template workbook {path}")
    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except Exception as err:
        raise TemplateNotFoundError(f"Could not read template file {path}: {err}") from err

    try:
        sheets = []
        for ws in wb.worksheets:
            cells = {}
            for row in ws.iter_rows():
                for cell in row:
                    if cell.value is None:
                        continue
                    cells[(cell.row, cell.column)] = cell.value
            sheets.append(TemplateSheet(title=ws.title, cells=cells))
    finally:
        wb.close()

    name = os.path.splitext(os.path.basename(path))[0]
    return WorkbookTemplate(name=name, sheets=sheets)


def load_template(template_name=None, template_file_path=None) -> WorkbookTemplate:
    """Use the template file when it exists, otherwise the built-in template by name."""
    if template_file_path and os.path.exists(template_file_path):
        return load_template_file(template_file_path)
    return load_builtin_template(template_name)
