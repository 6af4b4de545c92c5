"""
csv-to-workbook
===============
Combines a folder of CSV scan reports into one Excel workbook: the summary
report fills the template's ``Summary`` sheet and every detail report
becomes a sheet of its own, streamed row by row.
"""

from .config import Settings, load_config, parse_settings
from .generator import RunSummary, WorkbookGenerator
from .package import WorkbookPackage
from .progress import ProgressInfo

__all__ = [
    "ProgressInfo",
    "RunSummary",
    "Settings",
    "WorkbookGenerator",
    "WorkbookPackage",
    "load_config",
    "parse_settings",
]
