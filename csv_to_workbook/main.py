"""
csv-to-workbook: Command Line Entry Point
=========================================
Combines the CSV reports of one scan into a single Excel workbook.

Usage:
    csv-to-workbook -s <root_folder> [-t <template_name>] [-tp <template_path>] [-o <output_folder>]
    python -m csv_to_workbook.main -s <root_folder> [--config config.yaml]

The root folder must contain ``SummaryReport.csv`` and a ``ScannerReports``
folder. The workbook is written to ``<output_folder>/Workbook``.
"""

import logging
import os
import sys

from .config import build_parser, parse_settings
from .constants import FINAL_SUMMARY_REPORT_CSV, REPORT_FOLDER_NAME
from .errors import MissingArgumentError, TemplateNotFoundError
from .generator import WorkbookGenerator

logger = logging.getLogger(__name__)


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def validate_settings(settings):
    """Return an error message for unusable settings, or None."""
    path = os.path.join(settings.root_folder, REPORT_FOLDER_NAME)
    if not os.path.isdir(path):
        return f"Source folder {path} does not exist."

    if not os.path.isfile(os.path.join(settings.root_folder, FINAL_SUMMARY_REPORT_CSV)):
        return f"Summary file {FINAL_SUMMARY_REPORT_CSV} does not exist in {settings.root_folder}."

    if settings.template_file_path and not os.path.isfile(settings.template_file_path):
        return f"Template file {settings.template_file_path} does not exist."

    return None


class ConsoleProgress:
    """Renders progress notifications as two lines of text on a stream."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr

    def __call__(self, info):
        if not info.current_file_name:
            self.stream.write(
                f"\nImporting file {info.total_files_position} of {info.total_files_max}.\n"
            )
        else:
            percentage = info.current_file_percentage
            if percentage is None:
                percentage = 100
            self.stream.write(f"\rImporting {info.current_file_name}...{percentage}%")
        self.stream.flush()


def main(argv=None) -> int:
    try:
        settings = parse_settings(argv)
    except MissingArgumentError as err:
        build_parser().print_usage(sys.stderr)
        print(f"Error: {err}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level)

    message = validate_settings(settings)
    if message:
        print(f"Error: {message}", file=sys.stderr)
        return 1

    settings.progress_callback = ConsoleProgress()
    generator = WorkbookGenerator(settings)

    logger.info(f"Source folder: {settings.root_folder}")
    logger.info(f"Output workbook: {generator.output_path}")

    try:
        summary = generator.run()
    except TemplateNotFoundError as err:
        logger.error(f"Could not create workbook: {err}")
        return 1

    print(f"\nImport complete, workbook written to {summary.output_path}")
    if summary.files_failed:
        print(f"{summary.files_failed} file(s) could not be imported, see the log for details.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
