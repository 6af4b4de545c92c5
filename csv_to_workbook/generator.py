"""
Workbook Generator
==================
Runs one import: creates the target workbook from a template, writes the
summary report into its ``Summary`` sheet and adds one sheet per detail
report.

Detail reports are processed in this order:

1. ``<root>/SiteAssessmentReport.csv``
2. every file in ``<root>/ScannerReports``, sorted by file name

A failing file is logged and skipped; the remaining files are still
imported and the workbook is always saved.
"""

import logging
import os
from dataclasses import dataclass, field

from .constants import (
    FINAL_SITE_REPORT_CSV,
    FINAL_SUMMARY_REPORT_CSV,
    REPORT_FOLDER_NAME,
    WORKBOOK_FILENAME_FORMAT,
    WORKBOOK_OUTPUT_FOLDER,
)
from .importers import ProcessingRecord, SheetImporter, SummaryImporter
from .package import WorkbookPackage
from .progress import ProgressInfo, safe_reporter
from .templates import load_template

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """What one :meth:`WorkbookGenerator.run` produced."""
    output_path: str
    records: list = field(default_factory=list)
    results: list = field(default_factory=list)
    summary_result: object = None

    @property
    def files_processed(self) -> int:
        return sum(1 for r in self.records if r.processed)

    @property
    def files_failed(self) -> int:
        return len(self.records) - self.files_processed


class WorkbookGenerator:
    """Generates one workbook from the reports under ``settings.root_folder``."""

    def __init__(self, settings):
        self.settings = settings
        self._progress = safe_reporter(settings.progress_callback)
        self._output_path = None

    @property
    def output_path(self) -> str:
        """Absolute path of the workbook to write; picked once, on first access."""
        if not self._output_path:
            self._output_path = self._get_output_path()
        return self._output_path

    def _get_output_path(self) -> str:
        output_root = os.path.join(self.settings.output_folder, WORKBOOK_OUTPUT_FOLDER)
        os.makedirs(output_root, exist_ok=True)

        counter = 0
        path = os.path.join(output_root, WORKBOOK_FILENAME_FORMAT.format(""))
        # never overwrite an earlier run
        while os.path.exists(path):
            counter += 1
            path = os.path.join(output_root, WORKBOOK_FILENAME_FORMAT.format(f"_{counter}"))
        return os.path.abspath(path)

    def detail_records(self) -> list:
        """The detail reports to import, in import order."""
        report_folder = os.path.join(self.settings.root_folder, REPORT_FOLDER_NAME)
        records = []
        if os.path.isdir(report_folder):
            records = [
                ProcessingRecord.from_path(os.path.join(report_folder, name))
                for name in os.listdir(report_folder)
                if os.path.isfile(os.path.join(report_folder, name))
            ]
        else:
            logger.warning(f"Report folder {report_folder} does not exist")
        records.sort(key=lambda r: r.filename)

        # the site report sits in the root folder alongside the summary report
        site_report = os.path.join(self.settings.root_folder, FINAL_SITE_REPORT_CSV)
        records.insert(0, ProcessingRecord.from_path(site_report))
        return records

    def run(self) -> RunSummary:
        """Create the workbook and import every report into it.

        Raises:
            TemplateNotFoundError: if the template cannot be loaded; nothing
                is written in that case.
        """
        logger.info("Beginning import")
        template = load_template(self.settings.template_name, self.settings.template_file_path)
        summary = RunSummary(output_path=self.output_path)

        with WorkbookPackage.create_from_template(template, self.output_path) as package:
            summary.summary_result = self._process_summary_file(package)
            self._process_detail_files(package, summary)

        logger.info(
            f"Completed import: {summary.files_processed} of {len(summary.records)} "
            f"detail files imported into {summary.output_path}"
        )
        return summary

    def _process_summary_file(self, package):
        path = os.path.join(self.settings.root_folder, FINAL_SUMMARY_REPORT_CSV)
        try:
            importer = SummaryImporter(package, path, self._progress, self.settings.encoding)
            return importer.import_()
        except Exception as err:
            logger.error(f"Summary import failed: {err}")
            logger.debug("Summary import failure details", exc_info=True)
            return None

    def _process_detail_files(self, package, summary):
        records = self.detail_records()
        summary.records = records
        total = len(records)

        try:
            for counter, record in enumerate(records, start=1):
                self._progress(ProgressInfo(total_files_position=counter, total_files_max=total))
                logger.info(f"Processing import for source file {record.absolute_path}")
                try:
                    importer = SheetImporter(
                        package, record, self._progress,
                        encoding=self.settings.encoding,
                        date_formats=self.settings.date_formats,
                    )
                    summary.results.append(importer.import_())
                    record.processed = True
                    logger.info(f"Processed import for source file {record.absolute_path}")
                except Exception as err:
                    logger.error(f"Import of {record.filename} failed: {err}")
                    logger.debug(f"Import failure details for {record.filename}", exc_info=True)
        finally:
            # report full progress at the end for consistency
            self._progress(ProgressInfo(total_files_position=total, total_files_max=total))
