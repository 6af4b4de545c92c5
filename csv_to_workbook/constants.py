"""Folder, file and sheet naming constants shared by the generator."""

# Folder under the root containing the per-dataset detail reports
REPORT_FOLDER_NAME = "ScannerReports"

# Site report living in the root folder alongside the summary report
FINAL_SITE_REPORT_CSV = "SiteAssessmentReport.csv"

# Summary report living in the root folder
FINAL_SUMMARY_REPORT_CSV = "SummaryReport.csv"

# Output folder (under the chosen output path) and file name pattern
WORKBOOK_OUTPUT_FOLDER = "Workbook"
WORKBOOK_FILENAME_FORMAT = "SMATWorkbook{0}.xlsx"

DEFAULT_TEMPLATE_NAME = "FastTrack"

# Pre-existing sheet populated by the summary importer
SUMMARY_WORKSHEET_NAME = "Summary"

# Sheet titles longer than this are truncated before collision checks
MAX_SHEET_NAME_LENGTH = 30

# Long file name prefix rewritten to a short alias, and a trailing marker removed
SHEET_NAME_PREFIX = "FullTrustSolution_"
SHEET_NAME_PREFIX_ALIAS = "FTS_"
SHEET_NAME_SUFFIX = "-detail"

# Detail sheets reserve columns A and B; the header label goes in B1
REMEDIATION_LABEL = "Remediation"
DETAIL_COLUMN_OFFSET = 3

# The summary sheet starts in column B
SUMMARY_COLUMN_OFFSET = 2

DEFAULT_ENCODING = "utf-8-sig"
