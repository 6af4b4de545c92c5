"""Shared fixtures: CSV report folders laid out like a scan's output."""

import os

import pytest


def _write_lines(path, lines, encoding="utf-8"):
    os.makedirs(os.path.dirname(str(path)), exist_ok=True)
    with open(path, "w", encoding=encoding, newline="") as f:
        f.write("\r\n".join(lines) + "\r\n")
    return str(path)


@pytest.fixture
def write_csv():
    """Write ``lines`` to a CSV file and return its path."""
    return _write_lines


@pytest.fixture
def report_root(tmp_path):
    """A scan folder with a summary, a site report and two scanner reports."""
    root = tmp_path / "scan"
    _write_lines(root / "SummaryReport.csv", [
        "Overview",
        "Sites,2",
        "Lists,5",
    ])
    _write_lines(root / "SiteAssessmentReport.csv", [
        "SiteUrl,ItemCount",
        "https://a,10",
        "https://b,20",
    ])
    _write_lines(root / "ScannerReports" / "WorkflowAssociations-detail.csv", [
        "SiteUrl,Enabled",
        "https://a,True",
    ])
    _write_lines(root / "ScannerReports" / "Alerts-detail.csv", [
        "SiteUrl,Created",
        "https://a,2020-01-31",
    ])
    return root
