"""End-to-end tests for the workbook generator and the command line."""

import os

import pytest
from openpyxl import load_workbook

from csv_to_workbook.config import Settings
from csv_to_workbook.errors import TemplateNotFoundError
from csv_to_workbook.generator import WorkbookGenerator
from csv_to_workbook.main import main


def _settings(root, tmp_path, **kwargs):
    return Settings(root_folder=str(root), output_folder_path=str(tmp_path / "out"), **kwargs)


class TestOutputPath:
    def test_first_free_name(self, report_root, tmp_path):
        generator = WorkbookGenerator(_settings(report_root, tmp_path))
        expected = os.path.join(str(tmp_path / "out"), "Workbook", "SMATWorkbook.xlsx")
        assert generator.output_path == os.path.abspath(expected)
        assert os.path.isdir(os.path.dirname(expected))

    def test_existing_files_not_overwritten(self, report_root, tmp_path):
        folder = tmp_path / "out" / "Workbook"
        folder.mkdir(parents=True)
        (folder / "SMATWorkbook.xlsx").write_bytes(b"")
        (folder / "SMATWorkbook_1.xlsx").write_bytes(b"")
        generator = WorkbookGenerator(_settings(report_root, tmp_path))
        assert os.path.basename(generator.output_path) == "SMATWorkbook_2.xlsx"

    def test_defaults_to_root_folder(self, report_root):
        generator = WorkbookGenerator(Settings(root_folder=str(report_root)))
        assert generator.output_path.startswith(os.path.abspath(str(report_root / "Workbook")))


class TestWorkbookGenerator:
    def test_detail_order(self, report_root, tmp_path):
        generator = WorkbookGenerator(_settings(report_root, tmp_path))
        assert [r.filename for r in generator.detail_records()] == [
            "SiteAssessmentReport.csv",
            "Alerts-detail.csv",
            "WorkflowAssociations-detail.csv",
        ]

    def test_run(self, report_root, tmp_path):
        seen = []
        generator = WorkbookGenerator(_settings(report_root, tmp_path, progress_callback=seen.append))
        summary = generator.run()

        assert summary.files_processed == 3
        assert summary.files_failed == 0
        assert all(r.ok for r in summary.results)

        wb = load_workbook(summary.output_path)
        try:
            assert wb.sheetnames == [
                "Summary",
                "SiteAssessmentReport",
                "Alerts",
                "WorkflowAssociations",
            ]
            assert wb["Summary"]["B2"].value == "Overview"
            assert wb["Summary"]["C3"].value == "2"
            assert wb["SiteAssessmentReport"]["B1"].value == "Remediation"
            assert wb["SiteAssessmentReport"]["D3"].value == 20
            assert wb["Alerts"]["D2"].value == "2020-01-31"
            assert wb["WorkflowAssociations"]["D2"].value is True
        finally:
            wb.close()

        totals = [(i.total_files_position, i.total_files_max) for i in seen if not i.current_file_name]
        assert totals == [(1, 3), (2, 3), (3, 3), (3, 3)]

    def test_failing_file_is_skipped(self, report_root, tmp_path, caplog):
        os.remove(str(report_root / "SiteAssessmentReport.csv"))
        summary = WorkbookGenerator(_settings(report_root, tmp_path)).run()

        assert [r.processed for r in summary.records] == [False, True, True]
        assert "Import of SiteAssessmentReport.csv failed" in caplog.text
        wb = load_workbook(summary.output_path)
        try:
            assert wb.sheetnames == ["Summary", "Alerts", "WorkflowAssociations"]
        finally:
            wb.close()

    def test_missing_summary_still_imports_details(self, report_root, tmp_path, caplog):
        os.remove(str(report_root / "SummaryReport.csv"))
        summary = WorkbookGenerator(_settings(report_root, tmp_path)).run()
        assert summary.summary_result is None
        assert summary.files_processed == 3
        assert "Summary import failed" in caplog.text

    def test_unknown_template(self, report_root, tmp_path):
        generator = WorkbookGenerator(_settings(report_root, tmp_path, template_name="Nope"))
        with pytest.raises(TemplateNotFoundError):
            generator.run()
        assert not os.path.exists(generator.output_path)


class TestMain:
    def test_success(self, report_root, tmp_path, capsys):
        out = tmp_path / "cli-out"
        assert main(["-s", str(report_root), "-o", str(out)]) == 0
        assert (out / "Workbook" / "SMATWorkbook.xlsx").exists()
        captured = capsys.readouterr()
        assert "Import complete" in captured.out
        assert "Importing file 1 of 3." in captured.err

    def test_missing_root_argument(self, capsys):
        assert main([]) == 1
        assert "-s" in capsys.readouterr().err

    def test_missing_report_folder(self, tmp_path, capsys):
        (tmp_path / "SummaryReport.csv").write_text("a,b\n")
        assert main(["-s", str(tmp_path)]) == 1
        assert "ScannerReports" in capsys.readouterr().err

    def test_missing_summary(self, report_root, capsys):
        os.remove(str(report_root / "SummaryReport.csv"))
        assert main(["-s", str(report_root)]) == 1
        assert "SummaryReport.csv" in capsys.readouterr().err

    def test_missing_template_file(self, report_root, tmp_path, capsys):
        missing = str(tmp_path / "missing.xlsx")
        assert main(["-s", str(report_root), "-tp", missing]) == 1
        assert missing in capsys.readouterr().err
