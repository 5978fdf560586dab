#
# tests/unit/test_reports.py
#
"""
Tests for report relocation and retrieval.
"""

from pathlib import Path

import pytest

from testrelay.runtime import ReportCorrelator
from testrelay.state import ReportCaptureStatus


@pytest.fixture
def correlator(project_dir: Path, reports_dir: Path) -> ReportCorrelator:
    return ReportCorrelator(project_dir=project_dir, reports_dir=reports_dir)


class TestReportCorrelator:
    def test_report_path_is_run_addressed(self, correlator: ReportCorrelator, reports_dir: Path) -> None:
        assert correlator.report_path("abc123") == reports_dir / "abc123-test-results.json"

    def test_capture_moves_report_and_creates_dir(
        self, correlator: ReportCorrelator, project_dir: Path, reports_dir: Path
    ) -> None:
        (project_dir / "test-results.json").write_text('{"suites": []}')
        assert not reports_dir.exists()

        status = correlator.capture_report("abc123")

        assert status is ReportCaptureStatus.CAPTURED
        assert (reports_dir / "abc123-test-results.json").read_text() == '{"suites": []}'
        assert not (project_dir / "test-results.json").exists()

    def test_report_is_never_captured_twice(self, correlator: ReportCorrelator, project_dir: Path) -> None:
        (project_dir / "test-results.json").write_text('{"first": true}')

        assert correlator.capture_report("run-1") is ReportCaptureStatus.CAPTURED
        assert correlator.capture_report("run-2") is ReportCaptureStatus.FAILED
        assert correlator.get_report("run-2") is None
        assert correlator.get_report("run-1") == '{"first": true}'

    def test_capture_missing_source_is_swallowed(self, correlator: ReportCorrelator) -> None:
        assert correlator.capture_report("abc123") is ReportCaptureStatus.FAILED
        assert correlator.get_report("abc123") is None

    async def test_capture_async(self, correlator: ReportCorrelator, project_dir: Path) -> None:
        (project_dir / "test-results.json").write_text("{}")

        assert await correlator.capture_report_async("abc123") is ReportCaptureStatus.CAPTURED

    def test_get_report_reads_relocated_copy_only(
        self, correlator: ReportCorrelator, project_dir: Path
    ) -> None:
        (project_dir / "test-results.json").write_text('{"first": true}')
        correlator.capture_report("run-1")
        (project_dir / "test-results.json").write_text('{"second": true}')

        assert correlator.get_report("run-1") == '{"first": true}'

    def test_unknown_run_has_no_report(self, correlator: ReportCorrelator) -> None:
        assert correlator.get_report("never-ran") is None

    @pytest.mark.parametrize("run_id", ["../secret", "a/b", "", ".."])
    def test_malformed_run_ids_have_no_report(self, correlator: ReportCorrelator, run_id: str) -> None:
        assert correlator.get_report(run_id) is None
