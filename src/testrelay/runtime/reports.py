# src/testrelay/runtime/reports.py
"""
Relocates each run's report artifact to a run-addressed path and reads it back.
"""
import asyncio
import re
import shutil
from pathlib import Path

import structlog

from testrelay.exceptions import ReportCaptureError
from testrelay.state import ReportCaptureStatus
from testrelay.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.reports")
# Run ids are used as file name components.
RUN_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class ReportCorrelator:
    """
    Owns the step that moves the runner's conventional report file into
    `<reports_dir>/<run_id><suffix>`. Only the relocated copy is ever read.
    """

    def __init__(
        self,
        project_dir: Path,
        reports_dir: Path,
        default_report_file: str = "test-results.json",
        report_file_suffix: str = "-test-results.json",
    ):
        self.project_dir = Path(project_dir)
        self.reports_dir = Path(reports_dir)
        self.default_report_file = default_report_file
        self.report_file_suffix = report_file_suffix

    @property
    def source_path(self) -> Path:
        return self.project_dir / self.default_report_file

    def report_path(self, run_id: str) -> Path:
        return self.reports_dir / f"{run_id}{self.report_file_suffix}"

    def _move_report(self, run_id: str) -> Path:
        source = self.source_path
        destination = self.report_path(run_id)
        try:
            self.reports_dir.mkdir(parents=True, exist_ok=True)
            # Moved, never copied: a report belongs to exactly one run.
            shutil.move(source, destination)
        except OSError as e:
            raise ReportCaptureError(run_id, source, e) from e
        return destination

    def capture_report(self, run_id: str) -> ReportCaptureStatus:
        """
        Moves the runner's report out of the project into the run's report
        path. Failures are logged and reported through the return value,
        never raised.
        """
        capture_log = log.bind(run_id=run_id, source=str(self.source_path))
        try:
            destination = self._move_report(run_id)
        except ReportCaptureError as e:
            capture_log.warning(
                "Failed to capture run report",
                error=str(e.details) if e.details else str(e),
            )
            return ReportCaptureStatus.FAILED

        capture_log.info("Run report captured", destination=str(destination))
        return ReportCaptureStatus.CAPTURED

    async def capture_report_async(self, run_id: str) -> ReportCaptureStatus:
        return await asyncio.to_thread(self.capture_report, run_id)

    def get_report(self, run_id: str) -> str | None:
        """
        Returns the relocated report's content, or None when there is none.

        None covers unfinished runs, runs without a report, failed captures
        and unknown run ids alike.
        """
        if not RUN_ID_PATTERN.match(run_id):
            log.warning("Rejected malformed run id", run_id=run_id)
            return None
        path = self.report_path(run_id)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.debug("Report not found", run_id=run_id, path=str(path))
            return None

# 🔼⚙️
