# src/testrelay/runtime/registry.py
"""
In-memory registry of run records, keyed by run identifier.
"""
from typing import TypeAlias

import structlog

from testrelay.state import RUN_NOT_FOUND, ReportCaptureStatus, RunRecord, RunStatus, RunNotFound
from testrelay.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.registry")
RunLookup: TypeAlias = RunRecord | RunNotFound


class RunRegistry:
    """
    Single source of truth for the state of every run.

    One instance is created by the orchestrator and handed to the components
    that need it. Entries are never removed, so the mapping grows for the
    lifetime of the process.
    """

    def __init__(self) -> None:
        self._runs: dict[str, RunRecord] = {}
        log.debug("RunRegistry initialized.")

    def __contains__(self, run_id: object) -> bool:
        return run_id in self._runs

    def __len__(self) -> int:
        return len(self._runs)

    def update(self, run_id: str, status: RunStatus) -> RunRecord:
        """
        Sets the status of run_id and stamps the transition time, creating
        the record if absent. A terminal record keeps its status.
        """
        record = self._runs.get(run_id)
        if record is None:
            record = RunRecord(run_id=run_id, status=status)
            self._runs[run_id] = record
            log.debug("Registered run", run_id=run_id, status=status.value)
            return record

        if record.is_terminal and status is not record.status:
            log.warning(
                "Rejected transition out of terminal status",
                run_id=run_id,
                current_status=record.status.value,
                requested_status=status.value,
            )
            return record

        record.update_status(status)
        return record

    def get(self, run_id: str) -> RunLookup:
        """Returns the record for run_id, or RUN_NOT_FOUND."""
        return self._runs.get(run_id, RUN_NOT_FOUND)

    def record_exit(self, run_id: str, exit_code: int) -> None:
        self._require(run_id).exit_code = exit_code

    def record_launch_error(self, run_id: str, message: str) -> None:
        self._require(run_id).error_message = message

    def set_capture_status(self, run_id: str, capture_status: ReportCaptureStatus) -> None:
        record = self._require(run_id)
        record.report_capture_status = capture_status
        log.debug("Report capture status set", run_id=run_id, capture_status=capture_status.value)

    def _require(self, run_id: str) -> RunRecord:
        try:
            return self._runs[run_id]
        except KeyError:
            raise KeyError(f"Unknown run '{run_id}'") from None

# 🔼⚙️
