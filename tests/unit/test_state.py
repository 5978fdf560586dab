#
# tests/unit/test_state.py
#
"""
Tests for run state models.
"""

from datetime import datetime

from testrelay.state import RUN_NOT_FOUND, ReportCaptureStatus, RunRecord, RunStatus


class TestRunStatus:
    def test_terminal_states(self) -> None:
        assert RunStatus.PASSED.is_terminal
        assert RunStatus.FAILED.is_terminal
        assert not RunStatus.QUEUED.is_terminal
        assert not RunStatus.RUNNING.is_terminal


class TestRunRecord:
    def test_new_record_defaults(self) -> None:
        record = RunRecord(run_id="abc")

        assert record.status is RunStatus.QUEUED
        assert record.exit_code is None
        assert record.error_message is None
        assert record.report_capture_status is ReportCaptureStatus.PENDING
        assert record.timestamp.tzinfo is not None

    def test_update_status_overwrites_timestamp(self) -> None:
        record = RunRecord(run_id="abc")
        first = record.timestamp

        record.update_status(RunStatus.RUNNING)

        assert record.status is RunStatus.RUNNING
        assert record.timestamp >= first

    def test_forward_transitions_only(self) -> None:
        record = RunRecord(run_id="abc")
        assert record.can_transition_to(RunStatus.RUNNING)
        assert record.can_transition_to(RunStatus.FAILED)
        assert not record.can_transition_to(RunStatus.PASSED)

        record.update_status(RunStatus.RUNNING)
        assert record.can_transition_to(RunStatus.PASSED)
        assert not record.can_transition_to(RunStatus.QUEUED)

        record.update_status(RunStatus.PASSED)
        for status in (RunStatus.QUEUED, RunStatus.RUNNING, RunStatus.FAILED):
            assert not record.can_transition_to(status)

    def test_status_payload(self) -> None:
        record = RunRecord(run_id="abc", status=RunStatus.RUNNING)

        payload = record.to_status_payload()

        assert payload["status"] == "running"
        assert datetime.fromisoformat(payload["timestamp"]) == record.timestamp
        assert "report_capture_status" not in payload


def test_run_not_found_sentinel() -> None:
    assert not RUN_NOT_FOUND
    assert RUN_NOT_FOUND.to_status_payload() == {"error": "Run not found"}
