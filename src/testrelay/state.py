# src/testrelay/state.py
#
"""
Defines the run state models tracked by the orchestrator.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

import structlog
from attrs import field, mutable

log: structlog.stdlib.BoundLogger = structlog.get_logger("state")


class RunStatus(Enum):
    """Lifecycle states of a single test run."""

    QUEUED = "queued"  # Accepted, process not yet confirmed spawned.
    RUNNING = "running"  # Process spawned.
    PASSED = "passed"  # Process exited with code 0.
    FAILED = "failed"  # Nonzero exit, or the process never started.

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.PASSED, RunStatus.FAILED)


class ReportCaptureStatus(Enum):
    """Outcome of relocating a run's report artifact. Never exposed in status payloads."""

    PENDING = "pending"
    CAPTURED = "captured"
    FAILED = "failed"
    SKIPPED = "skipped"  # No process ran, so there was nothing to capture.


# Allowed forward transitions. Terminal states have none.
ALLOWED_TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.QUEUED: frozenset({RunStatus.RUNNING, RunStatus.FAILED}),
    RunStatus.RUNNING: frozenset({RunStatus.PASSED, RunStatus.FAILED}),
    RunStatus.PASSED: frozenset(),
    RunStatus.FAILED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


@mutable(slots=True)
class RunRecord:
    """
    Holds the state of one test execution attempt.

    Mutated in place on every lifecycle event and never removed from the
    registry for the lifetime of the process.
    """

    run_id: str = field()
    status: RunStatus = field(default=RunStatus.QUEUED)
    timestamp: datetime = field(factory=_utcnow)
    exit_code: int | None = field(default=None)
    error_message: str | None = field(default=None)
    report_capture_status: ReportCaptureStatus = field(default=ReportCaptureStatus.PENDING)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def can_transition_to(self, new_status: RunStatus) -> bool:
        return new_status == self.status or new_status in ALLOWED_TRANSITIONS[self.status]

    def update_status(self, new_status: RunStatus) -> None:
        """Overwrites the status and stamps the transition time."""
        old_status = self.status
        self.status = new_status
        self.timestamp = _utcnow()

        log_func = log.info if new_status.is_terminal else log.debug
        log_func(
            "Run status changed",
            run_id=self.run_id,
            old_status=old_status.value,
            new_status=new_status.value,
            **({"exit_code": self.exit_code} if self.exit_code is not None else {}),
        )

    def to_status_payload(self) -> dict[str, Any]:
        return {"status": self.status.value, "timestamp": self.timestamp.isoformat()}


class RunNotFound:
    """Distinguished result for lookups of unknown run identifiers."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "RUN_NOT_FOUND"

    def to_status_payload(self) -> dict[str, Any]:
        return {"error": "Run not found"}


RUN_NOT_FOUND = RunNotFound()

# 🔼⚙️
