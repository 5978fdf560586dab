#
# src/testrelay/exceptions.py
#
"""
Exception hierarchy for testrelay.

Failures that happen before a test runner process starts are raised to the
caller. Failures after a process has started are folded into the run's own
status and never raised.
"""

from pathlib import Path


class TestRelayError(Exception):
    """Base class for all testrelay errors."""

    __test__ = False  # keep pytest from collecting this as a test class


class ConfigurationError(TestRelayError):
    """Raised when required configuration is missing or invalid."""

    pass


class DirectoryNotFoundError(TestRelayError):
    """Raised when the project checkout does not exist."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Project directory does not exist: '{self.path}'")


class ProcessLaunchError(TestRelayError):
    """Raised when the external test runner could not be started at all."""

    def __init__(self, command: list[str], cause: Exception | None = None):
        self.command = list(command)
        self.cause = cause
        executable = self.command[0] if self.command else "<empty command>"
        super().__init__(f"Failed to start test runner '{executable}'")
        if cause is not None and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(cause).__name__}: {cause}")


class ReportCaptureError(TestRelayError):
    """Raised internally when a run's report could not be relocated."""

    def __init__(self, run_id: str, source: Path, details: Exception | None = None):
        self.run_id = run_id
        self.source = source
        self.details = details
        super().__init__(f"Could not capture report for run '{run_id}' from '{source}'")
