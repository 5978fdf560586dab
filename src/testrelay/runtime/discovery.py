# src/testrelay/runtime/discovery.py
"""
Enumerates tests by invoking the runner in listing mode.
"""
from pathlib import Path

import structlog

from testrelay.config.models import RunnerConfig
from testrelay.exceptions import DirectoryNotFoundError
from testrelay.telemetry import StructLogger
from testrelay.testing import TestFilters, TestRunner, build_list_command

log: StructLogger = structlog.get_logger("runtime.discovery")

# Lines of listing output that start with this marker are test entries.
TEST_ENTRY_MARKER = "  "


def parse_test_list(output: str | None) -> list[str]:
    """Keeps the lines of listing output that start with the entry marker."""
    if not output:
        log.debug("Empty test list")
        return []
    return [
        line.rstrip("\r")
        for line in output.split("\n")
        if line.startswith(TEST_ENTRY_MARKER)
    ]


class TestDiscovery:
    """Stateless, blocking test enumeration."""

    __test__ = False

    def __init__(self, project_dir: Path, runner_config: RunnerConfig, runner: TestRunner):
        self.project_dir = Path(project_dir)
        self.runner_config = runner_config
        self.runner = runner

    def list_tests(self, filters: TestFilters) -> list[str]:
        """
        Returns one entry per test matching filters.

        Raises:
            DirectoryNotFoundError: If the project directory is missing. The
                runner is not invoked.
            ProcessLaunchError: If the runner could not be started.
        """
        if not self.project_dir.is_dir():
            log.error("Project directory does not exist", project_dir=str(self.project_dir))
            raise DirectoryNotFoundError(self.project_dir)

        command = build_list_command(self.runner_config, filters)
        log.debug("Listing tests", command=" ".join(command))
        result = self.runner.list_tests(command, self.project_dir)

        if result.stderr:
            log.error("Test runner wrote to stderr while listing", stderr=result.stderr.strip())
        if result.exit_code != 0:
            log.warning("Listing command exited with nonzero code", exit_code=result.exit_code)

        tests = parse_test_list(result.stdout)
        log.info("Listed tests", count=len(tests))
        return tests

# 🔼⚙️
