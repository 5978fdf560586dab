# src/testrelay/runtime/orchestrator.py

"""
High-level coordinator for test runs.
Builds the registry, discovery, launcher and report correlator from one
configuration and exposes the operations callers use.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from testrelay.config import RelayConfig
from testrelay.telemetry import StructLogger
from testrelay.testing import TestFilters, TestRunner, get_test_runner

from .discovery import TestDiscovery
from .launcher import RunLauncher
from .registry import RunLookup, RunRegistry
from .reports import ReportCorrelator

log: StructLogger = structlog.get_logger("runtime.orchestrator")


class TestOrchestrator:
    """Instantiates and coordinates all runtime components for test runs."""

    __test__ = False

    def __init__(
        self,
        config: RelayConfig,
        runner: TestRunner | None = None,
        base_env: Mapping[str, str] | None = None,
    ):
        self.config = config
        self.runner = runner if runner is not None else get_test_runner(config.runner.name)
        self.registry = RunRegistry()
        self.correlator = ReportCorrelator(
            project_dir=config.project_dir,
            reports_dir=config.reports.reports_dir,
            default_report_file=config.runner.default_report_file,
            report_file_suffix=config.reports.report_file_suffix,
        )
        self.discovery = TestDiscovery(config.project_dir, config.runner, self.runner)
        self.launcher = RunLauncher(
            project_dir=config.project_dir,
            runner_config=config.runner,
            runner=self.runner,
            registry=self.registry,
            correlator=self.correlator,
            base_env=base_env,
        )
        log.debug(
            "Orchestrator initialized",
            project_dir=str(config.project_dir),
            reports_dir=str(config.reports.reports_dir),
            runner=type(self.runner).__name__,
        )

    def list_tests(self, filters: TestFilters | None = None) -> list[str]:
        return self.discovery.list_tests(filters or TestFilters())

    def run_tests(self, filters: TestFilters | None = None) -> str:
        return self.launcher.run_tests(filters or TestFilters())

    def get_run_status(self, run_id: str) -> dict[str, Any]:
        log.debug("Getting run status", run_id=run_id)
        return self.registry.get(run_id).to_status_payload()

    def get_run_report(self, run_id: str) -> str | None:
        return self.correlator.get_report(run_id)

    async def wait_for_run(self, run_id: str) -> RunLookup:
        return await self.launcher.wait_for_run(run_id)

    @property
    def active_runs(self) -> int:
        return self.launcher.active_runs

    async def shutdown(self) -> None:
        await self.launcher.shutdown()
        log.info("Orchestrator shutdown complete.")
