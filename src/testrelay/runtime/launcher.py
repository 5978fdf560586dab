# src/testrelay/runtime/launcher.py
"""
Starts test runs in the background and drives each run's state machine from
its process lifecycle events.
"""
import asyncio
import os
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import TypeAlias

import structlog
from attrs import define

from testrelay.config.models import RunnerConfig
from testrelay.exceptions import DirectoryNotFoundError, ProcessLaunchError
from testrelay.state import ReportCaptureStatus, RunRecord, RunStatus
from testrelay.telemetry import StructLogger
from testrelay.testing import TestFilters, TestRunner, build_run_command

from .registry import RunLookup, RunRegistry
from .reports import ReportCorrelator

log: StructLogger = structlog.get_logger("runtime.launcher")


# --- Lifecycle events ---
@define(frozen=True, slots=True)
class Spawned:
    """The runner process was started."""


@define(frozen=True, slots=True)
class Exited:
    """The runner process finished."""
    exit_code: int


@define(frozen=True, slots=True)
class LaunchFailed:
    """The runner process could not be started after the run was accepted."""
    message: str


RunEvent: TypeAlias = Spawned | Exited | LaunchFailed


class RunLifecycle:
    """
    State machine owner for a single run.

    Events arrive on a queue and are applied one at a time, so registry
    updates for a run always happen in event order. The machine stops once
    the run reaches a terminal state.
    """

    def __init__(self, run_id: str, registry: RunRegistry, correlator: ReportCorrelator):
        self.run_id = run_id
        self.registry = registry
        self.correlator = correlator
        self.events: asyncio.Queue[RunEvent] = asyncio.Queue()
        self._log = log.bind(run_id=run_id)

    def post(self, event: RunEvent) -> None:
        self.events.put_nowait(event)

    async def run(self) -> RunRecord:
        """Consumes events until the run is terminal, then returns its record."""
        while True:
            event = await self.events.get()
            record = await self._apply(event)
            if record.is_terminal:
                return record

    async def _apply(self, event: RunEvent) -> RunRecord:
        record = self.registry.get(self.run_id)
        if not isinstance(record, RunRecord):
            raise KeyError(f"Run '{self.run_id}' is not registered")

        if isinstance(event, Spawned):
            target = RunStatus.RUNNING
        elif isinstance(event, Exited):
            target = RunStatus.PASSED if event.exit_code == 0 else RunStatus.FAILED
        else:
            target = RunStatus.FAILED

        if not record.can_transition_to(target):
            self._log.warning(
                "Ignoring out-of-order lifecycle event",
                event=type(event).__name__,
                current_status=record.status.value,
            )
            return record

        if isinstance(event, Spawned):
            return self.registry.update(self.run_id, target)

        if isinstance(event, LaunchFailed):
            self.registry.record_launch_error(self.run_id, event.message)
            record = self.registry.update(self.run_id, target)
            self.registry.set_capture_status(self.run_id, ReportCaptureStatus.SKIPPED)
            return record

        self.registry.record_exit(self.run_id, event.exit_code)
        record = self.registry.update(self.run_id, target)
        capture_status = await self.correlator.capture_report_async(self.run_id)
        self.registry.set_capture_status(self.run_id, capture_status)
        return record


class RunLauncher:
    """Accepts run requests and returns their identifiers without waiting."""

    def __init__(
        self,
        project_dir: Path,
        runner_config: RunnerConfig,
        runner: TestRunner,
        registry: RunRegistry,
        correlator: ReportCorrelator,
        base_env: Mapping[str, str] | None = None,
    ):
        self.project_dir = Path(project_dir)
        self.runner_config = runner_config
        self.runner = runner
        self.registry = registry
        self.correlator = correlator
        self._base_env = base_env
        self._tasks: dict[str, asyncio.Task[RunRecord]] = {}
        log.debug("RunLauncher initialized.", project_dir=str(self.project_dir))

    @property
    def active_runs(self) -> int:
        return len(self._tasks)

    def build_env(self, run_id: str) -> dict[str, str]:
        base = os.environ if self._base_env is None else self._base_env
        env = {**base, self.runner_config.output_dir_env_var: f"reports/{run_id}"}
        if self.runner_config.report_file_env_var:
            env[self.runner_config.report_file_env_var] = self.runner_config.default_report_file
        return env

    def run_tests(self, filters: TestFilters) -> str:
        """
        Registers a new run as queued, schedules its process and returns the
        run id. Must be called from within a running event loop.

        Raises:
            DirectoryNotFoundError: If the project directory is missing.
        """
        if not self.project_dir.is_dir():
            log.error("Project directory does not exist", project_dir=str(self.project_dir))
            raise DirectoryNotFoundError(self.project_dir)

        run_id = uuid.uuid4().hex
        self.registry.update(run_id, RunStatus.QUEUED)

        command = build_run_command(self.runner_config, filters)
        env = self.build_env(run_id)
        lifecycle = RunLifecycle(run_id, self.registry, self.correlator)
        log.info("Run queued", run_id=run_id, command=" ".join(command))

        task = asyncio.create_task(self._execute(run_id, command, env, lifecycle), name=f"testrelay-run-{run_id}")
        self._tasks[run_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(run_id, None))
        return run_id

    async def _execute(
        self,
        run_id: str,
        command: list[str],
        env: dict[str, str],
        lifecycle: RunLifecycle,
    ) -> RunRecord:
        consumer = asyncio.create_task(lifecycle.run())
        try:
            await self._drive_process(run_id, command, env, lifecycle)
            return await consumer
        finally:
            if not consumer.done():
                consumer.cancel()

    async def _drive_process(
        self,
        run_id: str,
        command: list[str],
        env: dict[str, str],
        lifecycle: RunLifecycle,
    ) -> None:
        run_log = log.bind(run_id=run_id)
        try:
            process = await self.runner.start(command, self.project_dir, env)
        except ProcessLaunchError as e:
            run_log.error("Test runner could not be started", error=str(e), cause=str(e.cause))
            lifecycle.post(LaunchFailed(f"{e}: {e.cause}" if e.cause else str(e)))
            return

        lifecycle.post(Spawned())

        try:
            _, stderr_bytes = await process.communicate()
        except Exception:
            run_log.exception("Lost contact with test runner process", pid=process.pid)
            exit_code = -1
        else:
            exit_code = process.returncode if process.returncode is not None else -1
            if stderr_bytes:
                run_log.debug(
                    "Test runner stderr",
                    stderr=stderr_bytes.decode("utf-8", errors="replace").strip(),
                )

        run_log.info("Test runner exited", exit_code=exit_code)
        lifecycle.post(Exited(exit_code))

    async def wait_for_run(self, run_id: str) -> RunLookup:
        """Waits until run_id is terminal and returns its record."""
        task = self._tasks.get(run_id)
        if task is not None:
            await asyncio.shield(task)
        return self.registry.get(run_id)

    async def shutdown(self) -> None:
        """Waits for every in-flight run to finish."""
        if not self._tasks:
            return
        log.info("Waiting for in-flight runs", count=len(self._tasks))
        results = await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                log.error("Run task ended with an error", error=str(result))

# 🔼⚙️
