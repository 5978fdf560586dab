# src/testrelay/cli/run_cmds.py

import asyncio
import sys
from pathlib import Path

import click
import structlog

from testrelay.cli.utils import (
    config_option,
    filter_options,
    filters_from_options,
    load_config_or_exit,
    logging_options,
    setup_logging_from_context,
)
from testrelay.exceptions import TestRelayError
from testrelay.runtime import TestOrchestrator
from testrelay.state import RunRecord, RunStatus
from testrelay.telemetry import StructLogger
from testrelay.testing import TestFilters

log: StructLogger = structlog.get_logger("cli.run")


@click.command(name="list")
@config_option
@filter_options
@logging_options
@click.pass_context
def list_cli(
    ctx: click.Context,
    config_path: Path | None,
    tags: tuple[str, ...],
    file_paths: tuple[str, ...],
    test_name: str | None,
    **kwargs,
):
    """List the tests matching the given filters."""
    config = load_config_or_exit(ctx, config_path)
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        config=config,
    )
    orchestrator = TestOrchestrator(config)

    try:
        tests = orchestrator.list_tests(filters_from_options(tags, file_paths, test_name))
    except TestRelayError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    for test in tests:
        click.echo(test)


async def _run_and_wait(orchestrator: TestOrchestrator, filters: TestFilters) -> RunRecord:
    run_id = orchestrator.run_tests(filters)
    click.echo(f"Run {run_id} queued")
    record = await orchestrator.wait_for_run(run_id)
    await orchestrator.shutdown()
    return record


@click.command(name="run")
@config_option
@filter_options
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    config_path: Path | None,
    tags: tuple[str, ...],
    file_paths: tuple[str, ...],
    test_name: str | None,
    **kwargs,
):
    """Run the tests matching the given filters and wait for the result."""
    config = load_config_or_exit(ctx, config_path)
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        config=config,
    )
    orchestrator = TestOrchestrator(config)
    filters = filters_from_options(tags, file_paths, test_name)

    try:
        record = asyncio.run(_run_and_wait(orchestrator, filters))
    except TestRelayError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    except KeyboardInterrupt:
        log.warning("Run interrupted by KeyboardInterrupt (CTRL-C).")
        sys.exit(130)

    click.echo(f"Run {record.run_id} {record.status.value}")
    if record.error_message:
        click.echo(f"Error: {record.error_message}", err=True)
    report = orchestrator.correlator.report_path(record.run_id)
    if report.exists():
        click.echo(f"Report: {report}")

    if record.status is not RunStatus.PASSED:
        ctx.exit(1)

# 🔼⚙️
