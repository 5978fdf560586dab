# src/testrelay/cli/serve_cmds.py

from pathlib import Path

import click
import structlog
import uvicorn

from testrelay.api import create_app
from testrelay.cli.utils import config_option, load_config_or_exit, logging_options, setup_logging_from_context
from testrelay.engines.git import GitSyncError, ProjectSync
from testrelay.exceptions import ConfigurationError
from testrelay.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.serve")


@click.command(name="serve")
@config_option
@click.option("--host", default=None, help="Interface to bind (overrides config).")
@click.option("--port", type=int, default=None, help="Port to bind (overrides config).")
@logging_options
@click.pass_context
def serve_cli(ctx: click.Context, config_path: Path | None, host: str | None, port: int | None, **kwargs):
    """Serve the HTTP API."""
    config = load_config_or_exit(ctx, config_path)
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        config=config,
    )
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    log.info("Starting API server", host=bind_host, port=bind_port, project_dir=str(config.project_dir))
    # log_config=None keeps uvicorn on the structlog handlers configured above.
    uvicorn.run(create_app(config), host=bind_host, port=bind_port, log_config=None)
    log.info("API server stopped.")


@click.command(name="sync")
@config_option
@logging_options
@click.pass_context
def sync_cli(ctx: click.Context, config_path: Path | None, **kwargs):
    """Clone or fast-forward the project checkout."""
    config = load_config_or_exit(ctx, config_path)
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        config=config,
    )
    project_sync = ProjectSync(config.project.repo_url, config.project_dir, config.project.branch)

    try:
        result = project_sync.sync()
    except (GitSyncError, ConfigurationError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(f"{result.message} ({result.action.value})")

# 🔼⚙️
