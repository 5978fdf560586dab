# src/testrelay/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from testrelay.cli.utils import config_option, load_config_or_exit, logging_options, setup_logging_from_context
from testrelay.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@config_option
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path | None, **kwargs):
    """Load, validate, and display the configuration."""
    config = load_config_or_exit(ctx, config_path)
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        config=config,
    )
    log.info("Executing 'config show' command", config_path=str(config_path) if config_path else None)
    click.echo(pretty_repr(config, expand_all=True))

    if not config.project_dir.is_dir():
        log.warning("Configured project directory does not exist yet", project_dir=str(config.project_dir))

# 🔼⚙️
