# src/testrelay/cli/utils.py

import logging
from pathlib import Path

import click
import structlog

from testrelay.config import RelayConfig, load_config
from testrelay.exceptions import ConfigurationError
from testrelay.telemetry import setup_logging
from testrelay.testing import TestFilters

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging.getLevelNamesMapping()), case_sensitive=False)


def logging_options(f):
    """Adds --log-level, --log-file and --json-logs to a command."""
    options = [
        click.option(
            "-l",
            "--log-level",
            type=LOG_LEVEL_CHOICES,
            envvar="TESTRELAY_LOG_LEVEL",
            help="Logging level for this invocation.",
        ),
        click.option(
            "--log-file",
            type=click.Path(dir_okay=False, writable=True, resolve_path=True),
            envvar="TESTRELAY_LOG_FILE",
            help="Also write JSON logs to this file.",
        ),
        click.option(
            "--json-logs",
            is_flag=True,
            default=None,
            envvar="TESTRELAY_JSON_LOGS",
            help="Render console logs as JSON.",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def config_option(f):
    return click.option(
        "-c",
        "--config-path",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
        default=None,
        envvar="TESTRELAY_CONF",
        show_envvar=True,
        help="Path to a TOML configuration file. Environment variables override it.",
    )(f)


def filter_options(f):
    """Adds the test filter options shared by 'list' and 'run'."""
    f = click.option("-t", "--tag", "tags", multiple=True, help="Select tests tagged @TAG. Repeatable.")(f)
    f = click.option("-f", "--file", "file_paths", multiple=True, help="Restrict to a test file. Repeatable.")(f)
    f = click.option("-n", "--name", "test_name", default=None, help="Select tests whose title matches NAME.")(f)
    return f


def filters_from_options(tags: tuple[str, ...], file_paths: tuple[str, ...], test_name: str | None) -> TestFilters:
    return TestFilters(tags=tags or None, file_paths=file_paths or None, test_name=test_name)


def load_config_or_exit(ctx: click.Context, config_path: Path | None) -> RelayConfig:
    """Loads configuration, turning ConfigurationError into exit status 1."""
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load configuration", error=str(e))
        click.echo(f"Error: Configuration problem: {e}", err=True)
        ctx.exit(1)


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    config: RelayConfig | None = None,
    default_log_level: str = "WARNING",
) -> None:
    """
    Configures logging for a command. Options given on the subcommand win
    over the ones given on the `testrelay` group, which win over
    `[global].log_level` from a loaded config.
    """
    group_opts = ctx.obj or {}
    level_name = local_log_level or group_opts.get("LOG_LEVEL")
    if level_name is not None:
        level = logging.getLevelNamesMapping().get(level_name.upper(), logging.INFO)
    elif config is not None:
        level = config.global_config.numeric_log_level
    else:
        level = logging.getLevelNamesMapping()[default_log_level]
    log_file = local_log_file or group_opts.get("LOG_FILE")
    json_logs = local_json_logs if local_json_logs is not None else bool(group_opts.get("JSON_LOGS"))

    setup_logging(level=level, json_logs=json_logs, log_file=log_file)
    log.debug(
        "CLI logging initialized",
        level=logging.getLevelName(level),
        log_file=log_file,
        json_logs=json_logs,
    )

# ⚙️🛠️
