# src/testrelay/cli/main.py

"""
Command line entry point. Global logging options given here apply to every
subcommand unless the subcommand overrides them.
"""

import click
import structlog

from testrelay import __version__
from testrelay.cli.config_cmds import config_cli
from testrelay.cli.run_cmds import list_cli, run_cli
from testrelay.cli.serve_cmds import serve_cli, sync_cli
from testrelay.cli.utils import logging_options, setup_logging_from_context
from testrelay.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", prog_name="testrelay")
@logging_options
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, json_logs: bool | None):
    """
    testrelay: list, run and report on tests in a checked-out project.

    Settings come from environment variables, then the config file, then
    defaults.
    """
    ctx.ensure_object(dict)
    ctx.obj.update(LOG_LEVEL=log_level, LOG_FILE=log_file, JSON_LOGS=bool(json_logs))
    setup_logging_from_context(ctx)


cli.add_command(config_cli)
cli.add_command(list_cli)
cli.add_command(run_cli)
cli.add_command(serve_cli)
cli.add_command(sync_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
