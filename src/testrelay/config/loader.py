#
# src/testrelay/config/loader.py
#
"""
Loads testrelay configuration from an optional TOML file plus environment
variables. Environment variables take precedence over the file.
"""

import os
import shlex
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from testrelay.exceptions import ConfigurationError

from .models import (
    GlobalConfig,
    ProjectConfig,
    RelayConfig,
    ReportsConfig,
    RunnerConfig,
    ServerConfig,
)

log = structlog.get_logger("config.loader")

# Environment variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "PROJECT_DIR": ("project", "project_dir"),
    "GIT_REPO_URL": ("project", "repo_url"),
    "GIT_BRANCH": ("project", "branch"),
    "REPORTS_DIR": ("reports", "reports_dir"),
    "PORT": ("server", "port"),
    "TESTRELAY_HOST": ("server", "host"),
    "TESTRELAY_LOG_LEVEL": ("global", "log_level"),
    "TESTRELAY_RUNNER_COMMAND": ("runner", "command"),
}


def _read_toml(config_path: Path) -> dict[str, Any]:
    log.debug("Reading configuration file", path=str(config_path))
    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: '{config_path}'") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in '{config_path}': {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read configuration file '{config_path}': {e}") from e


def _coerce_env_value(section: str, key: str, raw: str) -> Any:
    if section == "server" and key == "port":
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigurationError(f"PORT must be an integer, got '{raw}'") from e
    if section == "runner" and key == "command":
        return shlex.split(raw)
    return raw


def _apply_env_overrides(data: dict[str, Any], env: Mapping[str, str]) -> None:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        raw = env.get(env_name)
        if raw is None or raw == "":
            continue
        data.setdefault(section, {})[key] = _coerce_env_value(section, key, raw)
        log.debug("Applied environment override", env_var=env_name, section=section, key=key)


def _build_section(cls: type, section: str, values: Mapping[str, Any]) -> Any:
    try:
        return cls(**values)
    except TypeError as e:
        raise ConfigurationError(f"Unknown or missing option in [{section}]: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Invalid value in [{section}]: {e}") from e


def load_config(config_path: Path | None = None, env: Mapping[str, str] | None = None) -> RelayConfig:
    """
    Builds a RelayConfig from a TOML file and the environment.

    Args:
        config_path: Optional path to a TOML configuration file.
        env: Environment mapping, defaults to os.environ.

    Raises:
        ConfigurationError: If the file is unreadable or invalid, or if the
            project directory is not configured.
    """
    env = os.environ if env is None else env
    data: dict[str, Any] = _read_toml(config_path) if config_path is not None else {}
    _apply_env_overrides(data, env)

    project_values = data.get("project", {})
    if not str(project_values.get("project_dir", "")).strip():
        log.error("Project directory is not configured")
        raise ConfigurationError("Missing project folder: set PROJECT_DIR or [project].project_dir")

    config = RelayConfig(
        project=_build_section(ProjectConfig, "project", project_values),
        runner=_build_section(RunnerConfig, "runner", data.get("runner", {})),
        reports=_build_section(ReportsConfig, "reports", data.get("reports", {})),
        server=_build_section(ServerConfig, "server", data.get("server", {})),
        global_config=_build_section(GlobalConfig, "global", data.get("global", {})),
    )
    log.info(
        "Configuration loaded",
        config_path=str(config_path) if config_path else None,
        project_dir=str(config.project_dir),
        runner=config.runner.name,
    )
    return config


# 🔼⚙️
