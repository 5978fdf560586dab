#
# src/testrelay/config/models.py
#
"""
Attrs-based data models for testrelay configuration structure.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import define, field


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_port(inst: Any, attr: Any, value: int) -> None:
    if not isinstance(value, int) or not 0 < value < 65536:
        raise ValueError(f"Field '{attr.name}' must be a TCP port number, got {value}")


def _validate_non_empty_command(inst: Any, attr: Any, value: tuple[str, ...]) -> None:
    if not value or not all(isinstance(part, str) and part for part in value):
        raise ValueError(f"Field '{attr.name}' must be a non-empty list of strings, got {value!r}")


def _validate_project_dir(inst: Any, attr: Any, value: Path) -> None:
    if not str(value).strip():
        raise ValueError("Field 'project_dir' must not be empty")


# --- Section models ---
@define(frozen=True, slots=True)
class ProjectConfig:
    """The checked-out project that tests run against."""
    project_dir: Path = field(converter=Path, validator=_validate_project_dir)
    repo_url: str | None = field(default=None)
    branch: str | None = field(default=None)


@define(frozen=True, slots=True)
class RunnerConfig:
    """How the external test runner is invoked."""
    name: str = field(default="playwright")
    command: tuple[str, ...] = field(
        default=("npx", "playwright", "test"),
        converter=tuple,
        validator=_validate_non_empty_command,
    )
    list_flag: str = field(default="--list")
    report_flag: str = field(default="--reporter=json")
    output_dir_env_var: str = field(default="PW_OUTPUT_DIR")
    # Tells the JSON reporter to write default_report_file instead of stdout.
    report_file_env_var: str = field(default="PLAYWRIGHT_JSON_OUTPUT_NAME")
    default_report_file: str = field(default="test-results.json")


@define(frozen=True, slots=True)
class ReportsConfig:
    """Where relocated run reports are stored."""
    reports_dir: Path = field(default=Path("reports"), converter=Path)
    report_file_suffix: str = field(default="-test-results.json")


@define(frozen=True, slots=True)
class ServerConfig:
    host: str = field(default="127.0.0.1")
    port: int = field(default=3000, validator=_validate_port)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for testrelay."""
    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level.upper()]


@define(frozen=True, slots=True)
class RelayConfig:
    """Root configuration object for the testrelay application."""
    project: ProjectConfig = field()
    runner: RunnerConfig = field(factory=RunnerConfig)
    reports: ReportsConfig = field(factory=ReportsConfig)
    server: ServerConfig = field(factory=ServerConfig)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})

    @property
    def project_dir(self) -> Path:
        return self.project.project_dir


# 🔼⚙️
