#
# config/__init__.py
#
"""
Configuration handling sub-package for testrelay.

Exports the loading function and core configuration model.
"""

from .loader import load_config
from .models import (
    GlobalConfig,
    ProjectConfig,
    RelayConfig,
    ReportsConfig,
    RunnerConfig,
    ServerConfig,
)

__all__ = [
    "GlobalConfig",
    "ProjectConfig",
    "RelayConfig",
    "ReportsConfig",
    "RunnerConfig",
    "ServerConfig",
    "load_config",
]

# 🔼⚙️
