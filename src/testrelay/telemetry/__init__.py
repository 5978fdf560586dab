#
# src/testrelay/telemetry/__init__.py
#
"""
Logging setup for testrelay.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
