#
# src/testrelay/runtime/__init__.py
#
"""
Run orchestration sub-package: registry, discovery, launcher and reports.
"""
from .discovery import TestDiscovery, parse_test_list
from .launcher import Exited, LaunchFailed, RunLauncher, RunLifecycle, Spawned
from .orchestrator import TestOrchestrator
from .registry import RunRegistry
from .reports import ReportCorrelator

__all__ = [
    "Exited",
    "LaunchFailed",
    "ReportCorrelator",
    "RunLauncher",
    "RunLifecycle",
    "RunRegistry",
    "Spawned",
    "TestDiscovery",
    "TestOrchestrator",
    "parse_test_list",
]

# 🔼⚙️
