#
# src/testrelay/testing/__init__.py
#
"""
External test runner invocation sub-package for testrelay.
"""
from .arguments import build_filter_args, build_list_command, build_run_command
from .factory import get_test_runner
from .protocols import ListingResult, RunnerProcess, TestFilters, TestRunner
from .subprocess_runner import SubprocessTestRunner

__all__ = [
    "ListingResult",
    "RunnerProcess",
    "SubprocessTestRunner",
    "TestFilters",
    "TestRunner",
    "build_filter_args",
    "build_list_command",
    "build_run_command",
    "get_test_runner",
]

# 🔼⚙️
