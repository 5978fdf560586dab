#
# src/testrelay/testing/protocols.py
#
"""
Defines protocols and data structures for invoking an external test runner.
"""
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from attrs import define, field


def _optional_str_tuple(value: Iterable[str] | str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@define(frozen=True, slots=True)
class TestFilters:
    """
    Selects a subset of tests. Consumed once per listing or run call.
    """
    __test__ = False

    tags: tuple[str, ...] | None = field(default=None, converter=_optional_str_tuple)
    file_paths: tuple[str, ...] | None = field(default=None, converter=_optional_str_tuple)
    test_name: str | None = field(default=None)


@define(frozen=True, slots=True)
class ListingResult:
    """
    Structured result from a runner invoked in listing mode.
    """
    exit_code: int
    stdout: str
    stderr: str


@runtime_checkable
class RunnerProcess(Protocol):
    """A started runner process. asyncio.subprocess.Process satisfies this."""

    pid: int
    returncode: int | None

    async def communicate(self, input: bytes | None = None) -> tuple[bytes | None, bytes | None]:
        ...


@runtime_checkable
class TestRunner(Protocol):
    """
    Protocol for a runner that can enumerate and execute a project's tests.
    """
    def list_tests(self, command: list[str], working_dir: Path) -> ListingResult:
        """
        Runs the listing command and blocks until it completes.

        Raises:
            ProcessLaunchError: If the process could not be started at all.
        """
        ...

    async def start(
        self,
        command: list[str],
        working_dir: Path,
        env: Mapping[str, str],
    ) -> RunnerProcess:
        """
        Starts the execution command without waiting for it to finish.

        Raises:
            ProcessLaunchError: If the process could not be started at all.
        """
        ...

# 🔼⚙️
