# src/testrelay/engines/git/exceptions.py

"""
Errors raised while cloning or updating the project checkout.
"""

from pathlib import Path

from testrelay.exceptions import TestRelayError


class GitSyncError(TestRelayError):
    """The project checkout could not be cloned or updated."""

    def __init__(self, message: str, repo_path: str | Path | None = None, details: Exception | None = None):
        self.repo_path = str(repo_path) if repo_path is not None else None
        self.details = details
        location = f" in '{self.repo_path}'" if self.repo_path else ""
        super().__init__(f"[GitSync] {message}{location}")
        if details is not None:
            self.add_note(f"Caused by {type(details).__name__}: {details}")


class GitDivergedError(GitSyncError):
    """Local and remote branches have diverged, so a fast-forward is impossible."""


# 🔼⚙️
