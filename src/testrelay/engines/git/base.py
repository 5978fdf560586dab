# src/testrelay/engines/git/base.py

"""
Clones or fast-forwards the project checkout using pygit2.
"""

import asyncio
import getpass
from enum import Enum
from pathlib import Path

import pygit2
import structlog
from attrs import define, field
from pygit2.credentials import CredentialType
from pygit2.enums import MergeAnalysis

from testrelay.exceptions import ConfigurationError

from .exceptions import GitDivergedError, GitSyncError

log = structlog.get_logger("engines.git.base")

REMOTE_NAME = "origin"


class SyncAction(Enum):
    CLONED = "cloned"
    UP_TO_DATE = "up_to_date"
    FAST_FORWARDED = "fast_forwarded"


@define(frozen=True, slots=True)
class SyncResult:
    action: SyncAction
    branch: str | None = field(default=None)
    head_commit_hash: str | None = field(default=None)

    @property
    def message(self) -> str:
        if self.action is SyncAction.CLONED:
            return "Repository cloned"
        if self.action is SyncAction.UP_TO_DATE:
            return "Repository already up to date"
        return "Repository updated"

    def to_payload(self) -> dict[str, str | None]:
        return {
            "status": "success",
            "message": self.message,
            "action": self.action.value,
            "branch": self.branch,
            "commit": self.head_commit_hash,
        }


class ProjectSync:
    """Brings project_dir in line with the configured remote repository."""

    def __init__(self, repo_url: str | None, project_dir: Path, branch: str | None = None) -> None:
        self.repo_url = repo_url
        self.project_dir = Path(project_dir)
        self.branch = branch
        self._log = log.bind(project_dir=str(self.project_dir))

    # --- Authentication Callback ---
    def _credentials_callback(
        self, url: str, username_from_url: str | None, allowed_types: int
    ) -> CredentialType | None:
        """Provides credentials to pygit2, attempting SSH agent first."""
        cred_log = self._log.bind(url=url, username_from_url=username_from_url)
        cred_log.debug("Credentials callback invoked")

        if allowed_types & CredentialType.SSH_KEY:
            ssh_user = username_from_url or getpass.getuser()
            cred_log.debug("Using SSH agent credentials", ssh_user=ssh_user)
            return pygit2.KeypairFromAgent(ssh_user)

        cred_log.warning("No suitable credentials found or configured via callbacks.")
        return None

    def _callbacks(self) -> pygit2.RemoteCallbacks:
        return pygit2.RemoteCallbacks(credentials=self._credentials_callback)

    def sync(self) -> SyncResult:
        """
        Clones the repository when the checkout is missing, otherwise fetches
        and fast-forwards the current branch.

        Raises:
            ConfigurationError: If no repository URL is configured.
            GitSyncError: If a git operation fails or the branch has diverged.
        """
        if not self.repo_url:
            raise ConfigurationError("Missing repo URL: set GIT_REPO_URL or [project].repo_url")

        if self.project_dir.exists():
            return self._pull()
        return self._clone()

    async def sync_async(self) -> SyncResult:
        return await asyncio.to_thread(self.sync)

    def _clone(self) -> SyncResult:
        self._log.info("Cloning project repository", repo_url=self.repo_url, branch=self.branch)
        try:
            repo = pygit2.clone_repository(
                self.repo_url,
                str(self.project_dir),
                checkout_branch=self.branch,
                callbacks=self._callbacks(),
            )
        except pygit2.GitError as e:
            self._log.error("Clone failed", error=str(e))
            raise GitSyncError("Clone failed", str(self.project_dir), e) from e

        return SyncResult(
            action=SyncAction.CLONED,
            branch=None if repo.head_is_unborn else repo.head.shorthand,
            head_commit_hash=None if repo.head_is_unborn else str(repo.head.target),
        )

    def _open_repo(self) -> pygit2.Repository:
        repo_path = pygit2.discover_repository(str(self.project_dir))
        if not repo_path:
            raise GitSyncError("Not a Git repository", str(self.project_dir))
        return pygit2.Repository(repo_path)

    def _pull(self) -> SyncResult:
        try:
            repo = self._open_repo()
            if repo.head_is_unborn:
                raise GitSyncError("Checkout has no commits", str(self.project_dir))

            branch = repo.head.shorthand
            if self.branch and branch != self.branch:
                raise GitSyncError(
                    f"Checkout is on branch '{branch}', expected '{self.branch}'", str(self.project_dir)
                )
            if REMOTE_NAME not in repo.remotes.names():
                raise GitSyncError(f"Remote '{REMOTE_NAME}' not found", str(self.project_dir))

            pull_log = self._log.bind(branch=branch)
            pull_log.info("Fetching project repository")
            repo.remotes[REMOTE_NAME].fetch(callbacks=self._callbacks())

            remote_ref = repo.references.get(f"refs/remotes/{REMOTE_NAME}/{branch}")
            if remote_ref is None:
                raise GitSyncError(f"Remote branch '{REMOTE_NAME}/{branch}' not found", str(self.project_dir))

            analysis, _ = repo.merge_analysis(remote_ref.target)
            if analysis & MergeAnalysis.UP_TO_DATE:
                pull_log.info("Project repository already up to date")
                return SyncResult(SyncAction.UP_TO_DATE, branch, str(repo.head.target))

            if not analysis & MergeAnalysis.FASTFORWARD:
                raise GitDivergedError(
                    f"Branch '{branch}' has diverged from '{REMOTE_NAME}/{branch}'", str(self.project_dir)
                )

            target_commit = repo.get(remote_ref.target)
            repo.checkout_tree(target_commit)
            repo.lookup_reference(f"refs/heads/{branch}").set_target(remote_ref.target)
            pull_log.info("Project repository fast-forwarded", commit=str(remote_ref.target))
            return SyncResult(SyncAction.FAST_FORWARDED, branch, str(remote_ref.target))
        except pygit2.GitError as e:
            self._log.error("Git operation failed", error=str(e))
            raise GitSyncError("Git operation failed", str(self.project_dir), e) from e

# 🔼⚙️
