#
# src/testrelay/engines/git/__init__.py
#
"""
Keeps the project checkout current using pygit2.
"""
from .base import ProjectSync, SyncAction, SyncResult
from .exceptions import GitSyncError

__all__ = ["GitSyncError", "ProjectSync", "SyncAction", "SyncResult"]

# 🔼⚙️
