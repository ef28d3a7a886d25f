"""Adapter layer wrapping the filesystem walker and the git CLI."""

from .git_status import (
    GitChange,
    GitQueryError,
    GitStatus,
    GitStatusQuery,
    NotARepositoryError,
    StatusQuery,
)
from .tree_walker import VCS_METADATA_DIRS, TreeWalker, TreeWalkError, WalkEntry

__all__ = [
    "GitChange",
    "GitQueryError",
    "GitStatus",
    "GitStatusQuery",
    "NotARepositoryError",
    "StatusQuery",
    "TreeWalkError",
    "TreeWalker",
    "VCS_METADATA_DIRS",
    "WalkEntry",
]
