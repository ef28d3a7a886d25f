"""Filesystem traversal for the scanned repository."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Iterator

from ..models import RepoSnapshot

_LOG = logging.getLogger(__name__)

VCS_METADATA_DIRS: frozenset[str] = frozenset({".git", ".hg", ".svn"})


class TreeWalkError(RuntimeError):
    """Raised when the root directory cannot be traversed."""


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """A path beneath the root, relative and POSIX-formatted."""

    path: str
    is_dir: bool


class TreeWalker:
    """Yield files and directories beneath a root, skipping VCS metadata."""

    def __init__(
        self,
        root: str | os.PathLike[str],
        *,
        skip_dirs: AbstractSet[str] = VCS_METADATA_DIRS,
    ) -> None:
        self.root = Path(root)
        self.skip_dirs = frozenset(skip_dirs)

    def walk(self) -> Iterator[WalkEntry]:
        """Validate the root and return a one-shot iterator over its entries."""

        self._validate_root()
        return self._iter_entries()

    def snapshot(self) -> RepoSnapshot:
        """Drain :meth:`walk` into an immutable :class:`RepoSnapshot`."""

        files: list[str] = []
        directories: list[str] = []
        for entry in self.walk():
            (directories if entry.is_dir else files).append(entry.path)

        return RepoSnapshot(
            root=self.root.resolve(),
            files=tuple(sorted(files)),
            directories=tuple(sorted(directories)),
        )

    # ------------------------------------------------------------------
    def _validate_root(self) -> None:
        if not self.root.exists():
            raise TreeWalkError(f"Directory does not exist: {self.root}")
        if not self.root.is_dir():
            raise TreeWalkError(f"Not a directory: {self.root}")

        try:
            with os.scandir(self.root):
                pass
        except OSError as exc:
            raise TreeWalkError(f"Cannot read directory {self.root}: {exc.strerror}") from exc

    def _iter_entries(self) -> Iterator[WalkEntry]:
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._on_error):
            current = Path(dirpath)
            dirnames[:] = sorted(name for name in dirnames if name not in self.skip_dirs)

            for name in dirnames:
                yield WalkEntry(path=self._relative(current / name), is_dir=True)
            for name in sorted(filenames):
                # submodules and worktrees carry a ``.git`` file instead of a directory
                if name in self.skip_dirs:
                    continue
                yield WalkEntry(path=self._relative(current / name), is_dir=False)

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def _on_error(self, error: OSError) -> None:
        _LOG.warning("Skipping unreadable path %s: %s", error.filename, error.strerror)


__all__ = ["TreeWalkError", "TreeWalker", "VCS_METADATA_DIRS", "WalkEntry"]
