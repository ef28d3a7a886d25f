"""Snapshot of the scanned tree shared read-only by every check."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath


@dataclass(frozen=True, slots=True)
class RepoSnapshot:
    """Files and directories found beneath ``root``, as sorted POSIX paths."""

    root: Path
    files: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()

    def has_file(self, relative: str) -> bool:
        return relative in self.files

    def files_named(self, name: str) -> tuple[str, ...]:
        """Return every file whose basename equals ``name``."""

        return tuple(path for path in self.files if PurePosixPath(path).name == name)

    def absolute(self, relative: str) -> Path:
        return self.root / relative
