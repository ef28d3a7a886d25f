from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol


_CONFLICT_STATES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


class GitQueryError(RuntimeError):
    """Raised when the git executable is missing or a status query fails."""


class NotARepositoryError(GitQueryError):
    """Raised when the queried directory is not inside a git work tree."""


@dataclass(frozen=True, slots=True)
class GitChange:
    """One entry from ``git status``, with ``path`` relative to the queried directory."""

    status: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Structured result of a status query."""

    modified: tuple[GitChange, ...] = ()
    untracked: tuple[GitChange, ...] = ()
    deleted: tuple[GitChange, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not (self.modified or self.untracked or self.deleted)


class StatusQuery(Protocol):
    def query(self, root: Path) -> GitStatus: ...


class GitStatusQuery:
    """Query uncommitted and untracked state by executing ``git status``."""

    def __init__(self, git_bin: str = "git") -> None:
        self.git_bin = git_bin

    def query(self, root: str | os.PathLike[str]) -> GitStatus:
        """Return the working tree status for ``root`` and everything beneath it."""

        working_dir = Path(root)
        prefix = self._show_prefix(working_dir)

        completed = self._run_command(
            [
                self.git_bin,
                "status",
                "--porcelain=v1",
                "-z",
                "--untracked-files=all",
                "--",
                ".",
            ],
            cwd=working_dir,
        )
        return parse_porcelain(completed.stdout, prefix=prefix)

    # ------------------------------------------------------------------
    def _show_prefix(self, working_dir: Path) -> str:
        completed = self._run_command([self.git_bin, "rev-parse", "--show-prefix"], cwd=working_dir)
        return completed.stdout.strip()

    # Command runner -------------------------------------------------------------
    def _run_command(self, args: List[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                check=True,
                capture_output=True,
                text=True,
                # status and error text are matched in English
                env={**os.environ, "LC_ALL": "C"},
            )
        except FileNotFoundError as exc:
            raise GitQueryError(f"Executable not found: {args[0]}") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            if "not a git repository" in stderr.lower():
                raise NotARepositoryError(f"Not a git repository: {cwd}") from exc
            raise GitQueryError(
                f"Command '{' '.join(args)}' failed with exit code {exc.returncode}"
                + (f": {stderr}" if stderr else "")
            ) from exc

        return completed


def parse_porcelain(output: str, *, prefix: str = "") -> GitStatus:
    """Parse ``git status --porcelain=v1 -z`` output.

    Paths in porcelain output are relative to the repository top level; ``prefix``
    (from ``git rev-parse --show-prefix``) is stripped so the results are relative
    to the queried directory.
    """

    modified: list[GitChange] = []
    untracked: list[GitChange] = []
    deleted: list[GitChange] = []

    records = output.split("\0")
    index = 0
    while index < len(records):
        record = records[index]
        index += 1
        if len(record) < 4:
            continue

        status, path = record[:2], record[3:]
        if "R" in status or "C" in status:
            # renames and copies are followed by a record holding the original path
            index += 1

        if prefix and path.startswith(prefix):
            path = path[len(prefix):]

        change = GitChange(status=status, path=path)
        if status == "??":
            untracked.append(change)
        elif status == "!!":
            continue
        elif status in _CONFLICT_STATES:
            modified.append(change)
        elif "D" in status:
            deleted.append(change)
        else:
            modified.append(change)

    return GitStatus(
        modified=tuple(sorted(modified, key=lambda change: change.path)),
        untracked=tuple(sorted(untracked, key=lambda change: change.path)),
        deleted=tuple(sorted(deleted, key=lambda change: change.path)),
    )


__all__ = [
    "GitChange",
    "GitQueryError",
    "GitStatus",
    "GitStatusQuery",
    "NotARepositoryError",
    "StatusQuery",
    "parse_porcelain",
]
