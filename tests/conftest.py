"""Shared fixtures for building small repository trees on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping

import pytest

from repo_drift.adapters import GitQueryError, GitStatus, TreeWalker
from repo_drift.models import RepoSnapshot


class StubStatusQuery:
    """Status query replacement that never invokes git."""

    def __init__(self, status: GitStatus | None = None, error: GitQueryError | None = None) -> None:
        self.status = status or GitStatus()
        self.error = error
        self.calls: list[Path] = []

    def query(self, root: Path) -> GitStatus:
        self.calls.append(Path(root))
        if self.error is not None:
            raise self.error
        return self.status


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Mapping[str, str | bytes]], Path]:
    """Write ``{relative_path: content}`` beneath ``tmp_path`` and return the root."""

    def _write(files: Mapping[str, str | bytes]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def snapshot_of() -> Callable[[Path], RepoSnapshot]:
    def _snapshot(root: Path) -> RepoSnapshot:
        return TreeWalker(root).snapshot()

    return _snapshot
