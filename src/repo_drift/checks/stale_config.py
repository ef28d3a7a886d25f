"""Detect backup and editor leftovers by filename suffix."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import List

from ..models import Finding, FindingCategory, FindingSeverity, RepoSnapshot
from .base import DriftCheck

STALE_SUFFIXES: tuple[str, ...] = (".old", ".bak", ".tmp", ".swp", ".orig")


class StaleConfigCheck(DriftCheck):
    """Flag files whose name ends with a stale suffix. Matching is case-sensitive."""

    category = FindingCategory.STALE_CONFIG

    def __init__(self, suffixes: tuple[str, ...] = STALE_SUFFIXES) -> None:
        self.suffixes = suffixes

    def run(self, snapshot: RepoSnapshot) -> List[Finding]:
        findings: List[Finding] = []
        for path in snapshot.files:
            suffix = self._matching_suffix(PurePosixPath(path).name)
            if suffix is None:
                continue

            findings.append(
                Finding(
                    category=self.category,
                    severity=FindingSeverity.WARNING,
                    path=path,
                    message="Stale configuration or backup file",
                    detail={"suffix": suffix},
                )
            )
        return findings

    def _matching_suffix(self, name: str) -> str | None:
        for suffix in self.suffixes:
            if name.endswith(suffix):
                return suffix
        return None
