"""Check interface shared by the fixed set of drift checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, List

from ..models import Finding, FindingCategory, RepoSnapshot


class DriftCheck(ABC):
    """Abstract base class describing the check contract."""

    category: ClassVar[FindingCategory]

    @abstractmethod
    def run(self, snapshot: RepoSnapshot) -> List[Finding]:
        """Inspect the snapshot and return findings in this check's category."""


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, dropping a trailing ``\\r``.

    ``str.splitlines`` also breaks on form feeds and other separators, which would
    shift reported line numbers away from what editors show.
    """

    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
