"""Orchestration layer used by the CLI to execute a drift audit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from .adapters import StatusQuery, TreeWalker, TreeWalkError
from .checks import DriftCheck, build_checks
from .models import DriftReport, Finding

_LOG = logging.getLogger(__name__)

WalkerFactory = Callable[[Path], TreeWalker]


class DriftAuditor:
    """Walk the target tree once and run every check against the snapshot."""

    def __init__(
        self,
        *,
        walker_factory: WalkerFactory | None = None,
        status_query: StatusQuery | None = None,
        checks: Sequence[DriftCheck] | None = None,
    ) -> None:
        self._walker_factory = walker_factory or TreeWalker
        self._checks = tuple(checks) if checks is not None else build_checks(status_query)

    # ------------------------------------------------------------------
    def audit(self, root: Path) -> DriftReport:
        """Run all checks sequentially and return the aggregated report.

        Raises :class:`TreeWalkError` when ``root`` cannot be traversed.
        """

        snapshot = self._walker_factory(root).snapshot()
        _LOG.debug(
            "Scanned %s: %d files, %d directories",
            snapshot.root,
            len(snapshot.files),
            len(snapshot.directories),
        )

        findings: list[Finding] = []
        for check in self._checks:
            results = check.run(snapshot)
            for finding in results:
                if finding.category is not check.category:
                    raise ValueError(
                        f"{type(check).__name__} produced a {finding.category.value} finding"
                    )
            findings.extend(results)

        return DriftReport.from_findings(findings)


__all__ = ["DriftAuditor", "TreeWalkError"]
