"""Aggregated report produced once per audit run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .finding import CATEGORY_ORDER, Finding, FindingCategory


@dataclass(frozen=True, slots=True)
class DriftReport:
    """Ordered findings plus per-category summary counts."""

    findings: tuple[Finding, ...] = ()

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "DriftReport":
        """Build a report, ordering findings by category and keeping check order within one."""

        ordered = sorted(findings, key=lambda finding: finding.category.rank)
        return cls(findings=tuple(ordered))

    @property
    def total(self) -> int:
        return len(self.findings)

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def counts_by_category(self) -> dict[FindingCategory, int]:
        counts = {category: 0 for category in CATEGORY_ORDER}
        for finding in self.findings:
            counts[finding.category] += 1
        return counts

    def findings_for(self, category: FindingCategory) -> list[Finding]:
        return [finding for finding in self.findings if finding.category is category]

    def to_dict(self) -> dict[str, Any]:
        return {
            "findings": [finding.to_dict() for finding in self.findings],
            "summary": {
                category.value: count for category, count in self.counts_by_category().items()
            },
            "total": self.total,
        }
