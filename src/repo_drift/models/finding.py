"""Finding models shared across checks and reporting layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class FindingSeverity(str, Enum):
    """Severity levels attached to findings. All findings are advisory."""

    INFO = "info"
    WARNING = "warning"


class FindingCategory(str, Enum):
    """The closed set of drift categories, declared in report order."""

    STALE_CONFIG = "stale_config"
    VERSION_MISMATCH = "version_mismatch"
    DEAD_CODE_MARKER = "dead_code_marker"
    GIT_DRIFT = "git_drift"
    GITIGNORE_DRIFT = "gitignore_drift"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def rank(self) -> int:
        return CATEGORY_ORDER.index(self)


_CATEGORY_LABELS = {
    FindingCategory.STALE_CONFIG: "StaleConfig",
    FindingCategory.VERSION_MISMATCH: "VersionMismatch",
    FindingCategory.DEAD_CODE_MARKER: "DeadCodeMarker",
    FindingCategory.GIT_DRIFT: "GitDrift",
    FindingCategory.GITIGNORE_DRIFT: "GitignoreDrift",
}

CATEGORY_ORDER: tuple[FindingCategory, ...] = tuple(FindingCategory)


@dataclass(frozen=True, slots=True)
class Finding:
    """A single reported instance of drift."""

    category: FindingCategory
    message: str
    severity: FindingSeverity = FindingSeverity.INFO
    path: Optional[str] = None
    detail: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # frozen dataclasses still hold a reference to the caller's dict
        object.__setattr__(self, "detail", MappingProxyType(dict(self.detail)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "path": self.path,
            "message": self.message,
            "detail": dict(self.detail),
        }
