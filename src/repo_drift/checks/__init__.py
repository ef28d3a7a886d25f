"""The fixed, ordered set of drift checks."""

from __future__ import annotations

from typing import Mapping

from ..adapters import StatusQuery
from ..models import CATEGORY_ORDER, FindingCategory
from .base import DriftCheck
from .dead_code import DeadCodeMarkerCheck
from .git_drift import GitDriftCheck
from .gitignore_drift import GitignoreDriftCheck
from .stale_config import StaleConfigCheck
from .version_mismatch import ManifestParseError, VersionMismatchCheck


def build_checks(status_query: StatusQuery | None = None) -> tuple[DriftCheck, ...]:
    """Return one instance of every check, in report order."""

    registry: Mapping[FindingCategory, DriftCheck] = {
        FindingCategory.STALE_CONFIG: StaleConfigCheck(),
        FindingCategory.VERSION_MISMATCH: VersionMismatchCheck(),
        FindingCategory.DEAD_CODE_MARKER: DeadCodeMarkerCheck(),
        FindingCategory.GIT_DRIFT: GitDriftCheck(status_query),
        FindingCategory.GITIGNORE_DRIFT: GitignoreDriftCheck(),
    }
    return tuple(registry[category] for category in CATEGORY_ORDER)


__all__ = [
    "DeadCodeMarkerCheck",
    "DriftCheck",
    "GitDriftCheck",
    "GitignoreDriftCheck",
    "ManifestParseError",
    "StaleConfigCheck",
    "VersionMismatchCheck",
    "build_checks",
]
