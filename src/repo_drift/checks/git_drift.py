"""Report uncommitted and untracked version-control state."""

from __future__ import annotations

import logging
from typing import List

from ..adapters import GitChange, GitQueryError, GitStatusQuery, NotARepositoryError, StatusQuery
from ..models import Finding, FindingCategory, FindingSeverity, RepoSnapshot
from .base import DriftCheck

_LOG = logging.getLogger(__name__)


class GitDriftCheck(DriftCheck):
    """Emit one finding per uncommitted, deleted or untracked file.

    Query failures never abort the audit: a directory outside a work tree or a
    missing ``git`` executable each produce a single repository-level finding.
    """

    category = FindingCategory.GIT_DRIFT

    def __init__(self, status_query: StatusQuery | None = None) -> None:
        self.status_query = status_query or GitStatusQuery()

    def run(self, snapshot: RepoSnapshot) -> List[Finding]:
        try:
            status = self.status_query.query(snapshot.root)
        except NotARepositoryError:
            return [
                Finding(
                    category=self.category,
                    message="Not a git repository",
                    detail={"root": str(snapshot.root)},
                )
            ]
        except GitQueryError as exc:
            _LOG.debug("git status unavailable: %s", exc)
            return [
                Finding(
                    category=self.category,
                    message="Version-control status unavailable",
                    detail={"error": str(exc)},
                )
            ]

        findings: List[Finding] = []
        for change in status.modified:
            findings.append(
                self._file_finding(snapshot, change, "Uncommitted changes", FindingSeverity.WARNING)
            )
        for change in status.deleted:
            findings.append(
                self._file_finding(
                    snapshot, change, "Deleted file not committed", FindingSeverity.WARNING
                )
            )
        for change in status.untracked:
            findings.append(
                self._file_finding(snapshot, change, "Untracked file", FindingSeverity.INFO)
            )
        return findings

    def _file_finding(
        self,
        snapshot: RepoSnapshot,
        change: GitChange,
        message: str,
        severity: FindingSeverity,
    ) -> Finding:
        # paths are only attached when the file is present in the scanned tree
        path = change.path if snapshot.has_file(change.path) else None
        return Finding(
            category=self.category,
            severity=severity,
            path=path,
            message=message if path else f"{message}: {change.path}",
            detail={"status": change.status, "file": change.path},
        )
