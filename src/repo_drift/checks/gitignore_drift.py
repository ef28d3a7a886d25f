"""Find ``.gitignore`` entries that no longer match anything in the tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import PurePosixPath
from typing import List, Sequence

from ..models import Finding, FindingCategory, FindingSeverity, RepoSnapshot
from .base import DriftCheck, split_lines

_LOG = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"


@dataclass(frozen=True, slots=True)
class IgnoreEntry:
    """A single pattern line from an ignore file.

    Supported syntax: ``*``, ``?`` and ``[...]`` within one path segment, ``**``
    across segments, a trailing ``/`` for directory-only entries, and a leading or
    inner ``/`` to anchor the entry to the ignore file's directory. Negated entries
    are not represented.
    """

    raw: str
    line: int
    segments: tuple[str, ...]
    anchored: bool
    directory_only: bool

    def matches(self, relative: str) -> bool:
        """Return ``True`` when ``relative`` (POSIX, relative to the ignore file) matches."""

        path_segments = tuple(relative.split("/"))
        if self.anchored:
            return _match_segments(self.segments, path_segments)
        return _match_segments(("**",) + self.segments, path_segments)


def parse_ignore_file(content: str) -> List[IgnoreEntry]:
    """Parse ignore file content, skipping blanks, comments and negations."""

    entries: List[IgnoreEntry] = []
    for line_number, raw_line in enumerate(split_lines(content), start=1):
        pattern = raw_line.rstrip()
        if not pattern.strip() or pattern.startswith("#") or pattern.startswith("!"):
            continue

        entry = _parse_pattern(pattern.strip(), line_number)
        if entry is not None:
            entries.append(entry)
    return entries


class GitignoreDriftCheck(DriftCheck):
    """Flag dead ignore rules in every ``.gitignore`` of the tree."""

    category = FindingCategory.GITIGNORE_DRIFT

    def run(self, snapshot: RepoSnapshot) -> List[Finding]:
        findings: List[Finding] = []
        for ignore_file in snapshot.files_named(GITIGNORE_NAME):
            findings.extend(self._check_file(snapshot, ignore_file))
        return findings

    # ------------------------------------------------------------------
    def _check_file(self, snapshot: RepoSnapshot, ignore_file: str) -> List[Finding]:
        try:
            content = snapshot.absolute(ignore_file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _LOG.debug("Cannot read %s: %s", ignore_file, exc)
            return [
                Finding(
                    category=self.category,
                    severity=FindingSeverity.WARNING,
                    path=ignore_file,
                    message=f"Failed to read {GITIGNORE_NAME}",
                    detail={"error": str(exc)},
                )
            ]

        base = PurePosixPath(ignore_file).parent
        files = _relative_to(snapshot.files, base)
        directories = _relative_to(snapshot.directories, base)

        findings: List[Finding] = []
        for entry in parse_ignore_file(content):
            candidates = directories if entry.directory_only else files + directories
            if any(entry.matches(candidate) for candidate in candidates):
                continue

            findings.append(
                Finding(
                    category=self.category,
                    severity=FindingSeverity.INFO,
                    path=ignore_file,
                    message=f"Gitignore entry '{entry.raw}' doesn't match any files",
                    detail={"pattern": entry.raw, "line": entry.line},
                )
            )
        return findings


def _parse_pattern(pattern: str, line_number: int) -> IgnoreEntry | None:
    raw = pattern
    if pattern.startswith("\\"):
        pattern = pattern[1:]

    directory_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    anchored = "/" in pattern
    pattern = pattern.lstrip("/")
    if not pattern:
        return None

    segments = tuple(segment for segment in pattern.split("/") if segment)
    return IgnoreEntry(
        raw=raw,
        line=line_number,
        segments=segments,
        anchored=anchored,
        directory_only=directory_only,
    )


def _match_segments(pattern: Sequence[str], path: Sequence[str]) -> bool:
    if not pattern:
        return not path

    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_segments(rest, path[index:]) for index in range(len(path) + 1))
    if not path:
        return False
    return fnmatchcase(path[0], head) and _match_segments(rest, path[1:])


def _relative_to(paths: Sequence[str], base: PurePosixPath) -> tuple[str, ...]:
    if str(base) == ".":
        return tuple(paths)

    prefix = f"{base.as_posix()}/"
    return tuple(path[len(prefix):] for path in paths if path.startswith(prefix))
