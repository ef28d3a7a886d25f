"""Find TODO-style markers left in source comments."""

from __future__ import annotations

import logging
import re
import stat
from pathlib import Path, PurePosixPath
from typing import List, Mapping

from ..models import Finding, FindingCategory, FindingSeverity, RepoSnapshot
from .base import DriftCheck, split_lines

_LOG = logging.getLogger(__name__)

MARKER_TOKENS: tuple[str, ...] = ("TODO", "FIXME", "XXX", "HACK")
VENDORED_DIRS: frozenset[str] = frozenset({"node_modules", "target"})
MAX_FILE_BYTES = 2 * 1024 * 1024
BINARY_SNIFF_BYTES = 8192
MAX_TEXT_LENGTH = 120

_C_STYLE = ("//", "/*")
_HASH = ("#",)

COMMENT_INTRODUCERS: Mapping[str, tuple[str, ...]] = {
    # C family and friends
    ".c": _C_STYLE,
    ".h": _C_STYLE,
    ".cc": _C_STYLE,
    ".cpp": _C_STYLE,
    ".hpp": _C_STYLE,
    ".cs": _C_STYLE,
    ".java": _C_STYLE,
    ".kt": _C_STYLE,
    ".scala": _C_STYLE,
    ".swift": _C_STYLE,
    ".go": _C_STYLE,
    ".rs": _C_STYLE,
    ".js": _C_STYLE,
    ".jsx": _C_STYLE,
    ".mjs": _C_STYLE,
    ".cjs": _C_STYLE,
    ".ts": _C_STYLE,
    ".tsx": _C_STYLE,
    ".dart": _C_STYLE,
    ".scss": _C_STYLE,
    ".css": ("/*",),
    ".php": _C_STYLE + _HASH,
    # hash comments
    ".py": _HASH,
    ".pyi": _HASH,
    ".rb": _HASH,
    ".sh": _HASH,
    ".bash": _HASH,
    ".zsh": _HASH,
    ".pl": _HASH,
    ".r": _HASH,
    ".toml": _HASH,
    ".yaml": _HASH,
    ".yml": _HASH,
    ".cfg": _HASH + (";",),
    ".ini": _HASH + (";",),
    ".nix": _HASH,
    ".tf": _HASH + ("//", "/*"),
    # others
    ".sql": ("--",),
    ".lua": ("--",),
    ".hs": ("--",),
    ".html": ("<!--",),
    ".xml": ("<!--",),
    ".md": ("<!--",),
    ".vue": ("<!--", "//", "/*"),
    ".tex": ("%",),
    ".erl": ("%",),
    ".clj": (";",),
    ".el": (";",),
    ".lisp": (";",),
    ".asm": (";",),
}

FILENAME_INTRODUCERS: Mapping[str, tuple[str, ...]] = {
    "Makefile": _HASH,
    "Dockerfile": _HASH,
    "Gemfile": _HASH,
    "Rakefile": _HASH,
    "CMakeLists.txt": _HASH,
    ".gitignore": _HASH,
}

_MARKER_RE = re.compile(r"\b(" + "|".join(MARKER_TOKENS) + r")\b")


class DeadCodeMarkerCheck(DriftCheck):
    """Report lines carrying marker tokens inside comments.

    One finding is produced per line; its message lists every distinct token on
    that line. Files of unknown language are searched on the whole line.
    """

    category = FindingCategory.DEAD_CODE_MARKER

    def run(self, snapshot: RepoSnapshot) -> List[Finding]:
        findings: List[Finding] = []
        for path in snapshot.files:
            relative = PurePosixPath(path)
            if VENDORED_DIRS.intersection(relative.parts[:-1]):
                continue

            text = _read_text(snapshot.absolute(path))
            if text is None:
                continue

            introducers = comment_introducers_for(relative.name)
            for line_number, line in enumerate(split_lines(text), start=1):
                markers = find_markers(line, introducers)
                if not markers:
                    continue

                noun = "marker" if len(markers) == 1 else "markers"
                findings.append(
                    Finding(
                        category=self.category,
                        severity=FindingSeverity.INFO,
                        path=path,
                        message=f"Dead-code {noun} {', '.join(markers)} found",
                        detail={
                            "line": line_number,
                            "markers": tuple(markers),
                            "text": line.strip()[:MAX_TEXT_LENGTH],
                        },
                    )
                )
        return findings


def comment_introducers_for(filename: str) -> tuple[str, ...] | None:
    """Return the comment introducers for ``filename`` or ``None`` when unknown."""

    if filename in FILENAME_INTRODUCERS:
        return FILENAME_INTRODUCERS[filename]
    return COMMENT_INTRODUCERS.get(PurePosixPath(filename).suffix.lower())


def find_markers(line: str, introducers: tuple[str, ...] | None) -> List[str]:
    """Return the distinct marker tokens in the comment portion of ``line``."""

    comment = _comment_portion(line, introducers)
    if comment is None:
        return []

    markers: List[str] = []
    for match in _MARKER_RE.finditer(comment):
        token = match.group(1)
        if token not in markers:
            markers.append(token)
    return markers


def _comment_portion(line: str, introducers: tuple[str, ...] | None) -> str | None:
    if introducers is None:
        return line

    positions = [line.find(introducer) for introducer in introducers]
    positions = [position for position in positions if position >= 0]
    if positions:
        return line[min(positions):]

    # continuation lines of ``/* ... */`` blocks
    if "/*" in introducers and line.lstrip().startswith("*"):
        return line
    return None


def _read_text(path: Path) -> str | None:
    try:
        info = path.stat()
        # FIFOs and device nodes would block or never end
        if not stat.S_ISREG(info.st_mode):
            _LOG.debug("Skipping non-regular file %s", path)
            return None
        if info.st_size > MAX_FILE_BYTES:
            _LOG.debug("Skipping large file %s", path)
            return None
        data = path.read_bytes()
    except OSError as exc:
        _LOG.debug("Skipping unreadable file %s: %s", path, exc)
        return None

    if b"\0" in data[:BINARY_SNIFF_BYTES]:
        return None
    return data.decode("utf-8", errors="replace")
