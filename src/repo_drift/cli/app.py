"""Command-line interface implementation for the drift auditor."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from ..adapters import TreeWalkError
from ..models import CATEGORY_ORDER, DriftReport, Finding
from ..service import DriftAuditor

EXIT_CLEAN = 0
EXIT_DRIFT = 1
EXIT_SETUP_ERROR = 2


def render_summary(report: DriftReport) -> str:
    """Render the one-line per-category summary shared by text output."""

    counts = report.counts_by_category()
    parts = [f"{category.label}={counts[category]}" for category in CATEGORY_ORDER]
    parts.append(f"total={report.total}")
    return "Summary: " + ", ".join(parts)


def render_text(report: DriftReport) -> str:
    """Render findings grouped by category for terminal output."""

    if not report.findings:
        return "\n".join(["No drift detected.", "", render_summary(report)])

    lines = ["Drift Audit Results", "==================="]
    for category in CATEGORY_ORDER:
        findings = report.findings_for(category)
        if not findings:
            continue

        lines.extend(["", f"{category.label} ({len(findings)})"])
        rows = [(finding.severity.value, _location(finding), finding.message) for finding in findings]
        widths = [max(len(row[idx]) for row in rows) for idx in range(2)]
        for severity, location, message in rows:
            lines.append(
                f"  {severity.ljust(widths[0])}  {location.ljust(widths[1])}  {message}".rstrip()
            )

    lines.extend(["", render_summary(report)])
    return "\n".join(lines)


def render_json(report: DriftReport) -> str:
    """Render the report as a JSON document with a fixed key order."""

    return json.dumps(report.to_dict(), indent=2)


def _location(finding: Finding) -> str:
    if finding.path is None:
        return "-"

    line = finding.detail.get("line")
    if isinstance(line, int):
        return f"{finding.path}:{line}"
    return finding.path


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="drift",
        description=(
            "Repo drift auditor - checks for stale configs, version mismatches, "
            "dead code markers, and version-control drift"
        ),
    )
    parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path("."),
        help="Directory to audit (defaults to the current directory).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON.",
    )
    return parser


def create_auditor() -> DriftAuditor:
    """Create an auditor wired to the real filesystem and git executable."""

    return DriftAuditor()


def _configure_logging() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging()

    auditor = create_auditor()
    try:
        report = auditor.audit(args.path)
    except TreeWalkError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    print(render_json(report) if args.json else render_text(report))
    return EXIT_DRIFT if report.has_findings else EXIT_CLEAN


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
