"""Compare version pins across manifest pairs that are expected to agree."""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

import yaml

from ..models import Finding, FindingCategory, FindingSeverity, RepoSnapshot
from .base import DriftCheck

_LOG = logging.getLogger(__name__)

RUST_TOOLCHAIN_FILES: tuple[str, ...] = ("rust-toolchain.toml", "rust-toolchain")
CARGO_MANIFEST = "Cargo.toml"
NODE_PIN_FILES: tuple[str, ...] = (".nvmrc", ".node-version")
PACKAGE_MANIFEST = "package.json"
WORKFLOWS_DIR = ".github/workflows"
SETUP_NODE_ACTION = "actions/setup-node"


class ManifestParseError(ValueError):
    """Raised when a manifest cannot be parsed into the fields we compare."""


@dataclass(frozen=True, slots=True)
class DeclaredVersion:
    """A version string together with the file that declared it."""

    file: str
    version: str


Reader = Callable[[Path], Optional[str]]


class VersionMismatchCheck(DriftCheck):
    """Evaluate the fixed manifest-pair rules at the repository root.

    A rule is skipped when either file is missing, when a field is absent, or when
    a file cannot be parsed. Only two present, differing values produce a finding.
    """

    category = FindingCategory.VERSION_MISMATCH

    def run(self, snapshot: RepoSnapshot) -> List[Finding]:
        findings: List[Finding] = []
        findings.extend(self._check_rust(snapshot))
        findings.extend(self._check_node(snapshot))
        findings.extend(self._check_ci_node(snapshot))
        return findings

    # ------------------------------------------------------------------
    def _check_rust(self, snapshot: RepoSnapshot) -> List[Finding]:
        toolchain_file = _first_present(snapshot, RUST_TOOLCHAIN_FILES)
        if toolchain_file is None or not snapshot.has_file(CARGO_MANIFEST):
            return []

        pin = _declared(snapshot, toolchain_file, read_rust_toolchain)
        manifest = _declared(snapshot, CARGO_MANIFEST, read_cargo_rust_version)
        return self._compare("rust", pin, manifest)

    def _check_node(self, snapshot: RepoSnapshot) -> List[Finding]:
        pin_file = _first_present(snapshot, NODE_PIN_FILES)
        if pin_file is None or not snapshot.has_file(PACKAGE_MANIFEST):
            return []

        pin = _declared(snapshot, pin_file, read_node_pin)
        manifest = _declared(snapshot, PACKAGE_MANIFEST, read_engines_node)
        return self._compare("node", pin, manifest)

    def _check_ci_node(self, snapshot: RepoSnapshot) -> List[Finding]:
        pin_file = _first_present(snapshot, NODE_PIN_FILES)
        if pin_file is None:
            return []

        workflows = _workflow_files(snapshot.files)
        if not workflows:
            return []

        pin = _declared(snapshot, pin_file, read_node_pin)
        if pin is None:
            return []

        findings: List[Finding] = []
        for workflow in workflows:
            try:
                versions = read_workflow_node_versions(snapshot.absolute(workflow))
            except (ManifestParseError, OSError, UnicodeDecodeError) as exc:
                _LOG.debug("Ignoring unreadable workflow %s: %s", workflow, exc)
                continue

            for version in versions:
                mismatch = self._compare("ci-node", pin, DeclaredVersion(workflow, version))
                if mismatch:
                    findings.extend(mismatch)
                    break
        return findings

    # ------------------------------------------------------------------
    def _compare(
        self,
        rule: str,
        pin: DeclaredVersion | None,
        manifest: DeclaredVersion | None,
    ) -> List[Finding]:
        if pin is None or manifest is None:
            return []
        if normalize_version(pin.version) == normalize_version(manifest.version):
            return []

        return [
            Finding(
                category=self.category,
                severity=FindingSeverity.WARNING,
                path=manifest.file if rule == "ci-node" else pin.file,
                message=(
                    f"{pin.file} declares {pin.version} "
                    f"but {manifest.file} declares {manifest.version}"
                ),
                detail={
                    "rule": rule,
                    "pin_file": pin.file,
                    "pin_version": pin.version,
                    "manifest_file": manifest.file,
                    "manifest_version": manifest.version,
                },
            )
        ]


def normalize_version(value: str) -> str:
    """Trim whitespace, a leading ``=`` and a single leading ``v``."""

    normalized = value.strip().lstrip("=").strip()
    if normalized[:1] in ("v", "V"):
        normalized = normalized[1:]
    return normalized


# Readers ----------------------------------------------------------------------
def read_rust_toolchain(path: Path) -> str | None:
    """Return the channel from ``rust-toolchain.toml`` or a legacy ``rust-toolchain``."""

    content = path.read_text(encoding="utf-8")
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        if path.suffix == ".toml":
            raise ManifestParseError(f"Invalid TOML in {path.name}") from exc
        # legacy single-line form, e.g. ``1.70.0`` or ``nightly-2024-01-01``
        lines = [line.strip() for line in content.splitlines() if line.strip()]
        if len(lines) != 1:
            raise ManifestParseError(f"Unrecognised toolchain file {path.name}") from exc
        return lines[0]

    toolchain = data.get("toolchain")
    if not isinstance(toolchain, Mapping):
        return None
    return _string_or_none(toolchain.get("channel"))


def read_cargo_rust_version(path: Path) -> str | None:
    """Return ``rust-version`` from ``[package]`` or ``[workspace.package]``."""

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ManifestParseError(f"Invalid TOML in {path.name}") from exc

    package = data.get("package")
    if isinstance(package, Mapping):
        version = _string_or_none(package.get("rust-version"))
        if version is not None:
            return version

    workspace = data.get("workspace")
    if isinstance(workspace, Mapping):
        workspace_package = workspace.get("package")
        if isinstance(workspace_package, Mapping):
            return _string_or_none(workspace_package.get("rust-version"))
    return None


def read_node_pin(path: Path) -> str | None:
    """Return the first meaningful line of ``.nvmrc`` / ``.node-version``."""

    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.split("#", 1)[0].strip()
        if stripped:
            return stripped
    return None


def read_engines_node(path: Path) -> str | None:
    """Return ``engines.node`` from ``package.json``."""

    try:
        data = json.loads(path.read_text(encoding="utf-8") or "{}")
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"Invalid JSON in {path.name}") from exc

    if not isinstance(data, Mapping):
        raise ManifestParseError(f"{path.name} must contain a JSON object")

    engines = data.get("engines")
    if not isinstance(engines, Mapping):
        return None
    return _string_or_none(engines.get("node"))


def read_workflow_node_versions(path: Path) -> List[str]:
    """Return literal ``node-version`` inputs of ``actions/setup-node`` steps."""

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ManifestParseError(f"Invalid YAML in workflow {path.name}") from exc

    if not isinstance(data, Mapping):
        return []

    versions: List[str] = []
    for step in _workflow_steps(data):
        uses = step.get("uses")
        if not isinstance(uses, str) or not uses.startswith(SETUP_NODE_ACTION):
            continue

        inputs = step.get("with")
        if not isinstance(inputs, Mapping):
            continue

        version = _string_or_none(inputs.get("node-version"))
        if version is None or "${{" in version:
            continue
        if version not in versions:
            versions.append(version)
    return versions


# Helpers ----------------------------------------------------------------------
def _workflow_steps(workflow: Mapping[str, Any]) -> Iterable[Mapping[str, Any]]:
    jobs = workflow.get("jobs")
    if not isinstance(jobs, Mapping):
        return

    for job in jobs.values():
        if not isinstance(job, Mapping):
            continue
        steps = job.get("steps")
        if not isinstance(steps, list):
            continue
        for step in steps:
            if isinstance(step, Mapping):
                yield step


def _workflow_files(files: Sequence[str]) -> List[str]:
    workflows: List[str] = []
    for path in files:
        candidate = PurePosixPath(path)
        if str(candidate.parent) == WORKFLOWS_DIR and candidate.suffix in (".yml", ".yaml"):
            workflows.append(path)
    return workflows


def _first_present(snapshot: RepoSnapshot, names: Sequence[str]) -> str | None:
    for name in names:
        if snapshot.has_file(name):
            return name
    return None


def _declared(snapshot: RepoSnapshot, relative: str, reader: Reader) -> DeclaredVersion | None:
    try:
        version = reader(snapshot.absolute(relative))
    except (ManifestParseError, OSError, UnicodeDecodeError) as exc:
        _LOG.debug("Treating %s as undeclared: %s", relative, exc)
        return None

    if not version:
        return None
    return DeclaredVersion(file=relative, version=version)


def _string_or_none(value: object) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None
