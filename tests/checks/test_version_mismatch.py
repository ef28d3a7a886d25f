import json

import pytest

from repo_drift.checks import VersionMismatchCheck
from repo_drift.checks.version_mismatch import normalize_version
from repo_drift.models import FindingCategory

RUST_TOOLCHAIN = '[toolchain]\nchannel = "{version}"\ncomponents = ["clippy"]\n'
CARGO_MANIFEST = '[package]\nname = "demo"\nversion = "0.1.0"\nrust-version = "{version}"\n'


def _package_json(node: str | None) -> str:
    payload: dict[str, object] = {"name": "demo", "version": "1.0.0"}
    if node is not None:
        payload["engines"] = {"node": node}
    return json.dumps(payload)


def test_rust_identical_versions_yield_nothing(write_tree, snapshot_of):
    root = write_tree(
        {
            "rust-toolchain.toml": RUST_TOOLCHAIN.format(version="1.75"),
            "Cargo.toml": CARGO_MANIFEST.format(version="1.75"),
        }
    )

    assert VersionMismatchCheck().run(snapshot_of(root)) == []


def test_rust_differing_versions_yield_one_finding(write_tree, snapshot_of):
    root = write_tree(
        {
            "rust-toolchain.toml": RUST_TOOLCHAIN.format(version="1.70"),
            "Cargo.toml": CARGO_MANIFEST.format(version="1.75"),
        }
    )

    findings = VersionMismatchCheck().run(snapshot_of(root))

    assert len(findings) == 1
    finding = findings[0]
    assert finding.category is FindingCategory.VERSION_MISMATCH
    assert finding.path == "rust-toolchain.toml"
    assert dict(finding.detail) == {
        "rule": "rust",
        "pin_file": "rust-toolchain.toml",
        "pin_version": "1.70",
        "manifest_file": "Cargo.toml",
        "manifest_version": "1.75",
    }
    assert "1.70" in finding.message and "1.75" in finding.message


def test_legacy_toolchain_file_and_workspace_rust_version(write_tree, snapshot_of):
    root = write_tree(
        {
            "rust-toolchain": "nightly-2024-01-01\n",
            "Cargo.toml": '[workspace]\nmembers = ["a"]\n\n[workspace.package]\nrust-version = "1.74"\n',
        }
    )

    findings = VersionMismatchCheck().run(snapshot_of(root))

    assert [finding.detail["pin_version"] for finding in findings] == ["nightly-2024-01-01"]
    assert findings[0].detail["manifest_version"] == "1.74"


@pytest.mark.parametrize(
    "files",
    [
        {"rust-toolchain.toml": RUST_TOOLCHAIN.format(version="1.70")},
        {"Cargo.toml": CARGO_MANIFEST.format(version="1.75")},
        {
            "rust-toolchain.toml": RUST_TOOLCHAIN.format(version="1.70"),
            "Cargo.toml": '[package]\nname = "demo"\n',
        },
        {
            "rust-toolchain.toml": "[toolchain\nchannel = ",
            "Cargo.toml": CARGO_MANIFEST.format(version="1.75"),
        },
        {".nvmrc": "18\n"},
        {".nvmrc": "18\n", "package.json": _package_json(None)},
        {".nvmrc": "18\n", "package.json": "{not json"},
    ],
)
def test_missing_files_fields_or_malformed_manifests_are_skipped(files, write_tree, snapshot_of):
    root = write_tree(files)

    assert VersionMismatchCheck().run(snapshot_of(root)) == []


def test_node_pin_compared_with_engines(write_tree, snapshot_of):
    root = write_tree({".nvmrc": "v18.17.0\n", "package.json": _package_json("20.5.0")})

    findings = VersionMismatchCheck().run(snapshot_of(root))

    assert len(findings) == 1
    assert findings[0].path == ".nvmrc"
    assert findings[0].detail["rule"] == "node"
    assert findings[0].detail["manifest_version"] == "20.5.0"


def test_node_versions_equal_after_normalization(write_tree, snapshot_of):
    root = write_tree({".node-version": "v20.5.0\n", "package.json": _package_json("=20.5.0")})

    assert VersionMismatchCheck().run(snapshot_of(root)) == []


def test_ci_workflow_node_version_compared_with_local_pin(write_tree, snapshot_of):
    workflow = """
name: ci
on: [push]
jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - uses: actions/setup-node@v4
        with:
          node-version: 18
  matrix:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/setup-node@v4
        with:
          node-version: ${{ matrix.node }}
"""
    root = write_tree(
        {
            ".nvmrc": "20\n",
            ".github/workflows/ci.yml": workflow,
            ".github/workflows/release.yaml": "jobs:\n  build:\n    steps:\n      - uses: actions/setup-node@v4\n        with:\n          node-version: '20'\n",
        }
    )

    findings = VersionMismatchCheck().run(snapshot_of(root))

    assert len(findings) == 1
    finding = findings[0]
    assert finding.path == ".github/workflows/ci.yml"
    assert finding.detail["rule"] == "ci-node"
    assert finding.detail["pin_version"] == "20"
    assert finding.detail["manifest_version"] == "18"


def test_malformed_workflow_is_ignored(write_tree, snapshot_of):
    root = write_tree({".nvmrc": "20\n", ".github/workflows/ci.yml": "jobs: [unclosed\n"})

    assert VersionMismatchCheck().run(snapshot_of(root)) == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(" v18.1.0 ", "18.1.0"), ("=20", "20"), (">=18", ">=18"), ("stable", "stable")],
)
def test_normalize_version(raw, expected):
    assert normalize_version(raw) == expected
