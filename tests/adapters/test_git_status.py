import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from repo_drift.adapters import GitQueryError, GitStatusQuery, NotARepositoryError
from repo_drift.adapters.git_status import parse_porcelain


def test_query_runs_prefix_then_status(monkeypatch, tmp_path):
    commands = []

    def fake_run(self, args, cwd=None):
        commands.append({"args": list(args), "cwd": cwd})
        if args[1] == "rev-parse":
            return SimpleNamespace(stdout="\n")
        return SimpleNamespace(stdout=" M src/main.rs\0?? notes.txt\0")

    monkeypatch.setattr(GitStatusQuery, "_run_command", fake_run, raising=False)

    status = GitStatusQuery().query(tmp_path)

    assert commands[0]["args"] == ["git", "rev-parse", "--show-prefix"]
    assert commands[1]["args"] == [
        "git",
        "status",
        "--porcelain=v1",
        "-z",
        "--untracked-files=all",
        "--",
        ".",
    ]
    assert all(Path(command["cwd"]) == tmp_path for command in commands)
    assert [change.path for change in status.modified] == ["src/main.rs"]
    assert [change.path for change in status.untracked] == ["notes.txt"]
    assert status.deleted == ()


def test_query_strips_subdirectory_prefix(monkeypatch, tmp_path):
    def fake_run(self, args, cwd=None):
        if args[1] == "rev-parse":
            return SimpleNamespace(stdout="packages/app/\n")
        return SimpleNamespace(stdout="M  packages/app/index.js\0")

    monkeypatch.setattr(GitStatusQuery, "_run_command", fake_run, raising=False)

    status = GitStatusQuery().query(tmp_path)

    assert [change.path for change in status.modified] == ["index.js"]


def test_parse_porcelain_classifies_entries():
    output = "\0".join(
        [
            "R  new.txt",
            "old.txt",
            " D gone.txt",
            "UU conflict.txt",
            "A  added.txt",
            "?? scratch/todo.md",
            "",
        ]
    )

    status = parse_porcelain(output)

    assert [change.path for change in status.modified] == ["added.txt", "conflict.txt", "new.txt"]
    assert [change.path for change in status.deleted] == ["gone.txt"]
    assert [change.path for change in status.untracked] == ["scratch/todo.md"]
    assert not status.is_clean


def test_parse_porcelain_empty_output_is_clean():
    assert parse_porcelain("").is_clean


def test_missing_executable_raises_query_error(tmp_path):
    query = GitStatusQuery(git_bin="git-executable-that-does-not-exist")

    with pytest.raises(GitQueryError, match="Executable not found"):
        query.query(tmp_path)


def test_not_a_repository_is_reported(monkeypatch, tmp_path):
    def fake_subprocess_run(args, **kwargs):
        raise subprocess.CalledProcessError(
            128, args, output="", stderr="fatal: not a git repository (or any of the parent directories): .git"
        )

    monkeypatch.setattr("repo_drift.adapters.git_status.subprocess.run", fake_subprocess_run)

    with pytest.raises(NotARepositoryError):
        GitStatusQuery().query(tmp_path)


def test_other_failures_include_stderr(monkeypatch, tmp_path):
    def fake_subprocess_run(args, **kwargs):
        raise subprocess.CalledProcessError(1, args, output="", stderr="fatal: index file corrupt")

    monkeypatch.setattr("repo_drift.adapters.git_status.subprocess.run", fake_subprocess_run)

    with pytest.raises(GitQueryError, match="index file corrupt") as excinfo:
        GitStatusQuery().query(tmp_path)

    assert not isinstance(excinfo.value, NotARepositoryError)


def test_git_runs_with_c_locale(monkeypatch, tmp_path):
    seen = []

    def fake_subprocess_run(args, **kwargs):
        seen.append(kwargs["env"])
        return subprocess.CompletedProcess(args, 0, stdout="", stderr="")

    monkeypatch.setenv("LC_ALL", "de_DE.UTF-8")
    monkeypatch.setattr("repo_drift.adapters.git_status.subprocess.run", fake_subprocess_run)

    GitStatusQuery().query(tmp_path)

    assert seen
    assert all(env["LC_ALL"] == "C" for env in seen)
