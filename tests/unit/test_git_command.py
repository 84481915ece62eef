# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import subprocess
from datetime import datetime, timezone
from pathlib import Path

import pytest

from checkdiff.blame import BlameTable
from checkdiff.git import GitCommandLine, filter_release_branches, split_output_lines
from checkdiff.vcs import VCSError


class _RecordingRun:
    """Stand in for ``subprocess.run``; bytes output is decoded as requested."""

    def __init__(
        self, stdout: str | bytes = "", error: Exception | None = None
    ) -> None:
        self.stdout = stdout
        self.error = error
        self.calls: list[tuple[list[str], Path]] = []

    def __call__(self, command: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        self.calls.append((command, kwargs["cwd"]))  # type: ignore[arg-type]
        if self.error is not None:
            raise self.error
        stdout = self.stdout
        if isinstance(stdout, bytes):
            stdout = stdout.decode(kwargs["encoding"], kwargs["errors"])  # type: ignore[arg-type]
        return subprocess.CompletedProcess(command, 0, stdout=stdout, stderr="")


def _install(monkeypatch: pytest.MonkeyPatch, fake: _RecordingRun) -> None:
    monkeypatch.setattr("checkdiff.git.command.subprocess.run", fake)


def test_ph5_git_001_diff_uses_zero_context_and_optional_cached(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = _RecordingRun(stdout="@@ -1 +1 @@\n-x\n+y\n")
    _install(monkeypatch, fake)
    git = GitCommandLine(repo_path=tmp_path)

    text = git.diff_text("a.py", staged=True)

    assert text.startswith("@@ -1 +1 @@")
    assert fake.calls == [(["git", "diff", "-U0", "--cached", "--", "a.py"], tmp_path)]


def test_ph5_git_002_blame_returns_one_record_per_line(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = _RecordingRun(stdout="aaa (A 1) x\nbbb (B 2) y\n")
    _install(monkeypatch, fake)

    lines = GitCommandLine(repo_path=tmp_path).blame_lines("a.py")

    assert lines == ["aaa (A 1) x", "bbb (B 2) y"]
    assert fake.calls[0][0] == ["git", "blame", "-l", "--root", "HEAD", "--", "a.py"]


def test_ph5_git_003_tags_are_restricted_to_merge_base_names(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = _RecordingRun(stdout="MERGE_BASE_1\nMERGE_BASE_2\n\n")
    _install(monkeypatch, fake)

    tags = GitCommandLine(repo_path=tmp_path).tags_containing("abc")

    assert tags == frozenset({"MERGE_BASE_1", "MERGE_BASE_2"})
    assert fake.calls[0][0] == [
        "git",
        "tag",
        "--contains",
        "abc",
        "-l",
        "MERGE_BASE_*",
    ]


def test_ph5_git_004_branch_listing_keeps_develop_and_release_branches() -> None:
    lines = [
        "* main",
        "  remotes/origin/develop",
        "  remotes/origin/release-1.2",
        "  remotes/origin/feature-x",
        "  origin/release-2.0",
    ]

    assert filter_release_branches(lines) == [
        "origin/develop",
        "origin/release-1.2",
        "origin/release-2.0",
    ]


def test_ph5_git_005_commit_timestamp_parses_unix_seconds(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(monkeypatch, _RecordingRun(stdout="1700000000\n"))

    moment = GitCommandLine(repo_path=tmp_path).commit_timestamp("abc")

    assert moment == datetime.fromtimestamp(1700000000, tz=timezone.utc)


def test_ph5_git_006_unparseable_timestamp_raises(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(monkeypatch, _RecordingRun(stdout="not-a-date\n"))

    with pytest.raises(VCSError):
        GitCommandLine(repo_path=tmp_path).commit_timestamp("abc")


def test_ph5_git_007_failed_command_raises_vcs_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    error = subprocess.CalledProcessError(
        128, ["git", "blame"], output="", stderr="fatal: no such path"
    )
    _install(monkeypatch, _RecordingRun(error=error))

    with pytest.raises(VCSError, match="no such path"):
        GitCommandLine(repo_path=tmp_path).blame_lines("missing.py")


def test_ph5_git_008_missing_git_binary_raises_vcs_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(monkeypatch, _RecordingRun(error=FileNotFoundError("git")))

    with pytest.raises(VCSError):
        GitCommandLine(repo_path=tmp_path).diff_text("a.py", staged=False)


def test_ph5_git_009_non_utf8_blame_output_is_decoded(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(
        monkeypatch,
        _RecordingRun(stdout=b"aaa (A 1) caf\xe9\nbbb (B 2) tea\n"),
    )

    lines = GitCommandLine(repo_path=tmp_path).blame_lines("latin1.txt")

    assert len(lines) == 2
    assert lines[0].startswith("aaa (A 1) caf")
    assert BlameTable.from_lines(lines).commit_at(2) == "bbb"


def test_ph5_git_010_non_utf8_diff_output_is_decoded(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(monkeypatch, _RecordingRun(stdout=b"@@ -2 +2 @@\n-caf\xe9\n+cafe\n"))

    text = GitCommandLine(repo_path=tmp_path).diff_text("latin1.txt", staged=False)

    assert text.startswith("@@ -2 +2 @@\n-caf")
    assert text.endswith("\n+cafe\n")


def test_ph5_git_011_form_feed_stays_inside_its_blame_record(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(
        monkeypatch,
        _RecordingRun(stdout="c1 (A 1) a\x0cx\nc1 (A 2) b\nc2 (A 3) c\n"),
    )

    lines = GitCommandLine(repo_path=tmp_path).blame_lines("paged.c")
    table = BlameTable.from_lines(lines)

    assert len(lines) == 3
    assert table.commit_at(3) == "c2"


def test_ph5_git_012_split_output_lines_splits_on_newline_only() -> None:
    assert split_output_lines("a\x0cb\x1cc d\nnext\n") == [
        "a\x0cb\x1cc d",
        "next",
    ]
    assert split_output_lines("no-newline") == ["no-newline"]
    assert split_output_lines("") == []
