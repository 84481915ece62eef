# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Version-control collaborator backed by the git command line."""

import logging
import subprocess
from datetime import datetime
from pathlib import Path

from checkdiff.model import CommitId, TagName
from checkdiff.vcs import (
    DEVELOP_BRANCH,
    MERGE_BASE_TAG_GLOB,
    RELEASE_BRANCH_PREFIX,
    VCSError,
)

logger = logging.getLogger(__name__)


class GitCommandLine:
    """Answer repository queries by running ``git`` in a working tree."""

    def __init__(self, repo_path: Path) -> None:
        """Initialize the collaborator.

        Args:
            repo_path: Directory ``git`` commands run in.
        """
        self._repo_path = repo_path

    def diff_text(self, file_path: str, staged: bool) -> str:
        args = ["diff", "-U0"]
        if staged:
            args.append("--cached")
        args.extend(["--", file_path])
        return self._run(args)

    def blame_lines(self, file_path: str) -> list[str]:
        return split_output_lines(
            self._run(["blame", "-l", "--root", "HEAD", "--", file_path])
        )

    def tags_containing(self, commit_id: CommitId) -> frozenset[TagName]:
        output = self._run(["tag", "--contains", commit_id, "-l", MERGE_BASE_TAG_GLOB])
        return frozenset(
            line.strip() for line in split_output_lines(output) if line.strip()
        )

    def branches_containing(self, commit_id: CommitId) -> list[str]:
        output = self._run(
            [
                "branch",
                "--list",
                "--all",
                "--contains",
                commit_id,
                f"{RELEASE_BRANCH_PREFIX}*",
                DEVELOP_BRANCH,
            ]
        )
        return filter_release_branches(split_output_lines(output))

    def commit_timestamp(self, commit_id: CommitId) -> datetime:
        output = self._run(["show", "--no-patch", "--format=%at", commit_id]).strip()
        first_line = split_output_lines(output)[0] if output else ""
        try:
            seconds = int(first_line)
        except ValueError as exc:
            logger.warning(
                f"Unparseable commit timestamp (commit={commit_id} value={first_line!r})"
            )
            raise VCSError(f"error parsing commit date {first_line!r}: {exc}") from exc
        return datetime.fromtimestamp(seconds).astimezone()

    def _run(self, args: list[str]) -> str:
        """Run one git command and return its stdout.

        Raises:
            VCSError: If git is missing or exits with a non-zero status.
        """
        command = ["git", *args]
        logger.debug(f"Running git (cwd={self._repo_path} args={args})")
        try:
            result = subprocess.run(
                command,
                cwd=self._repo_path,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            logger.warning(
                f"Git command failed (args={args} returncode={exc.returncode} stderr={stderr})"
            )
            raise VCSError(f"git {' '.join(args)} failed: {stderr or exc}") from exc
        except OSError as exc:
            logger.warning(f"Git could not be executed (args={args} error={exc})")
            raise VCSError(f"cannot run git: {exc}") from exc
        return result.stdout


def filter_release_branches(lines: list[str]) -> list[str]:
    """Keep develop and release branches from ``git branch --list`` output.

    Args:
        lines: Raw branch listing lines, possibly marked with ``*`` and
            prefixed with ``remotes/``.

    Returns:
        Branch names in listing order.
    """
    branches: list[str] = []
    for line in lines:
        branch = line.lstrip(" *").strip().removeprefix("remotes/")
        if branch == DEVELOP_BRANCH or branch.startswith(RELEASE_BRANCH_PREFIX):
            branches.append(branch)
    return branches


def split_output_lines(output: str) -> list[str]:
    """Split command output on newlines only.

    Record text may carry form feeds or other characters that
    ``str.splitlines`` treats as line boundaries.

    Args:
        output: Raw command output.

    Returns:
        Lines without their terminating newline.
    """
    lines = output.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines
