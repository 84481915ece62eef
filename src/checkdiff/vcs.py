# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Version-control collaborator contract."""

from datetime import datetime
from typing import Protocol

from checkdiff.model import CommitId, TagName

MERGE_BASE_TAG_GLOB = "MERGE_BASE_*"
DEVELOP_BRANCH = "origin/develop"
RELEASE_BRANCH_PREFIX = "origin/release-"


class VCSError(RuntimeError):
    """Represent a failed version-control query."""


class VersionControl(Protocol):
    """Define the repository queries the checker depends on."""

    def diff_text(self, file_path: str, staged: bool) -> str:
        """Return the zero-context unified diff of one file.

        Args:
            file_path: File to diff.
            staged: Diff the staged index instead of the working tree.

        Raises:
            VCSError: If the diff cannot be produced.
        """

    def blame_lines(self, file_path: str) -> list[str]:
        """Return one raw blame record per line of the current revision."""

    def tags_containing(self, commit_id: CommitId) -> frozenset[TagName]:
        """Return the ``MERGE_BASE_*`` tags that contain ``commit_id``."""

    def branches_containing(self, commit_id: CommitId) -> list[str]:
        """Return develop and release branches that contain ``commit_id``."""

    def commit_timestamp(self, commit_id: CommitId) -> datetime:
        """Return the author timestamp of ``commit_id``."""
