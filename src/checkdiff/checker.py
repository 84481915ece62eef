# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Per-file and multi-file diff checking."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from checkdiff.attribution import AttributionEngine, AttributionResult
from checkdiff.blame import BlameTable
from checkdiff.config import CheckOptions, UsageError
from checkdiff.consensus import ConsensusAggregator, FileConsensus, InvocationConsensus
from checkdiff.diff_parser import parse_diff
from checkdiff.hunk_selector import select_hunks
from checkdiff.model import CommitId, Diff, TagName
from checkdiff.tags import CachingTagResolver, TagResolver
from checkdiff.vcs import VersionControl

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileReport:
    """Represent the outcome of checking one file.

    Attributes:
        file_path: File as given on input.
        diff: Diff after hunk selection.
        attribution: Implicated lines per commit and skipped lines.
        consensus: Tag agreement between the implicated commits.
    """

    file_path: str
    diff: Diff
    attribution: AttributionResult
    consensus: FileConsensus

    def ordered_commits(self) -> list[CommitId]:
        """Return commits ordered by first implicated line, then identifier."""
        lines_by_commit = self.attribution.lines_by_commit
        return sorted(
            lines_by_commit,
            key=lambda commit_id: (min(lines_by_commit[commit_id]), commit_id),
        )


@dataclass(frozen=True)
class InvocationReport:
    """Represent the outcome of checking every file of one invocation."""

    files: list[FileReport]
    common_tags: tuple[TagName, ...]


class DiffChecker:
    """Attribute pending changes to commits and find their common tags."""

    def __init__(
        self,
        vcs: VersionControl,
        options: CheckOptions,
        tag_resolver: TagResolver | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            vcs: Version-control collaborator.
            options: Hunk selection, offset and diff source.
            tag_resolver: Tag lookup; defaults to a caching resolver over ``vcs``.
        """
        self._vcs = vcs
        self._options = options
        self._tag_resolver = tag_resolver or CachingTagResolver(vcs)
        self._engine = AttributionEngine(options)
        self._aggregator = ConsensusAggregator()

    def check_file(self, file_path: str) -> FileReport:
        """Check one file.

        Args:
            file_path: File with pending changes.

        Returns:
            Report for the file.

        Raises:
            DiffParseError: If the diff is malformed.
            ConsistencyError: If a hunk violates diff invariants.
            TagFormatError: If a resolved tag is not a merge-base tag.
            VCSError: If a repository query fails.
        """
        diff = parse_diff(
            self._vcs.diff_text(file_path, staged=self._options.use_staged_index)
        )
        diff = select_hunks(diff, self._options.hunks)
        blame = BlameTable.from_lines(self._vcs.blame_lines(file_path))
        attribution = self._engine.attribute(diff, blame)
        consensus = self._aggregator.aggregate(
            {
                commit_id: self._tag_resolver.resolve(commit_id)
                for commit_id in attribution.lines_by_commit
            }
        )
        logger.info(
            f"File checked (file_path={file_path} hunks={len(diff.hunks)} "
            f"commits={attribution.commit_count} gaps={len(attribution.gaps)})"
        )
        return FileReport(
            file_path=file_path,
            diff=diff,
            attribution=attribution,
            consensus=consensus,
        )

    def check_files(
        self,
        file_paths: Sequence[str],
        on_file: Callable[[FileReport], None] | None = None,
    ) -> InvocationReport:
        """Check files one after another and intersect their common tags.

        Args:
            file_paths: Files with pending changes.
            on_file: Called with each report as soon as its file is done.

        Returns:
            Reports for every file and the tags common to all of them.

        Raises:
            UsageError: If no file is given, or hunks are selected for
                more than one file.
        """
        if not file_paths:
            logger.warning("No input files given")
            raise UsageError("no input files given")
        if self._options.hunks is not None and len(file_paths) > 1:
            logger.warning(
                f"Hunk selection with multiple files (files={len(file_paths)})"
            )
            raise UsageError("hunk selection works only with one file")

        tally = InvocationConsensus()
        reports: list[FileReport] = []
        for file_path in file_paths:
            report = self.check_file(file_path)
            tally.record(report.consensus)
            reports.append(report)
            if on_file is not None:
                on_file(report)
        return InvocationReport(files=reports, common_tags=tally.common_tags())
