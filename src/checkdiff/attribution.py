# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Attribute diff hunks to the commits that last touched their lines."""

import logging
from dataclasses import dataclass

from checkdiff.blame import BlameTable
from checkdiff.config import CheckOptions
from checkdiff.model import CommitId, Diff, Hunk

logger = logging.getLogger(__name__)


class ConsistencyError(RuntimeError):
    """Represent a violated internal invariant in upstream diff data."""


@dataclass(frozen=True)
class AttributionGap:
    """Represent a removed line whose offset position fell outside the blame.

    Attributes:
        hunk_index: Index of the hunk the line belongs to.
        line: Offset line number that was looked up.
        blame_length: Length of the blame table, sentinel included.
    """

    hunk_index: int
    line: int
    blame_length: int


@dataclass(frozen=True)
class AttributionResult:
    """Represent the commits implicated by one file's diff.

    Attributes:
        lines_by_commit: Implicated line numbers per commit, in the order
            encountered. Commits appear in order of first attribution.
        gaps: Out-of-bounds lookups skipped during attribution.
    """

    lines_by_commit: dict[CommitId, tuple[int, ...]]
    gaps: tuple[AttributionGap, ...] = ()

    @property
    def commit_count(self) -> int:
        return len(self.lines_by_commit)


class AttributionEngine:
    """Resolve the pre-image lines of each hunk through a blame table."""

    def __init__(self, options: CheckOptions) -> None:
        """Initialize the engine.

        Args:
            options: Check options; only ``line_offset`` is used here.
        """
        self._offset = int(options.line_offset)

    def attribute(self, diff: Diff, blame: BlameTable) -> AttributionResult:
        """Attribute every hunk of ``diff``.

        Args:
            diff: Diff of the file, possibly filtered.
            blame: Blame table for the same file at the current revision.

        Returns:
            Implicated lines per commit and the skipped out-of-bounds lines.

        Raises:
            ConsistencyError: If a hunk neither removes nor adds lines.
        """
        lines_by_commit: dict[CommitId, list[int]] = {}
        gaps: list[AttributionGap] = []
        for hunk in diff.hunks:
            for line in self._implicated_lines(hunk, blame, gaps):
                commit_id = blame.commit_at(line)
                if not commit_id:
                    logger.debug(
                        f"No blame attribution (hunk={hunk.index} line={line})"
                    )
                    continue
                lines_by_commit.setdefault(commit_id, []).append(line)

        return AttributionResult(
            lines_by_commit={
                commit_id: tuple(lines) for commit_id, lines in lines_by_commit.items()
            },
            gaps=tuple(gaps),
        )

    def _implicated_lines(
        self, hunk: Hunk, blame: BlameTable, gaps: list[AttributionGap]
    ) -> list[int]:
        """Return the pre-image lines to look up for one hunk.

        Pure additions ignore the offset and are attributed to the line they
        were inserted at (line 1 for an insertion before the start of the
        file). Multi-line removals are bounds-checked and report gaps; a single
        removed line is looked up unchecked.
        """
        removed = hunk.removed
        if hunk.is_pure_addition:
            if hunk.added.count == 0:
                logger.warning(
                    f"Pure addition hunk adds no lines (hunk={hunk.index} "
                    f"added_count={hunk.added.count})"
                )
                raise ConsistencyError(
                    "expected added line count greater than 0 for hunk "
                    f"{hunk.index}, got {hunk.added.count}"
                )
            return [removed.start or 1]

        if removed.count == 1:
            return [removed.start + self._offset]

        lines: list[int] = []
        for original in range(removed.start, removed.start + removed.count):
            line = original + self._offset
            if 0 < line < len(blame):
                lines.append(line)
                continue
            logger.warning(
                f"Line out of blame bounds (hunk={hunk.index} line={line} "
                f"blame_length={len(blame)})"
            )
            gaps.append(
                AttributionGap(hunk_index=hunk.index, line=line, blame_length=len(blame))
            )
        return lines
