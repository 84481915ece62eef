# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for parsed diffs."""

from dataclasses import dataclass

CommitId = str
TagName = str


@dataclass(frozen=True)
class LineRange:
    """Represent a contiguous span on one side of a diff.

    Attributes:
        start: First line of the span (1-based). ``0`` on the removed side of a
            pure addition means "before the first line of the file".
        count: Number of lines in the span; ``0`` means no lines on this side.
    """

    start: int
    count: int


@dataclass(frozen=True)
class Hunk:
    """Represent one change region of a zero-context unified diff.

    Attributes:
        index: Position of the hunk in parser output (1-based).
        removed: Pre-image line range.
        added: Post-image line range.
        raw_text: Header line and body lines exactly as they appeared.
    """

    index: int
    removed: LineRange
    added: LineRange
    raw_text: str

    @property
    def is_pure_addition(self) -> bool:
        return self.removed.count == 0


@dataclass(frozen=True)
class Diff:
    """Represent the ordered hunks of a single-file diff."""

    hunks: tuple[Hunk, ...] = ()

    @property
    def added_total(self) -> int:
        return sum(hunk.added.count for hunk in self.hunks)

    @property
    def removed_total(self) -> int:
        return sum(hunk.removed.count for hunk in self.hunks)
