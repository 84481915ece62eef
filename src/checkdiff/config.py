# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Immutable configuration for one check invocation."""

from dataclasses import dataclass
from enum import IntEnum


class UsageError(ValueError):
    """Represent an invalid combination of inputs for one invocation."""


class LineOffset(IntEnum):
    """Shift applied to removed lines before consulting blame."""

    BEFORE = -1
    NONE = 0
    AFTER = 1


@dataclass(frozen=True)
class CheckOptions:
    """Describe how diffs are filtered and attributed.

    Attributes:
        line_offset: Offset added to removed line numbers before blame lookup.
        hunks: 1-based hunk indices to keep; ``None`` keeps every hunk.
        use_staged_index: Diff the staged index instead of the working tree.
    """

    line_offset: LineOffset = LineOffset.NONE
    hunks: frozenset[int] | None = None
    use_staged_index: bool = False
