# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Restrict a diff to an explicit set of hunks."""

from collections.abc import Collection

from checkdiff.model import Diff


def select_hunks(diff: Diff, selection: Collection[int] | None) -> Diff:
    """Keep only the hunks whose 1-based index is selected.

    Indices with no matching hunk are ignored. Totals of the returned diff
    cover the retained hunks only.

    Args:
        diff: Parsed diff.
        selection: Hunk indices to keep, or ``None`` to keep all hunks.

    Returns:
        The input diff when ``selection`` is ``None``; otherwise a filtered copy.
    """
    if selection is None:
        return diff
    return Diff(hunks=tuple(hunk for hunk in diff.hunks if hunk.index in selection))
