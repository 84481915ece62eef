# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Per-line blame records for the checked-out revision of a file."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from checkdiff.model import CommitId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineBlame:
    """Represent one raw blame record.

    Attributes:
        text: Raw record text; the first whitespace-delimited token is the
            commit identifier.
    """

    text: str

    @property
    def commit_id(self) -> CommitId:
        """Return the leading commit identifier, or ``""`` when absent."""
        tokens = self.text.split(maxsplit=1)
        if not tokens:
            return ""
        return tokens[0]


class BlameTable:
    """Map 1-based line numbers to the commit that introduced each line.

    Index ``0`` is reserved as the "no such line" sentinel so callers can use
    file line numbers directly. ``len(table)`` therefore counts the sentinel:
    valid line numbers are exactly those in ``(0, len(table))``. The table is
    immutable once built.
    """

    def __init__(self, records: Iterable[LineBlame]) -> None:
        """Initialize the table.

        Args:
            records: Blame records in file order, line 1 first.
        """
        self._records: tuple[LineBlame, ...] = tuple(records)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BlameTable":
        """Build a table from raw blame output lines.

        Args:
            lines: Raw per-line blame records.

        Returns:
            Blame table for the file.
        """
        return cls(LineBlame(text=line) for line in lines)

    def __len__(self) -> int:
        return len(self._records) + 1

    def commit_at(self, line: int) -> CommitId:
        """Return the commit that introduced ``line``.

        Args:
            line: 1-based line number.

        Returns:
            Commit identifier, or ``""`` for the sentinel, an out-of-range line
            or a record without attribution.
        """
        if line <= 0 or line > len(self._records):
            logger.debug(f"Blame lookup outside table (line={line} size={len(self)})")
            return ""
        return self._records[line - 1].commit_id
