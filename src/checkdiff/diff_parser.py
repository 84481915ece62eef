# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Zero-context unified diff parsing."""

import logging
import re

from checkdiff.model import Diff, Hunk, LineRange

logger = logging.getLogger(__name__)

HUNK_PREFIX = "@@ -"
_HEADER_RE = re.compile(r"^@@ -(?P<removed>\S+) \+(?P<added>\S+) @@")


class DiffParseError(ValueError):
    """Represent a malformed diff that cannot be attributed."""


def parse_diff(text: str) -> Diff:
    """Parse the text of a single-file unified diff.

    Lines are split on ``\\n`` only, so form feeds inside hunk bodies are
    kept. Lines preceding the first hunk header (``diff --git``, ``index``,
    ``---``, ``+++``, binary notices) are ignored. A removed start of ``0`` is
    kept as is; interpreting it is left to the caller.

    Args:
        text: Raw diff text, as produced by ``git diff -U0``.

    Returns:
        Parsed diff with hunks in source order.

    Raises:
        DiffParseError: If a hunk header is malformed or a hunk changes nothing.
    """
    hunks: list[Hunk] = []
    header: str | None = None
    body: list[str] = []

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        if line.startswith(HUNK_PREFIX):
            if header is not None:
                hunks.append(_build_hunk(len(hunks) + 1, header, body))
            header = line
            body = []
        elif header is not None:
            body.append(line)
    if header is not None:
        hunks.append(_build_hunk(len(hunks) + 1, header, body))

    logger.debug(f"Parsed diff (hunks={len(hunks)})")
    return Diff(hunks=tuple(hunks))


def _build_hunk(index: int, header: str, body: list[str]) -> Hunk:
    match = _HEADER_RE.match(header)
    if match is None:
        logger.warning(f"Malformed hunk header (index={index} header={header!r})")
        raise DiffParseError(f"malformed hunk header: {header}")
    removed = _parse_range(match.group("removed"), header)
    added = _parse_range(match.group("added"), header)
    if removed.count == 0 and added.count == 0:
        logger.warning(f"Hunk changes no lines (index={index} header={header!r})")
        raise DiffParseError(f"hunk changes no lines: {header}")
    return Hunk(
        index=index,
        removed=removed,
        added=added,
        raw_text="\n".join([header, *body]),
    )


def _parse_range(field: str, header: str) -> LineRange:
    """Parse ``start[,count]``; an omitted count means one line."""
    start_text, _, count_text = field.partition(",")
    try:
        start = int(start_text)
        count = int(count_text) if count_text else 1
    except ValueError as exc:
        raise DiffParseError(f"{header}: {exc}") from exc
    if start < 0 or count < 0:
        raise DiffParseError(f"{header}: negative line range {field}")
    return LineRange(start=start, count=count)
