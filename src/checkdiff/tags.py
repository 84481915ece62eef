# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Merge-base tag lookup and ordering."""

import logging
import re
from collections.abc import Iterable
from typing import Protocol

from checkdiff.model import CommitId, TagName
from checkdiff.vcs import VersionControl

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"^MERGE_BASE_(\d+)$")


class TagFormatError(ValueError):
    """Represent a tag name that does not follow ``MERGE_BASE_<N>``."""


def tag_number(tag: TagName) -> int:
    """Return the numeric suffix of a merge-base tag.

    Args:
        tag: Tag name such as ``MERGE_BASE_12``.

    Returns:
        The integer ``N``.

    Raises:
        TagFormatError: If the tag does not match ``MERGE_BASE_<N>``.
    """
    match = _TAG_RE.match(tag)
    if match is None:
        logger.warning(f"Tag does not match MERGE_BASE_N pattern (tag={tag!r})")
        raise TagFormatError(f"{tag} does not match MERGE_BASE_N pattern")
    return int(match.group(1))


def sort_tags(tags: Iterable[TagName]) -> tuple[TagName, ...]:
    """Sort tags ascending by numeric suffix."""
    return tuple(sorted(tags, key=tag_number))


class TagResolver(Protocol):
    """Resolve the merge-base tags carried by a commit."""

    def resolve(self, commit_id: CommitId) -> frozenset[TagName]:
        """Return the tags containing ``commit_id``, unordered."""


class CachingTagResolver:
    """Resolve tags through version control, querying each commit once."""

    def __init__(self, vcs: VersionControl) -> None:
        """Initialize the resolver.

        Args:
            vcs: Version-control collaborator.
        """
        self._vcs = vcs
        self._cache: dict[CommitId, frozenset[TagName]] = {}

    def resolve(self, commit_id: CommitId) -> frozenset[TagName]:
        if commit_id not in self._cache:
            self._cache[commit_id] = frozenset(self._vcs.tags_containing(commit_id))
            logger.debug(
                f"Resolved tags (commit={commit_id} tags={len(self._cache[commit_id])})"
            )
        return self._cache[commit_id]
