# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Tag consensus across implicated commits and across files."""

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass

from checkdiff.model import CommitId, TagName
from checkdiff.tags import sort_tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileConsensus:
    """Represent tag agreement between the commits implicated by one file.

    Attributes:
        commit_count: Number of distinct implicated commits.
        common_tags: Tags carried by every commit, ascending.
        hot_tags: Tags carried by more than one but not all commits, ascending.
        tags_by_commit: Each commit's tags, ascending.
    """

    commit_count: int
    common_tags: tuple[TagName, ...]
    hot_tags: tuple[TagName, ...]
    tags_by_commit: dict[CommitId, tuple[TagName, ...]]

    @property
    def has_consensus(self) -> bool:
        return bool(self.common_tags)

    def hot_tags_for(self, commit_id: CommitId) -> tuple[TagName, ...]:
        """Return the hot tags carried by ``commit_id``, ascending."""
        hot = set(self.hot_tags)
        return tuple(tag for tag in self.tags_by_commit.get(commit_id, ()) if tag in hot)


class ConsensusAggregator:
    """Compute full consensus and hot tags from per-commit tag sets."""

    def aggregate(
        self, tags_by_commit: Mapping[CommitId, frozenset[TagName]]
    ) -> FileConsensus:
        """Aggregate the tag sets of one file's commits.

        Args:
            tags_by_commit: Tags carried by each implicated commit.

        Returns:
            Consensus for the file. With no commits there is no consensus.

        Raises:
            TagFormatError: If any tag is not a ``MERGE_BASE_<N>`` name.
        """
        commit_count = len(tags_by_commit)
        frequency: Counter[TagName] = Counter()
        for tags in tags_by_commit.values():
            frequency.update(tags)

        common = [tag for tag, count in frequency.items() if count == commit_count]
        hot = [tag for tag, count in frequency.items() if 1 < count < commit_count]
        consensus = FileConsensus(
            commit_count=commit_count,
            common_tags=sort_tags(common) if commit_count else (),
            hot_tags=sort_tags(hot),
            tags_by_commit={
                commit_id: sort_tags(tags) for commit_id, tags in tags_by_commit.items()
            },
        )
        logger.info(
            f"Consensus computed (commits={commit_count} "
            f"common={len(consensus.common_tags)} hot={len(consensus.hot_tags)})"
        )
        return consensus


class InvocationConsensus:
    """Track which file-level common tags are shared by every file."""

    def __init__(self) -> None:
        self._file_count = 0
        self._frequency: Counter[TagName] = Counter()

    @property
    def file_count(self) -> int:
        return self._file_count

    def record(self, consensus: FileConsensus) -> None:
        """Record the result of one fully processed file."""
        self._file_count += 1
        self._frequency.update(consensus.common_tags)

    def common_tags(self) -> tuple[TagName, ...]:
        """Return tags common to every recorded file, ascending."""
        if self._file_count == 0:
            return ()
        return sort_tags(
            tag for tag, count in self._frequency.items() if count == self._file_count
        )
