import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()


class FakeVersionControl:
    """Serve canned repository data and record the queries made."""

    def __init__(
        self,
        diffs: dict[str, str] | None = None,
        blames: dict[str, list[str]] | None = None,
        tags: dict[str, set[str]] | None = None,
        branches: dict[str, list[str]] | None = None,
        timestamps: dict[str, datetime] | None = None,
    ) -> None:
        self.diffs = diffs or {}
        self.blames = blames or {}
        self.tags = tags or {}
        self.branches = branches or {}
        self.timestamps = timestamps or {}
        self.diff_requests: list[tuple[str, bool]] = []
        self.tag_queries: list[str] = []

    def diff_text(self, file_path: str, staged: bool) -> str:
        self.diff_requests.append((file_path, staged))
        return self.diffs[file_path]

    def blame_lines(self, file_path: str) -> list[str]:
        return list(self.blames[file_path])

    def tags_containing(self, commit_id: str) -> frozenset[str]:
        self.tag_queries.append(commit_id)
        return frozenset(self.tags.get(commit_id, set()))

    def branches_containing(self, commit_id: str) -> list[str]:
        return list(self.branches.get(commit_id, []))

    def commit_timestamp(self, commit_id: str) -> datetime:
        return self.timestamps[commit_id]


def blame_record(commit_id: str, line: int, content: str = "code") -> str:
    return f"{commit_id} (Dev Eloper 2024-03-01 10:00:00 +0000 {line}) {content}"


@pytest.fixture
def make_vcs() -> Callable[..., FakeVersionControl]:
    return FakeVersionControl


@pytest.fixture
def make_blame() -> Callable[[list[str]], list[str]]:
    def _build(commit_ids: list[str]) -> list[str]:
        return [
            blame_record(commit_id, line) if commit_id else ""
            for line, commit_id in enumerate(commit_ids, start=1)
        ]

    return _build
