# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from checkdiff.blame import BlameTable, LineBlame


def test_ph1_blame_001_line_blame_reads_leading_commit_token() -> None:
    record = LineBlame(text="abc123def (Dev 2024-03-01 10:00:00 +0000 1) x = 1")

    assert record.commit_id == "abc123def"


def test_ph1_blame_002_line_blame_without_token_has_no_commit() -> None:
    assert LineBlame(text="").commit_id == ""
    assert LineBlame(text="   ").commit_id == ""


def test_ph1_blame_003_table_maps_line_numbers_directly(make_blame) -> None:
    table = BlameTable.from_lines(make_blame(["aaa", "bbb", "ccc"]))

    assert table.commit_at(1) == "aaa"
    assert table.commit_at(3) == "ccc"


def test_ph1_blame_004_table_length_counts_reserved_index(make_blame) -> None:
    table = BlameTable.from_lines(make_blame(["aaa", "bbb"]))

    assert len(table) == 3


def test_ph1_blame_005_table_returns_empty_commit_outside_range(make_blame) -> None:
    table = BlameTable.from_lines(make_blame(["aaa"]))

    assert table.commit_at(0) == ""
    assert table.commit_at(-1) == ""
    assert table.commit_at(2) == ""
