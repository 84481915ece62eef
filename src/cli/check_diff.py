# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command-line entry point reporting the merge-base tags a change touches."""

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style

from checkdiff.attribution import ConsistencyError
from checkdiff.checker import DiffChecker, FileReport, InvocationReport
from checkdiff.config import CheckOptions, LineOffset, UsageError
from checkdiff.diff_parser import DiffParseError
from checkdiff.git import GitCommandLine
from checkdiff.model import CommitId, TagName
from checkdiff.tags import TagFormatError
from checkdiff.vcs import VCSError, VersionControl

logger = logging.getLogger(__name__)

DEFAULT_TAG_LIMIT = 7
SECTION_INDENT = " " * 4
COMMIT_INDENT = " " * 8
DETAIL_INDENT = " " * 16
DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"


@dataclass(frozen=True)
class DisplayOptions:
    """Describe how reports are rendered.

    Attributes:
        limit: Maximum number of tags printed per list; ``None`` prints all.
        show_lines: Print implicated lines even when a common tag exists.
        show_date: Print each commit's timestamp.
        show_hunk: Print the raw text of each processed hunk.
        output_format: ``text`` or ``json``.
    """

    limit: int | None = DEFAULT_TAG_LIMIT
    show_lines: bool = False
    show_date: bool = False
    show_hunk: bool = False
    output_format: str = "text"


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure application logging with Rich handler on stderr.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True), rich_tracebacks=True, show_path=False
            )
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(
        prog="git check-diff",
        description=(
            "Find the commits responsible for the lines a pending change touches "
            "and the MERGE_BASE tags they have in common."
        ),
    )
    parser.add_argument("files", nargs="*", help="Files with pending changes.")
    parser.add_argument(
        "--all", action="store_true", help="Show all merge base tags."
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_TAG_LIMIT,
        help="Show only the given number of merge base tags. 0 is equivalent to --all.",
    )
    parser.add_argument(
        "--line",
        action="store_true",
        help=(
            "Show the line numbers for each affected commit (shown regardless "
            "when there is no common tag)."
        ),
    )
    offset_group = parser.add_mutually_exclusive_group()
    offset_group.add_argument(
        "-B",
        dest="before",
        action="store_true",
        help="Use the commit immediately preceding the changed line.",
    )
    offset_group.add_argument(
        "-A",
        dest="after",
        action="store_true",
        help="Use the commit immediately following the changed line.",
    )
    parser.add_argument("--date", action="store_true", help="Show commit date.")
    parser.add_argument(
        "--cached", action="store_true", help="Diff the staged index (git diff --cached)."
    )
    parser.add_argument(
        "-H",
        dest="hunks",
        default=None,
        help="Check the given hunks only (comma separated, first hunk is 1).",
    )
    parser.add_argument("--hunk", action="store_true", help="Show hunk text.")
    parser.add_argument(
        "--repo", default=".", help="Repository working tree to run git in."
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run the check-diff command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: ``0`` on success, ``2`` for usage errors, ``1`` when the
        check itself fails.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code == 0:
            return 0
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        options = build_check_options(args)
    except UsageError as exc:
        logger.warning(f"Invalid arguments (error={exc})")
        stderr.write(f"{exc}\n")
        return 2
    display = build_display_options(args)

    console = Console(
        file=stdout, force_terminal=False, color_system="truecolor", emoji=False
    )
    vcs = build_vcs(Path(args.repo))
    checker = DiffChecker(vcs=vcs, options=options)
    writer = TextReportWriter(console=console, vcs=vcs, display=display)
    on_file = writer.write_file if display.output_format == "text" else None

    try:
        invocation = checker.check_files(args.files, on_file=on_file)
        if display.output_format == "json":
            _write_json(invocation=invocation, vcs=vcs, display=display, console=console)
        elif len(invocation.files) > 1:
            writer.write_common_tags(invocation.common_tags)
    except UsageError as exc:
        logger.warning(f"Invalid arguments (error={exc})")
        stderr.write(f"Usage: git check-diff <file>...: {exc}\n")
        return 2
    except (DiffParseError, ConsistencyError, TagFormatError, VCSError) as exc:
        logger.warning(f"Check failed (error_type={type(exc).__name__} error={exc})")
        stderr.write(f"error: {exc}\n")
        return 1
    return 0


def build_check_options(args: argparse.Namespace) -> CheckOptions:
    """Convert parsed arguments into core check options.

    Raises:
        UsageError: If the hunk selection is malformed.
    """
    line_offset = LineOffset.NONE
    if args.before:
        line_offset = LineOffset.BEFORE
    elif args.after:
        line_offset = LineOffset.AFTER
    hunks = parse_hunk_selection(args.hunks) if args.hunks is not None else None
    return CheckOptions(
        line_offset=line_offset, hunks=hunks, use_staged_index=args.cached
    )


def build_display_options(args: argparse.Namespace) -> DisplayOptions:
    """Convert parsed arguments into display options."""
    limit: int | None = args.limit
    if args.all or args.limit <= 0:
        limit = None
    return DisplayOptions(
        limit=limit,
        show_lines=args.line,
        show_date=args.date,
        show_hunk=args.hunk,
        output_format=args.format,
    )


def parse_hunk_selection(value: str) -> frozenset[int]:
    """Parse a comma-separated list of 1-based hunk indices.

    Args:
        value: Raw ``-H`` argument, e.g. ``"1,3"``.

    Returns:
        Selected hunk indices.

    Raises:
        UsageError: If any item is not an integer.
    """
    indices: set[int] = set()
    for token in value.split(","):
        try:
            indices.add(int(token.strip()))
        except ValueError as exc:
            raise UsageError(f"{token}: {exc}") from exc
    return frozenset(indices)


def build_vcs(repo_path: Path) -> VersionControl:
    """Create the version-control collaborator.

    Args:
        repo_path: Working tree git runs in.

    Returns:
        Configured collaborator.
    """
    return GitCommandLine(repo_path=repo_path)


def format_tags(tags: tuple[TagName, ...], limit: int | None) -> str:
    """Join tags for display, truncating after ``limit`` entries."""
    if limit is None or len(tags) <= limit:
        return " ".join(tags)
    shown = " ".join(tags[:limit])
    return f"{shown} ... {len(tags) - limit} more (use --all to show all)"


class TextReportWriter:
    """Render file reports as indented plain text."""

    def __init__(
        self, console: Console, vcs: VersionControl, display: DisplayOptions
    ) -> None:
        self._console = console
        self._vcs = vcs
        self._display = display
        self._files_written = 0

    def write_file(self, report: FileReport) -> None:
        """Write the report of one file.

        Raises:
            VCSError: If branch or date lookups fail.
        """
        if self._files_written:
            self._console.print()
        self._files_written += 1
        self._console.print(
            report.file_path,
            style=Style(color="cyan", bold=True),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        diff = report.diff
        self._emit(
            f"{SECTION_INDENT}Lines: {diff.removed_total} removed, {diff.added_total} added"
        )
        if self._display.show_hunk:
            for hunk in diff.hunks:
                self._emit(hunk.raw_text)
        for gap in report.attribution.gaps:
            self._emit(
                f"{SECTION_INDENT}out of bounds: line {gap.line} in hunk {gap.hunk_index} "
                f"(blame has {gap.blame_length - 1} lines)"
            )

        consensus = report.consensus
        lines_by_commit = report.attribution.lines_by_commit
        if consensus.has_consensus:
            self._emit(f"{SECTION_INDENT}Commits affected:")
            for commit_id in report.ordered_commits():
                self._write_commit(commit_id)
                if self._display.show_lines:
                    self._write_lines(lines_by_commit[commit_id])
            self._emit(f"{SECTION_INDENT}Common tag:")
            self._emit(
                f"{COMMIT_INDENT}{format_tags(consensus.common_tags, self._display.limit)}"
            )
            return

        self._emit(
            f"{SECTION_INDENT}No common tags found for all the affected commits."
        )
        for commit_id in report.ordered_commits():
            self._write_commit(commit_id)
            hot_tags = consensus.hot_tags_for(commit_id)
            if hot_tags:
                self._emit(f"{DETAIL_INDENT}{' '.join(hot_tags)}")
            self._write_lines(lines_by_commit[commit_id])

    def write_common_tags(self, common_tags: tuple[TagName, ...]) -> None:
        """Write the verdict across all files."""
        self._console.print()
        if common_tags:
            self._emit(f"COMMON TAG: {format_tags(common_tags, self._display.limit)}")
        else:
            self._emit("NO COMMON TAG")

    def _write_commit(self, commit_id: CommitId) -> None:
        parts = [commit_id]
        if self._display.show_date:
            parts.append(self._vcs.commit_timestamp(commit_id).strftime(DATE_FORMAT))
        parts.append(f"({', '.join(self._vcs.branches_containing(commit_id))})")
        self._emit(f"{COMMIT_INDENT}{' '.join(parts)}")

    def _write_lines(self, lines: tuple[int, ...]) -> None:
        if lines:
            self._emit(f"{COMMIT_INDENT}lines: {' '.join(str(line) for line in lines)}")

    def _emit(self, text: str) -> None:
        self._console.print(text, markup=False, highlight=False, soft_wrap=True)


def _write_json(
    invocation: InvocationReport,
    vcs: VersionControl,
    display: DisplayOptions,
    console: Console,
) -> None:
    """Write the invocation report as one JSON document.

    Args:
        invocation: Reports for every file.
        vcs: Collaborator used for branch and date lookups.
        display: Display options; ``show_date`` adds commit timestamps.
        console: Output console.
    """
    payload = {
        "files": [
            _file_payload(report=report, vcs=vcs, display=display)
            for report in invocation.files
        ],
        "common_tags": list(invocation.common_tags),
    }
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _file_payload(
    report: FileReport, vcs: VersionControl, display: DisplayOptions
) -> dict[str, Any]:
    consensus = report.consensus
    commits: list[dict[str, Any]] = []
    for commit_id in report.ordered_commits():
        entry: dict[str, Any] = {
            "commit_id": commit_id,
            "lines": list(report.attribution.lines_by_commit[commit_id]),
            "tags": list(consensus.tags_by_commit.get(commit_id, ())),
            "hot_tags": list(consensus.hot_tags_for(commit_id)),
            "branches": vcs.branches_containing(commit_id),
        }
        if display.show_date:
            entry["committed_at"] = vcs.commit_timestamp(commit_id).isoformat()
        commits.append(entry)
    return {
        "file_path": report.file_path,
        "lines_removed": report.diff.removed_total,
        "lines_added": report.diff.added_total,
        "hunks": [asdict(hunk) for hunk in report.diff.hunks],
        "commits": commits,
        "common_tags": list(consensus.common_tags),
        "hot_tags": list(consensus.hot_tags),
        "gaps": [asdict(gap) for gap in report.attribution.gaps],
    }


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
