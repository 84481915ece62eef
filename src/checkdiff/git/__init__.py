# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Git command-line backend for repository queries."""

from checkdiff.git.command import (
    GitCommandLine,
    filter_release_branches,
    split_output_lines,
)

__all__ = ["GitCommandLine", "filter_release_branches", "split_output_lines"]
