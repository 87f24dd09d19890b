"""Shared types for the stamp module."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, NamedTuple

NS_PER_SECOND = 1_000_000_000
NS_PER_DAY = 86_400 * NS_PER_SECOND

# Minimum mtime difference before a directory counts as out of sync
TOLERANCE_NS = 1 * NS_PER_SECOND

ChildKind = Literal["file", "directory"]


class DirectoryNode(NamedTuple):
    """A directory found by the enumerator.

    Attributes:
        path: Path to the directory (as reached during traversal)
        depth: Number of path components below the traversal root (root = 0)

    """

    path: Path
    depth: int


@dataclass(frozen=True)
class ChildObservation:
    """Newest mtimes among the immediate children of one directory.

    Attributes:
        newest_file_ns: Newest regular-file mtime, None if no files
        newest_dir_ns: Newest subdirectory mtime, None if no subdirectories
        file_count: Number of regular-file children seen
        dir_count: Number of subdirectory children seen
        skipped_count: Children whose metadata could not be read

    """

    newest_file_ns: int | None = None
    newest_dir_ns: int | None = None
    file_count: int = 0
    dir_count: int = 0
    skipped_count: int = 0

    @property
    def target_ns(self) -> int | None:
        """Newest file mtime if any file exists, else newest subdirectory mtime."""
        if self.newest_file_ns is not None:
            return self.newest_file_ns
        return self.newest_dir_ns

    @property
    def source(self) -> ChildKind | None:
        """Which kind of child the target was taken from."""
        if self.newest_file_ns is not None:
            return "file"
        if self.newest_dir_ns is not None:
            return "directory"
        return None


@dataclass(frozen=True)
class TimestampDecision:
    """Resolved target mtime for a directory compared to its current one.

    Attributes:
        path: Directory the decision applies to
        current_ns: mtime before this run touched it
        target_ns: mtime the directory should carry
        source: Kind of child that produced the target
        dry_run: True if the run only reports changes

    """

    path: Path
    current_ns: int
    target_ns: int
    source: ChildKind
    dry_run: bool

    @property
    def delta_ns(self) -> int:
        """Signed difference target - current."""
        return self.target_ns - self.current_ns

    @property
    def delta_days(self) -> float:
        """Signed difference in days."""
        return self.delta_ns / NS_PER_DAY

    @property
    def needs_update(self) -> bool:
        """True when the difference is strictly greater than the tolerance."""
        return abs(self.delta_ns) > TOLERANCE_NS


@dataclass
class StampSummary:
    """Counters for one run.

    Attributes:
        dry_run: Whether the run only reported changes
        examined: Directories processed by the propagator
        updated: Directories updated (or that would be, in a dry run)
        unchanged: Directories already within tolerance
        empty: Directories with no file or subdirectory children
        failed: Directories skipped because of an I/O error
        changes: Decisions that were (or would be) applied, in order

    """

    dry_run: bool
    examined: int = 0
    updated: int = 0
    unchanged: int = 0
    empty: int = 0
    failed: int = 0
    changes: list[TimestampDecision] = field(default_factory=list)
