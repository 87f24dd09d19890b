"""Bottom-up directory mtime propagation."""

import logging
import stat
from collections.abc import Callable, Iterable
from pathlib import Path

from dirstamp.core.stamp.types import (
    ChildObservation,
    DirectoryNode,
    StampSummary,
    TimestampDecision,
)
from dirstamp.core.stamp.walker import FilesystemInterface, Identity, RealFilesystem

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[TimestampDecision], None]


class TimestampPropagator:
    """Sets each directory's mtime to its newest immediate child.

    Directories must be fed deepest first. A file child always wins over a
    subdirectory; subdirectories only count when a directory holds no files.
    Because subdirectories are finalized first, freshness travels up through
    levels that contain nothing but directories.

    In dry-run mode nothing is written, but the mtime each directory would
    receive is remembered for the rest of the run so parents are reported
    with the same target a confirm run would give them. Remembered values
    are keyed by (device, inode), so a directory processed under a symlink
    path is still found from its real parent.
    """

    def __init__(
        self,
        *,
        dry_run: bool = True,
        filesystem: FilesystemInterface | None = None,
        on_change: ChangeCallback | None = None,
    ) -> None:
        """Initialize the propagator.

        Args:
            dry_run: Report changes without writing them
            filesystem: Optional filesystem implementation for testing
            on_change: Called for every decision that is (or would be) applied

        """
        self.dry_run = dry_run
        self.filesystem = filesystem if filesystem is not None else RealFilesystem()
        self.on_change = on_change
        self._pending: dict[Identity, int] = {}

    def observe(self, path: Path) -> ChildObservation:
        """Find the newest file and newest subdirectory directly inside ``path``.

        Children are inspected with lstat, so symbolic links count as
        neither. A child whose metadata cannot be read is logged and left out.

        Args:
            path: Directory to inspect

        Returns:
            ChildObservation for the directory

        Raises:
            OSError: If the directory listing itself fails

        """
        newest_file: int | None = None
        newest_dir: int | None = None
        files = dirs = skipped = 0

        for entry in self.filesystem.scandir(path):
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                logger.warning(f"Skipped {entry.path}: cannot read metadata ({e})")
                skipped += 1
                continue

            if stat.S_ISREG(st.st_mode):
                files += 1
                mtime = st.st_mtime_ns
                if newest_file is None or mtime > newest_file:
                    newest_file = mtime
            elif stat.S_ISDIR(st.st_mode):
                dirs += 1
                mtime = self._pending.get((st.st_dev, st.st_ino), st.st_mtime_ns)
                if newest_dir is None or mtime > newest_dir:
                    newest_dir = mtime

        return ChildObservation(
            newest_file_ns=newest_file,
            newest_dir_ns=newest_dir,
            file_count=files,
            dir_count=dirs,
            skipped_count=skipped,
        )

    def process(self, node: DirectoryNode, summary: StampSummary) -> TimestampDecision | None:
        """Decide on and apply (or report) the update for one directory.

        Every failure is logged and counted in ``summary.failed``; nothing
        here raises for I/O errors.

        Args:
            node: Directory to process
            summary: Run counters to update

        Returns:
            The decision if the directory was (or would be) updated, else None

        """
        path = node.path
        summary.examined += 1

        try:
            current = self.filesystem.stat(path)
        except OSError as e:
            logger.warning(f"Skipped {path}: cannot read mtime ({e})")
            summary.failed += 1
            return None

        try:
            observation = self.observe(path)
        except OSError as e:
            logger.warning(f"Skipped {path}: cannot list children ({e})")
            summary.failed += 1
            return None

        target = observation.target_ns
        source = observation.source
        if target is None or source is None:
            logger.debug("%s has no file or directory children, leaving it alone", path)
            summary.empty += 1
            return None

        decision = TimestampDecision(
            path=path,
            current_ns=current.st_mtime_ns,
            target_ns=target,
            source=source,
            dry_run=self.dry_run,
        )
        if not decision.needs_update:
            logger.debug("%s already in sync (delta %d ns)", path, decision.delta_ns)
            summary.unchanged += 1
            return None

        if self.dry_run:
            self._pending[(current.st_dev, current.st_ino)] = target
        else:
            try:
                self.filesystem.set_mtime(path, atime_ns=current.st_atime_ns, mtime_ns=target)
            except OSError as e:
                logger.warning(f"Skipped {path}: cannot set mtime ({e})")
                summary.failed += 1
                return None

        summary.updated += 1
        summary.changes.append(decision)
        if self.on_change is not None:
            self.on_change(decision)
        return decision

    def run(self, nodes: Iterable[DirectoryNode]) -> StampSummary:
        """Process directories in the given (deepest first) order.

        Args:
            nodes: Depth-ordered directories

        Returns:
            Counters and applied decisions for the run

        """
        self._pending.clear()
        summary = StampSummary(dry_run=self.dry_run)
        for node in nodes:
            self.process(node, summary)

        logger.info(
            "Examined %d directories: %d %s, %d in sync, %d empty, %d failed",
            summary.examined,
            summary.updated,
            "to update" if self.dry_run else "updated",
            summary.unchanged,
            summary.empty,
            summary.failed,
        )
        return summary
