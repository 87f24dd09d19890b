"""High-level service for one dirstamp run."""

import logging
from pathlib import Path

from dirstamp.core.config import StampConfig
from dirstamp.core.stamp.propagator import ChangeCallback, TimestampPropagator
from dirstamp.core.stamp.types import StampSummary
from dirstamp.core.stamp.walker import DirectoryEnumerator, FilesystemInterface

logger = logging.getLogger(__name__)


class StampService:
    """Runs enumeration and propagation for a root directory.

    Orchestrates the enumerator and the propagator: the root is validated
    first, then every directory is collected, ordered deepest first and
    handed to the propagator.
    """

    def __init__(
        self,
        config: StampConfig,
        *,
        filesystem: FilesystemInterface | None = None,
        on_change: ChangeCallback | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Resolved run configuration
            filesystem: Optional filesystem implementation for testing
            on_change: Called for every decision that is (or would be) applied

        """
        self.config = config
        self.filesystem = filesystem
        self.on_change = on_change

    def run(self, root: Path) -> StampSummary:
        """Synchronize directory mtimes under ``root``.

        Args:
            root: Directory to process (inclusive)

        Returns:
            Summary of the run

        Raises:
            RootPathError: If the root cannot be used. Nothing is modified.

        """
        enumerator = DirectoryEnumerator(
            root,
            follow_symlinks=self.config.follow_symlinks,
            filesystem=self.filesystem,
        )
        enumerator.check_root()

        nodes = enumerator.ordered()
        logger.info(
            "Found %d directories under %s (%s)",
            len(nodes),
            root,
            "dry run" if self.config.dry_run else "applying changes",
        )
        for node in nodes:
            logger.debug("depth %d: %s", node.depth, node.path)

        propagator = TimestampPropagator(
            dry_run=self.config.dry_run,
            filesystem=self.filesystem,
            on_change=self.on_change,
        )
        return propagator.run(nodes)
