"""Directory enumerator using iterative BFS."""

import logging
import os
import stat
from collections import deque
from collections.abc import Generator
from pathlib import Path
from typing import Protocol

from dirstamp.core.exceptions import (
    AccessDeniedError,
    NotADirectoryRootError,
    PathNotFoundError,
)
from dirstamp.core.stamp.types import DirectoryNode

logger = logging.getLogger(__name__)

# Physical directory identity: (st_dev, st_ino)
Identity = tuple[int, int]


class FilesystemInterface(Protocol):
    """Protocol for filesystem operations to enable dependency injection."""

    def scandir(self, path: Path) -> list[os.DirEntry[str]]:
        """List the immediate entries of a directory.

        Args:
            path: Directory path to list

        Returns:
            DirEntry objects for each entry in the directory

        Raises:
            OSError: If the directory cannot be listed

        """
        ...

    def stat(self, path: Path) -> os.stat_result:
        """Get stats for a path, following symlinks.

        Args:
            path: Path to get stats for

        Returns:
            Stat result with st_mtime_ns and st_atime_ns

        """
        ...

    def set_mtime(self, path: Path, *, atime_ns: int, mtime_ns: int) -> None:
        """Set access and modification times in nanoseconds.

        Args:
            path: Path to update
            atime_ns: Access time to write
            mtime_ns: Modification time to write

        """
        ...


class RealFilesystem:
    """Real filesystem implementation using os module."""

    def scandir(self, path: Path) -> list[os.DirEntry[str]]:
        """List directory using os.scandir, closing the iterator before returning."""
        with os.scandir(path) as it:
            return list(it)

    def stat(self, path: Path) -> os.stat_result:
        """Get stats following symlinks."""
        return os.stat(path)

    def set_mtime(self, path: Path, *, atime_ns: int, mtime_ns: int) -> None:
        """Write times with os.utime in nanosecond precision."""
        os.utime(path, ns=(atime_ns, mtime_ns))


class DirectoryEnumerator:
    """Iterative BFS enumerator of every directory under a root.

    Uses iterative BFS (not recursive) to avoid RecursionError on deep
    structures. When following symlinks, tracks visited (device, inode)
    pairs so link cycles terminate and each physical directory is emitted
    once.
    """

    def __init__(
        self,
        root: Path,
        *,
        follow_symlinks: bool = True,
        filesystem: FilesystemInterface | None = None,
    ) -> None:
        """Initialize the enumerator.

        Args:
            root: Directory to start from (included in the output)
            follow_symlinks: Descend into symbolically linked directories
            filesystem: Optional filesystem implementation for testing

        """
        self.root = root
        self.follow_symlinks = follow_symlinks
        self.filesystem = filesystem if filesystem is not None else RealFilesystem()

    def check_root(self) -> None:
        """Verify the root exists, is a directory and can be listed.

        Raises:
            PathNotFoundError: If the root does not exist
            NotADirectoryRootError: If the root is not a directory
            AccessDeniedError: If the root cannot be read or listed

        """
        try:
            st = self.filesystem.stat(self.root)
        except (FileNotFoundError, NotADirectoryError):
            raise PathNotFoundError(f"Path does not exist: {self.root}", self.root) from None
        except OSError as e:
            raise AccessDeniedError(f"Cannot access path {self.root}: {e}", self.root) from e

        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectoryRootError(f"Not a directory: {self.root}", self.root)

        try:
            self.filesystem.scandir(self.root)
        except OSError as e:
            raise AccessDeniedError(f"Cannot list directory {self.root}: {e}", self.root) from e

    def walk(self) -> Generator[DirectoryNode, None, None]:
        """Walk the tree breadth first.

        Yields the root first, then each level in name order. A directory
        that cannot be listed is logged and not yielded; its siblings are
        still walked.

        Yields:
            DirectoryNode objects for every reachable directory

        """
        for node, _identity in self._walk({}):
            yield node

    def _walk(
        self, parents: dict[Identity, Identity]
    ) -> Generator[tuple[DirectoryNode, Identity | None], None, None]:
        """BFS core of ``walk``.

        When following symlinks, ``parents`` is filled with the physical
        parent of every directory reached through a real (non-link) entry,
        including directories skipped because a link reached them first.
        """
        visited: set[Identity] = set()

        # BFS queue: (path, depth, physical parent identity or None)
        queue: deque[tuple[Path, int, Identity | None]] = deque()
        queue.append((self.root, 0, None))

        while queue:
            dir_path, depth, parent = queue.popleft()
            identity: Identity | None = None

            if self.follow_symlinks:
                try:
                    st = self.filesystem.stat(dir_path)
                except OSError as e:
                    logger.warning(f"Skipped {dir_path}: cannot resolve directory ({e})")
                    continue

                identity = (st.st_dev, st.st_ino)
                if parent is not None:
                    parents[identity] = parent
                if identity in visited:
                    logger.debug("Skipped %s: directory already visited", dir_path)
                    continue
                visited.add(identity)

            try:
                entries = self.filesystem.scandir(dir_path)
            except OSError as e:
                logger.warning(f"Skipped {dir_path}: cannot list directory ({e})")
                continue

            yield DirectoryNode(path=dir_path, depth=depth), identity

            subdirs: list[tuple[Path, bool]] = []
            for entry in entries:
                try:
                    is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
                    is_link = is_dir and entry.is_symlink()
                except OSError as e:
                    logger.warning(f"Skipped {entry.path}: cannot determine entry type ({e})")
                    continue
                if is_dir:
                    subdirs.append((Path(entry.path), is_link))

            subdirs.sort(key=lambda item: item[0].name)
            for subdir, is_link in subdirs:
                queue.append((subdir, depth + 1, None if is_link else identity))

    def ordered(self) -> list[DirectoryNode]:
        """All directories sorted deepest first.

        Depth (component count below the root) is the ordering key, so every
        directory comes after all of its subdirectories. Ties are broken by
        path for a deterministic order.

        A directory first reached through a symlink is emitted under the
        link's path, which can be shallower than where it really lives. Its
        depth is raised to one more than its physical parent's so that the
        parent is still processed after it.

        Returns:
            Directories in processing order

        """
        parents: dict[Identity, Identity] = {}
        found = list(self._walk(parents))
        if parents:
            found = _settle_depths(found, parents)
        return sorted((node for node, _ in found), key=lambda node: (-node.depth, str(node.path)))


def _settle_depths(
    found: list[tuple[DirectoryNode, Identity | None]],
    parents: dict[Identity, Identity],
) -> list[tuple[DirectoryNode, Identity | None]]:
    """Give every directory a depth greater than its physical parent's."""
    walked = {identity: node.depth for node, identity in found if identity is not None}
    settled: dict[Identity, int] = {}

    def settle(identity: Identity) -> int:
        # Climb to the nearest settled ancestor, then settle on the way down
        chain: list[Identity] = []
        current: Identity | None = identity
        while current is not None and current in walked and current not in settled:
            chain.append(current)
            current = parents.get(current)
        floor = settled[current] if current is not None and current in settled else -1
        for member in reversed(chain):
            floor = max(walked[member], floor + 1)
            settled[member] = floor
        return settled[identity]

    return [
        (node if identity is None else node._replace(depth=settle(identity)), identity)
        for node, identity in found
    ]
