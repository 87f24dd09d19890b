"""Pytest configuration and fixtures for dirstamp tests."""

import logging
import os
from collections.abc import Callable
from pathlib import Path

import pytest

NS = 1_000_000_000
DAY_NS = 86_400 * NS

# Fixed reference point so tests never depend on the wall clock
BASE_NS = 1_700_000_000 * NS


@pytest.fixture(autouse=True)
def reset_build_info_cache():
    """Clear cached build metadata before and after each test."""
    from dirstamp.core.build_info import get_build_info

    get_build_info.cache_clear()
    yield
    get_build_info.cache_clear()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers and levels the CLI attaches to the package logger.

    Without this, a CLI test run with --quiet would hide warnings from
    later caplog-based tests.
    """
    package_logger = logging.getLogger("dirstamp")
    saved_handlers = list(package_logger.handlers)
    saved_level = package_logger.level
    yield
    package_logger.handlers[:] = saved_handlers
    package_logger.setLevel(saved_level)


@pytest.fixture
def set_mtime() -> Callable[[Path, int], None]:
    """Return a helper that sets both atime and mtime of a path in nanoseconds."""

    def _set(path: Path, mtime_ns: int) -> None:
        os.utime(path, ns=(mtime_ns, mtime_ns))

    return _set


@pytest.fixture
def mtime_of() -> Callable[[Path], int]:
    """Return a helper that reads a path's mtime in nanoseconds."""

    def _get(path: Path) -> int:
        return os.stat(path).st_mtime_ns

    return _get


@pytest.fixture
def nested_tree(tmp_path: Path, set_mtime) -> Path:
    """Create root/sub/file.txt with file at T, sub at T-10d, root at T-20d.

    Returns the root directory.
    """
    root = tmp_path / "root"
    sub = root / "sub"
    sub.mkdir(parents=True)
    (sub / "file.txt").write_text("content")

    set_mtime(sub / "file.txt", BASE_NS)
    set_mtime(sub, BASE_NS - 10 * DAY_NS)
    set_mtime(root, BASE_NS - 20 * DAY_NS)
    return root
