"""Exception hierarchy for dirstamp.

Only errors that prevent a run from starting are raised as exceptions:
an unusable traversal root or an invalid settings file. Failures local to a
single directory or entry are logged and skipped by the walker and the
propagator instead.
"""

from pathlib import Path

__all__ = [
    "DirstampError",
    "RootPathError",
    "PathNotFoundError",
    "AccessDeniedError",
    "NotADirectoryRootError",
    "ConfigError",
]


class DirstampError(Exception):
    """Base exception for all dirstamp errors."""


class RootPathError(DirstampError):
    """The traversal root cannot be established.

    Attributes:
        path: The root path that was requested.

    """

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class PathNotFoundError(RootPathError):
    """The traversal root does not exist."""


class AccessDeniedError(RootPathError):
    """The traversal root exists but cannot be read."""


class NotADirectoryRootError(RootPathError):
    """The traversal root is not a directory."""


class ConfigError(DirstampError):
    """Settings file is unreadable, malformed, or has invalid values.

    Attributes:
        path: Settings file that failed to load, if known.

    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
