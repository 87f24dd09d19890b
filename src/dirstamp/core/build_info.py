"""Process-wide version and build metadata.

The version comes from installed package metadata. The short source
revision and build date come from an optional ``_build_info.json`` resource
shipped inside the package; release builds create it with
``write_build_info``. Development checkouts simply omit them.
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import cache
from importlib import metadata, resources
from pathlib import Path

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "dirstamp"
BUILD_INFO_RESOURCE = "_build_info.json"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class BuildInfo:
    """Version string plus optional build metadata."""

    version: str
    git_hash: str | None = None
    build_date: str | None = None

    def describe(self) -> str:
        """Format as printed by ``--version``."""
        if self.git_hash and self.build_date:
            return f"{DISTRIBUTION_NAME} {self.version} ({self.git_hash} {self.build_date})"
        if self.git_hash:
            return f"{DISTRIBUTION_NAME} {self.version} ({self.git_hash})"
        return f"{DISTRIBUTION_NAME} {self.version}"


def _read_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        from dirstamp import __version__

        return __version__ or UNKNOWN


def _read_build_resource() -> dict[str, str]:
    try:
        text = resources.files("dirstamp").joinpath(BUILD_INFO_RESOURCE).read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug("Ignoring malformed %s: %s", BUILD_INFO_RESOURCE, e)
        return {}
    if not isinstance(data, dict):
        return {}
    return {k: str(v) for k, v in data.items() if v}


@cache
def get_build_info() -> BuildInfo:
    """Load build metadata once per process."""
    extra = _read_build_resource()
    git_hash = extra.get("git_hash")
    if git_hash == UNKNOWN:
        git_hash = None
    return BuildInfo(
        version=_read_version(),
        git_hash=git_hash,
        build_date=extra.get("build_date"),
    )


def _git_short_hash(cwd: Path) -> str:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return UNKNOWN
    return result.stdout.strip() or UNKNOWN


def write_build_info(
    target_dir: Path,
    now: datetime | None = None,
    *,
    source_dir: Path | None = None,
) -> Path:
    """Record the current revision and UTC build time for packaging.

    Called by the hatch build hook in ``hatch_build.py`` for wheel builds.

    Args:
        target_dir: Directory that receives ``_build_info.json``.
        now: Build timestamp (defaults to the current UTC time).
        source_dir: Checkout to read the revision from (defaults to target_dir).

    Returns:
        Path of the written resource file.

    """
    if now is None:
        now = datetime.now(UTC)
    payload = {
        "git_hash": _git_short_hash(source_dir or target_dir),
        "build_date": now.strftime("%Y-%m-%d %H:%M:%S UTC"),
    }
    out = target_dir / BUILD_INFO_RESOURCE
    out.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote build info to %s: %s", out, payload)
    return out
