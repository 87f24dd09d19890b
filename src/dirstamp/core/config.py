"""Runtime configuration and settings-file loading.

The CLI builds a frozen StampConfig for every run. Defaults for
``show_dates`` and ``follow_symlinks`` may come from an optional YAML
settings file; explicit command-line flags always win. Applying changes
(``confirm``) is never read from a file.

Example settings file:
    show_dates: true
    follow_symlinks: false
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dirstamp.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


class SettingsFile(BaseModel):
    """Values accepted in a YAML settings file.

    Attributes:
        show_dates: Include before/after timestamps in change reports.
        follow_symlinks: Descend into symbolically linked directories.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    show_dates: bool = Field(
        default=False,
        description="Include before/after timestamps in change reports",
    )
    follow_symlinks: bool = Field(
        default=True,
        description="Descend into symbolically linked directories",
    )


class StampConfig(BaseModel):
    """Resolved configuration for a single run.

    The mode is fixed for the whole run; nothing mutates it during traversal.

    Attributes:
        confirm: Write mtimes to disk. False means dry run.
        show_dates: Include before/after timestamps in change reports.
        follow_symlinks: Descend into symbolically linked directories.

    """

    model_config = ConfigDict(frozen=True)

    confirm: bool = False
    show_dates: bool = False
    follow_symlinks: bool = True

    @property
    def dry_run(self) -> bool:
        """True when changes are only reported."""
        return not self.confirm

    @classmethod
    def from_sources(
        cls,
        settings: SettingsFile | None = None,
        *,
        confirm: bool = False,
        show_dates: bool | None = None,
        follow_symlinks: bool | None = None,
    ) -> "StampConfig":
        """Merge settings-file values with command-line overrides.

        Args:
            settings: Loaded settings file, or None for built-in defaults.
            confirm: Whether the confirm flag was given.
            show_dates: CLI override, None when the flag was not given.
            follow_symlinks: CLI override, None when the flag was not given.

        Returns:
            Frozen StampConfig.

        """
        base = settings if settings is not None else SettingsFile()
        return cls(
            confirm=confirm,
            show_dates=base.show_dates if show_dates is None else show_dates,
            follow_symlinks=base.follow_symlinks if follow_symlinks is None else follow_symlinks,
        )


class _SettingsDocument(BaseModel):
    """Wrapper used only to coerce an empty YAML document to defaults."""

    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def coerce_none_to_empty_dict(cls, v: Any) -> dict[str, Any]:
        """YAML parses an empty file as None."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError(f"expected a mapping at top level, got {type(v).__name__}")
        return v


def load_settings(path: Path) -> SettingsFile:
    """Load and validate a YAML settings file.

    Args:
        path: Path to the settings file.

    Returns:
        Validated SettingsFile.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid YAML,
            or contains unknown keys or invalid values.

    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Settings file not found: {path}", path) from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}", path) from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e

    try:
        document = _SettingsDocument(data=raw)
        settings = SettingsFile.model_validate(document.data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}", path) from e

    logger.debug("Loaded settings from %s: %s", path, settings.model_dump())
    return settings
