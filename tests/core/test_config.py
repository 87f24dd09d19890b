"""Tests for configuration models and settings-file loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dirstamp.core.config import SettingsFile, StampConfig, load_settings
from dirstamp.core.exceptions import ConfigError


class TestStampConfig:
    """Runtime configuration."""

    def test_defaults(self) -> None:
        config = StampConfig()

        assert config.confirm is False
        assert config.dry_run is True
        assert config.show_dates is False
        assert config.follow_symlinks is True

    def test_frozen(self) -> None:
        config = StampConfig()

        with pytest.raises(ValidationError):
            config.confirm = True  # type: ignore[misc]

    def test_from_sources_without_settings(self) -> None:
        config = StampConfig.from_sources(confirm=True)

        assert config.confirm is True
        assert config.dry_run is False
        assert config.follow_symlinks is True

    def test_settings_used_when_flags_absent(self) -> None:
        settings = SettingsFile(show_dates=True, follow_symlinks=False)

        config = StampConfig.from_sources(settings)

        assert config.show_dates is True
        assert config.follow_symlinks is False
        assert config.confirm is False

    def test_flags_override_settings(self) -> None:
        settings = SettingsFile(show_dates=False, follow_symlinks=False)

        config = StampConfig.from_sources(settings, show_dates=True, follow_symlinks=True)

        assert config.show_dates is True
        assert config.follow_symlinks is True


class TestLoadSettings:
    """YAML settings files."""

    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dirstamp.yaml"
        path.write_text("show_dates: true\nfollow_symlinks: false\n")

        settings = load_settings(path)

        assert settings.show_dates is True
        assert settings.follow_symlinks is False

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "dirstamp.yaml"
        path.write_text("")

        assert load_settings(path) == SettingsFile()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found") as exc_info:
            load_settings(tmp_path / "missing.yaml")

        assert exc_info.value.path == tmp_path / "missing.yaml"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "dirstamp.yaml"
        path.write_text("show_dates: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "dirstamp.yaml"
        path.write_text("show_dates: true\nconfirm: true\n")

        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "dirstamp.yaml"
        path.write_text("- show_dates\n")

        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    def test_invalid_value_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "dirstamp.yaml"
        path.write_text("follow_symlinks: sometimes\n")

        with pytest.raises(ConfigError):
            load_settings(path)
