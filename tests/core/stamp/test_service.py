"""Integration tests for the stamp service."""

from pathlib import Path

import pytest

from dirstamp.core.config import StampConfig
from dirstamp.core.exceptions import NotADirectoryRootError, PathNotFoundError
from dirstamp.core.stamp import StampService, TimestampDecision
from dirstamp.core.stamp.types import NS_PER_DAY, NS_PER_SECOND

BASE = 1_700_000_000 * NS_PER_SECOND


class TestStampService:
    """Test cases for StampService."""

    def test_confirm_run_updates_tree(self, nested_tree: Path, mtime_of) -> None:
        summary = StampService(StampConfig(confirm=True)).run(nested_tree)

        assert not summary.dry_run
        assert summary.updated == 2
        assert mtime_of(nested_tree) == BASE
        assert mtime_of(nested_tree / "sub") == BASE

    def test_default_config_is_dry_run(self, nested_tree: Path, mtime_of) -> None:
        before = mtime_of(nested_tree)

        summary = StampService(StampConfig()).run(nested_tree)

        assert summary.dry_run
        assert summary.updated == 2
        assert mtime_of(nested_tree) == before

    def test_on_change_receives_decisions(self, nested_tree: Path) -> None:
        seen: list[TimestampDecision] = []

        StampService(StampConfig(), on_change=seen.append).run(nested_tree)

        assert [d.path for d in seen] == [nested_tree / "sub", nested_tree]

    def test_missing_root_raises_and_changes_nothing(self, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            StampService(StampConfig(confirm=True)).run(tmp_path / "missing")

    def test_file_root_raises(self, tmp_path: Path) -> None:
        (tmp_path / "file.txt").write_text("x")

        with pytest.raises(NotADirectoryRootError):
            StampService(StampConfig(confirm=True)).run(tmp_path / "file.txt")

    def test_no_follow_symlinks_leaves_link_target_alone(
        self, tmp_path: Path, set_mtime, mtime_of
    ) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "file.txt").write_text("x")
        set_mtime(outside / "file.txt", BASE)
        set_mtime(outside, BASE - 3 * NS_PER_DAY)
        root = tmp_path / "root"
        root.mkdir()
        (root / "link").symlink_to(outside)

        StampService(StampConfig(confirm=True, follow_symlinks=False)).run(root)

        assert mtime_of(outside) == BASE - 3 * NS_PER_DAY

    def test_follow_symlinks_updates_link_target(
        self, tmp_path: Path, set_mtime, mtime_of
    ) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "file.txt").write_text("x")
        set_mtime(outside / "file.txt", BASE)
        set_mtime(outside, BASE - 3 * NS_PER_DAY)
        root = tmp_path / "root"
        root.mkdir()
        (root / "link").symlink_to(outside)

        StampService(StampConfig(confirm=True, follow_symlinks=True)).run(root)

        assert mtime_of(outside) == BASE

    def test_logs_directory_count(
        self, nested_tree: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("INFO", logger="dirstamp"):
            StampService(StampConfig()).run(nested_tree)

        assert any("Found 2 directories" in r.getMessage() for r in caplog.records)

    def _shallow_link_to_deep_dir(self, tmp_path: Path, set_mtime) -> Path:
        """root/a/b/real/f.txt at T, plus root/link -> root/a/b/real."""
        root = tmp_path / "root"
        real = root / "a" / "b" / "real"
        real.mkdir(parents=True)
        (real / "f.txt").write_text("x")
        (root / "link").symlink_to(real)
        set_mtime(real / "f.txt", BASE)
        set_mtime(real, BASE - 10 * NS_PER_DAY)
        set_mtime(root / "a" / "b", BASE - 20 * NS_PER_DAY)
        set_mtime(root / "a", BASE - 30 * NS_PER_DAY)
        return root

    def test_shallow_link_to_deep_dir_still_propagates(
        self, tmp_path: Path, set_mtime, mtime_of
    ) -> None:
        root = self._shallow_link_to_deep_dir(tmp_path, set_mtime)

        StampService(StampConfig(confirm=True)).run(root)

        assert mtime_of(root / "a" / "b" / "real") == BASE
        assert mtime_of(root / "a" / "b") == BASE
        assert mtime_of(root / "a") == BASE

        second = StampService(StampConfig(confirm=True)).run(root)

        assert second.updated == 0

    def test_shallow_link_to_deep_dir_dry_run_matches_confirm(
        self, tmp_path: Path, set_mtime, mtime_of
    ) -> None:
        root = self._shallow_link_to_deep_dir(tmp_path, set_mtime)
        before = mtime_of(root / "a" / "b")

        summary = StampService(StampConfig()).run(root)

        targets = {c.path: c.target_ns for c in summary.changes}
        assert targets[root / "a" / "b"] == BASE
        assert targets[root / "a"] == BASE
        assert mtime_of(root / "a" / "b") == before
