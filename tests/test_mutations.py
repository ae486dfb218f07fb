"""Tests for single-entry mutations and race-safe directory creation."""

from __future__ import annotations

import os
import threading
import time
from pathlib import Path

import pytest

from file_driver.driver import FileDriver
from file_driver.errors import FileSystemError

from conftest import RacingMkdirPlatform


class TestCreateDirectory:
    """Tests for create_directory."""

    def test_creates_missing_ancestors(self, driver: FileDriver, tmp_path: Path) -> None:
        """Test every missing level is created."""
        target = tmp_path / "a" / "b" / "c"

        driver.create_directory(str(target))

        assert target.is_dir()

    def test_idempotent(self, driver: FileDriver, tmp_path: Path) -> None:
        """Test creating an existing directory succeeds and changes nothing."""
        target = tmp_path / "exists"
        target.mkdir(mode=0o700)

        driver.create_directory(str(target), 0o755)

        assert target.stat().st_mode & 0o777 == 0o700

    def test_permissions_applied(self, driver: FileDriver, tmp_path: Path) -> None:
        """Test the requested mode is passed to mkdir (subject to umask)."""
        target = tmp_path / "private"
        umask = os.umask(0)
        os.umask(umask)

        driver.create_directory(str(target), 0o700)

        assert target.stat().st_mode & 0o777 == 0o700 & ~umask

    def test_lost_race_is_success(
        self, racing_driver: FileDriver, racing_platform: RacingMkdirPlatform, tmp_path: Path
    ) -> None:
        """Test a failed mkdir whose directory now exists counts as success."""
        target = tmp_path / "x" / "y"

        racing_driver.create_directory(str(target))

        assert target.is_dir()
        assert racing_platform.attempts == [str(tmp_path / "x"), str(target)]

    def test_blocked_by_file(self, driver: FileDriver, tmp_path: Path) -> None:
        """Test a file in the way is a real failure naming that level."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(FileSystemError) as exc_info:
            driver.create_directory(str(blocker / "child"))

        assert str(exc_info.value).startswith(f'Directory "{blocker}" cannot be created')

    def test_concurrent_creators(self, tmp_path: Path) -> None:
        """Test many threads creating the same tree all succeed."""
        target = tmp_path / "p" / "q" / "r" / "s"
        errors: list[BaseException] = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            driver = FileDriver.create()
            barrier.wait()
            try:
                driver.create_directory(str(target))
            except FileSystemError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert target.is_dir()

    def test_relative_path(
        self, driver: FileDriver, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test relative paths are created below the working directory."""
        monkeypatch.chdir(tmp_path)

        driver.create_directory("rel/one/two")

        assert (tmp_path / "rel" / "one" / "two").is_dir()


class TestSingleEntryMutations:
    """Tests for rename, copy, symlink, delete, touch and chmod."""

    def test_rename(self, driver: FileDriver, tree: Path) -> None:
        """Test a file is moved."""
        driver.rename(str(tree / "a.txt"), str(tree / "renamed.txt"))

        assert not (tree / "a.txt").exists()
        assert (tree / "renamed.txt").read_text() == "alpha"

    def test_rename_missing_names_both_paths(self, driver: FileDriver, tree: Path) -> None:
        """Test the rename error names source and destination."""
        source = str(tree / "missing")
        destination = str(tree / "other")

        with pytest.raises(FileSystemError) as exc_info:
            driver.rename(source, destination)

        message = str(exc_info.value)
        assert message.startswith(f'The path "{source}" cannot be renamed into "{destination}"')
        assert "Warning!" in message

    def test_copy(self, driver: FileDriver, tree: Path) -> None:
        """Test file contents are copied."""
        driver.copy(str(tree / "a.txt"), str(tree / "copy.txt"))

        assert (tree / "copy.txt").read_text() == "alpha"
        assert (tree / "a.txt").exists()

    def test_copy_missing(self, driver: FileDriver, tree: Path) -> None:
        """Test a failed copy raises."""
        with pytest.raises(FileSystemError, match="cannot be copied to"):
            driver.copy(str(tree / "missing"), str(tree / "copy.txt"))

    def test_symlink(self, driver: FileDriver, tree: Path) -> None:
        """Test a symlink is created pointing at the source."""
        driver.symlink("sub/b.txt", str(tree / "b-link"))

        assert os.readlink(tree / "b-link") == "sub/b.txt"
        assert (tree / "b-link").read_text() == "beta"

    def test_symlink_existing(self, driver: FileDriver, tree: Path) -> None:
        """Test placing a symlink over an existing entry raises."""
        with pytest.raises(FileSystemError, match="Cannot create a symlink for"):
            driver.symlink("a.txt", str(tree / "link"))

    def test_delete_file(self, driver: FileDriver, tree: Path) -> None:
        """Test a file is removed."""
        driver.delete_file(str(tree / "a.txt"))

        assert not (tree / "a.txt").exists()

    def test_delete_missing_file(self, driver: FileDriver, tree: Path) -> None:
        """Test deleting a missing file raises naming it."""
        target = str(tree / "missing")

        with pytest.raises(FileSystemError) as exc_info:
            driver.delete_file(target)

        assert str(exc_info.value).startswith(f'The file "{target}" cannot be deleted')

    def test_touch_creates_file(self, driver: FileDriver, tmp_path: Path) -> None:
        """Test touch creates a missing file."""
        target = tmp_path / "new.txt"

        driver.touch(str(target))

        assert target.is_file()

    def test_touch_sets_time(self, driver: FileDriver, tree: Path) -> None:
        """Test an explicit modification time is applied."""
        stamp = time.time() - 3600

        driver.touch(str(tree / "a.txt"), stamp)

        assert (tree / "a.txt").stat().st_mtime == pytest.approx(stamp, abs=1)

    def test_touch_in_missing_directory(self, driver: FileDriver, tmp_path: Path) -> None:
        """Test touch failure raises."""
        with pytest.raises(FileSystemError, match="cannot be touched"):
            driver.touch(str(tmp_path / "nope" / "f"))

    def test_change_permissions(self, driver: FileDriver, tree: Path) -> None:
        """Test permission bits are set."""
        driver.change_permissions(str(tree / "a.txt"), 0o640)

        assert (tree / "a.txt").stat().st_mode & 0o777 == 0o640

    def test_change_permissions_missing(self, driver: FileDriver, tree: Path) -> None:
        """Test chmod failure names the path."""
        target = str(tree / "missing")

        with pytest.raises(FileSystemError) as exc_info:
            driver.change_permissions(target, 0o640)

        assert str(exc_info.value).startswith(f'Cannot change permissions for path "{target}"')
