"""Shared test fixtures."""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import BinaryIO

import pytest

from file_driver.config import DriverSettings
from file_driver.diagnostics import Outcome
from file_driver.driver import FileDriver
from file_driver.filesystem import OsPlatform


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    return tmp_path


@pytest.fixture
def driver() -> FileDriver:
    """Driver over the real filesystem with default settings."""
    return FileDriver.create()


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """Create a small directory tree.

    Layout::

        root/
            a.txt
            link -> a.txt
            sub/
                b.txt
                deep/
                    c.txt
            zeta/
    """
    root = tmp_path / "root"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "zeta").mkdir()
    (root / "a.txt").write_text("alpha")
    (root / "sub" / "b.txt").write_text("beta")
    (root / "sub" / "deep" / "c.txt").write_text("gamma")
    (root / "link").symlink_to("a.txt")
    return root


# ============================================================================
# Test Double Platforms
# ============================================================================


class ShortWritePlatform(OsPlatform):
    """Accepts at most ``limit`` bytes per write call."""

    def __init__(self, limit: int = 4) -> None:
        self.limit = limit
        self.calls: list[int] = []

    def write(self, stream: BinaryIO, data: bytes) -> Outcome[int]:
        self.calls.append(len(data))
        return super().write(stream, data[: self.limit])


class ZeroWritePlatform(OsPlatform):
    """Reports zero bytes written without writing anything."""

    def write(self, stream: BinaryIO, data: bytes) -> Outcome[int]:
        return Outcome.success(0)


class FailingWritePlatform(OsPlatform):
    """Fails every write with ENOSPC."""

    def write(self, stream: BinaryIO, data: bytes) -> Outcome[int]:
        return Outcome.from_error(OSError(errno.ENOSPC, os.strerror(errno.ENOSPC)))


class RacingMkdirPlatform(OsPlatform):
    """Simulates a peer winning every mkdir race.

    The directory is created, then the call reports EEXIST as if another
    process got there first.
    """

    def __init__(self) -> None:
        self.attempts: list[str] = []

    def mkdir(self, path: str, mode: int) -> Outcome[None]:
        self.attempts.append(path)
        os.mkdir(path, mode)
        return Outcome.from_error(FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), path))


class UnknownProbePlatform(OsPlatform):
    """Every probe fails as if a parent directory denied access."""

    def _probe(self, path: str, check) -> Outcome[bool]:
        return Outcome.from_error(PermissionError(errno.EACCES, os.strerror(errno.EACCES), path))


class FailingChmodPlatform(OsPlatform):
    """Fails chmod for paths whose name is ``blocked``."""

    def __init__(self, blocked: str) -> None:
        self.blocked = blocked
        self.changed: list[str] = []

    def chmod(self, path: str, mode: int) -> Outcome[None]:
        if os.path.basename(path) == self.blocked:
            return Outcome.from_error(PermissionError(errno.EPERM, os.strerror(errno.EPERM), path))
        self.changed.append(path)
        return super().chmod(path, mode)


@pytest.fixture
def short_write_platform() -> ShortWritePlatform:
    return ShortWritePlatform(limit=4)


@pytest.fixture
def short_write_driver(short_write_platform: ShortWritePlatform) -> FileDriver:
    """Driver whose writes accept at most 4 bytes per call."""
    return FileDriver(platform=short_write_platform, settings=DriverSettings())


@pytest.fixture
def racing_platform() -> RacingMkdirPlatform:
    return RacingMkdirPlatform()


@pytest.fixture
def racing_driver(racing_platform: RacingMkdirPlatform) -> FileDriver:
    """Driver that always loses the mkdir race to a simulated peer."""
    return FileDriver(platform=racing_platform, settings=DriverSettings())
