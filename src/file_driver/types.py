"""Shared data types for the file driver."""

from __future__ import annotations

import os
import stat as stat_module
from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag

__all__ = ["Entry", "EntryKind", "FileStat", "LockMode", "Whence"]


class EntryKind(Enum):
    """Type of a directory entry, as seen without following symlinks."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> EntryKind:
        if stat_module.S_ISLNK(mode):
            return cls.SYMLINK
        if stat_module.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat_module.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER


class LockMode(IntFlag):
    """Advisory lock operations (flock constants)."""

    SHARED = 1
    EXCLUSIVE = 2
    NON_BLOCKING = 4
    UNLOCK = 8


class Whence(IntEnum):
    """Reference point for seek offsets."""

    SET = os.SEEK_SET
    CURRENT = os.SEEK_CUR
    END = os.SEEK_END


@dataclass(frozen=True)
class Entry:
    """A directory entry produced by enumeration.

    Attributes:
        path: Full path of the entry, joined with forward slashes.
        name: Final path component.
        kind: Entry type (symlinks are not resolved).
    """

    path: str
    name: str
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class FileStat:
    """Snapshot of a path's metadata at query time.

    Attributes:
        path: Path that was queried.
        kind: Entry type of the resolved target.
        size: Size in bytes.
        mode: Raw st_mode bits.
        permissions: Permission bits (mode & 0o7777).
        uid: Owner user id.
        gid: Owner group id.
        device: Device identifier.
        inode: Inode number.
        links: Number of hard links.
        accessed_at: Last access time (epoch seconds).
        modified_at: Last modification time (epoch seconds).
        changed_at: Last status change time (epoch seconds).
    """

    path: str
    kind: EntryKind
    size: int
    mode: int
    permissions: int
    uid: int
    gid: int
    device: int
    inode: int
    links: int
    accessed_at: float
    modified_at: float
    changed_at: float

    @classmethod
    def from_stat_result(cls, path: str, result: os.stat_result) -> FileStat:
        """Build a FileStat from an ``os.stat`` result."""
        return cls(
            path=path,
            kind=EntryKind.from_mode(result.st_mode),
            size=result.st_size,
            mode=result.st_mode,
            permissions=stat_module.S_IMODE(result.st_mode),
            uid=result.st_uid,
            gid=result.st_gid,
            device=result.st_dev,
            inode=result.st_ino,
            links=result.st_nlink,
            accessed_at=result.st_atime,
            modified_at=result.st_mtime,
            changed_at=result.st_ctime,
        )
