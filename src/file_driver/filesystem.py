"""Local filesystem implementation of the Platform protocol.

Each method wraps one native call. ``OSError`` and ``ValueError`` (for
example an embedded NUL byte in a path) are converted into failed outcomes
with diagnostic text; nothing is raised to the caller. Python keeps no stat
cache, so every query observes the current state of the filesystem.
"""

from __future__ import annotations

import fcntl
import os
import shutil
from pathlib import Path
from typing import BinaryIO, cast

from file_driver.diagnostics import Outcome, probe_from_stat_error
from file_driver.types import Entry, EntryKind

NATIVE_ERRORS = (OSError, ValueError)


def join_path(parent: str, name: str) -> str:
    """Join a child name onto a parent path with a forward slash."""
    if parent.endswith("/"):
        return f"{parent}{name}"
    return f"{parent}/{name}"


def binary_mode(mode: str) -> str:
    """Normalize an fopen-style mode string to a binary Python mode."""
    mode = mode.replace("t", "")
    if "b" not in mode:
        mode += "b"
    return mode


class OsPlatform:
    """Production platform over ``os``, ``shutil`` and ``fcntl``.

    Satisfies the Platform protocol structurally.
    """

    # --- Queries ---

    def _probe(self, path: str, check) -> Outcome[bool]:
        try:
            result = os.stat(path)
        except NATIVE_ERRORS as e:
            return probe_from_stat_error(e)
        return Outcome.success(bool(check(result)))

    def probe_exists(self, path: str) -> Outcome[bool]:
        return self._probe(path, lambda result: True)

    def probe_file(self, path: str) -> Outcome[bool]:
        return self._probe(
            path, lambda result: EntryKind.from_mode(result.st_mode) is EntryKind.FILE
        )

    def probe_directory(self, path: str) -> Outcome[bool]:
        return self._probe(
            path, lambda result: EntryKind.from_mode(result.st_mode) is EntryKind.DIRECTORY
        )

    def probe_readable(self, path: str) -> Outcome[bool]:
        return self._probe(path, lambda result: os.access(path, os.R_OK))

    def probe_writable(self, path: str) -> Outcome[bool]:
        return self._probe(path, lambda result: os.access(path, os.W_OK))

    def stat(self, path: str) -> Outcome[os.stat_result]:
        try:
            return Outcome.success(os.stat(path))
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)

    def real_path(self, path: str) -> Outcome[str]:
        try:
            return Outcome.success(os.path.realpath(path, strict=True))
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)

    def list_entries(self, path: str) -> Outcome[list[Entry]]:
        entries: list[Entry] = []
        try:
            with os.scandir(path) as iterator:
                for item in iterator:
                    if item.is_symlink():
                        kind = EntryKind.SYMLINK
                    elif item.is_dir(follow_symlinks=False):
                        kind = EntryKind.DIRECTORY
                    elif item.is_file(follow_symlinks=False):
                        kind = EntryKind.FILE
                    else:
                        kind = EntryKind.OTHER
                    entries.append(Entry(join_path(path, item.name), item.name, kind))
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        entries.sort(key=lambda entry: entry.name)
        return Outcome.success(entries)

    def list_names(self, path: str) -> Outcome[list[str]]:
        try:
            return Outcome.success(os.listdir(path))
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)

    # --- Single-entry mutations ---

    def mkdir(self, path: str, mode: int) -> Outcome[None]:
        try:
            os.mkdir(path, mode)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def rmdir(self, path: str) -> Outcome[None]:
        try:
            os.rmdir(path)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def unlink(self, path: str) -> Outcome[None]:
        try:
            os.unlink(path)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def rename(self, source: str, destination: str) -> Outcome[None]:
        try:
            os.rename(source, destination)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def copy_file(self, source: str, destination: str) -> Outcome[None]:
        try:
            shutil.copyfile(source, destination)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def symlink(self, target: str, link: str) -> Outcome[None]:
        try:
            os.symlink(target, link)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def read_link(self, path: str) -> Outcome[str]:
        try:
            return Outcome.success(os.readlink(path))
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)

    def chmod(self, path: str, mode: int) -> Outcome[None]:
        try:
            os.chmod(path, mode)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def touch(self, path: str, modification_time: float | None) -> Outcome[None]:
        try:
            Path(path).touch(exist_ok=True)
            if modification_time is not None:
                os.utime(path, (modification_time, modification_time))
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def read_file(self, path: str) -> Outcome[bytes]:
        try:
            return Outcome.success(Path(path).read_bytes())
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)

    def write_file(self, path: str, data: bytes, append: bool) -> Outcome[int]:
        try:
            with open(path, "ab" if append else "wb") as f:
                written = f.write(data)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success(written)

    # --- Streams ---

    def open_stream(self, path: str, mode: str) -> Outcome[BinaryIO]:
        try:
            stream = open(path, binary_mode(mode), buffering=0)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success(cast(BinaryIO, stream))

    def read(self, stream: BinaryIO, length: int) -> Outcome[bytes]:
        try:
            data = stream.read(length)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        # Non-blocking streams return None when no data is ready.
        return Outcome.success(data or b"")

    def read_line(self, stream: BinaryIO, length: int) -> Outcome[bytes]:
        try:
            data = stream.readline(length if length > 0 else -1)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success(data)

    def write(self, stream: BinaryIO, data: bytes) -> Outcome[int]:
        try:
            written = stream.write(data)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success(written or 0)

    def seek(self, stream: BinaryIO, offset: int, whence: int) -> Outcome[int]:
        try:
            return Outcome.success(stream.seek(offset, whence))
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)

    def tell(self, stream: BinaryIO) -> Outcome[int]:
        try:
            return Outcome.success(stream.tell())
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)

    def flush(self, stream: BinaryIO) -> Outcome[None]:
        try:
            stream.flush()
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def close(self, stream: BinaryIO) -> Outcome[None]:
        try:
            stream.close()
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()

    def lock(self, stream: BinaryIO, operation: int) -> Outcome[None]:
        try:
            fcntl.flock(stream.fileno(), operation)
        except NATIVE_ERRORS as e:
            return Outcome.from_error(e)
        return Outcome.success()
