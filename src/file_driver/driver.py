"""Local filesystem driver.

Every operation either returns a typed result or raises
:class:`~file_driver.errors.FileSystemError` whose message combines the
operation's subject path(s) with the diagnostic text of the native call that
failed. Genuine negative answers ("does not exist") are plain ``False``.

Example usage::

    from file_driver import FileDriver

    driver = FileDriver.create()
    driver.create_directory("/var/app/cache/pages")
    driver.copy_directory("/var/app/static", "/var/app/pub/static")

    with driver.open("/var/app/report.csv", "w") as handle:
        driver.write_record(handle, ["sku", "price"])
"""

from __future__ import annotations

import configparser
import csv
import errno
import glob
import logging
from collections.abc import Iterable, Iterator
from typing import Any, NoReturn

from file_driver import paths
from file_driver.config import DriverSettings
from file_driver.diagnostics import Outcome, describe
from file_driver.errors import FileSystemError, InvalidHandleError
from file_driver.filesystem import OsPlatform, binary_mode, join_path
from file_driver.protocols import Platform
from file_driver.records import encode_record, parse_record, sanitize_fields
from file_driver.streams import FileHandle
from file_driver.traversal import list_children, walk_postorder, walk_preorder
from file_driver.types import EntryKind, FileStat, LockMode, Whence

logger = logging.getLogger(__name__)

__all__ = ["FileDriver"]

# Section holding keys that appear before the first [section] of an INI file.
ROOT_SECTION = "__root__"

# Unquoted INI words with a scalar meaning: truthy ones read as "1", the rest as "".
INI_WORDS = {
    "true": "1",
    "on": "1",
    "yes": "1",
    "false": "",
    "off": "",
    "no": "",
    "none": "",
    "null": "",
}


def _fail(template: str, *subjects: Any, outcome: Outcome[Any] | None = None) -> NoReturn:
    """Raise a FileSystemError, appending the outcome's diagnostic to the arguments."""
    diagnostic = outcome.diagnostic if outcome is not None else None
    raise FileSystemError(template, [*subjects, diagnostic], diagnostic)


def _ini_value(value: str | None) -> str:
    if value is None:
        return ""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return INI_WORDS.get(value.lower(), value)


class FileDriver:
    """Facade over local filesystem operations.

    Follows Separate Use from Creation: the constructor requires all
    dependencies. Use factory method `create()` for production instantiation
    with defaults.
    """

    fix_separator = staticmethod(paths.fix_separator)
    get_absolute_path = staticmethod(paths.get_absolute_path)
    get_relative_path = staticmethod(paths.get_relative_path)
    get_real_path_safety = staticmethod(paths.get_real_path_safety)
    get_parent_directory = staticmethod(paths.get_parent_directory)

    def __init__(self, platform: Platform, settings: DriverSettings) -> None:
        """Initialize the driver with required dependencies.

        Args:
            platform: Native-call implementation (required).
            settings: Default permissions, encoding and CSV dialect (required).

        Note:
            Use factory method `create()` for production code.
            Direct construction is for testing with explicit dependencies.
        """
        self.platform = platform
        self.settings = settings

    @classmethod
    def create(
        cls,
        platform: Platform | None = None,
        settings: DriverSettings | None = None,
    ) -> FileDriver:
        """Factory method for production instantiation.

        Args:
            platform: Optional platform (OsPlatform if not provided).
            settings: Optional settings (defaults if not provided).

        Returns:
            Configured FileDriver instance.
        """
        return cls(platform=platform or OsPlatform(), settings=settings or DriverSettings())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _answer(self, outcome: Outcome[bool]) -> bool:
        if not outcome.ok:
            _fail("Error occurred during execution {0}", outcome=outcome)
        return bool(outcome.value)

    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists.

        Raises:
            FileSystemError: If existence cannot be determined.
        """
        return self._answer(self.platform.probe_exists(path))

    def is_file(self, path: str) -> bool:
        """Check whether path is a regular file."""
        return self._answer(self.platform.probe_file(path))

    def is_directory(self, path: str) -> bool:
        """Check whether path is a directory."""
        return self._answer(self.platform.probe_directory(path))

    def is_readable(self, path: str) -> bool:
        """Check whether path exists and can be read."""
        return self._answer(self.platform.probe_readable(path))

    def is_writable(self, path: str) -> bool:
        """Check whether path exists and can be written."""
        return self._answer(self.platform.probe_writable(path))

    def stat(self, path: str) -> FileStat:
        """Gather metadata for path.

        Raises:
            FileSystemError: If the path cannot be stat'ed, including when it
                does not exist.
        """
        outcome = self.platform.stat(path)
        if not outcome.ok or outcome.value is None:
            _fail("Cannot gather stats! {0}", outcome=outcome)
        return FileStat.from_stat_result(path, outcome.value)

    def get_real_path(self, path: str) -> str | None:
        """Resolve symlinks and relative segments.

        Returns:
            The canonical path, or None if it cannot be resolved. Callers
            must check for None; it is not reported as an error.
        """
        outcome = self.platform.real_path(path)
        if not outcome.ok:
            logger.debug("Cannot resolve %s: %s", path, outcome.diagnostic)
            return None
        return outcome.value

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    def read_bytes(self, path: str) -> bytes:
        """Read the whole file as bytes."""
        outcome = self.platform.read_file(path)
        if not outcome.ok or outcome.value is None:
            _fail('Cannot read contents from file "{0}" {1}', path, outcome=outcome)
        return outcome.value

    def read_contents(self, path: str, encoding: str | None = None) -> str:
        """Read the whole file as text.

        Args:
            path: File to read.
            encoding: Text encoding. Defaults to the configured encoding.

        Raises:
            FileSystemError: If the file cannot be read or decoded.
        """
        data = self.read_bytes(path)
        try:
            return data.decode(encoding or self.settings.encoding)
        except UnicodeDecodeError as e:
            diagnostic = describe(e)
            raise FileSystemError(
                'Cannot read contents from file "{0}" {1}', [path, diagnostic], diagnostic
            ) from e

    def write_contents(self, path: str, content: str | bytes, append: bool = False) -> int:
        """Write a whole file.

        Args:
            path: File to write; created if missing.
            content: Text (encoded with the configured encoding) or bytes.
            append: Append instead of truncating.

        Returns:
            Number of bytes written. Writing empty content returns 0.
        """
        data = content.encode(self.settings.encoding) if isinstance(content, str) else content
        outcome = self.platform.write_file(path, data, append)
        if not outcome.ok:
            _fail('The specified "{0}" file could not be written {1}', path, outcome=outcome)
        return outcome.value or 0

    def parse_ini(self, path: str, process_sections: bool = False) -> dict[str, Any]:
        """Parse an INI file.

        Keys before the first section are returned at the top level. With
        process_sections, every section becomes a nested mapping; otherwise
        all sections are flattened into one mapping, later keys winning.
        Values are strings: surrounding double quotes are removed, inline
        "; comments" are stripped, and the unquoted words true/on/yes read as
        "1" while false/off/no/none/null read as "".

        Raises:
            FileSystemError: If the file cannot be read or parsed.
        """
        text = self.read_contents(path)
        parser = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            allow_no_value=True,
            inline_comment_prefixes=(";",),
        )
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        try:
            parser.read_string(f"[{ROOT_SECTION}]\n{text}", source=path)
        except configparser.Error as e:
            diagnostic = describe(e)
            raise FileSystemError(
                'Cannot read contents from file "{0}" {1}', [path, diagnostic], diagnostic
            ) from e

        result: dict[str, Any] = {}
        for section in parser.sections():
            values = {key: _ini_value(value) for key, value in parser.items(section, raw=True)}
            if section != ROOT_SECTION and process_sections:
                result[section] = values
            else:
                result.update(values)
        return result

    # ------------------------------------------------------------------
    # Single-entry mutations
    # ------------------------------------------------------------------

    def create_directory(self, path: str, permissions: int | None = None) -> None:
        """Create a directory and any missing ancestors.

        Idempotent: an existing directory is left untouched. Tolerates peers
        creating the same directories concurrently; a failed create is an
        error only if the directory still doesn't exist afterwards.

        Args:
            path: Directory to create.
            permissions: Mode bits (before umask). Defaults to the configured
                directory permissions.

        Raises:
            FileSystemError: If a directory in the chain cannot be created.
        """
        if self.is_directory(path):
            return
        mode = self.settings.directory_permissions if permissions is None else permissions

        missing: list[str] = []
        current = path
        parent = paths.get_parent_directory(current)
        while parent != current and not self.is_directory(parent):
            missing.append(parent)
            current = parent
            parent = paths.get_parent_directory(current)

        for ancestor in reversed(missing):
            self._make_directory(ancestor, mode)
        self._make_directory(path, mode)

    def _make_directory(self, path: str, mode: int) -> None:
        outcome = self.platform.mkdir(path, mode)
        if outcome.ok:
            logger.debug("Created directory %s", path)
            return
        if self.is_directory(path):
            logger.debug("Directory %s was created concurrently", path)
            return
        _fail('Directory "{0}" cannot be created {1}', path, outcome=outcome)

    def rename(self, old_path: str, new_path: str) -> None:
        """Rename or move a file or directory."""
        outcome = self.platform.rename(old_path, new_path)
        if not outcome.ok:
            _fail('The path "{0}" cannot be renamed into "{1}" {2}', old_path, new_path, outcome=outcome)

    def copy(self, source: str, destination: str) -> None:
        """Copy a file's contents to destination."""
        outcome = self.platform.copy_file(source, destination)
        if not outcome.ok:
            _fail(
                'The file or directory "{0}" cannot be copied to "{1}" {2}',
                source,
                destination,
                outcome=outcome,
            )

    def symlink(self, source: str, destination: str) -> None:
        """Create a symlink at destination pointing to source."""
        outcome = self.platform.symlink(source, destination)
        if not outcome.ok:
            _fail(
                'Cannot create a symlink for "{0}" and place it to "{1}" {2}',
                source,
                destination,
                outcome=outcome,
            )

    def delete_file(self, path: str) -> None:
        """Delete a file or symlink."""
        outcome = self.platform.unlink(path)
        if not outcome.ok:
            _fail('The file "{0}" cannot be deleted {1}', path, outcome=outcome)

    def touch(self, path: str, modification_time: float | None = None) -> None:
        """Create path if missing and set its access and modification time.

        Args:
            path: File to touch.
            modification_time: Epoch seconds. Defaults to now.
        """
        outcome = self.platform.touch(path, modification_time)
        if not outcome.ok:
            _fail('The file or directory "{0}" cannot be touched {1}', path, outcome=outcome)

    def change_permissions(self, path: str, permissions: int) -> None:
        """Change the permission bits of path."""
        outcome = self.platform.chmod(path, permissions)
        if not outcome.ok:
            _fail('Cannot change permissions for path "{0}" {1}', path, outcome=outcome)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def read_directory(self, path: str) -> list[str]:
        """Return the sorted full paths of a directory's children."""
        return sorted(entry.path for entry in list_children(self.platform, path))

    def read_directory_recursively(self, path: str) -> list[str]:
        """Return the paths of all descendants, children before parents."""
        return [entry.path for entry in walk_postorder(self.platform, path)]

    def scan_dir(self, path: str) -> list[str]:
        """Return the sorted child names of a directory, including "." and ".."."""
        outcome = self.platform.list_names(path)
        if not outcome.ok or outcome.value is None:
            _fail('Cannot read contents from path "{0}" {1}', path, outcome=outcome)
        return sorted([".", "..", *outcome.value])

    def search(self, pattern: str, path: str) -> list[str]:
        """Find paths under path matching a glob pattern.

        "{a,b}" alternatives are expanded; each alternative's matches are
        sorted and concatenated in pattern order.

        Returns:
            Matching paths, or an empty list.
        """
        glob_pattern = path.rstrip("/") + "/" + pattern.lstrip("/")
        results: list[str] = []
        for expanded in paths.expand_braces(glob_pattern):
            results.extend(sorted(glob.glob(expanded)))
        return results

    # ------------------------------------------------------------------
    # Recursive mutations
    # ------------------------------------------------------------------

    def copy_directory(self, source: str, destination: str) -> None:
        """Copy a directory tree.

        The tree is walked parents-first, so every destination directory
        exists before files are copied into it. Symlinks are re-created with
        the same target. A source that cannot be enumerated fails before the
        destination is touched. A later failure aborts the copy; entries
        already copied are left in place.
        """
        list_children(self.platform, source)
        self.create_directory(destination)
        prefix = source if source.endswith("/") else source + "/"
        for entry in walk_preorder(self.platform, source):
            target = join_path(destination, paths.get_relative_path(prefix, entry.path))
            if entry.is_dir:
                self.create_directory(target)
            elif entry.kind is EntryKind.SYMLINK:
                self._copy_symlink(entry.path, target)
            else:
                self.copy(entry.path, target)
        logger.debug("Copied %s to %s", source, destination)

    def _copy_symlink(self, link: str, target: str) -> None:
        outcome = self.platform.read_link(link)
        if not outcome.ok or outcome.value is None:
            _fail(
                'Cannot create a symlink for "{0}" and place it to "{1}" {2}',
                link,
                target,
                outcome=outcome,
            )
        self.symlink(outcome.value, target)

    def _remove_children(self, path: str) -> None:
        for entry in walk_postorder(self.platform, path):
            if entry.is_dir:
                self._remove_directory(entry.path)
            else:
                self.delete_file(entry.path)

    def _remove_directory(self, path: str) -> None:
        outcome = self.platform.rmdir(path)
        if not outcome.ok:
            _fail('The directory "{0}" cannot be deleted {1}', path, outcome=outcome)

    def delete_directory(self, path: str) -> None:
        """Delete a directory and everything below it, children first."""
        self._remove_children(path)
        self._remove_directory(path)
        logger.debug("Deleted directory %s", path)

    def clear_directory(self, path: str) -> None:
        """Delete everything below a directory, keeping the directory itself."""
        self._remove_children(path)
        logger.debug("Cleared directory %s", path)

    def change_permissions_recursively(
        self, path: str, dir_permissions: int, file_permissions: int
    ) -> None:
        """Change permissions of path and all of its descendants.

        Directories get dir_permissions and files get file_permissions.
        path itself is changed first, then descendants children-first.
        Symlinks are skipped.

        Raises:
            FileSystemError: On the first failure. The message names the
                top-level path, not the entry that failed.
        """
        path_is_file = self.is_file(path)
        self.change_permissions(path, file_permissions if path_is_file else dir_permissions)
        if path_is_file:
            return

        for entry in walk_postorder(self.platform, path):
            if entry.kind is EntryKind.SYMLINK:
                continue
            mode = dir_permissions if entry.is_dir else file_permissions
            outcome = self.platform.chmod(entry.path, mode)
            if not outcome.ok:
                logger.debug("chmod %o failed for %s", mode, entry.path)
                _fail('Cannot change permissions for path "{0}" {1}', path, outcome=outcome)

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def _stream_fail(self, template: str, handle: FileHandle, outcome: Outcome[Any]) -> NoReturn:
        if outcome.code == errno.EBADF:
            handle.mark_closed()
            raise InvalidHandleError(
                'Invalid handle for file "{0}" {1}',
                [handle.path, outcome.diagnostic],
                outcome.diagnostic,
            )
        _fail(template, outcome=outcome)

    def open(self, path: str, mode: str = "r") -> FileHandle:
        """Open a file and return a handle owned by the caller.

        Args:
            path: File to open.
            mode: fopen-style mode ("r", "w", "a", "x", "r+" ...). Always
                opened in binary, unbuffered.

        Raises:
            FileSystemError: If the file cannot be opened.
        """
        normalized = binary_mode(mode)
        outcome = self.platform.open_stream(path, normalized)
        if not outcome.ok or outcome.value is None:
            _fail('File "{0}" cannot be opened {1}', path, outcome=outcome)
        return FileHandle(self, outcome.value, path, normalized)

    def close(self, handle: FileHandle) -> bool:
        """Close a handle.

        Returns:
            True if the handle was closed by this call, False if it was
            already closed (a no-op).

        Raises:
            InvalidHandleError: If the descriptor was already closed
                elsewhere. The handle is marked closed either way.
        """
        if handle.closed:
            handle.mark_closed()
            return False
        outcome = self.platform.close(handle.stream)
        handle.mark_closed()
        if not outcome.ok:
            self._stream_fail("Error occurred during execution of fileClose {0}", handle, outcome)
        return True

    def read(self, handle: FileHandle, length: int) -> bytes:
        """Read up to length bytes from the current position.

        An empty result at the end of the stream is not an error.
        """
        outcome = self.platform.read(handle.stream, length)
        if not outcome.ok:
            self._stream_fail("File cannot be read {0}", handle, outcome)
        data = outcome.value or b""
        handle.at_eof = len(data) < length
        return data

    def read_line(
        self, handle: FileHandle, length: int = 0, ending: str | bytes | None = None
    ) -> bytes:
        """Read one line from the current position.

        Args:
            handle: Open handle.
            length: Maximum bytes to read; 0 means unlimited.
            ending: Line terminator. Without one, reads through the next
                newline and keeps it. With one, reads through the terminator
                and strips it.

        Returns:
            The line; empty at the end of the stream.
        """
        if ending is None:
            outcome = self.platform.read_line(handle.stream, length)
            if not outcome.ok:
                self._stream_fail("File cannot be read {0}", handle, outcome)
            line = outcome.value or b""
            handle.at_eof = not line.endswith(b"\n") and (length <= 0 or len(line) < length)
            return line

        terminator = ending.encode(self.settings.encoding) if isinstance(ending, str) else ending
        buffer = bytearray()
        while length <= 0 or len(buffer) < length:
            chunk = self.read(handle, 1)
            if not chunk:
                break
            buffer += chunk
            if terminator and buffer.endswith(terminator):
                del buffer[-len(terminator) :]
                break
        return bytes(buffer)

    def write(self, handle: FileHandle, data: str | bytes) -> int:
        """Write all of data, retrying short writes with the unwritten rest.

        Returns:
            Number of bytes written, always len(data) on success.

        Raises:
            FileSystemError: If a write reports zero bytes written or fails.
        """
        payload = data.encode(self.settings.encoding) if isinstance(data, str) else bytes(data)
        stream = handle.stream
        total = 0
        while total < len(payload):
            outcome = self.platform.write(stream, payload[total:])
            if not outcome.ok:
                self._stream_fail("Error occurred during execution of fileWrite {0}", handle, outcome)
            written = outcome.value or 0
            if written == 0:
                _fail("Unable to write")
            total += written
            if total < len(payload):
                logger.debug("Short write to %s: %d of %d bytes", handle.path, total, len(payload))
        return total

    def seek(self, handle: FileHandle, offset: int, whence: Whence = Whence.SET) -> int:
        """Move the handle's position; returns the new absolute position."""
        outcome = self.platform.seek(handle.stream, offset, int(whence))
        if not outcome.ok or outcome.value is None:
            self._stream_fail("Error occurred during execution of fileSeek {0}", handle, outcome)
        handle.at_eof = False
        return outcome.value

    def tell(self, handle: FileHandle) -> int:
        """Return the handle's position."""
        outcome = self.platform.tell(handle.stream)
        if not outcome.ok or outcome.value is None:
            self._stream_fail("Error occurred during execution {0}", handle, outcome)
        return outcome.value

    def end_of_file(self, handle: FileHandle) -> bool:
        """True once a read on the handle has reached the end of the stream."""
        _ = handle.stream
        return handle.at_eof

    def flush(self, handle: FileHandle) -> None:
        """Flush pending output.

        Raises:
            InvalidHandleError: If the handle is closed.
        """
        outcome = self.platform.flush(handle.stream)
        if not outcome.ok:
            self._stream_fail("Error occurred during execution of fileFlush {0}", handle, outcome)

    def lock(self, handle: FileHandle, mode: LockMode | None = None) -> None:
        """Acquire an advisory lock.

        Args:
            handle: Open handle.
            mode: SHARED or EXCLUSIVE, optionally combined with NON_BLOCKING.
                Defaults to the configured lock mode.

        Raises:
            FileSystemError: If the lock cannot be acquired, including a
                non-blocking request that would block.
        """
        operation = self.settings.default_lock_mode if mode is None else mode
        outcome = self.platform.lock(handle.stream, int(operation))
        if not outcome.ok:
            self._stream_fail("Error occurred during execution of fileLock {0}", handle, outcome)

    def unlock(self, handle: FileHandle) -> None:
        """Release an advisory lock."""
        outcome = self.platform.lock(handle.stream, int(LockMode.UNLOCK))
        if not outcome.ok:
            self._stream_fail("Error occurred during execution of fileUnlock {0}", handle, outcome)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _record_lines(self, handle: FileHandle, length: int) -> Iterator[str]:
        while True:
            line = self.read_line(handle, length)
            if not line:
                return
            yield line.decode(self.settings.encoding)

    def read_record(
        self,
        handle: FileHandle,
        length: int = 0,
        delimiter: str | None = None,
        enclosure: str | None = None,
        escape: str | None = None,
    ) -> list[str] | None:
        """Read one delimited record.

        A quoted field may span several lines. Dialect arguments default to
        the configured CSV settings; an empty escape disables escaping for
        this call.

        Returns:
            The record's fields; an empty list for a blank line; None at the
            end of the stream.

        Raises:
            FileSystemError: If the record is malformed or cannot be decoded.
        """
        lines = self._record_lines(handle, length)
        try:
            record = parse_record(
                lines,
                delimiter or self.settings.csv_delimiter,
                enclosure or self.settings.csv_enclosure,
                self.settings.csv_escape if escape is None else (escape or None),
            )
        except (csv.Error, UnicodeDecodeError) as e:
            diagnostic = describe(e)
            raise FileSystemError("Wrong CSV handle {0}", [diagnostic], diagnostic) from e
        if record is None:
            handle.at_eof = True
        return record

    def write_record(
        self,
        handle: FileHandle,
        fields: Iterable[Any],
        delimiter: str | None = None,
        enclosure: str | None = None,
    ) -> int:
        """Write one delimited record terminated by a newline.

        Fields starting with "=", "+" or "-" are prefixed with a space so
        spreadsheet software doesn't evaluate them as formulas.

        Returns:
            Number of bytes written.
        """
        record = encode_record(
            sanitize_fields(fields),
            delimiter or self.settings.csv_delimiter,
            enclosure or self.settings.csv_enclosure,
        )
        try:
            return self.write(handle, record)
        except InvalidHandleError:
            raise
        except FileSystemError as e:
            raise FileSystemError(
                "Error occurred during execution of filePutCsv {0}", [e.diagnostic], e.diagnostic
            ) from e
