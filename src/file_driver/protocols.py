"""Protocol definitions for the native-call seam.

The driver never touches ``os`` directly. It talks to a :class:`Platform`,
whose methods wrap exactly one native call each and report the result as an
explicit :class:`~file_driver.diagnostics.Outcome`. Designing to this
interface enables:
- Failure injection in tests (short writes, lost mkdir races)
- No ambient "last error" state
- Clear contracts for implementations

All concrete implementations satisfy the protocol structurally (duck typing).
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

if TYPE_CHECKING:
    from file_driver.diagnostics import Outcome
    from file_driver.types import Entry


@runtime_checkable
class Platform(Protocol):
    """Protocol for native filesystem primitives.

    Implementations must not raise for operating-system failures; they
    return a failed Outcome carrying diagnostic text. Query methods return
    ``Outcome[bool]``: a definite answer on success, "unknown" on failure.
    """

    # --- Queries ---

    def probe_exists(self, path: str) -> Outcome[bool]:
        """Check whether any entry exists at path."""
        ...

    def probe_file(self, path: str) -> Outcome[bool]:
        """Check whether path is a regular file (symlinks followed)."""
        ...

    def probe_directory(self, path: str) -> Outcome[bool]:
        """Check whether path is a directory (symlinks followed)."""
        ...

    def probe_readable(self, path: str) -> Outcome[bool]:
        """Check whether path exists and is readable by the process."""
        ...

    def probe_writable(self, path: str) -> Outcome[bool]:
        """Check whether path exists and is writable by the process."""
        ...

    def stat(self, path: str) -> Outcome[os.stat_result]:
        """Gather metadata for path."""
        ...

    def real_path(self, path: str) -> Outcome[str]:
        """Resolve symlinks and relative segments of an existing path."""
        ...

    def list_entries(self, path: str) -> Outcome[list[Entry]]:
        """Enumerate the children of a directory, without '.' and '..'.

        Args:
            path: Directory to enumerate.

        Returns:
            Outcome holding entries in name order.
        """
        ...

    def list_names(self, path: str) -> Outcome[list[str]]:
        """Enumerate child names of a directory in native order."""
        ...

    # --- Single-entry mutations ---

    def mkdir(self, path: str, mode: int) -> Outcome[None]:
        """Create one directory; parents must already exist."""
        ...

    def rmdir(self, path: str) -> Outcome[None]:
        """Remove an empty directory."""
        ...

    def unlink(self, path: str) -> Outcome[None]:
        """Remove a file or symlink."""
        ...

    def rename(self, source: str, destination: str) -> Outcome[None]:
        """Rename or move an entry."""
        ...

    def copy_file(self, source: str, destination: str) -> Outcome[None]:
        """Copy file contents from source to destination."""
        ...

    def symlink(self, target: str, link: str) -> Outcome[None]:
        """Create a symlink at link pointing to target."""
        ...

    def read_link(self, path: str) -> Outcome[str]:
        """Return the target of a symlink."""
        ...

    def chmod(self, path: str, mode: int) -> Outcome[None]:
        """Change permission bits of path."""
        ...

    def touch(self, path: str, modification_time: float | None) -> Outcome[None]:
        """Create path if missing and set its access/modification time."""
        ...

    def read_file(self, path: str) -> Outcome[bytes]:
        """Read the full contents of a file."""
        ...

    def write_file(self, path: str, data: bytes, append: bool) -> Outcome[int]:
        """Write data to a file, truncating unless append is set."""
        ...

    # --- Streams ---

    def open_stream(self, path: str, mode: str) -> Outcome[BinaryIO]:
        """Open an unbuffered binary stream."""
        ...

    def read(self, stream: BinaryIO, length: int) -> Outcome[bytes]:
        """Read up to length bytes from the current position."""
        ...

    def read_line(self, stream: BinaryIO, length: int) -> Outcome[bytes]:
        """Read one line (terminator included), at most length bytes if positive."""
        ...

    def write(self, stream: BinaryIO, data: bytes) -> Outcome[int]:
        """Write data once; the count may be shorter than len(data)."""
        ...

    def seek(self, stream: BinaryIO, offset: int, whence: int) -> Outcome[int]:
        """Move the stream position."""
        ...

    def tell(self, stream: BinaryIO) -> Outcome[int]:
        """Return the stream position."""
        ...

    def flush(self, stream: BinaryIO) -> Outcome[None]:
        """Flush pending output."""
        ...

    def close(self, stream: BinaryIO) -> Outcome[None]:
        """Close the stream."""
        ...

    def lock(self, stream: BinaryIO, operation: int) -> Outcome[None]:
        """Apply an advisory lock operation (flock semantics)."""
        ...
