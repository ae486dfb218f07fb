"""Stream handles returned by :meth:`FileDriver.open`."""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO

from file_driver.errors import InvalidHandleError

if TYPE_CHECKING:
    from types import TracebackType

    from file_driver.driver import FileDriver

__all__ = ["FileHandle"]


class FileHandle:
    """An open file description owned by the caller.

    The handle is valid from ``FileDriver.open`` until ``FileDriver.close``.
    The driver never closes it implicitly, including on errors; using the
    handle as a context manager is the caller's way to guarantee release.

    Attributes:
        path: Path the handle was opened with.
        mode: Binary mode the stream was opened in.
        at_eof: True once a read reached the end of the stream.
    """

    def __init__(self, driver: FileDriver, stream: BinaryIO, path: str, mode: str) -> None:
        self._driver = driver
        self._stream = stream
        self._closed = False
        self.path = path
        self.mode = mode
        self.at_eof = False

    @property
    def closed(self) -> bool:
        """True if the handle was closed by the driver or externally."""
        return self._closed or self._stream.closed

    @property
    def stream(self) -> BinaryIO:
        """The underlying stream.

        Raises:
            InvalidHandleError: If the handle is no longer valid.
        """
        if self.closed:
            raise InvalidHandleError('Invalid handle for file "{0}"', [self.path])
        return self._stream

    def mark_closed(self) -> None:
        self._closed = True

    def __enter__(self) -> FileHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._driver.close(self)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"FileHandle(path={self.path!r}, mode={self.mode!r}, {state})"
