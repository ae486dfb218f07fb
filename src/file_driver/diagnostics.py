"""Diagnostic capture for native filesystem calls.

Every platform wrapper returns an explicit :class:`Outcome` carrying either
the call's value or the diagnostic text of the failure. Nothing is stored in
ambient state, so diagnostics can't leak between calls.

Queries use ``Outcome[bool]`` as a tri-state result: a successful outcome
holds a definite True or False, a failed one means the query itself could
not be answered.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from typing import Generic, TypeVar

__all__ = ["Outcome", "describe", "probe_from_stat_error"]

T = TypeVar("T")

# Errors meaning "the entry is definitely not there".
ABSENT_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR})


def describe(exc: BaseException) -> str:
    """Build diagnostic text for a failed native call.

    Args:
        exc: The exception raised by the native call.

    Returns:
        Text of the form ``"Warning! <message>"``.

    Example:
        >>> describe(FileNotFoundError(2, "No such file or directory", "/x"))
        "Warning! No such file or directory: '/x'"
    """
    if isinstance(exc, OSError) and exc.strerror:
        message = exc.strerror
        if exc.filename is not None:
            message = f"{message}: {exc.filename!r}"
            if exc.filename2 is not None:
                message = f"{message} -> {exc.filename2!r}"
    else:
        message = str(exc) or type(exc).__name__
    return f"Warning! {message}"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a single native call.

    Attributes:
        ok: True if the call succeeded.
        value: Value produced by the call (None on failure).
        diagnostic: Diagnostic text of the failure (None on success).
        code: errno of the failure, when the native call reported one.
    """

    ok: bool
    value: T | None = None
    diagnostic: str | None = None
    code: int | None = None

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, diagnostic: str | None, code: int | None = None) -> Outcome[T]:
        return cls(ok=False, diagnostic=diagnostic, code=code)

    @classmethod
    def from_error(cls, exc: BaseException) -> Outcome[T]:
        """Capture a native exception as a failed outcome."""
        code = exc.errno if isinstance(exc, OSError) else None
        return cls.failure(describe(exc), code)


def probe_from_stat_error(exc: BaseException) -> Outcome[bool]:
    """Classify a failed stat.

    An absent entry is a definite False; any other failure (permission
    denied on a parent, symlink loop, invalid path) leaves the answer
    unknown and becomes a failed outcome.
    """
    if isinstance(exc, OSError) and exc.errno in ABSENT_ERRNOS:
        return Outcome.success(False)
    return Outcome.from_error(exc)
