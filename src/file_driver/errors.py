"""Exception types raised by the file driver."""

from __future__ import annotations

from typing import Any

__all__ = ["ConfigError", "FileSystemError", "InvalidHandleError"]


class FileSystemError(Exception):
    """A filesystem operation failed.

    The message is rendered from a template with positional placeholders
    (``{0}``, ``{1}`` ...) and an ordered list of arguments, typically the
    subject path(s) followed by the captured diagnostic text.

    Attributes:
        kind: Short tag identifying the failure class.
        template: Message template before interpolation.
        arguments: Ordered interpolated arguments.
        diagnostic: Low-level diagnostic text, if any was captured.
    """

    kind = "filesystem"

    def __init__(
        self,
        template: str,
        arguments: tuple[Any, ...] | list[Any] = (),
        diagnostic: str | None = None,
    ) -> None:
        self.template = template
        self.arguments = tuple(arguments)
        self.diagnostic = diagnostic
        super().__init__(self.render())

    def render(self) -> str:
        """Interpolate arguments into the template."""
        if not self.arguments:
            return self.template.strip()
        values = ["" if value is None else str(value) for value in self.arguments]
        return self.template.format(*values).strip()


class InvalidHandleError(FileSystemError):
    """A stream operation was attempted on a closed or foreign handle."""

    kind = "invalid_handle"


class ConfigError(Exception):
    """Settings file could not be parsed or validated."""

    pass
