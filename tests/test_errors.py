"""Tests for error types and diagnostic capture."""

from __future__ import annotations

import errno

from file_driver.diagnostics import Outcome, describe, probe_from_stat_error
from file_driver.errors import FileSystemError, InvalidHandleError


class TestFileSystemError:
    """Tests for FileSystemError rendering."""

    def test_message_interpolates_arguments(self) -> None:
        """Test placeholders are filled in order."""
        error = FileSystemError(
            'The path "{0}" cannot be renamed into "{1}" {2}',
            ["/a", "/b", "Warning! Permission denied"],
            "Warning! Permission denied",
        )

        assert str(error) == 'The path "/a" cannot be renamed into "/b" Warning! Permission denied'
        assert error.template.startswith("The path")
        assert error.arguments == ("/a", "/b", "Warning! Permission denied")
        assert error.diagnostic == "Warning! Permission denied"
        assert error.kind == "filesystem"

    def test_missing_diagnostic_renders_empty(self) -> None:
        """Test a None diagnostic leaves no trailing text."""
        error = FileSystemError('Directory "{0}" cannot be created {1}', ["/x", None])

        assert str(error) == 'Directory "/x" cannot be created'

    def test_template_without_arguments(self) -> None:
        """Test a template is used verbatim when no arguments are given."""
        assert str(FileSystemError("Unable to write")) == "Unable to write"

    def test_invalid_handle_is_filesystem_error(self) -> None:
        """Test InvalidHandleError is a FileSystemError with its own kind."""
        error = InvalidHandleError('Invalid handle for file "{0}"', ["/f"])

        assert isinstance(error, FileSystemError)
        assert error.kind == "invalid_handle"
        assert str(error) == 'Invalid handle for file "/f"'


class TestDescribe:
    """Tests for diagnostic text."""

    def test_os_error_with_filename(self) -> None:
        """Test OS errors include message and path."""
        exc = FileNotFoundError(errno.ENOENT, "No such file or directory", "/x")

        assert describe(exc) == "Warning! No such file or directory: '/x'"

    def test_os_error_with_two_filenames(self) -> None:
        """Test both paths of a two-path error are named."""
        exc = OSError(errno.EXDEV, "Invalid cross-device link", "/a", None, "/b")

        assert describe(exc) == "Warning! Invalid cross-device link: '/a' -> '/b'"

    def test_other_exception(self) -> None:
        """Test non-OS errors use their message."""
        assert describe(ValueError("embedded null byte")) == "Warning! embedded null byte"


class TestOutcome:
    """Tests for Outcome values."""

    def test_success(self) -> None:
        """Test a success carries its value and no diagnostic."""
        outcome = Outcome.success(42)

        assert outcome.ok is True
        assert outcome.value == 42
        assert outcome.diagnostic is None

    def test_from_error_keeps_errno(self) -> None:
        """Test the errno is captured alongside the text."""
        outcome = Outcome.from_error(PermissionError(errno.EACCES, "Permission denied", "/x"))

        assert outcome.ok is False
        assert outcome.code == errno.EACCES
        assert outcome.diagnostic == "Warning! Permission denied: '/x'"

    def test_outcomes_are_independent(self) -> None:
        """Test a later success carries no diagnostic from an earlier failure."""
        failed = Outcome.from_error(OSError(errno.EIO, "Input/output error"))
        succeeded = Outcome.success(True)

        assert failed.diagnostic is not None
        assert succeeded.diagnostic is None


class TestProbeFromStatError:
    """Tests for tri-state classification of stat failures."""

    def test_absent_is_definite_false(self) -> None:
        """Test ENOENT and ENOTDIR mean the entry is not there."""
        for code in (errno.ENOENT, errno.ENOTDIR):
            outcome = probe_from_stat_error(OSError(code, "absent"))
            assert outcome.ok is True
            assert outcome.value is False

    def test_other_errors_are_unknown(self) -> None:
        """Test permission and loop errors leave the answer unknown."""
        for code in (errno.EACCES, errno.ELOOP):
            outcome = probe_from_stat_error(OSError(code, "unknown"))
            assert outcome.ok is False
            assert outcome.code == code
