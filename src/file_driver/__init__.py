"""Filesystem access layer with explicit diagnostics and structured errors."""

__version__ = "0.1.0"

from file_driver.config import DriverSettings
from file_driver.driver import FileDriver
from file_driver.errors import ConfigError, FileSystemError, InvalidHandleError
from file_driver.protocols import Platform
from file_driver.streams import FileHandle
from file_driver.types import Entry, EntryKind, FileStat, LockMode, Whence

__all__ = [
    "__version__",
    "ConfigError",
    "DriverSettings",
    "Entry",
    "EntryKind",
    "FileDriver",
    "FileHandle",
    "FileStat",
    "FileSystemError",
    "InvalidHandleError",
    "LockMode",
    "Platform",
    "Whence",
]
