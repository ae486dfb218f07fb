"""Depth-first directory traversal with an explicit work stack.

Recursion depth of the Python interpreter never limits how deep a tree can
be walked. Both walkers are lazy: a directory is enumerated only when the
walk reaches it, and a fresh generator is needed for every traversal.

Order contract:
    walk_preorder: a directory is yielded before its children (copying).
    walk_postorder: a directory is yielded after its children (deleting,
        changing permissions).

Children of each directory are visited in name order. Symlinks are yielded
as ``EntryKind.SYMLINK`` entries and never descended into.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from file_driver.errors import FileSystemError

if TYPE_CHECKING:
    from file_driver.protocols import Platform
    from file_driver.types import Entry

logger = logging.getLogger(__name__)

__all__ = ["list_children", "walk_postorder", "walk_preorder"]


def list_children(platform: Platform, path: str) -> list[Entry]:
    """Enumerate the children of a directory.

    Raises:
        FileSystemError: If the directory cannot be enumerated.
    """
    outcome = platform.list_entries(path)
    if not outcome.ok:
        raise FileSystemError(
            'Cannot read contents from path "{0}" {1}',
            [path, outcome.diagnostic],
            outcome.diagnostic,
        )
    return outcome.value or []


def walk_preorder(platform: Platform, root: str) -> Iterator[Entry]:
    """Yield every descendant of root, parents before their children."""
    stack: list[Entry] = list(reversed(list_children(platform, root)))
    while stack:
        entry = stack.pop()
        yield entry
        if entry.is_dir:
            logger.debug("Descending into %s", entry.path)
            stack.extend(reversed(list_children(platform, entry.path)))


def walk_postorder(platform: Platform, root: str) -> Iterator[Entry]:
    """Yield every descendant of root, children before their parents."""
    stack: list[tuple[Entry, bool]] = [
        (entry, False) for entry in reversed(list_children(platform, root))
    ]
    while stack:
        entry, expanded = stack.pop()
        if entry.is_dir and not expanded:
            stack.append((entry, True))
            logger.debug("Descending into %s", entry.path)
            stack.extend((child, False) for child in reversed(list_children(platform, entry.path)))
            continue
        yield entry
