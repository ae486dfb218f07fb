"""Path string utilities.

These functions work on path text only. None of them touch the filesystem,
so ``get_real_path_safety`` is a textual normalization and must not be
confused with :meth:`FileDriver.get_real_path`, which resolves symlinks.

Functions:
    fix_separator: Normalize backslashes to forward slashes
    get_absolute_path: Prefix a path with a base directory and scheme
    get_relative_path: Strip a base directory prefix from a path
    get_real_path_safety: Eliminate "." and ".." segments textually
    get_parent_directory: Parent of a path, dirname style
    expand_braces: Expand "{a,b}" alternatives in a glob pattern
"""

from __future__ import annotations

import posixpath

__all__ = [
    "expand_braces",
    "fix_separator",
    "get_absolute_path",
    "get_parent_directory",
    "get_real_path_safety",
    "get_relative_path",
]

SEPARATOR = "/"


def fix_separator(path: str) -> str:
    """Convert backslash separators to the forward slashes used internally.

    Examples:
        >>> fix_separator("a\\\\b\\\\c")
        'a/b/c'
    """
    return path.replace("\\", SEPARATOR)


def get_absolute_path(base_path: str, path: str, scheme: str | None = None) -> str:
    """Build an absolute path under base_path.

    A path that already starts with base_path is returned as is (with the
    scheme prepended), so absolute paths are never joined twice.

    Args:
        base_path: Base directory, expected to end with a separator.
        path: Absolute or base-relative path.
        scheme: Optional prefix such as "file://".

    Returns:
        The scheme, base path and path concatenated.

    Examples:
        >>> get_absolute_path("/var/www/", "/var/www/pub")
        '/var/www/pub'
        >>> get_absolute_path("/var/www/", "\\\\pub\\\\media", "file://")
        'file:///var/www/pub/media'
    """
    prefix = scheme or ""
    if path.startswith(base_path):
        return prefix + path
    return prefix + base_path + fix_separator(path).lstrip(SEPARATOR)


def get_relative_path(base_path: str, path: str | None = None) -> str:
    """Strip base_path from the front of path.

    Args:
        base_path: Base directory prefix.
        path: Path to make relative. None is treated as empty.

    Returns:
        Path relative to base_path, or the (separator-fixed) path unchanged
        when it is not under base_path.

    Examples:
        >>> get_relative_path("/base/", "/base/sub/file")
        'sub/file'
        >>> get_relative_path("/base/", "/other/file")
        '/other/file'
    """
    fixed = fix_separator(path or "")
    if fixed.startswith(base_path) or base_path == fixed + SEPARATOR:
        return fixed[len(base_path) :]
    return fixed


def get_real_path_safety(path: str) -> str:
    """Eliminate "." and ".." segments without touching the filesystem.

    Paths without a "/../" segment are returned unchanged. Otherwise "."
    segments are dropped and each ".." removes the most recent component.
    A ".." with nothing left to remove is ignored, and the root of an
    absolute path is never removed.

    Examples:
        >>> get_real_path_safety("/a/b/../c")
        '/a/c'
        >>> get_real_path_safety("/a/../../b/./c/")
        '/b/c/'
    """
    if f"{SEPARATOR}..{SEPARATOR}" not in path:
        return path

    parts = path.split(SEPARATOR)
    absolute = parts[0] == ""
    if absolute:
        parts = parts[1:]

    result: list[str] = []
    for part in parts:
        if part == ".":
            continue
        if part == "..":
            if result:
                result.pop()
            continue
        result.append(part)

    joined = SEPARATOR.join(result)
    return SEPARATOR + joined if absolute else joined


def get_parent_directory(path: str) -> str:
    """Return the parent directory of path.

    Examples:
        >>> get_parent_directory("/var/www/pub")
        '/var/www'
        >>> get_parent_directory("file.txt")
        '.'
        >>> get_parent_directory("/")
        '/'
    """
    stripped = path.rstrip(SEPARATOR)
    if not stripped:
        return SEPARATOR if path.startswith(SEPARATOR) else "."
    parent = posixpath.dirname(stripped)
    if not parent:
        return "."
    return parent.rstrip(SEPARATOR) or SEPARATOR


def expand_braces(pattern: str) -> list[str]:
    """Expand "{a,b}" alternatives in a glob pattern.

    Nested and repeated groups are supported. An unbalanced "{" is kept
    literally.

    Examples:
        >>> expand_braces("*.{xml,php}")
        ['*.xml', '*.php']
        >>> expand_braces("{a,b{c,d}}/x")
        ['a/x', 'bc/x', 'bd/x']
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    end = -1
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                end = index
                break
    if end == -1:
        return [pattern]

    options: list[str] = []
    current = ""
    depth = 0
    for char in pattern[start + 1 : end]:
        if char == "," and depth == 0:
            options.append(current)
            current = ""
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        current += char
    options.append(current)

    prefix = pattern[:start]
    suffix = pattern[end + 1 :]
    results: list[str] = []
    for option in options:
        results.extend(expand_braces(prefix + option + suffix))
    return results
