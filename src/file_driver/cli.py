"""CLI commands using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from file_driver import __version__
from file_driver.console import Reporter
from file_driver.context import create_context
from file_driver.errors import ConfigError, FileSystemError
from file_driver.paths import get_real_path_safety

if TYPE_CHECKING:
    from file_driver.context import AppContext

app = typer.Typer(
    name="file-driver",
    help="Filesystem operations with structured errors",
    no_args_is_help=True,
)

console = Console()
reporter = Reporter(console)

# Global options set by the callback, read when a command builds its context.
_options: dict[str, Path | None] = {"config": None}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"file-driver v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log debug output")] = False,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Settings file (YAML)")
    ] = None,
) -> None:
    """Filesystem operations with structured errors."""
    _configure_logging(verbose)
    _options["config"] = config


def _get_context() -> AppContext:
    try:
        return create_context(_options["config"])
    except (ConfigError, FileSystemError) as e:
        reporter.show_error(str(e))
        raise typer.Exit(1) from e


def _parse_mode(value: str) -> int:
    """Parse an octal permission string such as "755" or "0o644"."""
    try:
        mode = int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value}") from e
    if not 0 <= mode <= 0o7777:
        raise typer.BadParameter(f"Mode out of range: {value}")
    return mode


def _abort(error: FileSystemError) -> typer.Exit:
    reporter.show_error(str(error))
    return typer.Exit(1)


# ============================================================================
# Query Commands
# ============================================================================


@app.command("stat")
def stat(
    path: Annotated[str, typer.Argument(help="File or directory")],
    _context=None,
) -> None:
    """Show metadata for a path."""
    ctx = _context or _get_context()
    try:
        info = ctx.driver.stat(path)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_stat(info)


@app.command("ls")
def list_directory(
    path: Annotated[str, typer.Argument(help="Directory")] = ".",
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Include all descendants")
    ] = False,
    _context=None,
) -> None:
    """List the entries of a directory."""
    ctx = _context or _get_context()
    try:
        if recursive:
            entries = ctx.driver.read_directory_recursively(path)
        else:
            entries = ctx.driver.read_directory(path)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_paths(entries)


@app.command("cat")
def cat(
    path: Annotated[str, typer.Argument(help="File to print")],
    _context=None,
) -> None:
    """Print the contents of a file."""
    ctx = _context or _get_context()
    try:
        text = ctx.driver.read_contents(path)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_text(text)


@app.command("realpath")
def realpath(
    path: Annotated[str, typer.Argument(help="Path to resolve")],
    safe: Annotated[
        bool, typer.Option("--safe", help="Normalize '..' textually without resolving symlinks")
    ] = False,
    _context=None,
) -> None:
    """Print the canonical form of a path."""
    if safe:
        console.print(get_real_path_safety(path), highlight=False, markup=False, soft_wrap=True)
        return

    ctx = _context or _get_context()
    resolved = ctx.driver.get_real_path(path)
    if resolved is None:
        reporter.show_error(f"Cannot resolve '{path}'")
        raise typer.Exit(1)
    console.print(resolved, highlight=False, markup=False, soft_wrap=True)


@app.command("search")
def search(
    pattern: Annotated[str, typer.Argument(help="Glob pattern, '{a,b}' alternatives allowed")],
    path: Annotated[str, typer.Argument(help="Directory to search")] = ".",
    _context=None,
) -> None:
    """Find paths matching a glob pattern."""
    ctx = _context or _get_context()
    reporter.show_paths(ctx.driver.search(pattern, path))


# ============================================================================
# Mutation Commands
# ============================================================================


@app.command("mkdir")
def make_directory(
    path: Annotated[str, typer.Argument(help="Directory to create")],
    mode: Annotated[
        str | None, typer.Option("--mode", "-m", help="Octal permissions")
    ] = None,
    _context=None,
) -> None:
    """Create a directory and any missing parents."""
    permissions = _parse_mode(mode) if mode else None
    ctx = _context or _get_context()
    try:
        ctx.driver.create_directory(path, permissions)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_success(f"Created '{path}'")


@app.command("cp")
def copy(
    source: Annotated[str, typer.Argument(help="Source path")],
    destination: Annotated[str, typer.Argument(help="Destination path")],
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Copy directories recursively")
    ] = False,
    _context=None,
) -> None:
    """Copy a file, or a directory tree with --recursive."""
    ctx = _context or _get_context()
    try:
        if ctx.driver.is_directory(source):
            if not recursive:
                reporter.show_error(f"'{source}' is a directory (use --recursive)")
                raise typer.Exit(1)
            ctx.driver.copy_directory(source, destination)
        else:
            ctx.driver.copy(source, destination)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_success(f"Copied '{source}' to '{destination}'")


@app.command("rm")
def remove(
    path: Annotated[str, typer.Argument(help="Path to delete")],
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Delete directories recursively")
    ] = False,
    _context=None,
) -> None:
    """Delete a file, or a directory tree with --recursive."""
    ctx = _context or _get_context()
    try:
        if ctx.driver.is_directory(path):
            if not recursive:
                reporter.show_error(f"'{path}' is a directory (use --recursive)")
                raise typer.Exit(1)
            ctx.driver.delete_directory(path)
        else:
            ctx.driver.delete_file(path)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_success(f"Deleted '{path}'")


@app.command("clear")
def clear(
    path: Annotated[str, typer.Argument(help="Directory to empty")],
    _context=None,
) -> None:
    """Delete everything inside a directory."""
    ctx = _context or _get_context()
    try:
        ctx.driver.clear_directory(path)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_success(f"Cleared '{path}'")


@app.command("chmod")
def change_mode(
    mode: Annotated[str, typer.Argument(help="Octal permissions")],
    path: Annotated[str, typer.Argument(help="Target path")],
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Apply to all descendants")
    ] = False,
    file_mode: Annotated[
        str | None,
        typer.Option("--file-mode", help="Octal permissions for files when recursive"),
    ] = None,
    _context=None,
) -> None:
    """Change permissions of a path."""
    permissions = _parse_mode(mode)
    ctx = _context or _get_context()
    try:
        if recursive:
            file_permissions = (
                _parse_mode(file_mode) if file_mode else ctx.settings.file_permissions
            )
            ctx.driver.change_permissions_recursively(path, permissions, file_permissions)
        else:
            ctx.driver.change_permissions(path, permissions)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_success(f"Changed permissions of '{path}' to {permissions:04o}")


@app.command("touch")
def touch(
    path: Annotated[str, typer.Argument(help="File to touch")],
    _context=None,
) -> None:
    """Create a file or update its modification time."""
    ctx = _context or _get_context()
    try:
        ctx.driver.touch(path)
    except FileSystemError as e:
        raise _abort(e) from e
    reporter.show_success(f"Touched '{path}'")


if __name__ == "__main__":
    app()
