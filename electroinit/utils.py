"""Shared utility functions for ElectroInit.

Provides async command execution, file-system helpers, name sanitising and
Rich-based console reporting.  Everything here is used by more than one
component; component-specific helpers live next to their component.
"""

from __future__ import annotations

import asyncio
import os
import re
import sys
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Host OS family
# ---------------------------------------------------------------------------


class OSFamily(str, Enum):
    """Operating-system family a scaffold is generated for."""

    POSIX = "posix"
    WINDOWS = "windows"


def detect_os_family(platform: str | None = None) -> OSFamily:
    """Return the OS family for *platform* (defaults to ``sys.platform``)."""
    platform = platform if platform is not None else sys.platform
    return OSFamily.WINDOWS if platform.startswith("win") else OSFamily.POSIX


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Argument vector; the first element is the executable.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Full environment for the child.  ``None`` inherits ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.  A negative return code
        means the child was terminated by a signal.

    Raises:
        OSError: If the executable cannot be spawned.
    """
    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


def merged_env(extra: dict[str, str] | None = None) -> dict[str, str]:
    """Return a copy of ``os.environ`` with *extra* laid over it."""
    return {**os.environ, **(extra or {})}


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def to_package_name(name: str) -> str:
    """Convert a directory name to a valid npm package name.

    * Lowercases the input.
    * Replaces runs of characters other than ``a-z0-9-_`` with a hyphen.
    * Strips leading/trailing hyphens and collapses repeated hyphens.
    * Falls back to ``electron-app`` when nothing usable remains.

    Examples::

        to_package_name("My App") -> "my-app"
        to_package_name("!!!") -> "electron-app"
    """
    result = re.sub(r"[^a-z0-9_-]+", "-", name.lower())
    result = result.strip("-")
    result = re.sub(r"-{2,}", "-", result)
    return result or "electron-app"


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Args:
        path: Directory path.

    Returns:
        The ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def is_empty_dir(path: str | Path) -> bool:
    """Return ``True`` if *path* does not exist or is a directory with no entries."""
    dir_path = Path(path)
    if not dir_path.exists():
        return True
    return next(dir_path.iterdir(), None) is None


def same_path(a: str | Path, b: str | Path) -> bool:
    """Return ``True`` if *a* and *b* resolve to the identical location."""
    return Path(a).resolve() == Path(b).resolve()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_info(message: str) -> None:
    """Print a plain progress message."""
    console.print(message)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
