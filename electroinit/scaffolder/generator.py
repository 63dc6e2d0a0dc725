"""Scaffold materialisation engine.

Turns a plan into a directory tree.  A run follows one of two mutually
exclusive paths:

* ``ScaffoldPlan`` (``mode="populate"``): create the fixed directories and
  write every ``FileEntry`` the catalog renders.
* ``ReusePlan`` (``mode="reuse"``): copy a previously generated scaffold (the
  cache tree) into the target, skipping build output, logs and VCS metadata
  at the top level.

Both paths expect an empty target.  :meth:`ScaffoldEngine.clear_target` is the
only code that deletes a non-empty target, and only after confirmation or
with ``force``.
"""

from __future__ import annotations

import asyncio
import inspect
import shutil
import stat
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..config import COPY_IGNORE
from ..errors import ScaffoldCopyError, ScaffoldWriteError, UserDeclinedError
from ..utils import OSFamily, ensure_dir, is_empty_dir, same_path
from .catalog import BackendChoice, FileEntry, TemplateCatalog


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------


class ScaffoldPlan(BaseModel):
    """Fully resolved configuration for rendering a new scaffold."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["populate"] = "populate"
    target_dir: Path
    project_name: str = Field(..., min_length=1)
    backend: BackendChoice = BackendChoice.NODE
    use_mirror: bool = False
    runtime_version: str = Field(..., min_length=1, description="Electron version to pin")
    os_family: OSFamily = OSFamily.POSIX
    enable_audit: bool = False


class ReusePlan(BaseModel):
    """Copy a cached scaffold into a target instead of rendering one."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["reuse"] = "reuse"
    cache_dir: Path
    target_dir: Path
    exclude: tuple[str, ...] = COPY_IGNORE


Plan = Union[ScaffoldPlan, ReusePlan]

# Created before any file is written, relative to the target root.
SCAFFOLD_DIRS: tuple[str, ...] = (
    "src/frontend",
    "src/frontend/src/lib",
    "src/frontend/src/components",
    "src/backend",
    "src/electron",
    "docs",
    "scripts",
    "data",
    "logs",
    "dist",
)


class ScaffoldState(str, Enum):
    EMPTY = "empty"
    POPULATING = "populating"
    REUSING = "reusing"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ScaffoldResult:
    """Outcome of a completed run."""

    target_dir: Path
    mode: str
    files: tuple[Path, ...] = ()
    in_place: bool = False


ConfirmFn = Callable[[Path], Union[bool, Awaitable[bool]]]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ScaffoldEngine:
    """Writes scaffolds to disk.

    One engine instance drives one run; ``state`` moves from ``EMPTY``
    through ``POPULATING`` or ``REUSING`` to ``COMPLETE``.
    """

    def __init__(self, catalog: TemplateCatalog | None = None) -> None:
        self.catalog = catalog or TemplateCatalog()
        self.state = ScaffoldState.EMPTY

    # -- Public API --------------------------------------------------------

    async def run(self, plan: Plan) -> ScaffoldResult:
        """Execute *plan*, dispatching on its ``mode``."""
        if plan.mode == "reuse":
            return await self.reuse(plan)
        return await self.populate(plan)

    async def clear_target(
        self,
        target: Path,
        *,
        force: bool = False,
        confirm: ConfirmFn | None = None,
    ) -> bool:
        """Delete a non-empty *target* after confirmation.

        Args:
            target: Directory that is about to receive a scaffold.
            force: Delete without asking.
            confirm: Called with *target* when *force* is false; may be sync
                or async.  A false answer aborts.

        Returns:
            ``True`` if the directory was deleted, ``False`` if it was already
            empty or missing.

        Raises:
            UserDeclinedError: If the user did not confirm the deletion.
            ScaffoldWriteError: If *target* is not a directory or cannot be
                deleted.
        """
        target = Path(target)
        if target.exists() and not target.is_dir():
            raise ScaffoldWriteError(f"Target path is not a directory: {target}")
        if is_empty_dir(target):
            return False

        approved = force
        if not approved and confirm is not None:
            answer = confirm(target)
            if inspect.isawaitable(answer):
                answer = await answer
            approved = bool(answer)

        if not approved:
            raise UserDeclinedError(f"Target directory is not empty: {target}")

        try:
            await asyncio.to_thread(shutil.rmtree, target)
        except OSError as exc:
            raise ScaffoldWriteError(f"Failed to clear target directory: {exc}") from exc
        return True

    async def populate(self, plan: ScaffoldPlan) -> ScaffoldResult:
        """Render and write every scaffold file for *plan*.

        Raises:
            ScaffoldWriteError: If a directory or file cannot be written.
        """
        self._enter(ScaffoldState.POPULATING)
        root = Path(plan.target_dir)
        entries = self.catalog.entries(plan)
        writable = plan.os_family is OSFamily.POSIX

        def _write_all() -> list[Path]:
            ensure_dir(root)
            for d in SCAFFOLD_DIRS:
                ensure_dir(root / d)
            return [_write_entry(root, entry, writable) for entry in entries]

        try:
            written = await asyncio.to_thread(_write_all)
        except OSError as exc:
            raise ScaffoldWriteError(f"Failed to write scaffold: {exc}") from exc
        self.state = ScaffoldState.COMPLETE
        return ScaffoldResult(target_dir=root, mode=plan.mode, files=tuple(written))

    async def reuse(self, plan: ReusePlan) -> ScaffoldResult:
        """Copy the cache tree into the target.

        Raises:
            ScaffoldCopyError: If the cache is missing or empty, or the copy
                fails.
        """
        self._enter(ScaffoldState.REUSING)
        cache, target = Path(plan.cache_dir), Path(plan.target_dir)
        validate_cache(cache)

        if same_path(cache, target):
            self.state = ScaffoldState.COMPLETE
            return ScaffoldResult(target_dir=target, mode=plan.mode, in_place=True)

        try:
            await asyncio.to_thread(copy_tree, cache, target, plan.exclude)
        except (OSError, shutil.Error) as exc:
            raise ScaffoldCopyError(f"Failed to copy template: {exc}") from exc

        self.state = ScaffoldState.COMPLETE
        return ScaffoldResult(target_dir=target, mode=plan.mode)

    # -- Internals ---------------------------------------------------------

    def _enter(self, state: ScaffoldState) -> None:
        if self.state is not ScaffoldState.EMPTY:
            raise RuntimeError(f"ScaffoldEngine already used (state={self.state.value})")
        self.state = state


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def validate_cache(cache: Path) -> None:
    """Raise ``ScaffoldCopyError`` unless *cache* is a non-empty directory."""
    if not Path(cache).is_dir() or is_empty_dir(cache):
        raise ScaffoldCopyError(f"Template directory is missing or empty: {cache}")


def copy_tree(src: Path, dest: Path, exclude: tuple[str, ...] = COPY_IGNORE) -> None:
    """Recursively copy *src* into *dest*.

    Names in *exclude* are skipped only directly under *src*; nested entries
    with the same names are copied.
    """
    src = Path(src)
    root = src.resolve()
    excluded = set(exclude)

    def _ignore(directory: str, names: list[str]) -> set[str]:
        if Path(directory).resolve() == root:
            return excluded.intersection(names)
        return set()

    shutil.copytree(src, dest, ignore=_ignore, dirs_exist_ok=True)


def _write_entry(root: Path, entry: FileEntry, allow_exec: bool) -> Path:
    """Write one ``FileEntry`` under *root* and return its path."""
    path = root.joinpath(*entry.relative_path.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(entry.data)
    if entry.executable and allow_exec:
        _make_executable(path)
    return path


def _make_executable(path: Path) -> None:
    """Set the executable bits on a file."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
