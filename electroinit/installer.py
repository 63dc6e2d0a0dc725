"""npm invocation for generated scaffolds.

npm is an opaque collaborator: the runner starts it with inherited stdio and
only looks at the exit status.  POSIX executes ``npm`` directly while
Windows goes through the command interpreter; a ``CommandRunner`` hides the
difference.
"""

from __future__ import annotations

import os
import signal
from abc import ABC, abstractmethod
from pathlib import Path

from .errors import InstallError
from .utils import OSFamily, print_info, run_command


# ---------------------------------------------------------------------------
# Command runners
# ---------------------------------------------------------------------------


class CommandRunner(ABC):
    """Builds the argument vector that runs a tool on the host OS."""

    @abstractmethod
    def argv(self, tool: str, *args: str) -> list[str]:
        ...

    async def run(
        self,
        tool: str,
        *args: str,
        cwd: str | Path | None = None,
        env: dict[str, str] | None = None,
    ) -> int:
        """Run *tool* with inherited stdio and return its exit status."""
        returncode, _, _ = await run_command(
            self.argv(tool, *args), cwd=cwd, capture=False, env=env
        )
        return returncode


class PosixCommandRunner(CommandRunner):
    def argv(self, tool: str, *args: str) -> list[str]:
        return [tool, *args]


class WindowsCommandRunner(CommandRunner):
    """Runs tools through ``%ComSpec% /c`` so ``.cmd`` shims resolve."""

    def __init__(self, comspec: str | None = None) -> None:
        self.comspec = comspec or os.environ.get("ComSpec") or "cmd.exe"

    def argv(self, tool: str, *args: str) -> list[str]:
        return [self.comspec, "/c", tool, *args]


def command_runner_for(os_family: OSFamily) -> CommandRunner:
    """Return the command runner for *os_family*."""
    if os_family is OSFamily.WINDOWS:
        return WindowsCommandRunner()
    return PosixCommandRunner()


# ---------------------------------------------------------------------------
# Install runner
# ---------------------------------------------------------------------------


def _signal_name(returncode: int) -> str | None:
    if returncode >= 0:
        return None
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return f"signal {-returncode}"


class InstallRunner:
    """Runs ``npm install`` for the root and frontend manifests."""

    def __init__(self, runner: CommandRunner, enable_audit: bool = False) -> None:
        self.runner = runner
        self.enable_audit = enable_audit

    def install_args(self) -> list[str]:
        args = ["install"]
        if not self.enable_audit:
            args.append("--no-audit")
        return args

    async def run_install(
        self,
        cwd: str | Path,
        env: dict[str, str] | None = None,
        label: str = "",
    ) -> int:
        """Run ``npm install`` in *cwd* and return its exit status.

        Raises:
            InstallError: If npm cannot be spawned at all.
        """
        print_info(f"Installing npm dependencies{f' ({label})' if label else ''}...")
        try:
            return await self.runner.run("npm", *self.install_args(), cwd=cwd, env=env)
        except OSError as exc:
            raise InstallError(label or str(cwd), spawn_error=str(exc)) from exc

    async def install_all(self, target: Path, env: dict[str, str] | None = None) -> None:
        """Install the root manifest, then the frontend manifest.

        The frontend install only starts once the root install succeeded.

        Raises:
            InstallError: On the first non-zero exit status.
        """
        steps = [
            (Path(target), "root"),
            (Path(target) / "src" / "frontend", "frontend"),
        ]
        for cwd, label in steps:
            returncode = await self.run_install(cwd, env=env, label=label)
            if returncode != 0:
                raise InstallError(
                    label,
                    returncode=returncode,
                    signal_name=_signal_name(returncode),
                )
