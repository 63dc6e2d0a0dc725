"""Local tool probes.

Runs ``<tool> -v`` style commands and reports the version they print.  A
probe that cannot spawn, exits non-zero, or prints nothing reports
``None`` ("unknown"); only :func:`require_tool` turns that into an error.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import MissingToolError
from ..utils import run_command
from .semver import normalize, parse_major


@dataclass(frozen=True)
class RuntimeInfo:
    """Version of the locally installed Node.js, if any."""

    version: str | None = None

    @property
    def major(self) -> int | None:
        return parse_major(self.version)

    @property
    def known(self) -> bool:
        return self.major is not None


async def probe_version(cmd: list[str]) -> str | None:
    """Run *cmd* and return its trimmed stdout, or ``None`` on any failure."""
    try:
        returncode, stdout, _ = await run_command(cmd, capture=True)
    except OSError:
        return None
    if returncode != 0 or not stdout:
        return None
    return stdout.splitlines()[0].strip()


async def detect_local_runtime(cmd: list[str] | None = None) -> RuntimeInfo:
    """Probe the local Node.js (``node -v`` by default)."""
    out = await probe_version(cmd or ["node", "-v"])
    return RuntimeInfo(version=normalize(out) if out else None)


async def require_tool(tool: str, cmd: list[str]) -> str:
    """Return the version printed by *cmd*, or raise ``MissingToolError``."""
    out = await probe_version(cmd)
    if out is None:
        raise MissingToolError(tool)
    return out
