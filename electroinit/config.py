"""ElectroInit configuration.

Centralised, typed configuration for a single run.  The ``Config`` model is
built once at the CLI entry point (from the environment, then overlaid with
command-line flags) and passed down; it is frozen so no component can flip a
flag mid-run.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from electroinit.errors import ConfigError
from electroinit.resolver.feed import RELEASES_URL

NPM_MIRROR_REGISTRY = "https://registry.npmmirror.com/"
ELECTRON_MIRROR = "https://npmmirror.com/mirrors/electron/"
DEFAULT_TARGET = "init_src"
COPY_IGNORE = ("dist", "logs", ".git")

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_timeout(raw: str) -> float:
    """Parse a positive number of seconds, raising ``ConfigError`` otherwise."""
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not value > 0 or value == float("inf"):
        raise ConfigError(
            f"ELECTROINIT_FEED_TIMEOUT must be a positive number of seconds, got {raw!r}"
        )
    return value


class Config(BaseModel):
    """Global ElectroInit configuration.

    Paths are kept relative as given; they are resolved against the working
    directory by :meth:`resolve`.
    """

    model_config = ConfigDict(frozen=True)

    default_target: str = Field(default=DEFAULT_TARGET)
    cache_dir: Path = Field(
        default=Path(DEFAULT_TARGET),
        description="Previously generated scaffold that can be copied instead of regenerated",
    )
    copy_ignore: tuple[str, ...] = Field(
        default=COPY_IGNORE,
        description="Top-level cache entries never copied into a target",
    )
    releases_url: str = Field(default=RELEASES_URL)
    feed_timeout: float | None = Field(
        default=None, gt=0, description="Release feed timeout in seconds (None waits forever)"
    )
    npm_mirror_registry: str = Field(default=NPM_MIRROR_REGISTRY)
    electron_mirror: str = Field(default=ELECTRON_MIRROR)
    runtime_command: tuple[str, ...] = Field(default=("node", "-v"))

    force: bool = Field(default=False, description="Rebuild the cache tree without prompting")
    enable_audit: bool = Field(default=False, description="Let npm run its audit during install")
    assume_yes: bool = Field(default=False, description="Accept the default for every prompt")

    # Answers that skip the corresponding prompt when set.
    target: str | None = Field(default=None)
    backend: str | None = Field(default=None)
    use_mirror: bool | None = Field(default=None)
    electron_version: str | None = Field(default=None)

    def resolve(self, path: str | Path, cwd: Path | None = None) -> Path:
        """Resolve *path* against *cwd* (defaults to the process working directory)."""
        return ((cwd or Path.cwd()) / path).resolve()

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            ELECTROINIT_CACHE_DIR, ELECTROINIT_RELEASES_URL,
            ELECTROINIT_FEED_TIMEOUT, ELECTROINIT_NPM_MIRROR,
            ELECTROINIT_ELECTRON_MIRROR, ELECTROINIT_AUDIT.

        Raises:
            ConfigError: If ELECTROINIT_FEED_TIMEOUT is not a positive number.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ELECTROINIT_CACHE_DIR"):
            kwargs["cache_dir"] = Path(os.environ["ELECTROINIT_CACHE_DIR"])
            kwargs["default_target"] = os.environ["ELECTROINIT_CACHE_DIR"]
        if os.environ.get("ELECTROINIT_RELEASES_URL"):
            kwargs["releases_url"] = os.environ["ELECTROINIT_RELEASES_URL"]
        if os.environ.get("ELECTROINIT_FEED_TIMEOUT"):
            kwargs["feed_timeout"] = _parse_timeout(os.environ["ELECTROINIT_FEED_TIMEOUT"])
        if os.environ.get("ELECTROINIT_NPM_MIRROR"):
            kwargs["npm_mirror_registry"] = os.environ["ELECTROINIT_NPM_MIRROR"]
        if os.environ.get("ELECTROINIT_ELECTRON_MIRROR"):
            kwargs["electron_mirror"] = os.environ["ELECTROINIT_ELECTRON_MIRROR"]
        if os.environ.get("ELECTROINIT_AUDIT"):
            kwargs["enable_audit"] = os.environ["ELECTROINIT_AUDIT"].strip().lower() in _TRUTHY
        return cls(**kwargs)

    def with_args(self, args: Any) -> "Config":
        """Return a copy overlaid with parsed command-line flags.

        Only flags that were actually given (not ``None``/``False``) override
        the current values.
        """
        update: dict[str, Any] = {}
        if getattr(args, "force", False):
            update["force"] = True
        if getattr(args, "audit", False):
            update["enable_audit"] = True
        if getattr(args, "yes", False):
            update["assume_yes"] = True
        for name in ("target", "backend", "electron_version"):
            value = getattr(args, name, None)
            if value:
                update[name] = value
        if getattr(args, "mirror", None) is not None:
            update["use_mirror"] = args.mirror
        return self.model_copy(update=update)
