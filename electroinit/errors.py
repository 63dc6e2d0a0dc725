"""Exception hierarchy for ElectroInit.

Every failure the CLI turns into a non-zero exit code derives from
``ElectroInitError``; file-system and configuration failures are wrapped
into one of these with the underlying message kept.  ``FeedUnavailableError`` is the one recoverable member:
callers catch it and fall back to asking for a version manually.
"""

from __future__ import annotations


class ElectroInitError(Exception):
    """Base class for all ElectroInit errors."""


class MissingToolError(ElectroInitError):
    """Raised when a required external tool is not available on ``PATH``."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"{tool} is not available in PATH. Please install {tool} first.")


class UserDeclinedError(ElectroInitError):
    """Raised when the user answers no at a destructive or consequential prompt."""


class FeedUnavailableError(ElectroInitError):
    """Raised when the release feed cannot be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch Electron releases from {url}: {reason}")


class NoVersionError(ElectroInitError):
    """Raised when no runtime version could be resolved or entered."""


class ConfigError(ElectroInitError):
    """Raised when an environment variable holds an unusable value."""


class ScaffoldCopyError(ElectroInitError):
    """Raised when the cached scaffold cannot be copied into the target."""


class ScaffoldWriteError(ElectroInitError):
    """Raised when the target cannot be cleared or the scaffold cannot be written."""


class InstallError(ElectroInitError):
    """Raised when the package-manager subprocess does not exit cleanly."""

    def __init__(
        self,
        label: str,
        returncode: int | None = None,
        signal_name: str | None = None,
        spawn_error: str | None = None,
    ) -> None:
        self.label = label
        self.returncode = returncode
        self.signal_name = signal_name
        self.spawn_error = spawn_error

        details: list[str] = []
        if spawn_error:
            details.append(f"npm spawn error: {spawn_error}")
        if signal_name:
            details.append(f"npm terminated by signal: {signal_name}")
        if returncode is not None and not signal_name:
            details.append(f"npm exit code: {returncode}")
        suffix = f" ({'; '.join(details)})" if details else ""
        super().__init__(f"npm install failed ({label}){suffix}")
