"""Electron version resolution.

Detects the local Node.js version, fetches the Electron release feed and
selects the Electron release whose bundled Node.js best matches it.

Quick usage::

    from electroinit.resolver import ReleaseFeedClient, detect_local_runtime, pick_version

    runtime = await detect_local_runtime()
    releases = await ReleaseFeedClient().fetch_releases()
    match = pick_version(releases, runtime.major)
"""

from electroinit.resolver.feed import RELEASES_URL, ReleaseFeedClient
from electroinit.resolver.matcher import (
    MatchKind,
    MatchResult,
    ReleaseDescriptor,
    normalize_releases,
    pick_version,
)
from electroinit.resolver.probe import RuntimeInfo, detect_local_runtime, probe_version, require_tool
from electroinit.resolver.semver import Version, compare, is_pre_release, normalize, parse, parse_major

__all__ = [
    "RELEASES_URL",
    "MatchKind",
    "MatchResult",
    "ReleaseDescriptor",
    "ReleaseFeedClient",
    "RuntimeInfo",
    "Version",
    "compare",
    "detect_local_runtime",
    "is_pre_release",
    "normalize",
    "normalize_releases",
    "parse",
    "parse_major",
    "pick_version",
    "probe_version",
    "require_tool",
]
