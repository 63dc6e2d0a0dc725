"""Electron release selection.

Matches the local Node.js major version against the Node.js version each
Electron release bundles, and picks the best release:

1. ``EXACT`` -- newest release bundling the same Node.js major.
2. ``LOWER`` -- newest release bundling an older Node.js major.
3. ``ANY``   -- newest release overall, with no verified relationship.

Pre-releases and entries without a usable version or bundled Node.js version
are never candidates.  An empty candidate pool yields ``None``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .semver import Version, parse, parse_major


class MatchKind(str, Enum):
    """How a selected release relates to the local Node.js major."""

    EXACT = "exact"
    LOWER = "lower"
    ANY = "any"


@dataclass(frozen=True)
class ReleaseDescriptor:
    """One Electron release and the Node.js version it was built against."""

    version: Version
    runtime: str = ""
    runtime_major: int | None = None

    @classmethod
    def from_feed_entry(cls, entry: Any) -> "ReleaseDescriptor | None":
        """Build a descriptor from one release-feed JSON object.

        The version is read from ``version`` (falling back to ``tag_name``)
        and the bundled Node.js version from ``node`` (falling back to
        ``deps.node``).  Returns ``None`` for entries that are not objects.
        """
        if not isinstance(entry, Mapping):
            return None
        raw_version = entry.get("version") or entry.get("tag_name") or ""
        runtime = entry.get("node") or ""
        if not runtime:
            deps = entry.get("deps")
            if isinstance(deps, Mapping):
                runtime = deps.get("node") or ""
        if not isinstance(raw_version, str) or not isinstance(runtime, str):
            return None
        return cls(
            version=parse(raw_version),
            runtime=runtime,
            runtime_major=parse_major(runtime),
        )


@dataclass(frozen=True)
class MatchResult:
    """The release chosen by :func:`pick_version`."""

    version: Version
    runtime: str
    runtime_major: int
    match_kind: MatchKind


def normalize_releases(entries: Iterable[Any]) -> list[ReleaseDescriptor]:
    """Convert raw feed entries to descriptors, dropping non-object entries."""
    descriptors: list[ReleaseDescriptor] = []
    for entry in entries:
        descriptor = ReleaseDescriptor.from_feed_entry(entry)
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors


def _newest(pool: list[ReleaseDescriptor]) -> ReleaseDescriptor:
    # sorted() is stable under reverse=True, so ties keep feed order.
    return sorted(pool, key=lambda r: r.version.sort_key, reverse=True)[0]


def _result(release: ReleaseDescriptor, kind: MatchKind) -> MatchResult:
    assert release.runtime_major is not None
    return MatchResult(
        version=release.version,
        runtime=release.runtime,
        runtime_major=release.runtime_major,
        match_kind=kind,
    )


def pick_version(
    releases: Iterable[ReleaseDescriptor],
    local_major: int | None,
) -> MatchResult | None:
    """Select the Electron release that best fits *local_major*.

    Args:
        releases: Release descriptors, typically from the release feed.
        local_major: Major version of the local Node.js, or ``None`` when it
            is unknown (only the ``ANY`` tier can then match).

    Returns:
        The selected release, or ``None`` when no release qualifies.
    """
    candidates = [
        r
        for r in releases
        if r.version.valid and r.runtime_major is not None and not r.version.pre_release
    ]
    if not candidates:
        return None

    if local_major is not None:
        exact = [r for r in candidates if r.runtime_major == local_major]
        if exact:
            return _result(_newest(exact), MatchKind.EXACT)

        lower = [r for r in candidates if r.runtime_major < local_major]
        if lower:
            return _result(_newest(lower), MatchKind.LOWER)

    return _result(_newest(candidates), MatchKind.ANY)
