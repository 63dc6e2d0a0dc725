"""Minimal semantic-version parsing and comparison.

Only what release matching needs: a ``major.minor.patch`` triple, a
pre-release flag and a total order.  Parsing never raises; input whose major
component has no digits becomes an *unparseable* version that sorts below
every valid one and is never selected by the matcher.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_LEADING_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class Version:
    """A normalised ``major.minor.patch`` version.

    ``text`` keeps the normalised source string (marker stripped) so the
    exact version can be written back into a manifest.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    pre_release: bool = False
    valid: bool = True
    text: str = ""

    @property
    def sort_key(self) -> tuple[bool, int, int, int]:
        return (self.valid, self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return self.text


UNPARSEABLE = Version(valid=False)


def normalize(raw: str | None) -> str:
    """Trim *raw* and strip a single leading non-digit marker such as ``v``."""
    if not raw:
        return ""
    clean = raw.strip()
    if clean and not clean[0].isdigit():
        clean = clean[1:]
    return clean


def is_pre_release(raw: str | None) -> bool:
    """Return ``True`` if *raw* carries a pre-release suffix (``30.0.0-beta.1``)."""
    return "-" in normalize(raw)


def _component(part: str) -> int | None:
    match = _LEADING_DIGITS.match(part)
    return int(match.group()) if match else None


def parse(raw: str | None) -> Version:
    """Parse *raw* into a ``Version``.

    Examples::

        parse("v20.11.1") -> Version(20, 11, 1)
        parse("5")        -> Version(5, 0, 0)
        parse("30.0.0-beta.2").pre_release -> True
        parse("garbage").valid -> False
    """
    clean = normalize(raw)
    core = clean.split("-", 1)[0]
    parts = core.split(".")

    major = _component(parts[0])
    if major is None:
        return Version(valid=False, pre_release="-" in clean, text=(raw or "").strip())

    minor = _component(parts[1]) if len(parts) > 1 else None
    patch = _component(parts[2]) if len(parts) > 2 else None
    return Version(
        major=major,
        minor=minor or 0,
        patch=patch or 0,
        pre_release="-" in clean,
        text=clean,
    )


def parse_major(raw: str | None) -> int | None:
    """Return the major component of *raw*, or ``None`` if it has none."""
    version = parse(raw)
    return version.major if version.valid else None


def compare(a: Version, b: Version) -> int:
    """Compare two versions, returning ``-1``, ``0`` or ``1``.

    Unparseable versions sort below valid ones; valid versions compare by
    ``(major, minor, patch)``.  The pre-release flag is ignored.
    """
    ka, kb = a.sort_key, b.sort_key
    if ka == kb:
        return 0
    return 1 if ka > kb else -1
