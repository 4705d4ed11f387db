"""Version parsing and comparison helpers built on ``packaging``."""

from __future__ import annotations

import re

from packaging import version as pkg_version

from pkghealth.exceptions import ParseError
from pkghealth.models.analysis import UpdateType

BREAKING_CHANGES_PER_MAJOR = 15

_CORE_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)")
_RANGE_OPERATORS_RE = re.compile(r"^[\^~>=<]+")


def parse_version(text: str) -> pkg_version.Version:
    """Parse a semantic version.

    Pre-release tags that PEP 440 cannot express (``1.0.0-canary.abc``) are
    dropped and the ``major.minor.patch`` core is kept.
    """
    stripped = text.strip()
    try:
        return pkg_version.Version(stripped)
    except pkg_version.InvalidVersion:
        match = _CORE_RE.match(stripped)
        if not match:
            raise ParseError(f"Invalid semantic version: {text!r}") from None
        return pkg_version.Version(".".join(match.groups()))


def get_update_type(current: str, latest: str) -> UpdateType | None:
    """Classify ``current -> latest``; ``None`` when there is nothing newer."""
    cur = parse_version(current)
    lat = parse_version(latest)
    if lat <= cur:
        return None
    if lat.major != cur.major:
        return "major"
    if lat.minor != cur.minor:
        return "minor"
    return "patch"


def major_jump(current: str, latest: str) -> int:
    return max(0, parse_version(latest).major - parse_version(current).major)


def estimate_breaking_changes(current: str, latest: str) -> int:
    return BREAKING_CHANGES_PER_MAJOR * major_jump(current, latest)


def parse_version_from_range(version_range: str) -> str:
    """Strip range operators: ``"^1.2.3"`` -> ``"1.2.3"``; wildcards -> ``"latest"``."""
    cleaned = _RANGE_OPERATORS_RE.sub("", version_range.strip())
    cleaned = cleaned.split(" ", 1)[0].strip()
    if cleaned in ("*", "latest", "", "x"):
        return "latest"
    return cleaned
