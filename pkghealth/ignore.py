"""Ignore policy: exact names, scope/prefix globs and author matches."""

from __future__ import annotations

import re

from pkghealth.core.config import IgnoreConfig
from pkghealth.models.metadata import PackageMetadata


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    return re.compile("^" + re.escape(pattern).replace(r"\*", ".*") + "$")


class IgnoreMatcher:
    """Callable ignore policy built from :class:`IgnoreConfig`.

    Order of checks: exact package name, scope patterns, prefix patterns,
    then a case-insensitive substring match over author and maintainers.
    """

    def __init__(self, config: IgnoreConfig) -> None:
        self._packages = set(config.packages)
        self._scopes = [(p, _glob_to_regex(p)) for p in config.scopes]
        self._prefixes = [(p, _glob_to_regex(p)) for p in config.prefixes]
        self._authors = [a.lower() for a in config.authors if a]
        self._reasons = dict(config.reasons)

    def __call__(self, name: str, metadata: PackageMetadata | None = None) -> bool:
        return self.reason(name, metadata) is not None

    def reason(self, name: str, metadata: PackageMetadata | None = None) -> str | None:
        if name in self._packages:
            return self._reasons.get(name, "Explicitly ignored")
        for raw, regex in self._scopes:
            if regex.match(name):
                return self._reasons.get(raw, f"Matches scope: {raw}")
        for raw, regex in self._prefixes:
            if regex.match(name):
                return self._reasons.get(raw, f"Matches prefix: {raw}")
        if metadata is not None and self._matches_author(metadata):
            return "Author is in ignore list"
        return None

    def _matches_author(self, metadata: PackageMetadata) -> bool:
        if not self._authors:
            return False
        people = [metadata.author, *metadata.maintainers]
        identities = [
            (person.name or person.email or "").lower() for person in people if person is not None
        ]
        identities = [i for i in identities if i]
        return any(ignored in identity for ignored in self._authors for identity in identities)
