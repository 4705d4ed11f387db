"""Package metadata snapshot as fetched from the registry."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Url:
    """Repository given as a bare string."""

    url: str


@dataclass(frozen=True)
class StructuredRepository:
    """Repository given as ``{"type": ..., "url": ...}``."""

    url: str | None
    type: str | None = None


RepositoryRef = Url | StructuredRepository


@dataclass(frozen=True)
class Active:
    """Package is not deprecated."""

    @property
    def is_deprecated(self) -> bool:
        return False


@dataclass(frozen=True)
class Deprecated:
    """Package is deprecated, optionally with the publisher's message."""

    message: str | None = None

    @property
    def is_deprecated(self) -> bool:
        return True


DeprecationState = Active | Deprecated


@dataclass(frozen=True)
class Person:
    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class PackageMetadata:
    """Immutable snapshot of one package document.

    ``version`` is the registry's ``latest`` dist-tag. ``versions`` keeps only
    the per-version dependency maps the tree builder needs.
    """

    name: str
    version: str
    license: str | None = None
    repository: RepositoryRef | None = None
    homepage: str | None = None
    description: str | None = None
    time: dict[str, str] = field(default_factory=dict)
    deprecation: DeprecationState = field(default_factory=Active)
    author: Person | None = None
    maintainers: tuple[Person, ...] = ()
    dist_tags: dict[str, str] = field(default_factory=dict)
    versions: dict[str, dict[str, str]] = field(default_factory=dict)

    @property
    def repository_url(self) -> str | None:
        if self.repository is None:
            return None
        return self.repository.url or None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation.is_deprecated

    def dependencies_of(self, version: str) -> dict[str, str]:
        return dict(self.versions.get(version, {}))
