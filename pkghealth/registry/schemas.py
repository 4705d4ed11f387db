"""pydantic schemas for npm registry responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pkghealth.models.metadata import (
    Active,
    Deprecated,
    DeprecationState,
    PackageMetadata,
    Person,
    RepositoryRef,
    StructuredRepository,
    Url,
)


class _Passthrough(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class RepositoryField(_Passthrough):
    type: str | None = None
    url: str | None = None


class PersonField(_Passthrough):
    name: str | None = None
    email: str | None = None


class VersionDocument(_Passthrough):
    name: str | None = None
    version: str | None = None
    license: str | dict[str, Any] | None = None
    repository: str | RepositoryField | None = None
    deprecated: str | bool | None = None
    author: str | PersonField | None = None
    dependencies: dict[str, Any] = Field(default_factory=dict)


class PackageDocument(_Passthrough):
    name: str
    dist_tags: dict[str, str] = Field(default_factory=dict, alias="dist-tags")
    versions: dict[str, VersionDocument] = Field(default_factory=dict)
    time: dict[str, Any] = Field(default_factory=dict)
    license: str | dict[str, Any] | None = None
    repository: str | RepositoryField | None = None
    homepage: str | None = None
    description: str | None = None
    deprecated: str | bool | None = None
    author: str | PersonField | None = None
    maintainers: list[PersonField | str] = Field(default_factory=list)

    def latest_version(self) -> str | None:
        latest = self.dist_tags.get("latest")
        if latest:
            return latest
        if self.versions:
            return list(self.versions)[-1]
        return None

    def to_metadata(self, version: str) -> PackageMetadata:
        """Collapse the registry document into an immutable snapshot of *version*."""
        current = self.versions.get(version)
        return PackageMetadata(
            name=self.name,
            version=version,
            license=_license(self.license) or (current and _license(current.license)) or None,
            repository=_repository(self.repository or (current.repository if current else None)),
            homepage=self.homepage,
            description=self.description,
            time={k: v for k, v in self.time.items() if isinstance(v, str)},
            deprecation=_deprecation(
                self.deprecated if self.deprecated is not None else (current and current.deprecated)
            ),
            author=_person(self.author or (current.author if current else None)),
            maintainers=tuple(p for p in (_person(m) for m in self.maintainers) if p is not None),
            dist_tags=dict(self.dist_tags),
            versions={
                v: {dep: rng for dep, rng in doc.dependencies.items() if isinstance(rng, str)}
                for v, doc in self.versions.items()
            },
        )


class DownloadStats(_Passthrough):
    downloads: int
    package: str | None = None
    start: str | None = None
    end: str | None = None


def _license(value: str | dict[str, Any] | None) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        kind = value.get("type")
        return (kind.strip() or None) if isinstance(kind, str) else None
    return None


def _repository(value: str | RepositoryField | None) -> RepositoryRef | None:
    if isinstance(value, str):
        return Url(value) if value.strip() else None
    if isinstance(value, RepositoryField):
        return StructuredRepository(url=value.url, type=value.type)
    return None


def _deprecation(value: str | bool | None) -> DeprecationState:
    if isinstance(value, str):
        return Deprecated(value) if value.strip() else Active()
    if value is True:
        return Deprecated()
    return Active()


def _person(value: str | PersonField | None) -> Person | None:
    if isinstance(value, str):
        return Person(name=value) if value.strip() else None
    if isinstance(value, PersonField):
        return Person(name=value.name, email=value.email)
    return None
