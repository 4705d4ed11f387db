"""Collaborator interfaces consumed by the scan pipeline."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pkghealth.models.analysis import Advisory, ReleaseNote
from pkghealth.models.metadata import PackageMetadata
from pkghealth.sourcehost.github import RepoStats


@runtime_checkable
class DependencySource(Protocol):
    """Supplies the project's declared dependency set."""

    name: str
    version: str

    def get_all_dependencies(self, include_dev: bool = False) -> dict[str, str]: ...


@runtime_checkable
class RegistryClient(Protocol):
    """Fetches package metadata; may raise any :class:`RegistryError`."""

    async def fetch(self, name: str) -> PackageMetadata: ...

    async def fetch_download_stats(self, name: str) -> int: ...


@runtime_checkable
class SourceHostClient(Protocol):
    """Repository stats, releases and advisories; may raise :class:`SourceHostError`."""

    async def get_repo_stats(self, owner: str, repo: str) -> RepoStats: ...

    async def get_releases(self, owner: str, repo: str) -> list[ReleaseNote]: ...

    async def get_advisories(self, name: str, version: str) -> list[Advisory]: ...


class IgnorePolicy(Protocol):
    """Predicate deciding whether a package is excluded from the scan."""

    def __call__(self, name: str, metadata: PackageMetadata | None = None) -> bool: ...
