"""Shared fixtures for pkghealth tests (no network access required)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pkghealth.exceptions import NotFoundError
from pkghealth.models.metadata import Active, PackageMetadata, StructuredRepository


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


def iso_days_ago(days: int, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return (now - timedelta(days=days)).isoformat().replace("+00:00", "Z")


def build_metadata(
    name: str = "left-pad",
    version: str = "1.3.0",
    *,
    license: str | None = "MIT",
    age_days: int | None = 30,
    deprecation=None,
    repository: str | None = "git+https://github.com/example/left-pad.git",
    dependencies: dict[str, str] | None = None,
    versions: dict[str, dict[str, str]] | None = None,
    dist_tags: dict[str, str] | None = None,
    author=None,
    maintainers=(),
    now: datetime | None = None,
) -> PackageMetadata:
    time = {}
    if age_days is not None:
        stamp = iso_days_ago(age_days, now)
        time = {"created": stamp, "modified": stamp, version: stamp}
    if versions is None:
        versions = {version: dict(dependencies or {})}
    return PackageMetadata(
        name=name,
        version=version,
        license=license,
        repository=StructuredRepository(url=repository, type="git") if repository else None,
        time=time,
        deprecation=deprecation or Active(),
        author=author,
        maintainers=tuple(maintainers),
        dist_tags=dist_tags or {"latest": version},
        versions=versions,
    )


class FakeRegistry:
    """In-memory registry: metadata by name, optional failures and download counts."""

    def __init__(
        self,
        packages: dict[str, PackageMetadata] | None = None,
        downloads: dict[str, int] | None = None,
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self.packages = dict(packages or {})
        self.downloads = dict(downloads or {})
        self.failures = dict(failures or {})
        self.fetched: list[str] = []

    async def fetch(self, name: str) -> PackageMetadata:
        self.fetched.append(name)
        if name in self.failures:
            raise self.failures[name]
        if name not in self.packages:
            raise NotFoundError(f"Package not found: {name}", name, 404)
        return self.packages[name]

    async def fetch_download_stats(self, name: str) -> int:
        if name in self.failures:
            raise self.failures[name]
        return self.downloads.get(name, 50_000)


@pytest.fixture
def metadata_factory():
    return build_metadata


@pytest.fixture
def registry_factory():
    return FakeRegistry
