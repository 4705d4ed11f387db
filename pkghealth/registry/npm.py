"""Async npm registry client with input validation and cache-first reads."""

from __future__ import annotations

import asyncio
import re
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from pkghealth.cache import PackageCache
from pkghealth.exceptions import (
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RegistryError,
    RequestTimeoutError,
    ValidationError,
)
from pkghealth.models.metadata import PackageMetadata
from pkghealth.registry.schemas import DownloadStats, PackageDocument

log = structlog.get_logger("pkghealth.registry")

NPM_REGISTRY_URL = "https://registry.npmjs.org"
NPM_DOWNLOADS_URL = "https://api.npmjs.org/downloads/point/last-week"
DEFAULT_TIMEOUT = 10.0  # seconds

_MAX_NAME_LENGTH = 214
_MAX_VERSION_LENGTH = 50
_PACKAGE_NAME_RE = re.compile(r"^(@[a-z0-9-~][a-z0-9-._~]*/)?[a-z0-9-~][a-z0-9-._~]*$")
_FORBIDDEN_VERSION_CHARS_RE = re.compile(r"[<>|&;`$()\x00\s]")


def validate_package_name(name: str) -> None:
    """Reject anything that is not a legal npm package name.

    Runs before any URL is built: path traversal, null bytes, shell
    metacharacters and upper-case names never reach the network.
    """
    if not name or len(name) > _MAX_NAME_LENGTH:
        raise ValidationError(
            f"Invalid package name: length must be 1-{_MAX_NAME_LENGTH} characters"
        )
    if ".." in name or "//" in name or "\x00" in name:
        raise ValidationError(f"Invalid package name: contains forbidden characters: {name!r}")
    if not _PACKAGE_NAME_RE.match(name):
        raise ValidationError(f"Invalid package name format: {name!r}")


def validate_version(version: str) -> None:
    if not version or len(version) > _MAX_VERSION_LENGTH:
        raise ValidationError(
            f"Invalid version: length must be 1-{_MAX_VERSION_LENGTH} characters"
        )
    if _FORBIDDEN_VERSION_CHARS_RE.search(version):
        raise ValidationError(f"Invalid version format: {version!r}")


class NpmRegistryClient:
    """Thin async wrapper around the npm registry and downloads API.

    Requests are never retried. Each call is bounded by *timeout* seconds.
    """

    def __init__(
        self,
        cache: PackageCache | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        registry_url: str = NPM_REGISTRY_URL,
        downloads_url: str = NPM_DOWNLOADS_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._cache = cache
        self._timeout = timeout
        self._registry_url = registry_url.rstrip("/")
        self._downloads_url = downloads_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json", "User-Agent": "pkghealth"},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> NpmRegistryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def fetch(self, name: str) -> PackageMetadata:
        """Return metadata for the latest published version of *name*."""
        validate_package_name(name)

        if self._cache is not None:
            cached = self._cache.get_metadata(name)
            if cached is not None:
                log.debug("registry.cache_hit", package=name)
                return cached

        response = await self._get(f"{self._registry_url}/{quote(name, safe='@')}", name)
        self._raise_for_status(response, name)

        try:
            document = PackageDocument.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise ParseError(f"Invalid package metadata from npm registry for {name}: {exc}") from exc

        version = document.latest_version()
        if version is None:
            raise NotFoundError(f"Package has no published versions: {name}", name, 404)

        metadata = document.to_metadata(version)
        if self._cache is not None:
            self._cache.set_metadata(name, metadata)
        return metadata

    async def fetch_download_stats(self, name: str) -> int:
        """Weekly downloads for *name*; ``0`` when the downloads API has no record."""
        validate_package_name(name)
        response = await self._get(f"{self._downloads_url}/{quote(name, safe='@')}", name)
        if response.status_code == 404:
            return 0
        self._raise_for_status(response, name)
        try:
            stats = DownloadStats.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise ParseError(f"Invalid download stats for {name}: {exc}") from exc
        return stats.downloads

    # ── internals ──────────────────────────────────────────────────────────

    async def _get(self, url: str, name: str) -> httpx.Response:
        try:
            return await asyncio.wait_for(self._client.get(url), timeout=self._timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise RequestTimeoutError(
                f"Request timeout: npm registry took longer than {self._timeout}s for {name}", name
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error fetching {name}: {exc}", name) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, name: str) -> None:
        status = response.status_code
        if status == 404:
            raise NotFoundError(f"Package not found: {name}", name, status)
        if status in (403, 429):
            raise RateLimitError(
                f"npm registry rate limit hit for {name}",
                name,
                status,
                retry_after=_parse_header_int(response.headers.get("retry-after")),
            )
        if not response.is_success:
            raise RegistryError(f"npm registry returned HTTP {status} for {name}", name, status)


def _parse_header_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
