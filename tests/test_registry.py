"""Tests for the npm registry client (httpx.MockTransport, no network)."""

from __future__ import annotations

import httpx
import pytest

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
from pkghealth.models.metadata import Deprecated, StructuredRepository, Url
from pkghealth.registry.npm import NpmRegistryClient, validate_package_name, validate_version

_DOCUMENT = {
    "name": "express",
    "dist-tags": {"latest": "4.18.2", "next": "5.0.0-beta.1"},
    "versions": {
        "4.18.1": {"dependencies": {"accepts": "~1.3.8"}},
        "4.18.2": {
            "dependencies": {"accepts": "~1.3.8", "body-parser": "1.20.1"},
            "license": "MIT",
        },
    },
    "time": {
        "created": "2010-12-29T19:38:25.450Z",
        "modified": "2024-01-01T00:00:00.000Z",
        "4.18.2": "2022-10-08T20:01:01.000Z",
    },
    "license": "MIT",
    "repository": {"type": "git", "url": "git+https://github.com/expressjs/express.git"},
    "author": {"name": "TJ Holowaychuk", "email": "tj@vision-media.ca"},
    "maintainers": [{"name": "wesleytodd", "email": "wes@example.com"}, "dougwilson"],
}


def _client(handler, cache: PackageCache | None = None) -> NpmRegistryClient:
    return NpmRegistryClient(cache=cache, transport=httpx.MockTransport(handler))


def _json(payload, status: int = 200, headers: dict[str, str] | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload, headers=headers)

    return handler


# ── Name validation ──


class TestValidatePackageName:
    @pytest.mark.parametrize("name", ["express", "@babel/core", "lodash.merge", "a-b_c~d"])
    def test_accepts_legal_names(self, name):
        validate_package_name(name)

    @pytest.mark.parametrize(
        "name",
        ["", "../etc/passwd", "a//b", "bad\x00name", "Express", "rm -rf", "a;b", "x" * 215],
    )
    def test_rejects_illegal_names(self, name):
        with pytest.raises(ValidationError):
            validate_package_name(name)

    def test_version_rejects_shell_metacharacters(self):
        with pytest.raises(ValidationError):
            validate_version("1.0.0; rm -rf /")

    def test_version_accepts_prerelease(self):
        validate_version("1.0.0-beta.1")


# ── fetch ──


class TestFetch:
    @pytest.mark.anyio()
    async def test_fetch_builds_snapshot(self):
        async with _client(_json(_DOCUMENT)) as client:
            meta = await client.fetch("express")

        assert meta.name == "express"
        assert meta.version == "4.18.2"
        assert meta.license == "MIT"
        assert meta.repository == StructuredRepository(
            url="git+https://github.com/expressjs/express.git", type="git"
        )
        assert meta.dependencies_of("4.18.2") == {"accepts": "~1.3.8", "body-parser": "1.20.1"}
        assert meta.dist_tags["next"] == "5.0.0-beta.1"
        assert meta.author.email == "tj@vision-media.ca"
        assert [m.name for m in meta.maintainers] == ["wesleytodd", "dougwilson"]
        assert not meta.is_deprecated

    @pytest.mark.anyio()
    async def test_scoped_name_keeps_at_sign(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.raw_path.decode())
            return httpx.Response(200, json={**_DOCUMENT, "name": "@babel/core"})

        async with _client(handler) as client:
            await client.fetch("@babel/core")

        assert seen == ["/@babel%2Fcore"]

    @pytest.mark.anyio()
    async def test_string_repository_and_deprecation(self):
        doc = {**_DOCUMENT, "repository": "github:expressjs/express", "deprecated": "use koa"}
        async with _client(_json(doc)) as client:
            meta = await client.fetch("express")

        assert meta.repository == Url("github:expressjs/express")
        assert meta.deprecation == Deprecated("use koa")

    @pytest.mark.anyio()
    async def test_license_object_form(self):
        doc = {**_DOCUMENT, "license": {"type": "Apache-2.0", "url": "https://x"}}
        async with _client(_json(doc)) as client:
            meta = await client.fetch("express")
        assert meta.license == "Apache-2.0"

    @pytest.mark.anyio()
    async def test_invalid_name_never_hits_network(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=_DOCUMENT)

        async with _client(handler) as client:
            with pytest.raises(ValidationError):
                await client.fetch("../../etc/passwd")
        assert calls == []

    @pytest.mark.anyio()
    async def test_404_is_not_found(self):
        async with _client(_json({"error": "Not found"}, status=404)) as client:
            with pytest.raises(NotFoundError) as info:
                await client.fetch("missing-pkg")
        assert info.value.status_code == 404
        assert info.value.package == "missing-pkg"

    @pytest.mark.anyio()
    async def test_429_is_rate_limited_with_retry_after(self):
        handler = _json({}, status=429, headers={"retry-after": "30"})
        async with _client(handler) as client:
            with pytest.raises(RateLimitError) as info:
                await client.fetch("express")
        assert info.value.retry_after == 30

    @pytest.mark.anyio()
    async def test_500_is_registry_error(self):
        async with _client(_json({}, status=500)) as client:
            with pytest.raises(RegistryError) as info:
                await client.fetch("express")
        assert info.value.status_code == 500
        assert not isinstance(info.value, NotFoundError)

    @pytest.mark.anyio()
    async def test_bad_json_is_parse_error(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        async with _client(handler) as client:
            with pytest.raises(ParseError):
                await client.fetch("express")

    @pytest.mark.anyio()
    async def test_no_versions_is_not_found(self):
        async with _client(_json({"name": "empty"})) as client:
            with pytest.raises(NotFoundError):
                await client.fetch("empty")

    @pytest.mark.anyio()
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler) as client:
            with pytest.raises(RequestTimeoutError):
                await client.fetch("express")

    @pytest.mark.anyio()
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(NetworkError):
                await client.fetch("express")

    @pytest.mark.anyio()
    async def test_second_fetch_served_from_cache(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=_DOCUMENT)

        cache = PackageCache()
        async with _client(handler, cache=cache) as client:
            first = await client.fetch("express")
            second = await client.fetch("express")

        assert first == second
        assert len(calls) == 1
        assert cache.get_stats().hits == 1


# ── fetch_download_stats ──


class TestDownloadStats:
    @pytest.mark.anyio()
    async def test_downloads(self):
        handler = _json({"downloads": 31_337, "package": "express"})
        async with _client(handler) as client:
            assert await client.fetch_download_stats("express") == 31_337

    @pytest.mark.anyio()
    async def test_404_means_zero(self):
        async with _client(_json({}, status=404)) as client:
            assert await client.fetch_download_stats("brand-new") == 0

    @pytest.mark.anyio()
    async def test_malformed_payload(self):
        async with _client(_json({"package": "express"})) as client:
            with pytest.raises(ParseError):
                await client.fetch_download_stats("express")
