"""Async GitHub client: repository stats, releases and security advisories."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from packaging.specifiers import InvalidSpecifier, SpecifierSet

from pkghealth.exceptions import ParseError, SourceHostError
from pkghealth.models.analysis import Advisory, ReleaseNote
from pkghealth.registry.npm import validate_package_name, validate_version
from pkghealth.utils.versions import parse_version

log = structlog.get_logger("pkghealth.sourcehost")

GITHUB_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0  # seconds

_OWNER_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,38})?$")
_REPO_RE = re.compile(r"^[a-zA-Z0-9._-]{1,100}$")
_GITHUB_PATH_RE = re.compile(r"github\.com[:/]([^/]+)/([^/#?]+)")
_RANGE_PART_RE = re.compile(r"^\s*(<=|>=|<|>|=)\s*(\S+)\s*$")

_ADVISORIES_QUERY = """
query($package: String!, $first: Int!) {
  securityVulnerabilities(ecosystem: NPM, package: $package, first: $first) {
    nodes {
      advisory { ghsaId summary severity permalink publishedAt withdrawnAt }
      vulnerableVersionRange
      firstPatchedVersion { identifier }
    }
  }
}
"""


@dataclass
class RepoStats:
    stars: int
    forks: int
    open_issues: int
    archived: bool
    last_push: str
    created_at: str
    html_url: str | None = None


def extract_github_info(repo_url: str) -> tuple[str, str] | None:
    """Pull ``(owner, repo)`` out of the many shapes npm repository URLs take."""
    url = repo_url.strip().replace("git+", "", 1)
    if url.startswith("git:"):
        url = "https:" + url[len("git:"):]
    url = url.replace("ssh://git@", "https://", 1)
    if url.startswith("github:"):
        url = "https://github.com/" + url[len("github:"):]
    url = re.sub(r"\.git$", "", url)

    match = _GITHUB_PATH_RE.search(url)
    if not match:
        return None
    return match.group(1), re.sub(r"\.git$", "", match.group(2))


def validate_identifier(identifier: str, kind: str) -> None:
    max_length = 39 if kind == "owner" else 100
    pattern = _OWNER_RE if kind == "owner" else _REPO_RE
    if not identifier or len(identifier) > max_length:
        raise SourceHostError(f"Invalid GitHub {kind}: length must be 1-{max_length} characters")
    if ".." in identifier or "/" in identifier or "\\" in identifier:
        raise SourceHostError(f"Invalid GitHub {kind}: contains forbidden characters")
    if not pattern.match(identifier):
        raise SourceHostError(f"Invalid GitHub {kind} format: {identifier}")


def version_in_range(version: str, vulnerable_range: str | None) -> bool:
    """True when *version* falls inside a GitHub range such as ``">= 1.0, < 1.2.3"``.

    Unparseable versions or ranges count as affected.
    """
    if not vulnerable_range:
        return True
    specifiers = []
    for part in vulnerable_range.split(","):
        match = _RANGE_PART_RE.match(part)
        if not match:
            return True
        op, bound = match.groups()
        specifiers.append(f"{'==' if op == '=' else op}{bound}")
    try:
        return SpecifierSet(",".join(specifiers)).contains(parse_version(version), prereleases=True)
    except (InvalidSpecifier, ParseError):
        return True


class GitHubClient:
    """Thin async wrapper around the GitHub REST and GraphQL APIs.

    Requests are never retried. Advisory lookups need a token; without one
    they return an empty list.
    """

    def __init__(
        self,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._timeout = timeout
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "pkghealth",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=GITHUB_API_URL,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get_repo_stats(self, owner: str, repo: str) -> RepoStats:
        validate_identifier(owner, "owner")
        validate_identifier(repo, "repo")
        data = await self._request("GET", f"/repos/{quote(owner)}/{quote(repo)}")
        try:
            return RepoStats(
                stars=int(data["stargazers_count"]),
                forks=int(data["forks_count"]),
                open_issues=int(data["open_issues_count"]),
                archived=bool(data["archived"]),
                last_push=str(data["pushed_at"]),
                created_at=str(data["created_at"]),
                html_url=data.get("html_url"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SourceHostError(f"Invalid GitHub API response for {owner}/{repo}: {exc}") from exc

    async def get_releases(self, owner: str, repo: str, per_page: int = 30) -> list[ReleaseNote]:
        validate_identifier(owner, "owner")
        validate_identifier(repo, "repo")
        try:
            data = await self._request(
                "GET", f"/repos/{quote(owner)}/{quote(repo)}/releases", params={"per_page": per_page}
            )
        except SourceHostError as exc:
            if exc.status_code == 404:
                return []
            raise

        if not isinstance(data, list):
            return []
        releases: list[ReleaseNote] = []
        for item in data:
            if isinstance(item, dict) and item.get("tag_name") and item.get("html_url"):
                releases.append(
                    ReleaseNote(
                        tag=item["tag_name"],
                        url=item["html_url"],
                        published_at=item.get("published_at"),
                    )
                )
        return releases

    async def get_advisories(self, name: str, version: str, first: int = 100) -> list[Advisory]:
        """Non-withdrawn npm advisories affecting *name* at *version*."""
        validate_package_name(name)
        validate_version(version)
        if not self._token:
            return []

        data = await self._request(
            "POST",
            "/graphql",
            json={"query": _ADVISORIES_QUERY, "variables": {"package": name, "first": first}},
        )
        if not isinstance(data, dict):
            raise SourceHostError(f"Unexpected GraphQL payload for {name}")
        if data.get("errors"):
            raise SourceHostError(f"GitHub GraphQL error for {name}: {data['errors']}")

        vulnerabilities = (data.get("data") or {}).get("securityVulnerabilities") or {}
        nodes = vulnerabilities.get("nodes") or []
        advisories: list[Advisory] = []
        for node in nodes:
            if not isinstance(node, dict):
                continue
            advisory = node.get("advisory") or {}
            if advisory.get("withdrawnAt"):
                continue
            vulnerable_range = node.get("vulnerableVersionRange")
            if not version_in_range(version, vulnerable_range):
                continue
            patched = node.get("firstPatchedVersion") or {}
            advisories.append(
                Advisory(
                    ghsa_id=advisory.get("ghsaId", ""),
                    summary=advisory.get("summary", ""),
                    severity=str(advisory.get("severity", "low")).lower(),  # type: ignore[arg-type]
                    vulnerable_range=vulnerable_range,
                    patched_version=patched.get("identifier"),
                    url=advisory.get("permalink"),
                    published_at=advisory.get("publishedAt"),
                )
            )
        return advisories

    # ── internals ──────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await asyncio.wait_for(
                self._client.request(method, path, **kwargs), timeout=self._timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise SourceHostError(f"Request timeout: GitHub API took longer than {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise SourceHostError(f"Network error talking to GitHub: {exc}") from exc

        if self._is_rate_limited(response):
            log.warning(
                "github.rate_limit",
                path=path,
                reset=response.headers.get("x-ratelimit-reset"),
            )
            raise SourceHostError("GitHub API rate limit exceeded", response.status_code)
        if response.status_code == 404:
            raise SourceHostError(f"Not found on GitHub: {path}", 404)
        if not response.is_success:
            raise SourceHostError(
                f"GitHub API request failed with HTTP {response.status_code}", response.status_code
            )
        try:
            return response.json()
        except ValueError as exc:
            raise SourceHostError(f"Invalid JSON from GitHub for {path}") from exc

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        if response.status_code == 429:
            return True
        return response.status_code == 403 and response.headers.get("x-ratelimit-remaining") in (
            "0",
            None,
        )
