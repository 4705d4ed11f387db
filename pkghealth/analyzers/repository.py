"""Repository analyzer: GitHub activity and archive status."""

from __future__ import annotations

import structlog

from pkghealth.interfaces import SourceHostClient
from pkghealth.models.analysis import RepositoryAnalysis, Severity
from pkghealth.sourcehost.github import extract_github_info
from pkghealth.utils.time import DAYS_PER_YEAR, days_between, parse_timestamp

log = structlog.get_logger("pkghealth.analyzers")

ISSUES_WARNING = 100
ISSUES_INFO = 50


def estimate_release_frequency(created_at: str | None, last_push: str | None) -> int:
    """Rough releases per year, assuming one release per month of activity."""
    created = parse_timestamp(created_at)
    pushed = parse_timestamp(last_push)
    if created is None or pushed is None or pushed <= created:
        return 0
    active_days = days_between(created, pushed)
    if active_days < 1:
        return 0
    return round(12 / (active_days / DAYS_PER_YEAR))


async def analyze_repository(
    name: str,
    version: str,
    repository_url: str,
    source_host: SourceHostClient,
) -> RepositoryAnalysis:
    """Never raises: any lookup failure yields ``{url, severity=info}``."""
    fallback = RepositoryAnalysis(
        package=name, version=version, url=repository_url, severity=Severity.INFO
    )
    info = extract_github_info(repository_url)
    if info is None:
        return fallback

    owner, repo = info
    try:
        stats = await source_host.get_repo_stats(owner, repo)
    except Exception as exc:
        log.warning("repository.lookup_failed", package=name, repo=f"{owner}/{repo}", error=str(exc))
        return fallback

    if stats.archived:
        severity = Severity.CRITICAL
    elif stats.open_issues > ISSUES_WARNING:
        severity = Severity.WARNING
    elif stats.open_issues > ISSUES_INFO:
        severity = Severity.INFO
    else:
        severity = Severity.OK

    return RepositoryAnalysis(
        package=name,
        version=version,
        url=f"https://github.com/{owner}/{repo}",
        severity=severity,
        open_issues=stats.open_issues,
        last_commit=stats.last_push,
        release_frequency=estimate_release_frequency(stats.created_at, stats.last_push),
        stars=stats.stars,
        forks=stats.forks,
        is_archived=stats.archived,
    )
