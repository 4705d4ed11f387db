"""Popularity analyzer based on weekly npm downloads."""

from __future__ import annotations

import math

import structlog

from pkghealth.interfaces import RegistryClient
from pkghealth.models.analysis import PopularityAnalysis, PopularityTier, Severity
from pkghealth.utils.time import DAYS_PER_YEAR

log = structlog.get_logger("pkghealth.analyzers")

VERY_POPULAR = 1_000_000
POPULAR = 100_000
MODERATE = 10_000
NICHE = 1_000
UNPOPULAR = 100

_NEW_PACKAGE_BOOST = 0.2


def calculate_popularity_score(weekly_downloads: int, age_days: int | None = None) -> float:
    """``log10(d) / log10(1M)``, boosted for packages younger than a year."""
    if weekly_downloads <= 0:
        return 0.0
    score = math.log10(weekly_downloads) / math.log10(VERY_POPULAR)
    if age_days is not None and age_days < DAYS_PER_YEAR:
        score = min(1.0, score + (1 - age_days / DAYS_PER_YEAR) * _NEW_PACKAGE_BOOST)
    return max(0.0, min(1.0, score))


def popularity_tier(weekly_downloads: int) -> PopularityTier:
    if weekly_downloads >= VERY_POPULAR:
        return "very-popular"
    if weekly_downloads >= POPULAR:
        return "popular"
    if weekly_downloads >= MODERATE:
        return "moderate"
    if weekly_downloads >= NICHE:
        return "niche"
    return "unpopular"


def _severity(weekly_downloads: int) -> Severity:
    if weekly_downloads < UNPOPULAR:
        return Severity.WARNING
    if weekly_downloads < NICHE:
        return Severity.INFO
    return Severity.OK


async def analyze_popularity(
    name: str, age_days: int | None, registry: RegistryClient
) -> PopularityAnalysis:
    """Score download volume; stats failures give a neutral ``niche`` result."""
    try:
        downloads = await registry.fetch_download_stats(name)
    except Exception as exc:
        log.info("popularity.stats_unavailable", package=name, error=str(exc))
        return PopularityAnalysis(
            package=name,
            weekly_downloads=0,
            score=0.5,
            tier="niche",
            severity=Severity.INFO,
        )

    return PopularityAnalysis(
        package=name,
        weekly_downloads=downloads,
        score=calculate_popularity_score(downloads, age_days),
        tier=popularity_tier(downloads),
        severity=_severity(downloads),
    )
