"""Weighted 0-100 health score and severity rollup."""

from __future__ import annotations

import math

from pkghealth.analyzers.age import calculate_age_score
from pkghealth.analyzers.license import calculate_license_score
from pkghealth.core.config import RatingBands, ScanConfig
from pkghealth.models.analysis import (
    AgeAnalysis,
    HealthScore,
    LicenseAnalysis,
    PopularityAnalysis,
    Rating,
    RepositoryAnalysis,
    Severity,
    VulnerabilityAnalysis,
    max_severity,
)

DIMENSIONS = (
    "age",
    "deprecation",
    "license",
    "vulnerability",
    "popularity",
    "repository",
    "update_frequency",
)

_REPOSITORY_BY_SEVERITY = {
    Severity.OK: 1.0,
    Severity.INFO: 0.8,
    Severity.WARNING: 0.6,
    Severity.CRITICAL: 0.1,
}


def vulnerability_score(vulnerability: VulnerabilityAnalysis | None) -> float:
    if vulnerability is None:
        return 1.0
    penalty = (
        0.5 * vulnerability.critical
        + 0.25 * vulnerability.high
        + 0.1 * vulnerability.moderate
        + 0.05 * vulnerability.low
    )
    return 1.0 - min(1.0, penalty)


def repository_score(age: AgeAnalysis, repository: RepositoryAnalysis | None) -> float:
    if repository is not None and repository.is_archived is not None:
        if repository.is_archived:
            return 0.1
        return _REPOSITORY_BY_SEVERITY[repository.severity]
    return 0.8 if age.has_repository else 0.3


def rating_for(overall: int, bands: RatingBands) -> Rating:
    if overall >= bands.excellent:
        return "excellent"
    if overall >= bands.good:
        return "good"
    if overall >= bands.fair:
        return "fair"
    return "poor"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_health_score(
    age: AgeAnalysis,
    license: LicenseAnalysis,
    config: ScanConfig,
    vulnerability: VulnerabilityAnalysis | None = None,
    popularity: PopularityAnalysis | None = None,
    repository: RepositoryAnalysis | None = None,
) -> HealthScore:
    """Combine per-dimension scores in ``[0, 1]`` into an overall score.

    Dimensions are weighted by the configured boosters and normalized by
    their sum. Missing optional inputs take neutral values: vulnerability
    1.0, popularity 0.5.
    """
    scoring = config.scoring
    if not scoring.enabled:
        return HealthScore(
            overall=100, rating="excellent", dimensions={name: 1.0 for name in DIMENSIONS}
        )

    age_score = calculate_age_score(age.age_days, config.age)
    dimensions = {
        "age": age_score,
        "deprecation": 0.0 if age.deprecated else 1.0,
        "license": calculate_license_score(
            license.category, license.blue_oak_rating, config.project_type
        ),
        "vulnerability": vulnerability_score(vulnerability),
        "popularity": popularity.score if popularity is not None else 0.5,
        "repository": repository_score(age, repository),
        "update_frequency": age_score,
    }

    boosters = scoring.boosters.model_dump()
    total_weight = sum(boosters.values())
    weighted = sum(dimensions[name] * boosters[name] for name in DIMENSIONS)
    overall = max(0, min(100, _round_half_up(weighted / total_weight * 100)))

    return HealthScore(
        overall=overall,
        rating=rating_for(overall, scoring.rating_bands),
        dimensions=dimensions,
    )


def overall_severity(
    age: AgeAnalysis,
    license: LicenseAnalysis,
    vulnerability: VulnerabilityAnalysis | None = None,
) -> Severity:
    return max_severity(
        age.severity,
        license.severity,
        vulnerability.severity if vulnerability is not None else None,
    )
