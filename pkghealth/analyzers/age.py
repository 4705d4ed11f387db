"""Age analyzer: time since last publish, deprecation and repository presence."""

from __future__ import annotations

from datetime import datetime, timezone

from pkghealth.core.config import AgeConfig
from pkghealth.models.analysis import AgeAnalysis, Severity
from pkghealth.models.metadata import Deprecated, PackageMetadata
from pkghealth.utils.time import DAYS_PER_YEAR, days_between, days_to_human, parse_timestamp


def _last_publish(metadata: PackageMetadata) -> str | None:
    # modified > time[version] > created
    for key in ("modified", metadata.version, "created"):
        value = metadata.time.get(key)
        if value and parse_timestamp(value) is not None:
            return value
    return None


def _severity(age_days: int, config: AgeConfig, deprecated: bool) -> Severity:
    if deprecated:
        return Severity.CRITICAL
    if age_days >= config.critical_days:
        return Severity.CRITICAL
    if age_days >= config.warn_days:
        return Severity.WARNING
    return Severity.OK


def analyze_age(
    metadata: PackageMetadata, config: AgeConfig, now: datetime | None = None
) -> AgeAnalysis:
    """Classify how stale *metadata* is against the configured thresholds.

    Without any usable timestamp the result is ``last_publish="unknown"`` with
    warning severity, escalated to critical when the package is deprecated.
    """
    now = now or datetime.now(timezone.utc)
    deprecated = config.check_deprecated and metadata.is_deprecated
    deprecation_message = (
        metadata.deprecation.message if isinstance(metadata.deprecation, Deprecated) else None
    )
    repository_url = metadata.repository_url if config.check_repository else None

    published = _last_publish(metadata)
    if published is None:
        return AgeAnalysis(
            package=metadata.name,
            version=metadata.version,
            last_publish="unknown",
            age_days=0,
            age_human="unknown",
            deprecated=deprecated,
            severity=Severity.CRITICAL if deprecated else Severity.WARNING,
            has_repository=repository_url is not None,
            deprecation_message=deprecation_message if deprecated else None,
            repository_url=repository_url,
        )

    age_days = days_between(parse_timestamp(published), now)  # type: ignore[arg-type]
    return AgeAnalysis(
        package=metadata.name,
        version=metadata.version,
        last_publish=published,
        age_days=age_days,
        age_human=days_to_human(age_days),
        deprecated=deprecated,
        severity=_severity(age_days, config, deprecated),
        has_repository=repository_url is not None,
        deprecation_message=deprecation_message if deprecated else None,
        repository_url=repository_url,
    )


def calculate_age_score(age_days: int, config: AgeConfig) -> float:
    """1.0 up to a year, linear decay to 0 at the critical threshold, then a small tail."""
    critical = config.critical_days
    if age_days <= DAYS_PER_YEAR:
        return 1.0
    if age_days <= critical:
        ratio = (age_days - DAYS_PER_YEAR) / (critical - DAYS_PER_YEAR)
        return max(0.0, 1.0 - ratio)
    return max(0.0, 0.2 - (age_days - critical) / (critical * 2))
