"""Vulnerability analyzer: counts GitHub advisories by severity."""

from __future__ import annotations

from collections import Counter

import structlog

from pkghealth.interfaces import SourceHostClient
from pkghealth.models.analysis import Advisory, Severity, VulnerabilityAnalysis

log = structlog.get_logger("pkghealth.analyzers")


def vulnerability_severity(critical: int, high: int, moderate: int, low: int) -> Severity:
    if critical:
        return Severity.CRITICAL
    if high:
        return Severity.WARNING
    if moderate or low:
        return Severity.INFO
    return Severity.OK


def summarize_advisories(name: str, version: str, advisories: list[Advisory]) -> VulnerabilityAnalysis:
    counts = Counter(a.severity for a in advisories)
    return VulnerabilityAnalysis(
        package=name,
        version=version,
        total=len(advisories),
        critical=counts["critical"],
        high=counts["high"],
        moderate=counts["moderate"],
        low=counts["low"],
        severity=vulnerability_severity(
            counts["critical"], counts["high"], counts["moderate"], counts["low"]
        ),
        advisories=list(advisories),
    )


def vulnerabilities_unavailable(name: str, version: str) -> VulnerabilityAnalysis:
    return VulnerabilityAnalysis(
        package=name,
        version=version,
        total=0,
        critical=0,
        high=0,
        moderate=0,
        low=0,
        severity=Severity.INFO,
        available=False,
    )


async def analyze_vulnerabilities(
    name: str, version: str, source_host: SourceHostClient
) -> VulnerabilityAnalysis:
    """Advisory summary for *name*@*version*.

    Never raises: a failed lookup yields an unavailable result with info severity.
    """
    try:
        advisories = await source_host.get_advisories(name, version)
    except Exception as exc:
        log.warning("vulnerability.lookup_failed", package=name, version=version, error=str(exc))
        return vulnerabilities_unavailable(name, version)
    return summarize_advisories(name, version, advisories)
