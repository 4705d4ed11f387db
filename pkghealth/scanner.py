"""Scan orchestration: fan out per-package analysis, then summarize."""

from __future__ import annotations

import asyncio
import enum
import math
import time
from datetime import datetime, timezone

import structlog

from pkghealth import __version__
from pkghealth.analyzers.age import analyze_age
from pkghealth.analyzers.license import analyze_license
from pkghealth.analyzers.popularity import analyze_popularity
from pkghealth.analyzers.repository import analyze_repository
from pkghealth.analyzers.scorer import calculate_health_score, overall_severity
from pkghealth.analyzers.upgrade import analyze_upgrade_path
from pkghealth.analyzers.vulnerability import analyze_vulnerabilities
from pkghealth.cache import PackageCache
from pkghealth.core.config import FailOn, ScanConfig
from pkghealth.exceptions import CircularDependencyError
from pkghealth.ignore import IgnoreMatcher
from pkghealth.interfaces import DependencySource, IgnorePolicy, RegistryClient, SourceHostClient
from pkghealth.models.analysis import (
    PackageAnalysis,
    RepositoryAnalysis,
    Severity,
    VulnerabilityAnalysis,
)
from pkghealth.models.scan import (
    ProjectInfo,
    Recommendation,
    RiskLevel,
    ScanMeta,
    ScanResult,
    ScanSummary,
)
from pkghealth.models.tree import DependencyTreeSummary
from pkghealth.pool import WorkerPool
from pkghealth.tree import DependencyTreeBuilder
from pkghealth.utils.versions import parse_version_from_range

log = structlog.get_logger("pkghealth.scan")

LOW_SCORE = 40
DEPRECATION_EFFORT = "2-4 hours"


class ScanState(str, enum.Enum):
    READ_DEPENDENCIES = "read_dependencies"
    FAN_OUT = "fan_out"
    COLLECT = "collect"
    SUMMARIZE = "summarize"
    DETERMINE_EXIT = "determine_exit"
    DONE = "done"


# ── aggregation ────────────────────────────────────────────────────────────


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def risk_level(critical: int, warning: int, average: float) -> RiskLevel:
    if critical > 0 or average < 40:
        return "critical"
    if warning > 5 or average < 60:
        return "high"
    if warning > 0 or average < 80:
        return "medium"
    return "low"


def calculate_summary(packages: list[PackageAnalysis]) -> ScanSummary:
    by_rating = dict.fromkeys(("excellent", "good", "fair", "poor"), 0)
    by_severity = {severity.value: 0 for severity in Severity}
    for analysis in packages:
        by_rating[analysis.score.rating] += 1
        by_severity[analysis.overall_severity.value] += 1

    average = sum(a.score.overall for a in packages) / len(packages) if packages else 0.0
    return ScanSummary(
        total=len(packages),
        average_score=_round_half_up(average),
        risk_level=risk_level(by_severity["critical"], by_severity["warning"], average),
        by_rating=by_rating,
        by_severity=by_severity,
    )


def _critical_reason(analysis: PackageAnalysis) -> tuple[str, str]:
    lic = analysis.license
    if lic.category == "commercial-incompatible":
        return (
            f"License {lic.license} is incompatible with commercial use",
            "Replace the package or obtain a commercial license",
        )
    if lic.category == "unlicensed":
        return "Package has no license", "Ask the maintainers to publish a license or replace it"
    vuln = analysis.vulnerability
    if vuln is not None and vuln.severity is Severity.CRITICAL:
        return (
            f"{vuln.critical} critical security advisories affect {analysis.version}",
            "Upgrade to a patched version",
        )
    if analysis.age.severity is Severity.CRITICAL:
        return (
            f"Package was last published {analysis.age.age_human} ago",
            "Evaluate a maintained alternative",
        )
    return "Critical issue detected", "Review the package before the next release"


def generate_recommendations(packages: list[PackageAnalysis]) -> list[Recommendation]:
    """Deprecated packages first, then critical severity, then low scores."""
    ordered = sorted(packages, key=lambda a: a.package)
    deprecated: list[Recommendation] = []
    critical: list[Recommendation] = []
    low_score: list[Recommendation] = []

    for analysis in ordered:
        if analysis.age.deprecated:
            message = analysis.age.deprecation_message or "No longer maintained"
            action = "Migrate to a maintained alternative"
            upgrade = analysis.upgrade_path
            if upgrade is not None and upgrade.alternatives:
                names = ", ".join(alt.name for alt in upgrade.alternatives)
                action = f"Migrate to a maintained alternative ({names})"
            deprecated.append(
                Recommendation(
                    package=analysis.package,
                    priority="high",
                    reason=f"Package is deprecated: {message}",
                    action=action,
                    effort=DEPRECATION_EFFORT,
                )
            )
        elif analysis.overall_severity is Severity.CRITICAL:
            reason, action = _critical_reason(analysis)
            critical.append(
                Recommendation(
                    package=analysis.package, priority="high", reason=reason, action=action
                )
            )
        elif analysis.score.overall < LOW_SCORE:
            low_score.append(
                Recommendation(
                    package=analysis.package,
                    priority="medium",
                    reason=(
                        f"Low health score ({analysis.score.overall}/100). "
                        f"Package is {analysis.age.age_human} old."
                    ),
                    action="Review the package health and consider alternatives",
                )
            )
    return [*deprecated, *critical, *low_score]


def determine_exit_code(packages: list[PackageAnalysis], fail_on: FailOn) -> int:
    """0 clean, 1 warning/info gate tripped, 2 critical present."""
    if fail_on == "none":
        return 0
    severities = {a.overall_severity for a in packages}
    if Severity.CRITICAL in severities:
        return 2
    if Severity.WARNING in severities and fail_on in ("warning", "info"):
        return 1
    if Severity.INFO in severities and fail_on == "info":
        return 1
    return 0


# ── orchestrator ───────────────────────────────────────────────────────────


class ScanOrchestrator:
    """Runs one scan invocation.

    Per package: fetch metadata, apply the ignore policy, analyze age and
    license, then popularity, upgrade path, repository and vulnerabilities
    concurrently, and score. A failure while analyzing one package drops
    that package only.
    """

    def __init__(
        self,
        config: ScanConfig,
        registry: RegistryClient,
        source_host: SourceHostClient | None = None,
        *,
        ignore: IgnorePolicy | None = None,
        cache: PackageCache | None = None,
        pool: WorkerPool | None = None,
    ) -> None:
        self._config = config
        self._registry = registry
        self._source_host = source_host if config.github.enabled else None
        self._ignore = ignore or IgnoreMatcher(config.ignore)
        self._cache = cache
        self._pool = pool or WorkerPool(config.concurrency)
        self.state = ScanState.READ_DEPENDENCIES

    def _enter(self, state: ScanState) -> None:
        self.state = state
        log.debug("scan.state", state=state.value)

    async def scan(self, source: DependencySource) -> ScanResult:
        started = time.monotonic()
        self._enter(ScanState.READ_DEPENDENCIES)
        dependencies = source.get_all_dependencies(self._config.include_dev_dependencies)
        log.info("scan.start", project=source.name, dependencies=len(dependencies))

        self._enter(ScanState.FAN_OUT)

        def _failed(item: tuple[str, str], exc: Exception) -> None:
            log.warning("scan.package_failed", package=item[0], error=str(exc))

        outcomes = await self._pool.map(
            self._analyze_item, list(dependencies.items()), on_error=_failed
        )

        self._enter(ScanState.COLLECT)
        packages = [a for a in outcomes if a is not None]
        tree_summary = await self._tree_summary(source, dependencies)

        self._enter(ScanState.SUMMARIZE)
        summary = calculate_summary(packages)
        recommendations = generate_recommendations(packages)

        self._enter(ScanState.DETERMINE_EXIT)
        exit_code = determine_exit_code(packages, self._config.fail_on)

        result = ScanResult(
            meta=ScanMeta(
                version=__version__,
                timestamp=datetime.now(timezone.utc).isoformat(),
                project_type=self._config.project_type,
                scan_duration=round(time.monotonic() - started, 3),
            ),
            project=ProjectInfo(name=source.name, version=source.version),
            summary=summary,
            packages=packages,
            recommendations=recommendations,
            exit_code=exit_code,
            tree_summary=tree_summary,
        )
        self._enter(ScanState.DONE)
        log.info(
            "scan.done",
            total=summary.total,
            dropped=len(dependencies) - len(outcomes),
            exit_code=exit_code,
            duration=result.meta.scan_duration,
        )
        return result

    async def _analyze_item(self, item: tuple[str, str]) -> PackageAnalysis | None:
        name, declared = item
        return await self.analyze_package(name, declared)

    async def analyze_package(self, name: str, declared: str = "latest") -> PackageAnalysis | None:
        """Full analysis of one dependency; ``None`` when the ignore policy skips it."""
        if self._ignore(name):
            log.info("scan.package_ignored", package=name)
            return None
        metadata = await self._registry.fetch(name)
        if self._ignore(name, metadata):
            log.info("scan.package_ignored", package=name, reason="author")
            return None

        config = self._config
        age = analyze_age(metadata, config.age)
        license = analyze_license(metadata, config.project_type, config.license)

        current = metadata.version
        if config.upgrade_path.compare_declared_version:
            declared_version = parse_version_from_range(declared)
            if declared_version != "latest":
                current = declared_version

        popularity, upgrade_path, repository, vulnerability = await asyncio.gather(
            analyze_popularity(name, age.age_days, self._registry),
            analyze_upgrade_path(
                name,
                current,
                metadata.version,
                config.upgrade_path,
                source_host=self._source_host,
                repository_url=metadata.repository_url,
            ),
            self._repository(name, metadata.version, age.repository_url),
            self._vulnerability(name, metadata.version),
        )

        score = calculate_health_score(
            age,
            license,
            config,
            vulnerability=vulnerability,
            popularity=popularity,
            repository=repository,
        )
        return PackageAnalysis(
            package=name,
            version=metadata.version,
            age=age,
            license=license,
            score=score,
            overall_severity=overall_severity(age, license, vulnerability),
            popularity=popularity,
            upgrade_path=upgrade_path,
            repository=repository,
            vulnerability=vulnerability,
        )

    # ── optional enrichment ────────────────────────────────────────────────

    async def _repository(
        self, name: str, version: str, repository_url: str | None
    ) -> RepositoryAnalysis | None:
        if self._source_host is None or not repository_url:
            return None
        return await analyze_repository(name, version, repository_url, self._source_host)

    async def _vulnerability(self, name: str, version: str) -> VulnerabilityAnalysis | None:
        if self._source_host is None or not self._config.github.security.enabled:
            return None
        return await analyze_vulnerabilities(name, version, self._source_host)

    async def _tree_summary(
        self, source: DependencySource, dependencies: dict[str, str]
    ) -> DependencyTreeSummary | None:
        if not self._config.dependency_tree.enabled:
            return None
        builder = DependencyTreeBuilder(
            self._registry, self._config.dependency_tree, pool=self._pool, cache=self._cache
        )
        try:
            tree = await builder.build_tree(source.name, source.version, dependencies)
        except CircularDependencyError as exc:
            log.warning("scan.tree_aborted", error=str(exc))
            return None
        return tree.summary
