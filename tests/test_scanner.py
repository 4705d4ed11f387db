"""Tests for scan orchestration, aggregation and exit codes."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from pkghealth.core.config import ScanConfig, config_for_project_type
from pkghealth.exceptions import NetworkError, SourceHostError
from pkghealth.manifest import PackageManifest
from pkghealth.models.analysis import (
    Advisory,
    AgeAnalysis,
    HealthScore,
    LicenseAnalysis,
    PackageAnalysis,
    Severity,
)
from pkghealth.models.metadata import Deprecated, Person
from pkghealth.scanner import (
    ScanOrchestrator,
    ScanState,
    calculate_summary,
    determine_exit_code,
    generate_recommendations,
    risk_level,
)
from pkghealth.sourcehost.github import GitHubClient, RepoStats


def _analysis(
    name: str,
    severity: Severity = Severity.OK,
    score: int = 90,
    rating: str = "excellent",
    deprecated: bool = False,
    category: str = "commercial-friendly",
) -> PackageAnalysis:
    age = AgeAnalysis(
        package=name,
        version="1.0.0",
        last_publish="2025-01-01T00:00:00Z",
        age_days=200,
        age_human="6 months",
        deprecated=deprecated,
        severity=Severity.CRITICAL if deprecated else Severity.OK,
        has_repository=True,
        deprecation_message="use something else" if deprecated else None,
    )
    license = LicenseAnalysis(
        package=name,
        version="1.0.0",
        license="MIT",
        category=category,
        blue_oak_rating="gold",
        severity=Severity.OK,
        is_dual_license=False,
        has_patent_clause=False,
        commercial_use=True,
    )
    return PackageAnalysis(
        package=name,
        version="1.0.0",
        age=age,
        license=license,
        score=HealthScore(overall=score, rating=rating, dimensions={}),
        overall_severity=severity,
    )


def _manifest(dependencies: dict[str, str], **extra) -> PackageManifest:
    return PackageManifest(name="my-app", version="1.0.0", dependencies=dependencies, **extra)


def _source_host(advisories=None, stats: RepoStats | None = None) -> AsyncMock:
    host = AsyncMock()
    host.get_advisories.return_value = advisories or []
    host.get_repo_stats.return_value = stats or RepoStats(
        stars=10,
        forks=1,
        open_issues=3,
        archived=False,
        last_push="2025-06-01T00:00:00Z",
        created_at="2020-06-01T00:00:00Z",
    )
    host.get_releases.return_value = []
    return host


# ── Aggregation ──


class TestRiskLevel:
    @pytest.mark.parametrize(
        ("critical", "warning", "average", "expected"),
        [
            (1, 0, 95, "critical"),
            (0, 0, 39, "critical"),
            (0, 6, 95, "high"),
            (0, 0, 59, "high"),
            (0, 1, 95, "medium"),
            (0, 0, 79, "medium"),
            (0, 0, 80, "low"),
        ],
    )
    def test_risk(self, critical, warning, average, expected):
        assert risk_level(critical, warning, average) == expected


class TestSummary:
    def test_counts_and_average(self):
        packages = [
            _analysis("a", Severity.OK, 90, "excellent"),
            _analysis("b", Severity.WARNING, 71, "fair"),
        ]
        summary = calculate_summary(packages)

        assert summary.total == 2
        assert summary.average_score == 81  # 80.5 rounds half up
        assert summary.by_rating == {"excellent": 1, "good": 0, "fair": 1, "poor": 0}
        assert summary.by_severity == {"ok": 1, "info": 0, "warning": 1, "critical": 0}
        assert summary.risk_level == "medium"
        assert summary.warning == 1

    def test_empty(self):
        summary = calculate_summary([])
        assert summary.total == 0
        assert summary.average_score == 0
        assert summary.risk_level == "critical"


class TestRecommendations:
    def test_grouped_by_priority(self):
        packages = [
            _analysis("zeta", score=30, rating="poor"),
            _analysis("beta", Severity.CRITICAL, category="unlicensed"),
            _analysis("alpha", Severity.CRITICAL, deprecated=True),
            _analysis("fine"),
        ]
        recs = generate_recommendations(packages)

        assert [(r.package, r.priority) for r in recs] == [
            ("alpha", "high"),
            ("beta", "high"),
            ("zeta", "medium"),
        ]
        assert recs[0].effort == "2-4 hours"
        assert "deprecated" in recs[0].reason
        assert recs[1].reason == "Package has no license"
        assert "30/100" in recs[2].reason


class TestExitCode:
    def test_critical_always_two(self):
        packages = [_analysis("a", Severity.CRITICAL)]
        assert determine_exit_code(packages, "critical") == 2
        assert determine_exit_code(packages, "info") == 2

    def test_warning_gate(self):
        packages = [_analysis("a", Severity.WARNING)]
        assert determine_exit_code(packages, "critical") == 0
        assert determine_exit_code(packages, "warning") == 1

    def test_info_only_passes_warning_gate(self):
        packages = [_analysis("a", Severity.INFO), _analysis("b", Severity.OK)]
        assert determine_exit_code(packages, "warning") == 0
        assert determine_exit_code(packages, "info") == 1

    def test_none_never_fails(self):
        assert determine_exit_code([_analysis("a", Severity.CRITICAL)], "none") == 0


# ── ScanOrchestrator ──


class TestScan:
    @pytest.mark.anyio()
    async def test_failed_package_is_dropped(self, registry_factory, metadata_factory):
        registry = registry_factory(
            {"express": metadata_factory("express"), "lodash": metadata_factory("lodash")},
            failures={"flaky": NetworkError("connection reset", "flaky")},
        )
        orchestrator = ScanOrchestrator(ScanConfig(), registry)

        result = await orchestrator.scan(
            _manifest({"express": "^4.0.0", "lodash": "^4.0.0", "flaky": "^1.0.0"})
        )

        assert result.summary.total == 2
        assert sorted(p.package for p in result.packages) == ["express", "lodash"]
        assert orchestrator.state is ScanState.DONE
        assert result.exit_code == 0
        assert result.project.name == "my-app"

    @pytest.mark.anyio()
    async def test_result_is_json_serializable(self, registry_factory, metadata_factory):
        registry = registry_factory({"express": metadata_factory("express")})
        result = await ScanOrchestrator(ScanConfig(), registry).scan(_manifest({"express": "*"}))

        payload = json.loads(json.dumps(result.to_dict()))
        assert payload["packages"][0]["overall_severity"] == "ok"
        assert payload["meta"]["project_type"] == "commercial"
        assert payload["meta"]["scan_duration"] >= 0
        assert payload["tree_summary"] is None

    @pytest.mark.anyio()
    async def test_gpl_dependency_fails_commercial_scan(self, registry_factory, metadata_factory):
        registry = registry_factory({"gpl-lib": metadata_factory("gpl-lib", license="GPL-3.0")})
        config = config_for_project_type("commercial")

        result = await ScanOrchestrator(config, registry).scan(_manifest({"gpl-lib": "^1.0.0"}))

        assert result.exit_code == 2
        assert result.summary.risk_level == "critical"
        assert result.recommendations[0].package == "gpl-lib"
        assert "incompatible" in result.recommendations[0].reason

    @pytest.mark.anyio()
    async def test_ignored_packages_are_never_fetched(self, registry_factory, metadata_factory):
        registry = registry_factory({"express": metadata_factory("express")})
        config = config_for_project_type("commercial", {"ignore": {"scopes": ["@internal/*"]}})

        result = await ScanOrchestrator(config, registry).scan(
            _manifest({"express": "^4.0.0", "@internal/logger": "^1.0.0"})
        )

        assert [p.package for p in result.packages] == ["express"]
        assert registry.fetched == ["express"]

    @pytest.mark.anyio()
    async def test_author_ignore_applies_after_fetch(self, registry_factory, metadata_factory):
        registry = registry_factory(
            {"vendored": metadata_factory("vendored", author=Person(name="ACME Inc"))}
        )
        config = config_for_project_type("commercial", {"ignore": {"authors": ["acme"]}})

        result = await ScanOrchestrator(config, registry).scan(_manifest({"vendored": "1.0.0"}))

        assert result.packages == []
        assert registry.fetched == ["vendored"]

    @pytest.mark.anyio()
    async def test_dev_dependencies_follow_config(self, registry_factory, metadata_factory):
        registry = registry_factory(
            {"express": metadata_factory("express"), "jest": metadata_factory("jest")}
        )
        manifest = _manifest({"express": "^4.0.0"}, dev_dependencies={"jest": "^29.0.0"})

        without = await ScanOrchestrator(ScanConfig(), registry).scan(manifest)
        config = ScanConfig(include_dev_dependencies=True)
        with_dev = await ScanOrchestrator(config, registry).scan(manifest)

        assert without.summary.total == 1
        assert with_dev.summary.total == 2

    @pytest.mark.anyio()
    async def test_deprecated_package_recommendation(self, registry_factory, metadata_factory):
        registry = registry_factory(
            {"request": metadata_factory("request", "2.88.2", deprecation=Deprecated("gone"))}
        )
        result = await ScanOrchestrator(ScanConfig(), registry).scan(
            _manifest({"request": "^2.88.0"})
        )

        analysis = result.packages[0]
        assert analysis.overall_severity is Severity.CRITICAL
        assert analysis.score.dimensions["deprecation"] == 0.0
        rec = result.recommendations[0]
        assert rec.priority == "high"
        assert rec.reason == "Package is deprecated: gone"

    @pytest.mark.anyio()
    async def test_declared_version_comparison(self, registry_factory, metadata_factory):
        registry = registry_factory({"express": metadata_factory("express", "5.0.0")})
        config = config_for_project_type(
            "commercial", {"upgradePath": {"compareDeclaredVersion": True}}
        )

        result = await ScanOrchestrator(config, registry).scan(_manifest({"express": "^4.18.2"}))

        upgrade = result.packages[0].upgrade_path
        assert upgrade.current_version == "4.18.2"
        assert upgrade.type == "major"

    @pytest.mark.anyio()
    async def test_tree_summary_attached(self, registry_factory, metadata_factory):
        registry = registry_factory(
            {
                "express": metadata_factory("express", dependencies={"accepts": "~1.3.8"}),
                "accepts": metadata_factory("accepts", "1.3.8"),
            }
        )
        config = config_for_project_type("commercial", {"dependencyTree": {"enabled": True}})

        result = await ScanOrchestrator(config, registry).scan(_manifest({"express": "^4.0.0"}))

        assert result.tree_summary.total_nodes == 3
        assert result.tree_summary.unique_packages == 2
        assert [p.package for p in result.packages] == ["express"]

    @pytest.mark.anyio()
    async def test_circular_abort_leaves_no_tree(self, registry_factory, metadata_factory):
        registry = registry_factory(
            {
                "a": metadata_factory("a", dependencies={"b": "1.3.0"}),
                "b": metadata_factory("b", dependencies={"a": "1.3.0"}),
            }
        )
        config = config_for_project_type(
            "commercial", {"dependencyTree": {"enabled": True, "stopOnCircular": True}}
        )

        result = await ScanOrchestrator(config, registry).scan(_manifest({"a": "1.3.0"}))

        assert result.tree_summary is None
        assert result.summary.total == 1


# ── GitHub enrichment ──


class TestSourceHostEnrichment:
    @pytest.mark.anyio()
    async def test_source_host_unused_when_disabled(self, registry_factory, metadata_factory):
        registry = registry_factory({"express": metadata_factory("express")})
        host = _source_host()

        result = await ScanOrchestrator(ScanConfig(), registry, host).scan(
            _manifest({"express": "^4.0.0"})
        )

        assert result.packages[0].repository is None
        assert result.packages[0].vulnerability is None
        host.get_repo_stats.assert_not_awaited()

    @pytest.mark.anyio()
    async def test_critical_advisory_escalates(self, registry_factory, metadata_factory):
        registry = registry_factory({"lodash": metadata_factory("lodash", "4.17.20")})
        advisory = Advisory(ghsa_id="GHSA-1", summary="Prototype pollution", severity="critical")
        host = _source_host(advisories=[advisory])
        config = config_for_project_type("commercial", {"github": {"enabled": True}})

        result = await ScanOrchestrator(config, registry, host).scan(
            _manifest({"lodash": "^4.17.0"})
        )

        analysis = result.packages[0]
        assert analysis.vulnerability.critical == 1
        assert analysis.overall_severity is Severity.CRITICAL
        assert analysis.repository.stars == 10
        assert analysis.repository.url == "https://github.com/example/left-pad"
        assert result.exit_code == 2
        assert "critical security advisories" in result.recommendations[0].reason

    @pytest.mark.anyio()
    async def test_source_host_failures_are_tolerated(self, registry_factory, metadata_factory):
        registry = registry_factory({"lodash": metadata_factory("lodash")})
        host = _source_host()
        host.get_repo_stats.side_effect = SourceHostError("rate limited", 403)
        host.get_advisories.side_effect = SourceHostError("rate limited", 403)
        config = config_for_project_type("commercial", {"github": {"enabled": True}})

        result = await ScanOrchestrator(config, registry, host).scan(_manifest({"lodash": "*"}))

        analysis = result.packages[0]
        assert analysis.vulnerability.available is False
        assert analysis.vulnerability.severity is Severity.INFO
        assert analysis.repository.severity is Severity.INFO
        assert analysis.repository.stars is None

    @pytest.mark.anyio()
    async def test_unexpected_source_host_errors_keep_package(
        self, registry_factory, metadata_factory
    ):
        registry = registry_factory({"lodash": metadata_factory("lodash")})
        host = _source_host()
        host.get_repo_stats.side_effect = KeyError("stargazers_count")
        host.get_advisories.side_effect = AttributeError("'NoneType' object has no attribute 'get'")
        host.get_releases.side_effect = RuntimeError("boom")
        config = config_for_project_type(
            "commercial",
            {
                "github": {"enabled": True},
                "upgradePath": {"compareDeclaredVersion": True, "fetchChangelogs": True},
            },
        )

        result = await ScanOrchestrator(config, registry, host).scan(
            _manifest({"lodash": "^0.9.0"})
        )

        assert result.summary.total == 1
        analysis = result.packages[0]
        assert analysis.vulnerability.available is False
        assert analysis.repository.severity is Severity.INFO
        assert analysis.upgrade_path.resources.release_notes == []

    @pytest.mark.anyio()
    async def test_null_advisory_nodes_from_github(self, registry_factory, metadata_factory):
        registry = registry_factory({"lodash": metadata_factory("lodash")})

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/graphql":
                payload = {"data": {"securityVulnerabilities": {"nodes": [None]}}}
                return httpx.Response(200, json=payload)
            return httpx.Response(404, json={"message": "Not Found"})

        config = config_for_project_type("commercial", {"github": {"enabled": True}})
        async with GitHubClient("ghp_test", transport=httpx.MockTransport(handler)) as host:
            result = await ScanOrchestrator(config, registry, host).scan(
                _manifest({"lodash": "*"})
            )

        assert result.summary.total == 1
        vulnerability = result.packages[0].vulnerability
        assert vulnerability.available is True
        assert vulnerability.total == 0
        assert vulnerability.severity is Severity.OK

    @pytest.mark.anyio()
    async def test_security_lookup_can_be_disabled(self, registry_factory, metadata_factory):
        registry = registry_factory({"lodash": metadata_factory("lodash")})
        host = _source_host()
        config = config_for_project_type(
            "commercial", {"github": {"enabled": True, "security": {"enabled": False}}}
        )

        await ScanOrchestrator(config, registry, host).scan(_manifest({"lodash": "*"}))
        host.get_advisories.assert_not_awaited()
