"""Tests for license categorization and scoring."""

from __future__ import annotations

import pytest

from pkghealth.analyzers.license import analyze_license, calculate_license_score, categorize
from pkghealth.core.config import LicenseConfig, config_for_project_type
from pkghealth.models.analysis import Severity

# ── categorize ──


class TestCategorize:
    def test_deny_beats_allow(self):
        config = LicenseConfig(allow=["MIT"], deny=["MIT"])
        assert categorize("MIT", "commercial", config)[0] == "commercial-incompatible"

    def test_allow_wildcard_is_case_insensitive(self):
        config = LicenseConfig(allow=["bsd-*"], warn=[])
        category, reason = categorize("BSD-2-Clause", "commercial", config)
        assert category == "commercial-friendly"
        assert "allowed" in reason

    def test_warn_list(self):
        config = LicenseConfig(allow=[], warn=["MPL-2.0"])
        assert categorize("MPL-2.0", "personal", config)[0] == "commercial-warning"

    @pytest.mark.parametrize("pattern", ["LGPL-2.1", "LGPL-2.1-only", "lgpl-*"])
    def test_bare_pattern_matches_normalized_id(self, pattern):
        config = LicenseConfig(allow=[], warn=[pattern])
        category, reason = categorize("LGPL-2.1-only", "personal", config)
        assert category == "commercial-warning"
        assert "review" in reason

    def test_bare_deny_pattern_matches_normalized_id(self):
        config = LicenseConfig(allow=[], deny=["GPL-2.0"], warn=[])
        assert categorize("GPL-2.0-only", "open-source", config)[0] == "commercial-incompatible"
        assert categorize("GPL-2.0-or-later", "open-source", config)[0] == "commercial-warning"

    def test_strong_copyleft_by_project_type(self):
        config = LicenseConfig(allow=[], warn=[])
        assert categorize("GPL-3.0-only", "commercial", config)[0] == "commercial-incompatible"
        assert categorize("GPL-3.0-only", "saas", config)[0] == "commercial-incompatible"
        assert categorize("GPL-3.0-only", "open-source", config)[0] == "commercial-warning"

    def test_deprecated_bare_id_uses_only_form(self):
        config = LicenseConfig(allow=[], warn=[])
        assert categorize("GPL-2.0", "commercial", config)[0] == "commercial-incompatible"

    def test_weak_copyleft(self):
        config = LicenseConfig(allow=[], warn=[])
        assert categorize("LGPL-2.1-only", "commercial", config)[0] == "commercial-warning"
        assert categorize("LGPL-2.1-only", "personal", config)[0] == "commercial-friendly"

    def test_uncategorized_is_unknown(self):
        config = LicenseConfig(allow=[], warn=[])
        category, reason = categorize("Beerware", "commercial", config)
        assert category == "unknown"
        assert "Beerware" in reason


# ── analyze_license ──


class TestAnalyzeLicense:
    def test_gpl_on_commercial_is_critical(self, metadata_factory):
        config = config_for_project_type("commercial")
        result = analyze_license(metadata_factory(license="GPL-3.0"), "commercial", config.license)

        assert result.category == "commercial-incompatible"
        assert result.severity is Severity.CRITICAL
        assert result.license == "GPL-3.0-only"
        assert result.commercial_use is False

    def test_mit_is_friendly_gold(self, metadata_factory):
        result = analyze_license(metadata_factory(license="MIT"), "commercial", LicenseConfig())

        assert result.category == "commercial-friendly"
        assert result.severity is Severity.OK
        assert result.blue_oak_rating == "gold"
        assert result.commercial_use is True
        assert result.is_dual_license is False

    def test_or_picks_most_permissive(self, metadata_factory):
        meta = metadata_factory(license="(MIT OR GPL-3.0)")
        result = analyze_license(meta, "commercial", LicenseConfig())

        assert result.category == "commercial-friendly"
        assert result.spdx_id == "MIT"
        assert result.is_dual_license is True

    def test_and_picks_most_restrictive(self, metadata_factory):
        meta = metadata_factory(license="MIT AND GPL-3.0-only")
        result = analyze_license(meta, "commercial", LicenseConfig())

        assert result.category == "commercial-incompatible"
        assert result.spdx_id == "GPL-3.0-only"
        assert result.is_dual_license is False

    @pytest.mark.parametrize("license", [None, "", "   "])
    def test_missing_license(self, metadata_factory, license):
        result = analyze_license(metadata_factory(license=license), "commercial", LicenseConfig())
        assert result.category == "unlicensed"
        assert result.license == "UNLICENSED"
        assert result.severity is Severity.CRITICAL

    def test_explicit_unlicensed(self, metadata_factory):
        result = analyze_license(
            metadata_factory(license="UNLICENSED"), "commercial", LicenseConfig()
        )
        assert result.category == "unlicensed"
        assert "explicitly" in result.reason

    def test_invalid_spdx_is_unlicensed(self, metadata_factory):
        result = analyze_license(
            metadata_factory(license="SEE LICENSE IN LICENSE.txt"), "commercial", LicenseConfig()
        )
        assert result.category == "unlicensed"
        assert "not a valid SPDX" in result.reason

    def test_unknown_severity_follows_warn_on_unknown(self, metadata_factory):
        meta = metadata_factory(license="Beerware")
        warn = analyze_license(meta, "commercial", LicenseConfig(allow=[], warn=[]))
        quiet = analyze_license(
            meta, "commercial", LicenseConfig(allow=[], warn=[], warn_on_unknown=False)
        )
        assert warn.severity is Severity.WARNING
        assert quiet.severity is Severity.INFO

    def test_patent_clause_respects_config(self, metadata_factory):
        meta = metadata_factory(license="Apache-2.0")
        assert analyze_license(meta, "commercial", LicenseConfig()).has_patent_clause is True
        off = LicenseConfig(check_patent_clauses=False)
        assert analyze_license(meta, "commercial", off).has_patent_clause is False

    def test_startup_preset_flags_lgpl_for_review(self, metadata_factory):
        config = config_for_project_type("startup")
        result = analyze_license(
            metadata_factory("glib-bindings", license="LGPL-2.1"), "startup", config.license
        )
        assert result.license == "LGPL-2.1-only"
        assert result.category == "commercial-warning"
        assert result.severity is Severity.WARNING

    def test_copyleft_usable_in_open_source(self, metadata_factory):
        config = LicenseConfig(allow=[], warn=[])
        result = analyze_license(metadata_factory(license="GPL-3.0-only"), "open-source", config)
        assert result.category == "commercial-warning"
        assert result.commercial_use is True


# ── Scoring ──


class TestLicenseScore:
    def test_friendly_gold_capped_at_one(self):
        assert calculate_license_score("commercial-friendly", "gold", "commercial") == 1.0

    def test_warning_by_project_type(self):
        assert calculate_license_score("commercial-warning", "unrated", "commercial") == 0.5
        assert calculate_license_score("commercial-warning", "unrated", "open-source") == 0.8

    def test_incompatible(self):
        assert calculate_license_score("commercial-incompatible", "unrated", "commercial") == 0.0
        assert calculate_license_score("commercial-incompatible", "unrated", "open-source") == 0.6

    def test_lead_penalty(self):
        assert calculate_license_score("commercial-friendly", "lead", "commercial") == pytest.approx(
            0.8
        )

    def test_unknown_and_unlicensed(self):
        assert calculate_license_score("unknown", "unrated", "commercial") == pytest.approx(0.3)
        assert calculate_license_score("unlicensed", "unrated", "commercial") == 0.0
