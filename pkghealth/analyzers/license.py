"""License analyzer: SPDX normalization, category, Blue Oak rating and score."""

from __future__ import annotations

import re

from pkghealth.core.config import LicenseConfig, ProjectType
from pkghealth.licenses.blue_oak import get_blue_oak_rating, is_legally_sound
from pkghealth.licenses.catalog import (
    COMMERCIAL_RESTRICTIVE_LICENSES,
    PERMISSIVE_LICENSES,
    WEAK_COPYLEFT_LICENSES,
    has_patent_clause,
)
from pkghealth.licenses.spdx import (
    LicenseExpression,
    LicenseRef,
    is_valid_spdx,
    normalize_license,
    parse_license_expression,
)
from pkghealth.models.analysis import BlueOakRating, LicenseAnalysis, LicenseCategory, Severity
from pkghealth.models.metadata import PackageMetadata

_COMMERCIAL_TYPES = ("commercial", "saas")

# Lower is more permissive.
_PERMISSIVENESS: dict[LicenseCategory, int] = {
    "commercial-friendly": 0,
    "commercial-warning": 1,
    "unknown": 2,
    "commercial-incompatible": 3,
    "unlicensed": 4,
}

_CategoryResult = tuple[LicenseCategory, str, str]  # (category, spdx id, reason)


def _matches_pattern(spdx_id: str, pattern: str) -> bool:
    regex = re.compile("^" + re.escape(pattern).replace(r"\*", ".*") + "$", re.IGNORECASE)
    # A bare pattern ("LGPL-2.1") also covers the normalized "-only" id.
    return any(regex.match(candidate) for candidate in (spdx_id, spdx_id.removesuffix("-only")))


def _in_table(spdx_id: str, table: tuple[str, ...]) -> bool:
    # Deprecated bare ids ("GPL-3.0") fall back to their "-only" form.
    return spdx_id in table or f"{spdx_id}-only" in table


def categorize(
    spdx_id: str, project_type: ProjectType, config: LicenseConfig
) -> tuple[LicenseCategory, str]:
    """Category and reason for a single SPDX id.

    Priority: deny list, allow list, warn list, then the built-in tables.
    """
    if any(_matches_pattern(spdx_id, p) for p in config.deny):
        return "commercial-incompatible", "Explicitly denied in configuration"
    if any(_matches_pattern(spdx_id, p) for p in config.allow):
        return "commercial-friendly", "Explicitly allowed in configuration"
    if any(_matches_pattern(spdx_id, p) for p in config.warn):
        return "commercial-warning", "Listed for review in configuration"

    if _in_table(spdx_id, COMMERCIAL_RESTRICTIVE_LICENSES):
        if project_type in _COMMERCIAL_TYPES:
            return (
                "commercial-incompatible",
                "Strong copyleft license incompatible with commercial use",
            )
        return "commercial-warning", "Copyleft license"
    if _in_table(spdx_id, WEAK_COPYLEFT_LICENSES):
        if project_type == "commercial":
            return "commercial-warning", "Weak copyleft license, review required"
        return "commercial-friendly", "Weak copyleft acceptable for non-commercial"
    if spdx_id in PERMISSIVE_LICENSES:
        return "commercial-friendly", "Permissive license"
    if spdx_id.startswith("AGPL") and project_type == "saas":
        return "commercial-incompatible", "AGPL requires source disclosure for network services"

    return (
        "unknown",
        f'License "{spdx_id}" is a valid SPDX license but not categorized for commercial '
        "use analysis. Review it manually or add it to the allow/deny list.",
    )


def _evaluate(
    expr: LicenseExpression, project_type: ProjectType, config: LicenseConfig
) -> _CategoryResult:
    """OR picks the most permissive operand, AND the most restrictive one."""
    if isinstance(expr, LicenseRef):
        category, reason = categorize(expr.id, project_type, config)
        return category, expr.id, reason

    results = [_evaluate(operand, project_type, config) for operand in expr.operands]
    if expr.operator == "OR":
        return min(results, key=lambda r: _PERMISSIVENESS[r[0]])
    return max(results, key=lambda r: _PERMISSIVENESS[r[0]])


def _has_choice(expr: LicenseExpression) -> bool:
    if isinstance(expr, LicenseRef):
        return False
    return expr.operator == "OR" or any(_has_choice(o) for o in expr.operands)


def _severity(category: LicenseCategory, config: LicenseConfig) -> Severity:
    if category == "commercial-friendly":
        return Severity.OK
    if category == "commercial-warning":
        return Severity.WARNING
    if category == "unknown":
        return Severity.WARNING if config.warn_on_unknown else Severity.INFO
    return Severity.CRITICAL


def _unlicensed(name: str, version: str, license: str, reason: str) -> LicenseAnalysis:
    return LicenseAnalysis(
        package=name,
        version=version,
        license=license,
        category="unlicensed",
        blue_oak_rating="unrated",
        severity=Severity.CRITICAL,
        is_dual_license=False,
        has_patent_clause=False,
        commercial_use=False,
        reason=reason,
    )


def analyze_license(
    metadata: PackageMetadata, project_type: ProjectType, config: LicenseConfig
) -> LicenseAnalysis:
    """Categorize the package's declared license for *project_type*."""
    name, version = metadata.name, metadata.version
    if not metadata.license or not metadata.license.strip():
        return _unlicensed(name, version, "UNLICENSED", "No license specified")

    normalized = normalize_license(metadata.license)
    if normalized.upper() == "UNLICENSED":
        return _unlicensed(name, version, "UNLICENSED", "Package is explicitly marked as unlicensed")
    if not is_valid_spdx(normalized):
        return _unlicensed(
            name,
            version,
            normalized,
            f'License "{normalized}" is not a valid SPDX license identifier. '
            "Check https://spdx.org/licenses/ for valid licenses.",
        )

    expr = parse_license_expression(normalized)
    category, spdx_id, reason = _evaluate(expr, project_type, config)
    rating = get_blue_oak_rating(spdx_id)

    return LicenseAnalysis(
        package=name,
        version=version,
        license=normalized,
        category=category,
        blue_oak_rating=rating,
        severity=_severity(category, config),
        is_dual_license=_has_choice(expr),
        has_patent_clause=config.check_patent_clauses and has_patent_clause(spdx_id),
        commercial_use=category == "commercial-friendly"
        or (category == "commercial-warning" and project_type == "open-source"),
        spdx_id=spdx_id,
        reason=reason,
    )


def calculate_license_score(
    category: LicenseCategory, rating: BlueOakRating, project_type: ProjectType
) -> float:
    if category == "commercial-friendly":
        score = 1.0
    elif category == "commercial-warning":
        score = 0.8 if project_type == "open-source" else 0.5
    elif category == "commercial-incompatible":
        score = 0.6 if project_type == "open-source" else 0.0
    elif category == "unknown":
        score = 0.3
    else:
        score = 0.0

    if is_legally_sound(rating):
        return min(1.0, score * 1.1)
    if rating == "lead":
        return max(0.0, score * 0.8)
    return score
