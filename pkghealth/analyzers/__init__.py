"""Per-dimension package analyzers and the health scorer."""

from pkghealth.analyzers.age import analyze_age, calculate_age_score
from pkghealth.analyzers.license import analyze_license, calculate_license_score
from pkghealth.analyzers.popularity import analyze_popularity, calculate_popularity_score
from pkghealth.analyzers.repository import analyze_repository
from pkghealth.analyzers.scorer import calculate_health_score, overall_severity
from pkghealth.analyzers.upgrade import analyze_upgrade_path
from pkghealth.analyzers.vulnerability import analyze_vulnerabilities

__all__ = [
    "analyze_age",
    "analyze_license",
    "analyze_popularity",
    "analyze_repository",
    "analyze_upgrade_path",
    "analyze_vulnerabilities",
    "calculate_age_score",
    "calculate_health_score",
    "calculate_license_score",
    "calculate_popularity_score",
    "overall_severity",
]
