"""Per-package dimension results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


class Severity(str, Enum):
    """Total order ``ok < info < warning < critical``."""

    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.OK: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.CRITICAL: 3,
}


def max_severity(*severities: Severity | None) -> Severity:
    present = [s for s in severities if s is not None]
    return max(present, default=Severity.OK)


LicenseCategory = Literal[
    "commercial-friendly",
    "commercial-warning",
    "commercial-incompatible",
    "unknown",
    "unlicensed",
]
BlueOakRating = Literal["gold", "silver", "bronze", "lead", "unrated"]
PopularityTier = Literal["very-popular", "popular", "moderate", "niche", "unpopular"]
UpdateType = Literal["patch", "minor", "major"]
Rating = Literal["excellent", "good", "fair", "poor"]


@dataclass
class AgeAnalysis:
    package: str
    version: str
    last_publish: str
    age_days: int
    age_human: str
    deprecated: bool
    severity: Severity
    has_repository: bool
    deprecation_message: str | None = None
    repository_url: str | None = None


@dataclass
class LicenseAnalysis:
    package: str
    version: str
    license: str
    category: LicenseCategory
    blue_oak_rating: BlueOakRating
    severity: Severity
    is_dual_license: bool
    has_patent_clause: bool
    commercial_use: bool
    spdx_id: str | None = None
    reason: str | None = None


@dataclass
class PopularityAnalysis:
    package: str
    weekly_downloads: int
    score: float
    tier: PopularityTier
    severity: Severity


@dataclass
class UpgradeStep:
    from_version: str
    to_version: str
    description: str


@dataclass
class Alternative:
    name: str
    description: str
    license: str


@dataclass
class ReleaseNote:
    tag: str
    url: str
    published_at: str | None = None


@dataclass
class MigrationResources:
    migration_guide: str | None = None
    changelog: str | None = None
    codemods: list[str] = field(default_factory=list)
    release_notes: list[ReleaseNote] = field(default_factory=list)


@dataclass
class UpgradePath:
    package: str
    current_version: str
    latest_version: str
    type: UpdateType | None
    risk: Literal["low", "medium", "high"]
    breaking_changes: int
    estimated_effort: str
    severity: Severity
    steps: list[UpgradeStep] = field(default_factory=list)
    resources: MigrationResources | None = None
    alternatives: list[Alternative] | None = None


@dataclass
class RepositoryAnalysis:
    package: str
    version: str
    url: str
    severity: Severity
    open_issues: int | None = None
    last_commit: str | None = None
    release_frequency: int | None = None
    stars: int | None = None
    forks: int | None = None
    is_archived: bool | None = None


@dataclass
class Advisory:
    ghsa_id: str
    summary: str
    severity: Literal["critical", "high", "moderate", "low"]
    vulnerable_range: str | None = None
    patched_version: str | None = None
    url: str | None = None
    published_at: str | None = None


@dataclass
class VulnerabilityAnalysis:
    package: str
    version: str
    total: int
    critical: int
    high: int
    moderate: int
    low: int
    severity: Severity
    advisories: list[Advisory] = field(default_factory=list)
    available: bool = True


@dataclass
class HealthScore:
    overall: int
    rating: Rating
    dimensions: dict[str, float]


@dataclass
class PackageAnalysis:
    package: str
    version: str
    age: AgeAnalysis
    license: LicenseAnalysis
    score: HealthScore
    overall_severity: Severity
    popularity: PopularityAnalysis | None = None
    upgrade_path: UpgradePath | None = None
    repository: RepositoryAnalysis | None = None
    vulnerability: VulnerabilityAnalysis | None = None
