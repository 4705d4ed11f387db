"""Data models shared by the scan pipeline."""

from pkghealth.models.analysis import (
    Advisory,
    AgeAnalysis,
    Alternative,
    HealthScore,
    LicenseAnalysis,
    MigrationResources,
    PackageAnalysis,
    PopularityAnalysis,
    ReleaseNote,
    RepositoryAnalysis,
    Severity,
    UpgradePath,
    UpgradeStep,
    VulnerabilityAnalysis,
    max_severity,
)
from pkghealth.models.metadata import (
    Active,
    Deprecated,
    DeprecationState,
    PackageMetadata,
    Person,
    RepositoryRef,
    StructuredRepository,
    Url,
)
from pkghealth.models.scan import (
    ProjectInfo,
    Recommendation,
    ScanMeta,
    ScanResult,
    ScanSummary,
)
from pkghealth.models.tree import DependencyTree, DependencyTreeSummary, TreeNode

__all__ = [
    "Active",
    "Advisory",
    "AgeAnalysis",
    "Alternative",
    "DependencyTree",
    "DependencyTreeSummary",
    "Deprecated",
    "DeprecationState",
    "HealthScore",
    "LicenseAnalysis",
    "MigrationResources",
    "PackageAnalysis",
    "PackageMetadata",
    "Person",
    "PopularityAnalysis",
    "ProjectInfo",
    "Recommendation",
    "ReleaseNote",
    "RepositoryAnalysis",
    "RepositoryRef",
    "ScanMeta",
    "ScanResult",
    "ScanSummary",
    "Severity",
    "StructuredRepository",
    "TreeNode",
    "UpgradePath",
    "UpgradeStep",
    "Url",
    "VulnerabilityAnalysis",
    "max_severity",
]
