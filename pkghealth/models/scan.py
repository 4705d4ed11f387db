"""Scan-level aggregates: the ScanResult artifact and its parts."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pkghealth.models.analysis import PackageAnalysis
from pkghealth.models.tree import DependencyTreeSummary

RiskLevel = Literal["low", "medium", "high", "critical"]
Priority = Literal["high", "medium", "low"]


@dataclass
class ScanSummary:
    total: int
    average_score: int
    risk_level: RiskLevel
    by_rating: dict[str, int] = field(default_factory=dict)
    by_severity: dict[str, int] = field(default_factory=dict)

    @property
    def critical(self) -> int:
        return self.by_severity.get("critical", 0)

    @property
    def warning(self) -> int:
        return self.by_severity.get("warning", 0)

    @property
    def info(self) -> int:
        return self.by_severity.get("info", 0)


@dataclass
class Recommendation:
    package: str
    priority: Priority
    reason: str
    action: str
    effort: str | None = None


@dataclass
class ScanMeta:
    version: str
    timestamp: str
    project_type: str
    scan_duration: float


@dataclass
class ProjectInfo:
    name: str
    version: str


@dataclass
class ScanResult:
    meta: ScanMeta
    project: ProjectInfo
    summary: ScanSummary
    packages: list[PackageAnalysis]
    recommendations: list[Recommendation]
    exit_code: int
    tree_summary: DependencyTreeSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self, dict_factory=_json_factory)


def _json_factory(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in items}
