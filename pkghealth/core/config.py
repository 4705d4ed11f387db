"""Scan configuration: pydantic models, project-type presets and a JSON loader."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel, to_snake

from pkghealth.exceptions import ConfigError, ParseError
from pkghealth.licenses.catalog import (
    COMMERCIAL_RESTRICTIVE_LICENSES,
    PERMISSIVE_LICENSES,
    WEAK_COPYLEFT_LICENSES,
)
from pkghealth.utils.time import parse_time_threshold

ProjectType = Literal[
    "commercial",
    "saas",
    "open-source",
    "library",
    "personal",
    "educational",
    "startup",
    "government",
    "internal",
    "custom",
]
FailOn = Literal["critical", "warning", "info", "none"]

DEFAULT_ALLOW = [
    "MIT",
    "ISC",
    "BSD-2-Clause",
    "BSD-3-Clause",
    "Apache-2.0",
    "Unlicense",
    "CC0-1.0",
    "0BSD",
    "Zlib",
    "BSL-1.0",
]
DEFAULT_WARN = ["LGPL-2.1", "LGPL-3.0", "MPL-2.0", "EPL-1.0", "EPL-2.0"]


class _ConfigModel(BaseModel):
    """Accepts both ``snake_case`` and ``camelCase`` keys; rejects unknown ones."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class AgeConfig(_ConfigModel):
    warn: str = "2y"
    critical: str = "5y"
    check_deprecated: bool = True
    check_repository: bool = True

    @field_validator("warn", "critical")
    @classmethod
    def _valid_threshold(cls, value: str) -> str:
        try:
            parse_time_threshold(value)
        except ParseError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @model_validator(mode="after")
    def _ordered(self) -> AgeConfig:
        if self.critical_days < 1:
            raise ValueError("age.critical must be at least one day")
        if self.warn_days > self.critical_days:
            raise ValueError("age.warn must not exceed age.critical")
        return self

    @property
    def warn_days(self) -> int:
        return parse_time_threshold(self.warn)

    @property
    def critical_days(self) -> int:
        return parse_time_threshold(self.critical)


class LicenseConfig(_ConfigModel):
    allow: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOW))
    deny: list[str] = Field(default_factory=list)
    warn: list[str] = Field(default_factory=lambda: list(DEFAULT_WARN))
    warn_on_unknown: bool = True
    check_patent_clauses: bool = True


class Boosters(_ConfigModel):
    age: float = Field(1.5, ge=0)
    deprecation: float = Field(4.0, ge=0)
    license: float = Field(3.0, ge=0)
    vulnerability: float = Field(2.0, ge=0)
    popularity: float = Field(1.0, ge=0)
    repository: float = Field(2.0, ge=0)
    update_frequency: float = Field(1.5, ge=0)


class RatingBands(_ConfigModel):
    """Lower bounds (inclusive) of each rating band; anything below ``fair`` is poor."""

    excellent: int = Field(90, ge=0, le=100)
    good: int = Field(75, ge=0, le=100)
    fair: int = Field(60, ge=0, le=100)

    @model_validator(mode="after")
    def _monotonic(self) -> RatingBands:
        if not self.excellent > self.good > self.fair:
            raise ValueError("rating bands must satisfy excellent > good > fair")
        return self


class ScoringConfig(_ConfigModel):
    enabled: bool = True
    boosters: Boosters = Field(default_factory=Boosters)
    rating_bands: RatingBands = Field(default_factory=RatingBands)

    @model_validator(mode="after")
    def _some_weight(self) -> ScoringConfig:
        if sum(self.boosters.model_dump().values()) <= 0:
            raise ValueError("at least one scoring booster must be positive")
        return self


class IgnoreConfig(_ConfigModel):
    packages: list[str] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)
    prefixes: list[str] = Field(default_factory=list)
    authors: list[str] = Field(default_factory=list)
    reasons: dict[str, str] = Field(default_factory=dict)


class CacheConfig(_ConfigModel):
    enabled: bool = True
    ttl: float = Field(3600, gt=0)  # seconds


class GitHubSecurityConfig(_ConfigModel):
    enabled: bool = True


class GitHubConfig(_ConfigModel):
    enabled: bool = False
    token: str | None = None
    security: GitHubSecurityConfig = Field(default_factory=GitHubSecurityConfig)

    def resolved_token(self) -> str | None:
        """Explicit token, else GITHUB_TOKEN / GH_TOKEN from the environment."""
        return self.token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")


class UpgradePathConfig(_ConfigModel):
    enabled: bool = True
    analyze_breaking_changes: bool = True
    suggest_alternatives: bool = True
    fetch_changelogs: bool = False
    estimate_effort: bool = True
    # Off: the registry's latest version is both current and latest.
    compare_declared_version: bool = False


class DependencyTreeConfig(_ConfigModel):
    enabled: bool = False
    max_depth: int = Field(3, ge=0)
    analyze_transitive: bool = True
    detect_circular: bool = True
    stop_on_circular: bool = False
    cache_trees: bool = True


class ScanConfig(_ConfigModel):
    project_type: ProjectType = "commercial"
    age: AgeConfig = Field(default_factory=AgeConfig)
    license: LicenseConfig = Field(default_factory=LicenseConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    ignore: IgnoreConfig = Field(default_factory=IgnoreConfig)
    include_dev_dependencies: bool = False
    fail_on: FailOn = "critical"
    cache: CacheConfig = Field(default_factory=CacheConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    upgrade_path: UpgradePathConfig = Field(default_factory=UpgradePathConfig)
    dependency_tree: DependencyTreeConfig = Field(default_factory=DependencyTreeConfig)
    concurrency: int = Field(10, ge=1, le=100)
    request_timeout: float = Field(10.0, gt=0)


# ── project-type presets ───────────────────────────────────────────────────

_STRICT_DENY = [
    *COMMERCIAL_RESTRICTIVE_LICENSES,
    "GPL-1.0",
    "GPL-2.0",
    "GPL-3.0",
    "AGPL-1.0",
    "AGPL-3.0",
]


def _boosters(
    age: float,
    deprecation: float,
    license: float,
    vulnerability: float,
    popularity: float,
    repository: float,
    update_frequency: float,
) -> dict[str, float]:
    return {
        "age": age,
        "deprecation": deprecation,
        "license": license,
        "vulnerability": vulnerability,
        "popularity": popularity,
        "repository": repository,
        "update_frequency": update_frequency,
    }


_PRESETS: dict[str, dict[str, Any]] = {
    "commercial": {
        "license": {
            "allow": DEFAULT_ALLOW,
            "deny": _STRICT_DENY,
            "warn": DEFAULT_WARN,
            "warn_on_unknown": True,
            "check_patent_clauses": True,
        },
        "scoring": {"boosters": _boosters(1.5, 4.0, 3.5, 2.5, 1.0, 2.0, 1.5)},
        "fail_on": "critical",
        "upgrade_path": {"fetch_changelogs": False},
    },
    "open-source": {
        "license": {
            "allow": [
                *PERMISSIVE_LICENSES,
                *WEAK_COPYLEFT_LICENSES,
                "GPL-3.0-only",
                "GPL-3.0-or-later",
                "LGPL-3.0-only",
                "LGPL-3.0-or-later",
            ],
            "deny": ["CC-BY-NC-1.0", "CC-BY-NC-2.0", "CC-BY-NC-3.0", "CC-BY-NC-4.0"],
            "warn": ["AGPL-3.0-only", "AGPL-3.0-or-later", "SSPL-1.0"],
            "warn_on_unknown": True,
            "check_patent_clauses": False,
        },
        "scoring": {"boosters": _boosters(1.5, 3.0, 1.5, 2.0, 1.5, 2.5, 1.5)},
        "fail_on": "warning",
        "upgrade_path": {"fetch_changelogs": True},
    },
    "personal": {
        "license": {
            "allow": [
                *PERMISSIVE_LICENSES,
                *WEAK_COPYLEFT_LICENSES,
                *COMMERCIAL_RESTRICTIVE_LICENSES,
            ],
            "deny": [],
            "warn": [],
            "warn_on_unknown": False,
            "check_patent_clauses": False,
        },
        "scoring": {"boosters": _boosters(1.0, 2.0, 0.5, 1.5, 0.8, 1.0, 1.0)},
        "fail_on": "none",
        "upgrade_path": {
            "analyze_breaking_changes": False,
            "fetch_changelogs": False,
            "estimate_effort": False,
        },
    },
    "startup": {
        "license": {
            "allow": [
                "MIT",
                "ISC",
                "BSD-2-Clause",
                "BSD-3-Clause",
                "Apache-2.0",
                "Unlicense",
                "CC0-1.0",
                "0BSD",
            ],
            "deny": [
                "AGPL-3.0-only",
                "AGPL-3.0-or-later",
                "SSPL-1.0",
                "GPL-3.0-only",
                "GPL-3.0-or-later",
            ],
            "warn": ["LGPL-2.1", "LGPL-3.0", "MPL-2.0"],
            "warn_on_unknown": True,
            "check_patent_clauses": True,
        },
        "scoring": {"boosters": _boosters(1.5, 3.5, 2.5, 2.5, 1.2, 1.8, 1.5)},
        "fail_on": "critical",
        "upgrade_path": {"fetch_changelogs": False},
    },
    "government": {
        "license": {
            "allow": ["MIT", "ISC", "BSD-2-Clause", "BSD-3-Clause", "Apache-2.0", "CC0-1.0", "0BSD"],
            "deny": [*COMMERCIAL_RESTRICTIVE_LICENSES, "Unlicense", "WTFPL"],
            "warn": DEFAULT_WARN,
            "warn_on_unknown": True,
            "check_patent_clauses": True,
        },
        "scoring": {"boosters": _boosters(2.0, 4.5, 4.0, 3.0, 0.8, 2.5, 2.0)},
        "fail_on": "warning",
        "upgrade_path": {"fetch_changelogs": True},
    },
}
_PRESETS["saas"] = _PRESETS["commercial"]
_PRESETS["library"] = _PRESETS["open-source"]
_PRESETS["educational"] = _PRESETS["personal"]
_PRESETS["internal"] = _PRESETS["government"]


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# Maps keyed by package name, not by option name.
_VERBATIM_KEYS = frozenset({"reasons"})


def _snake_keys(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    converted = {}
    for key, value in data.items():
        name = to_snake(key)
        converted[name] = value if name in _VERBATIM_KEYS else _snake_keys(value)
    return converted


def config_for_project_type(
    project_type: ProjectType, overrides: dict[str, Any] | None = None
) -> ScanConfig:
    """Build a validated config from a project-type preset plus *overrides*.

    ``custom`` has no preset: only built-in defaults and overrides apply.
    """
    base = _deep_merge(_PRESETS.get(project_type, {}), {"project_type": project_type})
    merged = _deep_merge(base, _snake_keys(overrides or {}))
    try:
        return ScanConfig.model_validate(merged)
    except PydanticValidationError as exc:
        raise ConfigError(_format_validation_error(exc)) from exc


def load_config(path: Path | None = None, project_type: ProjectType | None = None) -> ScanConfig:
    """Load a JSON config file and apply it over the matching preset.

    *project_type*, when given, wins over the file's ``projectType``.
    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"cannot read config file {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON in config file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"config file {path} must contain a JSON object")

    data = _snake_keys(data)
    chosen = project_type or data.pop("project_type", None) or "commercial"
    data.pop("project_type", None)
    return config_for_project_type(chosen, data)


def _format_validation_error(exc: PydanticValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return "invalid configuration: " + "; ".join(messages)
