"""Upgrade-path analyzer: update type, risk, effort and migration resources."""

from __future__ import annotations

from typing import Literal

import structlog

from pkghealth.core.config import UpgradePathConfig
from pkghealth.exceptions import ParseError
from pkghealth.interfaces import SourceHostClient
from pkghealth.models.analysis import (
    Alternative,
    MigrationResources,
    ReleaseNote,
    Severity,
    UpdateType,
    UpgradePath,
    UpgradeStep,
)
from pkghealth.sourcehost.github import extract_github_info
from pkghealth.utils.versions import estimate_breaking_changes, get_update_type, parse_version

log = structlog.get_logger("pkghealth.analyzers")

UP_TO_DATE = "Up to date"

ALTERNATIVES: dict[str, list[Alternative]] = {
    "moment": [
        Alternative("dayjs", "2KB, Moment.js-like API, tree-shakeable", "MIT"),
        Alternative("date-fns", "Modular, functional, immutable", "MIT"),
        Alternative("luxon", "Modern successor from a Moment.js author", "MIT"),
    ],
    "request": [
        Alternative("axios", "Widely used promise-based HTTP client", "MIT"),
        Alternative("got", "Lightweight modern HTTP client", "MIT"),
        Alternative("node-fetch", "fetch implementation for Node.js", "MIT"),
    ],
    "node-sass": [
        Alternative("sass", "Pure Dart Sass, no native build step", "MIT"),
    ],
    "lodash": [
        Alternative("lodash-es", "ES module build of Lodash, tree-shakeable", "MIT"),
        Alternative("ramda", "Functional library with immutable data", "MIT"),
    ],
}

MIGRATION_GUIDES: dict[str, dict[str, str]] = {
    "webpack": {"4-to-5": "https://webpack.js.org/migrate/5/"},
    "react": {
        "16-to-17": "https://react.dev/blog/2020/10/20/react-v17",
        "17-to-18": "https://react.dev/blog/2022/03/08/react-18-upgrade-guide",
    },
    "vue": {"2-to-3": "https://v3-migration.vuejs.org/"},
    "angular": {"update-guide": "https://update.angular.io/"},
}

CODEMODS: dict[str, list[str]] = {
    "webpack": ["webpack-cli migrate"],
    "react": ["react-codemod"],
    "vue": ["@vue/compat"],
}

KNOWN_REPOSITORIES: dict[str, str] = {
    "webpack": "webpack/webpack",
    "react": "facebook/react",
    "vue": "vuejs/vue",
    "angular": "angular/angular",
    "typescript": "microsoft/TypeScript",
    "eslint": "eslint/eslint",
    "prettier": "prettier/prettier",
}

_RISK: dict[str, Literal["low", "medium", "high"]] = {
    "patch": "low",
    "minor": "medium",
    "major": "high",
}


def estimate_effort(update_type: UpdateType, breaking_changes: int) -> str:
    if update_type == "patch":
        return "5-15 minutes"
    if update_type == "minor":
        return "15-30 minutes"
    if breaking_changes == 0:
        return "30 minutes - 1 hour"
    if breaking_changes < 10:
        return "1-4 hours"
    if breaking_changes < 30:
        return "4-8 hours"
    return "1-2 days"


def build_upgrade_steps(current: str, latest: str, update_type: UpdateType) -> list[UpgradeStep]:
    """Direct step for patch/minor and single-major jumps; four steps otherwise."""
    if update_type in ("patch", "minor"):
        kind = "patch" if update_type == "patch" else "minor"
        return [UpgradeStep(current, latest, f"Direct {kind} update")]

    current_major = parse_version(current).major
    latest_major = parse_version(latest).major
    if latest_major - current_major <= 1:
        return [
            UpgradeStep(current, latest, f"Major update from v{current_major} to v{latest_major}")
        ]

    line = f"{current_major}.x.x"
    next_major = f"{current_major + 1}.0.0"
    if latest_major - current_major > 2:
        final = "Continue incremental upgrades up to the latest version"
    else:
        final = f"Upgrade to v{latest_major} (latest)"
    return [
        UpgradeStep(current, line, f"Update to the last v{current_major} release (security fixes)"),
        UpgradeStep(line, line, "Review the migration guide and replace deprecated APIs"),
        UpgradeStep(line, next_major, f"Migrate to v{next_major}"),
        UpgradeStep(next_major, latest, final),
    ]


def _changelog_url(name: str, repository_url: str | None) -> tuple[str, str | None]:
    info = extract_github_info(repository_url) if repository_url else None
    if info is not None:
        owner, repo = info
        return f"https://github.com/{owner}/{repo}/releases", f"{owner}/{repo}"
    slug = KNOWN_REPOSITORIES.get(name)
    if slug is None:
        return f"https://www.npmjs.com/package/{name}?activeTab=versions", None
    return f"https://github.com/{slug}/releases", slug


async def _migration_resources(
    name: str,
    current: str,
    latest: str,
    source_host: SourceHostClient | None,
    repository_url: str | None,
) -> MigrationResources:
    resources = MigrationResources(codemods=list(CODEMODS.get(name, [])))

    guides = MIGRATION_GUIDES.get(name)
    if guides:
        key = f"{parse_version(current).major}-to-{parse_version(latest).major}"
        resources.migration_guide = guides.get(key) or guides.get("update-guide")

    resources.changelog, slug = _changelog_url(name, repository_url)
    if source_host is not None and slug is not None:
        owner, repo = slug.split("/", 1)
        try:
            releases = await source_host.get_releases(owner, repo)
        except Exception as exc:
            log.info("upgrade.releases_unavailable", package=name, error=str(exc))
        else:
            resources.release_notes = _releases_between(releases, current, latest)
    return resources


def _releases_between(releases: list[ReleaseNote], current: str, latest: str) -> list[ReleaseNote]:
    low, high = parse_version(current), parse_version(latest)
    selected = []
    for note in releases:
        try:
            tagged = parse_version(note.tag.rsplit("@", 1)[-1])
        except ParseError:
            continue
        if low < tagged <= high:
            selected.append(note)
    return selected


async def analyze_upgrade_path(
    name: str,
    current: str,
    latest: str,
    config: UpgradePathConfig,
    source_host: SourceHostClient | None = None,
    repository_url: str | None = None,
) -> UpgradePath | None:
    """Describe the move from *current* to *latest*.

    Returns ``None`` when upgrade analysis is disabled or either version is
    unparseable. Release-note lookups are best effort.
    """
    if not config.enabled:
        return None

    try:
        update_type = get_update_type(current, latest)
    except ParseError as exc:
        log.info("upgrade.unparseable_version", package=name, error=str(exc))
        return None

    if update_type is None:
        return UpgradePath(
            package=name,
            current_version=current,
            latest_version=latest,
            type=None,
            risk="low",
            breaking_changes=0,
            estimated_effort=UP_TO_DATE,
            severity=Severity.OK,
        )

    breaking = estimate_breaking_changes(current, latest) if config.analyze_breaking_changes else 0
    effort = estimate_effort(update_type, breaking) if config.estimate_effort else "Not estimated"
    resources = None
    if config.fetch_changelogs:
        resources = await _migration_resources(name, current, latest, source_host, repository_url)

    return UpgradePath(
        package=name,
        current_version=current,
        latest_version=latest,
        type=update_type,
        risk=_RISK[update_type],
        breaking_changes=breaking,
        estimated_effort=effort,
        severity=Severity.WARNING if update_type == "major" else Severity.INFO,
        steps=build_upgrade_steps(current, latest, update_type),
        resources=resources,
        alternatives=list(ALTERNATIVES[name])
        if config.suggest_alternatives and name in ALTERNATIVES
        else None,
    )
