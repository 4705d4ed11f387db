"""CLI entry point: pkghealth.

Subcommands:
    pkghealth scan [PATH]    # Analyze every declared dependency, print JSON
    pkghealth tree [PATH]    # Walk the transitive dependency tree

Exit codes: 0 ok, 1 warning/info gate, 2 critical findings, 3 fatal error.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import NoReturn, get_args

import click
import structlog

from pkghealth import __version__
from pkghealth.cache import PackageCache
from pkghealth.core.config import FailOn, ProjectType, ScanConfig, load_config
from pkghealth.core.logging import setup_logging
from pkghealth.exceptions import PkgHealthError
from pkghealth.manifest import PackageManifest
from pkghealth.models.scan import ScanResult
from pkghealth.models.tree import DependencyTree, TreeNode
from pkghealth.pool import WorkerPool
from pkghealth.registry.npm import NpmRegistryClient
from pkghealth.scanner import ScanOrchestrator
from pkghealth.sourcehost.github import GitHubClient
from pkghealth.tree import DependencyTreeBuilder

EXIT_FATAL = 3

log = structlog.get_logger("pkghealth.cli")


def _fatal(exc: BaseException) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(EXIT_FATAL)


def _new_cache(config: ScanConfig) -> PackageCache:
    return PackageCache(enabled=config.cache.enabled, default_ttl=config.cache.ttl)


async def _run_scan(manifest: PackageManifest, config: ScanConfig) -> ScanResult:
    cache = _new_cache(config)
    async with NpmRegistryClient(cache=cache, timeout=config.request_timeout) as registry:
        source_host = None
        if config.github.enabled:
            source_host = GitHubClient(
                config.github.resolved_token(), timeout=config.request_timeout
            )
        try:
            orchestrator = ScanOrchestrator(config, registry, source_host, cache=cache)
            return await orchestrator.scan(manifest)
        finally:
            if source_host is not None:
                await source_host.close()


async def _run_tree(manifest: PackageManifest, config: ScanConfig) -> DependencyTree:
    cache = _new_cache(config)
    async with NpmRegistryClient(cache=cache, timeout=config.request_timeout) as registry:
        builder = DependencyTreeBuilder(
            registry,
            config.dependency_tree,
            pool=WorkerPool(config.concurrency),
            cache=cache,
        )
        return await builder.build_tree(
            manifest.name,
            manifest.version,
            manifest.get_all_dependencies(config.include_dev_dependencies),
        )


def _render_node(node: TreeNode, indent: int = 0) -> list[str]:
    marker = " (circular)" if node.is_circular else " (duplicate)" if node.is_duplicate else ""
    lines = [f"{'  ' * indent}{node.key}{marker}"]
    for child in node.children:
        lines.extend(_render_node(child, indent + 1))
    return lines


@click.group()
@click.version_option(version=__version__, prog_name="pkghealth")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """pkghealth: dependency health analyzer for npm projects."""
    setup_logging("DEBUG" if verbose else None)


@main.command("scan")
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option(
    "-c", "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None
)
@click.option("-t", "--project-type", type=click.Choice(get_args(ProjectType)), default=None)
@click.option("--fail-on", type=click.Choice(get_args(FailOn)), default=None)
@click.option("--include-dev", is_flag=True, default=False, help="Include devDependencies")
@click.option("--tree", "with_tree", is_flag=True, default=False, help="Attach tree statistics")
@click.option("--github/--no-github", default=None, help="Query GitHub for repo and advisories")
def scan(
    path: Path,
    config_path: Path | None,
    project_type: str | None,
    fail_on: str | None,
    include_dev: bool,
    with_tree: bool,
    github: bool | None,
) -> None:
    """Scan every declared dependency and print the result as JSON."""
    try:
        config = load_config(config_path, project_type)  # type: ignore[arg-type]
        updates: dict[str, object] = {}
        if fail_on is not None:
            updates["fail_on"] = fail_on
        if include_dev:
            updates["include_dev_dependencies"] = True
        if with_tree:
            updates["dependency_tree"] = config.dependency_tree.model_copy(
                update={"enabled": True}
            )
        if github is not None:
            updates["github"] = config.github.model_copy(update={"enabled": github})
        config = config.model_copy(update=updates)

        manifest = PackageManifest.load(path)
        result = asyncio.run(_run_scan(manifest, config))
        report = json.dumps(result.to_dict(), indent=2)
    except (PkgHealthError, OSError) as exc:
        _fatal(exc)
    except Exception as exc:
        log.exception("cli.scan_crashed")
        _fatal(exc)

    click.echo(report)
    sys.exit(result.exit_code)


@main.command("tree")
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option(
    "-c", "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None
)
@click.option("--max-depth", type=click.IntRange(min=0), default=None)
@click.option("--include-dev", is_flag=True, default=False, help="Include devDependencies")
@click.option("--show", is_flag=True, default=False, help="Print the tree before the summary")
def tree(
    path: Path,
    config_path: Path | None,
    max_depth: int | None,
    include_dev: bool,
    show: bool,
) -> None:
    """Walk the transitive dependency tree and print its summary as JSON."""
    try:
        config = load_config(config_path)
        tree_config = config.dependency_tree
        if max_depth is not None:
            tree_config = tree_config.model_copy(update={"max_depth": max_depth})
        config = config.model_copy(
            update={
                "dependency_tree": tree_config,
                "include_dev_dependencies": include_dev or config.include_dev_dependencies,
            }
        )

        manifest = PackageManifest.load(path)
        built = asyncio.run(_run_tree(manifest, config))
    except (PkgHealthError, OSError) as exc:
        _fatal(exc)
    except Exception as exc:
        log.exception("cli.tree_crashed")
        _fatal(exc)

    if show:
        for line in _render_node(built.root):
            click.echo(line)
    payload = dataclasses.asdict(built.summary)
    payload["packages"] = built.unique_packages_by_name()
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
