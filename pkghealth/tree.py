"""Transitive dependency discovery with cycle and duplicate detection."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from pkghealth.cache import PackageCache
from pkghealth.core.config import DependencyTreeConfig
from pkghealth.exceptions import CircularDependencyError
from pkghealth.interfaces import RegistryClient
from pkghealth.models.metadata import PackageMetadata
from pkghealth.models.tree import DependencyTree, TreeNode
from pkghealth.pool import WorkerPool

log = structlog.get_logger("pkghealth.tree")


@dataclass
class _Expansion:
    """A materialized node whose dependencies are still to be attached."""

    node: TreeNode
    dependencies: dict[str, str]
    path: tuple[str, ...]  # ancestor names, node included


def resolve_version(metadata: PackageMetadata, requested: str) -> str:
    """Exact version, else a dist-tag of that name, else ``latest``."""
    requested = requested.strip()
    if requested in metadata.versions:
        return requested
    if requested in metadata.dist_tags:
        return metadata.dist_tags[requested]
    return metadata.dist_tags.get("latest", metadata.version)


def tree_cache_key(root_name: str, root_version: str, max_depth: int, deps: dict[str, str]) -> str:
    pinned = ",".join(f"{name}@{rng}" for name, rng in sorted(deps.items()))
    return f"{root_name}@{root_version}:{max_depth}:{pinned}"


class DependencyTreeBuilder:
    """Breadth-first tree walk bounded by ``max_depth``.

    Every level's unique child names are fetched together on the worker
    pool. Classification keeps two explicit structures: the ancestor path of
    each node, which flags *circular* children, and a global map of
    materialized ``name@version`` keys, which flags *duplicates*. Flagged
    nodes are attached and counted but never expanded. A child whose
    metadata cannot be fetched is pruned.
    """

    def __init__(
        self,
        registry: RegistryClient,
        config: DependencyTreeConfig,
        pool: WorkerPool | None = None,
        cache: PackageCache | None = None,
    ) -> None:
        self._registry = registry
        self._config = config
        self._pool = pool or WorkerPool()
        self._cache = cache

    @property
    def depth_limit(self) -> int:
        if not self._config.analyze_transitive:
            return min(1, self._config.max_depth)
        return self._config.max_depth

    async def build_tree(
        self, root_name: str, root_version: str, direct_deps: dict[str, str]
    ) -> DependencyTree:
        cache_key = tree_cache_key(root_name, root_version, self.depth_limit, direct_deps)
        if self._cache is not None and self._config.cache_trees:
            cached = self._cache.get_tree(cache_key)
            if cached is not None:
                log.debug("tree.cache_hit", root=root_name)
                return cached

        root = TreeNode(name=root_name, version=root_version, depth=0)
        seen: set[str] = {root.key}
        circular = 0
        duplicates = 0

        frontier = [_Expansion(root, dict(direct_deps), (root_name,))]
        while frontier:
            frontier = [e for e in frontier if e.node.depth < self.depth_limit and e.dependencies]
            if not frontier:
                break

            names = sorted({name for e in frontier for name in e.dependencies})
            fetched = await self._fetch_level(names)

            next_frontier: list[_Expansion] = []
            for expansion in frontier:
                parent = expansion.node
                for name, requested in expansion.dependencies.items():
                    metadata = fetched.get(name)
                    if metadata is None:
                        continue
                    version = resolve_version(metadata, requested)
                    child = TreeNode(
                        name=name, version=version, depth=parent.depth + 1, parent=parent.name
                    )
                    parent.children.append(child)

                    if self._config.detect_circular and name in expansion.path:
                        cycle = [*expansion.path, name]
                        log.info("tree.circular", path=" -> ".join(cycle))
                        if self._config.stop_on_circular:
                            raise CircularDependencyError(cycle)
                        child.is_circular = True
                        circular += 1
                    elif child.key in seen:
                        child.is_duplicate = True
                        duplicates += 1
                    else:
                        seen.add(child.key)
                        next_frontier.append(
                            _Expansion(
                                child,
                                metadata.dependencies_of(version),
                                (*expansion.path, name),
                            )
                        )
            frontier = next_frontier

        tree = self._summarize(root, circular, duplicates)
        if self._cache is not None and self._config.cache_trees:
            self._cache.set_tree(cache_key, tree)
        return tree

    async def _fetch_level(self, names: list[str]) -> dict[str, PackageMetadata]:
        def _failed(name: str, exc: Exception) -> None:
            log.warning("tree.fetch_failed", package=name, error=str(exc))

        async def _fetch(name: str) -> tuple[str, PackageMetadata]:
            return name, await self._registry.fetch(name)

        return dict(await self._pool.map(_fetch, names, on_error=_failed))

    @staticmethod
    def _summarize(root: TreeNode, circular: int, duplicates: int) -> DependencyTree:
        nodes = list(root.walk())
        return DependencyTree(
            root=root,
            total_nodes=len(nodes),
            unique_packages=len({node.name for node in nodes if node is not root}),
            max_depth=max(node.depth for node in nodes),
            circular_dependencies=circular,
            duplicate_packages=duplicates,
        )
