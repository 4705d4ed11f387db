"""Dependency tree data structures."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class TreeNode:
    name: str
    version: str
    depth: int
    parent: str | None = None
    children: list[TreeNode] = field(default_factory=list)
    is_circular: bool = False
    is_duplicate: bool = False

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and all descendants, breadth-first."""
        queue = [self]
        while queue:
            node = queue.pop(0)
            yield node
            queue.extend(node.children)


@dataclass
class DependencyTreeSummary:
    total_nodes: int
    unique_packages: int
    max_depth: int
    circular_dependencies: int
    duplicate_packages: int


@dataclass
class DependencyTree:
    root: TreeNode
    total_nodes: int
    unique_packages: int
    max_depth: int
    circular_dependencies: int
    duplicate_packages: int

    @property
    def summary(self) -> DependencyTreeSummary:
        return DependencyTreeSummary(
            total_nodes=self.total_nodes,
            unique_packages=self.unique_packages,
            max_depth=self.max_depth,
            circular_dependencies=self.circular_dependencies,
            duplicate_packages=self.duplicate_packages,
        )

    def unique_packages_by_name(self) -> dict[str, list[str]]:
        """Map each package name to the distinct versions present, root excluded."""
        found: dict[str, list[str]] = {}
        for node in self.root.walk():
            if node is self.root:
                continue
            versions = found.setdefault(node.name, [])
            if node.version not in versions:
                versions.append(node.version)
        return found
