"""Process-local TTL cache for package metadata and dependency trees.

One instance is created per scan and handed to the registry client and the
tree builder. Values are deep-copied on the way in and on the way out so a
caller mutating what it got back can never corrupt a cached entry.

All access happens on a single event loop; every operation is one dict
lookup or assignment, so no lock is taken.
"""

from __future__ import annotations

import copy
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pkghealth.models.metadata import PackageMetadata
from pkghealth.models.tree import DependencyTree

DEFAULT_TTL = 3600.0  # seconds


@dataclass
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at >= self.ttl


@dataclass
class CacheStats:
    hits: int
    misses: int
    hit_rate: float
    metadata_size: int
    tree_size: int

    @property
    def total_size(self) -> int:
        return self.metadata_size + self.tree_size


class PackageCache:
    def __init__(
        self,
        enabled: bool = True,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._enabled = enabled
        self._default_ttl = default_ttl
        self._clock = clock
        self._metadata: dict[str, CacheEntry] = {}
        self._trees: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── metadata ───────────────────────────────────────────────────────────

    def get_metadata(self, key: str) -> PackageMetadata | None:
        return self._get(self._metadata, key)

    def set_metadata(self, key: str, value: PackageMetadata, ttl: float | None = None) -> None:
        self._set(self._metadata, key, value, ttl)

    # ── trees ──────────────────────────────────────────────────────────────

    def get_tree(self, key: str) -> DependencyTree | None:
        return self._get(self._trees, key)

    def set_tree(self, key: str, value: DependencyTree, ttl: float | None = None) -> None:
        self._set(self._trees, key, value, ttl)

    # ── maintenance ────────────────────────────────────────────────────────

    def clear(self) -> None:
        self._metadata.clear()
        self._trees.clear()
        self._hits = 0
        self._misses = 0

    def cleanup_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        removed = 0
        for store in (self._metadata, self._trees):
            expired = [key for key, entry in store.items() if entry.is_expired(now)]
            for key in expired:
                del store[key]
            removed += len(expired)
        return removed

    def get_stats(self) -> CacheStats:
        lookups = self._hits + self._misses
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / lookups if lookups else 0.0,
            metadata_size=len(self._metadata),
            tree_size=len(self._trees),
        )

    # ── internals ──────────────────────────────────────────────────────────

    def _get(self, store: dict[str, CacheEntry], key: str) -> Any:
        if not self._enabled:
            return None
        entry = store.get(key)
        if entry is None:
            self._misses += 1
            return None
        if entry.is_expired(self._clock()):
            del store[key]
            self._misses += 1
            return None
        self._hits += 1
        return copy.deepcopy(entry.value)

    def _set(self, store: dict[str, CacheEntry], key: str, value: Any, ttl: float | None) -> None:
        if not self._enabled:
            return
        store[key] = CacheEntry(
            value=copy.deepcopy(value),
            stored_at=self._clock(),
            ttl=ttl if ttl is not None else self._default_ttl,
        )
