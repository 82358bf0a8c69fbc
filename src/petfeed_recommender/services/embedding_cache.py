"""In-process cache of per-category embedding pools.

All pools share a single ``last_fetch`` instant: refreshing any one key
restarts the freshness window for every cached key. Concurrent misses on the
same key each call the loader; both converge on the same cached state.
"""

import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from petfeed_recommender.constants import EMBEDDING_CACHE_TTL_SECONDS
from petfeed_recommender.models import EmbeddingRecord

logger = structlog.get_logger()

PoolLoader = Callable[[str], Awaitable[Sequence[EmbeddingRecord]]]


@dataclass(frozen=True)
class CacheSnapshot:
    """Immutable view of the cache; replaced wholesale on every refresh."""

    pools: Mapping[str, tuple[EmbeddingRecord, ...]] = field(default_factory=dict)
    last_fetch: float | None = None


class EmbeddingCache:
    """Time-bounded cache of embedding pools keyed by backing pool name."""

    def __init__(
        self,
        ttl_seconds: float = EMBEDDING_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot = CacheSnapshot()
        self.hits = 0
        self.misses = 0

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    def is_fresh(self, key: str, now: float | None = None) -> bool:
        """Whether ``key`` is cached and the shared fetch instant is within the TTL."""
        snapshot = self._snapshot
        if key not in snapshot.pools or snapshot.last_fetch is None:
            return False
        if now is None:
            now = self._clock()
        return now - snapshot.last_fetch < self.ttl_seconds

    async def get(self, key: str, loader: PoolLoader) -> Sequence[EmbeddingRecord]:
        """
        Return the pool for ``key``, calling ``loader`` on a miss.

        Callers must not mutate the returned sequence. If the loader raises,
        the error propagates and the cache is left unchanged.
        """
        now = self._clock()
        if self.is_fresh(key, now):
            self.hits += 1
            logger.debug("Embedding cache hit", key=key)
            return self._snapshot.pools[key]

        self.misses += 1
        logger.info("Embedding cache miss, loading pool", key=key)
        items = tuple(await loader(key))

        # Merge into whatever is current after the await so a concurrent
        # refresh of another key is kept; the shared clock never moves back.
        current = self._snapshot
        last_fetch = now
        if current.last_fetch is not None:
            last_fetch = max(now, current.last_fetch)
        self._snapshot = CacheSnapshot(
            pools={**current.pools, key: items},
            last_fetch=last_fetch,
        )
        logger.info("Embedding pool cached", key=key, count=len(items))
        return items

    def clear(self) -> None:
        """Drop all cached pools."""
        self._snapshot = CacheSnapshot()

    def stats(self) -> dict[str, Any]:
        snapshot = self._snapshot
        age = None
        if snapshot.last_fetch is not None:
            age = round(self._clock() - snapshot.last_fetch, 3)
        return {
            "keys": sorted(snapshot.pools),
            "pool_sizes": {key: len(items) for key, items in snapshot.pools.items()},
            "age_seconds": age,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
        }
