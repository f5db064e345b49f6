"""Pool registry for route discovery.

Stores pools by id and indexes them by the denomination pairs they can
swap, so route builders can find candidates without scanning every pool.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from itertools import combinations

import structlog

from hybrid_amm.pool import Pool

logger = structlog.get_logger()


def _pair_key(denom_a: str, denom_b: str) -> tuple[str, str]:
    return (denom_a, denom_b) if denom_a < denom_b else (denom_b, denom_a)


class PoolRegistry:
    """Registry of pools keyed by pool id.

    Pools are immutable, so committing a swap or exit means calling
    set_pool with the pool the operation returned.
    """

    def __init__(self, pools: Iterable[Pool] | None = None) -> None:
        self._pools: dict[int, Pool] = {}
        # Canonical denom pair -> pool ids holding both denoms
        self._pools_by_pair: dict[tuple[str, str], set[int]] = {}
        if pools:
            for pool in pools:
                self.set_pool(pool)

    def set_pool(self, pool: Pool) -> None:
        """Add a pool, or replace the pool with the same id."""
        previous = self._pools.get(pool.pool_id)
        if previous is not None:
            self._unindex(previous)
        self._pools[pool.pool_id] = pool
        for asset_a, asset_b in combinations(pool.pool_assets, 2):
            self._pools_by_pair.setdefault(_pair_key(asset_a.denom, asset_b.denom), set()).add(pool.pool_id)
        logger.debug("pool_registered", pool_id=pool.pool_id, replaced=previous is not None)

    def _unindex(self, pool: Pool) -> None:
        for asset_a, asset_b in combinations(pool.pool_assets, 2):
            key = _pair_key(asset_a.denom, asset_b.denom)
            ids = self._pools_by_pair.get(key)
            if ids is not None:
                ids.discard(pool.pool_id)
                if not ids:
                    del self._pools_by_pair[key]

    def get_pool(self, pool_id: int) -> Pool | None:
        return self._pools.get(pool_id)

    def pools_for_pair(self, denom_a: str, denom_b: str) -> list[Pool]:
        """Pools holding both denominations, ordered by pool id."""
        ids = self._pools_by_pair.get(_pair_key(denom_a, denom_b), set())
        return [self._pools[pool_id] for pool_id in sorted(ids)]

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[Pool]:
        return iter(self._pools[pool_id] for pool_id in sorted(self._pools))

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools


__all__ = ["PoolRegistry"]
