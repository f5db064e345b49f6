"""Accounted balances for oracle-backed pools."""

from __future__ import annotations

from collections.abc import Sequence

from hybrid_amm.keepers import AccountedPoolKeeper
from hybrid_amm.pool import Pool, PoolAsset


def get_accounted_balance(
    accounted_pool: AccountedPoolKeeper,
    pool: Pool,
    pool_assets: Sequence[PoolAsset],
) -> list[PoolAsset]:
    """Substitute externally tracked balances into pool_assets.

    For oracle pools, an accounted balance that is strictly positive replaces
    the raw balance; anything else keeps the raw balance. Plain pools always
    keep raw balances.
    """
    updated: list[PoolAsset] = []
    for asset in pool_assets:
        if pool.pool_params.use_oracle:
            accounted_amount = accounted_pool.get_accounted_balance(pool.pool_id, asset.denom)
            if accounted_amount > 0:
                asset = asset.with_amount(accounted_amount)
        updated.append(asset)
    return updated
