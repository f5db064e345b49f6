"""Weight model: configured weights, oracle-implied weights and their distance.

Configured weights come from each asset's integer weight. Oracle weights
come from balance x price. The distance between the two drives the
weight-breaking fee and weight-balance bonus.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from hybrid_amm.coins import Coins
from hybrid_amm.errors import NegativePoolAmountError, PriceNotSetError
from hybrid_amm.keepers import OracleKeeper
from hybrid_amm.math.fixed_point import Dec, ZeroDenominator, safe_quo
from hybrid_amm.pool import Pool, PoolAsset

logger = structlog.get_logger()


@dataclass(frozen=True)
class AssetWeight:
    """Normalized weight of one denomination."""

    asset: str
    weight: Dec


def normalized_weights(pool_assets: Sequence[PoolAsset]) -> list[AssetWeight]:
    """Configured weights divided by their total.

    A zero total weight falls back to a denominator of 1, so each output
    equals its raw weight (all zero in practice). This is a documented
    degenerate case, not an error and not a uniform distribution.
    """
    total_weight = Dec.from_int(sum(asset.weight for asset in pool_assets))
    return [
        AssetWeight(
            asset=asset.denom,
            weight=safe_quo(Dec.from_int(asset.weight), total_weight, ZeroDenominator.SUBSTITUTE_ONE),
        )
        for asset in pool_assets
    ]


def oracle_pool_normalized_weights(
    oracle: OracleKeeper,
    pool_assets: Sequence[PoolAsset],
) -> list[AssetWeight]:
    """Oracle-implied weights: balance x price, divided by the total value.

    Raises:
        PriceNotSetError: If any asset has a zero (unset) price
    """
    values: list[AssetWeight] = []
    total_value = Dec.zero()
    for asset in pool_assets:
        price = oracle.get_asset_price_from_denom(asset.denom)
        if price.is_zero():
            raise PriceNotSetError(f"price for token not set: {asset.denom}")
        value = Dec.from_int(asset.token.amount).mul(price)
        values.append(AssetWeight(asset=asset.denom, weight=value))
        total_value = total_value.add(value)

    return [
        AssetWeight(
            asset=item.asset,
            weight=safe_quo(item.weight, total_value, ZeroDenominator.SUBSTITUTE_ONE),
        )
        for item in values
    ]


def weight_distance_from_target(
    oracle: OracleKeeper,
    pool_assets: Sequence[PoolAsset],
) -> Dec:
    """Mean absolute difference between configured and oracle weights.

    Best-effort metric: returns exactly zero for an empty asset list and when
    oracle weights cannot be computed. The underlying failure is logged and
    not propagated.
    """
    if not pool_assets:
        return Dec.zero()
    try:
        oracle_weights = oracle_pool_normalized_weights(oracle, pool_assets)
    except PriceNotSetError as err:
        logger.debug("weight_distance_unavailable", reason=str(err))
        return Dec.zero()
    target_weights = normalized_weights(pool_assets)

    distance_sum = Dec.zero()
    for target, actual in zip(target_weights, oracle_weights, strict=True):
        distance_sum = distance_sum.add(target.weight.sub(actual.weight).abs())
    return safe_quo(distance_sum, Dec.from_int(len(pool_assets)), ZeroDenominator.RETURN_ZERO)


def denom_oracle_asset_weight(
    oracle: OracleKeeper,
    pool_assets: Sequence[PoolAsset],
    denom: str,
) -> Dec:
    """Oracle weight of one denom; zero if absent or prices are unset."""
    try:
        oracle_weights = oracle_pool_normalized_weights(oracle, pool_assets)
    except PriceNotSetError:
        return Dec.zero()
    for item in oracle_weights:
        if item.asset == denom:
            return item.weight
    return Dec.zero()


def denom_normalized_weight(pool_assets: Sequence[PoolAsset], denom: str) -> Dec:
    """Configured weight of one denom; zero if absent."""
    for item in normalized_weights(pool_assets):
        if item.asset == denom:
            return item.weight
    return Dec.zero()


def stacked_ratio_from_snapshot(pool: Pool, snapshot: Pool) -> Dec:
    """Sum over assets of |balance - snapshot balance| / snapshot balance.

    Measures how far the pool has moved since the snapshot. Assets are
    matched by position; a zero snapshot balance is treated as 1.
    """
    stacked_ratio = Dec.zero()
    for current, before in zip(pool.pool_assets, snapshot.pool_assets, strict=True):
        asset_diff = Dec.from_int(abs(current.token.amount - before.token.amount))
        stacked_ratio = stacked_ratio.add(
            safe_quo(asset_diff, Dec.from_int(before.token.amount), ZeroDenominator.SUBSTITUTE_ONE)
        )
    return stacked_ratio


def new_pool_assets_after_swap(
    tokens_in: Coins,
    tokens_out: Coins,
    pool_assets: Sequence[PoolAsset],
) -> list[PoolAsset]:
    """Projected assets with tokens_in added and tokens_out removed.

    Raises:
        NegativePoolAmountError: If any projected balance would be negative
    """
    updated: list[PoolAsset] = []
    for asset in pool_assets:
        amount_after = asset.token.amount + tokens_in.amount_of(asset.denom) - tokens_out.amount_of(asset.denom)
        if amount_after < 0:
            raise NegativePoolAmountError("negative pool amount after swap")
        updated.append(asset.with_amount(amount_after))
    return updated
