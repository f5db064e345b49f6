"""Pool snapshot parsing.

Functions to build Pool values from PoolState wire models or raw JSON.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from hybrid_amm.coins import Coin
from hybrid_amm.errors import AmmError
from hybrid_amm.math.fixed_point import Dec
from hybrid_amm.models.pool_state import CoinState, PoolAssetState, PoolParamsState, PoolState
from hybrid_amm.pool import Pool, PoolAsset, PoolParams

logger = structlog.get_logger()


def _parse_coin(state: CoinState) -> Coin:
    return Coin(state.denom, int(state.amount))


def _parse_asset(state: PoolAssetState) -> PoolAsset:
    return PoolAsset(
        token=_parse_coin(state.token),
        weight=int(state.weight),
        external_liquidity_ratio=Dec.from_str(state.external_liquidity_ratio),
    )


def _parse_params(state: PoolParamsState) -> PoolParams:
    return PoolParams(
        swap_fee=Dec.from_str(state.swap_fee),
        use_oracle=state.use_oracle,
        min_slippage=Dec.from_str(state.min_slippage),
        weight_fee_policy=state.weight_fee_policy,
        fee_denom=state.fee_denom,
    )


def parse_pool(state: PoolState) -> Pool:
    """Convert a validated snapshot into a Pool.

    Raises:
        ValueError: If the snapshot describes an invalid pool (duplicate
            denominations, negative weight)
    """
    return Pool(
        pool_id=state.pool_id,
        pool_assets=tuple(_parse_asset(asset) for asset in state.pool_assets),
        total_shares=_parse_coin(state.total_shares),
        pool_params=_parse_params(state.pool_params),
    )


def parse_pool_json(data: str | bytes | dict[str, Any]) -> Pool:
    """Validate and convert one pool snapshot given as JSON text or a dict.

    Raises:
        pydantic.ValidationError: If the snapshot does not match PoolState
        ValueError: If the snapshot describes an invalid pool
    """
    if isinstance(data, dict):
        state = PoolState.model_validate(data)
    else:
        state = PoolState.model_validate_json(data)
    return parse_pool(state)


def parse_pools(items: Iterable[dict[str, Any]]) -> list[Pool]:
    """Parse many snapshots, skipping (and logging) the invalid ones."""
    pools: list[Pool] = []
    for index, item in enumerate(items):
        try:
            pools.append(parse_pool_json(item))
        except (ValueError, AmmError) as err:
            logger.warning(
                "pool_parse_failed",
                index=index,
                pool_id=item.get("poolId", item.get("pool_id")),
                reason=str(err),
            )
    return pools
