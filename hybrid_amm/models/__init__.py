"""Wire models for pool snapshots."""

from hybrid_amm.models.pool_state import CoinState, PoolAssetState, PoolParamsState, PoolState
from hybrid_amm.models.types import DecString, Denom, IntString

__all__ = [
    "CoinState",
    "DecString",
    "Denom",
    "IntString",
    "PoolAssetState",
    "PoolParamsState",
    "PoolState",
]
