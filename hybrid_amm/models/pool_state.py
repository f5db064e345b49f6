"""Pool state snapshot models.

These mirror the JSON a pool store exports. Use hybrid_amm.parsing.parse_pool
to turn a PoolState into a Pool.
"""

from pydantic import BaseModel, Field

from hybrid_amm.constants import DEFAULT_WEIGHT_FEE_POLICY
from hybrid_amm.models.types import DecString, Denom, IntString


class CoinState(BaseModel):
    """A denomination and integer amount."""

    denom: Denom
    amount: IntString


class PoolAssetState(BaseModel):
    """One pool asset."""

    token: CoinState
    weight: IntString
    external_liquidity_ratio: DecString = Field(
        default="1",
        alias="externalLiquidityRatio",
        description="Pool size relative to the external market for this denom",
    )

    model_config = {"populate_by_name": True}


class PoolParamsState(BaseModel):
    """Per-pool parameters."""

    swap_fee: DecString = Field(default="0", alias="swapFee")
    use_oracle: bool = Field(default=False, alias="useOracle")
    min_slippage: DecString = Field(default="0", alias="minSlippage")
    weight_fee_policy: str = Field(default=DEFAULT_WEIGHT_FEE_POLICY, alias="weightFeePolicy")
    fee_denom: str = Field(default="", alias="feeDenom")

    model_config = {"populate_by_name": True}


class PoolState(BaseModel):
    """Complete pool snapshot."""

    pool_id: int = Field(alias="poolId", ge=0)
    pool_assets: list[PoolAssetState] = Field(alias="poolAssets", min_length=1)
    total_shares: CoinState = Field(alias="totalShares")
    pool_params: PoolParamsState = Field(default_factory=PoolParamsState, alias="poolParams")

    model_config = {"populate_by_name": True}
