"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_pool
    # or
    from tests.helpers.factories import make_pool, make_ctx

    pool = make_pool(use_oracle=True)
"""

from dataclasses import replace

from hybrid_amm.coins import Coin
from hybrid_amm.config import DEFAULT_PROTOCOL_PARAMS, ProtocolParams
from hybrid_amm.constants import pool_share_denom
from hybrid_amm.context import EngineContext, GasMeter
from hybrid_amm.keepers import StaticAccountedPoolKeeper, StaticOracleKeeper
from hybrid_amm.math import Dec
from hybrid_amm.pool import Pool, PoolAsset, PoolParams
from hybrid_amm.weight_fees import WeightFeePolicy, WeightFees
from tests.helpers.constants import ATOM, DEEP_BALANCE, USDC


def dec(value: str | int) -> Dec:
    """Shorthand for Dec.from_str / Dec.from_int."""
    if isinstance(value, int):
        return Dec.from_int(value)
    return Dec.from_str(value)


def make_asset(
    denom: str,
    amount: int = DEEP_BALANCE,
    weight: int = 50,
    external_liquidity_ratio: str = "1",
) -> PoolAsset:
    """Create a pool asset with sensible defaults."""
    return PoolAsset(
        token=Coin(denom, amount),
        weight=weight,
        external_liquidity_ratio=Dec.from_str(external_liquidity_ratio),
    )


def make_pool(
    pool_id: int = 1,
    assets: list[PoolAsset] | None = None,
    use_oracle: bool = False,
    swap_fee: str = "0",
    min_slippage: str = "0",
    weight_fee_policy: str = "none",
    total_shares: int = 100_000,
) -> Pool:
    """Create a pool.

    Defaults to a two-asset ATOM/USDC pool with equal weights, deep
    balances, no fees and no weight-fee policy, so tests opt in to each
    effect they care about.

    Args:
        pool_id: Pool identifier
        assets: Pool assets (default: ATOM and USDC, DEEP_BALANCE each)
        use_oracle: Oracle-priced pool
        swap_fee: Swap fee rate as decimal string
        min_slippage: Pool-level slippage floor as decimal string
        weight_fee_policy: Registered policy name
        total_shares: Outstanding shares

    Returns:
        Pool ready for testing
    """
    if assets is None:
        assets = [make_asset(ATOM), make_asset(USDC)]
    return Pool(
        pool_id=pool_id,
        pool_assets=tuple(assets),
        total_shares=Coin(pool_share_denom(pool_id), total_shares),
        pool_params=PoolParams(
            swap_fee=Dec.from_str(swap_fee),
            use_oracle=use_oracle,
            min_slippage=Dec.from_str(min_slippage),
            weight_fee_policy=weight_fee_policy,
        ),
    )


def make_ctx(
    prices: dict[str, str] | None = None,
    accounted: dict[tuple[int, str], int] | None = None,
    gas_limit: int | None = None,
    weight_fee_policy: WeightFeePolicy | None = None,
) -> EngineContext:
    """Create an engine context.

    Args:
        prices: Oracle prices by denom (default: ATOM and USDC at 1)
        accounted: Accounted balances keyed by (pool_id, denom)
        gas_limit: Gas meter limit (default: unbounded)
        weight_fee_policy: Policy override for every pool
    """
    if prices is None:
        prices = {ATOM: "1", USDC: "1"}
    return EngineContext(
        oracle=StaticOracleKeeper(prices),
        accounted_pool=StaticAccountedPoolKeeper(accounted),
        gas_meter=GasMeter(gas_limit),
        weight_fee_policy=weight_fee_policy,
    )


def make_params(**overrides: str | int) -> ProtocolParams:
    """Protocol parameters with a zero slippage floor and zero taker fee.

    Keyword overrides take decimal strings for rate fields and ints for
    swap_gas_cost.
    """
    values: dict[str, Dec | int] = {"min_slippage": Dec.zero(), "taker_fee": Dec.zero()}
    for name, value in overrides.items():
        values[name] = value if name == "swap_gas_cost" else Dec.from_str(str(value))
    return replace(DEFAULT_PROTOCOL_PARAMS, **values)


class FixedWeightFeePolicy:
    """Weight-fee policy returning the same outcome for every trade."""

    def __init__(
        self,
        weight_breaking_fee: str = "0",
        weight_balance_bonus: str = "0",
        applies_swap_fee: bool = True,
    ) -> None:
        self.fees = WeightFees(
            weight_balance_bonus=Dec.from_str(weight_balance_bonus),
            weight_breaking_fee=Dec.from_str(weight_breaking_fee),
            applies_swap_fee=applies_swap_fee,
        )
        self.calls: list[str] = []

    def calculate_weight_fees(self, oracle, pool, assets_before, assets_after, denom_in, params, perpetual_factor):
        self.calls.append(denom_in)
        return self.fees
