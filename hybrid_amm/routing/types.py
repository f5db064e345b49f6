"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass

from hybrid_amm.coins import Coin
from hybrid_amm.math.fixed_point import Dec


@dataclass(frozen=True)
class SwapAmountInRoute:
    """One hop of an exact-input route: swap into token_out_denom on pool_id."""

    pool_id: int
    token_out_denom: str


@dataclass(frozen=True)
class SwapAmountOutRoute:
    """One hop of an exact-output route: pay token_in_denom on pool_id."""

    pool_id: int
    token_in_denom: str


@dataclass(frozen=True)
class RouteQuote:
    """Result of quoting a whole route.

    Attributes:
        spot_price: Product of per-hop spot prices, output per unit input
        impacted_price: Realized output per unit input for this trade size
        amount: Output received (exact-input) or input required (exact-output)
        swap_fee: Sum of discounted per-hop swap fee rates
        discount: Tier discount applied to the fees
        available_liquidity: Pool balance of the final output denomination
        slippage: Sum of per-hop slippage rates
        weight_bonus: Sum of per-hop weight-balance bonus rates
    """

    spot_price: Dec
    impacted_price: Dec
    amount: Coin
    swap_fee: Dec
    discount: Dec
    available_liquidity: Coin
    slippage: Dec
    weight_bonus: Dec


__all__ = ["RouteQuote", "SwapAmountInRoute", "SwapAmountOutRoute"]
