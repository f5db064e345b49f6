"""Route quoting.

Walks a route hop by hop through the swap engine and aggregates the
per-hop prices, fees and slippage into a RouteQuote.
"""

from __future__ import annotations

from collections.abc import Sequence

from hybrid_amm.accounting import get_accounted_balance
from hybrid_amm.coins import Coin, Coins
from hybrid_amm.config import DEFAULT_PROTOCOL_PARAMS, ProtocolParams
from hybrid_amm.context import EngineContext
from hybrid_amm.errors import NoRouteError
from hybrid_amm.math.fixed_point import Dec
from hybrid_amm.pool import Pool
from hybrid_amm.routing.registry import PoolRegistry
from hybrid_amm.routing.types import RouteQuote, SwapAmountInRoute, SwapAmountOutRoute
from hybrid_amm.slippage import get_oracle_prices
from hybrid_amm.swap import swap_in_amt_given_out, swap_out_amt_given_in
from hybrid_amm.weighted_math import calc_spot_price


def hop_spot_price(ctx: EngineContext, pool: Pool, denom_in: str, denom_out: str) -> Dec:
    """Marginal output per unit input on one pool.

    Oracle pools quote the oracle price ratio; plain pools quote the
    weighted spot price over accounted balances.
    """
    if pool.is_oracle_pool:
        in_price, out_price = get_oracle_prices(ctx.oracle, denom_in, denom_out)
        return in_price.quo(out_price)
    assets = {
        asset.denom: asset for asset in get_accounted_balance(ctx.accounted_pool, pool, pool.pool_assets)
    }
    pool.get_pool_asset(denom_in)
    pool.get_pool_asset(denom_out)
    return calc_spot_price(assets[denom_in], assets[denom_out])


class RouteQuoter:
    """Quotes routes against the pools in a registry.

    The fee for each hop is override_swap_fee when positive, else the
    pool's swap fee, reduced by the trader's tier discount. The taker fee
    comes from params.
    """

    def __init__(
        self,
        registry: PoolRegistry,
        ctx: EngineContext,
        params: ProtocolParams = DEFAULT_PROTOCOL_PARAMS,
    ) -> None:
        self.registry = registry
        self.ctx = ctx
        self.params = params

    def _pool(self, pool_id: int) -> Pool:
        pool = self.registry.get_pool(pool_id)
        if pool is None:
            raise NoRouteError(f"pool {pool_id} not found")
        return pool

    def _available_liquidity(self, pool: Pool, denom: str) -> Coin:
        """Balance of denom as the swap engine sees it (accounted for oracle pools)."""
        asset = pool.get_pool_asset(denom)
        return get_accounted_balance(self.ctx.accounted_pool, pool, [asset])[0].token

    @staticmethod
    def _hop_fee(pool: Pool, discount: Dec, override_swap_fee: Dec) -> Dec:
        swap_fee = override_swap_fee if override_swap_fee.is_positive() else pool.pool_params.swap_fee
        return swap_fee.mul(Dec.one().sub(discount))

    def calc_in_route_spot_price(
        self,
        amount: Coin,
        routes: Sequence[SwapAmountInRoute],
        discount: Dec,
        override_swap_fee: Dec,
    ) -> RouteQuote:
        """Quote an exact-input route starting from amount.

        Raises:
            NoRouteError: If routes is empty or names an unknown pool
            AmmError: The first hop failure reported by the swap engine
        """
        if not routes:
            raise NoRouteError("empty route")

        spot_price = Dec.one()
        total_fee = Dec.zero()
        total_slippage = Dec.zero()
        total_bonus = Dec.zero()
        current = amount
        pool = None
        for route in routes:
            pool = self._pool(route.pool_id)
            swap_fee = self._hop_fee(pool, discount, override_swap_fee)
            spot_price = spot_price.mul(hop_spot_price(self.ctx, pool, current.denom, route.token_out_denom))

            result = swap_out_amt_given_in(
                self.ctx,
                pool,
                None,
                Coins([current]),
                route.token_out_denom,
                swap_fee,
                Dec.one(),
                self.params,
                self.params.taker_fee,
            )
            if result.error is not None:
                raise result.error

            total_fee = total_fee.add(result.swap_fee)
            total_slippage = total_slippage.add(result.slippage)
            total_bonus = total_bonus.add(result.weight_balance_bonus)
            current = result.token_out

        impacted_price = Dec.from_int(current.amount).quo(Dec.from_int(amount.amount))
        return RouteQuote(
            spot_price=spot_price,
            impacted_price=impacted_price,
            amount=current,
            swap_fee=total_fee,
            discount=discount,
            available_liquidity=self._available_liquidity(pool, current.denom),
            slippage=total_slippage,
            weight_bonus=total_bonus,
        )

    def calc_out_route_spot_price(
        self,
        amount: Coin,
        routes: Sequence[SwapAmountOutRoute],
        discount: Dec,
        override_swap_fee: Dec,
    ) -> RouteQuote:
        """Quote an exact-output route delivering amount.

        Hops are priced last to first. The quote's amount is the input the
        trader must pay; prices stay quoted as output per unit input.

        Raises:
            NoRouteError: If routes is empty or names an unknown pool
            AmmError: The first hop failure reported by the swap engine
        """
        if not routes:
            raise NoRouteError("empty route")

        spot_price = Dec.one()
        total_fee = Dec.zero()
        total_slippage = Dec.zero()
        total_bonus = Dec.zero()
        current = amount
        available_liquidity = self._available_liquidity(self._pool(routes[-1].pool_id), amount.denom)
        for route in reversed(routes):
            pool = self._pool(route.pool_id)
            swap_fee = self._hop_fee(pool, discount, override_swap_fee)
            spot_price = spot_price.mul(hop_spot_price(self.ctx, pool, route.token_in_denom, current.denom))

            result = swap_in_amt_given_out(
                self.ctx,
                pool,
                None,
                Coins([current]),
                route.token_in_denom,
                swap_fee,
                Dec.one(),
                self.params,
                self.params.taker_fee,
            )
            if result.error is not None:
                raise result.error

            total_fee = total_fee.add(result.swap_fee)
            total_slippage = total_slippage.add(result.slippage)
            total_bonus = total_bonus.add(result.weight_balance_bonus)
            current = result.token_in

        impacted_price = Dec.from_int(amount.amount).quo(Dec.from_int(current.amount))
        return RouteQuote(
            spot_price=spot_price,
            impacted_price=impacted_price,
            amount=current,
            swap_fee=total_fee,
            discount=discount,
            available_liquidity=available_liquidity,
            slippage=total_slippage,
            weight_bonus=total_bonus,
        )


__all__ = ["RouteQuoter", "hop_spot_price"]
