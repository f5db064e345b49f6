"""Swap estimation by denomination.

SwapEstimator answers "what would I get for this amount" without touching
any pool: it resolves the trader's fee tier, builds a route in whichever
direction the amount implies, quotes it and optionally reports price impact.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol

import structlog

from hybrid_amm.coins import Coin
from hybrid_amm.constants import ADDRESS_PREFIX
from hybrid_amm.errors import AmmError, InvalidDenomError, ZeroSpotPriceError
from hybrid_amm.keepers import TierKeeper
from hybrid_amm.math.fixed_point import Dec
from hybrid_amm.routing.types import RouteQuote, SwapAmountInRoute, SwapAmountOutRoute

logger = structlog.get_logger()

# bech32: lower-case human readable part, separator "1", data charset excludes 1, b, i, o.
# 20-byte accounts encode to 38 data characters, 32-byte ones to 58.
_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_ADDRESS_RE = re.compile(rf"^{ADDRESS_PREFIX}1[{_BECH32_CHARSET}]{{38,58}}$")


def is_valid_address(address: str | None) -> bool:
    """Check if a string is a well-formed account address.

    Args:
        address: String to validate

    Returns:
        True if address has the account prefix and bech32 data characters
    """
    if not isinstance(address, str):
        return False
    return bool(_ADDRESS_RE.match(address))


class RouteBuilder(Protocol):
    """Protocol for route discovery."""

    def calc_in_route_by_denom(
        self, denom_in: str, denom_out: str, base_currency: str
    ) -> list[SwapAmountInRoute]: ...

    def calc_out_route_by_denom(
        self, denom_out: str, denom_in: str, base_currency: str
    ) -> list[SwapAmountOutRoute]: ...


class RoutePricer(Protocol):
    """Protocol for per-route quoting."""

    def calc_in_route_spot_price(
        self,
        amount: Coin,
        routes: Sequence[SwapAmountInRoute],
        discount: Dec,
        override_swap_fee: Dec,
    ) -> RouteQuote: ...

    def calc_out_route_spot_price(
        self,
        amount: Coin,
        routes: Sequence[SwapAmountOutRoute],
        discount: Dec,
        override_swap_fee: Dec,
    ) -> RouteQuote: ...


@dataclass(frozen=True)
class SwapEstimation:
    """Result of SwapEstimator.estimate.

    Every field has a zero default (empty routes, Coin.empty(), zero Dec)
    except discount, which carries the resolved tier discount. Failed
    estimates return exactly these defaults with error set.

    Attributes:
        in_route: Exact-input route (when the amount is in denom_in)
        out_route: Exact-output route (when the amount is in denom_out)
        out_amount: Output received, or input required for an exact-output estimate
        spot_price: Route spot price, output per unit input
        swap_fee: Total discounted swap fee rate
        discount: Trader's tier discount
        available_liquidity: Pool balance of the route's final output denom
        slippage: Total slippage rate
        weight_bonus: Total weight-balance bonus rate
        price_impact: (spot - impacted) / spot, only when requested
        error: Failure reason, None on success
    """

    in_route: tuple[SwapAmountInRoute, ...] = ()
    out_route: tuple[SwapAmountOutRoute, ...] = ()
    out_amount: Coin = Coin.empty()
    spot_price: Dec = Dec.zero()
    swap_fee: Dec = Dec.zero()
    discount: Dec = Dec.zero()
    available_liquidity: Coin = Coin.empty()
    slippage: Dec = Dec.zero()
    weight_bonus: Dec = Dec.zero()
    price_impact: Dec = Dec.zero()
    error: AmmError | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


class SwapEstimator:
    """Estimates swaps by denomination across routed pools."""

    def __init__(
        self,
        tier_keeper: TierKeeper,
        route_builder: RouteBuilder,
        quoter: RoutePricer,
    ) -> None:
        self.tier_keeper = tier_keeper
        self.route_builder = route_builder
        self.quoter = quoter

    def _resolve_address(self, address: str) -> str | None:
        if is_valid_address(address):
            return address
        logger.debug("invalid_trader_address", address=address)
        return None

    def estimate(
        self,
        amount: Coin,
        denom_in: str,
        denom_out: str,
        base_currency: str,
        address: str,
        override_swap_fee: Dec = Dec.zero(),
        decimals: int = 0,
    ) -> SwapEstimation:
        """Estimate a swap of amount between denom_in and denom_out.

        If amount is in denom_in the estimate is exact-input and out_amount
        is what the trader receives. If amount is in denom_out the estimate
        is exact-output and out_amount is what the trader pays.

        Args:
            amount: Trade amount, in denom_in or denom_out
            denom_in: Denomination the trader pays
            denom_out: Denomination the trader receives
            base_currency: Intermediate denomination for two-hop routes
            address: Trader address used for the fee tier; malformed
                addresses fall back to the default identity
            override_swap_fee: Replaces each pool's swap fee when positive
            decimals: Non-zero to also compute price impact

        Returns:
            SwapEstimation; on failure the defaults with error set
        """
        tier = self.tier_keeper.get_membership_tier(self._resolve_address(address))
        defaults = SwapEstimation(discount=tier.discount)

        try:
            in_route: list[SwapAmountInRoute] = []
            out_route: list[SwapAmountOutRoute] = []
            if amount.denom == denom_in:
                in_route = self.route_builder.calc_in_route_by_denom(denom_in, denom_out, base_currency)
                quote = self.quoter.calc_in_route_spot_price(
                    amount, in_route, tier.discount, override_swap_fee
                )
            elif amount.denom == denom_out:
                out_route = self.route_builder.calc_out_route_by_denom(denom_out, denom_in, base_currency)
                quote = self.quoter.calc_out_route_spot_price(
                    amount, out_route, tier.discount, override_swap_fee
                )
            else:
                raise InvalidDenomError(
                    f"amount denom {amount.denom} is neither {denom_in} nor {denom_out}"
                )

            price_impact = Dec.zero()
            if decimals != 0:
                if quote.spot_price.is_zero():
                    raise ZeroSpotPriceError("spot price is zero")
                price_impact = quote.spot_price.sub(quote.impacted_price).quo(quote.spot_price)
        except AmmError as err:
            logger.debug(
                "swap_estimation_failed",
                amount=str(amount),
                denom_in=denom_in,
                denom_out=denom_out,
                error=type(err).__name__,
                reason=str(err),
            )
            return replace(defaults, error=err)

        return SwapEstimation(
            in_route=tuple(in_route),
            out_route=tuple(out_route),
            out_amount=quote.amount,
            spot_price=quote.spot_price,
            swap_fee=quote.swap_fee,
            discount=tier.discount,
            available_liquidity=quote.available_liquidity,
            slippage=quote.slippage,
            weight_bonus=quote.weight_bonus,
            price_impact=price_impact,
        )


__all__ = ["RouteBuilder", "RoutePricer", "SwapEstimation", "SwapEstimator", "is_valid_address"]
