"""Tests for RouteQuoter."""

import pytest

from hybrid_amm.coins import Coin
from hybrid_amm.errors import AmountTooLowError, NoRouteError
from hybrid_amm.routing import PoolRegistry, RouteQuoter, SwapAmountInRoute, SwapAmountOutRoute, hop_spot_price
from tests.helpers import ATOM, OSMO, USDC, dec, make_asset, make_ctx, make_params, make_pool


@pytest.fixture
def registry():
    return PoolRegistry(
        [
            make_pool(pool_id=1, assets=[make_asset(ATOM), make_asset(USDC)]),
            make_pool(pool_id=2, assets=[make_asset(OSMO), make_asset(USDC)]),
            make_pool(pool_id=3, assets=[make_asset(ATOM), make_asset(USDC)], swap_fee="0.01"),
        ]
    )


@pytest.fixture
def quoter(registry):
    return RouteQuoter(registry, make_ctx(), make_params())


class TestHopSpotPrice:
    def test_plain_pool_uses_balances(self):
        pool = make_pool(assets=[make_asset(ATOM, 500_000), make_asset(USDC)])
        assert hop_spot_price(make_ctx(), pool, ATOM, USDC) == dec(2)

    def test_oracle_pool_uses_prices(self):
        ctx = make_ctx(prices={ATOM: "10", USDC: "1"})
        assert hop_spot_price(ctx, make_pool(use_oracle=True), ATOM, USDC) == dec(10)


class TestInRouteQuote:
    def test_single_hop(self, quoter):
        quote = quoter.calc_in_route_spot_price(
            Coin(ATOM, 1000), [SwapAmountInRoute(1, USDC)], dec(0), dec(0)
        )
        assert quote.amount == Coin(USDC, 999)
        assert quote.spot_price == dec(1)
        assert quote.impacted_price == dec("0.999")
        assert quote.slippage == dec("0.001")
        assert quote.swap_fee == dec(0)
        assert quote.available_liquidity == Coin(USDC, 1_000_000)

    def test_pool_fee(self, quoter):
        quote = quoter.calc_in_route_spot_price(
            Coin(ATOM, 1000), [SwapAmountInRoute(3, USDC)], dec(0), dec(0)
        )
        assert quote.amount == Coin(USDC, 989)
        assert quote.swap_fee == dec("0.01")

    def test_override_fee_discounted(self, quoter):
        """Override 0.01 at a 50% discount: 0.005, so 995 effective in -> 994."""
        quote = quoter.calc_in_route_spot_price(
            Coin(ATOM, 1000), [SwapAmountInRoute(1, USDC)], dec("0.5"), dec("0.01")
        )
        assert quote.swap_fee == dec("0.005")
        assert quote.discount == dec("0.5")
        assert quote.amount == Coin(USDC, 994)

    def test_two_hops(self, quoter):
        """999 USDC after the first hop, floor(998.003) OSMO after the second."""
        quote = quoter.calc_in_route_spot_price(
            Coin(ATOM, 1000),
            [SwapAmountInRoute(1, USDC), SwapAmountInRoute(2, OSMO)],
            dec(0),
            dec(0),
        )
        assert quote.amount == Coin(OSMO, 998)
        assert quote.spot_price == dec(1)
        assert quote.impacted_price == dec("0.998")
        assert dec("0.002") < quote.slippage < dec("0.0021")
        assert quote.available_liquidity == Coin(OSMO, 1_000_000)

    def test_unknown_pool(self, quoter):
        with pytest.raises(NoRouteError):
            quoter.calc_in_route_spot_price(Coin(ATOM, 1000), [SwapAmountInRoute(99, USDC)], dec(0), dec(0))

    def test_empty_route(self, quoter):
        with pytest.raises(NoRouteError):
            quoter.calc_in_route_spot_price(Coin(ATOM, 1000), [], dec(0), dec(0))

    def test_hop_failure_propagates(self, quoter):
        with pytest.raises(AmountTooLowError):
            quoter.calc_in_route_spot_price(Coin(ATOM, 1), [SwapAmountInRoute(1, USDC)], dec(0), dec(0))


class TestOutRouteQuote:
    def test_single_hop(self, quoter):
        quote = quoter.calc_out_route_spot_price(
            Coin(USDC, 999), [SwapAmountOutRoute(1, ATOM)], dec(0), dec(0)
        )
        assert quote.amount == Coin(ATOM, 1000)
        assert quote.impacted_price == dec("0.999")
        assert quote.available_liquidity == Coin(USDC, 1_000_000)

    def test_two_hops_priced_backwards(self, quoter):
        quote = quoter.calc_out_route_spot_price(
            Coin(OSMO, 998),
            [SwapAmountOutRoute(1, ATOM), SwapAmountOutRoute(2, USDC)],
            dec(0),
            dec(0),
        )
        assert quote.amount.denom == ATOM
        assert quote.amount.amount >= 1000
        assert quote.available_liquidity == Coin(OSMO, 1_000_000)


class TestAvailableLiquidity:
    """Oracle pools report the accounted balance the swap engine prices against."""

    @pytest.fixture
    def accounted_quoter(self):
        registry = PoolRegistry([make_pool(pool_id=4, use_oracle=True)])
        ctx = make_ctx(accounted={(4, USDC): 500_000, (4, ATOM): 1_000_000})
        return RouteQuoter(registry, ctx, make_params())

    def test_in_route(self, accounted_quoter):
        quote = accounted_quoter.calc_in_route_spot_price(
            Coin(ATOM, 1000), [SwapAmountInRoute(4, USDC)], dec(0), dec(0)
        )
        assert quote.available_liquidity == Coin(USDC, 500_000)

    def test_out_route(self, accounted_quoter):
        quote = accounted_quoter.calc_out_route_spot_price(
            Coin(USDC, 100), [SwapAmountOutRoute(4, ATOM)], dec(0), dec(0)
        )
        assert quote.available_liquidity == Coin(USDC, 500_000)

    def test_plain_pool_keeps_raw_balance(self):
        registry = PoolRegistry([make_pool(pool_id=5)])
        quoter = RouteQuoter(registry, make_ctx(accounted={(5, USDC): 500_000}), make_params())
        quote = quoter.calc_in_route_spot_price(Coin(ATOM, 1000), [SwapAmountInRoute(5, USDC)], dec(0), dec(0))
        assert quote.available_liquidity == Coin(USDC, 1_000_000)
