"""Tests for the oracle slippage model."""

import pytest

from hybrid_amm.coins import Coin, Coins
from hybrid_amm.errors import PriceNotSetError
from hybrid_amm.keepers import StaticOracleKeeper
from hybrid_amm.slippage import calc_given_in_slippage, calc_given_out_slippage, get_oracle_prices
from tests.helpers import ATOM, USDC, dec, make_asset, make_ctx, make_pool


class TestGetOraclePrices:
    def test_both_set(self):
        oracle = StaticOracleKeeper({ATOM: "10", USDC: "1"})
        assert get_oracle_prices(oracle, ATOM, USDC) == (dec(10), dec(1))

    def test_in_price_missing(self):
        with pytest.raises(PriceNotSetError, match="inToken"):
            get_oracle_prices(StaticOracleKeeper({USDC: "1"}), ATOM, USDC)

    def test_out_price_missing(self):
        with pytest.raises(PriceNotSetError, match="outToken"):
            get_oracle_prices(StaticOracleKeeper({ATOM: "1"}), ATOM, USDC)


class TestGivenInSlippage:
    def test_oracle_minus_curve(self, ctx, oracle_pool):
        """Oracle says 100, curve gives floor(99.99) = 99."""
        slippage = calc_given_in_slippage(ctx, oracle_pool, None, Coins([Coin(ATOM, 100)]), USDC)
        assert slippage == dec(1)

    def test_never_negative(self, oracle_pool):
        """Oracle values ATOM at half a USDC; the curve pays more than that."""
        ctx = make_ctx(prices={ATOM: "1", USDC: "2"})
        slippage = calc_given_in_slippage(ctx, oracle_pool, None, Coins([Coin(ATOM, 100)]), USDC)
        assert slippage == dec(0)

    def test_uses_snapshot_balances(self, ctx, oracle_pool):
        """Snapshot at 4900/4900: curve gives 4900 * 0.02 = 98."""
        snapshot = make_pool(use_oracle=True, assets=[make_asset(ATOM, 4_900), make_asset(USDC, 4_900)])
        slippage = calc_given_in_slippage(ctx, oracle_pool, snapshot, Coins([Coin(ATOM, 100)]), USDC)
        assert slippage == dec(2)

    def test_uses_accounted_balances(self, oracle_pool):
        ctx = make_ctx(accounted={(1, ATOM): 4_900, (1, USDC): 4_900})
        slippage = calc_given_in_slippage(ctx, oracle_pool, None, Coins([Coin(ATOM, 100)]), USDC)
        assert slippage == dec(2)

    def test_missing_price(self, oracle_pool):
        ctx = make_ctx(prices={ATOM: "1"})
        with pytest.raises(PriceNotSetError):
            calc_given_in_slippage(ctx, oracle_pool, None, Coins([Coin(ATOM, 100)]), USDC)


class TestGivenOutSlippage:
    def test_curve_minus_oracle(self, ctx, oracle_pool):
        """100 out needs ceil(100 / 0.9999) = 101 on the curve, 100 at the oracle."""
        slippage = calc_given_out_slippage(ctx, oracle_pool, None, Coin(USDC, 100), ATOM)
        assert slippage == dec(1)

    def test_never_negative(self, oracle_pool):
        ctx = make_ctx(prices={ATOM: "1", USDC: "2"})
        assert calc_given_out_slippage(ctx, oracle_pool, None, Coin(USDC, 100), ATOM) == dec(0)
