"""Tests for Coin and Coins."""

import pytest

from hybrid_amm.coins import Coin, Coins
from hybrid_amm.errors import NegativeCoinAmountError
from tests.helpers import ATOM, OSMO, USDC


class TestCoin:
    def test_negative_amount_rejected(self):
        with pytest.raises(NegativeCoinAmountError):
            Coin(ATOM, -1)

    def test_amount_must_be_int(self):
        with pytest.raises(TypeError):
            Coin(ATOM, 1.5)

    def test_empty(self):
        empty = Coin.empty()
        assert empty.denom == ""
        assert empty.is_zero()

    def test_str(self):
        assert str(Coin(ATOM, 42)) == "42uatom"


class TestCoins:
    def test_sorted_and_zero_dropped(self):
        coins = Coins([Coin(USDC, 5), Coin(ATOM, 0), Coin(OSMO, 3)])
        assert coins.denoms() == [OSMO, USDC]

    def test_duplicates_summed(self):
        coins = Coins([Coin(ATOM, 5), Coin(ATOM, 7)])
        assert len(coins) == 1
        assert coins.amount_of(ATOM) == 12

    def test_amount_of_missing_is_zero(self):
        assert Coins([Coin(ATOM, 5)]).amount_of(USDC) == 0

    def test_add(self):
        total = Coins([Coin(ATOM, 5)]).add(Coins([Coin(ATOM, 1), Coin(USDC, 2)]))
        assert total == Coins([Coin(ATOM, 6), Coin(USDC, 2)])

    def test_sub(self):
        remaining = Coins([Coin(ATOM, 5), Coin(USDC, 2)]).sub(Coins([Coin(USDC, 2)]))
        assert remaining == Coins([Coin(ATOM, 5)])

    def test_sub_negative_raises(self):
        with pytest.raises(NegativeCoinAmountError):
            Coins([Coin(ATOM, 5)]).sub(Coins([Coin(ATOM, 6)]))

    def test_sub_missing_denom_raises(self):
        with pytest.raises(NegativeCoinAmountError):
            Coins([Coin(ATOM, 5)]).sub(Coins([Coin(USDC, 1)]))

    def test_is_zero(self):
        assert Coins().is_zero()
        assert Coins([Coin(ATOM, 0)]).is_zero()

    def test_hashable_and_equal(self):
        assert hash(Coins([Coin(ATOM, 1)])) == hash(Coins([Coin(ATOM, 1)]))
