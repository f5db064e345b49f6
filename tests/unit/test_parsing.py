"""Tests for pool snapshot models and parsing."""

import pytest
from pydantic import ValidationError

from hybrid_amm.coins import Coin
from hybrid_amm.models import PoolState
from hybrid_amm.parsing import parse_pool, parse_pool_json, parse_pools
from tests.conftest import load_pool_fixture
from tests.helpers import ATOM, OSMO, USDC, dec


class TestPoolState:
    def test_amounts_accept_int_or_string(self):
        state = PoolState.model_validate(
            {
                "poolId": 1,
                "poolAssets": [{"token": {"denom": ATOM, "amount": 10}, "weight": "50"}],
                "totalShares": {"denom": "amm/pool/1", "amount": "5"},
            }
        )
        assert state.pool_assets[0].token.amount == "10"
        assert state.pool_params.use_oracle is False

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            PoolState.model_validate(
                {
                    "poolId": 1,
                    "poolAssets": [{"token": {"denom": ATOM, "amount": "-1"}, "weight": "50"}],
                    "totalShares": {"denom": "amm/pool/1", "amount": "5"},
                }
            )

    def test_float_rate_rejected(self):
        data = load_pool_fixture("oracle_pool")
        data["poolParams"]["swapFee"] = 0.002
        with pytest.raises(ValidationError):
            PoolState.model_validate(data)

    def test_snake_case_names_accepted(self):
        state = PoolState.model_validate(
            {
                "pool_id": 2,
                "pool_assets": [{"token": {"denom": ATOM, "amount": "1"}, "weight": "1"}],
                "total_shares": {"denom": "amm/pool/2", "amount": "1"},
            }
        )
        assert state.pool_id == 2


class TestParsePool:
    def test_oracle_fixture(self):
        pool = parse_pool(PoolState.model_validate(load_pool_fixture("oracle_pool")))
        assert pool.pool_id == 7
        assert pool.is_oracle_pool
        assert pool.pool_params.swap_fee == dec("0.002")
        assert pool.pool_params.min_slippage == dec("0.001")
        assert pool.pool_params.fee_denom == USDC
        assert pool.get_asset_external_liquidity_ratio(ATOM) == dec("0.5")
        assert pool.get_asset_external_liquidity_ratio(USDC) == dec(1)
        assert pool.total_shares == Coin("amm/pool/7", 100_000)

    def test_plain_fixture_defaults(self):
        pool = parse_pool_json(load_pool_fixture("plain_pool"))
        assert not pool.is_oracle_pool
        assert pool.get_pool_asset(OSMO).weight == 80
        assert pool.pool_params.weight_fee_policy == "linear"

    def test_json_text(self, fixtures_dir):
        text = (fixtures_dir / "pools" / "plain_pool.json").read_text()
        assert parse_pool_json(text).pool_id == 3

    def test_duplicate_denoms(self):
        with pytest.raises(ValueError, match="duplicate"):
            parse_pool_json(load_pool_fixture("duplicate_denoms"))

    def test_parse_pools_skips_invalid(self):
        pools = parse_pools(
            [
                load_pool_fixture("oracle_pool"),
                load_pool_fixture("duplicate_denoms"),
                {"poolId": "x"},
                load_pool_fixture("plain_pool"),
            ]
        )
        assert [pool.pool_id for pool in pools] == [7, 3]
