"""Tests for protocol parameter configuration."""

import pytest

from hybrid_amm.config import DEFAULT_PROTOCOL_PARAMS, ProtocolParams
from hybrid_amm.constants import SWAP_GAS_COST, pool_share_denom
from tests.helpers import dec


class TestDefaults:
    def test_default_values(self):
        params = DEFAULT_PROTOCOL_PARAMS
        assert params.min_slippage == dec("0.001")
        assert params.swap_gas_cost == SWAP_GAS_COST
        assert params.taker_fee == dec(0)
        assert params.weight_breaking_fee_cap == dec("0.1")

    def test_rate_of_one_rejected(self):
        with pytest.raises(ValueError, match="min_slippage"):
            ProtocolParams(min_slippage=dec(1))

    def test_negative_multiplier_rejected(self):
        with pytest.raises(ValueError, match="weight_breaking_fee_multiplier"):
            ProtocolParams(weight_breaking_fee_multiplier=dec(-1))

    def test_negative_gas_rejected(self):
        with pytest.raises(ValueError, match="swap_gas_cost"):
            ProtocolParams(swap_gas_cost=-1)

    def test_share_denom(self):
        assert pool_share_denom(7) == "amm/pool/7"


class TestFromEnv:
    def test_empty_environment_gives_defaults(self):
        assert ProtocolParams.from_env({}) == DEFAULT_PROTOCOL_PARAMS

    def test_overrides(self):
        params = ProtocolParams.from_env(
            {
                "HYBRID_AMM_MIN_SLIPPAGE": "0.02",
                "HYBRID_AMM_TAKER_FEE": "0.001",
                "HYBRID_AMM_SWAP_GAS_COST": "25000",
            }
        )
        assert params.min_slippage == dec("0.02")
        assert params.taker_fee == dec("0.001")
        assert params.swap_gas_cost == 25_000
        assert params.weight_breaking_fee_multiplier == DEFAULT_PROTOCOL_PARAMS.weight_breaking_fee_multiplier

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("HYBRID_AMM_THRESHOLD_WEIGHT_DIFFERENCE", "0.05")
        assert ProtocolParams.from_env().threshold_weight_difference == dec("0.05")

    def test_unparseable_decimal(self):
        with pytest.raises(ValueError, match="HYBRID_AMM_MIN_SLIPPAGE"):
            ProtocolParams.from_env({"HYBRID_AMM_MIN_SLIPPAGE": "lots"})

    def test_unparseable_gas(self):
        with pytest.raises(ValueError, match="HYBRID_AMM_SWAP_GAS_COST"):
            ProtocolParams.from_env({"HYBRID_AMM_SWAP_GAS_COST": "1.5"})

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="taker_fee"):
            ProtocolParams.from_env({"HYBRID_AMM_TAKER_FEE": "1.5"})
