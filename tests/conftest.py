"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from hybrid_amm.context import EngineContext
from hybrid_amm.pool import Pool
from tests.helpers import ATOM, USDC, make_ctx, make_params, make_pool

FIXTURES_DIR = Path(__file__).parent / "fixtures"
POOLS_DIR = FIXTURES_DIR / "pools"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


def load_pool_fixture(name: str) -> dict:
    """Load a pool snapshot fixture by name.

    Args:
        name: Fixture name (e.g., "oracle_pool")

    Returns:
        Raw JSON dict, ready for PoolState.model_validate
    """
    with open(POOLS_DIR / f"{name}.json") as f:
        return json.load(f)


@pytest.fixture
def plain_pool() -> Pool:
    """Equal-weight ATOM/USDC invariant-curve pool, no fees."""
    return make_pool()


@pytest.fixture
def oracle_pool() -> Pool:
    """Equal-weight ATOM/USDC oracle pool, no fees, no weight-fee policy."""
    return make_pool(use_oracle=True)


@pytest.fixture
def ctx() -> EngineContext:
    """Context with ATOM and USDC both priced at 1."""
    return make_ctx(prices={ATOM: "1", USDC: "1"})


@pytest.fixture
def params():
    """Protocol params with zero slippage floor and taker fee."""
    return make_params()
