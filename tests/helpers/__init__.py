"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Denominations, addresses and common amounts
- factories: Pool, context and parameter factory functions
"""

from tests.helpers.constants import (
    ATOM,
    BASE_CURRENCY,
    BTC,
    DEEP_BALANCE,
    GOLD_TRADER,
    OSMO,
    TRADER,
    USDC,
)
from tests.helpers.factories import (
    FixedWeightFeePolicy,
    dec,
    make_asset,
    make_ctx,
    make_params,
    make_pool,
)

__all__ = [
    # Constants
    "ATOM",
    "USDC",
    "OSMO",
    "BTC",
    "BASE_CURRENCY",
    "TRADER",
    "GOLD_TRADER",
    "DEEP_BALANCE",
    # Factories
    "FixedWeightFeePolicy",
    "dec",
    "make_asset",
    "make_ctx",
    "make_params",
    "make_pool",
]
