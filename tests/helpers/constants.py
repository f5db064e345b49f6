"""Common test constants.

Denominations, addresses and amounts shared across test files.
"""

from hybrid_amm.math import Dec

# Denominations
ATOM = "uatom"
USDC = "uusdc"
OSMO = "uosmo"
BTC = "wbtc"

# Base currency for two-hop routes
BASE_CURRENCY = USDC

# Well-formed trader addresses (prefix "amm", 38 bech32 data characters)
TRADER = "amm1" + "q" * 38
GOLD_TRADER = "amm1" + "p" * 38

# Pool depth used by most swap tests: deep enough that small trades round
# to whole units on the curve
DEEP_BALANCE = 1_000_000

ONE = Dec.one()
ZERO = Dec.zero()
