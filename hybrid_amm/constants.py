"""Protocol constants for pool pricing.

Centralizes default protocol parameters and identifiers.
"""

# Fixed gas charged per swap computation, regardless of outcome
SWAP_GAS_COST = 10_000

# Default protocol parameters (decimal strings, parsed into Dec by config)
DEFAULT_MIN_SLIPPAGE = "0.001"
DEFAULT_TAKER_FEE = "0"
DEFAULT_WEIGHT_BREAKING_FEE_MULTIPLIER = "0.5"
DEFAULT_WEIGHT_RECOVERY_FEE_PORTION = "0.1"
DEFAULT_THRESHOLD_WEIGHT_DIFFERENCE = "0.02"
DEFAULT_WEIGHT_BREAKING_FEE_CAP = "0.1"

# Pool share denomination is "amm/pool/<pool_id>"
POOL_SHARE_DENOM_PREFIX = "amm/pool/"

# Human-readable part of trader addresses
ADDRESS_PREFIX = "amm"

# Weight-fee policy used when a pool does not name one
DEFAULT_WEIGHT_FEE_POLICY = "linear"


def pool_share_denom(pool_id: int) -> str:
    """Share denomination for a pool id."""
    return f"{POOL_SHARE_DENOM_PREFIX}{pool_id}"
