"""Hybrid AMM - oracle-aware weighted pool pricing."""

from hybrid_amm.coins import Coin, Coins
from hybrid_amm.config import DEFAULT_PROTOCOL_PARAMS, ProtocolParams
from hybrid_amm.context import EngineContext, GasMeter
from hybrid_amm.exit import ExitResult, ShareExitCalculator, exit_pool
from hybrid_amm.math import Dec
from hybrid_amm.pool import Pool, PoolAsset, PoolParams
from hybrid_amm.swap import SwapInResult, SwapResult, swap_in_amt_given_out, swap_out_amt_given_in

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_PROTOCOL_PARAMS",
    "Coin",
    "Coins",
    "Dec",
    "EngineContext",
    "ExitResult",
    "GasMeter",
    "Pool",
    "PoolAsset",
    "PoolParams",
    "ProtocolParams",
    "ShareExitCalculator",
    "SwapInResult",
    "SwapResult",
    "__version__",
    "exit_pool",
    "swap_in_amt_given_out",
    "swap_out_amt_given_in",
]
