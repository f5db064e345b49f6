"""Route discovery, quoting and swap estimation."""

from hybrid_amm.routing.estimation import SwapEstimation, SwapEstimator, is_valid_address
from hybrid_amm.routing.quoter import RouteQuoter, hop_spot_price
from hybrid_amm.routing.registry import PoolRegistry
from hybrid_amm.routing.routes import PoolRouteBuilder
from hybrid_amm.routing.types import RouteQuote, SwapAmountInRoute, SwapAmountOutRoute

__all__ = [
    "PoolRegistry",
    "PoolRouteBuilder",
    "RouteQuote",
    "RouteQuoter",
    "SwapAmountInRoute",
    "SwapAmountOutRoute",
    "SwapEstimation",
    "SwapEstimator",
    "hop_spot_price",
    "is_valid_address",
]
