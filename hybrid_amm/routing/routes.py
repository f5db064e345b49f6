"""Route discovery.

Routes are at most two hops: a direct pool when one exists, otherwise
through the base currency.
"""

from __future__ import annotations

from hybrid_amm.errors import InvalidDenomError, NoRouteError
from hybrid_amm.pool import Pool
from hybrid_amm.routing.registry import PoolRegistry
from hybrid_amm.routing.types import SwapAmountInRoute, SwapAmountOutRoute


class PoolRouteBuilder:
    """Builds routes from the pools in a registry.

    Among pools for the same pair, the one holding the most of the hop's
    output denomination wins; ties go to the lowest pool id.
    """

    def __init__(self, registry: PoolRegistry) -> None:
        self.registry = registry

    def best_pool(self, denom_in: str, denom_out: str) -> Pool | None:
        """Deepest pool swapping denom_in for denom_out, or None."""
        candidates = self.registry.pools_for_pair(denom_in, denom_out)
        if not candidates:
            return None
        # candidates are ordered by id, and max keeps the first of equal keys
        return max(candidates, key=lambda pool: pool.get_pool_asset(denom_out).token.amount)

    def _path(self, denom_in: str, denom_out: str, base_currency: str) -> list[tuple[Pool, str, str]]:
        if denom_in == denom_out:
            raise InvalidDenomError(f"cannot route {denom_in} to itself")

        direct = self.best_pool(denom_in, denom_out)
        if direct is not None:
            return [(direct, denom_in, denom_out)]

        if base_currency and base_currency not in (denom_in, denom_out):
            first = self.best_pool(denom_in, base_currency)
            second = self.best_pool(base_currency, denom_out)
            if first is not None and second is not None:
                return [(first, denom_in, base_currency), (second, base_currency, denom_out)]

        raise NoRouteError(f"no route from {denom_in} to {denom_out} via {base_currency or 'nothing'}")

    def calc_in_route_by_denom(
        self, denom_in: str, denom_out: str, base_currency: str
    ) -> list[SwapAmountInRoute]:
        """Exact-input route from denom_in to denom_out.

        Raises:
            InvalidDenomError: If denom_in equals denom_out
            NoRouteError: If neither a direct nor a base-currency route exists
        """
        return [
            SwapAmountInRoute(pool_id=pool.pool_id, token_out_denom=hop_out)
            for pool, _, hop_out in self._path(denom_in, denom_out, base_currency)
        ]

    def calc_out_route_by_denom(
        self, denom_out: str, denom_in: str, base_currency: str
    ) -> list[SwapAmountOutRoute]:
        """Exact-output route paying denom_in for denom_out, in execution order.

        Raises:
            InvalidDenomError: If denom_in equals denom_out
            NoRouteError: If neither a direct nor a base-currency route exists
        """
        return [
            SwapAmountOutRoute(pool_id=pool.pool_id, token_in_denom=hop_in)
            for pool, hop_in, _ in self._path(denom_in, denom_out, base_currency)
        ]


__all__ = ["PoolRouteBuilder"]
