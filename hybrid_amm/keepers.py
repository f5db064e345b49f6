"""Collaborator interfaces consumed by the pricing core.

The core only reads from these: prices, externally accounted balances and
membership tiers are owned by the surrounding runtime. The Static*
implementations are in-memory versions for embedding and tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from hybrid_amm.math.fixed_point import Dec


class OracleKeeper(Protocol):
    """Protocol for reference price lookup.

    A zero price means "no price set" and is never a valid quote.
    """

    def get_asset_price_from_denom(self, denom: str) -> Dec:
        """Price of one unit of denom, or zero when unset."""
        ...


class AccountedPoolKeeper(Protocol):
    """Protocol for externally tracked pool balances.

    Balances layered on a pool (e.g. margin positions) override the raw
    balance when strictly positive.
    """

    def get_accounted_balance(self, pool_id: int, denom: str) -> int:
        """Tracked balance, or a non-positive value for "no override"."""
        ...


@dataclass(frozen=True)
class MembershipTier:
    """Fee discount tier of a trader."""

    name: str
    discount: Dec


NON_MEMBER_TIER = MembershipTier(name="bronze", discount=Dec.zero())


class TierKeeper(Protocol):
    """Protocol for membership tier lookup.

    address is None for the default identity used when the caller's
    address could not be parsed.
    """

    def get_membership_tier(self, address: str | None) -> MembershipTier: ...


class StaticOracleKeeper:
    """Oracle backed by a fixed price table."""

    def __init__(self, prices: Mapping[str, Dec | str] | None = None) -> None:
        self._prices: dict[str, Dec] = {}
        for denom, price in (prices or {}).items():
            self.set_price(denom, price)

    def set_price(self, denom: str, price: Dec | str) -> None:
        self._prices[denom] = Dec.from_str(price) if isinstance(price, str) else price

    def get_asset_price_from_denom(self, denom: str) -> Dec:
        return self._prices.get(denom, Dec.zero())


class StaticAccountedPoolKeeper:
    """Accounted balances backed by a (pool_id, denom) table."""

    def __init__(self, balances: Mapping[tuple[int, str], int] | None = None) -> None:
        self._balances: dict[tuple[int, str], int] = dict(balances or {})

    def set_balance(self, pool_id: int, denom: str, amount: int) -> None:
        self._balances[(pool_id, denom)] = amount

    def get_accounted_balance(self, pool_id: int, denom: str) -> int:
        return self._balances.get((pool_id, denom), 0)


class StaticTierKeeper:
    """Tier lookup backed by an address table.

    Unknown addresses and the default identity get default_tier.
    """

    def __init__(
        self,
        tiers: Mapping[str, MembershipTier] | None = None,
        default_tier: MembershipTier = NON_MEMBER_TIER,
    ) -> None:
        self._tiers: dict[str, MembershipTier] = dict(tiers or {})
        self.default_tier = default_tier

    def get_membership_tier(self, address: str | None) -> MembershipTier:
        if address is None:
            return self.default_tier
        return self._tiers.get(address, self.default_tier)
