"""Coin and balance-set value types.

A Coin is a denomination plus a non-negative integer amount. Coins is an
immutable set of Coins keyed by denomination: entries are kept sorted by
denom and zero amounts are dropped, so iteration order is deterministic.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from hybrid_amm.errors import NegativeCoinAmountError


@dataclass(frozen=True)
class Coin:
    """Denomination plus non-negative integer amount."""

    denom: str
    amount: int

    def __post_init__(self) -> None:
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            raise TypeError(f"Coin amount must be int, got {type(self.amount).__name__}")
        if self.amount < 0:
            raise NegativeCoinAmountError(f"negative coin amount: {self.amount}{self.denom}")

    @classmethod
    def empty(cls) -> Coin:
        """The zero-valued Amount returned on every failure path."""
        return cls(denom="", amount=0)

    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


class Coins:
    """Immutable balance set keyed by denomination."""

    __slots__ = ("_coins",)
    _coins: tuple[Coin, ...]

    def __init__(self, coins: Iterable[Coin] = ()) -> None:
        """Build from coins; duplicate denominations are summed.

        Raises:
            ValueError: If a coin has an empty denomination and a non-zero amount
        """
        merged: dict[str, int] = {}
        for coin in coins:
            if coin.amount == 0:
                continue
            if not coin.denom:
                raise ValueError(f"coin without denomination: {coin}")
            merged[coin.denom] = merged.get(coin.denom, 0) + coin.amount
        self._coins = tuple(Coin(denom, merged[denom]) for denom in sorted(merged))

    def amount_of(self, denom: str) -> int:
        """Amount held for denom, zero when absent."""
        for coin in self._coins:
            if coin.denom == denom:
                return coin.amount
        return 0

    def denoms(self) -> list[str]:
        return [coin.denom for coin in self._coins]

    def add(self, other: Coins) -> Coins:
        return Coins((*self._coins, *other._coins))

    def sub(self, other: Coins) -> Coins:
        """Subtract other from self.

        Raises:
            NegativeCoinAmountError: If any resulting amount would be negative
        """
        result: dict[str, int] = {coin.denom: coin.amount for coin in self._coins}
        for coin in other._coins:
            remaining = result.get(coin.denom, 0) - coin.amount
            if remaining < 0:
                raise NegativeCoinAmountError(
                    f"negative coin amount: {remaining}{coin.denom} after subtracting {coin}"
                )
            result[coin.denom] = remaining
        return Coins(Coin(denom, amount) for denom, amount in result.items())

    def is_zero(self) -> bool:
        return not self._coins

    def __iter__(self) -> Iterator[Coin]:
        return iter(self._coins)

    def __len__(self) -> int:
        return len(self._coins)

    def __getitem__(self, index: int) -> Coin:
        return self._coins[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coins):
            return NotImplemented
        return self._coins == other._coins

    def __hash__(self) -> int:
        return hash(self._coins)

    def __repr__(self) -> str:
        return f"Coins({list(self._coins)!r})"

    def __str__(self) -> str:
        return ",".join(str(coin) for coin in self._coins)
