"""Pool dataclasses.

A Pool is an immutable value: swap and exit operations return a new Pool
instead of mutating the one they were given, and the caller decides whether
to commit it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from hybrid_amm.coins import Coin, Coins
from hybrid_amm.constants import DEFAULT_WEIGHT_FEE_POLICY
from hybrid_amm.errors import (
    DenomNotInPoolError,
    InvalidDenomError,
    InvalidTokensInError,
    NegativePoolAmountError,
)
from hybrid_amm.math.fixed_point import Dec


@dataclass(frozen=True)
class PoolAsset:
    """One asset held by a pool.

    Attributes:
        token: Denomination and integer balance
        weight: Configured (unnormalized) integer weight
        external_liquidity_ratio: Assumed size of this pool relative to the
            deeper external market for this denomination. Oracle pools divide
            trade sizes by it before modelling slippage.
    """

    token: Coin
    weight: int
    external_liquidity_ratio: Dec = Dec.one()

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")

    @property
    def denom(self) -> str:
        return self.token.denom

    def with_amount(self, amount: int) -> PoolAsset:
        """Copy of this asset holding a different balance.

        Raises:
            NegativePoolAmountError: If amount is negative
        """
        if amount < 0:
            raise NegativePoolAmountError(f"negative pool amount for {self.denom}: {amount}")
        return replace(self, token=Coin(self.token.denom, amount))


@dataclass(frozen=True)
class PoolParams:
    """Per-pool parameters.

    Attributes:
        swap_fee: Base swap fee as a rate (e.g. 0.003)
        use_oracle: Price trades off the oracle instead of the invariant curve
        min_slippage: Pool-level slippage floor; the protocol floor still applies
        weight_fee_policy: Name of the registered weight-fee policy
        fee_denom: Denomination fees are collected in (informational)
    """

    swap_fee: Dec = Dec.zero()
    use_oracle: bool = False
    min_slippage: Dec = Dec.zero()
    weight_fee_policy: str = DEFAULT_WEIGHT_FEE_POLICY
    fee_denom: str = ""


@dataclass(frozen=True)
class Pool:
    """Multi-asset liquidity pool.

    Attributes:
        pool_id: Numeric pool identifier
        pool_assets: Assets in pool order (order is significant for weight math)
        total_shares: Outstanding pool shares
        pool_params: Fee and mode parameters
    """

    pool_id: int
    pool_assets: tuple[PoolAsset, ...]
    total_shares: Coin
    pool_params: PoolParams = PoolParams()

    def __post_init__(self) -> None:
        denoms = [asset.denom for asset in self.pool_assets]
        if len(set(denoms)) != len(denoms):
            raise ValueError(f"pool {self.pool_id} has duplicate denominations: {denoms}")

    @property
    def is_oracle_pool(self) -> bool:
        return self.pool_params.use_oracle

    def get_pool_asset(self, denom: str) -> PoolAsset:
        """Get the asset for a denomination.

        Raises:
            DenomNotInPoolError: If the pool does not hold denom
        """
        for asset in self.pool_assets:
            if asset.denom == denom:
                return asset
        raise DenomNotInPoolError(f"denom {denom} not in pool {self.pool_id}")

    def has_denom(self, denom: str) -> bool:
        return any(asset.denom == denom for asset in self.pool_assets)

    def get_asset_external_liquidity_ratio(self, denom: str) -> Dec:
        return self.get_pool_asset(denom).external_liquidity_ratio

    def total_pool_liquidity(self) -> Coins:
        return Coins(asset.token for asset in self.pool_assets)

    def parse_pool_assets(
        self, tokens_in: Coins, token_out_denom: str
    ) -> tuple[Coin, PoolAsset, PoolAsset]:
        """Resolve a single-coin input against the output denomination.

        Returns:
            Tuple of (token_in, pool_asset_in, pool_asset_out)

        Raises:
            InvalidTokensInError: If tokens_in is not exactly one coin
            InvalidDenomError: If input and output denominations are equal
            DenomNotInPoolError: If either denomination is not in the pool
        """
        if len(tokens_in) != 1:
            raise InvalidTokensInError("expected tokensIn to be of length one")
        token_in = tokens_in[0]
        if token_in.denom == token_out_denom:
            raise InvalidDenomError(f"cannot swap {token_in.denom} for itself")
        asset_in = self.get_pool_asset(token_in.denom)
        asset_out = self.get_pool_asset(token_out_denom)
        return token_in, asset_in, asset_out

    def update_pool_asset_balances(self, balances: Coins) -> Pool:
        """Return a pool whose asset balances equal balances.

        Denominations missing from balances are set to zero (Coins drops zero
        entries). Denominations not held by the pool are rejected.

        Raises:
            DenomNotInPoolError: If balances names a denom the pool does not hold
        """
        for coin in balances:
            if not self.has_denom(coin.denom):
                raise DenomNotInPoolError(f"denom {coin.denom} not in pool {self.pool_id}")
        assets = tuple(asset.with_amount(balances.amount_of(asset.denom)) for asset in self.pool_assets)
        return replace(self, pool_assets=assets)

    def with_total_shares(self, amount: int) -> Pool:
        """Return a pool with a different share supply.

        Raises:
            NegativePoolAmountError: If amount is negative
        """
        if amount < 0:
            raise NegativePoolAmountError(f"negative total shares for pool {self.pool_id}: {amount}")
        return replace(self, total_shares=Coin(self.total_shares.denom, amount))
