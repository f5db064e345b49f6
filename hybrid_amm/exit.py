"""Pool exit.

exit_pool converts shares to coins with an ExitCalculator and then applies
the result to a copy of the pool. Either both the liquidity and the share
supply change or the original pool comes back untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog

from hybrid_amm.accounting import get_accounted_balance
from hybrid_amm.coins import Coin, Coins
from hybrid_amm.config import ProtocolParams
from hybrid_amm.context import EngineContext
from hybrid_amm.errors import (
    AmmError,
    AmountTooLowError,
    InvalidSharesError,
    NegativeCoinAmountError,
    NegativePoolAmountError,
    PriceNotSetError,
    UnsupportedExitError,
)
from hybrid_amm.math.fixed_point import Dec
from hybrid_amm.pool import Pool
from hybrid_amm.swap import apply_weight_fees, slippage_floor
from hybrid_amm.weights import new_pool_assets_after_swap

logger = structlog.get_logger()


@dataclass(frozen=True)
class ExitCoins:
    """What an exit pays out, before it is applied to the pool.

    Attributes:
        exiting_coins: Coins removed from the pool and paid to the holder
        weight_balance_bonus: Bonus rate from the weight-fee policy
        slippage: Slippage rate charged on a single-asset exit
        swap_fee: Swap fee rate charged on a single-asset exit
        taker_fee: Taker fee rate charged on a single-asset exit
        slippage_coins: Slippage retained by the pool
    """

    exiting_coins: Coins
    weight_balance_bonus: Dec = Dec.zero()
    slippage: Dec = Dec.zero()
    swap_fee: Dec = Dec.zero()
    taker_fee: Dec = Dec.zero()
    slippage_coins: Coins = Coins()


@dataclass(frozen=True)
class ExitResult:
    """Outcome of exit_pool.

    On failure every metric is zero, both coin sets are empty, pool is the
    pool that was passed in and error holds the reason.
    """

    exiting_coins: Coins
    weight_balance_bonus: Dec
    slippage: Dec
    swap_fee: Dec
    taker_fee: Dec
    slippage_coins: Coins
    pool: Pool
    error: AmmError | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @classmethod
    def zero(cls, pool: Pool, error: AmmError | None = None) -> ExitResult:
        return cls(
            exiting_coins=Coins(),
            weight_balance_bonus=Dec.zero(),
            slippage=Dec.zero(),
            swap_fee=Dec.zero(),
            taker_fee=Dec.zero(),
            slippage_coins=Coins(),
            pool=pool,
            error=error,
        )


class ExitCalculator(Protocol):
    """Protocol for share-to-coins conversion."""

    def calc_exit_pool_coins_from_shares(
        self,
        ctx: EngineContext,
        pool: Pool,
        exiting_shares: int,
        token_out_denom: str,
        params: ProtocolParams,
        taker_fees: Dec,
        apply_weight_breaking_fee: bool,
    ) -> ExitCoins:
        """Coins owed for exiting_shares.

        Raises:
            AmmError: If the exit cannot be priced
        """
        ...


class ShareExitCalculator:
    """Default exit calculator.

    An empty token_out_denom pays out every asset in proportion to the
    shares redeemed. A named denomination pays out that asset alone, which
    only oracle pools support: the shares' oracle value is converted at the
    oracle price, the slippage floor is retained by the pool, and weight,
    swap and taker fees apply as for a swap.
    """

    def calc_exit_pool_coins_from_shares(
        self,
        ctx: EngineContext,
        pool: Pool,
        exiting_shares: int,
        token_out_denom: str,
        params: ProtocolParams,
        taker_fees: Dec,
        apply_weight_breaking_fee: bool,
    ) -> ExitCoins:
        total_shares = pool.total_shares.amount
        if exiting_shares <= 0:
            raise InvalidSharesError(f"exiting shares must be positive, got {exiting_shares}")
        if exiting_shares > total_shares:
            raise InvalidSharesError(f"exiting shares {exiting_shares} exceed total shares {total_shares}")

        share_ratio = Dec.from_int(exiting_shares).quo(Dec.from_int(total_shares))
        if token_out_denom == "":
            return self._proportional_exit(pool, share_ratio)
        if not pool.is_oracle_pool:
            raise UnsupportedExitError(f"single asset exit requires an oracle pool, pool {pool.pool_id} is not")
        return self._single_asset_exit(
            ctx, pool, share_ratio, token_out_denom, params, taker_fees, apply_weight_breaking_fee
        )

    @staticmethod
    def _proportional_exit(pool: Pool, share_ratio: Dec) -> ExitCoins:
        exiting = Coins(
            Coin(asset.denom, Dec.from_int(asset.token.amount).mul(share_ratio).truncate_int())
            for asset in pool.pool_assets
        )
        return ExitCoins(exiting_coins=exiting)

    @staticmethod
    def _single_asset_exit(
        ctx: EngineContext,
        pool: Pool,
        share_ratio: Dec,
        token_out_denom: str,
        params: ProtocolParams,
        taker_fees: Dec,
        apply_weight_breaking_fee: bool,
    ) -> ExitCoins:
        pool.get_pool_asset(token_out_denom)
        accounted_assets = get_accounted_balance(ctx.accounted_pool, pool, pool.pool_assets)

        tvl = Dec.zero()
        for asset in accounted_assets:
            price = ctx.oracle.get_asset_price_from_denom(asset.denom)
            if price.is_zero():
                raise PriceNotSetError(f"price for token not set: {asset.denom}")
            tvl = tvl.add(price.mul_int(asset.token.amount))
        out_price = ctx.oracle.get_asset_price_from_denom(token_out_denom)
        oracle_out_amount = tvl.mul(share_ratio).quo(out_price)

        slippage = slippage_floor(params, pool)
        slippage_amount = oracle_out_amount.mul(slippage)
        out_after_slippage = oracle_out_amount.sub(slippage_amount)
        if not out_after_slippage.is_positive():
            raise AmountTooLowError(f"exit of {token_out_denom} worth nothing after slippage")

        new_assets = new_pool_assets_after_swap(
            Coins(),
            Coins([Coin(token_out_denom, out_after_slippage.truncate_int())]),
            accounted_assets,
        )
        fees, swap_fee = apply_weight_fees(
            ctx,
            pool,
            accounted_assets,
            new_assets,
            token_out_denom,
            pool.pool_params.swap_fee,
            taker_fees,
            params,
            Dec.one(),
            apply_weight_breaking_fee=apply_weight_breaking_fee,
        )

        one = Dec.one()
        amount_out = (
            out_after_slippage.mul(one.sub(fees.weight_breaking_fee))
            .mul(one.sub(swap_fee.add(taker_fees)))
            .truncate_int()
        )
        if amount_out <= 0:
            raise AmountTooLowError(f"exit of {token_out_denom} rounds to zero")

        return ExitCoins(
            exiting_coins=Coins([Coin(token_out_denom, amount_out)]),
            weight_balance_bonus=fees.weight_balance_bonus,
            slippage=slippage,
            swap_fee=swap_fee,
            taker_fee=taker_fees,
            slippage_coins=Coins([Coin(token_out_denom, slippage_amount.truncate_int())]),
        )


def _process_exit_pool(pool: Pool, exiting_coins: Coins, exiting_shares: int) -> Pool:
    try:
        balances = pool.total_pool_liquidity().sub(exiting_coins)
    except NegativeCoinAmountError as err:
        raise NegativePoolAmountError(str(err)) from err
    updated = pool.update_pool_asset_balances(balances)
    return updated.with_total_shares(pool.total_shares.amount - exiting_shares)


def exit_pool(
    ctx: EngineContext,
    pool: Pool,
    exiting_shares: int,
    token_out_denom: str,
    params: ProtocolParams,
    taker_fees: Dec,
    apply_weight_breaking_fee: bool,
    calculator: ExitCalculator | None = None,
) -> ExitResult:
    """Redeem pool shares.

    Args:
        ctx: Oracle, accounted balances and optional weight-fee override
        pool: Pool to exit (not modified)
        exiting_shares: Shares to burn
        token_out_denom: Single asset to receive, or "" for a proportional exit
        params: Protocol parameters
        taker_fees: Protocol taker fee rate
        apply_weight_breaking_fee: Charge the weight-breaking fee on single-asset exits
        calculator: Share-to-coins conversion, ShareExitCalculator by default

    Returns:
        ExitResult whose pool has liquidity reduced by exiting_coins and total
        shares reduced by exiting_shares; on failure the zero result holding
        the original pool
    """
    if calculator is None:
        calculator = ShareExitCalculator()

    try:
        exit_coins = calculator.calc_exit_pool_coins_from_shares(
            ctx, pool, exiting_shares, token_out_denom, params, taker_fees, apply_weight_breaking_fee
        )
        new_pool = _process_exit_pool(pool, exit_coins.exiting_coins, exiting_shares)
    except AmmError as err:
        logger.debug(
            "exit_rejected",
            pool_id=pool.pool_id,
            exiting_shares=exiting_shares,
            token_out_denom=token_out_denom,
            error=type(err).__name__,
            reason=str(err),
        )
        return ExitResult.zero(pool, error=err)

    return ExitResult(
        exiting_coins=exit_coins.exiting_coins,
        weight_balance_bonus=exit_coins.weight_balance_bonus,
        slippage=exit_coins.slippage,
        swap_fee=exit_coins.swap_fee,
        taker_fee=exit_coins.taker_fee,
        slippage_coins=exit_coins.slippage_coins,
        pool=new_pool,
    )
