"""Oracle slippage model.

Slippage is the shortfall between what the oracle price implies a trade
should return and what the invariant curve returns for the same input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hybrid_amm.accounting import get_accounted_balance
from hybrid_amm.coins import Coin, Coins
from hybrid_amm.errors import PriceNotSetError
from hybrid_amm.math.fixed_point import Dec
from hybrid_amm.weighted_math import calc_in_amt_given_out, calc_out_amt_given_in

if TYPE_CHECKING:
    from hybrid_amm.context import EngineContext
    from hybrid_amm.keepers import OracleKeeper
    from hybrid_amm.pool import Pool


def get_oracle_prices(oracle: OracleKeeper, denom_in: str, denom_out: str) -> tuple[Dec, Dec]:
    """Prices for both sides of a trade.

    Raises:
        PriceNotSetError: If either price is zero
    """
    in_price = oracle.get_asset_price_from_denom(denom_in)
    if in_price.is_zero():
        raise PriceNotSetError(f"price for inToken not set: {denom_in}")
    out_price = oracle.get_asset_price_from_denom(denom_out)
    if out_price.is_zero():
        raise PriceNotSetError(f"price for outToken not set: {denom_out}")
    return in_price, out_price


def calc_given_in_slippage(
    ctx: EngineContext,
    pool: Pool,
    snapshot: Pool | None,
    tokens_in: Coins,
    token_out_denom: str,
) -> Dec:
    """Oracle-implied output minus invariant-curve output, never negative.

    The curve runs with zero fee over the snapshot's accounted balances (the
    pool itself when no snapshot is given). A trade that beats the oracle
    price reports zero slippage, not a bonus.

    Raises:
        InvalidTokensInError: If tokens_in is not exactly one coin
        DenomNotInPoolError: If either denom is not in the pool
        PriceNotSetError: If either price is unset
    """
    reference = snapshot if snapshot is not None else pool
    token_in, _, _ = pool.parse_pool_assets(tokens_in, token_out_denom)
    in_price, out_price = get_oracle_prices(ctx.oracle, token_in.denom, token_out_denom)

    accounted_assets = get_accounted_balance(ctx.accounted_pool, reference, reference.pool_assets)
    curve_out, _ = calc_out_amt_given_in(accounted_assets, token_in, token_out_denom, Dec.zero())

    oracle_out_amount = Dec.from_int(token_in.amount).mul(in_price).quo(out_price)
    slippage_amount = oracle_out_amount.sub(Dec.from_int(curve_out.amount))
    if slippage_amount.is_negative():
        return Dec.zero()
    return slippage_amount


def calc_given_out_slippage(
    ctx: EngineContext,
    pool: Pool,
    snapshot: Pool | None,
    token_out: Coin,
    token_in_denom: str,
) -> Dec:
    """Invariant-curve input minus oracle-implied input, never negative.

    Mirror of calc_given_in_slippage for exact-output trades.
    """
    reference = snapshot if snapshot is not None else pool
    pool.get_pool_asset(token_in_denom)
    pool.get_pool_asset(token_out.denom)
    in_price, out_price = get_oracle_prices(ctx.oracle, token_in_denom, token_out.denom)

    accounted_assets = get_accounted_balance(ctx.accounted_pool, reference, reference.pool_assets)
    curve_in, _ = calc_in_amt_given_out(accounted_assets, token_out, token_in_denom, Dec.zero())

    oracle_in_amount = Dec.from_int(token_out.amount).mul(out_price).quo(in_price)
    slippage_amount = Dec.from_int(curve_in.amount).sub(oracle_in_amount)
    if slippage_amount.is_negative():
        return Dec.zero()
    return slippage_amount
