"""Swap engine.

Prices a single-hop swap against a pool. Plain pools delegate to the
weighted invariant curve. Oracle pools price off the reference feed and use
the curve only to model slippage: the trade is resized by the output
asset's external liquidity ratio, run through the curve, and the resulting
slippage is scaled back up.

Swaps never mutate the pool. Applying balances is the caller's job.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

import structlog

from hybrid_amm.accounting import get_accounted_balance
from hybrid_amm.coins import Coin, Coins
from hybrid_amm.config import ProtocolParams
from hybrid_amm.context import EngineContext
from hybrid_amm.errors import AmmError, AmountTooLowError, TooMuchSwapFeeError
from hybrid_amm.math.fixed_point import Dec
from hybrid_amm.pool import Pool, PoolAsset
from hybrid_amm.slippage import calc_given_in_slippage, calc_given_out_slippage, get_oracle_prices
from hybrid_amm.weight_fees import WeightFees, resolve_weight_fee_policy
from hybrid_amm.weighted_math import calc_in_amt_given_out, calc_out_amt_given_in
from hybrid_amm.weights import new_pool_assets_after_swap

logger = structlog.get_logger()

SWAP_GAS_DESCRIPTOR = "balancer swap computation"


@dataclass(frozen=True)
class SwapResult:
    """Result of an exact-input swap.

    On failure every numeric field is zero, token_out is Coin.empty() and
    error holds the reason. Callers can rely on a well-formed record on
    every path.

    Attributes:
        token_out: Amount the trader receives
        slippage: Slippage as a rate of the oracle output (oracle pools) or
            of the spot-price output (plain pools)
        slippage_amount: Slippage in output-token units (oracle pools only)
        weight_balance_bonus: Bonus rate from the weight-fee policy
        oracle_out_amount: Output implied by oracle prices (oracle pools only)
        swap_fee: Swap fee actually charged (zero when waived)
        error: Failure reason, None on success
    """

    token_out: Coin
    slippage: Dec
    slippage_amount: Dec
    weight_balance_bonus: Dec
    oracle_out_amount: Dec
    swap_fee: Dec
    error: AmmError | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @classmethod
    def zero(cls, error: AmmError | None = None) -> SwapResult:
        """The all-zero result returned alongside every error."""
        return cls(
            token_out=Coin.empty(),
            slippage=Dec.zero(),
            slippage_amount=Dec.zero(),
            weight_balance_bonus=Dec.zero(),
            oracle_out_amount=Dec.zero(),
            swap_fee=Dec.zero(),
            error=error,
        )


@dataclass(frozen=True)
class SwapInResult:
    """Result of an exact-output swap (input the trader must pay).

    Same zero-on-failure contract as SwapResult.
    """

    token_in: Coin
    slippage: Dec
    slippage_amount: Dec
    weight_balance_bonus: Dec
    oracle_in_amount: Dec
    swap_fee: Dec
    error: AmmError | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @classmethod
    def zero(cls, error: AmmError | None = None) -> SwapInResult:
        return cls(
            token_in=Coin.empty(),
            slippage=Dec.zero(),
            slippage_amount=Dec.zero(),
            weight_balance_bonus=Dec.zero(),
            oracle_in_amount=Dec.zero(),
            swap_fee=Dec.zero(),
            error=error,
        )


def slippage_floor(params: ProtocolParams, pool: Pool) -> Dec:
    """Protocol floor, raised to the pool's own floor when that is higher."""
    return max(params.min_slippage, pool.pool_params.min_slippage)


def _resize(amount: int, ratio: Dec) -> int:
    """Scale a trade down by the external liquidity ratio (rounded half-even).

    Raises:
        AmountTooLowError: If ratio is zero or the resized amount is zero
    """
    if ratio.is_zero():
        raise AmountTooLowError("external liquidity ratio is zero")
    resized = Dec.from_int(amount).quo(ratio).round_int()
    if resized <= 0:
        raise AmountTooLowError(f"resized amount is zero for {amount} at ratio {ratio}")
    return resized


def apply_weight_fees(
    ctx: EngineContext,
    pool: Pool,
    assets_before: Sequence[PoolAsset],
    assets_after: Sequence[PoolAsset],
    denom_in: str,
    swap_fee: Dec,
    taker_fees: Dec,
    params: ProtocolParams,
    perpetual_factor: Dec,
    apply_weight_breaking_fee: bool = True,
) -> tuple[WeightFees, Dec]:
    """Run the pool's weight-fee policy and validate the resulting fee rates.

    With apply_weight_breaking_fee=False the breaking fee is zeroed before
    validation and in the returned WeightFees.

    Returns:
        Tuple of (weight fees, swap fee to charge)

    Raises:
        TooMuchSwapFeeError: If any fee rate, or the combined fee, is >= 1
    """
    policy = resolve_weight_fee_policy(ctx, pool)
    fees = policy.calculate_weight_fees(
        ctx.oracle, pool, assets_before, assets_after, denom_in, params, perpetual_factor
    )
    if not apply_weight_breaking_fee:
        fees = replace(fees, weight_breaking_fee=Dec.zero())
    if not fees.applies_swap_fee:
        swap_fee = Dec.zero()

    one = Dec.one()
    if fees.weight_breaking_fee >= one:
        raise TooMuchSwapFeeError(f"weight breaking fee {fees.weight_breaking_fee} >= 1")
    if swap_fee >= one:
        raise TooMuchSwapFeeError(f"swap fee {swap_fee} >= 1")
    if swap_fee.add(taker_fees) >= one:
        raise TooMuchSwapFeeError(f"swap fee {swap_fee} plus taker fee {taker_fees} >= 1")
    return fees, swap_fee


def swap_out_amt_given_in(
    ctx: EngineContext,
    pool: Pool,
    snapshot: Pool | None,
    tokens_in: Coins,
    token_out_denom: str,
    swap_fee: Dec,
    weight_breaking_fee_perpetual_factor: Dec,
    params: ProtocolParams,
    taker_fees: Dec,
) -> SwapResult:
    """Price an exact-input swap.

    Gas is charged first, whatever the outcome.

    Plain pools: exactly one input coin, output from the invariant curve with
    swap_fee, swap_fee passed through unchanged.

    Oracle pools:
        oracle_out  = amount_in * price_in / price_out
        resized_in  = round(amount_in / external_liquidity_ratio)
        slippage_amt = curve_slippage(resized_in) * external_liquidity_ratio
        slippage    = max(slippage_amt / oracle_out, floor)
        out_after   = oracle_out - slippage_amt
        token_out   = floor(out_after * (1 - weight_breaking_fee) * (1 - (swap_fee + taker_fees)))

    Args:
        ctx: Oracle, accounted balances, gas meter and optional policy override
        pool: Pool to price against (not modified)
        snapshot: Reference pool state for the slippage model, or None for pool
        tokens_in: Input coins (must be exactly one)
        token_out_denom: Denomination to receive
        swap_fee: Base swap fee rate
        weight_breaking_fee_perpetual_factor: 1 unless a perpetual position is trading
        params: Protocol parameters
        taker_fees: Protocol taker fee rate added to swap_fee

    Returns:
        SwapResult; on failure the zero result with error set
    """
    try:
        ctx.gas_meter.consume_gas(params.swap_gas_cost, SWAP_GAS_DESCRIPTOR)
        if not pool.pool_params.use_oracle:
            return _plain_swap_out(ctx, pool, tokens_in, token_out_denom, swap_fee)
        return _oracle_swap_out(
            ctx,
            pool,
            snapshot,
            tokens_in,
            token_out_denom,
            swap_fee,
            weight_breaking_fee_perpetual_factor,
            params,
            taker_fees,
        )
    except AmmError as err:
        logger.debug(
            "swap_rejected",
            pool_id=pool.pool_id,
            tokens_in=str(tokens_in),
            token_out_denom=token_out_denom,
            error=type(err).__name__,
            reason=str(err),
        )
        return SwapResult.zero(error=err)


def _plain_swap_out(
    ctx: EngineContext,
    pool: Pool,
    tokens_in: Coins,
    token_out_denom: str,
    swap_fee: Dec,
) -> SwapResult:
    token_in, _, _ = pool.parse_pool_assets(tokens_in, token_out_denom)
    pool_assets = get_accounted_balance(ctx.accounted_pool, pool, pool.pool_assets)
    token_out, slippage = calc_out_amt_given_in(pool_assets, token_in, token_out_denom, swap_fee)
    return SwapResult(
        token_out=token_out,
        slippage=slippage,
        slippage_amount=Dec.zero(),
        weight_balance_bonus=Dec.zero(),
        oracle_out_amount=Dec.zero(),
        swap_fee=swap_fee,
    )


def _oracle_swap_out(
    ctx: EngineContext,
    pool: Pool,
    snapshot: Pool | None,
    tokens_in: Coins,
    token_out_denom: str,
    swap_fee: Dec,
    perpetual_factor: Dec,
    params: ProtocolParams,
    taker_fees: Dec,
) -> SwapResult:
    token_in, _, _ = pool.parse_pool_assets(tokens_in, token_out_denom)
    in_price, out_price = get_oracle_prices(ctx.oracle, token_in.denom, token_out_denom)

    accounted_assets = get_accounted_balance(ctx.accounted_pool, pool, pool.pool_assets)
    oracle_out_amount = Dec.from_int(token_in.amount).mul(in_price).quo(out_price)

    external_liquidity_ratio = pool.get_asset_external_liquidity_ratio(token_out_denom)
    resized_amount = _resize(token_in.amount, external_liquidity_ratio)
    if oracle_out_amount.is_zero():
        raise AmountTooLowError(f"oracle output is zero for {token_in}")

    slippage_amount = calc_given_in_slippage(
        ctx,
        pool,
        snapshot,
        Coins([Coin(token_in.denom, resized_amount)]),
        token_out_denom,
    ).mul(external_liquidity_ratio)
    slippage = slippage_amount.quo(oracle_out_amount)

    floor = slippage_floor(params, pool)
    if slippage < floor:
        slippage = floor
        slippage_amount = oracle_out_amount.mul(floor)

    out_amount_after_slippage = oracle_out_amount.sub(slippage_amount)
    if not out_amount_after_slippage.is_positive():
        raise AmountTooLowError(f"no output left after slippage {slippage_amount}")

    new_assets = new_pool_assets_after_swap(
        tokens_in,
        Coins([Coin(token_out_denom, out_amount_after_slippage.truncate_int())]),
        accounted_assets,
    )
    fees, swap_fee = apply_weight_fees(
        ctx,
        pool,
        accounted_assets,
        new_assets,
        token_in.denom,
        swap_fee,
        taker_fees,
        params,
        perpetual_factor,
    )

    one = Dec.one()
    # Round down: the trader never receives a rounded-up amount
    amount_out = (
        out_amount_after_slippage.mul(one.sub(fees.weight_breaking_fee))
        .mul(one.sub(swap_fee.add(taker_fees)))
        .truncate_int()
    )
    return SwapResult(
        token_out=Coin(token_out_denom, amount_out),
        slippage=slippage,
        slippage_amount=slippage_amount,
        weight_balance_bonus=fees.weight_balance_bonus,
        oracle_out_amount=oracle_out_amount,
        swap_fee=swap_fee,
    )


def swap_in_amt_given_out(
    ctx: EngineContext,
    pool: Pool,
    snapshot: Pool | None,
    tokens_out: Coins,
    token_in_denom: str,
    swap_fee: Dec,
    weight_breaking_fee_perpetual_factor: Dec,
    params: ProtocolParams,
    taker_fees: Dec,
) -> SwapInResult:
    """Price an exact-output swap: how much token_in_denom buys tokens_out.

    Mirror of swap_out_amt_given_in. Oracle pools add the modelled slippage
    to the oracle input and divide by the fee complements; the input is
    rounded up so the trader never pays a rounded-down amount.

    Returns:
        SwapInResult; on failure the zero result with error set
    """
    try:
        ctx.gas_meter.consume_gas(params.swap_gas_cost, SWAP_GAS_DESCRIPTOR)
        token_out, _, _ = pool.parse_pool_assets(tokens_out, token_in_denom)
        if not pool.pool_params.use_oracle:
            pool_assets = get_accounted_balance(ctx.accounted_pool, pool, pool.pool_assets)
            token_in, slippage = calc_in_amt_given_out(pool_assets, token_out, token_in_denom, swap_fee)
            return SwapInResult(
                token_in=token_in,
                slippage=slippage,
                slippage_amount=Dec.zero(),
                weight_balance_bonus=Dec.zero(),
                oracle_in_amount=Dec.zero(),
                swap_fee=swap_fee,
            )
        return _oracle_swap_in(
            ctx,
            pool,
            snapshot,
            token_out,
            token_in_denom,
            swap_fee,
            weight_breaking_fee_perpetual_factor,
            params,
            taker_fees,
        )
    except AmmError as err:
        logger.debug(
            "swap_rejected",
            pool_id=pool.pool_id,
            tokens_out=str(tokens_out),
            token_in_denom=token_in_denom,
            error=type(err).__name__,
            reason=str(err),
        )
        return SwapInResult.zero(error=err)


def _oracle_swap_in(
    ctx: EngineContext,
    pool: Pool,
    snapshot: Pool | None,
    token_out: Coin,
    token_in_denom: str,
    swap_fee: Dec,
    perpetual_factor: Dec,
    params: ProtocolParams,
    taker_fees: Dec,
) -> SwapInResult:
    in_price, out_price = get_oracle_prices(ctx.oracle, token_in_denom, token_out.denom)
    accounted_assets = get_accounted_balance(ctx.accounted_pool, pool, pool.pool_assets)
    oracle_in_amount = Dec.from_int(token_out.amount).mul(out_price).quo(in_price)

    external_liquidity_ratio = pool.get_asset_external_liquidity_ratio(token_out.denom)
    resized_amount = _resize(token_out.amount, external_liquidity_ratio)
    if oracle_in_amount.is_zero():
        raise AmountTooLowError(f"oracle input is zero for {token_out}")

    slippage_amount = calc_given_out_slippage(
        ctx,
        pool,
        snapshot,
        Coin(token_out.denom, resized_amount),
        token_in_denom,
    ).mul(external_liquidity_ratio)
    slippage = slippage_amount.quo(oracle_in_amount)

    floor = slippage_floor(params, pool)
    if slippage < floor:
        slippage = floor
        slippage_amount = oracle_in_amount.mul(floor)

    in_amount_after_slippage = oracle_in_amount.add(slippage_amount)
    new_assets = new_pool_assets_after_swap(
        Coins([Coin(token_in_denom, in_amount_after_slippage.ceil_int())]),
        Coins([token_out]),
        accounted_assets,
    )
    fees, swap_fee = apply_weight_fees(
        ctx,
        pool,
        accounted_assets,
        new_assets,
        token_in_denom,
        swap_fee,
        taker_fees,
        params,
        perpetual_factor,
    )

    one = Dec.one()
    fee_complement = one.sub(fees.weight_breaking_fee).mul(one.sub(swap_fee.add(taker_fees)))
    # Round up: the trader never pays a rounded-down amount
    amount_in = in_amount_after_slippage.quo(fee_complement).ceil_int()
    return SwapInResult(
        token_in=Coin(token_in_denom, amount_in),
        slippage=slippage,
        slippage_amount=slippage_amount,
        weight_balance_bonus=fees.weight_balance_bonus,
        oracle_in_amount=oracle_in_amount,
        swap_fee=swap_fee,
    )
