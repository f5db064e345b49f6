"""Constant-weight invariant math.

Default invariant-curve calculator used by plain pools and by the oracle
slippage model. All amounts are integers; intermediate math is exact Dec.
"""

from __future__ import annotations

from collections.abc import Sequence

from hybrid_amm.coins import Coin
from hybrid_amm.errors import (
    AmountTooLowError,
    DenomNotInPoolError,
    InvalidFeeError,
    NegativePoolAmountError,
    ZeroBalanceError,
    ZeroWeightError,
)
from hybrid_amm.math.fixed_point import Dec, ZeroDenominator, pow_dec, safe_quo
from hybrid_amm.pool import PoolAsset


def _find_asset(pool_assets: Sequence[PoolAsset], denom: str) -> PoolAsset:
    for asset in pool_assets:
        if asset.denom == denom:
            return asset
    raise DenomNotInPoolError(f"denom {denom} not in pool assets")


def _validate_pair(asset_in: PoolAsset, asset_out: PoolAsset) -> None:
    if asset_in.weight <= 0:
        raise ZeroWeightError(f"weight of {asset_in.denom} must be positive")
    if asset_out.weight <= 0:
        raise ZeroWeightError(f"weight of {asset_out.denom} must be positive")
    if asset_in.token.amount <= 0:
        raise ZeroBalanceError(f"balance of {asset_in.denom} must be positive")
    if asset_out.token.amount <= 0:
        raise ZeroBalanceError(f"balance of {asset_out.denom} must be positive")


def _validate_fee(swap_fee: Dec) -> None:
    if swap_fee.is_negative() or swap_fee >= Dec.one():
        raise InvalidFeeError(f"Swap fee must be in range [0, 1), got {swap_fee}")


def solve_constant_function_invariant(
    balance_fixed_before: Dec,
    balance_fixed_after: Dec,
    weight_fixed: Dec,
    balance_unknown_before: Dec,
    weight_unknown: Dec,
) -> Dec:
    """Change in the unknown balance that keeps the weighted product constant.

    Formula:
        delta = balance_unknown_before * (1 - (fixed_before / fixed_after)^(weight_fixed / weight_unknown))

    Requires fixed_before < 2 * fixed_after (the power base must be below 2).
    """
    weight_ratio = weight_fixed.quo(weight_unknown)
    y = balance_fixed_before.quo(balance_fixed_after)
    y_to_weight_ratio = pow_dec(y, weight_ratio)
    return balance_unknown_before.mul(Dec.one().sub(y_to_weight_ratio))


def calc_spot_price(asset_in: PoolAsset, asset_out: PoolAsset) -> Dec:
    """Marginal price of asset_in quoted in asset_out (output per unit input).

    Formula:
        spot = (balance_out / weight_out) / (balance_in / weight_in)

    Raises:
        ZeroWeightError: If either weight is zero
        ZeroBalanceError: If either balance is zero
    """
    _validate_pair(asset_in, asset_out)
    numerator = Dec.from_int(asset_out.token.amount).mul_int(asset_in.weight)
    denominator = Dec.from_int(asset_in.token.amount).mul_int(asset_out.weight)
    return numerator.quo(denominator)


def calc_out_amt_given_in(
    pool_assets: Sequence[PoolAsset],
    token_in: Coin,
    token_out_denom: str,
    swap_fee: Dec,
) -> tuple[Coin, Dec]:
    """Output for an exact input on the weighted invariant curve.

    The fee is taken from the input before the curve is applied. Slippage is
    measured against the spot price on the post-fee input:
        slippage = max(1 - amount_out / (amount_in_after_fee * spot), 0)

    Returns:
        Tuple of (token_out, slippage)

    Raises:
        DenomNotInPoolError: If either denom is missing from pool_assets
        InvalidFeeError: If swap_fee is not in [0, 1)
        AmountTooLowError: If the output truncates to zero
    """
    asset_in = _find_asset(pool_assets, token_in.denom)
    asset_out = _find_asset(pool_assets, token_out_denom)
    _validate_pair(asset_in, asset_out)
    _validate_fee(swap_fee)

    amount_in_after_fee = Dec.from_int(token_in.amount).mul(Dec.one().sub(swap_fee))
    balance_in = Dec.from_int(asset_in.token.amount)
    amount_out = solve_constant_function_invariant(
        balance_in,
        balance_in.add(amount_in_after_fee),
        Dec.from_int(asset_in.weight),
        Dec.from_int(asset_out.token.amount),
        Dec.from_int(asset_out.weight),
    ).truncate_int()
    if amount_out <= 0:
        raise AmountTooLowError("token amount must be positive")

    expected_out = amount_in_after_fee.mul(calc_spot_price(asset_in, asset_out))
    ratio = safe_quo(Dec.from_int(amount_out), expected_out, ZeroDenominator.RETURN_ZERO)
    slippage = max(Dec.one().sub(ratio), Dec.zero())
    return Coin(token_out_denom, amount_out), slippage


def calc_in_amt_given_out(
    pool_assets: Sequence[PoolAsset],
    token_out: Coin,
    token_in_denom: str,
    swap_fee: Dec,
) -> tuple[Coin, Dec]:
    """Input required for an exact output on the weighted invariant curve.

    Formula (rearranged so the power base stays in (0, 1)):
        p = ((balance_out - amount_out) / balance_out)^(weight_out / weight_in)
        amount_in = balance_in * (1 - p) / p / (1 - fee)

    The input is rounded up so the pool never receives less than required.

    Returns:
        Tuple of (token_in, slippage)

    Raises:
        NegativePoolAmountError: If amount_out is not below the pool balance
        AmountTooLowError: If amount_out is zero
    """
    asset_in = _find_asset(pool_assets, token_in_denom)
    asset_out = _find_asset(pool_assets, token_out.denom)
    _validate_pair(asset_in, asset_out)
    _validate_fee(swap_fee)

    if token_out.amount <= 0:
        raise AmountTooLowError("token amount must be positive")
    if token_out.amount >= asset_out.token.amount:
        raise NegativePoolAmountError(
            f"output {token_out} exceeds pool balance {asset_out.token.amount}"
        )

    balance_out = Dec.from_int(asset_out.token.amount)
    remaining_ratio = balance_out.sub(Dec.from_int(token_out.amount)).quo(balance_out)
    exponent = Dec.from_int(asset_out.weight).quo(Dec.from_int(asset_in.weight))
    p = pow_dec(remaining_ratio, exponent)
    if p.is_zero():
        raise NegativePoolAmountError(f"output {token_out} drains the pool")
    amount_in_before_fee = Dec.from_int(asset_in.token.amount).mul(Dec.one().sub(p)).quo(p)
    amount_in = amount_in_before_fee.quo(Dec.one().sub(swap_fee)).ceil_int()
    if amount_in <= 0:
        raise AmountTooLowError("token amount must be positive")

    expected_in = Dec.from_int(token_out.amount).quo(calc_spot_price(asset_in, asset_out))
    ratio = safe_quo(expected_in, amount_in_before_fee, ZeroDenominator.RETURN_ZERO)
    slippage = max(Dec.one().sub(ratio), Dec.zero())
    return Coin(token_in_denom, amount_in), slippage
