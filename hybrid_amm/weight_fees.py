"""Weight-fee policies.

A policy compares the pool's distance from its oracle-implied target
weights before and after a trade and returns a bonus rate, a breaking-fee
rate, and whether the base swap fee still applies. Pools pick a policy by
name in PoolParams.weight_fee_policy; an EngineContext may override it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog

from hybrid_amm.errors import UnknownWeightFeePolicyError
from hybrid_amm.math.fixed_point import Dec
from hybrid_amm.weights import weight_distance_from_target

if TYPE_CHECKING:
    from hybrid_amm.config import ProtocolParams
    from hybrid_amm.context import EngineContext
    from hybrid_amm.keepers import OracleKeeper
    from hybrid_amm.pool import Pool, PoolAsset

logger = structlog.get_logger()


@dataclass(frozen=True)
class WeightFees:
    """Outcome of a weight-fee evaluation.

    Attributes:
        weight_balance_bonus: Non-negative rebate rate for rebalancing trades
        weight_breaking_fee: Non-negative extra fee rate for unbalancing trades
        applies_swap_fee: False waives the base swap fee for this trade
    """

    weight_balance_bonus: Dec = Dec.zero()
    weight_breaking_fee: Dec = Dec.zero()
    applies_swap_fee: bool = True


class WeightFeePolicy(Protocol):
    """Protocol for weight-breaking fee / weight-balance bonus curves."""

    def calculate_weight_fees(
        self,
        oracle: OracleKeeper,
        pool: Pool,
        assets_before: Sequence[PoolAsset],
        assets_after: Sequence[PoolAsset],
        denom_in: str,
        params: ProtocolParams,
        perpetual_factor: Dec,
    ) -> WeightFees:
        """Evaluate a trade that moves the pool from assets_before to assets_after.

        Args:
            oracle: Reference price lookup
            pool: Pool being traded against
            assets_before: Accounted assets before the trade
            assets_after: Projected accounted assets after the trade
            denom_in: Denomination the trader adds to the pool
            params: Protocol parameters
            perpetual_factor: Dampening factor for perpetual-position trades
                (1 for ordinary swaps)
        """
        ...


class NoWeightFeePolicy:
    """Never charges or rebates; the base swap fee always applies."""

    def calculate_weight_fees(
        self,
        oracle: OracleKeeper,
        pool: Pool,
        assets_before: Sequence[PoolAsset],
        assets_after: Sequence[PoolAsset],
        denom_in: str,
        params: ProtocolParams,
        perpetual_factor: Dec,
    ) -> WeightFees:
        return WeightFees()


class LinearWeightFeePolicy:
    """Fee and bonus proportional to the change in weight distance.

    Let d0, d1 be the distance from target before and after the trade and
    delta = d1 - d0:
    - delta > 0 and d1 above the threshold: fee = multiplier * delta * perpetual_factor,
      capped at params.weight_breaking_fee_cap
    - delta < 0 and d0 above the threshold: bonus = recovery_portion * |delta|
    - otherwise neither applies

    Attributes:
        waive_swap_fee_on_recovery: Drop the base swap fee on trades that earn a bonus
    """

    def __init__(self, waive_swap_fee_on_recovery: bool = False) -> None:
        self.waive_swap_fee_on_recovery = waive_swap_fee_on_recovery

    def calculate_weight_fees(
        self,
        oracle: OracleKeeper,
        pool: Pool,
        assets_before: Sequence[PoolAsset],
        assets_after: Sequence[PoolAsset],
        denom_in: str,
        params: ProtocolParams,
        perpetual_factor: Dec,
    ) -> WeightFees:
        distance_before = weight_distance_from_target(oracle, assets_before)
        distance_after = weight_distance_from_target(oracle, assets_after)
        distance_diff = distance_after.sub(distance_before)
        threshold = params.threshold_weight_difference

        if distance_diff.is_positive() and distance_after > threshold:
            fee = params.weight_breaking_fee_multiplier.mul(distance_diff).mul(perpetual_factor)
            fee = min(fee, params.weight_breaking_fee_cap)
            logger.debug(
                "weight_breaking_fee",
                pool_id=pool.pool_id,
                denom_in=denom_in,
                distance_diff=str(distance_diff),
                fee=str(fee),
            )
            return WeightFees(weight_breaking_fee=fee)

        if distance_diff.is_negative() and distance_before > threshold:
            bonus = params.weight_recovery_fee_portion.mul(distance_diff.abs())
            return WeightFees(
                weight_balance_bonus=bonus,
                applies_swap_fee=not self.waive_swap_fee_on_recovery,
            )

        return WeightFees()


_POLICIES: dict[str, WeightFeePolicy] = {
    "none": NoWeightFeePolicy(),
    "linear": LinearWeightFeePolicy(),
}


def register_weight_fee_policy(name: str, policy: WeightFeePolicy) -> None:
    """Register a policy so pools can name it in their params."""
    _POLICIES[name] = policy


def get_weight_fee_policy(name: str) -> WeightFeePolicy:
    """Look up a registered policy.

    Raises:
        UnknownWeightFeePolicyError: If no policy is registered under name
    """
    policy = _POLICIES.get(name)
    if policy is None:
        raise UnknownWeightFeePolicyError(f"unknown weight fee policy: {name}")
    return policy


def resolve_weight_fee_policy(ctx: EngineContext, pool: Pool) -> WeightFeePolicy:
    """The context override if set, else the policy named by the pool."""
    if ctx.weight_fee_policy is not None:
        return ctx.weight_fee_policy
    return get_weight_fee_policy(pool.pool_params.weight_fee_policy)
