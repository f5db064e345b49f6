"""Execution context passed to swap and exit operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from hybrid_amm.errors import OutOfGasError
from hybrid_amm.keepers import (
    AccountedPoolKeeper,
    OracleKeeper,
    StaticAccountedPoolKeeper,
    StaticOracleKeeper,
)

if TYPE_CHECKING:
    from hybrid_amm.weight_fees import WeightFeePolicy

logger = structlog.get_logger()


class GasMeter:
    """Deterministic gas counter.

    Attributes:
        limit: Maximum gas, or None for an unbounded meter
        consumed: Gas consumed so far
    """

    def __init__(self, limit: int | None = None) -> None:
        self.limit = limit
        self.consumed = 0

    def consume_gas(self, amount: int, descriptor: str) -> None:
        """Charge gas.

        Raises:
            OutOfGasError: If the charge would exceed the limit. The charge is
                still recorded, matching how an exhausted meter reports usage.
        """
        self.consumed += amount
        if self.limit is not None and self.consumed > self.limit:
            logger.debug(
                "gas_limit_exceeded",
                descriptor=descriptor,
                consumed=self.consumed,
                limit=self.limit,
            )
            raise OutOfGasError(f"out of gas in {descriptor}: {self.consumed} > {self.limit}")


@dataclass
class EngineContext:
    """Collaborators read by the pricing core.

    Attributes:
        oracle: Reference price lookup
        accounted_pool: Externally tracked balance lookup
        gas_meter: Meter charged once per swap
        weight_fee_policy: Overrides the policy named by each pool's params
    """

    oracle: OracleKeeper = field(default_factory=StaticOracleKeeper)
    accounted_pool: AccountedPoolKeeper = field(default_factory=StaticAccountedPoolKeeper)
    gas_meter: GasMeter = field(default_factory=GasMeter)
    weight_fee_policy: WeightFeePolicy | None = None
