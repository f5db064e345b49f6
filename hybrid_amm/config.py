"""Protocol parameter configuration.

ProtocolParams holds the global numeric knobs shared read-only by every
pool. Defaults come from constants.py; from_env() overrides them from
HYBRID_AMM_* environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from hybrid_amm.constants import (
    DEFAULT_MIN_SLIPPAGE,
    DEFAULT_TAKER_FEE,
    DEFAULT_THRESHOLD_WEIGHT_DIFFERENCE,
    DEFAULT_WEIGHT_BREAKING_FEE_CAP,
    DEFAULT_WEIGHT_BREAKING_FEE_MULTIPLIER,
    DEFAULT_WEIGHT_RECOVERY_FEE_PORTION,
    SWAP_GAS_COST,
)
from hybrid_amm.math.fixed_point import Dec

logger = structlog.get_logger()

ENV_PREFIX = "HYBRID_AMM_"


@dataclass(frozen=True)
class ProtocolParams:
    """Global protocol parameters.

    Attributes:
        min_slippage: Floor applied to oracle-pool slippage (e.g. 0.001)
        swap_gas_cost: Gas consumed by every swap computation
        taker_fee: Protocol fee layered on top of the pool swap fee when quoting
        weight_breaking_fee_multiplier: Scales the weight-distance increase
            into a weight-breaking fee
        weight_recovery_fee_portion: Portion of the distance decrease paid
            back as a weight-balance bonus
        threshold_weight_difference: Distance below which neither fee nor
            bonus applies
        weight_breaking_fee_cap: Upper bound for the weight-breaking fee
    """

    min_slippage: Dec = Dec.from_str(DEFAULT_MIN_SLIPPAGE)
    swap_gas_cost: int = SWAP_GAS_COST
    taker_fee: Dec = Dec.from_str(DEFAULT_TAKER_FEE)
    weight_breaking_fee_multiplier: Dec = Dec.from_str(DEFAULT_WEIGHT_BREAKING_FEE_MULTIPLIER)
    weight_recovery_fee_portion: Dec = Dec.from_str(DEFAULT_WEIGHT_RECOVERY_FEE_PORTION)
    threshold_weight_difference: Dec = Dec.from_str(DEFAULT_THRESHOLD_WEIGHT_DIFFERENCE)
    weight_breaking_fee_cap: Dec = Dec.from_str(DEFAULT_WEIGHT_BREAKING_FEE_CAP)

    def __post_init__(self) -> None:
        one = Dec.one()
        for name in ("min_slippage", "taker_fee", "weight_breaking_fee_cap"):
            rate: Dec = getattr(self, name)
            if rate.is_negative() or rate >= one:
                raise ValueError(f"{name} must be in range [0, 1), got {rate}")
        for name in (
            "weight_breaking_fee_multiplier",
            "weight_recovery_fee_portion",
            "threshold_weight_difference",
        ):
            value: Dec = getattr(self, name)
            if value.is_negative():
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.swap_gas_cost < 0:
            raise ValueError(f"swap_gas_cost must be non-negative, got {self.swap_gas_cost}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ProtocolParams:
        """Build parameters from HYBRID_AMM_* variables, falling back to defaults.

        Recognized variables: HYBRID_AMM_MIN_SLIPPAGE, HYBRID_AMM_SWAP_GAS_COST,
        HYBRID_AMM_TAKER_FEE, HYBRID_AMM_WEIGHT_BREAKING_FEE_MULTIPLIER,
        HYBRID_AMM_WEIGHT_RECOVERY_FEE_PORTION,
        HYBRID_AMM_THRESHOLD_WEIGHT_DIFFERENCE, HYBRID_AMM_WEIGHT_BREAKING_FEE_CAP.

        Raises:
            ValueError: If a variable is set to an unparseable or out-of-range value
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, Dec | int] = {}

        for name in (
            "min_slippage",
            "taker_fee",
            "weight_breaking_fee_multiplier",
            "weight_recovery_fee_portion",
            "threshold_weight_difference",
            "weight_breaking_fee_cap",
        ):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            try:
                overrides[name] = Dec.from_str(raw)
            except ValueError as err:
                logger.warning("invalid_protocol_param", variable=ENV_PREFIX + name.upper(), raw=raw)
                raise ValueError(f"{ENV_PREFIX}{name.upper()} is not a decimal: '{raw}'") from err

        raw_gas = env.get(ENV_PREFIX + "SWAP_GAS_COST")
        if raw_gas is not None:
            try:
                overrides["swap_gas_cost"] = int(raw_gas)
            except ValueError as err:
                logger.warning(
                    "invalid_protocol_param", variable=ENV_PREFIX + "SWAP_GAS_COST", raw=raw_gas
                )
                raise ValueError(f"{ENV_PREFIX}SWAP_GAS_COST is not an integer: '{raw_gas}'") from err

        return cls(**overrides)  # type: ignore[arg-type]


# Default configuration instance
DEFAULT_PROTOCOL_PARAMS = ProtocolParams()
