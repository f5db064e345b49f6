"""Error classes for pool pricing, swaps and exits.

Every failure raised by this package derives from AmmError so callers can
reject a single operation without catching unrelated exceptions.
"""


class AmmError(Exception):
    """Base error for pool operations."""

    pass


class InvalidDenomError(AmmError):
    """Trade amount denomination matches neither side of the requested swap."""

    pass


class InvalidTokensInError(AmmError):
    """Swap input must be exactly one coin."""

    pass


class DenomNotInPoolError(AmmError):
    """Denomination is not one of the pool's assets."""

    pass


class PriceNotSetError(AmmError):
    """Oracle has no usable (non-zero) price for a denomination."""

    pass


class AmountTooLowError(AmmError):
    """Amount too low to price (zero external liquidity ratio or zero output)."""

    pass


class NegativePoolAmountError(AmmError):
    """Pool balance would become negative."""

    pass


class NegativeCoinAmountError(AmmError):
    """Coin amounts must be non-negative."""

    pass


class InvalidFeeError(AmmError):
    """Fee rate must be in range [0, 1)."""

    pass


class TooMuchSwapFeeError(InvalidFeeError):
    """Fee rate must be strictly less than 1."""

    pass


class ZeroWeightError(AmmError):
    """Token weight must be positive."""

    pass


class ZeroBalanceError(AmmError):
    """Token balance must be positive for swaps."""

    pass


class ZeroSpotPriceError(AmmError):
    """Spot price is zero while price impact was requested."""

    pass


class InvalidSharesError(AmmError):
    """Exiting shares must be positive and not exceed total shares."""

    pass


class NoRouteError(AmmError):
    """No pool connects the requested denominations."""

    pass


class OutOfGasError(AmmError):
    """Gas meter limit exceeded."""

    pass


class PowBaseOutOfRangeError(AmmError):
    """Fractional power base must be in (0, 2)."""

    pass


class UnsupportedExitError(AmmError):
    """Exit mode not supported for this pool type."""

    pass


class PowApproxDidNotConverge(AmmError):
    """Binomial series for a fractional power did not converge."""

    pass


class UnknownWeightFeePolicyError(AmmError):
    """Pool names a weight-fee policy that is not registered."""

    pass
