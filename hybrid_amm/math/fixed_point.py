"""Exact 18-decimal fixed-point arithmetic.

Values are stored as integers scaled by 10^18. Multiplication and division
drop the extra 18 digits with banker's (half-even) rounding; conversions to
integers either truncate toward zero, round half-even, or ceil, and every
caller picks one explicitly. No floating point is used anywhere.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_HALF_EVEN, Decimal
from enum import Enum
from typing import ClassVar

from hybrid_amm.errors import PowApproxDidNotConverge, PowBaseOutOfRangeError

__all__ = [
    # Classes
    "Dec",
    "ZeroDenominator",
    # Functions
    "safe_quo",
    "pow_dec",
    # Constants
    "PRECISION",
    "ONE_18",
    "ONE_36",
    "POW_PRECISION",
    "MAX_POW_ITERATIONS",
    "DECIMAL_HIGH_PREC_CONTEXT",
]

# =============================================================================
# Constants
# =============================================================================

PRECISION = 18
ONE_18 = 10**PRECISION
ONE_36 = 10 ** (2 * PRECISION)
_HALF_18 = ONE_18 // 2

# 78 digits of precision - enough for any amount we convert through Decimal
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

MAX_POW_ITERATIONS = 150_000


# =============================================================================
# Integer helpers
# =============================================================================


def _div_trunc(a: int, b: int) -> int:
    """Integer division with truncation toward zero.

    Python's // operator rounds toward negative infinity; the reference
    arithmetic truncates toward zero. This matters for negative numbers.

    Examples:
        Python: -7 // 3 = -3 (rounds toward -inf)
        Here:   _div_trunc(-7, 3) = -2 (truncates toward zero)
    """
    if b == 0:
        raise ZeroDivisionError("Division by zero in _div_trunc")
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def _chop_and_round(value: int) -> int:
    """Drop 18 digits, rounding the removed part half-to-even.

    Negative values are rounded on their magnitude so the result is
    symmetric around zero.
    """
    if value < 0:
        return -_chop_and_round(-value)
    quo, rem = divmod(value, ONE_18)
    if rem == 0 or rem < _HALF_18:
        return quo
    if rem > _HALF_18:
        return quo + 1
    # Exactly half: round to even
    return quo if quo % 2 == 0 else quo + 1


# =============================================================================
# Dec class
# =============================================================================


class Dec:
    """18-decimal fixed-point number stored as int.

    Example: 1.5 is stored as 1_500_000_000_000_000_000
    """

    ONE: ClassVar[int] = ONE_18

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        """Create Dec from raw scaled value."""
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Dec requires a scaled int, got {type(value).__name__}")
        self.value = value

    @classmethod
    def zero(cls) -> Dec:
        return cls(0)

    @classmethod
    def one(cls) -> Dec:
        return cls(ONE_18)

    @classmethod
    def from_int(cls, i: int) -> Dec:
        """Create from integer (will be scaled by 10^18)."""
        return cls(i * ONE_18)

    @classmethod
    def from_decimal(cls, d: Decimal) -> Dec:
        """Create from Decimal, rounding half-even beyond 18 decimals."""
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            scaled = (d * ONE_18).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN)
        return cls(int(scaled))

    @classmethod
    def from_str(cls, s: str) -> Dec:
        """Parse a decimal string such as "0.02" or "-1.5"."""
        try:
            d = Decimal(s)
        except decimal.InvalidOperation as err:
            raise ValueError(f"Invalid decimal string: '{s}'") from err
        if not d.is_finite():
            raise ValueError(f"Decimal must be finite: '{s}'")
        return cls.from_decimal(d)

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            return Decimal(self.value) / Decimal(ONE_18)

    # --- Arithmetic ---

    def add(self, other: Dec) -> Dec:
        return Dec(self.value + other.value)

    def sub(self, other: Dec) -> Dec:
        """Subtract other from self. Result may be negative."""
        return Dec(self.value - other.value)

    def mul(self, other: Dec) -> Dec:
        """Multiply, rounding the dropped digits half-to-even."""
        return Dec(_chop_and_round(self.value * other.value))

    def mul_int(self, i: int) -> Dec:
        """Multiply by a plain integer (exact)."""
        return Dec(self.value * i)

    def quo(self, other: Dec) -> Dec:
        """Divide: scale by 10^36, truncate, then round half-to-even.

        Raises:
            ZeroDivisionError: If other is zero
        """
        if other.value == 0:
            raise ZeroDivisionError("Dec division by zero")
        return Dec(_chop_and_round(_div_trunc(self.value * ONE_36, other.value)))

    def neg(self) -> Dec:
        return Dec(-self.value)

    def abs(self) -> Dec:
        return Dec(abs(self.value))

    def power(self, n: int) -> Dec:
        """Raise to a non-negative integer power by repeated squaring."""
        if n < 0:
            raise ValueError(f"Dec.power requires a non-negative exponent, got {n}")
        if n == 0:
            return Dec.one()
        base = self
        acc = Dec.one()
        i = n
        while i > 1:
            if i % 2 != 0:
                acc = acc.mul(base)
            i //= 2
            base = base.mul(base)
        return base.mul(acc)

    # --- Integer conversion ---

    def truncate_int(self) -> int:
        """Drop the fractional part (toward zero)."""
        return _div_trunc(self.value, ONE_18)

    def round_int(self) -> int:
        """Round to the nearest integer, ties to even."""
        return _chop_and_round(self.value)

    def ceil_int(self) -> int:
        """Smallest integer not less than self."""
        return -((-self.value) // ONE_18)

    # --- Predicates ---

    def is_zero(self) -> bool:
        return self.value == 0

    def is_positive(self) -> bool:
        return self.value > 0

    def is_negative(self) -> bool:
        return self.value < 0

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dec):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Dec):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Dec):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Dec):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Dec):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Dec({self})"

    def __str__(self) -> str:
        sign = "-" if self.value < 0 else ""
        integer, fraction = divmod(abs(self.value), ONE_18)
        return f"{sign}{integer}.{fraction:0{PRECISION}d}"


# 1e-8: series terms below this are dropped
POW_PRECISION = Dec(10**10)
_ONE = Dec.one()
_TWO = Dec.from_int(2)


# =============================================================================
# Safe division
# =============================================================================


class ZeroDenominator(Enum):
    """What safe_quo does when the denominator is zero.

    SUBSTITUTE_ONE: divide by 1 instead (the numerator passes through).
    RETURN_ZERO: the quotient is zero.
    RAISE: raise ZeroDivisionError.
    """

    SUBSTITUTE_ONE = "substitute_one"
    RETURN_ZERO = "return_zero"
    RAISE = "raise"


def safe_quo(
    numerator: Dec,
    denominator: Dec,
    on_zero: ZeroDenominator = ZeroDenominator.RAISE,
) -> Dec:
    """Divide with an explicit policy for a zero denominator.

    All zero-denominator guards in the package go through this function, so
    each fallback is declared at the call site instead of re-implemented.
    """
    if denominator.is_zero():
        if on_zero is ZeroDenominator.SUBSTITUTE_ONE:
            return numerator
        if on_zero is ZeroDenominator.RETURN_ZERO:
            return Dec.zero()
        raise ZeroDivisionError("safe_quo: zero denominator")
    return numerator.quo(denominator)


# =============================================================================
# Fractional powers
# =============================================================================


def _abs_difference_with_sign(a: Dec, b: Dec) -> tuple[Dec, bool]:
    """Return |a - b| and whether a < b."""
    if a >= b:
        return a.sub(b), False
    return b.sub(a), True


def _pow_approx(base: Dec, exp: Dec, precision: Dec) -> Dec:
    """Approximate base^exp for 0 <= exp < 1 with the binomial series.

    (1 + x)^a = 1 + a*x + a(a-1)/2! * x^2 + ...  where x = base - 1.
    Each term is derived from the previous one:
        term_k = term_{k-1} * (a - (k-1)) * x / k
    and summation stops once a term drops below precision.
    """
    if exp.is_zero():
        return Dec.one()

    x, x_neg = _abs_difference_with_sign(base, _ONE)
    term = Dec.one()
    total = Dec.one()
    negative = False

    i = 1
    while term >= precision:
        big_k = Dec.from_int(i)
        c, c_neg = _abs_difference_with_sign(exp, big_k.sub(_ONE))
        term = term.mul(c.mul(x)).quo(big_k)
        if term.is_zero():
            break
        if x_neg:
            negative = not negative
        if c_neg:
            negative = not negative
        total = total.sub(term) if negative else total.add(term)
        if i == MAX_POW_ITERATIONS:
            raise PowApproxDidNotConverge(
                f"pow({base}, {exp}) did not converge in {MAX_POW_ITERATIONS} iterations"
            )
        i += 1
    return total


def pow_dec(base: Dec, exp: Dec) -> Dec:
    """Compute base^exp for 0 < base < 2 and exp >= 0.

    The integer part of the exponent is applied exactly with Dec.power; the
    fractional part uses the binomial series, which only converges for
    bases in (0, 2).

    Raises:
        PowBaseOutOfRangeError: If base is not in (0, 2)
        ValueError: If exp is negative
    """
    if not base.is_positive():
        raise PowBaseOutOfRangeError(f"pow base must be positive, got {base}")
    if base >= _TWO:
        raise PowBaseOutOfRangeError(f"pow base must be less than 2, got {base}")
    if exp.is_negative():
        raise ValueError(f"pow exponent must be non-negative, got {exp}")

    integer = exp.truncate_int()
    fractional = exp.sub(Dec.from_int(integer))
    integer_pow = base.power(integer)
    if fractional.is_zero():
        return integer_pow
    return integer_pow.mul(_pow_approx(base, fractional, POW_PRECISION))
