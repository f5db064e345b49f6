"""Mathematical utilities for pool pricing.

This package provides the arithmetic primitives every calculation uses:
- Dec: exact 18-decimal fixed-point arithmetic
- safe_quo: division with an explicit zero-denominator policy
- pow_dec: fractional powers for the weighted invariant
"""

from hybrid_amm.math.fixed_point import Dec, ZeroDenominator, pow_dec, safe_quo

__all__ = ["Dec", "ZeroDenominator", "pow_dec", "safe_quo"]
