"""Numeric primitives for pool math.

This package provides:
- Rounding and checked native-width arithmetic (checked_mul_div and friends)
- FixedPoint: 18-decimal fixed-point values
- ln/log2/exp/pow approximations with a documented error bound
"""

from poolmath.math.fixed_point import ONE, ZERO, FixedPoint
from poolmath.math.rounding import (
    Rounding,
    checked_add,
    checked_div,
    checked_mul,
    checked_mul_div,
    checked_sub,
    isqrt,
)
from poolmath.math.transcendental import (
    exp_approx,
    ln_approx,
    log2_approx,
    pow_approx,
    pow_down,
    pow_up,
    powi,
)

__all__ = [
    # Fixed point
    "FixedPoint",
    "ONE",
    "ZERO",
    # Checked arithmetic
    "Rounding",
    "checked_add",
    "checked_sub",
    "checked_mul",
    "checked_div",
    "checked_mul_div",
    "isqrt",
    # Approximations
    "ln_approx",
    "log2_approx",
    "exp_approx",
    "pow_approx",
    "pow_up",
    "pow_down",
    "powi",
]
