"""Checked native-width arithmetic with explicit rounding direction.

Every pool formula is built from these primitives. Operands are native
128-bit values; products are formed in the 256-bit SafeInt accumulator and
the quotient is narrowed back, so a * b never overflows even when both
operands are near the native maximum.

Rounding policy: amounts owed to the pool round UP, amounts owed to the
trader round DOWN.
"""

from __future__ import annotations

import math
from enum import Enum

from poolmath.constants import BALANCE_MAX
from poolmath.errors import Overflow, Underflow
from poolmath.safe_int import S, SafeInt


class Rounding(Enum):
    """Rounding direction for an integer division."""

    DOWN = "down"
    UP = "up"
    NEAREST = "nearest"


def native(value: int, name: str = "value") -> SafeInt:
    """Validate a native-width operand and widen it.

    Raises:
        Underflow: If value is negative
        Overflow: If value exceeds 2^128 - 1
    """
    if value < 0:
        raise Underflow(f"{name} must be non-negative, got {value}")
    if value > BALANCE_MAX:
        raise Overflow(f"{name} exceeds native width: {value}")
    return S(value)


def divide(numerator: SafeInt, denominator: SafeInt, rounding: Rounding) -> SafeInt:
    """Divide two accumulator values in the given direction."""
    if rounding is Rounding.UP:
        return numerator.ceiling_div(denominator)
    if rounding is Rounding.NEAREST:
        return numerator.nearest_div(denominator)
    return numerator // denominator


def checked_add(a: int, b: int) -> int:
    """a + b, raising Overflow above the native width."""
    return (native(a, "a") + native(b, "b")).to_native()


def checked_sub(a: int, b: int) -> int:
    """a - b, raising Underflow if b > a."""
    return (native(a, "a") - native(b, "b")).to_native()


def checked_mul(a: int, b: int) -> int:
    """a * b, raising Overflow above the native width."""
    return (native(a, "a") * native(b, "b")).to_native()


def checked_div(a: int, c: int, rounding: Rounding = Rounding.DOWN) -> int:
    """a / c in the given rounding direction.

    Raises:
        DivisionByZero: If c == 0
    """
    return divide(native(a, "a"), native(c, "c"), rounding).to_native()


def checked_mul_div(a: int, b: int, c: int, rounding: Rounding = Rounding.DOWN) -> int:
    """Compute a * b / c through the 256-bit accumulator.

    Args:
        a: First factor (native width)
        b: Second factor (native width)
        c: Divisor (native width, non-zero)
        rounding: Direction for the final division

    Returns:
        The quotient, narrowed back to the native width

    Raises:
        DivisionByZero: If c == 0
        Overflow: If the product exceeds the accumulator or the quotient
            exceeds the native width
    """
    product = native(a, "a") * native(b, "b")
    return divide(product, native(c, "c"), rounding).to_native()


def isqrt(value: SafeInt | int) -> int:
    """Floor square root of an accumulator value (exact)."""
    return math.isqrt(S(value).value)
