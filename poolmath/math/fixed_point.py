"""18-decimal fixed-point values.

A FixedPoint is an integer scaled by 10^18: 1.5 is stored as
1_500_000_000_000_000_000. The magnitude is bounded by the native 128-bit
width, and products/quotients are formed on magnitudes in the 256-bit
SafeInt accumulator, so every operation is overflow-checked.

Directional operations round in a fixed direction regardless of sign:
*_down rounds toward negative infinity, *_up toward positive infinity.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar

from poolmath.constants import BALANCE_MAX, ONE_18
from poolmath.errors import DivisionByZero, Overflow, Underflow
from poolmath.math.rounding import Rounding, checked_mul_div
from poolmath.safe_int import S, SafeInt

__all__ = ["FixedPoint", "ONE", "ZERO"]


def _bounded(raw: int) -> int:
    if raw > BALANCE_MAX or raw < -BALANCE_MAX:
        raise Overflow(f"Fixed-point value out of range: {raw}")
    return raw


def _signed_quotient(numerator: SafeInt, denominator: SafeInt, negative: bool, up: bool) -> int:
    """Round |n| / |d| with sign applied: up means toward +inf, down toward -inf."""
    # For a negative result, rounding the magnitude up moves toward -inf
    if negative == up:
        magnitude = numerator // denominator
    else:
        magnitude = numerator.ceiling_div(denominator)
    return -magnitude.value if negative else magnitude.value


class FixedPoint:
    """18-decimal fixed-point number stored as int.

    Attributes:
        value: Raw scaled integer (signed, |value| <= 2^128 - 1)
    """

    ONE: ClassVar[int] = ONE_18

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int) -> None:
        """Create FixedPoint from raw scaled value.

        Raises:
            TypeError: If value is not an int
            Overflow: If |value| exceeds the native width
        """
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"FixedPoint requires int, got {type(value).__name__}")
        self.value = _bounded(value)

    @classmethod
    def from_int(cls, i: int) -> FixedPoint:
        """Create from integer (will be scaled by 10^18)."""
        return cls(_bounded(i * cls.ONE))

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int, rounding: Rounding = Rounding.DOWN) -> FixedPoint:
        """Create numerator / denominator from two native integers.

        Raises:
            DivisionByZero: If denominator is zero
        """
        return cls(checked_mul_div(numerator, cls.ONE, denominator, rounding))

    @classmethod
    def from_decimal(cls, d: Decimal) -> FixedPoint:
        """Create from decimal (will be scaled by 10^18).

        Uses ROUND_HALF_UP. Intended for building inputs, never inside a formula.
        """
        scaled = (d * cls.ONE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(int(scaled))

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.value) / Decimal(self.ONE)

    @property
    def is_negative(self) -> bool:
        return self.value < 0

    def is_integer(self) -> bool:
        """True if the value has no fractional part."""
        return self.value % self.ONE == 0

    # --- Directional arithmetic ---

    def _product(self, other: FixedPoint) -> tuple[SafeInt, bool]:
        magnitude = S(abs(self.value)) * S(abs(other.value))
        return magnitude, (self.value < 0) != (other.value < 0)

    def mul_down(self, other: FixedPoint) -> FixedPoint:
        """Multiply, rounding toward negative infinity."""
        product, negative = self._product(other)
        return FixedPoint(_signed_quotient(product, S(self.ONE), negative, up=False))

    def mul_up(self, other: FixedPoint) -> FixedPoint:
        """Multiply, rounding toward positive infinity."""
        product, negative = self._product(other)
        return FixedPoint(_signed_quotient(product, S(self.ONE), negative, up=True))

    def _quotient(self, other: FixedPoint, up: bool) -> FixedPoint:
        if other.value == 0:
            raise DivisionByZero("FixedPoint division by zero")
        numerator = S(abs(self.value)) * S(self.ONE)
        negative = (self.value < 0) != (other.value < 0)
        return FixedPoint(_signed_quotient(numerator, S(abs(other.value)), negative, up))

    def div_down(self, other: FixedPoint) -> FixedPoint:
        """Divide, rounding toward negative infinity."""
        return self._quotient(other, up=False)

    def div_up(self, other: FixedPoint) -> FixedPoint:
        """Divide, rounding toward positive infinity."""
        return self._quotient(other, up=True)

    def add(self, other: FixedPoint) -> FixedPoint:
        """Add two values (range checked)."""
        return FixedPoint(_bounded(self.value + other.value))

    def sub(self, other: FixedPoint) -> FixedPoint:
        """Subtract other from self (range checked, may be negative)."""
        return FixedPoint(_bounded(self.value - other.value))

    def complement(self) -> FixedPoint:
        """Return 1 - self.

        Raises:
            Underflow: If self > 1
        """
        if self.value > self.ONE:
            raise Underflow(f"Complement of value above one: {self.value}")
        return FixedPoint(self.ONE - self.value)

    def __neg__(self) -> FixedPoint:
        return FixedPoint(-self.value)

    # --- Comparisons ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"FixedPoint({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())


ONE = FixedPoint(ONE_18)
ZERO = FixedPoint(0)
