"""Widened unsigned integer for overflow-checked intermediate arithmetic.

This module provides SafeInt, the 256-bit accumulator every pool formula
computes through:
- Results above 2^256 - 1 raise Overflow (nothing ever wraps)
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero
- to_native() narrows back to the 128-bit native width

Usage pattern:
    from poolmath.safe_int import S

    def calculate(a: int, b: int, c: int) -> int:
        # Wrap at entry
        sa, sb, sc = S(a), S(b), S(c)

        # Natural arithmetic - automatically checked
        result = (sa * sb) // sc  # Raises if sc == 0
        remainder = sa - sb       # Raises if sb > sa

        # Narrow at exit
        return result.to_native()
"""

from __future__ import annotations

from poolmath.constants import BALANCE_MAX, WIDE_MAX
from poolmath.errors import DivisionByZero, Overflow, Underflow


class SafeInt:
    """Unsigned 256-bit integer with checked arithmetic.

    SafeInt is a transient intermediate: pool functions wrap their native
    inputs, compute, and narrow the result back with to_native(). It is never
    stored in a pool snapshot.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
            Underflow: If value is negative
            Overflow: If value exceeds the 256-bit accumulator
        """
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"Negative value cannot be widened: {value}")
        if value > WIDE_MAX:
            raise Overflow(f"Value exceeds 256-bit accumulator: {value}")
        self._value = value

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        """Add two values.

        Raises:
            Overflow: If the sum exceeds the accumulator
        """
        other_val = _extract_value(other)
        return _checked(self._value + other_val, "add", self._value, other_val)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            Overflow: If the product exceeds the accumulator
        """
        other_val = _extract_value(other)
        return _checked(self._value * other_val, "mul", self._value, other_val)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division rounding down.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounding up.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        if self._value == 0:
            return SafeInt(0)
        return SafeInt((self._value - 1) // other_val + 1)

    def nearest_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounding to nearest, halves rounding up.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Nearest division by zero: {self._value}")
        quotient, remainder = divmod(self._value, other_val)
        if 2 * remainder >= other_val:
            quotient += 1
        return SafeInt(quotient)

    def abs_diff(self, other: SafeInt | int) -> SafeInt:
        """Return |self - other| without risking Underflow."""
        other_val = _extract_value(other)
        return SafeInt(abs(self._value - other_val))

    def to_native(self) -> int:
        """Narrow to the 128-bit native width.

        Raises:
            Overflow: If value exceeds 2^128 - 1
        """
        if self._value > BALANCE_MAX:
            raise Overflow(f"Value exceeds native width: {self._value}")
        return self._value


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


def _checked(result: int, op: str, a: int, b: int) -> SafeInt:
    if result > WIDE_MAX:
        raise Overflow(f"Overflow: {op}({a}, {b}) exceeds 256-bit accumulator")
    return SafeInt(result)


# Convenience alias for concise code
S = SafeInt
