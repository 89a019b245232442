"""Tests for the SafeInt widened accumulator."""

import pytest

from poolmath.constants import BALANCE_MAX, WIDE_MAX
from poolmath.errors import DivisionByZero, MathError, Overflow, Underflow
from poolmath.safe_int import S, SafeInt


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_negative_raises(self):
        """The accumulator is unsigned."""
        with pytest.raises(Underflow):
            SafeInt(-10)

    def test_above_wide_max_raises(self):
        """Values beyond 256 bits are rejected."""
        assert SafeInt(WIDE_MAX).value == WIDE_MAX
        with pytest.raises(Overflow):
            SafeInt(WIDE_MAX + 1)

    def test_from_invalid_type_raises(self):
        """SafeInt rejects invalid types."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15

    def test_add_overflow_raises(self):
        """Addition past 2^256 - 1 raises instead of wrapping."""
        with pytest.raises(Overflow):
            S(WIDE_MAX) + 1

    def test_sub(self):
        assert (S(10) - S(3)).value == 7
        assert (S(10) - 3).value == 7
        assert (S(5) - S(5)).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction underflow raises Underflow."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)

    def test_plain_int_left_operand_unsupported(self):
        """Arithmetic starts from a widened value; plain ints only appear on the right."""
        with pytest.raises(TypeError):
            5 + S(10)
        with pytest.raises(TypeError):
            7 // S(2)
        with pytest.raises(TypeError):
            S(7) % 3

    def test_mul_native_extremes_fit(self):
        """The product of two native maxima fits the accumulator."""
        result = S(BALANCE_MAX) * S(BALANCE_MAX)
        assert result.value == BALANCE_MAX * BALANCE_MAX

    def test_mul_overflow_raises(self):
        with pytest.raises(Overflow):
            S(2**200) * S(2**100)

    def test_floordiv(self):
        assert (S(7) // S(2)).value == 3

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(7) // 0

    def test_ceiling_div(self):
        assert S(7).ceiling_div(2).value == 4
        assert S(8).ceiling_div(2).value == 4
        assert S(0).ceiling_div(5).value == 0
        with pytest.raises(DivisionByZero):
            S(1).ceiling_div(0)

    def test_nearest_div(self):
        """Halves round up."""
        assert S(7).nearest_div(2).value == 4
        assert S(5).nearest_div(4).value == 1
        assert S(6).nearest_div(4).value == 2
        assert S(7).nearest_div(4).value == 2
        with pytest.raises(DivisionByZero):
            S(1).nearest_div(0)

    def test_abs_diff(self):
        assert S(3).abs_diff(10).value == 7
        assert S(10).abs_diff(S(3)).value == 7

    def test_errors_share_base(self):
        """All accumulator errors are MathErrors and ArithmeticErrors."""
        for error in (Overflow, Underflow, DivisionByZero):
            assert issubclass(error, MathError)
            assert issubclass(error, ArithmeticError)


class TestSafeIntNarrowing:
    """Tests for narrowing back to the native width."""

    def test_to_native(self):
        assert S(BALANCE_MAX).to_native() == BALANCE_MAX

    def test_to_native_overflow_raises(self):
        with pytest.raises(Overflow):
            S(BALANCE_MAX + 1).to_native()


class TestSafeIntComparison:
    def test_comparisons_with_int(self):
        assert S(5) == 5
        assert S(5) != 6
        assert S(5) < 6
        assert S(5) <= 5
        assert S(6) > 5
        assert S(6) >= 6

    def test_bool(self):
        assert not S(0)
        assert S(1)
