"""Tests for ln/exp/pow approximations."""

from decimal import Decimal
from fractions import Fraction

import pytest

from poolmath.errors import InvalidExponent, OutOfDomain, Overflow, ProductOutOfBounds, XOutOfBounds
from poolmath.math.fixed_point import ONE, ZERO, FixedPoint
from poolmath.math.rounding import Rounding
from poolmath.math.transcendental import exp_approx, ln_approx, log2_approx, pow_approx, pow_down, pow_up, powi
from tests.helpers import ONE_18, ref_exp, ref_ln, ref_log2, ref_pow

RELATIVE_BOUND = Decimal("1e-14")
UNIT = Decimal("1e-18")


def _fp(value: str) -> FixedPoint:
    return FixedPoint.from_decimal(Decimal(value))


class TestLn:
    """Tests for ln_approx."""

    @pytest.mark.parametrize(
        "x",
        ["0.000001", "0.5", "0.95", "0.999", "1.001", "1.05", "2", "10", "123456.789", "1000000000"],
    )
    def test_matches_reference(self, x):
        """ln is accurate to far better than the pow bound."""
        value = _fp(x)
        approx = ln_approx(value).to_decimal()
        assert abs(approx - ref_ln(value.value)) <= Decimal("1e-14")

    def test_ln_one_is_zero(self):
        assert ln_approx(ONE) == ZERO

    def test_sign(self):
        assert ln_approx(_fp("0.5")).is_negative
        assert not ln_approx(_fp("2")).is_negative

    @pytest.mark.parametrize("x", [0, -1, -ONE_18])
    def test_non_positive_raises(self, x):
        with pytest.raises(XOutOfBounds):
            ln_approx(FixedPoint(x))

    def test_out_of_domain_is_math_error_kind(self):
        with pytest.raises(OutOfDomain):
            ln_approx(ZERO)


class TestLog2:
    """Tests for log2_approx."""

    @pytest.mark.parametrize(
        "x,expected",
        [
            ("1", "0"),
            ("2", "1"),
            ("0.25", "-2"),
            ("0.5", "-1"),
            ("1024", "10"),
            ("0.0009765625", "-10"),
        ],
    )
    def test_powers_of_two_are_exact(self, x, expected):
        assert log2_approx(_fp(x)) == _fp(expected)

    @pytest.mark.parametrize(
        "x",
        ["0.000001", "0.3", "0.75", "0.999999", "1.000001", "1.5", "3", "10", "123456.789", "1000000000000"],
    )
    def test_matches_reference(self, x):
        value = _fp(x)
        approx = log2_approx(value).to_decimal()
        assert abs(approx - ref_log2(value.value)) <= Decimal("1e-16")

    def test_truncates_toward_zero(self):
        assert log2_approx(_fp("3")).to_decimal() <= ref_log2(3 * ONE_18)
        assert log2_approx(_fp("0.3")).to_decimal() >= ref_log2(3 * 10**17)

    def test_native_maximum(self):
        value = FixedPoint(2**128 - 1)
        approx = log2_approx(value).to_decimal()
        assert abs(approx - ref_log2(value.value)) <= Decimal("1e-16")

    @pytest.mark.parametrize("x", [0, -1, -ONE_18])
    def test_non_positive_raises(self, x):
        with pytest.raises(OutOfDomain):
            log2_approx(FixedPoint(x))


class TestExp:
    """Tests for exp_approx."""

    def test_exp_zero_is_one(self):
        assert exp_approx(ZERO) == ONE

    @pytest.mark.parametrize("x", ["-20", "-1", "0.5", "1", "3.25", "40"])
    def test_matches_reference(self, x):
        value = _fp(x)
        approx = exp_approx(value).to_decimal()
        reference = ref_exp(value.value)
        assert abs(approx - reference) <= reference * RELATIVE_BOUND + UNIT

    def test_argument_out_of_range_raises(self):
        with pytest.raises(InvalidExponent):
            exp_approx(FixedPoint.from_int(131))
        with pytest.raises(InvalidExponent):
            exp_approx(FixedPoint.from_int(-42))

    def test_result_above_native_width_raises(self):
        """e^100 is inside the series domain but not representable."""
        with pytest.raises(Overflow):
            exp_approx(FixedPoint.from_int(100))


class TestPow:
    """Tests for pow_approx and its directional bounds."""

    @pytest.mark.parametrize(
        "base,exponent",
        [
            ("0.5", "0.1"),
            ("0.5", "3.7"),
            ("0.9", "1.5"),
            ("0.999999", "0.25"),
            ("1.02", "0.333333333333333333"),
            ("1.5", "2.5"),
            ("2", "0.5"),
            ("2", "10"),
            ("10", "-1.5"),
            ("0.25", "-2.5"),
        ],
    )
    def test_bounded_error(self, base, exponent):
        """pow_approx stays within 1e-14 relative (plus one unit) of the exact value."""
        b, e = _fp(base), _fp(exponent)
        reference = ref_pow(b.value, e.value)
        approx = pow_approx(b, e).to_decimal()
        assert abs(approx - reference) <= reference * RELATIVE_BOUND + UNIT

    @pytest.mark.parametrize(
        "base,exponent",
        [("0.5", "0.1"), ("0.8", "0.75"), ("1.1", "1.5"), ("3", "0.333333333333333333"), ("0.6", "3")],
    )
    def test_up_and_down_bracket_true_value(self, base, exponent):
        b, e = _fp(base), _fp(exponent)
        reference = ref_pow(b.value, e.value)
        assert pow_down(b, e).to_decimal() <= reference <= pow_up(b, e).to_decimal()

    def test_random_sweep_brackets_true_value(self, rng):
        """Seeded sweep over moderate bases and exponents."""
        for _ in range(50):
            b = FixedPoint(rng.randint(ONE_18 // 2, 2 * ONE_18))
            e = FixedPoint(rng.randint(ONE_18 // 10, 4 * ONE_18))
            reference = ref_pow(b.value, e.value)
            assert pow_down(b, e).to_decimal() <= reference <= pow_up(b, e).to_decimal()

    def test_zero_exponent_is_one(self):
        assert pow_approx(_fp("123.4"), ZERO) == ONE
        assert pow_approx(ZERO, ZERO) == ONE

    def test_zero_base(self):
        assert pow_approx(ZERO, _fp("0.5")) == ZERO

    def test_zero_base_negative_exponent_raises(self):
        with pytest.raises(XOutOfBounds):
            pow_approx(ZERO, _fp("-0.5"))

    def test_negative_base_raises(self):
        with pytest.raises(XOutOfBounds):
            pow_approx(-ONE, _fp("0.5"))

    @pytest.mark.parametrize("exponent", ["1", "2", "4", "0.5"])
    def test_bounds_reject_negative_base(self, exponent):
        """The exact-exponent shortcut validates the base like the approximation does."""
        with pytest.raises(XOutOfBounds):
            pow_up(-ONE, _fp(exponent))
        with pytest.raises(XOutOfBounds):
            pow_down(-ONE, _fp(exponent))

    def test_product_out_of_range_raises(self):
        """y * ln(x) above 130 is outside the exp domain."""
        with pytest.raises(ProductOutOfBounds):
            pow_approx(FixedPoint.from_int(10**6), FixedPoint.from_int(100))

    def test_integer_exponents_are_exact(self):
        """Exponents 1, 2 and 4 skip the approximation."""
        x = _fp("1.1")
        assert pow_up(x, ONE) == x
        assert pow_down(x, ONE) == x
        assert pow_up(x, FixedPoint.from_int(2)) == _fp("1.21")
        assert pow_down(x, FixedPoint.from_int(4)) == _fp("1.4641")

    def test_pow_down_floors_at_zero(self):
        """A raw result inside the error margin is reported as zero, never negative."""
        assert pow_down(_fp("0.000001"), _fp("2.96")) == ZERO


class TestPowi:
    """Tests for integer powers."""

    def test_exact_integer_result(self):
        assert powi(FixedPoint.from_int(2), 10) == FixedPoint.from_int(1024)

    def test_zero_exponent(self):
        assert powi(_fp("7.5"), 0) == ONE

    def test_rounding_brackets(self):
        third = FixedPoint.from_ratio(1, 3)
        down = powi(third, 5, Rounding.DOWN)
        up = powi(third, 5, Rounding.UP)
        assert down <= up
        reference = Fraction(third.value**5, ONE_18**5)
        assert Fraction(down.value, ONE_18) <= reference <= Fraction(up.value, ONE_18)

    def test_negative_exponent_raises(self):
        with pytest.raises(OutOfDomain):
            powi(ONE, -1)

    def test_overflow_raises(self):
        with pytest.raises(Overflow):
            powi(FixedPoint.from_int(10**10), 3)
