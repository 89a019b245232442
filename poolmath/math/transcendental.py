"""Fixed-point logarithm, exponential and power approximations.

The series implementation follows Balancer's LogExpMath: digit extraction
against precomputed powers of e, then a fixed number of arctanh (ln) or
Taylor (exp) terms. Every loop has a constant trip count, so the cost of a
call never depends on its inputs.

Accuracy: pow_approx is within 10^-14 relative error (plus one unit) of the
exact value on its domain. pow_up and pow_down widen the raw result by that
bound so the true value is always bracketed.

Domain:
    ln_approx(x):          x > 0
    exp_approx(x):         -41 <= x <= 130
    log2_approx(x):        x > 0
    pow_approx(x, y):      x >= 0, -41 <= y * ln(x) <= 130
Inputs outside these ranges raise an OutOfDomain subclass.
"""

from __future__ import annotations

from poolmath.constants import MAX_POW_RELATIVE_ERROR, ONE_18, ONE_20, ONE_36
from poolmath.errors import (
    InvalidExponent,
    OutOfDomain,
    ProductOutOfBounds,
    XOutOfBounds,
)
from poolmath.math.fixed_point import ONE, ZERO, FixedPoint
from poolmath.math.rounding import Rounding, checked_mul_div

__all__ = [
    "ln_approx",
    "log2_approx",
    "exp_approx",
    "pow_approx",
    "pow_up",
    "pow_down",
    "powi",
    "MAX_NATURAL_EXPONENT",
    "MIN_NATURAL_EXPONENT",
]

MAX_NATURAL_EXPONENT = 130 * ONE_18  # e^130 is the max we can handle
MIN_NATURAL_EXPONENT = -41 * ONE_18  # e^-41 is close to zero

LN_36_LOWER_BOUND = ONE_18 - 10**17  # 0.9
LN_36_UPPER_BOUND = ONE_18 + 10**17  # 1.1

# Binary digits extracted by log2_approx after the integer part
LOG2_FRACTION_BITS = 64

# 18-decimal precision constants (for large values)
X_18 = {
    0: 128 * ONE_18,  # 2^7
    1: 64 * ONE_18,  # 2^6
}
A_18 = {
    0: 38877084059945950922200000000000000000000000000000000000,  # e^128
    1: 6235149080811616882910000000,  # e^64
}

# 20-decimal precision constants (for medium values)
X_20 = {
    2: 3_200_000_000_000_000_000_000,  # 2^5
    3: 1_600_000_000_000_000_000_000,  # 2^4
    4: 800_000_000_000_000_000_000,  # 2^3
    5: 400_000_000_000_000_000_000,  # 2^2
    6: 200_000_000_000_000_000_000,  # 2^1
    7: 100_000_000_000_000_000_000,  # 2^0
    8: 50_000_000_000_000_000_000,  # 2^-1
    9: 25_000_000_000_000_000_000,  # 2^-2
    10: 12_500_000_000_000_000_000,  # 2^-3
    11: 6_250_000_000_000_000_000,  # 2^-4
}
A_20 = {
    2: 7_896_296_018_268_069_516_100_000_000_000_000,  # e^32
    3: 888_611_052_050_787_263_676_000_000,  # e^16
    4: 298_095_798_704_172_827_474_000,  # e^8
    5: 5_459_815_003_314_423_907_810,  # e^4
    6: 738_905_609_893_065_022_723,  # e^2
    7: 271_828_182_845_904_523_536,  # e^1
    8: 164_872_127_070_012_814_685,  # e^0.5
    9: 128_402_541_668_774_148_407,  # e^0.25
    10: 113_314_845_306_682_631_683,  # e^0.125
    11: 106_449_445_891_785_942_956,  # e^0.0625
}

_TWO = FixedPoint(2 * ONE_18)
_FOUR = FixedPoint(4 * ONE_18)


# =============================================================================
# Raw series (signed integers at 18/20/36 decimals)
# =============================================================================


def _div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero.

    Python's // floors toward negative infinity. The series below are
    specified with truncation, which differs for operands of mixed sign.
    """
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def _ln(a: int) -> int:
    """ln(a) for a > 0 at 18 decimals, via digit extraction and arctanh series."""
    if a < ONE_18:
        # ln(a) = -ln(1/a)
        return -_ln((ONE_18 * ONE_18) // a)

    sum_val = 0

    for i in range(2):
        if a >= A_18[i] * ONE_18:
            a //= A_18[i]
            sum_val += X_18[i]

    # Scale up to 20-decimal precision
    sum_val *= 100
    a *= 100

    for i in range(2, 12):
        if a >= A_20[i]:
            a = (a * ONE_20) // A_20[i]
            sum_val += X_20[i]

    # ln(a) = 2 * arctanh((a-1)/(a+1)) = 2 * (z + z^3/3 + z^5/5 + ...)
    z = ((a - ONE_20) * ONE_20) // (a + ONE_20)
    z_squared = (z * z) // ONE_20

    num = z
    series_sum = num

    for i in range(3, 12, 2):  # z^3/3 .. z^11/11
        num = (num * z_squared) // ONE_20
        series_sum += num // i

    series_sum *= 2

    return (sum_val + series_sum) // 100


def _ln_36(x: int) -> int:
    """ln(x) at 36 decimals for x close to one (18-decimal input)."""
    x *= ONE_18

    z = _div_trunc((x - ONE_36) * ONE_36, x + ONE_36)
    z_squared = _div_trunc(z * z, ONE_36)

    num = z
    series_sum = num

    for i in range(3, 16, 2):  # z^3/3 .. z^15/15
        num = _div_trunc(num * z_squared, ONE_36)
        series_sum += _div_trunc(num, i)

    return series_sum * 2


def _exp(x: int) -> int:
    """e^x at 18 decimals.

    Raises:
        InvalidExponent: If x is outside [MIN_NATURAL_EXPONENT, MAX_NATURAL_EXPONENT]
    """
    if not (MIN_NATURAL_EXPONENT <= x <= MAX_NATURAL_EXPONENT):
        raise InvalidExponent(f"Exponent {x} outside valid range")

    if x < 0:
        # e^-x = 1 / e^x
        return (ONE_18 * ONE_18) // _exp(-x)

    if x >= X_18[0]:
        x -= X_18[0]
        first_an = A_18[0]
    elif x >= X_18[1]:
        x -= X_18[1]
        first_an = A_18[1]
    else:
        first_an = 1

    x *= 100

    product = ONE_20
    for i in range(2, 10):
        if x >= X_20[i]:
            x -= X_20[i]
            product = (product * A_20[i]) // ONE_20

    # e^x = 1 + x + x^2/2! + ... + x^12/12!
    series_sum = ONE_20
    term = x
    series_sum += term

    for i in range(2, 13):
        term = ((term * x) // ONE_20) // i
        series_sum += term

    return (((product * series_sum) // ONE_20) * first_an) // 100


def _ln_fixed(x: int) -> int:
    """ln(x) at 18 decimals, using the 36-decimal series near one."""
    if LN_36_LOWER_BOUND < x < LN_36_UPPER_BOUND:
        return _div_trunc(_ln_36(x), ONE_18)
    return _ln(x)


def _log2_36(y: int) -> int:
    """log2(y) at 18 decimals for y >= 1 given at 36 decimals.

    The integer part comes from the bit length; each fractional bit is found
    by squaring and halving whenever the square reaches two.
    """
    n = (y // ONE_36).bit_length() - 1
    y >>= n

    bits = 0
    for _ in range(LOG2_FRACTION_BITS):
        y = (y * y) // ONE_36
        bits <<= 1
        if y >= 2 * ONE_36:
            y >>= 1
            bits |= 1

    return n * ONE_18 + ((bits * ONE_18) >> LOG2_FRACTION_BITS)


def _pow_raw(x: int, y: int) -> int:
    """x^y at 18 decimals, x > 0, y signed."""
    if LN_36_LOWER_BOUND < x < LN_36_UPPER_BOUND:
        ln_36_x = _ln_36(x)
        # Keep 36-decimal precision through the multiplication
        div1 = _div_trunc(ln_36_x, ONE_18)
        rem1 = ln_36_x - div1 * ONE_18
        logx_times_y = div1 * y + _div_trunc(rem1 * y, ONE_18)
    else:
        logx_times_y = _ln(x) * y

    logx_times_y = _div_trunc(logx_times_y, ONE_18)

    if not (MIN_NATURAL_EXPONENT <= logx_times_y <= MAX_NATURAL_EXPONENT):
        raise ProductOutOfBounds(f"Product {logx_times_y} outside valid range")

    return _exp(logx_times_y)


# =============================================================================
# Public API
# =============================================================================


def ln_approx(x: FixedPoint) -> FixedPoint:
    """Natural logarithm of x.

    Raises:
        XOutOfBounds: If x <= 0
    """
    if x.value <= 0:
        raise XOutOfBounds(f"ln undefined for {x.value}")
    return FixedPoint(_ln_fixed(x.value))


def log2_approx(x: FixedPoint) -> FixedPoint:
    """Base-2 logarithm of x, truncated toward zero.

    Exact at powers of two.

    Raises:
        XOutOfBounds: If x <= 0
    """
    if x.value <= 0:
        raise XOutOfBounds(f"log2 undefined for {x.value}")
    if x.value < ONE_18:
        # log2(x) = -log2(1 / x)
        return FixedPoint(-_log2_36((ONE_36 * ONE_18) // x.value))
    return FixedPoint(_log2_36(x.value * ONE_18))


def exp_approx(x: FixedPoint) -> FixedPoint:
    """e^x.

    Raises:
        InvalidExponent: If x is outside [-41, 130]
        Overflow: If the result exceeds the fixed-point range
    """
    return FixedPoint(_exp(x.value))


def pow_approx(base: FixedPoint, exponent: FixedPoint) -> FixedPoint:
    """base^exponent, nearest approximation (no directional widening).

    Raises:
        XOutOfBounds: If base is negative, or zero with a negative exponent
        ProductOutOfBounds: If exponent * ln(base) is outside [-41, 130]
    """
    _check_base(base)
    if exponent.value == 0:
        return ONE
    if base.value == 0:
        if exponent.value < 0:
            raise XOutOfBounds("Zero base with negative exponent")
        return ZERO
    return FixedPoint(_pow_raw(base.value, exponent.value))


def _check_base(base: FixedPoint) -> None:
    if base.value < 0:
        raise XOutOfBounds(f"Base {base.value} is negative")


def _max_error(raw: int) -> int:
    return checked_mul_div(raw, MAX_POW_RELATIVE_ERROR, ONE_18, Rounding.UP) + 1


def _exact_power(base: FixedPoint, exponent: FixedPoint, rounding: Rounding) -> FixedPoint | None:
    # Common weight ratios skip the ln/exp round-trip entirely
    if exponent == ONE:
        return base
    if exponent == _TWO:
        return powi(base, 2, rounding)
    if exponent == _FOUR:
        return powi(base, 4, rounding)
    return None


def pow_up(base: FixedPoint, exponent: FixedPoint) -> FixedPoint:
    """Upper bound of base^exponent."""
    _check_base(base)
    exact = _exact_power(base, exponent, Rounding.UP)
    if exact is not None:
        return exact
    raw = pow_approx(base, exponent).value
    return FixedPoint(raw + _max_error(raw))


def pow_down(base: FixedPoint, exponent: FixedPoint) -> FixedPoint:
    """Lower bound of base^exponent (never negative)."""
    _check_base(base)
    exact = _exact_power(base, exponent, Rounding.DOWN)
    if exact is not None:
        return exact
    raw = pow_approx(base, exponent).value
    max_error = _max_error(raw)
    if raw < max_error:
        return ZERO
    return FixedPoint(raw - max_error)


def powi(base: FixedPoint, n: int, rounding: Rounding = Rounding.DOWN) -> FixedPoint:
    """base^n for a non-negative integer n, by square-and-multiply.

    Each multiplication rounds in the requested direction, so Rounding.UP
    yields an upper bound and Rounding.DOWN a lower bound.

    Raises:
        OutOfDomain: If base is negative or n < 0
        Overflow: If an intermediate exceeds the fixed-point range
    """
    _check_base(base)
    if n < 0:
        raise OutOfDomain(f"Integer exponent must be non-negative, got {n}")

    result = ONE_18
    square = base.value
    while n:
        if n & 1:
            result = checked_mul_div(result, square, ONE_18, rounding)
        n >>= 1
        if n:
            square = checked_mul_div(square, square, ONE_18, rounding)
    return FixedPoint(result)
