"""Weighted pool math (including liquidity-bootstrapping pools).

Core formulas for pools whose assets carry unequal weights:
    amount_out = balance_out * (1 - (balance_in / (balance_in + amount_in))^(weight_in / weight_out))
    amount_in  = balance_in * ((balance_out / (balance_out - amount_out))^(weight_out / weight_in) - 1)

Results carry the pow() approximation bound (10^-14 relative). When the two
weights are equal the exact constant-product formula is used instead.
"""

from __future__ import annotations

import structlog

from poolmath.amm import constant_product
from poolmath.errors import DivisionByZero, InsufficientLiquidity, OutOfDomain, ZeroWeightError
from poolmath.math.fixed_point import ONE, FixedPoint
from poolmath.math.rounding import Rounding, checked_add, checked_mul_div, checked_sub, divide, native
from poolmath.math.transcendental import pow_up
from poolmath.safe_int import S

logger = structlog.get_logger()


def _validate(balance_in: int, balance_out: int, weight_in: int, weight_out: int) -> None:
    if weight_in <= 0:
        raise ZeroWeightError("weight_in must be positive")
    if weight_out <= 0:
        raise ZeroWeightError("weight_out must be positive")
    if balance_in <= 0:
        raise InsufficientLiquidity("balance_in must be positive")
    if balance_out <= 0:
        raise InsufficientLiquidity("balance_out must be positive")


def out_given_in(
    balance_in: int,
    balance_out: int,
    amount_in: int,
    weight_in: int,
    weight_out: int,
) -> int:
    """Calculate output amount for an exact input (sell).

    Fee should be subtracted from amount_in BEFORE calling this function.

    Args:
        balance_in: Pool balance of the input asset (must be positive)
        balance_out: Pool balance of the output asset (must be positive)
        amount_in: Input amount (after fee)
        weight_in: Weight of the input asset (must be positive)
        weight_out: Weight of the output asset (must be positive)

    Returns:
        Output amount, rounded down

    Raises:
        ZeroWeightError: If either weight is zero
        InsufficientLiquidity: If either balance is zero
        OutOfDomain: If the power falls outside the pow() domain
    """
    _validate(balance_in, balance_out, weight_in, weight_out)

    if weight_in == weight_out:
        return constant_product.out_given_in(balance_in, balance_out, amount_in)
    if amount_in == 0:
        return 0

    # base = balance_in / (balance_in + amount_in) (rounded up: smaller output);
    # the denominator stays wide, the quotient is at most ONE
    denominator = native(balance_in, "balance_in") + native(amount_in, "amount_in")
    scaled = native(balance_in, "balance_in") * S(ONE.value)
    base = FixedPoint(divide(scaled, denominator, Rounding.UP).to_native())

    # exponent = weight_in / weight_out (rounded down)
    exponent = FixedPoint.from_ratio(weight_in, weight_out, Rounding.DOWN)

    power = pow_up(base, exponent)

    # The upper bound of a power below one may reach one; the trader then gets nothing
    if power >= ONE:
        logger.debug(
            "weighted_out_given_in_rounded_to_zero",
            balance_in=balance_in,
            amount_in=amount_in,
            power=power.value,
        )
        return 0

    return checked_mul_div(balance_out, power.complement().value, ONE.value, Rounding.DOWN)


def in_given_out(
    balance_in: int,
    balance_out: int,
    amount_out: int,
    weight_in: int,
    weight_out: int,
) -> int:
    """Calculate input amount required for an exact output (buy).

    Fee should be added to the result AFTER calling this function.

    Args:
        balance_in: Pool balance of the input asset (must be positive)
        balance_out: Pool balance of the output asset (must be positive)
        amount_out: Desired output amount
        weight_in: Weight of the input asset (must be positive)
        weight_out: Weight of the output asset (must be positive)

    Returns:
        Required input amount (before fee), rounded up

    Raises:
        ZeroWeightError: If either weight is zero
        InsufficientLiquidity: If a balance is zero or amount_out >= balance_out
        OutOfDomain: If the power falls outside the pow() domain
    """
    _validate(balance_in, balance_out, weight_in, weight_out)

    if weight_in == weight_out:
        return constant_product.in_given_out(balance_in, balance_out, amount_out)
    if amount_out >= balance_out:
        raise InsufficientLiquidity(f"Requested {amount_out} but pool holds {balance_out}")
    if amount_out == 0:
        return 0

    denominator = checked_sub(balance_out, amount_out)

    # base = balance_out / denominator (rounded up)
    base = FixedPoint.from_ratio(balance_out, denominator, Rounding.UP)

    # exponent = weight_out / weight_in (rounded UP for exact-out, differs from out_given_in)
    exponent = FixedPoint.from_ratio(weight_out, weight_in, Rounding.UP)

    power = pow_up(base, exponent)
    ratio = power.sub(ONE)

    return checked_mul_div(balance_in, ratio.value, ONE.value, Rounding.UP)


def spot_price(
    balance_in: int,
    balance_out: int,
    weight_in: int,
    weight_out: int,
    amount: int,
) -> int:
    """Value of `amount` of the input asset in output-asset units at the current price.

    Formula: balance_out * weight_in * amount / (balance_in * weight_out)

    The triple product is formed in the 256-bit accumulator.

    Raises:
        InsufficientLiquidity: If balance_in is zero
        ZeroWeightError: If weight_out is zero
        Overflow: If the triple product exceeds 256 bits
    """
    if balance_in == 0:
        raise InsufficientLiquidity("balance_in must be positive")
    if amount == 0 or balance_out == 0:
        return 0
    if weight_out == 0:
        raise ZeroWeightError("weight_out must be positive")

    numerator = native(balance_out, "balance_out") * native(weight_in, "weight_in") * native(amount, "amount")
    denominator = native(balance_in, "balance_in") * native(weight_out, "weight_out")
    return (numerator // denominator).to_native()


def linear_weight(start: int, end: int, initial_weight: int, final_weight: int, at: int) -> int:
    """Weight of an asset at point `at` of a linear LBP weight schedule.

    The weight moves from initial_weight at `start` to final_weight at `end`;
    the interpolated change is rounded down, so intermediate weights round
    toward initial_weight.

    Args:
        start: First point of the schedule (e.g. block number)
        end: Last point of the schedule
        initial_weight: Weight at `start`
        final_weight: Weight at `end`
        at: Point to evaluate

    Raises:
        Underflow: If end < start
        DivisionByZero: If end == start
        OutOfDomain: If `at` lies outside [start, end]
    """
    duration = checked_sub(end, start)
    if duration == 0:
        raise DivisionByZero("Weight schedule has zero duration")
    if not start <= at <= end:
        raise OutOfDomain(f"Point {at} outside schedule [{start}, {end}]")

    elapsed = checked_sub(at, start)
    if final_weight >= initial_weight:
        delta = checked_mul_div(final_weight - initial_weight, elapsed, duration, Rounding.DOWN)
        return checked_add(initial_weight, delta)
    delta = checked_mul_div(initial_weight - final_weight, elapsed, duration, Rounding.DOWN)
    return checked_sub(initial_weight, delta)
