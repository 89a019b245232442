"""Constant-product (x * y = k) pool math.

Two-asset, equal-weight pools. Swap formulas:
    amount_out = balance_out * amount_in / (balance_in + amount_in)      (round down)
    amount_in  = balance_in * amount_out / (balance_out - amount_out)    (round up)

Fees are not applied here; use poolmath.fees on the trade amount.
"""

from __future__ import annotations

from poolmath.errors import DivisionByZero, InsufficientLiquidity
from poolmath.math.rounding import (
    Rounding,
    checked_mul_div,
    checked_sub,
    divide,
    isqrt,
    native,
)


def spot_price(balance_in: int, balance_out: int, amount: int) -> int:
    """Value of `amount` of the input asset in output-asset units at the current price.

    Formula: amount * balance_out / balance_in (rounded down)

    Raises:
        InsufficientLiquidity: If balance_in is zero
    """
    if balance_in == 0:
        raise InsufficientLiquidity("balance_in must be positive")
    if amount == 0 or balance_out == 0:
        return 0
    return checked_mul_div(amount, balance_out, balance_in, Rounding.DOWN)


def out_given_in(balance_in: int, balance_out: int, amount_in: int) -> int:
    """Calculate output amount for an exact input (sell).

    Formula: amount_out = balance_out * amount_in / (balance_in + amount_in)

    Args:
        balance_in: Pool balance of the input asset
        balance_out: Pool balance of the output asset
        amount_in: Input amount (after fee)

    Returns:
        Output amount, rounded down

    Raises:
        InsufficientLiquidity: If either balance is zero
    """
    if balance_in == 0:
        raise InsufficientLiquidity("balance_in must be positive")
    if balance_out == 0:
        raise InsufficientLiquidity("balance_out must be positive")

    # balance_in + amount_in may exceed the native width; keep it wide
    denominator = native(balance_in, "balance_in") + native(amount_in, "amount_in")
    numerator = native(balance_out, "balance_out") * native(amount_in, "amount_in")
    amount_out = divide(numerator, denominator, Rounding.DOWN).to_native()

    if amount_out >= balance_out:
        raise InsufficientLiquidity(f"Output {amount_out} would drain balance {balance_out}")
    return amount_out


def in_given_out(balance_in: int, balance_out: int, amount_out: int) -> int:
    """Calculate input amount required for an exact output (buy).

    Formula: amount_in = balance_in * amount_out / (balance_out - amount_out)

    Args:
        balance_in: Pool balance of the input asset
        balance_out: Pool balance of the output asset
        amount_out: Desired output amount

    Returns:
        Required input amount (before fee), rounded up

    Raises:
        InsufficientLiquidity: If amount_out >= balance_out or balance_in is zero
    """
    if amount_out >= balance_out:
        raise InsufficientLiquidity(
            f"Requested {amount_out} but pool holds {balance_out}"
        )
    if balance_in == 0:
        raise InsufficientLiquidity("balance_in must be positive")

    denominator = checked_sub(balance_out, amount_out)
    return checked_mul_div(balance_in, amount_out, denominator, Rounding.UP)


def initial_shares(amount_a: int, amount_b: int) -> int:
    """Shares issued for the first deposit into an empty pool.

    Formula: floor(sqrt(amount_a * amount_b)), computed in the wide accumulator.
    """
    product = native(amount_a, "amount_a") * native(amount_b, "amount_b")
    return isqrt(product)


def shares_for_deposit(balance: int, amount: int, total_shares: int) -> int:
    """Shares issued for depositing `amount` of an asset whose pool balance is `balance`.

    Formula: amount * total_shares / balance (rounded down)

    Raises:
        InsufficientLiquidity: If balance is zero
    """
    if balance == 0:
        raise InsufficientLiquidity("Cannot issue shares against a zero balance")
    return checked_mul_div(amount, total_shares, balance, Rounding.DOWN)


def liquidity_in(balance_a: int, balance_b: int, amount_a: int) -> int:
    """Amount of asset B owed alongside `amount_a` of asset A for a balanced deposit.

    Formula: amount_a * balance_b / balance_a (rounded up, owed to the pool)

    Raises:
        InsufficientLiquidity: If balance_a is zero
    """
    if balance_a == 0:
        raise InsufficientLiquidity("balance_a must be positive")
    return checked_mul_div(amount_a, balance_b, balance_a, Rounding.UP)


def liquidity_out(balance_a: int, balance_b: int, shares: int, total_shares: int) -> tuple[int, int]:
    """Assets returned for redeeming `shares` out of `total_shares`.

    Formula: balance * shares / total_shares for each asset (rounded down)

    Raises:
        DivisionByZero: If total_shares is zero
        InsufficientLiquidity: If shares > total_shares
    """
    if total_shares == 0:
        raise DivisionByZero("total_shares is zero")
    if shares > total_shares:
        raise InsufficientLiquidity(f"Redeeming {shares} of {total_shares} shares")
    amount_a = checked_mul_div(balance_a, shares, total_shares, Rounding.DOWN)
    amount_b = checked_mul_div(balance_b, shares, total_shares, Rounding.DOWN)
    return amount_a, amount_b
