"""Fee application shared by all pool types.

Fees are a rational numerator / denominator. The fee amount always rounds
up (in favor of the pool) and the net amount is the exact remainder, so
net + fee == amount with no value created or destroyed by rounding.
"""

from __future__ import annotations

from dataclasses import dataclass

from poolmath.math.rounding import Rounding, checked_mul_div, checked_sub


@dataclass(frozen=True)
class Fee:
    """Fee rate as a fraction.

    Attributes:
        numerator: Fee numerator (e.g. 3 for 0.3% with denominator 1000)
        denominator: Fee denominator (must be positive for a fee to apply)
    """

    numerator: int
    denominator: int

    @classmethod
    def from_bps(cls, bps: int) -> Fee:
        """Create a fee from basis points (30 = 0.3%)."""
        return cls(bps, 10_000)

    def apply(self, amount: int) -> tuple[int, int]:
        """Shorthand for apply_fee(amount, numerator, denominator)."""
        return apply_fee(amount, self.numerator, self.denominator)

    def add_to(self, amount: int) -> tuple[int, int]:
        """Shorthand for add_fee(amount, numerator, denominator)."""
        return add_fee(amount, self.numerator, self.denominator)


NO_FEE = Fee(0, 1)


def apply_fee(amount: int, fee_numerator: int, fee_denominator: int) -> tuple[int, int]:
    """Split an amount into (net_amount, fee_amount).

    fee_amount = ceil(amount * fee_numerator / fee_denominator)
    net_amount = amount - fee_amount

    Args:
        amount: Gross amount
        fee_numerator: Fee rate numerator (zero means no fee)
        fee_denominator: Fee rate denominator

    Returns:
        Tuple of (net_amount, fee_amount)

    Raises:
        DivisionByZero: If fee_denominator is zero
        Underflow: If the fee rate exceeds one
        Overflow: If an operand exceeds the native width
    """
    fee_amount = checked_mul_div(amount, fee_numerator, fee_denominator, Rounding.UP)
    net_amount = checked_sub(amount, fee_amount)
    return net_amount, fee_amount


def add_fee(amount: int, fee_numerator: int, fee_denominator: int) -> tuple[int, int]:
    """Gross up a net amount so that the pool still receives it after the fee.

    Used for exact-out trades: the trader pays gross = amount / (1 - fee),
    rounded up, and fee = gross - amount.

    Returns:
        Tuple of (gross_amount, fee_amount)

    Raises:
        DivisionByZero: If the fee rate is exactly one, or fee_denominator is zero
        Underflow: If the fee rate exceeds one
    """
    complement = checked_sub(fee_denominator, fee_numerator)
    gross_amount = checked_mul_div(amount, fee_denominator, complement, Rounding.UP)
    return gross_amount, checked_sub(gross_amount, amount)
