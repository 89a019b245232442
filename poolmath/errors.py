"""Pool math error classes.

Every failure belongs to exactly one ErrorKind. Callers can catch MathError
for any numeric failure, or a specific subclass for a specific precondition.
"""

from enum import Enum
from typing import ClassVar


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    OVERFLOW = "overflow"
    UNDERFLOW = "underflow"
    DIVISION_BY_ZERO = "division_by_zero"
    OUT_OF_DOMAIN = "out_of_domain"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    CONVERGENCE_FAILURE = "convergence_failure"


class MathError(ArithmeticError):
    """Base error for pool math operations."""

    kind: ClassVar[ErrorKind]


class Overflow(MathError):
    """Value exceeds the native width or the 256-bit accumulator."""

    kind = ErrorKind.OVERFLOW


class Underflow(MathError):
    """Subtraction would produce a negative quantity."""

    kind = ErrorKind.UNDERFLOW


class DivisionByZero(MathError):
    """Divisor (pool balance, weight or denominator) is zero."""

    kind = ErrorKind.DIVISION_BY_ZERO


class OutOfDomain(MathError):
    """Input lies outside the documented domain of an approximation or solver."""

    kind = ErrorKind.OUT_OF_DOMAIN


class InsufficientLiquidity(MathError):
    """Requested output exceeds the pool balance, or a pool balance is zero."""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY


class ConvergenceFailure(MathError):
    """Iterative solve did not converge within the iteration cap."""

    kind = ErrorKind.CONVERGENCE_FAILURE


# =============================================================================
# Specific errors
# =============================================================================


class ZeroWeightError(DivisionByZero):
    """Token weight must be positive."""

    pass


class XOutOfBounds(OutOfDomain):
    """Base of pow() is negative or too large."""

    pass


class ProductOutOfBounds(OutOfDomain):
    """y * ln(x) is outside the valid range for exp()."""

    pass


class InvalidExponent(OutOfDomain):
    """Argument of exp() is outside [-41, 130]."""

    pass


class InvariantDidNotConverge(ConvergenceFailure):
    """Newton-Raphson iteration for stable invariant D did not converge."""

    pass


class BalanceDidNotConverge(ConvergenceFailure):
    """Newton-Raphson iteration for a stable token balance did not converge."""

    pass
