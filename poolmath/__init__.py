"""Deterministic fixed-point math for AMM liquidity pools."""

from poolmath.errors import (
    ConvergenceFailure,
    DivisionByZero,
    ErrorKind,
    InsufficientLiquidity,
    MathError,
    OutOfDomain,
    Overflow,
    Underflow,
)
from poolmath.fees import NO_FEE, Fee, add_fee, apply_fee
from poolmath.result import CalculationResult, calculate

__version__ = "0.1.0"
__all__ = [
    # Errors
    "ErrorKind",
    "MathError",
    "Overflow",
    "Underflow",
    "DivisionByZero",
    "OutOfDomain",
    "InsufficientLiquidity",
    "ConvergenceFailure",
    # Fees
    "Fee",
    "NO_FEE",
    "apply_fee",
    "add_fee",
    # Results
    "CalculationResult",
    "calculate",
    "__version__",
]
