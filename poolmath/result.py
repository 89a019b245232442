"""Calculation result type.

Pool functions raise MathError subclasses. Hosts that prefer values over
exceptions wrap a call with calculate() and branch on the result.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from poolmath.errors import ErrorKind, MathError

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass(frozen=True)
class CalculationResult(Generic[T]):
    """Result of a pool calculation: a value or a typed failure, never both.

    Attributes:
        value: The calculated quantity, or None on failure
        error: The failure kind, or None on success
        error_detail: Human-readable detail about the failure

    Examples:
        result = calculate(constant_product.out_given_in, 1_000_000, 1_000_000, 1_000)
        assert result.is_valid
        assert result.value == 999

        result = calculate(constant_product.in_given_out, 100, 100, 100)
        assert result.error is ErrorKind.INSUFFICIENT_LIQUIDITY
    """

    value: T | None
    error: ErrorKind | None = None
    error_detail: str | None = None

    @property
    def is_valid(self) -> bool:
        """True if the calculation succeeded."""
        return self.error is None

    @property
    def is_error(self) -> bool:
        """True if the calculation failed."""
        return self.error is not None

    def unwrap(self) -> T:
        """Return the value.

        Raises:
            ValueError: If the calculation failed
        """
        if self.error is not None:
            raise ValueError(f"Calculation failed: {self.error.value}: {self.error_detail}")
        return self.value  # type: ignore[return-value]

    @classmethod
    def ok(cls, value: T) -> CalculationResult[T]:
        """Create a successful result."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str | None = None) -> CalculationResult[T]:
        """Create a failed result."""
        return cls(value=None, error=error, error_detail=detail)


def calculate(fn: Callable[..., T], *args: object, **kwargs: object) -> CalculationResult[T]:
    """Call a pool function and capture any MathError as a failed result.

    Only MathError is captured; contract violations such as IndexError or
    TypeError propagate unchanged.
    """
    try:
        return CalculationResult.ok(fn(*args, **kwargs))
    except MathError as e:
        logger.debug(
            "calculation_failed",
            function=getattr(fn, "__qualname__", repr(fn)),
            kind=e.kind.value,
            detail=str(e),
        )
        return CalculationResult.failure(e.kind, str(e))
