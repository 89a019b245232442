"""Solver configuration for pool math."""

from dataclasses import dataclass

from poolmath.constants import STABLE_CONVERGENCE_TOLERANCE, STABLE_MAX_ITERATIONS


@dataclass(frozen=True)
class PrecisionConfig:
    """Iteration caps and tolerances for the stable-pool solvers.

    The defaults are protocol constants: two engines agree bit-for-bit only
    if they run with the same values. Override them in tests, never per call
    in production.

    Attributes:
        max_iterations: Newton-Raphson iteration cap for D and for a
            token balance (default: 255)
        tolerance: Successive estimates within this many units count as
            converged (default: 1)
    """

    max_iterations: int = STABLE_MAX_ITERATIONS
    tolerance: int = STABLE_CONVERGENCE_TOLERANCE

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")


# Default configuration instance
DEFAULT_PRECISION_CONFIG = PrecisionConfig()
