"""Numeric constants for pool math.

Centralizes integer widths, the fixed-point scale and solver defaults.
"""

# Native width: every balance, weight and share amount is an unsigned 128-bit value
BALANCE_BITS = 128
BALANCE_MAX = 2**BALANCE_BITS - 1

# Widened accumulator for intermediate products (unsigned 256-bit)
WIDE_BITS = 256
WIDE_MAX = 2**WIDE_BITS - 1

# Fixed-point scales
ONE_18 = 10**18
ONE_20 = 10**20
ONE_36 = 10**36

# pow() results are accurate to 10^-14 relative (10_000 / 10^18)
MAX_POW_RELATIVE_ERROR = 10_000

# Stable pools: amplification is scaled by this factor internally
AMP_PRECISION = 1000

# Newton-Raphson defaults for the stable invariant solvers
STABLE_MAX_ITERATIONS = 255
STABLE_CONVERGENCE_TOLERANCE = 1
