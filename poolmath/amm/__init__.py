"""Pool formulas for constant-product, weighted and stable pools.

Each pool type is a module of pure functions over integer balances:
- constant_product: x * y = k
- weighted: weighted product (including LBP weight schedules)
- stable: StableSwap invariant with Newton-Raphson solvers

pools holds immutable snapshot types that delegate to those functions.
"""

from poolmath.amm import constant_product, stable, weighted
from poolmath.amm.pools import (
    ConstantProductPool,
    LiquidityBootstrappingPool,
    StablePool,
    WeightedPool,
)

__all__ = [
    # Formula modules
    "constant_product",
    "weighted",
    "stable",
    # Snapshots
    "ConstantProductPool",
    "WeightedPool",
    "LiquidityBootstrappingPool",
    "StablePool",
]
