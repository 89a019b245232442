"""Pool snapshot value types.

A snapshot is an immutable tuple of balances (plus weights or an
amplification coefficient) built by the caller right before a calculation.
The methods only select the right balances and delegate to the pure
functions in constant_product, weighted and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from poolmath.amm import constant_product, stable, weighted
from poolmath.config import DEFAULT_PRECISION_CONFIG, PrecisionConfig
from poolmath.fees import NO_FEE, Fee

logger = structlog.get_logger()


def _pair(balances: tuple[int, ...], index_in: int, index_out: int, pool: str) -> tuple[int, int]:
    """Get balances ordered as (balance_in, balance_out)."""
    n_coins = len(balances)
    if not (0 <= index_in < n_coins and 0 <= index_out < n_coins):
        logger.debug("pool_index_out_of_range", pool=pool, index_in=index_in, index_out=index_out)
        raise IndexError(f"Token indices ({index_in}, {index_out}) out of range for {n_coins} tokens")
    if index_in == index_out:
        logger.debug("pool_self_swap", pool=pool, index=index_in)
        raise ValueError("Cannot swap token with itself")
    return balances[index_in], balances[index_out]


@dataclass(frozen=True)
class ConstantProductPool:
    """Two-asset equal-weight pool.

    Attributes:
        balances: (balance_a, balance_b)
    """

    balances: tuple[int, int]

    def out_given_in(self, index_in: int, index_out: int, amount_in: int) -> int:
        balance_in, balance_out = _pair(self.balances, index_in, index_out, "constant_product")
        return constant_product.out_given_in(balance_in, balance_out, amount_in)

    def in_given_out(self, index_in: int, index_out: int, amount_out: int) -> int:
        balance_in, balance_out = _pair(self.balances, index_in, index_out, "constant_product")
        return constant_product.in_given_out(balance_in, balance_out, amount_out)

    def spot_price(self, index_in: int, index_out: int, amount: int) -> int:
        balance_in, balance_out = _pair(self.balances, index_in, index_out, "constant_product")
        return constant_product.spot_price(balance_in, balance_out, amount)


@dataclass(frozen=True)
class WeightedPool:
    """Multi-asset pool with relative weights.

    Attributes:
        balances: Token balances
        weights: Positive weights, same length as balances (only ratios matter)
    """

    balances: tuple[int, ...]
    weights: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.balances) != len(self.weights):
            raise ValueError("balances and weights must have the same length")

    def out_given_in(self, index_in: int, index_out: int, amount_in: int) -> int:
        balance_in, balance_out = _pair(self.balances, index_in, index_out, "weighted")
        return weighted.out_given_in(
            balance_in, balance_out, amount_in, self.weights[index_in], self.weights[index_out]
        )

    def in_given_out(self, index_in: int, index_out: int, amount_out: int) -> int:
        balance_in, balance_out = _pair(self.balances, index_in, index_out, "weighted")
        return weighted.in_given_out(
            balance_in, balance_out, amount_out, self.weights[index_in], self.weights[index_out]
        )

    def spot_price(self, index_in: int, index_out: int, amount: int) -> int:
        balance_in, balance_out = _pair(self.balances, index_in, index_out, "weighted")
        return weighted.spot_price(
            balance_in, balance_out, self.weights[index_in], self.weights[index_out], amount
        )


@dataclass(frozen=True)
class LiquidityBootstrappingPool:
    """Weighted pool whose weights move linearly between two points.

    Attributes:
        balances: Token balances
        initial_weights: Weights at `start`
        final_weights: Weights at `end`
        start: First point of the schedule (e.g. block number)
        end: Last point of the schedule
    """

    balances: tuple[int, ...]
    initial_weights: tuple[int, ...]
    final_weights: tuple[int, ...]
    start: int
    end: int

    def weights_at(self, point: int) -> tuple[int, ...]:
        """Weights of every asset at `point`."""
        return tuple(
            weighted.linear_weight(self.start, self.end, initial, final, point)
            for initial, final in zip(self.initial_weights, self.final_weights, strict=True)
        )

    def at(self, point: int) -> WeightedPool:
        """Freeze the schedule at `point` into a plain weighted pool."""
        return WeightedPool(balances=self.balances, weights=self.weights_at(point))


@dataclass(frozen=True)
class StablePool:
    """Multi-asset stable pool.

    Attributes:
        balances: Token balances (all positive)
        amplification: Amplification coefficient A (unscaled)
        fee: Swap fee, taken from the output of exact-in swaps and added to
            the input of exact-out swaps
        config: Solver iteration cap and tolerance
    """

    balances: tuple[int, ...]
    amplification: int
    fee: Fee = NO_FEE
    config: PrecisionConfig = field(default=DEFAULT_PRECISION_CONFIG)

    def invariant(self) -> int:
        return stable.calculate_invariant(self.amplification, self.balances, config=self.config)

    def out_given_in(self, index_in: int, index_out: int, amount_in: int) -> tuple[int, int]:
        """Exact-input swap; returns (net_amount_out, fee_amount)."""
        _pair(self.balances, index_in, index_out, "stable")
        return stable.out_given_in_with_fee(
            self.amplification, self.balances, index_in, index_out, amount_in, self.fee, config=self.config
        )

    def in_given_out(self, index_in: int, index_out: int, amount_out: int) -> tuple[int, int]:
        """Exact-output swap; returns (gross_amount_in, fee_amount)."""
        _pair(self.balances, index_in, index_out, "stable")
        return stable.in_given_out_with_fee(
            self.amplification, self.balances, index_in, index_out, amount_out, self.fee, config=self.config
        )
