"""Tests for CalculationResult and calculate()."""

import pytest
from structlog.testing import capture_logs

from poolmath.amm import constant_product, stable
from poolmath.amm.pools import ConstantProductPool
from poolmath.config import PrecisionConfig
from poolmath.errors import ErrorKind
from poolmath.result import CalculationResult, calculate


class TestCalculationResult:
    def test_ok(self):
        result = CalculationResult.ok(42)
        assert result.is_valid
        assert not result.is_error
        assert result.unwrap() == 42

    def test_failure(self):
        result: CalculationResult[int] = CalculationResult.failure(ErrorKind.OVERFLOW, "too big")
        assert result.is_error
        assert result.value is None
        assert result.error_detail == "too big"

    def test_unwrap_failure_raises(self):
        result: CalculationResult[int] = CalculationResult.failure(ErrorKind.UNDERFLOW)
        with pytest.raises(ValueError, match="underflow"):
            result.unwrap()


class TestCalculate:
    """Tests for capturing MathError as a value."""

    def test_success(self):
        result = calculate(constant_product.out_given_in, 1_000_000, 1_000_000, 1_000)
        assert result == CalculationResult.ok(999)

    @pytest.mark.parametrize(
        "fn,args,kind",
        [
            (constant_product.in_given_out, (100, 100, 100), ErrorKind.INSUFFICIENT_LIQUIDITY),
            (constant_product.out_given_in, (2**128 - 1, 10, 1), ErrorKind.OVERFLOW),
            (constant_product.liquidity_out, (10, 10, 1, 0), ErrorKind.DIVISION_BY_ZERO),
            (stable.calculate_invariant, (0, [1, 1]), ErrorKind.OUT_OF_DOMAIN),
        ],
    )
    def test_failure_kinds(self, fn, args, kind):
        result = calculate(fn, *args)
        assert result.error is kind
        assert result.error_detail

    def test_keyword_arguments(self):
        result = calculate(
            stable.calculate_invariant,
            1,
            [10**18, 1_000 * 10**18],
            config=PrecisionConfig(max_iterations=1),
        )
        assert result.error is ErrorKind.CONVERGENCE_FAILURE

    def test_failure_is_logged(self):
        with capture_logs() as logs:
            calculate(constant_product.in_given_out, 100, 100, 100)
        assert logs[-1]["event"] == "calculation_failed"
        assert logs[-1]["kind"] == "insufficient_liquidity"

    def test_contract_violations_propagate(self):
        """Index misuse is a programming error, not a calculation failure."""
        pool = ConstantProductPool(balances=(100, 100))
        with pytest.raises(IndexError):
            calculate(pool.out_given_in, 0, 5, 1)
