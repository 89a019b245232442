"""Stable pool math (StableSwap / Curve-style invariant).

Uses the Balancer parameterization, where the Newton-Raphson step uses
A * n (not A * n^n) and amplification is scaled by AMP_PRECISION.

Both solvers are deterministic:
- invariant D: initial guess sum(balances)
- token balance y: initial guess ceil((D^2 + c) / (D + b))
- stop once successive estimates differ by at most config.tolerance units
- give up after config.max_iterations steps with a ConvergenceFailure

All intermediate arithmetic goes through SafeInt (256-bit, checked).
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from poolmath.config import DEFAULT_PRECISION_CONFIG, PrecisionConfig
from poolmath.constants import AMP_PRECISION
from poolmath.errors import (
    BalanceDidNotConverge,
    DivisionByZero,
    InsufficientLiquidity,
    InvariantDidNotConverge,
    OutOfDomain,
)
from poolmath.fees import Fee
from poolmath.math.rounding import Rounding, checked_add, checked_mul_div, checked_sub, native
from poolmath.safe_int import S, SafeInt

logger = structlog.get_logger()


def _scaled_amp(amplification: int) -> SafeInt:
    if amplification <= 0:
        raise OutOfDomain(f"Amplification must be positive, got {amplification}")
    return native(amplification, "amplification") * S(AMP_PRECISION)


def _widen_balances(balances: Sequence[int]) -> list[SafeInt]:
    widened = []
    for i, balance in enumerate(balances):
        if balance == 0:
            raise InsufficientLiquidity(f"Balance at index {i} must be positive")
        widened.append(native(balance, f"balances[{i}]"))
    return widened


def _check_pool_size(n_coins: int) -> None:
    if n_coins < 2:
        raise OutOfDomain(f"Stable pools need at least 2 tokens, got {n_coins}")


def _check_index(name: str, index: int, n_coins: int) -> None:
    if index < 0 or index >= n_coins:
        raise IndexError(f"{name} {index} out of range for {n_coins} tokens")


def _check_pair(index_in: int, index_out: int, n_coins: int) -> None:
    _check_index("index_in", index_in, n_coins)
    _check_index("index_out", index_out, n_coins)
    if index_in == index_out:
        raise ValueError("Cannot swap token with itself")


def calculate_invariant(
    amplification: int,
    balances: Sequence[int],
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> int:
    """Calculate the StableSwap invariant D using Newton-Raphson iteration.

    Algorithm:
        1. Initial guess: D = sum(balances)
        2. Iterate until |D_new - D_old| <= config.tolerance
        3. Stop after config.max_iterations steps

    Args:
        amplification: Amplification coefficient A (unscaled, positive)
        balances: Token balances (all positive)
        config: Iteration cap and tolerance

    Returns:
        The invariant D

    Raises:
        InsufficientLiquidity: If any balance is zero
        OutOfDomain: If there is exactly one balance
        InvariantDidNotConverge: If iteration doesn't converge
        Overflow: If an intermediate exceeds the 256-bit accumulator
    """
    n_coins = len(balances)
    if n_coins == 0:
        return 0
    _check_pool_size(n_coins)

    amp = _scaled_amp(amplification)
    widened = _widen_balances(balances)
    n = S(n_coins)

    sum_balances = S(0)
    for balance in widened:
        sum_balances = sum_balances + balance

    d_prev = sum_balances
    amp_times_n = amp * n

    for _ in range(config.max_iterations):
        # d_p = D^(n+1) / (n^n * prod(balances)), one balance at a time
        d_p = d_prev
        for balance in widened:
            d_p = (d_p * d_prev) // (n * balance)

        # numerator = (A*n * sum / AMP_PRECISION + d_p * n) * D
        term1 = (amp_times_n * sum_balances) // AMP_PRECISION
        numerator = (term1 + d_p * n) * d_prev

        # denominator = (A*n - AMP_PRECISION) * D / AMP_PRECISION + (n + 1) * d_p
        term2 = ((amp_times_n - AMP_PRECISION) * d_prev) // AMP_PRECISION
        denominator = term2 + S(n_coins + 1) * d_p

        d_new = numerator // denominator

        if d_new.abs_diff(d_prev) <= config.tolerance:
            return d_new.to_native()

        d_prev = d_new

    logger.debug(
        "stable_invariant_did_not_converge",
        amplification=amplification,
        n_coins=n_coins,
        iterations=config.max_iterations,
    )
    raise InvariantDidNotConverge(
        f"Stable invariant did not converge after {config.max_iterations} iterations"
    )


def balance_given_invariant(
    amplification: int,
    balances: Sequence[int],
    invariant: int,
    token_index: int,
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> int:
    """Solve for balances[token_index] given D and all other balances.

    Uses Newton-Raphson iteration on y^2 + (b - D) * y = c, rounding every
    step up.

    Args:
        amplification: Amplification coefficient A (unscaled, positive)
        balances: Token balances; the value at token_index only enters the
            intermediate products, where it cancels
        invariant: The invariant D to preserve
        token_index: Index of the balance to solve for
        config: Iteration cap and tolerance

    Returns:
        The balance of token_index that keeps D invariant

    Raises:
        BalanceDidNotConverge: If iteration doesn't converge
        DivisionByZero: If invariant is zero
        IndexError: If token_index is out of range
        OutOfDomain: If there are fewer than 2 balances
    """
    n_coins = len(balances)
    _check_pool_size(n_coins)
    _check_index("token_index", token_index, n_coins)
    if invariant == 0:
        raise DivisionByZero("Invariant is zero")

    amp = _scaled_amp(amplification)
    widened = _widen_balances(balances)
    d = native(invariant, "invariant")
    n = S(n_coins)
    amp_times_total = amp * n

    # P_D = balances[0] * n, then P_D = P_D * balances[j] * n / D
    sum_balances = widened[0]
    p_d = widened[0] * n
    for j in range(1, n_coins):
        p_d = (p_d * widened[j] * n) // d
        sum_balances = sum_balances + widened[j]

    sum_others = sum_balances - widened[token_index]

    inv2 = d * d

    # c = inv2 / (ampTimesTotal * P_D) * AMP_PRECISION * balances[tokenIndex]
    c = inv2.ceiling_div(amp_times_total * p_d) * AMP_PRECISION * widened[token_index]

    # b = sum_others + invariant / ampTimesTotal * AMP_PRECISION
    b = sum_others + (d // amp_times_total) * AMP_PRECISION

    token_balance = (inv2 + c).ceiling_div(d + b)

    for _ in range(config.max_iterations):
        prev_token_balance = token_balance

        # y = (y^2 + c) / (2y + b - D)
        positive_part = S(2) * token_balance + b
        if positive_part <= d:
            logger.debug(
                "stable_balance_denominator_non_positive",
                token_index=token_index,
                token_balance=token_balance.value,
            )
            raise BalanceDidNotConverge("Denominator became non-positive")

        token_balance = (token_balance * token_balance + c).ceiling_div(positive_part - d)

        if token_balance.abs_diff(prev_token_balance) <= config.tolerance:
            return token_balance.to_native()

    logger.debug(
        "stable_balance_did_not_converge",
        token_index=token_index,
        iterations=config.max_iterations,
    )
    raise BalanceDidNotConverge(
        f"Stable balance did not converge after {config.max_iterations} iterations"
    )


def out_given_in(
    amplification: int,
    balances: Sequence[int],
    index_in: int,
    index_out: int,
    amount_in: int,
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> int:
    """Calculate output amount for an exact input in a stable pool.

    Algorithm:
        1. Calculate current invariant D
        2. Add amount_in to balances[index_in]
        3. Solve for the new balances[index_out] given D
        4. Return: old_balance_out - new_balance_out - 1 (1 unit rounding guard)

    Returns:
        Output amount before fee, rounded down

    Raises:
        ConvergenceFailure: If a solver doesn't converge
        ValueError: If index_in == index_out
        IndexError: If an index is out of range
    """
    _check_pair(index_in, index_out, len(balances))
    if amount_in == 0:
        return 0

    invariant = calculate_invariant(amplification, balances, config=config)

    new_balances = list(balances)
    new_balances[index_in] = checked_add(balances[index_in], amount_in)

    new_balance_out = balance_given_invariant(
        amplification, new_balances, invariant, index_out, config=config
    )

    old_balance_out = balances[index_out]
    if new_balance_out + 1 >= old_balance_out:
        return 0
    return old_balance_out - new_balance_out - 1


def in_given_out(
    amplification: int,
    balances: Sequence[int],
    index_in: int,
    index_out: int,
    amount_out: int,
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> int:
    """Calculate input amount required for an exact output in a stable pool.

    Algorithm:
        1. Calculate current invariant D
        2. Subtract amount_out from balances[index_out]
        3. Solve for the new balances[index_in] given D
        4. Return: new_balance_in - old_balance_in + 1 (1 unit rounding guard)

    Returns:
        Input amount before fee, rounded up

    Raises:
        InsufficientLiquidity: If amount_out >= balances[index_out]
        ConvergenceFailure: If a solver doesn't converge
        ValueError: If index_in == index_out
        IndexError: If an index is out of range
    """
    _check_pair(index_in, index_out, len(balances))
    if amount_out >= balances[index_out]:
        raise InsufficientLiquidity(
            f"Requested {amount_out} but pool holds {balances[index_out]}"
        )
    if amount_out == 0:
        return 0

    invariant = calculate_invariant(amplification, balances, config=config)

    new_balances = list(balances)
    new_balances[index_out] = checked_sub(balances[index_out], amount_out)

    new_balance_in = balance_given_invariant(
        amplification, new_balances, invariant, index_in, config=config
    )

    return checked_add(checked_sub(new_balance_in, balances[index_in]), 1)


def out_given_in_with_fee(
    amplification: int,
    balances: Sequence[int],
    index_in: int,
    index_out: int,
    amount_in: int,
    fee: Fee,
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> tuple[int, int]:
    """Exact-input swap with the fee taken from the output.

    Returns:
        Tuple of (net_amount_out, fee_amount)
    """
    amount_out = out_given_in(amplification, balances, index_in, index_out, amount_in, config=config)
    return fee.apply(amount_out)


def in_given_out_with_fee(
    amplification: int,
    balances: Sequence[int],
    index_in: int,
    index_out: int,
    amount_out: int,
    fee: Fee,
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> tuple[int, int]:
    """Exact-output swap with the fee added on top of the required input.

    Returns:
        Tuple of (gross_amount_in, fee_amount)
    """
    amount_in = in_given_out(amplification, balances, index_in, index_out, amount_out, config=config)
    return fee.add_to(amount_in)


def shares_for_deposit(
    amplification: int,
    initial_balances: Sequence[int],
    updated_balances: Sequence[int],
    share_issuance: int,
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> int:
    """Shares issued for moving the pool from initial_balances to updated_balances.

    The first deposit (share_issuance == 0) issues D of the updated balances.
    Later deposits issue share_issuance * (D1 - D0) / D0, rounded down.

    Raises:
        Underflow: If the deposit lowers the invariant
        ValueError: If the balance vectors differ in length
    """
    if len(initial_balances) != len(updated_balances):
        raise ValueError("Balance vectors must have the same length")

    updated_invariant = calculate_invariant(amplification, updated_balances, config=config)
    if share_issuance == 0:
        return updated_invariant

    initial_invariant = calculate_invariant(amplification, initial_balances, config=config)
    growth = checked_sub(updated_invariant, initial_invariant)
    return checked_mul_div(share_issuance, growth, initial_invariant, Rounding.DOWN)


def withdraw_one_asset(
    amplification: int,
    balances: Sequence[int],
    shares: int,
    token_index: int,
    share_issuance: int,
    *,
    config: PrecisionConfig = DEFAULT_PRECISION_CONFIG,
) -> int:
    """Amount of a single asset returned for redeeming `shares`.

    The invariant is reduced by ceil(shares * D / share_issuance), then the
    asset's balance is re-solved; the difference is paid out with a 1 unit
    rounding guard.

    Raises:
        DivisionByZero: If share_issuance is zero
        InsufficientLiquidity: If shares >= share_issuance
        IndexError: If token_index is out of range
    """
    _check_index("token_index", token_index, len(balances))
    if share_issuance == 0:
        raise DivisionByZero("share_issuance is zero")
    if shares >= share_issuance:
        raise InsufficientLiquidity(
            f"Cannot redeem {shares} of {share_issuance} shares into a single asset"
        )
    if shares == 0:
        return 0

    invariant = calculate_invariant(amplification, balances, config=config)
    reduction = checked_mul_div(shares, invariant, share_issuance, Rounding.UP)
    new_invariant = checked_sub(invariant, reduction)

    new_balance = balance_given_invariant(
        amplification, balances, new_invariant, token_index, config=config
    )

    old_balance = balances[token_index]
    if new_balance + 1 >= old_balance:
        return 0
    return old_balance - new_balance - 1
