"""StableSwap pool math.

Core math functions for stable (Curve-style) pools. Both solvers use
Newton-Raphson iteration over integers; every intermediate goes through
SafeInt so oversized products raise Overflow instead of silently wrapping.

The amplification parameter is always passed already multiplied by
AMP_PRECISION, and balances are 9-decimal Fixed values.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from price_engine.constants import (
    AMP_PRECISION,
    BALANCE_CONVERGENCE_THRESHOLD,
    BALANCE_MAX_ITERATIONS,
    INVARIANT_CONVERGENCE_THRESHOLD,
    INVARIANT_MAX_ITERATIONS,
)
from price_engine.errors import ConvergenceFailure, InvalidAmount
from price_engine.math.fixed_point import Fixed
from price_engine.safe_int import S

logger = structlog.get_logger()


def calculate_invariant(
    amp: int,
    balances: Sequence[Fixed],
    *,
    max_iterations: int = INVARIANT_MAX_ITERATIONS,
) -> Fixed:
    """Calculate the StableSwap invariant D using Newton-Raphson iteration.

    Uses the A*n parameterization: the n^n factor is folded into the
    iterative D_P term, which is built one balance at a time so it never
    grows much beyond D itself.

    Algorithm:
        1. Initial guess: D = sum(balances)
        2. D_P = D, then D_P = D_P * D / (n * x_i) for each balance
        3. D = (Ann*S + n*D_P*AMP_PRECISION) * D
               / ((Ann - AMP_PRECISION) * D + (n+1)*D_P*AMP_PRECISION)
        4. Stop once |D_new - D| <= 100

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        balances: Token balances as 9-decimal Fixed values (at least two)
        max_iterations: Newton-Raphson round cap

    Returns:
        The invariant D. Zero for a pool whose balances sum to zero.

    Raises:
        InvalidAmount: If fewer than two balances are given
        DivideByZero: If any balance is zero while the sum is positive
        ConvergenceFailure: If the cap is reached before convergence
    """
    n_coins = len(balances)
    if n_coins < 2:
        raise InvalidAmount(f"Stable pool needs at least 2 balances, got {n_coins}")

    sum_balances = S(sum(b.value for b in balances))
    if sum_balances == 0:
        return Fixed(0)

    n = S(n_coins)
    amp_times_n = S(amp) * n
    d = sum_balances

    for iteration in range(max_iterations):
        d_p = d
        for bal in balances:
            d_p = (d_p * d) // (n * bal.value)

        numerator = (amp_times_n * sum_balances + n * d_p * AMP_PRECISION) * d
        denominator = (amp_times_n - AMP_PRECISION) * d + S(n_coins + 1) * d_p * AMP_PRECISION
        d_new = numerator // denominator

        if d_new.abs_diff(d) <= INVARIANT_CONVERGENCE_THRESHOLD:
            logger.debug("stable_invariant_converged", iterations=iteration + 1, n_coins=n_coins)
            return Fixed(d_new.value)
        d = d_new

    raise ConvergenceFailure(f"Stable invariant did not converge after {max_iterations} iterations")


def get_token_balance_given_invariant_and_all_other_balances(
    amp: int,
    balances: Sequence[Fixed],
    invariant: Fixed,
    token_index: int,
    *,
    max_iterations: int = BALANCE_MAX_ITERATIONS,
) -> Fixed:
    """Solve for balances[token_index] given D and all other balances.

    Newton-Raphson on y = (y^2 + c) / (2y + b - D) where:
        P_D = x_0 * n, then P_D = P_D * x_i * n / D for i >= 1
        c = D^2 * AMP_PRECISION / (Ann * P_D) * x_j
        b = D * AMP_PRECISION / Ann + sum(x_i for i != j)

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        balances: Token balances; the value at token_index enters c
        invariant: The invariant D to preserve
        token_index: Index of the balance to solve for
        max_iterations: Newton-Raphson round cap

    Returns:
        The balance at token_index that keeps D constant

    Raises:
        IndexError: If token_index is out of range
        DivideByZero: If D, Ann or P_D is zero
        ConvergenceFailure: If 2y + b - D stops being positive or the cap is hit
    """
    n_coins = len(balances)
    if token_index < 0 or token_index >= n_coins:
        raise IndexError(f"token_index {token_index} out of range for {n_coins} tokens")

    n = S(n_coins)
    d = S(invariant.value)
    amp_times_n = S(amp) * n

    sum_balances = S(balances[0].value)
    p_d = S(balances[0].value) * n
    for bal in balances[1:]:
        p_d = (p_d * (S(bal.value) * n)) // d
        sum_balances = sum_balances + bal.value

    target = S(balances[token_index].value)
    sum_others = sum_balances - target

    inv2 = d * d
    c = ((inv2 * AMP_PRECISION) // (amp_times_n * p_d)) * target
    b = (d * AMP_PRECISION) // amp_times_n + sum_others

    token_balance = (inv2 + c) // (d + b)

    for iteration in range(max_iterations):
        prev_token_balance = token_balance

        denominator = S(2) * token_balance + b
        if denominator <= d:
            raise ConvergenceFailure("Stable balance denominator became non-positive")

        token_balance = (token_balance * token_balance + c) // (denominator - d)

        if token_balance.abs_diff(prev_token_balance) <= BALANCE_CONVERGENCE_THRESHOLD:
            logger.debug(
                "stable_balance_converged", iterations=iteration + 1, token_index=token_index
            )
            return Fixed(token_balance.value)

    raise ConvergenceFailure(f"Stable balance did not converge after {max_iterations} iterations")


def stable_calc_out_given_in(
    amp: int,
    balances: Sequence[Fixed],
    token_index_in: int,
    token_index_out: int,
    amount_in: Fixed,
) -> Fixed:
    """Calculate output amount for a given input in a stable pool.

    Fees are not applied here.

    Algorithm:
        1. Calculate the current invariant D
        2. Add amount_in to balances[token_index_in] (on a copy)
        3. Solve for the new balances[token_index_out] given D
        4. Return old_balance_out - new_balance_out - 1, floored at zero.
           The extra unit always rounds the user's output down.

    Args:
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        balances: Token balances as 9-decimal Fixed values
        token_index_in: Index of input token
        token_index_out: Index of output token
        amount_in: Input amount

    Returns:
        Output amount; zero when the swap yields nothing

    Raises:
        IndexError: If token indices are out of range
        InvalidAmount: If token_index_in == token_index_out
        DivideByZero / Overflow / ConvergenceFailure: From the solvers
    """
    n_coins = len(balances)
    if token_index_in < 0 or token_index_in >= n_coins:
        raise IndexError(f"token_index_in {token_index_in} out of range for {n_coins} tokens")
    if token_index_out < 0 or token_index_out >= n_coins:
        raise IndexError(f"token_index_out {token_index_out} out of range for {n_coins} tokens")
    if token_index_in == token_index_out:
        raise InvalidAmount("Cannot swap token with itself")

    if amount_in.value == 0:
        return Fixed(0)

    invariant = calculate_invariant(amp, balances)

    new_balances = list(balances)
    new_balances[token_index_in] = balances[token_index_in].add(amount_in)

    new_balance_out = get_token_balance_given_invariant_and_all_other_balances(
        amp, new_balances, invariant, token_index_out
    )

    old_balance_out = balances[token_index_out].value
    if new_balance_out.value >= old_balance_out:
        return Fixed(0)

    return Fixed(max(0, old_balance_out - new_balance_out.value - 1))
