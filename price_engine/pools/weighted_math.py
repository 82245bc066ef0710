"""Weighted product pool math.

Weights are 9-decimal fractions that sum to ONE across the pool.
"""

from __future__ import annotations

from collections.abc import Sequence

from price_engine.errors import DivideByZero, InvalidAmount
from price_engine.math.fixed_point import ONE, Fixed


def calc_weighted_spot_price(
    balance_in: int,
    weight_in: int,
    balance_out: int,
    weight_out: int,
) -> float:
    """Spot price of the input token in units of the output token.

    Formula:
        price = (weight_in / weight_out) * (balance_out / balance_in)

    This is the floating-point variant used for reporting and arbitrage
    screening. Use calc_weighted_spot_price_fixed where the result must be
    reproducible bit-for-bit.

    Raises:
        DivideByZero: If balance_in or weight_out is zero
    """
    if balance_in == 0:
        raise DivideByZero("balance_in must be non-zero for a spot price")
    if weight_out == 0:
        raise DivideByZero("weight_out must be non-zero for a spot price")
    return (weight_in / weight_out) * (balance_out / balance_in)


def calc_weighted_spot_price_fixed(
    balance_in: Fixed,
    weight_in: Fixed,
    balance_out: Fixed,
    weight_out: Fixed,
) -> Fixed:
    """Fixed-point spot price, rounded down at every step.

    Raises:
        DivideByZero: If balance_in or weight_out is zero
    """
    weight_ratio = weight_in.div_down(weight_out)
    balance_ratio = balance_out.div_down(balance_in)
    return weight_ratio.mul_down(balance_ratio)


def calc_out_given_in(
    balance_in: Fixed,
    weight_in: Fixed,
    balance_out: Fixed,
    weight_out: Fixed,
    amount_in: Fixed,
) -> Fixed:
    """Calculate output amount for a given input (fee already deducted).

    Formula:
        amount_out = balance_out * (1 - (balance_in / (balance_in + amount_in))^(weight_in / weight_out))

    Rounding favours the pool, so the user receives less:
        - base < 1, rounded up (larger base, larger power)
        - exponent rounded down (smaller exponent, larger power for base < 1)
        - power rounded up
        - final product rounded down

    Raises:
        DivideByZero: If weight_out is zero, or balance_in and amount_in are both zero
        Overflow: If the power falls outside the log/exp range
    """
    base = balance_in.div_up(balance_in.add(amount_in))
    exponent = weight_in.div_down(weight_out)
    power = base.pow_up(exponent)
    return balance_out.mul_down(power.complement())


def calculate_weighted_invariant(balances: Sequence[Fixed], weights: Sequence[Fixed]) -> Fixed:
    """Weighted invariant: product of balance_i ^ weight_i, rounded down.

    Raises:
        InvalidAmount: If the sequences are empty or of different length, or
            the invariant rounds to zero
    """
    if len(balances) != len(weights) or not balances:
        raise InvalidAmount(
            f"balances ({len(balances)}) and weights ({len(weights)}) must be non-empty "
            "and of equal length"
        )

    invariant = ONE
    for balance, weight in zip(balances, weights):
        invariant = invariant.mul_down(balance.pow_down(weight))

    if invariant.value == 0:
        raise InvalidAmount("Weighted invariant is zero")
    return invariant
