"""Swap quotes.

quote_stable_swap is the pure core quoter over a balance vector. The
pool-level helpers add what a settlement layer needs around it: token
scaling, swap fees and a minimum-output check. Applying a quote to pool
state or moving tokens is left to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from price_engine.errors import InvalidAmount, SlippageExceeded
from price_engine.math.fixed_point import Fixed

from .models import StablePoolState, WeightedPoolState
from .scaling import apply_fee_to_amount_out, subtract_swap_fee_amount
from .stable_math import stable_calc_out_given_in
from .weighted_math import calc_out_given_in

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """Result of a swap quote.

    Attributes:
        amount_in: Input amount
        token_index_in: Index of the input token in the pool
        token_index_out: Index of the output token in the pool
        amount_out: Output amount, rounded in the pool's favour
        fee_amount: Fee withheld, in the token the fee was charged in
            (always 0 for quote_stable_swap)
    """

    amount_in: int
    token_index_in: int
    token_index_out: int
    amount_out: int
    fee_amount: int = 0

    @property
    def is_empty(self) -> bool:
        """True when the swap yields no output."""
        return self.amount_out == 0


def quote_stable_swap(
    amp: int,
    balances: Sequence[Fixed],
    token_index_in: int,
    token_index_out: int,
    amount_in: int,
) -> SwapQuote:
    """Quote a stable swap in pool units, without fees.

    A zero amount_in yields a zero quote without running the solvers.

    Raises:
        InvalidAmount: If amount_in is negative or the indices are equal
        IndexError: If an index is out of range
        DivideByZero / Overflow / ConvergenceFailure: From the solvers
    """
    if amount_in < 0:
        raise InvalidAmount(f"amount_in must be non-negative, got {amount_in}")

    if amount_in == 0:
        logger.debug("stable_quote_zero_input", token_index_in=token_index_in)

    amount_out = stable_calc_out_given_in(
        amp, balances, token_index_in, token_index_out, Fixed(amount_in)
    )
    return SwapQuote(
        amount_in=amount_in,
        token_index_in=token_index_in,
        token_index_out=token_index_out,
        amount_out=amount_out.value,
    )


def _check_raw_amount(amount_in: int) -> None:
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive, got {amount_in}")


def _check_slippage(amount_out: int, min_amount_out: int) -> None:
    if amount_out < min_amount_out:
        raise SlippageExceeded(f"Quoted output {amount_out} is below minimum {min_amount_out}")


def quote_stable_pool_swap(
    pool: StablePoolState,
    mint_in: str,
    mint_out: str,
    amount_in: int,
    min_amount_out: int = 0,
) -> SwapQuote:
    """Quote a swap through a stable pool in raw token units.

    The fee is taken from the output: out * (1 - fee), rounded down.

    Args:
        pool: Stable pool state
        mint_in: Input token
        mint_out: Output token
        amount_in: Raw input amount (token decimals)
        min_amount_out: Raw minimum acceptable output

    Returns:
        Quote with raw amounts; fee_amount is in the output token

    Raises:
        InvalidAmount: If amount_in is not positive or a mint is unknown
        SlippageExceeded: If the output after fees is below min_amount_out
        DivideByZero / Overflow / ConvergenceFailure: From the solvers
    """
    _check_raw_amount(amount_in)
    index_in = pool.token_index(mint_in)
    index_out = pool.token_index(mint_out)
    token_in = pool.tokens[index_in]
    token_out = pool.tokens[index_out]

    scaled_in = token_in.scale_amount_up(amount_in)
    scaled_out = stable_calc_out_given_in(pool.amp, pool.balances, index_in, index_out, scaled_in)
    scaled_out_after_fee = apply_fee_to_amount_out(scaled_out, pool.swap_fee)

    amount_out = token_out.scale_amount_down(scaled_out_after_fee)
    fee_amount = token_out.scale_amount_down(scaled_out.saturating_sub(scaled_out_after_fee))

    logger.debug(
        "stable_pool_quote",
        mint_in=mint_in,
        mint_out=mint_out,
        amount_in=amount_in,
        amount_out=amount_out,
        fee_amount=fee_amount,
    )
    _check_slippage(amount_out, min_amount_out)

    return SwapQuote(
        amount_in=amount_in,
        token_index_in=index_in,
        token_index_out=index_out,
        amount_out=amount_out,
        fee_amount=fee_amount,
    )


def quote_weighted_pool_swap(
    pool: WeightedPoolState,
    mint_in: str,
    mint_out: str,
    amount_in: int,
    min_amount_out: int = 0,
) -> SwapQuote:
    """Quote a swap through a weighted pool in raw token units.

    The fee is deducted from the input before the weighted formula runs.

    Returns:
        Quote with raw amounts; fee_amount is in the input token

    Raises:
        InvalidAmount: If amount_in is not positive, a mint is unknown or
            mint_in == mint_out
        SlippageExceeded: If the output is below min_amount_out
        Overflow: If the power falls outside the log/exp range
    """
    _check_raw_amount(amount_in)
    index_in = pool.token_index(mint_in)
    index_out = pool.token_index(mint_out)
    if index_in == index_out:
        raise InvalidAmount("Cannot swap token with itself")
    token_in = pool.tokens[index_in]
    token_out = pool.tokens[index_out]

    scaled_in = token_in.scale_amount_up(amount_in)
    scaled_in_after_fee = subtract_swap_fee_amount(scaled_in, pool.swap_fee)
    scaled_out = calc_out_given_in(
        Fixed(token_in.balance),
        Fixed(token_in.weight),
        Fixed(token_out.balance),
        Fixed(token_out.weight),
        scaled_in_after_fee,
    )

    amount_out = token_out.scale_amount_down(scaled_out)
    fee_amount = token_in.scale_amount_down(scaled_in.sub(scaled_in_after_fee))

    logger.debug(
        "weighted_pool_quote",
        mint_in=mint_in,
        mint_out=mint_out,
        amount_in=amount_in,
        amount_out=amount_out,
        fee_amount=fee_amount,
    )
    _check_slippage(amount_out, min_amount_out)

    return SwapQuote(
        amount_in=amount_in,
        token_index_in=index_in,
        token_index_out=index_out,
        amount_out=amount_out,
        fee_amount=fee_amount,
    )
