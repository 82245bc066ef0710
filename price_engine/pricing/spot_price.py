"""Spot price estimation for weighted and stable pools.

Weighted pools have a closed-form spot price. For stable pools the price is
estimated from a small reference swap, which stays well-behaved for very
imbalanced pools where a derivative-based estimate diverges.

If the reference swap fails or yields nothing, the estimate falls back to
the naive balance ratio. The fallback is a degraded price: it is tagged
with SpotPriceSource.FALLBACK and logged as a warning so it can never be
mistaken for a solved price.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from price_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from price_engine.constants import DEFAULT_AMP, REFERENCE_AMOUNT
from price_engine.errors import DivideByZero, InvalidAmount, MathError
from price_engine.math.fixed_point import Fixed
from price_engine.pools.quote import quote_stable_swap
from price_engine.pools.weighted_math import calc_weighted_spot_price

logger = structlog.get_logger()


class SpotPriceSource(str, Enum):
    """Where a spot price came from."""

    SOLVED = "solved"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SpotPrice:
    """Result of a spot price estimation.

    Attributes:
        price: Units of the output token per unit of the input token
        source: SOLVED for a closed-form or quoted price, FALLBACK for the
            naive balance ratio
        reason: Why the fallback was used (None for solved prices)
    """

    price: float
    source: SpotPriceSource
    reason: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source is SpotPriceSource.FALLBACK


def weighted_spot_price(
    balance_in: int,
    weight_in: int,
    balance_out: int,
    weight_out: int,
) -> SpotPrice:
    """Weighted pool spot price, wrapped as a SpotPrice.

    Raises:
        DivideByZero: If balance_in or weight_out is zero
    """
    price = calc_weighted_spot_price(balance_in, weight_in, balance_out, weight_out)
    return SpotPrice(price=price, source=SpotPriceSource.SOLVED)


def estimate_stable_spot_price(
    balance_in: int,
    balance_out: int,
    amp: int = DEFAULT_AMP,
    *,
    reference_amount: int = REFERENCE_AMOUNT,
) -> SpotPrice:
    """Estimate a two-token stable pool's spot price from a reference swap.

    Quotes reference_amount of the input token and returns
    amount_out / reference_amount.

    Args:
        balance_in: Scaled balance of the input token
        balance_out: Scaled balance of the output token
        amp: Amplification parameter (scaled by AMP_PRECISION=1000)
        reference_amount: Scaled size of the reference swap

    Returns:
        SpotPrice; source is FALLBACK when the naive ratio had to be used

    Raises:
        InvalidAmount: If reference_amount is not positive
        DivideByZero: If the fallback ratio is needed and balance_in is zero
    """
    if reference_amount <= 0:
        raise InvalidAmount(f"reference_amount must be positive, got {reference_amount}")

    balances = [Fixed(balance_in), Fixed(balance_out)]
    try:
        quote = quote_stable_swap(amp, balances, 0, 1, reference_amount)
    except MathError as err:
        reason = f"quote_failed: {type(err).__name__}"
    else:
        if quote.amount_out > 0:
            return SpotPrice(
                price=quote.amount_out / reference_amount,
                source=SpotPriceSource.SOLVED,
            )
        reason = "zero_output"

    if balance_in == 0:
        raise DivideByZero("Stable spot price fallback needs a non-zero balance_in")

    price = balance_out / balance_in
    logger.warning(
        "stable_spot_price_fallback",
        balance_in=balance_in,
        balance_out=balance_out,
        amp=amp,
        reason=reason,
        fallback_price=price,
    )
    return SpotPrice(price=price, source=SpotPriceSource.FALLBACK, reason=reason)


def calc_stable_spot_price(
    balance_in: int,
    balance_out: int,
    amp: int | None = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> float:
    """Stable pool spot price as a bare number (see estimate_stable_spot_price).

    amp defaults to config.default_amp, and the reference swap size comes
    from config.reference_amount.
    """
    if amp is None:
        amp = config.default_amp
    return estimate_stable_spot_price(
        balance_in, balance_out, amp, reference_amount=config.reference_amount
    ).price
