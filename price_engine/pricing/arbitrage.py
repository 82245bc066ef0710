"""Cross-model arbitrage detection.

Compares the price of the same token pair on a weighted pool and a stable
pool, nets out both pools' swap fees and reports which side to buy on.
Detection only: sizing and executing the trade are out of scope.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import structlog

from price_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from price_engine.constants import FEE_SCALE
from price_engine.errors import InvalidAmount
from price_engine.pools.models import StablePoolState, WeightedPoolState

from .spot_price import estimate_stable_spot_price, weighted_spot_price

logger = structlog.get_logger()


class ArbitrageDirection(str, Enum):
    """Which pool is the buy leg."""

    # Buy on the weighted pool (cheaper), sell on the stable pool
    WEIGHTED_TO_STABLE = "weighted_to_stable"
    # Buy on the stable pool (cheaper), sell on the weighted pool
    STABLE_TO_WEIGHTED = "stable_to_weighted"

    @property
    def buy_pool(self) -> str:
        return "weighted" if self is ArbitrageDirection.WEIGHTED_TO_STABLE else "stable"

    @property
    def sell_pool(self) -> str:
        return "stable" if self is ArbitrageDirection.WEIGHTED_TO_STABLE else "weighted"


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """A fee-adjusted price discrepancy between the two pools.

    Attributes:
        price_a: Weighted pool price
        price_b: Stable pool price
        price_diff_percent: |price_a - price_b| / min(price_a, price_b) * 100
        total_fees_percent: Sum of both pools' swap fees, in percent
        net_profit_percent: price_diff_percent - total_fees_percent
        direction: Buy on the cheaper pool, sell on the dearer one
        profitable: Always True for a reported opportunity
    """

    price_a: float
    price_b: float
    price_diff_percent: float
    total_fees_percent: float
    net_profit_percent: float
    direction: ArbitrageDirection
    profitable: bool = True


def fee_to_percent(fee: int) -> float:
    """Convert a fee expressed as a fraction of FEE_SCALE to percent.

    Raises:
        InvalidAmount: If fee is not in [0, FEE_SCALE)
    """
    if fee < 0 or fee >= FEE_SCALE:
        raise InvalidAmount(f"Swap fee must be in range [0, {FEE_SCALE}), got {fee}")
    return fee / FEE_SCALE * 100


def _check_price(name: str, price: float) -> None:
    if not math.isfinite(price) or price <= 0:
        raise InvalidAmount(f"{name} must be a finite positive number, got {price}")


def detect_arbitrage(
    weighted_price: float,
    weighted_fee: int,
    stable_price: float,
    stable_fee: int,
    min_profit_percent: float = DEFAULT_ENGINE_CONFIG.min_profit_percent,
) -> ArbitrageOpportunity | None:
    """Decide whether two pool prices leave a profit after fees.

    Args:
        weighted_price: Spot price on the weighted pool
        weighted_fee: Weighted pool swap fee as a fraction of FEE_SCALE
        stable_price: Spot price on the stable pool
        stable_fee: Stable pool swap fee as a fraction of FEE_SCALE
        min_profit_percent: Minimum net profit, in percent

    Returns:
        The opportunity, or None when net profit is below min_profit_percent

    Raises:
        InvalidAmount: If a price is not finite and positive or a fee is out of range
    """
    _check_price("weighted_price", weighted_price)
    _check_price("stable_price", stable_price)

    price_diff_percent = (
        abs(weighted_price - stable_price) / min(weighted_price, stable_price) * 100
    )
    total_fees_percent = fee_to_percent(weighted_fee) + fee_to_percent(stable_fee)
    net_profit_percent = price_diff_percent - total_fees_percent

    logger.debug(
        "arbitrage_evaluated",
        weighted_price=weighted_price,
        stable_price=stable_price,
        price_diff_percent=price_diff_percent,
        total_fees_percent=total_fees_percent,
        net_profit_percent=net_profit_percent,
    )

    if net_profit_percent < min_profit_percent:
        return None

    direction = (
        ArbitrageDirection.STABLE_TO_WEIGHTED
        if weighted_price > stable_price
        else ArbitrageDirection.WEIGHTED_TO_STABLE
    )
    return ArbitrageOpportunity(
        price_a=weighted_price,
        price_b=stable_price,
        price_diff_percent=price_diff_percent,
        total_fees_percent=total_fees_percent,
        net_profit_percent=net_profit_percent,
        direction=direction,
        profitable=True,
    )


def detect_pool_arbitrage(
    weighted_pool: WeightedPoolState,
    stable_pool: StablePoolState,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ArbitrageOpportunity | None:
    """Compare token 0 priced in token 1 on a weighted and a stable pool.

    Both pools must hold exactly the same two tokens in the same order. Solver errors
    propagate, so a failed price never turns into an opportunity.

    Raises:
        InvalidAmount: If the pools do not hold the same two tokens in order
        DivideByZero / Overflow / ConvergenceFailure: From the price estimators
    """
    for name, pool in (("weighted", weighted_pool), ("stable", stable_pool)):
        n_tokens = len(pool.tokens)
        if n_tokens != 2:
            raise InvalidAmount(f"Arbitrage needs a two-token {name} pool, got {n_tokens}")

    weighted_mints = [t.mint for t in weighted_pool.tokens]
    stable_mints = [t.mint for t in stable_pool.tokens]
    if weighted_mints != stable_mints:
        raise InvalidAmount(
            f"Pools must quote the same pair in the same order: {weighted_mints} vs {stable_mints}"
        )

    token_a, token_b = weighted_pool.tokens[0], weighted_pool.tokens[1]
    weighted = weighted_spot_price(token_a.balance, token_a.weight, token_b.balance, token_b.weight)

    stable = estimate_stable_spot_price(
        stable_pool.tokens[0].balance,
        stable_pool.tokens[1].balance,
        stable_pool.amp,
        reference_amount=config.reference_amount,
    )
    if stable.is_fallback and not config.allow_fallback_prices:
        logger.warning(
            "arbitrage_skipped_fallback_price",
            pair=weighted_mints,
            reason=stable.reason,
        )
        return None

    return detect_arbitrage(
        weighted.price,
        weighted_pool.swap_fee,
        stable.price,
        stable_pool.swap_fee,
        config.min_profit_percent,
    )
