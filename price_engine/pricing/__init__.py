"""Spot prices and cross-model arbitrage detection.

Usage:
    from price_engine.pricing import detect_pool_arbitrage

    opportunity = detect_pool_arbitrage(weighted_pool, stable_pool)
    if opportunity is not None:
        print(opportunity.direction, opportunity.net_profit_percent)
"""

from price_engine.pricing.arbitrage import (
    ArbitrageDirection,
    ArbitrageOpportunity,
    detect_arbitrage,
    detect_pool_arbitrage,
    fee_to_percent,
)
from price_engine.pricing.spot_price import (
    SpotPrice,
    SpotPriceSource,
    calc_stable_spot_price,
    estimate_stable_spot_price,
    weighted_spot_price,
)

__all__ = [
    # Spot prices
    "SpotPrice",
    "SpotPriceSource",
    "weighted_spot_price",
    "estimate_stable_spot_price",
    "calc_stable_spot_price",
    # Arbitrage
    "ArbitrageDirection",
    "ArbitrageOpportunity",
    "detect_arbitrage",
    "detect_pool_arbitrage",
    "fee_to_percent",
]
