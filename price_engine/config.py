"""Configuration for price estimation and arbitrage screening."""

from __future__ import annotations

import os
from dataclasses import dataclass

from price_engine.constants import DEFAULT_AMP, REFERENCE_AMOUNT

_ENV_PREFIX = "PRICE_ENGINE_"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(_ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class EngineConfig:
    """Settings for the pricing layer.

    Attributes:
        min_profit_percent: Minimum net profit (after both pools' fees), in
            percent, for an arbitrage opportunity to be reported (default: 0.1)
        default_amp: A (scaled by AMP_PRECISION) used when a stable pool
            does not supply one (default: 100 * AMP_PRECISION)
        reference_amount: Input size of the reference swap used to estimate a
            stable pool's spot price (default: 1e9, one whole token)
        allow_fallback_prices: If False, a stable price that fell back to the
            naive balance ratio never produces an arbitrage opportunity.
    """

    min_profit_percent: float = 0.1
    default_amp: int = DEFAULT_AMP
    reference_amount: int = REFERENCE_AMOUNT
    allow_fallback_prices: bool = True

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config from PRICE_ENGINE_* environment variables.

        Unset variables keep their defaults:
        - PRICE_ENGINE_MIN_PROFIT_PERCENT
        - PRICE_ENGINE_DEFAULT_AMP
        - PRICE_ENGINE_REFERENCE_AMOUNT
        - PRICE_ENGINE_ALLOW_FALLBACK_PRICES
        """
        defaults = cls()
        return cls(
            min_profit_percent=float(
                os.environ.get(
                    _ENV_PREFIX + "MIN_PROFIT_PERCENT", str(defaults.min_profit_percent)
                )
            ),
            default_amp=int(os.environ.get(_ENV_PREFIX + "DEFAULT_AMP", str(defaults.default_amp))),
            reference_amount=int(
                os.environ.get(_ENV_PREFIX + "REFERENCE_AMOUNT", str(defaults.reference_amount))
            ),
            allow_fallback_prices=_env_bool(
                "ALLOW_FALLBACK_PRICES", defaults.allow_fallback_prices
            ),
        )


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
