"""AMM price engine: weighted and StableSwap pool math with arbitrage detection."""

from price_engine.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from price_engine.errors import (
    ConvergenceFailure,
    DivideByZero,
    InvalidAmount,
    InvalidPoolConfig,
    MathError,
    Overflow,
    PriceEngineError,
    SlippageExceeded,
    Underflow,
)

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "PriceEngineError",
    "MathError",
    "DivideByZero",
    "Overflow",
    "Underflow",
    "ConvergenceFailure",
    "InvalidAmount",
    "InvalidPoolConfig",
    "SlippageExceeded",
]
