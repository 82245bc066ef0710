"""Fixed-point primitives for the pool math.

- Fixed: 9-decimal fixed-point value with directed rounding
- log_exp: 18-decimal ln/exp backing Fixed.pow
"""

from price_engine.math.fixed_point import FOUR, ONE, TWO, Fixed, Rounding

__all__ = ["Fixed", "Rounding", "ONE", "TWO", "FOUR"]
