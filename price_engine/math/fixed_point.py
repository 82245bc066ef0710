"""9-decimal fixed-point arithmetic.

Token amounts, weights and fees are integers scaled by SCALE = 10^9. Every
operation that loses precision comes in a rounding-down and a rounding-up
flavour; callers pick the direction that favours the pool (down for what a
user receives, up for what a user pays).
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import ClassVar

from price_engine.constants import SCALE, UINT256_MAX
from price_engine.errors import DivideByZero, Overflow, Underflow

from .log_exp import ONE_18, pow_raw

__all__ = [
    "Fixed",
    "Rounding",
    "ONE",
    "TWO",
    "FOUR",
]

# 18-decimal values are narrowed to SCALE by this factor
_WIDEN = ONE_18 // SCALE


class Rounding(str, Enum):
    """Direction of rounding for lossy fixed-point operations."""

    DOWN = "down"
    UP = "up"


def _checked(value: int) -> int:
    if value < 0:
        raise Underflow(f"Fixed value cannot be negative: {value}")
    if value > UINT256_MAX:
        raise Overflow(f"Fixed value exceeds uint256 max: {value}")
    return value


def _ceil_div(a: int, b: int) -> int:
    if a == 0:
        return 0
    return (a - 1) // b + 1


class Fixed:
    """Fixed-point number stored as an int scaled by 10^9.

    Example: 1.5 is stored as 1_500_000_000
    """

    ONE: ClassVar[int] = SCALE
    # Relative error bound of pow_raw, expressed at 18 decimals (10^-14)
    MAX_POW_RELATIVE_ERROR: ClassVar[int] = 10000

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int) -> None:
        """Create from a raw scaled value."""
        self.value = _checked(value)

    def to_decimal(self) -> Decimal:
        return Decimal(self.value) / Decimal(self.ONE)

    # --- Multiplication / division ---

    def mul_down(self, other: Fixed) -> Fixed:
        """(a * b) // 10^9

        Raises:
            Overflow: If a * b exceeds uint256, even when the quotient would fit
        """
        return Fixed(_checked(self.value * other.value) // self.ONE)

    def mul_up(self, other: Fixed) -> Fixed:
        """(a * b) / 10^9 rounded toward +inf.

        Raises:
            Overflow: If a * b exceeds uint256
        """
        return Fixed(_ceil_div(_checked(self.value * other.value), self.ONE))

    def div_down(self, other: Fixed) -> Fixed:
        """(a * 10^9) // b

        Raises:
            DivideByZero: If other is zero
        """
        if other.value == 0:
            raise DivideByZero("Fixed division by zero")
        return Fixed(_checked(self.value * self.ONE) // other.value)

    def div_up(self, other: Fixed) -> Fixed:
        """(a * 10^9) / b rounded toward +inf.

        Raises:
            DivideByZero: If other is zero
        """
        if other.value == 0:
            raise DivideByZero("Fixed division by zero")
        return Fixed(_ceil_div(_checked(self.value * self.ONE), other.value))

    def mul(self, other: Fixed, rounding: Rounding) -> Fixed:
        return self.mul_up(other) if rounding is Rounding.UP else self.mul_down(other)

    def div(self, other: Fixed, rounding: Rounding) -> Fixed:
        return self.div_up(other) if rounding is Rounding.UP else self.div_down(other)

    # --- Additive operations ---

    def complement(self) -> Fixed:
        """Return 1 - self. Clamps to 0 if self > 1."""
        return Fixed(max(0, self.ONE - self.value))

    def add(self, other: Fixed) -> Fixed:
        return Fixed(self.value + other.value)

    def sub(self, other: Fixed) -> Fixed:
        """Subtract other from self.

        Raises:
            Underflow: If other > self
        """
        return Fixed(self.value - other.value)

    def saturating_sub(self, other: Fixed) -> Fixed:
        """Subtract other from self, clamping at 0."""
        return Fixed(max(0, self.value - other.value))

    # --- Power ---

    def pow_down(self, exponent: Fixed) -> Fixed:
        """Compute self^exponent, rounded down."""
        return self.pow(exponent, Rounding.DOWN)

    def pow_up(self, exponent: Fixed) -> Fixed:
        """Compute self^exponent, rounded up."""
        return self.pow(exponent, Rounding.UP)

    def pow(self, exponent: Fixed, rounding: Rounding) -> Fixed:
        """Compute self^exponent in the requested direction.

        Exponents 0, 1, 2 and 4 (the usual weight ratios) are computed exactly
        by repeated multiplication. Anything else goes through exp(y * ln(x))
        at 18 decimals, widened by MAX_POW_RELATIVE_ERROR before narrowing.

        Raises:
            Overflow: If the base or exponent is outside the log/exp range
        """
        if exponent.value == 0:
            return Fixed(self.ONE)
        if exponent.value == self.ONE:
            return Fixed(self.value)
        if exponent.value == 2 * self.ONE:
            return self.mul(self, rounding)
        if exponent.value == 4 * self.ONE:
            square = self.mul(self, rounding)
            return square.mul(square, rounding)

        raw = pow_raw(self.value * _WIDEN, exponent.value * _WIDEN)
        max_error = _ceil_div(raw * self.MAX_POW_RELATIVE_ERROR, ONE_18) + 1
        if rounding is Rounding.UP:
            return Fixed(_ceil_div(raw + max_error, _WIDEN))
        if raw < max_error:
            return Fixed(0)
        return Fixed((raw - max_error) // _WIDEN)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Fixed({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())


ONE = Fixed(SCALE)
TWO = Fixed(2 * SCALE)
FOUR = Fixed(4 * SCALE)
