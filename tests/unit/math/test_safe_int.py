"""Tests for SafeInt checked arithmetic."""

import pytest

from price_engine.constants import UINT256_MAX
from price_engine.errors import DivideByZero, MathError, Overflow, Underflow
from price_engine.safe_int import S, SafeInt


class TestConstruction:
    def test_wraps_int(self) -> None:
        assert SafeInt(42).value == 42

    def test_copies_safe_int(self) -> None:
        assert SafeInt(SafeInt(7)).value == 7

    def test_rejects_non_int(self) -> None:
        with pytest.raises(TypeError):
            SafeInt(1.5)  # type: ignore[arg-type]

    def test_rejects_negative(self) -> None:
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_rejects_above_uint256(self) -> None:
        with pytest.raises(Overflow):
            SafeInt(UINT256_MAX + 1)


class TestArithmetic:
    def test_mul_overflow_raises(self) -> None:
        """D^2-style products beyond 256 bits fail loudly."""
        big = S(2**200)
        with pytest.raises(Overflow):
            big * big

    def test_add_overflow_raises(self) -> None:
        with pytest.raises(Overflow):
            S(UINT256_MAX) + 1

    def test_sub_underflow_raises(self) -> None:
        with pytest.raises(Underflow):
            S(3) - 5

    def test_rsub_underflow_raises(self) -> None:
        with pytest.raises(Underflow):
            3 - S(5)

    def test_floordiv_by_zero_raises(self) -> None:
        with pytest.raises(DivideByZero):
            S(10) // 0

    def test_rfloordiv_by_zero_raises(self) -> None:
        with pytest.raises(DivideByZero):
            10 // S(0)

    def test_floordiv_rounds_down(self) -> None:
        assert (S(10) // 3).value == 3

    def test_abs_diff(self) -> None:
        assert S(3).abs_diff(10).value == 7
        assert S(10).abs_diff(S(3)).value == 7

    def test_mixed_operands(self) -> None:
        assert (2 * S(3) + 1).value == 7


class TestErrorHierarchy:
    def test_underflow_is_overflow(self) -> None:
        """Unsigned underflow reports as an overflow, like checked_sub."""
        assert issubclass(Underflow, Overflow)

    def test_math_errors_are_arithmetic_errors(self) -> None:
        assert issubclass(DivideByZero, MathError)
        assert issubclass(MathError, ArithmeticError)


class TestComparison:
    def test_compare_with_int(self) -> None:
        assert S(5) > 3
        assert S(5) >= 5
        assert S(3) < S(5)
        assert S(5) == 5
        assert not S(0)
