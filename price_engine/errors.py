"""Price engine error classes.

Math failures are terminal for the current call: the solvers are
deterministic, so nothing is retried internally.
"""


class PriceEngineError(Exception):
    """Base error for price engine operations."""

    pass


class MathError(PriceEngineError, ArithmeticError):
    """Base error for fixed-point and solver arithmetic."""

    pass


class DivideByZero(MathError):
    """A divisor was zero (degenerate pool state)."""

    pass


class Overflow(MathError):
    """An intermediate value exceeded the 256-bit working width."""

    pass


class Underflow(Overflow):
    """Unsigned subtraction would produce a negative result."""

    pass


class ConvergenceFailure(MathError):
    """Newton-Raphson iteration did not reach tolerance within its cap."""

    pass


class InvalidAmount(PriceEngineError, ValueError):
    """Amount, price, fee or index arguments are not acceptable."""

    pass


class InvalidPoolConfig(PriceEngineError, ValueError):
    """Pool parameters (weights, amplification, tokens) are invalid."""

    pass


class SlippageExceeded(PriceEngineError):
    """Quoted output is below the caller's minimum."""

    pass
