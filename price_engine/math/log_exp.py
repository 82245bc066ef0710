"""18-decimal natural log / exponential used by the fixed-point power.

The price engine stores values with 9 decimals, but x^y for arbitrary
fixed-point exponents is evaluated as exp(y * ln(x)) at 18 decimals and then
narrowed back, so the series keep enough precision for the rounding bound
applied in Fixed.pow_down / Fixed.pow_up.

The algorithm follows Balancer's LogExpMath: powers of e are peeled off with
pre-computed constants, then short Taylor / arctanh series handle the rest.
All divisions truncate toward zero.
"""

from __future__ import annotations

from price_engine.errors import Overflow

__all__ = [
    "LogExpError",
    "XOutOfBounds",
    "YOutOfBounds",
    "ProductOutOfBounds",
    "InvalidExponent",
    "ONE_18",
    "exp",
    "ln",
    "pow_raw",
]

ONE_18 = 10**18
ONE_20 = 10**20
ONE_36 = 10**36

MAX_NATURAL_EXPONENT = 130 * ONE_18
MIN_NATURAL_EXPONENT = -41 * ONE_18

# ln(x) switches to the 36-decimal series inside (0.9, 1.1)
LN_36_LOWER_BOUND = ONE_18 - 10**17
LN_36_UPPER_BOUND = ONE_18 + 10**17

MILD_EXPONENT_BOUND = (1 << 254) // ONE_20

# (exponent, e^exponent) pairs at 18 decimals: e^128, e^64
_BIG_TERMS = (
    (128 * ONE_18, 38877084059945950922200000000000000000000000000000000000),
    (64 * ONE_18, 6235149080811616882910000000),
)

# (exponent, e^exponent) pairs at 20 decimals: e^32 down to e^0.0625
_SMALL_TERMS = (
    (32 * ONE_20, 7_896_296_018_268_069_516_100_000_000_000_000),
    (16 * ONE_20, 888_611_052_050_787_263_676_000_000),
    (8 * ONE_20, 298_095_798_704_172_827_474_000),
    (4 * ONE_20, 5_459_815_003_314_423_907_810),
    (2 * ONE_20, 738_905_609_893_065_022_723),
    (1 * ONE_20, 271_828_182_845_904_523_536),
    (ONE_20 // 2, 164_872_127_070_012_814_685),
    (ONE_20 // 4, 128_402_541_668_774_148_407),
    (ONE_20 // 8, 113_314_845_306_682_631_683),
    (ONE_20 // 16, 106_449_445_891_785_942_956),
)


class LogExpError(Overflow):
    """Base error for out-of-range log/exp inputs."""

    pass


class XOutOfBounds(LogExpError):
    """Base does not fit a signed 256-bit integer."""

    pass


class YOutOfBounds(LogExpError):
    """Exponent exceeds MILD_EXPONENT_BOUND."""

    pass


class ProductOutOfBounds(LogExpError):
    """y * ln(x) is outside the range exp() can evaluate."""

    pass


class InvalidExponent(LogExpError):
    """exp() argument is outside [MIN_NATURAL_EXPONENT, MAX_NATURAL_EXPONENT]."""

    pass


def _div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero.

    Python's // floors, which differs from truncation when the operands have
    different signs (-7 // 3 == -3, truncation gives -2).
    """
    if b == 0:
        raise ZeroDivisionError("Division by zero in _div_trunc")
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def ln(a: int) -> int:
    """Natural logarithm of a positive 18-decimal value, at 18 decimals."""
    if a < ONE_18:
        return -ln((ONE_18 * ONE_18) // a)

    total = 0
    for x_n, a_n in _BIG_TERMS:
        if a >= a_n * ONE_18:
            a //= a_n
            total += x_n

    total *= 100
    a *= 100

    for x_n, a_n in _SMALL_TERMS:
        if a >= a_n:
            a = (a * ONE_20) // a_n
            total += x_n

    # ln(a) = 2 * arctanh(z), z = (a - 1) / (a + 1)
    z = ((a - ONE_20) * ONE_20) // (a + ONE_20)
    z_squared = (z * z) // ONE_20
    num = z
    series = num
    for i in range(3, 12, 2):
        num = (num * z_squared) // ONE_20
        series += num // i

    return (total + series * 2) // 100


def _ln_36(x: int) -> int:
    """ln(x) at 36 decimals for x close to 1 (x given at 18 decimals)."""
    x *= ONE_18
    z = _div_trunc((x - ONE_36) * ONE_36, x + ONE_36)
    z_squared = _div_trunc(z * z, ONE_36)
    num = z
    series = num
    for i in range(3, 16, 2):
        num = _div_trunc(num * z_squared, ONE_36)
        series += _div_trunc(num, i)
    return series * 2


def exp(x: int) -> int:
    """e^x for an 18-decimal exponent, at 18 decimals.

    Raises:
        InvalidExponent: If x is outside the supported range
    """
    if not (MIN_NATURAL_EXPONENT <= x <= MAX_NATURAL_EXPONENT):
        raise InvalidExponent(f"Exponent {x} outside valid range")

    if x < 0:
        return (ONE_18 * ONE_18) // exp(-x)

    first_an = 1
    for x_n, a_n in _BIG_TERMS:
        if x >= x_n:
            x -= x_n
            first_an = a_n
            break

    x *= 100

    product = ONE_20
    # e^0.125 and e^0.0625 are left to the series
    for x_n, a_n in _SMALL_TERMS[:8]:
        if x >= x_n:
            x -= x_n
            product = (product * a_n) // ONE_20

    series = ONE_20 + x
    term = x
    for i in range(2, 13):
        term = ((term * x) // ONE_20) // i
        series += term

    return (((product * series) // ONE_20) * first_an) // 100


def pow_raw(x: int, y: int) -> int:
    """x^y for non-negative 18-decimal values, without error correction.

    Raises:
        XOutOfBounds: If x is too large
        YOutOfBounds: If y exceeds MILD_EXPONENT_BOUND
        ProductOutOfBounds: If y * ln(x) is outside the exp range
    """
    if y == 0:
        return ONE_18
    if x == 0:
        return 0
    if x >= (1 << 255):
        raise XOutOfBounds(f"Base {x} too large")
    if y >= MILD_EXPONENT_BOUND:
        raise YOutOfBounds(f"Exponent {y} exceeds bound")

    if LN_36_LOWER_BOUND < x < LN_36_UPPER_BOUND:
        ln_36_x = _ln_36(x)
        whole = _div_trunc(ln_36_x, ONE_18)
        rest = ln_36_x - whole * ONE_18
        logx_times_y = whole * y + _div_trunc(rest * y, ONE_18)
    else:
        logx_times_y = ln(x) * y
    logx_times_y = _div_trunc(logx_times_y, ONE_18)

    if not (MIN_NATURAL_EXPONENT <= logx_times_y <= MAX_NATURAL_EXPONENT):
        raise ProductOutOfBounds(f"Product {logx_times_y} outside valid range")

    return exp(logx_times_y)
