"""Token scaling and swap-fee helpers.

Pool balances are kept in a common 9-decimal unit. A token with fewer
decimals is scaled up (multiplied by 10^(9 - decimals)); a token with more
decimals is scaled down (divided by 10^(decimals - 9)). The scaling_up flag
records which of the two applies to a token.
"""

from price_engine.constants import POOL_DECIMALS, SCALE
from price_engine.errors import InvalidAmount, InvalidPoolConfig
from price_engine.math.fixed_point import Fixed


def scaling_factor_for(decimals: int, pool_decimals: int = POOL_DECIMALS) -> int:
    """Scaling factor between a token's decimals and the pool unit.

    Raises:
        InvalidPoolConfig: If decimals is negative
    """
    if decimals < 0:
        raise InvalidPoolConfig(f"decimals must be non-negative, got {decimals}")
    return 10 ** abs(pool_decimals - decimals)


def scales_up(decimals: int, pool_decimals: int = POOL_DECIMALS) -> bool:
    """True when raw amounts are multiplied on the way into pool units."""
    return decimals <= pool_decimals


def _check_factor(scaling_factor: int) -> None:
    if scaling_factor <= 0:
        raise InvalidPoolConfig(f"Scaling factor must be positive, got {scaling_factor}")


def scale_up(amount: int, scaling_factor: int, scaling_up: bool = True) -> Fixed:
    """Scale a raw token amount into pool units.

    Multiplies when scaling_up, otherwise divides (rounding down).

    Raises:
        InvalidPoolConfig: If scaling_factor <= 0
    """
    _check_factor(scaling_factor)
    if scaling_up:
        return Fixed(amount * scaling_factor)
    return Fixed(amount // scaling_factor)


def scale_down_down(amount: Fixed, scaling_factor: int, scaling_up: bool = True) -> int:
    """Scale pool units back to raw token units, rounding down.

    Raises:
        InvalidPoolConfig: If scaling_factor <= 0
    """
    _check_factor(scaling_factor)
    if scaling_up:
        return amount.value // scaling_factor
    return amount.value * scaling_factor


def scale_down_up(amount: Fixed, scaling_factor: int, scaling_up: bool = True) -> int:
    """Scale pool units back to raw token units, rounding up.

    Raises:
        InvalidPoolConfig: If scaling_factor <= 0
    """
    _check_factor(scaling_factor)
    if not scaling_up:
        return amount.value * scaling_factor
    if amount.value == 0:
        return 0
    return (amount.value - 1) // scaling_factor + 1


def _check_fee(swap_fee: int) -> None:
    if swap_fee < 0 or swap_fee >= SCALE:
        raise InvalidAmount(f"Swap fee must be in range [0, {SCALE}), got {swap_fee}")


def apply_fee_to_amount_out(amount_out: Fixed, swap_fee: int) -> Fixed:
    """Deduct the swap fee from a computed output: amount * (1 - fee), rounded down.

    Args:
        amount_out: Output amount before fees
        swap_fee: Fee as a fraction of SCALE (3_000_000 == 0.3%)

    Raises:
        InvalidAmount: If swap_fee is not in [0, SCALE)
    """
    _check_fee(swap_fee)
    return amount_out.mul_down(Fixed(SCALE - swap_fee))


def subtract_swap_fee_amount(amount_in: Fixed, swap_fee: int) -> Fixed:
    """Deduct the swap fee from an input amount before the swap.

    The fee charged is rounded up, so the amount entering the pool math is
    rounded down.

    Raises:
        InvalidAmount: If swap_fee is not in [0, SCALE)
    """
    _check_fee(swap_fee)
    fee_amount = amount_in.mul_up(Fixed(swap_fee))
    return amount_in.saturating_sub(fee_amount)
