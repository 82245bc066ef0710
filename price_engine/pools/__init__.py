"""Weighted and StableSwap pool math.

Pool types supported:
- Weighted product (spot price, swap out-given-in, invariant)
- StableSwap (invariant and balance solvers, swap out-given-in)
"""

# Pool state models
from .models import PoolToken, StablePoolState, WeightedPoolState

# Quotes
from .quote import (
    SwapQuote,
    quote_stable_pool_swap,
    quote_stable_swap,
    quote_weighted_pool_swap,
)

# Scaling and fee helpers
from .scaling import (
    apply_fee_to_amount_out,
    scale_down_down,
    scale_down_up,
    scale_up,
    scales_up,
    scaling_factor_for,
    subtract_swap_fee_amount,
)

# Stable math
from .stable_math import (
    calculate_invariant,
    get_token_balance_given_invariant_and_all_other_balances,
    stable_calc_out_given_in,
)

# Weighted math
from .weighted_math import (
    calc_out_given_in,
    calc_weighted_spot_price,
    calc_weighted_spot_price_fixed,
    calculate_weighted_invariant,
)

__all__ = [
    # Models
    "PoolToken",
    "WeightedPoolState",
    "StablePoolState",
    # Quotes
    "SwapQuote",
    "quote_stable_swap",
    "quote_stable_pool_swap",
    "quote_weighted_pool_swap",
    # Scaling helpers
    "scaling_factor_for",
    "scales_up",
    "scale_up",
    "scale_down_down",
    "scale_down_up",
    # Fee helpers
    "apply_fee_to_amount_out",
    "subtract_swap_fee_amount",
    # Stable math
    "calculate_invariant",
    "get_token_balance_given_invariant_and_all_other_balances",
    "stable_calc_out_given_in",
    # Weighted math
    "calc_weighted_spot_price",
    "calc_weighted_spot_price_fixed",
    "calc_out_given_in",
    "calculate_weighted_invariant",
]
