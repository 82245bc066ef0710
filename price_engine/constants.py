"""Numeric constants shared by the pool math and pricing layers."""

# Fixed-point scale for token amounts, weights and fees (9 decimals)
SCALE = 10**9

# Decimals of the common pool unit that token amounts are normalized to
POOL_DECIMALS = 9

# Largest native token decimals a pool accepts
MAX_TOKEN_DECIMALS = 18

# Scale of the amplification parameter A
AMP_PRECISION = 1000

# Allowed range for the unscaled amplification parameter
MIN_AMP = 1
MAX_AMP = 10_000

# Default A used when a stable pool does not report one (100 * AMP_PRECISION)
DEFAULT_AMP = 100 * AMP_PRECISION

# Newton-Raphson limits
INVARIANT_MAX_ITERATIONS = 256
INVARIANT_CONVERGENCE_THRESHOLD = 100
BALANCE_MAX_ITERATIONS = 64
BALANCE_CONVERGENCE_THRESHOLD = 1

# Reference swap size used to estimate a stable pool's spot price (1.0 token)
REFERENCE_AMOUNT = 10**9

# Fees are fractions of SCALE: 3_000_000 == 0.3%
FEE_SCALE = SCALE

# Widths of the stored balances and of the working integers
U64_MAX = 2**64 - 1
UINT256_MAX = 2**256 - 1
