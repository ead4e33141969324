"""Protocol constants for the stableswap pool.

Centralizes precision scales, fee units and amplification bounds.
"""

# Canonical fixed-point precision: every asset is normalized to 18 decimals
PRECISION_DECIMALS = 18
PRECISION = 10**PRECISION_DECIMALS

# Human-facing A is stored multiplied by A_PRECISION (A=100 is stored as 10_000)
A_PRECISION = 100

# Upper bound (exclusive) on the human-facing amplification parameter
MAX_A = 10**6

# Minimum duration of an amplification ramp, in seconds (1 day)
MIN_RAMP_TIME = 86_400

# Fees are expressed in parts-per-FEE_DENOMINATOR (1e10 = 100%)
FEE_DENOMINATOR = 10**10

# Default cap on the swap fee: 0.1%
MAX_SWAP_FEE = 10**7

# Newton iteration cap shared by the invariant and balance solvers
MAX_ITERATIONS = 255

# The single-asset withdrawal pins the solver's held slot to this index
# regardless of which asset is being withdrawn
WITHDRAW_ONE_HELD_INDEX = 0

# Admin account may never be the zero address
ZERO_ADDRESS = "0x" + "0" * 40
