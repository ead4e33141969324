"""Mathematical primitives for the stableswap pool.

- Balance normalization between native decimals and 18-decimal precision
- Newton-Raphson solvers for the invariant D and a missing balance y
"""

from stableswap.math.scaling import denormalize, normalize, normalize_balances
from stableswap.math.stable_math import compute_d, compute_output_for_swap, compute_y

__all__ = [
    "normalize",
    "denormalize",
    "normalize_balances",
    "compute_d",
    "compute_y",
    "compute_output_for_swap",
]
