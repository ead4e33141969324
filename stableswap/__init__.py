"""Stableswap engine.

Fixed-point stableswap invariant solvers and a multi-asset pool built on them.
"""

from stableswap.errors import StableSwapError
from stableswap.pool import StableSwapPool

__all__ = ["StableSwapPool", "StableSwapError"]
