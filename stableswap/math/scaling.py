"""Balance normalization helpers.

Functions for scaling raw per-asset amounts between each asset's native
decimals and the canonical 18-decimal precision used by the solvers.
Division always truncates, so dust from over-precise assets stays in the pool.
"""

from collections.abc import Sequence

from stableswap.constants import PRECISION_DECIMALS


def _check_decimals(decimals: int) -> None:
    if decimals < 0:
        raise ValueError(f"Asset decimals must be non-negative, got {decimals}")


def normalize(amount: int, decimals: int) -> int:
    """Scale a raw amount to 18 decimals.

    Args:
        amount: Amount in the asset's native decimals
        decimals: The asset's decimal precision (e.g., 6 for USDC)

    Returns:
        Amount at canonical precision (floor when decimals > 18)
    """
    _check_decimals(decimals)
    if decimals < PRECISION_DECIMALS:
        return amount * 10 ** (PRECISION_DECIMALS - decimals)
    if decimals > PRECISION_DECIMALS:
        return amount // 10 ** (decimals - PRECISION_DECIMALS)
    return amount


def denormalize(amount: int, decimals: int) -> int:
    """Scale an 18-decimal amount back to the asset's native decimals, rounding down.

    Args:
        amount: Amount at canonical precision
        decimals: The asset's decimal precision

    Returns:
        Amount in native decimals
    """
    _check_decimals(decimals)
    if decimals < PRECISION_DECIMALS:
        return amount // 10 ** (PRECISION_DECIMALS - decimals)
    if decimals > PRECISION_DECIMALS:
        return amount * 10 ** (decimals - PRECISION_DECIMALS)
    return amount


def normalize_balances(amounts: Sequence[int], decimals: Sequence[int]) -> list[int]:
    """Normalize a per-asset vector."""
    if len(amounts) != len(decimals):
        raise ValueError(f"Expected {len(decimals)} amounts, got {len(amounts)}")
    return [normalize(a, d) for a, d in zip(amounts, decimals, strict=True)]
