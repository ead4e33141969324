"""Swap pricing: output solving, swap fee and admin fee split."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stableswap.constants import FEE_DENOMINATOR
from stableswap.math.scaling import denormalize, normalize, normalize_balances
from stableswap.math.stable_math import compute_output_for_swap
from stableswap.safe_int import S


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap.

    Attributes:
        dy: Net output to the caller (native decimals of the output asset)
        admin_fee: Admin share of the swap fee (native decimals, may be 0)
        dy_gross: Normalized output before the swap fee
        dy_fee: Normalized swap fee
    """

    dy: int
    admin_fee: int
    dy_gross: int
    dy_fee: int


def quote_exchange(
    i: int,
    j: int,
    dx: int,
    balances: Sequence[int],
    decimals: Sequence[int],
    amp: int,
    swap_fee: int,
    admin_fee: int,
) -> SwapQuote:
    """Price a swap of dx (native units of asset i) into asset j.

    The swap fee is taken from the output. admin_fee is the fraction of that
    fee paid to the admin account; the rest stays in the pool.

    Args:
        i: Input asset index
        j: Output asset index
        dx: Raw input amount
        balances: Raw pool balances before the input arrives
        decimals: Native decimals per asset
        amp: Effective amplification (scaled)
        swap_fee: Swap fee (parts-per-1e10)
        admin_fee: Admin share of the swap fee (parts-per-1e10)

    Returns:
        SwapQuote

    Raises:
        InvalidAssetIndex: If i == j or an index is out of range
    """
    xp = normalize_balances(balances, decimals)
    dx_normalized = normalize(dx, decimals[i])

    dy_gross = S(compute_output_for_swap(i, j, dx_normalized, xp, amp))
    dy_fee = dy_gross * swap_fee // FEE_DENOMINATOR
    dy_admin_fee = dy_fee * admin_fee // FEE_DENOMINATOR

    return SwapQuote(
        dy=denormalize((dy_gross - dy_fee).value, decimals[j]),
        admin_fee=denormalize(dy_admin_fee.value, decimals[j]),
        dy_gross=dy_gross.value,
        dy_fee=dy_fee.value,
    )
