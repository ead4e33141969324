"""Stableswap invariant math.

Core Newton-Raphson solvers for the hybrid constant-sum / constant-product
invariant:

    A * n^n * S + D = A * n^n * D + D^(n+1) / (n^n * prod(x_i))

All inputs are normalized (18-decimal) balances and an amplification
coefficient pre-multiplied by A_PRECISION. Arithmetic goes through SafeInt so
an underflow or a zero divisor raises instead of silently wrapping.

Neither solver raises on non-convergence: after MAX_ITERATIONS the last
iterate is returned. That is a precision bound of the engine, not a failure.
"""

from collections.abc import Sequence

import structlog

from stableswap.constants import A_PRECISION, MAX_ITERATIONS
from stableswap.errors import InvalidAssetIndex
from stableswap.safe_int import S

logger = structlog.get_logger()


def _check_index(name: str, index: int, n_coins: int) -> None:
    if index < 0 or index >= n_coins:
        raise InvalidAssetIndex(f"{name} {index} out of range for {n_coins} assets")


def _check_amp(amp: int) -> None:
    if amp <= 0:
        raise ValueError(f"Amplification must be positive, got {amp}")


def compute_d(balances: Sequence[int], amp: int) -> int:
    """Calculate the stableswap invariant D using Newton-Raphson iteration.

    Algorithm:
        1. D = 0 if the balances sum to zero
        2. Initial guess: D = sum(balances)
        3. Iterate until |D_new - D_prev| <= 1
        4. Max iterations: 255 (returns the last iterate)

    Args:
        balances: Normalized balances (18 decimals)
        amp: Amplification parameter (scaled by A_PRECISION)

    Returns:
        The invariant D

    Raises:
        DivisionByZero: If some balance is zero while the sum is not
    """
    _check_amp(amp)
    n_coins = len(balances)
    sum_balances = S(sum(balances))
    if sum_balances == 0:
        return 0

    # Ann = A * n^n
    ann = S(amp) * n_coins**n_coins

    d = sum_balances
    for _ in range(MAX_ITERATIONS):
        # d_p = D^(n+1) / (n^n * prod(balances)), one balance at a time
        d_p = d
        for bal in balances:
            d_p = d_p * d // (S(bal) * n_coins)

        d_prev = d
        numerator = (ann * sum_balances // A_PRECISION + d_p * n_coins) * d
        denominator = (ann - A_PRECISION) * d // A_PRECISION + S(n_coins + 1) * d_p
        d = numerator // denominator

        if d.abs_diff(d_prev) <= 1:
            return d.value

    logger.debug(
        "invariant_iteration_cap_reached",
        iterations=MAX_ITERATIONS,
        amp=amp,
        invariant=d.value,
    )
    return d.value


def compute_y(
    x_new: int,
    amp: int,
    d: int,
    index_held: int,
    index_excluded: int,
    balances: Sequence[int],
) -> int:
    """Solve for the balance of index_excluded that preserves invariant D.

    The asset at index_held is fixed at x_new, every other asset keeps its
    current balance, and the current balance of index_excluded is left out of
    the sum and product terms. Newton-Raphson on the quadratic

        y^2 + (b - D) * y = c

    with b = S' + D / Ann and c = D^(n+1) / (n^n * P' * Ann), where S' and P'
    run over the assets that are not excluded.

    Args:
        x_new: New normalized balance of index_held
        amp: Amplification parameter (scaled by A_PRECISION)
        d: Invariant to preserve
        index_held: Asset whose balance is fixed at x_new
        index_excluded: Asset whose balance is solved for
        balances: Current normalized balances

    Returns:
        The solved normalized balance of index_excluded

    Raises:
        InvalidAssetIndex: If an index is out of range or both indices coincide
    """
    _check_amp(amp)
    n_coins = len(balances)
    _check_index("index_held", index_held, n_coins)
    _check_index("index_excluded", index_excluded, n_coins)
    if index_held == index_excluded:
        raise InvalidAssetIndex(f"Held and solved asset are both {index_held}")

    invariant = S(d)
    ann = S(amp) * n_coins**n_coins

    c = invariant
    sum_others = S(0)
    for k, bal in enumerate(balances):
        if k == index_held:
            x = S(x_new)
        elif k != index_excluded:
            x = S(bal)
        else:
            continue
        sum_others = sum_others + x
        c = c * invariant // (x * n_coins)

    c = c * invariant * A_PRECISION // (ann * n_coins)
    b = sum_others + invariant * A_PRECISION // ann

    y = invariant
    for _ in range(MAX_ITERATIONS):
        y_prev = y
        y = (y * y + c) // (S(2) * y + b - invariant)
        if y.abs_diff(y_prev) <= 1:
            return y.value

    logger.debug(
        "balance_iteration_cap_reached",
        iterations=MAX_ITERATIONS,
        amp=amp,
        index_excluded=index_excluded,
        balance=y.value,
    )
    return y.value


def compute_output_for_swap(
    i: int,
    j: int,
    dx: int,
    balances: Sequence[int],
    amp: int,
) -> int:
    """Calculate the normalized output of asset j for dx of asset i, before fees.

    Algorithm:
        1. D at the current balances
        2. Add dx to balances[i]
        3. Solve for the new balances[j] that keeps D
        4. Return: old_balance_j - new_balance_j - 1 (1 unit kept by the pool)

    Args:
        i: Index of the input asset
        j: Index of the output asset
        dx: Normalized input amount
        balances: Current normalized balances
        amp: Amplification parameter (scaled by A_PRECISION)

    Returns:
        Normalized output amount (0 if the solved balance does not decrease)

    Raises:
        InvalidAssetIndex: If i == j or an index is out of range
    """
    n_coins = len(balances)
    _check_index("i", i, n_coins)
    _check_index("j", j, n_coins)
    if i == j:
        raise InvalidAssetIndex("Cannot swap an asset with itself")

    d = compute_d(balances, amp)
    x = balances[i] + dx
    y = compute_y(x, amp, d, i, j, balances)

    old_balance_out = balances[j]
    if y + 1 >= old_balance_out:
        return 0
    return old_balance_out - y - 1
