"""Liquidity accounting.

Pure functions converting invariant deltas into share mint/burn amounts.
Inputs are raw (native-decimal) balances; normalization happens here.
Nothing in this module touches a ledger.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stableswap.constants import FEE_DENOMINATOR, WITHDRAW_ONE_HELD_INDEX
from stableswap.errors import InsufficientShares, InvalidAssetIndex
from stableswap.math.scaling import denormalize, normalize_balances
from stableswap.math.stable_math import compute_d, compute_y
from stableswap.safe_int import S


@dataclass(frozen=True)
class DepositQuote:
    """Outcome of a deposit.

    Attributes:
        shares: Liquidity shares to mint
        d0: Invariant before the deposit
        d1: Invariant of the fee-adjusted post-deposit balances
        fees: Imbalance fee charged per asset (native decimals)
    """

    shares: int
    d0: int
    d1: int
    fees: tuple[int, ...]


@dataclass(frozen=True)
class WithdrawOneQuote:
    """Outcome of a single-asset withdrawal.

    Attributes:
        amount: Payout in the asset's native decimals
        fee: Withdrawal fee retained by the pool (normalized)
    """

    amount: int
    fee: int


def _check_burn(share_amount: int, total_supply: int) -> None:
    if total_supply == 0:
        raise InsufficientShares("Pool has no liquidity shares outstanding")
    if share_amount > total_supply:
        raise InsufficientShares(f"Cannot burn {share_amount} of {total_supply} shares")


def compute_deposit(
    old_balances: Sequence[int],
    new_balances: Sequence[int],
    decimals: Sequence[int],
    amp: int,
    total_supply: int,
    withdraw_fee: int,
) -> DepositQuote:
    """Calculate the shares minted for moving the pool from old to new balances.

    Bootstrap (total_supply == 0): shares = D1, no fee.

    Otherwise every asset is charged withdraw_fee on its deviation from an
    "ideal" balance, and the charged amount is excluded from the balance used
    for D1. The ideal is `D_ref * old_i / D0` with D_ref recomputed from the
    pre-deposit vector, which makes the deviation equal to the deposit itself
    rather than to the imbalance it causes.

    Args:
        old_balances: Raw balances before the deposit
        new_balances: Raw balances after the deposit
        decimals: Native decimals per asset
        amp: Effective amplification (scaled)
        total_supply: Share supply before minting
        withdraw_fee: Imbalance fee fraction (parts-per-1e10)

    Returns:
        DepositQuote with the mint amount and both invariants
    """
    xp_old = normalize_balances(old_balances, decimals)
    d0 = compute_d(xp_old, amp)

    if total_supply == 0:
        d1 = compute_d(normalize_balances(new_balances, decimals), amp)
        return DepositQuote(shares=d1, d0=d0, d1=d1, fees=tuple(0 for _ in old_balances))

    # TODO: confirm whether D_ref should come from the post-deposit vector;
    # until then the reference invariant equals D0 and ideal_i == old_i.
    d_ref = compute_d(xp_old, amp)

    credited: list[int] = []
    fees: list[int] = []
    for old, new in zip(old_balances, new_balances, strict=True):
        ideal = S(d_ref) * old // d0
        fee = S(withdraw_fee) * ideal.abs_diff(new) // FEE_DENOMINATOR
        credited.append((S(new) - fee).value)
        fees.append(fee.value)

    d1 = compute_d(normalize_balances(credited, decimals), amp)
    shares = S(total_supply) * S(d1).saturating_sub(d0) // d0
    return DepositQuote(shares=shares.value, d0=d0, d1=d1, fees=tuple(fees))


def compute_withdraw_proportional(
    balances: Sequence[int],
    share_amount: int,
    total_supply: int,
) -> list[int]:
    """Calculate per-asset payouts for burning share_amount proportionally.

    Returns:
        Raw amounts, each balance_i * share_amount // total_supply

    Raises:
        InsufficientShares: If there is no supply or share_amount exceeds it
    """
    _check_burn(share_amount, total_supply)
    return [(S(b) * share_amount // total_supply).value for b in balances]


def compute_withdraw_one(
    balances: Sequence[int],
    decimals: Sequence[int],
    amp: int,
    share_amount: int,
    total_supply: int,
    index: int,
    withdraw_fee: int,
) -> WithdrawOneQuote:
    """Calculate the payout for burning share_amount into a single asset.

    The invariant is reduced in proportion to the burned shares, then the
    balance of asset `index` that satisfies the reduced invariant is solved
    with every other asset unchanged. The solver's held slot is always
    WITHDRAW_ONE_HELD_INDEX, so that asset cannot be withdrawn singly.

    Raises:
        InsufficientShares: If there is no supply or share_amount exceeds it
        InvalidAssetIndex: If index is out of range or equals the held slot
    """
    _check_burn(share_amount, total_supply)
    held = WITHDRAW_ONE_HELD_INDEX
    if index == held:
        raise InvalidAssetIndex(
            f"Asset {index} cannot be withdrawn singly; withdraw proportionally instead"
        )

    xp = normalize_balances(balances, decimals)
    d0 = S(compute_d(xp, amp))
    d1 = d0 - d0 * share_amount // total_supply

    new_y = compute_y(xp[held], amp, d1.value, held, index, xp)

    dy_gross = S(xp[index]).saturating_sub(new_y)
    fee = dy_gross * withdraw_fee // FEE_DENOMINATOR
    dy = dy_gross - fee
    return WithdrawOneQuote(amount=denormalize(dy.value, decimals[index]), fee=fee.value)


def calc_token_amount(
    balances: Sequence[int],
    amounts: Sequence[int],
    decimals: Sequence[int],
    amp: int,
    total_supply: int,
    is_deposit: bool,
) -> int:
    """Estimate shares minted (deposit) or burned (withdrawal) for raw amounts.

    Fees are not applied; this is a quote for slippage bounds.
    """
    xp_old = normalize_balances(balances, decimals)
    d0 = compute_d(xp_old, amp)

    if is_deposit:
        new_balances = [(S(b) + a).value for b, a in zip(balances, amounts, strict=True)]
    else:
        new_balances = [(S(b) - a).value for b, a in zip(balances, amounts, strict=True)]
    d1 = compute_d(normalize_balances(new_balances, decimals), amp)

    if total_supply == 0:
        return d1 if is_deposit else 0
    return (S(total_supply) * S(d1).abs_diff(d0) // d0).value
