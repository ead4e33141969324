"""Pool and fee configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from stableswap.constants import A_PRECISION, FEE_DENOMINATOR, MAX_SWAP_FEE, PRECISION
from stableswap.errors import FeeOutOfBounds, InvalidAdminAccount, InvalidPoolConfig
from stableswap.models.types import is_valid_address, is_zero_address, normalize_address

# Largest decimals value whose scale factor still fits in uint256
MAX_ASSET_DECIMALS = 77


@dataclass(frozen=True)
class PoolConfig:
    """Immutable pool configuration, fixed at creation.

    Attributes:
        assets: Asset identifiers (addresses), in pool index order
        decimals: Native decimal precision of each asset (e.g., [18, 6, 6])
        max_swap_fee: Upper bound for FeeConfig.swap_fee (parts-per-1e10)
        precision: Canonical fixed-point scale (10^18)
        a_precision: Multiplier applied to the human-facing A
    """

    assets: tuple[str, ...]
    decimals: tuple[int, ...]
    max_swap_fee: int = MAX_SWAP_FEE
    precision: int = PRECISION
    a_precision: int = A_PRECISION

    def __post_init__(self) -> None:
        if len(self.assets) < 2:
            raise InvalidPoolConfig(f"A pool needs at least 2 assets, got {len(self.assets)}")
        if len(self.assets) != len(self.decimals):
            raise InvalidPoolConfig(
                f"Got {len(self.assets)} assets but {len(self.decimals)} decimals entries"
            )
        if len({normalize_address(a) for a in self.assets}) != len(self.assets):
            raise InvalidPoolConfig("Duplicate asset in pool")
        for d in self.decimals:
            if not 0 <= d <= MAX_ASSET_DECIMALS:
                raise InvalidPoolConfig(f"Asset decimals must be in [0, {MAX_ASSET_DECIMALS}]")
        if not 0 <= self.max_swap_fee <= FEE_DENOMINATOR:
            raise InvalidPoolConfig(f"max_swap_fee must be in [0, {FEE_DENOMINATOR}]")

    @property
    def n_coins(self) -> int:
        return len(self.assets)


@dataclass
class FeeConfig:
    """Admin-controlled fee configuration.

    All fees are fractions in parts-per-FEE_DENOMINATOR (1e10 = 100%).

    Attributes:
        swap_fee: Fee charged on swap output
        admin_fee: Share of the swap fee sent to the admin account
        withdraw_fee: Imbalance fee on deposits and single-asset withdrawals
        admin_account: Recipient of the admin share of swap fees
    """

    swap_fee: int
    admin_fee: int
    admin_account: str
    withdraw_fee: int = 0
    max_swap_fee: int = field(default=MAX_SWAP_FEE, repr=False)

    def __post_init__(self) -> None:
        check_swap_fee(self.swap_fee, self.max_swap_fee)
        check_fraction("admin_fee", self.admin_fee)
        check_fraction("withdraw_fee", self.withdraw_fee)
        self.admin_account = check_admin_account(self.admin_account)


def check_swap_fee(fee: int, max_swap_fee: int) -> None:
    if not 0 <= fee <= max_swap_fee:
        raise FeeOutOfBounds(f"Swap fee {fee} exceeds maximum {max_swap_fee}")


def check_fraction(name: str, fee: int) -> None:
    if not 0 <= fee <= FEE_DENOMINATOR:
        raise FeeOutOfBounds(f"{name} {fee} exceeds {FEE_DENOMINATOR}")


def check_admin_account(account: str) -> str:
    """Validate and normalize the admin account address.

    Raises:
        InvalidAdminAccount: If the address is malformed or the zero address
    """
    if not is_valid_address(account) or is_zero_address(account):
        raise InvalidAdminAccount(f"Invalid admin account: {account!r}")
    return normalize_address(account)
