"""Stableswap pool: state, amplification ramp, liquidity and swap execution."""

from stableswap.pool.auth import Authorizer, any_of, owner_only
from stableswap.pool.config import FeeConfig, PoolConfig
from stableswap.pool.ledger import (
    AssetLedger,
    InMemoryAssetLedger,
    InMemoryShareLedger,
    InsufficientBalance,
    LedgerError,
    ShareLedger,
    TransferBlocked,
)
from stableswap.pool.liquidity import (
    DepositQuote,
    WithdrawOneQuote,
    calc_token_amount,
    compute_deposit,
    compute_withdraw_one,
    compute_withdraw_proportional,
)
from stableswap.pool.ramp import AmplificationRamp
from stableswap.pool.stable_pool import PoolSnapshot, StableSwapPool
from stableswap.pool.swap import SwapQuote, quote_exchange

__all__ = [
    # Pool
    "StableSwapPool",
    "PoolSnapshot",
    "PoolConfig",
    "FeeConfig",
    "AmplificationRamp",
    # Collaborators
    "AssetLedger",
    "ShareLedger",
    "InMemoryAssetLedger",
    "InMemoryShareLedger",
    "LedgerError",
    "InsufficientBalance",
    "TransferBlocked",
    "Authorizer",
    "owner_only",
    "any_of",
    # Liquidity accounting
    "DepositQuote",
    "WithdrawOneQuote",
    "compute_deposit",
    "compute_withdraw_proportional",
    "compute_withdraw_one",
    "calc_token_amount",
    # Swaps
    "SwapQuote",
    "quote_exchange",
]
