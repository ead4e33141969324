"""Build an in-memory pool from a network preset.

Used by the simulation API and scripts/deploy_pool.py.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from stableswap.config import REFERENCE_ASSETS, AssetSpec, NetworkConfig
from stableswap.pool.auth import owner_only
from stableswap.pool.ledger import InMemoryAssetLedger, InMemoryShareLedger
from stableswap.pool.stable_pool import StableSwapPool, unix_now

logger = structlog.get_logger()

# Account that holds pool assets in the in-memory ledger
DEFAULT_POOL_ACCOUNT = "0x" + "50" * 20


@dataclass
class Deployment:
    """An in-memory pool together with its ledgers."""

    pool: StableSwapPool
    asset_ledger: InMemoryAssetLedger
    share_ledger: InMemoryShareLedger
    assets: tuple[AssetSpec, ...]
    network: NetworkConfig


def deploy_in_memory_pool(
    network: NetworkConfig,
    owner: str,
    admin_account: str,
    assets: Sequence[AssetSpec] = REFERENCE_ASSETS,
    pool_account: str = DEFAULT_POOL_ACCOUNT,
    clock: Callable[[], int] = unix_now,
) -> Deployment:
    """Deploy a pool listing `assets` with the parameters of `network`.

    Args:
        network: Fee and amplification preset
        owner: Account allowed to run admin operations
        admin_account: Recipient of the admin share of swap fees
        assets: Assets to list, in pool index order
        pool_account: Ledger account holding the pool's assets
        clock: Pool clock (unix seconds)
    """
    asset_ledger = InMemoryAssetLedger(pool_account)
    share_ledger = InMemoryShareLedger()
    pool = StableSwapPool.create(
        assets=[a.address for a in assets],
        decimals=[a.decimals for a in assets],
        a=network.initial_a,
        swap_fee=network.swap_fee,
        admin_fee=network.admin_fee,
        withdraw_fee=network.withdraw_fee,
        admin_account=admin_account,
        asset_ledger=asset_ledger,
        share_ledger=share_ledger,
        authorize=owner_only(owner),
        clock=clock,
    )
    logger.info(
        "pool_deployed",
        network=network.name,
        assets=[a.symbol for a in assets],
        owner=owner,
    )
    return Deployment(
        pool=pool,
        asset_ledger=asset_ledger,
        share_ledger=share_ledger,
        assets=tuple(assets),
        network=network,
    )
