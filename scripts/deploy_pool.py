#!/usr/bin/env python3
"""Deploy an in-memory stableswap pool and optionally seed it.

Usage:
    python scripts/deploy_pool.py
    python scripts/deploy_pool.py --seed 10000 --swap 100
    python scripts/deploy_pool.py --chain-id 11155111
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from stableswap.bootstrap import deploy_in_memory_pool  # noqa: E402
from stableswap.config import DEVELOPMENT_CHAINS, NETWORK_CONFIG, get_network_config  # noqa: E402
from stableswap.constants import A_PRECISION, FEE_DENOMINATOR, PRECISION  # noqa: E402
from stableswap.errors import StableSwapError  # noqa: E402
from stableswap.pool.stable_pool import unix_now  # noqa: E402

logger = structlog.get_logger()

DEPLOYER = "0x" + "de" * 20
ADMIN = "0x" + "ad" * 20


def _percent(fee: int) -> str:
    return f"{fee * 100 / FEE_DENOMINATOR:g}%"


def main() -> int:
    parser = argparse.ArgumentParser(description="Deploy an in-memory stableswap pool")
    parser.add_argument(
        "--chain-id",
        type=int,
        default=1337,
        help=f"Network preset to use (known: {sorted(NETWORK_CONFIG)})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed the pool with this many whole units of every asset",
    )
    parser.add_argument(
        "--swap",
        type=int,
        default=0,
        help="After seeding, swap this many whole units of asset 0 for asset 1",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    try:
        network = get_network_config(args.chain_id)
    except KeyError as e:
        logger.error("unknown_chain_id", chain_id=args.chain_id)
        print(f"Error: {e}")
        return 1

    if (args.seed or args.swap) and network.name not in DEVELOPMENT_CHAINS:
        logger.error("mock_minting_unavailable", network=network.name)
        print(f"Error: --seed and --swap mint mock assets, only on {sorted(DEVELOPMENT_CHAINS)}")
        return 1

    deployment = deploy_in_memory_pool(network, owner=DEPLOYER, admin_account=ADMIN)
    pool = deployment.pool
    deadline = unix_now() + 3600

    try:
        if args.seed > 0:
            amounts = [args.seed * 10**a.decimals for a in deployment.assets]
            for asset, amount in zip(deployment.assets, amounts, strict=True):
                deployment.asset_ledger.mint(asset.address, DEPLOYER, amount)
            pool.add_liquidity(DEPLOYER, amounts, 0, deadline)

        if args.swap > 0:
            dx = args.swap * 10 ** deployment.assets[0].decimals
            deployment.asset_ledger.mint(deployment.assets[0].address, DEPLOYER, dx)
            pool.exchange(DEPLOYER, 0, 1, dx, 0, deadline)
    except StableSwapError as e:
        logger.error("bootstrap_failed", error=type(e).__name__, detail=str(e))
        return 1

    print("=" * 60)
    print(f"StableSwap pool deployed on {network.name} (chain {args.chain_id})")
    print("=" * 60)
    snap = pool.snapshot()
    for index, (asset, balance) in enumerate(zip(deployment.assets, snap.balances, strict=True)):
        print(f"  [{index}] {asset.symbol:<5} {asset.address}  balance={balance}")
    print(f"\nAmplification (A): {pool.amplification() // A_PRECISION}")
    print(f"Swap fee:          {_percent(pool.fees.swap_fee)}")
    print(f"Admin fee:         {_percent(pool.fees.admin_fee)} of swap fee")
    print(f"Invariant (D):     {pool.invariant()}")
    print(f"Virtual price:     {pool.virtual_price() / PRECISION:.18f}")
    print(f"LP supply:         {deployment.share_ledger.total_supply()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
