"""Shared account and asset constants for tests.

All addresses are lowercase for consistency with normalize_address().
"""

from stableswap.config import REFERENCE_ASSETS

# Reference assets, in pool index order
DAI = REFERENCE_ASSETS[0].address
USDC = REFERENCE_ASSETS[1].address
USDT = REFERENCE_ASSETS[2].address

ASSETS = (DAI, USDC, USDT)
DECIMALS = (18, 6, 6)

# Accounts
OWNER = "0x" + "0a" * 20
ADMIN = "0x" + "0b" * 20
ALICE = "0x" + "a0" * 20
BOB = "0x" + "b0" * 20
POOL_ACCOUNT = "0x" + "50" * 20

# Pool parameters used by most tests
A = 100
SWAP_FEE = 4_000_000  # 0.04%
ADMIN_FEE = 5_000_000_000  # 50% of the swap fee

# Fixed clock start (2024-01-01T00:00:00Z)
START_TIME = 1_704_067_200
ONE_DAY = 86_400
