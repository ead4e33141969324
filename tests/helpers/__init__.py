"""Test helpers module for shared test utilities.

- constants: Asset addresses, accounts and default pool parameters
- factories: Fake clock and pool factory functions
"""

from tests.helpers.constants import (
    ADMIN,
    ALICE,
    ASSETS,
    BOB,
    DAI,
    DECIMALS,
    OWNER,
    START_TIME,
    USDC,
    USDT,
)
from tests.helpers.factories import FakeClock, balances_of, fund, make_pool, units

__all__ = [
    # Constants
    "DAI",
    "USDC",
    "USDT",
    "ASSETS",
    "DECIMALS",
    "OWNER",
    "ADMIN",
    "ALICE",
    "BOB",
    "START_TIME",
    # Factories
    "FakeClock",
    "make_pool",
    "fund",
    "balances_of",
    "units",
]
