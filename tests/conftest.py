"""Pytest configuration and fixtures."""

from dataclasses import dataclass

import pytest

from stableswap.pool import InMemoryAssetLedger, InMemoryShareLedger, StableSwapPool
from tests.helpers import ALICE, FakeClock, fund, make_pool, units

# Whole units of every asset in the seeded pool
SEED_AMOUNT = 1000


@dataclass
class PoolFixture:
    """A pool together with its ledgers and clock."""

    pool: StableSwapPool
    assets: InMemoryAssetLedger
    shares: InMemoryShareLedger
    clock: FakeClock

    @property
    def deadline(self) -> int:
        return self.clock.now + 3600


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def empty_pool(clock: FakeClock) -> PoolFixture:
    """DAI/USDC/USDT pool (A=100, 0.04% fee, 50% admin fee) with no liquidity."""
    pool, assets, shares = make_pool(clock=clock)
    return PoolFixture(pool=pool, assets=assets, shares=shares, clock=clock)


@pytest.fixture
def seeded_pool(empty_pool: PoolFixture) -> PoolFixture:
    """The empty pool after ALICE deposits 1000 of every asset."""
    amounts = units([SEED_AMOUNT] * 3)
    fund(empty_pool.assets, ALICE, amounts)
    empty_pool.pool.add_liquidity(ALICE, amounts, 0, empty_pool.deadline)
    return empty_pool
