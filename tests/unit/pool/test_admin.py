"""Tests for admin operations: ramps, fees, admin account and pausing."""

import pytest

from stableswap.constants import A_PRECISION, MIN_RAMP_TIME, ZERO_ADDRESS
from stableswap.errors import (
    FeeOutOfBounds,
    InvalidAdminAccount,
    OperationsSuspended,
    RampAlreadyActive,
    Unauthorized,
)
from tests.helpers import ALICE, BOB, OWNER, fund, units

WEEK = 7 * 86_400


class TestAuthorization:
    """Every admin operation is gated by the authorizer."""

    @pytest.mark.parametrize(
        "operation,args",
        [
            ("start_ramp", (200, 10**12)),
            ("stop_ramp", ()),
            ("set_swap_fee", (1,)),
            ("set_admin_fee", (1,)),
            ("set_withdraw_fee", (1,)),
            ("set_admin_account", ("0x" + "cc" * 20,)),
            ("pause", ()),
            ("resume", ()),
        ],
    )
    def test_non_owner_rejected(self, empty_pool, operation, args):
        with pytest.raises(Unauthorized):
            getattr(empty_pool.pool, operation)(ALICE, *args)


class TestAmplificationAdmin:
    """Tests for start_ramp() and stop_ramp() through the pool."""

    def test_ramp_follows_clock(self, empty_pool):
        pool, clock = empty_pool.pool, empty_pool.clock
        pool.start_ramp(OWNER, 200, clock.now + WEEK)

        assert pool.amplification() == 100 * A_PRECISION
        clock.advance(WEEK // 2)
        assert pool.amplification() == 150 * A_PRECISION
        clock.advance(WEEK)
        assert pool.amplification() == 200 * A_PRECISION

    def test_second_ramp_rejected_while_active(self, empty_pool):
        pool, clock = empty_pool.pool, empty_pool.clock
        pool.start_ramp(OWNER, 200, clock.now + WEEK)
        with pytest.raises(RampAlreadyActive):
            pool.start_ramp(OWNER, 300, clock.now + 2 * WEEK)

    def test_stop_freezes_amplification(self, empty_pool):
        pool, clock = empty_pool.pool, empty_pool.clock
        pool.start_ramp(OWNER, 200, clock.now + WEEK)
        clock.advance(WEEK // 4)
        pool.stop_ramp(OWNER)
        clock.advance(WEEK)
        assert pool.amplification() == 125 * A_PRECISION

    def test_ramp_changes_swap_pricing(self, seeded_pool):
        """Quotes use the A in effect at the time of the call."""
        pool, clock = seeded_pool.pool, seeded_pool.clock
        fund(seeded_pool.assets, BOB, [10**20, 0, 0])
        pool.exchange(BOB, 0, 1, 10**20, 0, seeded_pool.deadline)

        before = pool.get_dy(0, 1, 10**20)
        pool.start_ramp(OWNER, 1000, clock.now + MIN_RAMP_TIME)
        clock.advance(MIN_RAMP_TIME)
        assert pool.get_dy(0, 1, 10**20) > before


class TestFeeAdmin:
    """Tests for fee setters."""

    def test_set_swap_fee(self, empty_pool):
        empty_pool.pool.set_swap_fee(OWNER, 5_000_000)
        assert empty_pool.pool.fees.swap_fee == 5_000_000

    def test_swap_fee_above_max_rejected(self, empty_pool):
        with pytest.raises(FeeOutOfBounds):
            empty_pool.pool.set_swap_fee(OWNER, 11_000_000)
        assert empty_pool.pool.fees.swap_fee == 4_000_000

    def test_admin_fee_above_denominator_rejected(self, empty_pool):
        with pytest.raises(FeeOutOfBounds):
            empty_pool.pool.set_admin_fee(OWNER, 10**10 + 1)

    def test_set_withdraw_fee(self, empty_pool):
        empty_pool.pool.set_withdraw_fee(OWNER, 10**8)
        assert empty_pool.pool.snapshot().withdraw_fee == 10**8

    def test_set_admin_account(self, empty_pool):
        empty_pool.pool.set_admin_account(OWNER, "0x" + "CC" * 20)
        assert empty_pool.pool.fees.admin_account == "0x" + "cc" * 20

    @pytest.mark.parametrize("account", [ZERO_ADDRESS, "0xdead"])
    def test_invalid_admin_account_rejected(self, empty_pool, account):
        before = empty_pool.pool.fees.admin_account
        with pytest.raises(InvalidAdminAccount):
            empty_pool.pool.set_admin_account(OWNER, account)
        assert empty_pool.pool.fees.admin_account == before


class TestPause:
    """Tests for pause() and resume()."""

    def test_paused_pool_rejects_operations(self, seeded_pool):
        pool = seeded_pool.pool
        deadline = seeded_pool.deadline
        pool.pause(OWNER)
        assert pool.paused

        with pytest.raises(OperationsSuspended):
            pool.add_liquidity(ALICE, units([1, 1, 1]), 0, deadline)
        with pytest.raises(OperationsSuspended):
            pool.remove_liquidity(ALICE, 1, [0, 0, 0], deadline)
        with pytest.raises(OperationsSuspended):
            pool.remove_liquidity_one_asset(ALICE, 1, 1, 0, deadline)
        with pytest.raises(OperationsSuspended):
            pool.exchange(ALICE, 0, 1, 1, 0, deadline)

    def test_pause_checked_before_deadline(self, seeded_pool):
        seeded_pool.pool.pause(OWNER)
        with pytest.raises(OperationsSuspended):
            seeded_pool.pool.exchange(ALICE, 0, 1, 1, 0, seeded_pool.clock.now - 1)

    def test_reads_allowed_while_paused(self, seeded_pool):
        seeded_pool.pool.pause(OWNER)
        assert seeded_pool.pool.virtual_price() == 10**18
        assert seeded_pool.pool.snapshot().paused

    def test_resume(self, seeded_pool):
        pool = seeded_pool.pool
        pool.pause(OWNER)
        pool.resume(OWNER)
        fund(seeded_pool.assets, BOB, [10**18, 0, 0])
        assert pool.exchange(BOB, 0, 1, 10**18, 0, seeded_pool.deadline) > 0
