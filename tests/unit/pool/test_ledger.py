"""Tests for the in-memory ledger collaborators."""

import pytest

from stableswap.pool.ledger import (
    InMemoryAssetLedger,
    InMemoryShareLedger,
    InsufficientBalance,
    LedgerError,
    TransferBlocked,
)
from tests.helpers import ALICE, DAI, USDC

POOL = "0x" + "50" * 20


class TestInMemoryAssetLedger:
    """Tests for InMemoryAssetLedger."""

    def test_transfer_in_and_out(self):
        ledger = InMemoryAssetLedger(POOL)
        ledger.mint(DAI, ALICE, 100)

        ledger.transfer_in(DAI, ALICE, 60)
        assert ledger.balance_of(DAI, ALICE) == 40
        assert ledger.balance_of(DAI, POOL) == 60

        ledger.transfer_out(DAI, ALICE, 10)
        assert ledger.balance_of(DAI, ALICE) == 50
        assert ledger.balance_of(DAI, POOL) == 50

    def test_assets_are_independent(self):
        ledger = InMemoryAssetLedger(POOL)
        ledger.mint(DAI, ALICE, 100)
        assert ledger.balance_of(USDC, ALICE) == 0

    def test_insufficient_balance_raises(self):
        ledger = InMemoryAssetLedger(POOL)
        ledger.mint(DAI, ALICE, 5)
        with pytest.raises(InsufficientBalance):
            ledger.transfer_in(DAI, ALICE, 6)

    def test_blocked_account_cannot_send_or_receive(self):
        ledger = InMemoryAssetLedger(POOL)
        ledger.mint(DAI, ALICE, 100)
        ledger.mint(DAI, POOL, 100)
        ledger.block(DAI, ALICE)

        with pytest.raises(TransferBlocked):
            ledger.transfer_in(DAI, ALICE, 10)
        with pytest.raises(TransferBlocked):
            ledger.transfer_out(DAI, ALICE, 10)
        assert ledger.balance_of(DAI, ALICE) == 100
        assert ledger.balance_of(DAI, POOL) == 100

    def test_block_is_per_asset(self):
        ledger = InMemoryAssetLedger(POOL)
        ledger.mint(USDC, ALICE, 100)
        ledger.block(DAI, ALICE)
        ledger.transfer_in(USDC, ALICE, 10)
        assert ledger.balance_of(USDC, POOL) == 10
        assert ledger.balance_of(DAI, ALICE) == 5

    def test_negative_transfer_raises(self):
        ledger = InMemoryAssetLedger(POOL)
        with pytest.raises(LedgerError):
            ledger.transfer_out(DAI, ALICE, -1)

    def test_addresses_are_case_insensitive(self):
        ledger = InMemoryAssetLedger(POOL)
        ledger.mint(DAI.upper().replace("0X", "0x"), ALICE, 7)
        assert ledger.balance_of(DAI, ALICE.upper().replace("0X", "0x")) == 7

    def test_transfer_fee_reduces_credit(self):
        """A fee-on-transfer asset debits the full amount but credits less."""
        ledger = InMemoryAssetLedger(POOL, transfer_fee_bps={DAI: 100})
        ledger.mint(DAI, ALICE, 10_000)
        ledger.transfer_in(DAI, ALICE, 10_000)
        assert ledger.balance_of(DAI, ALICE) == 0
        assert ledger.balance_of(DAI, POOL) == 9_900

    def test_hooks_run_after_transfer(self):
        ledger = InMemoryAssetLedger(POOL)
        ledger.mint(DAI, ALICE, 100)
        seen = []

        def hook(direction, asset, counterparty, amount):
            seen.append((direction, asset, counterparty, amount, ledger.balance_of(DAI, POOL)))

        ledger.add_hook(hook)
        ledger.transfer_in(DAI, ALICE, 30)
        ledger.transfer_out(DAI, ALICE, 10)

        assert seen == [("in", DAI, ALICE, 30, 30), ("out", DAI, ALICE, 10, 20)]


class TestInMemoryShareLedger:
    """Tests for InMemoryShareLedger."""

    def test_mint_and_burn(self):
        ledger = InMemoryShareLedger()
        ledger.mint(ALICE, 100)
        ledger.burn(ALICE, 40)
        assert ledger.balance_of(ALICE) == 60
        assert ledger.total_supply() == 60

    def test_burn_above_balance_raises(self):
        ledger = InMemoryShareLedger()
        ledger.mint(ALICE, 10)
        with pytest.raises(InsufficientBalance):
            ledger.burn(ALICE, 11)
        assert ledger.total_supply() == 10

    def test_negative_mint_raises(self):
        with pytest.raises(LedgerError):
            InMemoryShareLedger().mint(ALICE, -1)
