"""Stableswap pool state and operations.

StableSwapPool owns configuration, fee and amplification state and
orchestrates every operation: normalize balances, resolve the effective A,
solve, apply fees, then hand value movement to the ledger collaborators.

Concurrency model:
- One lock per pool. Every mutating operation and every snapshot runs
  inside it, so reads never observe half-applied state.
- Re-entering the pool from the thread that holds the lock (e.g. from a
  ledger transfer hook) raises ReentrantCall instead of deadlocking.
- Ledger transfers are suspension points: balances are re-queried after
  each inbound transfer instead of trusting the pre-transfer snapshot.
- Payouts are all or nothing: if an outbound transfer fails, completed
  legs are pulled back and burned shares re-minted before the error
  propagates.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from stableswap.constants import PRECISION
from stableswap.errors import (
    DeadlineExceeded,
    InitialDepositIncomplete,
    InsufficientOutput,
    InsufficientShares,
    InvalidAssetIndex,
    InvalidInputLength,
    NoLiquidity,
    OperationsSuspended,
    ReentrantCall,
    Unauthorized,
)
from stableswap.math.scaling import normalize_balances
from stableswap.math.stable_math import compute_d
from stableswap.models.state import AssetRecord, FeeRecord, PoolStateRecord, RampRecord
from stableswap.models.types import normalize_address
from stableswap.pool.auth import Authorizer
from stableswap.pool.config import (
    FeeConfig,
    PoolConfig,
    check_admin_account,
    check_fraction,
    check_swap_fee,
)
from stableswap.pool.ledger import AssetLedger, LedgerError, ShareLedger
from stableswap.pool.liquidity import (
    calc_token_amount,
    compute_deposit,
    compute_withdraw_one,
    compute_withdraw_proportional,
)
from stableswap.pool.ramp import AmplificationRamp
from stableswap.pool.swap import quote_exchange

logger = structlog.get_logger()


def unix_now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class PoolSnapshot:
    """Consistent view of the pool at a single instant."""

    balances: tuple[int, ...]
    total_supply: int
    amp: int
    swap_fee: int
    admin_fee: int
    withdraw_fee: int
    paused: bool
    timestamp: int


class StableSwapPool:
    """Multi-asset stableswap pool.

    Amounts are raw integers in each asset's native decimals. Fee fractions
    are parts-per-1e10 and A values are scaled by A_PRECISION.
    """

    def __init__(
        self,
        config: PoolConfig,
        fees: FeeConfig,
        ramp: AmplificationRamp,
        asset_ledger: AssetLedger,
        share_ledger: ShareLedger,
        authorize: Authorizer,
        clock: Callable[[], int] = unix_now,
        paused: bool = False,
    ) -> None:
        """Initialize the pool.

        Args:
            config: Immutable pool configuration
            fees: Fee configuration, mutated only through admin operations
            ramp: Amplification state
            asset_ledger: Collaborator holding raw balances
            share_ledger: Collaborator holding liquidity shares
            authorize: Admin authorization check
            clock: Returns the current unix time in seconds
            paused: Initial operating flag
        """
        self.config = config
        self.fees = fees
        self.ramp = ramp
        self._assets = asset_ledger
        self._shares = share_ledger
        self._authorize = authorize
        self._clock = clock
        self._paused = paused
        self._lock = threading.Lock()
        self._active_thread: int | None = None

    @classmethod
    def create(
        cls,
        assets: Sequence[str],
        decimals: Sequence[int],
        a: int,
        swap_fee: int,
        admin_fee: int,
        admin_account: str,
        asset_ledger: AssetLedger,
        share_ledger: ShareLedger,
        authorize: Authorizer,
        withdraw_fee: int = 0,
        clock: Callable[[], int] = unix_now,
    ) -> StableSwapPool:
        """Create a pool from human-facing parameters (A unscaled)."""
        config = PoolConfig(
            assets=tuple(normalize_address(asset, validate=True) for asset in assets),
            decimals=tuple(decimals),
        )
        fees = FeeConfig(
            swap_fee=swap_fee,
            admin_fee=admin_fee,
            withdraw_fee=withdraw_fee,
            admin_account=admin_account,
            max_swap_fee=config.max_swap_fee,
        )
        pool = cls(
            config=config,
            fees=fees,
            ramp=AmplificationRamp.constant(a),
            asset_ledger=asset_ledger,
            share_ledger=share_ledger,
            authorize=authorize,
            clock=clock,
        )
        logger.info(
            "pool_created",
            assets=list(config.assets),
            decimals=list(config.decimals),
            a=a,
            swap_fee=swap_fee,
            admin_fee=admin_fee,
        )
        return pool

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    @contextmanager
    def _critical_section(self, operation: str) -> Iterator[None]:
        if self._active_thread == threading.get_ident():
            raise ReentrantCall(f"{operation} entered while another pool operation is in flight")
        with self._lock:
            self._active_thread = threading.get_ident()
            try:
                yield
            finally:
                self._active_thread = None

    def _now(self) -> int:
        return int(self._clock())

    def _require_operating(self, deadline: int) -> None:
        if self._paused:
            raise OperationsSuspended("Pool is paused")
        now = self._now()
        if now > deadline:
            raise DeadlineExceeded(f"Deadline {deadline} passed (now {now})")

    def _require_admin(self, caller: str) -> None:
        if not self._authorize(caller):
            raise Unauthorized(f"{caller} is not allowed to administer this pool")

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.config.n_coins:
            raise InvalidAssetIndex(
                f"Asset index {index} out of range for {self.config.n_coins} assets"
            )

    def _check_length(self, name: str, values: Sequence[int]) -> None:
        if len(values) != self.config.n_coins:
            raise InvalidInputLength(
                f"{name} has {len(values)} entries, pool has {self.config.n_coins} assets"
            )
        if any(v < 0 for v in values):
            raise ValueError(f"{name} must be non-negative")

    def _require_liquidity(self, total_supply: int) -> None:
        if total_supply == 0:
            raise NoLiquidity("Pool has no liquidity to trade against")

    def _raw_balances(self) -> list[int]:
        pool_account = self._assets.pool_account
        return [self._assets.balance_of(asset, pool_account) for asset in self.config.assets]

    def _pay_out(self, payments: Sequence[tuple[str, str, int]]) -> None:
        """Send every (asset, recipient, amount) payment, or none of them.

        Raises:
            LedgerError: From the failed transfer, after completed legs are
                pulled back from their recipients
        """
        completed: list[tuple[str, str, int]] = []
        try:
            for asset, recipient, amount in payments:
                if amount > 0:
                    self._assets.transfer_out(asset, recipient, amount)
                    completed.append((asset, recipient, amount))
        except LedgerError:
            for asset, recipient, amount in reversed(completed):
                self._assets.transfer_in(asset, recipient, amount)
            raise

    # -------------------------------------------------------------------------
    # Read-only queries
    # -------------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self._paused

    def snapshot(self) -> PoolSnapshot:
        """Capture balances, supply, amplification and fees at one instant."""
        with self._critical_section("snapshot"):
            return self._snapshot_locked()

    def _snapshot_locked(self) -> PoolSnapshot:
        now = self._now()
        return PoolSnapshot(
            balances=tuple(self._raw_balances()),
            total_supply=self._shares.total_supply(),
            amp=self.ramp.effective_a(now),
            swap_fee=self.fees.swap_fee,
            admin_fee=self.fees.admin_fee,
            withdraw_fee=self.fees.withdraw_fee,
            paused=self._paused,
            timestamp=now,
        )

    def amplification(self) -> int:
        """Effective A, scaled by A_PRECISION."""
        return self.snapshot().amp

    def invariant(self) -> int:
        """Invariant D of the current normalized balances."""
        snap = self.snapshot()
        return compute_d(normalize_balances(snap.balances, self.config.decimals), snap.amp)

    def virtual_price(self) -> int:
        """Value of one share in 18-decimal units (PRECISION when supply is zero)."""
        snap = self.snapshot()
        if snap.total_supply == 0:
            return PRECISION
        d = compute_d(normalize_balances(snap.balances, self.config.decimals), snap.amp)
        return d * PRECISION // snap.total_supply

    def get_dy(self, i: int, j: int, dx: int) -> int:
        """Quote the net output of exchanging dx of asset i for asset j.

        Raises:
            NoLiquidity: If the pool has no shares outstanding
        """
        self._check_index(i)
        self._check_index(j)
        snap = self.snapshot()
        self._require_liquidity(snap.total_supply)
        quote = quote_exchange(
            i, j, dx, snap.balances, self.config.decimals, snap.amp, snap.swap_fee, snap.admin_fee
        )
        return quote.dy

    def calc_token_amount(self, amounts: Sequence[int], is_deposit: bool) -> int:
        """Quote shares minted or burned for a deposit or withdrawal of raw amounts."""
        self._check_length("amounts", amounts)
        snap = self.snapshot()
        return calc_token_amount(
            snap.balances, amounts, self.config.decimals, snap.amp, snap.total_supply, is_deposit
        )

    def calc_withdraw_one(self, share_amount: int, index: int) -> int:
        """Quote the single-asset payout for burning share_amount."""
        self._check_index(index)
        snap = self.snapshot()
        quote = compute_withdraw_one(
            snap.balances,
            self.config.decimals,
            snap.amp,
            share_amount,
            snap.total_supply,
            index,
            snap.withdraw_fee,
        )
        return quote.amount

    # -------------------------------------------------------------------------
    # Liquidity
    # -------------------------------------------------------------------------

    def add_liquidity(
        self,
        caller: str,
        amounts: Sequence[int],
        min_shares: int,
        deadline: int,
    ) -> int:
        """Deposit raw amounts and mint liquidity shares to caller.

        The mint is projected from the requested amounts and checked against
        min_shares before any transfer. After the transfers the balances are
        re-queried and the mint is recomputed from what actually arrived.

        Returns:
            Shares minted

        Raises:
            InsufficientShares: If the mint is zero or below min_shares
            InitialDepositIncomplete: If an empty pool is not funded in every asset
        """
        with self._critical_section("add_liquidity"):
            self._require_operating(deadline)
            self._check_length("amounts", amounts)

            decimals = self.config.decimals
            amp = self.ramp.effective_a(self._now())
            total_supply = self._shares.total_supply()
            if total_supply == 0 and any(a == 0 for a in amounts):
                raise InitialDepositIncomplete("Initial deposit must include every asset")

            old_balances = self._raw_balances()
            projected = compute_deposit(
                old_balances,
                [b + a for b, a in zip(old_balances, amounts, strict=True)],
                decimals,
                amp,
                total_supply,
                self.fees.withdraw_fee,
            )
            _check_mint(projected.shares, min_shares)

            for asset, amount in zip(self.config.assets, amounts, strict=True):
                if amount > 0:
                    self._assets.transfer_in(asset, caller, amount)

            new_balances = self._raw_balances()
            deposit = compute_deposit(
                old_balances,
                new_balances,
                decimals,
                amp,
                total_supply,
                self.fees.withdraw_fee,
            )
            try:
                _check_mint(deposit.shares, min_shares)
            except InsufficientShares:
                logger.warning(
                    "deposit_stranded",
                    caller=caller,
                    amounts=list(amounts),
                    received=[n - o for n, o in zip(new_balances, old_balances, strict=True)],
                    shares=deposit.shares,
                    min_shares=min_shares,
                )
                raise

            self._shares.mint(caller, deposit.shares)

            logger.info(
                "liquidity_added",
                caller=caller,
                amounts=list(amounts),
                fees=list(deposit.fees),
                invariant_before=deposit.d0,
                invariant_after=deposit.d1,
                shares=deposit.shares,
                total_supply=total_supply + deposit.shares,
            )
            return deposit.shares

    def remove_liquidity(
        self,
        caller: str,
        share_amount: int,
        min_amounts: Sequence[int],
        deadline: int,
    ) -> list[int]:
        """Burn shares for a proportional slice of every asset.

        Returns:
            Raw amounts paid out per asset

        Raises:
            InsufficientOutput: If any amount is below its minimum
            InsufficientShares: If share_amount exceeds the supply
            LedgerError: If a payout fails; burned shares are re-minted first
        """
        with self._critical_section("remove_liquidity"):
            self._require_operating(deadline)
            self._check_length("min_amounts", min_amounts)

            total_supply = self._shares.total_supply()
            amounts = compute_withdraw_proportional(
                self._raw_balances(), share_amount, total_supply
            )
            for index, (amount, minimum) in enumerate(zip(amounts, min_amounts, strict=True)):
                if amount < minimum:
                    raise InsufficientOutput(
                        f"Asset {index}: withdrawal {amount} below minimum {minimum}"
                    )

            self._shares.burn(caller, share_amount)
            try:
                self._pay_out(
                    [
                        (asset, caller, amount)
                        for asset, amount in zip(self.config.assets, amounts, strict=True)
                    ]
                )
            except LedgerError as e:
                self._shares.mint(caller, share_amount)
                logger.warning(
                    "withdrawal_reverted", caller=caller, shares=share_amount, error=str(e)
                )
                raise

            logger.info(
                "liquidity_removed",
                caller=caller,
                shares=share_amount,
                amounts=amounts,
                total_supply=total_supply - share_amount,
            )
            return amounts

    def remove_liquidity_one_asset(
        self,
        caller: str,
        share_amount: int,
        index: int,
        min_amount: int,
        deadline: int,
    ) -> int:
        """Burn shares for a payout in a single asset.

        Returns:
            Raw amount of asset `index` paid out

        Raises:
            InsufficientOutput: If the payout is below min_amount
            InvalidAssetIndex: If index is out of range or is the solver's held slot
            LedgerError: If the payout fails; burned shares are re-minted first
        """
        with self._critical_section("remove_liquidity_one_asset"):
            self._require_operating(deadline)
            self._check_index(index)

            total_supply = self._shares.total_supply()
            quote = compute_withdraw_one(
                self._raw_balances(),
                self.config.decimals,
                self.ramp.effective_a(self._now()),
                share_amount,
                total_supply,
                index,
                self.fees.withdraw_fee,
            )
            if quote.amount < min_amount:
                raise InsufficientOutput(f"Withdrawal {quote.amount} below minimum {min_amount}")

            self._shares.burn(caller, share_amount)
            try:
                self._pay_out([(self.config.assets[index], caller, quote.amount)])
            except LedgerError as e:
                self._shares.mint(caller, share_amount)
                logger.warning(
                    "withdrawal_reverted", caller=caller, shares=share_amount, error=str(e)
                )
                raise

            logger.info(
                "liquidity_removed_one",
                caller=caller,
                shares=share_amount,
                index=index,
                amount=quote.amount,
                fee=quote.fee,
                total_supply=total_supply - share_amount,
            )
            return quote.amount

    # -------------------------------------------------------------------------
    # Swaps
    # -------------------------------------------------------------------------

    def exchange(
        self,
        caller: str,
        i: int,
        j: int,
        dx: int,
        min_dy: int,
        deadline: int,
    ) -> int:
        """Swap dx of asset i for asset j.

        The slippage guard runs on a pre-transfer quote before any asset moves,
        and again on the quote recomputed from the amount actually received.

        Returns:
            Net amount of asset j sent to caller

        Raises:
            InvalidAssetIndex: If i == j or an index is out of range
            InsufficientOutput: If the net output is below min_dy
            NoLiquidity: If the pool has no shares outstanding
            LedgerError: If a payout fails; the received input is returned first
        """
        with self._critical_section("exchange"):
            self._require_operating(deadline)
            self._check_index(i)
            self._check_index(j)
            if i == j:
                raise InvalidAssetIndex("Cannot swap an asset with itself")
            if dx < 0:
                raise ValueError("dx must be non-negative")

            self._require_liquidity(self._shares.total_supply())

            decimals = self.config.decimals
            amp = self.ramp.effective_a(self._now())
            swap_fee = self.fees.swap_fee
            admin_fee = self.fees.admin_fee

            old_balances = self._raw_balances()
            projected = quote_exchange(i, j, dx, old_balances, decimals, amp, swap_fee, admin_fee)
            _check_output(projected.dy, min_dy)

            self._assets.transfer_in(self.config.assets[i], caller, dx)

            balances = self._raw_balances()
            received = max(0, balances[i] - old_balances[i])
            balances[i] -= received
            quote = quote_exchange(i, j, received, balances, decimals, amp, swap_fee, admin_fee)
            try:
                _check_output(quote.dy, min_dy)
            except InsufficientOutput:
                logger.warning(
                    "swap_stranded",
                    caller=caller,
                    i=i,
                    j=j,
                    dx=dx,
                    received=received,
                    dy=quote.dy,
                    min_dy=min_dy,
                )
                raise

            asset_out = self.config.assets[j]
            try:
                self._pay_out(
                    [
                        (asset_out, caller, quote.dy),
                        (asset_out, self.fees.admin_account, quote.admin_fee),
                    ]
                )
            except LedgerError as e:
                # Return what arrived so pool balances match the pre-swap state
                if received > 0:
                    self._assets.transfer_out(self.config.assets[i], caller, received)
                logger.warning("swap_reverted", caller=caller, i=i, j=j, dx=dx, error=str(e))
                raise

            logger.info(
                "token_exchange",
                caller=caller,
                i=i,
                j=j,
                dx=received,
                dy=quote.dy,
                fee=quote.dy_fee,
                admin_fee=quote.admin_fee,
            )
            return quote.dy

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    def start_ramp(self, caller: str, target_a: int, end_time: int) -> None:
        """Ramp A (human-facing) linearly until end_time."""
        with self._critical_section("start_ramp"):
            self._require_admin(caller)
            self.ramp.start(target_a, end_time, self._now())

    def stop_ramp(self, caller: str) -> None:
        """Freeze A at its current effective value."""
        with self._critical_section("stop_ramp"):
            self._require_admin(caller)
            self.ramp.stop(self._now())

    def set_swap_fee(self, caller: str, fee: int) -> None:
        with self._critical_section("set_swap_fee"):
            self._require_admin(caller)
            check_swap_fee(fee, self.config.max_swap_fee)
            self.fees.swap_fee = fee
            logger.info("swap_fee_updated", fee=fee)

    def set_admin_fee(self, caller: str, fee: int) -> None:
        with self._critical_section("set_admin_fee"):
            self._require_admin(caller)
            check_fraction("admin_fee", fee)
            self.fees.admin_fee = fee
            logger.info("admin_fee_updated", fee=fee)

    def set_withdraw_fee(self, caller: str, fee: int) -> None:
        with self._critical_section("set_withdraw_fee"):
            self._require_admin(caller)
            check_fraction("withdraw_fee", fee)
            self.fees.withdraw_fee = fee
            logger.info("withdraw_fee_updated", fee=fee)

    def set_admin_account(self, caller: str, account: str) -> None:
        with self._critical_section("set_admin_account"):
            self._require_admin(caller)
            self.fees.admin_account = check_admin_account(account)
            logger.info("admin_account_updated", account=self.fees.admin_account)

    def pause(self, caller: str) -> None:
        with self._critical_section("pause"):
            self._require_admin(caller)
            self._paused = True
            logger.info("pool_paused", caller=caller)

    def resume(self, caller: str) -> None:
        with self._critical_section("resume"):
            self._require_admin(caller)
            self._paused = False
            logger.info("pool_resumed", caller=caller)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def export_state(self) -> PoolStateRecord:
        """Dump configuration, fees, ramp state and the operating flag."""
        with self._critical_section("export_state"):
            return PoolStateRecord(
                assets=[
                    AssetRecord(address=a, decimals=d)
                    for a, d in zip(self.config.assets, self.config.decimals, strict=True)
                ],
                max_swap_fee=self.config.max_swap_fee,
                fees=FeeRecord(
                    swap_fee=self.fees.swap_fee,
                    admin_fee=self.fees.admin_fee,
                    withdraw_fee=self.fees.withdraw_fee,
                    admin_account=self.fees.admin_account,
                ),
                ramp=RampRecord(
                    initial_a=self.ramp.initial_a,
                    future_a=self.ramp.future_a,
                    initial_a_time=self.ramp.initial_a_time,
                    future_a_time=self.ramp.future_a_time,
                ),
                paused=self._paused,
            )

    @classmethod
    def from_state(
        cls,
        record: PoolStateRecord,
        asset_ledger: AssetLedger,
        share_ledger: ShareLedger,
        authorize: Authorizer,
        clock: Callable[[], int] = unix_now,
    ) -> StableSwapPool:
        """Rebuild a pool from a persisted record."""
        config = PoolConfig(
            assets=tuple(normalize_address(a.address) for a in record.assets),
            decimals=tuple(a.decimals for a in record.assets),
            max_swap_fee=record.max_swap_fee,
        )
        fees = FeeConfig(
            swap_fee=record.fees.swap_fee,
            admin_fee=record.fees.admin_fee,
            withdraw_fee=record.fees.withdraw_fee,
            admin_account=record.fees.admin_account,
            max_swap_fee=config.max_swap_fee,
        )
        ramp = AmplificationRamp(
            initial_a=record.ramp.initial_a,
            future_a=record.ramp.future_a,
            initial_a_time=record.ramp.initial_a_time,
            future_a_time=record.ramp.future_a_time,
        )
        return cls(
            config=config,
            fees=fees,
            ramp=ramp,
            asset_ledger=asset_ledger,
            share_ledger=share_ledger,
            authorize=authorize,
            clock=clock,
            paused=record.paused,
        )


def _check_mint(shares: int, min_shares: int) -> None:
    if shares == 0:
        raise InsufficientShares("Deposit would mint no shares")
    if shares < min_shares:
        raise InsufficientShares(f"Minted {shares} shares, below minimum {min_shares}")


def _check_output(dy: int, min_dy: int) -> None:
    if dy < min_dy:
        raise InsufficientOutput(f"Output {dy} below minimum {min_dy}")
