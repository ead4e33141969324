"""Ledger collaborators.

The pool never owns raw balances or share ownership. It reads them and
requests movements through these interfaces. Every single transfer is atomic:
it either completes or raises LedgerError before the pool observes anything.

In-memory implementations are provided for tests, the simulation API and the
bootstrap script.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Protocol

import structlog

from stableswap.models.types import normalize_address

logger = structlog.get_logger()

# (direction, asset, counterparty, amount) where direction is "in" or "out"
TransferHook = Callable[[str, str, str, int], None]


class LedgerError(Exception):
    """Base error raised by ledger collaborators."""

    pass


class InsufficientBalance(LedgerError):
    """Account balance too low for the requested transfer or burn."""

    pass


class TransferBlocked(LedgerError):
    """The asset refuses to move funds to or from a frozen account."""

    pass


class AssetLedger(Protocol):
    """Protocol for the external value-transfer ledger.

    Transfers may run foreign code (hooks), so callers must treat every call
    as a suspension point and re-query balances afterwards.
    """

    @property
    def pool_account(self) -> str:
        """Account that holds the pool's assets."""
        ...

    def balance_of(self, asset: str, account: str) -> int:
        """Raw balance of `account` in `asset`, in native decimals."""
        ...

    def transfer_in(self, asset: str, sender: str, amount: int) -> None:
        """Move `amount` of `asset` from `sender` into the pool account."""
        ...

    def transfer_out(self, asset: str, recipient: str, amount: int) -> None:
        """Move `amount` of `asset` from the pool account to `recipient`."""
        ...


class ShareLedger(Protocol):
    """Protocol for the liquidity share ledger."""

    def total_supply(self) -> int: ...

    def balance_of(self, holder: str) -> int: ...

    def mint(self, holder: str, amount: int) -> None: ...

    def burn(self, holder: str, amount: int) -> None:
        """Burn shares from `holder`.

        Raises:
            InsufficientBalance: If holder owns fewer than `amount` shares
        """
        ...


class InMemoryAssetLedger:
    """Dict-backed AssetLedger.

    Supports transfer hooks (called after each pool transfer, like token
    receive callbacks), a per-asset transfer fee in basis points to model
    assets that deliver less than the requested amount, and frozen accounts
    that an asset refuses to transfer for.
    """

    def __init__(self, pool_account: str, transfer_fee_bps: dict[str, int] | None = None) -> None:
        self._pool_account = normalize_address(pool_account)
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        self._transfer_fee_bps = {
            normalize_address(k): v for k, v in (transfer_fee_bps or {}).items()
        }
        self._hooks: list[TransferHook] = []
        self._blocked: set[tuple[str, str]] = set()
        self._lock = threading.Lock()

    @property
    def pool_account(self) -> str:
        return self._pool_account

    def add_hook(self, hook: TransferHook) -> None:
        self._hooks.append(hook)

    def block(self, asset: str, account: str) -> None:
        """Freeze `account` in `asset`: transfers to or from it raise TransferBlocked."""
        with self._lock:
            self._blocked.add((normalize_address(asset), normalize_address(account)))

    def mint(self, asset: str, account: str, amount: int) -> None:
        """Credit `account` out of thin air (test and bootstrap helper)."""
        with self._lock:
            self._balances[(normalize_address(asset), normalize_address(account))] += amount

    def balance_of(self, asset: str, account: str) -> int:
        with self._lock:
            return self._balances[(normalize_address(asset), normalize_address(account))]

    def transfer_in(self, asset: str, sender: str, amount: int) -> None:
        asset = normalize_address(asset)
        sender = normalize_address(sender)
        fee = amount * self._transfer_fee_bps.get(asset, 0) // 10_000
        self._move(asset, sender, self._pool_account, amount, amount - fee)
        self._run_hooks("in", asset, sender, amount)

    def transfer_out(self, asset: str, recipient: str, amount: int) -> None:
        asset = normalize_address(asset)
        recipient = normalize_address(recipient)
        self._move(asset, self._pool_account, recipient, amount, amount)
        self._run_hooks("out", asset, recipient, amount)

    def _move(self, asset: str, src: str, dst: str, debit: int, credit: int) -> None:
        if debit < 0:
            raise LedgerError(f"Negative transfer amount: {debit}")
        with self._lock:
            for account in (src, dst):
                if (asset, account) in self._blocked:
                    raise TransferBlocked(f"{account} is frozen in {asset}")
            available = self._balances[(asset, src)]
            if available < debit:
                raise InsufficientBalance(
                    f"{src} holds {available} of {asset}, cannot transfer {debit}"
                )
            self._balances[(asset, src)] = available - debit
            self._balances[(asset, dst)] += credit

    def _run_hooks(self, direction: str, asset: str, counterparty: str, amount: int) -> None:
        for hook in self._hooks:
            hook(direction, asset, counterparty, amount)


class InMemoryShareLedger:
    """Dict-backed ShareLedger."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = defaultdict(int)
        self._total_supply = 0
        self._lock = threading.Lock()

    def total_supply(self) -> int:
        with self._lock:
            return self._total_supply

    def balance_of(self, holder: str) -> int:
        with self._lock:
            return self._balances[normalize_address(holder)]

    def mint(self, holder: str, amount: int) -> None:
        if amount < 0:
            raise LedgerError(f"Negative mint amount: {amount}")
        with self._lock:
            self._balances[normalize_address(holder)] += amount
            self._total_supply += amount

    def burn(self, holder: str, amount: int) -> None:
        holder = normalize_address(holder)
        if amount < 0:
            raise LedgerError(f"Negative burn amount: {amount}")
        with self._lock:
            available = self._balances[holder]
            if available < amount:
                raise InsufficientBalance(f"{holder} holds {available} shares, cannot burn {amount}")
            self._balances[holder] = available - amount
            self._total_supply -= amount
