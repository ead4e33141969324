"""Stableswap pool error classes.

Every validation failure raises one of these before any pool state is
mutated. Arithmetic faults surface separately as SafeIntError and ledger
failures as LedgerError.
"""


class StableSwapError(Exception):
    """Base error for stableswap pool operations."""

    pass


class DeadlineExceeded(StableSwapError):
    """The caller's deadline is earlier than the pool clock."""

    pass


class InvalidAssetIndex(StableSwapError):
    """Asset index out of range, or the same index on both sides."""

    pass


class InvalidInputLength(StableSwapError):
    """Per-asset vector does not match the pool's asset count."""

    pass


class InsufficientOutput(StableSwapError):
    """Slippage guard tripped: output below the caller's minimum."""

    pass


class InsufficientShares(StableSwapError):
    """Share amount rejected: mint below minimum, nothing to mint, or burn above supply."""

    pass


class InitialDepositIncomplete(StableSwapError):
    """The first deposit into an empty pool must fund every asset."""

    pass


class NoLiquidity(StableSwapError):
    """The pool holds no liquidity to trade against."""

    pass


class RampAlreadyActive(StableSwapError):
    """A new ramp cannot start before the previous one ends."""

    pass


class RampWindowTooShort(StableSwapError):
    """Ramp end time is less than MIN_RAMP_TIME in the future."""

    pass


class InvalidAmplificationTarget(StableSwapError):
    """Target A must satisfy 0 < A < MAX_A."""

    pass


class FeeOutOfBounds(StableSwapError):
    """Fee above its configured maximum."""

    pass


class OperationsSuspended(StableSwapError):
    """The pool is paused."""

    pass


class Unauthorized(StableSwapError):
    """Caller is not allowed to perform an admin operation."""

    pass


class InvalidAdminAccount(StableSwapError):
    """Admin account must be a non-zero address."""

    pass


class InvalidPoolConfig(StableSwapError):
    """Pool configuration rejected at creation."""

    pass


class ReentrantCall(StableSwapError):
    """A pool operation was entered while another is still in flight on this thread."""

    pass
