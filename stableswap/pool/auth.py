"""Authorization collaborators for admin-only pool operations."""

from collections.abc import Callable, Iterable

from stableswap.models.types import normalize_address

# Returns True when `caller` may run admin operations
Authorizer = Callable[[str], bool]


def owner_only(owner: str) -> Authorizer:
    """Allow a single owner account."""
    owner_norm = normalize_address(owner, validate=True)

    def is_authorized(caller: str) -> bool:
        return normalize_address(caller) == owner_norm

    return is_authorized


def any_of(accounts: Iterable[str]) -> Authorizer:
    """Allow any account from a fixed set."""
    allowed = frozenset(normalize_address(a, validate=True) for a in accounts)

    def is_authorized(caller: str) -> bool:
        return normalize_address(caller) in allowed

    return is_authorized
