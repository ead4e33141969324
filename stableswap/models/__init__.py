"""Pydantic models for persisted pool state and the HTTP API."""

from stableswap.models.state import AssetRecord, FeeRecord, PoolStateRecord, RampRecord
from stableswap.models.types import Address, Uint256, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "normalize_address",
    "AssetRecord",
    "FeeRecord",
    "RampRecord",
    "PoolStateRecord",
]
