"""Pydantic records for the persisted pool layout.

Only configuration, fees, the admin account, ramp state and the operating
flag are persisted here. Raw balances and share ownership belong to the
ledger collaborators.
"""

from pydantic import BaseModel, Field

from stableswap.constants import FEE_DENOMINATOR, MAX_SWAP_FEE
from stableswap.models.types import Address


class AssetRecord(BaseModel):
    """One pool asset."""

    address: Address
    decimals: int = Field(ge=0, le=77)


class FeeRecord(BaseModel):
    """Fee configuration (parts-per-1e10)."""

    swap_fee: int = Field(ge=0, le=FEE_DENOMINATOR, alias="swapFee")
    admin_fee: int = Field(ge=0, le=FEE_DENOMINATOR, alias="adminFee")
    withdraw_fee: int = Field(default=0, ge=0, le=FEE_DENOMINATOR, alias="withdrawFee")
    admin_account: Address = Field(alias="adminAccount")

    model_config = {"populate_by_name": True}


class RampRecord(BaseModel):
    """Amplification ramp state, A values pre-multiplied by A_PRECISION."""

    initial_a: int = Field(gt=0, alias="initialA")
    future_a: int = Field(gt=0, alias="futureA")
    initial_a_time: int = Field(default=0, ge=0, alias="initialATime")
    future_a_time: int = Field(default=0, ge=0, alias="futureATime")

    model_config = {"populate_by_name": True}


class PoolStateRecord(BaseModel):
    """Everything the pool core persists."""

    assets: list[AssetRecord] = Field(min_length=2)
    max_swap_fee: int = Field(default=MAX_SWAP_FEE, ge=0, le=FEE_DENOMINATOR, alias="maxSwapFee")
    fees: FeeRecord
    ramp: RampRecord
    paused: bool = False

    model_config = {"populate_by_name": True}
