"""Request and response models for the pool HTTP API."""

from pydantic import BaseModel, Field

from stableswap.models.types import Address, Uint256


class PoolStateResponse(BaseModel):
    """Read-only view of the pool at one instant."""

    assets: list[Address]
    decimals: list[int]
    balances: list[Uint256]
    total_supply: Uint256 = Field(alias="totalSupply")
    amplification: int
    invariant: Uint256
    virtual_price: Uint256 = Field(alias="virtualPrice")
    swap_fee: int = Field(alias="swapFee")
    admin_fee: int = Field(alias="adminFee")
    withdraw_fee: int = Field(alias="withdrawFee")
    paused: bool

    model_config = {"populate_by_name": True}


class ExchangeQuoteRequest(BaseModel):
    i: int = Field(ge=0)
    j: int = Field(ge=0)
    dx: Uint256


class ExchangeRequest(BaseModel):
    """Swap dx of asset i for at least min_dy of asset j."""

    caller: Address
    i: int = Field(ge=0)
    j: int = Field(ge=0)
    dx: Uint256
    min_dy: Uint256 = Field(alias="minDy")
    deadline: int

    model_config = {"populate_by_name": True}


class ExchangeResponse(BaseModel):
    dy: Uint256


class AddLiquidityRequest(BaseModel):
    caller: Address
    amounts: list[Uint256]
    min_shares: Uint256 = Field(alias="minShares")
    deadline: int

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    shares: Uint256


class RemoveLiquidityRequest(BaseModel):
    caller: Address
    share_amount: Uint256 = Field(alias="shareAmount")
    min_amounts: list[Uint256] = Field(alias="minAmounts")
    deadline: int

    model_config = {"populate_by_name": True}


class RemoveLiquidityResponse(BaseModel):
    amounts: list[Uint256]


class RemoveLiquidityOneRequest(BaseModel):
    caller: Address
    share_amount: Uint256 = Field(alias="shareAmount")
    index: int = Field(ge=0)
    min_amount: Uint256 = Field(alias="minAmount")
    deadline: int

    model_config = {"populate_by_name": True}


class RemoveLiquidityOneResponse(BaseModel):
    amount: Uint256


class ErrorResponse(BaseModel):
    """Body returned for rejected pool operations."""

    error: str
    detail: str
