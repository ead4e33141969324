"""Deployment parameter presets, keyed by chain id.

Environment overrides:
- STABLESWAP_CHAIN_ID: which preset the API service deploys (default: 1337)
"""

import os

from pydantic import BaseModel, Field

from stableswap.constants import FEE_DENOMINATOR, MAX_A, MAX_SWAP_FEE


class AssetSpec(BaseModel):
    """An asset to list in a freshly deployed pool."""

    symbol: str
    address: str = Field(pattern=r"^0x[a-fA-F0-9]{40}$")
    decimals: int = Field(ge=0, le=77)


class NetworkConfig(BaseModel):
    """Pool parameters for one network."""

    name: str
    initial_a: int = Field(gt=0, lt=MAX_A, alias="initialA")
    swap_fee: int = Field(ge=0, le=MAX_SWAP_FEE, alias="swapFee")
    admin_fee: int = Field(ge=0, le=FEE_DENOMINATOR, alias="adminFee")
    withdraw_fee: int = Field(default=0, ge=0, le=FEE_DENOMINATOR, alias="withdrawFee")

    model_config = {"populate_by_name": True}


# Mock DAI / USDC / USDT listed by development deployments
REFERENCE_ASSETS: tuple[AssetSpec, ...] = (
    AssetSpec(symbol="DAI", address="0x" + "d1" * 20, decimals=18),
    AssetSpec(symbol="USDC", address="0x" + "c1" * 20, decimals=6),
    AssetSpec(symbol="USDT", address="0x" + "a1" * 20, decimals=6),
)

NETWORK_CONFIG: dict[int, NetworkConfig] = {
    1337: NetworkConfig(
        name="localhost",
        initial_a=100,
        swap_fee=4_000_000,  # 0.04%
        admin_fee=5_000_000_000,  # 50% of the swap fee
        withdraw_fee=0,
    ),
    11155111: NetworkConfig(
        name="sepolia",
        initial_a=100,
        swap_fee=4_000_000,
        admin_fee=5_000_000_000,
        withdraw_fee=0,
    ),
}

DEVELOPMENT_CHAINS = frozenset({"hardhat", "localhost"})

DEFAULT_CHAIN_ID = int(os.environ.get("STABLESWAP_CHAIN_ID", "1337"))


def get_network_config(chain_id: int) -> NetworkConfig:
    """Look up the preset for chain_id.

    Raises:
        KeyError: If no preset exists for chain_id
    """
    try:
        return NETWORK_CONFIG[chain_id]
    except KeyError:
        raise KeyError(
            f"No network config for chain id {chain_id} (known: {sorted(NETWORK_CONFIG)})"
        ) from None
