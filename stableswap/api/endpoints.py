"""API endpoints for the stableswap simulation service."""

import os
from functools import lru_cache

from fastapi import APIRouter, Depends

from stableswap.bootstrap import deploy_in_memory_pool
from stableswap.config import DEFAULT_CHAIN_ID, get_network_config
from stableswap.constants import PRECISION
from stableswap.math.scaling import normalize_balances
from stableswap.math.stable_math import compute_d
from stableswap.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    ExchangeQuoteRequest,
    ExchangeRequest,
    ExchangeResponse,
    PoolStateResponse,
    RemoveLiquidityOneRequest,
    RemoveLiquidityOneResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
)
from stableswap.pool.stable_pool import StableSwapPool

router = APIRouter(prefix="/pool")

# Accounts used by the default in-memory deployment
DEFAULT_OWNER = os.environ.get("STABLESWAP_OWNER", "0x" + "0a" * 20)
DEFAULT_ADMIN_ACCOUNT = os.environ.get("STABLESWAP_ADMIN_ACCOUNT", "0x" + "0b" * 20)


@lru_cache(maxsize=1)
def get_default_pool() -> StableSwapPool:
    """Deploy (once) the in-memory pool for STABLESWAP_CHAIN_ID."""
    network = get_network_config(DEFAULT_CHAIN_ID)
    deployment = deploy_in_memory_pool(network, DEFAULT_OWNER, DEFAULT_ADMIN_ACCOUNT)
    return deployment.pool


def get_pool() -> StableSwapPool:
    """Dependency provider for the pool instance.

    Override this in tests to inject a pool with seeded ledgers:
        app.dependency_overrides[get_pool] = lambda: pool
    """
    return get_default_pool()


@router.get("")
def pool_state(pool: StableSwapPool = Depends(get_pool)) -> PoolStateResponse:
    """Balances, supply, amplification, invariant and fees from one snapshot."""
    snap = pool.snapshot()
    invariant = compute_d(normalize_balances(snap.balances, pool.config.decimals), snap.amp)
    if snap.total_supply == 0:
        virtual_price = PRECISION
    else:
        virtual_price = invariant * PRECISION // snap.total_supply
    return PoolStateResponse(
        assets=list(pool.config.assets),
        decimals=list(pool.config.decimals),
        balances=list(snap.balances),
        total_supply=snap.total_supply,
        amplification=snap.amp,
        invariant=invariant,
        virtual_price=virtual_price,
        swap_fee=snap.swap_fee,
        admin_fee=snap.admin_fee,
        withdraw_fee=snap.withdraw_fee,
        paused=snap.paused,
    )


@router.post("/quote/exchange")
def quote_exchange(
    request: ExchangeQuoteRequest,
    pool: StableSwapPool = Depends(get_pool),
) -> ExchangeResponse:
    return ExchangeResponse(dy=pool.get_dy(request.i, request.j, request.dx))


@router.post("/exchange")
def exchange(request: ExchangeRequest, pool: StableSwapPool = Depends(get_pool)) -> ExchangeResponse:
    dy = pool.exchange(
        request.caller, request.i, request.j, request.dx, request.min_dy, request.deadline
    )
    return ExchangeResponse(dy=dy)


@router.post("/add_liquidity")
def add_liquidity(
    request: AddLiquidityRequest,
    pool: StableSwapPool = Depends(get_pool),
) -> AddLiquidityResponse:
    shares = pool.add_liquidity(
        request.caller, request.amounts, request.min_shares, request.deadline
    )
    return AddLiquidityResponse(shares=shares)


@router.post("/remove_liquidity")
def remove_liquidity(
    request: RemoveLiquidityRequest,
    pool: StableSwapPool = Depends(get_pool),
) -> RemoveLiquidityResponse:
    amounts = pool.remove_liquidity(
        request.caller, request.share_amount, request.min_amounts, request.deadline
    )
    return RemoveLiquidityResponse(amounts=amounts)


@router.post("/remove_liquidity_one")
def remove_liquidity_one(
    request: RemoveLiquidityOneRequest,
    pool: StableSwapPool = Depends(get_pool),
) -> RemoveLiquidityOneResponse:
    amount = pool.remove_liquidity_one_asset(
        request.caller, request.share_amount, request.index, request.min_amount, request.deadline
    )
    return RemoveLiquidityOneResponse(amount=amount)
