"""FastAPI application for the stableswap simulation service.

Serves one in-memory pool. Authentication is not implemented here: the
`caller` field of each request is trusted, which is only suitable for
simulation.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stableswap.api.endpoints import router
from stableswap.errors import (
    OperationsSuspended,
    ReentrantCall,
    StableSwapError,
    Unauthorized,
)
from stableswap.models.api import ErrorResponse
from stableswap.pool.ledger import LedgerError
from stableswap.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("STABLESWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("STABLESWAP_PORT", "8000"))
DEBUG = os.environ.get("STABLESWAP_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="StableSwap Engine",
    description="Simulation service for a multi-asset stableswap pool",
    version="0.1.0",
)

app.include_router(router)


def _status_for(exc: Exception) -> int:
    if isinstance(exc, Unauthorized):
        return 403
    if isinstance(exc, ReentrantCall | OperationsSuspended):
        return 409
    return 400


def _error_response(exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=_status_for(exc), content=body.model_dump())


@app.exception_handler(StableSwapError)
async def pool_error_handler(request: Request, exc: StableSwapError) -> JSONResponse:
    logger.info("pool_operation_rejected", path=request.url.path, error=type(exc).__name__)
    return _error_response(exc)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    logger.info("ledger_operation_rejected", path=request.url.path, error=type(exc).__name__)
    return _error_response(exc)


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    logger.warning("pool_arithmetic_error", path=request.url.path, error=str(exc))
    return _error_response(exc)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - STABLESWAP_HOST: Host to bind to (default: 0.0.0.0)
    - STABLESWAP_PORT: Port to bind to (default: 8000)
    - STABLESWAP_DEBUG: Enable reload mode (default: false)
    - STABLESWAP_CHAIN_ID: Network preset for the served pool (default: 1337)
    """
    uvicorn.run(
        "stableswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
