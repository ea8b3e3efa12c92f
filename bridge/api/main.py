"""FastAPI application for the bridge proxy.

Note: Access control beyond the operator set (authentication of the
X-Caller header) is not implemented at the application level. It belongs
to the infrastructure in front of the service.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bridge.api.endpoints import router
from bridge.errors import (
    BridgeError,
    ExternalCollaboratorFailure,
    UnauthorizedConfigChange,
)

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("BRIDGE_HOST", "0.0.0.0")
PORT = int(os.environ.get("BRIDGE_PORT", "8000"))
DEBUG = os.environ.get("BRIDGE_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Multichain Bridge Proxy",
    description="Fee-accounting proxy in front of a cross-chain bridge router",
    version="0.1.0",
)

app.include_router(router)


def _status_for(err: BridgeError) -> int:
    if isinstance(err, UnauthorizedConfigChange):
        return 403
    if isinstance(err, ExternalCollaboratorFailure):
        return 502
    return 400


@app.exception_handler(BridgeError)
async def bridge_error_handler(_request: Request, err: BridgeError) -> JSONResponse:
    """Surface bridge errors with their kind so clients can tell them apart."""
    return JSONResponse(
        status_code=_status_for(err),
        content={"error": type(err).__name__, "detail": str(err)},
    )


@app.exception_handler(ValueError)
async def value_error_handler(_request: Request, err: ValueError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "InvalidConfiguration", "detail": str(err)},
    )


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def configure_logging(debug: bool = DEBUG) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
            if not debug
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def run() -> None:
    """Run the bridge proxy API server.

    Configuration via environment variables:
    - BRIDGE_HOST: Host to bind to (default: 0.0.0.0)
    - BRIDGE_PORT: Port to bind to (default: 8000)
    - BRIDGE_DEBUG: Enable debug logging and reload mode (default: false)
    - BRIDGE_FIXED_CRYPTO_FEE, BRIDGE_PLATFORM_TOKEN_FEE, BRIDGE_OPERATORS:
      initial fee settings (see bridge.fees.config.FeeSettings)
    - BRIDGE_SEED_BALANCES, BRIDGE_SWAP_RATES: initial custody balances and
      swap quotes (see bridge.service.SimulationSettings)
    """
    configure_logging()
    uvicorn.run(
        "bridge.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
