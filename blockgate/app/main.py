"""
blockgate API
Main application entry point with all routes and middleware.
"""

import os
import logging
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .blockchain import BlockchainClient, BlockchainError, BlockSource, configure_client, get_client
from .config import load_settings
from .routes import blocks, rpc
from .schemas import ErrorResponse, HealthResponse

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Version
VERSION = "1.0.0"

# Create FastAPI app
app = FastAPI(
    title="blockgate",
    description="REST and JSON-RPC gateway for an Ethereum-compatible RPC node",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# =============================================================================
# Middleware
# =============================================================================

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# GZip compression
app.add_middleware(GZipMiddleware, minimum_size=1000)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Keep the {"error": ...} body for errors raised by the router itself."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "method not allowed"
    else:
        message = str(exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="internal server error").model_dump(),
    )


# =============================================================================
# Startup Events
# =============================================================================

@app.on_event("startup")
async def startup_event():
    client = get_client()
    if isinstance(client, BlockchainClient):
        logger.info(f"Forwarding requests to {client.rpc_url}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down blockgate")


# =============================================================================
# Health Endpoint
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["health"])
def health_check(client: BlockSource = Depends(get_client)):
    """
    Health check endpoint.

    Probes the upstream node with eth_blockNumber. An unreachable node
    reports "degraded" instead of failing the request.
    """
    blockchain_status = "ok"

    try:
        client.get_latest_block_number()
    except BlockchainError as e:
        blockchain_status = f"error: {e}"

    return HealthResponse(
        status="ok" if blockchain_status == "ok" else "degraded",
        version=VERSION,
        blockchain=blockchain_status,
        rpcUrl=getattr(client, "rpc_url", ""),
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(blocks.router)
# The JSON-RPC catch-all must stay last
app.include_router(rpc.router)


# =============================================================================
# Server Entry Point
# =============================================================================

def run(argv: Optional[List[str]] = None) -> None:
    """Parse settings and serve the app until interrupted."""
    settings = load_settings(argv)

    logging.getLogger().setLevel(settings.log_level)
    configure_client(settings.rpc_url, timeout=settings.timeout)

    logger.info(f"Starting API server on {settings.addr}")
    # uvicorn exits with status 1 if the address cannot be bound
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
