"""
JSON-RPC 2.0 entry point for the blockgate gateway.

Accepts `eth_blockNumber` and `eth_getBlockByNumber` on any path not claimed
by another route and answers them from the upstream node.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.requests import ClientDisconnect

from ..blockchain import BlockchainError, BlockSource, get_client
from ..schemas import RPCError, RPCErrorCode, RPCRequest, RPCResponse
from .blocks import ROUTE_METHODS, error_response, method_not_allowed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["jsonrpc"])

JSONRPC_VERSION = "2.0"


# =============================================================================
# Method Dispatch
# =============================================================================

def eth_block_number(client: BlockSource, params: list) -> Any:
    try:
        return client.get_latest_block_number()
    except BlockchainError as e:
        logger.warning(f"eth_blockNumber failed: {e}")
        raise RPCError(RPCErrorCode.INTERNAL_ERROR, str(e))


def eth_get_block_by_number(client: BlockSource, params: list) -> Any:
    if len(params) < 2:
        raise RPCError(RPCErrorCode.INVALID_PARAMS, "invalid params for eth_getBlockByNumber")

    block_number, full_transactions = params[0], params[1]
    if not isinstance(block_number, str):
        raise RPCError(RPCErrorCode.INVALID_PARAMS, "invalid block number parameter")
    if not isinstance(full_transactions, bool):
        raise RPCError(RPCErrorCode.INVALID_PARAMS, "invalid full transactions parameter")

    try:
        block = client.get_block_by_number(block_number, full_transactions)
    except BlockchainError as e:
        logger.warning(f"eth_getBlockByNumber({block_number}) failed: {e}")
        raise RPCError(RPCErrorCode.INTERNAL_ERROR, str(e))

    return block.model_dump(by_alias=True, mode="json")


METHODS = {
    "eth_blockNumber": eth_block_number,
    "eth_getBlockByNumber": eth_get_block_by_number,
}


def dispatch(rpc_request: RPCRequest, client: BlockSource) -> Any:
    """
    Run a validated request against the client.

    Raises:
        RPCError: If the method is unknown, the params are invalid or the
            upstream call fails
    """
    handler = METHODS.get(rpc_request.method)
    if handler is None:
        raise RPCError(RPCErrorCode.METHOD_NOT_FOUND, "method not found")
    return handler(client, rpc_request.params or [])


# =============================================================================
# Catch-all Endpoint
# =============================================================================

@router.api_route("/{path:path}", methods=ROUTE_METHODS, include_in_schema=False)
async def handle_jsonrpc(
    request: Request,
    client: BlockSource = Depends(get_client),
):
    """Handle a single JSON-RPC request posted to any unclaimed path."""
    if request.method != "POST":
        return method_not_allowed()

    try:
        body = await request.body()
    except ClientDisconnect:
        return error_response("failed to read request body", status.HTTP_400_BAD_REQUEST)

    try:
        rpc_request = RPCRequest.model_validate_json(body)
    except ValidationError:
        return error_response("invalid JSON-RPC request", status.HTTP_400_BAD_REQUEST)

    if rpc_request.jsonrpc != JSONRPC_VERSION:
        error = RPCError(RPCErrorCode.INVALID_REQUEST, "invalid JSON-RPC version, expected 2.0")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=RPCResponse.failure(rpc_request.id, error).to_dict(),
        )

    try:
        result = await run_in_threadpool(dispatch, rpc_request, client)
        response = RPCResponse.success(rpc_request.id, result)
    except RPCError as e:
        response = RPCResponse.failure(rpc_request.id, e)

    return JSONResponse(status_code=status.HTTP_200_OK, content=response.to_dict())
