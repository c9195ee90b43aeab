"""
REST block routes for the blockgate gateway.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..blockchain import BlockchainError, BlockSource, get_client
from ..schemas import BlockNumberResponse, BlockResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blocks", tags=["blocks"])

# Routes answer every method themselves so that a wrong method gets a 405
# here instead of falling through to the JSON-RPC catch-all.
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def error_response(message: str, status_code: int) -> JSONResponse:
    """Create a plain {"error": message} response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def method_not_allowed() -> JSONResponse:
    return error_response("method not allowed", status.HTTP_405_METHOD_NOT_ALLOWED)


def first_query_value(request: Request, key: str) -> str:
    """First value of a repeated query parameter, or "" when absent."""
    values = request.query_params.getlist(key)
    return values[0] if values else ""


# =============================================================================
# Block Endpoints
# =============================================================================

@router.api_route("/latest", methods=ROUTE_METHODS, response_model=BlockNumberResponse)
def get_latest_block_number(
    request: Request,
    client: BlockSource = Depends(get_client),
):
    """Get the latest block number as a hex string."""
    if request.method != "GET":
        return method_not_allowed()

    try:
        block_number = client.get_latest_block_number()
    except BlockchainError as e:
        logger.warning(f"Failed to get latest block number: {e}")
        return error_response(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=BlockNumberResponse(blockNumber=block_number).model_dump(by_alias=True),
    )


@router.api_route("", methods=ROUTE_METHODS, response_model=BlockResponse)
def get_block_by_number(
    request: Request,
    client: BlockSource = Depends(get_client),
):
    """
    Get block details by number.

    - **number**: Block number in hex, or a tag such as `latest` (required)
    - **full**: `true` to include full transaction objects; anything else means hashes only
    """
    if request.method != "GET":
        return method_not_allowed()

    block_number = first_query_value(request, "number")
    if not block_number:
        return error_response("block number is required", status.HTTP_400_BAD_REQUEST)

    # Only the exact literal enables full transactions
    full_transactions = first_query_value(request, "full") == "true"

    try:
        block = client.get_block_by_number(block_number, full_transactions)
    except BlockchainError as e:
        logger.warning(f"Failed to get block {block_number}: {e}")
        return error_response(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=BlockResponse(block=block).model_dump(by_alias=True, mode="json"),
    )
