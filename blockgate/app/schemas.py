"""
Pydantic schemas for blocks, JSON-RPC envelopes and gateway responses.
"""

from enum import IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


# =============================================================================
# Block Schemas
# =============================================================================

class Block(BaseModel):
    """Block as returned to callers, with a derived transaction count."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    number: StrictStr = Field("", description="Block number (hex)")
    hash: StrictStr = Field("", description="Block hash")
    parent_hash: StrictStr = Field("", alias="parentHash", description="Parent block hash")
    nonce: StrictStr = Field("", description="Block nonce (hex)")
    timestamp: StrictStr = Field("", description="Block timestamp (hex)")
    transactions: Any = Field(None, description="Transaction hashes or transaction objects")
    transaction_count: int = Field(0, alias="transactionCount", description="Number of transactions")

    @field_validator("number", "hash", "parent_hash", "nonce", "timestamp", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        """Nodes send null for some header fields (e.g. pending blocks)."""
        return "" if value is None else value


class BlockNumberResponse(BaseModel):
    """Response for the latest block number endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    block_number: str = Field(..., alias="blockNumber")


class BlockResponse(BaseModel):
    """Response for the block details endpoint."""
    block: Block


class ErrorResponse(BaseModel):
    """Plain error body used by the REST endpoints."""
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    model_config = ConfigDict(populate_by_name=True)

    status: str
    version: str
    blockchain: str
    rpc_url: str = Field(..., alias="rpcUrl")


# =============================================================================
# JSON-RPC Schemas
# =============================================================================

class RPCErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes used by the gateway."""
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class RPCError(Exception):
    """Error that is reported inside a JSON-RPC envelope."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = int(code)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class RPCRequest(BaseModel):
    """Inbound JSON-RPC request envelope."""
    jsonrpc: StrictStr = ""
    method: StrictStr = ""
    params: Optional[List[Any]] = None
    id: StrictInt = 0

    @field_validator("jsonrpc", "method", "id", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info) -> Any:
        if value is None:
            return 0 if info.field_name == "id" else ""
        return value


class RPCErrorBody(BaseModel):
    code: int
    message: str


class RPCResponse(BaseModel):
    """JSON-RPC response envelope carrying exactly one of result or error."""
    jsonrpc: str = "2.0"
    id: int = 0
    result: Any = None
    error: Optional[RPCErrorBody] = None

    @classmethod
    def success(cls, request_id: int, result: Any) -> "RPCResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: int, error: RPCError) -> "RPCResponse":
        return cls(id=request_id, error=RPCErrorBody(**error.to_dict()))

    def to_dict(self) -> dict:
        response = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            response["error"] = self.error.model_dump()
        else:
            response["result"] = self.result
        return response
