"""
Blockchain integration for the blockgate gateway.
Issues JSON-RPC calls against the upstream node and decodes the results.
"""

import os
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from .schemas import Block

logger = logging.getLogger(__name__)

POLYGON_RPC = "https://polygon-rpc.com/"
DEFAULT_TIMEOUT = 30.0

# Upstream correlation id; the node echoes it back and nothing here depends on it.
RPC_REQUEST_ID = 2


# =============================================================================
# Exceptions
# =============================================================================

class BlockchainError(Exception):
    """Base blockchain error."""
    pass


class TransportError(BlockchainError):
    """Upstream could not be reached or answered with a non-200 status."""
    pass


class DecodeError(BlockchainError):
    """Upstream response could not be decoded."""
    pass


class UpstreamRPCError(BlockchainError):
    """Upstream node returned a JSON-RPC error object."""

    def __init__(self, code: int, message: str):
        super().__init__(f"RPC error: {message} (code: {code})")
        self.code = code
        self.message = message


# =============================================================================
# Block Source Interface
# =============================================================================

class BlockSource(ABC):
    """Read-only block queries the gateway needs from a chain."""

    @abstractmethod
    def get_latest_block_number(self) -> str:
        """Return the latest block number as the node's hex string."""

    @abstractmethod
    def get_block_by_number(self, block_number: str, full_transactions: bool) -> Block:
        """Return the block identified by a hex number or tag such as "latest"."""


# =============================================================================
# RPC Client
# =============================================================================

def count_transactions(transactions: Any, full_transactions: bool) -> int:
    """
    Count the entries of a block's transaction payload.

    Full mode expects an array of objects, hash mode an array of strings.
    A payload of any other shape counts as zero.
    """
    if transactions is None:
        return 0
    if not isinstance(transactions, list):
        logger.debug(f"Transaction payload is {type(transactions).__name__}, counting as 0")
        return 0
    if not full_transactions and not all(isinstance(tx, str) for tx in transactions):
        logger.debug("Transaction payload is not a list of hashes, counting as 0")
        return 0
    return len(transactions)


class BlockchainClient(BlockSource):
    """
    JSON-RPC client for the upstream node.

    Every call is a single HTTP POST; failures surface immediately.
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize blockchain client.

        Args:
            rpc_url: RPC endpoint URL
            timeout: Seconds to wait for the upstream node
            session: HTTP session to reuse (one is created if omitted)
        """
        self.rpc_url = rpc_url or os.getenv("BLOCKCHAIN_RPC_URL") or POLYGON_RPC
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self.session = session or requests.Session()

    def call(self, method: str, params: Optional[List] = None) -> Any:
        """Make JSON-RPC call and return the raw result."""
        payload: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "id": RPC_REQUEST_ID,
        }
        if params:
            payload["params"] = params

        try:
            response = self.session.post(
                self.rpc_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"failed to send request: {e}") from e

        if response.status_code != 200:
            raise TransportError(f"unexpected status code: {response.status_code}")

        try:
            envelope = response.json()
        except ValueError as e:
            raise DecodeError(f"failed to unmarshal response: {e}") from e

        if not isinstance(envelope, dict):
            raise DecodeError("failed to unmarshal response: expected a JSON object")

        error = envelope.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise DecodeError("failed to unmarshal response: malformed error object")
            raise UpstreamRPCError(error.get("code", 0), error.get("message", ""))

        return envelope.get("result")

    def get_latest_block_number(self) -> str:
        """Get latest block number, passed through as a hex string."""
        result = self.call("eth_blockNumber")
        if not isinstance(result, str):
            raise DecodeError("failed to unmarshal block number: result is not a string")
        return result

    def get_block_by_number(self, block_number: str, full_transactions: bool) -> Block:
        """Get block details with its transaction count."""
        result = self.call("eth_getBlockByNumber", [block_number, full_transactions])
        if result is None:
            # Unknown block: nodes answer null, which decodes to an empty block
            logger.debug(f"Block {block_number} not found upstream, returning empty block")
            return Block()
        if not isinstance(result, dict):
            raise DecodeError("failed to unmarshal block: result is not an object")

        tx_count = count_transactions(result.get("transactions"), full_transactions)
        try:
            return Block.model_validate({**result, "transactionCount": tx_count})
        except ValueError as e:
            raise DecodeError(f"failed to unmarshal block: {e}") from e


# =============================================================================
# Module-level functions for convenience
# =============================================================================

# Global client instance
_client: Optional[BlockSource] = None


def get_client() -> BlockSource:
    """Get global blockchain client instance."""
    global _client
    if _client is None:
        timeout = os.getenv("BLOCKCHAIN_RPC_TIMEOUT")
        _client = BlockchainClient(timeout=float(timeout) if timeout else None)
    return _client


def configure_client(rpc_url: str, timeout: Optional[float] = None) -> BlockSource:
    """Install the global client for the given upstream."""
    global _client
    _client = BlockchainClient(rpc_url=rpc_url, timeout=timeout)
    logger.info(f"Blockchain client connecting to {rpc_url}")
    return _client
