"""
Shared upstream payloads for blockgate tests.
"""

RPC_URL = "https://rpc.example.com"

TX_HASHES = ["0xtx1", "0xtx2"]
TX_OBJECTS = [
    {"hash": "0xtx1", "from": "0xaddr1", "to": "0xaddr2"},
    {"hash": "0xtx2", "from": "0xaddr3", "to": "0xaddr4"},
    {"hash": "0xtx3", "from": "0xaddr5", "to": "0xaddr6"},
]


def upstream_block(transactions, number="0x1234567"):
    """Block object the way an upstream node returns it."""
    return {
        "number": number,
        "hash": "0xabcdef1234567890",
        "parentHash": "0x1234567890abcdef",
        "nonce": "0x123456",
        "timestamp": "0x60123456",
        "miner": "0x0000000000000000000000000000000000000000",
        "transactions": transactions,
    }


def rpc_result(result, request_id=2):
    return {"jsonrpc": "2.0", "id": request_id, "result": result}
