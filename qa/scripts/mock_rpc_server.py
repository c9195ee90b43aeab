from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

# Stub upstream node for local runs:
#   uvicorn qa.scripts.mock_rpc_server:app --port 8545
#   blockgate --rpc http://127.0.0.1:8545 --port :8080

app = FastAPI()

LATEST_BLOCK = "0x1234567"
TX_HASHES = ["0xtx1", "0xtx2", "0xtx3"]


class RPCRequest(BaseModel):
    jsonrpc: str
    method: str
    params: list | dict | None = None
    id: int | str | None = None


def make_block(number: str, full: bool) -> dict:
    if full:
        transactions = [
            {"hash": tx_hash, "from": "0xaddr1", "to": "0xaddr2", "value": "0x0"}
            for tx_hash in TX_HASHES
        ]
    else:
        transactions = list(TX_HASHES)
    return {
        "number": LATEST_BLOCK if number == "latest" else number,
        "hash": "0xabcdef1234567890",
        "parentHash": "0x1234567890abcdef",
        "nonce": "0x0000000000000000",
        "timestamp": "0x60123456",
        "transactions": transactions,
    }


@app.post("/")
def rpc(req: RPCRequest):
    # Return canned responses based on method
    if req.method == "eth_blockNumber":
        return JSONResponse({"jsonrpc": "2.0", "id": req.id, "result": LATEST_BLOCK})
    if req.method == "eth_getBlockByNumber" and isinstance(req.params, list) and len(req.params) == 2:
        number, full = req.params
        return JSONResponse({"jsonrpc": "2.0", "id": req.id, "result": make_block(number, bool(full))})
    return JSONResponse({
        "jsonrpc": "2.0",
        "id": req.id,
        "error": {"code": -32601, "message": f"the method {req.method} does not exist/is not available"},
    })
