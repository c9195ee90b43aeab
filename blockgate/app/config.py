"""
Runtime configuration for the blockgate server.

Every setting can be given as a command-line flag; a non-empty environment
variable overrides the flag.
"""

import argparse
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .blockchain import DEFAULT_TIMEOUT, POLYGON_RPC

DEFAULT_ADDR = ":8080"
DEFAULT_HOST = "0.0.0.0"


@dataclass(frozen=True)
class Settings:
    """Resolved server settings."""
    rpc_url: str = POLYGON_RPC
    addr: str = DEFAULT_ADDR
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @property
    def host(self) -> str:
        return parse_addr(self.addr)[0]

    @property
    def port(self) -> int:
        return parse_addr(self.addr)[1]


def parse_addr(addr: str) -> Tuple[str, int]:
    """
    Split a listen address of the form "[host]:port" or "port".

    Raises:
        ValueError: If the port is missing or not a valid TCP port
    """
    host, sep, port = addr.rpartition(":")
    if not sep:
        host, port = "", addr
    host = host.strip("[]") or DEFAULT_HOST

    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"invalid listen address: {addr!r}")
    if not 0 <= port_number < 65536:
        raise ValueError(f"invalid listen port: {port_number}")

    return host, port_number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockgate",
        description="REST and JSON-RPC gateway for an Ethereum-compatible RPC node",
    )
    parser.add_argument("--rpc", default=POLYGON_RPC, help="Blockchain RPC URL")
    parser.add_argument("--port", default=DEFAULT_ADDR, help="API server address, e.g. :8080")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Upstream RPC timeout in seconds",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def load_settings(argv: Optional[List[str]] = None) -> Settings:
    """Resolve settings from flags, then environment overrides."""
    args = build_parser().parse_args(argv)

    timeout = args.timeout
    env_timeout = os.getenv("BLOCKCHAIN_RPC_TIMEOUT")
    if env_timeout:
        try:
            timeout = float(env_timeout)
        except ValueError:
            raise ValueError(f"invalid BLOCKCHAIN_RPC_TIMEOUT: {env_timeout!r}")

    settings = Settings(
        rpc_url=os.getenv("BLOCKCHAIN_RPC_URL") or args.rpc,
        addr=os.getenv("API_PORT") or args.port,
        timeout=timeout,
        log_level=(os.getenv("LOG_LEVEL") or args.log_level).upper(),
    )
    # Fail at startup rather than at bind time
    parse_addr(settings.addr)
    return settings
