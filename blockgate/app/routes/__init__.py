"""
API routes for the blockgate gateway.
"""

from . import blocks
from . import rpc

__all__ = ["blocks", "rpc"]
