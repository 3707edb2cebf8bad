"""
The Faucet JSON-RPC API
"""

from faucet.api.methods import (
    RPCError,
    METHOD_REGISTRY,
    get_method,
    list_methods,
    handle_request,
)

__all__ = [
    "RPCError",
    "METHOD_REGISTRY",
    "get_method",
    "list_methods",
    "handle_request",
]
