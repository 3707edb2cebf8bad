"""
The Faucet Access Control
"""

from faucet.access.gate import (
    AccessGate,
    ExecutionContext,
    InMemoryAccessGate,
    evaluate_by,
)

__all__ = [
    "AccessGate",
    "ExecutionContext",
    "InMemoryAccessGate",
    "evaluate_by",
]
