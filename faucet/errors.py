"""
The Faucet Errors

Every error here aborts the unit of work it is raised in: the host undoes
every write the unit made and re-raises.
"""

from typing import Any, Dict, Optional


# Error codes (JSON-RPC server error range)
CODE_EXECUTION = -32000
CODE_REVERT = -32001
CODE_OUT_OF_GAS = -32002
CODE_INSUFFICIENT_BALANCE = -32003

CODE_UNAUTHORIZED = -32010
CODE_INVALID_INPUT = -32011
CODE_QUOTA_EXCEEDED = -32012
CODE_POOL_EXHAUSTED = -32013
CODE_VALUE_OUT_OF_RANGE = -32014
CODE_PROXY_CALL_FAILED = -32015


class ExecutionError(Exception):
    """Base exception for anything that reverts an operation."""

    code = CODE_EXECUTION
    default_message = "execution reverted"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert to error object."""
        error = {"code": self.code, "message": self.message}
        if self.details:
            error["data"] = self.details
        return error


# ==============================================================================
# Host errors
# ==============================================================================

class Revert(ExecutionError):
    """A hosted contract explicitly reverted."""
    code = CODE_REVERT


class OutOfGas(ExecutionError):
    """Gas allotment exhausted."""
    code = CODE_OUT_OF_GAS
    default_message = "out of gas"


class InsufficientBalance(ExecutionError):
    """Native value transfer exceeds the sender balance."""
    code = CODE_INSUFFICIENT_BALANCE
    default_message = "insufficient balance"


# ==============================================================================
# Faucet errors
# ==============================================================================

class FaucetError(ExecutionError):
    """Base exception for faucet operation failures."""


class Unauthorized(FaucetError):
    """Caller lacks the required capability."""
    code = CODE_UNAUTHORIZED
    default_message = "access denied"


class InvalidInput(FaucetError):
    """Null address, zero value or empty list argument."""
    code = CODE_INVALID_INPUT
    default_message = "invalid input"


class QuotaExceeded(FaucetError):
    """Requested amount exceeds the caller's epoch allowance."""
    code = CODE_QUOTA_EXCEEDED
    default_message = "allowance exceeded"


class PoolExhausted(FaucetError):
    """Requested amount exceeds the pool balance."""
    code = CODE_POOL_EXHAUSTED
    default_message = "balance exceeded"


class ValueOutOfRange(FaucetError):
    """Amount does not fit into the fixed bit width."""
    code = CODE_VALUE_OUT_OF_RANGE
    default_message = "value out-of-bounds"


class ProxyCallFailed(FaucetError):
    """External mint invocation did not report success."""
    code = CODE_PROXY_CALL_FAILED
    default_message = "mint failed"
