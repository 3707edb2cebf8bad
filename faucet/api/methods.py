"""
The Faucet JSON-RPC Methods

All RPC methods exposed by the faucet node. Mutating methods take the
calling address as their first parameter.
"""

from __future__ import annotations
import inspect
import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from faucet.core.types import Address, Roles
from faucet.errors import ExecutionError

if TYPE_CHECKING:
    from faucet.contract import TheFaucet

logger = logging.getLogger(__name__)


class RPCError(Exception):
    """RPC error with code and message."""
    def __init__(self, code: int, message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(message)

    def to_dict(self) -> dict:
        error = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


# Error codes
ERROR_PARSE = -32700
ERROR_INVALID_REQUEST = -32600
ERROR_METHOD_NOT_FOUND = -32601
ERROR_INVALID_PARAMS = -32602
ERROR_INTERNAL = -32603


def parse_address(value: Any) -> Address:
    """Parse a hex address parameter."""
    if not isinstance(value, str):
        raise RPCError(ERROR_INVALID_PARAMS, f"Invalid address: {value!r}")
    try:
        return Address.from_hex(value)
    except ValueError:
        raise RPCError(ERROR_INVALID_PARAMS, f"Invalid address: {value}")


def parse_amount(value: Any) -> int:
    """Parse an unsigned amount given as int, decimal string or 0x-hex string."""
    if isinstance(value, bool):
        raise RPCError(ERROR_INVALID_PARAMS, f"Invalid amount: {value!r}")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        try:
            amount = int(value, 16) if value.startswith("0x") else int(value)
        except ValueError:
            raise RPCError(ERROR_INVALID_PARAMS, f"Invalid amount: {value}")
    else:
        raise RPCError(ERROR_INVALID_PARAMS, f"Invalid amount: {value!r}")

    if amount < 0:
        raise RPCError(ERROR_INVALID_PARAMS, f"Negative amount: {value}")
    return amount


def parse_role(value: Any) -> Roles:
    try:
        return Roles(parse_amount(value))
    except ValueError:
        raise RPCError(ERROR_INVALID_PARAMS, f"Role bitmask out of range: {value}")


def parse_address_list(value: Any) -> List[Address]:
    if not isinstance(value, list):
        raise RPCError(ERROR_INVALID_PARAMS, "Expected a list of addresses")
    return [parse_address(item) for item in value]


def _receipt(faucet: "TheFaucet", first_event: int, result: Any = None) -> dict:
    """Describe a successful mutation with the events it produced."""
    events = faucet.chain.events()[first_event:]
    return {
        "success": True,
        "result": result,
        "events": [entry.to_dict() for entry in events],
    }


# ==============================================================================
# Config Methods
# ==============================================================================

async def get_epoch_length(faucet: "TheFaucet") -> int:
    """
    Get epoch length.

    Returns:
        Epoch length in seconds
    """
    return faucet.epoch_length()


async def get_limit_per_epoch(faucet: "TheFaucet") -> int:
    """
    Get default limit per epoch.

    Returns:
        Limit applying to users without override
    """
    return faucet.limit_per_epoch()


async def get_limit_override(faucet: "TheFaucet", user: str) -> int:
    return faucet.get_limit_override(parse_address(user))


async def get_state(faucet: "TheFaucet") -> dict:
    """
    Get full faucet state.

    Returns:
        Epoch config, overrides and withdrawal stats
    """
    state = faucet.state.to_dict()
    state["address"] = faucet.address.checksum()
    state["poolBalance"] = faucet.pool_balance()
    state["features"] = hex(faucet.features().bits)
    return state


# ==============================================================================
# Allowance Methods
# ==============================================================================

async def get_effective_limit(faucet: "TheFaucet", user: str) -> int:
    """
    Get limit per epoch for a user.

    Args:
        user: User address (hex)

    Returns:
        Override if set, default limit otherwise
    """
    return faucet.get_effective_limit(parse_address(user))


async def get_withdrawn_in_epoch(faucet: "TheFaucet", user: str) -> int:
    return faucet.get_withdrawn_in_epoch(parse_address(user))


async def get_remaining_allowance(faucet: "TheFaucet", user: str) -> int:
    """
    Get amount a user may still withdraw in the current epoch.

    Args:
        user: User address (hex)

    Returns:
        Remaining allowance
    """
    return faucet.get_remaining_allowance(parse_address(user))


async def get_withdrawal_stats(faucet: "TheFaucet", user: str) -> dict:
    return faucet.get_withdrawal_stats(parse_address(user)).to_dict()


async def get_throttle_stats(faucet: "TheFaucet") -> dict:
    return faucet.throttle.get_stats(faucet.chain.now())


# ==============================================================================
# Pool Methods
# ==============================================================================

async def get_pool_balance(faucet: "TheFaucet") -> int:
    return faucet.pool_balance()


async def fund(faucet: "TheFaucet", sender: str, amount: Any) -> dict:
    """
    Transfer value from `sender` into the pool.

    Args:
        sender: Funding address (hex)
        amount: Amount to transfer

    Returns:
        Receipt with the new pool balance
    """
    first = faucet.chain.event_count
    faucet.receive(parse_address(sender), parse_amount(amount))
    return _receipt(faucet, first, faucet.pool_balance())


async def withdraw(faucet: "TheFaucet", sender: str, to: str, amount: Any) -> dict:
    """
    Withdraw from the pool.

    Args:
        sender: Faucet user (hex)
        to: Recipient (hex)
        amount: Amount to withdraw

    Returns:
        Receipt with emitted events
    """
    first = faucet.chain.event_count
    faucet.withdraw(parse_address(sender), parse_address(to), parse_amount(amount))
    return _receipt(faucet, first)


async def mint(faucet: "TheFaucet", sender: str, target: str, to: str, value: Any) -> dict:
    """
    Proxy a mint request to a mintable contract.

    Returns:
        Receipt with gas used by the target
    """
    first = faucet.chain.event_count
    result = faucet.mint(
        parse_address(sender),
        parse_address(target),
        parse_address(to),
        parse_amount(value),
    )
    return _receipt(faucet, first, {"gasUsed": result.gas_used})


# ==============================================================================
# Admin Methods
# ==============================================================================

async def set_epoch_params(faucet: "TheFaucet", sender: str, epoch_length: Any, limit: Any) -> dict:
    first = faucet.chain.event_count
    faucet.set_epoch_params(parse_address(sender), parse_amount(epoch_length), parse_amount(limit))
    return _receipt(faucet, first)


async def set_user_limit_override(faucet: "TheFaucet", sender: str, user: str, limit: Any) -> dict:
    first = faucet.chain.event_count
    faucet.set_user_limit_override(parse_address(sender), parse_address(user), parse_amount(limit))
    return _receipt(faucet, first)


async def add_users(faucet: "TheFaucet", sender: str, users: List[str]) -> dict:
    """
    Grant the faucet user role to a list of addresses.

    Returns:
        Receipt with one RoleUpdated event per address
    """
    first = faucet.chain.event_count
    faucet.add_users(parse_address(sender), parse_address_list(users))
    return _receipt(faucet, first)


async def remove_users(faucet: "TheFaucet", sender: str, users: List[str]) -> dict:
    first = faucet.chain.event_count
    faucet.remove_users(parse_address(sender), parse_address_list(users))
    return _receipt(faucet, first)


# ==============================================================================
# Access Control Methods
# ==============================================================================

async def get_role(faucet: "TheFaucet", address: str) -> str:
    return hex(faucet.get_role(parse_address(address)).bits)


async def get_features(faucet: "TheFaucet") -> str:
    return hex(faucet.features().bits)


async def update_role(faucet: "TheFaucet", sender: str, operator: str, role: Any) -> dict:
    first = faucet.chain.event_count
    assigned = faucet.update_role(parse_address(sender), parse_address(operator), parse_role(role))
    return _receipt(faucet, first, hex(assigned.bits))


async def update_features(faucet: "TheFaucet", sender: str, role: Any) -> dict:
    first = faucet.chain.event_count
    assigned = faucet.update_features(parse_address(sender), parse_role(role))
    return _receipt(faucet, first, hex(assigned.bits))


# ==============================================================================
# Event Methods
# ==============================================================================

async def get_events(faucet: "TheFaucet", name: Optional[str] = None) -> List[dict]:
    """
    Get events emitted by the faucet.

    Args:
        name: Only events with this name (optional)

    Returns:
        Event list, oldest first
    """
    return [entry.to_dict() for entry in faucet.chain.events(emitter=faucet.address, name=name)]


# ==============================================================================
# Method Registry
# ==============================================================================

METHOD_REGISTRY = {
    # Config
    "faucet_epochLength": get_epoch_length,
    "faucet_limitPerEpoch": get_limit_per_epoch,
    "faucet_limitOverride": get_limit_override,
    "faucet_state": get_state,

    # Allowance
    "faucet_effectiveLimit": get_effective_limit,
    "faucet_withdrawnInEpoch": get_withdrawn_in_epoch,
    "faucet_remainingAllowance": get_remaining_allowance,
    "faucet_withdrawalStats": get_withdrawal_stats,
    "faucet_throttleStats": get_throttle_stats,

    # Pool
    "faucet_poolBalance": get_pool_balance,
    "faucet_fund": fund,
    "faucet_withdraw": withdraw,
    "faucet_mint": mint,

    # Admin
    "faucet_setEpochParams": set_epoch_params,
    "faucet_setUserLimitOverride": set_user_limit_override,
    "faucet_addUsers": add_users,
    "faucet_removeUsers": remove_users,

    # Access control
    "faucet_getRole": get_role,
    "faucet_features": get_features,
    "faucet_updateRole": update_role,
    "faucet_updateFeatures": update_features,

    # Events
    "faucet_events": get_events,
}


def get_method(name: str):
    """Get method by name."""
    return METHOD_REGISTRY.get(name)


def list_methods() -> List[str]:
    """List all available methods."""
    return list(METHOD_REGISTRY.keys())


async def handle_request(faucet: "TheFaucet", request: Any) -> Dict[str, Any]:
    """
    Dispatch a single JSON-RPC 2.0 request.

    Faucet failures are returned as error objects carrying the faucet
    error code; the faucet state is unaffected by a failed request.
    """
    request_id = request.get("id") if isinstance(request, dict) else None

    try:
        if not isinstance(request, dict) or not isinstance(request.get("method"), str):
            raise RPCError(ERROR_INVALID_REQUEST, "Invalid request")

        method = get_method(request["method"])
        if method is None:
            raise RPCError(ERROR_METHOD_NOT_FOUND, f"Method not found: {request['method']}")

        params = request.get("params", [])
        try:
            if isinstance(params, dict):
                inspect.signature(method).bind(faucet, **params)
            elif isinstance(params, list):
                inspect.signature(method).bind(faucet, *params)
            else:
                raise RPCError(ERROR_INVALID_PARAMS, "params must be a list or an object")
        except TypeError as e:
            raise RPCError(ERROR_INVALID_PARAMS, str(e))

        if isinstance(params, dict):
            result = await method(faucet, **params)
        else:
            result = await method(faucet, *params)

    except RPCError as e:
        return {"jsonrpc": "2.0", "id": request_id, "error": e.to_dict()}
    except ExecutionError as e:
        logger.debug(f"{request.get('method')} reverted: {e.message}")
        return {"jsonrpc": "2.0", "id": request_id, "error": e.to_dict()}
    except Exception as e:
        logger.exception(f"{request.get('method')} failed unexpectedly")
        error = RPCError(ERROR_INTERNAL, str(e) or type(e).__name__)
        return {"jsonrpc": "2.0", "id": request_id, "error": error.to_dict()}

    return {"jsonrpc": "2.0", "id": request_id, "result": result}
