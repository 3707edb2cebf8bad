"""
Checks shared by the faucet services.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from faucet.core.types import Address, Roles
from faucet.errors import InvalidInput, Unauthorized

if TYPE_CHECKING:
    from faucet.contract import TheFaucet


class FaucetService:
    """Base for services operating on a deployed faucet."""

    def __init__(self, faucet: "TheFaucet"):
        self.faucet = faucet

    def require_role(self, caller: Address, required: Roles) -> None:
        """
        Raises:
            Unauthorized: If caller does not hold every bit of `required`
        """
        if not self.faucet.gate.has_capability(caller, required):
            raise Unauthorized(details={"caller": caller.checksum(), "required": hex(required.bits)})


def require_address(address: Address, message: str) -> None:
    if address.is_zero():
        raise InvalidInput(message)


def require_value(value: int, message: str) -> None:
    """Values are unsigned and must be set (non-zero)."""
    if value < 0:
        raise InvalidInput(f"negative value: {value}")
    if value == 0:
        raise InvalidInput(message)
