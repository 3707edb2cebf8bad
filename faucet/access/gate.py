"""
The Faucet Access Gate

Per-address capability bitmasks. The faucet only depends on the
`AccessGate` interface; `InMemoryAccessGate` is the reference store used
by the host, the node and the tests.

Writes always name the identity they are performed under. The faucet
passes its own address when it edits user roles in bulk, so the write is
authorized by the faucet's features rather than by the manager calling it.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

from faucet.core.types import Address, Roles, ACCESS_MANAGER, FULL_PRIVILEGES, NO_ROLES
from faucet.core.state import restore_entry
from faucet.core.events import RoleUpdated
from faucet.errors import Unauthorized

if TYPE_CHECKING:
    from faucet.host.chain import Chain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionContext:
    """Identity a permission-store write is performed under."""
    identity: Address

    @classmethod
    def of(cls, identity: Address) -> ExecutionContext:
        return cls(identity=identity)


class AccessGate(ABC):
    """Capability store interface."""

    @abstractmethod
    def has_capability(self, address: Address, required: Roles) -> bool:
        """True if `address` holds every bit of `required`."""

    @abstractmethod
    def get_bitmask(self, address: Address) -> Roles:
        """Full capability set of `address`."""

    @abstractmethod
    def set_bitmask(self, context: ExecutionContext, target: Address, desired: Roles) -> Roles:
        """
        Request `desired` as the new capability set of `target`.

        Returns:
            Capability set actually assigned
        """


def evaluate_by(authority: Roles, current: Roles, desired: Roles) -> Roles:
    """
    Evaluate a role change requested by a writer holding `authority`.

    The writer can only add or remove the bits it holds itself: bits
    outside `authority` keep their current value.
    """
    granted = current | (authority & desired)
    return granted - (authority - desired)


class InMemoryAccessGate(AccessGate):
    """
    Reference capability store.

    Role writes are journaled on the host, so they roll back with the
    operation that made them.
    """

    def __init__(self, chain: "Chain", emitter: Address, owner: Optional[Address] = None):
        self.chain = chain
        self.emitter = emitter
        self._roles: Dict[Address, Roles] = {}

        if owner is not None:
            self._roles[owner] = FULL_PRIVILEGES


    def has_capability(self, address: Address, required: Roles) -> bool:
        return self.get_bitmask(address).includes(required)

    def get_bitmask(self, address: Address) -> Roles:
        return self._roles.get(address, NO_ROLES)

    def set_bitmask(self, context: ExecutionContext, target: Address, desired: Roles) -> Roles:
        """
        Assign roles on behalf of `context.identity`.

        Raises:
            Unauthorized: If the identity is not an access manager
        """
        if not self.has_capability(context.identity, ACCESS_MANAGER):
            raise Unauthorized()

        authority = self.get_bitmask(context.identity)
        assigned = evaluate_by(authority, self.get_bitmask(target), desired)

        previous = self._roles.get(target)
        self.chain.journal(lambda: restore_entry(self._roles, target, previous))
        if assigned:
            self._roles[target] = assigned
        else:
            self._roles.pop(target, None)

        self.chain.emit(self.emitter, RoleUpdated(
            by=context.identity,
            to=target,
            requested=desired,
            assigned=assigned,
        ))

        logger.debug(f"Role of {target} set to {assigned!r} by {context.identity}")

        return assigned
