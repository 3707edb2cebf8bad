"""
The Faucet Bulk Role Manager

Adds or removes the faucet user bit for a list of addresses, leaving
every other bit they hold untouched. Writes go to the access gate under
the faucet's own identity, so the manager does not need write authority
over the gate; the faucet's features must include the access manager
role and the user bit instead.
"""

from __future__ import annotations
import logging
from typing import Sequence

from faucet.access.gate import ExecutionContext
from faucet.core.types import Address, FAUCET_MANAGER, FAUCET_USER
from faucet.errors import InvalidInput
from faucet.services.base import FaucetService

logger = logging.getLogger(__name__)


class BulkRoleManager(FaucetService):
    """Privilege-preserving bulk edits of the faucet user bit."""

    def add_users(self, caller: Address, users: Sequence[Address]) -> None:
        self._update_users(caller, users, grant=True)

    def remove_users(self, caller: Address, users: Sequence[Address]) -> None:
        self._update_users(caller, users, grant=False)

    def _update_users(self, caller: Address, users: Sequence[Address], grant: bool) -> None:
        """
        Raises:
            Unauthorized: Caller is not a faucet manager, or the faucet
                itself lacks the features to write roles
            InvalidInput: Empty users list
        """
        self.require_role(caller, FAUCET_MANAGER)
        if not users:
            raise InvalidInput("empty users array")

        gate = self.faucet.gate
        context = ExecutionContext.of(self.faucet.address)

        for user in users:
            current = gate.get_bitmask(user)
            desired = current | FAUCET_USER if grant else current - FAUCET_USER
            gate.set_bitmask(context, user, desired)

        logger.info(
            f"{'Added' if grant else 'Removed'} {len(users)} faucet user(s) by {caller}"
        )
