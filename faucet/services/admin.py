"""
The Faucet Admin Configuration

Mutators for the global epoch parameters and per-user limit overrides.
"""

from __future__ import annotations
import logging

from faucet.core.types import Address, FAUCET_MANAGER
from faucet.core.state import EpochConfig
from faucet.core.events import EpochParamsUpdated, UserLimitUpdated
from faucet.errors import InvalidInput
from faucet.services.base import FaucetService, require_address

logger = logging.getLogger(__name__)


class AdminConfig(FaucetService):
    """Manager-gated throttle configuration."""

    def set_epoch_params(self, caller: Address, epoch_length: int, limit: int) -> None:
        """
        Overwrite the epoch length and the default limit per epoch.

        Stored withdrawal statistics are not reconciled: they are evaluated
        against the new epoch length from now on.

        Raises:
            Unauthorized: Caller is not a faucet manager
            InvalidInput: Epoch length not set, or negative limit
        """
        self.require_role(caller, FAUCET_MANAGER)
        if epoch_length <= 0:
            raise InvalidInput("epoch length not set")
        if limit < 0:
            raise InvalidInput(f"negative limit: {limit}")

        faucet = self.faucet
        faucet.state.set_config(EpochConfig(epoch_length=epoch_length, limit=limit))
        faucet.chain.emit(faucet.address, EpochParamsUpdated(
            by=caller,
            epoch_length=epoch_length,
            limit=limit,
        ))

        logger.info(f"Epoch params updated by {caller}: length={epoch_length}s, limit={limit}")

    def set_user_limit_override(self, caller: Address, user: Address, limit: int) -> None:
        """
        Overwrite the limit for a single user; zero clears the override.

        Raises:
            Unauthorized: Caller is not a faucet manager
            InvalidInput: User address not set, or negative limit
        """
        self.require_role(caller, FAUCET_MANAGER)
        require_address(user, "user address not set")
        if limit < 0:
            raise InvalidInput(f"negative limit: {limit}")

        faucet = self.faucet
        faucet.state.set_override(user, limit)
        faucet.chain.emit(faucet.address, UserLimitUpdated(by=caller, user=user, limit=limit))

        logger.info(f"Limit for {user} set to {limit} by {caller}")
