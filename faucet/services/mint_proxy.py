"""
The Faucet Mint Proxy Service

Forwards `mint(address,uint256)` to a caller-chosen target with a fixed
gas allotment. Same trust level as direct withdrawal; no quota of its own.
"""

from __future__ import annotations
import logging

from faucet.constants import MINT_GAS_LIMIT, MINT_VALUE_BITS, MINT_VALUE_CEILING
from faucet.core.types import Address, FAUCET_USER
from faucet.core.events import MintProxied
from faucet.errors import ProxyCallFailed, ValueOutOfRange
from faucet.host.chain import CallResult
from faucet.protocol.abi import encode_mint_call
from faucet.services.base import FaucetService, require_address, require_value

logger = logging.getLogger(__name__)


class MintProxyService(FaucetService):
    """Bounded-cost mint forwarding."""

    def mint(self, caller: Address, target: Address, to: Address, value: int) -> CallResult:
        """
        Proxy a mint request to `target`.

        Args:
            caller: Faucet user requesting the mint
            target: Mintable contract
            to: Recipient of the minted value
            value: Amount to mint, must fit into uint192

        Returns:
            Result of the external call

        Raises:
            Unauthorized: Caller is not a faucet user
            InvalidInput: Target, recipient or value not set
            ValueOutOfRange: Value does not fit into uint192
            ProxyCallFailed: Target did not report success
        """
        self.require_role(caller, FAUCET_USER)
        require_address(target, "target contract not set")
        require_address(to, "recipient not set")
        require_value(value, "value not set")

        if value >= MINT_VALUE_CEILING:
            raise ValueOutOfRange(details={"value": value, "bits": MINT_VALUE_BITS})

        faucet = self.faucet
        result = faucet.chain.call(
            faucet.address,
            target,
            encode_mint_call(to, value),
            gas=MINT_GAS_LIMIT,
        )

        if not result.success:
            logger.warning(f"Mint via {target} failed: {result.error}")
            raise ProxyCallFailed(details={"target": target.checksum(), "reason": result.error})

        faucet.chain.emit(faucet.address, MintProxied(target=target, to=to, value=value))

        logger.info(f"Mint of {value} to {to} proxied via {target}, gas={result.gas_used}")

        return result
