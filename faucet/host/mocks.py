"""
The Faucet Mintable Mocks

Stand-ins for external token contracts exposing `mint(address,uint256)`.
Used by tests.
"""

from __future__ import annotations
import logging
from typing import Dict

from faucet.constants import MINTABLE_NOOP_GAS
from faucet.core.types import Address
from faucet.core.events import MintLogged
from faucet.errors import Revert
from faucet.core.state import restore_entry
from faucet.host.chain import CallContext, Chain, Contract
from faucet.protocol.abi import decode_mint_call

logger = logging.getLogger(__name__)


class MintableNoop(Contract):
    """
    Accepts any mint request, logs it and tracks per-recipient totals.

    Nothing is actually minted.
    """

    def __init__(self, chain: Chain, address: Address, gas_cost: int = MINTABLE_NOOP_GAS):
        super().__init__(chain, address)
        self.gas_cost = gas_cost
        self.minted: Dict[Address, int] = {}

    def handle_call(self, ctx: CallContext, calldata: bytes) -> bytes:
        try:
            to, value = decode_mint_call(calldata)
        except ValueError as e:
            raise Revert(str(e))

        ctx.gas.consume(self.gas_cost)
        previous = self.minted.get(to)
        self.chain.journal(lambda: restore_entry(self.minted, to, previous))
        self.minted[to] = (previous or 0) + value
        self.chain.emit(self.address, MintLogged(to=to, value=value))
        return b""

    @classmethod
    def deploy(cls, chain: Chain, deployer: Address, **kwargs) -> "MintableNoop":
        contract = cls(chain, chain.new_address(deployer), **kwargs)
        chain.deploy(contract)
        return contract


class RevertingMintable(MintableNoop):
    """Rejects every mint request."""

    def handle_call(self, ctx: CallContext, calldata: bytes) -> bytes:
        raise Revert("minting disabled")
