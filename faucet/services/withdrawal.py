"""
The Faucet Withdrawal Service

Order of operations:
1. Capability check (faucet user)
2. Input validation
3. Epoch allowance check
4. Pool balance check
5. Withdrawal statistics update
6. Value transfer and event

Statistics are updated before value leaves the pool: a recipient that
calls back into the faucet during the transfer already sees the reduced
allowance.
"""

from __future__ import annotations
import logging

from faucet.core.types import Address, FAUCET_USER
from faucet.core.events import Withdrawn
from faucet.errors import PoolExhausted, QuotaExceeded
from faucet.services.base import FaucetService, require_address, require_value

logger = logging.getLogger(__name__)


class WithdrawalService(FaucetService):
    """Direct distribution of the pooled native balance."""

    def withdraw(self, caller: Address, to: Address, amount: int) -> None:
        """
        Send `amount` from the pool to `to`, charged to the caller's allowance.

        Args:
            caller: Faucet user requesting the withdrawal
            to: Recipient of the value
            amount: Amount to withdraw

        Raises:
            Unauthorized: Caller is not a faucet user
            InvalidInput: Recipient or amount not set
            QuotaExceeded: Amount exceeds the caller's remaining allowance
            PoolExhausted: Amount exceeds the pool balance
        """
        self.require_role(caller, FAUCET_USER)
        require_address(to, "recipient not set")
        require_value(amount, "value not set")

        faucet = self.faucet
        chain = faucet.chain
        now = chain.now()

        allowance = faucet.throttle.remaining_allowance(caller, now)
        if amount > allowance:
            raise QuotaExceeded(details={"requested": amount, "allowance": allowance})

        pool = chain.balance_of(faucet.address)
        if amount > pool:
            raise PoolExhausted(details={"requested": amount, "balance": pool})

        stat = faucet.throttle.record_withdrawal(caller, amount, now)

        chain.transfer(faucet.address, to, amount)
        chain.emit(faucet.address, Withdrawn(to=to, value=amount))

        logger.info(
            f"Withdrawn {amount} to {to} by {caller}, "
            f"epoch total={stat.withdrawn_in_epoch}"
        )
