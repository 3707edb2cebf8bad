"""
The Faucet Contract

Hosted contract combining the capability gate, the epoch throttle and the
four services into the public operation surface. Every mutating operation
runs as one unit of work on the host: if any check or step fails, nothing
it changed survives.
"""

from __future__ import annotations
import logging
from typing import Callable, Optional, Sequence, TypeVar

from faucet.constants import FEATURES_USER_MANAGEMENT
from faucet.core.types import Address, Roles
from faucet.core.state import EpochConfig, FaucetState, WithdrawalStat
from faucet.access.gate import AccessGate, ExecutionContext, InMemoryAccessGate
from faucet.errors import ExecutionError
from faucet.host.chain import CallResult, Chain, Contract
from faucet.protocol.throttle import EpochThrottle
from faucet.services import AdminConfig, BulkRoleManager, MintProxyService, WithdrawalService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TheFaucet(Contract):
    """
    Epoch-throttled faucet.

    Inbound value is accepted unconditionally; it leaves only through
    `withdraw`.
    """

    def __init__(
        self,
        chain: Chain,
        address: Address,
        gate: AccessGate,
        config: Optional[EpochConfig] = None,
    ):
        super().__init__(chain, address)
        self.gate = gate
        self.state = FaucetState(config=config.copy() if config else EpochConfig())
        self.state.bind_journal(chain.journal)
        self.throttle = EpochThrottle(lambda: self.state)

        self.withdrawals = WithdrawalService(self)
        self.minter = MintProxyService(self)
        self.roles = BulkRoleManager(self)
        self.admin = AdminConfig(self)

    @classmethod
    def deploy(
        cls,
        chain: Chain,
        deployer: Address,
        gate: Optional[AccessGate] = None,
        config: Optional[EpochConfig] = None,
        enable_user_management: bool = False,
    ) -> "TheFaucet":
        """
        Deploy a faucet on `chain`.

        Without an explicit gate an in-memory one is created that grants
        the deployer full privileges. The faucet starts without features
        (addUsers/removeUsers disabled) unless `enable_user_management`.
        """
        address = chain.new_address(deployer)
        if gate is None:
            gate = InMemoryAccessGate(chain, emitter=address, owner=deployer)

        faucet = cls(chain, address, gate, config)
        chain.deploy(faucet)

        if enable_user_management:
            faucet.update_features(deployer, Roles(FEATURES_USER_MANAGEMENT))

        logger.info(
            f"Faucet deployed at {address} by {deployer}, "
            f"epoch={faucet.state.config.epoch_length}s, limit={faucet.state.config.limit}"
        )
        return faucet

    # ==========================================================================
    # Host integration
    # ==========================================================================

    def receive(self, sender: Address, amount: int) -> None:
        """Fund the pool from `sender`."""
        self.chain.transfer(sender, self.address, amount)

    def _execute(self, operation: str, fn: Callable[..., T], *args) -> T:
        try:
            with self.chain.atomic():
                return fn(*args)
        except ExecutionError as e:
            logger.debug(f"{operation} reverted: {e.message}")
            raise

    # ==========================================================================
    # Views
    # ==========================================================================

    def pool_balance(self) -> int:
        return self.chain.balance_of(self.address)

    def epoch_length(self) -> int:
        return self.state.config.epoch_length

    def limit_per_epoch(self) -> int:
        return self.state.config.limit

    def get_limit_override(self, user: Address) -> int:
        return self.state.get_override(user)

    def get_effective_limit(self, user: Address) -> int:
        return self.throttle.effective_limit(user)

    def get_withdrawn_in_epoch(self, user: Address) -> int:
        return self.throttle.withdrawn_so_far(user, self.chain.now())

    def get_remaining_allowance(self, user: Address) -> int:
        return self.throttle.remaining_allowance(user, self.chain.now())

    def get_withdrawal_stats(self, user: Address) -> WithdrawalStat:
        """Raw stored statistics; zeros before the first withdrawal."""
        stat = self.state.get_stat(user)
        return stat.copy() if stat is not None else WithdrawalStat()

    # ==========================================================================
    # Access control
    # ==========================================================================

    def get_role(self, address: Address) -> Roles:
        return self.gate.get_bitmask(address)

    def features(self) -> Roles:
        """Capabilities held by the faucet itself."""
        return self.gate.get_bitmask(self.address)

    def is_operator_in_role(self, address: Address, required: Roles) -> bool:
        return self.gate.has_capability(address, required)

    def update_role(self, caller: Address, operator: Address, roles: Roles) -> Roles:
        return self._execute(
            "updateRole", self.gate.set_bitmask, ExecutionContext.of(caller), operator, roles,
        )

    def update_features(self, caller: Address, roles: Roles) -> Roles:
        return self.update_role(caller, self.address, roles)

    # ==========================================================================
    # Operations
    # ==========================================================================

    def withdraw(self, caller: Address, to: Address, amount: int) -> None:
        self._execute("withdraw", self.withdrawals.withdraw, caller, to, amount)

    def mint(self, caller: Address, target: Address, to: Address, value: int) -> CallResult:
        return self._execute("mint", self.minter.mint, caller, target, to, value)

    def set_epoch_params(self, caller: Address, epoch_length: int, limit: int) -> None:
        self._execute("setEpochParams", self.admin.set_epoch_params, caller, epoch_length, limit)

    def set_user_limit_override(self, caller: Address, user: Address, limit: int) -> None:
        self._execute("setUserLimitOverride", self.admin.set_user_limit_override, caller, user, limit)

    def add_users(self, caller: Address, users: Sequence[Address]) -> None:
        self._execute("addUsers", self.roles.add_users, caller, users)

    def remove_users(self, caller: Address, users: Sequence[Address]) -> None:
        self._execute("removeUsers", self.roles.remove_users, caller, users)

    def __repr__(self) -> str:
        return f"TheFaucet(address={self.address}, pool={self.pool_balance()}, {self.state!r})"
