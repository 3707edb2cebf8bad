"""
The Faucet Core Data Structures
"""

from faucet.core.types import (
    Address,
    Roles,
    keccak256,
    ZERO_ADDRESS,
    NO_ROLES,
    FULL_PRIVILEGES,
    ACCESS_MANAGER,
    UPGRADE_MANAGER,
    FAUCET_USER,
    FAUCET_MANAGER,
)
from faucet.core.state import EpochConfig, WithdrawalStat, FaucetState
from faucet.core.events import (
    Event,
    EpochParamsUpdated,
    UserLimitUpdated,
    Withdrawn,
    MintProxied,
    RoleUpdated,
    MintLogged,
)

__all__ = [
    # Types
    "Address",
    "Roles",
    "keccak256",
    "ZERO_ADDRESS",
    "NO_ROLES",
    "FULL_PRIVILEGES",
    "ACCESS_MANAGER",
    "UPGRADE_MANAGER",
    "FAUCET_USER",
    "FAUCET_MANAGER",
    # State
    "EpochConfig",
    "WithdrawalStat",
    "FaucetState",
    # Events
    "Event",
    "EpochParamsUpdated",
    "UserLimitUpdated",
    "Withdrawn",
    "MintProxied",
    "RoleUpdated",
    "MintLogged",
]
