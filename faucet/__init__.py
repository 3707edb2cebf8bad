"""
The Faucet

On-demand distribution of a pooled balance between permissioned users,
throttled per user by globally aligned epochs.
"""

__version__ = "1.0.2"
__author__ = "The Faucet Team"

from faucet.core.types import Address, Roles
from faucet.core.state import EpochConfig, WithdrawalStat, FaucetState
from faucet.host.chain import Chain
from faucet.host.clock import ManualClock, SystemClock, NtpClock
from faucet.contract import TheFaucet

__all__ = [
    "Address",
    "Roles",
    "EpochConfig",
    "WithdrawalStat",
    "FaucetState",
    "Chain",
    "ManualClock",
    "SystemClock",
    "NtpClock",
    "TheFaucet",
    "__version__",
]
