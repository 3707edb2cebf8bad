"""
The Faucet Host Environment

- Chain: balances, contracts, calls, events, units of work
- Clocks
- Mintable mocks
"""

from faucet.host.clock import Clock, ManualClock, SystemClock, NtpClock
from faucet.host.chain import (
    Chain,
    Contract,
    CallContext,
    CallResult,
    GasMeter,
    LogEntry,
)
from faucet.host.mocks import MintableNoop, RevertingMintable

__all__ = [
    # Clocks
    "Clock",
    "ManualClock",
    "SystemClock",
    "NtpClock",
    # Chain
    "Chain",
    "Contract",
    "CallContext",
    "CallResult",
    "GasMeter",
    "LogEntry",
    # Mocks
    "MintableNoop",
    "RevertingMintable",
]
