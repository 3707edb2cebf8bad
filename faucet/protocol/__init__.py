"""
The Faucet Protocol Logic

- Epoch throttling
- Mint call encoding
"""

from faucet.protocol.throttle import (
    epoch_index,
    effective_limit,
    withdrawn_so_far,
    remaining_allowance,
    record_withdrawal,
    EpochThrottle,
)
from faucet.protocol.abi import (
    MINT_SELECTOR,
    method_selector,
    encode_mint_call,
    decode_mint_call,
)

__all__ = [
    "epoch_index",
    "effective_limit",
    "withdrawn_so_far",
    "remaining_allowance",
    "record_withdrawal",
    "EpochThrottle",
    "MINT_SELECTOR",
    "method_selector",
    "encode_mint_call",
    "decode_mint_call",
]
