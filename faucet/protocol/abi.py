"""
The Faucet Call Encoding

Encoding of the single external entry point the faucet proxies to:
`mint(address,uint256)`. Calldata is the 4-byte selector followed by
32-byte big-endian words.
"""

from __future__ import annotations
from typing import Tuple

from faucet.constants import (
    ADDRESS_SIZE,
    WORD_SIZE,
    MINT_SIGNATURE,
    UINT256_MAX,
)
from faucet.core.types import Address, keccak256


def method_selector(signature: str) -> bytes:
    """First 4 bytes of the Keccak-256 hash of a canonical signature."""
    return keccak256(signature.encode("ascii"))[:4]


MINT_SELECTOR: bytes = method_selector(MINT_SIGNATURE)


def encode_address(address: Address) -> bytes:
    """Left-pad an address to one word."""
    return bytes(WORD_SIZE - ADDRESS_SIZE) + address.data


def encode_uint256(value: int) -> bytes:
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"uint256 out of range: {value}")
    return value.to_bytes(WORD_SIZE, "big")


def encode_mint_call(to: Address, value: int) -> bytes:
    """Encode calldata for `mint(to, value)`."""
    return MINT_SELECTOR + encode_address(to) + encode_uint256(value)


def decode_mint_call(calldata: bytes) -> Tuple[Address, int]:
    """
    Decode calldata produced by `encode_mint_call`.

    Raises:
        ValueError: If selector or length do not match
    """
    if calldata[:4] != MINT_SELECTOR:
        raise ValueError(f"Unknown selector: {calldata[:4].hex()}")
    if len(calldata) != 4 + 2 * WORD_SIZE:
        raise ValueError(f"Invalid calldata length: {len(calldata)}")

    address_word = calldata[4:4 + WORD_SIZE]
    if any(address_word[:WORD_SIZE - ADDRESS_SIZE]):
        raise ValueError("Dirty address padding")

    to = Address(address_word[WORD_SIZE - ADDRESS_SIZE:])
    value = int.from_bytes(calldata[4 + WORD_SIZE:], "big")
    return to, value
