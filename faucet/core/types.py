"""
The Faucet Core Types

Account addresses and capability bitmasks.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Union

from Crypto.Hash import keccak

from faucet.constants import (
    ADDRESS_SIZE,
    FULL_PRIVILEGES_MASK,
    ROLE_ACCESS_MANAGER,
    ROLE_UPGRADE_MANAGER,
    ROLE_FAUCET_USER,
    ROLE_FAUCET_MANAGER,
)


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (pre-standard SHA3 padding)."""
    return keccak.new(digest_bits=256, data=data).digest()


@dataclass(frozen=True, slots=True)
class Address:
    """
    Account or contract address.

    SIZE: 20 bytes
    The all-zero address is the null address and never a valid recipient.
    """
    data: bytes = field(default_factory=lambda: bytes(ADDRESS_SIZE))

    def __post_init__(self):
        if len(self.data) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(self.data)}")

    def __bytes__(self) -> bytes:
        return self.data

    def __lt__(self, other: Address) -> bool:
        return self.data < other.data

    def __repr__(self) -> str:
        return f"Address({self.checksum()})"

    def __str__(self) -> str:
        return self.checksum()

    def hex(self) -> str:
        return "0x" + self.data.hex()

    def checksum(self) -> str:
        """EIP-55 mixed-case rendering."""
        lower = self.data.hex()
        digest = keccak256(lower.encode("ascii")).hex()
        chars = [
            c.upper() if c.isalpha() and int(digest[i], 16) >= 8 else c
            for i, c in enumerate(lower)
        ]
        return "0x" + "".join(chars)

    def is_zero(self) -> bool:
        return self.data == bytes(ADDRESS_SIZE)

    def to_int(self) -> int:
        return int.from_bytes(self.data, "big")

    @classmethod
    def from_hex(cls, hex_string: str) -> Address:
        if hex_string[:2] in ("0x", "0X"):
            hex_string = hex_string[2:]
        return cls(bytes.fromhex(hex_string))

    @classmethod
    def from_int(cls, value: int) -> Address:
        return cls(value.to_bytes(ADDRESS_SIZE, "big"))

    @classmethod
    def zero(cls) -> Address:
        return cls(bytes(ADDRESS_SIZE))


ZERO_ADDRESS = Address.zero()


_ROLE_NAMES: Dict[int, str] = {
    ROLE_ACCESS_MANAGER: "ROLE_ACCESS_MANAGER",
    ROLE_UPGRADE_MANAGER: "ROLE_UPGRADE_MANAGER",
    ROLE_FAUCET_MANAGER: "ROLE_FAUCET_MANAGER",
    ROLE_FAUCET_USER: "ROLE_FAUCET_USER",
}


@dataclass(frozen=True, slots=True)
class Roles:
    """
    Set of capability bits held by an address.

    Supports union (|), intersection (&), difference (-) and
    complement within the 256-bit space (~).
    """
    bits: int = 0

    def __post_init__(self):
        if not 0 <= self.bits <= FULL_PRIVILEGES_MASK:
            raise ValueError(f"Roles bitmask out of range: {self.bits:#x}")

    def __or__(self, other: Roles) -> Roles:
        return Roles(self.bits | other.bits)

    def __and__(self, other: Roles) -> Roles:
        return Roles(self.bits & other.bits)

    def __sub__(self, other: Roles) -> Roles:
        return Roles(self.bits & ~other.bits & FULL_PRIVILEGES_MASK)

    def __invert__(self) -> Roles:
        return Roles(FULL_PRIVILEGES_MASK ^ self.bits)

    def __bool__(self) -> bool:
        return self.bits != 0

    def __int__(self) -> int:
        return self.bits

    def __repr__(self) -> str:
        return f"Roles({' | '.join(self.names()) or '0'})"

    def includes(self, required: Roles) -> bool:
        """True if every bit of `required` is present."""
        return self.bits & required.bits == required.bits

    def names(self) -> List[str]:
        """Names of known bits, plus a hex remainder for unnamed ones."""
        if self.bits == FULL_PRIVILEGES_MASK:
            return ["FULL_PRIVILEGES_MASK"]
        names = [name for bit, name in _ROLE_NAMES.items() if self.bits & bit]
        rest = self.bits & ~sum(_ROLE_NAMES)
        if rest:
            names.append(f"{rest:#x}")
        return names

    @classmethod
    def of(cls, *roles: Union[Roles, int]) -> Roles:
        """Union of the given roles or raw bits."""
        bits = 0
        for role in roles:
            bits |= int(role)
        return cls(bits)


NO_ROLES = Roles(0)
FULL_PRIVILEGES = Roles(FULL_PRIVILEGES_MASK)
ACCESS_MANAGER = Roles(ROLE_ACCESS_MANAGER)
UPGRADE_MANAGER = Roles(ROLE_UPGRADE_MANAGER)
FAUCET_USER = Roles(ROLE_FAUCET_USER)
FAUCET_MANAGER = Roles(ROLE_FAUCET_MANAGER)
