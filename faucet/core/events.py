"""
The Faucet Events

Observable records appended to the host event log.
"""

from __future__ import annotations
from dataclasses import dataclass, fields

from faucet.core.types import Address, Roles


class Event:
    """Base for event records."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        args = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Address):
                value = value.checksum()
            elif isinstance(value, Roles):
                value = hex(value.bits)
            args[f.name] = value
        return {"event": self.name, "args": args}


@dataclass(frozen=True)
class EpochParamsUpdated(Event):
    by: Address
    epoch_length: int
    limit: int


@dataclass(frozen=True)
class UserLimitUpdated(Event):
    by: Address
    user: Address
    limit: int


@dataclass(frozen=True)
class Withdrawn(Event):
    to: Address
    value: int


@dataclass(frozen=True)
class MintProxied(Event):
    target: Address
    to: Address
    value: int


@dataclass(frozen=True)
class RoleUpdated(Event):
    by: Address
    to: Address
    requested: Roles
    assigned: Roles


@dataclass(frozen=True)
class MintLogged(Event):
    """Emitted by the no-op mintable target."""
    to: Address
    value: int
