"""
The Faucet State Structures

Global epoch configuration, per-user limit overrides and per-user
withdrawal statistics. All maps are keyed by address.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, Tuple

from faucet.constants import (
    DEFAULT_EPOCH_LENGTH_SEC,
    DEFAULT_LIMIT_PER_EPOCH,
)
from faucet.core.types import Address


@dataclass
class EpochConfig:
    """Process-wide throttle parameters."""
    epoch_length: int = DEFAULT_EPOCH_LENGTH_SEC    # Seconds, always > 0
    limit: int = DEFAULT_LIMIT_PER_EPOCH            # Default limit per epoch

    def copy(self) -> EpochConfig:
        return EpochConfig(epoch_length=self.epoch_length, limit=self.limit)


@dataclass
class WithdrawalStat:
    """
    Withdrawal statistics for a single user.

    Created lazily on first withdrawal. `withdrawn_in_epoch` only counts
    towards the epoch that contains `last_withdrawal_timestamp`.
    """
    last_withdrawal_timestamp: int = 0
    withdrawn_in_epoch: int = 0

    def copy(self) -> WithdrawalStat:
        return WithdrawalStat(
            last_withdrawal_timestamp=self.last_withdrawal_timestamp,
            withdrawn_in_epoch=self.withdrawn_in_epoch,
        )

    def to_dict(self) -> dict:
        return {
            "lastWithdrawalTimestamp": self.last_withdrawal_timestamp,
            "withdrawnInEpoch": self.withdrawn_in_epoch,
        }


@dataclass
class FaucetState:
    """
    Complete faucet state.

    - Epoch configuration
    - Limit overrides (zero means no override)
    - Withdrawal statistics
    """
    config: EpochConfig = field(default_factory=EpochConfig)
    _overrides: Dict[Address, int] = field(default_factory=dict)
    _stats: Dict[Address, WithdrawalStat] = field(default_factory=dict)
    _journal: Optional[Callable[[Callable[[], None]], None]] = field(default=None, repr=False, compare=False)

    def bind_journal(self, journal: Callable[[Callable[[], None]], None]) -> None:
        """Report an undo action before every write."""
        self._journal = journal

    def _record(self, undo: Callable[[], None]) -> None:
        if self._journal is not None:
            self._journal(undo)

    def set_config(self, config: EpochConfig) -> None:
        previous = self.config
        self._record(lambda: setattr(self, "config", previous))
        self.config = config

    def get_override(self, user: Address) -> int:
        """Get raw limit override, 0 if unset."""
        return self._overrides.get(user, 0)

    def set_override(self, user: Address, limit: int) -> None:
        """Set limit override; zero clears it."""
        previous = self._overrides.get(user)
        self._record(lambda: restore_entry(self._overrides, user, previous))
        if limit == 0:
            self._overrides.pop(user, None)
        else:
            self._overrides[user] = limit

    def get_stat(self, user: Address) -> Optional[WithdrawalStat]:
        """Get withdrawal statistics, None before the first withdrawal."""
        return self._stats.get(user)

    def set_stat(self, user: Address, stat: WithdrawalStat) -> None:
        previous = self._stats.get(user)
        self._record(lambda: restore_entry(self._stats, user, previous))
        self._stats[user] = stat

    def iter_stats(self) -> Iterator[Tuple[Address, WithdrawalStat]]:
        return iter(self._stats.items())

    def copy(self) -> FaucetState:
        """Create a deep copy of this state, detached from any journal."""
        new_state = FaucetState(config=self.config.copy())
        new_state._overrides = dict(self._overrides)
        for user, stat in self._stats.items():
            new_state._stats[user] = stat.copy()
        return new_state

    def to_dict(self) -> dict:
        """Export state, maps sorted by address for determinism."""
        return {
            "epochLength": self.config.epoch_length,
            "limitPerEpoch": self.config.limit,
            "limitOverrides": {
                user.checksum(): limit
                for user, limit in sorted(self._overrides.items())
            },
            "withdrawalStats": {
                user.checksum(): stat.to_dict()
                for user, stat in sorted(self._stats.items())
            },
        }

    def __repr__(self) -> str:
        return (
            f"FaucetState(epoch_length={self.config.epoch_length}, "
            f"limit={self.config.limit}, "
            f"overrides={len(self._overrides)}, "
            f"users={len(self._stats)})"
        )


def restore_entry(mapping: MutableMapping, key: Address, previous: Any) -> None:
    """Put back a mapping entry; `None` means the key was absent."""
    if previous is None:
        mapping.pop(key, None)
    else:
        mapping[key] = previous
