"""
The Faucet Epoch Throttle

PRINCIPLE: nobody drains the pool faster than the manager allows.

Epochs are aligned to absolute time and identical for every address;
there are no per-user rolling windows. A user's withdrawal statistics
only count while their last withdrawal falls into the current epoch.
"""

from __future__ import annotations
import logging

from faucet.core.types import Address
from faucet.core.state import FaucetState, WithdrawalStat

logger = logging.getLogger(__name__)


def epoch_index(timestamp: int, epoch_length: int) -> int:
    """Get epoch number from timestamp (seconds)."""
    return timestamp // epoch_length


def effective_limit(state: FaucetState, user: Address) -> int:
    """
    Get the per-epoch limit that applies to a user.

    A zero override means "not set" and falls back to the default limit.
    """
    override = state.get_override(user)
    return override if override != 0 else state.config.limit


def withdrawn_so_far(state: FaucetState, user: Address, now: int) -> int:
    """Get amount withdrawn by a user within the epoch containing `now`."""
    stat = state.get_stat(user)
    if stat is None:
        return 0
    if _is_current(stat, now, state.config.epoch_length):
        return stat.withdrawn_in_epoch
    return 0


def remaining_allowance(state: FaucetState, user: Address, now: int) -> int:
    """
    Get amount a user may still withdraw in the current epoch.

    Never negative: when the limit is lowered mid-epoch below what was
    already withdrawn, the allowance is zero until the next epoch.
    """
    limit = effective_limit(state, user)
    withdrawn = withdrawn_so_far(state, user, now)
    return max(0, limit - withdrawn)


def record_withdrawal(state: FaucetState, user: Address, amount: int, now: int) -> WithdrawalStat:
    """
    Record a withdrawal in the user's statistics.

    Stats from a previous epoch are reset, otherwise accumulated.

    Args:
        state: Faucet state to update in place
        user: Withdrawing user
        amount: Amount withdrawn
        now: Current timestamp (seconds)

    Returns:
        Updated statistics
    """
    stat = state.get_stat(user)
    withdrawn = amount
    if stat is not None and _is_current(stat, now, state.config.epoch_length):
        withdrawn += stat.withdrawn_in_epoch

    stat = WithdrawalStat(last_withdrawal_timestamp=now, withdrawn_in_epoch=withdrawn)
    state.set_stat(user, stat)

    logger.debug(
        f"Recorded withdrawal of {amount} for {user}, "
        f"epoch={epoch_index(now, state.config.epoch_length)}, "
        f"withdrawn={stat.withdrawn_in_epoch}"
    )

    return stat


def _is_current(stat: WithdrawalStat, now: int, epoch_length: int) -> bool:
    return epoch_index(stat.last_withdrawal_timestamp, epoch_length) == epoch_index(now, epoch_length)


class EpochThrottle:
    """
    Allowance queries bound to a faucet state.

    The state is looked up on every call so that a replaced state object
    is picked up without rebinding.
    """

    def __init__(self, state_provider):
        self._state_provider = state_provider

    @property
    def state(self) -> FaucetState:
        return self._state_provider()

    def effective_limit(self, user: Address) -> int:
        return effective_limit(self.state, user)

    def withdrawn_so_far(self, user: Address, now: int) -> int:
        return withdrawn_so_far(self.state, user, now)

    def remaining_allowance(self, user: Address, now: int) -> int:
        return remaining_allowance(self.state, user, now)

    def record_withdrawal(self, user: Address, amount: int, now: int) -> WithdrawalStat:
        return record_withdrawal(self.state, user, amount, now)

    def get_stats(self, now: int) -> dict:
        """Get throttle statistics."""
        state = self.state
        active = sum(
            1 for _, stat in state.iter_stats()
            if _is_current(stat, now, state.config.epoch_length)
        )
        return {
            "epoch": epoch_index(now, state.config.epoch_length),
            "epoch_length": state.config.epoch_length,
            "tracked_users": sum(1 for _ in state.iter_stats()),
            "active_in_epoch": active,
        }
