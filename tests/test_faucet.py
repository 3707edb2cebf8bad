"""
The Faucet Contract Tests

Deployment, access control, bulk user management, mint proxy and
epoch-throttled withdrawals.
"""

from unittest import mock

import pytest

from faucet.access.gate import InMemoryAccessGate
from faucet.constants import (
    DEFAULT_EPOCH_LENGTH_SEC,
    DEFAULT_LIMIT_PER_EPOCH,
    FEATURES_USER_MANAGEMENT,
    UNIT,
)
from faucet.contract import TheFaucet
from faucet.core.state import EpochConfig
from faucet.core.types import (
    Roles,
    ZERO_ADDRESS,
    NO_ROLES,
    FULL_PRIVILEGES,
    ACCESS_MANAGER,
    FAUCET_USER,
    FAUCET_MANAGER,
)
from faucet.errors import (
    InvalidInput,
    PoolExhausted,
    ProxyCallFailed,
    QuotaExceeded,
    Revert,
    Unauthorized,
    ValueOutOfRange,
)
from faucet.host.chain import Chain, Contract
from faucet.host.clock import SystemClock
from faucet.host.mocks import MintableNoop, RevertingMintable


class BuggyMintable(Contract):
    """Mint target that fails with a programming error after a write."""

    def handle_call(self, ctx, calldata):
        ctx.chain.mint_native(self.address, 5 * UNIT)
        return bytes(1 // 0)


def event_names(chain, emitter):
    return [entry.event.name for entry in chain.events(emitter=emitter)]


class TestDeployment:
    """Tests for a freshly deployed faucet."""

    def test_defaults(self, faucet_restricted):
        """Test default epoch parameters."""
        assert faucet_restricted.epoch_length() == DEFAULT_EPOCH_LENGTH_SEC == 86400
        assert faucet_restricted.limit_per_epoch() == DEFAULT_LIMIT_PER_EPOCH == 10 * UNIT

    def test_deployer_is_super_admin(self, faucet_restricted, a0):
        assert faucet_restricted.get_role(a0) == FULL_PRIVILEGES

    def test_restricted_has_no_features(self, faucet_restricted):
        assert faucet_restricted.features() == NO_ROLES

    def test_user_management_features(self, faucet):
        assert faucet.features() == Roles(FEATURES_USER_MANAGEMENT)

    def test_empty_pool(self, faucet):
        assert faucet.pool_balance() == 0

    def test_custom_config(self, chain, a0):
        deployed = TheFaucet.deploy(chain, a0, config=EpochConfig(epoch_length=60, limit=5))
        assert deployed.epoch_length() == 60
        assert deployed.limit_per_epoch() == 5

    def test_receive(self, faucet, chain, a0):
        """Test anybody can fund the pool."""
        faucet.receive(a0, 3 * UNIT)
        assert faucet.pool_balance() == 3 * UNIT
        assert chain.balance_of(faucet.address) == 3 * UNIT

    def test_stats_before_first_withdrawal(self, faucet, a1):
        stats = faucet.get_withdrawal_stats(a1)
        assert stats.last_withdrawal_timestamp == 0
        assert stats.withdrawn_in_epoch == 0


class TestRestrictedDeployment:
    """Tests for a faucet deployed without user management features."""

    def test_add_users_disabled(self, faucet_restricted, a0, a1):
        """Test the faucet cannot write roles on its own authority."""
        with pytest.raises(Unauthorized):
            faucet_restricted.add_users(a0, [a1])
        assert faucet_restricted.get_role(a1) == NO_ROLES

    def test_remove_users_disabled(self, faucet_restricted, a0, a1):
        faucet_restricted.update_role(a0, a1, FAUCET_USER)
        with pytest.raises(Unauthorized):
            faucet_restricted.remove_users(a0, [a1])
        assert faucet_restricted.get_role(a1) == FAUCET_USER

    def test_enable_later(self, faucet_restricted, a0, a1):
        """Test granting the features enables bulk management."""
        faucet_restricted.update_features(a0, Roles(FEATURES_USER_MANAGEMENT))
        faucet_restricted.add_users(a0, [a1])
        assert faucet_restricted.get_role(a1) == FAUCET_USER


class TestAccessControl:
    """Tests for capability checks on every operation."""

    def test_set_epoch_params_requires_manager(self, faucet, a0, a1):
        faucet.update_role(a0, a1, ~FAUCET_MANAGER)
        with pytest.raises(Unauthorized):
            faucet.set_epoch_params(a1, 3600, UNIT)

        faucet.update_role(a0, a1, FAUCET_MANAGER)
        faucet.set_epoch_params(a1, 3600, UNIT)
        assert faucet.epoch_length() == 3600

    def test_set_user_limit_override_requires_manager(self, faucet, a0, a1, a2):
        faucet.update_role(a0, a1, ~FAUCET_MANAGER)
        with pytest.raises(Unauthorized):
            faucet.set_user_limit_override(a1, a2, UNIT)

        faucet.update_role(a0, a1, FAUCET_MANAGER)
        faucet.set_user_limit_override(a1, a2, UNIT)
        assert faucet.get_limit_override(a2) == UNIT

    def test_add_users_requires_manager(self, faucet, a0, a1, a2):
        faucet.update_role(a0, a1, ~FAUCET_MANAGER)
        with pytest.raises(Unauthorized):
            faucet.add_users(a1, [a2])

        faucet.update_role(a0, a1, FAUCET_MANAGER)
        faucet.add_users(a1, [a2])
        assert faucet.is_operator_in_role(a2, FAUCET_USER)

    def test_remove_users_requires_manager(self, faucet, a0, a1, a2):
        faucet.add_users(a0, [a2])
        faucet.update_role(a0, a1, ~FAUCET_MANAGER)
        with pytest.raises(Unauthorized):
            faucet.remove_users(a1, [a2])

        faucet.update_role(a0, a1, FAUCET_MANAGER)
        faucet.remove_users(a1, [a2])
        assert not faucet.is_operator_in_role(a2, FAUCET_USER)

    def test_withdraw_requires_user(self, funded_faucet, a0, a1):
        funded_faucet.update_role(a0, a1, ~FAUCET_USER)
        with pytest.raises(Unauthorized):
            funded_faucet.withdraw(a1, a1, UNIT)

        funded_faucet.update_role(a0, a1, FAUCET_USER)
        funded_faucet.withdraw(a1, a1, UNIT)

    def test_mint_requires_user(self, faucet, mintable, a0, a1):
        faucet.update_role(a0, a1, ~FAUCET_USER)
        with pytest.raises(Unauthorized):
            faucet.mint(a1, mintable.address, a1, 1)

        faucet.update_role(a0, a1, FAUCET_USER)
        faucet.mint(a1, mintable.address, a1, 1)

    def test_unauthorized_details(self, faucet, a1):
        with pytest.raises(Unauthorized) as exc_info:
            faucet.set_epoch_params(a1, 1, 1)
        assert exc_info.value.details["caller"] == a1.checksum()
        assert exc_info.value.details["required"] == hex(FAUCET_MANAGER.bits)

    def test_update_role_requires_access_manager(self, faucet, a1, a2):
        with pytest.raises(Unauthorized):
            faucet.update_role(a1, a2, FAUCET_USER)


class TestBulkUserManagement:
    """Tests for addUsers/removeUsers."""

    def test_add_users(self, faucet, a0, a1, a2, a3):
        faucet.add_users(a0, [a1, a2, a3])
        for user in (a1, a2, a3):
            assert faucet.get_role(user) == FAUCET_USER

    def test_add_users_emits_role_updated(self, faucet, chain, a0, a1, a2):
        """Test one event per address, written under the faucet identity."""
        first = chain.event_count
        faucet.add_users(a0, [a1, a2])

        entries = chain.events()[first:]
        assert [entry.event.name for entry in entries] == ["RoleUpdated", "RoleUpdated"]
        assert [entry.event.to for entry in entries] == [a1, a2]
        for entry in entries:
            assert entry.emitter == faucet.address
            assert entry.event.by == faucet.address
            assert entry.event.assigned == FAUCET_USER

    def test_remove_users(self, faucet, a0, a1, a2):
        faucet.add_users(a0, [a1, a2])
        faucet.remove_users(a0, [a1, a2])
        assert faucet.get_role(a1) == NO_ROLES
        assert faucet.get_role(a2) == NO_ROLES

    def test_empty_list(self, faucet, a0):
        with pytest.raises(InvalidInput, match="empty users array"):
            faucet.add_users(a0, [])
        with pytest.raises(InvalidInput, match="empty users array"):
            faucet.remove_users(a0, [])

    def test_other_bits_preserved(self, faucet, a0, a1):
        """Test only the user bit changes."""
        other = Roles(0x1) | FAUCET_MANAGER
        faucet.update_role(a0, a1, other)

        faucet.add_users(a0, [a1])
        assert faucet.get_role(a1) == other | FAUCET_USER

        faucet.remove_users(a0, [a1])
        assert faucet.get_role(a1) == other

    def test_idempotent(self, faucet, a0, a1):
        faucet.add_users(a0, [a1, a1])
        assert faucet.get_role(a1) == FAUCET_USER
        faucet.remove_users(a0, [a1])
        faucet.remove_users(a0, [a1])
        assert faucet.get_role(a1) == NO_ROLES

    def test_admin_self_removal_and_recovery(self, faucet, a0):
        """Test a super admin dropping its own user bit keeps everything else."""
        faucet.remove_users(a0, [a0])
        assert faucet.get_role(a0) == FULL_PRIVILEGES - FAUCET_USER
        assert faucet.is_operator_in_role(a0, FAUCET_MANAGER | ACCESS_MANAGER)

        faucet.add_users(a0, [a0])
        assert faucet.get_role(a0) == FULL_PRIVILEGES

    def test_manager_without_access_manager(self, faucet, a0, a1, a2):
        """Test a plain manager edits roles via the faucet features."""
        faucet.update_role(a0, a1, FAUCET_MANAGER)
        faucet.add_users(a1, [a2])
        assert faucet.get_role(a2) == FAUCET_USER

    def test_all_or_nothing(self, chain, a0, a1, a2, a3):
        """Test a failure on one address undoes the whole batch."""

        class FlakyGate(InMemoryAccessGate):
            def set_bitmask(self, context, target, desired):
                if target == a3:
                    raise Revert("store unavailable")
                return super().set_bitmask(context, target, desired)

        gate = FlakyGate(chain, emitter=a0, owner=a0)
        flaky = TheFaucet.deploy(chain, a0, gate=gate, enable_user_management=True)
        first = chain.event_count

        with pytest.raises(Revert):
            flaky.add_users(a0, [a1, a2, a3])

        assert flaky.get_role(a1) == NO_ROLES
        assert flaky.get_role(a2) == NO_ROLES
        assert chain.event_count == first


class TestAdminConfig:
    """Tests for epoch parameters and limit overrides."""

    def test_set_epoch_params(self, faucet, chain, a0):
        faucet.set_epoch_params(a0, 3600, 2 * UNIT)

        assert faucet.epoch_length() == 3600
        assert faucet.limit_per_epoch() == 2 * UNIT

        event = chain.events(emitter=faucet.address, name="EpochParamsUpdated")[-1].event
        assert (event.by, event.epoch_length, event.limit) == (a0, 3600, 2 * UNIT)

    def test_epoch_length_not_set(self, faucet, a0):
        with pytest.raises(InvalidInput, match="epoch length not set"):
            faucet.set_epoch_params(a0, 0, UNIT)
        assert faucet.epoch_length() == DEFAULT_EPOCH_LENGTH_SEC

    def test_negative_limit(self, faucet, a0, a1):
        with pytest.raises(InvalidInput):
            faucet.set_epoch_params(a0, 60, -1)
        with pytest.raises(InvalidInput):
            faucet.set_user_limit_override(a0, a1, -1)

    def test_zero_default_limit(self, funded_faucet, a0, a1):
        """Test a zero default blocks users without override."""
        funded_faucet.add_users(a0, [a1])
        funded_faucet.set_epoch_params(a0, DEFAULT_EPOCH_LENGTH_SEC, 0)

        assert funded_faucet.get_remaining_allowance(a1) == 0
        with pytest.raises(QuotaExceeded):
            funded_faucet.withdraw(a1, a1, 1)

        funded_faucet.set_user_limit_override(a0, a1, UNIT)
        funded_faucet.withdraw(a1, a1, UNIT)

    def test_user_limit_override(self, faucet, chain, a0, a1):
        faucet.set_user_limit_override(a0, a1, 3 * UNIT)

        assert faucet.get_limit_override(a1) == 3 * UNIT
        assert faucet.get_effective_limit(a1) == 3 * UNIT

        event = chain.events(emitter=faucet.address, name="UserLimitUpdated")[-1].event
        assert (event.by, event.user, event.limit) == (a0, a1, 3 * UNIT)

    def test_clear_override(self, faucet, a0, a1):
        faucet.set_user_limit_override(a0, a1, 3 * UNIT)
        faucet.set_user_limit_override(a0, a1, 0)

        assert faucet.get_limit_override(a1) == 0
        assert faucet.get_effective_limit(a1) == DEFAULT_LIMIT_PER_EPOCH

    def test_override_user_not_set(self, faucet, a0):
        with pytest.raises(InvalidInput, match="user address not set"):
            faucet.set_user_limit_override(a0, ZERO_ADDRESS, UNIT)


class TestMintProxy:
    """Tests for the mint proxy."""

    def test_mint(self, faucet, chain, mintable, a0, a1):
        """Test the target is called and both events are logged."""
        result = faucet.mint(a0, mintable.address, a1, 5)

        assert result.success
        assert mintable.minted[a1] == 5
        assert event_names(chain, mintable.address) == ["MintLogged"]

        event = chain.events(emitter=faucet.address, name="MintProxied")[-1].event
        assert (event.target, event.to, event.value) == (mintable.address, a1, 5)

    def test_largest_value(self, faucet, mintable, a0, a1):
        faucet.mint(a0, mintable.address, a1, 2 ** 192 - 1)
        assert mintable.minted[a1] == 2 ** 192 - 1

    def test_value_out_of_bounds(self, faucet, chain, mintable, a0, a1):
        first = chain.event_count
        with pytest.raises(ValueOutOfRange, match="value out-of-bounds"):
            faucet.mint(a0, mintable.address, a1, 2 ** 192)
        assert chain.event_count == first

    def test_input_validation(self, faucet, mintable, a0, a1):
        with pytest.raises(InvalidInput, match="target contract not set"):
            faucet.mint(a0, ZERO_ADDRESS, a1, 1)
        with pytest.raises(InvalidInput, match="recipient not set"):
            faucet.mint(a0, mintable.address, ZERO_ADDRESS, 1)
        with pytest.raises(InvalidInput, match="value not set"):
            faucet.mint(a0, mintable.address, a1, 0)

    def test_reverting_target(self, faucet, chain, a0, a1):
        target = RevertingMintable.deploy(chain, a0)
        with pytest.raises(ProxyCallFailed, match="mint failed") as exc_info:
            faucet.mint(a0, target.address, a1, 1)
        assert exc_info.value.details["reason"] == "minting disabled"
        assert chain.events(name="MintProxied") == []

    def test_gas_hungry_target(self, faucet, chain, a0, a1):
        """Test the forwarded gas is capped."""
        target = MintableNoop.deploy(chain, a0, gas_cost=100_000)
        with pytest.raises(ProxyCallFailed):
            faucet.mint(a0, target.address, a1, 1)
        assert target.minted == {}

    def test_crashing_target(self, faucet, chain, a0, a1):
        """Test an unexpected target failure is a failed call."""
        target = chain.deploy(BuggyMintable(chain, chain.new_address(a0)))

        with pytest.raises(ProxyCallFailed) as exc_info:
            faucet.mint(a0, target.address, a1, 1)

        assert exc_info.value.details["reason"].startswith("ZeroDivisionError")
        assert chain.balance_of(target.address) == 0
        assert chain.events(name="MintProxied") == []

    def test_target_without_code(self, faucet, chain, a0, a1, a2):
        """Test calling a plain address succeeds."""
        faucet.mint(a0, a2, a1, 1)
        assert len(chain.events(name="MintProxied")) == 1

    def test_does_not_touch_pool_or_quota(self, funded_faucet, mintable, a0, a1):
        funded_faucet.mint(a0, mintable.address, a1, 100 * UNIT)
        assert funded_faucet.pool_balance() == 20 * UNIT
        assert funded_faucet.get_remaining_allowance(a0) == DEFAULT_LIMIT_PER_EPOCH


class TestWithdraw:
    """Tests for throttled withdrawals."""

    def test_withdraw(self, funded_faucet, chain, a0, a1):
        before = chain.balance_of(a1)
        funded_faucet.withdraw(a0, a1, 3 * UNIT)

        assert chain.balance_of(a1) == before + 3 * UNIT
        assert funded_faucet.pool_balance() == 17 * UNIT
        assert funded_faucet.get_withdrawn_in_epoch(a0) == 3 * UNIT
        assert funded_faucet.get_remaining_allowance(a0) == 7 * UNIT

        event = chain.events(emitter=funded_faucet.address, name="Withdrawn")[-1].event
        assert (event.to, event.value) == (a1, 3 * UNIT)

    def test_charged_to_caller(self, funded_faucet, a0, a1):
        """Test the caller's allowance is used, not the recipient's."""
        funded_faucet.withdraw(a0, a1, 3 * UNIT)
        assert funded_faucet.get_withdrawn_in_epoch(a1) == 0
        assert funded_faucet.get_remaining_allowance(a1) == DEFAULT_LIMIT_PER_EPOCH

    def test_empty_pool(self, faucet, a0, a1):
        with pytest.raises(PoolExhausted, match="balance exceeded"):
            faucet.withdraw(a0, a1, 1)

    def test_over_limit(self, funded_faucet, a0, a1):
        with pytest.raises(QuotaExceeded, match="allowance exceeded"):
            funded_faucet.withdraw(a0, a1, 10 * UNIT + 1)

    def test_exact_limit(self, funded_faucet, a0, a1):
        funded_faucet.withdraw(a0, a1, 10 * UNIT)
        assert funded_faucet.get_remaining_allowance(a0) == 0

    def test_quota_checked_before_pool(self, faucet, a0, a1):
        """Test an over-limit request against an empty pool reports the quota."""
        with pytest.raises(QuotaExceeded):
            faucet.withdraw(a0, a1, 11 * UNIT)

    def test_input_validation(self, funded_faucet, a0, a1):
        with pytest.raises(InvalidInput, match="recipient not set"):
            funded_faucet.withdraw(a0, ZERO_ADDRESS, 1)
        with pytest.raises(InvalidInput, match="value not set"):
            funded_faucet.withdraw(a0, a1, 0)
        with pytest.raises(InvalidInput):
            funded_faucet.withdraw(a0, a1, -1)

    def test_stats_accumulate(self, funded_faucet, clock, a0, a1):
        funded_faucet.withdraw(a0, a1, 2 * UNIT)
        clock.advance(10)
        funded_faucet.withdraw(a0, a1, 3 * UNIT)

        stats = funded_faucet.get_withdrawal_stats(a0)
        assert stats.withdrawn_in_epoch == 5 * UNIT
        assert stats.last_withdrawal_timestamp == clock.now()

    def test_failed_withdraw_changes_nothing(self, funded_faucet, chain, a0, a1):
        funded_faucet.withdraw(a0, a1, 8 * UNIT)
        first = chain.event_count

        with pytest.raises(QuotaExceeded):
            funded_faucet.withdraw(a0, a1, 3 * UNIT)

        assert funded_faucet.get_withdrawn_in_epoch(a0) == 8 * UNIT
        assert funded_faucet.pool_balance() == 12 * UNIT
        assert chain.event_count == first

    def test_limit_lowered_mid_epoch(self, funded_faucet, a0, a1):
        """Test the allowance floors at zero."""
        funded_faucet.withdraw(a0, a1, 5 * UNIT)
        funded_faucet.set_user_limit_override(a0, a0, 2 * UNIT)

        assert funded_faucet.get_remaining_allowance(a0) == 0
        with pytest.raises(QuotaExceeded):
            funded_faucet.withdraw(a0, a1, 1)

    def test_override_raises_limit(self, funded_faucet, a0, a1):
        funded_faucet.set_user_limit_override(a0, a0, 15 * UNIT)
        funded_faucet.withdraw(a0, a1, 15 * UNIT)
        assert funded_faucet.pool_balance() == 5 * UNIT


class TestEpochSwitch:
    """Tests for allowance renewal at epoch boundaries."""

    def test_allowance_renewed(self, funded_faucet, clock, a0, a1):
        funded_faucet.withdraw(a0, a1, 10 * UNIT)
        with pytest.raises(QuotaExceeded):
            funded_faucet.withdraw(a0, a1, 1)

        clock.advance(DEFAULT_EPOCH_LENGTH_SEC)

        assert funded_faucet.get_withdrawn_in_epoch(a0) == 0
        funded_faucet.withdraw(a0, a1, 10 * UNIT)
        assert funded_faucet.get_withdrawal_stats(a0).withdrawn_in_epoch == 10 * UNIT

    def test_boundary_is_absolute(self, funded_faucet, clock, a0, a1):
        """Test a withdrawal just before the boundary does not block the next epoch."""
        boundary = (clock.now() // DEFAULT_EPOCH_LENGTH_SEC + 1) * DEFAULT_EPOCH_LENGTH_SEC
        clock.set(boundary - 1)
        funded_faucet.withdraw(a0, a1, 10 * UNIT)

        clock.set(boundary)
        funded_faucet.withdraw(a0, a1, 10 * UNIT)
        assert funded_faucet.pool_balance() == 0

    def test_stale_stats_reset(self, funded_faucet, clock, a0, a1):
        funded_faucet.withdraw(a0, a1, 7 * UNIT)
        clock.advance(3 * DEFAULT_EPOCH_LENGTH_SEC)
        funded_faucet.withdraw(a0, a1, UNIT)

        stats = funded_faucet.get_withdrawal_stats(a0)
        assert stats.withdrawn_in_epoch == UNIT
        assert stats.last_withdrawal_timestamp == clock.now()


class Rejecting(Contract):
    """Recipient that refuses incoming value."""

    def on_receive(self, ctx, value):
        raise Revert("refused")


class Crashing(Contract):
    """Recipient whose receive hook has a bug."""

    def on_receive(self, ctx, value):
        raise RuntimeError("hook bug")


class Reentrant(Contract):
    """Recipient that withdraws again while receiving."""

    def __init__(self, chain, address, faucet, amount):
        super().__init__(chain, address)
        self.faucet = faucet
        self.amount = amount
        self.observed_allowance = None
        self.inner_error = None
        self.entered = False

    def on_receive(self, ctx, value):
        if self.entered:
            return
        self.entered = True
        self.observed_allowance = self.faucet.get_remaining_allowance(self.address)
        try:
            self.faucet.withdraw(self.address, self.address, self.amount)
        except QuotaExceeded as e:
            self.inner_error = e


class TestRecipientHooks:
    """Tests for recipients running code on receipt."""

    def test_rejecting_recipient_rolls_back(self, funded_faucet, chain, a0):
        """Test nothing survives a failed transfer."""
        recipient = chain.deploy(Rejecting(chain, chain.new_address(a0)))
        first = chain.event_count

        with pytest.raises(Revert, match="refused"):
            funded_faucet.withdraw(a0, recipient.address, UNIT)

        assert funded_faucet.pool_balance() == 20 * UNIT
        assert funded_faucet.get_withdrawn_in_epoch(a0) == 0
        assert funded_faucet.get_withdrawal_stats(a0).last_withdrawal_timestamp == 0
        assert chain.event_count == first

    def test_crashing_recipient_rolls_back(self, funded_faucet, chain, a0):
        """Test a non-revert failure in the hook also undoes the withdrawal."""
        recipient = chain.deploy(Crashing(chain, chain.new_address(a0)))

        with pytest.raises(RuntimeError, match="hook bug"):
            funded_faucet.withdraw(a0, recipient.address, UNIT)

        assert funded_faucet.pool_balance() == 20 * UNIT
        assert funded_faucet.get_withdrawn_in_epoch(a0) == 0
        assert chain.balance_of(recipient.address) == 0
        assert chain.events(name="Withdrawn") == []

    def test_reentrant_sees_reduced_allowance(self, funded_faucet, chain, a0):
        """Test stats are recorded before value leaves the pool."""
        recipient = chain.deploy(
            Reentrant(chain, chain.new_address(a0), funded_faucet, 6 * UNIT)
        )
        funded_faucet.add_users(a0, [recipient.address])

        funded_faucet.withdraw(recipient.address, recipient.address, 6 * UNIT)

        assert recipient.observed_allowance == 4 * UNIT
        assert isinstance(recipient.inner_error, QuotaExceeded)
        assert funded_faucet.get_withdrawn_in_epoch(recipient.address) == 6 * UNIT
        assert funded_faucet.pool_balance() == 14 * UNIT

    def test_reentrant_within_allowance(self, funded_faucet, chain, a0):
        recipient = chain.deploy(
            Reentrant(chain, chain.new_address(a0), funded_faucet, 4 * UNIT)
        )
        funded_faucet.add_users(a0, [recipient.address])

        funded_faucet.withdraw(recipient.address, recipient.address, 6 * UNIT)

        assert recipient.inner_error is None
        assert funded_faucet.get_withdrawn_in_epoch(recipient.address) == 10 * UNIT
        assert funded_faucet.get_remaining_allowance(recipient.address) == 0
        assert funded_faucet.pool_balance() == 10 * UNIT
        assert len(chain.events(emitter=funded_faucet.address, name="Withdrawn")) == 2


class TestWallClockStepBack:
    """Tests for a system clock that is set backwards."""

    def test_quota_survives_step_back(self, a0, a1):
        epoch_start = 19678 * DEFAULT_EPOCH_LENGTH_SEC
        with mock.patch("faucet.host.clock.time.time") as wall:
            wall.return_value = epoch_start + 1
            chain = Chain(clock=SystemClock())
            chain.mint_native(a0, 100 * UNIT)
            faucet = TheFaucet.deploy(chain, deployer=a0)
            faucet.receive(a0, 20 * UNIT)
            faucet.withdraw(a0, a1, DEFAULT_LIMIT_PER_EPOCH)

            wall.return_value = epoch_start - 4
            with pytest.raises(QuotaExceeded):
                faucet.withdraw(a0, a1, UNIT)

            assert chain.now() == epoch_start + 1

        assert faucet.get_withdrawal_stats(a0).last_withdrawal_timestamp == epoch_start + 1
        assert chain.balance_of(a1) == DEFAULT_LIMIT_PER_EPOCH

def test_repr(funded_faucet):
    text = repr(funded_faucet)
    assert "TheFaucet" in text
    assert str(20 * UNIT) in text

