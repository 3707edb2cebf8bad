"""
The Faucet Test Fixtures
"""

import asyncio

import pytest

from faucet.constants import UNIT
from faucet.core.types import Address
from faucet.contract import TheFaucet
from faucet.host.chain import Chain
from faucet.host.clock import ManualClock
from faucet.host.mocks import MintableNoop

GENESIS_TIME = 1_700_000_000


@pytest.fixture
def a0() -> Address:
    """Deployer, owner, super admin."""
    return Address.from_int(0xA0)


@pytest.fixture
def a1() -> Address:
    return Address.from_int(0xA1)


@pytest.fixture
def a2() -> Address:
    return Address.from_int(0xA2)


@pytest.fixture
def a3() -> Address:
    return Address.from_int(0xA3)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(GENESIS_TIME)


@pytest.fixture
def chain(clock, a0) -> Chain:
    """Chain where the deployer holds 1000 units."""
    chain = Chain(clock=clock)
    chain.mint_native(a0, 1000 * UNIT)
    return chain


@pytest.fixture
def faucet_restricted(chain, a0) -> TheFaucet:
    """Faucet deployed without add/remove users functions enabled."""
    return TheFaucet.deploy(chain, deployer=a0)


@pytest.fixture
def faucet(chain, a0) -> TheFaucet:
    """Faucet deployed with add/remove users functions enabled."""
    return TheFaucet.deploy(chain, deployer=a0, enable_user_management=True)


@pytest.fixture
def funded_faucet(faucet, a0) -> TheFaucet:
    """Faucet holding 20 units."""
    faucet.receive(a0, 20 * UNIT)
    return faucet


@pytest.fixture
def mintable(chain, a0) -> MintableNoop:
    return MintableNoop.deploy(chain, a0)


@pytest.fixture
def async_runner():
    """Helper for running async functions in tests."""
    def runner(coro):
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()
    return runner
