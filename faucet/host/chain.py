"""
The Faucet Host Environment

In-memory execution environment for hosted contracts:
- Native value balances
- Contract registry and gas-capped calls
- Event log
- Atomic units of work with full rollback

Every public operation runs inside `Chain.atomic()`. While a unit is open,
each write to host or contract state records how to undo itself in the
chain's journal. A failure anywhere in the unit replays those entries in
reverse and truncates the event log, so nothing the unit changed survives.
Units nest, so a reentrant call gets its own rollback scope.
"""

from __future__ import annotations
import logging
from abc import ABC
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from faucet.constants import DEFAULT_CALL_GAS
from faucet.core.types import Address, keccak256
from faucet.core.state import restore_entry
from faucet.core.events import Event
from faucet.errors import ExecutionError, InsufficientBalance, OutOfGas, Revert
from faucet.host.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

MAX_CALL_DEPTH = 1024

Undo = Callable[[], None]


class GasMeter:
    """Tracks gas consumed against a fixed allotment."""

    def __init__(self, limit: int):
        self.limit = limit
        self.used = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.used

    def consume(self, amount: int) -> None:
        remaining = self.remaining
        if amount > remaining:
            self.used = self.limit
            raise OutOfGas(f"out of gas: need {amount}, have {remaining}")
        self.used += amount


@dataclass(frozen=True)
class CallContext:
    """What a contract sees while handling a call."""
    chain: "Chain"
    sender: Address
    this: Address
    gas: GasMeter


@dataclass(frozen=True)
class CallResult:
    """Outcome of an external call."""
    success: bool
    return_data: bytes = b""
    gas_used: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class LogEntry:
    """Event together with the address that emitted it."""
    emitter: Address
    event: Event

    def to_dict(self) -> dict:
        entry = self.event.to_dict()
        entry["address"] = self.emitter.checksum()
        return entry


class Contract(ABC):
    """
    Base for hosted contracts.

    Subclasses holding state report every write to `chain.journal` so the
    host can undo it.
    """

    def __init__(self, chain: "Chain", address: Address):
        self.chain = chain
        self.address = address

    def handle_call(self, ctx: CallContext, calldata: bytes) -> bytes:
        """Handle raw calldata. Contracts without a fallback revert."""
        raise Revert("function selector not recognized")

    def on_receive(self, ctx: CallContext, value: int) -> None:
        """Hook run after native value was credited to this contract."""


class Chain:
    """In-memory host for faucet contracts and their collaborators."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self._balances: Dict[Address, int] = {}
        self._contracts: Dict[Address, Contract] = {}
        self._undo: List[Undo] = []
        self._events: List[LogEntry] = []
        self._nonces: Dict[Address, int] = {}
        self._depth = 0
        self._last_now = 0

    # ==========================================================================
    # Time
    # ==========================================================================

    def now(self) -> int:
        """Current timestamp (seconds), never smaller than a previous one."""
        self._last_now = max(self._last_now, self.clock.now())
        return self._last_now

    # ==========================================================================
    # Accounts and contracts
    # ==========================================================================

    def balance_of(self, address: Address) -> int:
        return self._balances.get(address, 0)

    def _set_balance(self, address: Address, amount: int) -> None:
        previous = self._balances.get(address)
        self.journal(lambda: restore_entry(self._balances, address, previous))
        self._balances[address] = amount

    def mint_native(self, address: Address, amount: int) -> None:
        """Credit native value out of thin air (genesis funding)."""
        if amount < 0:
            raise ValueError("amount must be non-negative")
        self._set_balance(address, self.balance_of(address) + amount)

    def new_address(self, deployer: Address) -> Address:
        """Derive the next contract address for a deployer."""
        nonce = self._nonces.get(deployer, 0)
        self._nonces[deployer] = nonce + 1
        return Address(keccak256(deployer.data + nonce.to_bytes(8, "big"))[-20:])

    def deploy(self, contract: Contract) -> Contract:
        """Register a contract so it can be called and receive value."""
        if contract.address in self._contracts:
            raise ValueError(f"Address already taken: {contract.address}")
        self._contracts[contract.address] = contract
        logger.debug(f"Deployed {type(contract).__name__} at {contract.address}")
        return contract

    def is_contract(self, address: Address) -> bool:
        return address in self._contracts

    def get_contract(self, address: Address) -> Optional[Contract]:
        return self._contracts.get(address)

    # ==========================================================================
    # Events
    # ==========================================================================

    def emit(self, emitter: Address, event: Event) -> None:
        self._events.append(LogEntry(emitter=emitter, event=event))

    def events(
        self,
        emitter: Optional[Address] = None,
        name: Optional[str] = None,
    ) -> List[LogEntry]:
        """Get logged events, optionally filtered by emitter and event name."""
        return [
            entry for entry in self._events
            if (emitter is None or entry.emitter == emitter)
            and (name is None or entry.event.name == name)
        ]

    @property
    def event_count(self) -> int:
        return len(self._events)

    # ==========================================================================
    # Units of work
    # ==========================================================================

    def journal(self, undo: Undo) -> None:
        """
        Record how to revert a write that is about to happen.

        Outside a unit of work there is nothing to roll back to, so the
        entry is dropped.
        """
        if self._depth > 0:
            self._undo.append(undo)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Run a block as one all-or-nothing unit.

        Any exception leaving the block reverts every journaled write and
        every event made inside it, then propagates unchanged.
        """
        if self._depth >= MAX_CALL_DEPTH:
            raise ExecutionError("max call depth exceeded")

        undo_mark = len(self._undo)
        event_mark = len(self._events)
        self._depth += 1
        try:
            yield
        except BaseException as e:
            self._rollback(undo_mark, event_mark)
            logger.debug(f"Rolled back unit at depth {self._depth}: {e!r}")
            raise
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._undo.clear()

    def _rollback(self, undo_mark: int, event_mark: int) -> None:
        while len(self._undo) > undo_mark:
            self._undo.pop()()
        del self._events[event_mark:]

    # ==========================================================================
    # Value transfer and calls
    # ==========================================================================

    def transfer(self, sender: Address, to: Address, amount: int) -> None:
        """
        Move native value and run the recipient's receive hook.

        Raises:
            InsufficientBalance: If sender cannot cover amount
            ExecutionError: If the recipient hook fails
        """
        with self.atomic():
            balance = self.balance_of(sender)
            if balance < amount:
                raise InsufficientBalance(f"insufficient balance: {balance} < {amount}")

            self._set_balance(sender, balance - amount)
            self._set_balance(to, self.balance_of(to) + amount)

            recipient = self._contracts.get(to)
            if recipient is not None:
                ctx = CallContext(chain=self, sender=sender, this=to, gas=GasMeter(DEFAULT_CALL_GAS))
                recipient.on_receive(ctx, amount)

        logger.debug(f"Transferred {amount} from {sender} to {to}")

    def call(
        self,
        sender: Address,
        target: Address,
        calldata: bytes,
        gas: int = DEFAULT_CALL_GAS,
    ) -> CallResult:
        """
        Invoke a contract with a fixed gas allotment.

        The callee runs in a nested unit of work: whatever makes it fail,
        its effects are discarded and the failure is reported as
        `success=False` rather than raised. A target without code succeeds
        with no data.
        """
        contract = self._contracts.get(target)
        if contract is None:
            return CallResult(success=True)

        meter = GasMeter(gas)
        ctx = CallContext(chain=self, sender=sender, this=target, gas=meter)
        try:
            with self.atomic():
                return_data = contract.handle_call(ctx, calldata)
        except ExecutionError as e:
            logger.debug(f"Call {sender} -> {target} failed: {e.message}")
            return CallResult(success=False, gas_used=meter.used, error=e.message)
        except Exception as e:
            logger.warning(f"Call {sender} -> {target} crashed: {e!r}")
            return CallResult(success=False, gas_used=meter.used, error=f"{type(e).__name__}: {e}")

        return CallResult(success=True, return_data=return_data or b"", gas_used=meter.used)
