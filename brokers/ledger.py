# file: ledger.py
"""In-process development chain.

Contracts live at addresses on a :class:`Ledger`. Methods decorated with
:func:`transaction` must be called with ``sender=`` and run atomically: the
ledger snapshots every contract's storage first and restores it if the call
raises, so a reverted transaction leaves no trace. Undecorated methods are
plain reads.
"""
import copy
import functools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eth_utils import is_address, keccak, to_checksum_address

from brokers.config import CHAIN_ID
from brokers.errors import ContractRevert, LedgerError

logger = logging.getLogger(__name__)


def to_address(value) -> str:
    """Signer, contract or hex string -> checksummed address."""
    address = getattr(value, "address", value)
    if not isinstance(address, str) or not is_address(address):
        raise LedgerError(f"Not an address: {value!r}")
    return to_checksum_address(address)


class Event:
    """A decoded log. Arguments are readable as attributes, by name or by position."""

    def __init__(self, name: str, contract_address: str, args: Dict[str, Any]):
        self.name = name
        self.contract_address = contract_address
        self.args = dict(args)

    def __getattr__(self, item):
        args = self.__dict__.get("args", {})
        if item in args:
            return args[item]
        raise AttributeError(item)

    def __getitem__(self, key):
        if isinstance(key, int):
            return self.values()[key]
        return self.args[key]

    def values(self) -> tuple:
        return tuple(self.args.values())

    def __eq__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return (self.name, self.contract_address, self.args) == (
            other.name,
            other.contract_address,
            other.args,
        )

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in self.args.items())
        return f"<{self.name} {args}>"


@dataclass
class Receipt:
    """A committed transaction. Reverted calls raise and never produce one."""

    txn_hash: str
    block_number: int
    sender: str
    contract_address: str
    method: str
    return_value: Any = None
    events: List[Event] = field(default_factory=list)

    def decode_logs(self, name: Optional[str] = None) -> List[Event]:
        if name is None:
            return list(self.events)
        return [e for e in self.events if e.name == name]


def transaction(fn):
    """Mark a contract method as state-changing. Callers must pass ``sender=``."""

    @functools.wraps(fn)
    def wrapper(self, *args, sender, **kwargs):
        return self.ledger.transact(self, fn, args, kwargs, sender)

    wrapper.is_transaction = True
    return wrapper


class Contract:
    """Base for contracts hosted on a :class:`Ledger`.

    Every instance attribute except ``ledger`` and ``address`` is storage and is
    rolled back on revert, so storage must only hold plain data (no references
    to other contracts; keep their addresses instead).
    """

    _transient = ("ledger", "address")

    def __init__(self, ledger: "Ledger", address: str):
        self.ledger = ledger
        self.address = address

    @property
    def msg_sender(self) -> str:
        return self.ledger.msg_sender

    def emit(self, name: str, **args) -> None:
        self.ledger.emit(Event(name, self.address, args))

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy({k: v for k, v in vars(self).items() if k not in self._transient})

    def restore(self, state: Dict[str, Any]) -> None:
        for key in [k for k in vars(self) if k not in self._transient]:
            del self.__dict__[key]
        self.__dict__.update(copy.deepcopy(state))

    def __repr__(self):
        return f"<{type(self).__name__} {self.address}>"


class Ledger:
    """Holds deployed contracts, executes transactions and keeps their receipts.

    Not thread-safe.
    """

    def __init__(self, chain_id: int = CHAIN_ID):
        self.chain_id = chain_id
        self.block_number = 0
        self._contracts: Dict[str, Contract] = {}
        self._nonces = defaultdict(int)
        self._receipts: List[Receipt] = []
        # (sender, contract being executed) for every active call
        self._frames = []
        self._events: List[Event] = []

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------
    @property
    def msg_sender(self) -> str:
        if not self._frames:
            raise LedgerError("msg_sender is only available inside a transaction")
        return self._frames[-1][0]

    @property
    def receipts(self) -> List[Receipt]:
        return list(self._receipts)

    def nonce(self, address) -> int:
        return self._nonces[to_address(address)]

    def at(self, address) -> Contract:
        address = to_address(address)
        if address not in self._contracts:
            raise LedgerError(f"No contract deployed at {address}")
        return self._contracts[address]

    def is_contract(self, address) -> bool:
        return to_address(address) in self._contracts

    def get_logs(self, name: Optional[str] = None, address=None) -> List[Event]:
        address = to_address(address) if address is not None else None
        logs = []
        for receipt in self._receipts:
            for event in receipt.decode_logs(name):
                if address is None or event.contract_address == address:
                    logs.append(event)
        return logs

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------
    def deploy(self, contract_cls, *args, sender) -> Contract:
        """Run `contract_cls`'s constructor with `sender` as deployer and register it."""
        deployer = self._origin(sender)
        address = self._contract_address(deployer)

        snapshot = {a: c.snapshot() for a, c in self._contracts.items()}

        self._frames.append((deployer, address))
        self._events = []
        try:
            contract = contract_cls(self, address, *args)
        except ContractRevert as exc:
            self._rollback(snapshot)
            logger.info("[Ledger] deployment of %s reverted: %s", contract_cls.__name__, exc.revert_message)
            raise
        except Exception:
            self._rollback(snapshot)
            raise
        finally:
            self._frames.pop()

        self._contracts[address] = contract
        self._commit(deployer, address, "constructor", None)
        logger.info("[Ledger] %s deployed at %s by %s", contract_cls.__name__, address, deployer)
        return contract

    def transact(self, contract: Contract, fn, args, kwargs, sender):
        """Execute `fn` on `contract` as `sender`.

        A top-level call returns a :class:`Receipt`. A call made by a contract
        while another transaction runs returns `fn`'s value directly and shares
        the outer transaction's atomicity.
        """
        if self._frames:
            return self._message_call(contract, fn, args, kwargs, sender)

        origin = self._origin(sender)
        snapshot = {address: c.snapshot() for address, c in self._contracts.items()}

        self._frames.append((origin, contract.address))
        self._events = []
        try:
            result = fn(contract, *args, **kwargs)
        except ContractRevert as exc:
            self._rollback(snapshot)
            logger.info(
                "[Ledger] %s.%s from %s reverted: %s",
                type(contract).__name__,
                fn.__name__,
                origin,
                exc.revert_message,
            )
            raise
        except Exception:
            self._rollback(snapshot)
            raise
        finally:
            self._frames.pop()

        return self._commit(origin, contract.address, fn.__name__, result)

    def emit(self, event: Event) -> None:
        if not self._frames:
            raise LedgerError("Events can only be emitted inside a transaction")
        logger.debug("[Ledger] event %r", event)
        self._events.append(event)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _origin(self, sender) -> str:
        if self._frames:
            raise LedgerError("Cannot start a transaction while another one is running")
        address = to_address(sender)
        if address in self._contracts:
            raise LedgerError("Contracts cannot originate transactions")
        return address

    def _message_call(self, contract, fn, args, kwargs, sender):
        caller = to_address(sender)
        running = self._frames[-1][1]
        if caller != running:
            raise LedgerError(f"Only the executing contract {running} can make calls, not {caller}")
        self._frames.append((caller, contract.address))
        try:
            return fn(contract, *args, **kwargs)
        finally:
            self._frames.pop()

    def _rollback(self, snapshot) -> None:
        for address, state in snapshot.items():
            self._contracts[address].restore(state)
        self._events = []

    def _commit(self, sender: str, contract_address: str, method: str, result) -> Receipt:
        nonce = self._nonces[sender]
        self._nonces[sender] += 1
        self.block_number += 1

        receipt = Receipt(
            txn_hash="0x" + keccak(text=f"{self.chain_id}:{sender}:{nonce}").hex(),
            block_number=self.block_number,
            sender=sender,
            contract_address=contract_address,
            method=method,
            return_value=result,
            events=self._events,
        )
        self._events = []
        self._receipts.append(receipt)
        logger.debug("[Ledger] block %d: %s %s", receipt.block_number, method, receipt.txn_hash)
        return receipt

    def _contract_address(self, deployer: str) -> str:
        nonce = self._nonces[deployer]
        digest = keccak(bytes.fromhex(deployer[2:]) + nonce.to_bytes(32, "big"))
        return to_checksum_address("0x" + digest[12:].hex())
