import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

import pytest

from pocket_sdk.config import SDKConfig
from pocket_sdk.errors import RpcError
from pocket_sdk.events.indexer import EVENT_MANAGER, EventIndexer
from pocket_sdk.tx.build import TransactionBuilder
from pocket_sdk.tx.encode import (decode_signed_transaction, signing_message,
                                  transaction_hash)
from pocket_sdk.tx.params import (CreatePocketParams, SetAllowedOperatorParams,
                                  SetInteractiveTargetParams)
from pocket_sdk.tx.send import TransactionSigner
from pocket_sdk.types.core import AccountAddress, EntryFunctionPayload
from pocket_sdk.types.pocket import PocketStatus
from pocket_sdk.utils.bcs import Deserializer
from pocket_sdk.wallet.signer import (Account, address_from_public_key,
                                      derive_resource_account_address,
                                      verify_signature)

CHAIN_ID = 4
GENESIS_TIME = 1_700_000_000
PROGRAM_SEED = "hamsterpocket-test"

BASE_COIN = "0x1::aptos_coin::AptosCoin"
TARGET_COIN = "0xf22bede237a07e121b56d91a491eb7bcdfd1f5907926a9e58338f964a01b17fa::asset::USDC"

# Simulated swap price: 1 base -> 2 target
SWAP_RATE = 2

# (name, code) of the chef aborts the fake program raises
E_NOT_ADMIN = ("E_NOT_ADMIN", 0x50001)
E_NOT_OPERATOR = ("E_NOT_OPERATOR", 0x50002)
E_NOT_OWNER = ("E_NOT_OWNER", 0x50003)
E_INVALID_STATUS = ("E_INVALID_STATUS", 0x30004)
E_POCKET_NOT_FOUND = ("E_POCKET_NOT_FOUND", 0x60005)
E_POCKET_EXISTS = ("E_POCKET_EXISTS", 0x80006)
E_TARGET_NOT_ALLOWED = ("E_TARGET_NOT_ALLOWED", 0x10007)
E_INSUFFICIENT_BALANCE = ("E_INSUFFICIENT_BALANCE", 0x10008)
E_SLIPPAGE = ("E_SLIPPAGE", 0x10009)
E_INVALID_COIN = ("E_INVALID_COIN", 0x1000A)


class MoveAbort(Exception):
    def __init__(self, location: str, abort: tuple) -> None:
        name, code = abort
        super().__init__(f"Move abort in {location}: {name}({hex(code)}): ")
        self.vm_status = str(self)


# -----------------------------------------------------------------------------
# In-memory model of the chef program
# -----------------------------------------------------------------------------


@dataclass
class ChefState:
    program: str
    admins: Set[str] = field(default_factory=set)
    operators: Set[str] = field(default_factory=set)
    targets: Set[str] = field(default_factory=set)
    pockets: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    creation_numbers: Dict[str, int] = field(default_factory=dict)


class FakeChef:
    """Executes decoded entry-function calls against a `ChefState`."""

    def __init__(self, state: ChefState, now: int) -> None:
        self.s = state
        self.now = now
        self.location = f"{AccountAddress.from_hex(state.program).short_hex()}::chef"

    # ---- helpers ----

    def abort(self, err: tuple) -> None:
        raise MoveAbort(self.location, err)

    def emit(self, name: str, type_name: str, data: Dict[str, Any]) -> None:
        stream = self.s.events.setdefault(name, [])
        creation = self.s.creation_numbers.setdefault(name, len(self.s.creation_numbers))
        stream.append(
            {
                "guid": {"creation_number": str(creation), "account_address": self.s.program},
                "sequence_number": str(len(stream)),
                "type": f"{self.s.program}::event::{type_name}",
                "data": data,
            }
        )

    def require_admin(self, sender: str) -> None:
        if sender not in self.s.admins:
            self.abort(E_NOT_ADMIN)

    def pocket(self, pocket_id: str) -> Dict[str, Any]:
        p = self.s.pockets.get(pocket_id)
        if p is None:
            self.abort(E_POCKET_NOT_FOUND)
        return p

    def owned_pocket(self, sender: str, pocket_id: str) -> Dict[str, Any]:
        p = self.pocket(pocket_id)
        if p["owner"] != sender:
            self.abort(E_NOT_OWNER)
        return p

    def set_status(self, sender: str, p: Dict[str, Any], status: PocketStatus, reason: str) -> None:
        current = PocketStatus(int(p["status"]))
        if not current.can_transition_to(status):
            self.abort(E_INVALID_STATUS)
        p["status"] = str(int(status))
        self.emit(
            "update_pocket_status",
            "UpdatePocketStatusEvent",
            {"id": p["id"], "actor": sender, "status": p["status"], "reason": reason, "timestamp": str(self.now)},
        )

    def emit_pocket(self, name: str, sender: str, p: Dict[str, Any], reason: str) -> None:
        self.emit(
            name,
            "UpdatePocketEvent",
            {"id": p["id"], "actor": sender, "pocket": copy.deepcopy(p), "reason": reason, "timestamp": str(self.now)},
        )

    @staticmethod
    def read_conditions(de_args: List[Deserializer]) -> Dict[str, Any]:
        open_pos, take_profit, stop_loss, auto_close = (d.sequence(Deserializer.u64) for d in de_args)
        assert len(open_pos) == 3 and len(take_profit) == 2 and len(stop_loss) == 2
        assert len(auto_close) % 2 == 0
        return {
            "open_position_condition": {
                "operator": str(open_pos[0]),
                "value_x": str(open_pos[1]),
                "value_y": str(open_pos[2]),
            },
            "take_profit_condition": {"stopped_with": str(take_profit[0]), "value": str(take_profit[1])},
            "stop_loss_condition": {"stopped_with": str(stop_loss[0]), "value": str(stop_loss[1])},
            "auto_close_conditions": [
                {"closed_with": str(auto_close[i]), "value": str(auto_close[i + 1])}
                for i in range(0, len(auto_close), 2)
            ],
        }

    # ---- dispatch ----

    def call(self, sender: str, payload: EntryFunctionPayload) -> None:
        args = [Deserializer(a) for a in payload.args]
        type_args = [str(t) for t in payload.type_args]
        handler: Callable[..., None] = getattr(self, f"fn_{payload.function}")
        handler(sender, type_args, args)
        for d in args:
            d.finish()

    # ---- pocket lifecycle ----

    def _create(self, sender: str, type_args: List[str], args: List[Deserializer]) -> Dict[str, Any]:
        base, target = type_args
        if base not in self.s.targets or target not in self.s.targets:
            self.abort(E_TARGET_NOT_ALLOWED)
        pocket_id = args[0].str()
        if pocket_id in self.s.pockets:
            self.abort(E_POCKET_EXISTS)
        amm, start_at, frequency, batch_volume = (d.u64() for d in args[1:5])
        p = {
            "id": pocket_id,
            "owner": sender,
            "base_coin_type": base,
            "target_coin_type": target,
            "amm": str(amm),
            "status": str(int(PocketStatus.ACTIVE)),
            "base_coin_balance": "0",
            "target_coin_balance": "0",
            "start_at": str(start_at),
            "frequency": str(frequency),
            "next_scheduled_execution_at": str(start_at),
            "batch_volume": str(batch_volume),
            "executed_batch_amount": "0",
            **self.read_conditions(args[5:9]),
            "total_deposited_base_amount": "0",
            "total_swapped_base_amount": "0",
            "total_received_target_amount": "0",
            "total_received_fund_in_base_amount": "0",
            "total_closed_position_in_target_amount": "0",
        }
        self.s.pockets[pocket_id] = p
        self.emit_pocket("create_pocket", sender, p, "USER_CREATED_POCKET")
        return p

    def fn_create_pocket(self, sender, type_args, args) -> None:
        self._create(sender, type_args, args)

    def fn_create_and_deposit_to_pocket(self, sender, type_args, args) -> None:
        p = self._create(sender, type_args, args[:9])
        self._deposit(sender, p, args[9].u64())

    def fn_update_pocket(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        if PocketStatus(int(p["status"])) not in (PocketStatus.ACTIVE, PocketStatus.PAUSED):
            self.abort(E_INVALID_STATUS)
        start_at, frequency, batch_volume = (d.u64() for d in args[1:4])
        p.update(
            start_at=str(start_at),
            frequency=str(frequency),
            batch_volume=str(batch_volume),
            next_scheduled_execution_at=str(start_at),
            **self.read_conditions(args[4:8]),
        )
        self.emit_pocket("update_pocket", sender, p, "USER_UPDATED_POCKET")

    def fn_pause_pocket(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        self.set_status(sender, p, PocketStatus.PAUSED, "USER_PAUSED_POCKET")

    def fn_restart_pocket(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        self.set_status(sender, p, PocketStatus.ACTIVE, "USER_RESTARTED_POCKET")

    def fn_close_pocket(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        self.set_status(sender, p, PocketStatus.CLOSED, "USER_CLOSED_POCKET")

    # ---- vault ----

    def _deposit(self, sender: str, p: Dict[str, Any], amount: int) -> None:
        if PocketStatus(int(p["status"])) not in (PocketStatus.ACTIVE, PocketStatus.PAUSED):
            self.abort(E_INVALID_STATUS)
        p["base_coin_balance"] = str(int(p["base_coin_balance"]) + amount)
        p["total_deposited_base_amount"] = str(int(p["total_deposited_base_amount"]) + amount)
        self.emit(
            "update_deposit_stats",
            "UpdateDepositStatsEvent",
            {
                "id": p["id"],
                "actor": sender,
                "amount": str(amount),
                "coin_type": p["base_coin_type"],
                "reason": "USER_DEPOSITED_ASSET",
                "timestamp": str(self.now),
            },
        )

    def fn_deposit(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        if type_args != [p["base_coin_type"]]:
            self.abort(E_INVALID_COIN)
        self._deposit(sender, p, args[1].u64())

    def _withdraw(self, sender: str, p: Dict[str, Any]) -> None:
        if PocketStatus(int(p["status"])) is not PocketStatus.CLOSED:
            self.abort(E_INVALID_STATUS)
        self.emit(
            "update_withdrawal_stats",
            "UpdateWithdrawalStatsEvent",
            {
                "id": p["id"],
                "actor": sender,
                "base_coin_amount": p["base_coin_balance"],
                "base_coin_type": p["base_coin_type"],
                "target_coin_amount": p["target_coin_balance"],
                "target_coin_type": p["target_coin_type"],
                "reason": "USER_WITHDREW_ASSETS",
                "timestamp": str(self.now),
            },
        )
        p["base_coin_balance"] = "0"
        p["target_coin_balance"] = "0"
        self.set_status(sender, p, PocketStatus.WITHDRAWN, "USER_WITHDREW_ASSETS")

    def fn_withdraw(self, sender, type_args, args) -> None:
        self._withdraw(sender, self.owned_pocket(sender, args[0].str()))

    def fn_close_and_withdraw_pocket(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        self.set_status(sender, p, PocketStatus.CLOSED, "USER_CLOSED_POCKET")
        self._withdraw(sender, p)

    # ---- trading ----

    def fn_operator_make_dca_swap(self, sender, type_args, args) -> None:
        if sender not in self.s.operators:
            self.abort(E_NOT_OPERATOR)
        p = self.pocket(args[0].str())
        min_amount_out = args[1].u64()
        if PocketStatus(int(p["status"])) is not PocketStatus.ACTIVE:
            self.abort(E_INVALID_STATUS)
        batch = int(p["batch_volume"])
        if int(p["base_coin_balance"]) < batch:
            self.abort(E_INSUFFICIENT_BALANCE)
        received = batch * SWAP_RATE
        if received < min_amount_out:
            self.abort(E_SLIPPAGE)
        p["base_coin_balance"] = str(int(p["base_coin_balance"]) - batch)
        p["target_coin_balance"] = str(int(p["target_coin_balance"]) + received)
        p["total_swapped_base_amount"] = str(int(p["total_swapped_base_amount"]) + batch)
        p["total_received_target_amount"] = str(int(p["total_received_target_amount"]) + received)
        p["executed_batch_amount"] = str(int(p["executed_batch_amount"]) + 1)
        p["next_scheduled_execution_at"] = str(int(p["next_scheduled_execution_at"]) + int(p["frequency"]))
        self.emit(
            "update_trading_stats",
            "UpdateTradingStatsEvent",
            {
                "id": p["id"],
                "actor": sender,
                "swapped_base_coin_amount": str(batch),
                "base_coin_type": p["base_coin_type"],
                "received_target_coin_amount": str(received),
                "target_coin_type": p["target_coin_type"],
                "reason": "OPERATOR_MADE_SWAP",
                "timestamp": str(self.now),
            },
        )

    def _close_position(self, sender: str, p: Dict[str, Any], min_amount_out: int, reason: str) -> None:
        held = int(p["target_coin_balance"])
        received = held // SWAP_RATE
        if received < min_amount_out:
            self.abort(E_SLIPPAGE)
        p["target_coin_balance"] = "0"
        p["base_coin_balance"] = str(int(p["base_coin_balance"]) + received)
        p["total_closed_position_in_target_amount"] = str(int(p["total_closed_position_in_target_amount"]) + held)
        p["total_received_fund_in_base_amount"] = str(int(p["total_received_fund_in_base_amount"]) + received)
        self.emit(
            "update_close_position_stats",
            "UpdateClosePositionEvent",
            {
                "id": p["id"],
                "actor": sender,
                "swapped_target_coin_amount": str(held),
                "target_coin_type": p["target_coin_type"],
                "received_base_coin_amount": str(received),
                "base_coin_type": p["base_coin_type"],
                "reason": reason,
                "timestamp": str(self.now),
            },
        )

    def fn_operator_close_position(self, sender, type_args, args) -> None:
        if sender not in self.s.operators:
            self.abort(E_NOT_OPERATOR)
        p = self.pocket(args[0].str())
        self._close_position(sender, p, args[1].u64(), "OPERATOR_TOOK_PROFIT")

    def fn_close_position(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        self._close_position(sender, p, args[1].u64(), "USER_CLOSED_POSITION")

    def fn_close_position_and_withdraw(self, sender, type_args, args) -> None:
        p = self.owned_pocket(sender, args[0].str())
        self._close_position(sender, p, args[1].u64(), "USER_CLOSED_POSITION")
        self.set_status(sender, p, PocketStatus.CLOSED, "USER_CLOSED_POCKET")
        self._withdraw(sender, p)

    # ---- administration ----

    def _allow_list_event(self, name: str, type_name: str, sender: str, target: str, value: bool) -> None:
        self.emit(name, type_name, {"actor": sender, "target": target, "value": value, "timestamp": str(self.now)})

    def fn_set_operator(self, sender, type_args, args) -> None:
        self.require_admin(sender)
        target = AccountAddress(args[0].fixed_bytes(32)).hex()
        value = args[1].bool()
        (self.s.operators.add if value else self.s.operators.discard)(target)
        self._allow_list_event("update_allowed_operator", "UpdateAllowedOperatorEvent", sender, target, value)

    def fn_transfer_admin(self, sender, type_args, args) -> None:
        self.require_admin(sender)
        target = AccountAddress(args[0].fixed_bytes(32)).hex()
        self.s.admins = {target}
        self._allow_list_event("update_allowed_admin", "UpdateAllowedAdminEvent", sender, target, True)

    def fn_set_interactive_target(self, sender, type_args, args) -> None:
        self.require_admin(sender)
        target = args[0].str()
        value = args[1].bool()
        (self.s.targets.add if value else self.s.targets.discard)(target)
        self._allow_list_event("update_allowed_target", "UpdateAllowedTargetEvent", sender, target, value)

    def fn_upgrade(self, sender, type_args, args) -> None:
        self.require_admin(sender)
        args[0].bytes()
        args[1].sequence(Deserializer.bytes)
        self.emit("upgrade", "UpgradeEvent", {"actor": sender, "timestamp": str(self.now)})


# -----------------------------------------------------------------------------
# Ledger double
# -----------------------------------------------------------------------------


class FakeLedger:
    """
    In-memory `LedgerService`: decodes submitted BCS, checks signatures and
    sequence numbers, and runs `chef` calls against a `ChefState`.
    """

    def __init__(self, program: str) -> None:
        self.state = ChefState(program=program)
        self.now = GENESIS_TIME
        self.sequence_numbers: Dict[str, int] = {}
        self.transactions: Dict[str, Dict[str, Any]] = {}
        self.resource_accounts: Dict[str, int] = {}
        self.simulations: List[EntryFunctionPayload] = []
        self.submitted: List[EntryFunctionPayload] = []
        self.event_queries: List[Dict[str, Any]] = []
        # knobs for failure-path tests
        self.force_simulation_success = False
        self.never_finalize = False

    # ---- execution ----

    def _execute(self, state: ChefState, sender: str, payload: EntryFunctionPayload) -> Optional[str]:
        """Returns None on success, the vm_status on abort. Mutates `state`."""
        if payload.module.name == "resource_account":
            assert payload.function == "create_resource_account_and_fund"
            de = [Deserializer(a) for a in payload.args]
            seed, owner, amount = de[0].bytes(), de[1].bytes(), de[2].u64()
            assert len(owner) == 32
            self.resource_accounts[derive_resource_account_address(sender, seed).hex()] = amount
            return None
        assert payload.module.address.hex() == state.program, "call to unknown program"
        try:
            FakeChef(state, self.now).call(sender, payload)
        except MoveAbort as e:
            return e.vm_status
        return None

    def _decode(self, signed_bcs: bytes):
        signed = decode_signed_transaction(signed_bcs)
        raw = signed.raw
        if raw.chain_id != CHAIN_ID:
            raise RpcError("wrong chain id", status=400, error_code="invalid_input")
        if address_from_public_key(signed.public_key) != raw.sender:
            raise RpcError("authentication key mismatch", status=400, error_code="invalid_transaction_update")
        return signed

    # ---- LedgerService ----

    def get_ledger_info(self) -> Dict[str, Any]:
        return {"chain_id": CHAIN_ID, "ledger_timestamp": str(self.now * 1_000_000)}

    def get_account(self, address: str) -> Dict[str, Any]:
        addr = AccountAddress.from_hex(address).hex()
        return {"sequence_number": str(self.sequence_numbers.get(addr, 0)), "authentication_key": addr}

    def get_account_resources(self, address: str) -> List[Dict[str, Any]]:
        return []

    def simulate_transaction(self, signed_bcs: bytes) -> List[Dict[str, Any]]:
        signed = self._decode(signed_bcs)
        if verify_signature(signed.public_key, signing_message(signed.raw), signed.signature):
            raise RpcError("Simulated transactions must have a non-valid signature", status=400)
        self.simulations.append(signed.raw.payload)
        vm_status = self._execute(copy.deepcopy(self.state), signed.raw.sender.hex(), signed.raw.payload)
        if self.force_simulation_success:
            vm_status = None
        return [{"success": vm_status is None, "vm_status": vm_status or "Executed successfully"}]

    def submit_transaction(self, signed_bcs: bytes) -> Dict[str, Any]:
        signed = self._decode(signed_bcs)
        raw = signed.raw
        if not verify_signature(signed.public_key, signing_message(raw), signed.signature):
            raise RpcError("invalid signature", status=400, error_code="invalid_signature")
        sender = raw.sender.hex()
        if raw.sequence_number != self.sequence_numbers.get(sender, 0):
            raise RpcError("sequence number mismatch", status=400, error_code="sequence_number_too_old")

        self.submitted.append(raw.payload)
        self.now += 1
        vm_status = self._execute(self.state, sender, raw.payload)
        self.sequence_numbers[sender] = raw.sequence_number + 1

        tx_hash = transaction_hash(signed_bcs)
        self.transactions[tx_hash] = {
            "type": "user_transaction",
            "hash": tx_hash,
            "sender": sender,
            "sequence_number": str(raw.sequence_number),
            "success": vm_status is None,
            "vm_status": vm_status or "Executed successfully",
        }
        return {"type": "pending_transaction", "hash": tx_hash}

    def get_transaction_by_hash(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        tx = self.transactions.get(tx_hash)
        if tx is not None and self.never_finalize:
            return {"type": "pending_transaction", "hash": tx_hash}
        return tx

    def view(self, payload: Dict[str, Any]) -> List[Any]:
        module, _, name = payload["function"].rpartition("::")
        assert module == f"{self.state.program}::chef", module
        args = payload["arguments"]

        def pocket_json(hex_id: str) -> Dict[str, Any]:
            p = self.state.pockets.get(bytes.fromhex(hex_id[2:]).decode("utf-8"))
            if p is None:
                raise RpcError(
                    f"Move abort in {self.state.program}::chef: E_POCKET_NOT_FOUND(0x60005): ",
                    status=400,
                    error_code="invalid_input",
                    vm_error_code=4016,
                )
            return copy.deepcopy(p)

        if name == "get_pocket":
            return [pocket_json(args[0])]
        if name == "get_multiple_pockets":
            return [[pocket_json(i) for i in args[0]]]
        if name == "is_admin":
            return [args[0] in self.state.admins]
        if name == "is_operator":
            return [args[0] in self.state.operators]
        if name == "is_allowed_target":
            return [bytes.fromhex(args[0][2:]).decode("utf-8") in self.state.targets]
        if name == "get_delegated_vault_address":
            return [derive_resource_account_address(self.state.program, bytes.fromhex(args[0][2:])).hex()]
        if name == "get_quote":
            return [str(int(args[0]) * SWAP_RATE)]
        raise RpcError(f"unknown view function {name}", status=400, error_code="invalid_input")

    def get_events_by_event_handle(
        self,
        address: str,
        event_handle: str,
        field_name: str,
        *,
        start: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        self.event_queries.append({"field": field_name, "start": start, "limit": limit})
        assert address == self.state.program
        assert event_handle == f"{self.state.program}::{EVENT_MANAGER}"
        stream = self.state.events.get(field_name, [])
        lo = start or 0
        hi = lo + (25 if limit is None else limit)
        return copy.deepcopy(stream[lo:hi])


# -----------------------------------------------------------------------------
# Per-test context
# -----------------------------------------------------------------------------


class TestContext:
    """
    Accounts, a deployed program and builders for one test.

    The deployer is the program's first admin; `operator` is whitelisted and
    both coin types are allowed targets once `bootstrap()` has run.
    """

    __test__ = False  # not a test class

    base_coin = BASE_COIN
    target_coin = TARGET_COIN

    def __init__(self) -> None:
        self.deployer = Account.generate()
        self.owner = Account.generate()
        self.operator = Account.generate()
        self.stranger = Account.generate()
        self.program = derive_resource_account_address(self.deployer.address(), PROGRAM_SEED).hex()
        self.ledger = FakeLedger(self.program)
        self.ledger.state.admins.add(self.deployer.address().hex())
        self.config = SDKConfig(wait_timeout_s=1.0)
        self.indexer = EventIndexer(self.ledger, self.program)

    def signer(self, account: Account) -> TransactionSigner:
        return TransactionSigner(account, self.ledger, self.config, poll_interval_s=0.0)

    def builder(self, account: Account) -> TransactionBuilder:
        return TransactionBuilder(self.signer(account), self.program)

    @property
    def admin_builder(self) -> TransactionBuilder:
        return self.builder(self.deployer)

    @property
    def owner_builder(self) -> TransactionBuilder:
        return self.builder(self.owner)

    def create_params(self, pocket_id: str = "pocket-1", **overrides: Any) -> CreatePocketParams:
        fields: Dict[str, Any] = dict(
            id=pocket_id,
            base_coin_type=self.base_coin,
            target_coin_type=self.target_coin,
            start_at=GENESIS_TIME,
            frequency=3600,
            batch_volume=1_000,
        )
        fields.update(overrides)
        return CreatePocketParams(**fields)

    def bootstrap(self) -> "TestContext":
        admin = self.admin_builder
        admin.build_set_operator_transaction(
            SetAllowedOperatorParams(target=self.operator.address().hex(), value=True)
        ).execute()
        for coin in (self.base_coin, self.target_coin):
            admin.build_set_interactive_target_transaction(SetInteractiveTargetParams(target=coin, value=True)).execute()
        return self


@pytest.fixture
def ctx() -> TestContext:
    return TestContext().bootstrap()


@pytest.fixture
def bare_ctx() -> TestContext:
    return TestContext()
