"""
pocket_sdk.tx.build
===================

Payload builder for the pocket program's `chef` module plus the framework
`resource_account` helper.

Every `build_*` method validates and encodes its intent locally and returns an
executor wrapping the finished payload; nothing touches the network until the
executor runs:

    builder = TransactionBuilder(signer, program_address)
    tx_hash = builder.build_deposit_transaction(
        DepositParams(id="p1", coin_type="0x1::aptos_coin::AptosCoin", amount=10_000)
    ).execute()

    pocket_json = builder.build_get_pocket(GetPocketParams(id="p1")).execute()[0]

Design notes
------------
- Entry-function arguments are the BCS bytes of each Move parameter, in
  declaration order. Pocket conditions are flat `vector<u64>` values:
  open position `[operator, value_x, value_y]`, stop loss / take profit
  `[stopped_with, value]`, auto close `[c1, v1, c2, v2, ...]`.
- View arguments are JSON: strings go over as `0x`-hex of their UTF-8 bytes,
  addresses in long `0x` form, integers as decimal strings.
- Building the same intent twice yields byte-identical payloads.
"""

from __future__ import annotations

import logging
from typing import (Any, Dict, Iterable, List, Optional, Protocol, Sequence,
                    Tuple)

from ..config import APTOS_GENESIS_ADDRESS
from ..errors import ConfigurationError, EncodingError, TypeTagParseError
from ..types.core import (AccountAddress, AddressLike, EntryFunctionPayload,
                          ModuleId, TypeTag, ViewPayload)
from ..types.pocket import (AutoCloseCondition, OpenPositionCondition,
                            StopCondition, flatten_auto_close_conditions)
from ..utils import bcs
from .params import (CreatePocketParams, CreateResourceAccountParams,
                     DepositParams, ExecTradingParams,
                     GetMultiplePocketsParams, GetPocketParams,
                     GetQuoteParams, ProgramUpgradeParams,
                     SetAllowedAdminParams, SetAllowedOperatorParams,
                     SetInteractiveTargetParams, UpdatePocketParams,
                     WithdrawParams)

log = logging.getLogger(__name__)

CHEF_MODULE = "chef"
RESOURCE_ACCOUNT_MODULE = "resource_account"


class _Signer(Protocol):
    """
    Minimal interface expected from `pocket_sdk.tx.send.TransactionSigner`.
    """
    def simulate(self, payload: EntryFunctionPayload) -> Dict[str, Any]: ...
    def sign_and_submit(
        self, payload: EntryFunctionPayload, *, wait: bool = True, timeout_s: Optional[float] = None
    ) -> str: ...
    def view(self, payload: ViewPayload) -> List[Any]: ...


# -----------------------------------------------------------------------------
# Executors
# -----------------------------------------------------------------------------


class TransactionalExecutor:
    """A built entry-function payload, ready to be simulated or submitted."""

    __slots__ = ("_signer", "payload")

    def __init__(self, signer: _Signer, payload: EntryFunctionPayload) -> None:
        self._signer = signer
        self.payload = payload

    def execute(self, *, wait: bool = True, timeout_s: Optional[float] = None) -> str:
        """Simulate, sign and submit. Returns the transaction hash."""
        return self._signer.sign_and_submit(self.payload, wait=wait, timeout_s=timeout_s)

    def simulate(self) -> Dict[str, Any]:
        return self._signer.simulate(self.payload)

    def __repr__(self) -> str:
        return f"TransactionalExecutor({self.payload.function_id})"


class ViewExecutor:
    __slots__ = ("_signer", "payload")

    def __init__(self, signer: _Signer, payload: ViewPayload) -> None:
        self._signer = signer
        self.payload = payload

    def execute(self) -> List[Any]:
        return self._signer.view(self.payload)

    def __repr__(self) -> str:
        return f"ViewExecutor({self.payload.function})"


# -----------------------------------------------------------------------------
# Argument helpers
# -----------------------------------------------------------------------------


def _address(value: AddressLike) -> AccountAddress:
    try:
        return AccountAddress.from_hex(value)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"invalid account address: {value!r}") from e


def _type_tags(*type_strs: str) -> Tuple[TypeTag, ...]:
    """Coin types must be structs (`address::module::Name`)."""
    tags = tuple(TypeTag.parse(t) for t in type_strs)
    for text, tag in zip(type_strs, tags):
        if tag.struct is None:
            raise TypeTagParseError(f"coin type must be address::module::Name, got {text!r}")
    return tags


def _conditions(
    open_position: OpenPositionCondition,
    take_profit: StopCondition,
    stop_loss: StopCondition,
    auto_close: Iterable[AutoCloseCondition],
) -> List[bytes]:
    # Order matches the Move signature: open, take profit, stop loss, auto close
    return [
        bcs.encode_u64_vector(open_position.to_u64s()),
        bcs.encode_u64_vector(take_profit.to_u64s()),
        bcs.encode_u64_vector(stop_loss.to_u64s()),
        bcs.encode_u64_vector(flatten_auto_close_conditions(auto_close)),
    ]


# -----------------------------------------------------------------------------
# Builder
# -----------------------------------------------------------------------------


class TransactionBuilder:
    """
    Builds payloads for one deployed program.

    `program_address` may be None before deployment; only the resource-account
    helper works then, every `chef` operation raises `ConfigurationError`.
    """

    def __init__(self, signer: _Signer, program_address: Optional[AddressLike]) -> None:
        self.signer = signer
        self.program_address: Optional[AccountAddress] = (
            None if program_address is None else _address(program_address)
        )

    # ---- plumbing ----

    def _chef(self) -> ModuleId:
        if self.program_address is None:
            raise ConfigurationError("program address is not configured; deploy the program first")
        return ModuleId(self.program_address, CHEF_MODULE)

    def _entry(
        self,
        module: ModuleId,
        function: str,
        type_args: Sequence[TypeTag],
        args: Sequence[bytes],
    ) -> TransactionalExecutor:
        payload = EntryFunctionPayload(module, function, tuple(type_args), tuple(args))
        log.debug("built %s type_args=%s args=%d", payload.function_id, [str(t) for t in type_args], len(args))
        return TransactionalExecutor(self.signer, payload)

    def _view(self, function: str, arguments: Sequence[Any], type_arguments: Sequence[str] = ()) -> ViewExecutor:
        payload = ViewPayload(f"{self._chef()}::{function}", tuple(arguments), tuple(type_arguments))
        log.debug("built view %s", payload.function)
        return ViewExecutor(self.signer, payload)

    # ---- pocket lifecycle ----

    def build_create_pocket_transaction(self, params: CreatePocketParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "create_pocket",
            _type_tags(params.base_coin_type, params.target_coin_type),
            self._create_args(params),
        )

    def build_create_pocket_and_deposit_transaction(
        self, params: CreatePocketParams, deposit: DepositParams
    ) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "create_and_deposit_to_pocket",
            _type_tags(params.base_coin_type, params.target_coin_type),
            self._create_args(params) + [bcs.encode_u64(deposit.amount)],
        )

    @staticmethod
    def _create_args(params: CreatePocketParams) -> List[bytes]:
        return [
            bcs.encode_str(params.id),
            bcs.encode_u64(int(params.amm)),
            bcs.encode_u64(params.start_at),
            bcs.encode_u64(params.frequency),
            bcs.encode_u64(params.batch_volume),
            *_conditions(
                params.open_position_condition,
                params.take_profit_condition,
                params.stop_loss_condition,
                params.auto_close_conditions,
            ),
        ]

    def build_update_pocket_transaction(self, params: UpdatePocketParams) -> TransactionalExecutor:
        args = [
            bcs.encode_str(params.id),
            bcs.encode_u64(params.start_at),
            bcs.encode_u64(params.frequency),
            bcs.encode_u64(params.batch_volume),
            *_conditions(
                params.open_position_condition,
                params.take_profit_condition,
                params.stop_loss_condition,
                params.auto_close_conditions,
            ),
        ]
        return self._entry(self._chef(), "update_pocket", (), args)

    def build_pause_pocket_transaction(self, params: GetPocketParams) -> TransactionalExecutor:
        return self._entry(self._chef(), "pause_pocket", (), [bcs.encode_str(params.id)])

    def build_restart_pocket_transaction(self, params: GetPocketParams) -> TransactionalExecutor:
        return self._entry(self._chef(), "restart_pocket", (), [bcs.encode_str(params.id)])

    def build_close_pocket_transaction(self, params: GetPocketParams) -> TransactionalExecutor:
        return self._entry(self._chef(), "close_pocket", (), [bcs.encode_str(params.id)])

    # ---- vault ----

    def build_deposit_transaction(self, params: DepositParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "deposit",
            _type_tags(params.coin_type),
            [bcs.encode_str(params.id), bcs.encode_u64(params.amount)],
        )

    def build_withdraw_transaction(self, params: WithdrawParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "withdraw",
            _type_tags(params.base_coin_type, params.target_coin_type),
            [bcs.encode_str(params.id)],
        )

    def build_close_pocket_and_withdraw_transaction(self, params: WithdrawParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "close_and_withdraw_pocket",
            _type_tags(params.base_coin_type, params.target_coin_type),
            [bcs.encode_str(params.id)],
        )

    # ---- trading ----

    def _trading(self, function: str, params: ExecTradingParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            function,
            _type_tags(params.base_coin_type, params.target_coin_type),
            [bcs.encode_str(params.id), bcs.encode_u64(params.min_amount_out)],
        )

    def build_operator_make_dca_swap_transaction(self, params: ExecTradingParams) -> TransactionalExecutor:
        return self._trading("operator_make_dca_swap", params)

    def build_operator_close_position_transaction(self, params: ExecTradingParams) -> TransactionalExecutor:
        return self._trading("operator_close_position", params)

    def build_close_position_and_withdraw_transaction(self, params: ExecTradingParams) -> TransactionalExecutor:
        return self._trading("close_position_and_withdraw", params)

    def build_close_position_transaction(self, params: ExecTradingParams) -> TransactionalExecutor:
        return self._trading("close_position", params)

    # ---- administration ----

    def build_set_operator_transaction(self, params: SetAllowedOperatorParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "set_operator",
            (),
            [_address(params.target).data, bcs.encode_bool(params.value)],
        )

    def build_transfer_admin_transaction(self, params: SetAllowedAdminParams) -> TransactionalExecutor:
        return self._entry(self._chef(), "transfer_admin", (), [_address(params.target).data])

    def build_set_interactive_target_transaction(self, params: SetInteractiveTargetParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "set_interactive_target",
            (),
            [bcs.encode_str(params.target), bcs.encode_bool(params.value)],
        )

    def build_upgrade_transaction(self, params: ProgramUpgradeParams) -> TransactionalExecutor:
        return self._entry(
            self._chef(),
            "upgrade",
            (),
            [
                bcs.encode_bytes(params.serialized_metadata),
                bcs.encode_sequence(params.code, bcs.encode_bytes),
            ],
        )

    def build_create_resource_account_transaction(
        self, params: CreateResourceAccountParams
    ) -> TransactionalExecutor:
        module = ModuleId(AccountAddress.from_hex(APTOS_GENESIS_ADDRESS), RESOURCE_ACCOUNT_MODULE)
        return self._entry(
            module,
            "create_resource_account_and_fund",
            (),
            [
                bcs.encode_bytes(params.seed.encode("utf-8")),
                bcs.encode_bytes(_address(params.owner_address).data),
                bcs.encode_u64(params.amount_to_fund),
            ],
        )

    # ---- views ----

    def build_get_pocket(self, params: GetPocketParams) -> ViewExecutor:
        return self._view("get_pocket", [ViewPayload.string_arg(params.id)])

    def build_get_multiple_pockets(self, params: GetMultiplePocketsParams) -> ViewExecutor:
        return self._view("get_multiple_pockets", [tuple(ViewPayload.string_arg(i) for i in params.id_list)])

    def build_check_for_allowed_admin(self, address: AddressLike) -> ViewExecutor:
        return self._view("is_admin", [_address(address).hex()])

    def build_check_for_allowed_operator(self, address: AddressLike) -> ViewExecutor:
        return self._view("is_operator", [_address(address).hex()])

    def build_check_for_allowed_target(self, target: str) -> ViewExecutor:
        return self._view("is_allowed_target", [ViewPayload.string_arg(target)])

    def build_get_delegated_vault_address(self, address: AddressLike) -> ViewExecutor:
        return self._view("get_delegated_vault_address", [_address(address).hex()])

    def build_get_quote(self, params: GetQuoteParams) -> ViewExecutor:
        base, target = _type_tags(params.base_coin_type, params.target_coin_type)
        bcs.encode_u64(params.amount_in)  # range check only; views take decimal strings
        return self._view("get_quote", [str(params.amount_in)], [str(base), str(target)])


__all__ = [
    "CHEF_MODULE",
    "TransactionalExecutor",
    "ViewExecutor",
    "TransactionBuilder",
]
