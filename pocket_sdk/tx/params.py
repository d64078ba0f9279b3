"""
pocket_sdk.tx.params
====================

Typed intents consumed by `pocket_sdk.tx.build.TransactionBuilder`.

Each dataclass carries exactly what one builder method needs. Amounts and
timestamps are plain non-negative ints in the asset's smallest unit (seconds
for timestamps); range checks happen when the builder encodes them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..types.pocket import (AMM, AutoCloseCondition, OpenPositionCondition,
                            StopCondition)


@dataclass(slots=True, frozen=True)
class GetPocketParams:
    id: str


@dataclass(slots=True, frozen=True)
class GetMultiplePocketsParams:
    id_list: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class CreatePocketParams:
    id: str
    base_coin_type: str
    target_coin_type: str
    start_at: int
    frequency: int
    batch_volume: int
    amm: AMM = AMM.PCS
    open_position_condition: OpenPositionCondition = field(default_factory=OpenPositionCondition)
    stop_loss_condition: StopCondition = field(default_factory=StopCondition)
    take_profit_condition: StopCondition = field(default_factory=StopCondition)
    auto_close_conditions: Tuple[AutoCloseCondition, ...] = ()


@dataclass(slots=True, frozen=True)
class UpdatePocketParams:
    id: str
    start_at: int
    frequency: int
    batch_volume: int
    open_position_condition: OpenPositionCondition = field(default_factory=OpenPositionCondition)
    stop_loss_condition: StopCondition = field(default_factory=StopCondition)
    take_profit_condition: StopCondition = field(default_factory=StopCondition)
    auto_close_conditions: Tuple[AutoCloseCondition, ...] = ()


@dataclass(slots=True, frozen=True)
class DepositParams:
    id: str
    coin_type: str
    amount: int


@dataclass(slots=True, frozen=True)
class WithdrawParams:
    id: str
    base_coin_type: str
    target_coin_type: str


@dataclass(slots=True, frozen=True)
class ExecTradingParams:
    """Operator swap / position close; `min_amount_out` bounds slippage."""

    id: str
    base_coin_type: str
    target_coin_type: str
    min_amount_out: int


@dataclass(slots=True, frozen=True)
class SetAllowedOperatorParams:
    target: str
    value: bool


@dataclass(slots=True, frozen=True)
class SetAllowedAdminParams:
    target: str


@dataclass(slots=True, frozen=True)
class SetInteractiveTargetParams:
    target: str
    value: bool


@dataclass(slots=True, frozen=True)
class ProgramUpgradeParams:
    """Package metadata and module bytecode, as produced by `aptos move compile`."""

    serialized_metadata: bytes
    code: Tuple[bytes, ...]


@dataclass(slots=True, frozen=True)
class CreateResourceAccountParams:
    seed: str
    owner_address: str
    amount_to_fund: int


@dataclass(slots=True, frozen=True)
class GetQuoteParams:
    base_coin_type: str
    target_coin_type: str
    amount_in: int


__all__ = [
    "GetPocketParams",
    "GetMultiplePocketsParams",
    "CreatePocketParams",
    "UpdatePocketParams",
    "DepositParams",
    "WithdrawParams",
    "ExecTradingParams",
    "SetAllowedOperatorParams",
    "SetAllowedAdminParams",
    "SetInteractiveTargetParams",
    "ProgramUpgradeParams",
    "CreateResourceAccountParams",
    "GetQuoteParams",
]
