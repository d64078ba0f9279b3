"""
Pocket domain model.

A pocket is a recurring-investment position held by the on-chain program:
schedule, vault balances, trigger conditions and lifecycle status. The
values here are read-only projections of the on-chain resource; they are
rebuilt on every query and never mutated.

Enum codes below are the single mapping table between wire integers and
variants. The payload builder encodes through `int(member)` and the
response transformer decodes through `Enum.from_code`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Tuple, Type, TypeVar

from ..errors import DecodingError

E = TypeVar("E", bound="CodedEnum")


class CodedEnum(IntEnum):
    @classmethod
    def from_code(cls: Type[E], code: int) -> E:
        try:
            return cls(code)
        except ValueError:
            raise DecodingError(f"unknown {cls.__name__} code: {code!r}") from None


class PocketStatus(CodedEnum):
    ACTIVE = 0
    PAUSED = 1
    CLOSED = 2
    WITHDRAWN = 3

    def can_transition_to(self, target: "PocketStatus") -> bool:
        return target in _STATUS_TRANSITIONS[self]


_STATUS_TRANSITIONS = {
    PocketStatus.ACTIVE: frozenset({PocketStatus.PAUSED, PocketStatus.CLOSED}),
    PocketStatus.PAUSED: frozenset({PocketStatus.ACTIVE, PocketStatus.CLOSED}),
    PocketStatus.CLOSED: frozenset({PocketStatus.WITHDRAWN}),
    PocketStatus.WITHDRAWN: frozenset(),
}


class AMM(CodedEnum):
    PCS = 0


class OpenPositionOperator(CodedEnum):
    UNSET = 0
    EQ = 1
    NEQ = 2
    GT = 3
    GTE = 4
    LT = 5
    LTE = 6
    BETWEEN = 7
    NOT_BETWEEN = 8


class StopConditionStoppedWith(CodedEnum):
    UNSET = 0
    PRICE = 1
    PORTFOLIO_VALUE_DIFF = 2
    PORTFOLIO_PERCENT_DIFF = 3


class AutoCloseConditionClosedWith(CodedEnum):
    END_TIME = 0
    BATCH_AMOUNT = 1
    SPENT_BASE_AMOUNT = 2
    RECEIVED_TARGET_AMOUNT = 3


# --- Conditions --------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class OpenPositionCondition:
    operator: OpenPositionOperator = OpenPositionOperator.UNSET
    value_x: int = 0
    value_y: int = 0

    def to_u64s(self) -> Tuple[int, int, int]:
        return (int(self.operator), self.value_x, self.value_y)


@dataclass(slots=True, frozen=True)
class StopCondition:
    """Shape shared by the stop-loss and take-profit conditions."""

    stopped_with: StopConditionStoppedWith = StopConditionStoppedWith.UNSET
    value: int = 0

    def to_u64s(self) -> Tuple[int, int]:
        return (int(self.stopped_with), self.value)


@dataclass(slots=True, frozen=True)
class AutoCloseCondition:
    closed_with: AutoCloseConditionClosedWith
    value: int

    def to_u64s(self) -> Tuple[int, int]:
        return (int(self.closed_with), self.value)


def flatten_auto_close_conditions(conditions: Iterable[AutoCloseCondition]) -> List[int]:
    """`[(A, 1), (B, 2)]` -> `[A, 1, B, 2]`; the program reads pairs off one vector."""
    out: List[int] = []
    for cond in conditions:
        out.extend(cond.to_u64s())
    return out


# --- Pocket ------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class Pocket:
    id: str
    owner: str
    base_coin_type: str
    target_coin_type: str
    amm: AMM
    status: PocketStatus

    base_coin_balance: int
    target_coin_balance: int

    start_at: int
    frequency: int
    next_scheduled_execution_at: int
    batch_volume: int
    executed_batch_amount: int

    open_position_condition: OpenPositionCondition
    stop_loss_condition: StopCondition
    take_profit_condition: StopCondition
    auto_close_conditions: Tuple[AutoCloseCondition, ...]

    total_deposited_base_amount: int
    total_swapped_base_amount: int
    total_received_target_amount: int
    total_received_fund_in_base_amount: int
    total_closed_position_in_target_amount: int

    @property
    def is_withdrawn(self) -> bool:
        return self.status is PocketStatus.WITHDRAWN


__all__ = [
    "CodedEnum",
    "PocketStatus",
    "AMM",
    "OpenPositionOperator",
    "StopConditionStoppedWith",
    "AutoCloseConditionClosedWith",
    "OpenPositionCondition",
    "StopCondition",
    "AutoCloseCondition",
    "flatten_auto_close_conditions",
    "Pocket",
]
