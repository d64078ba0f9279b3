"""
Response transformer: raw view/resource JSON -> typed `Pocket`.

The ledger's JSON renders every u64/u128 and enum code as a decimal string.
Parsing is strict: a missing key, a non-decimal numeric or an unknown enum
code raises `DecodingError`; nothing is defaulted.
"""

from __future__ import annotations

from typing import Any, Mapping, Type, TypeVar

from ..errors import DecodingError
from .pocket import (AMM, AutoCloseCondition, AutoCloseConditionClosedWith,
                     CodedEnum, OpenPositionCondition, OpenPositionOperator,
                     Pocket, PocketStatus, StopCondition,
                     StopConditionStoppedWith)

E = TypeVar("E", bound=CodedEnum)

PocketResponse = Mapping[str, Any]


def _field(raw: Mapping[str, Any], key: str) -> Any:
    if not isinstance(raw, Mapping):
        raise DecodingError(f"expected an object, got {type(raw).__name__}")
    try:
        return raw[key]
    except KeyError:
        raise DecodingError(f"missing field {key!r}") from None


def parse_u(value: Any, name: str = "value") -> int:
    """Decimal string (or JSON int) -> non-negative int."""
    if isinstance(value, bool):
        raise DecodingError(f"{name}: expected unsigned integer, got bool")
    if isinstance(value, int):
        n = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        n = int(value, 10)
    else:
        raise DecodingError(f"{name}: unparsable unsigned integer {value!r}")
    if n < 0:
        raise DecodingError(f"{name}: negative value {n}")
    return n


def parse_enum(enum_cls: Type[E], value: Any, name: str = "value") -> E:
    return enum_cls.from_code(parse_u(value, name))


def _str(raw: Mapping[str, Any], key: str) -> str:
    value = _field(raw, key)
    if not isinstance(value, str):
        raise DecodingError(f"{key}: expected string, got {type(value).__name__}")
    return value


def _u(raw: Mapping[str, Any], key: str) -> int:
    return parse_u(_field(raw, key), key)


def transform_open_position_condition(raw: Mapping[str, Any]) -> OpenPositionCondition:
    return OpenPositionCondition(
        operator=parse_enum(OpenPositionOperator, _field(raw, "operator"), "operator"),
        value_x=_u(raw, "value_x"),
        value_y=_u(raw, "value_y"),
    )


def transform_stop_condition(raw: Mapping[str, Any]) -> StopCondition:
    return StopCondition(
        stopped_with=parse_enum(StopConditionStoppedWith, _field(raw, "stopped_with"), "stopped_with"),
        value=_u(raw, "value"),
    )


def transform_auto_close_condition(raw: Mapping[str, Any]) -> AutoCloseCondition:
    return AutoCloseCondition(
        closed_with=parse_enum(AutoCloseConditionClosedWith, _field(raw, "closed_with"), "closed_with"),
        value=_u(raw, "value"),
    )


def transform_pocket(raw: PocketResponse) -> Pocket:
    auto_close = _field(raw, "auto_close_conditions")
    if not isinstance(auto_close, list):
        raise DecodingError("auto_close_conditions: expected a list")

    return Pocket(
        id=_str(raw, "id"),
        owner=_str(raw, "owner"),
        base_coin_type=_str(raw, "base_coin_type"),
        target_coin_type=_str(raw, "target_coin_type"),
        amm=parse_enum(AMM, _field(raw, "amm"), "amm"),
        status=parse_enum(PocketStatus, _field(raw, "status"), "status"),
        base_coin_balance=_u(raw, "base_coin_balance"),
        target_coin_balance=_u(raw, "target_coin_balance"),
        start_at=_u(raw, "start_at"),
        frequency=_u(raw, "frequency"),
        next_scheduled_execution_at=_u(raw, "next_scheduled_execution_at"),
        batch_volume=_u(raw, "batch_volume"),
        executed_batch_amount=_u(raw, "executed_batch_amount"),
        open_position_condition=transform_open_position_condition(_field(raw, "open_position_condition")),
        stop_loss_condition=transform_stop_condition(_field(raw, "stop_loss_condition")),
        take_profit_condition=transform_stop_condition(_field(raw, "take_profit_condition")),
        auto_close_conditions=tuple(transform_auto_close_condition(c) for c in auto_close),
        total_deposited_base_amount=_u(raw, "total_deposited_base_amount"),
        total_swapped_base_amount=_u(raw, "total_swapped_base_amount"),
        total_received_target_amount=_u(raw, "total_received_target_amount"),
        total_received_fund_in_base_amount=_u(raw, "total_received_fund_in_base_amount"),
        total_closed_position_in_target_amount=_u(raw, "total_closed_position_in_target_amount"),
    )


__all__ = [
    "PocketResponse",
    "parse_u",
    "parse_enum",
    "transform_open_position_condition",
    "transform_stop_condition",
    "transform_auto_close_condition",
    "transform_pocket",
]
