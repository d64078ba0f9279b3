"""
Typed event records emitted by the pocket program.

Every stream lives on one `EventManager` resource of the program account;
the field names of that resource are the `EventName` values. Each stream has
exactly one payload shape, registered in `EVENT_PAYLOADS`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Mapping, TypeVar, Union

from ..errors import DecodingError
from .pocket import Pocket, PocketStatus
from .response import parse_enum, parse_u, transform_pocket


class EventName(str, Enum):
    UPGRADE = "upgrade"
    UPDATE_ALLOWED_ADMIN = "update_allowed_admin"
    UPDATE_ALLOWED_OPERATOR = "update_allowed_operator"
    UPDATE_ALLOWED_TARGET = "update_allowed_target"
    CREATE_POCKET = "create_pocket"
    UPDATE_POCKET = "update_pocket"
    UPDATE_POCKET_STATUS = "update_pocket_status"
    UPDATE_TRADING_STATS = "update_trading_stats"
    UPDATE_CLOSE_POSITION_STATS = "update_close_position_stats"
    UPDATE_DEPOSIT_STATS = "update_deposit_stats"
    UPDATE_WITHDRAWAL_STATS = "update_withdrawal_stats"


class EventReason(str, Enum):
    OPERATOR_STOPPED_LOSS = "OPERATOR_STOPPED_LOSS"
    OPERATOR_TOOK_PROFIT = "OPERATOR_TOOK_PROFIT"
    OPERATOR_CLOSED_POCKET_DUE_TO_STOP_CONDITION_REACHED = "OPERATOR_CLOSED_POCKET_DUE_TO_STOP_CONDITION_REACHED"
    OPERATOR_MADE_SWAP = "OPERATOR_MADE_SWAP"
    OPERATOR_CLOSED_POCKET_DUE_TO_CONDITION_REACHED = "OPERATOR_CLOSED_POCKET_DUE_TO_CONDITION_REACHED"
    USER_CLOSED_POSITION = "USER_CLOSED_POSITION"
    USER_CLOSED_POCKET = "USER_CLOSED_POCKET"
    USER_CREATED_POCKET = "USER_CREATED_POCKET"
    USER_UPDATED_POCKET = "USER_UPDATED_POCKET"
    USER_DEPOSITED_ASSET = "USER_DEPOSITED_ASSET"
    USER_WITHDREW_ASSETS = "USER_WITHDREW_ASSETS"
    USER_PAUSED_POCKET = "USER_PAUSED_POCKET"
    USER_RESTARTED_POCKET = "USER_RESTARTED_POCKET"


# --- Field readers -----------------------------------------------------------


def _get(raw: Mapping[str, Any], key: str) -> Any:
    if not isinstance(raw, Mapping):
        raise DecodingError(f"event data must be an object, got {type(raw).__name__}")
    if key not in raw:
        raise DecodingError(f"event data missing field {key!r}")
    return raw[key]


def _str(raw: Mapping[str, Any], key: str) -> str:
    v = _get(raw, key)
    if not isinstance(v, str):
        raise DecodingError(f"{key}: expected string, got {type(v).__name__}")
    return v


def _u(raw: Mapping[str, Any], key: str) -> int:
    return parse_u(_get(raw, key), key)


def _bool(raw: Mapping[str, Any], key: str) -> bool:
    v = _get(raw, key)
    if not isinstance(v, bool):
        raise DecodingError(f"{key}: expected bool, got {v!r}")
    return v


def _reason(raw: Mapping[str, Any]) -> EventReason:
    v = _get(raw, "reason")
    try:
        return EventReason(v)
    except ValueError:
        raise DecodingError(f"unknown event reason {v!r}") from None


# --- Payloads ----------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class UpgradeEvent:
    actor: str
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "UpgradeEvent":
        return cls(actor=_str(raw, "actor"), timestamp=_u(raw, "timestamp"))


@dataclass(slots=True, frozen=True)
class UpdateAllowListEvent:
    """Shared shape of the admin/operator/target allow-list streams."""

    actor: str
    target: str
    value: bool
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]):
        return cls(
            actor=_str(raw, "actor"),
            target=_str(raw, "target"),
            value=_bool(raw, "value"),
            timestamp=_u(raw, "timestamp"),
        )


class UpdateAdminEvent(UpdateAllowListEvent):
    __slots__ = ()


class UpdateOperatorEvent(UpdateAllowListEvent):
    __slots__ = ()


class UpdateTargetEvent(UpdateAllowListEvent):
    __slots__ = ()


@dataclass(slots=True, frozen=True)
class UpdatePocketEvent:
    id: str
    actor: str
    pocket: Pocket
    reason: EventReason
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "UpdatePocketEvent":
        return cls(
            id=_str(raw, "id"),
            actor=_str(raw, "actor"),
            pocket=transform_pocket(_get(raw, "pocket")),
            reason=_reason(raw),
            timestamp=_u(raw, "timestamp"),
        )


@dataclass(slots=True, frozen=True)
class UpdatePocketStatusEvent:
    id: str
    actor: str
    status: PocketStatus
    reason: EventReason
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "UpdatePocketStatusEvent":
        return cls(
            id=_str(raw, "id"),
            actor=_str(raw, "actor"),
            status=parse_enum(PocketStatus, _get(raw, "status"), "status"),
            reason=_reason(raw),
            timestamp=_u(raw, "timestamp"),
        )


@dataclass(slots=True, frozen=True)
class UpdateDepositStatsEvent:
    id: str
    actor: str
    amount: int
    coin_type: str
    reason: EventReason
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "UpdateDepositStatsEvent":
        return cls(
            id=_str(raw, "id"),
            actor=_str(raw, "actor"),
            amount=_u(raw, "amount"),
            coin_type=_str(raw, "coin_type"),
            reason=_reason(raw),
            timestamp=_u(raw, "timestamp"),
        )


@dataclass(slots=True, frozen=True)
class UpdateWithdrawalStatsEvent:
    id: str
    actor: str
    base_coin_amount: int
    base_coin_type: str
    target_coin_amount: int
    target_coin_type: str
    reason: EventReason
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "UpdateWithdrawalStatsEvent":
        return cls(
            id=_str(raw, "id"),
            actor=_str(raw, "actor"),
            base_coin_amount=_u(raw, "base_coin_amount"),
            base_coin_type=_str(raw, "base_coin_type"),
            target_coin_amount=_u(raw, "target_coin_amount"),
            target_coin_type=_str(raw, "target_coin_type"),
            reason=_reason(raw),
            timestamp=_u(raw, "timestamp"),
        )


@dataclass(slots=True, frozen=True)
class UpdateTradingStatsEvent:
    id: str
    actor: str
    swapped_base_coin_amount: int
    base_coin_type: str
    received_target_coin_amount: int
    target_coin_type: str
    reason: EventReason
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "UpdateTradingStatsEvent":
        return cls(
            id=_str(raw, "id"),
            actor=_str(raw, "actor"),
            swapped_base_coin_amount=_u(raw, "swapped_base_coin_amount"),
            base_coin_type=_str(raw, "base_coin_type"),
            received_target_coin_amount=_u(raw, "received_target_coin_amount"),
            target_coin_type=_str(raw, "target_coin_type"),
            reason=_reason(raw),
            timestamp=_u(raw, "timestamp"),
        )


@dataclass(slots=True, frozen=True)
class UpdateClosePositionEvent:
    id: str
    actor: str
    swapped_target_coin_amount: int
    target_coin_type: str
    received_base_coin_amount: int
    base_coin_type: str
    reason: EventReason
    timestamp: int

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "UpdateClosePositionEvent":
        return cls(
            id=_str(raw, "id"),
            actor=_str(raw, "actor"),
            swapped_target_coin_amount=_u(raw, "swapped_target_coin_amount"),
            target_coin_type=_str(raw, "target_coin_type"),
            received_base_coin_amount=_u(raw, "received_base_coin_amount"),
            base_coin_type=_str(raw, "base_coin_type"),
            reason=_reason(raw),
            timestamp=_u(raw, "timestamp"),
        )


EventPayload = Union[
    UpgradeEvent,
    UpdateAllowListEvent,
    UpdatePocketEvent,
    UpdatePocketStatusEvent,
    UpdateDepositStatsEvent,
    UpdateWithdrawalStatsEvent,
    UpdateTradingStatsEvent,
    UpdateClosePositionEvent,
]

EVENT_PAYLOADS: Dict[EventName, Callable[[Mapping[str, Any]], Any]] = {
    EventName.UPGRADE: UpgradeEvent.from_json,
    EventName.UPDATE_ALLOWED_ADMIN: UpdateAdminEvent.from_json,
    EventName.UPDATE_ALLOWED_OPERATOR: UpdateOperatorEvent.from_json,
    EventName.UPDATE_ALLOWED_TARGET: UpdateTargetEvent.from_json,
    EventName.CREATE_POCKET: UpdatePocketEvent.from_json,
    EventName.UPDATE_POCKET: UpdatePocketEvent.from_json,
    EventName.UPDATE_POCKET_STATUS: UpdatePocketStatusEvent.from_json,
    EventName.UPDATE_TRADING_STATS: UpdateTradingStatsEvent.from_json,
    EventName.UPDATE_CLOSE_POSITION_STATS: UpdateClosePositionEvent.from_json,
    EventName.UPDATE_DEPOSIT_STATS: UpdateDepositStatsEvent.from_json,
    EventName.UPDATE_WITHDRAWAL_STATS: UpdateWithdrawalStatsEvent.from_json,
}


# --- Envelope ----------------------------------------------------------------

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class EventGuid:
    creation_number: int
    account_address: str


@dataclass(slots=True, frozen=True)
class Event(Generic[T]):
    guid: EventGuid
    sequence_number: int
    type: str
    event_name: EventName
    data: T


def decode_event(event_name: Union[EventName, str], raw: Mapping[str, Any]) -> Event[Any]:
    """Decode one raw REST event into an `Event` with a typed payload."""
    name = EventName(event_name)
    guid = _get(raw, "guid")
    return Event(
        guid=EventGuid(
            creation_number=parse_u(_get(guid, "creation_number"), "creation_number"),
            account_address=_str(guid, "account_address"),
        ),
        sequence_number=parse_u(_get(raw, "sequence_number"), "sequence_number"),
        type=_str(raw, "type"),
        event_name=name,
        data=EVENT_PAYLOADS[name](_get(raw, "data")),
    )


__all__ = [
    "EventName",
    "EventReason",
    "UpgradeEvent",
    "UpdateAllowListEvent",
    "UpdateAdminEvent",
    "UpdateOperatorEvent",
    "UpdateTargetEvent",
    "UpdatePocketEvent",
    "UpdatePocketStatusEvent",
    "UpdateDepositStatsEvent",
    "UpdateWithdrawalStatsEvent",
    "UpdateTradingStatsEvent",
    "UpdateClosePositionEvent",
    "EventPayload",
    "EVENT_PAYLOADS",
    "EventGuid",
    "Event",
    "decode_event",
]
