"""
pocket_sdk.events.indexer
=========================

Typed, paginated reads of the program's event streams.

All streams hang off one resource, `<program>::event::EventManager`, stored
at the program account; each stream is a field of it named after an
`EventName`. Reads are windows `[start, start + limit)` over the stream's
sequence numbers, returned ascending. A window past the end is empty.

Public API
----------
- EventIndexer(ledger, resource_account)
    .fetch(event_name, start=None, limit=None) -> List[Event]
    .iter_events(event_name, page_size=100, start=0) -> Iterator[Event]
    .get_<stream>_events(start=None, limit=None) for each stream
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Protocol, Union

from ..types.core import AccountAddress, AddressLike
from ..types.events import (Event, EventName, UpdateAdminEvent,
                            UpdateClosePositionEvent, UpdateDepositStatsEvent,
                            UpdateOperatorEvent, UpdatePocketEvent,
                            UpdatePocketStatusEvent, UpdateTargetEvent,
                            UpdateTradingStatsEvent,
                            UpdateWithdrawalStatsEvent, UpgradeEvent,
                            decode_event)

log = logging.getLogger(__name__)

EVENT_MANAGER = "event::EventManager"
DEFAULT_PAGE_SIZE = 100


class _EventSource(Protocol):
    def get_events_by_event_handle(
        self, address: str, event_handle: str, field_name: str, *, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Any]: ...


class EventIndexer:
    def __init__(self, ledger: _EventSource, resource_account: AddressLike) -> None:
        self.ledger = ledger
        self.resource_account = AccountAddress.from_hex(resource_account)

    @property
    def event_handle(self) -> str:
        return f"{self.resource_account.hex()}::{EVENT_MANAGER}"

    def fetch(
        self,
        event_name: Union[EventName, str],
        start: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Event[Any]]:
        name = EventName(event_name)
        raw = self.ledger.get_events_by_event_handle(
            self.resource_account.hex(),
            self.event_handle,
            name.value,
            start=start,
            limit=limit,
        )
        events = sorted((decode_event(name, r) for r in raw), key=lambda e: e.sequence_number)
        log.debug("fetched %d %s events (start=%s limit=%s)", len(events), name.value, start, limit)
        return events

    def iter_events(
        self,
        event_name: Union[EventName, str],
        page_size: int = DEFAULT_PAGE_SIZE,
        start: int = 0,
    ) -> Iterator[Event[Any]]:
        """Walk a whole stream page by page; stops at the first empty or short page."""
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        cursor = start
        while True:
            page = self.fetch(event_name, start=cursor, limit=page_size)
            yield from page
            if len(page) < page_size:
                return
            cursor = page[-1].sequence_number + 1

    # ---- per-stream helpers ----

    def get_upgrade_events(self, start: Optional[int] = None, limit: Optional[int] = None) -> List[Event[UpgradeEvent]]:
        return self.fetch(EventName.UPGRADE, start, limit)

    def get_update_allowed_admin_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdateAdminEvent]]:
        return self.fetch(EventName.UPDATE_ALLOWED_ADMIN, start, limit)

    def get_update_allowed_operator_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdateOperatorEvent]]:
        return self.fetch(EventName.UPDATE_ALLOWED_OPERATOR, start, limit)

    def get_update_allowed_target_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdateTargetEvent]]:
        return self.fetch(EventName.UPDATE_ALLOWED_TARGET, start, limit)

    def get_create_pocket_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdatePocketEvent]]:
        return self.fetch(EventName.CREATE_POCKET, start, limit)

    def get_update_pocket_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdatePocketEvent]]:
        return self.fetch(EventName.UPDATE_POCKET, start, limit)

    def get_update_pocket_status_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdatePocketStatusEvent]]:
        return self.fetch(EventName.UPDATE_POCKET_STATUS, start, limit)

    def get_update_trading_stats_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdateTradingStatsEvent]]:
        return self.fetch(EventName.UPDATE_TRADING_STATS, start, limit)

    def get_update_close_position_stats_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdateClosePositionEvent]]:
        return self.fetch(EventName.UPDATE_CLOSE_POSITION_STATS, start, limit)

    def get_update_deposit_stats_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdateDepositStatsEvent]]:
        return self.fetch(EventName.UPDATE_DEPOSIT_STATS, start, limit)

    def get_update_withdrawal_stats_events(
        self, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Event[UpdateWithdrawalStatsEvent]]:
        return self.fetch(EventName.UPDATE_WITHDRAWAL_STATS, start, limit)


__all__ = ["EVENT_MANAGER", "DEFAULT_PAGE_SIZE", "EventIndexer"]
