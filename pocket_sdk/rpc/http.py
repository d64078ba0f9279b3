"""
HTTP client for the Aptos node REST API (sync, httpx).

- Implements `pocket_sdk.tx.send.LedgerService`.
- Retries idempotent GETs on transient transport failures, 429 and 5xx.
  POSTs (simulate, submit, view) are sent exactly once.
- Error bodies (`{"message", "error_code", "vm_error_code"}`) become `RpcError`.

Example:
    from pocket_sdk.rpc.http import LedgerClient
    with LedgerClient("https://fullnode.testnet.aptoslabs.com/v1") as ledger:
        print(ledger.get_ledger_info()["chain_id"])
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..config import SDKConfig
from ..errors import RpcError
from ..version import __version__ as SDK_VERSION

log = logging.getLogger(__name__)

JSON = Any

SIGNED_TRANSACTION_BCS = "application/x.aptos.signed_transaction+bcs"


def _is_retriable_http(status: int) -> bool:
    return status == 429 or 500 <= status <= 599


def _jitter_backoff(base: float, factor: float, attempt: int, jitter: float) -> float:
    return base * (factor ** max(attempt - 1, 0)) + random.random() * jitter


class _Transient(Exception):
    """A GET worth repeating."""


@dataclass
class LedgerClient:
    """Synchronous Aptos REST client."""

    base_url: str
    timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.25
    backoff_factor: float = 2.0
    backoff_jitter: float = 0.1
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.BaseTransport] = None
    _client: httpx.Client = field(init=False, repr=False)

    def __post_init__(self) -> None:
        merged: Dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": f"pocket-sdk-py/{SDK_VERSION}",
        }
        if self.headers:
            merged.update(dict(self.headers))
        self._client = httpx.Client(
            base_url=self.base_url.rstrip("/"),
            timeout=self.timeout,
            headers=merged,
            transport=self.transport,
        )

    @classmethod
    def from_config(cls, cfg: SDKConfig, *, transport: Optional[httpx.BaseTransport] = None) -> "LedgerClient":
        return cls(
            base_url=cfg.node_url,
            timeout=cfg.request_timeout,
            max_retries=cfg.max_retries,
            backoff_base=cfg.backoff_base,
            headers=cfg.http_headers(),
            transport=transport,
        )

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "LedgerClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self._client.close()

    # --- LedgerService ---------------------------------------------------

    def get_ledger_info(self) -> Dict[str, Any]:
        return self._get("/")

    def get_account(self, address: str) -> Dict[str, Any]:
        return self._get(f"/accounts/{address}")

    def get_account_resources(self, address: str) -> List[Dict[str, Any]]:
        return self._get(f"/accounts/{address}/resources")

    def simulate_transaction(self, signed_bcs: bytes) -> List[Dict[str, Any]]:
        return self._post("/transactions/simulate", content=bytes(signed_bcs), content_type=SIGNED_TRANSACTION_BCS)

    def submit_transaction(self, signed_bcs: bytes) -> Dict[str, Any]:
        return self._post("/transactions", content=bytes(signed_bcs), content_type=SIGNED_TRANSACTION_BCS)

    def get_transaction_by_hash(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return self._get(f"/transactions/by_hash/{tx_hash}", allow_404=True)

    def view(self, payload: Dict[str, Any]) -> List[Any]:
        return self._post("/view", json=payload)

    def get_events_by_event_handle(
        self,
        address: str,
        event_handle: str,
        field_name: str,
        *,
        start: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if start is not None:
            params["start"] = str(start)
        if limit is not None:
            params["limit"] = str(limit)
        # 404 until the program has emitted on this stream
        events = self._get(f"/accounts/{address}/events/{event_handle}/{field_name}", params=params, allow_404=True)
        return [] if events is None else events

    # --- internals -------------------------------------------------------

    def _get(self, path: str, *, params: Optional[Dict[str, Any]] = None, allow_404: bool = False) -> JSON:
        last_exc: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 2):  # N retries -> N+1 attempts
            try:
                r = self._client.get(path, params=params)
                if _is_retriable_http(r.status_code):
                    raise _Transient(f"HTTP {r.status_code}")
            except (httpx.TimeoutException, httpx.NetworkError, _Transient) as e:
                last_exc = e
                if attempt > self.max_retries:
                    break
                delay = _jitter_backoff(self.backoff_base, self.backoff_factor, attempt, self.backoff_jitter)
                log.warning("GET %s failed (%s); retry %d/%d in %.2fs", path, e, attempt, self.max_retries, delay)
                time.sleep(delay)
                continue
            if allow_404 and r.status_code == 404:
                return None
            return self._handle_response(r)
        raise RpcError("ledger transport failed", data=str(last_exc))

    def _post(
        self,
        path: str,
        *,
        json: Any = None,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> JSON:
        headers = {"Content-Type": content_type} if content_type else None
        try:
            r = self._client.post(path, json=json, content=content, headers=headers)
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise RpcError("network error", data=str(e)) from e
        return self._handle_response(r)

    @staticmethod
    def _handle_response(r: httpx.Response) -> JSON:
        try:
            body = r.json()
        except ValueError as e:
            if r.is_success:
                raise RpcError("non-JSON response from ledger", status=r.status_code, data=r.text[:256]) from e
            body = None
        if r.is_success:
            return body
        if isinstance(body, dict):
            raise RpcError(
                message=str(body.get("message", r.reason_phrase)),
                status=r.status_code,
                error_code=body.get("error_code"),
                vm_error_code=body.get("vm_error_code"),
                data=body,
            )
        raise RpcError(f"HTTP {r.status_code}", status=r.status_code, data=r.text[:256])


__all__ = ["LedgerClient", "SIGNED_TRANSACTION_BCS"]
