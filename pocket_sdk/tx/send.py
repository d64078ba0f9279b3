"""
pocket_sdk.tx.send
==================

Sign entry-function payloads, gate them on a dry run, submit them to the
ledger and optionally wait for finality.

Primary entry point
-------------------
- TransactionSigner(account, ledger, config)
    .build_raw_transaction(payload) -> RawTransaction
    .simulate(payload)              -> dict (first simulation result)
    .sign_and_submit(payload, wait=True, timeout_s=None) -> str (tx hash)
    .wait_for_transaction(tx_hash, timeout_s=None, check_success=True) -> dict
    .view(payload)                  -> list

Pipeline
--------
simulate (zeroed signature) -> reject on `success == false` -> sign -> submit
-> poll `by_hash` until the transaction leaves the pending state. A failed
simulation raises `SimulationFailure` and nothing is submitted. A committed
but failed transaction raises `SubmissionFailure`. Running out of the wait
budget raises `ConfirmationTimeout`; the transaction may still land later.

Nothing here retries simulate, submit or view: a resubmission could double
spend, so the caller decides.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Protocol

from ..config import SDKConfig
from ..errors import (ConfigurationError, ConfirmationTimeout, RpcError,
                      SimulationFailure, SubmissionFailure)
from ..types.core import (AccountAddress, EntryFunctionPayload,
                          RawTransaction, SignedTransaction, ViewPayload)
from ..wallet.signer import Account
from .encode import (ED25519_SIGNATURE_LENGTH, encode_signed_transaction,
                     signing_message, transaction_hash)

log = logging.getLogger(__name__)

PENDING_TRANSACTION = "pending_transaction"


# -----------------------------------------------------------------------------
# Ledger interface
# -----------------------------------------------------------------------------


class LedgerService(Protocol):
    """
    What the signer, indexer and CLI need from a ledger node.

    `pocket_sdk.rpc.http.LedgerClient` implements it over the REST API; tests
    use an in-memory double.
    """
    def get_ledger_info(self) -> Dict[str, Any]: ...
    def get_account(self, address: str) -> Dict[str, Any]: ...
    def get_account_resources(self, address: str) -> List[Dict[str, Any]]: ...
    def simulate_transaction(self, signed_bcs: bytes) -> List[Dict[str, Any]]: ...
    def submit_transaction(self, signed_bcs: bytes) -> Dict[str, Any]: ...
    def get_transaction_by_hash(self, tx_hash: str) -> Optional[Dict[str, Any]]: ...
    def view(self, payload: Dict[str, Any]) -> List[Any]: ...
    def get_events_by_event_handle(
        self, address: str, event_handle: str, field_name: str, *, start: Optional[int] = None, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]: ...


# -----------------------------------------------------------------------------
# Signer
# -----------------------------------------------------------------------------


class TransactionSigner:
    def __init__(
        self,
        account: Account,
        ledger: LedgerService,
        config: Optional[SDKConfig] = None,
        *,
        poll_interval_s: float = 0.25,
        max_poll_interval_s: float = 2.0,
        poll_backoff: float = 1.5,
    ) -> None:
        self.account = account
        self.ledger = ledger
        self.config = config or SDKConfig()
        self.poll_interval_s = poll_interval_s
        self.max_poll_interval_s = max_poll_interval_s
        self.poll_backoff = poll_backoff

    @property
    def address(self) -> AccountAddress:
        return self.account.address()

    # ---- building ----

    def build_raw_transaction(self, payload: EntryFunctionPayload) -> RawTransaction:
        sender = self.address
        account = self.ledger.get_account(sender.hex())
        chain_id = int(self.ledger.get_ledger_info()["chain_id"])
        return RawTransaction(
            sender=sender,
            sequence_number=int(account["sequence_number"]),
            payload=payload,
            max_gas_amount=self.config.max_gas_amount,
            gas_unit_price=self.config.gas_unit_price,
            expiration_timestamp_secs=int(time.time()) + self.config.tx_expiry_s,
            chain_id=chain_id,
        )

    def _sign(self, raw: RawTransaction) -> SignedTransaction:
        return SignedTransaction(
            raw=raw,
            public_key=self.account.public_key_bytes(),
            signature=self.account.sign(signing_message(raw)),
        )

    # ---- dry run ----

    def _simulate_raw(self, raw: RawTransaction) -> Dict[str, Any]:
        # The node rejects simulations that carry a valid signature
        unsigned = SignedTransaction(
            raw=raw,
            public_key=self.account.public_key_bytes(),
            signature=bytes(ED25519_SIGNATURE_LENGTH),
        )
        results = self.ledger.simulate_transaction(encode_signed_transaction(unsigned))
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            raise RpcError("unexpected simulation response", data=results)
        return results[0]

    def simulate(self, payload: EntryFunctionPayload) -> Dict[str, Any]:
        """Dry-run `payload` as this account. Returns the node's result as is."""
        return self._simulate_raw(self.build_raw_transaction(payload))

    # ---- submission ----

    def sign_and_submit(
        self,
        payload: EntryFunctionPayload,
        *,
        wait: bool = True,
        timeout_s: Optional[float] = None,
    ) -> str:
        raw = self.build_raw_transaction(payload)

        sim = self._simulate_raw(raw)
        if not sim.get("success"):
            vm_status = str(sim.get("vm_status", "simulation failed"))
            log.debug("simulation of %s rejected: %s", payload.function_id, vm_status)
            raise SimulationFailure(vm_status)

        signed_bcs = encode_signed_transaction(self._sign(raw))
        res = self.ledger.submit_transaction(signed_bcs)
        tx_hash = res.get("hash") if isinstance(res, dict) else None
        if not tx_hash:
            tx_hash = transaction_hash(signed_bcs)
        log.debug("submitted %s seq=%d tx=%s", payload.function_id, raw.sequence_number, tx_hash)

        if wait:
            self.wait_for_transaction(tx_hash, timeout_s=timeout_s, check_success=True)
        return tx_hash

    def wait_for_transaction(
        self,
        tx_hash: str,
        *,
        timeout_s: Optional[float] = None,
        check_success: bool = True,
    ) -> Dict[str, Any]:
        """
        Poll until `tx_hash` is committed.

        Raises:
            ConfirmationTimeout when `timeout_s` (default: config) elapses first
            SubmissionFailure when committed with `success == false` and `check_success`
        """
        budget = self.config.wait_timeout_s if timeout_s is None else float(timeout_s)
        deadline = time.monotonic() + budget
        interval = self.poll_interval_s

        while True:
            tx = self.ledger.get_transaction_by_hash(tx_hash)
            if tx is not None and tx.get("type") != PENDING_TRANSACTION:
                if check_success and not tx.get("success"):
                    raise SubmissionFailure(str(tx.get("vm_status", "transaction failed")), tx_hash)
                return tx

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ConfirmationTimeout(tx_hash, budget)
            time.sleep(min(interval, remaining))
            interval = min(interval * self.poll_backoff, self.max_poll_interval_s)

    # ---- reads ----

    def view(self, payload: ViewPayload) -> List[Any]:
        result = self.ledger.view(payload.to_json())
        if not isinstance(result, list):
            raise RpcError("unexpected view response", data=result)
        return result


class ReadOnlySigner:
    """
    Signer stand-in for read-only use: views go to the ledger, anything that
    needs a key raises `ConfigurationError` before touching the network.
    """

    def __init__(self, ledger: LedgerService) -> None:
        self.ledger = ledger

    def simulate(self, payload: EntryFunctionPayload) -> Dict[str, Any]:
        raise ConfigurationError(f"no signing account configured for {payload.function_id}")

    def sign_and_submit(
        self,
        payload: EntryFunctionPayload,
        *,
        wait: bool = True,
        timeout_s: Optional[float] = None,
    ) -> str:
        raise ConfigurationError(f"no signing account configured for {payload.function_id}")

    def view(self, payload: ViewPayload) -> List[Any]:
        result = self.ledger.view(payload.to_json())
        if not isinstance(result, list):
            raise RpcError("unexpected view response", data=result)
        return result


__all__ = [
    "PENDING_TRANSACTION",
    "LedgerService",
    "TransactionSigner",
    "ReadOnlySigner",
]
