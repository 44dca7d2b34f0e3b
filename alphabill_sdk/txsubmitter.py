"""
Submitting transactions and waiting for their execution.

A submission moves through::

    PENDING -> SUBMITTED -> POLLING -> CONFIRMED | TIMED_OUT | CANCELLED | TRANSPORT_ERROR

Confirmation polls the node at a fixed interval. A transaction that has no
proof once the node reaches its timeout round can no longer be executed, so
reaching that round ends the wait.
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol

from .exceptions import (
    ConfirmationCancelledError, ConfirmationTimeoutError, EncodingError,
    RpcError, ValidationError
)
from .tx.order import TransactionOrder, TxRecordProof, TxStatus

DEFAULT_POLL_INTERVAL = 0.5


class SubmissionState(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    POLLING = "polling"
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    TRANSPORT_ERROR = "transport_error"


class SubmissionClient(Protocol):
    """Node operations needed to submit and confirm transactions"""

    def send_transaction(self, order: TransactionOrder) -> bytes:
        ...

    def get_round_number(self) -> int:
        ...

    def get_transaction_proof(self, tx_hash: bytes) -> Optional[TxRecordProof]:
        ...


@dataclass
class TxSubmission:
    """A transaction order and what is known about its execution."""
    transaction: TransactionOrder
    tx_hash: bytes = field(init=False)
    proof: Optional[TxRecordProof] = None
    state: SubmissionState = SubmissionState.PENDING

    def __post_init__(self):
        self.tx_hash = self.transaction.hash()

    @property
    def unit_id(self) -> Optional[bytes]:
        return self.transaction.unit_id

    @property
    def confirmed(self) -> bool:
        return self.proof is not None

    @property
    def status(self) -> Optional[int]:
        return self.proof.tx_status if self.proof else None

    @property
    def success(self) -> bool:
        return self.status == TxStatus.SUCCESSFUL

    @property
    def actual_fee(self) -> int:
        return self.proof.actual_fee if self.proof else 0

    def to_batch(
        self,
        client: SubmissionClient,
        logger: Optional[logging.Logger] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ) -> "TxSubmissionBatch":
        batch = TxSubmissionBatch(client, logger=logger, poll_interval=poll_interval)
        batch.add(self)
        return batch


class TxSubmissionBatch:
    """Transactions sent together and confirmed together."""

    def __init__(
        self,
        client: SubmissionClient,
        logger: Optional[logging.Logger] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)
        self.poll_interval = poll_interval
        self._submissions: List[TxSubmission] = []
        self.max_timeout = 0

    @property
    def submissions(self) -> List[TxSubmission]:
        return self._submissions

    def add(self, submission: TxSubmission) -> None:
        self._submissions.append(submission)
        self.max_timeout = max(self.max_timeout, submission.transaction.timeout)

    def send_tx(self, confirm: bool = True, cancel: Optional[threading.Event] = None) -> None:
        """
        Send all transactions and optionally wait for their proofs.

        Args:
            confirm: Wait until every transaction has a proof
            cancel: Optional event; setting it stops the confirmation wait

        Raises:
            ValidationError: If the batch is empty
            RpcError: If sending or polling fails
            ConfirmationTimeoutError: If a timeout round is reached without proof
            ConfirmationCancelledError: If ``cancel`` is set while waiting
        """
        if not self._submissions:
            raise ValidationError("no transactions to send")
        for sub in self._submissions:
            try:
                self.client.send_transaction(sub.transaction)
            except (RpcError, EncodingError):
                sub.state = SubmissionState.TRANSPORT_ERROR
                raise
            sub.state = SubmissionState.SUBMITTED
            self.logger.debug(f"Tx submitted: hash={sub.tx_hash.hex()}, unitID={_hex(sub.unit_id)}")
        if confirm:
            self.confirm(cancel)

    def _mark_unconfirmed(self, state: SubmissionState) -> None:
        for sub in self._submissions:
            if not sub.confirmed:
                sub.state = state

    def confirm(self, cancel: Optional[threading.Event] = None) -> None:
        """Poll until every submitted transaction has a proof."""
        self.logger.info("Confirming submitted transactions")
        self._mark_unconfirmed(SubmissionState.POLLING)

        while True:
            if cancel is not None and cancel.is_set():
                self._mark_unconfirmed(SubmissionState.CANCELLED)
                raise ConfirmationCancelledError("confirming transactions interrupted: cancelled by caller")

            try:
                round_number = self.client.get_round_number()
            except (RpcError, EncodingError):
                self._mark_unconfirmed(SubmissionState.TRANSPORT_ERROR)
                raise

            timed_out = []
            for sub in self._submissions:
                if sub.confirmed:
                    continue
                if round_number >= sub.transaction.timeout:
                    timed_out.append(sub)
                    continue
                try:
                    proof = self.client.get_transaction_proof(sub.tx_hash)
                except (RpcError, EncodingError):
                    self._mark_unconfirmed(SubmissionState.TRANSPORT_ERROR)
                    raise
                if proof is not None:
                    sub.proof = proof
                    sub.state = SubmissionState.CONFIRMED
                    self._log_status(sub)

            if timed_out:
                self.logger.info(f"Tx confirmation timeout is reached: round={round_number}")
                for sub in timed_out:
                    sub.state = SubmissionState.TIMED_OUT
                    self.logger.info(f"Tx not confirmed: hash={sub.tx_hash.hex()}, unitID={_hex(sub.unit_id)}")
                first = min(timed_out, key=lambda s: s.transaction.timeout)
                raise ConfirmationTimeoutError(
                    round_number, first.transaction.timeout, first.tx_hash
                )

            if all(sub.confirmed for sub in self._submissions):
                self.logger.info("All transactions confirmed")
                return

            if cancel is not None:
                cancel.wait(self.poll_interval)
            else:
                time.sleep(self.poll_interval)

    def _log_status(self, sub: TxSubmission) -> None:
        ids = f"hash={sub.tx_hash.hex()}, unitID={_hex(sub.unit_id)}"
        status = sub.status
        if status == TxStatus.SUCCESSFUL:
            self.logger.debug(f"Tx confirmed: {ids}")
        elif status == TxStatus.OUT_OF_GAS:
            self.logger.warning(f"Tx failed: out of gas: {ids}")
        elif status == TxStatus.FAILED:
            self.logger.warning(f"Tx failed: {ids}")
        else:
            self.logger.warning(f"Tx failed: unknown status {status}: {ids}")


def _hex(value: Optional[bytes]) -> str:
    return value.hex() if value else ""
