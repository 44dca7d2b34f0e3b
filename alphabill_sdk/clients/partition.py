"""
Base client for one Alphabill partition.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, ClassVar, List, Optional, Type, TypeVar

import requests

from ..config import NetworkConfig
from ..exceptions import PartitionTypeMismatchError, RpcError, TransactionFailedError
from ..models import FeeCreditRecordData, NodeInfo, RoundInfo, Unit
from ..rpc import AdminAPIClient, BatchElem, JsonRpcClient, StateAPIClient, parse_unit
from ..rpc.transport import DEFAULT_BATCH_ITEM_LIMIT
from ..tx.order import Block, TransactionOrder, TxRecordProof
from ..txsubmitter import DEFAULT_POLL_INTERVAL, TxSubmission, TxSubmissionBatch
from ..unit_id import has_type
from ..units.fee_credit_record import FeeCreditRecord

T = TypeVar("T")
P = TypeVar("P", bound="PartitionClient")


@dataclass(frozen=True)
class PartitionDescription:
    """Static description of the partition served by the node."""
    network_id: int
    partition_id: int
    partition_type_id: int


class PartitionClient:
    """
    Client for a partition node.

    The node is asked for its info on construction; a node serving another
    partition type is rejected.
    """

    partition_type: ClassVar[int]
    partition_name: ClassVar[str]
    fee_credit_record_unit_type: ClassVar[Optional[int]] = None

    def __init__(
        self,
        rpc_url: str,
        timeout: int = 30,
        retry_count: int = 3,
        batch_item_limit: int = DEFAULT_BATCH_ITEM_LIMIT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the client

        Args:
            rpc_url: Node RPC URL
            timeout: Timeout for HTTP requests in seconds
            retry_count: Number of retries for HTTP requests
            batch_item_limit: Maximum number of calls in one batch request
            poll_interval: Seconds between confirmation polls
            session: Optional preconfigured requests session
            logger: Optional logger instance

        Raises:
            RpcError: If the node info cannot be fetched
            PartitionTypeMismatchError: If the node serves another partition type
        """
        self.logger = logger or logging.getLogger(__name__)
        self.poll_interval = poll_interval
        self.rpc = JsonRpcClient(
            rpc_url,
            timeout=timeout,
            retry_count=retry_count,
            batch_item_limit=batch_item_limit,
            session=session,
            logger=self.logger,
        )
        self.state = StateAPIClient(self.rpc)
        self.admin = AdminAPIClient(self.rpc)

        try:
            info = self.admin.get_node_info()
        except RpcError as e:
            raise RpcError(f"requesting node info: {e}", method=e.method, code=e.code, data=e.data) from e
        if info.partition_type_id != self.partition_type:
            raise PartitionTypeMismatchError(self.partition_type, info.partition_type_id)

        self.description = PartitionDescription(
            network_id=info.network_id,
            partition_id=info.partition_id,
            partition_type_id=info.partition_type_id,
        )
        self.logger.debug(
            f"Connected to {self.partition_name} partition {info.partition_id} "
            f"of network {info.network_id} at {rpc_url}"
        )

    @classmethod
    def from_network(cls: Type[P], network: str, rpc_url: Optional[str] = None, **kwargs: Any) -> P:
        """
        Create a client for the partition of a configured network.

        Args:
            network: Network name in networks.json (e.g. "local")
            rpc_url: Optional URL overriding the configured one
            **kwargs: Passed to the constructor
        """
        url = NetworkConfig.get_rpc_url(network, cls.partition_name, override=rpc_url)
        return cls(url, **kwargs)

    @property
    def network_id(self) -> int:
        return self.description.network_id

    @property
    def partition_id(self) -> int:
        return self.description.partition_id

    def get_node_info(self) -> NodeInfo:
        return self.admin.get_node_info()

    def get_round_number(self) -> int:
        return self.state.get_round_number()

    def get_round_info(self) -> RoundInfo:
        return self.state.get_round_info()

    def get_unit(self, unit_id: bytes, data_model: Type[T], include_state_proof: bool = False) -> Optional[Unit[T]]:
        return self.state.get_unit(unit_id, data_model, include_state_proof)

    def get_units_by_owner_id(self, owner_id: bytes) -> List[bytes]:
        return self.state.get_units_by_owner_id(owner_id)

    def send_transaction(self, order: TransactionOrder) -> bytes:
        return self.state.send_transaction(order)

    def get_transaction_proof(self, tx_hash: bytes) -> Optional[TxRecordProof]:
        return self.state.get_transaction_proof(tx_hash)

    def get_block(self, round_number: int) -> Optional[Block]:
        return self.state.get_block(round_number)

    def get_fee_credit_record(self, unit_id: bytes) -> Optional[FeeCreditRecord]:
        """
        Fetch a fee credit record.

        Returns:
            The record, or None if it does not exist
        """
        unit = self.state.get_unit(unit_id, FeeCreditRecordData)
        if unit is None:
            return None
        return FeeCreditRecord.from_unit(unit)

    def get_fee_credit_record_by_owner_id(self, owner_id: bytes) -> Optional[FeeCreditRecord]:
        """
        Find the first fee credit record of an owner.

        Returns:
            The record, or None if the owner has none
        """
        try:
            unit_ids = self.state.get_units_by_owner_id(owner_id)
        except RpcError as e:
            raise RpcError(f"failed to fetch units: {e}", method=e.method, code=e.code, data=e.data) from e
        for unit_id in unit_ids:
            if has_type(unit_id, self.fee_credit_record_unit_type):
                return self.get_fee_credit_record(unit_id)
        return None

    def batch_get_units(
        self,
        unit_ids: List[bytes],
        data_model: Type[T],
        cancel: Optional[threading.Event] = None
    ) -> List[Unit[T]]:
        """
        Fetch units with batched state_getUnit calls.

        Units that no longer exist are left out of the result.

        Raises:
            RpcError: If a batch request fails or the node reports an error
                for one of the units
        """
        if not unit_ids:
            return []
        batch = [BatchElem("state_getUnit", [unit_id, False]) for unit_id in unit_ids]
        self.rpc.batch_call(batch, cancel=cancel)
        units = []
        for elem in batch:
            if elem.error is not None:
                raise RpcError(
                    f"failed to fetch unit: {elem.error}", method=elem.method,
                    code=elem.error.code, data=elem.error.data
                ) from elem.error
            unit = parse_unit(data_model, elem.result)
            if unit is not None:
                units.append(unit)
        return units

    def new_submission_batch(self) -> TxSubmissionBatch:
        return TxSubmissionBatch(self, logger=self.logger, poll_interval=self.poll_interval)

    def confirm_transaction(
        self,
        order: TransactionOrder,
        cancel: Optional[threading.Event] = None
    ) -> TxRecordProof:
        """
        Submit a transaction and wait until it is executed.

        Returns:
            Proof of the successfully executed transaction

        Raises:
            RpcError: On transport failures
            ConfirmationTimeoutError: If the transaction timed out
            ConfirmationCancelledError: If ``cancel`` was set
            TransactionFailedError: If the transaction was executed unsuccessfully
        """
        sub = TxSubmission(order)
        sub.to_batch(self, logger=self.logger, poll_interval=self.poll_interval).send_tx(
            confirm=True, cancel=cancel
        )
        if not sub.success:
            raise TransactionFailedError(
                f"transaction failed with status {sub.status}", proof=sub.proof, status=sub.status
            )
        return sub.proof

    def close(self) -> None:
        self.rpc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
