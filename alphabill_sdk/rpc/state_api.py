"""
Typed wrappers for the state_* JSON-RPC methods.
"""
import logging
from typing import Any, List, Optional, Type, TypeVar

import pydantic

from ..encoding import from_hex
from ..exceptions import EncodingError
from ..models import RoundInfo, TransactionRecordAndProof, Unit, parse_uint
from ..tx.order import Block, TransactionOrder, TxRecordProof
from .transport import JsonRpcClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_unit(data_model: Type[T], result: Any) -> Optional[Unit[T]]:
    """
    Parse a state_getUnit result; None when the unit does not exist.

    Raises:
        EncodingError: If the result does not match ``data_model``
    """
    if result is None:
        return None
    try:
        return Unit[data_model].model_validate(result)
    except pydantic.ValidationError as e:
        raise EncodingError(f"invalid {data_model.__name__} unit: {e}") from e


class StateAPIClient:
    """State API of an Alphabill node."""

    def __init__(self, rpc: JsonRpcClient):
        self.rpc = rpc

    def get_round_number(self) -> int:
        """Latest round number seen by the node."""
        result = self.rpc.call("state_getRoundNumber")
        try:
            return int(parse_uint(result))
        except (TypeError, ValueError) as e:
            raise EncodingError(f"invalid round number: {result!r}") from e

    def get_round_info(self) -> RoundInfo:
        result = self.rpc.call("state_getRoundInfo")
        try:
            return RoundInfo.model_validate(result)
        except pydantic.ValidationError as e:
            raise EncodingError(f"invalid round info: {e}") from e

    def get_unit(
        self,
        unit_id: bytes,
        data_model: Type[T],
        include_state_proof: bool = False
    ) -> Optional[Unit[T]]:
        """
        Fetch a unit and parse its data with ``data_model``.

        Returns:
            The unit, or None if it does not exist
        """
        result = self.rpc.call("state_getUnit", unit_id, include_state_proof)
        return parse_unit(data_model, result)

    def get_units_by_owner_id(self, owner_id: bytes) -> List[bytes]:
        result = self.rpc.call("state_getUnitsByOwnerID", owner_id)
        if result is None:
            return []
        try:
            return [from_hex(u) for u in result]
        except (AttributeError, TypeError) as e:
            raise EncodingError(f"invalid unit id list: {result!r}") from e

    def send_transaction(self, order: TransactionOrder) -> bytes:
        """
        Submit a signed transaction order.

        Returns:
            Transaction hash reported by the node
        """
        result = self.rpc.call("state_sendTransaction", order.encode())
        if not isinstance(result, str):
            raise EncodingError(f"invalid transaction hash: {result!r}")
        tx_hash = from_hex(result)
        logger.debug(f"Transaction sent: hash={tx_hash.hex()}")
        return tx_hash

    def get_transaction_proof(self, tx_hash: bytes) -> Optional[TxRecordProof]:
        """
        Look up the record and proof of an executed transaction.

        Returns:
            The proof, or None if the transaction has not been executed
        """
        result = self.rpc.call("state_getTransactionProof", tx_hash)
        if result is None:
            return None
        try:
            wrapped = TransactionRecordAndProof.model_validate(result)
        except pydantic.ValidationError as e:
            raise EncodingError(f"invalid transaction proof response: {e}") from e
        try:
            return TxRecordProof.decode(wrapped.tx_record_proof)
        except EncodingError as e:
            raise EncodingError(f"failed to decode tx record proof: {e}") from e

    def get_block(self, round_number: int) -> Optional[Block]:
        """
        Fetch the block of a round.

        Returns:
            The block, or None if the round has no block
        """
        result = self.rpc.call("state_getBlock", round_number)
        if result is None:
            return None
        if not isinstance(result, str):
            raise EncodingError(f"invalid block: {result!r}")
        try:
            return Block.decode(from_hex(result))
        except EncodingError as e:
            raise EncodingError(f"failed to decode block: {e}") from e
