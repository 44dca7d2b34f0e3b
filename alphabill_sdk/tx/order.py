"""
Transaction order, record and proof structures.
"""
import dataclasses
import hashlib
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, List, Optional, Type, TypeVar

from ..encoding import CborRecord, decode_cbor, encode_cbor

TRANSACTION_ORDER_VERSION = 1
TRANSACTION_RECORD_VERSION = 1

A = TypeVar("A", bound=CborRecord)


class TxStatus(IntEnum):
    """Execution status reported in the server metadata."""
    FAILED = 0
    SUCCESSFUL = 1
    OUT_OF_GAS = 2


class StateUnlockKind(IntEnum):
    """First byte of ``TransactionOrder.state_unlock``."""
    ROLLBACK = 0
    EXECUTE = 1


@dataclass(frozen=True)
class ClientMetadata(CborRecord):
    timeout: int = 0
    max_transaction_fee: int = 0
    fee_credit_record_id: Optional[bytes] = None
    reference_number: Optional[bytes] = None


@dataclass(frozen=True)
class StateLock(CborRecord):
    """Conditions under which a locked transaction is executed or rolled back."""
    execution_predicate: Optional[bytes] = None
    rollback_predicate: Optional[bytes] = None


@dataclass(frozen=True)
class Payload(CborRecord):
    """
    The signed part of a transaction order.

    ``attributes`` holds the canonical CBOR encoding of the type specific
    attributes structure.
    """
    network_id: int
    partition_id: int
    unit_id: Optional[bytes]
    type: int
    attributes: bytes
    state_lock: Optional[StateLock] = None
    client_metadata: Optional[ClientMetadata] = None

    def unmarshal_attributes(self, attr_cls: Type[A]) -> A:
        return attr_cls.decode(self.attributes)


@dataclass(frozen=True)
class TransactionOrder(CborRecord):
    """A payload together with its authorization and fee proofs."""
    version: int
    payload: Payload
    state_unlock: Optional[bytes] = None
    auth_proof: Optional[bytes] = None
    fee_proof: Optional[bytes] = None

    @property
    def unit_id(self) -> Optional[bytes]:
        return self.payload.unit_id

    @property
    def type(self) -> int:
        return self.payload.type

    @property
    def timeout(self) -> int:
        if self.payload.client_metadata is None:
            return 0
        return self.payload.client_metadata.timeout

    def state_lock_proof_sig_bytes(self) -> bytes:
        """Bytes signed by the state unlock proof: the order without any proofs."""
        return encode_cbor([self.version, self.payload, None])

    def payload_bytes(self) -> bytes:
        """Bytes signed by extra proofs embedded into the attributes."""
        return self.payload.encode()

    def auth_proof_sig_bytes(self) -> bytes:
        """Bytes signed by the owner proof."""
        return encode_cbor([self.version, self.payload, self.state_unlock])

    def fee_proof_sig_bytes(self) -> bytes:
        """Bytes signed by the fee proof; covers the owner proof as well."""
        return encode_cbor([self.version, self.payload, self.state_unlock, self.auth_proof])

    def unmarshal_attributes(self, attr_cls: Type[A]) -> A:
        return self.payload.unmarshal_attributes(attr_cls)

    def unmarshal_auth_proof(self, proof_cls: Type[A]) -> Optional[A]:
        if self.auth_proof is None:
            return None
        return proof_cls.decode(self.auth_proof)

    def with_state_unlock_proof(self, kind: StateUnlockKind, proof: bytes) -> "TransactionOrder":
        """
        Return a copy that executes or rolls back the pending locked transaction.

        The kind byte is followed by the argument of the matching state lock
        predicate.
        """
        return dataclasses.replace(self, state_unlock=bytes([StateUnlockKind(kind)]) + proof)

    def with_attributes(self, attributes: CborRecord) -> "TransactionOrder":
        """Return a copy with ``attributes`` re-encoded into the payload."""
        payload = dataclasses.replace(self.payload, attributes=attributes.encode())
        return dataclasses.replace(self, payload=payload)

    def hash(self) -> bytes:
        """SHA-256 of the encoded order, as sent to the node."""
        return hashlib.sha256(self.encode()).digest()


@dataclass(frozen=True)
class ServerMetadata(CborRecord):
    actual_fee: int = 0
    target_units: Optional[List[bytes]] = None
    success_indicator: int = TxStatus.SUCCESSFUL
    processing_details: Any = None


@dataclass(frozen=True)
class TransactionRecord(CborRecord):
    """An executed transaction order with the server metadata of its execution."""
    version: int
    transaction_order: TransactionOrder
    server_metadata: Optional[ServerMetadata] = None


class TxProof(CborRecord):
    """
    Inclusion proof of a transaction in a block.

    Proofs are verified by the validators, not by this client, so the
    structure is carried exactly as received.
    """

    def __init__(self, raw: Any):
        self.raw = raw

    def to_cbor_value(self) -> Any:
        return self.raw

    @classmethod
    def from_cbor_value(cls, value: Any) -> "TxProof":
        return cls(value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TxProof) and other.raw == self.raw

    def __repr__(self) -> str:
        return f"TxProof({self.raw!r})"


@dataclass(frozen=True)
class TxRecordProof(CborRecord):
    """Executed transaction record and its inclusion proof."""
    tx_record: TransactionRecord
    tx_proof: TxProof

    @property
    def transaction_order(self) -> TransactionOrder:
        return self.tx_record.transaction_order

    @property
    def unit_id(self) -> Optional[bytes]:
        return self.tx_record.transaction_order.unit_id

    @property
    def tx_status(self) -> int:
        if self.tx_record.server_metadata is None:
            return TxStatus.FAILED
        return self.tx_record.server_metadata.success_indicator

    @property
    def actual_fee(self) -> int:
        if self.tx_record.server_metadata is None:
            return 0
        return self.tx_record.server_metadata.actual_fee


@dataclass(frozen=True)
class Block(CborRecord):
    header: Any
    transactions: List[TransactionRecord] = field(default_factory=list)
    unicity_certificate: Any = None


def new_transaction_order(payload: Payload) -> TransactionOrder:
    return TransactionOrder(version=TRANSACTION_ORDER_VERSION, payload=payload)


def decode_transaction_order(data: bytes) -> TransactionOrder:
    """
    Decode a CBOR encoded transaction order.

    Raises:
        EncodingError: If the bytes are not a valid transaction order
    """
    return TransactionOrder.from_cbor_value(decode_cbor(data))
