"""
Transaction types and attribute structures of the Alphabill partitions.

Attributes that embed predicate signatures name the slot in ``proof_field``;
the builder fills that slot after the rest of the transaction is fixed. The
owner proof is wrapped into the record named by ``auth_proof_cls`` before it
is stored as the authorization proof of the order.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, List, Optional, Type

from ..encoding import CborRecord
from .order import TransactionRecord, TxProof, TxRecordProof


class PartitionType(IntEnum):
    MONEY = 1
    TOKENS = 2
    EVM = 3
    ORCHESTRATION = 4


class MoneyUnitType(IntEnum):
    BILL = 0x01
    FEE_CREDIT_RECORD = 0x02


class TokensUnitType(IntEnum):
    FUNGIBLE_TOKEN_TYPE = 0x01
    NON_FUNGIBLE_TOKEN_TYPE = 0x02
    FUNGIBLE_TOKEN = 0x03
    NON_FUNGIBLE_TOKEN = 0x04
    FEE_CREDIT_RECORD = 0x05


class EvmUnitType(IntEnum):
    FEE_CREDIT_RECORD = 0x01


class MoneyTx(IntEnum):
    TRANSFER = 1
    SPLIT = 2
    TRANSFER_DC = 3
    SWAP_DC = 4
    LOCK = 5
    UNLOCK = 6
    TRANSFER_FEE_CREDIT = 14
    RECLAIM_FEE_CREDIT = 15


class FeeCreditTx(IntEnum):
    ADD = 16
    CLOSE = 17
    LOCK = 18
    UNLOCK = 19
    SET = 20
    DELETE = 21


class NopTx(IntEnum):
    """Transaction accepted by every partition; touches only the unit counter."""
    NOP = 22


class TokensTx(IntEnum):
    DEFINE_FT = 1
    DEFINE_NFT = 2
    MINT_FT = 3
    MINT_NFT = 4
    TRANSFER_FT = 5
    TRANSFER_NFT = 6
    LOCK_TOKEN = 7
    UNLOCK_TOKEN = 8
    SPLIT_FT = 9
    BURN_FT = 10
    JOIN_FT = 11
    UPDATE_NFT = 12


class LockReason(IntEnum):
    """Lock status values written by wallet operations."""
    ADD_FEES = 1
    RECLAIM_FEES = 2
    COLLECT_DUST = 3
    MANUAL = 4


@dataclass(frozen=True)
class OwnerAuthProof(CborRecord):
    """Authorization proof satisfying the owner predicate of the unit."""
    owner_proof: bytes


@dataclass(frozen=True)
class MintAuthProof(CborRecord):
    """Authorization proof satisfying the token minting predicate of the type."""
    token_minting_proof: bytes


@dataclass(frozen=True)
class DataUpdateAuthProof(CborRecord):
    """Authorization proof satisfying the data update predicate of the token."""
    token_data_update_proof: bytes


@dataclass
class Attributes(CborRecord):
    # Name of the field that receives extra proofs, if any
    proof_field: ClassVar[Optional[str]] = None
    # Record the owner proof is wrapped into
    auth_proof_cls: ClassVar[Type[CborRecord]] = OwnerAuthProof


@dataclass
class NopAttributes(Attributes):
    counter: Optional[int] = None


# Money partition

@dataclass
class TransferAttributes(Attributes):
    new_owner_predicate: bytes
    target_value: int
    counter: int


@dataclass
class TargetUnit(CborRecord):
    amount: int
    owner_predicate: bytes


@dataclass
class SplitAttributes(Attributes):
    target_units: List[TargetUnit]
    remaining_value: int
    counter: int


@dataclass
class TransferDCAttributes(Attributes):
    value: int
    target_unit_id: bytes
    target_unit_counter: int
    counter: int


@dataclass
class SwapDCAttributes(Attributes):
    dc_transfers: List[TransactionRecord]
    dc_transfer_proofs: List[TxProof]
    target_value: int


@dataclass
class LockAttributes(Attributes):
    lock_status: int
    counter: int


@dataclass
class UnlockAttributes(Attributes):
    counter: int


# Fee credit

@dataclass
class TransferFeeCreditAttributes(Attributes):
    amount: int
    target_partition_id: int
    target_record_id: bytes
    latest_addition_time: int
    target_unit_counter: Optional[int]
    counter: int


@dataclass
class AddFeeCreditAttributes(Attributes):
    fee_credit_owner_predicate: bytes
    fee_credit_transfer_proof: TxRecordProof


@dataclass
class CloseFeeCreditAttributes(Attributes):
    amount: int
    target_unit_id: bytes
    target_unit_counter: int
    counter: int


@dataclass
class ReclaimFeeCreditAttributes(Attributes):
    close_fee_credit_proof: TxRecordProof
    counter: int


@dataclass
class LockFeeCreditAttributes(Attributes):
    lock_status: int
    counter: int


@dataclass
class UnlockFeeCreditAttributes(Attributes):
    counter: int


@dataclass
class SetFeeCreditAttributes(Attributes):
    owner_predicate: bytes
    amount: int
    counter: Optional[int] = None


@dataclass
class DeleteFeeCreditAttributes(Attributes):
    counter: int


# Tokens partition

@dataclass
class Icon(CborRecord):
    type: str
    data: bytes


@dataclass
class DefineFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "sub_type_creation_predicate_signatures"

    symbol: str
    name: str
    icon: Optional[Icon]
    parent_type_id: Optional[bytes]
    decimal_places: int
    sub_type_creation_predicate: Optional[bytes]
    token_creation_predicate: Optional[bytes]
    invariant_predicate: Optional[bytes]
    sub_type_creation_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class DefineNonFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "sub_type_creation_predicate_signatures"

    symbol: str
    name: str
    icon: Optional[Icon]
    parent_type_id: Optional[bytes]
    sub_type_creation_predicate: Optional[bytes]
    token_creation_predicate: Optional[bytes]
    invariant_predicate: Optional[bytes]
    data_update_predicate: Optional[bytes]
    sub_type_creation_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class MintFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "token_creation_predicate_signatures"
    auth_proof_cls: ClassVar[Type[CborRecord]] = MintAuthProof

    owner_predicate: bytes
    type_id: bytes
    value: int
    nonce: int = 0
    token_creation_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class MintNonFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "token_creation_predicate_signatures"
    auth_proof_cls: ClassVar[Type[CborRecord]] = MintAuthProof

    owner_predicate: bytes
    type_id: bytes
    name: str
    uri: str
    data: Optional[bytes]
    data_update_predicate: Optional[bytes]
    nonce: int = 0
    token_creation_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class TransferFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "invariant_predicate_signatures"

    new_owner_predicate: bytes
    value: int
    nonce: Optional[bytes]
    counter: int
    type_id: bytes
    invariant_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class TransferNonFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "invariant_predicate_signatures"

    new_owner_predicate: bytes
    nonce: Optional[bytes]
    counter: int
    type_id: bytes
    invariant_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class SplitFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "invariant_predicate_signatures"

    new_owner_predicate: bytes
    target_value: int
    nonce: Optional[bytes]
    counter: int
    type_id: bytes
    remaining_value: int
    invariant_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class BurnFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "invariant_predicate_signatures"

    type_id: bytes
    value: int
    target_token_id: bytes
    target_token_counter: int
    counter: int
    invariant_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class JoinFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "invariant_predicate_signatures"

    burn_transactions: List[TransactionRecord]
    burn_transaction_proofs: List[TxProof]
    counter: int
    invariant_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class UpdateNonFungibleTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "data_update_signatures"
    auth_proof_cls: ClassVar[Type[CborRecord]] = DataUpdateAuthProof

    data: Optional[bytes]
    counter: int
    data_update_signatures: Optional[List[bytes]] = None


@dataclass
class LockTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "invariant_predicate_signatures"

    lock_status: int
    counter: int
    invariant_predicate_signatures: Optional[List[bytes]] = None


@dataclass
class UnlockTokenAttributes(Attributes):
    proof_field: ClassVar[Optional[str]] = "invariant_predicate_signatures"

    counter: int
    invariant_predicate_signatures: Optional[List[bytes]] = None
