"""
Data models for JSON-RPC responses of Alphabill nodes.
"""
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from .encoding import from_hex
from .exceptions import EncodingError


def _parse_hex_bytes(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return from_hex(value)
        except EncodingError as e:
            raise ValueError(str(e)) from e
    if isinstance(value, bytearray):
        return bytes(value)
    return value


def parse_uint(value: Any) -> Any:
    if isinstance(value, str):
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    return value


HexBytes = Annotated[bytes, BeforeValidator(_parse_hex_bytes)]
HexUint64 = Annotated[int, BeforeValidator(parse_uint)]

T = TypeVar("T")


class RpcModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PeerInfo(RpcModel):
    """Libp2p identity of a node"""
    identifier: str = ""
    addresses: List[str] = Field(default_factory=list)


class NodeInfo(RpcModel):
    """Response of admin_getNodeInfo"""
    network_id: HexUint64 = Field(..., alias="networkId")
    partition_id: HexUint64 = Field(..., alias="partitionId")
    partition_type_id: HexUint64 = Field(..., alias="partitionTypeId")
    permissioned_mode: bool = Field(False, alias="permissionedMode")
    feeless_mode: bool = Field(False, alias="feelessMode")
    self_peer: Optional[PeerInfo] = Field(None, alias="self")
    bootstrap_nodes: List[PeerInfo] = Field(default_factory=list, alias="bootstrapNodes")
    root_validators: List[PeerInfo] = Field(default_factory=list, alias="rootValidators")
    partition_validators: List[PeerInfo] = Field(default_factory=list, alias="partitionValidators")
    open_connections: List[PeerInfo] = Field(default_factory=list, alias="openConnections")


class RoundInfo(RpcModel):
    """Latest round seen by the node"""
    round_number: HexUint64 = Field(..., alias="roundNumber")
    epoch: HexUint64 = Field(0, validation_alias=AliasChoices("epoch", "epochNumber"))


class Unit(RpcModel, Generic[T]):
    """Response of state_getUnit; ``data`` depends on the unit type"""
    network_id: HexUint64 = Field(0, alias="networkId")
    partition_id: HexUint64 = Field(0, alias="partitionId")
    unit_id: HexBytes = Field(..., alias="unitId")
    data: T
    state_proof: Optional[Any] = Field(None, alias="stateProof")
    state_lock_tx: Optional[HexBytes] = Field(None, alias="stateLockTx")


class BillData(RpcModel):
    value: HexUint64 = 0
    owner_predicate: Optional[HexBytes] = Field(None, alias="ownerPredicate")
    locked: HexUint64 = 0
    counter: HexUint64 = 0


class FeeCreditRecordData(RpcModel):
    balance: HexUint64 = 0
    owner_predicate: Optional[HexBytes] = Field(None, alias="ownerPredicate")
    locked: HexUint64 = 0
    counter: HexUint64 = 0
    min_lifetime: HexUint64 = Field(0, validation_alias=AliasChoices("minLifetime", "timeout"))


class FungibleTokenData(RpcModel):
    type_id: HexBytes = Field(..., validation_alias=AliasChoices("tokenType", "typeID", "typeId"))
    value: HexUint64 = 0
    owner_predicate: Optional[HexBytes] = Field(None, alias="ownerPredicate")
    locked: HexUint64 = 0
    counter: HexUint64 = 0


class NonFungibleTokenData(RpcModel):
    type_id: HexBytes = Field(..., validation_alias=AliasChoices("typeID", "typeId", "tokenType"))
    name: str = ""
    uri: str = ""
    data: Optional[HexBytes] = None
    owner_predicate: Optional[HexBytes] = Field(None, alias="ownerPredicate")
    data_update_predicate: Optional[HexBytes] = Field(None, alias="dataUpdatePredicate")
    locked: HexUint64 = 0
    counter: HexUint64 = 0


class IconData(RpcModel):
    type: str = ""
    data: Optional[HexBytes] = None


class FungibleTokenTypeData(RpcModel):
    symbol: str = ""
    name: str = ""
    icon: Optional[IconData] = None
    parent_type_id: Optional[HexBytes] = Field(None, validation_alias=AliasChoices("parentTypeId", "parentTypeID"))
    decimal_places: int = Field(0, alias="decimalPlaces")
    sub_type_creation_predicate: Optional[HexBytes] = Field(None, alias="subTypeCreationPredicate")
    token_creation_predicate: Optional[HexBytes] = Field(None, alias="tokenCreationPredicate")
    invariant_predicate: Optional[HexBytes] = Field(None, alias="invariantPredicate")


class NonFungibleTokenTypeData(RpcModel):
    symbol: str = ""
    name: str = ""
    icon: Optional[IconData] = None
    parent_type_id: Optional[HexBytes] = Field(None, validation_alias=AliasChoices("parentTypeId", "parentTypeID"))
    sub_type_creation_predicate: Optional[HexBytes] = Field(None, alias="subTypeCreationPredicate")
    token_creation_predicate: Optional[HexBytes] = Field(None, alias="tokenCreationPredicate")
    invariant_predicate: Optional[HexBytes] = Field(None, alias="invariantPredicate")
    data_update_predicate: Optional[HexBytes] = Field(None, alias="dataUpdatePredicate")


class EvmAccount(RpcModel):
    balance: HexUint64 = 0


class AlphaBillLink(RpcModel):
    """Link between an EVM account and its fee credit"""
    counter: HexUint64 = 0
    min_lifetime: HexUint64 = Field(0, validation_alias=AliasChoices("minLifetime", "timeout"))
    owner_predicate: Optional[HexBytes] = Field(None, alias="ownerPredicate")


class EvmStateObject(RpcModel):
    address: Optional[str] = None
    account: Optional[EvmAccount] = Field(None, validation_alias=AliasChoices("account", "Account"))
    alpha_bill: Optional[AlphaBillLink] = Field(None, validation_alias=AliasChoices("alphaBill", "AlphaBill"))


class TransactionRecordAndProof(RpcModel):
    """Response of state_getTransactionProof"""
    tx_record_proof: HexBytes = Field(..., alias="txRecordProof")
