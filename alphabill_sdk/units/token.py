"""
Fungible and non-fungible tokens of the tokens partition.
"""
import dataclasses
import hashlib
import urllib.parse
from dataclasses import dataclass
from typing import List, Optional

from ..exceptions import ValidationError
from ..models import FungibleTokenData, FungibleTokenTypeData, NonFungibleTokenData, NonFungibleTokenTypeData, Unit
from ..tx.attributes import (
    Attributes, BurnFungibleTokenAttributes, JoinFungibleTokenAttributes,
    LockTokenAttributes, MintFungibleTokenAttributes, MintNonFungibleTokenAttributes,
    SplitFungibleTokenAttributes, TokensTx, TokensUnitType,
    TransferFungibleTokenAttributes, TransferNonFungibleTokenAttributes,
    UnlockTokenAttributes, UpdateNonFungibleTokenAttributes
)
from ..tx.builder import generate_and_set_proofs, new_payload, tx_options_with_defaults
from ..tx.order import ClientMetadata, TransactionOrder, TxRecordProof, new_transaction_order
from ..unit_id import new_unit_id
from .base import UnitModel, UnlockCounterPolicy, unlock_counter

NAME_MAX_SIZE = 256
URI_MAX_SIZE = 4 * 1024
DATA_MAX_SIZE = 64 * 1024


def new_token_id(attributes: Attributes, client_metadata: ClientMetadata, unit_type: int) -> bytes:
    """
    Derive the id of a token from its mint attributes and client metadata.
    """
    h = hashlib.sha256()
    h.update(attributes.encode())
    h.update(client_metadata.encode())
    return new_unit_id(h.digest(), unit_type)


def _is_valid_uri(uri: str) -> bool:
    parsed = urllib.parse.urlparse(uri)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def validate_nft_fields(name: str, uri: str, data: Optional[bytes]) -> None:
    """
    Check non-fungible token field limits.

    Raises:
        ValidationError: If a field is too large or the URI is malformed
    """
    if len(name.encode("utf-8")) > NAME_MAX_SIZE:
        raise ValidationError(f"name exceeds the maximum allowed size of {NAME_MAX_SIZE} bytes")
    if len(uri.encode("utf-8")) > URI_MAX_SIZE:
        raise ValidationError(f"URI exceeds the maximum allowed size of {URI_MAX_SIZE} bytes")
    if uri and not _is_valid_uri(uri):
        raise ValidationError(f"URI '{uri}' is invalid")
    if data is not None and len(data) > DATA_MAX_SIZE:
        raise ValidationError(f"data exceeds the maximum allowed size of {DATA_MAX_SIZE} bytes")


@dataclass
class Token(UnitModel):
    """Fields and transactions common to both token kinds."""
    network_id: int
    partition_id: int
    type_id: bytes
    owner_predicate: bytes
    id: Optional[bytes] = None
    symbol: str = ""
    type_name: str = ""
    nonce: Optional[bytes] = None
    counter: int = 0
    lock_status: int = 0

    def increase_counter(self) -> None:
        self.counter += 1

    def _mint(self, tx_type: int, attr: Attributes, unit_type: int, tx_options: dict) -> TransactionOrder:
        # id is derived from the attributes before any proof is added
        opts = tx_options_with_defaults(**tx_options)
        payload = new_payload(self.network_id, self.partition_id, None, tx_type, attr, opts)
        self.id = new_token_id(attr, payload.client_metadata, unit_type)
        payload = dataclasses.replace(payload, unit_id=self.id)
        return generate_and_set_proofs(new_transaction_order(payload), attr, opts)

    def lock(self, lock_status: int, **tx_options) -> TransactionOrder:
        attr = LockTokenAttributes(lock_status=lock_status, counter=self.counter)
        return self._build(TokensTx.LOCK_TOKEN, attr, tx_options)

    def unlock(
        self,
        counter_policy: UnlockCounterPolicy = UnlockCounterPolicy.CURRENT,
        **tx_options
    ) -> TransactionOrder:
        attr = UnlockTokenAttributes(counter=unlock_counter(self.counter, counter_policy))
        return self._build(TokensTx.UNLOCK_TOKEN, attr, tx_options)


@dataclass
class FungibleToken(Token):
    amount: int = 0
    decimal_places: int = 0
    burned: bool = False

    @classmethod
    def from_unit(
        cls,
        unit: Unit[FungibleTokenData],
        token_type: Optional[Unit[FungibleTokenTypeData]] = None
    ) -> "FungibleToken":
        return cls(
            network_id=unit.network_id,
            partition_id=unit.partition_id,
            id=unit.unit_id,
            type_id=unit.data.type_id,
            owner_predicate=unit.data.owner_predicate or b"",
            symbol=token_type.data.symbol if token_type else "",
            type_name=token_type.data.name if token_type else "",
            counter=unit.data.counter,
            lock_status=unit.data.locked,
            amount=unit.data.value,
            decimal_places=token_type.data.decimal_places if token_type else 0,
        )

    def mint(self, **tx_options) -> TransactionOrder:
        """Create the token; assigns ``self.id``."""
        if self.amount <= 0:
            raise ValidationError(f"token amount must be positive, got {self.amount}")
        attr = MintFungibleTokenAttributes(
            owner_predicate=self.owner_predicate,
            type_id=self.type_id,
            value=self.amount,
        )
        return self._mint(TokensTx.MINT_FT, attr, TokensUnitType.FUNGIBLE_TOKEN, tx_options)

    def transfer(self, owner_predicate: bytes, **tx_options) -> TransactionOrder:
        attr = TransferFungibleTokenAttributes(
            new_owner_predicate=owner_predicate,
            value=self.amount,
            nonce=self.nonce,
            counter=self.counter,
            type_id=self.type_id,
        )
        return self._build(TokensTx.TRANSFER_FT, attr, tx_options)

    def split(self, amount: int, owner_predicate: bytes, **tx_options) -> TransactionOrder:
        """
        Split ``amount`` off into a new token owned by ``owner_predicate``.

        Raises:
            ValidationError: If the amount is not positive or exceeds the token value
        """
        if amount <= 0:
            raise ValidationError(f"split amount must be positive, got {amount}")
        if amount > self.amount:
            raise ValidationError(f"split amount {amount} exceeds token value {self.amount}")
        attr = SplitFungibleTokenAttributes(
            new_owner_predicate=owner_predicate,
            target_value=amount,
            nonce=None,
            counter=self.counter,
            type_id=self.type_id,
            remaining_value=self.amount - amount,
        )
        return self._build(TokensTx.SPLIT_FT, attr, tx_options)

    def burn(self, target_token_id: bytes, target_token_counter: int, **tx_options) -> TransactionOrder:
        attr = BurnFungibleTokenAttributes(
            type_id=self.type_id,
            value=self.amount,
            target_token_id=target_token_id,
            target_token_counter=target_token_counter,
            counter=self.counter,
        )
        return self._build(TokensTx.BURN_FT, attr, tx_options)

    def join(self, burn_proofs: List[TxRecordProof], **tx_options) -> TransactionOrder:
        """
        Join burned tokens into this token.

        Raises:
            ValidationError: If no burn proofs are given
        """
        if not burn_proofs:
            raise ValidationError("cannot create join transaction as no burn proofs exist")
        attr = JoinFungibleTokenAttributes(
            burn_transactions=[p.tx_record for p in burn_proofs],
            burn_transaction_proofs=[p.tx_proof for p in burn_proofs],
            counter=self.counter,
        )
        return self._build(TokensTx.JOIN_FT, attr, tx_options)


@dataclass
class NonFungibleToken(Token):
    name: str = ""
    uri: str = ""
    data: Optional[bytes] = None
    data_update_predicate: Optional[bytes] = None

    def __post_init__(self):
        validate_nft_fields(self.name, self.uri, self.data)

    @classmethod
    def from_unit(
        cls,
        unit: Unit[NonFungibleTokenData],
        token_type: Optional[Unit[NonFungibleTokenTypeData]] = None
    ) -> "NonFungibleToken":
        return cls(
            network_id=unit.network_id,
            partition_id=unit.partition_id,
            id=unit.unit_id,
            type_id=unit.data.type_id,
            owner_predicate=unit.data.owner_predicate or b"",
            symbol=token_type.data.symbol if token_type else "",
            type_name=token_type.data.name if token_type else "",
            counter=unit.data.counter,
            lock_status=unit.data.locked,
            name=unit.data.name,
            uri=unit.data.uri,
            data=unit.data.data,
            data_update_predicate=unit.data.data_update_predicate,
        )

    def mint(self, **tx_options) -> TransactionOrder:
        """Create the token; assigns ``self.id``."""
        validate_nft_fields(self.name, self.uri, self.data)
        attr = MintNonFungibleTokenAttributes(
            owner_predicate=self.owner_predicate,
            type_id=self.type_id,
            name=self.name,
            uri=self.uri,
            data=self.data,
            data_update_predicate=self.data_update_predicate,
        )
        return self._mint(TokensTx.MINT_NFT, attr, TokensUnitType.NON_FUNGIBLE_TOKEN, tx_options)

    def transfer(self, owner_predicate: bytes, **tx_options) -> TransactionOrder:
        attr = TransferNonFungibleTokenAttributes(
            new_owner_predicate=owner_predicate,
            nonce=self.nonce,
            counter=self.counter,
            type_id=self.type_id,
        )
        return self._build(TokensTx.TRANSFER_NFT, attr, tx_options)

    def update(self, data: bytes, **tx_options) -> TransactionOrder:
        """
        Replace the data of the token.

        Raises:
            ValidationError: If ``data`` is missing or too large
        """
        if data is None:
            raise ValidationError("token data is required for an update, use b\"\" to clear it")
        if len(data) > DATA_MAX_SIZE:
            raise ValidationError(f"data exceeds the maximum allowed size of {DATA_MAX_SIZE} bytes")
        attr = UpdateNonFungibleTokenAttributes(data=data, counter=self.counter)
        return self._build(TokensTx.UPDATE_NFT, attr, tx_options)
