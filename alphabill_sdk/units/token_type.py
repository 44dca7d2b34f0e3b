"""
Fungible and non-fungible token types.
"""
from dataclasses import dataclass
from typing import ClassVar, Optional

from ..exceptions import ValidationError
from ..models import FungibleTokenTypeData, IconData, NonFungibleTokenTypeData, Unit
from ..tx.attributes import (
    DefineFungibleTokenAttributes, DefineNonFungibleTokenAttributes, Icon,
    TokensTx, TokensUnitType
)
from ..tx.order import TransactionOrder
from ..unit_id import UNIT_ID_LENGTH, random_unit_id
from .base import UnitModel


def _icon_from_data(icon: Optional[IconData]) -> Optional[Icon]:
    if icon is None:
        return None
    return Icon(type=icon.type, data=icon.data or b"")


@dataclass
class TokenType(UnitModel):
    """
    Token type definition.

    A random id of the right unit type is generated when ``id`` is None.
    Sub-type creation proofs for the parent types are passed to ``define``
    with the ``extra_proofs`` option.
    """
    unit_type: ClassVar[int]

    network_id: int
    partition_id: int
    symbol: str
    name: str = ""
    id: Optional[bytes] = None
    parent_type_id: Optional[bytes] = None
    icon: Optional[Icon] = None
    sub_type_creation_predicate: Optional[bytes] = None
    token_creation_predicate: Optional[bytes] = None
    invariant_predicate: Optional[bytes] = None

    def __post_init__(self):
        if self.id is None:
            self.id = random_unit_id(self.unit_type)
        if len(self.id) != UNIT_ID_LENGTH:
            raise ValidationError(
                f"invalid token type ID: expected hex length is {UNIT_ID_LENGTH * 2} "
                f"characters ({UNIT_ID_LENGTH} bytes)"
            )
        if self.id[-1] != self.unit_type:
            raise ValidationError(
                f"invalid token type ID: expected unit type is 0x{self.unit_type:02X}"
            )


@dataclass
class FungibleTokenType(TokenType):
    unit_type: ClassVar[int] = TokensUnitType.FUNGIBLE_TOKEN_TYPE

    decimal_places: int = 0

    @classmethod
    def from_unit(cls, unit: Unit[FungibleTokenTypeData]) -> "FungibleTokenType":
        d = unit.data
        return cls(
            network_id=unit.network_id,
            partition_id=unit.partition_id,
            id=unit.unit_id,
            symbol=d.symbol,
            name=d.name,
            parent_type_id=d.parent_type_id,
            icon=_icon_from_data(d.icon),
            sub_type_creation_predicate=d.sub_type_creation_predicate,
            token_creation_predicate=d.token_creation_predicate,
            invariant_predicate=d.invariant_predicate,
            decimal_places=d.decimal_places,
        )

    def define(self, **tx_options) -> TransactionOrder:
        attr = DefineFungibleTokenAttributes(
            symbol=self.symbol,
            name=self.name,
            icon=self.icon,
            parent_type_id=self.parent_type_id,
            decimal_places=self.decimal_places,
            sub_type_creation_predicate=self.sub_type_creation_predicate,
            token_creation_predicate=self.token_creation_predicate,
            invariant_predicate=self.invariant_predicate,
        )
        return self._build(TokensTx.DEFINE_FT, attr, tx_options)


@dataclass
class NonFungibleTokenType(TokenType):
    unit_type: ClassVar[int] = TokensUnitType.NON_FUNGIBLE_TOKEN_TYPE

    data_update_predicate: Optional[bytes] = None

    @classmethod
    def from_unit(cls, unit: Unit[NonFungibleTokenTypeData]) -> "NonFungibleTokenType":
        d = unit.data
        return cls(
            network_id=unit.network_id,
            partition_id=unit.partition_id,
            id=unit.unit_id,
            symbol=d.symbol,
            name=d.name,
            parent_type_id=d.parent_type_id,
            icon=_icon_from_data(d.icon),
            sub_type_creation_predicate=d.sub_type_creation_predicate,
            token_creation_predicate=d.token_creation_predicate,
            invariant_predicate=d.invariant_predicate,
            data_update_predicate=d.data_update_predicate,
        )

    def define(self, **tx_options) -> TransactionOrder:
        attr = DefineNonFungibleTokenAttributes(
            symbol=self.symbol,
            name=self.name,
            icon=self.icon,
            parent_type_id=self.parent_type_id,
            sub_type_creation_predicate=self.sub_type_creation_predicate,
            token_creation_predicate=self.token_creation_predicate,
            invariant_predicate=self.invariant_predicate,
            data_update_predicate=self.data_update_predicate,
        )
        return self._build(TokensTx.DEFINE_NFT, attr, tx_options)
