"""
Tokens partition client.
"""
import threading
from typing import Callable, Dict, List, Optional, Type, TypeVar, Union

from ..exceptions import NotFoundError, RpcError, ValidationError
from ..models import (
    FungibleTokenData, FungibleTokenTypeData, NonFungibleTokenData,
    NonFungibleTokenTypeData, Unit
)
from ..tx.attributes import PartitionType, TokensUnitType
from ..unit_id import has_type, is_no_parent, type_must_be
from ..units.token import FungibleToken, NonFungibleToken
from ..units.token_type import FungibleTokenType, NonFungibleTokenType
from .partition import PartitionClient

D = TypeVar("D")
T = TypeVar("T", FungibleTokenType, NonFungibleTokenType)


def _wrap(message: str, e: RpcError) -> RpcError:
    return RpcError(f"{message}: {e}", method=e.method, code=e.code, data=e.data)


class TokensPartitionClient(PartitionClient):
    """Client for the tokens partition: token types and tokens."""

    partition_type = PartitionType.TOKENS
    partition_name = "tokens"
    fee_credit_record_unit_type = TokensUnitType.FEE_CREDIT_RECORD

    def _checked_id(self, unit_id: bytes, unit_type: int, what: str) -> None:
        try:
            type_must_be(unit_id, unit_type)
        except ValidationError as e:
            raise ValidationError(f"invalid {what} id: {e}") from e

    def _get_type_unit(self, type_id: bytes, data_model: Type[D], what: str) -> Unit[D]:
        unit = self.state.get_unit(type_id, data_model)
        if unit is None:
            raise NotFoundError(f"{what} type {type_id.hex()} not found")
        return unit

    def get_fungible_token(self, token_id: bytes) -> Optional[FungibleToken]:
        """
        Fetch a fungible token together with its type.

        Returns:
            The token, or None if it does not exist

        Raises:
            ValidationError: If ``token_id`` is not a fungible token id
            NotFoundError: If the token type of an existing token is missing
        """
        self._checked_id(token_id, TokensUnitType.FUNGIBLE_TOKEN, "fungible token")
        unit = self.state.get_unit(token_id, FungibleTokenData)
        if unit is None:
            return None
        token_type = self._get_type_unit(unit.data.type_id, FungibleTokenTypeData, "fungible token")
        return FungibleToken.from_unit(unit, token_type)

    def get_non_fungible_token(self, token_id: bytes) -> Optional[NonFungibleToken]:
        """
        Fetch a non-fungible token together with its type.

        Returns:
            The token, or None if it does not exist

        Raises:
            ValidationError: If ``token_id`` is not a non-fungible token id
            NotFoundError: If the token type of an existing token is missing
        """
        self._checked_id(token_id, TokensUnitType.NON_FUNGIBLE_TOKEN, "non-fungible token")
        unit = self.state.get_unit(token_id, NonFungibleTokenData)
        if unit is None:
            return None
        token_type = self._get_type_unit(unit.data.type_id, NonFungibleTokenTypeData, "non-fungible token")
        return NonFungibleToken.from_unit(unit, token_type)

    def _owner_token_units(
        self,
        owner_id: bytes,
        unit_type: int,
        data_model: Type[D],
        type_model: Type,
        what: str,
        cancel: Optional[threading.Event]
    ):
        try:
            unit_ids = self.state.get_units_by_owner_id(owner_id)
        except RpcError as e:
            raise _wrap("failed to fetch owner unit ids", e) from e
        token_ids = [u for u in unit_ids if has_type(u, unit_type)]
        try:
            units = self.batch_get_units(token_ids, data_model, cancel=cancel)
        except RpcError as e:
            raise _wrap(f"failed to fetch {what}s", e) from e

        # one lookup per distinct type
        type_ids = list(dict.fromkeys(u.data.type_id for u in units))
        try:
            type_units = self.batch_get_units(type_ids, type_model, cancel=cancel)
        except RpcError as e:
            raise _wrap(f"failed to fetch {what} types", e) from e
        types: Dict[bytes, Unit] = {t.unit_id: t for t in type_units}

        result = []
        for unit in units:
            token_type = types.get(unit.data.type_id)
            if token_type is None:
                raise NotFoundError(
                    f"{what} {unit.unit_id.hex()} has unknown token type {unit.data.type_id.hex()}"
                )
            result.append((unit, token_type))
        return result

    def get_fungible_tokens(
        self,
        owner_id: bytes,
        cancel: Optional[threading.Event] = None
    ) -> List[FungibleToken]:
        """Fetch all fungible tokens of an owner with batched lookups."""
        pairs = self._owner_token_units(
            owner_id, TokensUnitType.FUNGIBLE_TOKEN, FungibleTokenData,
            FungibleTokenTypeData, "fungible token", cancel
        )
        return [FungibleToken.from_unit(u, t) for u, t in pairs]

    def get_non_fungible_tokens(
        self,
        owner_id: bytes,
        cancel: Optional[threading.Event] = None
    ) -> List[NonFungibleToken]:
        """Fetch all non-fungible tokens of an owner with batched lookups."""
        pairs = self._owner_token_units(
            owner_id, TokensUnitType.NON_FUNGIBLE_TOKEN, NonFungibleTokenData,
            NonFungibleTokenTypeData, "non-fungible token", cancel
        )
        return [NonFungibleToken.from_unit(u, t) for u, t in pairs]

    def get_fungible_token_type(self, type_id: bytes) -> Optional[FungibleTokenType]:
        self._checked_id(type_id, TokensUnitType.FUNGIBLE_TOKEN_TYPE, "fungible token type")
        unit = self.state.get_unit(type_id, FungibleTokenTypeData)
        return FungibleTokenType.from_unit(unit) if unit else None

    def get_non_fungible_token_type(self, type_id: bytes) -> Optional[NonFungibleTokenType]:
        self._checked_id(type_id, TokensUnitType.NON_FUNGIBLE_TOKEN_TYPE, "non-fungible token type")
        unit = self.state.get_unit(type_id, NonFungibleTokenTypeData)
        return NonFungibleTokenType.from_unit(unit) if unit else None

    def get_fungible_token_type_hierarchy(self, type_id: bytes) -> List[FungibleTokenType]:
        """
        Walk from ``type_id`` up to its root type.

        Returns:
            The types, the root type last

        Raises:
            NotFoundError: If a type in the chain does not exist
            ValidationError: If the chain of parent types loops
        """
        return self._type_hierarchy(type_id, self.get_fungible_token_type, "fungible")

    def get_non_fungible_token_type_hierarchy(self, type_id: bytes) -> List[NonFungibleTokenType]:
        """Like ``get_fungible_token_type_hierarchy`` for non-fungible types."""
        return self._type_hierarchy(type_id, self.get_non_fungible_token_type, "non-fungible")

    @staticmethod
    def _type_hierarchy(type_id: bytes, get_type: Callable[[bytes], Optional[T]], kind: str) -> List[T]:
        hierarchy = []
        seen = set()
        while not is_no_parent(type_id):
            if type_id in seen:
                raise ValidationError(f"{kind} token type {type_id.hex()} is its own ancestor")
            seen.add(type_id)
            token_type = get_type(type_id)
            if token_type is None:
                raise NotFoundError(f"{kind} token type {type_id.hex()} not found")
            hierarchy.append(token_type)
            type_id = token_type.parent_type_id
        return hierarchy

    def get_type_hierarchy(self, type_id: bytes) -> List[Union[FungibleTokenType, NonFungibleTokenType]]:
        """Type hierarchy of either kind, chosen by the type byte of ``type_id``."""
        if has_type(type_id, TokensUnitType.NON_FUNGIBLE_TOKEN_TYPE):
            return self.get_non_fungible_token_type_hierarchy(type_id)
        return self.get_fungible_token_type_hierarchy(type_id)
