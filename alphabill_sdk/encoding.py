"""
Canonical CBOR and hex helpers.

Transaction structures travel as CBOR arrays whose items follow the
declaration order of the dataclass fields. ``CborRecord`` provides that
mapping for any dataclass that mixes it in.
"""
import dataclasses
import typing
from enum import IntEnum
from typing import Any, List, Type, TypeVar, Union

import cbor2

from .exceptions import EncodingError

R = TypeVar("R", bound="CborRecord")


def encode_cbor(value: Any) -> bytes:
    """
    Encode a value using canonical CBOR.

    Args:
        value: Plain value or ``CborRecord`` to encode

    Returns:
        Encoded bytes

    Raises:
        EncodingError: If the value cannot be encoded
    """
    try:
        return cbor2.dumps(to_cbor_value(value), canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise EncodingError(f"failed to encode {type(value).__name__}: {e}") from e


def decode_cbor(data: bytes) -> Any:
    """
    Decode CBOR bytes into plain Python values.

    Raises:
        EncodingError: If the data is not valid CBOR
    """
    try:
        return cbor2.loads(data)
    except (cbor2.CBORDecodeError, TypeError, ValueError) as e:
        raise EncodingError(f"failed to decode CBOR: {e}") from e


def to_hex(data: bytes) -> str:
    """Return ``0x``-prefixed lowercase hex."""
    return "0x" + bytes(data).hex()


def from_hex(value: str) -> bytes:
    """
    Parse hex with or without the ``0x`` prefix.

    Raises:
        EncodingError: If the string is not valid hex
    """
    if value.startswith(("0x", "0X")):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise EncodingError(f"invalid hex string: {value!r}") from e


def to_cbor_value(value: Any) -> Any:
    """Convert records, enums and sequences into plain CBOR-encodable values."""
    if isinstance(value, CborRecord):
        return value.to_cbor_value()
    if isinstance(value, IntEnum):
        return int(value)
    if isinstance(value, (list, tuple)):
        return [to_cbor_value(v) for v in value]
    if isinstance(value, bytearray):
        return bytes(value)
    return value


def _from_cbor_value(tp: Any, value: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is Union:
        if value is None:
            return None
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        return _from_cbor_value(args[0], value)
    if origin in (list, List):
        if value is None:
            return None
        (item_tp,) = typing.get_args(tp) or (Any,)
        return [_from_cbor_value(item_tp, v) for v in value]
    if isinstance(tp, type):
        if issubclass(tp, CborRecord):
            return tp.from_cbor_value(value)
        if issubclass(tp, IntEnum):
            return tp(value)
        if tp is bytes and value is not None:
            return bytes(value)
    return value


class CborRecord:
    """Mixin for dataclasses encoded as CBOR arrays in field order."""

    def to_cbor_value(self) -> List[Any]:
        return [to_cbor_value(getattr(self, f.name)) for f in dataclasses.fields(self)]

    @classmethod
    def from_cbor_value(cls: Type[R], value: Any) -> R:
        if not isinstance(value, (list, tuple)):
            raise EncodingError(
                f"{cls.__name__}: expected CBOR array, got {type(value).__name__}"
            )
        fields = dataclasses.fields(cls)
        if len(value) != len(fields):
            raise EncodingError(
                f"{cls.__name__}: expected {len(fields)} items, got {len(value)}"
            )
        hints = typing.get_type_hints(cls)
        try:
            kwargs = {
                f.name: _from_cbor_value(hints[f.name], item)
                for f, item in zip(fields, value)
            }
        except (TypeError, ValueError) as e:
            raise EncodingError(f"{cls.__name__}: {e}") from e
        return cls(**kwargs)

    def encode(self) -> bytes:
        return encode_cbor(self)

    @classmethod
    def decode(cls: Type[R], data: bytes) -> R:
        return cls.from_cbor_value(decode_cbor(data))
