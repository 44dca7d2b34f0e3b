"""
Unit identifier helpers.

A unit id is a 32 byte unit part followed by a single type byte that tells
which kind of unit (bill, token, fee credit record, ...) it addresses.
"""
import hashlib
import os
from typing import Optional

from .exceptions import ValidationError

UNIT_PART_LENGTH = 32
TYPE_PART_LENGTH = 1
UNIT_ID_LENGTH = UNIT_PART_LENGTH + TYPE_PART_LENGTH

# Parent type id of root token types
NO_PARENT = bytes(UNIT_ID_LENGTH)


def new_unit_id(unit_part: bytes, unit_type: int) -> bytes:
    """
    Build a unit id from a unit part and a type byte.

    Raises:
        ValidationError: If the unit part has the wrong length
    """
    if len(unit_part) != UNIT_PART_LENGTH:
        raise ValidationError(
            f"unit part must be {UNIT_PART_LENGTH} bytes, got {len(unit_part)}"
        )
    return bytes(unit_part) + bytes([unit_type])


def random_unit_id(unit_type: int) -> bytes:
    """Generate a random unit id of the given type."""
    return new_unit_id(os.urandom(UNIT_PART_LENGTH), unit_type)


def unit_type_of(unit_id: bytes) -> Optional[int]:
    """Return the type byte of a unit id, or None for ids of the wrong length."""
    if len(unit_id) != UNIT_ID_LENGTH:
        return None
    return unit_id[-1]


def has_type(unit_id: bytes, unit_type: int) -> bool:
    return unit_type_of(unit_id) == unit_type


def type_must_be(unit_id: bytes, unit_type: int) -> None:
    """
    Check that the unit id is well formed and of the expected type.

    Raises:
        ValidationError: If the length or the type byte does not match
    """
    if len(unit_id) != UNIT_ID_LENGTH:
        raise ValidationError(
            f"invalid unit id: expected hex length is {UNIT_ID_LENGTH * 2} characters "
            f"({UNIT_ID_LENGTH} bytes), got {len(unit_id)} bytes"
        )
    if unit_id[-1] != unit_type:
        raise ValidationError(
            f"invalid unit id: expected unit type is 0x{unit_type:02X}, got 0x{unit_id[-1]:02X}"
        )


def is_no_parent(type_id: Optional[bytes]) -> bool:
    """True for an empty or all-zero parent type id."""
    return not type_id or not any(type_id)


def new_fee_credit_record_id(owner_predicate: bytes, timeout: int, unit_type: int) -> bytes:
    """
    Derive the fee credit record id owned by ``owner_predicate``.

    The unit part is ``sha256(owner_predicate || timeout)`` with the timeout
    as a big-endian uint64.
    """
    h = hashlib.sha256()
    h.update(owner_predicate)
    h.update(timeout.to_bytes(8, "big"))
    return new_unit_id(h.digest(), unit_type)
