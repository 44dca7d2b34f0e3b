"""
Tests for unit identifier helpers.
"""
import hashlib

import pytest

from alphabill_sdk.exceptions import ValidationError
from alphabill_sdk.tx.attributes import MoneyUnitType, TokensUnitType
from alphabill_sdk.unit_id import (
    NO_PARENT, UNIT_ID_LENGTH, has_type, is_no_parent, new_fee_credit_record_id,
    new_unit_id, random_unit_id, type_must_be, unit_type_of
)


def test_new_unit_id_appends_type_byte():
    uid = new_unit_id(b"\x07" * 32, MoneyUnitType.BILL)
    assert len(uid) == UNIT_ID_LENGTH
    assert uid[:32] == b"\x07" * 32
    assert unit_type_of(uid) == MoneyUnitType.BILL


def test_new_unit_id_wrong_length():
    with pytest.raises(ValidationError):
        new_unit_id(b"\x01" * 31, 1)


def test_random_unit_id_has_type():
    uid = random_unit_id(TokensUnitType.FUNGIBLE_TOKEN_TYPE)
    assert has_type(uid, TokensUnitType.FUNGIBLE_TOKEN_TYPE)
    assert not has_type(uid, TokensUnitType.NON_FUNGIBLE_TOKEN_TYPE)
    assert random_unit_id(1) != random_unit_id(1)


def test_type_must_be():
    uid = new_unit_id(bytes(32), TokensUnitType.FUNGIBLE_TOKEN)
    type_must_be(uid, TokensUnitType.FUNGIBLE_TOKEN)

    with pytest.raises(ValidationError) as exc_info:
        type_must_be(uid, TokensUnitType.NON_FUNGIBLE_TOKEN)
    assert "expected unit type is 0x04, got 0x03" in str(exc_info.value)

    with pytest.raises(ValidationError) as exc_info:
        type_must_be(uid[:-1], TokensUnitType.FUNGIBLE_TOKEN)
    assert "expected hex length is 66 characters" in str(exc_info.value)


def test_unit_type_of_wrong_length():
    assert unit_type_of(b"\x01\x02") is None


def test_is_no_parent():
    assert is_no_parent(NO_PARENT)
    assert is_no_parent(None)
    assert is_no_parent(b"")
    assert not is_no_parent(new_unit_id(b"\x01" * 32, 1))


def test_fee_credit_record_id():
    """Fee credit record ids hash the owner predicate and the big-endian timeout"""
    predicate = b"\x83\x00\x41\x02"
    expected = hashlib.sha256(predicate + (1000).to_bytes(8, "big")).digest() + b"\x02"
    assert new_fee_credit_record_id(predicate, 1000, MoneyUnitType.FEE_CREDIT_RECORD) == expected
    assert new_fee_credit_record_id(predicate, 1001, 2) != expected
