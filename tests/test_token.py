"""
Tests for fungible and non-fungible token transactions.
"""
import dataclasses

import pytest

from alphabill_sdk.encoding import encode_cbor
from alphabill_sdk.exceptions import ValidationError
from alphabill_sdk.models import FungibleTokenData, FungibleTokenTypeData, NonFungibleTokenData, Unit
from alphabill_sdk.tx.attributes import (
    BurnFungibleTokenAttributes, DataUpdateAuthProof, JoinFungibleTokenAttributes,
    LockReason, LockTokenAttributes, MintAuthProof, MintFungibleTokenAttributes, MintNonFungibleTokenAttributes,
    SplitFungibleTokenAttributes, TokensTx, TokensUnitType,
    TransferFungibleTokenAttributes, TransferNonFungibleTokenAttributes,
    UnlockTokenAttributes, UpdateNonFungibleTokenAttributes
)
from alphabill_sdk.units import FungibleToken, NonFungibleToken, UnlockCounterPolicy, new_token_id
from alphabill_sdk.units.token import DATA_MAX_SIZE, NAME_MAX_SIZE, URI_MAX_SIZE
from conftest import make_proof, unit_id

FT_TYPE = unit_id(1, TokensUnitType.FUNGIBLE_TOKEN_TYPE)
NFT_TYPE = unit_id(2, TokensUnitType.NON_FUNGIBLE_TOKEN_TYPE)


def _ft(n=10, amount=100, counter=0):
    return FungibleToken(
        network_id=3, partition_id=2, type_id=FT_TYPE, owner_predicate=b"\x01",
        id=unit_id(n, TokensUnitType.FUNGIBLE_TOKEN), amount=amount, counter=counter,
    )


def _nft(**kwargs):
    fields = dict(
        network_id=3, partition_id=2, type_id=NFT_TYPE, owner_predicate=b"\x01",
        name="cat", uri="https://example.com/cat.png", data=b"\x01\x02",
    )
    fields.update(kwargs)
    return NonFungibleToken(**fields)


class TestMint:
    """Token id derivation during minting"""

    def test_fungible_mint_assigns_id(self):
        token = FungibleToken(network_id=3, partition_id=2, type_id=FT_TYPE, owner_predicate=b"\x01", amount=50)
        order = token.mint(timeout=100)
        assert order.type == TokensTx.MINT_FT
        assert token.id is not None
        assert order.unit_id == token.id
        assert token.id[-1] == TokensUnitType.FUNGIBLE_TOKEN
        attr = order.unmarshal_attributes(MintFungibleTokenAttributes)
        assert attr.value == 50
        assert attr.type_id == FT_TYPE
        assert token.id == new_token_id(attr, order.payload.client_metadata, TokensUnitType.FUNGIBLE_TOKEN)

    def test_id_depends_on_client_metadata(self):
        a = FungibleToken(network_id=3, partition_id=2, type_id=FT_TYPE, owner_predicate=b"\x01", amount=50)
        b = FungibleToken(network_id=3, partition_id=2, type_id=FT_TYPE, owner_predicate=b"\x01", amount=50)
        a.mint(timeout=100)
        b.mint(timeout=101)
        assert a.id != b.id

    def test_id_is_computed_before_proofs(self):
        """Token creation signatures do not change the id"""
        token = FungibleToken(network_id=3, partition_id=2, type_id=FT_TYPE, owner_predicate=b"\x01", amount=5)
        order = token.mint(timeout=7, extra_proofs=[lambda b: b"sig"], owner_proof=lambda b: b"own")
        attr = order.unmarshal_attributes(MintFungibleTokenAttributes)
        assert attr.token_creation_predicate_signatures == [b"sig"]
        unsigned = dataclasses.replace(attr, token_creation_predicate_signatures=None)
        assert token.id == new_token_id(unsigned, order.payload.client_metadata, TokensUnitType.FUNGIBLE_TOKEN)
        assert order.unmarshal_auth_proof(MintAuthProof) == MintAuthProof(b"own")
        assert order.auth_proof == encode_cbor([b"own"])

    def test_fungible_mint_requires_amount(self):
        token = FungibleToken(network_id=3, partition_id=2, type_id=FT_TYPE, owner_predicate=b"\x01")
        with pytest.raises(ValidationError):
            token.mint()

    def test_non_fungible_mint(self):
        token = _nft(data_update_predicate=b"\x05")
        order = token.mint(timeout=3)
        assert order.type == TokensTx.MINT_NFT
        assert order.unit_id == token.id
        assert token.id[-1] == TokensUnitType.NON_FUNGIBLE_TOKEN
        attr = order.unmarshal_attributes(MintNonFungibleTokenAttributes)
        assert (attr.name, attr.uri, attr.data, attr.data_update_predicate) == (
            "cat", "https://example.com/cat.png", b"\x01\x02", b"\x05"
        )


class TestNonFungibleValidation:
    """Field limits of non-fungible tokens"""

    def test_name_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            _nft(name="x" * (NAME_MAX_SIZE + 1))
        assert "name exceeds" in str(exc_info.value)

    def test_uri_too_long(self):
        with pytest.raises(ValidationError):
            _nft(uri="https://example.com/" + "a" * URI_MAX_SIZE)

    def test_invalid_uri(self):
        with pytest.raises(ValidationError) as exc_info:
            _nft(uri="not a uri")
        assert "is invalid" in str(exc_info.value)

    def test_data_too_large(self):
        with pytest.raises(ValidationError):
            _nft(data=b"\x00" * (DATA_MAX_SIZE + 1))

    def test_limits_are_inclusive(self):
        token = _nft(name="x" * NAME_MAX_SIZE, data=b"\x00" * DATA_MAX_SIZE, uri="")
        assert token.mint().type == TokensTx.MINT_NFT

    def test_limits_rechecked_on_mint(self):
        token = _nft()
        token.name = "x" * (NAME_MAX_SIZE + 1)
        with pytest.raises(ValidationError):
            token.mint()

    def test_update_data_too_large(self):
        with pytest.raises(ValidationError):
            _nft(id=unit_id(3, TokensUnitType.NON_FUNGIBLE_TOKEN)).update(b"\x00" * (DATA_MAX_SIZE + 1))

    def test_update_without_data(self):
        with pytest.raises(ValidationError) as exc_info:
            _nft(id=unit_id(3, TokensUnitType.NON_FUNGIBLE_TOKEN)).update(None)
        assert "data" in str(exc_info.value)

    def test_update_with_empty_data(self):
        order = _nft(id=unit_id(3, TokensUnitType.NON_FUNGIBLE_TOKEN)).update(b"")
        assert order.unmarshal_attributes(UpdateNonFungibleTokenAttributes).data == b""


class TestFungibleTransactions:

    def test_transfer(self):
        order = _ft(amount=40, counter=2).transfer(b"\x09")
        assert order.type == TokensTx.TRANSFER_FT
        attr = order.unmarshal_attributes(TransferFungibleTokenAttributes)
        assert (attr.new_owner_predicate, attr.value, attr.counter, attr.type_id) == (b"\x09", 40, 2, FT_TYPE)

    def test_split(self):
        order = _ft(amount=100, counter=1).split(30, b"\x09")
        assert order.type == TokensTx.SPLIT_FT
        attr = order.unmarshal_attributes(SplitFungibleTokenAttributes)
        assert attr.target_value == 30
        assert attr.remaining_value == 70
        assert attr.target_value + attr.remaining_value == 100

    @pytest.mark.parametrize("amount", [0, 101])
    def test_split_invalid_amount(self, amount):
        with pytest.raises(ValidationError):
            _ft(amount=100).split(amount, b"\x09")

    def test_burn(self):
        target_id = unit_id(20, TokensUnitType.FUNGIBLE_TOKEN)
        order = _ft(amount=5, counter=3).burn(target_id, 8)
        assert order.type == TokensTx.BURN_FT
        assert order.unmarshal_attributes(BurnFungibleTokenAttributes) == BurnFungibleTokenAttributes(
            type_id=FT_TYPE, value=5, target_token_id=target_id, target_token_counter=8, counter=3
        )

    def test_join(self):
        target = _ft(n=20, counter=4)
        burns = [make_proof(_ft(n=n).burn(target.id, target.counter)) for n in (12, 11)]
        order = target.join(burns)
        assert order.type == TokensTx.JOIN_FT
        attr = order.unmarshal_attributes(JoinFungibleTokenAttributes)
        assert attr.burn_transactions == [p.tx_record for p in burns]
        assert attr.burn_transaction_proofs == [p.tx_proof for p in burns]
        assert attr.counter == 4

    def test_join_without_proofs(self):
        with pytest.raises(ValidationError):
            _ft().join([])

    def test_lock_and_unlock(self):
        token = _ft(counter=6)
        lock = token.lock(LockReason.MANUAL)
        assert lock.type == TokensTx.LOCK_TOKEN
        assert lock.unmarshal_attributes(LockTokenAttributes).lock_status == 4
        assert token.unlock().unmarshal_attributes(UnlockTokenAttributes).counter == 6
        assert token.unlock(UnlockCounterPolicy.NEXT).unmarshal_attributes(UnlockTokenAttributes).counter == 7


class TestNonFungibleTransactions:

    def test_transfer(self):
        token = _nft(id=unit_id(3, TokensUnitType.NON_FUNGIBLE_TOKEN), counter=1)
        order = token.transfer(b"\x07")
        assert order.type == TokensTx.TRANSFER_NFT
        attr = order.unmarshal_attributes(TransferNonFungibleTokenAttributes)
        assert (attr.new_owner_predicate, attr.counter, attr.type_id) == (b"\x07", 1, NFT_TYPE)

    def test_update_fills_data_update_signatures(self):
        token = _nft(id=unit_id(3, TokensUnitType.NON_FUNGIBLE_TOKEN), counter=2)
        order = token.update(b"new", extra_proofs=[lambda b: b"upd"])
        assert order.type == TokensTx.UPDATE_NFT
        attr = order.unmarshal_attributes(UpdateNonFungibleTokenAttributes)
        assert attr.data == b"new"
        assert attr.counter == 2
        assert attr.data_update_signatures == [b"upd"]

    def test_update_auth_proof_is_data_update_proof(self):
        token = _nft(id=unit_id(3, TokensUnitType.NON_FUNGIBLE_TOKEN))
        order = token.update(b"new", owner_proof=lambda b: b"upd-owner")
        assert order.unmarshal_auth_proof(DataUpdateAuthProof) == DataUpdateAuthProof(b"upd-owner")


def test_from_unit_with_type():
    token_unit = Unit[FungibleTokenData].model_validate({
        "networkId": "0x3", "partitionId": "0x2",
        "unitId": "0x" + unit_id(10, TokensUnitType.FUNGIBLE_TOKEN).hex(),
        "data": {"tokenType": "0x" + FT_TYPE.hex(), "value": "0x64", "ownerPredicate": "0x01", "counter": "0x1"},
    })
    type_unit = Unit[FungibleTokenTypeData].model_validate({
        "unitId": "0x" + FT_TYPE.hex(),
        "data": {"symbol": "AB", "name": "Alpha", "decimalPlaces": 8},
    })
    token = FungibleToken.from_unit(token_unit, type_unit)
    assert token.amount == 100
    assert token.symbol == "AB"
    assert token.type_name == "Alpha"
    assert token.decimal_places == 8
    assert token.type_id == FT_TYPE


def test_non_fungible_from_unit():
    unit = Unit[NonFungibleTokenData].model_validate({
        "unitId": "0x" + unit_id(3, TokensUnitType.NON_FUNGIBLE_TOKEN).hex(),
        "data": {"typeID": "0x" + NFT_TYPE.hex(), "name": "cat", "uri": "https://a.b", "data": "0x01"},
    })
    token = NonFungibleToken.from_unit(unit)
    assert token.name == "cat"
    assert token.data == b"\x01"
    assert token.symbol == ""
