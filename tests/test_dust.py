"""
Tests for dust collection.
"""
import pytest

from alphabill_sdk.clients import MoneyPartitionClient
from alphabill_sdk.dust import DustCollector
from alphabill_sdk.exceptions import ValidationError
from alphabill_sdk.predicates import public_key_hash
from alphabill_sdk.tx.attributes import (
    LockAttributes, LockReason, MoneyTx, MoneyUnitType, SwapDCAttributes, TransferDCAttributes
)
from conftest import TEST_RPC_URL, unit_id

FCR_ID = unit_id(99, MoneyUnitType.FEE_CREDIT_RECORD)


@pytest.fixture
def owner_id(signer):
    return public_key_hash(signer.public_key)


@pytest.fixture
def money(fake_node):
    return MoneyPartitionClient(TEST_RPC_URL)


def _add_bills(node, owner_id, values):
    for n, value in enumerate(values, start=1):
        node.add_bill(unit_id(n), value, counter=n, owner_id=owner_id)


def test_collects_into_largest_bill(money, fake_node, signer, owner_id):
    fake_node.add_fee_credit_record(FCR_ID, 1000, owner_id=owner_id)
    _add_bills(fake_node, owner_id, [30, 1000, 10, 40, 20])

    result = DustCollector(money, signer).collect_dust()

    lock = fake_node.sent_orders(MoneyTx.LOCK)[0]
    assert lock.unit_id == unit_id(2)
    assert lock.unmarshal_attributes(LockAttributes) == LockAttributes(
        lock_status=LockReason.COLLECT_DUST, counter=2
    )

    transfers = fake_node.sent_orders(MoneyTx.TRANSFER_DC)
    assert [t.unit_id for t in transfers] == [unit_id(3), unit_id(5), unit_id(1), unit_id(4)]
    attr = transfers[0].unmarshal_attributes(TransferDCAttributes)
    assert attr == TransferDCAttributes(value=10, target_unit_id=unit_id(2), target_unit_counter=3, counter=3)

    swap = fake_node.sent_orders(MoneyTx.SWAP_DC)[0]
    assert swap.unit_id == unit_id(2)
    swap_attr = swap.unmarshal_attributes(SwapDCAttributes)
    assert swap_attr.target_value == 100
    assert len(swap_attr.dc_transfers) == 4
    assert len(swap_attr.dc_transfer_proofs) == 4
    assert all(t.payload.client_metadata.fee_credit_record_id == FCR_ID for t in fake_node.sent)

    assert result.swap_proof.transaction_order == swap
    assert result.fee_sum() == 6


def test_max_bills_per_dc(money, fake_node, signer, owner_id):
    fake_node.add_fee_credit_record(FCR_ID, 1000, owner_id=owner_id)
    _add_bills(fake_node, owner_id, [30, 1000, 10, 40, 20])
    DustCollector(money, signer, max_bills_per_dc=2).collect_dust()
    transfers = fake_node.sent_orders(MoneyTx.TRANSFER_DC)
    assert [t.unit_id for t in transfers] == [unit_id(3), unit_id(5)]


def test_locked_bills_are_skipped(money, fake_node, signer, owner_id):
    fake_node.add_fee_credit_record(FCR_ID, 1000, owner_id=owner_id)
    fake_node.add_bill(unit_id(1), 5000, locked=1, owner_id=owner_id)
    fake_node.add_bill(unit_id(2), 50, owner_id=owner_id)
    fake_node.add_bill(unit_id(3), 10, owner_id=owner_id)
    DustCollector(money, signer).collect_dust()
    assert fake_node.sent_orders(MoneyTx.LOCK)[0].unit_id == unit_id(2)
    assert [t.unit_id for t in fake_node.sent_orders(MoneyTx.TRANSFER_DC)] == [unit_id(3)]


def test_single_bill_is_noop(money, fake_node, signer, owner_id):
    fake_node.add_fee_credit_record(FCR_ID, 1000, owner_id=owner_id)
    _add_bills(fake_node, owner_id, [100])
    assert DustCollector(money, signer).collect_dust() is None
    assert fake_node.sent == []


def test_fee_credit_record_required(money, fake_node, signer, owner_id):
    _add_bills(fake_node, owner_id, [10, 20])
    with pytest.raises(ValidationError, match="fee credit record not found"):
        DustCollector(money, signer).collect_dust()


def test_insufficient_fee_credit(money, fake_node, signer, owner_id):
    # lock, four transfers and swap at the default max fee of 10
    fake_node.add_fee_credit_record(FCR_ID, 59, owner_id=owner_id)
    _add_bills(fake_node, owner_id, [30, 1000, 10, 40, 20])
    with pytest.raises(ValidationError, match="insufficient fee credit"):
        DustCollector(money, signer).collect_dust()
    assert fake_node.sent == []
