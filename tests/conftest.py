"""
Pytest fixtures for the Alphabill SDK tests.
"""
import hashlib
import time

import pytest

from alphabill_sdk.encoding import from_hex, to_hex
from alphabill_sdk.signer import LocalSigner
from alphabill_sdk.tx.attributes import MoneyUnitType, PartitionType
from alphabill_sdk.tx.order import (
    ServerMetadata, TransactionRecord, TxProof, TxRecordProof, TxStatus,
    decode_transaction_order
)
from alphabill_sdk.unit_id import new_unit_id

# Constants for testing
TEST_RPC_URL = "http://localhost:26866/rpc"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_NETWORK_ID = 3
TEST_PARTITION_ID = 1


# Make time.sleep instantaneous so confirmation polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


def unit_id(n: int, unit_type: int = MoneyUnitType.BILL) -> bytes:
    """Deterministic unit id whose unit part ends with ``n``."""
    return new_unit_id(n.to_bytes(32, "big"), unit_type)


def make_proof(order, status=TxStatus.SUCCESSFUL, fee=1) -> TxRecordProof:
    """Record proof of ``order`` as a node would return it."""
    record = TransactionRecord(
        version=1,
        transaction_order=order,
        server_metadata=ServerMetadata(actual_fee=fee, success_indicator=status),
    )
    return TxRecordProof(tx_record=record, tx_proof=TxProof([1, [b"\x01", b"\x02"], None]))


class FakeNode:
    """
    In-memory Alphabill node answering JSON-RPC requests.

    Sent transactions are executed right away: a proof becomes visible
    after ``proof_delay`` lookups of its hash.
    """

    def __init__(
        self,
        partition_type_id: int = PartitionType.MONEY,
        partition_id: int = TEST_PARTITION_ID,
        network_id: int = TEST_NETWORK_ID
    ):
        self.network_id = network_id
        self.partition_id = partition_id
        self.node_info = {
            "networkId": network_id,
            "partitionId": partition_id,
            "partitionTypeId": partition_type_id,
            "permissionedMode": False,
            "feelessMode": False,
            "self": {"identifier": "16Uiu2HAm", "addresses": ["/ip4/127.0.0.1/tcp/26666"]},
            "bootstrapNodes": [],
            "rootValidators": [],
            "partitionValidators": [],
            "openConnections": [],
        }
        self.units = {}
        self.owner_units = {}
        self.round_number = 100
        self.round_step = 0
        self.tx_status = TxStatus.SUCCESSFUL
        self.proof_delay = 0
        self.auto_execute = True
        self.proofs = {}
        self.proof_lookups = {}
        self.sent = []
        self.calls = []
        self.batch_sizes = []
        self.errors = {}
        # round number -> encoded block
        self.blocks = {}

    def add_unit(self, uid: bytes, data: dict, owner_id: bytes = None, state_lock_tx: bytes = None):
        self.units[uid] = {
            "networkId": hex(self.network_id),
            "partitionId": hex(self.partition_id),
            "unitId": to_hex(uid),
            "data": data,
            "stateLockTx": to_hex(state_lock_tx) if state_lock_tx else None,
        }
        if owner_id is not None:
            self.owner_units.setdefault(owner_id, []).append(uid)

    def add_bill(self, uid: bytes, value: int, counter: int = 0, locked: int = 0, owner_id: bytes = None):
        self.add_unit(uid, {
            "value": hex(value),
            "ownerPredicate": "0x830041025820" + "00" * 32,
            "locked": hex(locked),
            "counter": hex(counter),
        }, owner_id=owner_id)

    def add_fee_credit_record(
        self, uid: bytes, balance: int, counter: int = 0, locked: int = 0,
        owner_id: bytes = None, state_lock_tx: bytes = None
    ):
        self.add_unit(uid, {
            "balance": hex(balance),
            "ownerPredicate": "0x830041025820" + "00" * 32,
            "locked": hex(locked),
            "counter": hex(counter),
            "minLifetime": hex(1000),
        }, owner_id=owner_id, state_lock_tx=state_lock_tx)

    def sent_orders(self, tx_type=None):
        return [o for o in self.sent if tx_type is None or o.type == tx_type]

    # JSON-RPC handlers

    def _state_getRoundNumber(self):
        current = self.round_number
        self.round_number += self.round_step
        return hex(current)

    def _state_getRoundInfo(self):
        return {"roundNumber": hex(self.round_number), "epoch": "0x1"}

    def _admin_getNodeInfo(self):
        return self.node_info

    def _state_getUnit(self, uid, include_state_proof=False):
        return self.units.get(from_hex(uid))

    def _state_getUnitsByOwnerID(self, owner_id):
        return [to_hex(u) for u in self.owner_units.get(from_hex(owner_id), [])]

    def _state_sendTransaction(self, tx_hex):
        data = from_hex(tx_hex)
        order = decode_transaction_order(data)
        tx_hash = hashlib.sha256(data).digest()
        self.sent.append(order)
        if self.auto_execute:
            self.proofs[tx_hash] = make_proof(order, status=self.tx_status)
        return to_hex(tx_hash)

    def _state_getTransactionProof(self, tx_hash_hex):
        tx_hash = from_hex(tx_hash_hex)
        lookups = self.proof_lookups.get(tx_hash, 0) + 1
        self.proof_lookups[tx_hash] = lookups
        proof = self.proofs.get(tx_hash)
        if proof is None or lookups <= self.proof_delay:
            return None
        return {"txRecordProof": to_hex(proof.encode())}

    def _state_getBlock(self, round_number):
        block = self.blocks.get(int(round_number, 16))
        return to_hex(block) if block is not None else None

    def _respond(self, req):
        method = req["method"]
        self.calls.append(method)
        response = {"jsonrpc": "2.0", "id": req["id"]}
        if method in self.errors:
            response["error"] = self.errors[method]
            return response
        handler = getattr(self, f"_{method}", None)
        if handler is None:
            response["error"] = {"code": -32601, "message": f"the method {method} does not exist/is not available"}
            return response
        response["result"] = handler(*req.get("params", []))
        return response

    def callback(self, request, context):
        context.headers["Content-Type"] = "application/json"
        body = request.json()
        if isinstance(body, list):
            self.batch_sizes.append(len(body))
            return [self._respond(r) for r in body]
        return self._respond(body)


@pytest.fixture
def signer():
    """Create a deterministic test signer"""
    return LocalSigner(TEST_PRIV_KEY)


@pytest.fixture
def fake_node(requests_mock):
    """Money partition node served at TEST_RPC_URL"""
    node = FakeNode()
    requests_mock.post(TEST_RPC_URL, json=node.callback)
    return node


@pytest.fixture
def tokens_node(requests_mock):
    """Tokens partition node served at its own URL"""
    node = FakeNode(partition_type_id=PartitionType.TOKENS, partition_id=2)
    requests_mock.post("http://localhost:28866/rpc", json=node.callback)
    return node
