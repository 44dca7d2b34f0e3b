"""
Tests for the JSON-RPC transport and batch chunking.
"""
import math
import threading
from unittest.mock import MagicMock

import pytest
import requests
from hypothesis import given, settings, strategies as st

from alphabill_sdk.exceptions import CancelledError, RpcError
from alphabill_sdk.rpc import BatchElem, JsonRpcClient
from alphabill_sdk.rpc.transport import encode_param
from conftest import TEST_RPC_URL


def _echo_session():
    """Session answering every batch item with its own params"""
    session = MagicMock(spec=requests.Session)
    session.sizes = []

    def post(url, json=None, timeout=None):
        response = MagicMock(spec=requests.Response)
        response.raise_for_status = MagicMock(return_value=None)
        session.sizes.append(len(json))
        response.json = MagicMock(return_value=[
            {"jsonrpc": "2.0", "id": r["id"], "result": r["params"][0]} for r in reversed(json)
        ])
        return response

    session.post = MagicMock(side_effect=post)
    return session


def _batch(n):
    return [BatchElem("state_getUnit", [i, False]) for i in range(n)]


class TestBatchChunking:
    """Batch requests are split into chunks of at most the item limit"""

    @pytest.mark.parametrize("limit,sizes", [
        (2, [2, 2, 2, 2, 2, 1]),
        (12, [11]),
        (11, [11]),
        (0, [1] * 11),
        (-5, [1] * 11),
    ])
    def test_chunk_sizes(self, limit, sizes):
        session = _echo_session()
        client = JsonRpcClient(TEST_RPC_URL, batch_item_limit=limit, session=session)
        batch = _batch(11)
        client.batch_call(batch)
        assert session.sizes == sizes
        assert [e.result for e in batch] == [hex(i) for i in range(11)]

    @settings(max_examples=50)
    @given(n=st.integers(min_value=0, max_value=60), limit=st.integers(min_value=-3, max_value=70))
    def test_chunking_property(self, n, limit):
        """ceil(N / max(L, 1)) calls, none larger than the limit, results in order"""
        session = _echo_session()
        client = JsonRpcClient(TEST_RPC_URL, batch_item_limit=limit, session=session)
        batch = _batch(n)
        client.batch_call(batch)
        effective = max(limit, 1)
        assert len(session.sizes) == math.ceil(n / effective)
        assert all(size <= effective for size in session.sizes)
        assert sum(session.sizes) == n
        assert [e.result for e in batch] == [hex(i) for i in range(n)]
        assert all(e.error is None for e in batch)

    def test_failed_chunk_aborts(self, requests_mock):
        calls = []

        def callback(request, context):
            body = request.json()
            calls.append(len(body))
            if len(calls) == 2:
                context.status_code = 400
                return {"error": "bad request"}
            return [{"jsonrpc": "2.0", "id": r["id"], "result": None} for r in body]

        requests_mock.post(TEST_RPC_URL, json=callback)
        client = JsonRpcClient(TEST_RPC_URL, batch_item_limit=2)
        with pytest.raises(RpcError) as exc_info:
            client.batch_call(_batch(6))
        assert "failed to send batch request" in str(exc_info.value)
        assert calls == [2, 2]

    def test_cancel_before_first_chunk(self):
        session = _echo_session()
        client = JsonRpcClient(TEST_RPC_URL, batch_item_limit=2, session=session)
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(CancelledError):
            client.batch_call(_batch(3), cancel=cancel)
        session.post.assert_not_called()

    def test_per_item_errors(self, requests_mock):
        def callback(request, context):
            body = request.json()
            return [
                {"jsonrpc": "2.0", "id": body[0]["id"], "error": {"code": -32000, "message": "unit not found"}},
                {"jsonrpc": "2.0", "id": body[1]["id"], "result": "ok"},
            ]

        requests_mock.post(TEST_RPC_URL, json=callback)
        batch = _batch(3)
        JsonRpcClient(TEST_RPC_URL).batch_call(batch)
        assert batch[0].error.code == -32000
        assert "unit not found" in str(batch[0].error)
        assert batch[1].result == "ok"
        assert "missing response" in str(batch[2].error)

    @pytest.mark.parametrize("item", ["oops", None, 7, ["nested"]])
    def test_malformed_item(self, requests_mock, item):
        def callback(request, context):
            body = request.json()
            return [{"jsonrpc": "2.0", "id": body[0]["id"], "result": "ok"}, item]

        requests_mock.post(TEST_RPC_URL, json=callback)
        with pytest.raises(RpcError) as exc_info:
            JsonRpcClient(TEST_RPC_URL).batch_call(_batch(2))
        assert exc_info.value.method == "batch"
        assert "unexpected response item" in str(exc_info.value)


class TestCall:
    """Single calls"""

    def test_call_result(self, requests_mock):
        route = requests_mock.post(TEST_RPC_URL, json={"jsonrpc": "2.0", "id": 1, "result": "0x10"})
        client = JsonRpcClient(TEST_RPC_URL)
        assert client.call("state_getRoundNumber") == "0x10"
        sent = route.last_request.json()
        assert sent["method"] == "state_getRoundNumber"
        assert sent["jsonrpc"] == "2.0"
        assert sent["params"] == []

    def test_params_are_hex_encoded(self, requests_mock):
        route = requests_mock.post(TEST_RPC_URL, json={"jsonrpc": "2.0", "id": 1, "result": None})
        JsonRpcClient(TEST_RPC_URL).call("state_getUnit", b"\x01\x02", False)
        assert route.last_request.json()["params"] == ["0x0102", False]

    def test_null_result(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, json={"jsonrpc": "2.0", "id": 1, "result": None})
        assert JsonRpcClient(TEST_RPC_URL).call("state_getUnit", b"\x01", False) is None

    def test_error_object(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, json={
            "jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "invalid params", "data": "x"}
        })
        with pytest.raises(RpcError) as exc_info:
            JsonRpcClient(TEST_RPC_URL).call("state_getUnit", b"\x01", False)
        assert exc_info.value.code == -32602
        assert exc_info.value.method == "state_getUnit"
        assert exc_info.value.data == "x"
        assert "invalid params" in str(exc_info.value)

    def test_http_error(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, status_code=404)
        with pytest.raises(RpcError) as exc_info:
            JsonRpcClient(TEST_RPC_URL).call("state_getRoundNumber")
        assert "state_getRoundNumber failed" in str(exc_info.value)

    def test_connection_error(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, exc=requests.ConnectionError("refused"))
        with pytest.raises(RpcError) as exc_info:
            JsonRpcClient(TEST_RPC_URL).call("state_getRoundNumber")
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_invalid_json(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, text="not json")
        with pytest.raises(RpcError) as exc_info:
            JsonRpcClient(TEST_RPC_URL).call("state_getRoundNumber")
        assert "invalid JSON" in str(exc_info.value)


def test_retry_adapter_mounted():
    """Default session retries HTTP failures"""
    client = JsonRpcClient(TEST_RPC_URL, retry_count=5)
    adapter = client.session.get_adapter("http://localhost")
    assert adapter.max_retries.total == 5
    assert 503 in adapter.max_retries.status_forcelist
    client.close()


def test_encode_param():
    assert encode_param(b"\xab") == "0xab"
    assert encode_param(255) == "0xff"
    assert encode_param(True) is True
    assert encode_param("text") == "text"
