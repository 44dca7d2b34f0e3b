"""
JSON-RPC 2.0 over HTTP.
"""
import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..encoding import to_hex
from ..exceptions import CancelledError, RpcError
from ..version import USER_AGENT

DEFAULT_BATCH_ITEM_LIMIT = 100


@dataclass
class BatchElem:
    """
    One call of a batch request.

    After ``JsonRpcClient.batch_call`` returns, either ``result`` holds the
    raw JSON result or ``error`` holds the error reported by the node.
    """
    method: str
    args: List[Any] = field(default_factory=list)
    result: Any = None
    error: Optional[RpcError] = None


def encode_param(value: Any) -> Any:
    """Convert bytes and integers into their hex wire form."""
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return hex(value)
    return value


class JsonRpcClient:
    """
    Client for the JSON-RPC endpoint of an Alphabill node.

    HTTP failures (connection errors and 5xx responses) are retried by the
    underlying session; JSON-RPC errors returned by the node are not.
    """

    def __init__(
        self,
        url: str,
        timeout: int = 30,
        retry_count: int = 3,
        batch_item_limit: int = DEFAULT_BATCH_ITEM_LIMIT,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the client

        Args:
            url: Node RPC URL (e.g., "http://localhost:26866/rpc")
            timeout: Timeout for HTTP requests in seconds
            retry_count: Number of retries for HTTP requests
            batch_item_limit: Maximum number of calls sent in one batch
                request, values below 1 are treated as 1
            session: Optional preconfigured requests session
            logger: Optional logger instance to use for debug logging
        """
        self.url = url
        self.timeout = timeout
        self.batch_item_limit = max(int(batch_item_limit), 1)
        self.logger = logger or logging.getLogger(__name__)
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

        if session is None:
            session = requests.Session()
            retries = Retry(
                total=retry_count,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["POST"],
                raise_on_status=False,
                connect=retry_count,
                read=retry_count,
                other=retry_count
            )
            session.mount("http://", HTTPAdapter(max_retries=retries))
            session.mount("https://", HTTPAdapter(max_retries=retries))
            session.headers["User-Agent"] = USER_AGENT
        self.session = session

    def _next_id(self) -> int:
        with self._lock:
            return next(self._ids)

    def _post(self, body: Any, what: str) -> Any:
        try:
            response = self.session.post(self.url, json=body, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RpcError(f"{what} failed: {e}", method=what) from e
        try:
            return response.json()
        except ValueError as e:
            raise RpcError(f"{what} failed: invalid JSON response: {e}", method=what) from e

    @staticmethod
    def _error_from(method: str, error: Dict[str, Any]) -> RpcError:
        return RpcError(
            f"{method}: {error.get('message', 'unknown error')}",
            method=method,
            code=error.get("code"),
            data=error.get("data"),
        )

    def call(self, method: str, *args: Any) -> Any:
        """
        Call a single RPC method.

        Returns:
            The raw JSON ``result``; None when the node reports no result

        Raises:
            RpcError: If the request fails or the node returns an error
        """
        request = {
            "jsonrpc": "2.0",
            "id": self._next_id(),
            "method": method,
            "params": [encode_param(a) for a in args],
        }
        self.logger.debug(f"RPC call {method} (id={request['id']})")
        response = self._post(request, method)
        if not isinstance(response, dict):
            raise RpcError(f"{method}: unexpected response {response!r}", method=method)
        if response.get("error") is not None:
            raise self._error_from(method, response["error"])
        return response.get("result")

    def batch_call(self, batch: List[BatchElem], cancel: Optional[threading.Event] = None) -> None:
        """
        Send the calls in chunks of at most ``batch_item_limit`` items.

        Chunks are sent one after another in the original order. Results
        and per-call errors are stored on the batch elements.

        Args:
            batch: Calls to make
            cancel: Optional event; checked before every chunk

        Raises:
            RpcError: If a chunk request fails; later chunks are not sent
            CancelledError: If ``cancel`` is set before all chunks are sent
        """
        limit = self.batch_item_limit
        for start in range(0, len(batch), limit):
            if cancel is not None and cancel.is_set():
                raise CancelledError("batch request cancelled")
            chunk = batch[start:start + limit]
            try:
                self._send_batch(chunk)
            except RpcError as e:
                raise RpcError(
                    f"failed to send batch request: {e}", method=e.method, code=e.code, data=e.data
                ) from e

    def _send_batch(self, chunk: List[BatchElem]) -> None:
        requests_by_id = {}
        body = []
        for elem in chunk:
            req_id = self._next_id()
            requests_by_id[req_id] = elem
            body.append({
                "jsonrpc": "2.0",
                "id": req_id,
                "method": elem.method,
                "params": [encode_param(a) for a in elem.args],
            })
        self.logger.debug(f"RPC batch of {len(body)} calls")
        response = self._post(body, "batch")
        if not isinstance(response, list):
            raise RpcError(f"batch: unexpected response {response!r}", method="batch")

        for item in response:
            if not isinstance(item, dict):
                raise RpcError(f"batch: unexpected response item {item!r}", method="batch")
            elem = requests_by_id.pop(item.get("id"), None)
            if elem is None:
                continue
            if item.get("error") is not None:
                elem.error = self._error_from(elem.method, item["error"])
            else:
                elem.result = item.get("result")
        for elem in requests_by_id.values():
            elem.error = RpcError(f"{elem.method}: missing response in batch", method=elem.method)

    def close(self) -> None:
        self.session.close()
