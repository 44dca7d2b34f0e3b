"""
Typed wrappers for the admin_* JSON-RPC methods.
"""
import pydantic

from ..exceptions import EncodingError
from ..models import NodeInfo
from .transport import JsonRpcClient


class AdminAPIClient:
    """Admin API of an Alphabill node."""

    def __init__(self, rpc: JsonRpcClient):
        self.rpc = rpc

    def get_node_info(self) -> NodeInfo:
        result = self.rpc.call("admin_getNodeInfo")
        try:
            return NodeInfo.model_validate(result)
        except pydantic.ValidationError as e:
            raise EncodingError(f"invalid node info: {e}") from e
