"""
JSON-RPC access to Alphabill nodes.
"""
from .admin_api import AdminAPIClient
from .state_api import StateAPIClient, parse_unit
from .transport import DEFAULT_BATCH_ITEM_LIMIT, BatchElem, JsonRpcClient

__all__ = [
    "AdminAPIClient",
    "StateAPIClient",
    "parse_unit",
    "DEFAULT_BATCH_ITEM_LIMIT",
    "BatchElem",
    "JsonRpcClient",
]
