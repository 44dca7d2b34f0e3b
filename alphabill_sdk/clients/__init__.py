"""
Partition clients.
"""
from .evm import EvmPartitionClient, wei_to_alpha
from .money import MoneyPartitionClient
from .orchestration import OrchestrationPartitionClient
from .partition import PartitionClient, PartitionDescription
from .tokens import TokensPartitionClient

__all__ = [
    "EvmPartitionClient",
    "wei_to_alpha",
    "MoneyPartitionClient",
    "OrchestrationPartitionClient",
    "PartitionClient",
    "PartitionDescription",
    "TokensPartitionClient",
]
