"""
Orchestration partition client.
"""
from typing import Optional

from ..tx.attributes import PartitionType
from ..units.fee_credit_record import FeeCreditRecord
from .partition import PartitionClient


class OrchestrationPartitionClient(PartitionClient):
    """Client for the orchestration partition, which has no fee credit records."""

    partition_type = PartitionType.ORCHESTRATION
    partition_name = "orchestration"

    def get_fee_credit_record(self, unit_id: bytes) -> Optional[FeeCreditRecord]:
        return None

    def get_fee_credit_record_by_owner_id(self, owner_id: bytes) -> Optional[FeeCreditRecord]:
        return None
