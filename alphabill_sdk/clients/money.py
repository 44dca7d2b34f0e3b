"""
Money partition client.
"""
import threading
from typing import List, Optional

from ..exceptions import RpcError
from ..models import BillData
from ..tx.attributes import MoneyUnitType, PartitionType
from ..unit_id import has_type
from ..units.bill import Bill
from .partition import PartitionClient


class MoneyPartitionClient(PartitionClient):
    """Client for the money partition: bills and their fee credit records."""

    partition_type = PartitionType.MONEY
    partition_name = "money"
    fee_credit_record_unit_type = MoneyUnitType.FEE_CREDIT_RECORD

    def get_bill(self, unit_id: bytes) -> Optional[Bill]:
        """
        Fetch a bill.

        Returns:
            The bill, or None if it does not exist
        """
        unit = self.state.get_unit(unit_id, BillData)
        if unit is None:
            return None
        return Bill.from_unit(unit)

    def get_bills(self, owner_id: bytes, cancel: Optional[threading.Event] = None) -> List[Bill]:
        """
        Fetch all bills of an owner.

        Args:
            owner_id: Owner id (hash of the owner public key)
            cancel: Optional event that stops fetching

        Raises:
            RpcError: If a lookup fails
        """
        try:
            unit_ids = self.state.get_units_by_owner_id(owner_id)
        except RpcError as e:
            raise RpcError(f"failed to fetch owner units: {e}", method=e.method, code=e.code, data=e.data) from e
        bill_ids = [u for u in unit_ids if has_type(u, MoneyUnitType.BILL)]
        try:
            units = self.batch_get_units(bill_ids, BillData, cancel=cancel)
        except RpcError as e:
            raise RpcError(f"failed to fetch bills: {e}", method=e.method, code=e.code, data=e.data) from e
        return [Bill.from_unit(u) for u in units]
