"""
EVM partition client.

The EVM partition keeps fees in the account balance of the state object
instead of in fee credit units; the balance is in wei.
"""
from typing import Optional

from ..exceptions import RpcError
from ..models import EvmStateObject, Unit
from ..tx.attributes import EvmUnitType, PartitionType
from ..units.fee_credit_record import FeeCreditRecord
from .partition import PartitionClient

ALPHA_TO_WEI = 10 ** 10


def wei_to_alpha(wei: int) -> int:
    """Convert wei to alpha, rounding half up."""
    return (wei + ALPHA_TO_WEI // 2) // ALPHA_TO_WEI


def _fee_credit_record_from_state(unit: Unit[EvmStateObject]) -> FeeCreditRecord:
    state = unit.data
    link = state.alpha_bill
    return FeeCreditRecord(
        network_id=unit.network_id,
        partition_id=unit.partition_id,
        id=unit.unit_id,
        balance=wei_to_alpha(state.account.balance) if state.account else 0,
        counter=link.counter if link else 0,
        min_lifetime=link.min_lifetime if link else 0,
        owner_predicate=link.owner_predicate if link else None,
        state_lock_tx=unit.state_lock_tx,
    )


class EvmPartitionClient(PartitionClient):
    """Client for the EVM partition."""

    partition_type = PartitionType.EVM
    partition_name = "evm"
    fee_credit_record_unit_type = EvmUnitType.FEE_CREDIT_RECORD

    def get_fee_credit_record(self, unit_id: bytes) -> Optional[FeeCreditRecord]:
        unit = self.state.get_unit(unit_id, EvmStateObject)
        if unit is None:
            return None
        return _fee_credit_record_from_state(unit)

    def get_fee_credit_record_by_owner_id(self, owner_id: bytes) -> Optional[FeeCreditRecord]:
        """
        Fee credit of the first state object of an owner.

        Returns:
            The fee credit, or None if the owner has no state object
        """
        try:
            unit_ids = self.state.get_units_by_owner_id(owner_id)
        except RpcError as e:
            raise RpcError(f"failed to fetch units: {e}", method=e.method, code=e.code, data=e.data) from e
        if not unit_ids:
            return None
        return self.get_fee_credit_record(unit_ids[0])
