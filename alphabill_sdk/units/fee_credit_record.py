"""
Fee credit record: prepaid transaction fees of an owner on one partition.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..exceptions import ValidationError
from ..models import FeeCreditRecordData, Unit
from ..tx.attributes import (
    AddFeeCreditAttributes, CloseFeeCreditAttributes, DeleteFeeCreditAttributes,
    FeeCreditTx, LockFeeCreditAttributes, SetFeeCreditAttributes,
    UnlockFeeCreditAttributes
)
from ..tx.order import TransactionOrder, TxRecordProof
from .base import UnitModel, UnlockCounterPolicy, unlock_counter

if TYPE_CHECKING:
    from .bill import Bill


@dataclass
class FeeCreditRecord(UnitModel):
    """
    Fee credit record of a partition.

    ``counter`` is None while the record does not exist on the ledger yet;
    only ``add_fee_credit`` and ``set_fee_credit`` work in that state.
    """
    network_id: int
    partition_id: int
    id: bytes
    balance: int = 0
    counter: Optional[int] = None
    min_lifetime: int = 0
    lock_status: int = 0
    owner_predicate: Optional[bytes] = None
    state_lock_tx: Optional[bytes] = None

    @classmethod
    def from_unit(cls, unit: Unit[FeeCreditRecordData]) -> "FeeCreditRecord":
        return cls(
            network_id=unit.network_id,
            partition_id=unit.partition_id,
            id=unit.unit_id,
            balance=unit.data.balance,
            counter=unit.data.counter,
            min_lifetime=unit.data.min_lifetime,
            lock_status=unit.data.locked,
            owner_predicate=unit.data.owner_predicate,
            state_lock_tx=unit.state_lock_tx,
        )

    @property
    def exists(self) -> bool:
        return self.counter is not None

    def increase_counter(self) -> None:
        self.counter = 0 if self.counter is None else self.counter + 1

    def _require_counter(self, operation: str) -> int:
        if self.counter is None:
            raise ValidationError(
                f"cannot {operation}: fee credit record {self.id.hex()} does not exist"
            )
        return self.counter

    def add_fee_credit(
        self,
        owner_predicate: bytes,
        transfer_fc_proof: TxRecordProof,
        **tx_options
    ) -> TransactionOrder:
        attr = AddFeeCreditAttributes(
            fee_credit_owner_predicate=owner_predicate,
            fee_credit_transfer_proof=transfer_fc_proof,
        )
        return self._build(FeeCreditTx.ADD, attr, tx_options)

    def close_fee_credit(self, target_bill: "Bill", **tx_options) -> TransactionOrder:
        """Return the whole balance to ``target_bill``."""
        attr = CloseFeeCreditAttributes(
            amount=self.balance,
            target_unit_id=target_bill.id,
            target_unit_counter=target_bill.counter,
            counter=self._require_counter("close fee credit"),
        )
        return self._build(FeeCreditTx.CLOSE, attr, tx_options)

    def lock(self, lock_status: int, **tx_options) -> TransactionOrder:
        attr = LockFeeCreditAttributes(
            lock_status=lock_status,
            counter=self._require_counter("lock fee credit"),
        )
        return self._build(FeeCreditTx.LOCK, attr, tx_options)

    def unlock(
        self,
        counter_policy: UnlockCounterPolicy = UnlockCounterPolicy.CURRENT,
        **tx_options
    ) -> TransactionOrder:
        counter = self._require_counter("unlock fee credit")
        attr = UnlockFeeCreditAttributes(counter=unlock_counter(counter, counter_policy))
        return self._build(FeeCreditTx.UNLOCK, attr, tx_options)

    def set_fee_credit(self, owner_predicate: bytes, amount: int, **tx_options) -> TransactionOrder:
        """Set the balance directly; only accepted by permissioned partitions."""
        if amount <= 0:
            raise ValidationError(f"fee credit amount must be positive, got {amount}")
        attr = SetFeeCreditAttributes(
            owner_predicate=owner_predicate,
            amount=amount,
            counter=self.counter,
        )
        return self._build(FeeCreditTx.SET, attr, tx_options)

    def delete_fee_credit(self, **tx_options) -> TransactionOrder:
        """Delete the record; only accepted by permissioned partitions."""
        attr = DeleteFeeCreditAttributes(counter=self._require_counter("delete fee credit"))
        return self._build(FeeCreditTx.DELETE, attr, tx_options)

    def _nop_options(self) -> dict:
        return {"fee_credit_record_id": self.id}
