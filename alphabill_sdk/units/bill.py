"""
Bill: a unit of the money partition.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from ..exceptions import EncodingError, ValidationError
from ..models import BillData, Unit
from ..tx.attributes import (
    LockAttributes, MoneyTx, ReclaimFeeCreditAttributes, SplitAttributes,
    SwapDCAttributes, TargetUnit, TransferAttributes, TransferDCAttributes,
    TransferFeeCreditAttributes, UnlockAttributes
)
from ..tx.order import TransactionOrder, TxRecordProof
from .base import UnitModel, UnlockCounterPolicy, unlock_counter

if TYPE_CHECKING:
    from .fee_credit_record import FeeCreditRecord


@dataclass
class Bill(UnitModel):
    """
    A money partition bill.

    Transaction methods accept ``TxOptions`` fields as keyword arguments,
    e.g. ``bill.transfer(predicate, timeout=120, owner_proof=gen)``.
    """
    network_id: int
    partition_id: int
    id: bytes
    value: int
    counter: int = 0
    lock_status: int = 0
    owner_predicate: Optional[bytes] = None
    state_lock_tx: Optional[bytes] = None

    @classmethod
    def from_unit(cls, unit: Unit[BillData]) -> "Bill":
        return cls(
            network_id=unit.network_id,
            partition_id=unit.partition_id,
            id=unit.unit_id,
            value=unit.data.value,
            counter=unit.data.counter,
            lock_status=unit.data.locked,
            owner_predicate=unit.data.owner_predicate,
            state_lock_tx=unit.state_lock_tx,
        )

    def increase_counter(self) -> None:
        self.counter += 1

    def transfer(self, owner_predicate: bytes, **tx_options) -> TransactionOrder:
        attr = TransferAttributes(
            new_owner_predicate=owner_predicate,
            target_value=self.value,
            counter=self.counter,
        )
        return self._build(MoneyTx.TRANSFER, attr, tx_options)

    def split(self, target_units: List[TargetUnit], **tx_options) -> TransactionOrder:
        """
        Split off ``target_units``; the rest of the value stays in this bill.

        Raises:
            ValidationError: If there are no targets, an amount is not
                positive, or the amounts exceed the bill value
        """
        if not target_units:
            raise ValidationError("split requires at least one target unit")
        total = 0
        for tu in target_units:
            if tu.amount <= 0:
                raise ValidationError(f"split target amount must be positive, got {tu.amount}")
            total += tu.amount
        remaining = self.value - total
        if remaining < 0:
            raise ValidationError(
                f"split amount {total} exceeds bill value {self.value}"
            )
        attr = SplitAttributes(
            target_units=list(target_units),
            remaining_value=remaining,
            counter=self.counter,
        )
        return self._build(MoneyTx.SPLIT, attr, tx_options)

    def transfer_to_dust_collector(self, target_bill: "Bill", **tx_options) -> TransactionOrder:
        attr = TransferDCAttributes(
            value=self.value,
            target_unit_id=target_bill.id,
            target_unit_counter=target_bill.counter,
            counter=self.counter,
        )
        return self._build(MoneyTx.TRANSFER_DC, attr, tx_options)

    def swap_with_dust_collector(
        self,
        dust_transfer_proofs: List[TxRecordProof],
        **tx_options
    ) -> TransactionOrder:
        """
        Join dust transfers into this bill.

        Proofs are ordered by the unit id of the transferred bill; the
        target value is the sum of the transferred values.

        Raises:
            ValidationError: If no proofs are given
            EncodingError: If a proof does not hold a dust transfer
        """
        if not dust_transfer_proofs:
            raise ValidationError("cannot create swap transaction as no dust transfer proofs exist")
        proofs = sorted(dust_transfer_proofs, key=lambda p: p.unit_id or b"")
        value_sum = 0
        for proof in proofs:
            try:
                dc_attr = proof.transaction_order.unmarshal_attributes(TransferDCAttributes)
            except EncodingError as e:
                raise EncodingError(f"failed to unmarshal dust transfer tx: {e}") from e
            value_sum += dc_attr.value
        attr = SwapDCAttributes(
            dc_transfers=[p.tx_record for p in proofs],
            dc_transfer_proofs=[p.tx_proof for p in proofs],
            target_value=value_sum,
        )
        return self._build(MoneyTx.SWAP_DC, attr, tx_options)

    def transfer_to_fee_credit(
        self,
        fcr: "FeeCreditRecord",
        amount: int,
        latest_addition_time: int,
        **tx_options
    ) -> TransactionOrder:
        """
        Move ``amount`` from this bill to the fee credit record ``fcr``.

        Raises:
            ValidationError: If the amount is not positive or exceeds the bill value
        """
        if amount <= 0:
            raise ValidationError(f"fee credit amount must be positive, got {amount}")
        if amount > self.value:
            raise ValidationError(f"fee credit amount {amount} exceeds bill value {self.value}")
        attr = TransferFeeCreditAttributes(
            amount=amount,
            target_partition_id=fcr.partition_id,
            target_record_id=fcr.id,
            latest_addition_time=latest_addition_time,
            target_unit_counter=fcr.counter,
            counter=self.counter,
        )
        return self._build(MoneyTx.TRANSFER_FEE_CREDIT, attr, tx_options)

    def reclaim_from_fee_credit(self, close_fc_proof: TxRecordProof, **tx_options) -> TransactionOrder:
        attr = ReclaimFeeCreditAttributes(
            close_fee_credit_proof=close_fc_proof,
            counter=self.counter,
        )
        return self._build(MoneyTx.RECLAIM_FEE_CREDIT, attr, tx_options)

    def lock(self, lock_status: int, **tx_options) -> TransactionOrder:
        attr = LockAttributes(lock_status=lock_status, counter=self.counter)
        return self._build(MoneyTx.LOCK, attr, tx_options)

    def unlock(
        self,
        counter_policy: UnlockCounterPolicy = UnlockCounterPolicy.CURRENT,
        **tx_options
    ) -> TransactionOrder:
        attr = UnlockAttributes(counter=unlock_counter(self.counter, counter_policy))
        return self._build(MoneyTx.UNLOCK, attr, tx_options)
