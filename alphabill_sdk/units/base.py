"""
Shared helpers of the unit domain models.
"""
from enum import Enum
from typing import Optional

from ..encoding import CborRecord
from ..exceptions import ValidationError
from ..tx.attributes import NopAttributes, NopTx
from ..tx.builder import build_transaction, tx_options_with_defaults
from ..tx.order import StateLock, TransactionOrder


class UnlockCounterPolicy(str, Enum):
    """
    Counter written into unlock transactions.

    CURRENT re-asserts the counter of the last observed unit state. NEXT
    uses counter + 1, for unlocking right after a lock transaction whose
    execution has not been observed yet.
    """
    CURRENT = "current"
    NEXT = "next"


def unlock_counter(counter: int, policy: UnlockCounterPolicy) -> int:
    if UnlockCounterPolicy(policy) is UnlockCounterPolicy.NEXT:
        return counter + 1
    return counter


class UnitModel:
    """Common state and transaction plumbing of all unit models."""

    network_id: int
    partition_id: int
    id: Optional[bytes]
    # Units without a counter send NOP transactions with an empty counter
    counter: Optional[int] = None

    def _build(self, tx_type: int, attributes: CborRecord, tx_options: dict) -> TransactionOrder:
        opts = tx_options_with_defaults(**tx_options)
        return build_transaction(
            self.network_id, self.partition_id, self.id, tx_type, attributes, opts
        )

    def _nop_options(self) -> dict:
        return {}

    def nop(self, counter: Optional[int], **tx_options) -> TransactionOrder:
        """
        Create a NOP transaction for this unit.

        A NOP changes nothing but the unit counter. Together with the
        ``state_lock`` and ``state_unlock_proof`` options it locks the unit
        behind a pending transaction, or executes or rolls back the pending
        transaction of a locked unit.
        """
        tx_options = {**tx_options, **self._nop_options()}
        return self._build(NopTx.NOP, NopAttributes(counter=counter), tx_options)

    def lock_state(self, state_lock: StateLock, **tx_options) -> TransactionOrder:
        """Create a NOP that holds this unit until ``state_lock`` is resolved."""
        return self.nop(self.counter, state_lock=state_lock, **tx_options)

    def unlock_state(self, **tx_options) -> TransactionOrder:
        """
        Create a NOP that resolves the state lock set by ``lock_state``.

        Pass ``state_unlock_proof`` (and ``state_unlock_kind`` to roll back)
        to choose how the pending transaction is resolved.

        Raises:
            ValidationError: If the unit has no counter
        """
        if self.counter is None:
            raise ValidationError(f"cannot unlock unit {self._id_hex()}: unit has no counter")
        # the locking NOP has not been observed yet
        return self.nop(unlock_counter(self.counter, UnlockCounterPolicy.NEXT), **tx_options)

    def _id_hex(self) -> str:
        return self.id.hex() if self.id else "<unassigned>"
