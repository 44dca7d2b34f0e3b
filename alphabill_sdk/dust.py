"""
Dust collection: joining the small bills of an owner into the largest one.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .clients.money import MoneyPartitionClient
from .exceptions import EncodingError, ValidationError
from .predicates import new_p2pkh_proof_generator, public_key_hash
from .tx.attributes import LockReason, SwapDCAttributes
from .tx.builder import DEFAULT_MAX_FEE
from .tx.order import TxRecordProof
from .txsubmitter import TxSubmission

DEFAULT_MAX_BILLS_PER_DC = 100
TX_TIMEOUT_ROUNDS = 10


@dataclass
class DustCollectionResult:
    swap_proof: TxRecordProof
    lock_proof: Optional[TxRecordProof] = None

    def fee_sum(self) -> int:
        """
        Fees paid by the lock, the dust transfers and the swap.

        Raises:
            EncodingError: If the swap attributes cannot be decoded
        """
        fees = self.swap_proof.actual_fee
        try:
            swap_attr = self.swap_proof.transaction_order.unmarshal_attributes(SwapDCAttributes)
        except EncodingError as e:
            raise EncodingError(f"failed to unmarshal swap transaction to calculate fee sum: {e}") from e
        fees += sum(r.server_metadata.actual_fee for r in swap_attr.dc_transfers if r.server_metadata)
        if self.lock_proof is not None:
            fees += self.lock_proof.actual_fee
        return fees


class DustCollector:
    """Runs the lock, transfer-to-DC and swap sequence for one owner."""

    def __init__(
        self,
        money_client: MoneyPartitionClient,
        signer,
        max_bills_per_dc: int = DEFAULT_MAX_BILLS_PER_DC,
        tx_timeout: int = TX_TIMEOUT_ROUNDS,
        logger: Optional[logging.Logger] = None
    ):
        self.money_client = money_client
        self.signer = signer
        self.max_bills_per_dc = max_bills_per_dc
        self.tx_timeout = tx_timeout
        self.logger = logger or logging.getLogger(__name__)
        self.owner_id = public_key_hash(signer.public_key)
        self._proof = new_p2pkh_proof_generator(signer)

    def _timeout(self) -> int:
        return self.money_client.get_round_number() + self.tx_timeout

    def collect_dust(self, cancel: Optional[threading.Event] = None) -> Optional[DustCollectionResult]:
        """
        Join the smallest unlocked bills into the largest one.

        Returns:
            The lock and swap proofs, or None if there are fewer than two
            unlocked bills

        Raises:
            ValidationError: If there is no fee credit or not enough of it
        """
        bills = [b for b in self.money_client.get_bills(self.owner_id, cancel=cancel) if b.lock_status == 0]
        bills.sort(key=lambda b: b.value)

        fcr = self.money_client.get_fee_credit_record_by_owner_id(self.owner_id)
        if fcr is None:
            raise ValidationError("fee credit record not found")

        if len(bills) < 2:
            self.logger.info("Account has less than two unlocked bills, skipping dust collection")
            return None

        target_bill = bills[-1]
        bills_to_swap = bills[:min(self.max_bills_per_dc, len(bills) - 1)]

        # lock and swap on top of the dust transfers
        txs_cost = DEFAULT_MAX_FEE * (len(bills_to_swap) + 2)
        if fcr.balance < txs_cost:
            raise ValidationError(
                f"insufficient fee credit balance for transactions: need at least {txs_cost} "
                f"but have {fcr.balance} to send lock tx, {len(bills_to_swap)} dust transfer "
                f"transactions and swap tx"
            )

        opts = dict(fee_credit_record_id=fcr.id, owner_proof=self._proof, fee_proof=self._proof)

        self.logger.info(f"Locking target bill {target_bill.id.hex()}")
        lock_tx = target_bill.lock(LockReason.COLLECT_DUST, timeout=self._timeout(), **opts)
        lock_sub = TxSubmission(lock_tx)
        lock_sub.to_batch(self.money_client, self.logger, self.money_client.poll_interval).send_tx(cancel=cancel)
        target_bill.increase_counter()

        timeout = self._timeout()
        dc_batch = self.money_client.new_submission_batch()
        for bill in bills_to_swap:
            dc_batch.add(TxSubmission(bill.transfer_to_dust_collector(target_bill, timeout=timeout, **opts)))
        self.logger.info(
            f"Submitting dc batch of {len(dc_batch.submissions)} dust transfers "
            f"with target bill {target_bill.id.hex()}"
        )
        dc_batch.send_tx(confirm=True, cancel=cancel)
        proofs = [sub.proof for sub in dc_batch.submissions]

        timeout = self._timeout()
        swap_tx = target_bill.swap_with_dust_collector(proofs, timeout=timeout, **opts)
        self.logger.info(f"Sending swap tx with timeout={timeout}, unitID={target_bill.id.hex()}")
        swap_sub = TxSubmission(swap_tx)
        swap_sub.to_batch(self.money_client, self.logger, self.money_client.poll_interval).send_tx(cancel=cancel)
        return DustCollectionResult(swap_proof=swap_sub.proof, lock_proof=lock_sub.proof)

