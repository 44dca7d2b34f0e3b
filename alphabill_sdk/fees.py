"""
Adding and reclaiming fee credit.

Both flows are chains where every step consumes the proof of the previous
one::

    add:     [lockFC] -> transferFC (money) -> addFC (target)
    reclaim: [lock bill] -> closeFC (target) -> reclaimFC (money)
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from .clients.money import MoneyPartitionClient
from .clients.partition import PartitionClient
from .exceptions import ValidationError
from .predicates import new_p2pkh_proof_generator, p2pkh_predicate, public_key_hash
from .tx.attributes import LockReason
from .tx.builder import DEFAULT_MAX_FEE
from .tx.order import TxRecordProof
from .unit_id import new_fee_credit_record_id
from .units.bill import Bill
from .units.fee_credit_record import FeeCreditRecord

# Rounds after which an unused transferFC can no longer be added
TRANSFER_FC_LATEST_ADDITION_TIME = 65536
TX_TIMEOUT_ROUNDS = 10
MINIMUM_FEE_AMOUNT = 4 * DEFAULT_MAX_FEE


def _fee_sum(proofs) -> int:
    return sum(p.actual_fee for p in proofs if p is not None)


@dataclass
class AddFeeProofs:
    """Proofs of one add fee credit chain."""
    transfer_fc: TxRecordProof
    add_fc: TxRecordProof
    lock_fc: Optional[TxRecordProof] = None

    @property
    def fees(self) -> int:
        return _fee_sum([self.lock_fc, self.transfer_fc, self.add_fc])


@dataclass
class ReclaimFeeProofs:
    """Proofs of one reclaim fee credit chain."""
    close_fc: TxRecordProof
    reclaim_fc: TxRecordProof
    lock: Optional[TxRecordProof] = None

    @property
    def fees(self) -> int:
        return _fee_sum([self.lock, self.close_fc, self.reclaim_fc])


@dataclass
class AddFeeResult:
    proofs: List[AddFeeProofs] = field(default_factory=list)

    @property
    def fees(self) -> int:
        return sum(p.fees for p in self.proofs)


class FeeManager:
    """
    Moves value between money partition bills and the fee credit record of
    a target partition.

    The target partition may be the money partition itself.
    """

    def __init__(
        self,
        money_client: MoneyPartitionClient,
        target_client: PartitionClient,
        signer,
        tx_timeout: int = TX_TIMEOUT_ROUNDS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the fee manager

        Args:
            money_client: Client of the money partition holding the bills
            target_client: Client of the partition receiving fee credit
            signer: Object implementing the ``Signer`` protocol
            tx_timeout: Transaction timeout in rounds after the current round
            logger: Optional logger instance
        """
        self.money_client = money_client
        self.target_client = target_client
        self.signer = signer
        self.tx_timeout = tx_timeout
        self.logger = logger or logging.getLogger(__name__)

        self.owner_id = public_key_hash(signer.public_key)
        self.owner_predicate = p2pkh_predicate(self.owner_id)
        self._proof = new_p2pkh_proof_generator(signer)

    def _money_timeout(self) -> int:
        return self.money_client.get_round_number() + self.tx_timeout

    def _target_timeout(self) -> int:
        return self.target_client.get_round_number() + self.tx_timeout

    def get_fee_credit(self) -> Optional[FeeCreditRecord]:
        """Fee credit record of the signer on the target partition."""
        return self.target_client.get_fee_credit_record_by_owner_id(self.owner_id)

    def add_fee_credit(
        self,
        amount: int,
        disable_locking: bool = False,
        cancel: Optional[threading.Event] = None
    ) -> AddFeeResult:
        """
        Add ``amount`` of fee credit on the target partition.

        The amount is taken from the unlocked bills of the signer, largest
        first, one transfer chain per bill.

        Args:
            amount: Fee credit to add
            disable_locking: Do not lock the fee credit record first
            cancel: Optional event that stops waiting for confirmations

        Raises:
            ValidationError: If the amount is invalid, the record is locked
                or the bills do not cover the amount
        """
        if amount < MINIMUM_FEE_AMOUNT:
            raise ValidationError(f"minimum fee credit amount to add is {MINIMUM_FEE_AMOUNT}")
        fcr = self.get_fee_credit()
        if fcr is not None and fcr.lock_status != 0:
            raise ValidationError("fee credit record is locked")

        bills = self.money_client.get_bills(self.owner_id, cancel=cancel)
        if not bills:
            raise ValidationError("wallet does not contain any bills")
        bills = [b for b in bills if b.lock_status == 0 and b.value >= MINIMUM_FEE_AMOUNT]
        bills.sort(key=lambda b: b.value, reverse=True)
        if sum(b.value for b in bills) < amount:
            raise ValidationError("insufficient balance for transaction")

        result = AddFeeResult()
        transferred = 0
        for bill in bills:
            if transferred >= amount:
                break
            bill_amount = min(bill.value, amount - transferred)
            transferred += bill_amount
            proofs = self._add_fee_credit_from_bill(bill, bill_amount, disable_locking, cancel)
            result.proofs.append(proofs)
        self.logger.info(f"Added fee credit {amount}, paid fees {result.fees}")
        return result

    def _add_fee_credit_from_bill(
        self,
        bill: Bill,
        amount: int,
        disable_locking: bool,
        cancel: Optional[threading.Event]
    ) -> AddFeeProofs:
        round_number = self.money_client.get_round_number()
        latest_addition_time = round_number + TRANSFER_FC_LATEST_ADDITION_TIME

        fcr = self.get_fee_credit()
        lock_proof = None
        if fcr is None:
            fcr_id = new_fee_credit_record_id(
                self.owner_predicate, latest_addition_time, self.target_client.fee_credit_record_unit_type
            )
            fcr = FeeCreditRecord(
                network_id=self.target_client.network_id,
                partition_id=self.target_client.partition_id,
                id=fcr_id,
            )
        elif not disable_locking:
            self.logger.info(f"Locking fee credit record {fcr.id.hex()}")
            lock_tx = fcr.lock(
                LockReason.ADD_FEES,
                timeout=self._target_timeout(),
                fee_credit_record_id=fcr.id,
                owner_proof=self._proof,
                fee_proof=self._proof,
            )
            lock_proof = self.target_client.confirm_transaction(lock_tx, cancel=cancel)
            fcr.increase_counter()

        self.logger.info(f"Sending transfer fee credit transaction: bill={bill.id.hex()}, amount={amount}")
        transfer_tx = bill.transfer_to_fee_credit(
            fcr,
            amount,
            latest_addition_time,
            timeout=round_number + self.tx_timeout,
            owner_proof=self._proof,
        )
        transfer_proof = self.money_client.confirm_transaction(transfer_tx, cancel=cancel)

        self.logger.info(f"Sending add fee credit transaction: record={fcr.id.hex()}")
        add_tx = fcr.add_fee_credit(
            self.owner_predicate,
            transfer_proof,
            timeout=self._target_timeout(),
            owner_proof=self._proof,
        )
        add_proof = self.target_client.confirm_transaction(add_tx, cancel=cancel)
        return AddFeeProofs(transfer_fc=transfer_proof, add_fc=add_proof, lock_fc=lock_proof)

    def reclaim_fee_credit(
        self,
        disable_locking: bool = False,
        cancel: Optional[threading.Event] = None
    ) -> ReclaimFeeProofs:
        """
        Return the whole fee credit of the target partition to the largest
        unlocked bill of the signer.

        Raises:
            ValidationError: If there is nothing to reclaim or no bill to
                receive it
        """
        fcr = self.get_fee_credit()
        if fcr is None or fcr.balance < MINIMUM_FEE_AMOUNT:
            raise ValidationError("insufficient fee credit balance")
        if fcr.lock_status != 0:
            raise ValidationError("fee credit record is locked")

        bills = [b for b in self.money_client.get_bills(self.owner_id, cancel=cancel) if b.lock_status == 0]
        if not bills:
            raise ValidationError("wallet must have a source bill to which to add reclaimed fee credits")
        target_bill = max(bills, key=lambda b: b.value)

        lock_proof = None
        if not disable_locking:
            money_fcr = self.money_client.get_fee_credit_record_by_owner_id(self.owner_id)
            if money_fcr is None:
                raise ValidationError("fee credit record of the money partition is required to lock the target bill")
            self.logger.info(f"Locking target bill {target_bill.id.hex()}")
            lock_tx = target_bill.lock(
                LockReason.RECLAIM_FEES,
                timeout=self._money_timeout(),
                fee_credit_record_id=money_fcr.id,
                owner_proof=self._proof,
                fee_proof=self._proof,
            )
            lock_proof = self.money_client.confirm_transaction(lock_tx, cancel=cancel)
            target_bill.increase_counter()

        self.logger.info(f"Sending close fee credit transaction: record={fcr.id.hex()}")
        close_tx = fcr.close_fee_credit(
            target_bill,
            timeout=self._target_timeout(),
            owner_proof=self._proof,
        )
        close_proof = self.target_client.confirm_transaction(close_tx, cancel=cancel)

        self.logger.info(f"Sending reclaim fee credit transaction: bill={target_bill.id.hex()}")
        reclaim_tx = target_bill.reclaim_from_fee_credit(
            close_proof,
            timeout=self._money_timeout(),
            owner_proof=self._proof,
        )
        reclaim_proof = self.money_client.confirm_transaction(reclaim_tx, cancel=cancel)
        return ReclaimFeeProofs(close_fc=close_proof, reclaim_fc=reclaim_proof, lock=lock_proof)

    def lock_fee_credit(self, lock_status: int, cancel: Optional[threading.Event] = None) -> TxRecordProof:
        """
        Lock the fee credit record of the target partition.

        Raises:
            ValidationError: If the record is missing, too small or already locked
        """
        fcr = self.get_fee_credit()
        if fcr is None:
            raise ValidationError("fee credit record not found")
        if fcr.balance < 2 * DEFAULT_MAX_FEE:
            raise ValidationError("not enough fee credit in wallet")
        if fcr.lock_status != 0:
            raise ValidationError("fee credit record is already locked")
        tx = fcr.lock(
            lock_status,
            timeout=self._target_timeout(),
            fee_credit_record_id=fcr.id,
            owner_proof=self._proof,
            fee_proof=self._proof,
        )
        return self.target_client.confirm_transaction(tx, cancel=cancel)

    def unlock_fee_credit(self, cancel: Optional[threading.Event] = None) -> TxRecordProof:
        """
        Unlock the fee credit record of the target partition.

        Raises:
            ValidationError: If the record is missing or not locked
        """
        fcr = self.get_fee_credit()
        if fcr is None:
            raise ValidationError("fee credit record not found")
        if fcr.lock_status == 0:
            raise ValidationError("fee credit record is already unlocked")
        tx = fcr.unlock(
            timeout=self._target_timeout(),
            fee_credit_record_id=fcr.id,
            owner_proof=self._proof,
            fee_proof=self._proof,
        )
        return self.target_client.confirm_transaction(tx, cancel=cancel)
