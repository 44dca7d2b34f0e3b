"""
Payload construction and proof generation.

Building a transaction is a fixed pipeline:

1. encode the attributes into a payload
2. sign the payload with each extra proof generator and write the
   signatures into a copy of the attributes, which is re-encoded
3. sign the order with the state unlock proof generator and prefix the
   signature with the unlock kind
4. sign the authorization bytes with the owner proof generator and wrap
   the signature into the auth proof record of the transaction type
5. sign the fee proof bytes with the fee proof generator
"""
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..encoding import CborRecord
from ..exceptions import EncodingError, SigningError
from .attributes import OwnerAuthProof
from .order import (
    ClientMetadata, Payload, StateLock, StateUnlockKind, TransactionOrder,
    new_transaction_order
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_FEE = 10

# Turns signing bytes into proof bytes
ProofGenerator = Callable[[bytes], bytes]


@dataclass
class TxOptions:
    """Per-transaction settings; see ``tx_options_with_defaults``."""
    timeout: int = 0
    fee_credit_record_id: Optional[bytes] = None
    max_fee: int = DEFAULT_MAX_FEE
    reference_number: Optional[bytes] = None
    state_lock: Optional[StateLock] = None
    owner_proof: Optional[ProofGenerator] = None
    fee_proof: Optional[ProofGenerator] = None
    extra_proofs: List[ProofGenerator] = field(default_factory=list)
    state_unlock_proof: Optional[ProofGenerator] = None
    state_unlock_kind: StateUnlockKind = StateUnlockKind.EXECUTE


def tx_options_with_defaults(**overrides) -> TxOptions:
    """
    Create transaction options: defaults first, then each override.

    Args:
        **overrides: Any ``TxOptions`` field, e.g. ``timeout=120`` or
            ``owner_proof=generator``

    Raises:
        TypeError: If an override does not name a ``TxOptions`` field
    """
    opts = TxOptions()
    names = {f.name for f in dataclasses.fields(TxOptions)}
    for name, value in overrides.items():
        if name not in names:
            raise TypeError(f"unknown transaction option: {name}")
        setattr(opts, name, value)
    return opts


def new_payload(
    network_id: int,
    partition_id: int,
    unit_id: Optional[bytes],
    tx_type: int,
    attributes: CborRecord,
    opts: TxOptions
) -> Payload:
    """
    Create a payload with encoded attributes and client metadata.

    Raises:
        EncodingError: If the attributes cannot be encoded
    """
    try:
        attr_bytes = attributes.encode()
    except EncodingError as e:
        raise EncodingError(
            f"failed to encode {type(attributes).__name__} for transaction type {tx_type}: {e}"
        ) from e
    return Payload(
        network_id=network_id,
        partition_id=partition_id,
        unit_id=unit_id,
        type=tx_type,
        attributes=attr_bytes,
        state_lock=opts.state_lock,
        client_metadata=ClientMetadata(
            timeout=opts.timeout,
            max_transaction_fee=opts.max_fee,
            fee_credit_record_id=opts.fee_credit_record_id,
            reference_number=opts.reference_number,
        ),
    )


def _generate(generator: ProofGenerator, sig_bytes: bytes, kind: str) -> bytes:
    try:
        return generator(sig_bytes)
    except SigningError:
        raise
    except Exception as e:
        raise SigningError(f"failed to generate {kind} proof: {e}") from e


def generate_and_set_proofs(
    order: TransactionOrder,
    attributes: Optional[CborRecord],
    opts: TxOptions
) -> TransactionOrder:
    """
    Fill in the extra, state unlock, owner and fee proofs of ``order``.

    The given attributes are not modified; when extra proofs are produced
    they are written into a copy which replaces the payload attributes.

    Returns:
        A new transaction order carrying the proofs

    Raises:
        SigningError: If a proof generator fails
        EncodingError: If the filled attributes cannot be encoded
    """
    proof_field = getattr(attributes, "proof_field", None)
    if opts.extra_proofs and proof_field:
        payload_bytes = order.payload_bytes()
        proofs = [_generate(g, payload_bytes, "extra") for g in opts.extra_proofs]
        filled = dataclasses.replace(attributes, **{proof_field: proofs})
        order = order.with_attributes(filled)
        logger.debug(f"Filled {len(proofs)} extra proofs into {type(attributes).__name__}.{proof_field}")

    if opts.state_unlock_proof is not None:
        unlock_proof = _generate(opts.state_unlock_proof, order.state_lock_proof_sig_bytes(), "state unlock")
        order = order.with_state_unlock_proof(opts.state_unlock_kind, unlock_proof)

    if opts.owner_proof is not None:
        owner_proof = _generate(opts.owner_proof, order.auth_proof_sig_bytes(), "owner")
        auth_proof_cls = getattr(attributes, "auth_proof_cls", OwnerAuthProof)
        order = dataclasses.replace(order, auth_proof=auth_proof_cls(owner_proof).encode())

    if opts.fee_proof is not None:
        fee_proof = _generate(opts.fee_proof, order.fee_proof_sig_bytes(), "fee")
        order = dataclasses.replace(order, fee_proof=fee_proof)

    return order


def build_transaction(
    network_id: int,
    partition_id: int,
    unit_id: Optional[bytes],
    tx_type: int,
    attributes: CborRecord,
    opts: TxOptions
) -> TransactionOrder:
    """Create the payload and sign it in one step."""
    payload = new_payload(network_id, partition_id, unit_id, tx_type, attributes, opts)
    return generate_and_set_proofs(new_transaction_order(payload), attributes, opts)
