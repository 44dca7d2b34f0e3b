"""
Transaction structures and construction.
"""
from .builder import (
    DEFAULT_MAX_FEE, ProofGenerator, TxOptions, build_transaction,
    generate_and_set_proofs, new_payload, tx_options_with_defaults
)
from .order import (
    Block, ClientMetadata, Payload, ServerMetadata, StateLock, StateUnlockKind,
    TransactionOrder, TransactionRecord, TxProof, TxRecordProof, TxStatus,
    decode_transaction_order, new_transaction_order
)

__all__ = [
    "DEFAULT_MAX_FEE", "ProofGenerator", "TxOptions", "build_transaction",
    "generate_and_set_proofs", "new_payload", "tx_options_with_defaults",
    "Block", "ClientMetadata", "Payload", "ServerMetadata", "StateLock",
    "StateUnlockKind", "TransactionOrder", "TransactionRecord", "TxProof",
    "TxRecordProof", "TxStatus", "decode_transaction_order", "new_transaction_order",
]
