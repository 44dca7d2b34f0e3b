"""
Alphabill SDK - client library for building, signing, submitting and
confirming transactions on Alphabill partitions.
"""
from .clients import (
    EvmPartitionClient, MoneyPartitionClient, OrchestrationPartitionClient,
    PartitionClient, TokensPartitionClient
)
from .config import NetworkConfig
from .dust import DustCollectionResult, DustCollector
from .exceptions import (
    AlphabillError, CancelledError, ConfirmationCancelledError,
    ConfirmationTimeoutError, EncodingError, NotFoundError,
    PartitionTypeMismatchError, RpcError, SigningError,
    TransactionFailedError, ValidationError
)
from .fees import FeeManager
from .predicates import (
    always_true_predicate, new_p2pkh_proof_generator, p2pkh_predicate,
    p2pkh_predicate_from_public_key, public_key_hash
)
from .signer import LocalSigner, Signer
from .tx import (
    StateLock, StateUnlockKind, TransactionOrder, TxOptions, TxRecordProof,
    TxStatus, tx_options_with_defaults
)
from .txsubmitter import SubmissionState, TxSubmission, TxSubmissionBatch
from .units import (
    Bill, FeeCreditRecord, FungibleToken, FungibleTokenType, NonFungibleToken,
    NonFungibleTokenType, UnlockCounterPolicy
)
from .version import __version__

__all__ = [
    "EvmPartitionClient",
    "MoneyPartitionClient",
    "OrchestrationPartitionClient",
    "PartitionClient",
    "TokensPartitionClient",
    "NetworkConfig",
    "DustCollectionResult",
    "DustCollector",
    "AlphabillError",
    "CancelledError",
    "ConfirmationCancelledError",
    "ConfirmationTimeoutError",
    "EncodingError",
    "NotFoundError",
    "PartitionTypeMismatchError",
    "RpcError",
    "SigningError",
    "TransactionFailedError",
    "ValidationError",
    "FeeManager",
    "always_true_predicate",
    "new_p2pkh_proof_generator",
    "p2pkh_predicate",
    "p2pkh_predicate_from_public_key",
    "public_key_hash",
    "LocalSigner",
    "Signer",
    "StateLock",
    "StateUnlockKind",
    "TransactionOrder",
    "TxOptions",
    "TxRecordProof",
    "TxStatus",
    "tx_options_with_defaults",
    "SubmissionState",
    "TxSubmission",
    "TxSubmissionBatch",
    "Bill",
    "FeeCreditRecord",
    "FungibleToken",
    "FungibleTokenType",
    "NonFungibleToken",
    "NonFungibleTokenType",
    "UnlockCounterPolicy",
    "__version__",
]
