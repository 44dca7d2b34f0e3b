"""
Exceptions raised by the Alphabill SDK.
"""
from typing import Any, Optional


class AlphabillError(Exception):
    """Base exception for all Alphabill SDK errors."""
    pass


class ValidationError(AlphabillError, ValueError):
    """Raised when a transaction cannot be built from the given input.

    Detected locally, before anything is encoded or sent.
    """
    pass


class EncodingError(AlphabillError):
    """Raised when a value cannot be CBOR encoded or decoded."""
    pass


class SigningError(AlphabillError):
    """Raised when a proof generator fails to produce a signature."""
    pass


class NotFoundError(AlphabillError):
    """Raised when a unit required to complete an operation does not exist."""
    pass


class RpcError(AlphabillError):
    """Raised when a JSON-RPC call fails or the node returns an error object."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        code: Optional[int] = None,
        data: Any = None
    ):
        self.method = method
        self.code = code
        self.data = data
        super().__init__(message)


class PartitionTypeMismatchError(AlphabillError):
    """Raised when the RPC node serves a different partition type than expected."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected node partition type {expected:x} but it is {actual:x}")


class ConfirmationTimeoutError(AlphabillError):
    """Raised when the timeout round is reached before a proof appears."""

    def __init__(self, round_number: int, timeout: int, tx_hash: Optional[bytes] = None):
        self.round_number = round_number
        self.timeout = timeout
        self.tx_hash = tx_hash
        tx = f" of transaction {tx_hash.hex()}" if tx_hash else ""
        super().__init__(
            f"confirmation timeout: round {round_number} reached timeout {timeout}{tx}"
        )


class CancelledError(AlphabillError):
    """Raised when the caller cancels a blocking operation."""
    pass


class ConfirmationCancelledError(CancelledError):
    """Raised when the caller cancels an in-flight confirmation."""
    pass


class TransactionFailedError(AlphabillError):
    """Raised when a confirmed transaction was not executed successfully."""

    def __init__(self, message: str, proof: Any = None, status: Optional[int] = None):
        self.proof = proof
        self.status = status
        super().__init__(message)
