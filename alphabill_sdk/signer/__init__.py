"""
Signer interfaces for the Alphabill SDK.
"""
from typing import Protocol

from .local import LocalSigner, verify_bytes


class Signer(Protocol):
    """Protocol for custom signers"""
    public_key: bytes
    address: str

    def sign_bytes(self, data: bytes) -> bytes:
        """Sign data and return a 65 byte recoverable signature"""
        ...


__all__ = ["Signer", "LocalSigner", "verify_bytes"]
