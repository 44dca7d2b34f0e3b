"""
In-memory secp256k1 signer.
"""
import hashlib
import os
from typing import Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError

from ..encoding import from_hex
from ..exceptions import SigningError


class LocalSigner:
    """
    Signs bytes with a private key held in memory.

    Signatures are 65 bytes (``r || s || v``) over the SHA-256 digest of
    the signed data.
    """

    def __init__(self, private_key: Union[str, bytes]):
        """
        Args:
            private_key: 32 byte key, raw or hex encoded (``0x`` optional)

        Raises:
            SigningError: If the key is not a valid secp256k1 private key
        """
        if isinstance(private_key, str):
            private_key = from_hex(private_key)
        try:
            self._key = keys.PrivateKey(private_key)
        except KeyValidationError as e:
            raise SigningError(f"invalid private key: {e}") from e

    @classmethod
    def generate(cls) -> "LocalSigner":
        return cls(os.urandom(32))

    @property
    def public_key(self) -> bytes:
        """Compressed 33 byte public key"""
        return self._key.public_key.to_compressed_bytes()

    @property
    def address(self) -> str:
        return self._key.public_key.to_checksum_address()

    def sign_bytes(self, data: bytes) -> bytes:
        digest = hashlib.sha256(data).digest()
        return self._key.sign_msg_hash(digest).to_bytes()


def verify_bytes(data: bytes, signature: bytes, public_key: bytes) -> bool:
    """
    Check a signature made by ``LocalSigner.sign_bytes``.

    Args:
        data: Signed data
        signature: 65 byte signature
        public_key: Compressed public key of the signer
    """
    try:
        sig = keys.Signature(signature_bytes=signature)
        pub = keys.PublicKey.from_compressed_bytes(public_key)
    except (BadSignature, KeyValidationError):
        return False
    return sig.verify_msg_hash(hashlib.sha256(data).digest(), pub)
