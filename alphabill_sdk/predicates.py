"""
Standard predicate templates.

A template predicate is the CBOR array ``[tag, code, params]`` where tag 0
selects the built-in templates and ``code`` is the one byte template id.
"""
import hashlib
from typing import Optional

from .encoding import decode_cbor, encode_cbor
from .exceptions import EncodingError
from .tx.builder import ProofGenerator

TEMPLATE_TAG = 0
ALWAYS_FALSE_ID = b"\x00"
ALWAYS_TRUE_ID = b"\x01"
P2PKH256_ID = b"\x02"


def always_true_predicate() -> bytes:
    return encode_cbor([TEMPLATE_TAG, ALWAYS_TRUE_ID, None])


def always_false_predicate() -> bytes:
    return encode_cbor([TEMPLATE_TAG, ALWAYS_FALSE_ID, None])


def public_key_hash(public_key: bytes) -> bytes:
    return hashlib.sha256(public_key).digest()


def p2pkh_predicate(pub_key_hash: bytes) -> bytes:
    """Pay-to-public-key-hash predicate for a SHA-256 public key hash."""
    return encode_cbor([TEMPLATE_TAG, P2PKH256_ID, pub_key_hash])


def p2pkh_predicate_from_public_key(public_key: bytes) -> bytes:
    return p2pkh_predicate(public_key_hash(public_key))


def extract_public_key_hash(predicate: bytes) -> Optional[bytes]:
    """
    Return the key hash of a P2PKH predicate, or None for other predicates.
    """
    try:
        value = decode_cbor(predicate)
    except EncodingError:
        return None
    if (
        isinstance(value, list)
        and len(value) == 3
        and value[0] == TEMPLATE_TAG
        and value[1] == P2PKH256_ID
        and isinstance(value[2], bytes)
    ):
        return value[2]
    return None


def p2pkh_signature_bytes(signature: bytes, public_key: bytes) -> bytes:
    """Owner proof that satisfies a P2PKH predicate."""
    return encode_cbor([signature, public_key])


def new_p2pkh_proof_generator(signer) -> ProofGenerator:
    """
    Create a proof generator producing P2PKH signatures with ``signer``.

    Args:
        signer: Object implementing the ``Signer`` protocol

    Returns:
        Function from signing bytes to P2PKH proof bytes
    """
    def generate(sig_bytes: bytes) -> bytes:
        return p2pkh_signature_bytes(signer.sign_bytes(sig_bytes), signer.public_key)

    return generate
