"""
Core cryptographic functions for transaction signing.

secp256k1 ECDSA with recoverable signatures, keccak-256 hashing and
Ethereum-style address derivation.
"""
import logging
from Crypto.Hash import keccak
from coincurve import PrivateKey, PublicKey

from .errors import InvalidSignatureError
from .utils.encoding import (
    big_endian_to_int,
    strip_zeros,
    to_bytes,
)

logger = logging.getLogger(__name__)

SECP256K1_N = 0xfffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141
# secp256k1n/2
N_DIV_2 = 0x7fffffffffffffffffffffffffffffff5d576e7357a4501ddfe92f46681b20a0

RECOVERY_OFFSET = 27


def generate_hash(data: bytes) -> bytes:
    """Generates a Keccak-256 hash."""
    return keccak.new(digest_bits=256, data=data).digest()


def generate_key_pair() -> tuple[PrivateKey, PublicKey]:
    """Generates a secp256k1 private/public key pair."""
    private_key = PrivateKey()
    return private_key, private_key.public_key


def load_private_key(private_key) -> PrivateKey:
    """Accepts a PrivateKey, 32 raw bytes or a 0x hex string."""
    if isinstance(private_key, PrivateKey):
        return private_key
    secret = to_bytes(private_key)
    if len(secret) != 32:
        raise ValueError(f"Private key must be 32 bytes, got {len(secret)}")
    return PrivateKey(secret)


def private_key_to_public_key(private_key) -> bytes:
    """Returns the 64-byte uncompressed public key (no 0x04 prefix)."""
    return load_private_key(private_key).public_key.format(compressed=False)[1:]


def public_key_to_address(public_key: bytes) -> bytes:
    """Derives the 20-byte address from a 64- or 65-byte public key."""
    if len(public_key) == 65 and public_key[0] == 4:
        public_key = public_key[1:]
    if len(public_key) != 64:
        raise ValueError(f"Public key must be 64 bytes, got {len(public_key)}")
    return generate_hash(public_key)[-20:]


def is_low_s(s) -> bool:
    """Homestead rule: s must not exceed secp256k1n/2."""
    if isinstance(s, (bytes, bytearray)):
        s = big_endian_to_int(s)
    return s <= N_DIV_2


def ecsign(msg_hash: bytes, private_key) -> tuple[int, bytes, bytes]:
    """
    Signs a 32-byte hash.

    Returns (v, r, s) with v = recovery id + 27 and r, s as minimal
    big-endian bytes. libsecp256k1 only produces low-s signatures.
    """
    if len(msg_hash) != 32:
        raise ValueError(f"Message hash must be 32 bytes, got {len(msg_hash)}")
    signature = load_private_key(private_key).sign_recoverable(msg_hash, hasher=None)
    r, s, recovery_id = signature[:32], signature[32:64], signature[64]
    return recovery_id + RECOVERY_OFFSET, strip_zeros(r), strip_zeros(s)


def calculate_recovery_id(v: int, chain_id=None) -> int:
    if chain_id:
        return v - (2 * chain_id + 35)
    return v - RECOVERY_OFFSET


def ecrecover(msg_hash: bytes, v: int, r: bytes, s: bytes, chain_id=None) -> bytes:
    """
    Recovers the 64-byte public key that produced (v, r, s) over msg_hash.

    Raises InvalidSignatureError on malformed components or when no key
    can be recovered.
    """
    recovery_id = calculate_recovery_id(v, chain_id)
    if recovery_id not in (0, 1):
        raise InvalidSignatureError("Invalid signature v value", {"v": v})
    if not r or not s or len(r) > 32 or len(s) > 32:
        raise InvalidSignatureError("Invalid signature r or s length")
    if len(msg_hash) != 32:
        raise InvalidSignatureError("Message hash must be 32 bytes")

    signature = r.rjust(32, b'\x00') + s.rjust(32, b'\x00') + bytes([recovery_id])
    try:
        public_key = PublicKey.from_signature_and_message(signature, msg_hash, hasher=None)
    except ValueError as e:
        raise InvalidSignatureError(f"Public key recovery failed: {e}") from e
    return public_key.format(compressed=False)[1:]


def verify_signature(public_key: bytes, msg_hash: bytes, v: int, r: bytes, s: bytes) -> bool:
    """Verifies (v, r, s) against a known 64-byte public key."""
    if not is_low_s(s):
        return False
    try:
        return ecrecover(msg_hash, v, r, s) == public_key
    except InvalidSignatureError as e:
        logger.debug(f"Signature verification failed: {e}")
        return False

