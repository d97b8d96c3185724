"""
Helpers used by RPC and wallet layers to turn field maps into broadcastable
payloads and transaction ids.
"""
import logging
from typing import Optional

from .config import Config
from .core import Transaction
from .errors import InvalidSignatureError, UnsignedTransactionError
from .utils.encoding import strip_hex_prefix, to_hex

logger = logging.getLogger(__name__)

SIGNATURE_HEX_LENGTH = 130


def build_unsigned_transaction(fields: dict, config: Optional[Config] = None) -> Transaction:
    """
    Builds an unsigned transaction, filling in the configured network id and
    version when the caller leaves them out. Shard keys are required.
    """
    config = config or Config.default()
    tx_fields = dict(fields)
    tx_fields.setdefault("networkId", config.client.network_id)
    tx_fields.setdefault("version", config.client.version)
    for name in ("v", "r", "s"):
        tx_fields.pop(name, None)
    tx = Transaction(tx_fields, fee_schedule=config.fees)
    logger.debug(f"Built unsigned transaction {tx!r}")
    return tx


def get_encoded_signed_payload(tx: Transaction) -> str:
    """0x hex of the full encoding, ready for sendRawTransaction."""
    if not tx.is_signed():
        raise UnsignedTransactionError("cannot encode an unsigned tx for broadcast")
    return to_hex(tx.serialize())


def get_canonical_transaction_id(tx: Transaction) -> str:
    return to_hex(tx.canonical_id())


def decode_signature(signature: str) -> dict:
    """
    Splits a 65-byte r || s || v hex signature (as returned by wallets) into
    its components.
    """
    digits = strip_hex_prefix(signature)
    if len(digits) != SIGNATURE_HEX_LENGTH:
        raise InvalidSignatureError(
            "Signature must be 65 bytes", {"length": len(digits) // 2}
        )
    try:
        return {
            "r": bytes.fromhex(digits[0:64]),
            "s": bytes.fromhex(digits[64:128]),
            "v": bytes.fromhex(digits[128:130]),
        }
    except ValueError as e:
        raise InvalidSignatureError(f"Signature is not valid hex: {e}") from e
