"""
QuarkChain transaction: an Ethereum-style transaction extended with shard keys
and token ids.
"""
import logging
from typing import Optional

from .config import DEFAULT_FEES, FeeSchedule
from .crypto import (
    ecrecover,
    ecsign,
    generate_hash,
    is_low_s,
    public_key_to_address,
)
from .errors import (
    InvalidSignatureError,
    MalformedEncodingError,
    UnsignedTransactionError,
)
from .fields import (
    FIELD_INDEX,
    SIGNING_FIELD_COUNT,
    TX_FIELDS,
    decode_fields,
    encode_fields,
    normalize_field,
    normalize_fields,
    normalize_list,
)
from .utils.encoding import (
    big_endian_to_int,
    encode_length_prefix,
    strip_zeros,
    to_bytes,
    to_hex,
)

logger = logging.getLogger(__name__)

EIP155_V_OFFSET = 35


def _payload_bytes(payload) -> bytes:
    try:
        return to_bytes(payload)
    except (TypeError, ValueError) as e:
        raise MalformedEncodingError(f"Invalid transaction payload: {e}") from e


class Transaction:
    """
    A transaction over the fixed field schema in quarkchain_tx.fields.

    Can be initialized with a mapping of field names (or aliases) to values,
    a list with one value per field, or an RLP payload as bytes or a 0x hex
    string. Values may be bytes, 0x hex strings or non-negative ints.

    Field values are exposed as read-only bytes attributes (``tx.nonce``,
    ``tx.gas_price``, ``tx.from_full_shard_key``, ...). The only mutation
    after construction is attaching a signature.
    """

    def __init__(self,
                 data=None,
                 chain_id: Optional[int] = None,
                 fee_schedule: FeeSchedule = DEFAULT_FEES):
        if data is None:
            data = {}
        if isinstance(data, str):
            data = _payload_bytes(data)

        if isinstance(data, (bytes, bytearray)):
            self._raw = decode_fields(bytes(data))
        elif isinstance(data, (list, tuple)):
            self._raw = normalize_list(list(data))
        elif isinstance(data, dict):
            self._raw = normalize_fields(data)
        else:
            raise TypeError(f"Cannot build a transaction from {type(data).__name__}")

        self.fee_schedule = fee_schedule
        self._sender_public_key: Optional[bytes] = None
        self._sender_address: Optional[bytes] = None

        sig_v = big_endian_to_int(self.v)
        derived_chain_id = max((sig_v - EIP155_V_OFFSET) // 2, 0)
        self._chain_id = derived_chain_id or chain_id or 0

    @classmethod
    def from_serialized(cls, payload, chain_id: Optional[int] = None):
        """Decodes an RLP payload (bytes or 0x hex string)."""
        return cls(_payload_bytes(payload), chain_id=chain_id)

    @classmethod
    def from_dict(cls, data: dict):
        """Creates a Transaction object from a dictionary."""
        return cls(data, chain_id=data.get("chainId"))

    def to_dict(self) -> dict:
        result = {field.name: to_hex(value) for field, value in zip(TX_FIELDS, self._raw)}
        result["chainId"] = self._chain_id
        return result

    def __repr__(self) -> str:
        state = "signed" if self.is_signed() else "unsigned"
        return f"Transaction(nonce={self.nonce.hex() or '0'}, {state})"

    @property
    def raw(self) -> list[bytes]:
        return list(self._raw)

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def is_signed(self) -> bool:
        return bool(self.r) and bool(self.s)

    def is_contract_creation(self) -> bool:
        """True if `to` is empty or the all-zero address."""
        return not strip_zeros(self.to)

    def serialize(self) -> bytes:
        """Canonical RLP encoding of all fields."""
        return encode_fields(self._raw)

    # ------------------------------------------------------------------ #
    # Hashes
    # ------------------------------------------------------------------ #

    def signing_hash(self) -> bytes:
        """Keccak of the fields up to transferTokenId. This is what gets signed."""
        return generate_hash(encode_fields(self._raw[:SIGNING_FIELD_COUNT]))

    def full_hash(self) -> bytes:
        """Keccak of the full encoding, signature included."""
        return generate_hash(self.serialize())

    def canonical_id(self) -> bytes:
        """
        The network-visible transaction id.

        Keccak over the full encoding wrapped in the 5-byte envelope from
        encode_length_prefix. Only defined for signed transactions.
        """
        if not self.is_signed():
            raise UnsignedTransactionError("cannot compute the canonical id of an unsigned tx")
        encoded = self.serialize()
        return generate_hash(encode_length_prefix(len(encoded)) + encoded)

    # ------------------------------------------------------------------ #
    # Signatures
    # ------------------------------------------------------------------ #

    def sign(self, private_key):
        """Signs the transaction in place."""
        v, r, s = ecsign(self.signing_hash(), private_key)
        self.apply_signature(v, r, s)

    def apply_signature(self, v, r, s):
        """Attaches an externally produced signature and drops cached sender data."""
        signature = {
            name: normalize_field(TX_FIELDS[FIELD_INDEX[name]], value)
            for name, value in (("v", v), ("r", r), ("s", s))
        }
        for name, value in signature.items():
            self._raw[FIELD_INDEX[name]] = value
        self._sender_public_key = None
        self._sender_address = None

    def verify_signature(self) -> bool:
        """Determines if the signature is valid, caching the sender key on success."""
        msg_hash = self.signing_hash()
        # All transaction signatures whose s-value is greater than secp256k1n/2 are considered invalid.
        if not is_low_s(self.s):
            logger.debug("Rejected high-s signature")
            return False

        v = big_endian_to_int(self.v)
        try:
            public_key = ecrecover(
                msg_hash, v, self.r, self.s,
                chain_id=self._chain_id if v >= EIP155_V_OFFSET else None,
            )
        except InvalidSignatureError as e:
            logger.debug(f"Signature recovery failed: {e}")
            return False

        self._sender_public_key = public_key
        return True

    def sender_public_key(self) -> bytes:
        """The 64-byte public key of the signer."""
        if self._sender_public_key is None and not self.verify_signature():
            raise InvalidSignatureError()
        return self._sender_public_key

    def sender_address(self) -> bytes:
        if self._sender_address is None:
            self._sender_address = public_key_to_address(self.sender_public_key())
        return self._sender_address

    # ------------------------------------------------------------------ #
    # Fees
    # ------------------------------------------------------------------ #

    def data_fee(self) -> int:
        """The amount of gas paid for the data in this tx."""
        zero_bytes = self.data.count(0)
        return (zero_bytes * self.fee_schedule.tx_data_zero_gas
                + (len(self.data) - zero_bytes) * self.fee_schedule.tx_data_non_zero_gas)

    def base_fee(self) -> int:
        """The minimum gas the tx must have (data fee + tx fee + creation fee)."""
        fee = self.data_fee() + self.fee_schedule.tx_gas
        if self.is_contract_creation():
            fee += self.fee_schedule.tx_creation
        return fee

    def upfront_cost(self) -> int:
        """The amount an account must hold for this transaction to be valid."""
        return (big_endian_to_int(self.gas_limit) * big_endian_to_int(self.gas_price)
                + big_endian_to_int(self.value))

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.verify_signature():
            errors.append("Invalid Signature")

        base_fee = self.base_fee()
        if base_fee > big_endian_to_int(self.gas_limit):
            errors.append(f"gas limit is too low. Need at least {base_fee}")
        return errors

    def validate(self, string_error: bool = False):
        """
        Checks the signature and that the gas limit covers the base fee.

        Returns a bool, or with string_error=True the space-joined list of
        problems ('' when valid).
        """
        errors = self.validation_errors()
        if errors:
            logger.info(f"Transaction {self.full_hash().hex()} failed validation: {errors}")
        if not string_error:
            return not errors
        return " ".join(errors)


def _field_property(index: int, name: str) -> property:
    def getter(self) -> bytes:
        return self._raw[index]
    getter.__doc__ = f"Raw bytes of the {name} field."
    return property(getter)


for _index, _field in enumerate(TX_FIELDS):
    setattr(Transaction, _field.attr, _field_property(_index, _field.name))
