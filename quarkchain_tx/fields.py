"""
Transaction field schema and the canonical RLP codec built on it.
"""
from dataclasses import dataclass
from typing import Optional

import rlp
from rlp.exceptions import RLPException

from .errors import (
    FieldError,
    FieldLengthError,
    FieldValueError,
    MalformedEncodingError,
    MissingFieldError,
)
from .utils.encoding import strip_zeros, to_bytes


@dataclass(frozen=True)
class Field:
    """Static description of one transaction field."""
    name: str
    attr: str
    length: Optional[int] = None
    allow_less: bool = False
    allow_zero: bool = False
    default: Optional[bytes] = b''
    alias: Optional[str] = None


TX_FIELDS: tuple[Field, ...] = (
    Field('nonce', 'nonce', length=32, allow_less=True),
    Field('gasPrice', 'gas_price', length=32, allow_less=True),
    Field('gasLimit', 'gas_limit', length=32, allow_less=True, alias='gas'),
    Field('to', 'to', length=20, allow_zero=True),
    Field('value', 'value', length=32, allow_less=True),
    Field('data', 'data', allow_zero=True, alias='input'),
    Field('networkId', 'network_id', length=32, allow_less=True),
    Field('fromFullShardKey', 'from_full_shard_key', length=4, default=None),
    Field('toFullShardKey', 'to_full_shard_key', length=4, default=None),
    Field('gasTokenId', 'gas_token_id', length=8, allow_less=True),
    Field('transferTokenId', 'transfer_token_id', length=8, allow_less=True),
    Field('version', 'version', length=32, allow_less=True),
    Field('v', 'v', allow_zero=True, default=b'\x1c'),
    Field('r', 'r', length=32, allow_less=True, allow_zero=True),
    Field('s', 's', length=32, allow_less=True, allow_zero=True),
)

FIELD_NAMES = tuple(f.name for f in TX_FIELDS)
FIELD_INDEX = {f.name: i for i, f in enumerate(TX_FIELDS)}

# nonce .. transferTokenId; version and the signature are not signed
SIGNING_FIELD_COUNT = 11


def normalize_field(field: Field, value) -> bytes:
    """Convert a value to bytes and check it against the field descriptor."""
    try:
        data = to_bytes(value)
    except (TypeError, ValueError) as e:
        raise FieldValueError(f"Invalid value for field {field.name}: {e}", {"field": field.name}) from e

    if data == b'\x00' and not field.allow_zero:
        data = b''
    if not data and field.default is None:
        raise MissingFieldError(field.name)

    if field.allow_less and field.length:
        data = strip_zeros(data)
        if len(data) > field.length:
            raise FieldLengthError(field.name, field.length, len(data), exact=False)
    elif field.length and not (field.allow_zero and not data):
        if len(data) != field.length:
            raise FieldLengthError(field.name, field.length, len(data), exact=True)
    return data


def normalize_fields(values: dict) -> list[bytes]:
    """
    Build the ordered list of raw field values from a mapping.

    Keys may be field names or aliases; unknown keys are ignored. Fields
    without a default must be present.
    """
    raw = []
    for field in TX_FIELDS:
        if field.name in values:
            value = values[field.name]
        elif field.alias and field.alias in values:
            value = values[field.alias]
        elif field.default is not None:
            value = field.default
        else:
            raise MissingFieldError(field.name)
        raw.append(normalize_field(field, value))
    return raw


def normalize_list(values: list) -> list[bytes]:
    """Normalize a positional list of all field values."""
    if len(values) != len(TX_FIELDS):
        raise MalformedEncodingError(
            f"wrong number of fields in data: expected {len(TX_FIELDS)}, got {len(values)}"
        )
    return [normalize_field(field, value) for field, value in zip(TX_FIELDS, values)]


def encode_fields(values: list[bytes]) -> bytes:
    """RLP-encode field values in schema order after checking each one."""
    if len(values) > len(TX_FIELDS):
        raise MalformedEncodingError(f"Too many fields to encode: {len(values)}")
    checked = []
    for field, value in zip(TX_FIELDS, values):
        if value is None:
            raise MissingFieldError(field.name)
        checked.append(normalize_field(field, value))
    return rlp.encode(checked)


def decode_fields(payload: bytes) -> list[bytes]:
    """Inverse of encode_fields for a complete 15-item transaction."""
    try:
        items = rlp.decode(payload)
    except RLPException as e:
        raise MalformedEncodingError(f"Malformed RLP: {e}") from e

    if not isinstance(items, list):
        raise MalformedEncodingError("Transaction encoding must be an RLP list")
    if any(not isinstance(item, bytes) for item in items):
        raise MalformedEncodingError("Transaction fields must be byte strings")
    if len(items) != len(TX_FIELDS):
        raise MalformedEncodingError(
            f"wrong number of fields in data: expected {len(TX_FIELDS)}, got {len(items)}"
        )

    try:
        return [normalize_field(field, item) for field, item in zip(TX_FIELDS, items)]
    except FieldError as e:
        raise MalformedEncodingError(f"Decoded field out of bounds: {e}", e.details) from e
