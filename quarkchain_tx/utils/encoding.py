"""
Byte and hex conversions shared by the field schema and transaction codec.

All integers are BIG-ENDIAN and minimal (no leading zero bytes) unless noted.
"""

ENVELOPE_TAG = b'\x00'
ENVELOPE_LENGTH_WIDTH = 4


def is_hex_prefixed(value: str) -> bool:
    return value[:2] in ('0x', '0X')


def strip_hex_prefix(value: str) -> str:
    """Remove a leading 0x, if any."""
    return value[2:] if is_hex_prefixed(value) else value


def int_to_big_endian(value: int) -> bytes:
    """Minimal big-endian encoding. Zero encodes as a single 0x00 byte."""
    if value < 0:
        raise ValueError(f"Cannot encode negative integer {value}")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), 'big')


def big_endian_to_int(data: bytes) -> int:
    return int.from_bytes(data, 'big')


def strip_zeros(data: bytes) -> bytes:
    """Drop leading zero bytes."""
    return data.lstrip(b'\x00')


def to_bytes(value) -> bytes:
    """
    Convert a field value to raw bytes.

    Accepts bytes, a 0x-prefixed hex string, a non-negative int or None.
    Raises ValueError/TypeError for anything else.
    """
    if value is None:
        return b''
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid field values")
    if isinstance(value, int):
        return int_to_big_endian(value)
    if isinstance(value, str):
        if not is_hex_prefixed(value):
            raise ValueError(f"Cannot convert string {value!r} to bytes: missing 0x prefix")
        digits = value[2:]
        if len(digits) % 2:
            digits = '0' + digits
        return bytes.fromhex(digits)
    raise TypeError(f"Cannot convert {type(value).__name__} to bytes")


def to_hex(data: bytes) -> str:
    return '0x' + data.hex()


def encode_length_prefix(length: int) -> bytes:
    """
    Build the 5-byte envelope header used for canonical transaction ids.

    Layout: byte 0 is a zero tag, bytes 1-4 are the payload length,
    big-endian. Lengths that do not fit in 4 bytes are rejected.
    """
    if length < 0 or length >= 1 << (8 * ENVELOPE_LENGTH_WIDTH):
        raise ValueError(f"Envelope length out of range: {length}")
    return ENVELOPE_TAG + length.to_bytes(ENVELOPE_LENGTH_WIDTH, 'big')
