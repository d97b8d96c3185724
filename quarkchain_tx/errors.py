"""
Exception types for transaction encoding, hashing and signing.
"""
from typing import Optional


class TransactionError(Exception):
    """Base class for all quarkchain_tx errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class FieldError(TransactionError):
    """A field value does not satisfy its schema descriptor."""
    pass


class MissingFieldError(FieldError):
    """Required field absent and no default to fall back on."""

    def __init__(self, field_name: str):
        super().__init__(f"The field {field_name} is required", {"field": field_name})
        self.field_name = field_name


class FieldLengthError(FieldError):
    def __init__(self, field_name: str, length: int, actual: int, exact: bool):
        if exact:
            msg = f"The field {field_name} must have byte length of {length}"
        else:
            msg = f"The field {field_name} must not have more {length} bytes"
        super().__init__(msg, {"field": field_name, "length": length, "actual": actual})
        self.field_name = field_name
        self.length = length
        self.actual = actual


class FieldValueError(FieldError):
    """Value could not be converted to bytes."""
    pass


class MalformedEncodingError(TransactionError):
    """Raised when decoding corrupt, truncated or mis-shaped RLP."""
    pass


class SignatureError(TransactionError):
    pass


class InvalidSignatureError(SignatureError):
    def __init__(self, message: str = "Invalid Signature", details: Optional[dict] = None):
        super().__init__(message, details)


class UnsignedTransactionError(TransactionError):
    """A signature is required for this operation."""
    pass
