"""
Error types for the LG IP Control client.

Every failure raised by this package derives from LGTVError, so callers can
catch one type at the batch level and still tell the stages apart.
"""

from typing import Optional


class LGTVError(Exception):
    """Base class for all LG IP Control errors.

    Attributes:
        stage: Exchange stage that failed ("derive_key", "encode", "transport",
            "decode"), set by the command facade. None outside an exchange.
    """

    def __init__(self, message: str = "", stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        message = super().__str__()
        if self.stage:
            return f"[{self.stage}] {message}"
        return message


class ValidationError(LGTVError, ValueError):
    """Malformed user supplied value (salt, IV, MAC address, command)."""


class InvalidByteSequenceError(ValidationError):
    """A byte token is not a hex number from 00 to FF."""

    def __init__(self, invalid_byte: str):
        super().__init__(f"Invalid byte {invalid_byte} (should be a hex number from 00-FF)")
        self.invalid_byte = invalid_byte


class WrongByteSequenceSizeError(ValidationError):
    """A byte sequence does not hold exactly the expected number of bytes."""

    def __init__(self, expected_size: int):
        super().__init__(f"Wrong size of byte sequence (should be {expected_size})")
        self.expected_size = expected_size


class CryptoError(LGTVError):
    """Cipher operation failure. Never retried."""


class TransportError(LGTVError):
    """Connect, write or read failure (including timeouts).

    Attributes:
        errno: errno of the underlying socket error, if any
    """

    def __init__(self, message: str = "", errno: Optional[int] = None, stage: Optional[str] = None):
        super().__init__(message, stage=stage)
        self.errno = errno


class ProtocolError(LGTVError):
    """Structurally invalid reply from the TV."""
