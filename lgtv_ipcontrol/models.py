"""
Data models for the LG IP Control protocol.

Wire Message Structure:
┌──────────────────────┬──────────────────────────────────────┐
│   Encrypted IV       │        Encrypted payload             │
├──────────────────────┼──────────────────────────────────────┤
│ 16 bytes (AES-ECB)   │ N × 16 bytes (AES-CBC)               │
└──────────────────────┴──────────────────────────────────────┘

Requests and replies share this layout. There is no length field and no
checksum; the reader infers the end of a reply from a quiet period.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .crypto import BLOCK_SIZE
from .errors import (
    InvalidByteSequenceError,
    ProtocolError,
    ValidationError,
    WrongByteSequenceSizeError,
)

_HEX_BYTE = re.compile(r"[0-9A-Fa-f]{1,2}")


@dataclass(frozen=True)
class FixedSizeByteSequence:
    """
    A delimiter separated string of hex bytes with a fixed byte count.

    Used for the salt ("63-61-b8-..."), the IV override and MAC addresses
    ("DE:AD:BE:EF:00:01").

    Attributes:
        sequence_string: Original string as given by the user
        delimiter: Separator between byte tokens
        size: Expected number of bytes
        data: Parsed bytes (always exactly `size` long)
    """

    sequence_string: str
    delimiter: str
    size: int
    data: bytes

    @classmethod
    def from_string(cls, sequence_string: str, delimiter: str, size: int) -> "FixedSizeByteSequence":
        """
        Parse a byte sequence string.

        Tokens are checked in order, so "GG:00:..." reports "GG" even if the
        sequence also has the wrong length.

        Raises:
            InvalidByteSequenceError: If a token is not a 1-2 digit hex number
            WrongByteSequenceSizeError: If there are more or fewer than `size` tokens
        """
        collected = bytearray()

        for index, token in enumerate(sequence_string.split(delimiter)):
            if index == size:
                raise WrongByteSequenceSizeError(size)
            if not _HEX_BYTE.fullmatch(token):
                raise InvalidByteSequenceError(token)
            collected.append(int(token, 16))

        if len(collected) < size:
            raise WrongByteSequenceSizeError(size)

        return cls(
            sequence_string=sequence_string,
            delimiter=delimiter,
            size=size,
            data=bytes(collected),
        )

    def __bytes__(self) -> bytes:
        return self.data


def parse_salt(value: str) -> bytes:
    """Parse a hyphen separated 16-byte salt."""
    return FixedSizeByteSequence.from_string(value, "-", BLOCK_SIZE).data


def parse_iv(value: str) -> bytes:
    """Parse a hyphen separated 16-byte IV override."""
    return FixedSizeByteSequence.from_string(value, "-", BLOCK_SIZE).data


def parse_mac_address(value: str) -> bytes:
    """Parse a colon separated 6-byte hardware address."""
    return FixedSizeByteSequence.from_string(value, ":", 6).data


def format_byte_sequence(data: bytes, delimiter: str = "-") -> str:
    """Inverse of FixedSizeByteSequence.from_string (lowercase hex)."""
    return delimiter.join(f"{b:02x}" for b in data)


@dataclass
class WireMessage:
    """
    One request or reply as it travels on the socket.

    Attributes:
        iv_block: The AES-ECB encrypted IV (exactly 16 bytes)
        payload: The AES-CBC encrypted command or reply (multiple of 16 bytes)
    """

    iv_block: bytes
    payload: bytes = b""

    def __post_init__(self):
        """Validate block layout after initialization."""
        if len(self.iv_block) != BLOCK_SIZE:
            raise ProtocolError(
                f"IV block must be {BLOCK_SIZE} bytes, got {len(self.iv_block)}"
            )

        if len(self.payload) % BLOCK_SIZE != 0:
            raise ProtocolError(
                f"Payload is not block aligned: {len(self.payload)} bytes "
                f"(not a multiple of {BLOCK_SIZE})"
            )

    @classmethod
    def from_bytes(cls, raw: bytes) -> "WireMessage":
        """
        Split raw socket bytes into IV block and payload.

        Raises:
            ProtocolError: If fewer than 16 bytes were received or the payload
                is not block aligned
        """
        if len(raw) < BLOCK_SIZE:
            raise ProtocolError(
                f"Response too short: {len(raw)} bytes (need at least {BLOCK_SIZE} for the IV block)"
            )
        return cls(iv_block=bytes(raw[:BLOCK_SIZE]), payload=bytes(raw[BLOCK_SIZE:]))

    @property
    def total_size(self) -> int:
        """Get total message size in bytes."""
        return len(self.iv_block) + len(self.payload)

    def to_bytes(self) -> bytes:
        """Serialize message to bytes."""
        return self.iv_block + self.payload

    def __repr__(self) -> str:
        return (
            f"WireMessage(iv_block={self.iv_block.hex()}, "
            f"payload_blocks={len(self.payload) // BLOCK_SIZE}, total_size={self.total_size})"
        )


@dataclass(frozen=True)
class Reply:
    """
    A decoded TV reply split into key and value.

    Status queries answer "KEY:value" (e.g. "VOL:12", "MUTE:off"); plain
    commands usually answer "OK". Only the first line is considered.
    """

    text: str
    key: str
    value: str

    @classmethod
    def from_text(cls, text: str) -> "Reply":
        line = text.splitlines()[0].strip() if text else ""
        if ":" in line:
            key, value = line.split(":", 1)
            return cls(text=text, key=key.strip(), value=value.strip())
        return cls(text=text, key="", value=line)

    @property
    def is_ok(self) -> bool:
        return self.value.upper() == "OK" and not self.key

    def as_int(self) -> Optional[int]:
        """Value as an integer, or None if it is not numeric."""
        try:
            return int(self.value)
        except ValueError:
            return None

    def as_bool(self) -> Optional[bool]:
        """Value as on/off, or None if it is neither."""
        lowered = self.value.lower()
        if lowered in ("on", "true", "1"):
            return True
        if lowered in ("off", "false", "0"):
            return False
        return None


@dataclass(frozen=True)
class TransportTimeouts:
    """
    Timeouts for one request/reply exchange, in seconds.

    Attributes:
        connect: TCP connect timeout
        io: Write timeout and read timeout for the reply IV block
        quiet: Read timeout for every block after the IV; a quiet period this
            long ends the reply
    """

    connect: float = 15.0
    io: float = 3.0
    quiet: float = 0.1

    def __post_init__(self):
        for name in ("connect", "io", "quiet"):
            if getattr(self, name) <= 0:
                raise ValidationError(f"Timeout '{name}' must be positive, got {getattr(self, name)}")
