"""LG IP Control client: encrypted remote control for LG TVs over TCP port 9761."""

from .client import (
    COMMAND_DELAY,
    DEFAULT_PORT,
    DEFAULT_SALT,
    LGTVClient,
    build_magic_packet,
    send_command,
    send_wol_packet,
)
from .commands import COMMANDS, resolve_command
from .errors import (
    CryptoError,
    InvalidByteSequenceError,
    LGTVError,
    ProtocolError,
    TransportError,
    ValidationError,
    WrongByteSequenceSizeError,
)
from .models import Reply, TransportTimeouts, WireMessage

__version__ = "0.1.0"
