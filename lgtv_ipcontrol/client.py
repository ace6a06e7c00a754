"""
LG IP Control client.

Sends plain text commands ("POWER off", "VOLUME_CONTROL 12") to an LG TV with
IP Control enabled and returns the decrypted reply.

Every exchange is independent:
    derive key -> new IV -> encode -> TCP round trip -> decode
No key, IV or socket is kept between commands.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .crypto import derive_key, generate_iv
from .errors import LGTVError, ValidationError
from .models import TransportTimeouts, parse_mac_address, parse_salt
from .transport import request_reply, send_broadcast
from .wire import decode_response, encode_request

DEFAULT_PORT = 9761
DEFAULT_SALT_STRING = "63-61-b8-0e-9b-dc-a6-63-8d-07-20-f2-cc-56-8f-b9"
DEFAULT_SALT = parse_salt(DEFAULT_SALT_STRING)

# Pause between two commands of a batch so the TV control channel keeps up
COMMAND_DELAY = 0.2

MAGIC_PACKET_HEADER = b"\xff" * 6
MAGIC_PACKET_REPEAT = 16


@contextmanager
def _stage(name: str) -> Iterator[None]:
    """Tag LGTVErrors raised inside the block with the exchange stage."""
    try:
        yield
    except LGTVError as e:
        if e.stage is None:
            e.stage = name
        raise


def send_command(
    host: str,
    port: int,
    keycode: Union[str, bytes],
    salt: bytes,
    command: str,
    iv: Optional[bytes] = None,
    timeouts: Optional[TransportTimeouts] = None,
    log: Optional[logging.Logger] = None,
) -> str:
    """
    Run one full request/reply exchange.

    Args:
        host: TV address
        port: TV control port
        keycode: Keycode displayed by the TV when IP Control was enabled
        salt: 16-byte key derivation salt
        command: Command without terminator
        iv: Fixed IV (testing only); random when None
        timeouts: Transport timeouts
        log: Logger for the TX/RX hex dumps (default: the transport logger)

    Returns:
        Decoded reply text (NUL padding removed)

    Raises:
        LGTVError: Any failure, with `stage` set to the failing step
    """
    with _stage("derive_key"):
        aes_key = derive_key(keycode, salt)

    with _stage("encode"):
        request = encode_request(command, iv if iv is not None else generate_iv(), aes_key)

    with _stage("transport"):
        response = request_reply(host, port, request, timeouts=timeouts, log=log)

    with _stage("decode"):
        return decode_response(response, aes_key)


def build_magic_packet(mac_address: bytes) -> bytes:
    """
    Build a 102-byte wake-on-LAN packet.

    Format: 6 × 0xFF followed by the MAC address repeated 16 times.
    """
    if len(mac_address) != 6:
        raise ValidationError(f"MAC address must be 6 bytes, got {len(mac_address)}")
    return MAGIC_PACKET_HEADER + bytes(mac_address) * MAGIC_PACKET_REPEAT


def send_wol_packet(target_ip: str, target_mac_address: str) -> int:
    """
    Wake a TV that is in network standby.

    Args:
        target_ip: Broadcast address of the TV subnet (e.g. "192.168.0.255")
        target_mac_address: "DE:AD:BE:EF:00:01" style address

    Returns:
        Number of bytes sent (102)

    Raises:
        ValidationError: If the MAC address does not parse
        TransportError: If the datagram cannot be sent
    """
    mac = parse_mac_address(target_mac_address)
    return send_broadcast(target_ip, build_magic_packet(mac))


class LGTVClient:
    """
    Client for one TV.

    Holds connection settings only; each command derives its own key and IV
    and opens its own connection, so instances are safe to reuse.
    """

    def __init__(
        self,
        host: str,
        keycode: Union[str, bytes],
        port: int = DEFAULT_PORT,
        salt: bytes = DEFAULT_SALT,
        timeouts: Optional[TransportTimeouts] = None,
        debug: bool = False,
    ):
        """
        Initialize client.

        Args:
            host: TV IP address (e.g., "192.168.0.2")
            keycode: 8-character keycode shown by the TV
            port: TCP port (default: 9761)
            salt: 16-byte key derivation salt
            timeouts: Transport timeouts
            debug: Enable debug logging, including TX/RX hex dumps
        """
        self.host = host
        self.port = port
        self.salt = salt
        self.timeouts = timeouts
        self.debug = debug
        self._keycode = keycode

        self.logger = logging.getLogger(f"LGTVClient({host}:{port})")
        if debug:
            self.logger.setLevel(logging.DEBUG)

    def encode(self, command: str, iv: Optional[bytes] = None) -> bytes:
        """
        Encrypt a command without sending it.

        The result can be piped through netcat; the reply then has to be
        handled by the caller.
        """
        with _stage("derive_key"):
            aes_key = derive_key(self._keycode, self.salt)
        with _stage("encode"):
            return encode_request(command, iv if iv is not None else generate_iv(), aes_key)

    def send_command(self, command: str, iv: Optional[bytes] = None) -> str:
        """
        Send a command and return the TV's reply.

        Raises:
            LGTVError: On any failure (never retried)
        """
        self.logger.debug(f"Sending command: {command}")
        response = send_command(
            self.host,
            self.port,
            self._keycode,
            self.salt,
            command,
            iv=iv,
            timeouts=self.timeouts,
            log=self.logger if self.debug else None,
        )
        self.logger.debug(f"Reply: {response!r}")
        return response

    def iter_commands(self, commands: Iterable[str], iv: Optional[bytes] = None) -> Iterator[Tuple[str, str]]:
        """
        Send commands one after another, COMMAND_DELAY apart.

        Each exchange finishes (socket closed) before the pause starts. The
        first error stops the batch and propagates.

        Yields:
            (command, reply) pairs
        """
        for index, command in enumerate(commands):
            if index > 0:
                time.sleep(COMMAND_DELAY)
            yield command, self.send_command(command, iv=iv)

    def send_commands(self, commands: Iterable[str], iv: Optional[bytes] = None) -> List[Tuple[str, str]]:
        """Send a batch of commands and collect (command, reply) pairs."""
        return list(self.iter_commands(commands, iv=iv))

    def wake(self, broadcast: str, mac_address: str) -> int:
        """Send a wake-on-LAN packet for this TV."""
        self.logger.info(f"Sending wake-on-LAN to {mac_address} via {broadcast}")
        return send_wol_packet(broadcast, mac_address)
