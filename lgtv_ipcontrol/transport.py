"""
Socket transport for the LG IP Control protocol.

TCP (port 9761): one connection per command. The TV never tells how long its
reply is, so the reader works in two phases:

1. Read the 16-byte IV block with the normal I/O timeout. Missing it is a
   hard failure: the TV did not answer.
2. Drop the read timeout to a short quiet period and read 16-byte blocks
   until a read comes back short, times out or would block. Any of those
   means the TV is done writing.

Phase 2 is a heuristic. A TV that pauses longer than the quiet period in the
middle of a reply gets truncated; that is accepted, not retried.

UDP (port 9): single datagram for wake-on-LAN.
"""

import errno
import logging
import socket
from typing import Optional

from .crypto import BLOCK_SIZE
from .errors import ProtocolError, TransportError
from .models import TransportTimeouts

logger = logging.getLogger(__name__)

WAKE_PORT = 9
LOCAL_PORT_RANGE = range(1025, 65536)
MAX_RESPONSE_SIZE = 1024

DEFAULT_TIMEOUTS = TransportTimeouts()


def hex_dump(data: bytes, limit: int = 64) -> str:
    """Space separated hex preview of the first `limit` bytes."""
    preview = ' '.join(f'{b:02x}' for b in data[:limit])
    if len(data) > limit:
        preview += f" ... ({len(data)} bytes total)"
    return preview


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    """
    Read exactly `size` bytes under the socket's current timeout.

    Raises:
        TransportError: On timeout, socket error or if the peer closes early
    """
    data = bytearray()
    while len(data) < size:
        try:
            chunk = sock.recv(size - len(data))
        except socket.timeout as e:
            raise TransportError(
                f"Timed out waiting for reply ({len(data)}/{size} bytes received)"
            ) from e
        except OSError as e:
            raise TransportError(f"Read failed: {e}", errno=e.errno) from e
        if not chunk:
            raise TransportError(
                f"Connection closed before reply IV was received ({len(data)}/{size} bytes)"
            )
        data.extend(chunk)
    return bytes(data)


def _read_until_quiet(sock: socket.socket, response: bytearray, max_size: int, log: logging.Logger = logger):
    """
    Append 16-byte blocks to `response` until the TV goes quiet.

    A short read, a timeout and EWOULDBLOCK all end the reply. Bytes of a
    short read are dropped so the reply stays block aligned.
    """
    while True:
        try:
            chunk = sock.recv(BLOCK_SIZE)
        except (socket.timeout, BlockingIOError):
            # Unix reports EWOULDBLOCK, Windows a timeout; both mean "done"
            break
        except OSError as e:
            raise TransportError(f"Read failed: {e}", errno=e.errno) from e

        if len(chunk) < BLOCK_SIZE:
            if chunk:
                log.debug(f"Dropping {len(chunk)} trailing bytes of a short read")
            break

        if len(response) + BLOCK_SIZE > max_size:
            raise ProtocolError(f"Reply exceeds {max_size} bytes")
        response.extend(chunk)


def request_reply(
    host: str,
    port: int,
    request: bytes,
    timeouts: Optional[TransportTimeouts] = None,
    max_response_size: int = MAX_RESPONSE_SIZE,
    log: Optional[logging.Logger] = None,
) -> bytes:
    """
    Send one request on a fresh TCP connection and read the reply.

    Args:
        host: TV host name or IP address
        port: TV control port (normally 9761)
        request: Complete wire message
        timeouts: Connect / IO / quiet-period timeouts (defaults 15s / 3s / 100ms)
        max_response_size: Upper bound on the reply size
        log: Logger for the connection trace and TX/RX hex dumps (default: module logger)

    Returns:
        Reply bytes: the 16-byte IV block plus zero or more 16-byte blocks

    Raises:
        TransportError: Connect, write or IV read failure
        ProtocolError: Reply longer than max_response_size
    """
    timeouts = timeouts or DEFAULT_TIMEOUTS
    log = log or logger

    log.debug(f"Connecting to {host}:{port}...")
    try:
        sock = socket.create_connection((host, port), timeout=timeouts.connect)
    except socket.timeout as e:
        raise TransportError(
            f"Connection to {host}:{port} timed out after {timeouts.connect}s"
        ) from e
    except OSError as e:
        raise TransportError(f"Connection to {host}:{port} failed: {e}", errno=e.errno) from e

    with sock:
        sock.settimeout(timeouts.io)

        try:
            sock.sendall(request)
        except socket.timeout as e:
            raise TransportError(f"Write timed out after {timeouts.io}s") from e
        except OSError as e:
            raise TransportError(f"Write failed: {e}", errno=e.errno) from e

        log.debug(f"TX {len(request)} bytes: {hex_dump(request)}")

        response = bytearray(_recv_exact(sock, BLOCK_SIZE))

        # The connection answered, from here on silence means end of reply
        sock.settimeout(timeouts.quiet)
        _read_until_quiet(sock, response, max_response_size, log)

    log.debug(f"RX {len(response)} bytes: {hex_dump(response)}")
    return bytes(response)


def send_broadcast(target: str, message: bytes, port: int = WAKE_PORT) -> int:
    """
    Send one UDP datagram with SO_BROADCAST set.

    Local ports 1025-65535 are tried in order until one binds; only
    EADDRINUSE moves on to the next port.

    Args:
        target: Destination address, usually the subnet broadcast address
        message: Datagram payload
        port: Destination port (9 for wake-on-LAN)

    Returns:
        Number of bytes sent

    Raises:
        TransportError: On any other socket error, or if no local port is free
    """
    for local_port in LOCAL_PORT_RANGE:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.bind(("0.0.0.0", local_port))
        except OSError as e:
            sock.close()
            if e.errno == errno.EADDRINUSE:
                continue
            raise TransportError(f"Cannot bind broadcast socket: {e}", errno=e.errno) from e

        with sock:
            try:
                sent = sock.sendto(message, (target, port))
            except OSError as e:
                raise TransportError(f"Broadcast to {target}:{port} failed: {e}", errno=e.errno) from e

        logger.debug(f"Broadcast {sent} bytes to {target}:{port} from local port {local_port}")
        return sent

    raise TransportError(
        "No address available (tried 0.0.0.0 from ports 1025 to 65535)",
        errno=errno.EADDRNOTAVAIL,
    )
