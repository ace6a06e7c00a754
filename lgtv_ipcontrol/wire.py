"""
Wire codec for the LG IP Control protocol.

Outbound:
    "VOLUME_CONTROL 12" -> "VOLUME_CONTROL 12\\r" -> AES-CBC(PKCS#7) payload
    wire = AES-ECB(iv) + payload

Inbound:
    wire[:16] -> AES-ECB decrypt -> reply IV
    wire[16:] -> AES-CBC decrypt (no unpadding) -> cut at first NUL -> UTF-8 (lossy)
"""

from .crypto import decrypt_iv, decrypt_payload, encrypt_iv, encrypt_payload
from .errors import ValidationError
from .models import WireMessage

COMMAND_TERMINATOR = "\r"


def terminate_command(command: str) -> bytes:
    """
    Append the carriage return terminator to a command.

    Raises:
        ValidationError: If the command is empty or already contains a line break
    """
    if not command:
        raise ValidationError("Command must not be empty")
    if "\r" in command or "\n" in command:
        raise ValidationError(f"Command must not contain line breaks: {command!r}")
    return (command + COMMAND_TERMINATOR).encode("utf-8")


def encode_request(command: str, iv: bytes, key: bytes) -> bytes:
    """
    Build the exact bytes to write to the socket for one command.

    Args:
        command: Command without terminator (e.g. "POWER off")
        iv: Plain 16-byte IV for this message
        key: Session key

    Returns:
        Encrypted IV block followed by the encrypted command blocks
    """
    message = WireMessage(
        iv_block=encrypt_iv(iv, key),
        payload=encrypt_payload(terminate_command(command), iv, key),
    )
    return message.to_bytes()


def trim_response(decrypted: bytes) -> str:
    """Cut a decrypted payload at the first NUL byte and decode it lossily."""
    null_position = decrypted.find(b"\x00")
    if null_position != -1:
        decrypted = decrypted[:null_position]
    return decrypted.decode("utf-8", errors="replace")


def decode_response(raw: bytes, key: bytes) -> str:
    """
    Decrypt a reply read from the socket.

    A reply holding only the IV block decodes to "".

    Raises:
        ProtocolError: If the reply is shorter than one block or not block aligned
        CryptoError: If decryption fails
    """
    message = WireMessage.from_bytes(raw)
    response_iv = decrypt_iv(message.iv_block, key)
    return trim_response(decrypt_payload(message.payload, response_iv, key))
