"""
LG IP Control Crypto Module

AES-128 under a key derived from the TV keycode with PBKDF2-HMAC-SHA256.

Two cipher configurations share the key:
- IV channel: AES-ECB, no padding, exactly one block (the message IV)
- Payload channel: AES-CBC keyed by that IV, PKCS#7 padded on the way out,
  unpadded on the way in (the TV fills its last block with NULs instead)

Every function here is pure: no cipher object outlives a single call.
"""

from typing import Union

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad

from .errors import CryptoError, ValidationError

BLOCK_SIZE = 16
KEY_SIZE = 16
SALT_SIZE = 16
KDF_ITERATIONS = 2 ** 14

# Commands are short ("VOLUME_CONTROL 12\r"); anything past this is a caller bug
MAX_COMMAND_SIZE = 256


def derive_key(secret: Union[str, bytes], salt: bytes) -> bytes:
    """
    Derive the 128-bit session key from the keycode shown by the TV.

    Args:
        secret: Keycode (str is UTF-8 encoded)
        salt: Exactly 16 bytes

    Returns:
        16-byte AES key

    Raises:
        ValidationError: If the secret is empty or the salt is not 16 bytes
    """
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if not secret:
        raise ValidationError("Keycode must not be empty")
    if len(salt) != SALT_SIZE:
        raise ValidationError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")

    return PBKDF2(secret, bytes(salt), dkLen=KEY_SIZE, count=KDF_ITERATIONS, hmac_hash_module=SHA256)


def generate_iv() -> bytes:
    """Random 16-byte IV for one outgoing message."""
    return get_random_bytes(BLOCK_SIZE)


def _check_key(key: bytes):
    if len(key) != KEY_SIZE:
        raise CryptoError(f"AES key must be {KEY_SIZE} bytes, got {len(key)}")


def _check_iv(iv: bytes):
    if len(iv) != BLOCK_SIZE:
        raise CryptoError(f"IV must be {BLOCK_SIZE} bytes, got {len(iv)}")


def encrypt_iv(iv: bytes, key: bytes) -> bytes:
    """Encrypt the message IV with AES-ECB (single block, no padding)."""
    _check_key(key)
    _check_iv(iv)
    try:
        return AES.new(key, AES.MODE_ECB).encrypt(iv)
    except ValueError as e:
        raise CryptoError(f"IV encryption failed: {e}") from e


def decrypt_iv(encrypted_iv: bytes, key: bytes) -> bytes:
    """Recover the IV of a reply from its first block."""
    _check_key(key)
    _check_iv(encrypted_iv)
    try:
        return AES.new(key, AES.MODE_ECB).decrypt(encrypted_iv)
    except ValueError as e:
        raise CryptoError(f"IV decryption failed: {e}") from e


def encrypt_payload(plaintext: bytes, iv: bytes, key: bytes) -> bytes:
    """
    Encrypt a command with AES-CBC and PKCS#7 padding.

    Args:
        plaintext: Command bytes, terminator included
        iv: Plain (not encrypted) message IV
        key: Session key

    Returns:
        Ciphertext, a non-empty multiple of 16 bytes

    Raises:
        CryptoError: On bad key/IV length or a command over MAX_COMMAND_SIZE
    """
    _check_key(key)
    _check_iv(iv)
    if len(plaintext) > MAX_COMMAND_SIZE:
        raise CryptoError(
            f"Command too long: {len(plaintext)} bytes (max {MAX_COMMAND_SIZE})"
        )

    try:
        return AES.new(key, AES.MODE_CBC, iv=iv).encrypt(pad(plaintext, BLOCK_SIZE))
    except ValueError as e:
        raise CryptoError(f"Payload encryption failed: {e}") from e


def decrypt_payload(ciphertext: bytes, iv: bytes, key: bytes) -> bytes:
    """
    Decrypt a reply payload with AES-CBC.

    No padding is removed: the caller trims at the first NUL byte.

    Raises:
        CryptoError: On bad key/IV length or a ciphertext that is not block aligned
    """
    _check_key(key)
    _check_iv(iv)
    if len(ciphertext) % BLOCK_SIZE != 0:
        raise CryptoError(
            f"Ciphertext length {len(ciphertext)} is not a multiple of {BLOCK_SIZE}"
        )
    if not ciphertext:
        return b""

    try:
        return AES.new(key, AES.MODE_CBC, iv=iv).decrypt(ciphertext)
    except ValueError as e:
        raise CryptoError(f"Payload decryption failed: {e}") from e
