"""
otp_core.py — Core TOTP / HOTP library (RFC 4226 / RFC 6238, HMAC-SHA1).

Goals:
- Pure functions only: no file I/O, no clock reads, no CLI. The caller passes
  the timestamp in, which keeps every function deterministic and testable
  without mocking time.
- Step and digit count are parameters (defaults: 30 s, 6 digits).

Security note:
- HMAC-SHA1 is the profile used by Google Authenticator and most services.
"""

import base64
import binascii
import hashlib
import hmac
import struct
import time

from .errors import InvalidSecretEncodingError

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # standard: 6 digits
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
MAX_DIGITS = 10             # a 31-bit truncated value has at most 10 digits


# --- RFC helpers -----------------------------------------------------------
def decode_secret(secret_b32: str) -> bytes:
    """
    Decode a base32 secret into raw HMAC key bytes.

    - Case-insensitive (the text is upper-cased first).
    - Standard RFC 4648 alphabet; padding must be correct, no auto-padding.
    - An empty secret is rejected: an empty HMAC key is never a real enrolment.

    Raises:
        InvalidSecretEncodingError: if the text is not valid base32
    """
    if not secret_b32:
        raise InvalidSecretEncodingError("Empty base32 secret")
    try:
        key = base64.b32decode(secret_b32.upper())
    except (binascii.Error, ValueError) as e:
        # non-ASCII input surfaces as a plain ValueError
        raise InvalidSecretEncodingError(f"Invalid base32 secret: {e}") from e
    if not key:
        raise InvalidSecretEncodingError("Base32 secret decodes to no bytes")
    return key


def int_to_bytes(i: int) -> bytes:
    """
    Pack the counter as the 8-byte big-endian message required by RFC 4226.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = low nibble of the last byte (0..15)
    - 4 bytes from offset as a big-endian integer, sign bit cleared
    """
    offset = hmac_digest[-1] & 0x0F
    (value,) = struct.unpack(">I", hmac_digest[offset:offset + 4])
    return value & 0x7FFFFFFF


def _check_digits(digits: int) -> None:
    if not 1 <= digits <= MAX_DIGITS:
        raise ValueError(f"digits must be between 1 and {MAX_DIGITS}, got {digits}")


def _check_timestep(timestep: int) -> None:
    if not isinstance(timestep, int) or isinstance(timestep, bool):
        raise ValueError(f"timestep must be a whole number of seconds, got {timestep!r}")
    if timestep <= 0:
        raise ValueError(f"timestep must be a positive number of seconds, got {timestep}")


def hotp(secret_b32: str, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """
    Compute an HOTP code (RFC 4226).

    Steps:
    1. Base32-decode secret -> raw key bytes
    2. Message = 8-byte big-endian counter
    3. HMAC-SHA1(key, message)
    4. Dynamic truncation -> 31-bit value
    5. value % 10^digits, zero-padded to exactly `digits` characters

    Raises:
        InvalidSecretEncodingError: if the secret is not valid base32
        ValueError: if counter is negative or digits is out of range
    """
    _check_digits(digits)
    if counter < 0:
        raise ValueError(f"counter must be non-negative, got {counter}")

    key = decode_secret(secret_b32)
    digest = hmac.new(key, int_to_bytes(counter), hashlib.sha1).digest()

    code = dynamic_truncate(digest) % (10 ** digits)
    return str(code).zfill(digits)


def timecode(timestamp: int, timestep: int = DEFAULT_TIME_STEP) -> int:
    """Number of complete time steps elapsed since the Unix epoch."""
    _check_timestep(timestep)
    if timestamp < 0:
        raise ValueError(f"timestamp must be non-negative, got {timestamp}")
    return int(timestamp) // timestep


def totp(
    secret_b32: str,
    timestamp: int,
    timestep: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """
    Compute a TOTP code (RFC 6238): HOTP with counter = floor(timestamp / timestep).

    Identical arguments always give an identical code; nothing is cached.

    Arguments:
        secret_b32: base32 secret, as stored in the credential
        timestamp: Unix time in seconds
        timestep: step length in seconds (30 by default)
        digits: code length (6 by default)

    Raises:
        InvalidSecretEncodingError: if the secret is not valid base32
        ValueError: on a non-positive timestep, negative timestamp or bad digits
    """
    return hotp(secret_b32, timecode(timestamp, timestep), digits)


def seconds_remaining(timestamp: int, timestep: int = DEFAULT_TIME_STEP) -> int:
    """Seconds until the next step boundary (1..timestep)."""
    _check_timestep(timestep)
    return timestep - (int(timestamp) % timestep)


def valid_until(timestamp: int, timestep: int = DEFAULT_TIME_STEP) -> int:
    """Unix time at which codes generated at `timestamp` stop being valid."""
    return int(timestamp) + seconds_remaining(timestamp, timestep)


def now() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())
