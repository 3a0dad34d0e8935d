"""Pure core: TOTP generation and the otpauth credential codec."""

from .errors import (
    InvalidSecretEncodingError,
    MalformedURIError,
    MissingLabelError,
    MissingSecretError,
    OTPAuthURIError,
    UnsupportedSchemeError,
)
from .otp_core import DEFAULT_DIGITS, DEFAULT_TIME_STEP, hotp, totp
from .otpauth import Credential, format_otpauth_url, parse_otpauth_url

__all__ = [
    "Credential",
    "DEFAULT_DIGITS",
    "DEFAULT_TIME_STEP",
    "InvalidSecretEncodingError",
    "MalformedURIError",
    "MissingLabelError",
    "MissingSecretError",
    "OTPAuthURIError",
    "UnsupportedSchemeError",
    "format_otpauth_url",
    "hotp",
    "parse_otpauth_url",
    "totp",
]
