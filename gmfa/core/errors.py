"""
errors.py — Exception types raised by the gmfa core.

Codec errors (bad otpauth line) and generator errors (bad base32 secret) are
both recoverable: the store skips the offending line, the presenter shows a
placeholder for the offending credential. None of them should end the process.
"""


class OTPAuthURIError(ValueError):
    """Base class for lines that cannot be decoded into a Credential."""

    kind = "invalid_uri"


class MalformedURIError(OTPAuthURIError):
    kind = "malformed_uri"


class UnsupportedSchemeError(OTPAuthURIError):
    kind = "unsupported_scheme"


class MissingSecretError(OTPAuthURIError):
    kind = "missing_secret"


class MissingLabelError(OTPAuthURIError):
    kind = "missing_label"


class InvalidSecretEncodingError(ValueError):
    """The secret is not valid base32, so no code can be computed for it."""

    kind = "invalid_secret_encoding"
