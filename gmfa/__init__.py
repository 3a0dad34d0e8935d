"""
gmfa package
============

Console TOTP generator (RFC 6238) for a set of enrolled accounts, stored as
`otpauth://totp/...` lines in a plain-text secrets file (~/.gmfa.conf).

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- TOTP: HOTP with counter = floor(timestamp / timestep), timestep = 30 s.
- HOTP: code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits.
- Dynamic truncation: 4 bytes at offset (last byte & 0x0F), sign bit cleared.

──────────────────────────────────────────────
Quick use
──────────────────────────────────────────────
>>> from gmfa import parse_otpauth_url, totp
>>> cred = parse_otpauth_url("otpauth://totp/GitHub:alice?secret=JBSWY3DPEHPK3PXP")
>>> cred.label
'GitHub:alice'
>>> len(totp(cred.secret, 59))
6

From a shell:
    gmfa            # watch codes, refresh every 30 s
    gmfa add 'otpauth://totp/GitHub:alice?secret=JBSWY3DPEHPK3PXP'
    gmfa serve      # HTTP API on 127.0.0.1:5000
"""

from gmfa.core import (
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    Credential,
    InvalidSecretEncodingError,
    MalformedURIError,
    MissingLabelError,
    MissingSecretError,
    OTPAuthURIError,
    UnsupportedSchemeError,
    format_otpauth_url,
    hotp,
    parse_otpauth_url,
    totp,
)

__version__ = "1.0.0"
