"""
otpauth.py — Credential model and its canonical text form.

A credential is written as a single line:

    otpauth://totp/<label>?secret=<secret>

The same form is accepted from the secrets file and from interactive input.
Only `secret` is kept; `issuer`, `algorithm`, `digits`, `period` and any other
query parameter are read and dropped, so a re-saved line is always the short
canonical form.
"""

import logging
import re
from dataclasses import dataclass
from urllib.parse import parse_qs, quote, unquote, urlsplit

from .errors import (
    MalformedURIError,
    MissingLabelError,
    MissingSecretError,
    UnsupportedSchemeError,
)

logger = logging.getLogger(__name__)

SCHEME = "otpauth"
TOTP_HOST = "totp"
URL_FORMAT_HINT = "otpauth://totp/Service:user@example.com?secret=ABCDEFGHIJKLMNOP&issuer=Service"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# label characters that would otherwise be read back differently
_LABEL_UNSAFE = re.compile(r"[%?#\x00-\x1f\x7f]")


@dataclass(frozen=True)
class Credential:
    """One enrolled TOTP account: display label plus base32 secret (still encoded)."""

    label: str
    secret: str


def parse_otpauth_url(text: str) -> Credential:
    """
    Decode one `otpauth://totp/...` line into a Credential.

    The secret is not base32-decoded here; a credential with a bad secret can
    still be stored and listed and only fails when a code is generated.

    Raises:
        MalformedURIError: the text is not a syntactically valid URI
        UnsupportedSchemeError: scheme is not exactly `otpauth` or host not exactly `totp`
        MissingSecretError: no non-empty `secret` parameter
        MissingLabelError: the label is empty or only whitespace
    """
    if _CONTROL_CHARS.search(text):
        raise MalformedURIError("URL contains control characters")
    if _BAD_ESCAPE.search(text):
        raise MalformedURIError("URL contains an invalid percent escape")
    try:
        parts = urlsplit(text)
    except ValueError as e:
        raise MalformedURIError(f"invalid URL format: {e}") from e
    if not parts.scheme:
        raise MalformedURIError("URL has no scheme")

    # urlsplit lower-cases the scheme, so compare against the raw prefix
    raw_scheme = text.partition(":")[0]
    if raw_scheme != SCHEME or parts.netloc != TOTP_HOST:
        raise UnsupportedSchemeError("URL must be an otpauth://totp URL")

    query = parse_qs(parts.query, keep_blank_values=True)
    secret = query.pop("secret", [""])[0]
    if not secret:
        raise MissingSecretError("missing 'secret' parameter in URL")
    if query:
        logger.debug("Ignoring otpauth parameters: %s", ", ".join(sorted(query)))

    path = parts.path[1:] if parts.path.startswith("/") else parts.path
    label = unquote(path)
    if not label.strip():
        raise MissingLabelError("missing account label in URL")

    return Credential(label=label, secret=secret)


def _escape_label(label: str) -> str:
    return _LABEL_UNSAFE.sub(
        lambda m: "".join(f"%{b:02X}" for b in m.group().encode("utf-8")), label
    )


def format_otpauth_url(credential: Credential) -> str:
    """
    Encode a Credential as its canonical line: otpauth://totp/<label>?secret=<secret>.

    Labels are written verbatim except for the few characters that would not
    survive parse_otpauth_url (`%`, `?`, `#`, control characters).
    """
    label = _escape_label(credential.label)
    secret = quote(credential.secret, safe="=")
    return f"{SCHEME}://{TOTP_HOST}/{label}?secret={secret}"
