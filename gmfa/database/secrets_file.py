"""
secrets_file.py — Plain-text credential store.

File format (UTF-8, one credential per line):

    # comment lines start with '#'
    otpauth://totp/<label>?secret=<secret>

Blank lines and comments are ignored on load. A line that cannot be decoded is
skipped with a warning; it never makes the whole file unreadable.

Saving always rewrites the whole file from the in-memory list. Anything edited
by hand between load and save is lost; the previous file is kept as `.bak`.
"""

import logging
import os
import shutil
from typing import Iterable, List, Optional, Union

from gmfa.core.errors import OTPAuthURIError
from gmfa.core.otpauth import (
    URL_FORMAT_HINT,
    Credential,
    format_otpauth_url,
    parse_otpauth_url,
)

logger = logging.getLogger(__name__)

SECRETS_FILE_NAME = ".gmfa.conf"
SECRETS_FILE_ENV = "GMFA_SECRETS_FILE"
FILE_HEADER = (
    "# GMFA Secrets File\n"
    f"# Format: {URL_FORMAT_HINT}\n"
    "\n"
)


def default_secrets_path() -> str:
    """$GMFA_SECRETS_FILE if set, else ~/.gmfa.conf."""
    override = os.environ.get(SECRETS_FILE_ENV)
    if override:
        return os.path.expanduser(override)
    return os.path.join(os.path.expanduser("~"), SECRETS_FILE_NAME)


def parse_lines(lines: Iterable[Union[str, bytes]], source: str = "<input>") -> List[Credential]:
    """
    Decode every data line, skipping blanks, comments and invalid entries.

    Byte lines are decoded as UTF-8 one at a time, so a stray non-UTF-8 byte
    only costs the line it is on.
    """
    credentials = []
    for lineno, raw in enumerate(lines, start=1):
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning("Skipping undecodable line at %s:%d (%s)", source, lineno, e)
                continue
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            credentials.append(parse_otpauth_url(line))
        except OTPAuthURIError as e:
            logger.warning("Skipping invalid MFA URL at %s:%d (%s)", source, lineno, e)
    return credentials


def load_credentials(path: Optional[str] = None) -> List[Credential]:
    """
    Read all credentials from the secrets file, in file order.

    Raises:
        FileNotFoundError: if the file does not exist (the caller decides what that means)
    """
    path = path or default_secrets_path()
    with open(path, "rb") as f:
        credentials = parse_lines(f, source=path)
    logger.debug("Loaded %d MFA entries from %s", len(credentials), path)
    return credentials


def save_credentials(credentials: Iterable[Credential], path: Optional[str] = None) -> int:
    """
    Overwrite the secrets file with the given credentials.

    - Parent directory is created with mode 0700 if missing.
    - An existing file is copied to path + ".bak" first.
    - The new file is written with mode 0600.

    Returns:
        int: number of entries written
    """
    path = path or default_secrets_path()
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, mode=0o700, exist_ok=True)

    if os.path.exists(path):
        shutil.copy2(path, path + ".bak")

    count = 0
    fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(FILE_HEADER)
        for credential in credentials:
            f.write(format_otpauth_url(credential) + "\n")
            count += 1
    # O_CREAT only applies the mode to new files
    os.chmod(path, 0o600)

    logger.info("Saved %d MFA entries to %s", count, path)
    return count


def append_credentials(new: Iterable[Credential], path: Optional[str] = None) -> List[Credential]:
    """Load the store (missing file counts as empty), add `new` at the end and save it all back."""
    path = path or default_secrets_path()
    try:
        credentials = load_credentials(path)
    except FileNotFoundError:
        credentials = []
    credentials.extend(new)
    save_credentials(credentials, path)
    return credentials
