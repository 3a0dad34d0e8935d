"""
config.py — Runtime settings shared by the CLI and the HTTP API.

Precedence: explicit value (CLI flag / create_app argument) > environment > default.
"""

import logging
import os
from typing import Optional

from gmfa.core.otp_core import DEFAULT_DIGITS, DEFAULT_TIME_STEP
from gmfa.database.secrets_file import SECRETS_FILE_ENV, default_secrets_path

DIGITS_ENV = "GMFA_DIGITS"
PERIOD_ENV = "GMFA_PERIOD"
LOG_FORMAT = "[%(levelname)s] %(message)s"


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def get_digits(override: Optional[int] = None) -> int:
    return override if override is not None else _env_int(DIGITS_ENV, DEFAULT_DIGITS)


def get_period(override: Optional[int] = None) -> int:
    return override if override is not None else _env_int(PERIOD_ENV, DEFAULT_TIME_STEP)


def get_secrets_file(override: Optional[str] = None) -> str:
    return os.path.expanduser(override) if override else default_secrets_path()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


__all__ = [
    "DIGITS_ENV",
    "PERIOD_ENV",
    "SECRETS_FILE_ENV",
    "get_digits",
    "get_period",
    "get_secrets_file",
    "setup_logging",
]
