#!/usr/bin/env python3
"""
otp_cli.py — Console front end for gmfa.

Subcommands:
- watch  : show every code and refresh on each step boundary (default)
- show   : print the current codes once
- add    : validate otpauth URLs (arguments or prompt) and save them
- list   : list stored labels with their index
- uri    : print the canonical otpauth line of one entry
- qr     : draw the otpauth line of one entry as a terminal QR code
- serve  : run the HTTP API

If the secrets file is missing or holds no valid entry, `watch` and `show`
prompt for URLs and save what was entered.
"""

import argparse
import logging
import os
import subprocess
import sys
import time
from typing import Callable, List, Optional, Sequence

import qrcode

from gmfa import config
from gmfa.core import otp_core
from gmfa.core.errors import InvalidSecretEncodingError, OTPAuthURIError
from gmfa.core.otpauth import (
    URL_FORMAT_HINT,
    Credential,
    format_otpauth_url,
    parse_otpauth_url,
)
from gmfa.database.secrets_file import (
    append_credentials,
    load_credentials,
    save_credentials,
)

logger = logging.getLogger(__name__)

CONSOLE_BOLD = "\033[1m"
CONSOLE_RESET = "\033[0m"
CODE_UNAVAILABLE = "ERROR"


# --- Terminal helpers ---
def clear_screen() -> None:
    cmd = ["cmd", "/c", "cls"] if os.name == "nt" else ["clear"]
    try:
        subprocess.run(cmd, check=False)
    except OSError:
        # no clear binary (minimal containers): fall back to ANSI
        print("\033[2J\033[H", end="", flush=True)


def display_codes(
    credentials: Sequence[Credential],
    timestamp: int,
    timestep: int = otp_core.DEFAULT_TIME_STEP,
    digits: int = otp_core.DEFAULT_DIGITS,
    out=None,
) -> None:
    """Print one line per credential; entries with a bad secret show ERROR instead of a code."""
    expires = otp_core.valid_until(timestamp, timestep)
    print(f"\nTOTP Codes (valid until {time.strftime('%H:%M:%S', time.localtime(expires))}):", file=out)
    print("-----------------------------", file=out)

    for credential in credentials:
        try:
            code = otp_core.totp(credential.secret, timestamp, timestep, digits)
            shown = f"{CONSOLE_BOLD}{code}{CONSOLE_RESET}"
        except InvalidSecretEncodingError as e:
            logger.warning("Cannot generate code for %s: %s", credential.label, e)
            shown = CODE_UNAVAILABLE
        print(f" * {credential.label:<20}: {shown}", file=out)


def prompt_for_urls(input_fn: Optional[Callable[[str], str]] = None, out=None) -> List[Credential]:
    """Read otpauth URLs until an empty line (or EOF); invalid entries are reported and skipped."""
    input_fn = input_fn or input
    print("Please enter your MFA URL(s).", file=out)
    print(f"Format: {URL_FORMAT_HINT}", file=out)
    print("Enter an empty line when finished.", file=out)

    entries = []
    while True:
        try:
            text = input_fn("Enter MFA URL: ").strip()
        except EOFError:
            break
        if not text:
            break
        try:
            entry = parse_otpauth_url(text)
        except OTPAuthURIError as e:
            print(f"Error: {e}", file=out)
            continue
        entries.append(entry)
        print(f"Added: {entry.label}", file=out)
    return entries


def load_or_prompt(path: str, input_fn: Optional[Callable[[str], str]] = None, out=None) -> List[Credential]:
    """
    Load the secrets file; if it is unreadable or empty, prompt for URLs and save them.

    Returns an empty list when nothing usable was loaded or entered.
    """
    try:
        entries = load_credentials(path)
    except OSError as e:
        print(f"Secrets file not found or couldn't be read: {e}", file=out)
        entries = []
    else:
        if not entries:
            print("No MFA secrets found in the file.", file=out)

    if entries:
        return entries

    entries = prompt_for_urls(input_fn, out)
    if not entries:
        print("No valid MFA URLs provided. Exiting.", file=out)
        return []
    try:
        save_credentials(entries, path)
        print(f"Saved {len(entries)} MFA entries to {path}", file=out)
    except OSError as e:
        print(f"Warning: Failed to save secrets to {path}: {e}", file=out)
    return entries


def _load_existing(path: str) -> Optional[List[Credential]]:
    try:
        return load_credentials(path)
    except OSError as e:
        print(f"Secrets file not found or couldn't be read: {e}")
        return None


def _select(credentials: Sequence[Credential], index: int) -> Optional[Credential]:
    if not 0 <= index < len(credentials):
        print(f"No entry at index {index} (have {len(credentials)}).")
        return None
    return credentials[index]


# --- CLI command handlers ---
def cmd_watch(args) -> int:
    try:
        entries = load_or_prompt(args.file)
        if not entries:
            return 1

        clear_screen()
        print("2FA TOTP Console Application")
        print("-----------------------------")
        print(f"Loaded {len(entries)} MFA entries from {args.file}\n")
        display_codes(entries, otp_core.now(), args.period, args.digits)

        while True:
            # next step boundary, recomputed each tick
            time.sleep(otp_core.seconds_remaining(otp_core.now(), args.period))
            clear_screen()
            display_codes(entries, otp_core.now(), args.period, args.digits)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_show(args) -> int:
    entries = load_or_prompt(args.file)
    if not entries:
        return 1
    display_codes(entries, otp_core.now(), args.period, args.digits)
    return 0


def cmd_add(args) -> int:
    if args.urls:
        entries = []
        for text in args.urls:
            try:
                entry = parse_otpauth_url(text.strip())
            except OTPAuthURIError as e:
                print(f"Error: {e} ({text})")
                continue
            entries.append(entry)
            print(f"Added: {entry.label}")
    else:
        entries = prompt_for_urls()

    if not entries:
        print("No valid MFA URLs provided.")
        return 1
    stored = append_credentials(entries, args.file)
    print(f"Saved {len(stored)} MFA entries to {args.file}")
    return 0


def cmd_list(args) -> int:
    entries = _load_existing(args.file)
    if entries is None:
        return 1
    for i, entry in enumerate(entries):
        print(f"[{i}] {entry.label}")
    return 0


def cmd_uri(args) -> int:
    entries = _load_existing(args.file)
    entry = _select(entries, args.index) if entries is not None else None
    if entry is None:
        return 1
    print(format_otpauth_url(entry))
    return 0


def cmd_qr(args) -> int:
    entries = _load_existing(args.file)
    entry = _select(entries, args.index) if entries is not None else None
    if entry is None:
        return 1

    qr = qrcode.QRCode(border=1)
    qr.add_data(format_otpauth_url(entry))
    qr.make(fit=True)
    print(entry.label)
    qr.print_ascii(out=sys.stdout, invert=True)
    return 0


def cmd_serve(args) -> int:
    from gmfa.backend.app import create_app

    app = create_app(secrets_file=args.file, digits=args.digits, period=args.period)
    logger.info("Serving codes for %s on http://%s:%d", args.file, args.host, args.port)
    app.run(host=args.host, port=args.port)
    return 0


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gmfa", description="Console TOTP (RFC 6238) code generator")
    p.add_argument("--file", help="Secrets file (default: $GMFA_SECRETS_FILE or ~/.gmfa.conf)")
    p.add_argument("--digits", type=int, help="Number of code digits (default: $GMFA_DIGITS or 6)")
    p.add_argument("--period", type=int, help="TOTP time step in seconds (default: $GMFA_PERIOD or 30)")
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_watch)

    pw = sub.add_parser("watch", help="Show codes and refresh them on every step (default)")
    pw.set_defaults(func=cmd_watch)

    ps = sub.add_parser("show", help="Print current codes once")
    ps.set_defaults(func=cmd_show)

    pa = sub.add_parser("add", help="Add otpauth URLs to the secrets file")
    pa.add_argument("urls", nargs="*", help="otpauth://totp/... URLs (prompted if omitted)")
    pa.set_defaults(func=cmd_add)

    pl = sub.add_parser("list", help="List stored labels")
    pl.set_defaults(func=cmd_list)

    pu = sub.add_parser("uri", help="Print the canonical otpauth line of an entry")
    pu.add_argument("index", type=int, help="Entry index as shown by 'list'")
    pu.set_defaults(func=cmd_uri)

    pq = sub.add_parser("qr", help="Draw an entry as a terminal QR code")
    pq.add_argument("index", type=int, help="Entry index as shown by 'list'")
    pq.set_defaults(func=cmd_qr)

    pv = sub.add_parser("serve", help="Run the HTTP API")
    pv.add_argument("--host", default="127.0.0.1")
    pv.add_argument("--port", type=int, default=5000)
    pv.set_defaults(func=cmd_serve)

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config.setup_logging(args.verbose)

    try:
        args.digits = config.get_digits(args.digits)
        args.period = config.get_period(args.period)
    except ValueError as e:
        parser.error(str(e))
    if not 1 <= args.digits <= otp_core.MAX_DIGITS:
        parser.error(f"--digits must be between 1 and {otp_core.MAX_DIGITS}")
    if args.period <= 0:
        parser.error("--period must be a positive number of seconds")
    args.file = config.get_secrets_file(args.file)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
