"""
Command line front end for SealText.

Stands in for the editor integration: the "selection" comes from a file,
stdin or the clipboard, and the result goes to a file, stdout or the
clipboard.

    sealtext encrypt -i notes.txt > notes.txt.asc
    sealtext decrypt -i notes.txt.asc
    printf 'hunter2\\nsecret text' | sealtext encrypt --password-first-line
    sealtext keyring set sealtext alice
    sealtext decrypt --keyring sealtext alice -i notes.txt.asc

The password is taken from the first input line (``--password-first-line``),
from the OS keystore (``--keyring SERVICE ACCOUNT``), or prompted for.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pyperclip

from sealtext.core.config import DEFAULT_ITERATIONS, KDF_DIGESTS, CryptoConfig, parse_line_width
from sealtext.core.exceptions import (
    EntropyUnavailableError,
    InvalidParameterError,
    KeystoreError,
    MalformedArmorError,
    PaddingOrKeyError,
    SealTextError,
    TruncatedInputError,
    UnsupportedFormatError,
)
from sealtext.frontend.cli.clipboard import copy_to_clipboard, paste_from_clipboard
from sealtext.frontend.cli.logging_config import configure_logging
from sealtext.frontend.cli.region import Mode, split_password_line
from sealtext.security.cipher import CIPHER_SUITES
from sealtext.security.core import CryptoCore
from sealtext.security.keystore import delete_password, load_password, save_password
from sealtext.security.memory import wipe

logger = logging.getLogger(__name__)

# most specific first
_ERROR_MESSAGES = (
    (PaddingOrKeyError, "wrong password or corrupted input"),
    (TruncatedInputError, "input is truncated"),
    (UnsupportedFormatError, "input is not in a supported format"),
    (MalformedArmorError, "input is not valid armored text"),
    (EntropyUnavailableError, "no secure random source available"),
    (KeystoreError, "keystore error"),
    (InvalidParameterError, "invalid parameter"),
    (SealTextError, "error"),
)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sealtext",
        description="Encrypt or decrypt text with a password (salted AES-CBC, base64 armor).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output on stderr (-v info, -vv debug)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for mode in Mode:
        cmd = sub.add_parser(mode.value, help=f"{mode.value} text")
        _add_io_arguments(cmd)
        _add_crypto_arguments(cmd)

    kr = sub.add_parser("keyring", help="Manage passwords stored in the OS keystore")
    kr.add_argument("action", choices=("set", "delete"))
    kr.add_argument("service")
    kr.add_argument("account")
    kr.add_argument(
        "--force",
        action="store_true",
        help="Store even if the keyring backend looks insecure",
    )
    return parser


def _add_io_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-i", "--input", type=Path, help="Read input from FILE (default: stdin)")
    source.add_argument("--from-clipboard", action="store_true", help="Read input from the clipboard")
    parser.add_argument("-o", "--output", type=Path, help="Write result to FILE (default: stdout)")
    parser.add_argument("--copy", action="store_true", help="Also copy the result to the clipboard")

    password = parser.add_mutually_exclusive_group()
    password.add_argument(
        "--password-first-line",
        action="store_true",
        help="The first line of the input is the password",
    )
    password.add_argument(
        "--keyring",
        nargs=2,
        metavar=("SERVICE", "ACCOUNT"),
        help="Use the password stored in the OS keystore",
    )


def _add_crypto_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--cipher", choices=sorted(CIPHER_SUITES), help="Cipher (default: aes-256-cbc)")
    parser.add_argument("--kdf", choices=sorted(DEFAULT_ITERATIONS), help="Key derivation (default: pbkdf2)")
    parser.add_argument("--md", dest="kdf_digest", choices=KDF_DIGESTS, help="PBKDF2 digest (default: sha256)")
    parser.add_argument("--iter", dest="kdf_iterations", type=int, help="KDF iteration count / Argon2 time cost")
    parser.add_argument("--salt-length", type=int, help="Salt length in bytes (default: 8)")
    parser.add_argument(
        "--line-width",
        dest="armor_line_width",
        type=parse_line_width,
        default=argparse.SUPPRESS,
        help="Wrap armor at N columns; 0 for a single line (default: 64)",
    )
    parser.add_argument(
        "--allow-empty-password",
        action="store_true",
        default=None,
        help="Accept an empty password",
    )


def build_config(args: argparse.Namespace, base: Optional[CryptoConfig] = None) -> CryptoConfig:
    """Apply command line overrides on top of ``base`` (environment by default)."""
    config = base or CryptoConfig.from_env()
    overrides = {}
    for name in ("cipher", "kdf", "kdf_digest", "kdf_iterations", "salt_length", "allow_empty_password"):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    if hasattr(args, "armor_line_width"):
        overrides["armor_line_width"] = args.armor_line_width
    return config.replace(**overrides) if overrides else config


def _read_input(args: argparse.Namespace) -> bytes:
    if args.from_clipboard:
        return paste_from_clipboard().encode("utf-8")
    if args.input is not None:
        return args.input.read_bytes()
    return sys.stdin.buffer.read()


def _write_output(args: argparse.Namespace, data: bytes) -> None:
    if args.output is not None:
        args.output.write_bytes(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def _prompt_password(confirm: bool) -> bytearray:
    password = bytearray(getpass.getpass("Password: ").encode("utf-8"))
    if confirm:
        again = bytearray(getpass.getpass("Verify password: ").encode("utf-8"))
        try:
            if again != password:
                wipe(password)
                raise InvalidParameterError("passwords do not match")
        finally:
            wipe(again)
    return password


def _keyring_password(service: str, account: str) -> bytearray:
    stored = load_password(service, account)
    if stored is None:
        raise KeystoreError(f"no password stored for {service}/{account}")
    return bytearray(stored)


def run_crypto(args: argparse.Namespace, mode: Mode) -> None:
    config = build_config(args)
    core = CryptoCore(config)

    data = _read_input(args)
    if args.password_first_line:
        password, data = split_password_line(data)
    elif args.keyring:
        password = _keyring_password(*args.keyring)
    else:
        password = _prompt_password(confirm=mode is Mode.ENCRYPT)

    try:
        if mode is Mode.ENCRYPT:
            text = core.encrypt(password, data)
            result = (text + "\n").encode("ascii")
        else:
            try:
                armored = data.decode("ascii")
            except UnicodeDecodeError:
                raise MalformedArmorError("input contains non-ASCII bytes") from None
            result = core.decrypt(password, armored)
            text = result.decode("utf-8", errors="replace")
    finally:
        wipe(password)

    _write_output(args, result)
    if args.copy:
        copy_to_clipboard(text)
        logger.info("Copied result to clipboard")


def run_keyring(args: argparse.Namespace) -> int:
    if args.action == "set":
        password = _prompt_password(confirm=True)
        try:
            save_password(args.service, args.account, bytes(password), force=args.force)
        finally:
            wipe(password)
        print(f"Stored password for {args.service}/{args.account}.", file=sys.stderr)
        return 0

    if not delete_password(args.service, args.account):
        print(f"No password stored for {args.service}/{args.account}.", file=sys.stderr)
        return 1
    print(f"Deleted password for {args.service}/{args.account}.", file=sys.stderr)
    return 0


def _describe(exc: SealTextError) -> str:
    for cls, message in _ERROR_MESSAGES:
        if isinstance(exc, cls):
            if isinstance(exc, PaddingOrKeyError):
                return message
            return f"{message}: {exc}"
    return str(exc)


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "keyring":
            return run_keyring(args)
        run_crypto(args, Mode(args.command))
    except SealTextError as exc:
        print(f"sealtext: {_describe(exc)}", file=sys.stderr)
        return 1
    except pyperclip.PyperclipException as exc:
        print(f"sealtext: clipboard unavailable: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"sealtext: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
