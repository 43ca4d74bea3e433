"""Text-level helpers for editor-style callers.

An editor integration works on strings: a selected region of a buffer, or a
single input string whose first line is the password (the convention of
``openssl enc -pass stdin``). These helpers turn those conventions into calls
on :class:`CryptoCore`, which itself always takes the password separately.
"""

from __future__ import annotations

import enum
from typing import Optional, Tuple, Union

from sealtext.core.exceptions import InvalidParameterError, PaddingOrKeyError
from sealtext.security.core import CryptoCore, Password


class Mode(enum.Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


def split_password_line(text: Union[str, bytes]) -> Tuple[bytearray, Union[str, bytes]]:
    """Split ``text`` into (password, body) at the first newline.

    Works on ``str`` or ``bytes``; the body keeps the input's type. The
    password comes back as a ``bytearray`` so the caller can wipe it.
    """
    newline = b"\n" if isinstance(text, (bytes, bytearray)) else "\n"
    first, sep, body = text.partition(newline)
    if not sep:
        raise InvalidParameterError("expected the password on the first line, followed by the text")
    password = bytearray(first.encode("utf-8") if isinstance(first, str) else first)
    while password.endswith(b"\r"):
        password.pop()
    return password, body


def transform_text(password: Password, text: str, mode: Mode, core: Optional[CryptoCore] = None) -> str:
    """Encrypt ``text`` to armor, or decrypt armor back to text."""
    core = core or CryptoCore()
    if mode is Mode.ENCRYPT:
        return core.encrypt(password, text)

    plaintext = core.decrypt(password, text)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError:
        # padding happened to check out but the result is not text
        raise PaddingOrKeyError() from None


def transform_region(
    buffer: str,
    start: int,
    end: int,
    password: Password,
    mode: Mode,
    core: Optional[CryptoCore] = None,
) -> str:
    """Return ``buffer`` with ``buffer[start:end]`` encrypted or decrypted in place.

    The input string is left untouched; a new string is returned.
    """
    if not 0 <= start <= end <= len(buffer):
        raise InvalidParameterError(f"invalid region {start}:{end} for a buffer of length {len(buffer)}")
    replacement = transform_text(password, buffer[start:end], mode, core)
    return buffer[:start] + replacement + buffer[end:]
