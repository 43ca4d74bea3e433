"""
Printable armor for salted ciphertext.

Wire format (text):

    base64( MARKER || payload )

- MARKER is the 8-byte constant ``b"Salted__"`` identifying the salted key
  derivation format, version 1. Every armored text therefore starts with
  the characters ``U2FsdGVkX1``.
- payload is ``salt || ciphertext`` (split by the caller).
- Standard base64 alphabet with ``=`` padding, optionally wrapped at a
  fixed column with ``\\n``. This is the layout ``openssl enc -a -salt``
  reads and writes.
- Decoding is strict: the base64 must be canonical, so flipping any
  character of the armor never yields the same payload.
"""

import base64
import binascii
import re
from typing import Optional

from sealtext.core.exceptions import (
    InvalidParameterError,
    MalformedArmorError,
    TruncatedInputError,
    UnsupportedFormatError,
)

MARKER = b"Salted__"
DEFAULT_LINE_WIDTH = 64

_LINE_BREAKS = re.compile(r"[\r\n]+")
_BASE64_BODY = re.compile(r"[A-Za-z0-9+/]*={0,2}")


class ArmorCodec:
    def __init__(self, line_width: Optional[int] = DEFAULT_LINE_WIDTH):
        if line_width is not None and line_width <= 0:
            raise InvalidParameterError("line_width must be positive or None")
        self.line_width = line_width

    def encode(self, payload: bytes) -> str:
        text = base64.b64encode(MARKER + bytes(payload)).decode("ascii")
        if not self.line_width:
            return text
        width = self.line_width
        return "\n".join(text[i:i + width] for i in range(0, len(text), width))

    def decode(self, text: str) -> bytes:
        if isinstance(text, (bytes, bytearray)):
            try:
                text = text.decode("ascii")
            except UnicodeDecodeError:
                raise MalformedArmorError("Armored text contains non-ASCII bytes") from None

        body = _LINE_BREAKS.sub("", text.strip())
        if not body:
            raise TruncatedInputError("Armored text is empty")
        if not _BASE64_BODY.fullmatch(body):
            raise MalformedArmorError("Armored text contains characters outside the base64 alphabet")
        if len(body) % 4:
            raise TruncatedInputError("Armored text length is not a multiple of 4 (truncated?)")

        try:
            raw = base64.b64decode(body, validate=True)
        except binascii.Error as exc:
            raise MalformedArmorError(f"Invalid base64 armor: {exc}") from exc
        # unused low bits before "=" must be zero, so each payload has one armor
        if base64.b64encode(raw).decode("ascii") != body:
            raise MalformedArmorError("Armored text has non-canonical base64 padding bits")

        if not raw.startswith(MARKER):
            if MARKER.startswith(raw):
                raise TruncatedInputError("Armored text ends inside the format marker")
            raise UnsupportedFormatError("Unrecognized format marker (expected salted format v1)")
        return raw[len(MARKER):]
