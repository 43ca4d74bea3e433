"""SealText: encrypt and decrypt text with a password."""

from sealtext.core.config import CryptoConfig
from sealtext.core.exceptions import (
    EntropyUnavailableError,
    InvalidParameterError,
    MalformedArmorError,
    PaddingOrKeyError,
    SealTextError,
    TruncatedInputError,
    UnsupportedFormatError,
)
from sealtext.security.core import CryptoCore, decrypt, encrypt

__version__ = "0.1.0"

__all__ = [
    "CryptoConfig",
    "CryptoCore",
    "encrypt",
    "decrypt",
    "SealTextError",
    "InvalidParameterError",
    "EntropyUnavailableError",
    "MalformedArmorError",
    "TruncatedInputError",
    "UnsupportedFormatError",
    "PaddingOrKeyError",
]
