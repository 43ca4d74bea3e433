"""Security helpers: salted password-based text encryption for SealText.

This package provides:
- PBKDF2 / Argon2id key and IV derivation from a password and salt
- AES-CBC encryption with PKCS#7 padding
- base64 armor carrying the ``Salted__`` format marker
- CryptoCore, which chains the three stages and wipes secrets after use
- optional OS keystore storage for passwords
"""

from .memory import SecretBuffer
from .cipher import CIPHER_SUITES, CipherEngine, CipherSuite, get_suite
from .kdf import DerivedKeyMaterial, KeyDeriver, generate_salt, kdf_params_to_dict
from .armor import MARKER, ArmorCodec
from .core import CryptoCore, Stage, decrypt, encrypt

__all__ = [
    "SecretBuffer",
    "CIPHER_SUITES",
    "CipherEngine",
    "CipherSuite",
    "get_suite",
    "DerivedKeyMaterial",
    "KeyDeriver",
    "generate_salt",
    "kdf_params_to_dict",
    "MARKER",
    "ArmorCodec",
    "CryptoCore",
    "Stage",
    "encrypt",
    "decrypt",
]
