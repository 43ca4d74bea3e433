"""Block cipher stage: CBC mode with PKCS#7 padding.

Padding lets any plaintext length through, including empty input, which
always encrypts to exactly one block. Invalid padding on decryption is the
usual sign of a wrong password and is reported as
:class:`PaddingOrKeyError` with no further detail.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Type

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import BlockCipherAlgorithm, Cipher, algorithms, modes

from sealtext.core.config import DEFAULT_CIPHER
from sealtext.core.exceptions import InvalidParameterError, PaddingOrKeyError, TruncatedInputError


@dataclass(frozen=True)
class CipherSuite:
    name: str
    algorithm: Type[BlockCipherAlgorithm]
    key_length: int
    iv_length: int = 16
    block_size: int = 16

    @property
    def material_length(self) -> int:
        # number of bytes the KDF must produce: key followed by IV
        return self.key_length + self.iv_length


CIPHER_SUITES: Dict[str, CipherSuite] = {
    "aes-256-cbc": CipherSuite("aes-256-cbc", algorithms.AES, key_length=32),
    "aes-192-cbc": CipherSuite("aes-192-cbc", algorithms.AES, key_length=24),
    "aes-128-cbc": CipherSuite("aes-128-cbc", algorithms.AES, key_length=16),
}


def get_suite(name: str) -> CipherSuite:
    try:
        return CIPHER_SUITES[name]
    except KeyError:
        raise InvalidParameterError(f"Unsupported cipher: {name!r}") from None


class CipherEngine:
    """Encrypt/decrypt byte strings with one cipher suite.

    The engine holds only the suite description; keys and IVs are passed in
    per call and not kept.
    """

    def __init__(self, suite: CipherSuite | str = DEFAULT_CIPHER):
        self.suite = get_suite(suite) if isinstance(suite, str) else suite

    def _cipher(self, key, iv) -> Cipher:
        if len(key) != self.suite.key_length:
            raise InvalidParameterError(
                f"{self.suite.name} needs a {self.suite.key_length}-byte key, got {len(key)}"
            )
        if len(iv) != self.suite.iv_length:
            raise InvalidParameterError(
                f"{self.suite.name} needs a {self.suite.iv_length}-byte IV, got {len(iv)}"
            )
        return Cipher(self.suite.algorithm(key), modes.CBC(iv))

    def encrypt(self, key, iv, plaintext: bytes) -> bytes:
        padder = padding.PKCS7(self.suite.block_size * 8).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = self._cipher(key, iv).encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, key, iv, ciphertext: bytes) -> bytes:
        if not ciphertext or len(ciphertext) % self.suite.block_size:
            raise TruncatedInputError(
                f"Ciphertext length {len(ciphertext)} is not a positive multiple "
                f"of the {self.suite.block_size}-byte block size"
            )
        decryptor = self._cipher(key, iv).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(self.suite.block_size * 8).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError:
            raise PaddingOrKeyError() from None
