"""
CryptoCore: password-based text encryption in one call.

encrypt:  salt = random(salt_length)
          key, iv = KDF(password, salt)
          armored = armor(salt || CBC(key, iv, plaintext))

decrypt:  payload = dearmor(armored)
          salt, ciphertext = payload[:salt_length], payload[salt_length:]
          plaintext = CBC^-1(KDF(password, salt), ciphertext)

Each call walks the stages IDLE -> DERIVING_KEY -> CIPHERING -> ARMORING
-> DONE (decrypt de-armors first). Nothing about a call is stored on the
instance; the only shared state is the read-only config, so one core can
serve any number of callers.

Security Note:
    Never log passwords, keys, IVs or plaintext. Only sizes, algorithm
    names and KDF parameters (including the salt, which is public) are logged.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional, Union

from sealtext.core.config import CryptoConfig
from sealtext.core.exceptions import InvalidParameterError, TruncatedInputError
from sealtext.security.armor import ArmorCodec
from sealtext.security.cipher import CipherEngine, get_suite
from sealtext.security.kdf import KeyDeriver, generate_salt, kdf_params_to_dict
from sealtext.security.memory import SecretBuffer

logger = logging.getLogger(__name__)

Password = Union[bytes, bytearray, str]


class Stage(enum.Enum):
    IDLE = "idle"
    DERIVING_KEY = "deriving-key"
    CIPHERING = "ciphering"
    ARMORING = "armoring"
    DONE = "done"


class CryptoCore:
    def __init__(self, config: Optional[CryptoConfig] = None):
        self.config = config or CryptoConfig()
        suite = get_suite(self.config.cipher)
        self.deriver = KeyDeriver(self.config, suite)
        self.engine = CipherEngine(suite)
        self.codec = ArmorCodec(self.config.armor_line_width)

    def _log_stage(self, op: str, stage: Stage) -> None:
        logger.debug("%s: %s", op, stage.value)

    def encrypt(self, password: Password, plaintext: Union[bytes, str]) -> str:
        """Encrypt ``plaintext`` and return armored text.

        Raises:
            EntropyUnavailableError: the OS could not supply a salt.
            InvalidParameterError: empty password (unless allowed by config).
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")
        self._log_stage("encrypt", Stage.IDLE)

        with SecretBuffer(password) as secret:
            salt = generate_salt(self.config.salt_length)

            self._log_stage("encrypt", Stage.DERIVING_KEY)
            logger.debug("kdf params: %s", kdf_params_to_dict(self.config, salt))
            material = self.deriver.derive(secret.data, salt)
            try:
                # the password is no longer needed once the key exists
                secret.wipe()

                self._log_stage("encrypt", Stage.CIPHERING)
                ciphertext = self.engine.encrypt(material.key, material.iv, plaintext)
            finally:
                material.wipe()

        self._log_stage("encrypt", Stage.ARMORING)
        armored = self.codec.encode(salt + ciphertext)

        logger.debug(
            "encrypted %d bytes with %s/%s into %d armored chars",
            len(plaintext), self.config.cipher, self.config.kdf, len(armored),
        )
        self._log_stage("encrypt", Stage.DONE)
        return armored

    def decrypt(self, password: Password, armored: str) -> bytes:
        """Decrypt armored text produced by :meth:`encrypt`.

        Raises:
            MalformedArmorError: not valid base64 armor.
            UnsupportedFormatError: unknown format marker.
            TruncatedInputError: input shorter than salt or a cipher block.
            PaddingOrKeyError: wrong password or corrupted input.
        """
        self._log_stage("decrypt", Stage.IDLE)
        with SecretBuffer(password) as secret:
            if not len(secret) and not self.config.allow_empty_password:
                raise InvalidParameterError("Empty passwords are not allowed")

            self._log_stage("decrypt", Stage.ARMORING)
            payload = self.codec.decode(armored)

            salt_length = self.config.salt_length
            if len(payload) < salt_length:
                raise TruncatedInputError(
                    f"Input holds {len(payload)} bytes after the marker, "
                    f"fewer than the {salt_length}-byte salt"
                )
            salt, ciphertext = payload[:salt_length], payload[salt_length:]

            self._log_stage("decrypt", Stage.DERIVING_KEY)
            logger.debug("kdf params: %s", kdf_params_to_dict(self.config, salt))
            material = self.deriver.derive(secret.data, salt)
            try:
                secret.wipe()

                self._log_stage("decrypt", Stage.CIPHERING)
                plaintext = self.engine.decrypt(material.key, material.iv, ciphertext)
            finally:
                material.wipe()

        logger.debug("decrypted %d armored chars into %d bytes", len(armored), len(plaintext))
        self._log_stage("decrypt", Stage.DONE)
        return plaintext


def encrypt(password: Password, plaintext: Union[bytes, str], config: Optional[CryptoConfig] = None) -> str:
    return CryptoCore(config).encrypt(password, plaintext)


def decrypt(password: Password, armored: str, config: Optional[CryptoConfig] = None) -> bytes:
    return CryptoCore(config).decrypt(password, armored)
