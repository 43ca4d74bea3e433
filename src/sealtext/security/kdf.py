import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from argon2.low_level import Type, hash_secret_raw
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from sealtext.core.config import KDF_ARGON2ID, KDF_PBKDF2, CryptoConfig
from sealtext.core.exceptions import EntropyUnavailableError, InvalidParameterError
from sealtext.security.cipher import CipherSuite, get_suite
from sealtext.security.memory import wipe

logger = logging.getLogger(__name__)

_DIGESTS = {"sha256": hashes.SHA256, "sha512": hashes.SHA512}


def generate_salt(length: int = 8) -> bytes:
    """Return a cryptographically secure random salt."""
    try:
        return os.urandom(length)
    except (NotImplementedError, OSError) as exc:
        raise EntropyUnavailableError("OS random source could not supply a salt") from exc


@dataclass(repr=False)
class DerivedKeyMaterial:
    """Key and IV for one operation. Call :meth:`wipe` when done."""

    key: bytearray = field(default_factory=bytearray)
    iv: bytearray = field(default_factory=bytearray)

    def wipe(self) -> None:
        wipe(self.key)
        wipe(self.iv)

    def __repr__(self) -> str:
        return f"DerivedKeyMaterial(<{len(self.key)}-byte key>, <{len(self.iv)}-byte iv>)"


class KeyDeriver:
    """
    Turn a password and salt into key material for the configured cipher.

    Derivation is deterministic in (password, salt, config). The KDF output
    is ``key_length + iv_length`` bytes; the key comes first, then the IV,
    which matches ``openssl enc -pbkdf2``.
    """

    def __init__(self, config: Optional[CryptoConfig] = None, suite: Optional[CipherSuite] = None):
        self.config = config or CryptoConfig()
        self.suite = suite or get_suite(self.config.cipher)

    def derive(self, password, salt: bytes) -> DerivedKeyMaterial:
        if len(salt) != self.config.salt_length:
            raise InvalidParameterError(
                f"Salt must be {self.config.salt_length} bytes, got {len(salt)}"
            )
        if not password and not self.config.allow_empty_password:
            raise InvalidParameterError("Empty passwords are not allowed")

        length = self.suite.material_length
        if self.config.kdf == KDF_PBKDF2:
            raw = self._pbkdf2(password, salt, length)
        elif self.config.kdf == KDF_ARGON2ID:
            raw = self._argon2id(password, salt, length)
        else:
            raise InvalidParameterError(f"Unsupported KDF: {self.config.kdf!r}")

        buf = bytearray(raw)
        del raw
        material = DerivedKeyMaterial(
            key=buf[: self.suite.key_length],
            iv=buf[self.suite.key_length:],
        )
        wipe(buf)
        return material

    def _pbkdf2(self, password, salt: bytes, length: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=_DIGESTS[self.config.kdf_digest](),
            length=length,
            salt=salt,
            iterations=self.config.kdf_iterations,
        )
        return kdf.derive(password)

    def _argon2id(self, password, salt: bytes, length: int) -> bytes:
        # argon2-cffi copies the secret into its own C buffer
        return hash_secret_raw(
            secret=bytes(password),
            salt=salt,
            time_cost=self.config.kdf_iterations,
            memory_cost=self.config.argon2_memory_cost,
            parallelism=self.config.argon2_parallelism,
            hash_len=length,
            type=Type.ID,
        )


def kdf_params_to_dict(config: CryptoConfig, salt: bytes) -> Dict:
    """Describe how a key was derived, for debug logs. Never includes key material."""
    params = {
        "algo": config.kdf,
        "cipher": config.cipher,
        "salt": salt.hex(),
        "iterations": config.kdf_iterations,
    }
    if config.kdf == KDF_PBKDF2:
        params["digest"] = config.kdf_digest
    else:
        params["memory"] = config.argon2_memory_cost
        params["parallelism"] = config.argon2_parallelism
    return params
