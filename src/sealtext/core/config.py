"""
Configuration for the SealText crypto core.

The configuration is set once (at startup, from arguments or environment)
and read-only afterwards. It is passed explicitly into :class:`CryptoCore`
instead of living in module globals, so the core stays reentrant.

Environment variables understood by :meth:`CryptoConfig.from_env`:

    SEALTEXT_CIPHER            aes-256-cbc | aes-192-cbc | aes-128-cbc
    SEALTEXT_KDF               pbkdf2 | argon2id
    SEALTEXT_KDF_DIGEST        sha256 | sha512 (pbkdf2 only)
    SEALTEXT_KDF_ITERATIONS    positive integer
    SEALTEXT_SALT_LENGTH       8..64
    SEALTEXT_ARMOR_LINE_WIDTH  positive integer, or 0 / "none" for one line
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from sealtext.core.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_CIPHER = "aes-256-cbc"

KDF_PBKDF2 = "pbkdf2"
KDF_ARGON2ID = "argon2id"

# default cost and hard upper bound per KDF
DEFAULT_ITERATIONS: Dict[str, int] = {KDF_PBKDF2: 10_000, KDF_ARGON2ID: 3}
MAX_ITERATIONS: Dict[str, int] = {KDF_PBKDF2: 10_000_000, KDF_ARGON2ID: 64}

KDF_DIGESTS = ("sha256", "sha512")

MIN_SALT_LENGTH = 8
MAX_SALT_LENGTH = 64

ENV_PREFIX = "SEALTEXT_"


@dataclass(frozen=True)
class CryptoConfig:
    """Read-only settings shared by every encrypt/decrypt call.

    ``kdf_iterations`` and ``max_kdf_iterations`` default per KDF when left
    as ``None``. For argon2id the iteration count is the Argon2 time cost.
    """

    cipher: str = DEFAULT_CIPHER
    kdf: str = KDF_PBKDF2
    kdf_digest: str = "sha256"
    kdf_iterations: Optional[int] = None
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1
    salt_length: int = 8
    armor_line_width: Optional[int] = 64
    allow_empty_password: bool = False
    max_kdf_iterations: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kdf not in DEFAULT_ITERATIONS:
            raise InvalidParameterError(f"Unsupported KDF: {self.kdf!r}")
        if self.kdf_iterations is None:
            object.__setattr__(self, "kdf_iterations", DEFAULT_ITERATIONS[self.kdf])
        if self.max_kdf_iterations is None:
            object.__setattr__(self, "max_kdf_iterations", MAX_ITERATIONS[self.kdf])
        self._validate()

    def _validate(self) -> None:
        from sealtext.security.cipher import CIPHER_SUITES

        if self.cipher not in CIPHER_SUITES:
            raise InvalidParameterError(f"Unsupported cipher: {self.cipher!r}")
        if self.kdf_digest not in KDF_DIGESTS:
            raise InvalidParameterError(f"Unsupported KDF digest: {self.kdf_digest!r}")
        if not isinstance(self.kdf_iterations, int) or self.kdf_iterations <= 0:
            raise InvalidParameterError("kdf_iterations must be a positive integer")
        if self.kdf_iterations > self.max_kdf_iterations:
            raise InvalidParameterError(
                f"kdf_iterations {self.kdf_iterations} exceeds the configured "
                f"maximum of {self.max_kdf_iterations} for {self.kdf}"
            )
        if not MIN_SALT_LENGTH <= self.salt_length <= MAX_SALT_LENGTH:
            raise InvalidParameterError(
                f"salt_length must be between {MIN_SALT_LENGTH} and {MAX_SALT_LENGTH} bytes"
            )
        if self.armor_line_width is not None and self.armor_line_width <= 0:
            raise InvalidParameterError("armor_line_width must be positive or None")
        if self.argon2_parallelism <= 0:
            raise InvalidParameterError("argon2_parallelism must be positive")
        # argon2 needs at least 8 KiB of memory per lane
        if self.argon2_memory_cost < 8 * self.argon2_parallelism:
            raise InvalidParameterError("argon2_memory_cost must be at least 8 * parallelism")

    def replace(self, **changes) -> "CryptoConfig":
        """Return a validated copy with ``changes`` applied.

        Changing ``kdf`` without an explicit iteration count resets the
        iteration defaults to the new KDF's.
        """
        if "kdf" in changes and changes["kdf"] != self.kdf:
            changes.setdefault("kdf_iterations", None)
            changes.setdefault("max_kdf_iterations", None)
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CryptoConfig":
        """Build a config from ``SEALTEXT_*`` environment variables."""
        env = os.environ if environ is None else environ
        kwargs: Dict[str, object] = {}

        for field in ("cipher", "kdf", "kdf_digest"):
            value = env.get(ENV_PREFIX + field.upper())
            if value:
                kwargs[field] = value.strip().lower()

        for field in ("kdf_iterations", "salt_length"):
            value = env.get(ENV_PREFIX + field.upper())
            if value:
                kwargs[field] = _parse_int(ENV_PREFIX + field.upper(), value)

        width = env.get(ENV_PREFIX + "ARMOR_LINE_WIDTH")
        if width:
            kwargs["armor_line_width"] = parse_line_width(width)

        if kwargs:
            logger.debug("Config overrides from environment: %s", sorted(kwargs))
        return cls(**kwargs)


def parse_line_width(value: str) -> Optional[int]:
    """Parse a line width where ``0`` or ``none`` mean no wrapping."""
    if value.strip().lower() in ("0", "none"):
        return None
    return _parse_int("armor line width", value)


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}") from exc
