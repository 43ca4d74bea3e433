"""
Unit tests for CryptoConfig.
"""

import dataclasses

import pytest
from sealtext.core.config import CryptoConfig, parse_line_width
from sealtext.core.exceptions import InvalidParameterError


# ==============================================================================
# Tests: Defaults
# ==============================================================================

def test_defaults():
    """Defaults match `openssl enc -aes-256-cbc -pbkdf2 -a -salt`."""
    config = CryptoConfig()
    assert config.cipher == "aes-256-cbc"
    assert config.kdf == "pbkdf2"
    assert config.kdf_digest == "sha256"
    assert config.kdf_iterations == 10_000
    assert config.salt_length == 8
    assert config.armor_line_width == 64
    assert config.allow_empty_password is False


def test_argon2_defaults_resolve_per_kdf():
    config = CryptoConfig(kdf="argon2id")
    assert config.kdf_iterations == 3
    assert config.max_kdf_iterations == 64


def test_config_is_frozen():
    config = CryptoConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.cipher = "aes-128-cbc"


# ==============================================================================
# Tests: Validation
# ==============================================================================

@pytest.mark.parametrize(
    "kwargs",
    [
        {"cipher": "des-cbc"},
        {"kdf": "md5"},
        {"kdf_digest": "md5"},
        {"kdf_iterations": 0},
        {"kdf_iterations": -5},
        {"salt_length": 4},
        {"salt_length": 65},
        {"armor_line_width": 0},
        {"argon2_parallelism": 0},
        {"kdf": "argon2id", "argon2_memory_cost": 4},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(InvalidParameterError):
        CryptoConfig(**kwargs)


def test_iteration_upper_bound():
    """A pathological KDF cost is refused up front."""
    with pytest.raises(InvalidParameterError, match="exceeds"):
        CryptoConfig(kdf_iterations=10_000_001)

    with pytest.raises(InvalidParameterError, match="exceeds"):
        CryptoConfig(kdf_iterations=500, max_kdf_iterations=100)


def test_invalid_parameter_error_is_value_error():
    with pytest.raises(ValueError):
        CryptoConfig(salt_length=1)


# ==============================================================================
# Tests: replace()
# ==============================================================================

def test_replace_validates():
    config = CryptoConfig()
    assert config.replace(cipher="aes-128-cbc").cipher == "aes-128-cbc"
    with pytest.raises(InvalidParameterError):
        config.replace(salt_length=2)


def test_replace_kdf_resets_iteration_defaults():
    config = CryptoConfig().replace(kdf="argon2id")
    assert config.kdf_iterations == 3

    explicit = CryptoConfig().replace(kdf="argon2id", kdf_iterations=2)
    assert explicit.kdf_iterations == 2


# ==============================================================================
# Tests: from_env()
# ==============================================================================

def test_from_env_reads_prefixed_variables():
    env = {
        "SEALTEXT_CIPHER": "AES-128-CBC",
        "SEALTEXT_KDF_ITERATIONS": "2000",
        "SEALTEXT_SALT_LENGTH": "16",
        "SEALTEXT_ARMOR_LINE_WIDTH": "none",
        "UNRELATED": "x",
    }
    config = CryptoConfig.from_env(env)
    assert config.cipher == "aes-128-cbc"
    assert config.kdf_iterations == 2000
    assert config.salt_length == 16
    assert config.armor_line_width is None


def test_from_env_empty_gives_defaults():
    assert CryptoConfig.from_env({}) == CryptoConfig()


def test_from_env_bad_integer():
    with pytest.raises(InvalidParameterError, match="must be an integer"):
        CryptoConfig.from_env({"SEALTEXT_KDF_ITERATIONS": "lots"})


@pytest.mark.parametrize("value,expected", [("0", None), ("None", None), ("76", 76)])
def test_parse_line_width(value, expected):
    assert parse_line_width(value) == expected
