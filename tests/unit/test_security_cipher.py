"""
Unit tests for the CBC cipher stage.
"""

import os
import pytest
from sealtext.core import config as config_module
from sealtext.core.config import CryptoConfig
from sealtext.core.exceptions import InvalidParameterError, PaddingOrKeyError, TruncatedInputError
from sealtext.security import cipher as cipher_module
from sealtext.security.cipher import CIPHER_SUITES, CipherEngine, get_suite


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def engine():
    return CipherEngine("aes-256-cbc")


@pytest.fixture
def key():
    return os.urandom(32)


@pytest.fixture
def iv():
    return os.urandom(16)


# ==============================================================================
# Tests: Suites
# ==============================================================================

def test_suite_registry():
    assert set(CIPHER_SUITES) == {"aes-128-cbc", "aes-192-cbc", "aes-256-cbc"}
    suite = get_suite("aes-256-cbc")
    assert suite.key_length == 32
    assert suite.iv_length == 16
    assert suite.material_length == 48


def test_unknown_suite():
    with pytest.raises(InvalidParameterError, match="Unsupported cipher"):
        CipherEngine("rot13")


def test_default_suite_matches_default_config():
    assert cipher_module.DEFAULT_CIPHER is config_module.DEFAULT_CIPHER
    assert CipherEngine().suite.name == CryptoConfig().cipher


# ==============================================================================
# Tests: Encrypt / Decrypt
# ==============================================================================

@pytest.mark.parametrize("size", [0, 1, 15, 16, 17, 1000])
def test_ciphertext_is_padded_to_block_size(engine, key, iv, size):
    """PKCS#7 always adds 1..16 bytes, so empty input gives one block."""
    ct = engine.encrypt(key, iv, b"x" * size)
    assert len(ct) % 16 == 0
    assert len(ct) == (size // 16 + 1) * 16
    assert engine.decrypt(key, iv, ct) == b"x" * size


@pytest.mark.parametrize("name", sorted(CIPHER_SUITES))
def test_each_suite_decrypts_its_output(name):
    engine = CipherEngine(name)
    key = os.urandom(engine.suite.key_length)
    iv = os.urandom(16)
    ct = engine.encrypt(key, iv, b"attack at dawn")
    assert engine.decrypt(key, iv, ct) == b"attack at dawn"


def test_accepts_bytearray_key_material(engine):
    key, iv = bytearray(os.urandom(32)), bytearray(os.urandom(16))
    ct = engine.encrypt(key, iv, b"data")
    assert engine.decrypt(key, iv, ct) == b"data"


def test_plaintext_not_mutated(engine, key, iv):
    data = bytearray(b"keep me")
    engine.encrypt(key, iv, data)
    assert data == bytearray(b"keep me")


# ==============================================================================
# Tests: Error paths
# ==============================================================================

def test_wrong_key_length(engine, iv):
    with pytest.raises(InvalidParameterError, match="32-byte key"):
        engine.encrypt(b"short", iv, b"data")


def test_wrong_iv_length(engine, key):
    with pytest.raises(InvalidParameterError, match="16-byte IV"):
        engine.encrypt(key, b"short", b"data")


@pytest.mark.parametrize("ct", [b"", b"x" * 15, b"x" * 17])
def test_decrypt_rejects_partial_blocks(engine, key, iv, ct):
    with pytest.raises(TruncatedInputError):
        engine.decrypt(key, iv, ct)


def test_decrypt_bad_padding(engine, key, iv):
    """Text ending in a byte > 16 can never be valid PKCS#7 padding."""
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

    raw = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ct = raw.update(b"a" * 32) + raw.finalize()

    with pytest.raises(PaddingOrKeyError, match="wrong password or corrupted input"):
        engine.decrypt(key, iv, ct)


def test_padding_error_hides_cause(engine, key, iv):
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

    raw = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ct = raw.update(b"a" * 16) + raw.finalize()

    with pytest.raises(PaddingOrKeyError) as info:
        engine.decrypt(key, iv, ct)
    assert info.value.__cause__ is None
    assert info.value.__suppress_context__
