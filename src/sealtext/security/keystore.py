"""OS keystore integration using keyring for optional, convenient password storage.

This module provides a tiny wrapper around `keyring` to store and retrieve
encryption passwords (base64-encoded) under a service/account pair, so the
CLI can encrypt and decrypt without prompting. Use this only for opt-in
convenience storage; do not assume keyring provides hardware-backed security
on all platforms.
"""
import base64
import binascii
import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from sealtext.core.exceptions import KeystoreError

logger = logging.getLogger(__name__)


def assess_keyring_backend() -> tuple[bool, str]:
    """Return (is_secure, message) describing the current keyring backend.

    Heuristics are used because the `keyring` package exposes different backends
    across platforms.
    """
    try:
        backend = keyring.get_keyring()
    except Exception as e:
        return False, f"failed to get keyring backend: {e}"

    name = backend.__class__.__name__
    priority = getattr(backend, "priority", None)

    insecure_indicators = ("Plaintext", "Uncrypted", "Simple", "File", "Fail")
    if any(tok in name for tok in insecure_indicators):
        return False, f"insecure backend detected: {name}"

    if priority is not None and priority <= 0:
        return False, f"no suitable secure keyring backend available (priority={priority}, backend={name})"

    # treat known platform backends as acceptable
    if "Win" in name or "Keychain" in name or "SecretService" in name or "KWallet" in name:
        return True, f"backend looks acceptable: {name} (priority={priority})"

    return True, f"unknown backend '{name}', treat with caution (priority={priority})"


def save_password(service: str, account: str, password: bytes, force: bool = False) -> None:
    """Persist ``password`` in the OS keystore under (service, account).

    Refuses backends that look insecure unless ``force`` is set.
    """
    if not force:
        secure, msg = assess_keyring_backend()
        if not secure:
            raise KeystoreError(
                f"refusing to store password in OS keystore: {msg}; "
                "pass force=True to override if you understand the risk"
            )
    secret = base64.b64encode(bytes(password)).decode("ascii")
    try:
        keyring.set_password(service, account, secret)
    except KeyringError as exc:
        raise KeystoreError(f"could not store password for {service}/{account}: {exc}") from exc
    logger.info("Stored password for %s/%s in OS keystore", service, account)


def load_password(service: str, account: str) -> Optional[bytes]:
    """Load a stored password; returns raw bytes or None if nothing is stored."""
    try:
        secret = keyring.get_password(service, account)
    except KeyringError as exc:
        raise KeystoreError(f"could not read password for {service}/{account}: {exc}") from exc
    if secret is None:
        return None
    try:
        return base64.b64decode(secret, validate=True)
    except binascii.Error as exc:
        raise KeystoreError(f"stored value for {service}/{account} is not valid base64") from exc


def delete_password(service: str, account: str) -> bool:
    """Remove the stored password. Returns False if there was none."""
    try:
        keyring.delete_password(service, account)
    except PasswordDeleteError:
        return False
    except KeyringError as exc:
        raise KeystoreError(f"could not delete password for {service}/{account}: {exc}") from exc
    logger.info("Deleted password for %s/%s from OS keystore", service, account)
    return True
