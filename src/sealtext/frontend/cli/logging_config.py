"""Logging setup for the sealtext command line."""

import logging
import sys

_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def level_for_verbosity(verbose: int) -> int:
    """Map the number of ``-v`` flags to a logging level."""
    return _LEVELS.get(verbose, logging.DEBUG)


def configure_logging(verbose: int = 0) -> None:
    # stdout carries ciphertext/plaintext, so logs go to stderr
    logging.basicConfig(
        level=level_for_verbosity(verbose),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # keyring backends are chatty at debug level
    logging.getLogger("keyring").setLevel(logging.WARNING)
