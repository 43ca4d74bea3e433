"""
Exceptions for SealText
Every error raised by the library derives from SealTextError so callers have
one general error catcher, and can still tell the failure kinds apart.
"""


class SealTextError(Exception):
    # general container for errors
    pass


class InvalidParameterError(SealTextError, ValueError):
    # raised on bad configuration or arguments (salt length, empty password, ...)
    pass


class EntropyUnavailableError(SealTextError):
    # raised when the OS random source cannot supply a salt; fatal for the call
    pass


class ArmorError(SealTextError):
    # raised when armored text does not follow the wire format
    pass


class MalformedArmorError(ArmorError):
    # raised on invalid characters or bad base64 padding
    pass


class TruncatedInputError(MalformedArmorError):
    # raised when the input ends before the salt or a full cipher block
    pass


class UnsupportedFormatError(ArmorError):
    # raised when the format marker is not one we know
    pass


class PaddingOrKeyError(SealTextError):
    # raised when decryption fails the padding check.
    # wrong password and corrupted data are deliberately reported the same way
    def __init__(self, message: str = "wrong password or corrupted input"):
        super().__init__(message)


class KeystoreError(SealTextError):
    # raised when the OS keystore backend fails
    pass
