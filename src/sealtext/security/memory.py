"""Wipeable buffers for passwords and derived key material.

Python gives no hard guarantee about copies made by the interpreter or by
C extensions, so this is best-effort: sensitive values live in a
``bytearray`` owned by us and are overwritten in place before the
operation that needed them returns.
"""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def wipe(buf: bytearray) -> None:
    """Overwrite ``buf`` with zeros in place."""
    buf[:] = bytes(len(buf))


class SecretBuffer:
    """Private, wipeable copy of a secret.

    Use as a context manager so the copy is zeroed on every exit path::

        with SecretBuffer(password) as secret:
            derive(secret.data, salt)
    """

    def __init__(self, value: Union[BytesLike, str]):
        if isinstance(value, str):
            value = value.encode("utf-8")
        self._data = bytearray(value)

    @property
    def data(self) -> bytearray:
        return self._data

    @property
    def wiped(self) -> bool:
        return not any(self._data)

    def wipe(self) -> None:
        wipe(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __enter__(self) -> "SecretBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __repr__(self) -> str:
        # never show the contents
        return f"SecretBuffer(<{len(self._data)} bytes>)"
