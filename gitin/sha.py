"""Object hash values for SHA-1 and SHA-256 repositories."""

from __future__ import annotations

import copy
import enum
import hashlib
import json
import string
from typing import Optional

_HEX_DIGITS = frozenset(string.hexdigits)


class HashVersion(enum.Enum):
    """The hash algorithm a repository uses for its object ids."""

    SHA1 = "sha1"
    SHA256 = "sha256"

    def length(self) -> int:
        """Return the digest length in bytes."""
        return 20 if self is HashVersion.SHA1 else 32

    def default(self) -> "HashValue":
        """Return the all-zero hash of this version."""
        return HashValue(self)

    def hash(self, data: bytes) -> "HashValue":
        """Return the digest of ``data`` under this algorithm."""
        return HashValue(self, _new_hasher(self, data).digest())


def _new_hasher(version: HashVersion, data: bytes = b""):
    if version is HashVersion.SHA1:
        return hashlib.sha1(data)
    return hashlib.sha256(data)


class HashValue:
    """A fixed-size object id, which can also accumulate data and be finalized."""

    __slots__ = ("_version", "_state", "_hasher")

    def __init__(self, version: HashVersion, state: Optional[bytes] = None) -> None:
        if state is None:
            state = bytes(version.length())
        state = bytes(state)
        if len(state) != version.length():
            raise ValueError(
                f"{version.value} hash needs {version.length()} bytes, got {len(state)}"
            )
        self._version = version
        self._state = state
        self._hasher = _new_hasher(version)

    @classmethod
    def from_bytes(cls, data: bytes) -> Optional["HashValue"]:
        """Build a hash from raw digest bytes; None unless 20 or 32 bytes long."""
        data = bytes(data)
        for version in HashVersion:
            if len(data) == version.length():
                return cls(version, data)
        return None

    @classmethod
    def from_hex(cls, text: str) -> Optional["HashValue"]:
        """Parse a 40- or 64-digit hexadecimal string; None if it is not one."""
        if not all(ch in _HEX_DIGITS for ch in text):
            return None
        for version in HashVersion:
            if len(text) == version.length() * 2:
                return cls(version, bytes.fromhex(text))
        return None

    @classmethod
    def new(cls, version: HashVersion) -> "HashValue":
        """Return the all-zero hash of ``version``."""
        return cls(version)

    def is_zero(self) -> bool:
        return not any(self._state)

    def raw(self) -> bytes:
        """Return the digest bytes."""
        return self._state

    @property
    def version(self) -> HashVersion:
        return self._version

    def update(self, data: bytes) -> None:
        """Feed more data into the running digest."""
        self._hasher.update(data)

    def finalize(self) -> bytes:
        """Store and return the digest of everything fed so far."""
        self._state = self._hasher.copy().digest()
        return self._state

    def reset(self) -> None:
        """Clear both the stored digest and the running digest."""
        self._state = bytes(self._version.length())
        self._hasher = _new_hasher(self._version)

    def to_json(self) -> str:
        """Serialise as a JSON string holding the hex digest."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: str) -> "HashValue":
        """Parse a JSON string holding a hex digest."""
        value = json.loads(text)
        if isinstance(value, str):
            parsed = cls.from_hex(value)
            if parsed is not None:
                return parsed
        raise ValueError("Invalid hash value")

    def __copy__(self) -> "HashValue":
        clone = HashValue(self._version, self._state)
        clone._hasher = self._hasher.copy()
        return clone

    def __deepcopy__(self, memo) -> "HashValue":
        return copy.copy(self)

    def __str__(self) -> str:
        return self._state.hex()

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashValue):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self._state)