"""Reading and writing of git pack data: object headers, zlib bodies and whole packs."""

from __future__ import annotations

import enum
import struct
import zlib
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from gitin.sha import HashVersion

PACK_SIGNATURE = b"PACK"
PACK_VERSION = 2
PACK_HEADER_LEN = 12


class PackError(ValueError):
    """Pack data is malformed, truncated or inconsistent."""


class ObjectType(enum.IntEnum):
    """Object type codes as stored in pack entry headers."""

    COMMIT = 1
    TREE = 2
    BLOB = 3
    TAG = 4
    OFS_DELTA = 6
    REF_DELTA = 7


@dataclass(frozen=True)
class PackHeader:
    """The fixed twelve-byte header at the start of a pack."""

    version: int
    object_count: int


def parse_pack_header(data: bytes) -> PackHeader:
    """Read the version and object count from the first twelve bytes of a pack."""
    raw = bytes(data)
    if len(raw) < PACK_HEADER_LEN:
        raise PackError(f"pack header needs {PACK_HEADER_LEN} bytes, got {len(raw)}")
    version, count = struct.unpack(">II", raw[4:PACK_HEADER_LEN])
    return PackHeader(version=version, object_count=count)


class ChunkReader:
    """Pull bytes on demand from an iterable of chunks, tracking the offset consumed."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks: Iterator[bytes] = iter(chunks)
        self._buffer = bytearray()
        self._offset = 0

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._offset

    @property
    def buffered(self) -> bytes:
        """Bytes already pulled from the chunks but not yet consumed."""
        return bytes(self._buffer)

    def _fill(self) -> None:
        chunk = next(self._chunks, None)
        if chunk is None:
            raise PackError("unexpected end of data")
        self._buffer += chunk

    def ensure(self, n: int) -> None:
        """Make sure at least ``n`` bytes are buffered; raise PackError if the data ends."""
        while len(self._buffer) < n:
            self._fill()

    def take(self, n: int) -> bytes:
        """Consume and return exactly ``n`` bytes."""
        self.ensure(n)
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        self._offset += n
        return data

    def read_object_header(self) -> Tuple[ObjectType, int]:
        """Consume a pack entry header and return its type and inflated size."""
        self.ensure(1)
        first = self._buffer[0]
        size = first & 0x0F
        shift = 4
        consumed = 1
        byte = first
        while byte & 0x80:
            self.ensure(consumed + 1)
            byte = self._buffer[consumed]
            size |= (byte & 0x7F) << shift
            consumed += 1
            shift += 7
        type_id = (first >> 4) & 0x07
        try:
            object_type = ObjectType(type_id)
        except ValueError:
            raise PackError(f"invalid object type {type_id}") from None
        del self._buffer[:consumed]
        self._offset += consumed
        return object_type, size

    def decompress(self, expected_size: int) -> bytes:
        """Inflate one zlib stream and check it yields ``expected_size`` bytes.

        Input after the end of the stream stays buffered for the next read.
        """
        inflater = zlib.decompressobj()
        out = bytearray()
        while not inflater.eof:
            while not self._buffer:
                self._fill()
            data = bytes(self._buffer)
            self._buffer.clear()
            try:
                out += inflater.decompress(data)
            except zlib.error as exc:
                raise PackError(f"decompression failed: {exc}") from None
            leftover = inflater.unused_data
            self._offset += len(data) - len(leftover)
            self._buffer += leftover
        if len(out) != expected_size:
            raise PackError(
                f"inflated size {len(out)} does not match expected {expected_size}"
            )
        return bytes(out)

    def read_ofs_delta_offset(self, obj_start: int) -> int:
        """Consume an offset-delta distance and return the base object's offset."""
        byte = self.take(1)[0]
        value = byte & 0x7F
        while byte & 0x80:
            byte = self.take(1)[0]
            value = ((value + 1) << 7) | (byte & 0x7F)
        base = obj_start - value
        if base < 0:
            raise PackError("offset delta points before the start of the pack")
        return base


def encode_object_header(object_type: ObjectType, size: int) -> bytes:
    """Encode the type-and-size header of a pack entry."""
    if size < 0:
        raise ValueError("object size cannot be negative")
    first = (size & 0x0F) | (int(object_type) << 4)
    size >>= 4
    if size:
        first |= 0x80
    header = bytearray([first])
    while size:
        byte = size & 0x7F
        size >>= 7
        if size:
            byte |= 0x80
        header.append(byte)
    return bytes(header)


def encode_object(object_type: ObjectType, body: bytes) -> bytes:
    """Encode a whole pack entry: header followed by the zlib-compressed body."""
    data = bytes(body)
    return encode_object_header(object_type, len(data)) + zlib.compress(data)


def build_pack(
    entries: Iterable[Tuple[ObjectType, bytes]], hash_version: HashVersion
) -> bytes:
    """Assemble a version 2 pack from ``(type, body)`` pairs, with its trailing checksum."""
    encoded = [encode_object(object_type, body) for object_type, body in entries]
    header = PACK_SIGNATURE + struct.pack(">II", PACK_VERSION, len(encoded))
    content = header + b"".join(encoded)
    return content + hash_version.hash(content).raw()