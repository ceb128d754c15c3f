import hashlib
import zlib

import pytest

from gitin.pack import (
    ChunkReader,
    ObjectType,
    PackError,
    PackHeader,
    build_pack,
    encode_object,
    encode_object_header,
    parse_pack_header,
)
from gitin.sha import HashVersion


def _bytewise(data):
    return [data[i:i + 1] for i in range(len(data))]


@pytest.mark.parametrize("object_type", [ObjectType.COMMIT, ObjectType.TREE, ObjectType.BLOB, ObjectType.TAG])
@pytest.mark.parametrize("size", [0, 1, 15, 16, 127, 128, 2047, 2048, 100000])
def test_header_round_trip(object_type, size):
    header = encode_object_header(object_type, size)
    reader = ChunkReader([header])
    assert reader.read_object_header() == (object_type, size)
    assert reader.offset == len(header)


def test_small_blob_header_is_single_byte():
    assert encode_object_header(ObjectType.BLOB, 0) == b"\x30"


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        encode_object_header(ObjectType.BLOB, -1)


@pytest.mark.parametrize("body", [b"", b"hello world\n", bytes(range(256)) * 40])
def test_encode_object_round_trip_bytewise(body):
    encoded = encode_object(ObjectType.BLOB, body)
    reader = ChunkReader(_bytewise(encoded))
    object_type, size = reader.read_object_header()
    assert object_type is ObjectType.BLOB
    assert size == len(body)
    assert reader.decompress(size) == body
    assert reader.offset == len(encoded)


def test_consecutive_objects_keep_leftover_input():
    first = encode_object(ObjectType.COMMIT, b"tree abc\n")
    second = encode_object(ObjectType.TAG, b"object def\n")
    reader = ChunkReader([first + second])
    t1, s1 = reader.read_object_header()
    assert (t1, reader.decompress(s1)) == (ObjectType.COMMIT, b"tree abc\n")
    t2, s2 = reader.read_object_header()
    assert (t2, reader.decompress(s2)) == (ObjectType.TAG, b"object def\n")
    assert reader.offset == len(first) + len(second)
    assert reader.buffered == b""


@pytest.mark.parametrize("type_id", [0, 5])
def test_invalid_type_rejected(type_id):
    reader = ChunkReader([bytes([type_id << 4])])
    with pytest.raises(PackError):
        reader.read_object_header()


def test_truncated_header_raises():
    reader = ChunkReader([b"\xb0"])
    with pytest.raises(PackError):
        reader.read_object_header()


def test_decompress_size_mismatch():
    reader = ChunkReader([zlib.compress(b"abcdef")])
    with pytest.raises(PackError):
        reader.decompress(5)


def test_decompress_truncated_stream():
    data = zlib.compress(b"some content here")
    reader = ChunkReader([data[:-3]])
    with pytest.raises(PackError):
        reader.decompress(17)


def test_decompress_garbage():
    reader = ChunkReader([b"not zlib data at all"])
    with pytest.raises(PackError):
        reader.decompress(4)


def test_take_and_ensure():
    reader = ChunkReader([b"ab", b"cd", b"ef"])
    assert reader.take(3) == b"abc"
    assert reader.offset == 3
    reader.ensure(3)
    assert reader.buffered == b"def"
    with pytest.raises(PackError):
        reader.take(4)


def test_ofs_delta_single_byte():
    reader = ChunkReader([b"\x05"])
    assert reader.read_ofs_delta_offset(100) == 95
    assert reader.offset == 1


def test_ofs_delta_multi_byte():
    reader = ChunkReader([b"\x81", b"\x00"])
    assert reader.read_ofs_delta_offset(1000) == 744
    assert reader.offset == 2


def test_ofs_delta_before_start():
    reader = ChunkReader([b"\x7f"])
    with pytest.raises(PackError):
        reader.read_ofs_delta_offset(10)


def test_build_pack_round_trip_sha1():
    entries = [(ObjectType.BLOB, b"one"), (ObjectType.TREE, b""), (ObjectType.COMMIT, b"x" * 500)]
    pack = build_pack(entries, HashVersion.SHA1)
    assert pack[:4] == b"PACK"
    assert parse_pack_header(pack) == PackHeader(version=2, object_count=3)
    body, trailer = pack[:-20], pack[-20:]
    assert trailer == hashlib.sha1(body).digest()
    reader = ChunkReader([body[12:]])
    decoded = []
    for _ in range(3):
        object_type, size = reader.read_object_header()
        decoded.append((object_type, reader.decompress(size)))
    assert decoded == entries
    assert reader.buffered == b""


def test_build_empty_pack_sha256():
    pack = build_pack([], HashVersion.SHA256)
    assert len(pack) == 12 + 32
    assert parse_pack_header(pack).object_count == 0
    assert pack[12:] == hashlib.sha256(pack[:12]).digest()


def test_parse_pack_header_too_short():
    with pytest.raises(PackError):
        parse_pack_header(b"PACK\x00\x00")