# gitin

`gitin` holds pieces that a Git smart-protocol server is built from, in plain
Python using only the standard library.

## Modules

- `gitin.sha`
  - `HashVersion` (`SHA1`, `SHA256`): `length()` gives the digest size in
    bytes, `default()` the all-zero id and `hash(data)` the digest of `data`.
  - `HashValue`: an object id that is also an incremental hasher. Build one
    with `from_bytes` (20 or 32 raw bytes), `from_hex` (40 or 64 hex digits),
    `new(version)` or `from_json`; use `is_zero()`, `raw()`, `version`,
    `update()`, `finalize()`, `reset()` and `to_json()`. `str()` gives the
    hex digest, and values compare and hash by it.
- `gitin.receive_command`
  - `ReceiveCommand.from_pkt_line(line)` reads one `<old> <new> <ref>`
    pkt-line from a push; it returns `None` for a flush packet, a truncated
    line or too few fields, and raises `PktLineError` for malformed data.
    `is_create()`, `is_update()` and `is_delete()` classify the command.
  - `parse_receive_request(head)` splits the command section that comes
    before the pack into a list of commands and a list of capability names.
- `gitin.upload_command`
  - `parse_upload_line(line, hash_version)` turns one request line (`want`,
    `have`, `shallow`, `deepen`, `done`, `command=`, `agent=`, `ref-prefix`,
    `object-format=`, `symrefs`, `unborn`, `peel`, `thin-pack`, `ofs-delta`)
    into `UploadCommand` items, each with an `UploadCommandKind`.
  - `parse_upload_stream(chunks, hash_version, v2=False)` decodes pkt-lines
    from a sequence of byte chunks and parses every line in them.
  - Errors are raised as `UploadCommandError`.
- `gitin.pktline`: `pkt_line`, `sideband_packet`, `sideband_chunks` (splits
  data into packets that each fit in one pkt-line) and `iter_pkt_lines`
  (yields payloads, and `None` for flush, delimiter and response-end packets).
- `gitin.pack`
  - `parse_pack_header` returns a `PackHeader` with `version` and
    `object_count`.
  - `ChunkReader` pulls pack bytes from an iterable of chunks:
    `ensure`, `take`, `read_object_header`, `decompress` and
    `read_ofs_delta_offset`, with the consumed `offset`.
  - `encode_object_header`, `encode_object` and `build_pack` write pack
    entries and a whole version 2 pack with its trailing checksum.
  - `ObjectType` holds the entry type codes; errors are `PackError`.
- `gitin.pathutil`: `normalize_path` and `path_segments` for tree paths given
  by clients.

## Install

```
pip install .
```

## Example

```python
from gitin.sha import HashVersion
from gitin.receive_command import ReceiveCommand
from gitin.pack import ChunkReader, ObjectType, build_pack, parse_pack_header

blob_id = HashVersion.SHA1.hash(b"blob 5\x00hello")
print(blob_id)

cmd = ReceiveCommand.from_pkt_line(
    b"0067ca82a6dff817ec66f44342007202690a93763949 "
    b"15027957951b64cf874c3557a0f3547bd83b3ff6 refs/heads/master"
)
print(cmd.ref_name, cmd.is_update())

pack = build_pack([(ObjectType.BLOB, b"hello")], HashVersion.SHA1)
print(parse_pack_header(pack[:12]))

reader = ChunkReader([pack[12:]])
object_type, size = reader.read_object_header()
print(object_type, reader.decompress(size))
```

## What it does not do

`gitin` is a set of parsing and encoding functions, not a server. It does not
listen on a network, speak HTTP or SSH, store objects or references, write ref
advertisements, or run upload-pack and receive-pack sessions. Pack reading
stops at entry headers, bodies and offset-delta distances: deltas are not
applied. There is no command-line program.

## Tests

```
pip install .[test]
pytest
```