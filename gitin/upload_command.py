"""Commands a client sends to upload-pack, for protocol v0/v1 and v2."""

from __future__ import annotations

import enum
import re
import string
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from gitin.sha import HashValue, HashVersion

_HEX_DIGITS = frozenset(string.hexdigits)
_DEPTH = re.compile(r"[+-]?[0-9]+")
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class UploadCommandError(ValueError):
    """An upload-pack request line could not be understood."""


class UploadCommandKind(enum.Enum):
    """The kinds of line an upload-pack request is made of."""

    WANT = "want"
    HAVE = "have"
    DONE = "done"
    SHALLOW = "shallow"
    DEEPEN = "deepen"
    CAPABILITIES = "capabilities"
    FLUSH = "flush"
    COMMAND = "command"
    AGENT = "agent"
    SYMREFS = "symrefs"
    UNBORN = "unborn"
    REF_PREFIX = "ref-prefix"
    OBJECT_FORMAT = "object-format"
    PEEL = "peel"
    THIN_PACK = "thin-pack"
    OFS_DELTA = "ofs-delta"


CommandValue = Union[HashValue, int, str, Tuple[str, ...], None]


@dataclass(frozen=True)
class UploadCommand:
    """One parsed request item; ``value`` depends on ``kind``.

    WANT, HAVE and SHALLOW carry a HashValue, DEEPEN an int, CAPABILITIES a
    tuple of capability names, COMMAND, AGENT, REF_PREFIX and OBJECT_FORMAT a
    string; the rest carry None.
    """

    kind: UploadCommandKind
    value: CommandValue = None


_FLAGS = {
    "done": UploadCommandKind.DONE,
    "symrefs": UploadCommandKind.SYMREFS,
    "unborn": UploadCommandKind.UNBORN,
    "peel": UploadCommandKind.PEEL,
    "thin-pack": UploadCommandKind.THIN_PACK,
    "ofs-delta": UploadCommandKind.OFS_DELTA,
}

_TEXT_PREFIXES = (
    ("command=", UploadCommandKind.COMMAND),
    ("agent=", UploadCommandKind.AGENT),
    ("ref-prefix ", UploadCommandKind.REF_PREFIX),
    ("object-format=", UploadCommandKind.OBJECT_FORMAT),
)


def _hash(text: str, message: str) -> HashValue:
    value = HashValue.from_hex(text)
    if value is None:
        raise UploadCommandError(message)
    return value


def _parse_want(rest: str, hash_version: HashVersion) -> List[UploadCommand]:
    parts = rest.split()
    if not parts:
        raise UploadCommandError("Missing hash after 'want'")
    hash_str, capabilities = parts[0], tuple(parts[1:])
    if len(hash_str) < hash_version.length():
        raise UploadCommandError("Invalid hash length")
    want = UploadCommand(UploadCommandKind.WANT, _hash(hash_str, "Invalid hash value"))
    if capabilities:
        return [UploadCommand(UploadCommandKind.CAPABILITIES, capabilities), want]
    return [want]


def _parse_depth(text: str) -> int:
    if _DEPTH.fullmatch(text) is None:
        raise UploadCommandError("Invalid deepen value")
    depth = int(text)
    if not _I32_MIN <= depth <= _I32_MAX:
        raise UploadCommandError("Invalid deepen value")
    return depth


def parse_upload_line(line: str, hash_version: HashVersion) -> List[UploadCommand]:
    """Parse one request line into the commands it holds.

    A blank line yields nothing; a ``want`` line with capabilities yields a
    CAPABILITIES item before the WANT item.
    """
    text = line.strip()
    if not text:
        return []
    if text.startswith("want "):
        return _parse_want(text[5:], hash_version)
    if text.startswith("have "):
        return [UploadCommand(UploadCommandKind.HAVE, _hash(text[5:], "Invalid have hash"))]
    if text.startswith("shallow "):
        return [
            UploadCommand(UploadCommandKind.SHALLOW, _hash(text[8:], "Invalid shallow hash"))
        ]
    if text.startswith("deepen "):
        return [UploadCommand(UploadCommandKind.DEEPEN, _parse_depth(text[7:]))]
    for prefix, kind in _TEXT_PREFIXES:
        if text.startswith(prefix):
            return [UploadCommand(kind, text[len(prefix):])]
    flag = _FLAGS.get(text)
    if flag is not None:
        return [UploadCommand(flag)]
    if text == "0000":
        return [UploadCommand(UploadCommandKind.FLUSH)]
    raise UploadCommandError(f"Unknown upload-pack command: {text}")


def _packet_length(header: bytes) -> int:
    try:
        text = header.decode("utf-8")
    except UnicodeDecodeError:
        raise UploadCommandError("Invalid pkt-line length") from None
    if not text or not all(ch in _HEX_DIGITS for ch in text):
        raise UploadCommandError("Invalid pkt-line length format")
    return int(text, 16)


def parse_upload_stream(
    chunks: Iterable[bytes], hash_version: HashVersion, v2: bool = False
) -> List[UploadCommand]:
    """Decode pkt-lines from ``chunks`` and parse every request line in them.

    A flush packet (and, with ``v2``, a delimiter packet) becomes FLUSH.
    Data left over after the last whole packet is ignored.
    """
    buffer = bytearray()
    commands: List[UploadCommand] = []
    for chunk in chunks:
        buffer += chunk
        while len(buffer) >= 4:
            length = _packet_length(bytes(buffer[:4]))
            if length == 0 or (v2 and length == 1):
                commands.append(UploadCommand(UploadCommandKind.FLUSH))
                del buffer[:4]
                continue
            if len(buffer) < length:
                break
            packet: Optional[bytes] = bytes(buffer[:length])
            del buffer[:length]
            if length < 4:
                if v2:
                    raise UploadCommandError("Invalid pkt-line length")
                break
            try:
                text = packet[4:].decode("utf-8")
            except UnicodeDecodeError:
                raise UploadCommandError("Invalid UTF-8 line") from None
            commands.extend(parse_upload_line(text.rstrip(), hash_version))
    return commands