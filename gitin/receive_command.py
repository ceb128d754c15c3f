"""Reference update commands sent by a client during receive-pack."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import List, Optional, Tuple

from gitin.sha import HashValue, HashVersion

_HEX_DIGITS = frozenset(string.hexdigits)


class PktLineError(ValueError):
    """A pkt-line could not be decoded."""


@dataclass
class ReceiveCommand:
    """One ``<old> <new> <ref>`` update request."""

    old: HashValue
    new: HashValue
    ref_name: str

    def is_delete(self) -> bool:
        return self.new.is_zero()

    def is_update(self) -> bool:
        return not self.is_delete()

    def is_create(self) -> bool:
        return self.old.is_zero()

    @classmethod
    def from_pkt_line(cls, line: bytes) -> Optional["ReceiveCommand"]:
        """Parse the first pkt-line in ``line``.

        Returns None for a flush packet, a truncated line or a line with
        fewer than three fields; raises PktLineError for malformed data.
        """
        if len(line) < 4:
            return None
        try:
            len_str = bytes(line[:4]).decode("utf-8")
        except UnicodeDecodeError:
            raise PktLineError("Invalid pkt-line length") from None
        if not all(ch in _HEX_DIGITS for ch in len_str):
            raise PktLineError("Invalid pkt-line length format")
        length = int(len_str, 16)
        if length == 0 or len(line) < length:
            return None
        try:
            line_str = bytes(line[4:length]).decode("utf-8")
        except UnicodeDecodeError:
            raise PktLineError("Invalid UTF-8 in pkt-line") from None
        parts = line_str.strip().split(" ")
        if len(parts) < 3:
            return None
        old_sha, new_sha, ref_name = parts[0], parts[1], parts[2]
        return cls(
            old=_parse_hash(old_sha, "old"),
            new=_parse_hash(new_sha, "new"),
            ref_name=ref_name.replace("\0", ""),
        )


def _parse_hash(text: str, which: str) -> HashValue:
    if all(ch == "0" for ch in text):
        return HashVersion.SHA1.default()
    value = HashValue.from_hex(text)
    if value is None:
        raise PktLineError(f"Failed to parse {which} SHA: {text}")
    return value


def _lines(data: bytes) -> List[bytes]:
    pieces = data.split(b"\n")
    if pieces and pieces[-1] == b"":
        pieces.pop()
    return [p[:-1] if p.endswith(b"\r") else p for p in pieces]


def parse_receive_request(head: bytes) -> Tuple[List[ReceiveCommand], List[str]]:
    """Split the command section of a push into commands and capabilities.

    Lines that do not parse as commands are skipped. Capabilities come from
    the text after the NUL of the last line that holds one.
    """
    commands: List[ReceiveCommand] = []
    capabilities: List[str] = []
    for raw in _lines(bytes(head)):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise PktLineError("Invalid UTF-8 in receive request") from None
        try:
            command = ReceiveCommand.from_pkt_line(text.encode("utf-8"))
        except PktLineError:
            command = None
        if command is not None:
            commands.append(command)
        nul = text.find("\0")
        if nul != -1:
            capabilities = text[nul + 1:].split(" ")
    return commands, capabilities