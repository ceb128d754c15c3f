"""Encoding and decoding of pkt-lines and side-band packets."""

from __future__ import annotations

from typing import Iterator, Optional, Union

MAX_PKT_LINE = 0xFFF0
MAX_PAYLOAD_PER_PKT = MAX_PKT_LINE - 4 - 1
_MAX_ENCODABLE = 0xFFFF
_SPECIAL_PACKETS = (0, 1, 2)

Data = Union[bytes, bytearray, memoryview, str]


def _as_bytes(data: Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def pkt_line(data: Data) -> bytes:
    """Prefix ``data`` with its four-digit hexadecimal pkt-line length."""
    payload = _as_bytes(data)
    length = len(payload) + 4
    if length > _MAX_ENCODABLE:
        raise ValueError(f"pkt-line payload too long: {len(payload)} bytes")
    return f"{length:04x}".encode("ascii") + payload


def sideband_packet(band: int, payload: Data) -> bytes:
    """Wrap ``payload`` in a single pkt-line on side-band channel ``band``."""
    return pkt_line(bytes([band]) + _as_bytes(payload))


def sideband_chunks(band: int, data: Data) -> Iterator[bytes]:
    """Split ``data`` into side-band packets that each fit in one pkt-line."""
    raw = _as_bytes(data)
    for offset in range(0, len(raw), MAX_PAYLOAD_PER_PKT):
        yield sideband_packet(band, raw[offset:offset + MAX_PAYLOAD_PER_PKT])


def iter_pkt_lines(data: Data) -> Iterator[Optional[bytes]]:
    """Yield the payload of each pkt-line in ``data``.

    Flush, delimiter and response-end packets yield None. Raises ValueError
    for a malformed length or a truncated packet.
    """
    raw = _as_bytes(data)
    pos = 0
    while pos < len(raw):
        header = raw[pos:pos + 4]
        if len(header) < 4:
            raise ValueError("Truncated pkt-line length")
        try:
            length = int(header.decode("ascii"), 16)
        except (UnicodeDecodeError, ValueError):
            raise ValueError(f"Invalid pkt-line length: {header!r}") from None
        if length in _SPECIAL_PACKETS:
            yield None
            pos += 4
            continue
        if length < 4:
            raise ValueError(f"Invalid pkt-line length: {length}")
        if pos + length > len(raw):
            raise ValueError("Truncated pkt-line")
        yield raw[pos + 4:pos + length]
        pos += length