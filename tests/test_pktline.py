import pytest

from gitin.pktline import (
    MAX_PAYLOAD_PER_PKT,
    MAX_PKT_LINE,
    iter_pkt_lines,
    pkt_line,
    sideband_chunks,
    sideband_packet,
)


def test_pkt_line_version_example():
    assert pkt_line(b"version 2\n") == b"000eversion 2\n"


def test_pkt_line_accepts_str_and_bytes_alike():
    assert pkt_line("packfile\n") == pkt_line(b"packfile\n")


@pytest.mark.parametrize("payload", [b"", b"a", b"packfile\n", bytes(range(256))])
def test_pkt_line_round_trip(payload):
    assert list(iter_pkt_lines(pkt_line(payload))) == [payload]


def test_pkt_line_too_long_raises():
    with pytest.raises(ValueError):
        pkt_line(b"x" * 0xFFFF)


def test_iter_handles_flush_between_lines():
    data = pkt_line(b"one") + b"0000" + pkt_line(b"two") + b"0001"
    assert list(iter_pkt_lines(data)) == [b"one", None, b"two", None]


def test_iter_empty_input():
    assert list(iter_pkt_lines(b"")) == []


def test_iter_truncated_packet_raises():
    with pytest.raises(ValueError):
        list(iter_pkt_lines(pkt_line(b"hello")[:-1]))


def test_iter_truncated_header_raises():
    with pytest.raises(ValueError):
        list(iter_pkt_lines(b"00"))


def test_iter_invalid_hex_raises():
    with pytest.raises(ValueError):
        list(iter_pkt_lines(b"xyzwdata"))


def test_iter_length_below_header_raises():
    with pytest.raises(ValueError):
        list(iter_pkt_lines(b"0003"))


def test_sideband_packet_carries_band_byte():
    assert list(iter_pkt_lines(sideband_packet(2, b"find pack 3\n"))) == [b"\x02find pack 3\n"]


def test_sideband_packet_invalid_band_raises():
    with pytest.raises(ValueError):
        sideband_packet(256, b"x")


def test_sideband_chunks_split_and_reassemble():
    data = bytes(i % 251 for i in range(2 * MAX_PAYLOAD_PER_PKT + 10))
    packets = list(sideband_chunks(1, data))
    assert len(packets) == 3
    assert all(len(p) <= MAX_PKT_LINE for p in packets)
    payloads = [next(iter_pkt_lines(p)) for p in packets]
    assert all(p[:1] == b"\x01" for p in payloads)
    assert b"".join(p[1:] for p in payloads) == data


def test_sideband_chunks_empty_data():
    assert list(sideband_chunks(1, b"")) == []