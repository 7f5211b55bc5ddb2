import pytest

from haquests.checksum import tcp_checksum, verify_checksum
from haquests.constants import (
    DEFAULT_TTL,
    DEFAULT_WINDOW_SIZE,
    IP_HEADER_SIZE,
    IP_VERSION_4,
    IPPROTO_TCP,
    MAX_PACKET_SIZE,
    TCP_HEADER_SIZE,
    TCPFlag,
)
from haquests.errors import ParseError
from haquests.network import ip_to_int
from haquests.packet import IPHeader, Packet, TCPHeader

SRC = ip_to_int("10.0.0.1")
DST = ip_to_int("10.0.0.2")


def _packet(payload=b"hello"):
    packet = Packet()
    packet.build_ip_header(SRC, DST, IP_HEADER_SIZE + TCP_HEADER_SIZE + len(payload))
    packet.set_data(payload)
    packet.build_tcp_header(40000, 80, 1000, 2000, TCPFlag.PSH | TCPFlag.ACK)
    return packet


def test_serialized_size_matches_total_size():
    packet = _packet()
    wire = packet.serialize()
    assert len(wire) == packet.total_size()
    assert packet.total_size() == IP_HEADER_SIZE + TCP_HEADER_SIZE + len(b"hello")
    assert wire.endswith(b"hello")


def test_ip_header_fields_and_checksum():
    wire = _packet().serialize()
    assert verify_checksum(wire[:IP_HEADER_SIZE])
    header = IPHeader.unpack(wire)
    assert header.version_ihl >> 4 == IP_VERSION_4
    assert (header.version_ihl & 0x0F) * 4 == IP_HEADER_SIZE
    assert header.ttl == DEFAULT_TTL
    assert header.protocol == IPPROTO_TCP
    assert header.src_addr == SRC
    assert header.dst_addr == DST
    assert header.total_length == len(wire)
    assert 0 <= header.id < 65535


def test_tcp_header_fields_and_checksum():
    wire = _packet().serialize()
    segment = wire[IP_HEADER_SIZE:]
    assert tcp_checksum(SRC, DST, segment) == 0
    header = TCPHeader.unpack(segment)
    assert header.src_port == 40000
    assert header.dst_port == 80
    assert header.seq_num == 1000
    assert header.ack_num == 2000
    assert header.flags == TCPFlag.PSH | TCPFlag.ACK
    assert header.window == DEFAULT_WINDOW_SIZE
    assert (header.data_offset >> 4) * 4 == TCP_HEADER_SIZE


def test_header_round_trips():
    ip = IPHeader(0x45, 0, 40, 7, 0, 64, 6, 0, SRC, DST)
    assert IPHeader.unpack(ip.pack()) == ip
    tcp = TCPHeader(1, 2, 3, 4, 0x50, 0x12, 100, 0, 0)
    assert TCPHeader.unpack(tcp.pack()) == tcp
    assert len(ip.pack()) == IP_HEADER_SIZE
    assert len(tcp.pack()) == TCP_HEADER_SIZE


def test_set_data_truncates():
    packet = Packet()
    packet.set_data(b"x" * MAX_PACKET_SIZE)
    assert len(packet.data) == MAX_PACKET_SIZE - IP_HEADER_SIZE - TCP_HEADER_SIZE
    assert packet.total_size() == MAX_PACKET_SIZE


def test_empty_packet_has_no_payload():
    packet = _packet(b"")
    assert packet.serialize()[IP_HEADER_SIZE + TCP_HEADER_SIZE:] == b""
    assert tcp_checksum(SRC, DST, packet.serialize()[IP_HEADER_SIZE:]) == 0


@pytest.mark.parametrize("cls", [IPHeader, TCPHeader])
def test_unpack_short_data_raises(cls):
    with pytest.raises(ParseError):
        cls.unpack(b"\x00" * 10)