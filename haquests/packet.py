"""IPv4 and TCP headers and the packets built from them."""

import random
import struct
from dataclasses import dataclass, field
from typing import ClassVar

from haquests.checksum import checksum, tcp_checksum
from haquests.constants import (
    DEFAULT_TTL,
    DEFAULT_WINDOW_SIZE,
    IP_HEADER_SIZE,
    IP_VERSION_4,
    IPPROTO_TCP,
    MAX_PACKET_SIZE,
    TCP_HEADER_SIZE,
)
from haquests.errors import ParseError

MAX_PAYLOAD = MAX_PACKET_SIZE - IP_HEADER_SIZE - TCP_HEADER_SIZE


@dataclass
class IPHeader:
    """A 20-byte IPv4 header; addresses are integers."""

    FORMAT: ClassVar[str] = ">BBHHHBBHII"
    SIZE: ClassVar[int] = IP_HEADER_SIZE

    version_ihl: int = 0
    tos: int = 0
    total_length: int = 0
    id: int = 0
    frag_off: int = 0
    ttl: int = 0
    protocol: int = 0
    checksum: int = 0
    src_addr: int = 0
    dst_addr: int = 0

    def pack(self):
        """Return the header in wire format."""
        return struct.pack(
            self.FORMAT,
            self.version_ihl,
            self.tos,
            self.total_length,
            self.id,
            self.frag_off,
            self.ttl,
            self.protocol,
            self.checksum,
            self.src_addr,
            self.dst_addr,
        )

    @classmethod
    def unpack(cls, data):
        """Read a header from the first bytes of ``data``."""
        if len(data) < cls.SIZE:
            raise ParseError("IP header too short")
        return cls(*struct.unpack(cls.FORMAT, bytes(data[: cls.SIZE])))


@dataclass
class TCPHeader:
    """A 20-byte TCP header without options."""

    FORMAT: ClassVar[str] = ">HHIIBBHHH"
    SIZE: ClassVar[int] = TCP_HEADER_SIZE

    src_port: int = 0
    dst_port: int = 0
    seq_num: int = 0
    ack_num: int = 0
    data_offset: int = 0
    flags: int = 0
    window: int = 0
    checksum: int = 0
    urgent_ptr: int = 0

    def pack(self):
        """Return the header in wire format."""
        return struct.pack(
            self.FORMAT,
            self.src_port,
            self.dst_port,
            self.seq_num,
            self.ack_num,
            self.data_offset,
            self.flags,
            self.window,
            self.checksum,
            self.urgent_ptr,
        )

    @classmethod
    def unpack(cls, data):
        """Read a header from the first bytes of ``data``."""
        if len(data) < cls.SIZE:
            raise ParseError("TCP header too short")
        return cls(*struct.unpack(cls.FORMAT, bytes(data[: cls.SIZE])))


@dataclass
class Packet:
    """An IPv4/TCP packet with its payload."""

    ip_header: IPHeader = field(default_factory=IPHeader)
    tcp_header: TCPHeader = field(default_factory=TCPHeader)
    data: bytes = b""

    def build_ip_header(self, src_ip, dst_ip, total_length):
        """Fill in the IP header and its checksum."""
        self.ip_header = IPHeader(
            version_ihl=(IP_VERSION_4 << 4) | (IP_HEADER_SIZE // 4),
            tos=0,
            total_length=total_length & 0xFFFF,
            id=random.randrange(65535),
            frag_off=0,
            ttl=DEFAULT_TTL,
            protocol=IPPROTO_TCP,
            checksum=0,
            src_addr=src_ip,
            dst_addr=dst_ip,
        )
        self.ip_header.checksum = checksum(self.ip_header.pack())

    def build_tcp_header(self, src_port, dst_port, seq, ack, flags):
        """Fill in the TCP header; its checksum covers the current payload."""
        self.tcp_header = TCPHeader(
            src_port=src_port,
            dst_port=dst_port,
            seq_num=seq & 0xFFFFFFFF,
            ack_num=ack & 0xFFFFFFFF,
            data_offset=(TCP_HEADER_SIZE // 4) << 4,
            flags=int(flags),
            window=DEFAULT_WINDOW_SIZE,
            checksum=0,
            urgent_ptr=0,
        )
        self.tcp_header.checksum = tcp_checksum(
            self.ip_header.src_addr,
            self.ip_header.dst_addr,
            self.tcp_header.pack() + self.data,
        )

    def set_data(self, payload):
        """Set the payload, truncated to the largest that fits a packet."""
        self.data = bytes(payload[:MAX_PAYLOAD])

    def total_size(self):
        """Return the size of the serialized packet in bytes."""
        return IPHeader.SIZE + TCPHeader.SIZE + len(self.data)

    def serialize(self):
        """Return the whole packet in wire format."""
        return self.ip_header.pack() + self.tcp_header.pack() + self.data