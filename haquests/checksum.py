"""Internet checksums for IP and TCP headers."""

import struct

from haquests.constants import IPPROTO_TCP


def checksum(data):
    """Return the 16-bit ones' complement checksum of ``data``."""
    data = bytes(data)
    if len(data) % 2:
        data += b"\x00"
    total = sum(struct.unpack(f">{len(data) // 2}H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def tcp_checksum(src_ip, dst_ip, segment):
    """Return the TCP checksum of ``segment`` with its IPv4 pseudo-header.

    ``src_ip`` and ``dst_ip`` are addresses as integers.
    """
    segment = bytes(segment)
    pseudo = struct.pack(
        ">IIBBH", src_ip, dst_ip, 0, IPPROTO_TCP, len(segment) & 0xFFFF
    )
    return checksum(pseudo + segment)


def verify_checksum(data):
    """Return True when ``data``, checksum field included, sums correctly."""
    return checksum(data) == 0