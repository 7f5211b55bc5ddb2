"""Protocol constants, TCP flags and TCP connection states."""

import enum

IP_VERSION_4 = 4

IPPROTO_ICMP = 1
IPPROTO_TCP = 6
IPPROTO_UDP = 17

DEFAULT_TTL = 64
DEFAULT_WINDOW_SIZE = 65535
MTU = 1500
IP_HEADER_SIZE = 20
TCP_HEADER_SIZE = 20
MAX_PACKET_SIZE = 65535


class TCPFlag(enum.IntFlag):
    """Bits of the TCP flags byte."""

    FIN = 0x01
    SYN = 0x02
    RST = 0x04
    PSH = 0x08
    ACK = 0x10
    URG = 0x20


class TCPState(enum.Enum):
    """States of a TCP connection."""

    CLOSED = enum.auto()
    LISTEN = enum.auto()
    SYN_SENT = enum.auto()
    SYN_RECEIVED = enum.auto()
    ESTABLISHED = enum.auto()
    FIN_WAIT_1 = enum.auto()
    FIN_WAIT_2 = enum.auto()
    CLOSE_WAIT = enum.auto()
    CLOSING = enum.auto()
    LAST_ACK = enum.auto()
    TIME_WAIT = enum.auto()