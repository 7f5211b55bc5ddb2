"""A TCP client that builds its own packets over a raw socket.

Connections to the loopback address use an ordinary stream socket, since
the kernel handles those itself.
"""

import random
import socket
import time

from haquests.constants import TCPFlag, TCPState
from haquests.errors import ConnectionFailedError
from haquests.network import int_to_ip, ip_to_int, local_ip_for
from haquests.packet import IPHeader, Packet, TCPHeader
from haquests.raw_socket import RawSocket
from haquests.state_machine import StateMachine

_SEQ_MASK = 0xFFFFFFFF

# Source ports are drawn from this range; a firewall rule for the same range
# keeps the kernel from resetting connections it does not know about.
SOURCE_PORT_RANGE = (10000, 65535)

HANDSHAKE_TIMEOUT_SECONDS = 5
RECEIVE_TIMEOUT_SECONDS = 30
MAX_RECEIVE_ATTEMPTS = 100
MAX_EXTRA_RECEIVE_ATTEMPTS = 10
RECV_BUFFER_SIZE = 65535


class TCPConnection:
    """One TCP connection to a remote host.

    Not safe to share between threads.
    """

    def __init__(self, raw_socket=None, src_port=None):
        self._raw = raw_socket if raw_socket is not None else RawSocket()
        self._machine = StateMachine()
        self.src_port = (
            src_port if src_port is not None else random.randint(*SOURCE_PORT_RANGE)
        )
        self.dst_port = 0
        self.src_ip = ""
        self.dst_ip = ""
        self.seq_num = 0
        self.ack_num = 0
        self._stream = None
        self._use_stream = False
        self.handshake_timeout = HANDSHAKE_TIMEOUT_SECONDS
        self.receive_timeout = RECEIVE_TIMEOUT_SECONDS

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def state(self):
        """The current TCPState of the connection."""
        if self._use_stream:
            return TCPState.ESTABLISHED if self._stream is not None else TCPState.CLOSED
        return self._machine.state

    @property
    def is_connected(self):
        return self.state is TCPState.ESTABLISHED

    def connect(self, host, port):
        """Connect to ``host`` on ``port``; raise ConnectionFailedError on failure."""
        self.dst_port = port
        try:
            infos = socket.getaddrinfo(host, None, socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise ConnectionFailedError(f"Cannot resolve {host}") from exc
        if not infos:
            raise ConnectionFailedError(f"Cannot resolve {host}")
        dst_ip = infos[0][4][0]

        if dst_ip == "127.0.0.1" or host == "localhost":
            self._connect_stream(dst_ip, port)
            return

        try:
            src_ip = local_ip_for(dst_ip)
        except (OSError, ValueError) as exc:
            raise ConnectionFailedError(f"No local address to reach {dst_ip}") from exc
        self._open_raw(src_ip, dst_ip, port)

    def send(self, data):
        """Send ``data``; return the number of bytes handed to the socket."""
        data = bytes(data)
        if self._use_stream:
            if self._stream is None:
                raise ConnectionFailedError("Not connected")
            return self._stream.send(data)

        if self._machine.state is not TCPState.ESTABLISHED:
            raise ConnectionFailedError("Not connected")

        sent = self._send_packet(TCPFlag.PSH | TCPFlag.ACK, self.ack_num, data)
        if sent > 0:
            self.seq_num = (self.seq_num + len(data)) & _SEQ_MASK
        return sent

    def receive(self, max_len=4096):
        """Return received payload bytes, or b"" when nothing arrived in time."""
        if self._use_stream:
            if self._stream is None:
                return b""
            try:
                return self._stream.recv(max_len)
            except OSError:
                return b""

        data = bytearray()
        deadline = time.monotonic() + self.receive_timeout
        attempts = 0
        while attempts < MAX_RECEIVE_ATTEMPTS and not data:
            if time.monotonic() >= deadline:
                break
            packet = self._receive_packet()
            if packet:
                payload = self._extract_payload(packet)
                if payload:
                    data += payload
                    if len(data) >= max_len:
                        return bytes(data[:max_len])
                    self._receive_more(data, max_len, deadline)
                    return bytes(data)
            attempts += 1
        return bytes(data)

    def close(self):
        """Close the connection, sending FIN when it is established."""
        if self._use_stream:
            if self._stream is not None:
                self._stream.close()
                self._stream = None
            return
        if self._machine.state is TCPState.ESTABLISHED:
            self._send_fin()
        self._raw.close()
        self._machine.on_close()

    def _connect_stream(self, dst_ip, port):
        self._use_stream = True
        self.dst_ip = dst_ip
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.connect((dst_ip, port))
        except OSError as exc:
            sock.close()
            raise ConnectionFailedError(f"Cannot connect to {dst_ip}:{port}") from exc
        self._stream = sock

    def _open_raw(self, src_ip, dst_ip, port):
        """Open the raw socket and perform the three-way handshake."""
        self.src_ip = src_ip
        self.dst_ip = dst_ip
        self.dst_port = port
        self._raw.open()
        self._handshake()

    def _handshake(self):
        self.seq_num = random.getrandbits(32)
        if self._send_packet(TCPFlag.SYN, 0) <= 0:
            raise ConnectionFailedError("Failed to send SYN")
        self._machine.on_send_syn()

        if not self._wait_for_synack():
            raise ConnectionFailedError("No SYN-ACK received")

        if self._send_packet(TCPFlag.ACK, self.ack_num) <= 0:
            raise ConnectionFailedError("Failed to send ACK")
        self._machine.on_established()

    def _wait_for_synack(self):
        deadline = time.monotonic() + self.handshake_timeout
        while time.monotonic() < deadline:
            packet = self._receive_packet()
            if packet and self._accept_synack(packet):
                return True
        return False

    def _receive_packet(self):
        try:
            return self._raw.receive(RECV_BUFFER_SIZE)
        except OSError:
            return None

    def _receive_more(self, data, max_len, deadline):
        for _ in range(MAX_EXTRA_RECEIVE_ATTEMPTS):
            if len(data) >= max_len or time.monotonic() >= deadline:
                break
            packet = self._receive_packet()
            if not packet:
                break
            data += self._extract_payload(packet)

    def _is_ours(self, ip_hdr, tcp_hdr):
        return (
            ip_hdr.src_addr == ip_to_int(self.dst_ip)
            and ip_hdr.dst_addr == ip_to_int(self.src_ip)
            and tcp_hdr.src_port == self.dst_port
            and tcp_hdr.dst_port == self.src_port
        )

    def _accept_synack(self, packet):
        if len(packet) < IPHeader.SIZE + TCPHeader.SIZE:
            return False
        ip_hdr = IPHeader.unpack(packet)
        tcp_hdr = TCPHeader.unpack(packet[IPHeader.SIZE :])
        if not self._is_ours(ip_hdr, tcp_hdr):
            return False
        wanted = TCPFlag.SYN | TCPFlag.ACK
        if tcp_hdr.flags & wanted != wanted:
            return False
        expected_ack = (self.seq_num + 1) & _SEQ_MASK
        if tcp_hdr.ack_num != expected_ack:
            return False
        self.seq_num = expected_ack
        self.ack_num = (tcp_hdr.seq_num + 1) & _SEQ_MASK
        self._machine.on_receive_synack()
        return True

    def _extract_payload(self, packet):
        """Return the new payload of a packet for this connection, else b""."""
        if len(packet) < IPHeader.SIZE + TCPHeader.SIZE:
            return b""
        ip_hdr = IPHeader.unpack(packet)
        ip_len = (ip_hdr.version_ihl & 0x0F) * 4
        if len(packet) < ip_len + TCPHeader.SIZE:
            return b""
        tcp_hdr = TCPHeader.unpack(packet[ip_len:])
        if not self._is_ours(ip_hdr, tcp_hdr):
            return b""

        offset = ip_len + (tcp_hdr.data_offset >> 4) * 4
        if offset >= len(packet):
            return b""
        payload = bytes(packet[offset:])

        pkt_seq = tcp_hdr.seq_num
        end = (pkt_seq + len(payload)) & _SEQ_MASK
        # Raw sockets may show the same segment more than once.
        if self.ack_num > 0 and pkt_seq < self.ack_num and end <= self.ack_num:
            return b""
        if end > self.ack_num:
            self.ack_num = end
        return payload

    def _send_packet(self, flags, ack, payload=b""):
        packet = Packet()
        packet.build_ip_header(
            ip_to_int(self.src_ip),
            ip_to_int(self.dst_ip),
            IPHeader.SIZE + TCPHeader.SIZE + len(payload),
        )
        packet.set_data(payload)
        packet.build_tcp_header(self.src_port, self.dst_port, self.seq_num, ack, flags)
        return self._raw.send(packet.serialize(), self.dst_ip, self.dst_port)

    def _send_fin(self):
        self._send_packet(TCPFlag.FIN | TCPFlag.ACK, self.ack_num)
        self._machine.on_send_fin()

    def __repr__(self):
        peer = f"{self.dst_ip}:{self.dst_port}" if self.dst_ip else "unconnected"
        return f"TCPConnection({peer}, {self.state.name})"


__all__ = ["TCPConnection", "int_to_ip"]