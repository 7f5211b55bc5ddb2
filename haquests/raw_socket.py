"""A raw IPv4 socket that carries hand-built TCP packets."""

import socket

from haquests.errors import SocketError
from haquests.network import ip_to_int

RECV_TIMEOUT_SECONDS = 5


class RawSocket:
    """A raw TCP socket with IP_HDRINCL set and a receive timeout."""

    def __init__(self):
        self._sock = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def is_open(self):
        return self._sock is not None

    def open(self):
        """Open the socket; raise SocketError when that is not permitted."""
        if self._sock is not None:
            return
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_TCP)
        except OSError as exc:
            raise SocketError(f"Cannot open raw socket: {exc}") from exc
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_HDRINCL, 1)
            sock.settimeout(RECV_TIMEOUT_SECONDS)
        except OSError as exc:
            sock.close()
            raise SocketError(f"Cannot configure raw socket: {exc}") from exc
        self._sock = sock

    def close(self):
        """Close the socket if it is open."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def _require_open(self):
        if self._sock is None:
            raise SocketError("Socket not open")
        return self._sock

    def send(self, data, dst_ip, dst_port):
        """Send a complete IP packet; return the number of bytes sent."""
        sock = self._require_open()
        try:
            ip_to_int(dst_ip)
        except ValueError as exc:
            raise SocketError("Invalid destination IP") from exc
        return sock.sendto(bytes(data), (dst_ip, dst_port))

    def receive(self, bufsize=65535):
        """Return the next packet; raise TimeoutError when none arrives in time."""
        sock = self._require_open()
        data, _ = sock.recvfrom(bufsize)
        return data

    def fileno(self):
        """Return the file descriptor, or -1 when closed."""
        return self._sock.fileno() if self._sock is not None else -1

    @staticmethod
    def has_capabilities():
        """Return True when this process may open raw sockets."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_TCP)
        except OSError:
            return False
        sock.close()
        return True