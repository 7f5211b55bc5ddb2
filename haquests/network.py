"""IPv4 address helpers."""

import ipaddress
import socket


def ip_to_int(ip_str):
    """Return the dotted-quad address ``ip_str`` as an integer.

    Raises ValueError when the address is not a valid IPv4 address.
    """
    return int(ipaddress.IPv4Address(ip_str))


def int_to_ip(ip):
    """Return the integer address ``ip`` in dotted-quad form."""
    return str(ipaddress.IPv4Address(ip))


def local_ip_for(dest_ip):
    """Return the local address the system would use to reach ``dest_ip``.

    No data is sent. Raises ValueError for an invalid address and OSError
    when no route exists.
    """
    ip_to_int(dest_ip)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.connect((dest_ip, 80))
        return sock.getsockname()[0]