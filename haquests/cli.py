"""Command-line entry point: plain HTTP GET, HTTPS GET and a CL.TE request demo."""

import argparse
import re
import sys

from haquests.errors import HaquestsError
from haquests.raw_socket import RawSocket
from haquests.request import Request
from haquests.smuggling import create_clte
from haquests.tcp_connection import TCPConnection
from haquests.tls_connection import TLSConnection

RECEIVE_SIZE = 4096

SMUGGLED_REQUEST = "GET /admin HTTP/1.1\r\nHost: vulnerable-server.com\r\n\r\n"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_port(text):
    """Read a port the way a leading-integer parse does, wrapped to 16 bits."""
    match = _LEADING_INT.match(text)
    if not match:
        raise ValueError(f"Invalid port number: {text}")
    value = int(match.group(1))
    if not -(2**31) <= value < 2**31:
        raise ValueError(f"Invalid port number: {text}")
    return value & 0xFFFF


def parse_url(url, scheme, default_port):
    """Split ``url`` into ``(host, port, path)``.

    A leading ``scheme://`` is dropped; the path defaults to "/" and the
    port to ``default_port``. Raises ValueError for an unreadable port.
    """
    prefix = f"{scheme}://"
    if url.startswith(prefix):
        url = url[len(prefix):]

    host_port, slash, rest = url.partition("/")
    path = slash + rest if slash else "/"

    host, colon, port_text = host_port.partition(":")
    port = _parse_port(port_text) if colon else default_port
    return host, port, path


def _build_get(host, path):
    request = Request.get(path)
    request.set_header("Host", host)
    request.set_header("Connection", "close")
    return request


def _write_response(response):
    sys.stdout.write(response.decode("utf-8", errors="replace"))
    sys.stdout.write("\n")
    sys.stdout.flush()


def _run_get(url):
    host, port, path = parse_url(url, "http", 80)

    if not RawSocket.has_capabilities():
        print("Error: CAP_NET_RAW capability required", file=sys.stderr)
        print(
            "Run with sudo or set capabilities: sudo setcap cap_net_raw=eip <program>",
            file=sys.stderr,
        )
        return 1

    print(f"Connecting to {host}:{port}")
    with TCPConnection() as conn:
        try:
            conn.connect(host, port)
        except HaquestsError as exc:
            print(f"Failed to connect: {exc}", file=sys.stderr)
            return 1
        print("Connected successfully")

        request = _build_get(host, path)
        print(f"Sending request:\n{request.build()}")
        conn.send(request.build_raw())
        print("Request sent, waiting for response...")

        response = conn.receive(RECEIVE_SIZE)
        if response:
            print(f"Received {len(response)} bytes")
            print("\nResponse:")
            _write_response(response)
    return 0


def _run_tls(url):
    host, port, path = parse_url(url, "https", 443)
    print(f"Connecting to {host}:{port} (TLS)")

    # Certificates are not verified: this command is meant for testing.
    with TLSConnection(verify_certificate=False) as conn:
        try:
            conn.connect(host, port)
        except HaquestsError as exc:
            print(f"Failed to connect: {exc}", file=sys.stderr)
            return 1
        print(f"Connected with {conn.tls_version} using {conn.cipher_suite}")

        request = _build_get(host, path)
        conn.send(request.build_raw())
        print("Request sent, waiting for response...")

        response = conn.receive(RECEIVE_SIZE)
        if response:
            print(f"Received {len(response)} bytes")
            _write_response(response)
    return 0


def _run_smuggle(url):
    request = create_clte(url, SMUGGLED_REQUEST)
    print("CL.TE Smuggling Request:")
    print(request.build())
    print("\nThis is a demonstration only.")
    print("DO NOT use against systems you don't own or have permission to test!")
    return 0


_COMMANDS = {"get": _run_get, "tls": _run_tls, "smuggle": _run_smuggle}


def _parser():
    parser = argparse.ArgumentParser(
        prog="haquests", description="Send hand-built HTTP requests."
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("get", help="HTTP GET over raw TCP").add_argument("url")
    commands.add_parser("tls", help="HTTPS GET over TLS").add_argument("url")
    commands.add_parser("smuggle", help="print a CL.TE smuggling request").add_argument(
        "url"
    )
    return parser


def main(argv=None):
    """Run a command; return the process exit status."""
    args = _parser().parse_args(argv)
    try:
        return _COMMANDS[args.command](args.url)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    except (HaquestsError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())