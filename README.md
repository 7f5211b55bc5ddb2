# haquests

A low-level HTTP toolkit for people who need to see and control every byte on
the wire. It builds IPv4/TCP packets by hand and drives its own TCP handshake
over a raw socket. It runs TLS on top of that connection and assembles HTTP
requests exactly as written. That includes deliberately ambiguous requests,
which are used to test for HTTP request smuggling.

## Installation

```
pip install haquests
```

To run the test suite:

```
pip install "haquests[test]"
pytest
```

## Privileges

Raw-socket connections need the `CAP_NET_RAW` capability (or root). You can
check from Python:

```python
from haquests.raw_socket import RawSocket

print(RawSocket.has_capabilities())
```

Connections to `localhost` or `127.0.0.1` use an ordinary kernel stream socket
and need no special privileges.

The kernel does not know about connections made over the raw socket, so it
may answer the server's packets with resets. Source ports are picked from
10000–65535. If handshakes are torn down, filter outgoing RSTs on that range.

## Building requests

```python
from haquests.request import Request

req = Request.get("/index.html")
req.set_header("Host", "example.com")
req.set_header("Connection", "close")
print(req.build())
```

`Request.get` and `Request.delete` add a `User-Agent: HAQuests/0.1` header.
So do `Request.post` and `Request.put`, which also set a body.

- `set_body` takes text or bytes and sets `Content-Length` to match.
- Headers hold one value per name. `add_header` and `set_header` both replace
  an earlier value.
- Headers are written sorted by name.
- `build` returns text and `build_raw` returns bytes.

For a header collection that keeps repeated names, use
`haquests.headers.Headers`. It has `add`, `set`, `get`, `get_all`, `has`,
`remove`, `parse`, `items` and `build`.

## Sending over TCP or TLS

```python
from haquests.request import Request
from haquests.tcp_connection import TCPConnection

with TCPConnection() as conn:
    conn.connect("example.com", 80)
    req = Request.get("/")
    req.set_header("Host", "example.com")
    conn.send(req.build_raw())
    print(conn.receive(4096))
```

`connect` raises `haquests.errors.ConnectionFailedError` when it cannot
connect. This covers a name that does not resolve, a missing route and a
handshake with no SYN-ACK. It may also raise `SocketError` when the raw
socket cannot be opened. `send` on a connection that is not established
raises `ConnectionFailedError`. `receive` returns `b""` when nothing arrives
in time.

`haquests.tls_connection.TLSConnection` has the same `connect`, `send`,
`receive` and `close`. It runs the TLS handshake over a `TCPConnection` through
`haquests.bio_adapter.BIOAdapter`.

- Pass `verify_certificate=False` to skip certificate checks.
- Set `ca_file` or `ca_path` to use your own trust store.
- After connecting, `tls_version` and `cipher_suite` report what was
  negotiated.
- Failures raise `haquests.errors.TLSError`.

## Parsing responses

```python
from haquests.response import Response

resp = Response()
resp.parse(b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nhello")
print(resp.status_code, resp.get_header("Content-Type"), resp.body)
```

`parse` raises `haquests.errors.ParseError` in two cases: when the header
section is not complete, and when the status line carries no positive status
code. `is_chunked` tells whether `Transfer-Encoding` names `chunked`.

## Chunked encoding

```python
from haquests import chunked

body = chunked.encode(b"hello")
assert chunked.decode(body) == b"hello"
```

Text in gives text out, and bytes in give bytes out. `parse_chunk_size`
returns `(chunk_size, consumed)` for a single size line. `is_chunked` checks
whether data starts with a hex digit.

## Request smuggling payloads

```python
from haquests.smuggling import SmugglingType, build_malformed, create_clte

smuggled = "GET /admin HTTP/1.1\r\nHost: example.com\r\n\r\n"
print(create_clte("/", smuggled).build())
print(build_malformed("/", smuggled, SmugglingType.TE_CL).build())
```

`create_clte`, `create_tecl` and `create_tete` each build one kind of request.
`build_malformed` picks the builder for a `SmugglingType`.

Only send these requests to systems you own or are authorised to test.

## Certificates

`haquests.certificate.Certificate.from_pem` reads a PEM certificate, and
`Certificate.from_file` reads one from a file. A certificate offers:

- `subject`, `issuer` and `common_name`
- `subject_alt_names` (DNS names)
- `not_before` and `not_after`
- `fingerprint` (SHA-256)
- `is_expired()`

`verify()` only reports whether a certificate is loaded.

## Lower layers

- `haquests.packet`: `IPHeader`, `TCPHeader` and `Packet`, for building and
  serialising IPv4/TCP packets.
- `haquests.checksum`: `checksum`, `tcp_checksum` and `verify_checksum`.
- `haquests.raw_socket`: `RawSocket`, a raw socket with `IP_HDRINCL` and a
  five-second receive timeout.
- `haquests.state_machine`, `haquests.window` and `haquests.segment`: TCP
  connection state, window accounting and segment records.
- `haquests.constants`: `TCPFlag`, `TCPState` and protocol constants.
- `haquests.network`: `ip_to_int`, `int_to_ip` and `local_ip_for`.
- `haquests.buffer`, `haquests.logger` and `haquests.timer`: `ByteBuffer`,
  the shared `Logger`, `Timer` and the `ScopeTimer` context manager.
- `haquests.errors`: `HaquestsError` and its subclasses.

## Command line

The package installs a `haquests` command with three subcommands:

```
haquests get http://example.com/       # HTTP GET over raw-socket TCP
haquests tls https://example.com/      # HTTPS GET, certificates not verified
haquests smuggle /                     # print a CL.TE smuggling request
haquests --help
```

`get` exits with an error when the process lacks raw-socket privileges. It
checks this even for localhost.

## What it does not do

- It sends no probes to find out whether a server is open to request
  smuggling. It only builds the requests.
- The TCP layer does not retransmit or reorder segments, and it speaks IPv4
  only.
- TLS sessions are not saved or resumed.
- `receive` returns what arrived in one call and does not frame a whole HTTP
  response. Parse the bytes you collect with `Response`.