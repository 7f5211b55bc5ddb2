"""A TLS client running over the package's own TCP connection."""

import ssl

from haquests.bio_adapter import BIOAdapter
from haquests.errors import TLSError
from haquests.tcp_connection import TCPConnection

READ_CHUNK = 16384


class TLSConnection:
    """TLS on top of a TCP connection, with TLS records pumped through a BIOAdapter."""

    def __init__(self, tcp_connection=None, verify_certificate=True):
        self._tcp = tcp_connection if tcp_connection is not None else TCPConnection()
        self.verify_certificate = verify_certificate
        self.ca_file = None
        self.ca_path = None
        self._ssl = None
        self._bio = None
        self._incoming = None
        self._outgoing = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def is_connected(self):
        return bool(self._tcp.is_connected) and self._ssl is not None

    @property
    def tls_version(self):
        """The negotiated protocol version, or "" before a handshake."""
        if self._ssl is None:
            return ""
        return self._ssl.version() or ""

    @property
    def cipher_suite(self):
        """The negotiated cipher name, or "" before a handshake."""
        if self._ssl is None:
            return ""
        cipher = self._ssl.cipher()
        return cipher[0] if cipher else ""

    def _make_context(self):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        if self.verify_certificate:
            context.verify_mode = ssl.CERT_REQUIRED
            if self.ca_file or self.ca_path:
                context.load_verify_locations(cafile=self.ca_file, capath=self.ca_path)
            else:
                context.load_default_certs()
        else:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def connect(self, host, port):
        """Connect to ``host`` and complete the TLS handshake; raise TLSError on failure."""
        self._tcp.connect(host, port)
        try:
            context = self._make_context()
        except (OSError, ssl.SSLError) as exc:
            raise TLSError(f"Cannot create TLS context: {exc}") from exc

        self._incoming = ssl.MemoryBIO()
        self._outgoing = ssl.MemoryBIO()
        self._bio = BIOAdapter(self._tcp)
        sslobj = context.wrap_bio(self._incoming, self._outgoing, server_hostname=host)

        while True:
            try:
                sslobj.do_handshake()
                break
            except ssl.SSLWantReadError:
                self._flush()
                if not self._fill():
                    raise TLSError("Handshake failed: no data from peer") from None
            except ssl.SSLError as exc:
                self._flush()
                raise TLSError(f"Handshake failed: {exc}") from exc
        self._flush()
        self._ssl = sslobj

    def _require(self):
        if self._ssl is None:
            raise TLSError("Not connected")
        return self._ssl

    def _flush(self):
        if self._outgoing is None:
            return
        data = self._outgoing.read()
        if data:
            self._bio.write(data)

    def _fill(self):
        data = self._bio.read(READ_CHUNK)
        if not data:
            return False
        self._incoming.write(data)
        return True

    def send(self, data):
        """Encrypt and send ``data``; return the number of plaintext bytes written."""
        sslobj = self._require()
        try:
            written = sslobj.write(bytes(data))
        except ssl.SSLError as exc:
            raise TLSError(f"Write failed: {exc}") from exc
        self._flush()
        return written

    def receive(self, max_len=4096):
        """Return up to ``max_len`` decrypted bytes, or b"" when none arrive."""
        sslobj = self._require()
        while True:
            try:
                return sslobj.read(max_len)
            except ssl.SSLWantReadError:
                self._flush()
                if not self._fill():
                    return b""
            except ssl.SSLZeroReturnError:
                return b""
            except ssl.SSLError as exc:
                raise TLSError(f"Read failed: {exc}") from exc

    def close(self):
        """Send close_notify when a session exists, then close the TCP connection."""
        if self._ssl is not None:
            try:
                self._ssl.unwrap()
            except ssl.SSLError:
                pass
            try:
                self._flush()
            except OSError:
                pass
        self._tcp.close()