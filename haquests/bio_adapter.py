"""Moves TLS records between an in-memory TLS engine and a TCP connection."""


class BIOAdapter:
    """Reads and writes raw TLS bytes over a connection.

    ``connection`` needs ``send(data)`` and ``receive(max_len)``. Any bytes
    received beyond what a read asked for are kept for the next read.
    """

    def __init__(self, connection):
        self.connection = connection
        self._pending = bytearray()

    @property
    def pending(self):
        """Number of received bytes not yet handed out."""
        return len(self._pending)

    def write(self, data):
        """Send ``data`` over the connection; return what the connection reports."""
        return self.connection.send(bytes(data))

    def read(self, size):
        """Return up to ``size`` bytes, or b"" when nothing has arrived."""
        if size <= 0:
            return b""
        if self._pending:
            chunk = bytes(self._pending[:size])
            del self._pending[:size]
            return chunk

        received = self.connection.receive(size)
        if not received:
            return b""
        if len(received) <= size:
            return bytes(received)
        self._pending += received[size:]
        return bytes(received[:size])