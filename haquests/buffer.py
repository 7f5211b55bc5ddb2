"""A growable byte buffer with a read cursor and network-order integers."""

import struct


class ByteBuffer:
    """Bytes written at the end and read from a moving position."""

    def __init__(self, data=b""):
        self._data = bytearray(data)
        self._read_pos = 0

    def __len__(self):
        return len(self._data) - self._read_pos

    def __bool__(self):
        return len(self) > 0

    def __bytes__(self):
        return bytes(self._data[self._read_pos :])

    @property
    def data(self):
        """The unread bytes."""
        return bytes(self)

    def write(self, data):
        """Append ``data`` to the buffer."""
        self._data += data

    def write_u8(self, value):
        self._data += struct.pack(">B", value)

    def write_u16(self, value):
        self._data += struct.pack(">H", value)

    def write_u32(self, value):
        self._data += struct.pack(">I", value)

    def read(self, length):
        """Return up to ``length`` unread bytes and move past them."""
        result = self.peek(length)
        self._read_pos += len(result)
        return result

    def _read_exact(self, fmt):
        size = struct.calcsize(fmt)
        if len(self) < size:
            raise EOFError("Buffer underflow")
        (value,) = struct.unpack_from(fmt, self._data, self._read_pos)
        self._read_pos += size
        return value

    def read_u8(self):
        return self._read_exact(">B")

    def read_u16(self):
        return self._read_exact(">H")

    def read_u32(self):
        return self._read_exact(">I")

    def peek(self, length):
        """Return up to ``length`` unread bytes without moving past them."""
        return bytes(self._data[self._read_pos : self._read_pos + max(length, 0)])

    def peek_u8(self):
        if not self:
            raise EOFError("Buffer underflow")
        return self._data[self._read_pos]

    def clear(self):
        """Discard all data."""
        self._data.clear()
        self._read_pos = 0

    def compact(self):
        """Drop bytes already read."""
        del self._data[: self._read_pos]
        self._read_pos = 0