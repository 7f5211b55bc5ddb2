"""HTTP chunked transfer coding."""

from haquests.errors import ParseError

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")


def _as_bytes(data):
    if isinstance(data, str):
        return data.encode("utf-8", errors="surrogateescape"), True
    return bytes(data), False


def _restore(data, was_text):
    return data.decode("utf-8", errors="surrogateescape") if was_text else data


def encode(data):
    """Return ``data`` as one chunk followed by the last chunk.

    Text in gives text out; bytes in gives bytes out.
    """
    raw, was_text = _as_bytes(data)
    encoded = f"{len(raw):x}\r\n".encode("ascii") + raw + b"\r\n0\r\n\r\n"
    return _restore(encoded, was_text)


def parse_chunk_size(data):
    """Read a chunk-size line from the start of ``data``.

    Returns ``(chunk_size, consumed)``, where ``consumed`` counts the bytes
    up to and including the line's newline. Raises ParseError when the line
    does not start with a hex digit.
    """
    raw, _ = _as_bytes(data)
    digits = bytearray()
    for byte in raw:
        if byte not in _HEX_DIGITS:
            break
        digits.append(byte)
    if not digits:
        raise ParseError("Missing chunk size")

    chunk_size = int(digits, 16)
    newline = raw.find(b"\n", len(digits))
    consumed = len(raw) if newline < 0 else newline + 1
    return chunk_size, consumed


def decode(data):
    """Join the chunks of chunked ``data`` up to the last chunk.

    Stops quietly at data that is not a chunk-size line. Text in gives text
    out; bytes in gives bytes out.
    """
    raw, was_text = _as_bytes(data)
    result = bytearray()
    pos = 0
    while pos < len(raw):
        try:
            chunk_size, consumed = parse_chunk_size(raw[pos:])
        except ParseError:
            break
        pos += consumed
        if chunk_size == 0:
            break
        if pos + chunk_size <= len(raw):
            result += raw[pos : pos + chunk_size]
            pos += chunk_size
        if pos + 2 <= len(raw):
            pos += 2
    return _restore(bytes(result), was_text)


def is_chunked(data):
    """Return True when ``data`` starts with a hex digit."""
    raw, _ = _as_bytes(data)
    return bool(raw) and raw[0] in _HEX_DIGITS