"""Parsing of HTTP/1.x responses."""

import re

from haquests.errors import ParseError

_STATUS_LINE = re.compile(r"\s*(\S+)\s+([+-]?\d+)(.*)\Z", re.DOTALL)


class Response:
    """An HTTP response: status line, headers and body."""

    def __init__(self):
        self.version = ""
        self.status_code = 0
        self.status_message = ""
        self.headers = {}
        self.body = b""
        self.is_complete = False

    def parse(self, raw):
        """Parse a response from bytes or text.

        Raises ParseError when the header section is incomplete or the
        status line carries no positive status code.
        """
        if isinstance(raw, str):
            raw = raw.encode("utf-8", errors="surrogateescape")
        raw = bytes(raw)
        self.__init__()

        header_end = raw.find(b"\r\n\r\n")
        if header_end < 0:
            raise ParseError("Incomplete response")

        lines = raw[:header_end].decode("latin-1").split("\n")
        self._parse_status_line(lines[0])

        for line in lines[1:]:
            if not line:
                break
            line = line.removesuffix("\r")
            key, colon, value = line.partition(":")
            if colon:
                self.headers[key] = value.lstrip(" \t")

        self.body = raw[header_end + 4 :]
        self.is_complete = True
        return self

    def _parse_status_line(self, line):
        match = _STATUS_LINE.match(line.removesuffix("\r"))
        if not match:
            raise ParseError(f"Invalid status line: {line!r}")
        version, code, message = match.groups()
        if int(code) <= 0:
            raise ParseError(f"Invalid status code: {code}")
        self.version = version
        self.status_code = int(code)
        self.status_message = message.removeprefix(" ")

    def get_header(self, key):
        """Return the header's value, or "" when it is absent."""
        return self.headers.get(key, "")

    def has_header(self, key):
        return key in self.headers

    @property
    def body_text(self):
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_chunked(self):
        """True when Transfer-Encoding names chunked."""
        return "chunked" in self.get_header("Transfer-Encoding")