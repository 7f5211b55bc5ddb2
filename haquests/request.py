"""HTTP/1.x requests built byte for byte."""

USER_AGENT = "HAQuests/0.1"


def _to_bytes(data):
    if isinstance(data, str):
        return data.encode("utf-8", errors="surrogateescape")
    return bytes(data)


class Request:
    """An HTTP request: request line, headers sorted by name, and a body.

    Headers hold one value per name; adding a header replaces an earlier
    one of the same name.
    """

    def __init__(self, method="GET", path="/", version="HTTP/1.1"):
        self.method = method
        self.path = path
        self.version = version
        self.headers = {}
        self.body = b""

    def __repr__(self):
        return f"Request({self.method!r}, {self.path!r})"

    def add_header(self, key, value):
        self.headers[key] = value

    def set_header(self, key, value):
        self.headers[key] = value

    def get_header(self, key):
        """Return the header's value, or "" when it is absent."""
        return self.headers.get(key, "")

    def has_header(self, key):
        return key in self.headers

    def remove_header(self, key):
        self.headers.pop(key, None)

    def set_body(self, body):
        """Set the body from text or bytes and set Content-Length to its size."""
        self.body = _to_bytes(body)
        self.set_header("Content-Length", str(len(self.body)))

    def _head(self):
        lines = [f"{self.method} {self.path} {self.version}\r\n"]
        lines.extend(f"{key}: {value}\r\n" for key, value in sorted(self.headers.items()))
        lines.append("\r\n")
        return "".join(lines)

    def build(self):
        """Return the complete request as text."""
        return self._head() + self.body.decode("utf-8", errors="surrogateescape")

    def build_raw(self):
        """Return the complete request as bytes."""
        return self._head().encode("utf-8", errors="surrogateescape") + self.body

    @classmethod
    def _with_agent(cls, method, url):
        request = cls(method, url)
        request.set_header("User-Agent", USER_AGENT)
        return request

    @classmethod
    def get(cls, url):
        return cls._with_agent("GET", url)

    @classmethod
    def post(cls, url, body):
        request = cls._with_agent("POST", url)
        request.set_body(body)
        return request

    @classmethod
    def put(cls, url, body):
        request = cls._with_agent("PUT", url)
        request.set_body(body)
        return request

    @classmethod
    def delete(cls, url):
        return cls._with_agent("DELETE", url)