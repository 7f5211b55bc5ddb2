"""Exceptions raised by the package."""


class HaquestsError(Exception):
    """Base of all errors raised by the package."""

    prefix = ""

    def __init__(self, message, error_code=0):
        self.message = self.prefix + message
        self.error_code = error_code
        super().__init__(self.message)

    def __str__(self):
        return self.message


class SocketError(HaquestsError):
    """A socket could not be used."""

    prefix = "Socket Error: "


class ConnectionFailedError(HaquestsError):
    """A connection is not in a usable state."""

    prefix = "Connection Error: "


class TLSError(HaquestsError):
    """A TLS operation failed."""

    prefix = "TLS Error: "


class HTTPError(HaquestsError):
    """An HTTP exchange failed."""

    prefix = "HTTP Error: "

    def __init__(self, message, status_code=0):
        super().__init__(message)
        self.status_code = status_code


class ParseError(HaquestsError):
    """Data could not be parsed."""

    prefix = "Parse Error: "