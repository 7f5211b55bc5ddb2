"""Raw-socket TCP, TLS and hand-built HTTP requests, including smuggling payloads."""

__version__ = "0.1.0"