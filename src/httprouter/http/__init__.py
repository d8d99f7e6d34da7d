"""
=============================================================================
HTTP PRIMITIVES
=============================================================================

    request.py       RequestContext, RequestParser (raw bytes → context)
    body.py          BodyParser (JSON / form sniffing)
    response.py      HTTPResponse, ResponseSerializer (one-shot responses)
    status_codes.py  HTTPStatus

=============================================================================
"""

from .request import RequestContext, RequestParser, HTTPParseError, parse_request
from .body import BodyParser, parse_body, parse_form
from .response import HTTPResponse, ResponseSerializer, error_response
from .status_codes import HTTPStatus, reason_phrase

__all__ = [
    # Request
    "RequestContext",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    # Body
    "BodyParser",
    "parse_body",
    "parse_form",

    # Response
    "HTTPResponse",
    "ResponseSerializer",
    "error_response",

    # Status codes
    "HTTPStatus",
    "reason_phrase",
]
