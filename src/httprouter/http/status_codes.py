"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes the router emits, with their reason phrases.

=============================================================================
WHERE STATUS CODES COME FROM
=============================================================================

The router itself only ever picks a handful of codes:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ A handler returned a value (RouteInvoker)                 │
    │  307   │ Default redirect (ResponseSerializer.redirect)            │
    │  400   │ Request body could not be decoded (BodyParser)            │
    │  404   │ Convention resolution found no method (RouteNotFound)     │
    │  500   │ Target not callable (InvalidCallback) or a handler raised │
    │        │ something that is not an HTTPError                        │
    └────────┴───────────────────────────────────────────────────────────┘

Every other code is chosen by application code, either through
``router.respond(content, status)`` or by raising ``HTTPError(message,
status_code)`` from a handler. Those codes are NOT restricted to this enum:
``reason_phrase()`` falls back to "Unknown" for codes it does not know.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the router and its applications.

    IntEnum members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # 3xx REDIRECTION
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307    # Default for redirect(): preserves the method
    PERMANENT_REDIRECT = 308

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403             # Typical answer of a before* hook
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    PAYLOAD_TOO_LARGE = 413
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line:

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx codes."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}


def reason_phrase(code: int) -> str:
    """Reason phrase for any integer code ("Unknown" if not in the enum)."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"
