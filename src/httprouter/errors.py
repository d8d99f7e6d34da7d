"""
=============================================================================
ROUTER ERRORS
=============================================================================

Errors carry an HTTP status code next to their message, so any of them can be
turned straight into a response:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ERROR HIERARCHY                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Exception                                                          │
    │   └── HTTPError(message, status_code=500)                            │
    │       ├── InvalidCallback   (500)  target is not invocable           │
    │       └── RouteNotFound     (404)  convention resolution exhausted   │
    │                                                                      │
    │   BaseException                                                      │
    │   └── ResponseSent(response)       one-shot response signal          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHY IS ResponseSent A BaseException?
=============================================================================

Emitting a response ends ALL route evaluation for the request. The signal
travels up through handler code, hooks and the route boundary until the
per-request entry point (``dispatch``) catches it. Application handlers that
write ``except Exception`` must not be able to swallow it, the same way they
cannot swallow ``SystemExit`` or ``KeyboardInterrupt``.

=============================================================================
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .http.response import HTTPResponse


class HTTPError(Exception):
    """
    An error that maps onto an HTTP response.

    Raise it from a handler or a hook to answer with ``status_code`` and the
    message as body:

        def get(self, sku, query):
            if sku not in self.products:
                raise HTTPError("Unknown product", 404)
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidCallback(HTTPError):
    """A registered target, or a resolved controller method, is not invocable."""

    def __init__(self, target: object):
        super().__init__(f"{target!r}: Invalid callback", 500)
        self.target = target


class RouteNotFound(HTTPError):
    """No controller method answered the request."""

    def __init__(self, controller_name: str, method: str):
        super().__init__(f"{controller_name}.{method}: Route not found", 404)
        self.controller_name = controller_name
        self.method = method


class ResponseSent(BaseException):
    """Raised once a response has been emitted; ends request processing."""

    def __init__(self, response: "HTTPResponse"):
        super().__init__(response.status)
        self.response = response
