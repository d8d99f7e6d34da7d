"""
=============================================================================
ROUTER
=============================================================================

Registrations are evaluated IMMEDIATELY against the one request the router
is bound to. There is no route table: each call either matches and
responds, or does nothing and lets the next line run.

    def setup(router):
        router.get("/health", lambda query: {"ok": True})
        router.controller("/products", ProductsController, "Shop")
        router.post("/login", login)

    response = dispatch(request, setup)

=============================================================================
REQUEST FLOW
=============================================================================

    dispatch(request, setup)
        │
        ▼
    setup(router) ─── router.get(...)        no match → next line
                  ─── router.controller(...) match ──┐
                  ─── router.post(...)   (never runs) │
                                                     ▼
                              RouteInvoker / ControllerDispatcher
                                                     │
                                  serializer.respond(...) raises ResponseSent
                                                     │
        ┌────────────────────────────────────────────┘
        ▼
    dispatch() catches ResponseSent once → returns the HTTPResponse
    (None when no registration answered)

=============================================================================
REGISTRATION HELPERS
=============================================================================

    route(signature, callback, *extra)   callback(*captures, *extra)
    get(path, callback)                  callback(*captures, query)
    delete(path, callback)               callback(*captures, query)
    post(path, callback)                 callback(*captures, body)
    put(path, callback)                  callback(*captures, body)
    patch(path, callback)                callback(*captures, body)
    controller(path, controller, *args)  naming convention, see
                                         routing/controller.py

=============================================================================
"""

import logging
import re
import time
from typing import Any, Callable, Optional

from .access_log import log_request, new_request_id
from .config import RouterConfig
from .errors import HTTPError, InvalidCallback, ResponseSent
from .http.body import BodyParser
from .http.request import RequestContext
from .http.response import HTTPResponse, ResponseSerializer
from .http.status_codes import HTTPStatus
from .injector import Injector
from .routing.controller import ControllerDispatcher
from .routing.invoker import ExtraArgs, RouteInvoker
from .routing.pattern import PatternMatcher
from .routing.url import UrlBuilder


logger = logging.getLogger(__name__)


def _is_pair(target: Any) -> bool:
    # (class identifier | class | instance, "method name")
    return isinstance(target, (tuple, list)) and len(target) == 2 and isinstance(target[1], str)


class Router:
    """
    Routes one request.

    Args:
        request: The request to route.
        injector: Object with ``create(identifier, args)``; defaults to a
            fresh ``Injector``.
        config: Router settings; defaults to ``RouterConfig()``.
    """

    def __init__(
        self,
        request: RequestContext,
        injector=None,
        config: Optional[RouterConfig] = None,
    ):
        self.request = request
        self.config = config or RouterConfig()
        self.injector = injector if injector is not None else Injector()

        self.urls = UrlBuilder(request)
        self.serializer = ResponseSerializer(
            self.urls,
            ensure_ascii=self.config.json_ensure_ascii,
            redirect_status=self.config.redirect_status,
        )
        self.body_parser = BodyParser()
        self.matcher = PatternMatcher()
        self.invoker = RouteInvoker(self.injector, self.serializer)

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def route(self, signature: str, callback: Any, *extra: Any) -> None:
        """
        Route the request to ``callback`` if it matches ``signature``.

        Args:
            signature: "METHOD path-regex", e.g. "GET /products/([0-9]+)/?".
            callback: Callable, or (class identifier, method name) pair whose
                class is created through the injector.
            *extra: Appended after the capture groups.

        If the callback returns something other than None it becomes the
        response and routing ends; otherwise routing continues.
        """
        self._route(signature, callback, extra)

    def controller(self, path: str, controller: Any, *constructor_args: Any) -> None:
        """
        Bind every method under ``path`` to ``controller`` by convention.

        Args:
            path: Path prefix, e.g. "/products" ("/" for the root).
            controller: Instance, class, or class identifier string.
            *constructor_args: Passed to the injector when creating it.
        """
        dispatcher = ControllerDispatcher(
            self.request,
            controller,
            constructor_args,
            injector=self.injector,
            body_parser=self.body_parser,
        )
        self._route(f"([A-Z]+) {path}/?(.*)", dispatcher, ())

    def get(self, path: str, callback: Any) -> None:
        """GET route; callback receives captures + query map."""
        self._verb_route("GET", path, callback, self._query_args)

    def delete(self, path: str, callback: Any) -> None:
        """DELETE route; callback receives captures + query map."""
        self._verb_route("DELETE", path, callback, self._query_args)

    def post(self, path: str, callback: Any) -> None:
        """POST route; callback receives captures + decoded body."""
        self._verb_route("POST", path, callback, self._body_args)

    def put(self, path: str, callback: Any) -> None:
        """PUT route; callback receives captures + decoded body."""
        self._verb_route("PUT", path, callback, self._body_args)

    def patch(self, path: str, callback: Any) -> None:
        """PATCH route; callback receives captures + decoded body."""
        self._verb_route("PATCH", path, callback, self._body_args)

    # =========================================================================
    # RESPONSES & URLS
    # =========================================================================

    def respond(self, content: Any, status: int = 200):
        """Emit a response and end routing (usable from hooks and handlers)."""
        self.serializer.respond(content, status)

    def redirect(self, to: Optional[str] = None, status: Optional[int] = None):
        """Redirect (default 307) to ``to`` resolved by ``url`` and end routing."""
        self.serializer.redirect(to, status)

    def url(self, path: Optional[str] = None) -> str:
        """Current absolute URL (no path / "self") or application-relative URL."""
        return self.urls.build_url(path)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _route(self, signature: str, target: Any, extra_args: ExtraArgs) -> None:
        try:
            matched = self.matcher.match(signature, self.request.request_line)
        except re.error as e:
            logger.error("Invalid route signature %r: %s", signature, e)
            self.serializer.respond(
                f"{signature!r}: Invalid route signature",
                HTTPStatus.INTERNAL_SERVER_ERROR,
            )
        if matched is None:
            return
        self.invoker.invoke(target, matched, extra_args)

    def _verb_route(
        self,
        method: str,
        path: str,
        callback: Any,
        extra_args: Callable[[], tuple],
    ) -> None:
        if not (_is_pair(callback) or callable(callback)):
            raise InvalidCallback(callback)
        self._route(f"{method} {path}", callback, extra_args)

    def _query_args(self) -> tuple:
        return (self.request.query_params,)

    def _body_args(self) -> tuple:
        return (self.body_parser.parse(self.request),)


def dispatch(
    request: RequestContext,
    setup: Callable[[Router], Any],
    injector=None,
    config: Optional[RouterConfig] = None,
) -> Optional[HTTPResponse]:
    """
    Route one request: run ``setup(router)`` and return the response.

    This is the single place the one-shot ``ResponseSent`` signal is caught.
    An ``HTTPError`` escaping ``setup`` itself (for example a non-callable
    passed to ``router.get``) becomes a response as well.

    Returns:
        The emitted HTTPResponse, or None when no registration responded.
    """
    config = config or RouterConfig()
    router = Router(request, injector, config)
    request_id = new_request_id()
    started = time.perf_counter()
    response: Optional[HTTPResponse] = None

    try:
        setup(router)
    except ResponseSent as sent:
        response = sent.response
    except HTTPError as e:
        logger.warning("[%s] %s outside any route: %s", request_id, type(e).__name__, e.message)
        response = router.serializer.build(e.message, e.status_code)

    if response is None:
        logger.debug("[%s] no route answered %s", request_id, request.request_line)

    if config.access_log:
        log_request(request, response, started, request_id, config.log_format)

    return response
