"""
=============================================================================
ROUTE INVOKER
=============================================================================

Calls the target of a matched route and turns the outcome into a response.

=============================================================================
TARGETS
=============================================================================

    show_product                          plain callable
    ("shop.controllers.Products", "get")  class identifier + method name,
    (ProductsController, "get")           instance created via the injector
    (products, "get")                     existing instance + method name

Class targets are resolved lazily, only once the route has matched, and the
instance lives for this one call.

=============================================================================
ROUTE BOUNDARY
=============================================================================

    ┌──────────────── route boundary ────────────────┐
    │ resolve target      → InvalidCallback (500)    │
    │ build extra args    → e.g. HTTPError(400)      │
    │ call target         → HTTPError(msg, code)     │
    │                     → any other error (500)    │
    │ encode result       → TypeError (500)          │
    └────────────────────────────────────────────────┘
          │                              │
      returned value                  error caught
          │                              │
     None → nothing,               respond(message, code)
            routing continues
     else → respond(value, 200)

Errors never escape the boundary: each becomes the response for the
request. ``ResponseSent`` is not an ``Exception`` and passes through
untouched, so a handler (or hook) that already responded keeps its answer.

=============================================================================
"""

import logging
from typing import Any, Callable, Sequence, Union

from ..errors import HTTPError, InvalidCallback
from ..http.response import ResponseSerializer
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

ExtraArgs = Union[Sequence[Any], Callable[[], Sequence[Any]]]


class RouteInvoker:
    """
    Invokes route targets inside an error boundary.

    Args:
        injector: Object with ``create(identifier, args)``.
        serializer: Emits the response.
    """

    def __init__(self, injector, serializer: ResponseSerializer):
        self.injector = injector
        self.serializer = serializer

    def resolve(self, target: Any) -> Callable[..., Any]:
        """
        Turn a target into a callable.

        Raises:
            InvalidCallback: The resolved target is not callable.
        """
        if isinstance(target, (tuple, list)) and len(target) == 2 and isinstance(target[1], str):
            owner, method_name = target
            if isinstance(owner, (str, type)):
                owner = self.injector.create(owner, ())
            handler = getattr(owner, method_name, None)
        else:
            handler = target

        if not callable(handler):
            raise InvalidCallback(target)
        return handler

    def invoke(
        self,
        target: Any,
        matched_args: Sequence[str],
        extra_args: ExtraArgs = (),
    ) -> None:
        """
        Call ``target(*matched_args, *extra_args)`` and respond with its result.

        Args:
            target: Callable or (class/instance, method name) pair.
            matched_args: Capture groups of the route signature.
            extra_args: Trailing arguments, or a zero-argument callable
                producing them (evaluated after the match, inside the
                boundary).

        Returns:
            None when the target returned None; otherwise does not return.
        """
        try:
            handler = self.resolve(target)
            extra = extra_args() if callable(extra_args) else extra_args
            result = handler(*matched_args, *extra)
            if result is None:
                return None
            # Raises ResponseSent, which is not an Exception
            self.serializer.respond(result)
        except HTTPError as e:
            logger.info("%s: %s", e.status_code, e.message)
            failure = (e.message, e.status_code)
        except Exception as e:
            logger.exception("Handler error: %s", e)
            failure = (str(e), HTTPStatus.INTERNAL_SERVER_ERROR)

        self.serializer.respond(*failure)
