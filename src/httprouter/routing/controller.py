"""
=============================================================================
CONTROLLER DISPATCHER
=============================================================================

Maps "METHOD /segment/rest..." onto a controller method by naming
convention. A controller is any object; no base class or decorator needed:

    class ProductsController:
        def before_post(self):          # hook, runs before every POST
            ...
        def index(self, query):         # GET /
            ...
        def get(self, sku, query):      # GET /2
            ...
        def post(self, body, query):    # POST /
            ...
        def get_sale(self, query):      # GET /sale
            ...
        def sale(self):                 # VIEW /sale, or any verb without
            ...                         # a {verb}_sale method

=============================================================================
DISPATCH STEPS
=============================================================================

    1. RESOLVE    class identifier → injector.create(identifier, args)
                  instance         → used as is
    2. HOOKS      before()  then  before{Method}()      (both optional)
    3. SPLIT      rest of the path on "/"               ["sale", ""]
    4. TRAILING   post/put/patch: + decoded body
                  every method:   + query map
    5. SELECT     first matching variant below
    6. CALL       selected method(*args)

=============================================================================
SELECTION (step 5)
=============================================================================

    first segment non-empty?  seg = segment with "-" → "_"
    │
    ├── yes ──► {method}{Seg} callable?   METHOD_PREFIXED
    │           │                         args: segments[1:] + trailing
    │           no
    │           ▼
    │           {seg} callable?           BARE_NAME
    │           │                         args: segments[1:] + trailing,
    │           no                        last element popped
    │           ▼
    │           fall through, segment NOT consumed
    │
    ├── no ───► drop the empty segment; "get" becomes "index"
    │
    ▼
    {method} callable?                    FALLBACK
    │                                     args: everything left
    no ──► RouteNotFound (404)

BARE_NAME pops exactly one argument, the query map. Bare action methods
therefore never see the query string; for POST/PUT/PATCH they still receive
the body.

=============================================================================
METHOD TABLE
=============================================================================

Lookups go through an explicit table of the controller's public callables,
built once per controller class. Keys ignore case and underscores, so the
convention name "getSale" finds ``getSale``, ``get_sale`` or ``getsale``.
Names starting with "_" are never dispatchable, and a path segment starting
with "_" skips straight to FALLBACK without being consumed.

=============================================================================
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import RouteNotFound
from ..http.body import BodyParser
from ..http.request import RequestContext


logger = logging.getLogger(__name__)

BODY_METHODS = ("post", "put", "patch")


class DispatchVariant(Enum):
    """How the controller method was selected."""

    METHOD_PREFIXED = "method_prefixed"   # getSale
    BARE_NAME = "bare_name"               # sale
    FALLBACK = "fallback"                 # get / post / index / ...


@dataclass
class Resolution:
    """The method chosen for a request and the arguments it receives."""

    variant: DispatchVariant
    name: str
    handler: Callable[..., Any]
    args: List[Any]


def _key(name: str) -> str:
    return name.replace("_", "").lower()


@lru_cache(maxsize=None)
def _public_names(cls: type) -> Dict[str, str]:
    """Normalized key → attribute name for every public attribute of ``cls``."""
    names: Dict[str, str] = {}
    for name in sorted(dir(cls)):
        if not name.startswith("_"):
            names.setdefault(_key(name), name)
    return names


class MethodTable:
    """Answers "does this controller expose a callable named X"."""

    def __init__(self, controller: Any):
        self.controller = controller
        self._names = _public_names(type(controller))

    def lookup(self, name: str) -> Optional[Callable[..., Any]]:
        attr = self._names.get(_key(name))
        if attr is None:
            return None
        handler = getattr(self.controller, attr, None)
        return handler if callable(handler) else None


def capitalize(name: str) -> str:
    """Upper-case the first character only ("sale_items" → "Sale_items")."""
    return name[:1].upper() + name[1:]


class ControllerDispatcher:
    """
    Callable route target implementing the controller convention.

    Registered by ``Router.controller`` under the signature
    ``"([A-Z]+) {prefix}/?(.*)"``, so it is invoked with the HTTP method and
    the rest of the path as its two positional arguments.

    Args:
        request: The request being routed.
        controller: Instance, class, or class identifier string.
        constructor_args: Passed to ``injector.create`` for identifiers.
        injector: Object with ``create(identifier, args)``.
        body_parser: Decodes POST/PUT/PATCH bodies.
    """

    def __init__(
        self,
        request: RequestContext,
        controller: Any,
        constructor_args: Sequence[Any] = (),
        injector=None,
        body_parser: Optional[BodyParser] = None,
    ):
        self.request = request
        self.controller = controller
        self.constructor_args = tuple(constructor_args)
        self.injector = injector
        self.body_parser = body_parser or BodyParser()

    def __call__(self, method: str, rest: str) -> Any:
        controller = self.resolve_controller()
        table = MethodTable(controller)
        verb = method.lower()

        self.run_hooks(table, verb)

        params: List[Any] = rest.split("/")
        params.extend(self.trailing_args(verb))

        resolution = self.select(table, type(controller).__name__, verb, params)
        logger.debug(
            "%s %s → %s.%s (%s)",
            method, rest or "/", type(controller).__name__,
            resolution.name, resolution.variant.value,
        )
        return resolution.handler(*resolution.args)

    def resolve_controller(self) -> Any:
        """Create the controller when given a class or identifier."""
        if isinstance(self.controller, (str, type)):
            if self.injector is None:
                raise RuntimeError("a class identifier needs an injector")
            return self.injector.create(self.controller, self.constructor_args)
        return self.controller

    def run_hooks(self, table: MethodTable, verb: str) -> None:
        """Call ``before`` then ``before{Verb}``; missing hooks are skipped."""
        for name in ("before", "before" + capitalize(verb)):
            hook = table.lookup(name)
            if hook is not None:
                hook()

    def trailing_args(self, verb: str) -> List[Any]:
        """Body (for post/put/patch) followed by the query map."""
        trailing: List[Any] = []
        if verb in BODY_METHODS:
            trailing.append(self.body_parser.parse(self.request))
        trailing.append(self.request.query_params)
        return trailing

    def select(
        self,
        table: MethodTable,
        controller_name: str,
        verb: str,
        params: List[Any],
    ) -> Resolution:
        """
        Pick the controller method for ``verb`` and the split path.

        Raises:
            RouteNotFound: No variant produced a callable.
        """
        if params[0]:
            seg = params[0].replace("-", "_")

            # "_secret" never names a method, not even a public "secret"
            if not seg.startswith("_"):
                name = verb + capitalize(seg)
                handler = table.lookup(name)
                if handler is not None:
                    return Resolution(DispatchVariant.METHOD_PREFIXED, name, handler, params[1:])

                handler = table.lookup(seg)
                if handler is not None:
                    return Resolution(DispatchVariant.BARE_NAME, seg, handler, params[1:-1])
        else:
            params = params[1:]
            if verb == "get":
                verb = "index"

        handler = table.lookup(verb)
        if handler is None:
            raise RouteNotFound(controller_name, verb)

        return Resolution(DispatchVariant.FALLBACK, verb, handler, params)
