"""
=============================================================================
HTTPROUTER - CONVENTION-BASED HTTP ROUTING
=============================================================================

A minimalist router: each registration is matched immediately against the
request in flight, and controllers are dispatched by naming convention.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httprouter/
    ├── __init__.py          # This file - public API
    ├── __main__.py          # CLI: dispatch one raw HTTP request
    ├── router.py            # Router facade + dispatch()
    ├── config.py            # RouterConfig
    ├── errors.py            # HTTPError, InvalidCallback, RouteNotFound
    ├── injector.py          # Default dependency injector
    ├── access_log.py        # Structured access log
    ├── http/
    │   ├── request.py       # RequestContext + raw request parser
    │   ├── body.py          # Request body decoding
    │   ├── response.py      # HTTPResponse + ResponseSerializer
    │   └── status_codes.py  # HTTP status enum
    └── routing/
        ├── pattern.py       # Route signature matching
        ├── invoker.py       # Route target invocation
        ├── controller.py    # Controller naming convention
        └── url.py           # URL building

=============================================================================
QUICK START
=============================================================================

    from httprouter import HTTPError, RequestContext, dispatch

    class ProductsController:
        def __init__(self, shop):
            self.products = [{"sku": 1}, {"sku": 2}]

        def index(self, query):                 # GET /products
            return self.products

        def get(self, sku, query):              # GET /products/2
            return self.products[int(sku) - 1]

        def before_post(self):                  # guards every POST
            raise HTTPError("Forbidden", 403)

    def setup(router):
        router.get("/health", lambda query: {"ok": True})
        router.controller("/products", ProductsController, "Shop")

    response = dispatch(RequestContext(method="GET", path="/products/2"), setup)
    response.status      # 200
    response.json()      # {"sku": 2}

=============================================================================
"""

__version__ = "1.0.0"

from .config import RouterConfig
from .errors import HTTPError, InvalidCallback, RouteNotFound, ResponseSent
from .http import HTTPResponse, RequestContext, RequestParser, HTTPStatus
from .injector import Injector
from .router import Router, dispatch

__all__ = [
    "Router",
    "dispatch",
    "RouterConfig",
    "Injector",
    "RequestContext",
    "RequestParser",
    "HTTPResponse",
    "HTTPStatus",
    "HTTPError",
    "InvalidCallback",
    "RouteNotFound",
    "ResponseSent",
    "__version__",
]
