"""
pytest configuration and fixtures.
"""

from typing import Any, Dict, Optional

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httprouter import HTTPError, RequestContext


class ProductsController:
    """Small catalogue controller exercising every dispatch variant."""

    def __init__(self, shop: str = "Shop", auth: bool = True):
        self.shop = shop
        self.auth = auth
        self.calls = []
        self.products = [
            {"sku": 1, "name": "Lamp", "price": 100},
            {"sku": 2, "name": "Chair", "price": 50},
            {"sku": 3, "name": "Desk", "price": 300},
        ]

    def before(self):
        self.calls.append("before")

    def before_post(self):
        self.calls.append("before_post")
        if not self.auth:
            raise HTTPError("Forbidden", 403)

    def index(self, query):
        return self.products

    def get(self, sku, query):
        for product in self.products:
            if str(product["sku"]) == sku:
                return product
        raise HTTPError("Unknown product", 404)

    def post(self, body, query):
        self.products.append(body)
        return self.products

    def get_sale(self, query):
        return [{"price": 10, "name": "Lamp"}]

    def sale(self, *args):
        return [{"price": 90}]

    def get_search_results(self, term, query):
        return {"term": term, "page": query.get("page")}

    def _secret(self, query):
        return "hidden"


def make_request(
    method: str = "GET",
    path: str = "/",
    query: Optional[Dict[str, Any]] = None,
    body: bytes = b"",
    **kwargs: Any,
) -> RequestContext:
    """Helper to create a request for testing."""
    return RequestContext(
        method=method,
        path=path,
        query_params=query or {},
        body=body,
        **kwargs,
    )


@pytest.fixture
def products() -> ProductsController:
    """Authorized controller instance."""
    return ProductsController()


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample raw GET request."""
    return (
        b"GET /products/2?page=1&limit=10 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample raw POST request with JSON body."""
    body = b'{"sku": 4, "name": "Shelf"}'
    return (
        b"POST /products HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )
