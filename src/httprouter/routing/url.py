"""
=============================================================================
URL BUILDER
=============================================================================

Builds URLs from the current request context, independent of routing.

=============================================================================
TWO MODES
=============================================================================

1. CURRENT URL: ``build_url()``, ``build_url("")`` or ``build_url("self")``

       scheme  https  if the connection is TLS
                      or X-Forwarded-Proto is "https"
               http   otherwise
       host    Host header
       port    X-Forwarded-Port, else the server port;
               only appended when it is not the scheme default (80 / 443)
       path    script_url when known, else script_name + path

       → "https://shop.example.com:8443/index.py/products/2"

2. APPLICATION-RELATIVE URL: ``build_url("css/style.css")``

       base = script_url minus its trailing path      (when both are known)
              dirname(script_name)                    (otherwise)
       "/" collapses to "", then base and path are joined with one "/"

       script_name="/shop/index.py", path="/products/2"
       build_url("css/style.css")  → "/shop/index.py/css/style.css"
       build_url("/login")         → "/shop/index.py/login"

=============================================================================
TRUST
=============================================================================

X-Forwarded-Proto and X-Forwarded-Port are taken at face value: the builder
assumes it sits behind a reverse proxy that sets (and strips) them.

=============================================================================
"""

import posixpath
from typing import Optional

from ..http.request import RequestContext


SELF = "self"
DEFAULT_PORTS = {"http": "80", "https": "443"}


class UrlBuilder:
    """
    URL construction for one request.

    Usage:
        urls = UrlBuilder(request)
        urls.build_url()            # current absolute URL
        urls.build_url("products")  # URL relative to the application root
    """

    def __init__(self, request: RequestContext):
        self.request = request

    def build_url(self, path: Optional[str] = None) -> str:
        if not path or path == SELF:
            return self.current_url()
        return self.base_path() + (path if path.startswith("/") else "/" + path)

    def scheme(self) -> str:
        forwarded = self.request.get_header("x-forwarded-proto")
        if self.request.https or forwarded.lower() == "https":
            return "https"
        return "http"

    def port(self) -> str:
        forwarded = self.request.get_header("x-forwarded-port")
        if forwarded:
            return forwarded
        if self.request.server_port is None:
            return ""
        return str(self.request.server_port)

    def current_url(self) -> str:
        """The absolute URL of the request in flight."""
        scheme = self.scheme()
        url = f"{scheme}://{self.request.host}"

        port = self.port()
        if port and port != DEFAULT_PORTS[scheme]:
            url += f":{port}"

        return url + (self.request.script_url or self.request.self_path)

    def base_path(self) -> str:
        """Directory the application is served from ("" at the root)."""
        path_info = self.request.path
        script_url = self.request.script_url

        if path_info and script_url and script_url.endswith(path_info):
            base = script_url[:-len(path_info)]
        else:
            base = posixpath.dirname(self.request.script_name)

        return "" if base == "/" else base
