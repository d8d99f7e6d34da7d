"""
=============================================================================
REQUEST CONTEXT
=============================================================================

The router never reads ambient process state. Everything it needs to know
about the request in flight is carried by one read-only ``RequestContext``
that is threaded through every component:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      REQUEST CONTEXT                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   PatternMatcher      ← method, path          ("GET /products/2")   │
    │   BodyParser          ← method, body, form                          │
    │   ControllerDispatcher← query_params          (trailing argument)   │
    │   UrlBuilder          ← headers, https, server_port,                │
    │                         script_name, script_url                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Exactly one context exists per inbound request. Transports build it directly
(``RequestContext(method="GET", path="/2")``) or from raw HTTP/1.1 bytes with
``RequestParser``.

=============================================================================
PATH vs SCRIPT NAME
=============================================================================

Applications can be mounted below a prefix (the "script"):

    GET /shop/index.py/products/2?page=1
        ─────────────── ─────────── ──────
          script_name    path        query_params
        ───────────────────────────
                script_url

``path`` is what routes are matched against; ``script_name`` and
``script_url`` only matter to UrlBuilder.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import urlparse, unquote
import re

from .body import parse_form


class HTTPParseError(Exception):
    """
    Raised when raw request bytes cannot be parsed.

    Carries the status code the transport should answer with:
    400 for malformed input, 413 for oversized requests, 505 for an
    unsupported HTTP version.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RequestContext:
    """
    Immutable snapshot of the request being routed.

    Attributes:
        method:        Uppercase HTTP method ("GET", "POST", "VIEW", ...)
        path:          Path info matched by routes; "/" when the transport
                       reports none
        query_params:  Flattened query string, str → str
        body:          Raw body bytes
        form:          Body already parsed by the transport (e.g. a decoded
                       form post); BodyParser returns it untouched when set
        headers:       Header name (lowercase) → value
        https:         The connection itself is TLS
        server_port:   Port the server accepted the connection on
        script_name:   Prefix the application is mounted under
        script_url:    Full request path without query string
    """

    method: str
    path: str = "/"
    query_params: Dict[str, Any] = field(default_factory=dict)
    body: bytes = b""
    form: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)
    https: bool = False
    server_port: Optional[int] = None
    script_name: str = ""
    script_url: str = ""
    client_address: tuple[str, int] = ("", 0)

    @property
    def request_line(self) -> str:
        """The string route signatures are matched against: "METHOD PATH"."""
        return f"{self.method} {self.path or '/'}"

    @property
    def host(self) -> str:
        """Value of the Host header."""
        return self.headers.get("host", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def self_path(self) -> str:
        """Script name followed by the path info (the script's own URL path)."""
        return self.script_name + (self.path or "/")

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[Any] = None) -> Optional[Any]:
        """Single query parameter, or ``default``."""
        return self.query_params.get(name, default)


class RequestParser:
    """
    Parses raw HTTP/1.1 request bytes into a ``RequestContext``.

    ==========================================================================
    PARSING STEPS
    ==========================================================================

        Raw Request Bytes
              │
              ▼
        1. Size check             too large?  → HTTPParseError(413)
        2. Split at \\r\\n\\r\\n      missing?    → HTTPParseError(400)
        3. Request line           METHOD SP URI SP VERSION
        4. Headers                "Name: Value", lowercased names
        5. Body                   exactly Content-Length bytes
        6. Mount point            strip script_name from the path
              │
              ▼
        RequestContext

    Unlike a general purpose server parser, any uppercase token is accepted
    as a method: controllers answer custom verbs such as ``VIEW`` through
    the naming convention.

    ==========================================================================
    """

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(
        self,
        max_request_size: int = 10 * 1024 * 1024,
        script_name: str = "",
    ):
        """
        Args:
            max_request_size: Requests larger than this are rejected with 413.
            script_name: Mount prefix removed from the path before routing.
        """
        self.max_request_size = max_request_size
        self.script_name = script_name.rstrip("/")

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0),
        https: bool = False,
        server_port: Optional[int] = None,
    ) -> RequestContext:
        """
        Parse raw request bytes.

        Args:
            data: Raw request bytes (headers and body).
            client_address: (ip, port) of the client.
            https: Whether the connection was TLS.
            server_port: Listening port; taken from the Host header when None.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(f"Request too large: {len(data)} bytes", status_code=413)

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, uri = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError("Invalid Content-Length header")
        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )
        body = body[:content_length]

        parsed = urlparse(uri)
        full_path = unquote(parsed.path) or "/"

        # ---------------------------------------------------------------------
        # Mount point: /shop/index.py/products/2 → path "/products/2"
        # Only whole segments are stripped: /shopping is not below /shop.
        # ---------------------------------------------------------------------
        path = full_path
        if self.script_name and (
            full_path == self.script_name
            or full_path.startswith(self.script_name + "/")
        ):
            path = full_path[len(self.script_name):] or "/"

        if server_port is None:
            server_port = self._port_from_host(headers.get("host", ""), https)

        return RequestContext(
            method=method,
            path=path,
            query_params=parse_form(parsed.query),
            body=body,
            headers=headers,
            https=https,
            server_port=server_port,
            script_name=self.script_name,
            script_url=full_path,
            client_address=client_address,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str]:
        """Split "GET /path?query HTTP/1.1" into (method, uri)."""
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, uri, version = match.groups()
        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(f"Unsupported HTTP version: {version}", status_code=505)

        return method, uri

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: Value" lines.

        Names are lowercased; repeated headers are joined with ", " and
        obsolete continuation lines (leading whitespace) are folded into
        the previous header.
        """
        headers: Dict[str, str] = {}
        current_name = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue  # lenient: skip malformed headers

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()
            current_name = name

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers

    @staticmethod
    def _port_from_host(host: str, https: bool) -> int:
        # "example.com:8080" → 8080, bare host → scheme default
        _, sep, port = host.rpartition(":")
        if sep and port.isdigit():
            return int(port)
        return 443 if https else 80


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    script_name: str = "",
    max_size: int = 10 * 1024 * 1024,
) -> RequestContext:
    """Parse raw request bytes with a one-off ``RequestParser``."""
    parser = RequestParser(max_request_size=max_size, script_name=script_name)
    return parser.parse(data, client_address)
