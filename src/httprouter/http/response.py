"""
=============================================================================
RESPONSE SERIALIZER
=============================================================================

Turns whatever a handler returned into an HTTP response and ends request
processing.

=============================================================================
SERIALIZATION RULES
=============================================================================

    Handler returns                Body                    Content-Type
    ─────────────────────────────  ──────────────────────  ─────────────────
    {"sku": 1}                     {"sku": 1}              application/json
    [1, 2, 3]                      [1, 2, 3]               application/json
    "hello"                        hello                   (unset)
    '{"raw": true}'                {"raw": true}           application/json
    42                             42                      (unset)
    None                           nothing is sent, routing continues

The content type is decided AFTER encoding, by looking at the first
character of the final payload: "{" or "[" means JSON. A string handler
result that already holds JSON is therefore labelled correctly too.

=============================================================================
ONE-SHOT RESPONSES
=============================================================================

    respond(...) ──► HTTPResponse ──► raise ResponseSent(response)
                                              │
                 (handler, hook, route boundary all let it pass)
                                              │
                                              ▼
                                  dispatch() returns the response

Once a response is emitted no later route registration can run. The signal
is an exception rather than a process exit, so the router can live inside a
long-running server.

=============================================================================
"""

import dataclasses
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, NoReturn, Optional, Union, TYPE_CHECKING

from ..errors import ResponseSent
from .status_codes import HTTPStatus, reason_phrase

if TYPE_CHECKING:
    from ..routing.url import UrlBuilder


JSON_CONTENT_TYPE = "application/json"


def _json_default(obj: Any) -> Any:
    """
    Fallback for values ``json.dumps`` cannot encode natively.

        {"a", "b"}          → ["a", "b"]
        Product(sku=1)      → {"sku": 1}     (public attributes only)
    """
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if hasattr(obj, "__dict__"):
        return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class HTTPResponse:
    """
    A response ready to hand back to the transport.

        HTTPResponse(status=200,
                     headers={"Content-Type": "application/json"},
                     body=b'{"sku": 1}')
    """

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 200 OK"."""
        return f"{self.version} {int(self.status)} {reason_phrase(self.status)}"

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Body decoded as JSON."""
        return json.loads(self.body)

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a header; returns self for chaining."""
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body, encoding strings as UTF-8; returns self for chaining."""
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def to_bytes(self, server_name: str = "httprouter") -> bytes:
        """
        Serialize for the wire:

            HTTP/1.1 200 OK\\r\\n
            Content-Type: application/json\\r\\n
            Content-Length: 10\\r\\n            ← added when missing
            Date: Wed, 01 Jan 2026 ...\\r\\n    ← added when missing
            Server: httprouter\\r\\n            ← added when missing
            \\r\\n
            {"sku": 1}
        """
        response_headers = dict(self.headers)
        response_headers.setdefault("Content-Length", str(len(self.body)))
        response_headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        response_headers.setdefault("Server", server_name)

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        return "\r\n".join(lines).encode("utf-8") + b"\r\n" + self.body


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231), always in GMT:

        Wed, 01 Jan 2026 12:00:00 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


class ResponseSerializer:
    """
    Builds and emits one-shot responses.

    Args:
        url_builder: Resolves redirect targets; required for ``redirect``.
        ensure_ascii: Escape non-ASCII characters in JSON output.
        redirect_status: Status used by ``redirect`` when none is given.
    """

    def __init__(
        self,
        url_builder: Optional["UrlBuilder"] = None,
        ensure_ascii: bool = False,
        redirect_status: int = HTTPStatus.TEMPORARY_REDIRECT,
    ):
        self.url_builder = url_builder
        self.ensure_ascii = ensure_ascii
        self.redirect_status = redirect_status

    def encode(self, content: Any) -> bytes:
        """Encode handler output into the final payload bytes."""
        if isinstance(content, bytes):
            return content
        if isinstance(content, str):
            return content.encode("utf-8")
        if dataclasses.is_dataclass(content) and not isinstance(content, type):
            content = dataclasses.asdict(content)
        # Structured values and remaining scalars (numbers, booleans) alike
        return json.dumps(
            content,
            ensure_ascii=self.ensure_ascii,
            default=_json_default,
        ).encode("utf-8")

    def build(self, content: Any, status: int = HTTPStatus.OK) -> HTTPResponse:
        """Build the response for ``content`` without emitting it."""
        payload = self.encode(content)
        response = HTTPResponse(status=status, body=payload)

        if payload[:1] in (b"{", b"["):
            response.set_header("Content-Type", JSON_CONTENT_TYPE)

        return response

    def respond(self, content: Any, status: int = HTTPStatus.OK) -> NoReturn:
        """Emit ``content`` with ``status`` and end request processing."""
        raise ResponseSent(self.build(content, status))

    def redirect(self, to: Optional[str], status: Optional[int] = None) -> NoReturn:
        """
        Emit a redirect to ``to`` (resolved through UrlBuilder) and end
        request processing. The body is empty.
        """
        if self.url_builder is None:
            raise RuntimeError("redirect() needs a UrlBuilder")

        response = HTTPResponse(status=status or self.redirect_status)
        response.set_header("Location", self.url_builder.build_url(to))
        raise ResponseSent(response)


def error_response(message: str, status: int) -> HTTPResponse:
    """JSON ``{"error": message}`` response, used outside route boundaries."""
    return ResponseSerializer().build({"error": message}, status)
