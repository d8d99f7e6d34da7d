"""
=============================================================================
REQUEST BODY PARSER
=============================================================================

Decodes a request body by sniffing its first character, not by trusting the
Content-Type header:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     BODY CLASSIFICATION                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   transport pre-parsed a POST form?  ──yes──►  return it as is      │
    │            │ no                                                      │
    │            ▼                                                         │
    │   raw body empty?                   ──yes──►  return it as is       │
    │            │ no                                                      │
    │            ▼                                                         │
    │   first char is "{" or "["?         ──yes──►  json.loads → dict/list│
    │            │ no                                                      │
    │            ▼                                                         │
    │   URL-encoded form                  ────────►  {"key": "value"}     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The same rules apply to POST, PUT and PATCH bodies.

=============================================================================
FORM KEYS
=============================================================================

Form decoding follows the convention HTML forms use for repeated and keyed
fields:

    sku=10&name=Lamp              → {"sku": "10", "name": "Lamp"}
    tag[]=a&tag[]=b               → {"tag": ["a", "b"]}
    dim[w]=3&dim[h]=4             → {"dim": {"w": "3", "h": "4"}}
    a=1&a=2                       → {"a": "2"}          (last one wins)

=============================================================================
"""

import json
from typing import Any, Dict, TYPE_CHECKING
from urllib.parse import parse_qsl

from ..errors import HTTPError

if TYPE_CHECKING:
    from .request import RequestContext


JSON_MARKERS = ("{", "[")


def parse_form(data: str) -> Dict[str, Any]:
    """Decode URL-encoded form data into a string-keyed mapping."""
    result: Dict[str, Any] = {}

    for key, value in parse_qsl(data, keep_blank_values=True):
        if key.endswith("[]"):
            items = result.get(key[:-2])
            if not isinstance(items, list):
                items = result[key[:-2]] = []
            items.append(value)
        elif key.endswith("]") and "[" in key:
            name, sub = key[:-1].split("[", 1)
            group = result.get(name)
            if not isinstance(group, dict):
                group = result[name] = {}
            group[sub] = value
        else:
            result[key] = value

    return result


class BodyParser:
    """
    Content-sniffing request body decoder.

    Usage:
        body = BodyParser().parse(request)
    """

    def parse(self, request: "RequestContext") -> Any:
        """
        Decode the body of ``request``.

        Returns:
            The pre-parsed form, the empty raw body unchanged (``b""``), a JSON
            dict/list, or a form mapping.

        Raises:
            HTTPError(400): The body is not valid UTF-8 or not valid JSON.
        """
        if request.method == "POST" and request.form:
            return request.form

        raw = request.body
        if not raw:
            return raw

        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        except UnicodeDecodeError as e:
            raise HTTPError(f"Invalid request body: {e}", 400)

        if text[0] in JSON_MARKERS:
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise HTTPError(f"Invalid JSON body: {e}", 400)

        return parse_form(text)


def parse_body(request: "RequestContext") -> Any:
    """Decode ``request``'s body with a default ``BodyParser``."""
    return BodyParser().parse(request)
